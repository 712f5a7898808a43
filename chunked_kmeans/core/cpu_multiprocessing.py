from __future__ import annotations

from dataclasses import dataclass
from multiprocessing import Pool, RawArray, cpu_count
from typing import List, Optional, Tuple

import numpy as np

from chunked_kmeans.core.assign import step
from chunked_kmeans.core.base import DEFAULT_MAX_ITERS, KMeansBase
from chunked_kmeans.core.cluster import Cluster
from chunked_kmeans.core.reduce import split_points


@dataclass(frozen=True)
class MultiprocessingConfig:
    """Параметры чанкованных стратегий."""

    mappers: int = 5
    n_processes: Optional[int] = None

    def __post_init__(self) -> None:
        if self.mappers < 1:
            raise ValueError(f"mappers must be positive, got {self.mappers}")
        if self.n_processes is not None and self.n_processes < 1:
            raise ValueError(f"n_processes must be positive, got {self.n_processes}")

    def workers(self) -> int:
        """Размер пула: не больше числа чанков и числа CPU."""
        n = self.n_processes if self.n_processes is not None else cpu_count()
        return max(1, min(int(n), self.mappers))


# --- Глобальное состояние: shared X в воркерах ---
_SHARED_X_BUF: RawArray | None = None
_SHARED_X_SHAPE: Tuple[int, int] | None = None


def _init_shared_X(raw: RawArray, shape: Tuple[int, int]) -> None:
    """Инициализатор пула: регистрирует shared X."""
    global _SHARED_X_BUF, _SHARED_X_SHAPE
    _SHARED_X_BUF = raw
    _SHARED_X_SHAPE = shape


def _get_shared_X() -> np.ndarray:
    """NumPy-представление shared X (только чтение)."""
    assert _SHARED_X_BUF is not None and _SHARED_X_SHAPE is not None
    arr = np.frombuffer(_SHARED_X_BUF, dtype=np.float64).reshape(_SHARED_X_SHAPE)
    arr.setflags(write=False)
    return arr


def share_points(X: np.ndarray) -> Tuple[RawArray, Tuple[int, int]]:
    """Копирует X один раз в shared RawArray (float64)."""
    X_c = np.ascontiguousarray(X, dtype=np.float64)
    raw = RawArray("d", int(X_c.size))
    shared_view = np.frombuffer(raw, dtype=np.float64).reshape(X_c.shape)
    shared_view[:] = X_c
    return raw, X_c.shape


def _step_chunk_worker(args: Tuple[int, int, List[Cluster]]) -> List[Cluster]:
    """Шаг K-Means для чанка [start, stop): читает X из shared."""
    start, stop, clusters = args
    X = _get_shared_X()
    return step(clusters, X[start:stop])


class KMeansCPUMultiprocessing(KMeansBase):
    """
    Чанкованный parallel-map: Pool.map по непрерывным чанкам точек.

    Пул и shared X создаются один раз на fit и закрываются в конце.
    """

    def __init__(
        self,
        max_iters: int = DEFAULT_MAX_ITERS,
        mp: MultiprocessingConfig = MultiprocessingConfig(),
        logger=None,
    ) -> None:
        super().__init__(max_iters=max_iters, logger=logger)
        self.mp = mp

        # Пул и чанки переиспользуются в рамках fit
        self._pool: Optional[Pool] = None
        self._chunks: Optional[List[Tuple[int, int]]] = None

    def _start(self, points: np.ndarray) -> None:
        self._chunks = split_points(points.shape[0], self.mp.mappers)
        raw, shape = share_points(points)

        # Пул инициализирует ссылку на shared X в каждом процессе
        self._pool = Pool(
            processes=self.mp.workers(),
            initializer=_init_shared_X,
            initargs=(raw, shape),
        )

    def _finish(self) -> None:
        """Закрыть пул после fit."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None
        self._chunks = None

    def map_chunks(self, clusters: List[Cluster]) -> List[List[Cluster]]:
        assert self._pool is not None and self._chunks is not None

        # Аргументы воркерам: границы чанка + текущие кластеры
        args: List[Tuple[int, int, List[Cluster]]] = [
            (start, stop, clusters) for start, stop in self._chunks
        ]
        return self._pool.map(_step_chunk_worker, args)
