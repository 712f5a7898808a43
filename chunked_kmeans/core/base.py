import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence

import numpy as np

from chunked_kmeans.core.cluster import Cluster, clusters_equal, seed_clusters
from chunked_kmeans.core.reduce import reduce_clusters
from chunked_kmeans.data.validation import validate_inputs
from chunked_kmeans.metrics.timers import Timer

DEFAULT_MAX_ITERS = 50


@dataclass(frozen=True)
class Running:
    """Промежуточное состояние драйвера: номер итерации и текущие кластеры."""

    iteration: int
    clusters: List[Cluster]


@dataclass(frozen=True)
class Converged:
    """Пересчёт дал тот же набор кластеров."""

    iteration: int
    clusters: List[Cluster]


@dataclass(frozen=True)
class GaveUp:
    """Достигнут предел итераций; clusters - последний вычисленный набор."""

    iteration: int
    clusters: List[Cluster]


@dataclass(frozen=True)
class KMeansResult:
    state: Converged | GaveUp
    n_evaluations: int

    @property
    def clusters(self) -> List[Cluster]:
        return self.state.clusters

    @property
    def converged(self) -> bool:
        return isinstance(self.state, Converged)

    @property
    def iterations(self) -> int:
        return self.state.iteration


class KMeansBase(ABC):
    """
    Базовый класс драйвера сходимости K-Means.

    Цикл итераций написан один раз; стратегии исполнения (последовательная,
    Pool.map по чанкам, планировщик задач) реализуют только map_chunks.
    Итерации строго последовательны: новая начинается только после
    редукции результатов всех чанков предыдущей.

    Собирает тайминги за один вызов fit(...):
    - T_map: время шага назначения+агрегации по чанкам;
    - T_reduce: время слияния частичных агрегатов;
    - T_iter: сумма двух предыдущих.
    """

    def __init__(
        self,
        max_iters: int = DEFAULT_MAX_ITERS,
        logger: Any | None = None,
    ):
        if max_iters < 0:
            raise ValueError(f"max_iters must be non-negative, got {max_iters}")
        self.max_iters = max_iters
        self.logger = logger if logger is not None else logging.getLogger("chunked_kmeans")

        self.points: np.ndarray | None = None
        self.clusters: List[Cluster] | None = None
        self.result: KMeansResult | None = None

        # агрегированные тайминги за один вызов fit(...)
        self.t_map_total: float = 0.0
        self.t_reduce_total: float = 0.0
        self.t_iter_total: float = 0.0

        # Реальное количество вычисленных шагов
        self.n_iters_actual: int = 0

    def fit(
        self,
        points: np.ndarray,
        initial_clusters: Sequence[Cluster] | Mapping[int, Any],
    ) -> KMeansResult:
        """
        Итерирует назначение+редукцию до неподвижной точки или предела итераций.

        Переходы состояний:
        - Running(n, C), n > max_iters → GaveUp(C);
        - C' == C → Converged(C);
        - иначе → Running(n + 1, C').

        Любое исключение при вычислении (в том числе в воркерах) прерывает
        весь прогон и пробрасывается вызывающему.
        """
        if isinstance(initial_clusters, Mapping):
            initial_clusters = seed_clusters(initial_clusters)
        clusters = list(initial_clusters)

        X = np.ascontiguousarray(points, dtype=np.float64)
        validate_inputs(X, clusters)
        self.points = X

        # сбрасываем накопленные тайминги для нового запуска
        self.t_map_total = 0.0
        self.t_reduce_total = 0.0
        self.t_iter_total = 0.0
        self.n_iters_actual = 0

        self._start(X)
        try:
            state = self._run(Running(0, clusters))
        finally:
            self._finish()

        self.clusters = state.clusters
        self.result = KMeansResult(state=state, n_evaluations=self.n_iters_actual)
        return self.result

    def _run(self, state: Running) -> Converged | GaveUp:
        while True:
            n, clusters = state.iteration, state.clusters

            if n > self.max_iters:
                self.logger.warning(
                    f"  Giving up after {n} iterations "
                    f"(max_iters={self.max_iters}, clusters={len(clusters)})"
                )
                return GaveUp(n, clusters)

            self.logger.debug(f"  Iteration {n}: " + "; ".join(map(repr, clusters)))

            with Timer(f"Iteration {n} map", self.logger) as t_map:
                partials = self.map_chunks(clusters)
            with Timer(f"Iteration {n} reduce", self.logger) as t_reduce:
                new_clusters = reduce_clusters(partials)

            t_map_elapsed = t_map.elapsed
            t_reduce_elapsed = t_reduce.elapsed
            self.t_map_total += t_map_elapsed
            self.t_reduce_total += t_reduce_elapsed
            self.t_iter_total += t_map_elapsed + t_reduce_elapsed
            self.n_iters_actual += 1

            converged = clusters_equal(new_clusters, clusters)

            if n == 0 or (n + 1) % 10 == 0 or converged:
                status = " (converged)" if converged else ""
                self.logger.info(
                    f"  Iteration {n}{status} "
                    f"(T_map={t_map_elapsed:.6f}s, "
                    f"T_reduce={t_reduce_elapsed:.6f}s, "
                    f"clusters={len(new_clusters)})"
                )

            if converged:
                self.logger.info(f"  {n} iterations")
                return Converged(n, clusters)

            state = Running(n + 1, new_clusters)

    def _start(self, points: np.ndarray) -> None:
        """Подготовка ресурсов стратегии перед циклом (пул воркеров и т.п.)."""

    def _finish(self) -> None:
        """Освобождение ресурсов стратегии; вызывается всегда, даже при ошибке."""

    @abstractmethod
    def map_chunks(self, clusters: List[Cluster]) -> List[List[Cluster]]:
        """Шаг назначения по чанкам точек: список частичных агрегатов."""
        raise NotImplementedError
