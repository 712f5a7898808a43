"""
Чанкованный map через планировщик задач.

Каждый чанк отправляется в ProcessPoolExecutor отдельной задачей;
планировщик сам решает порядок и чередование выполнения. Результаты
собираются по мере готовности (as_completed) и раскладываются по индексу
чанка, так что редукция видит детерминированный порядок.
"""

from __future__ import annotations

from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from typing import Dict, List, Optional, Tuple

import numpy as np

from chunked_kmeans.core.base import DEFAULT_MAX_ITERS, KMeansBase
from chunked_kmeans.core.cluster import Cluster
from chunked_kmeans.core.cpu_multiprocessing import (
    MultiprocessingConfig,
    _init_shared_X,
    _step_chunk_worker,
    share_points,
)
from chunked_kmeans.core.reduce import split_points


class KMeansScheduled(KMeansBase):
    """K-Means с отправкой задач по чанкам в пул исполнителя."""

    def __init__(
        self,
        max_iters: int = DEFAULT_MAX_ITERS,
        mp: MultiprocessingConfig = MultiprocessingConfig(),
        logger=None,
    ) -> None:
        super().__init__(max_iters=max_iters, logger=logger)
        self.mp = mp

        self._executor: Optional[ProcessPoolExecutor] = None
        self._chunks: Optional[List[Tuple[int, int]]] = None

    def _start(self, points: np.ndarray) -> None:
        self._chunks = split_points(points.shape[0], self.mp.mappers)
        raw, shape = share_points(points)
        self._executor = ProcessPoolExecutor(
            max_workers=self.mp.workers(),
            initializer=_init_shared_X,
            initargs=(raw, shape),
        )

    def _finish(self) -> None:
        # Незапущенные задачи отменяются, если итерация прервалась ошибкой
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
        self._executor = None
        self._chunks = None

    def map_chunks(self, clusters: List[Cluster]) -> List[List[Cluster]]:
        assert self._executor is not None and self._chunks is not None

        futures: Dict[Future, int] = {
            self._executor.submit(_step_chunk_worker, (start, stop, clusters)): idx
            for idx, (start, stop) in enumerate(self._chunks)
        }

        results: List[List[Cluster] | None] = [None] * len(futures)
        # Барьер: ждём все чанки; первая ошибка прерывает итерацию
        for future in as_completed(futures):
            results[futures[future]] = future.result()

        return [r for r in results if r is not None]
