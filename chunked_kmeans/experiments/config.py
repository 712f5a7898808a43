from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from chunked_kmeans.core.base import DEFAULT_MAX_ITERS, KMeansBase
from chunked_kmeans.core.cpu_multiprocessing import (
    KMeansCPUMultiprocessing,
    MultiprocessingConfig,
)
from chunked_kmeans.core.scheduled import KMeansScheduled
from chunked_kmeans.core.sequential import KMeansSequential


class Strategy(str, Enum):
    SEQUENTIAL = "seq"
    PARALLEL_MAP = "strat"
    SCHEDULED = "par"


class PointGenerator(str, Enum):
    UNIFORM = "uniform"
    BLOBS = "blobs"


DEFAULT_MAPPERS = 5
DEFAULT_N_POINTS = 21
DEFAULT_SEED = 42


@dataclass
class RunConfig:
    """Выбор стратегии и параметры одного прогона."""

    strategy: Strategy = Strategy.SCHEDULED
    mappers: int = DEFAULT_MAPPERS
    n_processes: Optional[int] = None
    max_iters: int = DEFAULT_MAX_ITERS
    n_points: int = DEFAULT_N_POINTS
    seed: int = DEFAULT_SEED
    clusters_path: Path = Path("kmeans-clusters")
    generator: PointGenerator = PointGenerator.UNIFORM

    def __post_init__(self) -> None:
        self.strategy = Strategy(self.strategy)
        self.generator = PointGenerator(self.generator)
        self.clusters_path = Path(self.clusters_path)
        if self.mappers < 1:
            raise ValueError(f"mappers must be positive, got {self.mappers}")
        if self.max_iters < 0:
            raise ValueError(f"max_iters must be non-negative, got {self.max_iters}")
        if self.n_points < 1:
            raise ValueError(f"n_points must be positive, got {self.n_points}")

    def describe(self) -> Dict[str, Any]:
        meta: Dict[str, Any] = {"strategy": self.strategy.value}
        if self.strategy is not Strategy.SEQUENTIAL:
            meta["mappers"] = self.mappers
        return meta


def make_model_factory(config: RunConfig) -> Callable[..., KMeansBase]:
    """
    Фабрика модели под выбранную стратегию.

    Возвращаемый callable принимает logger и создаёт новую модель,
    так что каждый прогон получает свой пул воркеров.
    """
    mp = MultiprocessingConfig(mappers=config.mappers, n_processes=config.n_processes)

    def factory(logger: logging.Logger | Any | None = None) -> KMeansBase:
        if config.strategy is Strategy.SEQUENTIAL:
            return KMeansSequential(max_iters=config.max_iters, logger=logger)
        if config.strategy is Strategy.PARALLEL_MAP:
            return KMeansCPUMultiprocessing(max_iters=config.max_iters, mp=mp, logger=logger)
        return KMeansScheduled(max_iters=config.max_iters, mp=mp, logger=logger)

    return factory
