# core/sequential.py
from __future__ import annotations

from typing import List

from .assign import step
from .base import KMeansBase
from .cluster import Cluster


class KMeansSequential(KMeansBase):
    """Однопоточная реализация: весь набор точек - один чанк (baseline)."""

    def map_chunks(self, clusters: List[Cluster]) -> List[List[Cluster]]:
        assert self.points is not None
        return [step(clusters, self.points)]
