from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from chunked_kmeans.core.cluster import Cluster, centroids_array, make_cluster


def pairwise_squared_distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Матрица квадратов расстояний (N, K) между точками и центроидами."""
    # (N, K, D) → (N, K)
    diff = points[:, None, :] - centroids[None, :, :]
    return np.einsum("mkd,mkd->mk", diff, diff, optimize=True)


def nearest(points: np.ndarray, clusters: Sequence[Cluster]) -> np.ndarray:
    """
    Позиция ближайшего кластера (в порядке clusters) для каждой точки.

    При равных расстояниях выигрывает первый кластер в порядке подачи:
    argmin возвращает первое минимальное значение.
    """
    distances = pairwise_squared_distances(points, centroids_array(clusters))
    return np.argmin(distances, axis=1)


def assign(clusters: Sequence[Cluster], points: np.ndarray) -> Dict[int, np.ndarray]:
    """Назначение точек: id кластера → точки, ближайшие к его центроиду."""
    if len(clusters) == 0:
        raise ValueError("Cannot assign points: cluster list is empty")

    positions = nearest(points, clusters)

    groups: Dict[int, np.ndarray] = {}
    for pos, cluster in enumerate(clusters):
        mask = positions == pos
        if np.any(mask):
            groups[cluster.id] = points[mask]
    return groups


def step(clusters: Sequence[Cluster], points: np.ndarray) -> List[Cluster]:
    """
    Один шаг K-Means на наборе точек: назначение + новые агрегаты.

    Кластеры без точек в результат не попадают: пустые группы
    отбрасываются до вычисления среднего.
    """
    groups = assign(clusters, points)
    return [make_cluster(cid, groups[cid]) for cid in sorted(groups)]
