"""
Проверка входных данных перед запуском K-Means.

Некорректный вход (пустой набор точек, нет затравок, несовпадение
размерности) - фатальная ошибка: ядро не пытается выдать деградировавший
результат.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from chunked_kmeans.core.cluster import Cluster


def validate_points(X: np.ndarray) -> None:
    """
    Проверяет набор точек.

    Raises:
        ValueError: Если X не двумерный, пустой или содержит NaN/inf
    """
    if X.ndim != 2:
        raise ValueError(f"Points must be a 2-D array (N, D), got shape {X.shape}")
    if X.shape[0] == 0:
        raise ValueError("Point set is empty")
    if X.shape[1] == 0:
        raise ValueError("Points have zero dimensions")
    if not np.all(np.isfinite(X)):
        raise ValueError("Points contain non-finite coordinates")


def validate_clusters(clusters: Sequence[Cluster], dim: int | None = None) -> None:
    """
    Проверяет начальный список кластеров.

    Raises:
        ValueError: Если список пуст, id повторяются или размерность не совпадает
    """
    if len(clusters) == 0:
        raise ValueError("Cluster list is empty")

    ids = [c.id for c in clusters]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate cluster ids: {sorted(ids)}")

    for cluster in clusters:
        if cluster.count < 0:
            raise ValueError(f"Cluster {cluster.id} has negative count {cluster.count}")
        if dim is not None and cluster.dim != dim:
            raise ValueError(
                f"Cluster {cluster.id} has dimension {cluster.dim}, points have {dim}"
            )
        if not np.all(np.isfinite(cluster.centroid)):
            raise ValueError(f"Cluster {cluster.id} has a non-finite centroid")


def validate_inputs(X: np.ndarray, clusters: Sequence[Cluster]) -> None:
    """Полная проверка входа драйвера."""
    validate_points(X)
    validate_clusters(clusters, dim=X.shape[1])
