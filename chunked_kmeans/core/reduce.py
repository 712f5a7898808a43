from __future__ import annotations

import math
from collections import defaultdict
from functools import reduce as _fold
from typing import Dict, Iterable, List, Sequence, Tuple

from chunked_kmeans.core.cluster import Cluster, combine_clusters


def split_points(n_points: int, n_chunks: int) -> List[Tuple[int, int]]:
    """
    Разбиение [0, n_points) на непрерывные диапазоны для чанков.

    Размер чанка - ceil(n_points / n_chunks), последний может быть меньше.
    Если точек мало, диапазонов получится меньше, чем n_chunks.
    """
    if n_chunks < 1:
        raise ValueError(f"Number of chunks must be positive, got {n_chunks}")
    if n_points <= 0:
        return []

    size = math.ceil(n_points / n_chunks)
    return [(start, min(start + size, n_points)) for start in range(0, n_points, size)]


def reduce_clusters(partials: Iterable[Sequence[Cluster]]) -> List[Cluster]:
    """
    Редукция частичных результатов чанков в один набор кластеров.

    Агрегаты группируются по id и сворачиваются через combine_clusters.
    Кластеры с нулевым числом точек отбрасываются, результат отсортирован по id.
    """
    groups: Dict[int, List[Cluster]] = defaultdict(list)
    for chunk_clusters in partials:
        for cluster in chunk_clusters:
            groups[cluster.id].append(cluster)

    merged: List[Cluster] = []
    for cid in sorted(groups):
        cluster = _fold(combine_clusters, groups[cid])
        if cluster.count > 0:
            merged.append(cluster)
    return merged
