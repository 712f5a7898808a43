"""
Агрегаты кластеров и геометрия точек.

Кластер хранит сумму координат и число точек, центроид выводится из них.
Поэтому частичные агрегаты, посчитанные на разных чанках, сливаются
суммированием, а деление выполняется один раз.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

import numpy as np


def as_point(values: Iterable[float] | np.ndarray) -> np.ndarray:
    """Неизменяемая точка: 1-D массив float64 только для чтения."""
    point = np.array(values, dtype=np.float64)
    if point.ndim != 1:
        raise ValueError(f"Point must be 1-D, got shape {point.shape}")
    point.setflags(write=False)
    return point


def squared_distance(p: np.ndarray, q: np.ndarray) -> float:
    """Квадрат евклидова расстояния (корень не нужен для сравнения)."""
    diff = np.asarray(p, dtype=np.float64) - np.asarray(q, dtype=np.float64)
    return float(np.dot(diff, diff))


@dataclass(frozen=True, eq=False)
class Cluster:
    """
    Снимок состояния кластера на одной итерации.

    - id: стабильный идентификатор кластера;
    - count: число назначенных точек;
    - total: сумма координат назначенных точек;
    - centroid: среднее (total / count), для затравки - сама затравка.
    """

    id: int
    count: int
    total: np.ndarray
    centroid: np.ndarray

    @property
    def dim(self) -> int:
        return int(self.centroid.shape[0])

    def same_as(self, other: "Cluster") -> bool:
        """Точное сравнение id/count/суммы/центроида."""
        return (
            self.id == other.id
            and self.count == other.count
            and np.array_equal(self.total, other.total)
            and np.array_equal(self.centroid, other.centroid)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cluster):
            return NotImplemented
        return self.same_as(other)

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        cent = ", ".join(f"{c:.6g}" for c in self.centroid)
        return f"Cluster(id={self.id}, count={self.count}, centroid=({cent}))"


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def seed_cluster(cluster_id: int, centroid: Iterable[float] | np.ndarray) -> Cluster:
    """Затравочный кластер: точек ещё нет, центроид задан снаружи."""
    point = as_point(centroid)
    return Cluster(
        id=int(cluster_id),
        count=0,
        total=_frozen(np.zeros_like(point)),
        centroid=point,
    )


def seed_clusters(seeds: Mapping[int, Iterable[float] | np.ndarray]) -> list[Cluster]:
    """
    Список затравочных кластеров в порядке обхода seeds.

    Порядок не сортируется: при равных расстояниях на первой итерации
    выигрывает затравка, идущая раньше (например, выше в файле).
    """
    return [seed_cluster(cid, centroid) for cid, centroid in seeds.items()]


def make_cluster(cluster_id: int, points: np.ndarray | Sequence[np.ndarray]) -> Cluster:
    """
    Собирает агрегат по точкам одного кластера.

    Для пустого набора возвращается агрегат с count == 0 и нулевым
    центроидом; отфильтровать его должен вызывающий код.
    """
    pts = np.asarray(points, dtype=np.float64)
    count = int(pts.shape[0])
    if count == 0:
        dim = pts.shape[1] if pts.ndim == 2 else 0
        zeros = np.zeros(dim, dtype=np.float64)
        return Cluster(
            id=int(cluster_id),
            count=0,
            total=_frozen(zeros),
            centroid=_frozen(zeros.copy()),
        )

    total = pts.sum(axis=0)
    return Cluster(
        id=int(cluster_id),
        count=count,
        total=_frozen(total),
        centroid=_frozen(total / count),
    )


def combine_clusters(a: Cluster, b: Cluster) -> Cluster:
    """
    Слияние двух частичных агрегатов одного кластера.

    Суммируются count и total, центроид пересчитывается одним делением.
    Ассоциативно и коммутативно (с точностью до порядка сложения float).
    """
    if a.id != b.id:
        raise ValueError(f"Cannot combine clusters with different ids: {a.id} != {b.id}")
    if a.count == 0:
        return b
    if b.count == 0:
        return a

    count = a.count + b.count
    total = a.total + b.total
    return Cluster(
        id=a.id,
        count=count,
        total=_frozen(total),
        centroid=_frozen(total / count),
    )


def clusters_equal(a: Sequence[Cluster], b: Sequence[Cluster]) -> bool:
    """Равенство наборов кластеров без учёта порядка (ключ - id)."""
    if len(a) != len(b):
        return False
    by_id = {c.id: c for c in b}
    if len(by_id) != len(b):
        return False
    for cluster in a:
        other = by_id.get(cluster.id)
        if other is None or not cluster.same_as(other):
            return False
    return True


def centroids_array(clusters: Sequence[Cluster]) -> np.ndarray:
    """Центроиды в виде матрицы (K, D) в порядке списка."""
    return np.vstack([c.centroid for c in clusters])
