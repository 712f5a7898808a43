"""
Метрики для сравнения стратегий исполнения.

Ускорение и эффективность считаются относительно последовательной
стратегии; согласованность - по максимальному расхождению центроидов.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from chunked_kmeans.core.cluster import Cluster


def speedup(t_serial: float, t_parallel: float) -> float:
    """
    Ускорение чанкованной стратегии относительно последовательной.

    Raises:
        ZeroDivisionError: Если t_parallel равно нулю
    """
    if t_parallel == 0:
        raise ZeroDivisionError("Parallel time cannot be zero")
    return t_serial / t_parallel


def efficiency(speedup: float, p: int) -> float:
    """
    Параллельная эффективность: speedup / p, где p - число воркеров.

    Raises:
        ZeroDivisionError: Если p равно нулю
    """
    if p == 0:
        raise ZeroDivisionError("Number of workers cannot be zero")
    return speedup / p


def throughput(N: int, K: int, D: int, n_iters: int, total_time: float) -> float:
    """
    Пропускная способность: (N × K × D × n_iters) / total_time.

    Шаг назначения стоит O(N × K × D) на итерацию, поэтому величина
    примерно равна числу операций расстояния в секунду.

    Raises:
        ZeroDivisionError: Если total_time равно нулю
    """
    if total_time == 0:
        raise ZeroDivisionError("Total time cannot be zero")
    return (N * K * D * n_iters) / total_time


def max_centroid_diff(a: Sequence[Cluster], b: Sequence[Cluster]) -> float:
    """
    Максимальное расхождение координат центроидов двух наборов (по id).

    Если наборы id различаются, возвращает inf.
    """
    by_id_a = {c.id: c for c in a}
    by_id_b = {c.id: c for c in b}
    if by_id_a.keys() != by_id_b.keys():
        return float("inf")
    if not by_id_a:
        return 0.0
    return float(
        max(
            np.max(np.abs(by_id_a[cid].centroid - by_id_b[cid].centroid))
            for cid in by_id_a
        )
    )
