"""
Генерация синтетических наборов точек.

Генераторы - чистые функции от seed: набор точек создаётся один раз до
запуска и не меняется во время итераций.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from sklearn.datasets import make_blobs


def gen_points(n: int, seed: int = 42, scale: float = 5.0) -> np.ndarray:
    """
    Равномерные 2-D точки из потока Mersenne Twister.

    Поток чисел из [0, 1) потребляется парами: (x * scale, y * scale).

    Args:
        n: Количество точек
        seed: Seed генератора MT19937
        scale: Множитель координат

    Returns:
        Массив точек (n, 2), только для чтения
    """
    if n < 0:
        raise ValueError(f"Number of points must be non-negative, got {n}")
    rs = np.random.RandomState(seed)
    stream = rs.random_sample(2 * n)
    X = np.ascontiguousarray(stream.reshape(n, 2) * scale)
    X.setflags(write=False)
    return X


def gen_blob_points(
    n: int,
    centers: Sequence[Sequence[float]] | np.ndarray,
    cluster_std: float = 1.0,
    seed: int = 42,
) -> np.ndarray:
    """
    Кластеризованные точки вокруг заданных центров (sklearn.make_blobs).

    Args:
        n: Общее количество точек
        centers: Центры (K, D)
        cluster_std: Стандартное отклонение внутри кластера
        seed: Seed для воспроизводимости

    Returns:
        Массив точек (n, D), только для чтения
    """
    if n <= 0:
        raise ValueError(f"Number of points must be positive, got {n}")
    data, _labels = make_blobs(
        n_samples=n,
        centers=np.asarray(centers, dtype=np.float64),
        cluster_std=cluster_std,
        random_state=seed,
    )
    X = np.ascontiguousarray(data, dtype=np.float64)
    X.setflags(write=False)
    return X
