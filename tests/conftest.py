"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest


@pytest.fixture
def two_pairs():
    """Две пары точек у затравок (0,0) и (10,10)."""
    X = np.array([
        [0.1, 0.1],
        [-0.1, -0.1],
        [9.9, 10.1],
        [10.2, 9.8],
    ])
    seeds = {
        0: np.array([0.0, 0.0]),
        1: np.array([10.0, 10.0]),
    }
    return X, seeds


@pytest.fixture
def small_dataset():
    """Небольшой датасет (2D, 2 явно разделённых кластера)."""
    rng = np.random.RandomState(42)
    cluster1 = rng.randn(30, 2) + [0, 0]
    cluster2 = rng.randn(30, 2) + [8, 8]
    X = np.vstack([cluster1, cluster2])
    seeds = {
        0: np.array([-1.0, -1.0]),
        1: np.array([6.0, 6.0]),
    }
    return X, seeds


@pytest.fixture
def medium_dataset():
    """Средний датасет (10D, 3 кластера) с лишней дальней затравкой."""
    rng = np.random.RandomState(42)
    cluster1 = rng.randn(50, 10) + [0] * 10
    cluster2 = rng.randn(50, 10) + [6] * 10
    cluster3 = rng.randn(50, 10) + [-6] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    seeds = {
        0: np.array([-1.0] * 10),
        1: np.array([7.0] * 10),
        2: np.array([-7.0] * 10),
        3: np.array([1000.0] * 10),
    }
    return X, seeds


class RecordingLogger:
    """Логгер-заглушка: запоминает сообщения по уровням."""

    def __init__(self):
        self.records = []

    def debug(self, msg, *args, **kwargs):
        self.records.append(("DEBUG", msg))

    def info(self, msg, *args, **kwargs):
        self.records.append(("INFO", msg))

    def warning(self, msg, *args, **kwargs):
        self.records.append(("WARNING", msg))

    def messages(self, level):
        return [m for lvl, m in self.records if lvl == level]


@pytest.fixture
def recording_logger():
    return RecordingLogger()
