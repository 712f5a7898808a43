"""
Таймеры для замеров шагов K-Means и полного прогона.

Основан на time.perf_counter(): монотонные часы высокого разрешения,
не зависящие от перевода системного времени.
"""
from __future__ import annotations
import logging
import time
from typing import Any


class Timer:
    """
    Контекстный менеджер для замера времени участка кода.

    Если передан logger, по выходу из блока пишет длительность в DEBUG.

    Пример:
        with Timer("reduce") as t:
            clusters = reduce_clusters(partials)
        print(t.elapsed)
    """

    def __init__(self, name: str | None = None, logger: logging.Logger | None = None) -> None:
        self.name = name
        self.logger = logger
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start
        if self.logger is not None and self.name:
            self.logger.debug(f"{self.name}: {self.elapsed:.6f}s")
