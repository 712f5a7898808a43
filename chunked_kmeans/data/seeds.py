"""
Загрузка и сохранение затравочных центроидов кластеров.

Формат файла - текст, по одной затравке на строку:
# комментарий
<id> <x1> <x2> ... <xD>
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import numpy as np

from chunked_kmeans.core.cluster import as_point

logger = logging.getLogger("chunked_kmeans")


def load_seeds(path: str | Path) -> dict[int, np.ndarray]:
    """
    Читает затравки из файла.

    Args:
        path: Путь к файлу с затравками

    Returns:
        Словарь id кластера → начальный центроид

    Raises:
        FileNotFoundError: Если файла нет
        ValueError: Если строка не разбирается, id повторяется, размерности
            разные или файл не содержит ни одной затравки
    """
    path = Path(path)
    seeds: dict[int, np.ndarray] = {}
    dim: int | None = None

    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            # Пропускаем комментарии и пустые строки
            if not line or line.startswith("#"):
                continue

            parts = line.split()
            if len(parts) < 2:
                raise ValueError(f"{path}:{lineno}: expected '<id> <x1> ... <xD>', got {line!r}")

            try:
                cid = int(parts[0])
                point = as_point([float(v) for v in parts[1:]])
            except ValueError as exc:
                raise ValueError(f"{path}:{lineno}: {exc}") from exc

            if cid in seeds:
                raise ValueError(f"{path}:{lineno}: duplicate cluster id {cid}")
            if dim is None:
                dim = point.shape[0]
            elif point.shape[0] != dim:
                raise ValueError(
                    f"{path}:{lineno}: expected {dim} coordinates, got {point.shape[0]}"
                )
            seeds[cid] = point

    if not seeds:
        raise ValueError(f"No cluster seeds found in {path}")

    logger.info(f"{len(seeds)} clusters read from {path}")
    return seeds


def save_seeds(path: str | Path, seeds: Mapping[int, np.ndarray]) -> None:
    """Записывает затравки в том же формате, что читает load_seeds."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write("# cluster seeds: <id> <x1> ... <xD>\n")
        for cid in sorted(seeds):
            coords = " ".join(repr(float(v)) for v in np.asarray(seeds[cid]))
            f.write(f"{cid} {coords}\n")
