# main.py
from pathlib import Path
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Sequence

import numpy as np

from chunked_kmeans.core.base import DEFAULT_MAX_ITERS
from chunked_kmeans.core.cluster import Cluster
from chunked_kmeans.data.points import gen_blob_points, gen_points
from chunked_kmeans.data.seeds import load_seeds, save_seeds
from chunked_kmeans.experiments.config import (
    DEFAULT_MAPPERS,
    DEFAULT_N_POINTS,
    DEFAULT_SEED,
    PointGenerator,
    RunConfig,
    Strategy,
)
from chunked_kmeans.experiments.runner import compare_strategies, run_config
from chunked_kmeans.metrics.timers import Timer
from chunked_kmeans.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunked-kmeans",
        description="Итеративный K-Means с последовательной и чанкованными стратегиями.",
    )
    parser.add_argument(
        "strategy",
        nargs="?",
        choices=[s.value for s in Strategy] + ["all"],
        default=Strategy.SCHEDULED.value,
        help="Стратегия: seq (последовательно), strat (Pool.map по чанкам), "
        "par (планировщик задач по чанкам), all (сравнить все три).",
    )
    parser.add_argument("--mappers", type=int, default=DEFAULT_MAPPERS, help="Число чанков.")
    parser.add_argument(
        "--processes",
        type=int,
        default=None,
        help="Размер пула воркеров (по умолчанию min(mappers, cpu_count)).",
    )
    parser.add_argument("--points", type=int, default=DEFAULT_N_POINTS, help="Число точек.")
    parser.add_argument(
        "--clusters",
        type=Path,
        default=Path("kmeans-clusters"),
        help="Файл с затравками кластеров: строки '<id> <x> <y>'.",
    )
    parser.add_argument("--max-iters", type=int, default=DEFAULT_MAX_ITERS)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument(
        "--generator",
        choices=[g.value for g in PointGenerator],
        default=PointGenerator.UNIFORM.value,
        help="uniform: поток MT19937 × 5; blobs: make_blobs вокруг затравок.",
    )
    parser.add_argument(
        "--write-seeds",
        type=int,
        default=None,
        metavar="K",
        help="Записать K затравок, выбранных из сгенерированных точек, в --clusters и выйти.",
    )
    parser.add_argument("--repeats", type=int, default=1)
    parser.add_argument("--warmup", type=int, default=0)
    parser.add_argument("--json", type=Path, default=None, help="Сохранить результаты в NDJSON.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Логировать кластеры на каждой итерации.")
    return parser


def make_points(config: RunConfig, seeds: Dict[int, np.ndarray] | None) -> np.ndarray:
    if config.generator is PointGenerator.BLOBS:
        if not seeds:
            raise ValueError("blobs generator needs cluster seeds as centers")
        centers = np.vstack([seeds[cid] for cid in sorted(seeds)])
        return gen_blob_points(config.n_points, centers, seed=config.seed)
    return gen_points(config.n_points, seed=config.seed)


def write_seeds(config: RunConfig, k: int, logger: logging.Logger) -> None:
    """
    Затравки для последующих прогонов: k различных равномерных точек.

    Генератор blobs сам требует затравки, поэтому здесь всегда uniform.
    """
    points = gen_points(config.n_points, seed=config.seed)
    if not 0 < k <= points.shape[0]:
        raise ValueError(f"Cannot pick {k} seeds from {points.shape[0]} points")
    rs = np.random.RandomState(config.seed)
    idx = np.sort(rs.choice(points.shape[0], size=k, replace=False))
    save_seeds(config.clusters_path, {i: points[j] for i, j in enumerate(idx)})
    logger.info(f"{k} cluster seeds written to {config.clusters_path}")


def clusters_to_records(clusters: Sequence[Cluster]) -> List[Dict[str, Any]]:
    return [
        {"id": c.id, "count": c.count, "centroid": [float(v) for v in c.centroid]}
        for c in clusters
    ]


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger(logging.DEBUG if args.verbose else logging.INFO)

    strategy = Strategy.SCHEDULED if args.strategy == "all" else Strategy(args.strategy)
    config = RunConfig(
        strategy=strategy,
        mappers=args.mappers,
        n_processes=args.processes,
        max_iters=args.max_iters,
        n_points=args.points,
        seed=args.seed,
        clusters_path=args.clusters,
        generator=args.generator,
    )

    if args.write_seeds is not None:
        write_seeds(config, args.write_seeds, logger)
        return 0

    with Timer() as t_total:
        seeds = load_seeds(config.clusters_path)
        print(f"{len(seeds)} clusters read")

        points = make_points(config, seeds)
        print(f"{points.shape[0]} points generated")

        if args.strategy == "all":
            results = compare_strategies(
                config, points, seeds, logger=logger, repeats=args.repeats, warmup=args.warmup
            )
        else:
            results = [
                run_config(
                    config, points, seeds, logger=logger, repeats=args.repeats, warmup=args.warmup
                )
            ]

    for r in results:
        print(r["clusters"])
        if "speedup" in r:
            logger.info(
                f"[strategy={r['strategy']}] speedup={r['speedup']}, "
                f"efficiency={r['efficiency']}, max_centroid_diff={r['max_centroid_diff']:.3e}"
            )
    print(f"SELFTIMED {t_total.elapsed:.2f}")

    if args.json is not None:
        with open(args.json, "w", encoding="utf-8") as f:
            for r in results:
                rec = {k: v for k, v in r.items() if k != "clusters"}
                rec["clusters"] = clusters_to_records(r["clusters"])
                f.write(json.dumps(rec, ensure_ascii=False))
                f.write("\n")
        logger.info(f"Results saved to {args.json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
