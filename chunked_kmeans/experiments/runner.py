import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence

import numpy as np

from chunked_kmeans.core.cluster import Cluster
from chunked_kmeans.core.cpu_multiprocessing import MultiprocessingConfig
from chunked_kmeans.experiments.config import RunConfig, Strategy, make_model_factory
from chunked_kmeans.metrics.metrics import efficiency, max_centroid_diff, speedup, throughput
from chunked_kmeans.metrics.timers import Timer
from chunked_kmeans.utils.logging import format_run_prefix


class _PrefixedLogger:
    """Обёртка над логгером, добавляющая префикс к каждому сообщению."""

    def __init__(self, base_logger: logging.Logger | None, prefix: str) -> None:
        self._base = base_logger
        self._prefix = prefix

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.debug(f"{self._prefix} {msg}", *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.info(f"{self._prefix} {msg}", *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.warning(f"{self._prefix} {msg}", *args, **kwargs)


class ExperimentRunner:
    """
    Запускает серию прогонов K-Means на одном наборе точек.

    Ожидается, что снаружи будут переданы:
    - points: набор точек (N, D)
    - seeds: затравки (id → центроид или список Cluster)
    - model_factory: callable, создающий модель по logger=...
    """

    def __init__(
        self,
        points: np.ndarray,
        seeds: Mapping[int, Any] | Sequence[Cluster],
        model_factory: Callable[..., Any],
        meta: Dict[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.points = points
        self.seeds = seeds
        self.model_factory = model_factory
        self.logger = logger

        self.meta: Dict[str, Any] = dict(meta or {"strategy": "custom"})
        self.meta.setdefault("N", int(points.shape[0]))
        self.meta.setdefault("K", len(seeds))
        self._run_prefix = format_run_prefix(self.meta)

    def _create_model(self) -> Any:
        """Новая модель на каждый прогон; логгер с префиксом прогона."""
        logger = _PrefixedLogger(self.logger, self._run_prefix)
        return self.model_factory(logger=logger)

    def run(self, repeats: int = 1, warmup: int = 0) -> Dict[str, Any]:
        """
        Запускает несколько прогонов K-Means с таймингом.

        :param repeats: количество измеряемых прогонов
        :param warmup: количество «разогревочных» запусков
        :return: словарь со статистикой времени и результатом последнего прогона
        """
        if repeats < 1:
            raise ValueError(f"repeats must be positive, got {repeats}")

        if self.logger and warmup:
            self.logger.info(f"{self._run_prefix} Warmup x{warmup}")

        for _ in range(warmup):
            self._create_model().fit(self.points, self.seeds)

        times: List[float] = []
        map_totals: List[float] = []
        reduce_totals: List[float] = []
        runs: List[Dict[str, Any]] = []
        result = None

        for run_idx in range(1, repeats + 1):
            if self.logger:
                self.logger.info(f"{self._run_prefix} Run {run_idx}/{repeats}")

            model = self._create_model()
            with Timer() as t_fit:
                result = model.fit(self.points, self.seeds)
            t_fit_val = float(t_fit.elapsed)
            times.append(t_fit_val)
            map_totals.append(float(model.t_map_total))
            reduce_totals.append(float(model.t_reduce_total))

            runs.append(
                {
                    "run_idx": run_idx,
                    "T_fit": t_fit_val,
                    "T_map_total": float(model.t_map_total),
                    "T_reduce_total": float(model.t_reduce_total),
                    "n_evaluations": int(model.n_iters_actual),
                    "throughput_ops": (
                        throughput(
                            int(self.points.shape[0]),
                            int(self.meta["K"]),
                            int(self.points.shape[1]),
                            int(model.n_iters_actual),
                            t_fit_val,
                        )
                        if t_fit_val > 0.0
                        else 0.0
                    ),
                }
            )

        assert result is not None
        stats: Dict[str, Any] = {
            **self.meta,
            "clusters": result.clusters,
            "state": type(result.state).__name__,
            "iterations": result.iterations,
            "n_evaluations": result.n_evaluations,
            "T_fit_avg": float(np.mean(times)),
            "T_fit_std": float(np.std(times)),
            "T_fit_min": float(np.min(times)),
            "T_map_total_avg": float(np.mean(map_totals)),
            "T_reduce_total_avg": float(np.mean(reduce_totals)),
            "throughput_ops_avg": float(np.mean([r["throughput_ops"] for r in runs])),
            "runs": runs,
        }

        if self.logger:
            self.logger.info(
                f"{self._run_prefix} {stats['state']} after {stats['iterations']} iterations: "
                f"T_fit_avg={stats['T_fit_avg']:.6f}s, "
                f"T_map_total_avg={stats['T_map_total_avg']:.6f}s, "
                f"T_reduce_total_avg={stats['T_reduce_total_avg']:.6f}s"
            )

        return stats


def run_config(
    config: RunConfig,
    points: np.ndarray,
    seeds: Mapping[int, Any] | Sequence[Cluster],
    logger: logging.Logger | None = None,
    repeats: int = 1,
    warmup: int = 0,
) -> Dict[str, Any]:
    """Прогон одной стратегии из конфигурации."""
    runner = ExperimentRunner(
        points=points,
        seeds=seeds,
        model_factory=make_model_factory(config),
        meta=config.describe(),
        logger=logger,
    )
    return runner.run(repeats=repeats, warmup=warmup)


def compare_strategies(
    config: RunConfig,
    points: np.ndarray,
    seeds: Mapping[int, Any] | Sequence[Cluster],
    logger: logging.Logger | None = None,
    repeats: int = 1,
    warmup: int = 0,
) -> List[Dict[str, Any]]:
    """
    Запускает все три стратегии на одних и тех же данных.

    К результатам чанкованных стратегий добавляются speedup/efficiency
    относительно последовательной и max_centroid_diff - расхождение
    центроидов с последовательным результатом.
    """
    results: List[Dict[str, Any]] = []
    baseline: Dict[str, Any] | None = None

    for strategy in Strategy:
        cfg = RunConfig(
            strategy=strategy,
            mappers=config.mappers,
            n_processes=config.n_processes,
            max_iters=config.max_iters,
            n_points=config.n_points,
            seed=config.seed,
            clusters_path=config.clusters_path,
            generator=config.generator,
        )
        stats = run_config(cfg, points, seeds, logger=logger, repeats=repeats, warmup=warmup)
        workers = MultiprocessingConfig(mappers=cfg.mappers, n_processes=cfg.n_processes).workers()

        if baseline is None:
            baseline = stats
        else:
            s = speedup(baseline["T_fit_avg"], stats["T_fit_avg"]) if stats["T_fit_avg"] > 0 else None
            stats["speedup"] = s
            stats["workers"] = workers
            stats["efficiency"] = efficiency(s, workers) if s is not None else None
            stats["max_centroid_diff"] = max_centroid_diff(baseline["clusters"], stats["clusters"])

        results.append(stats)

    return results
