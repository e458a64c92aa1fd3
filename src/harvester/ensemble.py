"""Independent simulation runs over a set of random seeds."""

from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple
import logging

import pandas as pd

from .analysis import Report
from .config import InstallationConfig
from .exceptions import SimulationError
from .simulation import SimulationOrchestrator

logger = logging.getLogger("harvester.ensemble")


def _run_single(args: Tuple[InstallationConfig, int, int, int]) -> Optional[Report]:
    config, seed, duration_days, hours_per_day = args
    seeded = replace(config, simulation=replace(config.simulation, random_seed=seed))
    orchestrator = SimulationOrchestrator(seeded)
    return orchestrator.run_for(duration_days, hours_per_day)


def run_ensemble(
    config: InstallationConfig,
    seeds: Sequence[int],
    duration_days: int,
    hours_per_day: int = 24,
    concurrency: Optional[str] = None,
    max_workers: Optional[int] = None
) -> List[Optional[Report]]:
    """Run one orchestrator per seed and return their reports in seed order.

    Parameters
    ----------
    concurrency
        ``None`` runs sequentially; ``"thread"`` or ``"process"`` evaluates the
        runs through the matching ``concurrent.futures`` executor. Results keep
        the input ordering regardless of completion order.
    max_workers
        Maximum workers for the executor. Defaults to the library default.
    """
    config.validate_or_raise()
    tasks = [(config, int(seed), duration_days, hours_per_day) for seed in seeds]
    logger.info(f"Running ensemble of {len(tasks)} simulations ({concurrency or 'sequential'})")

    if concurrency is None:
        return [_run_single(task) for task in tasks]

    if concurrency == "thread":
        executor_cls = ThreadPoolExecutor
    elif concurrency == "process":
        executor_cls = ProcessPoolExecutor
    else:
        raise SimulationError(
            f"concurrency must be None, 'thread' or 'process', got {concurrency!r}"
        )

    with executor_cls(max_workers=max_workers) as executor:
        return list(executor.map(_run_single, tasks))


def summarize_ensemble(reports: Sequence[Optional[Report]], seeds: Optional[Sequence[int]] = None) -> pd.DataFrame:
    """One row per report with headline performance, storage and economic figures."""
    rows = []
    for i, report in enumerate(reports):
        if report is None:
            continue
        economics = report.economics
        rows.append({
            "seed": seeds[i] if seeds is not None else i,
            "steps": report.period.steps,
            "average_net_power": report.performance.average_net_power,
            "total_energy": report.performance.total_energy,
            "positive_fraction": report.performance.positive_fraction,
            "viable": report.performance.viable,
            "dominant_source": report.sources.dominant_source,
            "diversity_index": report.sources.diversity_index,
            "health_factor": report.storage.health_factor,
            "npv": economics.npv if economics else None,
            "payback_period": economics.payback_period if economics else None,
        })
    return pd.DataFrame(rows)
