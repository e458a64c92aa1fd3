"""Aggregate reporting over a simulation's performance history."""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Sequence
import logging

import numpy as np
import pandas as pd

from .economics import EconomicSnapshot
from .models.history import PerformanceRecord
from .models.storage import StorageModel
from .optimization import OptimizationEngine
from .resources import Modality

VIABLE_POSITIVE_FRACTION = 0.7
LONG_PAYBACK_YEARS = 10.0
LOW_SOC = 0.2
WEAK_SOURCE_SHARE = 0.05
LOW_HEALTH = 0.8
LOW_DIVERSITY = 0.3

logger = logging.getLogger("harvester.analysis")


@dataclass(frozen=True)
class SimulationPeriod:
    steps: int
    duration_days: float


@dataclass(frozen=True)
class PerformanceSummary:
    average_net_power: float  # W
    total_energy: float  # kWh harvested
    positive_fraction: float
    viable: bool


@dataclass(frozen=True)
class SourceSummary:
    average_power: Dict[str, float]  # W per modality
    dominant_source: Optional[str]
    diversity_index: float


@dataclass(frozen=True)
class StorageSummary:
    average_soc: float
    average_efficiency: float
    health_factor: float
    cycle_count: float


@dataclass(frozen=True)
class OptimizationSummary:
    weights: Dict[str, float]
    best_performance: Optional[float]


@dataclass(frozen=True)
class Report:
    """Comprehensive summary of a simulation run."""
    period: SimulationPeriod
    performance: PerformanceSummary
    sources: SourceSummary
    storage: StorageSummary
    economics: Optional[EconomicSnapshot]
    optimization: OptimizationSummary
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": {
                "steps": self.period.steps,
                "duration_days": self.period.duration_days
            },
            "performance": {
                "average_net_power": self.performance.average_net_power,
                "total_energy": self.performance.total_energy,
                "positive_fraction": self.performance.positive_fraction,
                "viable": self.performance.viable
            },
            "sources": {
                "average_power": dict(self.sources.average_power),
                "dominant_source": self.sources.dominant_source,
                "diversity_index": self.sources.diversity_index
            },
            "storage": {
                "average_soc": self.storage.average_soc,
                "average_efficiency": self.storage.average_efficiency,
                "health_factor": self.storage.health_factor,
                "cycle_count": self.storage.cycle_count
            },
            "economics": self.economics.to_dict() if self.economics else None,
            "optimization": {
                "weights": dict(self.optimization.weights),
                "best_performance": self.optimization.best_performance
            },
            "recommendations": list(self.recommendations)
        }


def history_to_frame(history: Sequence[PerformanceRecord]) -> pd.DataFrame:
    """One row per record with power, storage and economic columns."""
    rows = []
    for record in history:
        row = {
            "time_index": record.time_index,
            "time_step": record.time_step,
            "total_power": record.total_power,
            "maintenance_power": record.maintenance_power,
            "net_power": record.net_power,
            "soc": record.storage.soc,
            "efficiency": record.storage.effective_efficiency,
            "health_factor": record.storage.health_factor,
            "temperature": record.environment.ambient_temperature,
        }
        for m in Modality:
            row[m.value] = record.power.get(m.value, 0.0)
        rows.append(row)
    return pd.DataFrame(rows)


def dominant_source(average_power: Dict[str, float]) -> Optional[str]:
    """Modality with the highest average; ties go to the earliest in Modality order."""
    best = None
    best_value = None
    for m in Modality:
        value = average_power.get(m.value, 0.0)
        if best_value is None or value > best_value:
            best, best_value = m.value, value
    return best


def diversity_index(average_power: Dict[str, float]) -> float:
    total = sum(average_power.values())
    if total <= 0:
        return 0.0
    return 1.0 - max(average_power.values()) / total


def _recommendations(
    performance: PerformanceSummary,
    sources: SourceSummary,
    storage: StorageSummary,
    economics: Optional[EconomicSnapshot]
) -> List[str]:
    recommendations = []

    if economics is not None:
        if economics.payback_period is None:
            recommendations.append(
                "Net cash flow is not positive; the installation never pays back at current output"
            )
        elif economics.payback_period > LONG_PAYBACK_YEARS:
            recommendations.append(
                f"Payback period of {economics.payback_period:.1f} years is long; "
                "consider reducing hardware cost or increasing energy value"
            )
        if economics.npv < 0:
            recommendations.append("Negative NPV; the installation is not economically viable")

    if storage.average_soc < LOW_SOC:
        recommendations.append(
            f"Average state of charge is {storage.average_soc:.0%}; storage is chronically depleted"
        )
    if storage.health_factor < LOW_HEALTH:
        recommendations.append(
            f"Storage health has fallen to {storage.health_factor:.0%}; plan a replacement"
        )

    total = sum(sources.average_power.values())
    if total > 0:
        # Reverse priority order so that ties resolve to the lowest-priority modality
        weakest = min(reversed(list(Modality)), key=lambda m: sources.average_power.get(m.value, 0.0))
        share = sources.average_power.get(weakest.value, 0.0) / total
        if share < WEAK_SOURCE_SHARE:
            recommendations.append(
                f"The {weakest.value} harvester contributes only {share:.1%} of output; "
                "consider resizing or removing it"
            )
        if sources.diversity_index < LOW_DIVERSITY:
            recommendations.append(
                f"Output depends heavily on the {sources.dominant_source} harvester; "
                "diversify the source mix"
            )

    if not performance.viable:
        recommendations.append(
            "Net power is not consistently positive; increase harvesting capacity "
            "or reduce maintenance draw"
        )

    return recommendations


def generate_comprehensive_report(
    history: Sequence[PerformanceRecord],
    storage: StorageModel,
    economics: Optional[EconomicSnapshot],
    optimization: OptimizationEngine
) -> Optional[Report]:
    """Summarize the history; None when no steps have been recorded."""
    if len(history) == 0:
        return None

    df = history_to_frame(history)

    period = SimulationPeriod(
        steps=len(df),
        duration_days=float(df["time_step"].sum() / 24.0)
    )

    average_net = float(df["net_power"].mean())
    positive_fraction = float((df["net_power"] > 0).mean())
    performance = PerformanceSummary(
        average_net_power=average_net,
        total_energy=float((df["total_power"] * df["time_step"]).sum() / 1000.0),
        positive_fraction=positive_fraction,
        viable=bool(average_net > 0 and positive_fraction > VIABLE_POSITIVE_FRACTION)
    )

    average_power = {m.value: float(df[m.value].mean()) for m in Modality}
    sources = SourceSummary(
        average_power=average_power,
        dominant_source=dominant_source(average_power),
        diversity_index=diversity_index(average_power)
    )

    storage_summary = StorageSummary(
        average_soc=float(df["soc"].mean()),
        average_efficiency=float(df["efficiency"].mean()),
        health_factor=storage.health_factor,
        cycle_count=storage.cycle_count
    )

    optimization_summary = OptimizationSummary(
        weights={m.value: w for m, w in optimization.weights.items()},
        best_performance=optimization.best_performance
    )

    recommendations = _recommendations(performance, sources, storage_summary, economics)
    if not np.isfinite(average_net):
        logger.warning("Average net power is not finite")

    return Report(
        period=period,
        performance=performance,
        sources=sources,
        storage=storage_summary,
        economics=economics,
        optimization=optimization_summary,
        recommendations=recommendations
    )
