"""
Adaptive reweighting of harvesting modalities.

Every ``interval`` recorded steps the engine looks at the trailing window of
performance, remembers the best configuration seen so far and nudges each
modality's weight towards its share of recent output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, Sequence
import copy
import logging

import numpy as np

from .config import StorageConfig
from .models.history import PerformanceRecord
from .resources import HarvestingSources, Modality

DEFAULT_WEIGHT = 0.25
MULTIPLIER_SCALE = 4.0


class OptimizationStatus(Enum):
    """Outcome of an optimization pass."""
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class InstallationSnapshot:
    """Configuration captured when a new best performance is observed."""
    sources: HarvestingSources
    storage: StorageConfig
    weights: Dict[Modality, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sources": {m.value: spec.to_dict() for m, spec in self.sources.items()},
            "storage": self.storage.to_dict(),
            "weights": {m.value: w for m, w in self.weights.items()}
        }


@dataclass
class OptimizationState:
    """Mutable learning state of the engine."""
    weights: Dict[Modality, float] = field(
        default_factory=lambda: {m: DEFAULT_WEIGHT for m in Modality}
    )
    best_performance: Optional[float] = None  # W mean net power
    best_configuration: Optional[InstallationSnapshot] = None
    enabled: bool = True
    evaluations: int = 0


@dataclass(frozen=True)
class OptimizationResult:
    """Result of an optimization pass."""
    status: OptimizationStatus
    history_length: int
    mean_net_power: float
    mean_power: Dict[Modality, float]
    weights: Dict[Modality, float]
    new_best: bool
    metadata: Dict[str, Any] = field(default_factory=dict)


class OptimizationEngine:
    """Exponentially smoothed modality weighting."""

    def __init__(
        self,
        interval: int = 100,
        window: int = 100,
        smoothing: float = 0.1,
        enabled: bool = True
    ):
        self.interval = interval
        self.window = window
        self.smoothing = smoothing
        self.state = OptimizationState(enabled=enabled)
        self.logger = logging.getLogger("harvester.optimization")

    @property
    def enabled(self) -> bool:
        return self.state.enabled

    @property
    def weights(self) -> Dict[Modality, float]:
        return dict(self.state.weights)

    @property
    def best_performance(self) -> Optional[float]:
        return self.state.best_performance

    @property
    def best_configuration(self) -> Optional[InstallationSnapshot]:
        return self.state.best_configuration

    def weight_multiplier(self, modality: Modality) -> float:
        """Scale applied to a modality's raw power (1.0 at the initial weight)."""
        return MULTIPLIER_SCALE * self.state.weights[Modality(modality)]

    def is_due(self, history_length: int) -> bool:
        return (
            self.enabled
            and self.interval > 0
            and history_length >= self.interval
            and history_length % self.interval == 0
        )

    def maybe_optimize(
        self,
        history: Sequence[PerformanceRecord],
        snapshot: InstallationSnapshot
    ) -> Optional[OptimizationResult]:
        """Run a pass if the history length falls on the cadence."""
        length = len(history)
        if not self.is_due(length):
            return None

        recent = history[-self.window:] if self.window > 0 else history[:]
        mean_net = float(np.mean([r.net_power for r in recent]))
        mean_power = {
            m: float(np.mean([r.power.get(m.value, 0.0) for r in recent]))
            for m in Modality
        }

        new_best = False
        if self.state.best_performance is None or mean_net > self.state.best_performance:
            self.state.best_performance = mean_net
            self.state.best_configuration = copy.deepcopy(snapshot)
            new_best = True
            self.logger.info(f"New best mean net power: {mean_net:.3f} W")

        total = sum(mean_power.values())
        if total <= 0:
            status = OptimizationStatus.SKIPPED
            self.logger.debug("No harvested power in window, weights unchanged")
        else:
            keep = 1.0 - self.smoothing
            for m in Modality:
                share = mean_power[m] / total
                self.state.weights[m] = keep * self.state.weights[m] + self.smoothing * share
            status = OptimizationStatus.UPDATED
            self.logger.debug(
                "Updated weights: " +
                ", ".join(f"{m.value}={w:.3f}" for m, w in self.state.weights.items())
            )

        self.state.evaluations += 1

        return OptimizationResult(
            status=status,
            history_length=length,
            mean_net_power=mean_net,
            mean_power=mean_power,
            weights=self.weights,
            new_best=new_best,
            metadata={"window": len(recent), "evaluation": self.state.evaluations}
        )

    def reset(self) -> None:
        self.state = OptimizationState(enabled=self.state.enabled)
