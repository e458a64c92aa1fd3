"""Time-stepped simulation of an ambient energy harvesting installation."""

from typing import Dict, Any, Optional, Callable
import logging

import numpy as np

from .analysis import Report, generate_comprehensive_report
from .config import InstallationConfig, LocationConfig
from .economics import EconomicModel, EconomicSnapshot
from .environment import (
    EnvironmentModel, GeographicData, WeatherPattern, default_geographic_lookup
)
from .exceptions import NumericDomainError, SimulationError
from .models.history import PerformanceHistory, PerformanceRecord
from .models.storage import StorageModel
from .optimization import InstallationSnapshot, OptimizationEngine, OptimizationResult
from .resources import (
    HarvestingSources, POWER_FUNCTIONS, apply_location_adjustments
)

HOURS_PER_DAY = 24
DAYS_PER_YEAR = 365


class SimulationOrchestrator:
    """Drives the per-step pipeline and owns all mutable simulation state.

    Each step samples the environment, computes weighted power per modality,
    subtracts the maintenance draw, charges or discharges storage, re-values
    the installation and appends a record to the bounded history. The
    optimization engine runs on its own cadence over that history.
    """

    def __init__(
        self,
        config: Optional[InstallationConfig] = None,
        location: Optional[LocationConfig] = None,
        geographic_data: Optional[GeographicData] = None,
        rng: Optional[np.random.RandomState] = None
    ):
        self.config = config or InstallationConfig()
        self.config.validate_or_raise()
        if location is not None:
            location.validate_or_raise()

        self.config.monitoring.setup_logging()
        self.logger = logging.getLogger("harvester.simulation")

        self.location = location
        if geographic_data is None:
            geographic_data = default_geographic_lookup(location) if location else GeographicData()
        self.geographic_data = geographic_data

        sim = self.config.simulation
        self.weather_pattern = WeatherPattern(sim.weather_pattern)
        self.time_step = sim.time_step

        self.sources = apply_location_adjustments(
            HarvestingSources.from_config(self.config), geographic_data
        )
        self.environment = EnvironmentModel(seed=sim.random_seed, site=geographic_data, rng=rng)
        self.storage = StorageModel(self.config.storage)
        self.history = PerformanceHistory(
            ceiling=sim.history_ceiling,
            retention=sim.history_retention
        )
        self.economics = EconomicModel(
            self.sources, self.config.storage, self.history, self.config.economics
        )
        self.optimizer = OptimizationEngine(
            interval=sim.optimization_interval,
            window=sim.optimization_window,
            smoothing=sim.smoothing_factor,
            enabled=sim.optimization_enabled
        )
        self.maintenance_power = self.config.maintenance.draw(self.config.storage.capacity)
        self.last_optimization: Optional[OptimizationResult] = None

        self.logger.info(
            f"Harvester simulation initialized: investment {self.economics.total_investment:.2f}, "
            f"maintenance draw {self.maintenance_power:.3f} W"
        )

    def _compute_power(self, sample) -> Dict[str, float]:
        power = {}
        for modality, spec in self.sources.items():
            try:
                raw = POWER_FUNCTIONS[modality](sample, spec)
            except NumericDomainError as e:
                self.logger.warning(
                    f"{modality.value} power undefined at step {sample.time_index}: {e}"
                )
                raw = 0.0
            if not np.isfinite(raw):
                self.logger.warning(f"Non-finite {modality.value} power at step {sample.time_index}")
                raw = 0.0
            power[modality.value] = raw * self.optimizer.weight_multiplier(modality)
        return power

    def installation_snapshot(self) -> InstallationSnapshot:
        return InstallationSnapshot(
            sources=self.sources,
            storage=self.config.storage,
            weights=self.optimizer.weights
        )

    def step_once(
        self,
        time_index: int,
        day_of_year: int,
        time_step: Optional[float] = None
    ) -> PerformanceRecord:
        """Advance the installation by one step and record the outcome."""
        if time_step is None:
            time_step = self.time_step

        sample = self.environment.sample(time_index, day_of_year, self.weather_pattern)
        power = self._compute_power(sample)
        total_power = sum(power.values())
        net_power = total_power - self.maintenance_power

        storage_snapshot = self.storage.update(net_power, time_step, sample.ambient_temperature)
        economics = self.economics.evaluate()

        record = PerformanceRecord(
            time_index=time_index,
            environment=sample,
            power=power,
            total_power=total_power,
            maintenance_power=self.maintenance_power,
            net_power=net_power,
            storage=storage_snapshot,
            economics=economics,
            time_step=time_step
        )
        if self.history.append(record):
            self.logger.debug(f"History truncated to {len(self.history)} records")

        result = self.optimizer.maybe_optimize(self.history, self.installation_snapshot())
        if result is not None:
            self.last_optimization = result

        return record

    def run_for(
        self,
        duration_days: int,
        hours_per_day: int = HOURS_PER_DAY,
        should_stop: Optional[Callable[[], bool]] = None
    ) -> Optional[Report]:
        """Simulate ``hours_per_day`` steps on each of ``duration_days`` days.

        ``should_stop`` is polled before every step; returning True ends the
        run early and the report covers the steps taken so far.
        """
        if duration_days < 0 or hours_per_day < 0:
            raise SimulationError(
                f"Duration must be non-negative, got {duration_days} days x {hours_per_day} hours"
            )
        if hours_per_day > HOURS_PER_DAY:
            raise SimulationError(f"hours_per_day cannot exceed {HOURS_PER_DAY}, got {hours_per_day}")

        self.logger.info(f"Running simulation for {duration_days} days")
        stopped = False
        for day in range(int(duration_days)):
            day_of_year = day % DAYS_PER_YEAR + 1
            for hour in range(int(hours_per_day)):
                if should_stop is not None and should_stop():
                    stopped = True
                    break
                self.step_once(day * HOURS_PER_DAY + hour, day_of_year)
            if stopped:
                self.logger.info(f"Simulation stopped after {len(self.history)} recorded steps")
                break

        return self.generate_comprehensive_report()

    def evaluate_economics(self, energy_value: Optional[float] = None) -> Optional[EconomicSnapshot]:
        return self.economics.evaluate(energy_value)

    def generate_comprehensive_report(self) -> Optional[Report]:
        if not self.history:
            return None
        economics = self.economics.evaluate()
        return generate_comprehensive_report(self.history, self.storage, economics, self.optimizer)

    def get_status(self) -> Dict[str, Any]:
        """Current state of the installation."""
        return {
            "steps": len(self.history),
            "total_steps": self.history.total_appended,
            "storage": self.storage.get_metrics(),
            "weights": {m.value: w for m, w in self.optimizer.weights.items()},
            "best_performance": self.optimizer.best_performance,
            "total_investment": self.economics.total_investment,
            "maintenance_power": self.maintenance_power
        }
