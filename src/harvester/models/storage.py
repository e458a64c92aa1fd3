"""
Energy storage model for the ambient energy harvester.
Tracks stored energy, state of charge, cycling, temperature effects and
degradation of the installation's battery.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Any
import logging
import math

from ..config import StorageConfig

REFERENCE_TEMPERATURE = 25.0  # C
CAPACITY_TEMPERATURE_COEFF = 0.005  # fraction of capacity lost per degree from reference
EFFICIENCY_TEMPERATURE_COEFF = 0.003  # fraction of efficiency lost per degree from reference
MIN_TEMPERATURE_FACTOR = 0.5
MIN_HEALTH_FACTOR = 0.5
HOURS_PER_YEAR = 8760.0


@dataclass
class StorageState:
    """Current state of the storage device."""
    stored_energy: float  # Wh
    soc: float  # State of charge (0-1)
    cycle_count: float  # Equivalent full cycles
    temperature: float  # Temperature in Celsius
    health_factor: float  # (0.5-1)
    elapsed_hours: float = 0.0


@dataclass(frozen=True)
class StorageSnapshot:
    """Immutable copy of the storage state after an update."""
    stored_energy: float
    soc: float
    cycle_count: float
    temperature: float
    health_factor: float
    effective_capacity: float  # Wh
    effective_efficiency: float
    energy_charged: float  # Wh accepted into storage this step
    energy_discharged: float  # Wh delivered from storage this step

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stored_energy": self.stored_energy,
            "soc": self.soc,
            "cycle_count": self.cycle_count,
            "temperature": self.temperature,
            "health_factor": self.health_factor,
            "effective_capacity": self.effective_capacity,
            "effective_efficiency": self.effective_efficiency,
            "energy_charged": self.energy_charged,
            "energy_discharged": self.energy_discharged
        }


class StorageModel:
    """Battery with rate limits, temperature derating, cycle and calendar aging.

    ``update`` never raises: non-finite power or temperature inputs are
    replaced by neutral values and every derived quantity is clamped, so the
    state of charge stays within [0, 1], the cycle count never decreases and
    the health factor never increases.
    """

    def __init__(self, config: StorageConfig):
        self.config = config
        self.logger = logging.getLogger("harvester.storage")
        self.state = self._initial_state()
        self._last_capacity = self.effective_capacity()
        self._last_efficiency = config.efficiency
        self._last_charged = 0.0
        self._last_discharged = 0.0

    def _initial_state(self) -> StorageState:
        soc = float(np.clip(self.config.initial_soc, 0.0, 1.0))
        return StorageState(
            stored_energy=soc * self.config.capacity,
            soc=soc,
            cycle_count=0.0,
            temperature=REFERENCE_TEMPERATURE,
            health_factor=1.0
        )

    def reset(self) -> None:
        """Restore the device to its as-installed state."""
        self.state = self._initial_state()
        self._last_capacity = self.effective_capacity()
        self._last_efficiency = self.config.efficiency
        self._last_charged = 0.0
        self._last_discharged = 0.0

    @staticmethod
    def _temperature_factor(temperature: float, coefficient: float) -> float:
        return max(MIN_TEMPERATURE_FACTOR, 1.0 - coefficient * abs(temperature - REFERENCE_TEMPERATURE))

    def nominal_capacity(self) -> float:
        """Capacity in Wh after degradation only; bounds the stored energy."""
        return max(0.0, self.config.capacity * self.state.health_factor)

    def effective_capacity(self, temperature: float = None) -> float:
        """Usable capacity in Wh after degradation and temperature derating."""
        if temperature is None:
            temperature = self.state.temperature
        factor = self._temperature_factor(temperature, CAPACITY_TEMPERATURE_COEFF)
        return max(0.0, self.config.capacity * self.state.health_factor * factor)

    def effective_efficiency(self, temperature: float = None) -> float:
        """One-way conversion efficiency at the given temperature."""
        if temperature is None:
            temperature = self.state.temperature
        factor = self._temperature_factor(temperature, EFFICIENCY_TEMPERATURE_COEFF)
        return self.config.efficiency * factor

    @property
    def soc(self) -> float:
        return self.state.soc

    @property
    def health_factor(self) -> float:
        return self.state.health_factor

    @property
    def cycle_count(self) -> float:
        return self.state.cycle_count

    def update(self, net_power: float, time_step: float, temperature: float) -> StorageSnapshot:
        """Apply ``net_power`` (W, positive charges) for ``time_step`` hours."""
        if net_power is None or not math.isfinite(net_power):
            net_power = 0.0
        if temperature is None or not math.isfinite(temperature):
            temperature = REFERENCE_TEMPERATURE
        if time_step is None or not math.isfinite(time_step) or time_step < 0:
            time_step = 0.0

        capacity = self.effective_capacity(temperature)
        efficiency = self.effective_efficiency(temperature)
        # Temperature limits what can be charged or drawn, not what is held
        nominal = self.nominal_capacity()
        stored = float(np.clip(self.state.stored_energy, 0.0, nominal))
        available = min(stored, capacity)

        charged = 0.0
        discharged = 0.0
        moved = 0.0

        if net_power > 0 and time_step > 0:  # Charging
            requested = net_power * time_step
            rate_limit = self.config.max_charge_rate * time_step
            headroom = max(0.0, capacity - stored)
            energy_in = min(requested, rate_limit, headroom)
            charged = energy_in * efficiency
            stored += charged
            moved = charged
        elif net_power < 0 and time_step > 0:  # Discharging
            requested = -net_power * time_step
            rate_limit = self.config.max_discharge_rate * time_step
            delivered = min(requested, rate_limit, available)
            drawn = min(available, delivered / efficiency) if efficiency > 0 else available
            discharged = delivered
            stored -= drawn
            moved = drawn

        self.state.temperature = temperature
        self.state.elapsed_hours += time_step

        # Update cycle count
        if self.config.capacity > 0:
            self.state.cycle_count += moved / (2.0 * self.config.capacity)

        self._update_health()

        stored = float(np.clip(stored, 0.0, nominal))
        soc = min(1.0, stored / capacity) if capacity > 0 else 0.0

        self.state.stored_energy = stored
        self.state.soc = float(np.clip(soc, 0.0, 1.0))

        self._last_capacity = capacity
        self._last_efficiency = efficiency
        self._last_charged = charged
        self._last_discharged = discharged

        return self.snapshot()

    def _update_health(self) -> None:
        """Combine cycle and calendar aging into the health factor."""
        cycle_aging = self.state.cycle_count * self.config.degradation_rate
        calendar_aging = (self.state.elapsed_hours / HOURS_PER_YEAR) * self.config.calendar_degradation_rate
        health = max(MIN_HEALTH_FACTOR, 1.0 - cycle_aging - calendar_aging)

        if health < self.state.health_factor:
            if health == MIN_HEALTH_FACTOR and self.state.health_factor > MIN_HEALTH_FACTOR:
                self.logger.warning("Storage health factor reached its floor")
            self.state.health_factor = health

    def snapshot(self) -> StorageSnapshot:
        """Current state as an immutable record."""
        return StorageSnapshot(
            stored_energy=self.state.stored_energy,
            soc=self.state.soc,
            cycle_count=self.state.cycle_count,
            temperature=self.state.temperature,
            health_factor=self.state.health_factor,
            effective_capacity=self._last_capacity,
            effective_efficiency=self._last_efficiency,
            energy_charged=self._last_charged,
            energy_discharged=self._last_discharged
        )

    def get_metrics(self) -> Dict[str, Any]:
        """Get storage metrics."""
        return {
            "type": self.config.type,
            "capacity": self.config.capacity,
            **self.snapshot().to_dict()
        }
