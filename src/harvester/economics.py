"""
Discounted cash flow evaluation of a harvesting installation.

Production is extrapolated to a full year from the trailing window of the
performance history, then valued over the analysis horizon with output
degradation, cost inflation and discounting.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional, Sequence
import logging
import math

import numpy as np
from scipy.optimize import brentq

from .config import EconomicConfig, StorageConfig
from .models.history import PerformanceHistory
from .resources import HarvestingSources

HOURS_PER_YEAR = 8760.0

EconomicParameters = EconomicConfig


@dataclass(frozen=True)
class EconomicSnapshot:
    """Result of one economic evaluation."""
    total_investment: float
    annual_production: float  # kWh
    annual_revenue: float
    annual_costs: float
    net_cash_flow: float
    npv: float
    payback_period: Optional[float]  # years
    irr: Optional[float]  # percent, simple return on investment
    viable: bool
    window_size: int = 0  # records used for the production estimate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_investment": self.total_investment,
            "annual_production": self.annual_production,
            "annual_revenue": self.annual_revenue,
            "annual_costs": self.annual_costs,
            "net_cash_flow": self.net_cash_flow,
            "npv": self.npv,
            "payback_period": self.payback_period,
            "irr": self.irr,
            "viable": self.viable,
            "window_size": self.window_size
        }


def net_present_value(
    investment: float,
    annual_revenue: float,
    annual_costs: float,
    discount_rate: float = 0.10,
    years: int = 20,
    degradation_rate: float = 0.01,
    inflation_rate: float = 0.03
) -> float:
    """NPV of a degrading revenue stream against inflating costs.

    Year ``y`` (1-based) earns ``revenue * (1 - degradation)**(y - 1)`` and pays
    ``costs * (1 + inflation)**(y - 1)``, discounted by ``(1 + rate)**y``.
    """
    years_arr = np.arange(1, int(years) + 1)
    revenue = annual_revenue * (1 - degradation_rate) ** (years_arr - 1)
    costs = annual_costs * (1 + inflation_rate) ** (years_arr - 1)
    discount = (1 + discount_rate) ** years_arr
    return float(-investment + np.sum((revenue - costs) / discount))


def internal_rate_of_return(
    cash_flows: Sequence[float],
    low: float = -0.99,
    high: float = 10.0
) -> Optional[float]:
    """Discount rate at which the NPV of ``cash_flows`` is zero.

    ``cash_flows[0]`` is the flow at time 0 (usually the negative investment).
    Returns None when the NPV does not change sign on ``[low, high]``.
    """
    flows = np.asarray(cash_flows, dtype=float)
    if flows.size < 2 or not np.all(np.isfinite(flows)):
        return None

    periods = np.arange(flows.size)

    def npv(rate: float) -> float:
        return float(np.sum(flows / (1 + rate) ** periods))

    f_low, f_high = npv(low), npv(high)
    if f_low == 0:
        return low
    if f_high == 0:
        return high
    if np.sign(f_low) == np.sign(f_high):
        return None
    return float(brentq(npv, low, high, xtol=1e-10))


class EconomicModel:
    """Values the installation from its observed performance."""

    def __init__(
        self,
        sources: HarvestingSources,
        storage: StorageConfig,
        history: PerformanceHistory,
        parameters: Optional[EconomicConfig] = None
    ):
        self.sources = sources
        self.storage = storage
        self.history = history
        self.parameters = parameters or EconomicConfig()
        self.logger = logging.getLogger("harvester.economics")
        self.total_investment = self._calculate_investment()

    def _calculate_investment(self) -> float:
        hardware = self.sources.hardware_cost() * (1 + self.parameters.installation_factor)
        storage = self.storage.capacity / 1000.0 * self.storage.cost
        return hardware + storage

    def annual_production(self) -> Optional[float]:
        """Extrapolated yearly surplus energy in kWh, None without history."""
        energy_wh, hours, count = self.history.window_totals()
        if count == 0:
            return None
        if hours <= 0:
            return 0.0
        return energy_wh / 1000.0 / hours * HOURS_PER_YEAR

    def evaluate(self, energy_value: Optional[float] = None) -> Optional[EconomicSnapshot]:
        """Evaluate the installation at ``energy_value`` per kWh."""
        production = self.annual_production()
        if production is None:
            return None

        p = self.parameters
        value = p.energy_value if energy_value is None else energy_value
        investment = self.total_investment

        revenue = production * value
        costs = investment * p.maintenance_rate
        cash_flow = revenue - costs

        npv = net_present_value(
            investment, revenue, costs,
            discount_rate=p.discount_rate,
            years=p.analysis_years,
            degradation_rate=p.degradation_rate,
            inflation_rate=p.inflation_rate
        )

        if cash_flow <= 0:
            payback = None
        elif investment <= 0:
            payback = 0.0
        else:
            payback = investment / cash_flow

        # Simple return on investment, not a root-solved IRR
        irr = None
        if payback is not None and payback <= p.analysis_years and investment > 0:
            irr = cash_flow / investment * 100

        viable = bool(npv > 0 and payback is not None and payback <= p.analysis_years)

        if not math.isfinite(npv):
            self.logger.warning(f"Non-finite NPV computed: {npv}")

        return EconomicSnapshot(
            total_investment=investment,
            annual_production=production,
            annual_revenue=revenue,
            annual_costs=costs,
            net_cash_flow=cash_flow,
            npv=npv,
            payback_period=payback,
            irr=irr,
            viable=viable,
            window_size=self.history.window_totals()[2]
        )

    def cash_flows(self, energy_value: Optional[float] = None) -> Optional[np.ndarray]:
        """Yearly cash flows including the initial investment at year 0."""
        production = self.annual_production()
        if production is None:
            return None
        p = self.parameters
        value = p.energy_value if energy_value is None else energy_value
        years = np.arange(1, int(p.analysis_years) + 1)
        revenue = production * value * (1 - p.degradation_rate) ** (years - 1)
        costs = self.total_investment * p.maintenance_rate * (1 + p.inflation_rate) ** (years - 1)
        return np.concatenate(([-self.total_investment], revenue - costs))
