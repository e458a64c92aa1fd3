"""Ambient energy harvester simulation library."""

from .simulation import SimulationOrchestrator
from .config import InstallationConfig, LocationConfig
from .environment import EnvironmentModel, GeographicData, WeatherPattern
from .resources import Modality, HarvestingSources
from .economics import EconomicModel, EconomicSnapshot
from .optimization import OptimizationEngine
from .analysis import Report
from .exceptions import HarvesterError, ConfigurationError

from . import models

__version__ = "1.0.0"
__author__ = "Harvester Development Team"
__license__ = "MIT"

__all__ = [
    "SimulationOrchestrator",
    "InstallationConfig",
    "LocationConfig",
    "EnvironmentModel",
    "GeographicData",
    "WeatherPattern",
    "Modality",
    "HarvestingSources",
    "EconomicModel",
    "EconomicSnapshot",
    "OptimizationEngine",
    "Report",
    "HarvesterError",
    "ConfigurationError",
    "models"
]
