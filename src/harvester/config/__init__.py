"""
Configuration package for the ambient energy harvester.
Provides validatable configuration objects loadable from YAML or JSON.
"""

from .base import (
    BaseConfig,
    ConfigFormat,
    ConfigValidationResult
)

from .installation_config import (
    KineticSourceConfig,
    ThermalSourceConfig,
    ElectromagneticSourceConfig,
    ChemicalSourceConfig,
    StorageConfig,
    MaintenanceConfig,
    EconomicConfig,
    LocationConfig,
    SimulationConfig,
    MonitoringConfig,
    InstallationConfig
)

__all__ = [
    # Base configuration classes
    "BaseConfig",
    "ConfigFormat",
    "ConfigValidationResult",

    # Harvesting sources
    "KineticSourceConfig",
    "ThermalSourceConfig",
    "ElectromagneticSourceConfig",
    "ChemicalSourceConfig",

    # Storage and operation
    "StorageConfig",
    "MaintenanceConfig",
    "EconomicConfig",

    # Site and run settings
    "LocationConfig",
    "SimulationConfig",
    "MonitoringConfig",

    # Main configuration class
    "InstallationConfig"
]
