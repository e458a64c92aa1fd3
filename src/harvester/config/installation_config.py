"""
Installation configuration: harvesting sources, storage, maintenance,
economics, simulation and monitoring settings.

Every section accepts the camelCase keys of the external configuration record
and falls back to documented defaults for any field that is omitted.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import logging
import threading

from .base import BaseConfig, ConfigValidationResult
from ..validation import SourceValidator, LocationValidator, check

_LOGGING_LOCK = threading.Lock()


def _collect(result: ConfigValidationResult, *messages: Optional[str]) -> ConfigValidationResult:
    for message in messages:
        if message:
            result.add_error(message)
    return result


@dataclass(frozen=True)
class KineticSourceConfig(BaseConfig):
    """Wind and vibration harvester."""
    area: float = 1.0  # m² swept area
    efficiency: float = 0.35
    cost: float = 400.0  # per m²
    lifetime: float = 20.0  # years
    cut_in_speed: float = 3.0  # m/s
    cut_out_speed: float = 25.0  # m/s
    proof_mass: float = 0.1  # kg, vibration harvester

    def validate(self) -> ConfigValidationResult:
        result = _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_positive, self.area, "area"),
            check(SourceValidator.validate_efficiency, self.efficiency, "efficiency"),
            check(SourceValidator.validate_non_negative, self.cost, "cost"),
            check(SourceValidator.validate_positive, self.lifetime, "lifetime"),
            check(SourceValidator.validate_non_negative, self.cut_in_speed, "cutInSpeed"),
            check(SourceValidator.validate_non_negative, self.proof_mass, "proofMass"),
        )
        if self.cut_out_speed <= self.cut_in_speed:
            result.add_error(
                f"cutOutSpeed must exceed cutInSpeed, got {self.cut_out_speed} <= {self.cut_in_speed}"
            )
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "area": self.area,
            "efficiency": self.efficiency,
            "cost": self.cost,
            "lifetime": self.lifetime,
            "cutInSpeed": self.cut_in_speed,
            "cutOutSpeed": self.cut_out_speed,
            "proofMass": self.proof_mass
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'KineticSourceConfig':
        return cls(
            area=data.get("area", 1.0),
            efficiency=data.get("efficiency", 0.35),
            cost=data.get("cost", 400.0),
            lifetime=data.get("lifetime", 20.0),
            cut_in_speed=data.get("cutInSpeed", 3.0),
            cut_out_speed=data.get("cutOutSpeed", 25.0),
            proof_mass=data.get("proofMass", 0.1)
        )


@dataclass(frozen=True)
class ThermalSourceConfig(BaseConfig):
    """Thermoelectric generator array."""
    area: float = 0.5  # m²
    seebeck_coeff: float = 0.2  # V/K per module
    resistance: float = 2.0  # Ohm per module
    efficiency: float = 0.5  # fraction of the Carnot limit achieved
    min_gradient: float = 1.0  # K
    cost: float = 800.0
    lifetime: float = 15.0

    def validate(self) -> ConfigValidationResult:
        return _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_positive, self.area, "area"),
            check(SourceValidator.validate_positive, self.seebeck_coeff, "seebeckCoeff"),
            check(SourceValidator.validate_positive, self.resistance, "resistance"),
            check(SourceValidator.validate_efficiency, self.efficiency, "efficiency"),
            check(SourceValidator.validate_non_negative, self.min_gradient, "minGradient"),
            check(SourceValidator.validate_non_negative, self.cost, "cost"),
            check(SourceValidator.validate_positive, self.lifetime, "lifetime"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "area": self.area,
            "seebeckCoeff": self.seebeck_coeff,
            "resistance": self.resistance,
            "efficiency": self.efficiency,
            "minGradient": self.min_gradient,
            "cost": self.cost,
            "lifetime": self.lifetime
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ThermalSourceConfig':
        return cls(
            area=data.get("area", 0.5),
            seebeck_coeff=data.get("seebeckCoeff", 0.2),
            resistance=data.get("resistance", 2.0),
            efficiency=data.get("efficiency", 0.5),
            min_gradient=data.get("minGradient", 1.0),
            cost=data.get("cost", 800.0),
            lifetime=data.get("lifetime", 15.0)
        )


@dataclass(frozen=True)
class ElectromagneticSourceConfig(BaseConfig):
    """Induction coil moving through stray magnetic fields."""
    coil_length: float = 500.0  # m of conductor
    coil_area: float = 0.2  # m²
    resistance: float = 5.0  # Ohm
    velocity: float = 1.5  # m/s nominal relative velocity
    efficiency: float = 0.8
    min_field: float = 1e-5  # T
    cost: float = 600.0
    lifetime: float = 25.0

    def validate(self) -> ConfigValidationResult:
        return _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_positive, self.coil_length, "coilLength"),
            check(SourceValidator.validate_positive, self.coil_area, "coilArea"),
            check(SourceValidator.validate_positive, self.resistance, "resistance"),
            check(SourceValidator.validate_non_negative, self.velocity, "velocity"),
            check(SourceValidator.validate_efficiency, self.efficiency, "efficiency"),
            check(SourceValidator.validate_non_negative, self.min_field, "minField"),
            check(SourceValidator.validate_non_negative, self.cost, "cost"),
            check(SourceValidator.validate_positive, self.lifetime, "lifetime"),
        )

    @property
    def area(self) -> float:
        """Installed footprint used for costing."""
        return self.coil_area

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coilLength": self.coil_length,
            "coilArea": self.coil_area,
            "resistance": self.resistance,
            "velocity": self.velocity,
            "efficiency": self.efficiency,
            "minField": self.min_field,
            "cost": self.cost,
            "lifetime": self.lifetime
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ElectromagneticSourceConfig':
        return cls(
            coil_length=data.get("coilLength", 500.0),
            coil_area=data.get("coilArea", 0.2),
            resistance=data.get("resistance", 5.0),
            velocity=data.get("velocity", 1.5),
            efficiency=data.get("efficiency", 0.8),
            min_field=data.get("minField", 1e-5),
            cost=data.get("cost", 600.0),
            lifetime=data.get("lifetime", 25.0)
        )


@dataclass(frozen=True)
class ChemicalSourceConfig(BaseConfig):
    """Salinity/concentration-gradient cell."""
    area: float = 0.3  # m² membrane
    efficiency: float = 0.5
    cost: float = 300.0
    lifetime: float = 10.0
    ion_mobility: float = 5e-8  # m²/(V·s)
    membrane_thickness: float = 1e-3  # m
    reference_concentration: float = 10.0  # mol/m³
    min_gradient: float = 0.01

    def validate(self) -> ConfigValidationResult:
        return _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_positive, self.area, "area"),
            check(SourceValidator.validate_efficiency, self.efficiency, "efficiency"),
            check(SourceValidator.validate_non_negative, self.cost, "cost"),
            check(SourceValidator.validate_positive, self.lifetime, "lifetime"),
            check(SourceValidator.validate_positive, self.ion_mobility, "ionMobility"),
            check(SourceValidator.validate_positive, self.membrane_thickness, "membraneThickness"),
            check(SourceValidator.validate_positive, self.reference_concentration, "referenceConcentration"),
            check(SourceValidator.validate_non_negative, self.min_gradient, "minGradient"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "area": self.area,
            "efficiency": self.efficiency,
            "cost": self.cost,
            "lifetime": self.lifetime,
            "ionMobility": self.ion_mobility,
            "membraneThickness": self.membrane_thickness,
            "referenceConcentration": self.reference_concentration,
            "minGradient": self.min_gradient
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChemicalSourceConfig':
        return cls(
            area=data.get("area", 0.3),
            efficiency=data.get("efficiency", 0.5),
            cost=data.get("cost", 300.0),
            lifetime=data.get("lifetime", 10.0),
            ion_mobility=data.get("ionMobility", 5e-8),
            membrane_thickness=data.get("membraneThickness", 1e-3),
            reference_concentration=data.get("referenceConcentration", 10.0),
            min_gradient=data.get("minGradient", 0.01)
        )


@dataclass(frozen=True)
class StorageConfig(BaseConfig):
    """Battery parameters. Capacity in Wh, rates in W, cost per kWh."""
    type: str = "lithium_ion"
    capacity: float = 1000.0
    max_charge_rate: float = 200.0
    max_discharge_rate: float = 200.0
    efficiency: float = 0.95
    initial_soc: float = 0.5
    degradation_rate: float = 1e-4  # health lost per equivalent full cycle
    calendar_degradation_rate: float = 0.02  # health lost per year
    cost: float = 500.0
    lifetime: float = 10.0

    def validate(self) -> ConfigValidationResult:
        result = _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_positive, self.capacity, "capacity"),
            check(SourceValidator.validate_non_negative, self.max_charge_rate, "maxChargeRate"),
            check(SourceValidator.validate_non_negative, self.max_discharge_rate, "maxDischargeRate"),
            check(SourceValidator.validate_efficiency, self.efficiency, "efficiency"),
            check(SourceValidator.validate_efficiency, self.initial_soc, "initialSOC"),
            check(SourceValidator.validate_non_negative, self.degradation_rate, "degradationRate"),
            check(SourceValidator.validate_non_negative, self.calendar_degradation_rate, "calendarDegradationRate"),
            check(SourceValidator.validate_non_negative, self.cost, "cost"),
            check(SourceValidator.validate_positive, self.lifetime, "lifetime"),
        )
        if self.efficiency == 0:
            result.add_error("efficiency must be greater than 0 for a storage device")
        if self.max_charge_rate == 0 and self.max_discharge_rate == 0:
            result.add_warning("storage can neither charge nor discharge")
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "capacity": self.capacity,
            "maxChargeRate": self.max_charge_rate,
            "maxDischargeRate": self.max_discharge_rate,
            "efficiency": self.efficiency,
            "initialSOC": self.initial_soc,
            "degradationRate": self.degradation_rate,
            "calendarDegradationRate": self.calendar_degradation_rate,
            "cost": self.cost,
            "lifetime": self.lifetime
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StorageConfig':
        return cls(
            type=data.get("type", "lithium_ion"),
            capacity=data.get("capacity", 1000.0),
            max_charge_rate=data.get("maxChargeRate", 200.0),
            max_discharge_rate=data.get("maxDischargeRate", 200.0),
            efficiency=data.get("efficiency", 0.95),
            initial_soc=data.get("initialSOC", 0.5),
            degradation_rate=data.get("degradationRate", 1e-4),
            calendar_degradation_rate=data.get("calendarDegradationRate", 0.02),
            cost=data.get("cost", 500.0),
            lifetime=data.get("lifetime", 10.0)
        )


@dataclass(frozen=True)
class MaintenanceConfig(BaseConfig):
    """Parasitic draw of the installation's own electronics."""
    base_power: float = 0.5  # W
    capacity_scaling: float = 0.0005  # W per Wh of nominal storage capacity

    def draw(self, nominal_capacity: float) -> float:
        """Maintenance power in W for a given nominal storage capacity."""
        return self.base_power + self.capacity_scaling * nominal_capacity

    def validate(self) -> ConfigValidationResult:
        return _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_non_negative, self.base_power, "basePower"),
            check(SourceValidator.validate_non_negative, self.capacity_scaling, "capacityScaling"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"basePower": self.base_power, "capacityScaling": self.capacity_scaling}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MaintenanceConfig':
        return cls(
            base_power=data.get("basePower", 0.5),
            capacity_scaling=data.get("capacityScaling", 0.0005)
        )


@dataclass(frozen=True)
class EconomicConfig(BaseConfig):
    """Discounted cash flow assumptions."""
    discount_rate: float = 0.10
    analysis_years: int = 20
    degradation_rate: float = 0.01  # output loss per year
    inflation_rate: float = 0.03  # cost growth per year
    maintenance_rate: float = 0.03  # fraction of investment per year
    installation_factor: float = 0.30  # surcharge on harvester hardware
    energy_value: float = 0.15  # per kWh

    def validate(self) -> ConfigValidationResult:
        result = _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_non_negative, self.discount_rate, "discountRate"),
            check(SourceValidator.validate_positive, self.analysis_years, "analysisYears"),
            check(SourceValidator.validate_efficiency, self.degradation_rate, "degradationRate"),
            check(SourceValidator.validate_non_negative, self.inflation_rate, "inflationRate"),
            check(SourceValidator.validate_non_negative, self.maintenance_rate, "maintenanceRate"),
            check(SourceValidator.validate_non_negative, self.installation_factor, "installationFactor"),
            check(SourceValidator.validate_non_negative, self.energy_value, "energyValue"),
        )
        if isinstance(self.analysis_years, float) and not self.analysis_years.is_integer():
            result.add_error(f"analysisYears must be a whole number, got {self.analysis_years}")
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discountRate": self.discount_rate,
            "analysisYears": self.analysis_years,
            "degradationRate": self.degradation_rate,
            "inflationRate": self.inflation_rate,
            "maintenanceRate": self.maintenance_rate,
            "installationFactor": self.installation_factor,
            "energyValue": self.energy_value
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EconomicConfig':
        return cls(
            discount_rate=data.get("discountRate", 0.10),
            analysis_years=data.get("analysisYears", 20),
            degradation_rate=data.get("degradationRate", 0.01),
            inflation_rate=data.get("inflationRate", 0.03),
            maintenance_rate=data.get("maintenanceRate", 0.03),
            installation_factor=data.get("installationFactor", 0.30),
            energy_value=data.get("energyValue", 0.15)
        )


@dataclass(frozen=True)
class LocationConfig(BaseConfig):
    """Installation site."""
    lat: float = 0.0
    lon: float = 0.0
    name: str = "Default Site"

    def validate(self) -> ConfigValidationResult:
        result = _collect(
            ConfigValidationResult(is_valid=True),
            check(LocationValidator.validate_latitude, self.lat, "lat"),
            check(LocationValidator.validate_longitude, self.lon, "lon"),
        )
        if not self.name:
            result.add_warning("location has no name")
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lon": self.lon, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LocationConfig':
        return cls(
            lat=data.get("lat", 0.0),
            lon=data.get("lon", 0.0),
            name=data.get("name", "Default Site")
        )


@dataclass(frozen=True)
class SimulationConfig(BaseConfig):
    """Run-level settings."""
    random_seed: Optional[int] = None
    time_step: float = 1.0  # hours
    weather_pattern: str = "normal"
    optimization_enabled: bool = True
    optimization_interval: int = 100
    optimization_window: int = 100
    smoothing_factor: float = 0.1
    history_ceiling: int = 10000
    history_retention: int = 8760

    def validate(self) -> ConfigValidationResult:
        result = _collect(
            ConfigValidationResult(is_valid=True),
            check(SourceValidator.validate_positive, self.time_step, "timeStep"),
            check(SourceValidator.validate_positive, self.optimization_interval, "optimizationInterval"),
            check(SourceValidator.validate_positive, self.optimization_window, "optimizationWindow"),
            check(SourceValidator.validate_efficiency, self.smoothing_factor, "smoothingFactor"),
            check(SourceValidator.validate_positive, self.history_ceiling, "historyCeiling"),
            check(SourceValidator.validate_positive, self.history_retention, "historyRetention"),
        )
        if self.history_retention > self.history_ceiling:
            result.add_error(
                f"historyRetention ({self.history_retention}) cannot exceed historyCeiling ({self.history_ceiling})"
            )
        valid_patterns = ["normal", "windy", "calm", "heatwave", "cold_snap", "storm"]
        if self.weather_pattern not in valid_patterns:
            result.add_error(f"Invalid weather pattern: {self.weather_pattern}")
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "randomSeed": self.random_seed,
            "timeStep": self.time_step,
            "weatherPattern": self.weather_pattern,
            "optimizationEnabled": self.optimization_enabled,
            "optimizationInterval": self.optimization_interval,
            "optimizationWindow": self.optimization_window,
            "smoothingFactor": self.smoothing_factor,
            "historyCeiling": self.history_ceiling,
            "historyRetention": self.history_retention
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        return cls(
            random_seed=data.get("randomSeed"),
            time_step=data.get("timeStep", 1.0),
            weather_pattern=data.get("weatherPattern", "normal"),
            optimization_enabled=data.get("optimizationEnabled", True),
            optimization_interval=data.get("optimizationInterval", 100),
            optimization_window=data.get("optimizationWindow", 100),
            smoothing_factor=data.get("smoothingFactor", 0.1),
            history_ceiling=data.get("historyCeiling", 10000),
            history_retention=data.get("historyRetention", 8760)
        )


@dataclass(frozen=True)
class MonitoringConfig(BaseConfig):
    """Configuration for logging."""
    enabled: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self) -> ConfigValidationResult:
        result = ConfigValidationResult(is_valid=True)

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            result.add_error(f"Invalid log level: {self.log_level}")

        return result

    def setup_logging(self) -> None:
        """Setup the ``harvester`` logger based on this configuration."""
        if not self.enabled:
            return

        logger = logging.getLogger("harvester")
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Orchestrators on worker threads share this logger
        with _LOGGING_LOCK:
            logger.setLevel(getattr(logging, self.log_level))

            # Console handler
            if not logger.handlers:
                console_handler = logging.StreamHandler()
                console_handler.setFormatter(formatter)
                logger.addHandler(console_handler)

            # File handler if specified
            if self.log_file and not any(
                isinstance(h, logging.FileHandler) and h.baseFilename.endswith(self.log_file)
                for h in logger.handlers
            ):
                file_handler = logging.FileHandler(self.log_file)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "logLevel": self.log_level, "logFile": self.log_file}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MonitoringConfig':
        return cls(
            enabled=data.get("enabled", True),
            log_level=data.get("logLevel", "INFO"),
            log_file=data.get("logFile")
        )


@dataclass(frozen=True)
class InstallationConfig(BaseConfig):
    """Complete installation configuration."""

    kinetic: KineticSourceConfig = field(default_factory=KineticSourceConfig)
    thermal: ThermalSourceConfig = field(default_factory=ThermalSourceConfig)
    em: ElectromagneticSourceConfig = field(default_factory=ElectromagneticSourceConfig)
    chemical: ChemicalSourceConfig = field(default_factory=ChemicalSourceConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    maintenance: MaintenanceConfig = field(default_factory=MaintenanceConfig)
    economics: EconomicConfig = field(default_factory=EconomicConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def validate(self) -> ConfigValidationResult:
        """Validate the entire installation configuration."""
        result = ConfigValidationResult(is_valid=True)

        components = [
            ("kinetic", self.kinetic),
            ("thermal", self.thermal),
            ("em", self.em),
            ("chemical", self.chemical),
            ("storage", self.storage),
            ("maintenance", self.maintenance),
            ("economics", self.economics),
            ("simulation", self.simulation),
            ("monitoring", self.monitoring)
        ]

        for component_name, component in components:
            result.extend(component.validate(), prefix=component_name)

        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "kinetic": self.kinetic.to_dict(),
            "thermal": self.thermal.to_dict(),
            "em": self.em.to_dict(),
            "chemical": self.chemical.to_dict(),
            "storage": self.storage.to_dict(),
            "maintenance": self.maintenance.to_dict(),
            "economics": self.economics.to_dict(),
            "simulation": self.simulation.to_dict(),
            "monitoring": self.monitoring.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InstallationConfig':
        """Create configuration from dictionary."""
        return cls(
            kinetic=KineticSourceConfig.from_dict(data.get("kinetic") or {}),
            thermal=ThermalSourceConfig.from_dict(data.get("thermal") or {}),
            em=ElectromagneticSourceConfig.from_dict(data.get("em") or {}),
            chemical=ChemicalSourceConfig.from_dict(data.get("chemical") or {}),
            storage=StorageConfig.from_dict(data.get("storage") or {}),
            maintenance=MaintenanceConfig.from_dict(data.get("maintenance") or {}),
            economics=EconomicConfig.from_dict(data.get("economics") or {}),
            simulation=SimulationConfig.from_dict(data.get("simulation") or {}),
            monitoring=MonitoringConfig.from_dict(data.get("monitoring") or {})
        )
