"""Power generation physics for the four harvesting modalities."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterator, Tuple
import math

from .config import (
    InstallationConfig, KineticSourceConfig, ThermalSourceConfig,
    ElectromagneticSourceConfig, ChemicalSourceConfig
)
from .environment import EnvironmentSample, GeographicData
from .exceptions import NumericDomainError

AIR_DENSITY = 1.225  # kg/m³ at sea level, 15°C
GAS_CONSTANT = 8.314  # J/(mol·K)
FARADAY = 96485.0  # C/mol
KELVIN_OFFSET = 273.15
REFERENCE_TEMPERATURE = 25.0  # °C
CARNOT_CAP = 0.3
TEG_MODULE_AREA = 0.01  # m² footprint of one thermoelectric module
MIN_VIBRATION_AMPLITUDE = 1e-4  # m


class Modality(str, Enum):
    """Harvesting modalities, declared in tie-breaking priority order."""
    KINETIC = "kinetic"
    THERMAL = "thermal"
    ELECTROMAGNETIC = "electromagnetic"
    CHEMICAL = "chemical"


@dataclass(frozen=True)
class HarvestingSources:
    """The installed harvester for every modality."""
    kinetic: KineticSourceConfig = field(default_factory=KineticSourceConfig)
    thermal: ThermalSourceConfig = field(default_factory=ThermalSourceConfig)
    electromagnetic: ElectromagneticSourceConfig = field(default_factory=ElectromagneticSourceConfig)
    chemical: ChemicalSourceConfig = field(default_factory=ChemicalSourceConfig)

    @classmethod
    def from_config(cls, config: InstallationConfig) -> 'HarvestingSources':
        return cls(
            kinetic=config.kinetic,
            thermal=config.thermal,
            electromagnetic=config.em,
            chemical=config.chemical
        )

    def get(self, modality: Modality):
        return getattr(self, Modality(modality).value)

    def items(self) -> Iterator[Tuple[Modality, object]]:
        for modality in Modality:
            yield modality, self.get(modality)

    def hardware_cost(self) -> float:
        """Harvester hardware cost: area times unit cost over all modalities."""
        return sum(spec.area * spec.cost for _, spec in self.items())


def _value(reading, default: float) -> float:
    """Resolve a possibly missing reading to a physically neutral default."""
    if reading is None:
        return default
    reading = float(reading)
    return reading if math.isfinite(reading) else default


def kinetic_power(sample: EnvironmentSample, spec: KineticSourceConfig) -> float:
    """Wind turbine plus vibration harvester output in W."""
    wind_speed = max(0.0, _value(sample.wind_speed, 0.0))
    amplitude = max(0.0, _value(sample.vibration_amplitude, 0.0))
    frequency = max(0.0, _value(sample.vibration_frequency, 0.0))

    if spec.cut_in_speed <= wind_speed <= spec.cut_out_speed and wind_speed > 0:
        wind_power = 0.5 * AIR_DENSITY * spec.area * wind_speed ** 3 * spec.efficiency
    else:
        wind_power = 0.0

    if amplitude >= MIN_VIBRATION_AMPLITUDE and frequency > 0:
        omega = 2 * math.pi * frequency
        vibration_power = 0.5 * spec.proof_mass * amplitude ** 2 * omega ** 3 * spec.efficiency
    else:
        vibration_power = 0.0

    return wind_power + vibration_power


def thermal_power(sample: EnvironmentSample, spec: ThermalSourceConfig) -> float:
    """Thermoelectric output in W, bounded by a capped Carnot efficiency."""
    gradient = max(0.0, _value(sample.thermal_gradient, 0.0))
    if gradient < spec.min_gradient or gradient == 0:
        return 0.0

    ambient = _value(sample.ambient_temperature, REFERENCE_TEMPERATURE)
    hot_side = ambient + KELVIN_OFFSET + gradient
    if hot_side <= 0:
        return 0.0

    voltage = spec.seebeck_coeff * gradient
    theoretical = voltage ** 2 / (4 * spec.resistance)
    carnot = gradient / hot_side
    conversion = min(spec.efficiency * carnot, CARNOT_CAP)
    modules = spec.area / TEG_MODULE_AREA
    return theoretical * conversion * modules


def electromagnetic_power(sample: EnvironmentSample, spec: ElectromagneticSourceConfig) -> float:
    """Induction output in W from a conductor moving through a stray field.

    The sample's relative velocity is taken as a fraction of the nominal
    ambient motion, scaled to the coil's rated velocity.
    """
    field_strength = abs(_value(sample.magnetic_field, 0.0))
    if field_strength < spec.min_field or field_strength == 0:
        return 0.0

    motion = max(0.0, _value(sample.relative_velocity, 0.0))
    velocity = spec.velocity * motion / 1.5
    voltage = field_strength * spec.coil_length * velocity
    return voltage ** 2 / spec.resistance * spec.efficiency


def chemical_power(sample: EnvironmentSample, spec: ChemicalSourceConfig) -> float:
    """Concentration-cell output in W (magnitude only)."""
    ratio = _value(sample.concentration_ratio, 1.0)
    if ratio <= 0:
        raise NumericDomainError(f"Concentration ratio must be positive, got {ratio}")

    gradient = math.log(ratio)
    if abs(gradient) < spec.min_gradient or gradient == 0:
        return 0.0

    temperature = _value(sample.ambient_temperature, REFERENCE_TEMPERATURE) + KELVIN_OFFSET
    voltage = GAS_CONSTANT * max(temperature, 0.0) / FARADAY * gradient
    current = (
        spec.ion_mobility * FARADAY * spec.reference_concentration *
        gradient * spec.area / spec.membrane_thickness
    )
    return abs(voltage * current * spec.efficiency)


POWER_FUNCTIONS = {
    Modality.KINETIC: kinetic_power,
    Modality.THERMAL: thermal_power,
    Modality.ELECTROMAGNETIC: electromagnetic_power,
    Modality.CHEMICAL: chemical_power,
}


def compute_all(sample: EnvironmentSample, sources: HarvestingSources) -> Dict[Modality, float]:
    """Instantaneous power per modality. Propagates NumericDomainError from the chemical model."""
    return {
        modality: POWER_FUNCTIONS[modality](sample, spec)
        for modality, spec in sources.items()
    }


def apply_location_adjustments(sources: HarvestingSources, site: GeographicData) -> HarvestingSources:
    """Scale modality efficiencies once from the site record.

    Windy sites (>6 m/s) boost kinetic output and sheltered sites (<3 m/s)
    penalise it; nearby infrastructure raises vibration, stray-field and waste
    heat availability; soil pH away from neutral strengthens concentration
    gradients. Adjusted efficiencies are capped at 1.
    """
    kinetic = 1.0
    thermal = 1.0
    em = 1.0
    chemical = 1.0

    if site.average_wind_speed > 6:
        kinetic *= 1.2
    elif site.average_wind_speed < 3:
        kinetic *= 0.7

    infra = site.nearby_infrastructure
    if infra.major_roads:
        kinetic *= 1.1
    if infra.power_lines:
        em *= 1.5
    if infra.industrial_activity:
        em *= 1.3
        thermal *= 1.2
    if infra.buildings:
        thermal *= 1.1

    chemical *= 1 + 0.1 * abs(site.soil_composition.ph - 7.0)

    def scaled(spec, factor):
        return replace(spec, efficiency=min(1.0, spec.efficiency * factor))

    return HarvestingSources(
        kinetic=scaled(sources.kinetic, kinetic),
        thermal=scaled(sources.thermal, thermal),
        electromagnetic=scaled(sources.electromagnetic, em),
        chemical=scaled(sources.chemical, chemical)
    )
