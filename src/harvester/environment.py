"""Synthetic environment generation for harvester simulations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional
import logging
import numpy as np

from .config import LocationConfig


class WeatherPattern(str, Enum):
    """Macro weather regimes layered over the daily and annual cycles."""
    NORMAL = "normal"
    WINDY = "windy"
    CALM = "calm"
    HEATWAVE = "heatwave"
    COLD_SNAP = "cold_snap"
    STORM = "storm"


# wind, vibration, temperature offset (°C), thermal gradient, magnetic field
_PATTERN_MODIFIERS: Dict[WeatherPattern, Dict[str, float]] = {
    WeatherPattern.NORMAL: {},
    WeatherPattern.WINDY: {"wind": 1.6},
    WeatherPattern.CALM: {"wind": 0.4, "vibration": 0.8},
    WeatherPattern.HEATWAVE: {"temperature": 8.0, "gradient": 1.4},
    WeatherPattern.COLD_SNAP: {"temperature": -10.0, "gradient": 0.7},
    WeatherPattern.STORM: {"wind": 2.2, "field": 1.2},
}


@dataclass(frozen=True)
class SoilComposition:
    """Soil chemistry at the site."""
    ph: float = 7.0
    conductivity: float = 0.5  # S/m


@dataclass(frozen=True)
class NearbyInfrastructure:
    """Man-made sources of vibration, heat and stray fields near the site."""
    power_lines: bool = False
    major_roads: bool = False
    buildings: bool = False
    industrial_activity: bool = False


@dataclass(frozen=True)
class GeographicData:
    """Site record supplied once by the external location lookup."""
    average_wind_speed: float = 5.0  # m/s
    average_temperature: float = 15.0  # °C
    average_solar_radiation: float = 200.0  # W/m²
    magnetic_declination: float = 0.0  # degrees
    soil_composition: SoilComposition = field(default_factory=SoilComposition)
    nearby_infrastructure: NearbyInfrastructure = field(default_factory=NearbyInfrastructure)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeographicData':
        """Create from the camelCase record returned by a location lookup."""
        soil = data.get("soilComposition") or {}
        infra = data.get("nearbyInfrastructure") or {}
        return cls(
            average_wind_speed=data.get("averageWindSpeed", 5.0),
            average_temperature=data.get("averageTemperature", 15.0),
            average_solar_radiation=data.get("averageSolarRadiation", 200.0),
            magnetic_declination=data.get("magneticDeclination", 0.0),
            soil_composition=SoilComposition(
                ph=soil.get("pH", 7.0),
                conductivity=soil.get("conductivity", 0.5)
            ),
            nearby_infrastructure=NearbyInfrastructure(
                power_lines=bool(infra.get("powerLines", False)),
                major_roads=bool(infra.get("majorRoads", False)),
                buildings=bool(infra.get("buildings", False)),
                industrial_activity=bool(infra.get("industrialActivity", False))
            )
        )


def default_geographic_lookup(location: Optional[LocationConfig] = None) -> GeographicData:
    """Fixed-shape stand-in for an external geographic data service.

    Returns the same urban-fringe record for every location: moderate wind,
    temperate climate, neutral soil, with power lines and roads nearby.
    """
    logging.getLogger("harvester.environment").debug(
        f"Using default geographic data for {location.name if location else 'unnamed site'}"
    )
    return GeographicData(
        average_wind_speed=5.5,
        average_temperature=15.0,
        average_solar_radiation=180.0,
        magnetic_declination=2.5,
        soil_composition=SoilComposition(ph=6.5, conductivity=0.3),
        nearby_infrastructure=NearbyInfrastructure(
            power_lines=True,
            major_roads=True,
            buildings=True,
            industrial_activity=False
        )
    )


@dataclass(frozen=True)
class EnvironmentSample:
    """Environmental readings for a single time step."""
    time_index: int
    day_of_year: int
    hour_of_day: int
    wind_speed: Optional[float] = None  # m/s
    vibration_amplitude: Optional[float] = None  # m
    vibration_frequency: Optional[float] = None  # Hz
    thermal_gradient: Optional[float] = None  # K
    ambient_temperature: Optional[float] = None  # °C
    magnetic_field: Optional[float] = None  # T
    relative_velocity: Optional[float] = None  # m/s
    concentration_ratio: Optional[float] = None
    weather_pattern: WeatherPattern = WeatherPattern.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time_index": self.time_index,
            "day_of_year": self.day_of_year,
            "hour_of_day": self.hour_of_day,
            "wind_speed": self.wind_speed,
            "vibration_amplitude": self.vibration_amplitude,
            "vibration_frequency": self.vibration_frequency,
            "thermal_gradient": self.thermal_gradient,
            "ambient_temperature": self.ambient_temperature,
            "magnetic_field": self.magnetic_field,
            "relative_velocity": self.relative_velocity,
            "concentration_ratio": self.concentration_ratio,
            "weather_pattern": self.weather_pattern.value
        }


class EnvironmentModel:
    """Generates reproducible environmental conditions for simulation.

    Each quantity follows a deterministic daily (24 h) and/or annual (365 d)
    sinusoid derived from the site averages, then receives uniform jitter
    proportional to the signal so that the macro-trend is learnable but never
    exactly repeated.
    """

    BASE_VIBRATION_AMPLITUDE = 0.002  # m
    BASE_VIBRATION_FREQUENCY = 10.0  # Hz
    BASE_MAGNETIC_FIELD = 5e-4  # T
    BASE_RELATIVE_VELOCITY = 1.5  # m/s
    MIN_CONCENTRATION_RATIO = 0.05

    def __init__(
        self,
        seed: Optional[int] = None,
        site: Optional[GeographicData] = None,
        rng: Optional[np.random.RandomState] = None
    ):
        """Initialize environment model with a seed or an injected random state."""
        self.rng = rng if rng is not None else np.random.RandomState(seed)
        self.site = site or GeographicData()
        self.logger = logging.getLogger("harvester.environment")

        self.base_wind = max(0.0, self.site.average_wind_speed)
        self.base_temp = self.site.average_temperature
        self.base_field = self.BASE_MAGNETIC_FIELD * (
            2.0 if self.site.nearby_infrastructure.power_lines else 1.0
        )

    def _jitter(self, value: float, fraction: float) -> float:
        return value * (1.0 + fraction * self.rng.uniform(-1.0, 1.0))

    def sample(
        self,
        time_index: int,
        day_of_year: int,
        weather_pattern: WeatherPattern = WeatherPattern.NORMAL
    ) -> EnvironmentSample:
        """Generate environmental conditions for the given time index."""
        pattern = WeatherPattern(weather_pattern)
        modifiers = _PATTERN_MODIFIERS[pattern]

        hour = int(time_index) % 24
        daily = 2 * np.pi * hour / 24
        annual = 2 * np.pi * (day_of_year % 365) / 365

        # Wind peaks mid-afternoon and in winter
        wind = (
            self.base_wind *
            (1 + 0.3 * np.sin(daily - np.pi / 2)) *
            (1 + 0.2 * np.cos(annual)) *
            modifiers.get("wind", 1.0)
        )
        wind = max(0.0, self._jitter(wind, 0.25))

        # Traffic and machinery vibration during the day
        amplitude = (
            self.BASE_VIBRATION_AMPLITUDE *
            (1 + 0.5 * max(0.0, np.sin(daily - np.pi / 2))) *
            modifiers.get("vibration", 1.0)
        )
        amplitude = max(0.0, self._jitter(amplitude, 0.2))
        frequency = max(1.0, self._jitter(self.BASE_VIBRATION_FREQUENCY + 5 * np.sin(daily), 0.1))

        temperature = (
            self.base_temp +
            10 * np.sin(annual - np.pi / 2) +
            5 * np.sin(daily - np.pi / 2) +
            modifiers.get("temperature", 0.0) +
            self.rng.uniform(-1.5, 1.5)
        )

        gradient = (3 + 12 * max(0.0, np.sin(daily - np.pi / 2))) * modifiers.get("gradient", 1.0)
        gradient = max(0.0, self._jitter(gradient, 0.3))

        magnetic_field = self.base_field * (1 + 0.3 * np.sin(daily)) * modifiers.get("field", 1.0)
        magnetic_field = max(0.0, self._jitter(magnetic_field, 0.1))

        velocity = max(0.0, self._jitter(self.BASE_RELATIVE_VELOCITY * (1 + 0.5 * np.sin(daily)), 0.2))

        ratio = max(self.MIN_CONCENTRATION_RATIO, self._jitter(2.0 + np.sin(annual), 0.1))

        return EnvironmentSample(
            time_index=int(time_index),
            day_of_year=int(day_of_year),
            hour_of_day=hour,
            wind_speed=float(wind),
            vibration_amplitude=float(amplitude),
            vibration_frequency=float(frequency),
            thermal_gradient=float(gradient),
            ambient_temperature=float(temperature),
            magnetic_field=float(magnetic_field),
            relative_velocity=float(velocity),
            concentration_ratio=float(ratio),
            weather_pattern=pattern
        )
