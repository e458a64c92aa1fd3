"""
Tests for the per-modality power generation models.
"""

import sys
from pathlib import Path
import math
import unittest

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harvester.config import (
    InstallationConfig, KineticSourceConfig, ThermalSourceConfig,
    ElectromagneticSourceConfig, ChemicalSourceConfig
)
from harvester.environment import EnvironmentSample, GeographicData, NearbyInfrastructure, SoilComposition
from harvester.exceptions import NumericDomainError
from harvester.resources import (
    Modality, HarvestingSources, kinetic_power, thermal_power, electromagnetic_power,
    chemical_power, compute_all, apply_location_adjustments
)


def sample(**readings):
    base = dict(
        time_index=0, day_of_year=1, hour_of_day=0,
        wind_speed=0.0, vibration_amplitude=0.0, vibration_frequency=0.0,
        thermal_gradient=0.0, ambient_temperature=25.0, magnetic_field=0.0,
        relative_velocity=0.0, concentration_ratio=1.0
    )
    base.update(readings)
    return EnvironmentSample(**base)


class TestPowerModels(unittest.TestCase):
    """Physics of each harvesting modality."""

    def test_quiet_conditions_produce_no_power(self):
        powers = compute_all(sample(), HarvestingSources())
        self.assertEqual(set(powers), set(Modality))
        for modality, power in powers.items():
            self.assertEqual(power, 0.0, modality)

    def test_missing_readings_use_neutral_defaults(self):
        empty = EnvironmentSample(time_index=0, day_of_year=1, hour_of_day=0)
        powers = compute_all(empty, HarvestingSources())
        self.assertTrue(all(p == 0.0 for p in powers.values()))

    def test_kinetic_wind(self):
        spec = KineticSourceConfig()
        expected = 0.5 * 1.225 * 1.0 * 10.0 ** 3 * 0.35
        self.assertAlmostEqual(kinetic_power(sample(wind_speed=10.0), spec), expected)

    def test_kinetic_cut_in_and_cut_out(self):
        spec = KineticSourceConfig()
        self.assertEqual(kinetic_power(sample(wind_speed=2.9), spec), 0.0)
        self.assertEqual(kinetic_power(sample(wind_speed=30.0), spec), 0.0)
        self.assertGreater(kinetic_power(sample(wind_speed=3.0), spec), 0.0)

    def test_kinetic_vibration(self):
        spec = KineticSourceConfig()
        omega = 2 * math.pi * 10.0
        expected = 0.5 * 0.1 * 0.002 ** 2 * omega ** 3 * 0.35
        power = kinetic_power(sample(vibration_amplitude=0.002, vibration_frequency=10.0), spec)
        self.assertAlmostEqual(power, expected)

    def test_kinetic_vibration_below_threshold(self):
        spec = KineticSourceConfig()
        power = kinetic_power(sample(vibration_amplitude=5e-5, vibration_frequency=10.0), spec)
        self.assertEqual(power, 0.0)

    def test_thermal(self):
        spec = ThermalSourceConfig()
        carnot = 10.0 / (25.0 + 273.15 + 10.0)
        expected = (0.2 * 10.0) ** 2 / (4 * 2.0) * min(0.5 * carnot, 0.3) * (0.5 / 0.01)
        power = thermal_power(sample(thermal_gradient=10.0), spec)
        self.assertAlmostEqual(power, expected)

    def test_thermal_below_min_gradient(self):
        self.assertEqual(thermal_power(sample(thermal_gradient=0.5), ThermalSourceConfig()), 0.0)

    def test_thermal_conversion_is_capped(self):
        spec = ThermalSourceConfig(efficiency=1.0)
        gradient = 500.0
        expected = (0.2 * gradient) ** 2 / 8.0 * 0.3 * 50
        self.assertAlmostEqual(thermal_power(sample(thermal_gradient=gradient), spec), expected)

    def test_electromagnetic(self):
        spec = ElectromagneticSourceConfig()
        power = electromagnetic_power(sample(magnetic_field=5e-4, relative_velocity=1.5), spec)
        voltage = 5e-4 * 500.0 * 1.5
        self.assertAlmostEqual(power, voltage ** 2 / 5.0 * 0.8)

    def test_electromagnetic_below_min_field(self):
        spec = ElectromagneticSourceConfig()
        power = electromagnetic_power(sample(magnetic_field=5e-6, relative_velocity=1.5), spec)
        self.assertEqual(power, 0.0)

    def test_chemical_rejects_non_positive_ratio(self):
        spec = ChemicalSourceConfig()
        with self.assertRaises(NumericDomainError):
            chemical_power(sample(concentration_ratio=0.0), spec)
        with self.assertRaises(NumericDomainError):
            chemical_power(sample(concentration_ratio=-2.0), spec)

    def test_chemical_symmetric_in_gradient_sign(self):
        spec = ChemicalSourceConfig()
        up = chemical_power(sample(concentration_ratio=math.e), spec)
        down = chemical_power(sample(concentration_ratio=1 / math.e), spec)
        self.assertGreater(up, 0.0)
        self.assertAlmostEqual(up, down)

    def test_chemical_value(self):
        spec = ChemicalSourceConfig()
        temperature = 25.0 + 273.15
        voltage = 8.314 * temperature / 96485.0
        current = 5e-8 * 96485.0 * 10.0 * 0.3 / 1e-3
        power = chemical_power(sample(concentration_ratio=math.e), spec)
        self.assertAlmostEqual(power, voltage * current * 0.5)

    def test_compute_all_propagates_domain_error(self):
        with self.assertRaises(NumericDomainError):
            compute_all(sample(concentration_ratio=0.0), HarvestingSources())


class TestHarvestingSources(unittest.TestCase):
    """Installed source bundle and site adjustments."""

    def test_from_config(self):
        config = InstallationConfig.from_dict({"kinetic": {"area": 2.0}, "em": {"coilArea": 0.4}})
        sources = HarvestingSources.from_config(config)
        self.assertEqual(sources.kinetic.area, 2.0)
        self.assertEqual(sources.get(Modality.ELECTROMAGNETIC).area, 0.4)
        self.assertEqual([m for m, _ in sources.items()], list(Modality))

    def test_hardware_cost(self):
        # 1.0*400 + 0.5*800 + 0.2*600 + 0.3*300
        self.assertAlmostEqual(HarvestingSources().hardware_cost(), 1010.0)

    def test_location_adjustments(self):
        site = GeographicData(
            average_wind_speed=7.0,
            soil_composition=SoilComposition(ph=5.0),
            nearby_infrastructure=NearbyInfrastructure(power_lines=True, industrial_activity=True)
        )
        adjusted = apply_location_adjustments(HarvestingSources(), site)
        self.assertAlmostEqual(adjusted.kinetic.efficiency, 0.35 * 1.2)
        self.assertAlmostEqual(adjusted.thermal.efficiency, 0.5 * 1.2)
        self.assertEqual(adjusted.electromagnetic.efficiency, 1.0)
        self.assertAlmostEqual(adjusted.chemical.efficiency, 0.5 * 1.2)

    def test_sheltered_site_penalises_kinetic(self):
        site = GeographicData(average_wind_speed=2.0)
        adjusted = apply_location_adjustments(HarvestingSources(), site)
        self.assertAlmostEqual(adjusted.kinetic.efficiency, 0.35 * 0.7)
        self.assertAlmostEqual(adjusted.thermal.efficiency, 0.5)

    def test_adjustments_do_not_mutate_input(self):
        sources = HarvestingSources()
        apply_location_adjustments(sources, GeographicData(average_wind_speed=10.0))
        self.assertEqual(sources.kinetic.efficiency, 0.35)


if __name__ == '__main__':
    unittest.main()
