"""
Tests for installation configuration, validation and file round-trips.
"""

import sys
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor
import logging
import tempfile
import unittest

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harvester.config import (
    ConfigFormat, InstallationConfig, KineticSourceConfig, StorageConfig,
    EconomicConfig, SimulationConfig, MonitoringConfig, LocationConfig, MaintenanceConfig
)
from harvester.exceptions import ConfigurationError
from harvester.validation import SourceValidator, check


class TestInstallationConfig(unittest.TestCase):
    """Defaults, validation and serialisation."""

    def test_defaults_are_valid(self):
        result = InstallationConfig().validate()
        self.assertTrue(result.is_valid, result.errors)
        self.assertEqual(result.errors, [])

    def test_from_partial_record(self):
        config = InstallationConfig.from_dict({
            "kinetic": {"area": 2.5},
            "storage": {"capacity": 5000, "initialSOC": 0.2},
            "maintenance": {"basePower": 1.0}
        })
        self.assertEqual(config.kinetic.area, 2.5)
        self.assertEqual(config.kinetic.efficiency, 0.35)
        self.assertEqual(config.storage.capacity, 5000)
        self.assertEqual(config.storage.initial_soc, 0.2)
        self.assertEqual(config.maintenance.base_power, 1.0)
        self.assertEqual(config.thermal, InstallationConfig().thermal)

    def test_null_sections_fall_back_to_defaults(self):
        config = InstallationConfig.from_dict({"kinetic": None, "storage": None})
        self.assertEqual(config, InstallationConfig())

    def test_collects_every_error(self):
        config = InstallationConfig.from_dict({
            "kinetic": {"area": -1.0, "efficiency": 1.5},
            "em": {"resistance": 0},
            "storage": {"capacity": 0}
        })
        result = config.validate()
        self.assertFalse(result.is_valid)
        self.assertEqual(len(result.errors), 4)
        self.assertTrue(any(e.startswith("kinetic: area") for e in result.errors))
        self.assertTrue(any(e.startswith("kinetic: efficiency") for e in result.errors))
        self.assertTrue(any(e.startswith("em: resistance") for e in result.errors))
        self.assertTrue(any(e.startswith("storage: capacity") for e in result.errors))

    def test_validate_or_raise(self):
        config = InstallationConfig.from_dict({"thermal": {"area": 0}})
        with self.assertRaises(ConfigurationError) as ctx:
            config.validate_or_raise()
        self.assertIn("thermal: area", str(ctx.exception))

    def test_storage_rules(self):
        self.assertFalse(StorageConfig(efficiency=0.0).validate().is_valid)
        self.assertFalse(StorageConfig(initial_soc=1.2).validate().is_valid)
        result = StorageConfig(max_charge_rate=0.0, max_discharge_rate=0.0).validate()
        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.warnings), 1)

    def test_kinetic_cut_out_must_exceed_cut_in(self):
        self.assertFalse(KineticSourceConfig(cut_in_speed=10.0, cut_out_speed=5.0).validate().is_valid)

    def test_booleans_are_not_numbers(self):
        self.assertFalse(KineticSourceConfig(area=True).validate().is_valid)

    def test_non_finite_rejected(self):
        self.assertFalse(KineticSourceConfig(area=float("inf")).validate().is_valid)
        self.assertFalse(EconomicConfig(discount_rate=float("nan")).validate().is_valid)

    def test_simulation_rules(self):
        self.assertFalse(SimulationConfig(weather_pattern="monsoon").validate().is_valid)
        self.assertFalse(SimulationConfig(history_ceiling=100, history_retention=200).validate().is_valid)
        self.assertFalse(SimulationConfig(time_step=0).validate().is_valid)

    def test_monitoring_log_level(self):
        self.assertFalse(MonitoringConfig(log_level="VERBOSE").validate().is_valid)

    def test_setup_logging_from_threads_adds_one_console_handler(self):
        logger = logging.getLogger("harvester")
        saved_handlers, saved_level = list(logger.handlers), logger.level
        for handler in saved_handlers:
            logger.removeHandler(handler)
        try:
            monitoring = MonitoringConfig(log_level="WARNING")
            with ThreadPoolExecutor(max_workers=8) as executor:
                list(executor.map(lambda _: monitoring.setup_logging(), range(64)))
            self.assertEqual(len(logger.handlers), 1)
            self.assertEqual(logger.level, logging.WARNING)
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
            for handler in saved_handlers:
                logger.addHandler(handler)
            logger.setLevel(saved_level)

    def test_location(self):
        self.assertTrue(LocationConfig(lat=45.0, lon=-120.0, name="Site").validate().is_valid)
        self.assertFalse(LocationConfig(lat=91.0).validate().is_valid)
        self.assertFalse(LocationConfig(lon=-181.0).validate().is_valid)

    def test_maintenance_draw(self):
        self.assertAlmostEqual(MaintenanceConfig().draw(1000.0), 1.0)

    def test_dict_round_trip(self):
        config = InstallationConfig.from_dict({
            "chemical": {"area": 0.6},
            "simulation": {"randomSeed": 5, "weatherPattern": "storm"}
        })
        self.assertEqual(InstallationConfig.from_dict(config.to_dict()), config)

    def test_yaml_round_trip(self):
        config = InstallationConfig.from_dict({"kinetic": {"area": 3.0}, "simulation": {"randomSeed": 1}})
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "installation.yaml"
            config.save_to_file(path, ConfigFormat.YAML)
            loaded = InstallationConfig.load_from_file(path)
        self.assertEqual(loaded, config)

    def test_json_round_trip(self):
        config = InstallationConfig.from_dict({"storage": {"type": "supercapacitor", "capacity": 50}})
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "installation.json"
            config.save_to_file(path, ConfigFormat.JSON)
            loaded = InstallationConfig.load_from_file(path)
        self.assertEqual(loaded, config)

    def test_empty_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.yaml"
            path.write_text("")
            self.assertEqual(InstallationConfig.load_from_file(path), InstallationConfig())

    def test_missing_and_unsupported_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                InstallationConfig.load_from_file(Path(tmp) / "missing.yaml")
            path = Path(tmp) / "config.ini"
            path.write_text("[x]")
            with self.assertRaises(ValueError):
                InstallationConfig.load_from_file(path)

    def test_merge(self):
        merged = InstallationConfig().merge({"storage": {"capacity": 3000}})
        self.assertEqual(merged.storage.capacity, 3000)
        self.assertEqual(merged.storage.efficiency, 0.95)
        self.assertEqual(merged.kinetic, KineticSourceConfig())


class TestValidators(unittest.TestCase):
    """Validator helpers."""

    def test_check_returns_labelled_message(self):
        self.assertIsNone(check(SourceValidator.validate_positive, 1.0, "area"))
        message = check(SourceValidator.validate_positive, 0.0, "area")
        self.assertTrue(message.startswith("area:"))

    def test_efficiency_bounds(self):
        self.assertIsNone(check(SourceValidator.validate_efficiency, 0.0, "eff"))
        self.assertIsNone(check(SourceValidator.validate_efficiency, 1.0, "eff"))
        self.assertIsNotNone(check(SourceValidator.validate_efficiency, -0.1, "eff"))
        self.assertIsNotNone(check(SourceValidator.validate_efficiency, "high", "eff"))


if __name__ == '__main__':
    unittest.main()
