"""
Tests for the simulation orchestrator.
"""

import sys
from pathlib import Path
import unittest
from unittest import mock

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harvester import SimulationOrchestrator
from harvester.config import InstallationConfig, LocationConfig
from harvester.environment import GeographicData, NearbyInfrastructure
from harvester.exceptions import ConfigurationError, NumericDomainError, SimulationError
from harvester.resources import Modality, POWER_FUNCTIONS


def seeded_config(seed=42, **simulation):
    simulation_section = {"randomSeed": seed}
    simulation_section.update(simulation)
    return InstallationConfig.from_dict({
        "simulation": simulation_section,
        "monitoring": {"logLevel": "WARNING"}
    })


class TestSimulationOrchestrator(unittest.TestCase):
    """End-to-end behaviour of the per-step pipeline."""

    def test_deterministic_runs(self):
        first = SimulationOrchestrator(seeded_config(7)).run_for(30, 24)
        second = SimulationOrchestrator(seeded_config(7)).run_for(30, 24)
        self.assertIsNotNone(first)
        self.assertEqual(first.to_dict(), second.to_dict())
        self.assertEqual(first.period.steps, 720)
        self.assertAlmostEqual(first.period.duration_days, 30.0)

    def test_degenerate_durations(self):
        sim = SimulationOrchestrator(seeded_config())
        self.assertIsNone(sim.run_for(0, 24))
        self.assertIsNone(sim.run_for(1, 0))
        self.assertEqual(len(sim.history), 0)
        self.assertIsNone(sim.generate_comprehensive_report())
        self.assertIsNone(sim.evaluate_economics())

    def test_invalid_duration(self):
        sim = SimulationOrchestrator(seeded_config())
        with self.assertRaises(SimulationError):
            sim.run_for(-1, 24)
        with self.assertRaises(SimulationError):
            sim.run_for(1, 25)

    def test_time_grid(self):
        sim = SimulationOrchestrator(seeded_config())
        sim.run_for(2, 3)
        self.assertEqual([r.time_index for r in sim.history], [0, 1, 2, 24, 25, 26])
        self.assertEqual([r.environment.day_of_year for r in sim.history], [1, 1, 1, 2, 2, 2])
        self.assertEqual([r.environment.hour_of_day for r in sim.history], [0, 1, 2, 0, 1, 2])

    def test_day_of_year_wraps(self):
        sim = SimulationOrchestrator(seeded_config())
        sim.run_for(366, 1)
        self.assertEqual(sim.history[-1].environment.day_of_year, 1)
        self.assertEqual(sim.history[-2].environment.day_of_year, 365)

    def test_maintenance_draw(self):
        config = InstallationConfig.from_dict({
            "storage": {"capacity": 2000},
            "maintenance": {"basePower": 0.4, "capacityScaling": 0.001},
            "monitoring": {"logLevel": "WARNING"}
        })
        sim = SimulationOrchestrator(config)
        record = sim.step_once(0, 1)
        self.assertAlmostEqual(record.maintenance_power, 2.4)
        self.assertAlmostEqual(record.net_power, record.total_power - 2.4)

    def test_record_contents(self):
        sim = SimulationOrchestrator(seeded_config())
        first = sim.step_once(0, 1)
        second = sim.step_once(1, 1)
        self.assertIsNone(first.economics)
        self.assertIsNotNone(second.economics)
        self.assertEqual(set(first.power), {m.value for m in Modality})
        self.assertAlmostEqual(first.total_power, sum(first.power.values()))
        self.assertIs(sim.history[-1], second)

    def test_invariants_over_run(self):
        sim = SimulationOrchestrator(seeded_config(3))
        sim.run_for(20, 24)
        previous_health = 1.0
        for record in sim.history:
            self.assertGreaterEqual(record.storage.soc, 0.0)
            self.assertLessEqual(record.storage.soc, 1.0)
            self.assertLessEqual(record.storage.health_factor, previous_health)
            self.assertGreaterEqual(record.storage.health_factor, 0.5)
            previous_health = record.storage.health_factor
            for power in record.power.values():
                self.assertGreaterEqual(power, 0.0)

    def test_history_truncation(self):
        sim = SimulationOrchestrator(seeded_config(historyCeiling=50, historyRetention=30))
        sim.run_for(3, 24)
        self.assertEqual(sim.history.total_appended, 72)
        self.assertEqual(len(sim.history), 30)
        self.assertEqual(sim.history[-1].time_index, 71)
        report = sim.generate_comprehensive_report()
        self.assertEqual(report.period.steps, 30)

    def test_optimization_cadence(self):
        sim = SimulationOrchestrator(seeded_config(optimizationInterval=24, optimizationWindow=24))
        sim.run_for(1, 23)
        self.assertIsNone(sim.last_optimization)
        sim.step_once(23, 1)
        self.assertIsNotNone(sim.last_optimization)
        self.assertEqual(sim.last_optimization.history_length, 24)
        self.assertIsNotNone(sim.optimizer.best_configuration)

    def test_optimization_disabled(self):
        sim = SimulationOrchestrator(seeded_config(optimizationEnabled=False))
        sim.run_for(10, 24)
        self.assertIsNone(sim.last_optimization)
        self.assertTrue(all(w == 0.25 for w in sim.optimizer.weights.values()))

    def test_domain_error_in_one_modality(self):
        def broken(sample, spec):
            raise NumericDomainError("ratio out of domain")

        sim = SimulationOrchestrator(seeded_config())
        with mock.patch.dict(POWER_FUNCTIONS, {Modality.CHEMICAL: broken}):
            with self.assertLogs("harvester.simulation", level="WARNING"):
                report = sim.run_for(1, 24)
        self.assertEqual(report.period.steps, 24)
        self.assertTrue(all(r.power["chemical"] == 0.0 for r in sim.history))

    def test_should_stop(self):
        sim = SimulationOrchestrator(seeded_config())
        calls = []

        def should_stop():
            calls.append(1)
            return len(calls) > 10

        report = sim.run_for(5, 24, should_stop=should_stop)
        self.assertEqual(len(sim.history), 10)
        self.assertEqual(report.period.steps, 10)

    def test_invalid_configuration(self):
        config = InstallationConfig.from_dict({
            "kinetic": {"area": -1.0},
            "storage": {"capacity": 0}
        })
        with self.assertRaises(ConfigurationError) as ctx:
            SimulationOrchestrator(config)
        message = str(ctx.exception)
        self.assertIn("kinetic", message)
        self.assertIn("storage", message)

    def test_invalid_location(self):
        with self.assertRaises(ConfigurationError):
            SimulationOrchestrator(seeded_config(), location=LocationConfig(lat=120.0))

    def test_location_uses_default_lookup(self):
        sim = SimulationOrchestrator(seeded_config(), location=LocationConfig(lat=48.0, lon=2.0, name="Paris"))
        self.assertTrue(sim.geographic_data.nearby_infrastructure.power_lines)
        self.assertAlmostEqual(sim.sources.electromagnetic.efficiency, 1.0)

    def test_explicit_geographic_data(self):
        site = GeographicData(average_wind_speed=2.0, nearby_infrastructure=NearbyInfrastructure())
        sim = SimulationOrchestrator(seeded_config(), geographic_data=site)
        self.assertAlmostEqual(sim.sources.kinetic.efficiency, 0.35 * 0.7)
        self.assertEqual(sim.environment.base_wind, 2.0)

    def test_evaluate_economics_any_time(self):
        sim = SimulationOrchestrator(seeded_config())
        sim.run_for(2, 24)
        low = sim.evaluate_economics(0.05)
        high = sim.evaluate_economics(0.50)
        self.assertGreaterEqual(high.annual_revenue, low.annual_revenue)
        self.assertEqual(low.total_investment, sim.economics.total_investment)

    def test_status(self):
        sim = SimulationOrchestrator(seeded_config())
        sim.run_for(1, 24)
        status = sim.get_status()
        self.assertEqual(status["steps"], 24)
        self.assertIn("storage", status)


if __name__ == '__main__':
    unittest.main()
