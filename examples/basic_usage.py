"""
Basic usage example of the ambient energy harvester library.
This example demonstrates core functionality including:
- Configuring a multi-source installation
- Running a month-long simulation at a site
- Reading the report and economic evaluation
- Comparing seeds with an ensemble
"""

from harvester import SimulationOrchestrator, InstallationConfig, LocationConfig
from harvester.ensemble import run_ensemble, summarize_ensemble


def main():
    # Create installation configuration
    config = InstallationConfig.from_dict({
        "kinetic": {"area": 2.0, "cost": 350},
        "thermal": {"area": 0.8},
        "em": {"coilLength": 800, "coilArea": 0.3},
        "chemical": {"area": 0.5},
        "storage": {"capacity": 2000, "initialSOC": 0.6},
        "simulation": {"randomSeed": 42, "weatherPattern": "windy"},
        "monitoring": {"logLevel": "INFO", "logFile": "harvester.log"}
    })
    location = LocationConfig(lat=53.35, lon=-6.26, name="Dublin Docklands")

    sim = SimulationOrchestrator(config, location=location)

    print("Running 30 day simulation...")
    print(f"Site: {location.name}")
    print(f"Total investment: {sim.economics.total_investment:.2f}")

    report = sim.run_for(30)

    print("\nPerformance:")
    print(f"Average net power: {report.performance.average_net_power:.2f} W")
    print(f"Energy harvested: {report.performance.total_energy:.2f} kWh")
    print(f"Positive steps: {report.performance.positive_fraction:.1%}")
    print(f"Viable: {report.performance.viable}")

    print("\nSources:")
    for name, power in report.sources.average_power.items():
        print(f"  {name}: {power:.3f} W")
    print(f"Dominant source: {report.sources.dominant_source}")
    print(f"Diversity index: {report.sources.diversity_index:.2f}")

    print("\nStorage:")
    print(f"Average SOC: {report.storage.average_soc:.1%}")
    print(f"Health: {report.storage.health_factor:.3f}")

    if report.economics:
        print("\nEconomics:")
        print(f"NPV: {report.economics.npv:.2f}")
        print(f"Payback: {report.economics.payback_period}")

    # Value the same output at a higher tariff
    premium = sim.evaluate_economics(0.40)
    print(f"NPV at 0.40/kWh: {premium.npv:.2f}")

    print("\nRecommendations:")
    for recommendation in report.recommendations:
        print(f"- {recommendation}")

    # Compare several weather realisations
    print("\nRunning ensemble...")
    seeds = [1, 2, 3, 4]
    reports = run_ensemble(config, seeds, duration_days=7, concurrency="thread")
    print(summarize_ensemble(reports, seeds).to_string(index=False))


if __name__ == "__main__":
    main()
