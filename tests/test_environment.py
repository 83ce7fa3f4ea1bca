import math
import random
import unittest
from datetime import datetime

import pytest

from aquatools.environment import (
    AerationInputs,
    EnergyInputs,
    EnvironmentalInputs,
    Equipment,
    FertilizerInputs,
    MonitorInputs,
    WeatherInputs,
    analyze_energy,
    analyze_environment,
    analyze_weather_impact,
    calculate_aeration,
    calculate_fertilizer,
    cloud_cover_percent,
    limit_status,
    monitor_environment,
    nutrient_rows,
    readable_name,
)


def test_readable_name():
    assert readable_name("dissolvedOxygen") == "dissolved oxygen"
    assert readable_name("ph") == "ph"


class TestEnvironmentalMonitor(unittest.TestCase):
    def test_critical_site(self):
        form = {"temperature": 34, "dissolvedOxygen": 2, "weatherCondition": "Storm", "rainfall": 60}
        result = analyze_environment(EnvironmentalInputs.from_form(form))
        self.assertEqual(result.risk_level, 55)
        self.assertEqual(result.status, "Critical")
        self.assertEqual(result.impacted_parameters, ["temperature", "dissolvedOxygen"])
        self.assertEqual(result.issues[0], "temperature outside optimal range: 34°C")
        self.assertEqual(result.issues[1], "Critical dissolved oxygen level: 2mg/L")
        self.assertIn("Consider emergency water exchange", result.recommendations)

    def test_optimal_site(self):
        result = analyze_environment(EnvironmentalInputs.from_form({"temperature": 28, "ph": 7.2}))
        self.assertEqual(result.status, "Optimal")
        self.assertEqual(result.risk_level, 0)
        self.assertEqual(result.issues, [])
        self.assertEqual(len(result.recommendations), 3)

    def test_needs_a_reading(self):
        with self.assertRaises(ValueError):
            EnvironmentalInputs.from_form({"weatherCondition": "Storm"})


def test_limit_status():
    limits = {"min": 5, "max": 8, "critical_low": 3, "critical_high": 12}
    assert limit_status(6, limits) == "Optimal"
    assert limit_status(4, limits) == "Warning"
    assert limit_status(13, limits) == "Critical"


def test_environment_monitor_bands_and_history():
    inputs = MonitorInputs.from_form({"temperature": 28, "pH": 9.2})
    report = monitor_environment(inputs, rng=random.Random(5), now=datetime(2025, 6, 1, 12, 0))
    statuses = {r.parameter: r.status for r in report.results}
    assert statuses == {"temperature": "Optimal", "pH": "Critical"}
    assert report.results[1].recommendations[0] == "Immediate action required for pH"
    assert len(report.history) == 7
    assert report.history[0]["time"] == "06:00"
    assert report.history[-1]["time"] == "12:00"
    for point in report.history:
        assert set(point) == {"time", "temperature", "pH"}
        assert abs(point["temperature"] - 28) <= 1


class TestEnergy(unittest.TestCase):
    def _inputs(self, **overrides):
        form = {
            "equipment": [{"name": "aerator", "power": 1, "hours": 24, "quantity": 2}],
            "electricityRate": 0.1,
        }
        form.update(overrides)
        return EnergyInputs.from_form(form)

    def test_consumption_and_costs(self):
        result = analyze_energy(self._inputs())
        self.assertAlmostEqual(result.daily_consumption, 64.0)
        self.assertAlmostEqual(result.monthly_consumption, 1920.0)
        self.assertAlmostEqual(result.annual_consumption, 23040.0)
        self.assertAlmostEqual(result.total_cost, 384.0)
        self.assertAlmostEqual(result.peak_cost, 64 * 0.1 * 1.2 * 30)
        self.assertAlmostEqual(result.co2_emissions, 11520.0)
        measures = [m.measure for m in result.savings_potential]
        self.assertEqual(measures, ["Equipment Upgrades", "Peak Hour Shifting"])
        upgrade = result.savings_potential[0]
        self.assertAlmostEqual(upgrade.savings, (1 / 0.75 - 1 / 0.85) * 48 * 0.1 * 30 * 12)
        self.assertEqual(upgrade.cost, 1000)
        self.assertIn("85%", result.equipment_efficiency[0].recommendation)
        self.assertEqual(len(result.recommendations), 3)
        self.assertEqual(result.recommendations[1:], [
            "Implement regular maintenance schedule for all equipment",
            "Monitor and record energy consumption patterns",
        ])

    def test_efficient_equipment_with_solar_and_backup(self):
        equipment = [{"name": "aerator", "power": 1, "hours": 24, "efficiency": 0.9}]
        result = analyze_energy(self._inputs(equipment=equipment, solarPotential=True, backupRequired=True))
        self.assertEqual(result.equipment_efficiency[0].recommendation, "aerator is operating at optimal efficiency")
        self.assertEqual(
            [m.measure for m in result.savings_potential], ["Solar Installation", "Peak Hour Shifting"]
        )
        self.assertIn("Install energy storage system for backup power", result.recommendations)

    def test_invalid_equipment(self):
        with self.assertRaises(ValueError):
            Equipment(name="aerator", power=0, hours=10)
        with self.assertRaises(ValueError):
            Equipment(name="windmill", power=1, hours=1)
        with self.assertRaises(ValueError):
            self._inputs(equipment=[])


class TestWeatherImpact(unittest.TestCase):
    def test_hot_still_day_starves_oxygen(self):
        form = {"species": "Tilapia", "season": "Summer", "temperature": 30, "cloudCover": "Clear"}
        result = analyze_weather_impact(WeatherInputs.from_form(form))
        self.assertAlmostEqual(result.water_quality.temperature, 31.0)
        expected_do = 14.6 * math.exp(-0.0357 * 31) * (1 - 30 * 0.02)
        self.assertAlmostEqual(result.water_quality.dissolved_oxygen, expected_do)
        self.assertAlmostEqual(result.water_quality.ph, 6.6)
        self.assertEqual(result.risk_level, "Low")
        self.assertEqual(result.fish_health.disease_risk, "Moderate")
        self.assertEqual(result.operational_impact.aeration, "Increase intensity")
        self.assertIn("Increase aeration immediately", result.recommendations)

    def test_cold_winter(self):
        form = {"species": "Tilapia", "season": "Winter", "temperature": 14}
        result = analyze_weather_impact(WeatherInputs.from_form(form))
        self.assertEqual(result.fish_health.stress_level, "High")
        self.assertEqual(result.operational_impact.feeding_schedule, "Reduce feeding by 50%")
        self.assertIn("Monitor water temperature closely", result.recommendations)

    def test_season_must_be_known(self):
        with self.assertRaisesRegex(ValueError, "season"):
            WeatherInputs.from_form({"species": "Tilapia", "season": "Monsoon"})


def test_cloud_cover_accepts_names_and_percentages():
    assert cloud_cover_percent("Overcast") == 100.0
    assert cloud_cover_percent("40") == 40.0
    assert cloud_cover_percent("") == 0.0


def test_aeration_sizing():
    form = {
        "length": 20,
        "width": 10,
        "depth": 1.5,
        "fishSpecies": "tilapia",
        "fishQuantity": 1000,
        "averageWeight": 0.5,
        "temperature": 30,
        "dissolvedOxygen": 4,
    }
    result = calculate_aeration(AerationInputs.from_form(form))
    assert result.water_volume == pytest.approx(300.0)
    assert result.oxygen_demand == pytest.approx(137.5)
    assert result.required_aerators == 3
    assert result.energy_cost == pytest.approx(8.64)
    assert result.risk_level == "medium"
    unlisted = calculate_aeration(AerationInputs.from_form(dict(form, fishSpecies="koi")))
    assert unlisted.oxygen_demand == pytest.approx(result.oxygen_demand)


class TestFertilizer(unittest.TestCase):
    FORM = {
        "fishSpecies": "tilapia",
        "fishBiomass": 1000,
        "feedingRate": 20,
        "collectionFrequency": 7,
        "pondSize": 10000,
        "feedProtein": 32,
        "processingMethod": "composting",
        "storageConditions": "indoor",
        "cropType": "vegetables",
    }

    def test_weekly_collection(self):
        result = calculate_fertilizer(FertilizerInputs.from_form(self.FORM))
        self.assertAlmostEqual(result.fertilizer, 34.3)
        self.assertAlmostEqual(result.application_rate, 240.1)
        self.assertAlmostEqual(result.nutrient_content.nitrogen, 34.3 * 0.8 * 0.95 * 0.05)
        self.assertAlmostEqual(result.economic_value.disposal_savings, 34.3 * 0.3)
        self.assertEqual(result.recommendations[2], "Apply fertilizer weekly for vegetables")
        self.assertEqual([r["name"] for r in nutrient_rows(result)][0], "Nitrogen")

    def test_pond_size_must_be_positive(self):
        with self.assertRaises(ValueError):
            FertilizerInputs.from_form(dict(self.FORM, pondSize=0))
