import unittest

import pytest

from aquatools.feeding import (
    FcrInputs,
    FeedSchedule,
    FeedStock,
    FeedingInputs,
    OptimizerInputs,
    calculate_fcr,
    calculate_feeding,
    days_remaining,
    efficiency_color,
    feeding_species,
    optimize_fcr,
    stock_summary,
)


def test_stock_summary_flags_low_stock():
    schedules = [
        FeedSchedule("1", "07:00", 10, "Grower"),
        FeedSchedule("2", "17:00", 5, "Grower"),
        FeedSchedule("3", "12:00", 2, "Starter"),
    ]
    stock = [FeedStock("Grower", 100), FeedStock("Starter", 40), FeedStock("Finisher", 30)]
    summary = {s.feed_type: s for s in stock_summary(schedules, stock)}
    assert summary["Grower"].daily_usage == 15
    assert summary["Grower"].days_remaining == 6
    assert summary["Grower"].low_stock
    assert summary["Starter"].days_remaining == 20
    assert not summary["Starter"].low_stock
    assert summary["Finisher"].days_remaining == 0


def test_days_remaining_without_usage():
    assert days_remaining(100, 0) == 0
    assert days_remaining(100, 30) == 3


class TestFcrCalculator(unittest.TestCase):
    def test_poor_conversion(self):
        inputs = FcrInputs.from_form({"species": "tilapia", "initialWeight": 100, "finalWeight": 200, "feedGiven": 200})
        result = calculate_fcr(inputs)
        self.assertEqual(result.fcr, 2.0)
        self.assertEqual(result.target_fcr, 1.6)
        self.assertEqual(result.efficiency, -25.0)
        self.assertEqual(result.deviation, 0.4)
        self.assertEqual(result.efficiency_color, "error")
        self.assertEqual(result.recommendations[0], "Monitor feeding behavior more closely")
        self.assertIn("Consider consulting a feed specialist", result.recommendations)
        self.assertEqual(result.cost_implications.current_cost, 9000.0)
        self.assertEqual(result.cost_implications.potential_savings, 1800.0)

    def test_on_target(self):
        inputs = FcrInputs.from_form({"species": "tilapia", "initialWeight": 100, "finalWeight": 200, "feedGiven": 150})
        result = calculate_fcr(inputs)
        self.assertEqual(result.fcr, 1.5)
        self.assertEqual(result.efficiency_color, "success")
        self.assertEqual(result.cost_implications.potential_savings, 0.0)
        self.assertEqual(result.recommendations[0], "Maintain current feeding practices")

    def test_zero_gain_leaves_fcr_undefined(self):
        inputs = FcrInputs.from_form({"species": "carp", "initialWeight": 100, "finalWeight": 100, "feedGiven": 50})
        result = calculate_fcr(inputs)
        self.assertIsNone(result.fcr)
        self.assertIsNone(result.efficiency)
        self.assertEqual(result.efficiency_color, "info")

    def test_unknown_species(self):
        inputs = FcrInputs.from_form({"species": "shark", "initialWeight": 1, "finalWeight": 2, "feedGiven": 1})
        with self.assertRaises(ValueError):
            calculate_fcr(inputs)


def test_efficiency_color_bands():
    assert [efficiency_color(v) for v in (5, -5, -15)] == ["success", "warning", "error"]


def test_optimizer_grower_on_pellets():
    form = {
        "feedAmount": 150,
        "initialWeight": 0.1,
        "finalWeight": 0.6,
        "numberOfFish": 200,
        "feedingPeriod": 100,
        "waterTemperature": 28,
        "feedProteinContent": 32,
        "growthStage": "Grower",
        "feedType": "Commercial pellet",
        "feedingFrequency": "1 time per day",
    }
    result = optimize_fcr(OptimizerInputs.from_form(form))
    assert result.fcr == pytest.approx(1.5)
    assert result.feed_efficiency == pytest.approx(100 / 1.5)
    assert result.daily_growth_rate == pytest.approx(0.005)
    assert result.protein_efficiency_ratio == pytest.approx(100 / 48)
    assert result.feed_cost_per_kg == 2.5
    assert result.recommendations == [
        "Monitor feed consumption closely",
        "Consider increasing feeding frequency for better feed utilization",
    ]
    assert result.optimal_feeding_schedule == ["Feed 2-3 times daily"]
    assert result.cost_optimization == ["Compare different brands for best price-quality ratio"]


def test_optimizer_cold_water_low_protein():
    form = {
        "feedAmount": 300,
        "initialWeight": 0.1,
        "finalWeight": 0.6,
        "numberOfFish": 200,
        "feedingPeriod": 100,
        "waterTemperature": 20,
        "feedProteinContent": 25,
    }
    result = optimize_fcr(OptimizerInputs.from_form(form))
    assert result.fcr == pytest.approx(3.0)
    assert result.recommendations[0] == "High FCR detected - review feeding strategy"
    assert "Consider increasing protein content for better growth" in result.recommendations
    assert result.optimal_feeding_schedule == ["Feed during warmest part of the day"]
    assert result.feed_cost_per_kg == 1.8


class TestFeedingCalculator(unittest.TestCase):
    def test_optimal_temperature(self):
        inputs = FeedingInputs.from_form(
            {"species": "Tilapia", "growthStage": "juvenile", "biomass": 500, "waterTemperature": 28}
        )
        result = calculate_feeding(inputs)
        self.assertEqual(result.condition, "optimal")
        self.assertEqual(result.feeding_rate, 5)
        self.assertAlmostEqual(result.daily_amount, 25.0)
        self.assertEqual(result.feedings_per_day, 3)
        self.assertAlmostEqual(result.amount_per_feeding, 25 / 3)
        self.assertAlmostEqual(result.reminder_interval_hours, 8.0)
        self.assertEqual(len(result.tips), 4)

    def test_cool_water_uses_suboptimal_rates(self):
        inputs = FeedingInputs.from_form(
            {"species": "Tilapia", "growthStage": "juvenile", "biomass": 500, "waterTemperature": 22}
        )
        result = calculate_feeding(inputs)
        self.assertEqual(result.condition, "suboptimal")
        self.assertAlmostEqual(result.daily_amount, 20.0)

    def test_unknown_stage(self):
        inputs = FeedingInputs.from_form({"species": "Tilapia", "growthStage": "larva", "biomass": 1, "waterTemperature": 28})
        with self.assertRaisesRegex(ValueError, "larva"):
            calculate_feeding(inputs)

    def test_species_list(self):
        self.assertEqual(feeding_species(), ["Tilapia", "Common Carp"])
