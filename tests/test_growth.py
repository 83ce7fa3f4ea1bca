import unittest
from datetime import date

import pytest

from aquatools.growth import (
    BenchmarkInputs,
    GrowthSample,
    PredictorInputs,
    benchmark_growth,
    density_factor,
    feed_efficiency_grade,
    growth_rate,
    parse_date,
    predict_growth,
    projections_frame,
    temperature_factor,
)


def test_parse_date_accepts_iso_strings_and_dates():
    assert parse_date("2025-03-04", "d") == date(2025, 3, 4)
    assert parse_date("2025-03-04T10:00:00", "d") == date(2025, 3, 4)
    assert parse_date(date(2025, 1, 1), "d") == date(2025, 1, 1)
    with pytest.raises(ValueError, match="stockingDate"):
        parse_date("yesterday", "stockingDate")


def test_growth_rate_between_first_and_last_sample():
    samples = [
        GrowthSample(date(2025, 1, 1), 10, 8),
        GrowthSample(date(2025, 1, 6), 18, 9),
        GrowthSample(date(2025, 1, 11), 30, 10),
    ]
    assert growth_rate(samples) == 2.0
    assert growth_rate(samples[:1]) is None
    assert growth_rate([samples[0], GrowthSample(date(2025, 1, 1), 12, 8)]) is None


def test_factor_tables():
    assert temperature_factor(27, 28) == 1.0
    assert temperature_factor(24.5, 28) == 0.9
    assert temperature_factor(20, 28) == 0.7
    assert density_factor(10) == 1.1
    assert density_factor(30) == 1.0
    assert density_factor(60) == 0.8
    assert [feed_efficiency_grade(s) for s in (95, 85, 75, 10)] == ["Excellent", "Good", "Fair", "Poor"]


class TestBenchmark(unittest.TestCase):
    TODAY = date(2025, 6, 1)
    FORM = {
        "species": "Tilapia",
        "currentWeight": 300,
        "stockingWeight": 50,
        "stockingDate": "2025-04-02",
        "feedType": "Commercial Pellets - Standard",
        "waterTemperature": 28,
        "stockingDensity": 30,
    }

    def test_fast_growth_is_above_target(self):
        result = benchmark_growth(BenchmarkInputs.from_form(self.FORM), today=self.TODAY)
        self.assertEqual(result.days_since_stocking, 60)
        self.assertAlmostEqual(result.actual_growth_rate, 250 / 60)
        self.assertAlmostEqual(result.expected_growth_rate, 3.5)
        self.assertEqual(result.performance_score, 100.0)
        self.assertEqual(result.growth_status, "Above Target")
        self.assertEqual(result.feed_efficiency, "Excellent")
        self.assertEqual(result.recommendations, [])

    def test_poor_conditions_explain_shortfall(self):
        form = dict(
            self.FORM,
            currentWeight=110,
            waterTemperature=20,
            stockingDensity=60,
            feedType="Natural Feed",
        )
        result = benchmark_growth(BenchmarkInputs.from_form(form), today=self.TODAY)
        self.assertAlmostEqual(result.expected_growth_rate, 3.5 * 0.8 * 0.7 * 0.8)
        self.assertEqual(result.growth_status, "Below Target")
        self.assertEqual(result.feed_efficiency, "Poor")
        self.assertEqual(len(result.recommendations), 5)
        self.assertEqual([f.impact for f in result.environmental_factors], ["Negative"] * 3)

    def test_unlisted_species_uses_default_profile(self):
        form = dict(self.FORM, species="Pangasius", waterTemperature=25)
        result = benchmark_growth(BenchmarkInputs.from_form(form), today=self.TODAY)
        self.assertAlmostEqual(result.expected_growth_rate, 3.5)

    def test_stocking_date_must_be_in_the_past(self):
        form = dict(self.FORM, stockingDate="2025-06-01")
        with self.assertRaises(ValueError):
            benchmark_growth(BenchmarkInputs.from_form(form), today=self.TODAY)


class TestPredictor(unittest.TestCase):
    FORM = {
        "species": "Tilapia",
        "initialWeight": 10,
        "feedingRate": 3,
        "waterTemperature": 28,
        "growthPeriod": 90,
    }

    def test_monthly_compounding_with_defaults(self):
        result = predict_growth(PredictorInputs.from_form(self.FORM))
        monthly = 1 + 0.035 * 0.03 / 1.6 * 30
        self.assertAlmostEqual(result.final_weight, 10 * monthly**3)
        self.assertAlmostEqual(result.feed_consumption, (result.final_weight - 10) * 1.6)
        self.assertAlmostEqual(result.total_biomass, result.final_weight * 20)
        self.assertAlmostEqual(result.efficiency_score, 100.0)
        self.assertEqual(len(result.monthly_projections), 4)
        self.assertEqual(result.monthly_projections[0].feed_required, 0.0)
        self.assertEqual(result.recommendations, [])

    def test_partial_month_rounds_up(self):
        result = predict_growth(PredictorInputs.from_form(dict(self.FORM, growthPeriod=31)))
        self.assertEqual(len(result.monthly_projections), 3)

    def test_off_profile_conditions(self):
        form = dict(self.FORM, waterTemperature=20, stockingDensity=40, fcr=2.2, feedingRate=1, feedCost=0.5)
        result = predict_growth(PredictorInputs.from_form(form))
        self.assertEqual([f.impact for f in result.environmental_factors], ["Suboptimal"] * 3)
        self.assertEqual(len(result.recommendations), 4)
        self.assertAlmostEqual(result.feed_cost, result.feed_consumption * 0.5)

    def test_zero_fcr_rejected(self):
        with self.assertRaises(ValueError):
            predict_growth(PredictorInputs.from_form(dict(self.FORM, fcr=0)))

    def test_frame_columns(self):
        frame = projections_frame(predict_growth(PredictorInputs.from_form(self.FORM)))
        self.assertEqual(list(frame.columns), ["month", "weight", "biomass", "feed_required"])
