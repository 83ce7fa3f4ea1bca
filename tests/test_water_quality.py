import random
import unittest

import pytest

from aquatools.water_quality import (
    MonitorInputs,
    PREDICTION_HOURS,
    PredictorInputs,
    WaterQualityInputs,
    band_status,
    check_water_quality,
    monitor_water_quality,
    overall_status,
    predict_water_quality,
    risk_level,
)


class TestWaterQualityCheck(unittest.TestCase):
    def test_statuses_follow_bands(self):
        inputs = WaterQualityInputs.from_form({"species": "tilapia", "temperature": 28, "ph": "9.5", "dissolvedOxygen": 4})
        result = check_water_quality(inputs)
        by_param = {s.parameter: s.status for s in result.statuses}
        self.assertEqual(by_param, {"temperature": "success", "ph": "error", "dissolvedOxygen": "warning"})

    def test_recommendations_name_the_optimal_range(self):
        result = check_water_quality(WaterQualityInputs.from_form({"species": "tilapia", "dissolvedOxygen": 4}))
        self.assertEqual(result.recommendations, ["Dissolved Oxygen is too low. Increase to 5-7 mg/L"])

    def test_blank_readings_are_skipped(self):
        result = check_water_quality(WaterQualityInputs.from_form({"species": "carp", "temperature": 24, "ph": ""}))
        self.assertEqual([s.parameter for s in result.statuses], ["temperature"])
        self.assertEqual(result.recommendations, ["All parameters are within optimal ranges"])

    def test_species_required(self):
        with self.assertRaises(ValueError):
            WaterQualityInputs.from_form({"temperature": 25})

    def test_unknown_species(self):
        with self.assertRaises(ValueError):
            check_water_quality(WaterQualityInputs.from_form({"species": "salmon", "temperature": 25}))


def test_band_status_and_overall():
    spec = {"optimal": {"min": 5, "max": 8}, "warning": {"min": 3, "max": 10}}
    assert band_status(6, spec) == "Optimal"
    assert band_status(9, spec) == "Warning"
    assert band_status(2, spec) == "Critical"
    assert overall_status(["Optimal", "Warning"]) == "Warning"
    assert overall_status(["Warning", "Critical"]) == "Critical"
    assert overall_status([]) == "Optimal"


def test_monitor_only_analyses_filled_parameters():
    result = monitor_water_quality(MonitorInputs.from_form({"dissolvedOxygen": 2.5, "temperature": 27}))
    assert [a.parameter for a in result.analysis] == ["dissolvedOxygen", "temperature"]
    assert result.analysis[0].status == "Critical"
    assert result.overall_status == "Critical"


def test_monitor_needs_one_reading():
    with pytest.raises(ValueError, match="at least one"):
        MonitorInputs.from_form({"pH": ""})


def test_risk_level_thresholds():
    assert risk_level(4.0, 4, 5, 8) == "high"
    assert risk_level(4.5, 4, 5, 8) == "medium"
    assert risk_level(6.0, 4, 5, 8) == "low"
    assert risk_level(8.0, 4, 5, 8) == "high"


class TestPredictor(unittest.TestCase):
    FORM = {
        "species": "tilapia",
        "temperature": 28,
        "pH": 7.5,
        "dissolvedOxygen": 6,
        "ammonia": 0.2,
        "feedingRate": 2,
        "stockingDensity": 3,
        "waterExchangeRate": 10,
        "sunlight": 8,
    }

    def test_shape_and_determinism(self):
        inputs = PredictorInputs.from_form(self.FORM)
        a = predict_water_quality(inputs, rng=random.Random(7))
        b = predict_water_quality(inputs, rng=random.Random(7))
        self.assertEqual(len(a.hourly), PREDICTION_HOURS)
        self.assertEqual(a.hourly[0]["time"], "0h")
        self.assertEqual(a.hourly, b.hourly)
        self.assertEqual([p.parameter for p in a.predictions], ["Temperature", "Dissolved Oxygen", "pH", "Ammonia"])

    def test_night_oxygen_projection(self):
        result = predict_water_quality(PredictorInputs.from_form(self.FORM), rng=random.Random(1))
        do = result.predictions[1]
        # last hour is at night: 6 - 0.3 - 0.4 - 0.3 - 0.3 = 4.7 (+/- 0.1)
        self.assertGreaterEqual(do.predicted, 4.6)
        self.assertLessEqual(do.predicted, 4.8)
        self.assertEqual(do.risk, "medium")
        self.assertEqual(do.trend, "decreasing")
        self.assertIn("Increase aeration", do.recommendations)

    def test_ph_series_uses_ph_reading(self):
        result = predict_water_quality(PredictorInputs.from_form(self.FORM), rng=random.Random(3))
        for row in result.hourly:
            self.assertAlmostEqual(row["pH"], 7.4, delta=0.11)

    def test_species_alerts(self):
        form = dict(self.FORM, temperature=34, ammonia=0.8)
        result = predict_water_quality(PredictorInputs.from_form(form), rng=random.Random(0))
        self.assertEqual(len(result.species_alerts), 2)
        self.assertTrue(result.species_alerts[0].startswith("Temperature 34.0°C"))

    def test_required_fields(self):
        form = dict(self.FORM)
        form.pop("ammonia")
        with self.assertRaises(ValueError):
            PredictorInputs.from_form(form)
