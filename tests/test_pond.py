import unittest

import pytest

from aquatools.pond import (
    EvaporationInputs,
    LimingInputs,
    LiningInputs,
    SedimentInputs,
    analyze_sediment,
    calculate_evaporation,
    calculate_liming,
    calculate_lining,
    choose_disposal_method,
    lining_area,
)


LIMING_FORM = {
    "pondArea": 1000,
    "pondDepth": 1.5,
    "currentPH": 6.0,
    "targetPH": 7.5,
    "alkalinity": 40,
    "soilType": "clayey",
    "waterSource": "surface",
    "limeType": "agricultural",
}


class TestLiming(unittest.TestCase):
    def test_low_alkalinity_clay_soil(self):
        result = calculate_liming(LimingInputs.from_form(LIMING_FORM))
        # 1.5 pH units * 1000 * 1.5 buffer * 1.3 low alkalinity
        self.assertAlmostEqual(result.lime_required, 2925.0)
        self.assertAlmostEqual(result.cost, 87.75)
        self.assertAlmostEqual(result.pond_volume, 1500.0)
        self.assertEqual(result.lime_name, "Agricultural Limestone")
        self.assertTrue(result.recommendations[0].startswith("Apply 2925.00 kg"))
        self.assertIn("This lime type dissolves slowly. Consider multiple smaller applications.", result.recommendations)

    def test_groundwater_and_stronger_lime(self):
        form = dict(LIMING_FORM, waterSource="groundwater", limeType="hydrated", alkalinity=100)
        result = calculate_liming(LimingInputs.from_form(form))
        self.assertAlmostEqual(result.lime_required, 2250 * 0.8 / 1.36)

    def test_large_adjustment_advice(self):
        form = dict(LIMING_FORM, currentPH=5.0, targetPH=7.5)
        result = calculate_liming(LimingInputs.from_form(form))
        self.assertIn("Large pH adjustment needed", result.recommendations[-1])

    def test_every_problem_reported_at_once(self):
        form = dict(LIMING_FORM, pondArea="", alkalinity="lots", limeType="")
        with self.assertRaises(ValueError) as ctx:
            LimingInputs.from_form(form)
        message = str(ctx.exception)
        self.assertIn("pondArea is required", message)
        self.assertIn("alkalinity", message)
        self.assertIn("limeType is required", message)


def test_evaporation_neutral_conditions():
    inputs = EvaporationInputs.from_form(
        {
            "pondLength": 20,
            "pondWidth": 10,
            "waterTemperature": 25,
            "airTemperature": 25,
            "humidity": 50,
            "windSpeed": 0,
            "sunlightHours": 12,
        }
    )
    result = calculate_evaporation(inputs)
    assert result.rate_cm_per_day == pytest.approx(0.09375)
    assert result.daily_evaporation == pytest.approx(0.1875)
    assert result.weekly_evaporation == pytest.approx(0.1875 * 7)
    assert result.risk_level == "Low"
    assert result.recommendations[-1] == "Consider using pond covers during peak sunlight hours"


def test_evaporation_season_and_cloud_factors():
    base = {
        "pondLength": 20,
        "pondWidth": 10,
        "waterTemperature": 25,
        "airTemperature": 25,
        "humidity": 50,
        "windSpeed": 0,
        "sunlightHours": 12,
    }
    summer = calculate_evaporation(EvaporationInputs.from_form(dict(base, season="Summer")))
    overcast = calculate_evaporation(EvaporationInputs.from_form(dict(base, cloudCover="Overcast")))
    assert summer.rate_cm_per_day == pytest.approx(0.09375 * 1.2)
    assert overcast.rate_cm_per_day == pytest.approx(0.09375 * 0.4)


def test_evaporation_high_risk_adds_advice():
    inputs = EvaporationInputs.from_form(
        {
            "pondLength": 50,
            "pondWidth": 50,
            "waterTemperature": 35,
            "airTemperature": 20,
            "humidity": 10,
            "windSpeed": 20,
            "sunlightHours": 12,
            "season": "Summer",
        }
    )
    result = calculate_evaporation(inputs)
    assert result.risk_level == "High"
    assert "Plan for emergency water supply" in result.recommendations
    assert "Install windbreaks to reduce evaporation" in result.recommendations


def test_evaporation_requires_dimensions():
    with pytest.raises(ValueError, match="pondWidth"):
        EvaporationInputs.from_form({"pondLength": 10})


class TestSediment(unittest.TestCase):
    FORM = {
        "pondArea": 1000,
        "pondDepth": 2,
        "sedimentDepth": 0.5,
        "sedimentType": "loamy",
        "organicContent": 20,
        "lastCleaned": 3,
        "waterExchangeRate": 5,
    }

    def test_accumulated_sediment(self):
        result = analyze_sediment(SedimentInputs.from_form(self.FORM))
        self.assertAlmostEqual(result.total_volume, 500.0)
        self.assertAlmostEqual(result.depth_ratio, 0.25)
        self.assertTrue(result.removal_required)
        self.assertEqual(result.disposal_method, "agricultural")
        self.assertAlmostEqual(result.nutrient_content["organicMatter"], 80.0)
        self.assertAlmostEqual(result.nutrient_content["nitrogen"], 4.0)
        self.assertAlmostEqual(result.estimated_cost, 7500.0)
        self.assertEqual(result.timeline, "Annual removal recommended")
        self.assertEqual(len(result.recommendations), 2)

    def test_thin_layer_is_monitored(self):
        form = dict(self.FORM, sedimentDepth=0.1, lastCleaned=1, organicContent=5)
        result = analyze_sediment(SedimentInputs.from_form(form))
        self.assertFalse(result.removal_required)
        self.assertEqual(result.timeline, "Monitor and reassess in 6 months")
        self.assertEqual(result.disposal_method, "landReclamation")

    def test_unknown_sediment_type(self):
        with self.assertRaises(ValueError):
            analyze_sediment(SedimentInputs.from_form(dict(self.FORM, sedimentType="gravel")))


def test_disposal_method_thresholds():
    assert choose_disposal_method(41) == "composting"
    assert choose_disposal_method(40) == "agricultural"
    assert choose_disposal_method(9) == "landReclamation"


def test_lining_area_includes_slopes():
    assert lining_area(10, 10, 2, 0) == pytest.approx(180.0)
    # slope 2:1 widens each wall by 4 m at 2 m depth
    assert lining_area(10, 10, 2, 2) == pytest.approx(100 + 2 * 18 * 2 * 2)


def test_lining_costs():
    inputs = LiningInputs.from_form(
        {"length": 10, "width": 10, "depth": 2, "materialType": "hdpe", "laborCostPerDay": 100, "estimatedDays": 5}
    )
    result = calculate_lining(inputs)
    assert result.liner_area == pytest.approx(198.0)
    assert result.material_cost == pytest.approx(1584.0)
    assert result.labor_cost == pytest.approx(500.0)
    assert result.total_cost == pytest.approx(2084.0)
    assert result.annual_cost == pytest.approx(2084.0 / 15)
    assert result.recommendations == ["Expected lifespan: 15 years with proper maintenance"]
    assert len(result.installation_steps) == 7
