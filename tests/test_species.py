import unittest

import pytest

from aquatools.reference_data import table
from aquatools.species import SuitabilityInputs, recommend_species, suitability_score


def _profile(name):
    return next(p for p in table("suitability_species") if p["name"] == name)


class TestSuitability(unittest.TestCase):
    def test_warm_site_suits_tilapia(self):
        form = {
            "waterTemperature": [25, 30],
            "waterPH": [6.5, 8.5],
            "dissolvedOxygen": 5,
            "waterDepth": 2,
            "experience": "beginner",
            "growthRate": "fast",
            "diseaseResistance": "high",
            "marketPreference": "high",
        }
        inputs = SuitabilityInputs.from_form(form)
        self.assertEqual(suitability_score(inputs, _profile("Tilapia")), 87)
        self.assertEqual(suitability_score(inputs, _profile("Rainbow Trout")), 21)
        matches = recommend_species(inputs)
        self.assertEqual([m.name for m in matches], ["Tilapia"])
        self.assertEqual(matches[0].scientific_name, "Oreochromis niloticus")
        self.assertIn("care", matches[0].profile)

    def test_cold_site_suits_trout(self):
        form = {
            "waterTemperature": (12, 16),
            "waterPH": (6.8, 7.5),
            "dissolvedOxygen": 8,
            "waterDepth": 2,
            "experience": "advanced",
            "marketPreference": "high",
        }
        matches = recommend_species(SuitabilityInputs.from_form(form))
        self.assertEqual([(m.name, m.score) for m in matches], [("Rainbow Trout", 77)])

    def test_nothing_suitable(self):
        form = {"waterTemperature": [0, 40], "dissolvedOxygen": 1, "waterDepth": 0.5}
        self.assertEqual(recommend_species(SuitabilityInputs.from_form(form)), [])


def test_ranges_default_when_blank():
    inputs = SuitabilityInputs.from_form({"dissolvedOxygen": 5, "waterDepth": 2})
    assert inputs.water_temperature == (20.0, 30.0)
    assert inputs.water_ph == (6.5, 8.5)


@pytest.mark.parametrize("value", [[30, 20], "25", [1, 2, 3]])
def test_bad_ranges_rejected(value):
    with pytest.raises(ValueError, match="waterTemperature"):
        SuitabilityInputs.from_form({"waterTemperature": value, "dissolvedOxygen": 5, "waterDepth": 2})
