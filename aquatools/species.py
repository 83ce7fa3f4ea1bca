from __future__ import annotations

"""Species suitability scoring against site conditions and farmer preferences."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .forms import coerce_numeric, is_blank, require_fields
from .reference_data import table

log = logging.getLogger(__name__)

PREFERENCE_LEVELS = ("high", "medium", "low")
GROWTH_PREFERENCES = ("fast", "medium", "slow")
BUDGET_LEVELS = ("low", "medium", "high")
MIN_SUITABLE_SCORE = 60


def _range(value: Any, default: Tuple[float, float], field_name: str) -> Tuple[float, float]:
    if is_blank(value):
        return default
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"'{field_name}' must be a [min, max] pair, got {value!r}")
    lo, hi = (coerce_numeric(v, field_name) for v in value)
    if lo > hi:
        raise ValueError(f"'{field_name}': minimum {lo:g} is above maximum {hi:g}")
    return lo, hi


@dataclass
class SuitabilityInputs:
    water_temperature: Tuple[float, float] = (20.0, 30.0)
    water_ph: Tuple[float, float] = (6.5, 8.5)
    dissolved_oxygen: float = 5.0
    water_depth: float = 2.0
    experience: str = ""
    growth_rate: str = ""
    disease_resistance: str = ""
    market_preference: str = ""
    budget: str = ""
    location: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "SuitabilityInputs":
        require_fields(form, ["dissolvedOxygen", "waterDepth"], context="Species suitability")
        return cls(
            water_temperature=_range(form.get("waterTemperature"), (20.0, 30.0), "waterTemperature"),
            water_ph=_range(form.get("waterPH"), (6.5, 8.5), "waterPH"),
            dissolved_oxygen=coerce_numeric(form["dissolvedOxygen"], "dissolvedOxygen"),
            water_depth=coerce_numeric(form["waterDepth"], "waterDepth"),
            experience=str(form.get("experience") or ""),
            growth_rate=str(form.get("growthRate") or ""),
            disease_resistance=str(form.get("diseaseResistance") or ""),
            market_preference=str(form.get("marketPreference") or ""),
            budget=str(form.get("budget") or ""),
            location=str(form.get("location") or ""),
        )


@dataclass
class SpeciesMatch:
    name: str
    scientific_name: str
    score: int
    profile: Dict[str, Any]


def _inside(site: Sequence[float], species: Mapping[str, float]) -> bool:
    return site[0] >= species["min"] and site[1] <= species["max"]


def _preference_points(preference: str, rating: float, high_word: str = "high", low_word: str = "low") -> int:
    if preference == high_word and rating >= 4:
        return 10
    if preference == "medium" and rating >= 3:
        return 8
    if preference == low_word:
        return 6
    return 0


def suitability_score(inputs: SuitabilityInputs, species: Mapping[str, Any]) -> int:
    score = 0
    score += 20 if _inside(inputs.water_temperature, species["temperature"]) else 0
    score += 15 if _inside(inputs.water_ph, species["ph"]) else 0
    score += 15 if inputs.dissolved_oxygen >= species["min_oxygen"] else 0
    score += 10 if inputs.water_depth >= species["min_depth"] else 0

    level = table("experience_levels").get(inputs.experience, 2)
    score += max(0, 10 - abs(level - species["difficulty"]) * 3)

    score += _preference_points(inputs.growth_rate, species["growth_rate"], "fast", "slow")
    score += _preference_points(inputs.disease_resistance, species["disease_resistance"])
    score += _preference_points(inputs.market_preference, species["market_value"])
    return score


def recommend_species(inputs: SuitabilityInputs) -> List[SpeciesMatch]:
    """Species scoring at least 60, best first."""
    scored = [
        SpeciesMatch(
            name=profile["name"],
            scientific_name=profile["scientific_name"],
            score=suitability_score(inputs, profile),
            profile=dict(profile),
        )
        for profile in table("suitability_species")
    ]
    scored.sort(key=lambda m: m.score, reverse=True)
    matches = [m for m in scored if m.score >= MIN_SUITABLE_SCORE]
    log.debug("Species suitability: scores=%s", {m.name: m.score for m in scored})
    return matches
