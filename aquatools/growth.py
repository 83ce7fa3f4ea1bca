from __future__ import annotations

"""
Growth tools.

- `growth_rate`: average daily gain between the first and last sample of a
  tracked batch (the batches themselves live in `aquatools.records`).
- `benchmark_growth`: compares the observed growth since stocking with the
  rate expected for the species under the current feed, temperature and
  density.
- `predict_growth`: monthly compounded weight projection from the species
  profile and the pond conditions.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from .forms import parse_number, require_fields
from .reference_data import lookup, table

log = logging.getLogger(__name__)


def parse_date(value: Any, field_name: str) -> date:
    """Accept a `date` or an ISO `YYYY-MM-DD` string."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as exc:
        raise ValueError(f"Invalid date for '{field_name}': {value!r} (expected YYYY-MM-DD)") from exc


# ---------------------------------------------------------------------------
# Tracker growth rate
# ---------------------------------------------------------------------------


@dataclass
class GrowthSample:
    date: date
    weight: float
    length: float
    sample_size: int = 0
    notes: str = ""


def growth_rate(samples: Sequence[GrowthSample]) -> Optional[float]:
    """Average daily weight gain (g/day) from the first to the last sample.

    Returns None with fewer than two samples or when they share a date.
    """
    if len(samples) < 2:
        return None
    first, last = samples[0], samples[-1]
    days = (last.date - first.date).days
    if days == 0:
        return None
    return round((last.weight - first.weight) / days, 2)


# ---------------------------------------------------------------------------
# Benchmark
# ---------------------------------------------------------------------------


@dataclass
class BenchmarkInputs:
    species: str
    current_weight: float
    stocking_weight: float
    stocking_date: date
    feed_type: str
    water_temperature: float
    stocking_density: float
    age: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "BenchmarkInputs":
        require_fields(
            form,
            [
                "species",
                "currentWeight",
                "stockingWeight",
                "stockingDate",
                "feedType",
                "waterTemperature",
                "stockingDensity",
            ],
            context="Growth benchmark",
        )
        return cls(
            species=str(form["species"]),
            current_weight=parse_number(form["currentWeight"], "currentWeight"),
            stocking_weight=parse_number(form["stockingWeight"], "stockingWeight"),
            stocking_date=parse_date(form["stockingDate"], "stockingDate"),
            feed_type=str(form["feedType"]),
            water_temperature=parse_number(form["waterTemperature"], "waterTemperature"),
            stocking_density=parse_number(form["stockingDensity"], "stockingDensity"),
            age=parse_number(form.get("age"), "age"),
        )


@dataclass
class FactorNote:
    factor: str
    impact: str
    description: str


@dataclass
class BenchmarkResult:
    days_since_stocking: int
    actual_growth_rate: float
    expected_growth_rate: float
    performance_score: float
    weight_deviation: float
    growth_status: str
    feed_efficiency: str
    environmental_factors: List[FactorNote]
    recommendations: List[str]


def temperature_factor(temp: float, optimal: float) -> float:
    diff = abs(temp - optimal)
    if diff <= 2:
        return 1.0
    if diff <= 4:
        return 0.9
    return 0.7


def density_factor(density: float) -> float:
    if density < 20:
        return 1.1
    if density > 50:
        return 0.8
    return 1.0


def _impact(factor: float) -> str:
    if factor >= 1:
        return "Positive"
    if factor >= 0.9:
        return "Neutral"
    return "Negative"


def _grade(factor: float, labels: Sequence[str]) -> str:
    if factor >= 1:
        return labels[0]
    if factor >= 0.9:
        return labels[1]
    return labels[2]


def feed_efficiency_grade(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Good"
    if score >= 70:
        return "Fair"
    return "Poor"


def benchmark_growth(inputs: BenchmarkInputs, today: Optional[date] = None) -> BenchmarkResult:
    today = today or date.today()
    days = (today - inputs.stocking_date).days
    if days <= 0:
        raise ValueError(
            f"Growth benchmark: stocking date {inputs.stocking_date.isoformat()} must be before {today.isoformat()}"
        )

    # Unlisted species fall back to 3.5 g/day at 25 °C
    profile = table("benchmark_species").get(inputs.species, {"optimal_growth": 3.5, "optimal_temp": 25})
    feed_f = table("benchmark_feed_factors").get(inputs.feed_type, 1.0)
    temp_f = temperature_factor(inputs.water_temperature, profile["optimal_temp"])
    dens_f = density_factor(inputs.stocking_density)

    actual = (inputs.current_weight - inputs.stocking_weight) / days
    expected = profile["optimal_growth"] * feed_f * temp_f * dens_f
    score = min(100.0, actual / expected * 100)
    deviation = (actual - expected) / expected * 100

    if deviation > 10:
        status = "Above Target"
    elif deviation < -10:
        status = "Below Target"
    else:
        status = "On Target"

    factors = [
        FactorNote(
            "Water Temperature",
            _impact(temp_f),
            f"{inputs.water_temperature:g}°C - {_grade(temp_f, ('Optimal', 'Acceptable', 'Suboptimal'))} for {inputs.species}",
        ),
        FactorNote(
            "Stocking Density",
            _impact(dens_f),
            f"{inputs.stocking_density:g} fish/m³ - {_grade(dens_f, ('Optimal', 'Acceptable', 'High'))} density level",
        ),
        FactorNote(
            "Feed Type",
            _impact(feed_f),
            f"{inputs.feed_type} - {_grade(feed_f, ('High', 'Moderate', 'Low'))} efficiency",
        ),
    ]

    recs: List[str] = []
    if score < 80:
        if temp_f < 0.9:
            recs.append("Adjust water temperature closer to optimal range")
        if dens_f < 0.9:
            recs.append("Consider reducing stocking density")
        if feed_f < 1:
            recs.append("Evaluate feed quality and consider upgrading feed type")
    if deviation < -10:
        recs += ["Review feeding schedule and portion sizes", "Check for signs of disease or stress"]
    if deviation > 20:
        recs += ["Optimize feed conversion by adjusting feeding rate", "Monitor water quality more frequently"]

    log.debug("Growth benchmark: species=%s actual=%.3f expected=%.3f status=%s", inputs.species, actual, expected, status)
    return BenchmarkResult(
        days_since_stocking=days,
        actual_growth_rate=actual,
        expected_growth_rate=expected,
        performance_score=score,
        weight_deviation=deviation,
        growth_status=status,
        feed_efficiency=feed_efficiency_grade(score),
        environmental_factors=factors,
        recommendations=recs,
    )


# ---------------------------------------------------------------------------
# Predictor
# ---------------------------------------------------------------------------


@dataclass
class PredictorInputs:
    species: str
    initial_weight: float
    feeding_rate: float  # % body weight per day
    water_temperature: float
    growth_period: float  # days
    fcr: Optional[float] = None
    stocking_density: Optional[float] = None
    feed_cost: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "PredictorInputs":
        require_fields(
            form,
            ["species", "initialWeight", "feedingRate", "waterTemperature", "growthPeriod"],
            context="Growth predictor",
        )
        return cls(
            species=str(form["species"]),
            initial_weight=parse_number(form["initialWeight"], "initialWeight"),
            feeding_rate=parse_number(form["feedingRate"], "feedingRate"),
            water_temperature=parse_number(form["waterTemperature"], "waterTemperature"),
            growth_period=parse_number(form["growthPeriod"], "growthPeriod"),
            fcr=parse_number(form.get("fcr"), "fcr", default=None),
            stocking_density=parse_number(form.get("stockingDensity"), "stockingDensity", default=None),
            feed_cost=parse_number(form.get("feedCost"), "feedCost"),
        )


@dataclass
class MonthlyProjection:
    month: int
    weight: float
    biomass: float
    feed_required: float


@dataclass
class ConditionNote:
    factor: str
    status: str
    impact: str


@dataclass
class GrowthPrediction:
    final_weight: float
    total_biomass: float
    feed_consumption: float
    feed_cost: float
    daily_growth_rate: float
    efficiency_score: float
    monthly_projections: List[MonthlyProjection] = field(default_factory=list)
    environmental_factors: List[ConditionNote] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


def growth_efficiency(temp: float, density: float, profile: Mapping[str, Any]) -> float:
    temp_effect = max(0.5, 1 - abs(temp - profile["optimal_temp"]) / profile["temperature_tolerance"] * 0.5)
    opt_d = profile["optimal_density"]
    density_effect = max(0.7, 1 - abs(density - opt_d) / opt_d * 0.3)
    return temp_effect * density_effect


def monthly_weights(initial: float, daily_rate: float, months: int) -> List[float]:
    weights = [initial]
    for _ in range(months):
        weights.append(weights[-1] * (1 + daily_rate * 30))
    return weights


def _band(deviation: float, tight: float, loose: float) -> str:
    if deviation <= tight:
        return "Optimal"
    if deviation <= loose:
        return "Acceptable"
    return "Suboptimal"


def predict_growth(inputs: PredictorInputs) -> GrowthPrediction:
    profile = lookup("growth_predictor_species", inputs.species, "species")
    fcr = inputs.fcr if inputs.fcr is not None else profile["default_fcr"]
    if fcr <= 0:
        raise ValueError("Growth predictor: fcr must be greater than zero")
    density = inputs.stocking_density if inputs.stocking_density is not None else profile["optimal_density"]
    feed_fraction = inputs.feeding_rate / 100

    efficiency = growth_efficiency(inputs.water_temperature, density, profile)
    base_rate = profile["max_growth_rate"] / 100 * efficiency * feed_fraction
    daily_rate = base_rate / fcr
    months = math.ceil(inputs.growth_period / 30)
    weights = monthly_weights(inputs.initial_weight, daily_rate, months)

    final = weights[-1]
    feed_consumption = (final - inputs.initial_weight) * fcr
    projections = [
        MonthlyProjection(
            month=i,
            weight=w,
            biomass=w * density,
            feed_required=0.0 if i == 0 else (w - weights[i - 1]) * fcr,
        )
        for i, w in enumerate(weights)
    ]

    temp_dev = abs(inputs.water_temperature - profile["optimal_temp"])
    tol = profile["temperature_tolerance"]
    opt_d = profile["optimal_density"]
    dens_dev = abs(density - opt_d)
    def_fcr = profile["default_fcr"]
    factors = [
        ConditionNote(
            "Water Temperature",
            f"{inputs.water_temperature:g}°C (Optimal: {profile['optimal_temp']}°C)",
            _band(temp_dev, tol / 2, tol),
        ),
        ConditionNote(
            "Stocking Density",
            f"{density:g} fish/m³ (Optimal: {opt_d})",
            _band(dens_dev, opt_d * 0.2, opt_d * 0.4),
        ),
        ConditionNote(
            "Feed Conversion",
            f"FCR: {fcr:.2f} (Default: {def_fcr})",
            "Optimal" if fcr <= def_fcr * 1.1 else "Acceptable" if fcr <= def_fcr * 1.3 else "Suboptimal",
        ),
    ]

    recs: List[str] = []
    if temp_dev > tol / 2:
        recs.append("Consider temperature control measures for optimal growth")
    if dens_dev > opt_d * 0.2:
        recs.append("Adjust stocking density to optimize growth and resource utilization")
    if fcr > def_fcr * 1.1:
        recs.append("Review feeding practices to improve feed conversion efficiency")
    if feed_fraction < 0.02:
        recs.append("Consider increasing feeding rate for better growth performance")
    elif feed_fraction > 0.04:
        recs.append("Monitor water quality closely with high feeding rate")

    log.debug("Growth prediction: species=%s months=%d final=%.2f", inputs.species, months, final)
    return GrowthPrediction(
        final_weight=final,
        total_biomass=final * density,
        feed_consumption=feed_consumption,
        feed_cost=inputs.feed_cost * feed_consumption,
        daily_growth_rate=base_rate,
        efficiency_score=efficiency * 100,
        monthly_projections=projections,
        environmental_factors=factors,
        recommendations=recs,
    )


def projections_frame(prediction: GrowthPrediction) -> pd.DataFrame:
    """Monthly projections as a DataFrame for tables and charts."""
    return pd.DataFrame([vars(p) for p in prediction.monthly_projections])


def tracker_rows(samples: Sequence[GrowthSample]) -> List[Dict[str, Any]]:
    return [
        {
            "date": s.date.isoformat(),
            "weight": s.weight,
            "length": s.length,
            "sampleSize": s.sample_size,
            "notes": s.notes,
        }
        for s in samples
    ]


