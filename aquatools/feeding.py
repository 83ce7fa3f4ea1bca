from __future__ import annotations

"""
Feed tools.

The feed-management summary works on schedule and stock records kept by
`aquatools.records.FeedManagementStore`; the FCR calculator, the FCR optimizer
and the feeding calculator are single-shot form calculators.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from .forms import parse_number, require_fields, safe_ratio
from .reference_data import lookup, table

log = logging.getLogger(__name__)

FEED_COST_PER_UNIT = 45
LOW_STOCK_DAYS = 7

GROWTH_STAGES = ("Fingerling", "Juvenile", "Grower", "Finisher")
OPTIMIZER_FEED_TYPES = ("Commercial pellet", "Farm-made feed", "Floating feed", "Sinking feed", "Extruded feed")
FEEDING_FREQUENCIES = (
    "1 time per day",
    "2 times per day",
    "3 times per day",
    "4 times per day",
    "Continuous feeding",
)
FEEDING_STAGES = ("fry", "fingerling", "juvenile", "adult")


# ---------------------------------------------------------------------------
# Feed management summary
# ---------------------------------------------------------------------------


@dataclass
class FeedSchedule:
    id: str
    time: str
    amount: float  # kg
    feed_type: str
    notes: str = ""


@dataclass
class FeedStock:
    feed_type: str
    amount: float
    unit: str = "kg"
    last_updated: str = ""


@dataclass
class StockStatus:
    feed_type: str
    stock: float
    daily_usage: float
    days_remaining: int
    low_stock: bool


def daily_usage(schedules: Iterable[FeedSchedule], feed_type: str) -> float:
    return sum(s.amount for s in schedules if s.feed_type == feed_type)


def days_remaining(stock: float, usage: float) -> int:
    """Whole days of feed left; 0 when nothing is scheduled."""
    if usage <= 0:
        return 0
    return math.floor(stock / usage)


def stock_summary(schedules: Iterable[FeedSchedule], stock: Iterable[FeedStock]) -> List[StockStatus]:
    schedules = list(schedules)
    out: List[StockStatus] = []
    for item in stock:
        usage = daily_usage(schedules, item.feed_type)
        days = days_remaining(item.amount, usage)
        out.append(
            StockStatus(
                feed_type=item.feed_type,
                stock=item.amount,
                daily_usage=usage,
                days_remaining=days,
                low_stock=days < LOW_STOCK_DAYS,
            )
        )
    return out


# ---------------------------------------------------------------------------
# FCR calculator
# ---------------------------------------------------------------------------


@dataclass
class FcrInputs:
    species: str
    initial_weight: float  # kg biomass
    final_weight: float  # kg biomass
    feed_given: float  # kg
    mortality: float = 0.0
    duration: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "FcrInputs":
        require_fields(form, ["species", "initialWeight", "finalWeight", "feedGiven"], context="FCR calculator")
        return cls(
            species=str(form["species"]),
            initial_weight=parse_number(form["initialWeight"], "initialWeight"),
            final_weight=parse_number(form["finalWeight"], "finalWeight"),
            feed_given=parse_number(form["feedGiven"], "feedGiven"),
            mortality=parse_number(form.get("mortality"), "mortality"),
            duration=parse_number(form.get("duration"), "duration"),
        )


@dataclass
class CostImplications:
    current_cost: float
    potential_savings: float


@dataclass
class FcrResult:
    fcr: Optional[float]
    efficiency: Optional[float]
    target_fcr: float
    deviation: Optional[float]
    efficiency_color: str
    recommendations: List[str]
    cost_implications: CostImplications


def fcr_recommendations(fcr: float, target: float, efficiency: float) -> List[str]:
    if fcr > target + 0.5:
        recs = [
            "Significant improvement needed in feed management",
            "Review feeding frequency and portion sizes",
            "Check for feed wastage during feeding",
            "Assess water quality parameters",
        ]
    elif fcr > target + 0.2:
        recs = [
            "Monitor feeding behavior more closely",
            "Adjust feed amounts based on appetite",
            "Consider feed quality and storage conditions",
        ]
    elif fcr > target:
        recs = [
            "Fine-tune feeding schedule",
            "Continue monitoring growth rates",
            "Maintain current water quality",
        ]
    else:
        recs = [
            "Maintain current feeding practices",
            "Document successful management strategies",
            "Consider sharing best practices",
        ]
    if efficiency < -20:
        recs += ["Urgent action needed to improve feed efficiency", "Consider consulting a feed specialist"]
    return recs


def efficiency_color(efficiency: Optional[float]) -> str:
    if efficiency is None:
        return "info"
    if efficiency >= 0:
        return "success"
    if efficiency >= -10:
        return "warning"
    return "error"


def calculate_fcr(inputs: FcrInputs) -> FcrResult:
    target = lookup("fcr_targets", inputs.species, "species")
    gain = inputs.final_weight - inputs.initial_weight
    current_cost = round(inputs.feed_given * FEED_COST_PER_UNIT, 2)
    fcr = safe_ratio(inputs.feed_given, gain, default=None)
    if fcr is None:
        log.warning("FCR calculator: zero biomass gain, FCR undefined")
        return FcrResult(
            fcr=None,
            efficiency=None,
            target_fcr=target,
            deviation=None,
            efficiency_color=efficiency_color(None),
            recommendations=["No biomass gain recorded; FCR cannot be calculated"],
            cost_implications=CostImplications(current_cost=current_cost, potential_savings=0.0),
        )

    efficiency = (target - fcr) / target * 100
    ideal_cost = gain * target * FEED_COST_PER_UNIT
    savings = inputs.feed_given * FEED_COST_PER_UNIT - ideal_cost if fcr > target else 0.0
    log.debug("FCR: species=%s fcr=%.3f target=%.2f", inputs.species, fcr, target)
    return FcrResult(
        fcr=round(fcr, 2),
        efficiency=round(efficiency, 2),
        target_fcr=target,
        deviation=round(fcr - target, 2),
        efficiency_color=efficiency_color(efficiency),
        recommendations=fcr_recommendations(fcr, target, efficiency),
        cost_implications=CostImplications(current_cost=current_cost, potential_savings=round(savings, 2)),
    )


# ---------------------------------------------------------------------------
# FCR optimizer
# ---------------------------------------------------------------------------


@dataclass
class OptimizerInputs:
    feed_amount: float
    initial_weight: float  # kg per fish
    final_weight: float  # kg per fish
    number_of_fish: float
    feeding_period: float  # days
    water_temperature: float
    feed_protein_content: float  # %
    growth_stage: str = ""
    feed_type: str = ""
    feeding_frequency: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "OptimizerInputs":
        require_fields(
            form,
            [
                "feedAmount",
                "initialWeight",
                "finalWeight",
                "numberOfFish",
                "feedingPeriod",
                "waterTemperature",
                "feedProteinContent",
            ],
            context="FCR optimizer",
        )
        return cls(
            feed_amount=parse_number(form["feedAmount"], "feedAmount"),
            initial_weight=parse_number(form["initialWeight"], "initialWeight"),
            final_weight=parse_number(form["finalWeight"], "finalWeight"),
            number_of_fish=parse_number(form["numberOfFish"], "numberOfFish"),
            feeding_period=parse_number(form["feedingPeriod"], "feedingPeriod"),
            water_temperature=parse_number(form["waterTemperature"], "waterTemperature"),
            feed_protein_content=parse_number(form["feedProteinContent"], "feedProteinContent"),
            growth_stage=str(form.get("growthStage") or ""),
            feed_type=str(form.get("feedType") or ""),
            feeding_frequency=str(form.get("feedingFrequency") or ""),
        )


@dataclass
class OptimizerResult:
    fcr: Optional[float]
    feed_efficiency: Optional[float]
    daily_growth_rate: Optional[float]
    feed_cost_per_kg: float
    protein_efficiency_ratio: Optional[float]
    recommendations: List[str] = field(default_factory=list)
    optimal_feeding_schedule: List[str] = field(default_factory=list)
    cost_optimization: List[str] = field(default_factory=list)


_STAGE_ADVICE = {
    "Fingerling": ("High protein diet recommended for rapid growth", "Feed 4-6 times daily in small quantities"),
    "Juvenile": ("Balanced protein-energy ratio important", "Feed 3-4 times daily"),
    "Grower": ("Monitor feed consumption closely", "Feed 2-3 times daily"),
    "Finisher": ("Focus on feed quality for final growth phase", "Feed 1-2 times daily"),
}

_FEED_TYPE_ADVICE = {
    "Commercial pellet": "Compare different brands for best price-quality ratio",
    "Farm-made feed": "Monitor ingredient quality and storage conditions",
    "Floating feed": "Observe feeding behavior to prevent waste",
    "Sinking feed": "Ensure proper feeding time for complete consumption",
}


def optimize_fcr(inputs: OptimizerInputs) -> OptimizerResult:
    gain = (inputs.final_weight - inputs.initial_weight) * inputs.number_of_fish
    fcr = safe_ratio(inputs.feed_amount, gain, default=None)
    efficiency = safe_ratio(gain, inputs.feed_amount, default=None)
    if efficiency is not None:
        efficiency *= 100
    daily_growth = None
    if inputs.number_of_fish and inputs.feeding_period:
        daily_growth = gain / inputs.number_of_fish / inputs.feeding_period
    per = safe_ratio(gain, inputs.feed_amount * inputs.feed_protein_content / 100, default=None)

    recs: List[str] = []
    schedule: List[str] = []
    costs: List[str] = []
    if fcr is not None:
        if fcr > 2.0:
            recs.append("High FCR detected - review feeding strategy")
        elif fcr < 1.2:
            recs.append("Excellent FCR - maintain current practices")
    if inputs.water_temperature < 25:
        recs.append("Consider increasing water temperature for optimal feed conversion")
        schedule.append("Feed during warmest part of the day")
    elif inputs.water_temperature > 32:
        recs.append("High temperature may reduce feed efficiency")
        schedule.append("Feed during cooler parts of the day")
    if inputs.growth_stage in _STAGE_ADVICE:
        rec, sched = _STAGE_ADVICE[inputs.growth_stage]
        recs.append(rec)
        schedule.append(sched)
    if inputs.feed_type in _FEED_TYPE_ADVICE:
        costs.append(_FEED_TYPE_ADVICE[inputs.feed_type])
    if inputs.feed_protein_content < 28:
        recs.append("Consider increasing protein content for better growth")
    elif inputs.feed_protein_content > 40:
        costs.append("High protein content may increase costs unnecessarily")
    if inputs.feeding_frequency == "1 time per day":
        recs.append("Consider increasing feeding frequency for better feed utilization")
    elif inputs.feeding_frequency == "Continuous feeding":
        costs.append("Monitor feed waste in continuous feeding system")

    log.debug("FCR optimizer: gain=%.3f fcr=%s stage=%s", gain, fcr, inputs.growth_stage)
    return OptimizerResult(
        fcr=fcr,
        feed_efficiency=efficiency,
        daily_growth_rate=daily_growth,
        feed_cost_per_kg=2.5 if inputs.feed_type == "Commercial pellet" else 1.8,
        protein_efficiency_ratio=per,
        recommendations=recs,
        optimal_feeding_schedule=schedule,
        cost_optimization=costs,
    )


# ---------------------------------------------------------------------------
# Feeding calculator
# ---------------------------------------------------------------------------


@dataclass
class FeedingInputs:
    species: str
    growth_stage: str  # fry | fingerling | juvenile | adult
    biomass: float  # kg
    water_temperature: float

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "FeedingInputs":
        require_fields(
            form, ["species", "growthStage", "biomass", "waterTemperature"], context="Feeding calculator"
        )
        return cls(
            species=str(form["species"]),
            growth_stage=str(form["growthStage"]),
            biomass=parse_number(form["biomass"], "biomass"),
            water_temperature=parse_number(form["waterTemperature"], "waterTemperature"),
        )


@dataclass
class FeedingResult:
    condition: str  # optimal | suboptimal
    feeding_rate: float  # % body weight per day
    daily_amount: float  # kg
    feedings_per_day: int
    amount_per_feeding: float  # kg
    reminder_interval_hours: float
    tips: List[str]


def calculate_feeding(inputs: FeedingInputs) -> FeedingResult:
    guide = lookup("feeding_guides", inputs.species, "species")
    if inputs.growth_stage not in guide["frequency"]:
        raise ValueError(
            f"Feeding calculator: unknown growth stage {inputs.growth_stage!r}. "
            f"Expected one of: {', '.join(guide['frequency'])}"
        )
    band = guide["optimal"]["temperature"]
    condition = "optimal" if band["min"] <= inputs.water_temperature <= band["max"] else "suboptimal"
    rate = guide[condition]["rates"][inputs.growth_stage]
    frequency = guide["frequency"][inputs.growth_stage]
    daily = inputs.biomass * rate / 100

    log.debug("Feeding: species=%s stage=%s condition=%s daily=%.3f", inputs.species, inputs.growth_stage, condition, daily)
    return FeedingResult(
        condition=condition,
        feeding_rate=rate,
        daily_amount=daily,
        feedings_per_day=frequency,
        amount_per_feeding=daily / frequency,
        reminder_interval_hours=24 / frequency,
        tips=list(guide["tips"]),
    )


def feeding_species() -> List[str]:
    return list(table("feeding_guides").keys())
