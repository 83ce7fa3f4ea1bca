from __future__ import annotations

"""
Production planning tools: the production calculator, the stocking
calculator, the yield estimator and the fish stress indicator.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .forms import parse_number, require_fields, safe_ratio
from .reference_data import lookup, table

log = logging.getLogger(__name__)

AERATION_SYSTEMS = ("Paddle Wheel", "Air Diffuser", "Surface Aerator", "No Aeration")
FEEDING_STRATEGIES = ("Intensive (3-4 times/day)", "Semi-intensive (2 times/day)", "Extensive (once/day)")

FEED_PRICE_PER_KG = 1.2
YIELD_FEED_PRICE_PER_KG = 2.0
YIELD_FISH_PRICE_PER_KG = 4.0


# ---------------------------------------------------------------------------
# Fish production calculator
# ---------------------------------------------------------------------------


@dataclass
class ProductionInputs:
    species: str
    pond_area: float
    pond_depth: float
    stocking_density: float  # kg/m³
    initial_weight: float  # g
    target_weight: float  # g
    survival_rate: float  # %
    growth_rate: float  # g/day
    feeding_rate: float  # %
    water_exchange: float  # % per day

    FIELDS = (
        "species",
        "pondArea",
        "pondDepth",
        "stockingDensity",
        "initialWeight",
        "targetWeight",
        "survivalRate",
        "growthRate",
        "feedingRate",
        "waterExchange",
    )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ProductionInputs":
        require_fields(form, cls.FIELDS, context="Fish calculator")
        return cls(
            species=str(form["species"]),
            pond_area=parse_number(form["pondArea"], "pondArea"),
            pond_depth=parse_number(form["pondDepth"], "pondDepth"),
            stocking_density=parse_number(form["stockingDensity"], "stockingDensity"),
            initial_weight=parse_number(form["initialWeight"], "initialWeight"),
            target_weight=parse_number(form["targetWeight"], "targetWeight"),
            survival_rate=parse_number(form["survivalRate"], "survivalRate"),
            growth_rate=parse_number(form["growthRate"], "growthRate"),
            feeding_rate=parse_number(form["feedingRate"], "feedingRate"),
            water_exchange=parse_number(form["waterExchange"], "waterExchange"),
        )


@dataclass
class EconomicMetrics:
    estimated_revenue: float
    feed_cost: float
    seed_cost: float
    operating_cost: float
    estimated_profit: float


@dataclass
class ProductionResult:
    total_volume: float
    stocking_number: int
    initial_biomass: float
    final_biomass: float
    production_cycle: int
    feed_required: float
    water_required: float
    economic_metrics: EconomicMetrics


def calculate_production(inputs: ProductionInputs) -> ProductionResult:
    profile = lookup("production_species", inputs.species, "species")
    if inputs.initial_weight <= 0 or inputs.growth_rate <= 0:
        raise ValueError("Fish calculator: initialWeight and growthRate must be greater than zero")

    initial_kg = inputs.initial_weight / 1000
    target_kg = inputs.target_weight / 1000
    survival = inputs.survival_rate / 100
    volume = inputs.pond_area * inputs.pond_depth

    stocking = math.floor(volume * inputs.stocking_density / initial_kg)
    initial_biomass = stocking * initial_kg
    final_biomass = stocking * survival * target_kg
    cycle = math.ceil((inputs.target_weight - inputs.initial_weight) / inputs.growth_rate)
    feed = (final_biomass - initial_biomass) * profile["feed_conversion"]
    water = volume * (inputs.water_exchange / 100) * cycle

    feed_cost = feed * FEED_PRICE_PER_KG
    seed_cost = stocking * profile["seed_cost"]
    operating = (feed_cost + seed_cost) * 0.3
    revenue = final_biomass * profile["market_price"]
    profit = revenue - (feed_cost + seed_cost + operating)

    log.debug("Production: species=%s stocking=%d cycle=%d profit=%.2f", inputs.species, stocking, cycle, profit)
    return ProductionResult(
        total_volume=volume,
        stocking_number=stocking,
        initial_biomass=initial_biomass,
        final_biomass=final_biomass,
        production_cycle=cycle,
        feed_required=feed,
        water_required=water,
        economic_metrics=EconomicMetrics(
            estimated_revenue=revenue,
            feed_cost=feed_cost,
            seed_cost=seed_cost,
            operating_cost=operating,
            estimated_profit=profit,
        ),
    )


# ---------------------------------------------------------------------------
# Stocking
# ---------------------------------------------------------------------------


@dataclass
class StockingInputs:
    pond_length: float
    pond_width: float
    pond_depth: float
    fish_species: str
    target_size: float  # g
    water_exchange_rate: float  # % per day
    aeration_system: str
    feeding_strategy: str
    expected_survival: float  # %
    production_cycle: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "StockingInputs":
        require_fields(
            form,
            [
                "pondLength",
                "pondWidth",
                "pondDepth",
                "fishSpecies",
                "targetSize",
                "waterExchangeRate",
                "aerationSystem",
                "feedingStrategy",
                "expectedSurvival",
            ],
            context="Fish stocking",
        )
        return cls(
            pond_length=parse_number(form["pondLength"], "pondLength"),
            pond_width=parse_number(form["pondWidth"], "pondWidth"),
            pond_depth=parse_number(form["pondDepth"], "pondDepth"),
            fish_species=str(form["fishSpecies"]),
            target_size=parse_number(form["targetSize"], "targetSize"),
            water_exchange_rate=parse_number(form["waterExchangeRate"], "waterExchangeRate"),
            aeration_system=str(form["aerationSystem"]),
            feeding_strategy=str(form["feedingStrategy"]),
            expected_survival=parse_number(form["expectedSurvival"], "expectedSurvival"),
            production_cycle=parse_number(form.get("productionCycle"), "productionCycle"),
        )


@dataclass
class StockingResult:
    pond_volume: float
    recommended_stocking_density: float
    total_fish_count: int
    expected_production: float
    aeration_requirement: float
    daily_feed_requirement: float
    water_quality_management: List[str]
    risk_factors: List[str]
    recommendations: List[str]


def feed_rate_for_strategy(strategy: str) -> float:
    if "Intensive" in strategy:
        return 0.05
    if "Semi-intensive" in strategy:
        return 0.03
    return 0.02


def exchange_factor(rate: float) -> float:
    if rate < 5:
        return 0.7
    if rate < 10:
        return 0.85
    return 1.0


def calculate_stocking(inputs: StockingInputs) -> StockingResult:
    profile = lookup("stocking_species", inputs.fish_species, "species")
    if inputs.target_size <= 0 or inputs.expected_survival <= 0:
        raise ValueError("Fish stocking: targetSize and expectedSurvival must be greater than zero")

    volume = inputs.pond_length * inputs.pond_width * inputs.pond_depth
    aeration_f = 0.6 if inputs.aeration_system == "No Aeration" else 1.0
    density = profile["max_density"] * aeration_f * exchange_factor(inputs.water_exchange_rate)
    survival = inputs.expected_survival / 100
    target_kg = inputs.target_size / 1000

    total_fish = math.floor(volume * density / target_kg / survival)
    production = total_fish * target_kg * survival
    aeration = production * profile["oxygen_requirement"] / 1000
    daily_feed = production * feed_rate_for_strategy(inputs.feeding_strategy)

    water_mgmt = [
        "Monitor dissolved oxygen levels twice daily",
        "Check pH and ammonia levels weekly",
        f"Maintain water exchange rate of {inputs.water_exchange_rate:g}% daily",
    ]
    risks: List[str] = []
    if inputs.aeration_system == "No Aeration":
        risks.append("Limited aeration may restrict growth and survival")
    if inputs.water_exchange_rate < 5:
        risks.append("Low water exchange rate increases water quality risks")

    recs = [
        "Stock during early morning or evening hours",
        f"Implement {inputs.feeding_strategy.lower()} feeding schedule",
        "Monitor growth rates weekly",
    ]
    if aeration_f < 1:
        recs.append("Consider adding supplemental aeration")

    log.debug("Stocking: species=%s density=%.2f fish=%d", inputs.fish_species, density, total_fish)
    return StockingResult(
        pond_volume=volume,
        recommended_stocking_density=density,
        total_fish_count=total_fish,
        expected_production=production,
        aeration_requirement=aeration,
        daily_feed_requirement=daily_feed,
        water_quality_management=water_mgmt,
        risk_factors=risks,
        recommendations=recs,
    )


# ---------------------------------------------------------------------------
# Yield
# ---------------------------------------------------------------------------


@dataclass
class YieldInputs:
    species_type: str
    initial_stocking: float
    initial_weight: float  # g
    growth_period: float  # days
    expected_fcr: float
    mortality_rate: float  # %
    water_quality: str = "Good"
    seasonality: str = ""
    management_level: str = ""
    feeding_rate: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "YieldInputs":
        require_fields(
            form,
            ["speciesType", "initialStocking", "initialWeight", "growthPeriod", "expectedFCR", "mortalityRate"],
            context="Fish yield",
        )
        return cls(
            species_type=str(form["speciesType"]),
            initial_stocking=parse_number(form["initialStocking"], "initialStocking"),
            initial_weight=parse_number(form["initialWeight"], "initialWeight"),
            growth_period=parse_number(form["growthPeriod"], "growthPeriod"),
            expected_fcr=parse_number(form["expectedFCR"], "expectedFCR"),
            mortality_rate=parse_number(form["mortalityRate"], "mortalityRate"),
            water_quality=str(form.get("waterQuality") or ""),
            seasonality=str(form.get("seasonality") or ""),
            management_level=str(form.get("managementLevel") or ""),
            feeding_rate=parse_number(form.get("feedingRate"), "feedingRate"),
        )


@dataclass
class YieldResult:
    expected_yield: float
    survival_rate: float
    final_weight: float
    biomass_gain: float
    feed_required: float
    production_efficiency: Optional[float]
    growth_modifier: float
    feed_cost: float
    expected_revenue: float
    profit_margin: Optional[float]
    recommendations: List[str]
    risk_factors: List[str]


def growth_modifier(water_quality: str, season: str, management: str) -> float:
    """Water x season x management; unselected options count as 1."""
    mods = table("yield_modifiers")
    return (
        mods["water_quality"].get(water_quality, 1.0)
        * mods["season"].get(season, 1.0)
        * mods["management"].get(management, 1.0)
    )


def estimate_yield(inputs: YieldInputs) -> YieldResult:
    profile = lookup("yield_species", inputs.species_type, "species")
    survival = (100 - inputs.mortality_rate) / 100
    modifier = growth_modifier(inputs.water_quality, inputs.seasonality, inputs.management_level)

    final_weight = min(inputs.initial_weight + profile["growth_rate"] * modifier * inputs.growth_period, profile["max_size"])
    gain = inputs.initial_stocking * survival * (final_weight - inputs.initial_weight) / 1000
    feed = gain * inputs.expected_fcr
    efficiency = safe_ratio(gain, feed, default=None)
    if efficiency is not None:
        efficiency *= 100

    feed_cost = feed * YIELD_FEED_PRICE_PER_KG
    revenue = gain * YIELD_FISH_PRICE_PER_KG
    margin = safe_ratio(revenue - feed_cost, revenue, default=None)
    if margin is not None:
        margin *= 100

    recs: List[str] = []
    risks: List[str] = []
    if efficiency is not None and efficiency < 50:
        recs.append("Consider optimizing feeding strategy to improve efficiency")
    if margin is not None and margin < 20:
        recs.append("Review cost structure and consider premium markets")
    if modifier < 0.8:
        recs.append("Improve culture conditions to enhance growth rate")
    if inputs.water_quality == "Poor":
        risks.append("Poor water quality may significantly impact growth and survival")
    if inputs.mortality_rate > 20:
        risks.append("High mortality rate indicates potential health or management issues")
    if inputs.expected_fcr > 2.0:
        risks.append("High FCR suggests inefficient feed utilization")

    log.debug("Yield: species=%s modifier=%.3f gain=%.2f kg", inputs.species_type, modifier, gain)
    return YieldResult(
        expected_yield=gain,
        survival_rate=survival * 100,
        final_weight=final_weight,
        biomass_gain=gain,
        feed_required=feed,
        production_efficiency=efficiency,
        growth_modifier=modifier,
        feed_cost=feed_cost,
        expected_revenue=revenue,
        profit_margin=margin,
        recommendations=recs,
        risk_factors=risks,
    )


# ---------------------------------------------------------------------------
# Stress indicator
# ---------------------------------------------------------------------------


@dataclass
class StressInputs:
    species: str
    water_temperature: float
    dissolved_oxygen: float
    ph: Optional[float] = None
    ammonia: Optional[float] = None
    nitrite: Optional[float] = None
    salinity: Optional[float] = None
    stocking_density: Optional[float] = None
    water_flow: Optional[float] = None
    turbidity: Optional[float] = None
    behavior: List[str] = field(default_factory=list)
    feeding_response: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "StressInputs":
        require_fields(form, ["species", "waterTemperature", "dissolvedOxygen"], context="Fish stress")

        def opt(key: str) -> Optional[float]:
            return parse_number(form.get(key), key, default=None)

        behavior = form.get("behavior") or []
        if isinstance(behavior, str):
            behavior = [b.strip() for b in behavior.split(",") if b.strip()]
        return cls(
            species=str(form["species"]),
            water_temperature=parse_number(form["waterTemperature"], "waterTemperature"),
            dissolved_oxygen=parse_number(form["dissolvedOxygen"], "dissolvedOxygen"),
            ph=opt("ph"),
            ammonia=opt("ammonia"),
            nitrite=opt("nitrite"),
            salinity=opt("salinity"),
            stocking_density=opt("stockingDensity"),
            water_flow=opt("waterFlow"),
            turbidity=opt("turbidity"),
            behavior=list(behavior),
            feeding_response=str(form.get("feedingResponse") or ""),
        )


@dataclass
class EconomicImpact:
    growth_reduction: float
    mortality_risk: float
    treatment_cost: float


@dataclass
class StressAnalysis:
    stress_level: str
    overall_score: float
    risk_factors: Dict[str, float]
    causes: List[str]
    recommendations: List[str]
    immediate_actions: List[str]
    long_term_actions: List[str]
    monitoring_plan: List[str]
    economic_impact: EconomicImpact


def water_quality_score(inputs: StressInputs, profile: Mapping[str, Any]) -> float:
    """0..1 water quality score; unfilled optional readings cost nothing."""
    score = 100.0
    t = profile["temperature"]
    score -= abs(inputs.water_temperature - t["optimal"]) / (t["max"] - t["min"]) * 30
    do = profile["dissolvedOxygen"]
    if inputs.dissolved_oxygen < do["min"]:
        score -= 30
    elif inputs.dissolved_oxygen < do["optimal"]:
        score -= 15
    if inputs.ph is not None:
        score -= abs(inputs.ph - profile["ph"]["optimal"]) * 10
    if inputs.ammonia is not None:
        score -= inputs.ammonia / profile["ammonia_max"] * 20
    if inputs.nitrite is not None:
        score -= inputs.nitrite / profile["nitrite_max"] * 20
    if inputs.salinity is not None:
        s = profile["salinity"]
        score -= abs(inputs.salinity - s["optimal"]) / (s["max"] - s["min"]) * 10
    return max(0.0, min(100.0, score)) / 100


def behavior_score(observed: Sequence[str]) -> float:
    behaviors = table("stress_behaviors")
    total = sum(behaviors[b]["severity"] for b in observed if b in behaviors)
    return max(0.0, 1 - total / (len(behaviors) * 3))


def feeding_score(response: str) -> float:
    responses = table("stress_feeding_responses")
    if response not in responses:
        return 1.0
    return 1 - responses[response]["severity"] / 3


def environmental_score(inputs: StressInputs) -> float:
    score = 100.0
    density, flow, turbidity = inputs.stocking_density, inputs.water_flow, inputs.turbidity
    if density is not None:
        if density > 50:
            score -= 30
        elif density > 30:
            score -= 15
    if flow is not None:
        if flow < 1:
            score -= 30
        elif flow < 2:
            score -= 15
    if turbidity is not None:
        if turbidity > 50:
            score -= 20
        elif turbidity > 30:
            score -= 10
    return max(0.0, min(100.0, score)) / 100


def stress_level(score: float) -> str:
    if score > 0.7:
        return "Low"
    if score > 0.4:
        return "Moderate"
    return "High"


def analyze_stress(inputs: StressInputs) -> StressAnalysis:
    profile = lookup("stress_species", inputs.species, "species")
    water = water_quality_score(inputs, profile)
    behavior = behavior_score(inputs.behavior)
    feeding = feeding_score(inputs.feeding_response)
    environmental = environmental_score(inputs)
    physiological = (behavior + feeding) / 2
    overall = (water + behavior + feeding + environmental + physiological) / 5
    level = stress_level(overall)

    causes: List[str] = []
    if water < 0.6:
        causes.append("Poor water quality parameters")
    if behavior < 0.6:
        causes.append("Abnormal behavior patterns")
    if feeding < 0.6:
        causes.append("Reduced feeding response")
    if environmental < 0.6:
        causes.append("Suboptimal environmental conditions")
    if physiological < 0.6:
        causes.append("Physiological stress indicators")

    recs: List[str] = []
    if water < 0.6:
        recs.append(
            f"Optimize water parameters for {inputs.species} "
            f"(Temp: {profile['temperature']['optimal']}°C, DO: {profile['dissolvedOxygen']['optimal']} mg/L)"
        )
    if behavior < 0.6:
        recs.append("Monitor fish behavior closely and identify specific stressors")
    if feeding < 0.6:
        recs.append("Adjust feeding regime and monitor feed consumption")
    if environmental < 0.6:
        recs.append("Improve environmental conditions (water flow, stocking density)")

    actions: List[str] = []
    if water < 0.4:
        actions.append("Perform emergency water exchange")
    if behavior < 0.4:
        actions.append("Isolate affected fish if possible")
    if feeding < 0.4:
        actions.append("Temporarily reduce feeding rate")
    if environmental < 0.4:
        actions.append("Increase aeration immediately")

    impact = table("stress_economic_impact")[level]
    log.debug("Fish stress: species=%s overall=%.3f level=%s", inputs.species, overall, level)
    return StressAnalysis(
        stress_level=level,
        overall_score=overall,
        risk_factors={
            "waterQuality": water,
            "behavior": behavior,
            "feeding": feeding,
            "environmental": environmental,
            "physiological": physiological,
        },
        causes=causes,
        recommendations=recs,
        immediate_actions=actions,
        long_term_actions=[
            "Implement regular water quality monitoring schedule",
            "Develop emergency response protocols",
            "Train staff in stress recognition and management",
            "Upgrade water treatment systems if necessary",
            "Review and optimize feeding protocols",
        ],
        monitoring_plan=[
            "Daily water quality checks",
            "Twice daily behavior observations",
            "Weekly growth sampling",
            "Monthly health assessment",
            "Regular stress indicator monitoring",
        ],
        economic_impact=EconomicImpact(
            growth_reduction=impact["growth_reduction"],
            mortality_risk=impact["mortality_risk"],
            treatment_cost=impact["treatment_cost"],
        ),
    )
