from __future__ import annotations

"""Business tools: market pricing, farm profitability and harvest timing.

All three take their numbers from a single form. Market analysis and harvest
timing include small random components (trend, price history, weekly price
noise); pass a seeded ``random.Random`` for repeatable output.
"""

import calendar
import logging
import math
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional

from .forms import choose, coerce_numeric, parse_number, require_fields, safe_ratio
from .growth import parse_date
from .reference_data import lookup, table

log = logging.getLogger(__name__)

PRODUCT_TYPES = ("Fresh Whole", "Fresh Fillet", "Frozen Whole", "Frozen Fillet", "Live", "Processed")
TARGET_MARKETS = ("Local Retail", "Wholesale", "Export", "Restaurants", "Processors")
QUALITY_GRADES = ("Premium", "Standard", "Economy")
MARKET_SEASONS = ("Peak Season", "Off Season", "Year Round", "Festival Season")
WATER_QUALITY_GRADES = ("Excellent", "Good", "Fair", "Poor")
# Longest culture period the harvest advisor will plan
MAX_HARVEST_DAYS = 3650
MONTHS = [calendar.month_abbr[i] for i in range(1, 13)]


# ---------------------------------------------------------------------------
# Market analysis
# ---------------------------------------------------------------------------


@dataclass
class MarketInputs:
    species: str
    product_type: str
    quantity: float
    production_cost: float
    target_market: str
    competitor_price: float
    seasonality: str
    quality_grade: str
    transport_cost: float
    storage_life: float

    FIELDS = (
        "species",
        "productType",
        "quantity",
        "productionCost",
        "targetMarket",
        "competitorPrice",
        "seasonality",
        "qualityGrade",
        "transportCost",
        "storageLife",
    )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "MarketInputs":
        require_fields(form, cls.FIELDS, context="Market analysis")
        return cls(
            species=str(form["species"]),
            product_type=str(form["productType"]),
            quantity=coerce_numeric(form["quantity"], "quantity"),
            production_cost=coerce_numeric(form["productionCost"], "productionCost"),
            target_market=str(form["targetMarket"]),
            competitor_price=coerce_numeric(form["competitorPrice"], "competitorPrice"),
            seasonality=str(form["seasonality"]),
            quality_grade=str(form["qualityGrade"]),
            transport_cost=coerce_numeric(form["transportCost"], "transportCost"),
            storage_life=coerce_numeric(form["storageLife"], "storageLife"),
        )


@dataclass
class PriceAnalysis:
    suggested_price: float
    min_price: float
    max_price: float
    margin: float


@dataclass
class CompetitiveAnalysis:
    position: str
    advantages: List[str]
    risks: List[str]


@dataclass
class MarketTrend:
    trend: str
    seasonal_demand: str
    growth_potential: float


@dataclass
class MarketAnalysis:
    price_analysis: PriceAnalysis
    competitive_analysis: CompetitiveAnalysis
    market_trends: MarketTrend
    recommendations: List[str]
    price_history: List[Dict[str, Any]] = field(default_factory=list)


def price_history(rng: random.Random) -> List[Dict[str, Any]]:
    """Twelve months of illustrative price, demand and supply figures."""
    return [
        {
            "month": month,
            "price": 15 + rng.random() * 10,
            "demand": 50 + rng.random() * 50,
            "supply": 40 + rng.random() * 60,
        }
        for month in MONTHS
    ]


def analyze_market(inputs: MarketInputs, rng: Optional[random.Random] = None) -> MarketAnalysis:
    rng = rng or random.Random()
    total_cost = inputs.production_cost + inputs.transport_cost
    min_price = total_cost * 1.1
    max_price = inputs.competitor_price * 1.1
    suggested = (min_price + max_price) / 2
    margin = safe_ratio(suggested - total_cost, suggested) * 100

    position = "competitive"
    if suggested < inputs.competitor_price:
        position = "aggressive"
    if suggested > inputs.competitor_price * 1.1:
        position = "premium"

    advantages: List[str] = []
    risks: List[str] = []
    if inputs.quality_grade == "Premium":
        advantages += ["High quality product positioning", "Better profit margins"]
        risks.append("Limited market size")
    if inputs.target_market == "Export":
        advantages += ["Access to higher-value markets", "Currency advantages"]
        risks += ["Complex logistics", "International regulations"]
    if inputs.quantity > 1000:
        advantages.append("Economy of scale")
        risks.append("Storage requirements")

    if rng.random() > 0.5:
        trend = "up"
    else:
        trend = "stable" if rng.random() > 0.5 else "down"
    seasonal_demand = {"Peak Season": "high", "Off Season": "low"}.get(inputs.seasonality, "medium")
    growth_potential = rng.random() * 20 + 5

    recommendations: List[str] = []
    if margin < 15:
        recommendations += ["Consider cost reduction strategies", "Explore value-added products"]
    if position == "premium":
        recommendations += ["Focus on quality certification", "Develop premium market channels"]
    if seasonal_demand == "high":
        recommendations += ["Build inventory for peak demand", "Secure advance contracts"]

    log.debug("Market analysis: suggested=%.2f margin=%.1f position=%s", suggested, margin, position)
    return MarketAnalysis(
        price_analysis=PriceAnalysis(
            suggested_price=round(suggested, 2),
            min_price=round(min_price, 2),
            max_price=round(max_price, 2),
            margin=round(margin, 1),
        ),
        competitive_analysis=CompetitiveAnalysis(position=position, advantages=advantages, risks=risks),
        market_trends=MarketTrend(trend=trend, seasonal_demand=seasonal_demand, growth_potential=growth_potential),
        recommendations=recommendations,
        price_history=price_history(rng),
    )


# ---------------------------------------------------------------------------
# Profitability
# ---------------------------------------------------------------------------

CAPITAL_FIELDS = ("pondConstruction", "equipment", "infrastructure", "permits")
OPERATING_FIELDS = ("seedStock", "feed", "labor", "electricity", "maintenance", "chemicals", "marketing")
LOAN_YEARS = 5


def _title(key: str) -> str:
    # 'pondConstruction' -> 'pond Construction', matching the chart labels
    out = "".join(f" {c}" if c.isupper() else c for c in key)
    return out.strip()


@dataclass
class ProfitabilityInputs:
    capital_costs: Dict[str, float]
    operating_costs: Dict[str, float]
    cycles_per_year: float
    production_per_cycle: float
    survival_rate: float
    selling_price: float
    loan_amount: float = 0.0
    interest_rate: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ProfitabilityInputs":
        required = CAPITAL_FIELDS + OPERATING_FIELDS + (
            "cyclesPerYear",
            "productionPerCycle",
            "survivalRate",
            "sellingPrice",
        )
        require_fields(form, required, context="Profitability")
        inputs = cls(
            capital_costs={k: coerce_numeric(form[k], k) for k in CAPITAL_FIELDS},
            operating_costs={k: coerce_numeric(form[k], k) for k in OPERATING_FIELDS},
            cycles_per_year=coerce_numeric(form["cyclesPerYear"], "cyclesPerYear"),
            production_per_cycle=coerce_numeric(form["productionPerCycle"], "productionPerCycle"),
            survival_rate=coerce_numeric(form["survivalRate"], "survivalRate") / 100,
            selling_price=coerce_numeric(form["sellingPrice"], "sellingPrice"),
            loan_amount=parse_number(form.get("loanAmount"), "loanAmount"),
            interest_rate=parse_number(form.get("interestRate"), "interestRate") / 100,
        )
        if inputs.cycles_per_year <= 0:
            raise ValueError("Profitability: cyclesPerYear must be greater than 0")
        return inputs


@dataclass
class CostSummary:
    total: float
    breakdown: List[Dict[str, Any]]


@dataclass
class Profitability:
    gross_profit: float
    net_profit: float
    roi: Optional[float]
    payback_period: Optional[float]
    break_even_point: Optional[float]


@dataclass
class FinancialAnalysis:
    capital_costs: CostSummary
    operating_costs: CostSummary
    revenue_annual: float
    revenue_per_cycle: float
    annual_loan_payment: float
    profitability: Profitability
    cash_flow: List[Dict[str, Any]]
    recommendations: List[str]


def annual_loan_payment(amount: float, rate: float, years: int = LOAN_YEARS) -> float:
    """Level annual payment that clears `amount` over `years`."""
    if amount <= 0:
        return 0.0
    if rate == 0:
        return amount / years
    growth = (1 + rate) ** years
    return amount * rate * growth / (growth - 1)


def _summary(costs: Mapping[str, float]) -> CostSummary:
    return CostSummary(
        total=sum(costs.values()),
        breakdown=[{"name": _title(k), "value": v} for k, v in costs.items()],
    )


def cash_flow(annual_revenue: float, annual_opex: float, loan_payment: float, cycles: float) -> List[Dict[str, Any]]:
    """Month-by-month flow with revenue and opex booked at each cycle start."""
    spacing = 12 / cycles
    rows = []
    for i, month in enumerate(MONTHS):
        booked = 1 if i % spacing == 0 else 0
        income = annual_revenue / cycles * booked
        expenses = annual_opex / cycles * booked + loan_payment / 12
        rows.append({"month": month, "income": income, "expenses": expenses, "balance": income - expenses})
    return rows


def calculate_profitability(inputs: ProfitabilityInputs) -> FinancialAnalysis:
    capital = _summary(inputs.capital_costs)
    operating = _summary(inputs.operating_costs)

    per_cycle = inputs.production_per_cycle * inputs.survival_rate * inputs.selling_price
    annual_revenue = per_cycle * inputs.cycles_per_year
    loan_payment = annual_loan_payment(inputs.loan_amount, inputs.interest_rate)
    annual_opex = operating.total * inputs.cycles_per_year
    gross = annual_revenue - annual_opex
    net = gross - loan_payment
    investment = capital.total + inputs.loan_amount

    roi = safe_ratio(net, investment, default=None)
    roi = roi * 100 if roi is not None else None
    payback = investment / net if net > 0 else None
    cost_per_kg = safe_ratio(operating.total, inputs.production_per_cycle, default=None)
    break_even = None
    if cost_per_kg is not None and inputs.selling_price - cost_per_kg != 0:
        break_even = operating.total / (inputs.selling_price - cost_per_kg)

    recommendations: List[str] = []
    if roi is None or roi < 15:
        recommendations += ["Consider ways to reduce operating costs", "Explore higher-value markets or products"]
    if payback is None or payback > 3:
        recommendations += [
            "Look for opportunities to increase production efficiency",
            "Evaluate financing options to reduce debt burden",
        ]
    if safe_ratio(inputs.operating_costs.get("feed", 0.0), operating.total) > 0.5:
        recommendations += ["Optimize feed management to reduce costs", "Consider alternative feed sources"]

    log.debug("Profitability: revenue=%.2f net=%.2f roi=%s", annual_revenue, net, roi)
    return FinancialAnalysis(
        capital_costs=capital,
        operating_costs=operating,
        revenue_annual=annual_revenue,
        revenue_per_cycle=per_cycle,
        annual_loan_payment=loan_payment,
        profitability=Profitability(
            gross_profit=gross, net_profit=net, roi=roi, payback_period=payback, break_even_point=break_even
        ),
        cash_flow=cash_flow(annual_revenue, annual_opex, loan_payment, inputs.cycles_per_year),
        recommendations=recommendations,
    )


# ---------------------------------------------------------------------------
# Harvest timing
# ---------------------------------------------------------------------------


@dataclass
class HarvestInputs:
    species: str
    stocking_date: date
    initial_weight: float
    current_weight: float
    target_weight: float
    growth_rate: float
    feeding_rate: float
    survival_rate: float
    market_price: float
    production_costs: float
    seasonal_pricing: str
    water_quality: str

    FIELDS = (
        "species",
        "stockingDate",
        "initialWeight",
        "currentWeight",
        "targetWeight",
        "growthRate",
        "feedingRate",
        "survivalRate",
        "marketPrice",
        "productionCosts",
        "seasonalPricing",
        "waterQuality",
    )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "HarvestInputs":
        require_fields(form, cls.FIELDS, context="Harvest timing")
        inputs = cls(
            species=str(form["species"]),
            stocking_date=parse_date(form["stockingDate"], "stockingDate"),
            initial_weight=coerce_numeric(form["initialWeight"], "initialWeight"),
            current_weight=coerce_numeric(form["currentWeight"], "currentWeight"),
            target_weight=coerce_numeric(form["targetWeight"], "targetWeight"),
            growth_rate=coerce_numeric(form["growthRate"], "growthRate"),
            feeding_rate=coerce_numeric(form["feedingRate"], "feedingRate"),
            survival_rate=coerce_numeric(form["survivalRate"], "survivalRate") / 100,
            market_price=coerce_numeric(form["marketPrice"], "marketPrice"),
            production_costs=coerce_numeric(form["productionCosts"], "productionCosts"),
            seasonal_pricing=str(form["seasonalPricing"]),
            water_quality=choose(str(form["waterQuality"]), WATER_QUALITY_GRADES, "water quality"),
        )
        if inputs.growth_rate <= 0:
            raise ValueError("Harvest timing: growthRate must be greater than 0")
        if inputs.target_weight <= inputs.current_weight:
            raise ValueError(
                f"Harvest timing: targetWeight ({inputs.target_weight:g} g) must be above currentWeight "
                f"({inputs.current_weight:g} g)"
            )
        return inputs


@dataclass
class HarvestRisk:
    factor: str
    level: str
    impact: str


@dataclass
class HarvestTiming:
    optimal_date: date
    days_to_harvest: int
    weight_at_harvest: float
    confidence_level: str


@dataclass
class HarvestEconomics:
    expected_revenue: float
    production_cost: float
    projected_profit: float
    price_variation: float


@dataclass
class HarvestAnalysis:
    timing: HarvestTiming
    economics: HarvestEconomics
    risks: List[HarvestRisk]
    recommendations: List[str]
    growth_projection: List[Dict[str, Any]]
    harvest_window_days: int


def seasonal_factor(season: str) -> float:
    return table("harvest_seasonal_factors").get(season, 1.0)


def confidence_level(water_quality: str, growth_rate: float, optimal_growth: float) -> str:
    if water_quality == "Excellent" and growth_rate >= optimal_growth:
        return "high"
    if water_quality == "Poor":
        return "low"
    return "medium"


def advise_harvest(
    inputs: HarvestInputs,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> HarvestAnalysis:
    rng = rng or random.Random()
    today = today or date.today()
    species = lookup("harvest_species", inputs.species, "species")

    days = math.ceil((inputs.target_weight - inputs.current_weight) / inputs.growth_rate)
    if days > MAX_HARVEST_DAYS:
        raise ValueError(
            f"Harvest timing: {days} days to reach {inputs.target_weight:g} g at {inputs.growth_rate:g} g/day "
            f"is beyond the {MAX_HARVEST_DAYS}-day planning horizon. Check growthRate and targetWeight"
        )
    optimal_date = today + timedelta(days=days)
    confidence = confidence_level(inputs.water_quality, inputs.growth_rate, species["optimal_growth_rate"])
    variation = species["price_variation"]
    factor = seasonal_factor(inputs.seasonal_pricing)

    revenue = inputs.target_weight * inputs.market_price * factor * inputs.survival_rate
    cost = inputs.production_costs * days
    profit = revenue - cost

    projection = []
    for week in range(1, math.ceil(days / 7) + 1):
        weight = inputs.current_weight + inputs.growth_rate * 7 * week
        price = inputs.market_price * (1 + (rng.random() - 0.5) * variation)
        projection.append(
            {
                "week": week,
                "weight": weight,
                "price": price,
                "profit": weight * price * inputs.survival_rate - inputs.production_costs * 7 * week,
            }
        )

    risks: List[HarvestRisk] = []
    if inputs.water_quality != "Excellent":
        level = "high" if inputs.water_quality == "Poor" else "medium"
        risks.append(HarvestRisk("Water Quality", level, "May slow growth rate and affect survival"))
    if inputs.growth_rate < species["optimal_growth_rate"]:
        risks.append(HarvestRisk("Growth Rate", "medium", "Below optimal growth rate for species"))
    if inputs.seasonal_pricing == "Off Season":
        risks.append(HarvestRisk("Market Price", "high", "Lower prices during off-season"))

    recommendations: List[str] = []
    if confidence == "low":
        recommendations += ["Consider improving water quality before harvest", "Monitor growth rate more frequently"]
    if inputs.seasonal_pricing == "Off Season":
        recommendations += [
            "Evaluate possibility of extending culture period to reach peak season",
            "Consider partial harvesting strategy",
        ]
    if profit < 0:
        recommendations += ["Review production costs and feeding strategy", "Consider alternative market channels"]
    window = math.ceil(days * 0.1)
    recommendations.append(f"Optimal harvest window: {optimal_date.isoformat()} (±{window} days)")

    log.debug("Harvest timing: days=%d confidence=%s profit=%.2f", days, confidence, profit)
    return HarvestAnalysis(
        timing=HarvestTiming(
            optimal_date=optimal_date,
            days_to_harvest=days,
            weight_at_harvest=inputs.target_weight,
            confidence_level=confidence,
        ),
        economics=HarvestEconomics(
            expected_revenue=revenue,
            production_cost=cost,
            projected_profit=profit,
            price_variation=variation * 100,
        ),
        risks=risks,
        recommendations=recommendations,
        growth_projection=projection,
        harvest_window_days=window,
    )


def market_trend_table() -> Dict[str, Any]:
    """Seasonal market trends shown beside the harvest advisor."""
    return table("market_trends")


def market_demand_table() -> Dict[str, Any]:
    return table("market_demands")
