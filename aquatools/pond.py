from __future__ import annotations

"""Pond tools: evaporation, sediment management, liming and lining costs."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .forms import coerce_numeric, is_blank, parse_number, require_fields, safe_ratio
from .reference_data import lookup, table

log = logging.getLogger(__name__)

WATER_SOURCES = ("surface", "groundwater", "rainwater")


# ---------------------------------------------------------------------------
# Evaporation
# ---------------------------------------------------------------------------


@dataclass
class EvaporationInputs:
    pond_length: float
    pond_width: float
    water_temperature: float
    air_temperature: float
    humidity: float
    wind_speed: float
    sunlight_hours: float
    pond_depth: float = 0.0
    rainfall: float = 0.0
    season: str = ""
    cloud_cover: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "EvaporationInputs":
        require_fields(
            form,
            [
                "pondLength",
                "pondWidth",
                "waterTemperature",
                "airTemperature",
                "humidity",
                "windSpeed",
                "sunlightHours",
            ],
            context="Pond evaporation",
        )
        return cls(
            pond_length=parse_number(form["pondLength"], "pondLength"),
            pond_width=parse_number(form["pondWidth"], "pondWidth"),
            water_temperature=parse_number(form["waterTemperature"], "waterTemperature"),
            air_temperature=parse_number(form["airTemperature"], "airTemperature"),
            humidity=parse_number(form["humidity"], "humidity"),
            wind_speed=parse_number(form["windSpeed"], "windSpeed"),
            sunlight_hours=parse_number(form["sunlightHours"], "sunlightHours"),
            pond_depth=parse_number(form.get("pondDepth"), "pondDepth"),
            rainfall=parse_number(form.get("rainfall"), "rainfall"),
            season=str(form.get("season") or ""),
            cloud_cover=str(form.get("cloudCover") or ""),
        )


@dataclass
class EvaporationResult:
    rate_cm_per_day: float
    daily_evaporation: float
    weekly_evaporation: float
    monthly_evaporation: float
    risk_level: str
    recommendations: List[str]


def evaporation_rate(inputs: EvaporationInputs) -> float:
    """Evaporation rate in cm/day from a 0.1 cm/day base."""
    rate = 0.1
    rate *= 1 + (inputs.water_temperature - inputs.air_temperature) * 0.05
    rate *= 1 + inputs.wind_speed * 0.02
    rate *= 1 - inputs.humidity / 200
    rate *= 1 + (inputs.sunlight_hours / 24) * 0.5
    # Unknown or unselected options leave the rate unchanged
    rate *= table("evaporation_cloud_factors").get(inputs.cloud_cover, 1.0)
    rate *= table("evaporation_season_factors").get(inputs.season, 1.0)
    return rate


def calculate_evaporation(inputs: EvaporationInputs) -> EvaporationResult:
    area = inputs.pond_length * inputs.pond_width
    rate = evaporation_rate(inputs)
    daily = rate * area / 100

    if rate > 0.5:
        risk = "High"
    elif rate > 0.3:
        risk = "Moderate"
    else:
        risk = "Low"

    recs = [
        "Monitor water levels daily during high evaporation periods",
        "Consider installing shade structures to reduce evaporation",
        "Maintain proper water depth to minimize temperature fluctuations",
    ]
    if risk == "High":
        recs += [
            "Install water level monitoring system",
            "Plan for emergency water supply",
            "Consider reducing pond surface area during peak evaporation season",
        ]
    if inputs.wind_speed > 15:
        recs.append("Install windbreaks to reduce evaporation")
    if inputs.sunlight_hours > 10:
        recs.append("Consider using pond covers during peak sunlight hours")

    log.debug("Evaporation: area=%.1f rate=%.4f cm/day risk=%s", area, rate, risk)
    return EvaporationResult(
        rate_cm_per_day=rate,
        daily_evaporation=daily,
        weekly_evaporation=daily * 7,
        monthly_evaporation=daily * 30,
        risk_level=risk,
        recommendations=recs,
    )


# ---------------------------------------------------------------------------
# Sediment
# ---------------------------------------------------------------------------


@dataclass
class SedimentInputs:
    pond_area: float
    pond_depth: float
    sediment_depth: float
    sediment_type: str
    organic_content: float = 0.0
    pond_age: float = 0.0
    last_cleaned: float = 0.0
    feeding_rate: float = 0.0
    stocking_density: float = 0.0
    water_exchange_rate: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "SedimentInputs":
        require_fields(form, ["pondArea", "pondDepth", "sedimentDepth", "sedimentType"], context="Pond sediment")
        return cls(
            pond_area=parse_number(form["pondArea"], "pondArea"),
            pond_depth=parse_number(form["pondDepth"], "pondDepth"),
            sediment_depth=parse_number(form["sedimentDepth"], "sedimentDepth"),
            sediment_type=str(form["sedimentType"]),
            organic_content=parse_number(form.get("organicContent"), "organicContent"),
            pond_age=parse_number(form.get("pondAge"), "pondAge"),
            last_cleaned=parse_number(form.get("lastCleaned"), "lastCleaned"),
            feeding_rate=parse_number(form.get("feedingRate"), "feedingRate"),
            stocking_density=parse_number(form.get("stockingDensity"), "stockingDensity"),
            water_exchange_rate=parse_number(form.get("waterExchangeRate"), "waterExchangeRate"),
        )


@dataclass
class SedimentResult:
    total_volume: float
    depth_ratio: float
    removal_required: bool
    disposal_method: str
    estimated_cost: float
    nutrient_content: Dict[str, float]
    timeline: str
    recommendations: List[str]
    management_plan: List[str]
    preventive_measures: List[str]


def choose_disposal_method(organic_content: float) -> str:
    if organic_content > 40:
        return "composting"
    if organic_content < 10:
        return "landReclamation"
    return "agricultural"


def analyze_sediment(inputs: SedimentInputs) -> SedimentResult:
    sediment = lookup("sediment_types", inputs.sediment_type, "sediment type")
    volume = inputs.pond_area * inputs.sediment_depth
    ratio = safe_ratio(inputs.sediment_depth, inputs.pond_depth, default=0.0)

    removal = ratio > 0.2 or inputs.last_cleaned > 2 or inputs.organic_content > 30
    method = choose_disposal_method(inputs.organic_content)

    organic_mass = volume * sediment["nutrient_retention"] * (inputs.organic_content / 100)
    nutrients = {
        "nitrogen": organic_mass * 0.05,
        "phosphorus": organic_mass * 0.02,
        "organicMatter": organic_mass,
    }
    disposal_cost = table("sediment_disposal_methods")[method]["cost"]
    cost = volume * 5 + volume * disposal_cost

    recs: List[str] = []
    if ratio > 0.2:
        recs.append("Immediate sediment removal recommended due to high accumulation")
    if inputs.organic_content > 30:
        recs.append("High organic content indicates need for improved feeding management")
    if inputs.water_exchange_rate < 10:
        recs.append("Increase water exchange rate to reduce sediment accumulation")

    if ratio > 0.3:
        timeline = "Immediate removal required"
    elif ratio < 0.1:
        timeline = "Monitor and reassess in 6 months"
    else:
        timeline = "Annual removal recommended"

    log.debug("Sediment: volume=%.2f ratio=%.3f removal=%s method=%s", volume, ratio, removal, method)
    return SedimentResult(
        total_volume=volume,
        depth_ratio=ratio,
        removal_required=removal,
        disposal_method=method,
        estimated_cost=cost,
        nutrient_content=nutrients,
        timeline=timeline,
        recommendations=recs,
        management_plan=[
            "Regular monitoring of sediment depth",
            "Optimize feeding practices to reduce waste",
            "Maintain proper water exchange",
            "Schedule periodic sediment removal",
            "Monitor water quality parameters",
        ],
        preventive_measures=[
            "Implement proper feeding management",
            "Maintain optimal stocking density",
            "Regular water quality monitoring",
            "Use high-quality feeds",
            "Install sediment traps",
        ],
    )


# ---------------------------------------------------------------------------
# Liming
# ---------------------------------------------------------------------------


@dataclass
class LimingInputs:
    pond_area: float
    pond_depth: float
    current_ph: float
    target_ph: float
    alkalinity: float
    soil_type: str
    water_source: str
    lime_type: str

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "LimingInputs":
        """Every liming field is required; numeric fields must parse.

        All problems are collected into one error message.
        """
        numeric = {
            "pondArea": "pond_area",
            "pondDepth": "pond_depth",
            "currentPH": "current_ph",
            "targetPH": "target_ph",
            "alkalinity": "alkalinity",
        }
        choices = {"soilType": "soil_type", "waterSource": "water_source", "limeType": "lime_type"}
        problems: List[str] = []
        values: Dict[str, Any] = {}
        for key, attr in numeric.items():
            raw = form.get(key)
            if is_blank(raw):
                problems.append(f"{key} is required")
                continue
            try:
                values[attr] = coerce_numeric(raw, key)
            except ValueError as exc:
                problems.append(str(exc))
        for key, attr in choices.items():
            if is_blank(form.get(key)):
                problems.append(f"{key} is required")
            else:
                values[attr] = str(form[key])
        if problems:
            log.warning("Pond liming: invalid form %s", problems)
            raise ValueError("Pond liming: please fill in all fields with valid numbers: " + "; ".join(problems))
        return cls(**values)


@dataclass
class LimingResult:
    pond_volume: float
    lime_name: str
    lime_required: float
    cost: float
    application_rate: float
    recommendations: List[str]


def calculate_liming(inputs: LimingInputs) -> LimingResult:
    soil = lookup("soil_types", inputs.soil_type, "soil type")
    lime = lookup("lime_types", inputs.lime_type, "lime type")
    ph_diff = inputs.target_ph - inputs.current_ph

    base = ph_diff * 1000 * soil["buffer_capacity"]
    if inputs.alkalinity < 50:
        base *= 1.3
    elif inputs.alkalinity > 150:
        base *= 0.7
    if inputs.water_source == "groundwater":
        base *= 0.8
    elif inputs.water_source == "rainwater":
        base *= 1.2

    final = base / (lime["neutralizing_value"] / 100)
    cost = final * lime["cost_per_ton"] / 1000
    rate = safe_ratio(final, inputs.pond_area * 10000, default=0.0)

    recs = [
        f"Apply {final:.2f} kg of {lime['name']} total.",
        f"Spread lime evenly at a rate of {rate:.3f} kg/m².",
        "For best results, apply lime during dry weather.",
        "Monitor pH weekly after application.",
    ]
    if lime["solubility"] < 0.7:
        recs.append("This lime type dissolves slowly. Consider multiple smaller applications.")
    if ph_diff > 2:
        recs.append("Large pH adjustment needed. Consider gradual adjustment over multiple applications.")

    log.debug("Liming: dpH=%.2f lime=%s required=%.2f kg", ph_diff, inputs.lime_type, final)
    return LimingResult(
        pond_volume=inputs.pond_area * inputs.pond_depth,
        lime_name=lime["name"],
        lime_required=final,
        cost=cost,
        application_rate=rate,
        recommendations=recs,
    )


# ---------------------------------------------------------------------------
# Lining
# ---------------------------------------------------------------------------


@dataclass
class LiningInputs:
    length: float
    width: float
    depth: float
    material_type: str
    slope_ratio: float = 0.0
    labor_cost_per_day: float = 0.0
    estimated_days: float = 0.0
    additional_costs: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "LiningInputs":
        require_fields(form, ["length", "width", "depth", "materialType"], context="Pond lining")
        return cls(
            length=parse_number(form["length"], "length"),
            width=parse_number(form["width"], "width"),
            depth=parse_number(form["depth"], "depth"),
            material_type=str(form["materialType"]),
            slope_ratio=parse_number(form.get("slopeRatio"), "slopeRatio"),
            labor_cost_per_day=parse_number(form.get("laborCostPerDay"), "laborCostPerDay"),
            estimated_days=parse_number(form.get("estimatedDays"), "estimatedDays"),
            additional_costs=parse_number(form.get("additionalCosts"), "additionalCosts"),
        )


@dataclass
class LiningResult:
    material_name: str
    liner_area: float  # includes 10% overlap
    total_area: float
    material_cost: float
    labor_cost: float
    total_cost: float
    cost_per_m2: float
    annual_cost: float
    recommendations: List[str] = field(default_factory=list)
    maintenance_plan: List[str] = field(default_factory=list)
    installation_steps: List[str] = field(default_factory=list)


def lining_area(length: float, width: float, depth: float, slope_ratio: float) -> float:
    """Bottom plus the four sloped walls, without overlap."""
    slope = depth * slope_ratio
    return length * width + 2 * (length + 2 * slope) * depth + 2 * (width + 2 * slope) * depth


def calculate_lining(inputs: LiningInputs) -> LiningResult:
    material = lookup("lining_materials", inputs.material_type, "lining material")
    area = lining_area(inputs.length, inputs.width, inputs.depth, inputs.slope_ratio)
    liner_area = area * 1.1
    material_cost = liner_area * material["cost_per_m2"]
    labor_cost = inputs.labor_cost_per_day * inputs.estimated_days
    total = material_cost + labor_cost + inputs.additional_costs

    recs: List[str] = []
    if area > 1000:
        recs += [
            "Consider hiring professional installation team",
            "Implement quality control measures during installation",
        ]
    if material["installation"] == "Complex":
        recs.append("Ensure installers are certified for this material")
    if inputs.depth > 3:
        recs.append("Use reinforced material at deeper sections")
    recs.append(f"Expected lifespan: {material['lifespan']} years with proper maintenance")

    maintenance = [
        "Regular inspection for tears and punctures",
        "Clean liner surface periodically",
        "Maintain proper water chemistry",
        "Monitor for UV degradation",
    ]
    if material["maintenance"] == "Moderate":
        maintenance.append("Schedule bi-annual professional inspection")

    steps = [
        "Site preparation and excavation",
        "Subgrade preparation and compaction",
        "Installation of underlayment or geotextile",
        f"Installation of {material['name']} liner",
        "Seaming and joining sections",
        "Anchor trench construction",
        "Quality control inspection",
    ]
    if material["installation"] == "Complex":
        steps.append("Professional certification inspection")

    log.debug("Lining: material=%s area=%.1f total=%.2f", inputs.material_type, area, total)
    return LiningResult(
        material_name=material["name"],
        liner_area=liner_area,
        total_area=area,
        material_cost=material_cost,
        labor_cost=labor_cost,
        total_cost=total,
        cost_per_m2=safe_ratio(total, area, default=0.0),
        annual_cost=total / material["lifespan"],
        recommendations=recs,
        maintenance_plan=maintenance,
        installation_steps=steps,
    )
