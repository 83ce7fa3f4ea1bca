from __future__ import annotations

"""Environment tools: site monitoring, energy use, weather impact, aeration
sizing and turning pond waste into fertilizer.

Coefficients live in the reference data tables ``environmental_limits``,
``environment_parameters``, ``equipment_types``, ``weather_species``,
``weather_cloud_cover``, ``aeration_species`` and the ``fertilizer_*`` tables.
"""

import logging
import math
import random
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .forms import choose, coerce_numeric, is_blank, parse_number, require_any, require_fields, safe_ratio
from .reference_data import lookup, table
from .water_quality import band_status

log = logging.getLogger(__name__)

WEATHER_CONDITIONS = ("Clear", "Partly Cloudy", "Cloudy", "Rain", "Heavy Rain", "Storm")
MONITOR_WEATHER = ("Sunny", "Partly Cloudy", "Cloudy", "Light Rain", "Heavy Rain", "Stormy")
SEASONS = ("Spring", "Summer", "Fall", "Winter")
SEVERE_WEATHER = ("Heavy Rain", "Storm")

CO2_KG_PER_KWH = 0.5
UPGRADE_COST_PER_UNIT = 1000
SOLAR_INSTALL_COST = 15000
AERATOR_KG_O2_PER_DAY = 48
AERATOR_KWH_PRICE = 0.12


def readable_name(key: str) -> str:
    """'dissolvedOxygen' -> 'dissolved oxygen'."""
    return re.sub(r"([A-Z])", r" \1", key).lower()


# ---------------------------------------------------------------------------
# Environmental monitor (risk score)
# ---------------------------------------------------------------------------


def environmental_reading_keys() -> List[str]:
    return list(table("environmental_limits").keys())


@dataclass
class EnvironmentalInputs:
    readings: Dict[str, float] = field(default_factory=dict)
    weather_condition: str = ""
    rainfall: Optional[float] = None
    wind_speed: Optional[float] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "EnvironmentalInputs":
        params = environmental_reading_keys()
        require_any(form, params, context="Environmental monitor")
        readings = {p: coerce_numeric(form[p], p) for p in params if not is_blank(form.get(p))}
        return cls(
            readings=readings,
            weather_condition=str(form.get("weatherCondition") or ""),
            rainfall=parse_number(form.get("rainfall"), "rainfall", default=None),
            wind_speed=parse_number(form.get("windSpeed"), "windSpeed", default=None),
        )


@dataclass
class EnvironmentalAnalysis:
    status: str
    issues: List[str]
    recommendations: List[str]
    risk_level: int
    impacted_parameters: List[str]


def limit_status(value: float, limits: Mapping[str, Any]) -> str:
    if value < limits["critical_low"] or value > limits["critical_high"]:
        return "Critical"
    if value < limits["min"] or value > limits["max"]:
        return "Warning"
    return "Optimal"


def _fmt(value: float) -> str:
    return f"{value:g}"


def analyze_environment(inputs: EnvironmentalInputs) -> EnvironmentalAnalysis:
    issues: List[str] = []
    recommendations: List[str] = []
    impacted: List[str] = []
    risk = 0

    for param, limits in table("environmental_limits").items():
        if param not in inputs.readings:
            continue
        value = inputs.readings[param]
        status = limit_status(value, limits)
        if status == "Optimal":
            continue
        impacted.append(param)
        name = readable_name(param)
        if status == "Critical":
            risk += 20
            issues.append(f"Critical {name} level: {_fmt(value)}{limits['unit']}")
            recommendations.append(f"Immediate action required for {name}")
        else:
            risk += 10
            issues.append(f"{name} outside optimal range: {_fmt(value)}{limits['unit']}")

    if inputs.weather_condition in SEVERE_WEATHER:
        risk += 15
        issues.append("Severe weather conditions")
        recommendations.append("Monitor water quality more frequently during severe weather")
    if inputs.rainfall is not None and inputs.rainfall > 50:
        risk += 10
        issues.append("High rainfall may affect water quality")
        recommendations.append("Increase water quality monitoring frequency")
    if inputs.wind_speed is not None and inputs.wind_speed > 30:
        risk += 10
        issues.append("High wind speed may affect aeration")
        recommendations.append("Check aeration systems and adjust if necessary")
    if risk > 50:
        recommendations.append("Consider emergency water exchange")
        recommendations.append("Reduce or stop feeding temporarily")
    recommendations.extend(
        [
            "Implement water recycling to reduce waste",
            "Consider using solar-powered aeration systems",
            "Monitor and record energy consumption",
        ]
    )

    if risk > 50:
        status = "Critical"
    elif risk > 25:
        status = "Warning"
    else:
        status = "Optimal"
    log.debug("Environmental monitor: risk=%d status=%s impacted=%s", risk, status, impacted)
    return EnvironmentalAnalysis(
        status=status,
        issues=issues,
        recommendations=recommendations,
        risk_level=min(risk, 100),
        impacted_parameters=impacted,
    )


# ---------------------------------------------------------------------------
# Environment monitor (per-parameter bands, trend, short history)
# ---------------------------------------------------------------------------

HISTORY_POINTS = 7

_STATUS_RECOMMENDATIONS = {
    "Critical": [
        "Immediate action required for {key}",
        "Consider emergency measures",
        "Increase monitoring frequency",
    ],
    "Warning": [
        "Monitor {key} closely",
        "Prepare corrective measures",
        "Check related parameters",
    ],
    "Optimal": [
        "Maintain current conditions",
        "Continue regular monitoring",
    ],
}


def monitor_reading_keys() -> List[str]:
    return list(table("environment_parameters").keys())


@dataclass
class MonitorInputs:
    readings: Dict[str, float] = field(default_factory=dict)
    weather: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "MonitorInputs":
        params = monitor_reading_keys()
        require_any(form, params, context="Environment monitor")
        readings = {p: coerce_numeric(form[p], p) for p in params if not is_blank(form.get(p))}
        return cls(readings=readings, weather=str(form.get("weather") or ""))


@dataclass
class MonitoringResult:
    parameter: str
    name: str
    value: float
    unit: str
    status: str
    trend: str
    recommendations: List[str]


@dataclass
class MonitorReport:
    results: List[MonitoringResult]
    history: List[Dict[str, Any]]


def random_trend(rng: random.Random) -> str:
    if rng.random() > 0.5:
        return "stable"
    return "increasing" if rng.random() > 0.5 else "decreasing"


def monitor_environment(
    inputs: MonitorInputs,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> MonitorReport:
    rng = rng or random.Random()
    now = now or datetime.now()
    params = table("environment_parameters")

    results: List[MonitoringResult] = []
    for key, spec in params.items():
        if key not in inputs.readings:
            continue
        value = inputs.readings[key]
        status = band_status(value, spec)
        results.append(
            MonitoringResult(
                parameter=key,
                name=spec["name"],
                value=value,
                unit=spec["unit"],
                status=status,
                trend=random_trend(rng),
                recommendations=[line.format(key=key) for line in _STATUS_RECOMMENDATIONS[status]],
            )
        )

    history: List[Dict[str, Any]] = []
    for i in range(HISTORY_POINTS - 1, -1, -1):
        point: Dict[str, Any] = {"time": (now - timedelta(hours=i)).strftime("%H:%M")}
        for key in params:
            if key in inputs.readings:
                point[key] = inputs.readings[key] + (rng.random() - 0.5) * 2
        history.append(point)

    log.debug("Environment monitor: analysed=%d", len(results))
    return MonitorReport(results=results, history=history)


# ---------------------------------------------------------------------------
# Energy efficiency
# ---------------------------------------------------------------------------


@dataclass
class Equipment:
    name: str
    power: float
    hours: float
    quantity: float = 1
    efficiency: Optional[float] = None

    def __post_init__(self) -> None:
        spec = lookup("equipment_types", self.name, "equipment type")
        if self.efficiency is None:
            self.efficiency = spec["base_efficiency"]
        if self.power <= 0 or self.hours <= 0:
            raise ValueError(f"Equipment {self.name!r}: power and hours must be greater than 0")
        if self.efficiency <= 0:
            raise ValueError(f"Equipment {self.name!r}: efficiency must be greater than 0")

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "Equipment":
        require_fields(form, ["name", "power", "hours"], context="Energy equipment")
        return cls(
            name=str(form["name"]),
            power=coerce_numeric(form["power"], "power"),
            hours=coerce_numeric(form["hours"], "hours"),
            quantity=parse_number(form.get("quantity"), "quantity", default=1),
            efficiency=parse_number(form.get("efficiency"), "efficiency", default=None),
        )

    @property
    def optimal_efficiency(self) -> float:
        return table("equipment_types")[self.name]["optimal_efficiency"]

    @property
    def daily_kwh(self) -> float:
        return self.power * self.hours * self.quantity / self.efficiency


@dataclass
class EnergyInputs:
    equipment: List[Equipment]
    electricity_rate: float
    solar_potential: bool = False
    backup_required: bool = False

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "EnergyInputs":
        require_fields(form, ["equipment", "electricityRate"], context="Energy efficiency")
        equipment = [
            item if isinstance(item, Equipment) else Equipment.from_form(item)
            for item in form["equipment"]
        ]
        return cls(
            equipment=equipment,
            electricity_rate=coerce_numeric(form["electricityRate"], "electricityRate"),
            solar_potential=bool(form.get("solarPotential", False)),
            backup_required=bool(form.get("backupRequired", False)),
        )


@dataclass
class SavingsMeasure:
    measure: str
    savings: float
    cost: float
    payback: float


@dataclass
class EquipmentEfficiency:
    name: str
    efficiency: float
    recommendation: str


@dataclass
class EnergyAnalysis:
    daily_consumption: float
    monthly_consumption: float
    annual_consumption: float
    peak_cost: float
    off_peak_cost: float
    total_cost: float
    co2_emissions: float
    recommendations: List[str]
    savings_potential: List[SavingsMeasure]
    equipment_efficiency: List[EquipmentEfficiency]


def analyze_energy(inputs: EnergyInputs) -> EnergyAnalysis:
    """Monthly energy bill, emissions and savings options for a set of equipment."""
    if not inputs.equipment:
        raise ValueError("Energy efficiency: add at least one piece of equipment")
    rate = inputs.electricity_rate
    daily = sum(item.daily_kwh for item in inputs.equipment)
    monthly = daily * 30
    annual = monthly * 12
    peak = daily * rate * 1.2
    off_peak = daily * rate * 0.8
    total_cost = (peak + off_peak) * 30

    efficiency_rows = []
    for item in inputs.equipment:
        optimal = item.optimal_efficiency
        if item.efficiency < optimal:
            rec = f"Upgrade or maintain {item.name} to achieve optimal efficiency of {optimal * 100:g}%"
        else:
            rec = f"{item.name} is operating at optimal efficiency"
        efficiency_rows.append(EquipmentEfficiency(name=item.name, efficiency=item.efficiency, recommendation=rec))

    equipment_savings = sum(
        (1 / item.efficiency - 1 / item.optimal_efficiency) * item.power * item.hours * item.quantity * rate * 30
        for item in inputs.equipment
    )
    savings: List[SavingsMeasure] = []
    if equipment_savings > 0:
        cost = len(inputs.equipment) * UPGRADE_COST_PER_UNIT
        savings.append(
            SavingsMeasure("Equipment Upgrades", equipment_savings * 12, cost, cost / (equipment_savings * 12))
        )
    if inputs.solar_potential:
        solar = total_cost * 0.4 * 12
        savings.append(
            SavingsMeasure("Solar Installation", solar, SOLAR_INSTALL_COST, safe_ratio(SOLAR_INSTALL_COST, solar))
        )
    savings.append(SavingsMeasure("Peak Hour Shifting", total_cost * 0.2 * 12, 0, 0))

    reduction = safe_ratio(equipment_savings, total_cost) * 100
    recommendations = [
        f"Total energy consumption can be reduced by {reduction:.1f}% through equipment upgrades",
        "Implement regular maintenance schedule for all equipment",
        "Monitor and record energy consumption patterns",
    ]
    if inputs.solar_potential:
        recommendations.append("Consider solar installation for long-term cost savings")
    if inputs.backup_required:
        recommendations.append("Install energy storage system for backup power")

    log.debug("Energy efficiency: daily=%.2f kWh monthly_cost=%.2f", daily, total_cost)
    return EnergyAnalysis(
        daily_consumption=daily,
        monthly_consumption=monthly,
        annual_consumption=annual,
        peak_cost=peak * 30,
        off_peak_cost=off_peak * 30,
        total_cost=total_cost,
        co2_emissions=annual * CO2_KG_PER_KWH,
        recommendations=recommendations,
        savings_potential=savings,
        equipment_efficiency=efficiency_rows,
    )


# ---------------------------------------------------------------------------
# Weather impact
# ---------------------------------------------------------------------------


@dataclass
class WeatherInputs:
    species: str
    season: str
    temperature: float = 0.0
    humidity: float = 0.0
    rainfall: float = 0.0
    wind_speed: float = 0.0
    cloud_cover: float = 0.0
    pond_depth: float = 0.0
    pond_area: float = 0.0
    dissolved_oxygen: float = 0.0
    current_ph: float = 0.0
    stocking_density: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "WeatherInputs":
        require_fields(form, ["species", "season"], context="Weather impact")
        return cls(
            species=str(form["species"]),
            season=choose(str(form["season"]), SEASONS, "season"),
            temperature=parse_number(form.get("temperature"), "temperature"),
            humidity=parse_number(form.get("humidity"), "humidity"),
            rainfall=parse_number(form.get("rainfall"), "rainfall"),
            wind_speed=parse_number(form.get("windSpeed"), "windSpeed"),
            cloud_cover=cloud_cover_percent(form.get("cloudCover")),
            pond_depth=parse_number(form.get("pondDepth"), "pondDepth"),
            pond_area=parse_number(form.get("pondArea"), "pondArea"),
            dissolved_oxygen=parse_number(form.get("dissolvedOxygen"), "dissolvedOxygen"),
            current_ph=parse_number(form.get("currentpH"), "currentpH"),
            stocking_density=parse_number(form.get("stockingDensity"), "stockingDensity"),
        )


def cloud_cover_percent(value: Any) -> float:
    """Accept a cloud-cover percentage or one of the named options."""
    covers = table("weather_cloud_cover")
    if isinstance(value, str) and value in covers:
        return float(covers[value])
    return parse_number(value, "cloudCover")


@dataclass
class WeatherWaterQuality:
    temperature: float
    dissolved_oxygen: float
    ph: float
    turbidity: float


@dataclass
class FishHealthImpact:
    stress_level: str
    feeding_behavior: str
    growth_impact: str
    disease_risk: str


@dataclass
class OperationalImpact:
    feeding_schedule: str
    water_exchange: str
    aeration: str
    monitoring: str


@dataclass
class WeatherImpact:
    water_quality: WeatherWaterQuality
    fish_health: FishHealthImpact
    operational_impact: OperationalImpact
    recommendations: List[str]
    risk_level: str
    preventive_measures: List[str]


def estimate_water_temperature(inputs: WeatherInputs) -> float:
    seasonal = {"Winter": 2, "Summer": -1}.get(inputs.season, 0)
    return inputs.temperature - (inputs.cloud_cover * 0.05 + inputs.wind_speed * 0.1 + seasonal)


def estimate_dissolved_oxygen(inputs: WeatherInputs, water_temp: float) -> float:
    saturation = 14.6 * math.exp(-0.0357 * water_temp)
    return saturation * (
        1
        + inputs.wind_speed * 0.05
        - inputs.temperature * 0.02
        - inputs.stocking_density * 0.001
        + inputs.rainfall * 0.02
    )


def estimate_ph(inputs: WeatherInputs) -> float:
    seasonal = {"Summer": 0.2, "Winter": -0.2}.get(inputs.season, 0)
    return 7.0 + inputs.rainfall * 0.1 - inputs.temperature * 0.02 + seasonal


def analyze_weather_impact(inputs: WeatherInputs) -> WeatherImpact:
    params = lookup("weather_species", inputs.species, "species")
    water_temp = estimate_water_temperature(inputs)
    oxygen = estimate_dissolved_oxygen(inputs, water_temp)
    ph = estimate_ph(inputs)
    turbidity = inputs.rainfall * 2 + inputs.wind_speed * 0.5

    optimal, stress = params["optimal_temp"], params["stress_temp"]
    o2_required = params["oxygen_requirement"]
    if water_temp < stress["min"] or water_temp > stress["max"]:
        stress_level = "High"
    elif water_temp < optimal["min"] or water_temp > optimal["max"]:
        stress_level = "Moderate"
    else:
        stress_level = "Low"

    feeding = {"High": "Significantly Reduced", "Moderate": "Slightly Reduced"}.get(stress_level, "Normal")
    growth = {"High": "Severely Reduced", "Moderate": "Moderately Reduced"}.get(stress_level, "Optimal")
    if stress_level == "High" and oxygen < o2_required:
        disease = "High"
    elif stress_level == "Moderate" or oxygen < o2_required * 1.2:
        disease = "Moderate"
    else:
        disease = "Low"

    recommendations: List[str] = []
    measures: List[str] = []
    if water_temp > optimal["max"]:
        recommendations += [
            "Increase aeration to help reduce water temperature",
            "Consider partial water exchange with cooler water",
        ]
        measures += ["Install temperature monitoring system", "Prepare emergency cooling procedures"]
    elif water_temp < optimal["min"]:
        recommendations += ["Monitor water temperature closely", "Consider using pond covers to retain heat"]
        measures.append("Install backup heating system")
    if oxygen < o2_required:
        recommendations += ["Increase aeration immediately", "Reduce feeding until oxygen levels improve"]
        measures += ["Install oxygen monitoring system", "Have backup aeration equipment ready"]
    if inputs.rainfall > 5:
        recommendations += [
            "Monitor water quality parameters more frequently",
            "Check and maintain proper drainage",
        ]
        measures.append("Implement erosion control measures")
    if inputs.wind_speed > 20:
        recommendations += ["Secure equipment and pond covers", "Monitor water turbulence"]
        measures.append("Install wind breaks around ponds")

    operations = OperationalImpact(
        feeding_schedule={"High": "Reduce feeding by 50%", "Moderate": "Reduce feeding by 25%"}.get(
            stress_level, "Maintain regular schedule"
        ),
        water_exchange="Increase frequency" if inputs.rainfall > 5 or turbidity > 10 else "Normal schedule",
        aeration="Increase intensity" if oxygen < o2_required else "Normal operation",
        monitoring={"High": "Hourly monitoring required", "Moderate": "Increase frequency"}.get(
            stress_level, "Regular intervals"
        ),
    )
    log.debug(
        "Weather impact: species=%s water_temp=%.2f do=%.2f stress=%s", inputs.species, water_temp, oxygen, stress_level
    )
    return WeatherImpact(
        water_quality=WeatherWaterQuality(temperature=water_temp, dissolved_oxygen=oxygen, ph=ph, turbidity=turbidity),
        fish_health=FishHealthImpact(
            stress_level=stress_level, feeding_behavior=feeding, growth_impact=growth, disease_risk=disease
        ),
        operational_impact=operations,
        recommendations=recommendations,
        risk_level=stress_level,
        preventive_measures=measures,
    )


# ---------------------------------------------------------------------------
# Aeration
# ---------------------------------------------------------------------------

AERATION_MAINTENANCE = [
    "Daily: Check aerator operation and clean water inlets",
    "Weekly: Inspect electrical connections and mounting hardware",
    "Monthly: Clean/replace filters and check motor bearings",
    "Quarterly: Full system inspection and performance testing",
]


@dataclass
class AerationInputs:
    length: float
    width: float
    depth: float
    fish_species: str
    fish_quantity: float
    average_weight: float
    temperature: float
    dissolved_oxygen: float

    FIELDS = (
        "length",
        "width",
        "depth",
        "fishSpecies",
        "fishQuantity",
        "averageWeight",
        "temperature",
        "dissolvedOxygen",
    )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "AerationInputs":
        require_fields(form, cls.FIELDS, context="Aeration calculator")
        return cls(
            length=coerce_numeric(form["length"], "length"),
            width=coerce_numeric(form["width"], "width"),
            depth=coerce_numeric(form["depth"], "depth"),
            fish_species=str(form["fishSpecies"]),
            fish_quantity=coerce_numeric(form["fishQuantity"], "fishQuantity"),
            average_weight=coerce_numeric(form["averageWeight"], "averageWeight"),
            temperature=coerce_numeric(form["temperature"], "temperature"),
            dissolved_oxygen=coerce_numeric(form["dissolvedOxygen"], "dissolvedOxygen"),
        )


@dataclass
class AerationResult:
    water_volume: float
    fish_biomass: float
    oxygen_demand: float
    required_aerators: int
    aerator_type: str
    maintenance_schedule: List[str]
    energy_cost: float
    recommendations: List[str]
    risk_level: str


def oxygen_risk(dissolved_oxygen: float) -> str:
    if dissolved_oxygen < 3:
        return "high"
    if dissolved_oxygen < 5:
        return "medium"
    return "low"


def calculate_aeration(inputs: AerationInputs) -> AerationResult:
    volume = inputs.length * inputs.width * inputs.depth
    biomass = inputs.fish_quantity * inputs.average_weight
    # unlisted species fall back to the tilapia demand
    base_demand = table("aeration_species").get(inputs.fish_species, {}).get("oxygen_demand", 0.25)
    temp_factor = 1 + (inputs.temperature - 25) * 0.02
    demand = biomass * base_demand * temp_factor
    aerators = math.ceil(demand / AERATOR_KG_O2_PER_DAY)
    log.debug("Aeration: biomass=%.1f demand=%.2f aerators=%d", biomass, demand, aerators)
    return AerationResult(
        water_volume=volume,
        fish_biomass=biomass,
        oxygen_demand=demand,
        required_aerators=aerators,
        aerator_type="1 HP Paddle Wheel Aerator",
        maintenance_schedule=list(AERATION_MAINTENANCE),
        energy_cost=aerators * 1 * 24 * AERATOR_KWH_PRICE,
        recommendations=[
            f"Install {aerators} aerators with minimum 1 HP capacity each",
            "Position aerators to ensure uniform oxygen distribution",
            "Implement backup power system for emergency situations",
            "Monitor dissolved oxygen levels during early morning hours",
        ],
        risk_level=oxygen_risk(inputs.dissolved_oxygen),
    )


# ---------------------------------------------------------------------------
# Waste to fertilizer
# ---------------------------------------------------------------------------


@dataclass
class FertilizerInputs:
    fish_species: str
    fish_biomass: float
    feeding_rate: float
    collection_frequency: float
    pond_size: float
    feed_protein: float
    processing_method: str
    storage_conditions: str
    crop_type: str

    FIELDS = (
        "fishSpecies",
        "fishBiomass",
        "feedingRate",
        "collectionFrequency",
        "pondSize",
        "feedProtein",
        "processingMethod",
        "storageConditions",
        "cropType",
    )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "FertilizerInputs":
        require_fields(form, cls.FIELDS, context="Waste to fertilizer")
        inputs = cls(
            fish_species=str(form["fishSpecies"]),
            fish_biomass=coerce_numeric(form["fishBiomass"], "fishBiomass"),
            feeding_rate=coerce_numeric(form["feedingRate"], "feedingRate"),
            collection_frequency=coerce_numeric(form["collectionFrequency"], "collectionFrequency"),
            pond_size=coerce_numeric(form["pondSize"], "pondSize"),
            feed_protein=coerce_numeric(form["feedProtein"], "feedProtein"),
            processing_method=str(form["processingMethod"]),
            storage_conditions=str(form["storageConditions"]),
            crop_type=str(form["cropType"]),
        )
        if inputs.pond_size <= 0:
            raise ValueError("Waste to fertilizer: pondSize must be greater than 0")
        return inputs


@dataclass
class NutrientContent:
    nitrogen: float
    phosphorus: float
    potassium: float
    organic_matter: float


@dataclass
class EconomicValue:
    fertilizer_value: float
    disposal_savings: float
    total_benefit: float


@dataclass
class FertilizerResult:
    fertilizer: float
    application_rate: float
    nutrient_content: NutrientContent
    recommendations: List[str]
    storage_requirements: List[str]
    environmental_benefits: List[str]
    economic_value: EconomicValue


NUTRIENT_FRACTIONS = {"nitrogen": 0.05, "phosphorus": 0.02, "potassium": 0.01, "organic_matter": 0.4}
NUTRIENT_PRICES = {"nitrogen": 2.5, "phosphorus": 3.0, "potassium": 2.0, "organic_matter": 0.5}
DISPOSAL_SAVING_PER_KG = 0.3


def nutrient_content(
    fertilizer: float, richness: float, retention: float, storage_loss: float
) -> NutrientContent:
    factor = fertilizer * richness * retention * (1 - storage_loss)
    return NutrientContent(**{k: factor * frac for k, frac in NUTRIENT_FRACTIONS.items()})


def economic_value(fertilizer: float, nutrients: NutrientContent) -> EconomicValue:
    value = sum(getattr(nutrients, k) * price for k, price in NUTRIENT_PRICES.items())
    savings = fertilizer * DISPOSAL_SAVING_PER_KG
    return EconomicValue(fertilizer_value=value, disposal_savings=savings, total_benefit=value + savings)


def calculate_fertilizer(inputs: FertilizerInputs) -> FertilizerResult:
    species = lookup("fertilizer_species", inputs.fish_species, "species")
    process = lookup("fertilizer_processing", inputs.processing_method, "processing method")
    storage = lookup("fertilizer_storage", inputs.storage_conditions, "storage condition")
    crop = lookup("fertilizer_crops", inputs.crop_type, "crop type")

    # protein content scales waste relative to a 32% feed
    daily_waste = inputs.feeding_rate * species["waste_rate"] * (inputs.feed_protein / 32)
    fertilizer = daily_waste * inputs.collection_frequency * process["efficiency"]
    application_rate = fertilizer / (inputs.pond_size / 10000) * 7 * crop["application_rate"]
    nutrients = nutrient_content(
        fertilizer, species["nutrient_richness"], process["nutrient_retention"], storage["nutrient_loss"]
    )
    annual = fertilizer * 52

    log.debug("Waste to fertilizer: fertilizer=%.2f kg app_rate=%.2f", fertilizer, application_rate)
    return FertilizerResult(
        fertilizer=fertilizer,
        application_rate=application_rate,
        nutrient_content=nutrients,
        recommendations=[
            f"Collect waste every {inputs.collection_frequency:g} days to maintain optimal nutrient content",
            f"Use {inputs.processing_method} method with {process['processing_days']} days processing time",
            f"Apply fertilizer {crop['frequency'].lower()} for {inputs.crop_type}",
            "Monitor soil nutrient levels and adjust application rates accordingly",
            f"Maintain proper {inputs.storage_conditions} storage conditions",
        ],
        storage_requirements=[
            f"Maximum storage duration: {storage['max_days']} days",
            f"Expected nutrient loss during storage: {storage['nutrient_loss'] * 100:.1f}%",
            storage["description"],
            "Keep storage area well-ventilated",
            "Monitor moisture levels regularly",
        ],
        environmental_benefits=[
            f"Reduces waste disposal by {annual:.0f} kg annually",
            f"Saves approximately {annual * 0.5:.0f} kg CO2 emissions per year",
            "Promotes circular economy in aquaculture",
            "Reduces chemical fertilizer dependency",
            "Improves soil organic matter content",
        ],
        economic_value=economic_value(fertilizer, nutrients),
    )


def nutrient_rows(result: FertilizerResult) -> List[Dict[str, Any]]:
    """Nutrient table rows for charts."""
    labels: Sequence[tuple] = (
        ("Nitrogen", "nitrogen"),
        ("Phosphorus", "phosphorus"),
        ("Potassium", "potassium"),
        ("Organic Matter", "organic_matter"),
    )
    return [{"name": label, "value": getattr(result.nutrient_content, key)} for label, key in labels]
