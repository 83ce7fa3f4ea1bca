from __future__ import annotations

"""
Form layouts for the calculator pages.

Each tool slug maps to the widgets its page draws. Widget keys are the form
keys the matching `from_form` constructor reads, so the collected dict is
passed to `aquatools.registry.run` unchanged. `required` drives the disabled
state of the Calculate button; `any_of` lists the keys of which at least one
must be filled, taken from the same core constant `from_form` checks.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from aquatools import business, environment, feeding, health, pond, production, species, water_quality
from aquatools.reference_data import options, table
from aquatools.water_quality import BASIC_PARAMETERS


@dataclass(frozen=True)
class Field:
    key: str
    label: str
    kind: str = "number"  # number | select | multiselect | text | date | checkbox | range
    choices: Sequence[str] = ()
    table: Optional[str] = None
    required: bool = False
    default: Any = None
    bounds: Tuple[float, float] = (0.0, 100.0)
    help: Optional[str] = None

    def options(self) -> List[str]:
        if self.table:
            return options(self.table)
        return list(self.choices)

    def display(self, option: Any) -> str:
        """Human label for an option; tables with a `label` or `name` column supply it."""
        if self.table:
            entry = table(self.table).get(option)
            if isinstance(entry, dict):
                return str(entry.get("label") or entry.get("name") or option)
        return str(option)


@dataclass(frozen=True)
class Layout:
    fields: Tuple[Field, ...]
    any_of: Tuple[str, ...] = ()
    columns: int = 2

    @property
    def required(self) -> List[str]:
        return [f.key for f in self.fields if f.required]

    @property
    def keys(self) -> List[str]:
        return [f.key for f in self.fields]


def num(key: str, label: str, required: bool = False, **kw: Any) -> Field:
    return Field(key, label, "number", required=required, **kw)


def pick(key: str, label: str, choices: Sequence[str] = (), *, table: Optional[str] = None,
         required: bool = False, **kw: Any) -> Field:
    return Field(key, label, "select", choices=tuple(choices), table=table, required=required, **kw)


def many(key: str, label: str, choices: Sequence[str] = (), *, table: Optional[str] = None) -> Field:
    return Field(key, label, "multiselect", choices=tuple(choices), table=table)


def _reading_fields(table_name: str) -> Tuple[Field, ...]:
    out = []
    for key, spec in table(table_name).items():
        unit = spec.get("unit", "")
        name = spec.get("name") or spec.get("label") or key
        out.append(num(key, f"{name} ({unit})" if unit else name))
    return tuple(out)


_WATER_LABELS = {
    "temperature": "Temperature (°C)",
    "ph": "pH",
    "dissolvedOxygen": "Dissolved oxygen (mg/L)",
    "ammonia": "Ammonia (mg/L)",
    "nitrite": "Nitrite (mg/L)",
    "nitrate": "Nitrate (mg/L)",
    "alkalinity": "Alkalinity (mg/L CaCO₃)",
    "hardness": "Hardness (mg/L CaCO₃)",
    "turbidity": "Turbidity (NTU)",
}


def layouts() -> Dict[str, Layout]:
    """Build the layouts; reads reference tables for select options."""
    return {
        # Water management
        "water-quality": Layout((
            pick("species", "Species", table="water_quality_ranges", required=True),
            *(num(p, _WATER_LABELS[p]) for p in BASIC_PARAMETERS),
        )),
        "water-quality-monitor": Layout(
            _reading_fields("monitor_parameters"), any_of=tuple(water_quality.monitor_reading_keys()), columns=3
        ),
        "water-quality-predictor": Layout((
            pick("species", "Species", table="predictor_species", required=True),
            num("temperature", "Temperature (°C)", True),
            num("pH", "pH", True),
            num("dissolvedOxygen", "Dissolved oxygen (mg/L)", True),
            num("ammonia", "Ammonia (mg/L)", True),
            num("feedingRate", "Feeding rate (% body weight)"),
            num("stockingDensity", "Stocking density (fish/m³)"),
            num("waterExchangeRate", "Water exchange (%/day)"),
            num("sunlight", "Sunlight (hours/day)"),
            num("rainfall", "Rainfall (mm)"),
        )),
        "pond-evaporation": Layout((
            num("pondLength", "Pond length (m)", True),
            num("pondWidth", "Pond width (m)", True),
            num("pondDepth", "Pond depth (m)"),
            num("waterTemperature", "Water temperature (°C)", True),
            num("airTemperature", "Air temperature (°C)", True),
            num("humidity", "Relative humidity (%)", True),
            num("windSpeed", "Wind speed (m/s)", True),
            num("sunlightHours", "Sunlight (hours/day)", True),
            num("rainfall", "Rainfall (mm/day)"),
            pick("season", "Season", table="evaporation_season_factors"),
            pick("cloudCover", "Cloud cover", table="evaporation_cloud_factors"),
        )),
        "pond-sediment": Layout((
            num("pondArea", "Pond area (m²)", True),
            num("pondDepth", "Pond depth (m)", True),
            num("sedimentDepth", "Sediment depth (cm)", True),
            pick("sedimentType", "Sediment type", table="sediment_types", required=True),
            num("organicContent", "Organic content (%)"),
            num("pondAge", "Pond age (years)"),
            num("lastCleaned", "Months since last cleaning"),
            num("feedingRate", "Feeding rate (kg/day)"),
            num("stockingDensity", "Stocking density (fish/m²)"),
            num("waterExchangeRate", "Water exchange (%/day)"),
        )),
        "pond-liming": Layout((
            num("pondArea", "Pond area (m²)", True),
            num("pondDepth", "Average depth (m)", True),
            num("currentPH", "Current pH", True),
            num("targetPH", "Target pH", True),
            num("alkalinity", "Total alkalinity (mg/L CaCO₃)", True),
            pick("soilType", "Soil type", table="soil_types", required=True),
            pick("waterSource", "Water source", pond.WATER_SOURCES, required=True),
            pick("limeType", "Lime type", table="lime_types", required=True),
        )),
        "pond-lining": Layout((
            num("length", "Length (m)", True),
            num("width", "Width (m)", True),
            num("depth", "Depth (m)", True),
            pick("materialType", "Lining material", table="lining_materials", required=True),
            num("slopeRatio", "Side slope (horizontal:1)"),
            num("laborCostPerDay", "Labor cost per day"),
            num("estimatedDays", "Estimated installation days"),
            num("additionalCosts", "Additional costs"),
        )),
        # Fish management
        "growth-benchmark": Layout((
            pick("species", "Species", table="benchmark_species", required=True),
            num("currentWeight", "Current weight (g)", True),
            num("stockingWeight", "Stocking weight (g)", True),
            Field("stockingDate", "Stocking date", "date", required=True),
            pick("feedType", "Feed type", table="benchmark_feed_factors", required=True),
            num("waterTemperature", "Water temperature (°C)", True),
            num("stockingDensity", "Stocking density (fish/m³)", True),
            num("age", "Age (days)"),
        )),
        "growth-predictor": Layout((
            pick("species", "Species", table="growth_predictor_species", required=True),
            num("initialWeight", "Initial weight (g)", True),
            num("feedingRate", "Feeding rate (% body weight/day)", True),
            num("waterTemperature", "Water temperature (°C)", True),
            num("growthPeriod", "Growth period (days)", True),
            num("fcr", "Feed conversion ratio"),
            num("stockingDensity", "Stocking density (fish/m³)"),
            num("feedCost", "Feed cost (per kg)"),
        )),
        "fish-stress": Layout((
            pick("species", "Species", table="stress_species", required=True),
            num("waterTemperature", "Water temperature (°C)", True),
            num("dissolvedOxygen", "Dissolved oxygen (mg/L)", True),
            num("ph", "pH"),
            num("ammonia", "Ammonia (mg/L)"),
            num("nitrite", "Nitrite (mg/L)"),
            num("salinity", "Salinity (ppt)"),
            num("stockingDensity", "Stocking density (kg/m³)"),
            num("waterFlow", "Water flow (L/min)"),
            num("turbidity", "Turbidity (NTU)"),
            many("behavior", "Observed behavior", table="stress_behaviors"),
            pick("feedingResponse", "Feeding response", table="stress_feeding_responses"),
        )),
        "fish-calculator": Layout((
            pick("species", "Species", table="production_species", required=True),
            num("pondArea", "Pond area (m²)", True),
            num("pondDepth", "Pond depth (m)", True),
            num("stockingDensity", "Stocking density (kg/m³)", True),
            num("initialWeight", "Initial weight (g)", True),
            num("targetWeight", "Target weight (g)", True),
            num("survivalRate", "Survival rate (%)", True),
            num("growthRate", "Growth rate (g/day)", True),
            num("feedingRate", "Feeding rate (% body weight)", True),
            num("waterExchange", "Water exchange (%/day)", True),
        )),
        "fish-stocking": Layout((
            num("pondLength", "Pond length (m)", True),
            num("pondWidth", "Pond width (m)", True),
            num("pondDepth", "Pond depth (m)", True),
            pick("fishSpecies", "Species", table="stocking_species", required=True),
            num("targetSize", "Target size (g)", True),
            num("waterExchangeRate", "Water exchange (%/day)", True),
            pick("aerationSystem", "Aeration system", production.AERATION_SYSTEMS, required=True),
            pick("feedingStrategy", "Feeding strategy", production.FEEDING_STRATEGIES, required=True),
            num("expectedSurvival", "Expected survival (%)", True),
            num("productionCycle", "Production cycle (months)"),
        )),
        "fish-yield": Layout((
            pick("speciesType", "Species", table="yield_species", required=True),
            num("initialStocking", "Initial stocking (fish)", True),
            num("initialWeight", "Initial weight (g)", True),
            num("growthPeriod", "Growth period (days)", True),
            num("expectedFCR", "Expected FCR", True),
            num("mortalityRate", "Mortality rate (%)", True),
            pick("waterQuality", "Water quality", tuple(table("yield_modifiers")["water_quality"])),
            pick("seasonality", "Season", tuple(table("yield_modifiers")["season"])),
            pick("managementLevel", "Management level", tuple(table("yield_modifiers")["management"])),
            num("feedingRate", "Feeding rate (% body weight)"),
        )),
        "species-suitability": Layout((
            Field("waterTemperature", "Water temperature range (°C)", "range", default=(20.0, 30.0), bounds=(0.0, 40.0)),
            Field("waterPH", "Water pH range", "range", default=(6.5, 8.5), bounds=(4.0, 10.0)),
            num("dissolvedOxygen", "Dissolved oxygen (mg/L)", True),
            num("waterDepth", "Water depth (m)", True),
            pick("experience", "Experience", table="experience_levels"),
            pick("growthRate", "Preferred growth rate", species.GROWTH_PREFERENCES),
            pick("diseaseResistance", "Disease resistance needed", species.PREFERENCE_LEVELS),
            pick("marketPreference", "Market value preference", species.PREFERENCE_LEVELS),
            pick("budget", "Budget", species.BUDGET_LEVELS),
            Field("location", "Location", "text"),
        )),
        # Feed management
        "fcr-calculator": Layout((
            pick("species", "Species", table="fcr_targets", required=True),
            num("initialWeight", "Initial biomass (kg)", True),
            num("finalWeight", "Final biomass (kg)", True),
            num("feedGiven", "Feed given (kg)", True),
            num("mortality", "Mortality (kg)"),
            num("duration", "Duration (days)"),
        )),
        "fcr-optimizer": Layout((
            num("feedAmount", "Feed amount (kg)", True),
            num("initialWeight", "Initial weight per fish (kg)", True),
            num("finalWeight", "Final weight per fish (kg)", True),
            num("numberOfFish", "Number of fish", True),
            num("feedingPeriod", "Feeding period (days)", True),
            num("waterTemperature", "Water temperature (°C)", True),
            num("feedProteinContent", "Feed protein (%)", True),
            pick("growthStage", "Growth stage", feeding.GROWTH_STAGES),
            pick("feedType", "Feed type", feeding.OPTIMIZER_FEED_TYPES),
            pick("feedingFrequency", "Feeding frequency", feeding.FEEDING_FREQUENCIES),
        )),
        "feeding-calculator": Layout((
            pick("species", "Species", table="feeding_guides", required=True),
            pick("growthStage", "Growth stage", feeding.FEEDING_STAGES, required=True),
            num("biomass", "Total biomass (kg)", True),
            num("waterTemperature", "Water temperature (°C)", True),
        )),
        # Health management
        "disease-prevention": Layout((
            num("temperature", "Temperature (°C)"),
            num("dissolvedOxygen", "Dissolved oxygen (mg/L)"),
            num("ph", "pH"),
            num("ammonia", "Ammonia (mg/L)"),
            num("nitrite", "Nitrite (mg/L)"),
            num("mortalityRate", "Mortality rate (%)"),
            many("behavior", "Behavior", health.PREVENTION_BEHAVIORS),
            many("symptoms", "Symptoms", health.PREVENTION_SYMPTOMS),
            pick("feedingResponse", "Feeding response", health.FEEDING_RESPONSES),
            many("previousDiseases", "Previous diseases", health.COMMON_DISEASES),
            pick("quarantineStatus", "Quarantine status", health.QUARANTINE_STATUSES),
            pick("biosecurityLevel", "Biosecurity level", health.BIOSECURITY_LEVELS),
        ), any_of=health.PREVENTION_ANY_OF),
        "disease-risk": Layout((
            pick("species", "Species", health.RISK_SPECIES, required=True),
            num("temperature", "Temperature (°C)", True),
            num("dissolvedOxygen", "Dissolved oxygen (mg/L)", True),
            num("pH", "pH", True),
            num("ammonia", "Ammonia (mg/L)"),
            num("nitrite", "Nitrite (mg/L)"),
            num("stockingDensity", "Stocking density (kg/m³)"),
            num("mortalityRate", "Mortality rate (%)"),
            many("symptoms", "Clinical signs", health.CLINICAL_SIGNS),
            pick("season", "Season", table="seasonal_disease_patterns"),
        )),
        "waste-fertilizer": Layout((
            pick("fishSpecies", "Species", table="fertilizer_species", required=True),
            num("fishBiomass", "Fish biomass (kg)", True),
            num("feedingRate", "Feeding rate (% body weight)", True),
            num("collectionFrequency", "Collection frequency (days)", True),
            num("pondSize", "Pond size (m²)", True),
            num("feedProtein", "Feed protein (%)", True),
            pick("processingMethod", "Processing method", table="fertilizer_processing", required=True),
            pick("storageConditions", "Storage", table="fertilizer_storage", required=True),
            pick("cropType", "Target crop", table="fertilizer_crops", required=True),
        )),
        # Environment
        "environmental-monitor": Layout((
            *_reading_fields("environmental_limits"),
            pick("weatherCondition", "Weather", environment.WEATHER_CONDITIONS),
            num("rainfall", "Rainfall (mm)"),
            num("windSpeed", "Wind speed (km/h)"),
        ), any_of=tuple(environment.environmental_reading_keys()), columns=3),
        "environment-monitor": Layout((
            *_reading_fields("environment_parameters"),
            pick("weather", "Weather", environment.MONITOR_WEATHER),
        ), any_of=tuple(environment.monitor_reading_keys()), columns=3),
        "weather-impact": Layout((
            pick("species", "Species", table="weather_species", required=True),
            pick("season", "Season", environment.SEASONS, required=True),
            num("temperature", "Air temperature (°C)"),
            num("humidity", "Humidity (%)"),
            num("rainfall", "Rainfall (mm)"),
            num("windSpeed", "Wind speed (km/h)"),
            pick("cloudCover", "Cloud cover", table="weather_cloud_cover"),
            num("pondDepth", "Pond depth (m)"),
            num("pondArea", "Pond area (m²)"),
            num("dissolvedOxygen", "Dissolved oxygen (mg/L)"),
            num("currentpH", "Current pH"),
            num("stockingDensity", "Stocking density (fish/m³)"),
        )),
        "aeration-calculator": Layout((
            num("length", "Pond length (m)", True),
            num("width", "Pond width (m)", True),
            num("depth", "Pond depth (m)", True),
            pick("fishSpecies", "Species", table="aeration_species", required=True),
            num("fishQuantity", "Number of fish", True),
            num("averageWeight", "Average weight (kg)", True),
            num("temperature", "Water temperature (°C)", True),
            num("dissolvedOxygen", "Dissolved oxygen (mg/L)", True),
        )),
        # Business
        "market-analysis": Layout((
            pick("species", "Species", table="harvest_species", required=True),
            pick("productType", "Product type", business.PRODUCT_TYPES, required=True),
            num("quantity", "Quantity (kg)", True),
            num("productionCost", "Production cost (per kg)", True),
            pick("targetMarket", "Target market", business.TARGET_MARKETS, required=True),
            num("competitorPrice", "Competitor price (per kg)", True),
            pick("seasonality", "Season", business.MARKET_SEASONS, required=True),
            pick("qualityGrade", "Quality grade", business.QUALITY_GRADES, required=True),
            num("transportCost", "Transport cost (per kg)", True),
            num("storageLife", "Storage life (days)", True),
        )),
        "profitability": Layout((
            *(num(k, environment.readable_name(k).capitalize(), True) for k in business.CAPITAL_FIELDS),
            *(num(k, environment.readable_name(k).capitalize(), True) for k in business.OPERATING_FIELDS),
            num("cyclesPerYear", "Cycles per year", True),
            num("productionPerCycle", "Production per cycle (kg)", True),
            num("survivalRate", "Survival rate (%)", True),
            num("sellingPrice", "Selling price (per kg)", True),
            num("loanAmount", "Loan amount"),
            num("interestRate", "Interest rate (%)"),
        ), columns=3),
        "harvest-timing": Layout((
            pick("species", "Species", table="harvest_species", required=True),
            Field("stockingDate", "Stocking date", "date", required=True),
            num("initialWeight", "Initial weight (g)", True),
            num("currentWeight", "Current weight (g)", True),
            num("targetWeight", "Target weight (g)", True),
            num("growthRate", "Growth rate (g/day)", True),
            num("feedingRate", "Feeding rate (% body weight)", True),
            num("survivalRate", "Survival rate (%)", True),
            num("marketPrice", "Market price (per kg)", True),
            num("productionCosts", "Production costs (per kg)", True),
            pick("seasonalPricing", "Seasonal pricing", table="harvest_seasonal_factors", required=True),
            pick("waterQuality", "Water quality", business.WATER_QUALITY_GRADES, required=True),
        )),
    }
