from __future__ import annotations

"""
Water quality tools: the per-species basic check, the twelve-parameter
monitor and the 48-hour predictor.

Each tool has an input dataclass built from raw form values (`from_form`) and a
pure compute function returning a result dataclass. The predictor draws its
noise from an injectable `random.Random` so tests can seed it.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .forms import is_blank, parse_number, require_any, require_fields
from .reference_data import lookup, table

log = logging.getLogger(__name__)

BASIC_PARAMETERS: Tuple[str, ...] = (
    "temperature",
    "ph",
    "dissolvedOxygen",
    "ammonia",
    "nitrite",
    "nitrate",
    "alkalinity",
    "hardness",
    "turbidity",
)

PREDICTION_HOURS = 48


# ---------------------------------------------------------------------------
# Basic check
# ---------------------------------------------------------------------------


@dataclass
class WaterQualityInputs:
    species: str
    readings: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "WaterQualityInputs":
        require_fields(form, ["species"], context="Water quality")
        readings: Dict[str, float] = {}
        for name in BASIC_PARAMETERS:
            if not is_blank(form.get(name)):
                readings[name] = parse_number(form.get(name), name)
        return cls(species=str(form["species"]), readings=readings)


@dataclass
class ParameterStatus:
    parameter: str
    label: str
    value: float
    unit: str
    status: str  # success | warning | error
    optimal_min: float
    optimal_max: float


@dataclass
class WaterQualityResult:
    species: str
    statuses: List[ParameterStatus]
    recommendations: List[str]


def parameter_status(value: float, rng: Mapping[str, Any]) -> str:
    """success inside the optimal band, warning inside min..max, error otherwise."""
    opt = rng["optimal"]
    if opt["min"] <= value <= opt["max"]:
        return "success"
    if rng["min"] <= value <= rng["max"]:
        return "warning"
    return "error"


def check_water_quality(inputs: WaterQualityInputs) -> WaterQualityResult:
    ranges = lookup("water_quality_ranges", inputs.species, "species")
    statuses: List[ParameterStatus] = []
    recs: List[str] = []
    for name in BASIC_PARAMETERS:
        if name not in inputs.readings:
            continue
        value = inputs.readings[name]
        rng = ranges[name]
        opt = rng["optimal"]
        statuses.append(
            ParameterStatus(
                parameter=name,
                label=rng["label"],
                value=value,
                unit=rng["unit"],
                status=parameter_status(value, rng),
                optimal_min=opt["min"],
                optimal_max=opt["max"],
            )
        )
        if value < opt["min"]:
            recs.append(f"{rng['label']} is too low. Increase to {opt['min']}-{opt['max']} {rng['unit']}")
        elif value > opt["max"]:
            recs.append(f"{rng['label']} is too high. Decrease to {opt['min']}-{opt['max']} {rng['unit']}")
    if not recs:
        recs.append("All parameters are within optimal ranges")
    log.debug("Water quality check: species=%s filled=%d advisories=%d", inputs.species, len(statuses), len(recs))
    return WaterQualityResult(species=inputs.species, statuses=statuses, recommendations=recs)


# ---------------------------------------------------------------------------
# Monitor
# ---------------------------------------------------------------------------


def monitor_reading_keys() -> List[str]:
    """Form keys of the monitor readings; at least one must be filled."""
    return list(table("monitor_parameters").keys())


@dataclass
class MonitorInputs:
    readings: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "MonitorInputs":
        params = monitor_reading_keys()
        require_any(form, params, context="Water quality monitor")
        readings = {p: parse_number(form.get(p), p) for p in params if not is_blank(form.get(p))}
        return cls(readings=readings)


@dataclass
class ParameterAnalysis:
    parameter: str
    name: str
    value: float
    unit: str
    status: str  # Optimal | Warning | Critical
    recommendations: List[str]


@dataclass
class MonitorResult:
    analysis: List[ParameterAnalysis]
    overall_status: str


def band_status(value: float, spec: Mapping[str, Any]) -> str:
    """Optimal / Warning / Critical using the optimal and warning bands."""
    if spec["optimal"]["min"] <= value <= spec["optimal"]["max"]:
        return "Optimal"
    if spec["warning"]["min"] <= value <= spec["warning"]["max"]:
        return "Warning"
    return "Critical"


def overall_status(statuses: Sequence[str]) -> str:
    if "Critical" in statuses:
        return "Critical"
    if "Warning" in statuses:
        return "Warning"
    return "Optimal"


def monitor_water_quality(inputs: MonitorInputs) -> MonitorResult:
    params = table("monitor_parameters")
    analysis: List[ParameterAnalysis] = []
    for key, spec in params.items():
        if key not in inputs.readings:
            continue
        value = inputs.readings[key]
        analysis.append(
            ParameterAnalysis(
                parameter=key,
                name=spec["name"],
                value=value,
                unit=spec["unit"],
                status=band_status(value, spec),
                recommendations=list(spec["recommendations"]),
            )
        )
    overall = overall_status([a.status for a in analysis])
    log.debug("Water quality monitor: analysed=%d overall=%s", len(analysis), overall)
    return MonitorResult(analysis=analysis, overall_status=overall)


# ---------------------------------------------------------------------------
# 48 h predictor
# ---------------------------------------------------------------------------


@dataclass
class PredictorInputs:
    species: str
    temperature: float
    ph: float
    dissolved_oxygen: float
    ammonia: float
    feeding_rate: float = 0.0
    stocking_density: float = 0.0
    water_exchange_rate: float = 0.0
    sunlight: float = 0.0
    rainfall: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "PredictorInputs":
        require_fields(
            form,
            ["species", "temperature", "pH", "dissolvedOxygen", "ammonia"],
            context="Water quality predictor",
        )
        return cls(
            species=str(form["species"]),
            temperature=parse_number(form["temperature"], "temperature"),
            ph=parse_number(form["pH"], "pH"),
            dissolved_oxygen=parse_number(form["dissolvedOxygen"], "dissolvedOxygen"),
            ammonia=parse_number(form["ammonia"], "ammonia"),
            feeding_rate=parse_number(form.get("feedingRate"), "feedingRate"),
            stocking_density=parse_number(form.get("stockingDensity"), "stockingDensity"),
            water_exchange_rate=parse_number(form.get("waterExchangeRate"), "waterExchangeRate"),
            sunlight=parse_number(form.get("sunlight"), "sunlight"),
            rainfall=parse_number(form.get("rainfall"), "rainfall"),
        )


@dataclass
class PredictionResult:
    parameter: str
    current: float
    predicted: float
    trend: str
    risk: str
    recommendations: List[str]


@dataclass
class PredictorResult:
    species: str
    predictions: List[PredictionResult]
    hourly: List[Dict[str, Any]]
    species_alerts: List[str]


def _is_daylight(hour: int) -> bool:
    return 6 <= hour % 24 <= 18


def predict_temperature(current: float, sunlight: float, rainfall: float, rng: random.Random) -> List[float]:
    out = []
    for h in range(PREDICTION_HOURS):
        sun = sunlight * 0.1 if _is_daylight(h) else -0.05
        rain = -rainfall * 0.2 if rainfall > 0 else 0.0
        out.append(round(current + sun + rain + rng.uniform(-0.1, 0.1), 1))
    return out


def predict_dissolved_oxygen(temp: float, feeding: float, density: float, rng: random.Random) -> List[float]:
    out = []
    for h in range(PREDICTION_HOURS):
        photo = 0.5 if _is_daylight(h) else -0.3
        value = 6 - 0.1 * (temp - 25) - 0.2 * feeding - 0.1 * density + photo + rng.uniform(-0.1, 0.1)
        out.append(round(value, 1))
    return out


def predict_ph(current: float, feeding: float, rainfall: float, rng: random.Random) -> List[float]:
    out = []
    for _ in range(PREDICTION_HOURS):
        rain = -rainfall * 0.1 if rainfall > 0 else 0.0
        out.append(round(current - 0.05 * feeding + rain + rng.uniform(-0.1, 0.1), 1))
    return out


def predict_ammonia(temp: float, feeding: float, exchange: float, rng: random.Random) -> List[float]:
    out = []
    for _ in range(PREDICTION_HOURS):
        value = 0.5 + 0.01 * (temp - 25) + 0.02 * feeding - 0.05 * exchange + rng.uniform(-0.05, 0.05)
        out.append(round(max(0.0, value), 2))
    return out


def risk_level(value: float, low: float, medium: float, high: float) -> str:
    if value <= low or value >= high:
        return "high"
    if value < medium:
        return "medium"
    return "low"


_STEADY = ["Maintain current management practices", "Continue regular monitoring"]


def temperature_recommendations(temp: float) -> List[str]:
    if temp > 30:
        return [
            "Increase water exchange rate",
            "Add shading to reduce sunlight exposure",
            "Consider reducing feeding rate",
        ]
    if temp < 20:
        return ["Add heating if available", "Reduce water exchange rate", "Monitor fish behavior closely"]
    return list(_STEADY)


def oxygen_recommendations(do: float) -> List[str]:
    if do < 4:
        return ["Increase aeration immediately", "Reduce feeding rate", "Consider emergency water exchange"]
    if do < 5:
        return ["Increase aeration", "Monitor fish behavior", "Check aeration system efficiency"]
    return ["Maintain current aeration levels", "Continue regular monitoring"]


def ph_recommendations(ph: float) -> List[str]:
    if ph < 6.5 or ph > 8.5:
        return ["Apply pH buffer as needed", "Check alkalinity levels", "Increase water exchange rate"]
    if ph < 7 or ph > 8:
        return ["Monitor more frequently", "Prepare pH adjustment if trend continues", "Check feeding rate"]
    return list(_STEADY)


def ammonia_recommendations(ammonia: float) -> List[str]:
    if ammonia > 1:
        return ["Stop feeding immediately", "Increase water exchange rate", "Add zeolite if available"]
    if ammonia > 0.5:
        return ["Reduce feeding rate", "Increase aeration", "Monitor biofilter performance"]
    return list(_STEADY)


def species_alerts(inputs: PredictorInputs) -> List[str]:
    """Flag current readings outside the species' preferred ranges."""
    profile = lookup("predictor_species", inputs.species, "species")
    alerts: List[str] = []
    checks = [
        ("Temperature", inputs.temperature, profile["temperature"], "°C"),
        ("pH", inputs.ph, profile["pH"], ""),
        ("Dissolved Oxygen", inputs.dissolved_oxygen, profile["dissolvedOxygen"], " mg/L"),
    ]
    for label, value, rng, unit in checks:
        if not rng["min"] <= value <= rng["max"]:
            alerts.append(
                f"{label} {value}{unit} is outside the {inputs.species} range {rng['min']}-{rng['max']}{unit}"
            )
    if inputs.ammonia > profile["ammonia_max"]:
        alerts.append(f"Ammonia {inputs.ammonia} mg/L exceeds the {inputs.species} limit of {profile['ammonia_max']} mg/L")
    return alerts


def predict_water_quality(inputs: PredictorInputs, rng: Optional[random.Random] = None) -> PredictorResult:
    rng = rng or random.Random()
    alerts = species_alerts(inputs)
    thresholds = table("predictor_risk_thresholds")

    temps = predict_temperature(inputs.temperature, inputs.sunlight, inputs.rainfall, rng)
    dos = predict_dissolved_oxygen(inputs.temperature, inputs.feeding_rate, inputs.stocking_density, rng)
    phs = predict_ph(inputs.ph, inputs.feeding_rate, inputs.rainfall, rng)
    ammonias = predict_ammonia(inputs.temperature, inputs.feeding_rate, inputs.water_exchange_rate, rng)

    series = [
        ("Temperature", inputs.temperature, temps, thresholds["temperature"], temperature_recommendations),
        ("Dissolved Oxygen", inputs.dissolved_oxygen, dos, thresholds["dissolvedOxygen"], oxygen_recommendations),
        ("pH", inputs.ph, phs, thresholds["pH"], ph_recommendations),
        ("Ammonia", inputs.ammonia, ammonias, thresholds["ammonia"], ammonia_recommendations),
    ]
    predictions: List[PredictionResult] = []
    for name, current, values, (low, med, high), advise in series:
        final = values[-1]
        predictions.append(
            PredictionResult(
                parameter=name,
                current=current,
                predicted=final,
                trend="increasing" if final > current else "decreasing",
                risk=risk_level(final, low, med, high),
                recommendations=advise(final),
            )
        )

    hourly = [
        {
            "time": f"{h}h",
            "temperature": temps[h],
            "dissolvedOxygen": dos[h],
            "pH": phs[h],
            "ammonia": ammonias[h],
        }
        for h in range(PREDICTION_HOURS)
    ]
    log.debug(
        "Water quality prediction: species=%s risks=%s",
        inputs.species,
        {p.parameter: p.risk for p in predictions},
    )
    return PredictorResult(species=inputs.species, predictions=predictions, hourly=hourly, species_alerts=alerts)
