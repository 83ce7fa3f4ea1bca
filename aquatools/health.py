from __future__ import annotations

"""
Fish health tools: the disease-prevention screen and the weighted disease
risk assessment.

Both tools score risk from water quality readings and observed signs. The
risk assessment also ranks every catalogued disease by how well the current
conditions and signs match its critical parameter windows and symptom list.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .forms import is_blank, parse_number, require_any, require_fields
from .reference_data import table

log = logging.getLogger(__name__)

PREVENTION_BEHAVIORS = (
    "Normal",
    "Lethargy",
    "Erratic Swimming",
    "Surface Gasping",
    "Bottom Sitting",
    "Flashing",
    "Rubbing Against Objects",
)
PREVENTION_SYMPTOMS = (
    "No Visible Symptoms",
    "Skin Lesions",
    "White Spots",
    "Red Spots",
    "Fin Rot",
    "Swollen Abdomen",
    "Cloudy Eyes",
    "Gill Damage",
    "Scale Loss",
    "Body Deformities",
)
FEEDING_RESPONSES = ("Normal", "Reduced Appetite", "No Appetite", "Aggressive Feeding")
COMMON_DISEASES = (
    "White Spot Disease",
    "Bacterial Gill Disease",
    "Columnaris",
    "Saprolegniasis",
    "Aeromonas Infection",
)
QUARANTINE_STATUSES = (
    "No Quarantine",
    "New Stock Quarantined",
    "Disease Outbreak Quarantine",
    "Preventive Quarantine",
)
BIOSECURITY_LEVELS = ("Basic", "Standard", "Advanced", "Comprehensive")

RISK_SPECIES = ("tilapia", "carp", "catfish", "trout")
CLINICAL_SIGNS = (
    "Lethargy",
    "Erratic swimming",
    "Gasping at surface",
    "Red/inflamed gills",
    "Skin lesions",
    "White spots on skin",
    "Bloated abdomen",
    "Fin rot",
    "Color changes",
    "Excess mucus production",
    "Scale loss",
    "Pop-eye condition",
    "Ulcers",
    "Hemorrhages",
    "Cotton-like growth",
    "Black/brown spots",
    "Rapid operculum movement",
    "Flashing behavior",
    "Tail/fin erosion",
    "Body deformities",
)
SEVERE_BEHAVIORS = ("Lethargy", "Erratic swimming", "Gasping at surface")

_WATER_FIELDS = ("temperature", "dissolvedOxygen", "ph", "ammonia", "nitrite")
# Any one of these makes a prevention screen worth running
PREVENTION_ANY_OF = (*_WATER_FIELDS, "behavior", "symptoms", "feedingResponse")


def _as_list(value: Any) -> List[str]:
    if is_blank(value):
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v) for v in value]


# ---------------------------------------------------------------------------
# Disease prevention
# ---------------------------------------------------------------------------


@dataclass
class PreventionInputs:
    temperature: Optional[float] = None
    dissolved_oxygen: Optional[float] = None
    ph: Optional[float] = None
    ammonia: Optional[float] = None
    nitrite: Optional[float] = None
    behavior: List[str] = field(default_factory=list)
    symptoms: List[str] = field(default_factory=list)
    feeding_response: str = ""
    mortality_rate: Optional[float] = None
    previous_diseases: List[str] = field(default_factory=list)
    quarantine_status: str = ""
    biosecurity_level: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "PreventionInputs":
        require_any(form, PREVENTION_ANY_OF, context="Disease prevention")

        def opt(key: str) -> Optional[float]:
            return parse_number(form.get(key), key, default=None)

        return cls(
            temperature=opt("temperature"),
            dissolved_oxygen=opt("dissolvedOxygen"),
            ph=opt("ph"),
            ammonia=opt("ammonia"),
            nitrite=opt("nitrite"),
            behavior=_as_list(form.get("behavior")),
            symptoms=_as_list(form.get("symptoms")),
            feeding_response=str(form.get("feedingResponse") or ""),
            mortality_rate=opt("mortalityRate"),
            previous_diseases=_as_list(form.get("previousDiseases")),
            quarantine_status=str(form.get("quarantineStatus") or ""),
            biosecurity_level=str(form.get("biosecurityLevel") or ""),
        )


@dataclass
class SuspectedDisease:
    name: str
    probability: float
    severity: str
    symptoms: List[str]
    treatments: List[str]
    prevention: List[str]


@dataclass
class PreventionResult:
    overall_risk: float
    disease_risks: List[SuspectedDisease]
    biosecurity_recommendations: List[str]
    quarantine_recommendations: List[str]
    treatment_protocols: List[str]
    emergency_actions: List[str]


def water_risk_points(inputs: PreventionInputs) -> float:
    """Risk points from the water readings; blank readings add nothing."""
    points = 0.0
    t, do, ph = inputs.temperature, inputs.dissolved_oxygen, inputs.ph
    if t is not None and (t < 25 or t > 32):
        points += 20
    if do is not None and do < 5:
        points += 25
    if ph is not None and (ph < 6.5 or ph > 8.5):
        points += 15
    if inputs.ammonia is not None and inputs.ammonia > 0.5:
        points += 25
    if inputs.nitrite is not None and inputs.nitrite > 0.1:
        points += 20
    return points


def analyze_prevention(inputs: PreventionInputs) -> PreventionResult:
    risk = water_risk_points(inputs)
    emergency: List[str] = []

    risk += 10 * len([b for b in inputs.behavior if b != "Normal"])
    risk += 15 * len([s for s in inputs.symptoms if s != "No Visible Symptoms"])
    if inputs.feeding_response == "No Appetite":
        risk += 30
        emergency.append("Immediate health assessment required")
    elif inputs.feeding_response == "Reduced Appetite":
        risk += 15

    catalogue = table("prevention_diseases")
    suspected = [
        SuspectedDisease(
            name=entry["name"],
            probability=entry["probability"],
            severity=entry["severity"],
            symptoms=list(entry["symptoms"]),
            treatments=list(entry["treatments"]),
            prevention=list(entry["prevention"]),
        )
        for symptom, entry in catalogue.items()
        if symptom in inputs.symptoms
    ]

    biosecurity: List[str] = []
    if inputs.biosecurity_level == "Basic":
        biosecurity = [
            "Implement basic disinfection protocols",
            "Establish visitor log and control",
            "Install footbaths at entry points",
        ]
    quarantine: List[str] = []
    if inputs.quarantine_status == "No Quarantine":
        quarantine = [
            "Establish quarantine protocol for new stock",
            "Set up dedicated quarantine facilities",
            "Implement observation period of 2-4 weeks",
        ]
    treatment: List[str] = []
    if risk > 50:
        treatment = ["Daily water quality monitoring", "Increase water exchange rate", "Prepare medication stock"]
    if risk > 70:
        emergency += ["Contact aquatic veterinarian", "Prepare treatment equipment", "Isolate affected stock"]

    log.debug("Disease prevention: raw_risk=%.1f suspected=%d", risk, len(suspected))
    return PreventionResult(
        overall_risk=min(risk, 100.0),
        disease_risks=suspected,
        biosecurity_recommendations=biosecurity,
        quarantine_recommendations=quarantine,
        treatment_protocols=treatment,
        emergency_actions=emergency,
    )


# ---------------------------------------------------------------------------
# Disease risk assessment
# ---------------------------------------------------------------------------


@dataclass
class RiskInputs:
    species: str
    temperature: float
    dissolved_oxygen: float
    ph: float
    ammonia: Optional[float] = None
    nitrite: Optional[float] = None
    stocking_density: Optional[float] = None
    mortality_rate: Optional[float] = None
    signs: List[str] = field(default_factory=list)
    season: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "RiskInputs":
        require_fields(form, ["species", "temperature", "dissolvedOxygen", "pH"], context="Disease risk")

        def opt(key: str) -> Optional[float]:
            return parse_number(form.get(key), key, default=None)

        return cls(
            species=str(form["species"]),
            temperature=parse_number(form["temperature"], "temperature"),
            dissolved_oxygen=parse_number(form["dissolvedOxygen"], "dissolvedOxygen"),
            ph=parse_number(form["pH"], "pH"),
            ammonia=opt("ammonia"),
            nitrite=opt("nitrite"),
            stocking_density=opt("stockingDensity"),
            mortality_rate=opt("mortalityRate"),
            signs=_as_list(form.get("symptoms")) + _as_list(form.get("behavior")),
            season=str(form.get("season") or ""),
        )


@dataclass
class RiskFactor:
    name: str
    value: int  # 0 | 50 | 100
    weight: float
    status: str  # low | medium | high


@dataclass
class DiseaseRisk:
    disease: str
    probability: float
    severity: str
    matched_symptoms: List[str]
    risk_factors: List[str]
    preventive_measures: List[str]
    treatments: List[str]
    treatment_cost: Optional[Dict[str, float]] = None


@dataclass
class RiskAssessment:
    species: str
    overall_risk: float
    risk_factors: List[RiskFactor]
    disease_risks: List[DiseaseRisk]
    seasonal_pattern: Optional[Dict[str, Any]] = None


_STATUS = {0: "low", 50: "medium", 100: "high"}


def _factor(name: str, value: int, weight: float) -> RiskFactor:
    return RiskFactor(name=name, value=value, weight=weight, status=_STATUS[value])


def _banded(value: Optional[float], high: bool, medium: bool) -> int:
    if value is None:
        return 0
    if high:
        return 100
    if medium:
        return 50
    return 0


def behavior_risk(signs: Sequence[str]) -> int:
    if any(s in SEVERE_BEHAVIORS for s in signs):
        return 100
    if signs:
        return 50
    return 0


def risk_factors(inputs: RiskInputs) -> List[RiskFactor]:
    t, do, ph = inputs.temperature, inputs.dissolved_oxygen, inputs.ph
    amm, dens, mort = inputs.ammonia, inputs.stocking_density, inputs.mortality_rate
    return [
        _factor("Temperature", _banded(t, t < 20 or t > 32, t < 25 or t > 30), 0.2),
        _factor("Oxygen", _banded(do, do < 3, do < 5), 0.15),
        _factor("pH", _banded(ph, ph < 6 or ph > 9, ph < 6.5 or ph > 8.5), 0.1),
        _factor("Ammonia", _banded(amm, amm is not None and amm > 1, amm is not None and amm > 0.5), 0.15),
        _factor("Density", _banded(dens, dens is not None and dens > 50, dens is not None and dens > 30), 0.1),
        _factor("Mortality", _banded(mort, mort is not None and mort > 5, mort is not None and mort > 2), 0.2),
        _factor("Behavior", behavior_risk(inputs.signs), 0.1),
    ]


def _inside(value: float, window: Optional[Mapping[str, float]]) -> bool:
    return window is not None and window["min"] <= value <= window["max"]


def disease_probability(inputs: RiskInputs, disease: Mapping[str, Any]) -> float:
    params = disease["critical_parameters"]
    probability = 0.0
    if _inside(inputs.temperature, params.get("temperature")):
        probability += 30
    if _inside(inputs.dissolved_oxygen, params.get("dissolvedOxygen")):
        probability += 20
    if _inside(inputs.ph, params.get("pH")):
        probability += 20
    symptoms = disease["symptoms"]
    matched = [s for s in symptoms if s in inputs.signs]
    probability += len(matched) / len(symptoms) * 30
    return probability


def severity(probability: float) -> str:
    if probability > 70:
        return "high"
    if probability > 40:
        return "medium"
    return "low"


def assess_disease_risk(inputs: RiskInputs) -> RiskAssessment:
    if inputs.species not in RISK_SPECIES:
        raise ValueError(f"Unknown species {inputs.species!r}. Expected one of: {', '.join(RISK_SPECIES)}")
    factors = risk_factors(inputs)
    overall = sum(f.weight * f.value for f in factors)

    risks: List[DiseaseRisk] = []
    for disease in table("risk_diseases"):
        probability = disease_probability(inputs, disease)
        risks.append(
            DiseaseRisk(
                disease=disease["name"],
                probability=probability,
                severity=severity(probability),
                matched_symptoms=[s for s in disease["symptoms"] if s in inputs.signs],
                risk_factors=list(disease["risk_factors"]),
                preventive_measures=list(disease["prevention"]),
                treatments=list(disease["treatments"]),
                treatment_cost=disease.get("treatment_cost"),
            )
        )
    risks.sort(key=lambda r: r.probability, reverse=True)

    pattern = table("seasonal_disease_patterns").get(inputs.season)
    log.debug("Disease risk: species=%s overall=%.1f top=%s", inputs.species, overall, risks[0].disease)
    return RiskAssessment(
        species=inputs.species,
        overall_risk=overall,
        risk_factors=factors,
        disease_risks=risks,
        seasonal_pattern=dict(pattern) if pattern else None,
    )
