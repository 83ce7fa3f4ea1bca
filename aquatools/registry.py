from __future__ import annotations

"""Slug -> calculator mapping shared by the CLI runner and the UI.

Every entry pairs an input class (with a ``from_form`` constructor) and the
pure function that computes its result. Functions that draw random numbers
or read the calendar receive ``rng`` / ``today`` from the caller.
"""

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import business, environment, feeding, growth, health, pond, production, reports, species, water_quality

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Calculator:
    slug: str
    inputs: type
    compute: Callable[..., Any]
    uses_rng: bool = False
    uses_today: bool = False

    def parse(self, form: Mapping[str, Any]) -> Any:
        return self.inputs.from_form(form)

    def run(
        self,
        form: Mapping[str, Any],
        rng: Optional[random.Random] = None,
        today: Optional[date] = None,
    ) -> Any:
        inputs = self.parse(form)
        kwargs: Dict[str, Any] = {}
        if self.uses_rng:
            kwargs["rng"] = rng
        if self.uses_today:
            kwargs["today"] = today
        log.debug("Running %s", self.slug)
        return self.compute(inputs, **kwargs)


CALCULATORS: Dict[str, Calculator] = {
    c.slug: c
    for c in (
        Calculator("water-quality", water_quality.WaterQualityInputs, water_quality.check_water_quality),
        Calculator("water-quality-monitor", water_quality.MonitorInputs, water_quality.monitor_water_quality),
        Calculator(
            "water-quality-predictor",
            water_quality.PredictorInputs,
            water_quality.predict_water_quality,
            uses_rng=True,
        ),
        Calculator("pond-evaporation", pond.EvaporationInputs, pond.calculate_evaporation),
        Calculator("pond-sediment", pond.SedimentInputs, pond.analyze_sediment),
        Calculator("pond-liming", pond.LimingInputs, pond.calculate_liming),
        Calculator("pond-lining", pond.LiningInputs, pond.calculate_lining),
        Calculator("growth-benchmark", growth.BenchmarkInputs, growth.benchmark_growth, uses_today=True),
        Calculator("growth-predictor", growth.PredictorInputs, growth.predict_growth),
        Calculator("fish-stress", production.StressInputs, production.analyze_stress),
        Calculator("fish-calculator", production.ProductionInputs, production.calculate_production),
        Calculator("fish-stocking", production.StockingInputs, production.calculate_stocking),
        Calculator("fish-yield", production.YieldInputs, production.estimate_yield),
        Calculator("species-suitability", species.SuitabilityInputs, species.recommend_species),
        Calculator("fcr-calculator", feeding.FcrInputs, feeding.calculate_fcr),
        Calculator("fcr-optimizer", feeding.OptimizerInputs, feeding.optimize_fcr),
        Calculator("feeding-calculator", feeding.FeedingInputs, feeding.calculate_feeding),
        Calculator("disease-prevention", health.PreventionInputs, health.analyze_prevention),
        Calculator("disease-risk", health.RiskInputs, health.assess_disease_risk),
        Calculator("waste-fertilizer", environment.FertilizerInputs, environment.calculate_fertilizer),
        Calculator("environmental-monitor", environment.EnvironmentalInputs, environment.analyze_environment),
        Calculator(
            "environment-monitor",
            environment.MonitorInputs,
            environment.monitor_environment,
            uses_rng=True,
        ),
        Calculator("energy-efficiency", environment.EnergyInputs, environment.analyze_energy),
        Calculator("weather-impact", environment.WeatherInputs, environment.analyze_weather_impact),
        Calculator("aeration-calculator", environment.AerationInputs, environment.calculate_aeration),
        Calculator("market-analysis", business.MarketInputs, business.analyze_market, uses_rng=True),
        Calculator("profitability", business.ProfitabilityInputs, business.calculate_profitability),
        Calculator(
            "harvest-timing",
            business.HarvestInputs,
            business.advise_harvest,
            uses_rng=True,
            uses_today=True,
        ),
        Calculator("reports", reports.ReportConfig, reports.build_preview),
    )
}


def calculator(slug: str) -> Calculator:
    if slug not in CALCULATORS:
        raise ValueError(f"No calculator for tool '{slug}'. Available: {', '.join(sorted(CALCULATORS))}")
    return CALCULATORS[slug]


def available() -> List[str]:
    return sorted(CALCULATORS)


def run(
    slug: str,
    form: Mapping[str, Any],
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Any:
    """Parse `form` for tool `slug` and return its result object."""
    return calculator(slug).run(form, rng=rng, today=today)
