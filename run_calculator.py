#!/usr/bin/env python3
from __future__ import annotations

"""
Batch runner for the AquaTools calculators.

Responsibilities:
- Configure logging to both console and `logs/run.log`
- Load calculator inputs from a YAML/JSON file (`--input`) or a named preset
  under `presets/` (`--preset`)
- Run the calculator selected by `--tool` (or by the `tool:` key in the file)
- Write the result as JSON to `output/<tool>_<name>.json`
- Optionally write PNG charts to `output/plots/` (`--visualize`)

Input files hold either the form fields directly, or a mapping with `tool`
and `inputs` keys:

    tool: pond-liming
    inputs:
      pondArea: 1000
      ...

Exit code 0 on success, 1 when the inputs fail validation.
"""

import argparse
import dataclasses
import json
import logging
import random
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from aquatools.catalog import load_catalog
from aquatools.growth import parse_date
from aquatools.io_paths import LOGS_DIR, OUTPUT_DIR, PRESETS_DIR
from aquatools.registry import available, calculator
from aquatools.utils_logging import configure_logging


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Exactly one of `--input` or `--preset` may be provided; `--list` needs
    neither.
    """
    p = argparse.ArgumentParser(description="AquaTools – run a calculator against an input file")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--input", type=str, help="Path to a YAML/JSON file with the form inputs")
    group.add_argument("--preset", type=str, help="Preset name (resolves to a file under 'presets/')")
    p.add_argument("--tool", type=str, help="Tool slug, e.g. 'pond-liming' (defaults to the file's 'tool' key)")
    p.add_argument("--seed", type=int, help="Seed for the random components (predictors, market prices)")
    p.add_argument("--today", type=str, help="Override today's date (YYYY-MM-DD)")
    p.add_argument("--output-name", type=str, help="Suffix for the output file (defaults to the input file stem)")
    p.add_argument("--visualize", action="store_true", help="Write PNG charts under output/plots/")
    p.add_argument("--list", action="store_true", help="List the available tools and exit")
    p.add_argument("--debug", action="store_true")
    return p.parse_args(argv)


def _resolve_input_path(input_path: Optional[str], preset: Optional[str]) -> Path:
    if input_path:
        return Path(input_path)
    if preset:
        for ext in (".yaml", ".yml", ".json"):
            candidate = PRESETS_DIR / f"{preset}{ext}"
            if candidate.exists():
                return candidate
        names = sorted(p.stem for p in PRESETS_DIR.glob("*.y*ml"))
        raise ValueError(f"Unknown preset '{preset}'. Available: {', '.join(names) or 'none'}")
    raise ValueError("Provide --input <file> or --preset <name> (or --list)")


def load_inputs(path: Path) -> Tuple[Optional[str], Dict[str, Any]]:
    """Return (tool slug or None, form inputs) from a YAML/JSON file."""
    if not path.exists():
        raise ValueError(f"Input file not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Input file must contain a mapping: {path}")
    if "inputs" in data:
        inputs = data["inputs"]
        if not isinstance(inputs, dict):
            raise ValueError(f"'inputs' must be a mapping in {path}")
        return data.get("tool"), inputs
    return data.pop("tool", None), data


def to_jsonable(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(dataclasses.asdict(obj))
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, date):
        return obj.isoformat()
    return obj


def write_result(slug: str, name: str, result: Any) -> Path:
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    out_path = OUTPUT_DIR / f"{slug}_{name}.json"
    out_path.write_text(json.dumps(to_jsonable(result), indent=2), encoding="utf-8")
    return out_path


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(LOGS_DIR, debug=args.debug)
    log = logging.getLogger("runner")

    if args.list:
        catalog = load_catalog()
        for slug in available():
            print(f"{slug:26s} {catalog.tool(slug).description}")
        return 0

    try:
        path = _resolve_input_path(args.input, args.preset)
        file_tool, form = load_inputs(path)
        slug = args.tool or file_tool
        if not slug:
            raise ValueError(f"No tool given: pass --tool or add a 'tool' key to {path}")
        calc = calculator(slug)
        today = parse_date(args.today, "--today") if args.today else None
        rng = random.Random(args.seed) if args.seed is not None else None
        log.info("Running %s with inputs from %s", slug, path)
        result = calc.run(form, rng=rng, today=today)
    except ValueError as exc:
        log.error("%s", exc)
        return 1

    name = args.output_name or path.stem
    out_path = write_result(slug, name, result)
    log.info("Wrote result to %s", out_path)

    if args.visualize:
        from viz.plots import generate_plots

        plots = generate_plots(slug, result, name=name)
        if plots:
            log.info("Wrote %d plot(s) under output/plots/", len(plots))
        else:
            log.info("No charts defined for %s", slug)

    print(f"OK: {slug} -> {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
