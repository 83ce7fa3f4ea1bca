from __future__ import annotations

"""Centralized path utilities for the project.

These provide absolute `Path` objects to key directories so the UI, the
CLI runner and the tests resolve reference data, presets and outputs the
same way regardless of the working directory.
"""

from pathlib import Path


# The `aquatools` package directory is one level below the project root
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent

# Packaged reference tables (installed alongside the code)
DATA_DIR = PACKAGE_DIR / "data"
REFERENCE_DATA_FILE = DATA_DIR / "reference_data.yaml"
CATALOG_FILE = DATA_DIR / "catalog.yaml"

# Working directories used by the CLI runner and the UI
PRESETS_DIR = PROJECT_ROOT / "presets"
OUTPUT_DIR = PROJECT_ROOT / "output"
PLOTS_DIR = OUTPUT_DIR / "plots"
LOGS_DIR = PROJECT_ROOT / "logs"
RUN_LOG_FILE = LOGS_DIR / "run.log"
