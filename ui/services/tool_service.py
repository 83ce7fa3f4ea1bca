from __future__ import annotations

"""Catalog lookups and calculator execution for the pages.

Pages never import calculator modules directly for running a tool: they
hand the collected form to `ToolService.run`, which goes through the same
registry the CLI runner uses.
"""

import logging
import random
from datetime import date
from typing import Any, List, Mapping, Optional, Tuple

from aquatools.catalog import Catalog, Category, Tool, load_catalog
from aquatools.registry import run
from aquatools.reports import MIME_TYPES, ReportPreview, export_filename, export_report

log = logging.getLogger("ui")


class ToolService:
    def __init__(self, catalog: Optional[Catalog] = None) -> None:
        self.catalog = catalog or load_catalog()

    def categories(self) -> List[Category]:
        return self.catalog.categories

    def tool(self, slug: str) -> Tool:
        return self.catalog.tool(slug)

    def resolve(self, slug: Optional[str]) -> Optional[Tool]:
        """Tool for a `?tool=` value, or None for blank/unknown slugs."""
        if not slug:
            return None
        try:
            return self.catalog.tool(slug)
        except ValueError:
            log.warning("Unknown tool in query string: %r", slug)
            return None

    def run(
        self,
        slug: str,
        form: Mapping[str, Any],
        rng: Optional[random.Random] = None,
        today: Optional[date] = None,
    ) -> Any:
        """Run a calculator; ValueError from validation propagates to the page."""
        log.info("UI: running %s", slug)
        return run(slug, form, rng=rng, today=today)

    def export(self, preview: ReportPreview, fmt: str) -> Tuple[str, str, str]:
        """Return (content, file name, MIME type) for a report download."""
        return export_report(preview, fmt), export_filename(preview, fmt), MIME_TYPES[fmt]
