from __future__ import annotations

"""Farm report previews and their downloadable exports."""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd
import yaml

from .forms import is_blank
from .growth import parse_date
from .reference_data import lookup, table

log = logging.getLogger(__name__)

REPORT_FORMATS = ("CSV", "JSON", "YAML")
MIME_TYPES = {"CSV": "text/csv", "JSON": "application/json", "YAML": "application/x-yaml"}


def report_types() -> List[str]:
    return list(table("report_sections").keys())


def sections_for(report_type: str) -> List[str]:
    return list(lookup("report_sections", report_type, "report type"))


@dataclass
class ReportConfig:
    type: str
    sections: List[str]
    title: str = ""
    start: Optional[date] = None
    end: Optional[date] = None
    format: str = "CSV"

    def __post_init__(self) -> None:
        if is_blank(self.type):
            raise ValueError("Reports: choose a report type")
        allowed = sections_for(self.type)
        if not self.sections:
            raise ValueError("Reports: select at least one section")
        unknown = [s for s in self.sections if s not in allowed]
        if unknown:
            raise ValueError(f"Reports: sections not available for {self.type}: {', '.join(unknown)}")
        if self.format not in REPORT_FORMATS:
            raise ValueError(f"Reports: unknown format {self.format!r}. Expected one of: {', '.join(REPORT_FORMATS)}")
        if self.start and self.end and self.start > self.end:
            raise ValueError("Reports: start date is after end date")
        if not self.title:
            self.title = f"{self.type} Report"

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ReportConfig":
        start, end = form.get("start"), form.get("end")
        return cls(
            type=str(form.get("type") or ""),
            sections=list(form.get("sections") or []),
            title=str(form.get("title") or ""),
            start=None if is_blank(start) else parse_date(start, "start"),
            end=None if is_blank(end) else parse_date(end, "end"),
            format=str(form.get("format") or "CSV"),
        )


@dataclass
class ReportSection:
    name: str
    data: Dict[str, Any]


@dataclass
class ReportPreview:
    title: str
    start: Optional[date]
    end: Optional[date]
    sections: List[ReportSection] = field(default_factory=list)


def section_data(section: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Sample figures for one report section."""
    metrics = table("report_sample_metrics")
    if section == "Growth Rate Analysis":
        return {"dailyGrowth": metrics["production"]["growth_rate"], "trendData": [2.3, 2.4, 2.5, 2.6, 2.5]}
    if section == "Feed Conversion Ratio":
        return {"currentFCR": metrics["production"]["fcr"], "targetFCR": 1.6, "trend": "Improving"}
    if section == "Revenue Analysis":
        return {
            "totalRevenue": metrics["financial"]["revenue"],
            "growth": 15,
            "sources": ["Market Sales", "Direct Sales"],
        }
    return {"status": "Data available", "lastUpdated": (now or datetime.now()).isoformat(timespec="seconds")}


def build_preview(config: ReportConfig, now: Optional[datetime] = None) -> ReportPreview:
    preview = ReportPreview(
        title=config.title,
        start=config.start,
        end=config.end,
        sections=[ReportSection(name=s, data=section_data(s, now)) for s in config.sections],
    )
    log.debug("Report preview %r with %d sections", preview.title, len(preview.sections))
    return preview


def preview_frame(preview: ReportPreview) -> pd.DataFrame:
    """One row per (section, metric) pair."""
    rows = []
    for section in preview.sections:
        for key, value in section.data.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            rows.append({"section": section.name, "metric": key, "value": value})
    return pd.DataFrame(rows, columns=["section", "metric", "value"])


def _plain(preview: ReportPreview) -> Dict[str, Any]:
    out = asdict(preview)
    out["start"] = preview.start.isoformat() if preview.start else None
    out["end"] = preview.end.isoformat() if preview.end else None
    return out


def export_report(preview: ReportPreview, fmt: str) -> str:
    """Render a preview as CSV, JSON or YAML text."""
    if fmt == "CSV":
        text = preview_frame(preview).to_csv(index=False)
    elif fmt == "JSON":
        text = json.dumps(_plain(preview), indent=2)
    elif fmt == "YAML":
        text = yaml.safe_dump(_plain(preview), sort_keys=False)
    else:
        raise ValueError(f"Unknown report format {fmt!r}. Expected one of: {', '.join(REPORT_FORMATS)}")
    log.info("Exported report %r as %s", preview.title, fmt)
    return text


def export_filename(preview: ReportPreview, fmt: str) -> str:
    stem = preview.title.lower().replace(" ", "_")
    return f"{stem}.{fmt.lower()}"
