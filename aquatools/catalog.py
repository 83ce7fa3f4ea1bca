from __future__ import annotations

"""Tool catalog: categories, tool slugs, guide text and information pages.

Loaded from ``data/catalog.yaml``. Slugs are unique across categories and
double as the ``tool`` query parameter in the UI and ``--tool`` in the CLI.
"""

import difflib
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from .io_paths import CATALOG_FILE

log = logging.getLogger(__name__)

INFO_PAGES = ("about", "team", "contact", "privacy-policy", "disclaimer")


@dataclass(frozen=True)
class Tool:
    slug: str
    name: str
    description: str
    category: str
    guide: str = ""
    tips: tuple = ()


@dataclass
class Category:
    name: str
    icon: str
    tools: List[Tool] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.icon} {self.name}".strip()


@dataclass
class Catalog:
    title: str
    tagline: str
    categories: List[Category]
    pages: Dict[str, Dict[str, Any]]

    def tools(self) -> List[Tool]:
        return [t for c in self.categories for t in c.tools]

    def slugs(self) -> List[str]:
        return [t.slug for t in self.tools()]

    def tool(self, slug: str) -> Tool:
        for t in self.tools():
            if t.slug == slug:
                return t
        hints = difflib.get_close_matches(slug, self.slugs(), n=3)
        hint = f" Did you mean: {', '.join(hints)}?" if hints else ""
        raise ValueError(f"Unknown tool '{slug}'.{hint}")

    def page(self, name: str) -> Dict[str, Any]:
        if name not in self.pages:
            raise ValueError(f"Unknown page '{name}'. Expected one of: {', '.join(self.pages)}")
        return self.pages[name]


def _parse(data: Mapping[str, Any]) -> Catalog:
    categories: List[Category] = []
    seen: Dict[str, str] = {}
    for raw in data.get("categories") or []:
        cat = Category(name=raw["name"], icon=raw.get("icon", ""))
        for t in raw.get("tools") or []:
            slug = t["slug"]
            if slug in seen:
                raise ValueError(f"Duplicate tool slug '{slug}' in {cat.name} (already in {seen[slug]})")
            seen[slug] = cat.name
            cat.tools.append(
                Tool(
                    slug=slug,
                    name=t["name"],
                    description=t.get("description", ""),
                    category=cat.name,
                    guide=(t.get("guide") or "").strip(),
                    tips=tuple(t.get("tips") or ()),
                )
            )
        categories.append(cat)
    if not categories:
        raise ValueError("Catalog has no categories")
    pages = data.get("pages") or {}
    missing = [p for p in INFO_PAGES if p not in pages]
    if missing:
        raise ValueError(f"Catalog missing information pages: {missing}")
    site = data.get("site") or {}
    return Catalog(
        title=site.get("title", "AquaTools"),
        tagline=site.get("tagline", ""),
        categories=categories,
        pages=dict(pages),
    )


@lru_cache(maxsize=2)
def load_catalog(path: Path = CATALOG_FILE) -> Catalog:
    log.info("Loading tool catalog: %s", path)
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except FileNotFoundError as exc:
        raise ValueError(f"Catalog not found at {path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    catalog = _parse(data)
    log.debug("Catalog loaded: %d categories, %d tools", len(catalog.categories), len(catalog.tools()))
    return catalog
