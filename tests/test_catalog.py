import unittest

import pytest

from aquatools.catalog import INFO_PAGES, _parse, load_catalog
from aquatools.registry import CALCULATORS

UI_ONLY = {"growth-tracker", "feed-management", "inventory", "calendar"}


class TestCatalog(unittest.TestCase):
    def setUp(self):
        self.catalog = load_catalog()

    def test_categories_and_slugs(self):
        self.assertEqual(len(self.catalog.categories), 6)
        slugs = self.catalog.slugs()
        self.assertEqual(len(slugs), len(set(slugs)))
        self.assertEqual(len(slugs), 33)

    def test_every_calculator_is_listed(self):
        self.assertEqual(set(self.catalog.slugs()) - UI_ONLY, set(CALCULATORS))

    def test_tool_lookup_suggests(self):
        self.assertEqual(self.catalog.tool("pond-liming").name, "Pond Liming")
        with self.assertRaisesRegex(ValueError, "pond-liming"):
            self.catalog.tool("pond-limming")

    def test_pages(self):
        for name in INFO_PAGES:
            self.assertTrue(self.catalog.page(name).get("title"))
        with self.assertRaises(ValueError):
            self.catalog.page("careers")

    def test_guides_present(self):
        tool = self.catalog.tool("water-quality")
        self.assertTrue(tool.guide)
        self.assertTrue(tool.tips)


def _minimal(**extra):
    data = {
        "categories": [{"name": "Water", "icon": "💧", "tools": [{"slug": "a", "name": "A"}]}],
        "pages": {name: {"title": name} for name in INFO_PAGES},
    }
    data.update(extra)
    return data


def test_parse_minimal_catalog():
    catalog = _parse(_minimal())
    assert catalog.title == "AquaTools"
    assert catalog.categories[0].label == "💧 Water"
    assert catalog.tool("a").category == "Water"


def test_duplicate_slugs_rejected():
    data = _minimal()
    data["categories"].append({"name": "Pond", "tools": [{"slug": "a", "name": "Again"}]})
    with pytest.raises(ValueError, match="Duplicate tool slug 'a'"):
        _parse(data)


def test_missing_pages_rejected():
    with pytest.raises(ValueError, match="disclaimer"):
        _parse(_minimal(pages={"about": {}}))
