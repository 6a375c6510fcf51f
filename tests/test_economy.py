"""Tests for item definitions, catalog lookup, pricing and upgrades."""

import pytest

from idle_tycoon.economy import (
    ItemCatalog,
    ItemDef,
    current_price,
    upgrade_multiplier,
    upgrade_price,
)
from idle_tycoon.errors import ItemNotFoundError, NotFoundError


def test_price_of_first_and_second_unit(cursor):
    assert current_price(cursor, 0) == pytest.approx(10.00)
    assert current_price(cursor, 1) == pytest.approx(11.50)


def test_price_strictly_increases(cursor):
    prices = [current_price(cursor, owned) for owned in range(200)]
    assert all(later > earlier for earlier, later in zip(prices, prices[1:]))


def test_upgrade_multiplier_starts_at_one():
    assert upgrade_multiplier(0) == 1


def test_upgrade_multiplier_grows_by_half_per_level():
    for level in range(30):
        assert upgrade_multiplier(level + 1) == pytest.approx(upgrade_multiplier(level) * 1.5)


def test_first_upgrade_costs_five_base_costs(cursor):
    assert upgrade_price(cursor, 0) == pytest.approx(50)


def test_upgrade_price_strictly_increases(cursor):
    prices = [upgrade_price(cursor, level) for level in range(50)]
    assert all(later > earlier for earlier, later in zip(prices, prices[1:]))
    assert upgrade_price(cursor, 1) == pytest.approx(85)


class TestItemDef:
    def test_rejects_non_positive_cost(self):
        with pytest.raises(ValueError):
            ItemDef("x", "X", 0, 1.15, 1)

    def test_rejects_multiplier_not_above_one(self):
        with pytest.raises(ValueError):
            ItemDef("x", "X", 10, 1.0, 1)

    def test_rejects_negative_rate(self):
        with pytest.raises(ValueError):
            ItemDef("x", "X", 10, 1.15, -0.1)

    def test_is_immutable(self, cursor):
        with pytest.raises(AttributeError):
            cursor.base_cost = 1


class TestItemCatalog:
    def test_lookup_by_id(self, catalog, cursor):
        assert catalog.by_id("cursor") is cursor
        assert "worker" in catalog
        assert catalog.first is cursor
        assert [item.id for item in catalog] == ["cursor", "worker"]
        assert len(catalog) == 2

    def test_unknown_id_raises_not_found(self, catalog):
        with pytest.raises(ItemNotFoundError) as excinfo:
            catalog.by_id("missing")
        assert excinfo.value.item_id == "missing"
        assert isinstance(excinfo.value, NotFoundError)
        assert isinstance(excinfo.value, LookupError)

    def test_get_returns_none_for_unknown(self, catalog):
        assert catalog.get("missing") is None

    def test_duplicate_ids_rejected(self, cursor):
        with pytest.raises(ValueError):
            ItemCatalog([cursor, cursor])

    def test_empty_catalog(self):
        empty = ItemCatalog()
        assert len(empty) == 0
        assert empty.first is None

    def test_default_catalog(self):
        default = ItemCatalog.default()
        assert [item.id for item in default] == ["cursor", "worker", "farm", "factory", "lab"]
        assert default.by_id("lab").base_production_per_second == 260
