import pytest

from idle_tycoon.campaign import Campaign, LevelDef
from idle_tycoon.economy import ItemCatalog, ItemDef


@pytest.fixture
def cursor() -> ItemDef:
    return ItemDef("cursor", "Cursor", 10, 1.15, 0.1)


@pytest.fixture
def catalog(cursor: ItemDef) -> ItemCatalog:
    return ItemCatalog([cursor, ItemDef("worker", "Worker", 100, 1.15, 1)])


@pytest.fixture
def two_level_campaign() -> Campaign:
    return Campaign([
        LevelDef("a", "First", 1_000, (
            ItemDef("a1", "Alpha One", 10, 1.15, 0.1),
            ItemDef("a2", "Alpha Two", 100, 1.15, 1),
        )),
        LevelDef("b", "Second", 50_000, (
            ItemDef("b1", "Beta One", 200, 1.15, 1.8),
            ItemDef("b2", "Beta Two", 2_000, 1.15, 14),
        )),
    ])
