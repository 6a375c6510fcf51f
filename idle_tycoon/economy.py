from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .errors import ItemNotFoundError

UPGRADE_MULTIPLIER_STEP = 1.5
UPGRADE_PRICE_FACTOR = 5
UPGRADE_PRICE_GROWTH = 1.7


@dataclass(frozen=True)
class ItemDef:
    id: str
    name: str
    base_cost: float
    cost_multiplier: float
    base_production_per_second: float

    def __post_init__(self) -> None:
        if self.base_cost <= 0:
            raise ValueError(f"{self.id}: base cost must be positive")
        if self.cost_multiplier <= 1:
            raise ValueError(f"{self.id}: cost multiplier must be greater than 1")
        if self.base_production_per_second < 0:
            raise ValueError(f"{self.id}: production rate cannot be negative")


class ItemCatalog:
    """Ordered, read-only table of producers keyed by id."""

    def __init__(self, items: Iterable[ItemDef] = ()) -> None:
        self._items: Tuple[ItemDef, ...] = tuple(items)
        self._by_id: Dict[str, ItemDef] = {}
        for item in self._items:
            if item.id in self._by_id:
                raise ValueError(f"Duplicate item id in catalog: {item.id!r}")
            self._by_id[item.id] = item

    @classmethod
    def default(cls) -> "ItemCatalog":
        return cls([
            ItemDef("cursor", "Cursor", 10, 1.15, 0.1),
            ItemDef("worker", "Worker", 100, 1.15, 1),
            ItemDef("farm", "Farm", 1_000, 1.15, 8),
            ItemDef("factory", "Factory", 10_000, 1.15, 47),
            ItemDef("lab", "Lab", 100_000, 1.15, 260),
        ])

    @property
    def items(self) -> Tuple[ItemDef, ...]:
        return self._items

    @property
    def first(self) -> Optional[ItemDef]:
        return self._items[0] if self._items else None

    def by_id(self, item_id: str) -> ItemDef:
        try:
            return self._by_id[item_id]
        except KeyError:
            raise ItemNotFoundError(item_id) from None

    def get(self, item_id: str) -> Optional[ItemDef]:
        return self._by_id.get(item_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    def __iter__(self) -> Iterator[ItemDef]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ItemCatalog({[item.id for item in self._items]!r})"


def current_price(item: ItemDef, owned: int) -> float:
    """Price of the next unit when ``owned`` units are already held."""
    return item.base_cost * item.cost_multiplier ** owned


def upgrade_multiplier(level: int) -> float:
    return UPGRADE_MULTIPLIER_STEP ** level


def upgrade_price(item: ItemDef, level: int) -> float:
    """Price of taking ``item`` from ``level`` to ``level + 1``."""
    return item.base_cost * UPGRADE_PRICE_FACTOR * UPGRADE_PRICE_GROWTH ** level
