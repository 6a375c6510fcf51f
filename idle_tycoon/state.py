import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .economy import ItemDef, current_price, upgrade_price

logger = logging.getLogger(__name__)

FIRST_LEVEL_ID = "lvl1"


@dataclass
class ItemState:
    item_id: str
    quantity: int = 0
    upgrade_level: int = 0


@dataclass
class GameState:
    """Everything that a save slot holds.

    ``lifetime_earnings`` only ever grows; resets touch ``money`` and
    ``items``. ``prestige_credits_earned_historical`` is the high-water mark
    that keeps a lifetime-earnings band from paying out twice.
    """

    money: float = 0.0
    lifetime_earnings: float = 0.0
    prestiges: int = 0
    prestige_credits: int = 0
    prestige_credits_earned_historical: int = 0
    current_level_id: str = FIRST_LEVEL_ID
    unlocked_levels: Set[str] = field(default_factory=lambda: {FIRST_LEVEL_ID})
    items: List[ItemState] = field(default_factory=list)

    @classmethod
    def new(cls, first_level_id: str = FIRST_LEVEL_ID) -> "GameState":
        return cls(current_level_id=first_level_id, unlocked_levels={first_level_id})

    def find_item_state(self, item_id: str) -> Optional[ItemState]:
        return next((st for st in self.items if st.item_id == item_id), None)

    def get_item_state(self, item_id: str) -> ItemState:
        found = self.find_item_state(item_id)
        if found is None:
            found = ItemState(item_id)
            self.items.append(found)
        return found

    def quantity_of(self, item_id: str) -> int:
        found = self.find_item_state(item_id)
        return found.quantity if found else 0

    def upgrade_level_of(self, item_id: str) -> int:
        found = self.find_item_state(item_id)
        return found.upgrade_level if found else 0

    def owned_items(self) -> List[ItemState]:
        return [st for st in self.items if st.quantity > 0]

    def earn(self, amount: float) -> None:
        if amount < 0:
            raise ValueError("Earnings cannot be negative")
        self.money += amount
        self.lifetime_earnings += amount

    def clear_run(self) -> None:
        self.money = 0.0
        self.items.clear()

    def seed_item(self, item_id: str) -> None:
        self.get_item_state(item_id).quantity = 1

    def buy_item(self, item: ItemDef) -> bool:
        st = self.get_item_state(item.id)
        price = current_price(item, st.quantity)
        if price > self.money:
            return False
        self.money -= price
        st.quantity += 1
        logger.debug("Bought %s #%d for %.2f", item.id, st.quantity, price)
        return True

    def buy_upgrade(self, item: ItemDef) -> bool:
        st = self.find_item_state(item.id)
        if st is None or st.quantity <= 0:
            return False
        price = upgrade_price(item, st.upgrade_level)
        if price > self.money:
            return False
        self.money -= price
        st.upgrade_level += 1
        logger.debug("Upgraded %s to level %d for %.2f", item.id, st.upgrade_level, price)
        return True
