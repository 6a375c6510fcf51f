import logging
from pathlib import Path
from typing import Dict, Optional

from . import prestige
from .campaign import Campaign, LevelDef
from .economy import ItemCatalog, current_price, upgrade_price
from .numfmt import format_number
from .persistence import Settings, save_game
from .production import tick as production_tick
from .production import total_production_per_second
from .state import GameState

logger = logging.getLogger(__name__)

MAX_TICK_SECONDS = 5.0
CLICK_INCOME = 1.0


class Session:
    """Single owner of a GameState while a game is running.

    Every mutation (ticks, purchases, upgrades, level changes, prestige) goes
    through here so the front-end never touches the state directly.
    """

    def __init__(
        self,
        state: GameState,
        campaign: Campaign,
        settings: Optional[Settings] = None,
        save_path: Optional[Path] = None,
    ) -> None:
        self.state = state
        self.campaign = campaign
        self.settings = settings or Settings()
        self.save_path = save_path
        self.message = f"Welcome to {self.level.name}."
        self.autosave_timer = 0.0
        self.catalog: ItemCatalog = ItemCatalog()
        self._reload_catalog()

    @classmethod
    def new_game(
        cls,
        campaign: Campaign,
        settings: Optional[Settings] = None,
        save_path: Optional[Path] = None,
    ) -> "Session":
        return cls(campaign.new_state(), campaign, settings, save_path)

    def _reload_catalog(self) -> None:
        self.catalog = self.campaign.current_catalog(self.state)

    @property
    def level(self) -> LevelDef:
        return self.campaign.current(self.state)

    @property
    def next_level(self) -> Optional[LevelDef]:
        return self.campaign.next(self.state)

    @property
    def production_per_second(self) -> float:
        return total_production_per_second(self.state, self.catalog)

    @property
    def goal_reached(self) -> bool:
        return self.campaign.goal_reached(self.state)

    @property
    def goal_progress(self) -> float:
        return self.campaign.goal_progress(self.state)

    def tick(self, dt: float) -> float:
        dt = min(max(dt, 0.0), MAX_TICK_SECONDS)
        earned = production_tick(self.state, self.catalog, dt)
        if dt > 0 and self.settings.autosave_seconds > 0:
            self.autosave_timer += dt
            if self.autosave_timer >= self.settings.autosave_seconds:
                self.autosave_timer = 0.0
                if self.save():
                    self.message = "Autosaved."
        return earned

    def collect(self) -> None:
        self.state.earn(CLICK_INCOME)

    def price_of(self, item_id: str) -> float:
        item = self.catalog.by_id(item_id)
        return current_price(item, self.state.quantity_of(item_id))

    def upgrade_price_of(self, item_id: str) -> float:
        item = self.catalog.by_id(item_id)
        return upgrade_price(item, self.state.upgrade_level_of(item_id))

    def buy(self, item_id: str) -> bool:
        item = self.catalog.by_id(item_id)
        price = current_price(item, self.state.quantity_of(item_id))
        if not self.state.buy_item(item):
            self.message = "Not enough money."
            return False
        self.message = f"Bought 1 {item.name} for {format_number(price)}."
        return True

    def upgrade(self, item_id: str) -> bool:
        item = self.catalog.by_id(item_id)
        if self.state.quantity_of(item_id) <= 0:
            self.message = f"You don't own any {item.name} yet."
            return False
        price = upgrade_price(item, self.state.upgrade_level_of(item_id))
        if not self.state.buy_upgrade(item):
            self.message = "Not enough money."
            return False
        level = self.state.upgrade_level_of(item_id)
        self.message = f"Upgraded {item.name} to Lv{level} for {format_number(price)}."
        return True

    def advance_level(self) -> bool:
        if not self.goal_reached:
            self.message = "Level goal not yet reached."
            return False
        nxt = self.campaign.progress_to_next_level(self.state)
        if nxt is None:
            self.message = "This is the last level in the campaign."
            return False
        self._reload_catalog()
        self.autosave_timer = 0.0
        self.message = f"Advanced to {nxt.name}!"
        self.save()
        return True

    def prestige(self) -> int:
        earned = prestige.apply_reset(self.state, self.campaign)
        if earned <= 0:
            self.message = "Not enough lifetime earnings to prestige."
            return 0
        self._reload_catalog()
        self.autosave_timer = 0.0
        self.message = "Prestiged! Production boosted."
        self.save()
        return earned

    def prestige_summary(self) -> Dict[str, float]:
        return prestige.summary(self.state)

    def save(self) -> bool:
        if self.save_path is None:
            return False
        return save_game(self.state, self.save_path)

    def manual_save(self) -> None:
        self.message = "Game saved." if self.save() else "Could not save the game."
