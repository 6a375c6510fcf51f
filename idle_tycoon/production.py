import logging

from .economy import ItemCatalog, ItemDef, upgrade_multiplier
from .prestige import prod_multiplier
from .state import GameState, ItemState

logger = logging.getLogger(__name__)


def unit_production(item: ItemDef, upgrade_level: int, prestige_credits: int) -> float:
    return (
        item.base_production_per_second
        * upgrade_multiplier(upgrade_level)
        * prod_multiplier(prestige_credits)
    )


def item_production(item: ItemDef, item_state: ItemState, prestige_credits: int) -> float:
    return unit_production(item, item_state.upgrade_level, prestige_credits) * item_state.quantity


def total_production_per_second(state: GameState, catalog: ItemCatalog) -> float:
    total = 0.0
    for st in state.items:
        if st.quantity <= 0:
            continue
        item = catalog.get(st.item_id)
        if item is None:
            # stale entry left over from another level's catalog
            logger.debug("Skipping %r, not in the active catalog", st.item_id)
            continue
        total += item.base_production_per_second * st.quantity * upgrade_multiplier(st.upgrade_level)
    return total * prod_multiplier(state.prestige_credits)


def tick(state: GameState, catalog: ItemCatalog, dt: float) -> float:
    """Advance the economy by ``dt`` seconds and return what was earned."""
    if dt <= 0:
        return 0.0
    earned = total_production_per_second(state, catalog) * dt
    state.earn(earned)
    return earned
