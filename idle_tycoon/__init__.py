"""Idle Tycoon: an incremental producer/prestige game."""

__version__ = "1.0.0"

from .campaign import Campaign, LevelDef
from .economy import ItemCatalog, ItemDef, current_price, upgrade_multiplier, upgrade_price
from .errors import IdleTycoonError, ItemNotFoundError, LevelNotFoundError, NotFoundError
from .session import Session
from .state import GameState, ItemState

__all__ = [
    "Campaign",
    "GameState",
    "IdleTycoonError",
    "ItemCatalog",
    "ItemDef",
    "ItemNotFoundError",
    "ItemState",
    "LevelDef",
    "LevelNotFoundError",
    "NotFoundError",
    "Session",
    "current_price",
    "upgrade_multiplier",
    "upgrade_price",
]
