import json
import logging
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

from .state import GameState, ItemState

if TYPE_CHECKING:
    from .campaign import Campaign

logger = logging.getLogger(__name__)

SAVE_DIR_NAME = "saves"
SAVE_FILE_NAME = "slot1.json"
SETTINGS_FILE_NAME = "settings.json"

AUTOSAVE_CHOICES = (0, 10, 30, 60, 120, 300)
DEFAULT_AUTOSAVE_SECONDS = 30


def save_path_for(data_dir: Path) -> Path:
    return data_dir / SAVE_DIR_NAME / SAVE_FILE_NAME


def settings_path_for(data_dir: Path) -> Path:
    return data_dir / SAVE_DIR_NAME / SETTINGS_FILE_NAME


def state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "money": state.money,
        "lifetime_earnings": state.lifetime_earnings,
        "prestiges": state.prestiges,
        "prestige_credits": state.prestige_credits,
        "prestige_credits_earned_historical": state.prestige_credits_earned_historical,
        "current_level_id": state.current_level_id,
        "unlocked_levels": sorted(state.unlocked_levels),
        "items": [asdict(st) for st in state.items],
    }


def _non_negative(value: Any, kind: type, name: str) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{name} must be finite")
    if kind is int and value != int(value):
        raise ValueError(f"{name} must be a whole number")
    converted = kind(value)
    if converted < 0:
        raise ValueError(f"{name} cannot be negative")
    return converted


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """Rebuild a GameState, raising KeyError/TypeError/ValueError on bad input."""
    if not isinstance(data, dict):
        raise TypeError("save payload must be an object")
    current = data["current_level_id"]
    if not isinstance(current, str):
        raise TypeError("current_level_id must be a string")
    unlocked = data.get("unlocked_levels", [current])
    if not isinstance(unlocked, list) or not all(isinstance(lid, str) for lid in unlocked):
        raise TypeError("unlocked_levels must be a list of strings")

    items = []
    for entry in data.get("items", []):
        item_id = entry["item_id"]
        if not isinstance(item_id, str):
            raise TypeError("item_id must be a string")
        items.append(ItemState(
            item_id=item_id,
            quantity=_non_negative(entry.get("quantity", 0), int, "quantity"),
            upgrade_level=_non_negative(entry.get("upgrade_level", 0), int, "upgrade_level"),
        ))

    state = GameState(
        money=_non_negative(data.get("money", 0.0), float, "money"),
        lifetime_earnings=_non_negative(data.get("lifetime_earnings", 0.0), float, "lifetime_earnings"),
        prestiges=_non_negative(data.get("prestiges", 0), int, "prestiges"),
        prestige_credits=_non_negative(data.get("prestige_credits", 0), int, "prestige_credits"),
        prestige_credits_earned_historical=_non_negative(
            data.get("prestige_credits_earned_historical", 0), int, "prestige_credits_earned_historical"
        ),
        current_level_id=current,
        unlocked_levels=set(unlocked),
        items=items,
    )
    state.unlocked_levels.add(state.current_level_id)
    return state


def save_game(state: GameState, path: Path) -> bool:
    payload = state_to_dict(state)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
    except OSError as exc:
        logger.warning("Could not write save file %s: %s", path, exc)
        return False
    logger.debug("Saved game to %s", path)
    return True


def try_load_game(path: Path, campaign: Optional["Campaign"] = None) -> Optional[GameState]:
    """Load a save, or return None when it is missing or unusable."""
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        state = state_from_dict(data)
    except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError, OverflowError) as exc:
        logger.warning("Ignoring unreadable save %s: %s", path, exc)
        return None

    if campaign is not None:
        unknown = [lid for lid in state.unlocked_levels if lid not in campaign]
        if unknown:
            logger.warning("Ignoring save %s with unknown levels %s", path, unknown)
            return None
    logger.info("Loaded save from %s", path)
    return state


def delete_save(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not delete save file %s: %s", path, exc)


@dataclass
class Settings:
    autosave_seconds: int = DEFAULT_AUTOSAVE_SECONDS

    def cycle_autosave(self, step: int) -> int:
        try:
            idx = AUTOSAVE_CHOICES.index(self.autosave_seconds)
        except ValueError:
            idx = AUTOSAVE_CHOICES.index(DEFAULT_AUTOSAVE_SECONDS)
            step = 0
        self.autosave_seconds = AUTOSAVE_CHOICES[(idx + step) % len(AUTOSAVE_CHOICES)]
        return self.autosave_seconds

    @property
    def autosave_label(self) -> str:
        return "Off" if self.autosave_seconds <= 0 else f"{self.autosave_seconds}s"


def load_settings(path: Path) -> Settings:
    if not path.exists():
        return Settings()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        seconds = _non_negative(data.get("autosave_seconds", DEFAULT_AUTOSAVE_SECONDS), int, "autosave_seconds")
    except (OSError, json.JSONDecodeError, AttributeError, TypeError, ValueError) as exc:
        logger.warning("Using default settings, could not read %s: %s", path, exc)
        return Settings()
    return Settings(autosave_seconds=seconds)


def save_settings(settings: Settings, path: Path) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(asdict(settings), handle, indent=2)
    except OSError as exc:
        logger.warning("Could not write settings file %s: %s", path, exc)
        return False
    return True
