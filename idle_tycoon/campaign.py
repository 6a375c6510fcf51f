import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .economy import ItemCatalog, ItemDef
from .errors import LevelNotFoundError
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelDef:
    id: str
    name: str
    goal_money: float
    producers: Tuple[ItemDef, ...]

    def __post_init__(self) -> None:
        if self.goal_money <= 0:
            raise ValueError(f"{self.id}: goal must be positive")
        object.__setattr__(self, "producers", tuple(self.producers))


def _level(level_id: str, name: str, goal: float, *producers: Tuple[str, str, float, float]) -> LevelDef:
    return LevelDef(
        level_id,
        name,
        goal,
        tuple(ItemDef(pid, pname, cost, 1.15, rate) for pid, pname, cost, rate in producers),
    )


DEFAULT_LEVELS: Tuple[LevelDef, ...] = (
    _level(
        "lvl1", "Desert Outskirts", 1_000_000,
        ("vaporator", "Moisture Vaporator", 10, 0.10),
        ("junkdroid", "Salvage Droid", 60, 0.70),
        ("landspeeder", "Landspeeder Runs", 600, 6),
        ("cantina", "Cantina Stalls", 6_000, 45),
        ("freighter", "Small Freighter", 60_000, 300),
    ),
    _level(
        "lvl2", "Spaceport Fringe", 50_000_000,
        ("droidshop", "Droid Workshop", 200, 1.8),
        ("hangar", "Hangar Bay", 2_000, 14),
        ("market", "Bazaar Network", 20_000, 95),
        ("courier", "Courier Routes", 200_000, 620),
        ("guild", "Guild Contracts", 2_000_000, 4_000),
    ),
    _level(
        "lvl3", "Rebel Outpost", 2_000_000_000,
        ("lookout", "Lookout Posts", 1_000, 3.5),
        ("comms", "Comms Relay", 10_000, 26),
        ("cells", "Rebel Cells", 100_000, 180),
        ("supply", "Supply Lines", 1_000_000, 1_150),
        ("wing", "Starfighter Wing", 10_000_000, 7_200),
    ),
    _level(
        "lvl4", "Icy Holdfast", 80_000_000_000,
        ("patrol", "Perimeter Patrols", 6_000, 20),
        ("shield", "Field Generators", 60_000, 140),
        ("depot", "Supply Depot", 600_000, 980),
        ("hanger", "Heavy Hangars", 6_000_000, 6_600),
        ("convoy", "Convoy Command", 60_000_000, 45_000),
    ),
    _level(
        "lvl5", "Cloud Mines", 3_000_000_000_000,
        ("lift", "Gas Lifters", 30_000, 70),
        ("refine", "Refinery Lines", 300_000, 500),
        ("trade", "Trade Consortium", 3_000_000, 3_400),
        ("harbor", "Sky Harbor", 30_000_000, 22_000),
        ("charter", "Charter Fleets", 300_000_000, 150_000),
    ),
    _level(
        "lvl6", "Capital Shipyards", 120_000_000_000_000,
        ("drydock", "Drydock Crews", 150_000, 300),
        ("frames", "Hull Frames", 1_500_000, 2_100),
        ("yards", "Orbital Yards", 15_000_000, 14_000),
        ("fleets", "Fleet Logistics", 150_000_000, 95_000),
        ("capital", "Capital Lines", 1_500_000_000, 650_000),
    ),
)


class Campaign:
    """Fixed, forward-only sequence of levels.

    The state only stores the current level id; everything else (goal,
    producers, what comes next) is looked up here.
    """

    def __init__(self, levels: Iterable[LevelDef]) -> None:
        self._levels: Tuple[LevelDef, ...] = tuple(levels)
        if not self._levels:
            raise ValueError("A campaign needs at least one level")
        self._index: Dict[str, int] = {}
        for idx, level in enumerate(self._levels):
            if level.id in self._index:
                raise ValueError(f"Duplicate level id in campaign: {level.id!r}")
            self._index[level.id] = idx
        self._catalogs: Dict[str, ItemCatalog] = {
            level.id: ItemCatalog(level.producers) for level in self._levels
        }

    @classmethod
    def default(cls) -> "Campaign":
        return cls(DEFAULT_LEVELS)

    @property
    def levels(self) -> Tuple[LevelDef, ...]:
        return self._levels

    @property
    def first(self) -> LevelDef:
        return self._levels[0]

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[LevelDef]:
        return iter(self._levels)

    def __contains__(self, level_id: object) -> bool:
        return level_id in self._index

    def index_of(self, level_id: str) -> int:
        try:
            return self._index[level_id]
        except KeyError:
            raise LevelNotFoundError(level_id) from None

    def by_id(self, level_id: str) -> LevelDef:
        return self._levels[self.index_of(level_id)]

    def new_state(self) -> GameState:
        return GameState.new(self.first.id)

    def current(self, state: GameState) -> LevelDef:
        return self.by_id(state.current_level_id)

    def next(self, state: GameState) -> Optional[LevelDef]:
        idx = self.index_of(state.current_level_id)
        if idx + 1 < len(self._levels):
            return self._levels[idx + 1]
        return None

    def is_last(self, state: GameState) -> bool:
        return self.next(state) is None

    def catalog_for(self, level: LevelDef) -> ItemCatalog:
        return self._catalogs[level.id]

    def current_catalog(self, state: GameState) -> ItemCatalog:
        return self.catalog_for(self.current(state))

    def goal_reached(self, state: GameState) -> bool:
        return state.money >= self.current(state).goal_money

    def goal_progress(self, state: GameState) -> float:
        goal = self.current(state).goal_money
        return min(1.0, max(0.0, state.money / goal))

    def progress_to_next_level(self, state: GameState) -> Optional[LevelDef]:
        """Move to the following level, or do nothing on the last one."""
        nxt = self.next(state)
        if nxt is None:
            return None
        state.unlocked_levels.add(nxt.id)
        state.current_level_id = nxt.id
        self._start_run(state, nxt)
        logger.info("Advanced to %s (%s)", nxt.name, nxt.id)
        return nxt

    def reset_to_first_level(self, state: GameState) -> LevelDef:
        first = self.first
        state.current_level_id = first.id
        state.unlocked_levels.clear()
        state.unlocked_levels.add(first.id)
        self._start_run(state, first)
        return first

    @staticmethod
    def _start_run(state: GameState, level: LevelDef) -> None:
        state.clear_run()
        # one unit of the cheapest producer so a fresh run is never stuck at zero income
        if level.producers:
            state.seed_item(level.producers[0].id)
