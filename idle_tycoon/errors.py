class IdleTycoonError(Exception):
    """Base class for engine errors."""


class NotFoundError(IdleTycoonError, LookupError):
    """An id was looked up unconditionally and is missing from its table."""


class ItemNotFoundError(NotFoundError):
    def __init__(self, item_id: str) -> None:
        super().__init__(f"Unknown item id: {item_id!r}")
        self.item_id = item_id


class LevelNotFoundError(NotFoundError):
    def __init__(self, level_id: str) -> None:
        super().__init__(f"Unknown level id: {level_id!r}")
        self.level_id = level_id
