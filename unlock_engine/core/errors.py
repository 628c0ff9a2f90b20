"""
Error taxonomy for the progression engine.

Every error subclasses the builtin it specializes, so callers can catch
either the precise type or the generic ValueError/KeyError.

    InvalidRewardAmount - negative EXP; rejected, no state change
    DuplicateReward     - reward source already consumed; rejected, no state change
    UnknownBuilding     - building id missing from static configuration
    UnknownRegion       - region id missing from static configuration
    InvalidCatalog      - static region/building configuration breaks an invariant
    SaveDataError       - save data is corrupt or inconsistent
"""

from __future__ import annotations


class ProgressionError(Exception):
    """Base class for all progression engine errors."""


class InvalidRewardAmount(ProgressionError, ValueError):
    """Raised when a reward carries a negative EXP amount."""

    def __init__(self, amount: int, source_id: str | None = None):
        self.amount = amount
        self.source_id = source_id
        where = f" (source '{source_id}')" if source_id else ""
        super().__init__(f"EXP amount must be >= 0, got {amount}{where}")


class DuplicateReward(ProgressionError, ValueError):
    """Raised when a reward source id has already been applied."""

    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Reward '{source_id}' has already been applied")


class UnknownBuilding(ProgressionError, KeyError):
    """Raised when a building id is not in the unlock catalog."""

    def __init__(self, building_id: str):
        self.building_id = building_id
        super().__init__(building_id)

    def __str__(self) -> str:
        return f"Unknown building: {self.building_id}"


class UnknownRegion(ProgressionError, KeyError):
    """Raised when a region id is not in the unlock catalog."""

    def __init__(self, region_id: str):
        self.region_id = region_id
        super().__init__(region_id)

    def __str__(self) -> str:
        return f"Unknown region: {self.region_id}"


class InvalidCatalog(ProgressionError, ValueError):
    """Raised when static region/building configuration is inconsistent."""


class SaveDataError(ProgressionError, ValueError):
    """Raised when save data cannot be applied."""
