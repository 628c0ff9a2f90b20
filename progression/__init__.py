"""
Progression module - EXP, levels, and level-gated unlocks.

Provides:
- Experience ledger with multi-level jumps and a level cap
- Unlock catalog and pure unlock queries for regions and buildings
- At-most-once reward pipeline and the EXP reward table
- Settle-then-notify progression events
- Save/load of progression state

Quick Start:
    from progression import ProgressionContext, ProgressionEvent

    context = ProgressionContext.from_data()
    context.subscribe(ProgressionEvent.LEVEL_UP, on_level_up)
    context.complete_quest("quest-1")
"""

from progression.components import (
    PlayerProgress,
    Region,
    Building,
    RewardEvent,
    Difficulty,
    RewardSource,
)
from progression.config import ProgressionConfig, CurveConfig, CurveKind
from progression.leveling import (
    LevelCurve,
    LinearCurve,
    ExponentialCurve,
    build_curve,
    ExperienceLedger,
    LevelChangeResult,
)
from progression.unlocks import (
    UnlockCatalog,
    UnlockResolver,
    order_regions,
    assign_unlock_levels,
)
from progression.rewards import RewardPipeline, ApplyResult, RewardStatus
from progression.notifications import NotificationDispatcher, ProgressionEvent
from progression.context import ProgressionContext
from progression.save import SaveManager, SaveEvent, ProgressionSaveData

__all__ = [
    # Records
    "PlayerProgress",
    "Region",
    "Building",
    "RewardEvent",
    "Difficulty",
    "RewardSource",
    # Config
    "ProgressionConfig",
    "CurveConfig",
    "CurveKind",
    # Leveling
    "LevelCurve",
    "LinearCurve",
    "ExponentialCurve",
    "build_curve",
    "ExperienceLedger",
    "LevelChangeResult",
    # Unlocks
    "UnlockCatalog",
    "UnlockResolver",
    "order_regions",
    "assign_unlock_levels",
    # Rewards
    "RewardPipeline",
    "ApplyResult",
    "RewardStatus",
    # Events
    "NotificationDispatcher",
    "ProgressionEvent",
    # Composition
    "ProgressionContext",
    # Save
    "SaveManager",
    "SaveEvent",
    "ProgressionSaveData",
]
