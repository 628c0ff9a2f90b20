"""
Core engine module.

Exports:
- Component, StaticData: Record base classes
- EventBus, Event: Event system
- ProgressionError and subclasses: Error taxonomy
"""

from unlock_engine.core.component import Component, StaticData
from unlock_engine.core.events import EventBus, Event, EventHandler
from unlock_engine.core.errors import (
    ProgressionError,
    InvalidRewardAmount,
    DuplicateReward,
    UnknownBuilding,
    UnknownRegion,
    InvalidCatalog,
    SaveDataError,
)

__all__ = [
    # Records
    "Component",
    "StaticData",
    # Events
    "EventBus",
    "Event",
    "EventHandler",
    # Errors
    "ProgressionError",
    "InvalidRewardAmount",
    "DuplicateReward",
    "UnknownBuilding",
    "UnknownRegion",
    "InvalidCatalog",
    "SaveDataError",
]
