"""
Unlock Engine

Reusable infrastructure for the progression engine: a typed event bus
with deferred delivery, pydantic record base classes, the error
taxonomy, and the static data loader.

Quick Start:
    from unlock_engine import EventBus, Database

    bus = EventBus()
    db = Database("game/data")
    db.load_all()
"""

__version__ = "0.1.0"

from unlock_engine.core import (
    Component,
    StaticData,
    EventBus,
    Event,
    ProgressionError,
    InvalidRewardAmount,
    DuplicateReward,
    UnknownBuilding,
    UnknownRegion,
    InvalidCatalog,
    SaveDataError,
)
from unlock_engine.resources import Database

__all__ = [
    # Records
    "Component",
    "StaticData",
    # Events
    "EventBus",
    "Event",
    # Errors
    "ProgressionError",
    "InvalidRewardAmount",
    "DuplicateReward",
    "UnknownBuilding",
    "UnknownRegion",
    "InvalidCatalog",
    "SaveDataError",
    # Resources
    "Database",
]
