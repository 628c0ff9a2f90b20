"""
Notification dispatcher - settle-then-notify fan-out of progression changes.

The ledger finishes a whole EXP grant (every level-up and unlock) and
commits it before anything is announced. The dispatcher then turns the
result into one coherent batch on the event bus:

    EXP_CHANGED        once
    LEVEL_UP           once, listing every level crossed
    REGION_UNLOCKED    once per region, ascending unlock level
    BUILDING_UNLOCKED  once per building, ascending unlock level

Handlers therefore always see fully updated state. A handler that
raises is logged and skipped; the others still run.

Usage:
    dispatcher.subscribe(ProgressionEvent.LEVEL_UP, self.on_level_up)

    def on_level_up(self, event: Event) -> None:
        for level in event["levels"]:
            ...
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from unlock_engine.core.events import EventBus, EventHandler

if TYPE_CHECKING:
    from progression.leveling.ledger import LevelChangeResult


class ProgressionEvent(Enum):
    """
    Progression events and their data keys.

    EXP_CHANGED: current_exp, exp_gained, level, exp_required_for_next_level
    LEVEL_UP: levels (tuple, ascending), level (final level)
    REGION_UNLOCKED: region, unlock_level
    BUILDING_UNLOCKED: building
    """
    EXP_CHANGED = auto()
    LEVEL_UP = auto()
    REGION_UNLOCKED = auto()
    BUILDING_UNLOCKED = auto()


class NotificationDispatcher:
    """Publishes ledger results as batched ProgressionEvents."""

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus or EventBus()

    def subscribe(
        self,
        event_type: ProgressionEvent,
        handler: EventHandler,
        priority: int = 0,
        weak: bool = True,
    ) -> None:
        """
        Register a handler.

        Handlers are held weakly by default, so a destroyed view stops
        receiving events without unsubscribing. Pass weak=False for
        lambdas and other throwaway callables.
        """
        self.event_bus.subscribe(event_type, handler, priority=priority, weak=weak)

    def unsubscribe(self, event_type: ProgressionEvent, handler: EventHandler) -> None:
        self.event_bus.unsubscribe(event_type, handler)

    def notify(self, result: LevelChangeResult) -> int:
        """
        Announce a committed ledger result.

        Returns:
            Number of events delivered (0 when the result changed nothing,
            or when called from inside a handler - the outer dispatch
            delivers the batch once the current one is done)
        """
        if not result.changed:
            return 0

        bus = self.event_bus
        bus.enqueue(
            ProgressionEvent.EXP_CHANGED,
            current_exp=result.current_exp,
            exp_gained=result.exp_credited,
            level=result.end_level,
            exp_required_for_next_level=result.exp_required_for_next_level,
        )

        if result.levels_crossed:
            bus.enqueue(
                ProgressionEvent.LEVEL_UP,
                levels=result.levels_crossed,
                level=result.end_level,
            )

        for region, unlock_level in zip(result.unlocked_regions, result.region_unlock_levels):
            bus.enqueue(ProgressionEvent.REGION_UNLOCKED, region=region, unlock_level=unlock_level)

        for building in result.unlocked_buildings:
            bus.enqueue(ProgressionEvent.BUILDING_UNLOCKED, building=building)

        return bus.flush()
