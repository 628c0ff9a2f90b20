"""
Typed event bus with deferred, settle-then-notify delivery.

Uses Enums for event types to prevent magic strings. Producers that
mutate state in several steps enqueue their events while they work and
flush once the state has settled, so handlers never observe a
half-applied change.

Usage:
    # Define events
    class ProgressionEvent(Enum):
        LEVEL_UP = auto()
        REGION_UNLOCKED = auto()

    # Subscribe
    event_bus.subscribe(ProgressionEvent.LEVEL_UP, on_level_up)

    # Publish immediately
    event_bus.publish(ProgressionEvent.LEVEL_UP, levels=(2, 3))

    # Or batch: queue while mutating, deliver afterwards
    event_bus.enqueue(ProgressionEvent.LEVEL_UP, levels=(2, 3))
    event_bus.enqueue(ProgressionEvent.REGION_UNLOCKED, region=region)
    event_bus.flush()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Outbound queue for batched delivery (enqueue + flush)
    - Handler isolation: a failing handler is logged and skipped,
      the remaining handlers still receive the event
    """

    def __init__(self):
        # Map of event type -> list of (priority, handler, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        # Events waiting for delivery (enqueued, or published during handling)
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        if weak:
            if hasattr(handler, '__self__'):
                # Bound method - use WeakMethod
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        # Insert sorted by priority (highest first, FIFO among equals)
        handlers = self._handlers[event_type]
        entry = (priority, handler_ref, one_shot)

        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, entry)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """
        Unsubscribe from an event type.

        Args:
            event_type: The event type
            handler: The handler to remove
        """
        if event_type not in self._handlers:
            return

        handlers = self._handlers[event_type]
        self._handlers[event_type] = [
            (p, h, o) for p, h, o in handlers
            if self._get_handler(h) != handler
        ]

    def handler_count(self, event_type: Enum) -> int:
        """Number of live handlers registered for an event type."""
        return sum(
            1 for _, h, _ in self._handlers.get(event_type, [])
            if self._get_handler(h) is not None
        )

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Delivered immediately, unless a dispatch is already running, in
        which case it is queued behind the events currently pending.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """
        Publish a pre-created event.

        Args:
            event: The event to publish
        """
        self._event_queue.append(event)
        self.flush()

    def enqueue(self, event_type: Enum, **data: Any) -> Event:
        """
        Queue an event without delivering it.

        Queued events are delivered, in order, by the next flush().
        """
        event = Event(type=event_type, data=data)
        self._event_queue.append(event)
        return event

    @property
    def pending(self) -> int:
        """Number of events waiting for delivery."""
        return len(self._event_queue)

    def flush(self) -> int:
        """
        Deliver all queued events in order.

        Events published by handlers while flushing are appended to the
        queue and delivered in the same flush. Calling flush() from inside
        a handler is a no-op; the outer flush drains the queue.

        Returns:
            Number of events delivered by this call
        """
        if self._is_publishing:
            return 0

        delivered = 0
        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))
            delivered += 1
        return delivered

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                       If None, clear all handlers and pending events.
        """
        if event_type is None:
            self._handlers.clear()
            self._event_queue.clear()
        elif event_type in self._handlers:
            del self._handlers[event_type]

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers."""
        handlers = self._handlers.get(event.type)
        if not handlers:
            return

        self._is_publishing = True
        try:
            # Iterate a snapshot so handlers may (un)subscribe while running
            for entry in list(handlers):
                _, handler_ref, one_shot = entry
                handler = self._get_handler(handler_ref)

                if handler is None:
                    # Weak reference was garbage collected
                    self._discard(event.type, entry)
                    continue

                if one_shot:
                    self._discard(event.type, entry)

                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error in event handler for {event.type}")
        finally:
            self._is_publishing = False

    def _discard(self, event_type: Enum, entry: tuple[int, Any, bool]) -> None:
        handlers = self._handlers.get(event_type, [])
        if entry in handlers:
            handlers.remove(entry)

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
