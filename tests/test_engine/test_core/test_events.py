import gc
import logging
from enum import Enum, auto

import pytest
from unlock_engine.core.events import EventBus, Event


class MockEvent(Enum):
    TEST_EVENT = auto()
    OTHER_EVENT = auto()


def test_event_bus_subscribe_publish(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT, data="test")

    assert len(received) == 1
    assert received[0].type == MockEvent.TEST_EVENT
    assert received[0].data["data"] == "test"
    assert received[0]["data"] == "test"
    assert received[0].get("missing", 5) == 5


def test_event_bus_unsubscribe(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.unsubscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 0


def test_event_priority(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("low"), priority=1, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("high"), priority=10, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("normal"), priority=5, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("normal-2"), priority=5, weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["high", "normal", "normal-2", "low"]


def test_failing_handler_does_not_block_others(event_bus, caplog):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    def later_handler(event):
        received.append("later")

    event_bus.subscribe(MockEvent.TEST_EVENT, broken, priority=10)
    event_bus.subscribe(MockEvent.TEST_EVENT, later_handler, priority=5)

    with caplog.at_level(logging.ERROR):
        event_bus.publish(MockEvent.TEST_EVENT)

    assert received == ["later"]
    assert "Error in event handler" in caplog.text


def test_enqueue_defers_until_flush(event_bus):
    received = []
    def handler(event):
        received.append(event["n"])

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.enqueue(MockEvent.TEST_EVENT, n=1)
    event_bus.enqueue(MockEvent.TEST_EVENT, n=2)

    assert received == []
    assert event_bus.pending == 2

    delivered = event_bus.flush()

    assert delivered == 2
    assert received == [1, 2]
    assert event_bus.pending == 0


def test_publish_during_handling_is_delivered_after_current_event(event_bus):
    order = []

    def first(event):
        order.append("first")
        event_bus.publish(MockEvent.OTHER_EVENT)
        order.append("first-done")

    def second(event):
        order.append("second")

    def other(event):
        order.append("other")

    event_bus.subscribe(MockEvent.TEST_EVENT, first, priority=10)
    event_bus.subscribe(MockEvent.TEST_EVENT, second)
    event_bus.subscribe(MockEvent.OTHER_EVENT, other)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["first", "first-done", "second", "other"]


def test_flush_inside_handler_is_noop(event_bus):
    results = []

    def handler(event):
        event_bus.enqueue(MockEvent.OTHER_EVENT)
        results.append(event_bus.flush())

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.subscribe(MockEvent.OTHER_EVENT, lambda e: results.append("other"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert results == [0, "other"]


def test_one_shot_handler(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler, one_shot=True)
    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1


def test_weak_method_handler_removed_when_owner_deleted(event_bus):
    class View:
        def __init__(self, sink):
            self.sink = sink

        def on_event(self, event):
            self.sink.append(event)

    sink = []
    view = View(sink)
    event_bus.subscribe(MockEvent.TEST_EVENT, view.on_event)
    assert event_bus.handler_count(MockEvent.TEST_EVENT) == 1

    del view
    gc.collect()

    event_bus.publish(MockEvent.TEST_EVENT)
    assert sink == []
    assert event_bus.handler_count(MockEvent.TEST_EVENT) == 0


def test_handler_may_unsubscribe_itself(event_bus):
    received = []

    def handler(event):
        received.append(event)
        event_bus.unsubscribe(MockEvent.TEST_EVENT, handler)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1


def test_clear(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.subscribe(MockEvent.OTHER_EVENT, handler)
    event_bus.clear(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.OTHER_EVENT)

    assert [e.type for e in received] == [MockEvent.OTHER_EVENT]

    event_bus.enqueue(MockEvent.OTHER_EVENT)
    event_bus.clear()
    assert event_bus.pending == 0
    assert event_bus.handler_count(MockEvent.OTHER_EVENT) == 0


def test_publish_event_object():
    bus = EventBus()
    received = []
    def handler(event):
        received.append(event)

    bus.subscribe(MockEvent.TEST_EVENT, handler)
    event = Event(type=MockEvent.TEST_EVENT, data={"x": 1})
    bus.publish_event(event)

    assert received == [event]
