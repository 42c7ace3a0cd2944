"""Unit tests for domain event primitives and the in-memory bus."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from modules.orders.events import OrderAdded, OrderEvent, OrderMoved
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


class Recorder:
    def __init__(self) -> None:
        self.events = []

    def handle(self, event) -> None:
        self.events.append(event)


def test_event_name_is_class_name():
    event = OrderMoved(aggregate_id=7, location="press-a")

    assert event.event_name == "OrderMoved"
    assert event.aggregate_id == 7
    assert event.occurred_on.tzinfo is not None


def test_events_are_immutable():
    event = OrderAdded(aggregate_id=1)
    with pytest.raises(FrozenInstanceError):
        event.aggregate_id = 2


def test_each_event_gets_its_own_id():
    assert OrderAdded(aggregate_id=1).event_id != OrderAdded(aggregate_id=1).event_id


def test_bus_dispatches_to_exact_subscribers():
    bus = InMemoryEventBus()
    recorder = Recorder()
    bus.subscribe(OrderAdded, recorder)

    bus.publish(OrderAdded(aggregate_id=1))
    bus.publish(OrderMoved(aggregate_id=1, location="press-a"))

    assert [e.event_name for e in recorder.events] == ["OrderAdded"]


def test_base_class_subscription_receives_subclasses():
    bus = InMemoryEventBus()
    recorder = Recorder()
    bus.subscribe(OrderEvent, recorder)

    bus.publish(OrderAdded(aggregate_id=1))
    bus.publish(OrderMoved(aggregate_id=2, location="press-a"))

    assert [e.aggregate_id for e in recorder.events] == [1, 2]


def test_duplicate_subscription_is_ignored():
    bus = InMemoryEventBus()
    recorder = Recorder()
    bus.subscribe(OrderAdded, recorder)
    bus.subscribe(OrderAdded, recorder)

    bus.publish(OrderAdded(aggregate_id=1))

    assert len(recorder.events) == 1


def test_unsubscribe_stops_delivery():
    bus = InMemoryEventBus()
    recorder = Recorder()
    bus.subscribe(OrderAdded, recorder)
    bus.unsubscribe(OrderAdded, recorder)
    bus.unsubscribe(OrderAdded, recorder)

    bus.publish(OrderAdded(aggregate_id=1))

    assert recorder.events == []
