"""Command routing and event fan-out."""

from dataclasses import dataclass

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent


@dataclass
class Ping:
    value: int


@dataclass
class Pinged(DomainEvent):
    value: int


def test_command_reaches_its_single_handler():
    bus = MessageBus()
    bus.register_command_handler(Ping, lambda command: command.value * 2)

    assert bus.handle_command(Ping(21)) == 42


def test_second_command_handler_needs_replace():
    bus = MessageBus()
    bus.register_command_handler(Ping, lambda command: 1)

    with pytest.raises(ValueError):
        bus.register_command_handler(Ping, lambda command: 2)

    bus.register_command_handler(Ping, lambda command: 2, replace=True)
    assert bus.handle_command(Ping(0)) == 2


def test_unknown_command_is_a_lookup_error():
    with pytest.raises(LookupError):
        MessageBus().handle_command(Ping(1))


def test_command_errors_propagate():
    bus = MessageBus()

    def explode(command):
        raise RuntimeError("boom")

    bus.register_command_handler(Ping, explode)

    with pytest.raises(RuntimeError):
        bus.handle_command(Ping(1))


def test_event_handlers_fan_out_and_register_once():
    bus = MessageBus()
    seen = []
    bus.register_event_handler(Pinged, seen.append)
    bus.register_event_handler(Pinged, seen.append)
    bus.register_event_handler(Pinged, lambda event: seen.append(event.value))

    failures = bus.publish_events([Pinged(value=7)])

    assert failures == 0
    assert len(seen) == 2
    assert seen[1] == 7


def test_failing_event_handler_does_not_stop_the_others():
    bus = MessageBus()
    seen = []

    def broken(event):
        raise RuntimeError("mail server down")

    bus.register_event_handler(Pinged, broken)
    bus.register_event_handler(Pinged, seen.append)

    failures = bus.publish_events([Pinged(value=1), Pinged(value=2)])

    assert failures == 2
    assert [event.value for event in seen] == [1, 2]


def test_events_without_handlers_are_ignored():
    assert MessageBus().publish_events([Pinged(value=1)]) == 0
