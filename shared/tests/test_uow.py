"""Unit of work: events leave only after a successful commit."""

from dataclasses import dataclass

import pytest

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork, InMemoryUnitOfWork
from shared.domain.base import Aggregate, DomainEvent


@dataclass
class Renamed(DomainEvent):
    name: str


@dataclass(eq=False)
class Thing(Aggregate):
    name: str = ""

    def rename(self, name):
        self.name = name
        self.add_event(Renamed(name=name, aggregate_id=self.id))


@pytest.fixture
def seen():
    return []


@pytest.fixture
def bus(seen):
    bus = MessageBus()
    bus.register_event_handler(Renamed, seen.append)
    return bus


def test_in_memory_commit_publishes_collected_events(bus, seen):
    thing = Thing()
    thing.rename("first")

    with InMemoryUnitOfWork(bus) as uow:
        uow.collect_events(thing)

    assert [event.name for event in seen] == ["first"]
    assert thing.events == []
    assert uow.committed is True


def test_exception_discards_events(bus, seen):
    thing = Thing()
    thing.rename("lost")

    with pytest.raises(RuntimeError):
        with InMemoryUnitOfWork(bus) as uow:
            uow.collect_events(thing)
            raise RuntimeError("write failed")

    assert seen == []
    assert uow.committed is False


def test_handler_failure_does_not_escape_commit(seen):
    bus = MessageBus()

    def broken(event):
        raise RuntimeError("handler broke")

    bus.register_event_handler(Renamed, broken)
    thing = Thing()
    thing.rename("still fine")

    with InMemoryUnitOfWork(bus) as uow:
        uow.collect_events(thing)

    assert uow.committed is True


@pytest.mark.django_db
def test_django_uow_publishes_on_commit(bus, seen, django_capture_on_commit_callbacks):
    thing = Thing()
    thing.rename("after commit")

    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        with DjangoUnitOfWork(bus) as uow:
            uow.collect_events(thing)
        assert seen == []

    assert len(callbacks) == 1
    callbacks[0]()
    assert [event.name for event in seen] == ["after commit"]


@pytest.mark.django_db
def test_django_uow_rollback_schedules_nothing(bus, seen, django_capture_on_commit_callbacks):
    thing = Thing()
    thing.rename("rolled back")

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(ValueError):
            with DjangoUnitOfWork(bus) as uow:
                uow.collect_events(thing)
                raise ValueError("constraint violated")

    assert callbacks == []
    assert seen == []
