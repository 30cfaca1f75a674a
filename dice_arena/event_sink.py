from __future__ import annotations

import queue
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from dice_arena.events import DieEvent


class EventSink(ABC):
    """
    Consumer of die updates, as seen by the die that produces them.
    A die writes to exactly one sink and closes it when it stops rolling.
    """

    @abstractmethod
    def emit(self, event: DieEvent) -> None: ...

    @abstractmethod
    def close(self, error: BaseException | None = None) -> None: ...


@dataclass(frozen=True, slots=True)
class EndOfStream:
    """Marker a producer posts when it will emit no more events."""

    die_id: int | None
    error: BaseException | None = None


class QueueEventSink(EventSink):
    """
    Producer handle onto an aggregator's queue.
    The queue is unbounded, so emit() never blocks the die.
    """

    def __init__(self, q: queue.Queue, die_id: int | None = None) -> None:
        self._queue = q
        self._die_id = die_id
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, event: DieEvent) -> None:
        if self._closed:
            raise RuntimeError("cannot emit on a closed sink")
        self._queue.put(event)

    def close(self, error: BaseException | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(EndOfStream(die_id=self._die_id, error=error))


@dataclass
class InMemoryEventSink(EventSink):
    """
    Simple sink for tests/traces.
    Keeps every event in emission order.
    """

    events: list[DieEvent] = field(default_factory=list)
    closed: bool = False
    error: BaseException | None = None

    def emit(self, event: DieEvent) -> None:
        if self.closed:
            raise RuntimeError("cannot emit on a closed sink")
        self.events.append(event)

    def close(self, error: BaseException | None = None) -> None:
        self.closed = True
        self.error = error
