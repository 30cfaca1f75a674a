from __future__ import annotations

import logging
import queue
import threading
from typing import Callable

from dice_arena.event_sink import EndOfStream, QueueEventSink
from dice_arena.events import DieEvent
from dice_arena.kinds import Kind
from dice_arena.snapshots import DieSnapshot, TableSnapshot

logger = logging.getLogger(__name__)


class Aggregator:
    """
    Single consumer of every die's update stream.

    Dice write through sinks from open_sink(); drain() is the only reader and
    blocks until every opened sink has been closed. State is last-write-wins
    per die id. snapshot() may be called from any thread, including while a
    drain is in progress.
    """

    def __init__(self, *, record: bool = False) -> None:
        self._queue: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._kinds: dict[int, Kind] = {}
        self._positions: dict[int, tuple[int, int]] = {}
        self._faces: dict[int, int] = {}
        self._live = 0
        self._opened = 0
        self._drained = False
        self._errors: list[BaseException] = []
        self.events: list[DieEvent] | None = [] if record else None

    @property
    def kinds(self) -> dict[int, Kind]:
        with self._lock:
            return dict(self._kinds)

    @property
    def drained(self) -> bool:
        return self._drained

    def register(self, die_id: int, kind: Kind) -> None:
        if die_id < 0:
            raise ValueError(f"die id must be >= 0 (got {die_id})")
        with self._lock:
            if die_id in self._kinds:
                raise ValueError(f"die id {die_id} is already registered for this roll")
            self._kinds[die_id] = kind

    def open_sink(self, die_id: int | None = None) -> QueueEventSink:
        if self._drained:
            raise RuntimeError("aggregator has already been drained")
        with self._lock:
            self._live += 1
            self._opened += 1
        return QueueEventSink(self._queue, die_id=die_id)

    def drain(self, on_update: Callable[[DieEvent], None] | None = None) -> TableSnapshot:
        """
        Consume events until no producer is live, then return the final state.

        on_update is called on the draining thread after each state change.
        If any producer closed with an error, the first one is re-raised once
        every producer has finished. If applying an event or on_update raises,
        the remaining events are discarded until every producer has closed,
        then that exception propagates.
        """
        try:
            while self._consume(on_update):
                pass
        except BaseException:
            logger.warning("drain aborted; waiting for %d producer(s) to close", self._live)
            while self._consume(None, apply=False):
                pass
            self._drained = True
            raise

        self._drained = True
        if self._errors:
            raise self._errors[0]
        logger.debug("drained %d producer(s)", self._opened)
        return self.snapshot()

    def _consume(self, on_update: Callable[[DieEvent], None] | None, *, apply: bool = True) -> bool:
        """Handle one queued item; False once no producer is live."""
        with self._lock:
            if self._live <= 0:
                return False
        item = self._queue.get()
        if isinstance(item, EndOfStream):
            with self._lock:
                self._live -= 1
            if item.error is not None:
                logger.warning("die %s stopped with an error: %r", item.die_id, item.error)
                self._errors.append(item.error)
            return True
        if apply:
            self._apply(item)
            if on_update is not None:
                on_update(item)
        return True

    def _apply(self, event: DieEvent) -> None:
        with self._lock:
            if event.die_id not in self._kinds:
                raise KeyError(f"event for unregistered die id {event.die_id}")
            self._positions[event.die_id] = event.position
            self._faces[event.die_id] = event.face
            if self.events is not None:
                self.events.append(event)

    def snapshot(self) -> TableSnapshot:
        with self._lock:
            dice = tuple(
                DieSnapshot(
                    die_id=die_id,
                    kind=self._kinds[die_id],
                    face=self._faces[die_id],
                    position=self._positions[die_id],
                )
                for die_id in sorted(self._faces)
            )
        return TableSnapshot(dice=dice, settled=self._drained)

    def final_snapshot(self) -> TableSnapshot:
        if not self._drained:
            raise RuntimeError("roll has not settled yet; call drain() first")
        return self.snapshot()

    def faces(self) -> list[int]:
        """Final faces in id order."""
        return self.final_snapshot().faces()
