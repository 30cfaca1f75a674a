from __future__ import annotations

import random
import threading

import pytest

from dice_arena.aggregator import Aggregator
from dice_arena.engine import throw
from dice_arena.events import DieEvent
from dice_arena.kinds import Kind
from dice_arena.models import Arena

ARENA = Arena(width=30, height=10)


def test_throw_assigns_ids_in_order_and_settles():
    kinds = [Kind.D6, Kind.D20, Kind.D4]
    agg = throw(kinds, ARENA, rng=random.Random(1), time_scale=0)

    snap = agg.final_snapshot()
    assert snap.settled
    assert [d.die_id for d in snap.dice] == [0, 1, 2]
    assert [d.kind for d in snap.dice] == kinds
    assert 1 <= snap.dice[0].face <= 6
    assert 1 <= snap.dice[1].face <= 20
    assert 1 <= snap.dice[2].face <= 4


def test_same_seed_reproduces_the_roll():
    kinds = [Kind.D20] * 5 + [Kind.D2]
    a = throw(kinds, ARENA, rng=random.Random(42), time_scale=0).final_snapshot()
    b = throw(kinds, ARENA, rng=random.Random(42), time_scale=0).final_snapshot()
    assert a == b


def test_live_updates_are_ordered_per_die_and_stay_in_bounds():
    updates: list[DieEvent] = []
    agg = throw(
        [Kind.D12, Kind.PERCENT_TENS, Kind.PERCENT_ONES],
        ARENA,
        rng=random.Random(7),
        time_scale=0,
        on_update=updates.append,
        aggregator=Aggregator(record=True),
    )

    assert agg.events == updates
    for die_id in range(3):
        steps = [e.step for e in updates if e.die_id == die_id]
        assert steps == list(range(1, len(steps) + 1))
    assert all(ARENA.contains(e.position) for e in updates)

    snap = agg.final_snapshot()
    assert snap.dice[1].face in range(0, 100, 10)
    assert snap.dice[2].face in range(10)


def test_throw_with_real_sleep_still_finishes():
    # a tiny time scale keeps the test fast while exercising the sleep path
    agg = throw([Kind.D2], ARENA, rng=random.Random(3), time_scale=0.01)
    assert len(agg.faces()) == 1


def test_throw_without_dice_returns_empty_table():
    agg = throw([], ARENA, rng=random.Random(0), time_scale=0)
    assert agg.faces() == []


def test_worker_failure_propagates():
    def broken_sleep(seconds: float) -> None:
        raise OSError("sleep failed")

    with pytest.raises(OSError, match="sleep failed"):
        throw([Kind.D6, Kind.D6], ARENA, rng=random.Random(0), sleep=broken_sleep, time_scale=1.0)


def test_negative_time_scale_is_rejected():
    with pytest.raises(ValueError):
        throw([Kind.D6], ARENA, time_scale=-1)


def test_failing_update_leaves_no_die_threads_running():
    def on_update(event: DieEvent) -> None:
        raise BrokenPipeError("terminal went away")

    agg = Aggregator()
    with pytest.raises(BrokenPipeError):
        throw([Kind.D20] * 3, ARENA, rng=random.Random(8), time_scale=0.01, on_update=on_update, aggregator=agg)

    assert agg.drained
    assert not [t.name for t in threading.enumerate() if t.name.startswith("die-")]
