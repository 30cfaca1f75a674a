from __future__ import annotations

import logging
import random
import threading
import time
from typing import Callable, Iterable

from dice_arena.aggregator import Aggregator
from dice_arena.collision import detect_wall
from dice_arena.directions import Direction
from dice_arena.event_sink import EventSink
from dice_arena.events import DieEvent
from dice_arena.kinds import Kind
from dice_arena.models import Arena, Die

logger = logging.getLogger(__name__)

# In flips (position shifts) per second.
MIN_INIT_SPEED = 60
MAX_INIT_SPEED = 120
STOP_SPEED = 0


def spawn_point(arena: Arena, rng: random.Random | None = None) -> tuple[int, int]:
    """Somewhere within the central quarter of the arena."""
    rng = rng if rng is not None else random
    centre_col, centre_row = arena.centre
    h_radius = arena.width // 8
    v_radius = arena.height // 8
    col = rng.randint(centre_col - h_radius, centre_col + h_radius)
    row = rng.randint(centre_row - v_radius, centre_row + v_radius)
    return arena.clamp((col, row))


def spawn_die(die_id: int, kind: Kind, arena: Arena, rng: random.Random | None = None) -> Die:
    rng = rng if rng is not None else random
    die = Die(
        die_id=die_id,
        kind=kind,
        face=kind.flip(rng),
        position=spawn_point(arena, rng),
        speed=rng.randint(MIN_INIT_SPEED, MAX_INIT_SPEED),
        direction=Direction.random(rng),
    )
    logger.debug(
        "spawned die %d (%s) at %s speed=%d direction=%s",
        die.die_id, kind.value, die.position, die.speed, die.direction.value,
    )
    return die


def movement(position: tuple[int, int], direction: Direction) -> tuple[int, int]:
    """Move one cell along direction (NONE stays put)."""
    col, row = position
    dc, dr = direction.vector
    return col + dc, row + dr


def flip_time_ms(speed: int) -> int:
    """Time between flips in milliseconds."""
    return 1000 // speed


def apply_friction(die: Die) -> None:
    die.speed += die.kind.acceleration


def step_die(die: Die, arena: Arena, rng: random.Random | None = None, *, step: int = 0) -> DieEvent:
    """
    One step of a rolling die, without the delay or friction.

    Order:
      1) a new face lands up
      2) walls may change the direction (never the position)
      3) move one cell
      4) report (die_id, face, position)
    """
    die.face = die.kind.flip(rng)
    die.direction = detect_wall(
        die.position,
        die.direction,
        arena,
        two_digits=die.kind.is_two_digits(die.face),
        rng=rng,
    )
    die.position = movement(die.position, die.direction)
    return DieEvent(die_id=die.die_id, face=die.face, position=die.position, step=step)


def roll_die(
        die: Die,
        arena: Arena,
        sink: EventSink,
        *,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        time_scale: float = 1.0,
) -> int:
    """
    Run a die until its speed decays to STOP_SPEED; returns the number of steps.

    The delay happens before friction so the last step still waits on a
    positive speed. The sink is not closed here; the caller owns it.
    """
    steps = 0
    while die.speed > STOP_SPEED:
        steps += 1
        sink.emit(step_die(die, arena, rng, step=steps))
        delay_s = flip_time_ms(die.speed) * time_scale / 1000.0
        if delay_s > 0:
            sleep(delay_s)
        apply_friction(die)
    logger.debug("die %d stopped after %d steps showing %d", die.die_id, steps, die.face)
    return steps


def _die_worker(
        die_id: int,
        kind: Kind,
        arena: Arena,
        sink: EventSink,
        seed: int,
        sleep: Callable[[float], None],
        time_scale: float,
) -> None:
    error: BaseException | None = None
    try:
        rng = random.Random(seed)
        die = spawn_die(die_id, kind, arena, rng)
        roll_die(die, arena, sink, rng=rng, sleep=sleep, time_scale=time_scale)
    except Exception as e:
        error = e
    finally:
        sink.close(error)


def throw(
        kinds: Iterable[Kind],
        arena: Arena,
        *,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        time_scale: float = 1.0,
        on_update: Callable[[DieEvent], None] | None = None,
        aggregator: Aggregator | None = None,
) -> Aggregator:
    """
    Throw every die on its own thread and block until all of them settle.

    Ids are assigned in order starting at 0. Each die gets its own RNG seeded
    from rng, so a seeded rng reproduces the whole roll regardless of how the
    threads interleave. Returns the drained aggregator.
    """
    if time_scale < 0:
        raise ValueError(f"time_scale must be >= 0 (got {time_scale})")
    master = rng if rng is not None else random.Random()
    agg = aggregator if aggregator is not None else Aggregator()
    kinds = list(kinds)

    logger.info("throwing %d dice on a %dx%d arena", len(kinds), arena.width, arena.height)

    threads: list[threading.Thread] = []
    for die_id, kind in enumerate(kinds):
        agg.register(die_id, kind)
        sink = agg.open_sink(die_id)
        seed = master.getrandbits(64)
        threads.append(
            threading.Thread(
                target=_die_worker,
                args=(die_id, kind, arena, sink, seed, sleep, time_scale),
                name=f"die-{die_id}",
                daemon=True,
            )
        )

    for t in threads:
        t.start()

    try:
        agg.drain(on_update)
    finally:
        for t in threads:
            t.join()

    logger.info("roll settled: faces=%s", agg.faces())
    return agg
