from __future__ import annotations

import random
from dataclasses import dataclass

from dice_arena.directions import Direction
from dice_arena.engine import STOP_SPEED, apply_friction, flip_time_ms, step_die
from dice_arena.models import Arena, Die


@dataclass(frozen=True)
class DieStepTrace:
    step: int
    face: int
    position: tuple[int, int]
    direction: Direction
    # Speed the step ran at (BEFORE friction) and the delay it implies.
    speed: int
    delay_ms: int


def trace_die(die: Die, arena: Arena, rng: random.Random | None = None) -> list[DieStepTrace]:
    """
    Run a die to a stop without sleeping, returning a per-step trace log.

    Uses the same step/friction rules as engine.roll_die(); adds
    observability only.
    """
    log: list[DieStepTrace] = []
    step = 0
    while die.speed > STOP_SPEED:
        step += 1
        event = step_die(die, arena, rng, step=step)
        log.append(
            DieStepTrace(
                step=step,
                face=event.face,
                position=event.position,
                direction=die.direction,
                speed=die.speed,
                delay_ms=flip_time_ms(die.speed),
            )
        )
        apply_friction(die)
    return log
