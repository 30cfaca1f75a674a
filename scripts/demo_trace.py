from __future__ import annotations

import random

from dice_arena.engine import spawn_die
from dice_arena.kinds import Kind
from dice_arena.models import Arena
from dice_arena.trace import trace_die


def main() -> None:
    arena = Arena(width=40, height=12)
    rng = random.Random(7)

    for die_id, kind in enumerate([Kind.D20, Kind.D6, Kind.PERCENT_TENS]):
        die = spawn_die(die_id, kind, arena, rng)
        print(f"\nDie {die_id} ({kind.value}) start={die.position} speed={die.speed} dir={die.direction.value}")

        log = trace_die(die, arena, rng)
        for entry in log:
            print(
                f"  step {entry.step:3d} | face={entry.face:>2d} pos=({entry.position[0]:2d},{entry.position[1]:2d}) "
                f"dir={entry.direction.value:<10s} speed={entry.speed:3d} delay={entry.delay_ms:3d}ms"
            )
        print(f"  settled on {log[-1].face} after {len(log)} steps")


if __name__ == "__main__":
    main()
