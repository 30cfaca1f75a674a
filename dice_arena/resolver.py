from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from dice_arena.errors import AssessmentError
from dice_arena.kinds import Kind
from dice_arena.models import RollCommand, RollMode

NATURAL_MAX = 20
NATURAL_MIN = 1


@dataclass(frozen=True, slots=True)
class CommandTotal:
    """
    Faces consumed by one command and what they add up to.

    natural_max / natural_min hold the faces that should be presented as a
    natural 20 / natural 1; they never change the numbers.
    """

    command: RollCommand
    faces: tuple[int, ...]
    running: int
    subtotal: int
    natural_max: tuple[int, ...] = ()
    natural_min: tuple[int, ...] = ()

    @property
    def modifier(self) -> int:
        return self.command.modifier


@dataclass(frozen=True, slots=True)
class RollResult:
    """
    Outcome of a settled roll.

    selected is the face value the mode chose (max for advantage, min for
    disadvantage, tens + ones for percentile); None for normal rolls.
    """

    mode: RollMode
    commands: tuple[CommandTotal, ...]
    total: int
    selected: int | None = None

    @property
    def faces(self) -> tuple[int, ...]:
        return tuple(f for c in self.commands for f in c.faces)

    @property
    def natural_max(self) -> bool:
        return any(c.natural_max for c in self.commands)

    @property
    def natural_min(self) -> bool:
        return any(c.natural_min for c in self.commands)


def _is_d20(command: RollCommand) -> bool:
    return command.kind is Kind.D20


def _sum_normal(faces: Sequence[int], commands: Sequence[RollCommand]) -> RollResult:
    expected = sum(c.coefficient for c in commands)
    if len(faces) != expected:
        raise AssessmentError(
            f"normal roll expected {expected} results for {len(commands)} command(s), got {len(faces)}"
        )

    totals: list[CommandTotal] = []
    cursor = 0
    for command in commands:
        taken = tuple(faces[cursor:cursor + command.coefficient])
        cursor += command.coefficient
        running = sum(taken)
        totals.append(
            CommandTotal(
                command=command,
                faces=taken,
                running=running,
                subtotal=running + command.modifier,
                natural_max=tuple(f for f in taken if _is_d20(command) and f == NATURAL_MAX),
                natural_min=tuple(f for f in taken if _is_d20(command) and f == NATURAL_MIN),
            )
        )

    return RollResult(
        mode=RollMode.NORMAL,
        commands=tuple(totals),
        total=sum(t.subtotal for t in totals),
    )


def _single_command(mode: RollMode, faces: Sequence[int], commands: Sequence[RollCommand]) -> RollCommand:
    if len(commands) != 1:
        raise AssessmentError(f"{mode.value} roll takes exactly one command, got {len(commands)}")
    if len(faces) != 2:
        raise AssessmentError(f"cannot assess a {mode.value} roll on {len(faces)} dice (expected 2)")
    return commands[0]


def _pick(mode: RollMode, faces: Sequence[int], commands: Sequence[RollCommand]) -> RollResult:
    command = _single_command(mode, faces, commands)
    selected = max(faces) if mode is RollMode.ADVANTAGE else min(faces)
    crit = _is_d20(command)
    return RollResult(
        mode=mode,
        commands=(
            CommandTotal(
                command=command,
                faces=tuple(faces),
                running=selected,
                subtotal=selected + command.modifier,
                natural_max=(selected,) if crit and selected == NATURAL_MAX else (),
                natural_min=(selected,) if crit and selected == NATURAL_MIN else (),
            ),
        ),
        total=selected + command.modifier,
        selected=selected,
    )


def percent_sum(tens: int, ones: int) -> int:
    """
    Tens (0..90) plus ones (0..9); a double zero is 100.

    The ones die reads 0 as 0, so 10 + 0 = 10 and only 00 + 0 wraps to 100.
    """
    total = tens + ones
    return 100 if total == 0 else total


def _percentile(faces: Sequence[int], commands: Sequence[RollCommand]) -> RollResult:
    command = _single_command(RollMode.PERCENTILE, faces, commands)
    tens, ones = faces[0], faces[1]
    selected = percent_sum(tens, ones)
    return RollResult(
        mode=RollMode.PERCENTILE,
        commands=(
            CommandTotal(
                command=command,
                faces=(tens, ones),
                running=selected,
                subtotal=selected + command.modifier,
            ),
        ),
        total=selected + command.modifier,
        selected=selected,
    )


def resolve(mode: RollMode, faces: Sequence[int], commands: Sequence[RollCommand]) -> RollResult:
    """
    Reduce settled faces (in die id order) to a result.

    Raises AssessmentError when the number of faces does not fit the mode;
    it never guesses which dice to keep.
    """
    faces = list(faces)
    commands = list(commands)
    if mode is RollMode.NORMAL:
        return _sum_normal(faces, commands)
    if mode in (RollMode.ADVANTAGE, RollMode.DISADVANTAGE):
        return _pick(mode, faces, commands)
    if mode is RollMode.PERCENTILE:
        return _percentile(faces, commands)
    raise AssessmentError(f"unknown roll mode: {mode!r}")
