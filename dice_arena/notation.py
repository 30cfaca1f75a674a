from __future__ import annotations

import re
from dataclasses import dataclass

from dice_arena.errors import NotationError
from dice_arena.kinds import Kind
from dice_arena.models import RollCommand, RollMode

DIE_LIMIT = 99
COEFFICIENT_LIMIT = 99
MODIFIER_LIMIT = 99  # absolute value

ADV_PREFIX = "adv"
DISADV_PREFIX = "disadv"

_SEPARATORS = re.compile(r"[,/]")


@dataclass(frozen=True)
class RollRequest:
    mode: RollMode
    commands: tuple[RollCommand, ...]
    dice: tuple[Kind, ...]


def expand_dice(mode: RollMode, commands: list[RollCommand] | tuple[RollCommand, ...]) -> list[Kind]:
    """
    Flatten commands into the dice to throw, in id order.

    Normal rolls throw `coefficient` copies; advantage/disadvantage always
    throw two; percentile throws a tens die then a ones die.
    """
    dice: list[Kind] = []
    for command in commands:
        if mode is RollMode.NORMAL:
            dice.extend([command.kind] * command.coefficient)
        elif mode in (RollMode.ADVANTAGE, RollMode.DISADVANTAGE):
            dice.extend([command.kind, command.kind])
        else:
            dice.extend([Kind.PERCENT_TENS, Kind.PERCENT_ONES])
    return dice


def _coefficient(text: str) -> int:
    head = text.split("d", 1)[0].strip()
    if not head:
        return 1
    if not head.isdecimal():
        raise NotationError("Coefficient error")
    return int(head)


def _kind(text: str) -> Kind:
    body = re.split(r"[+-]", text, maxsplit=1)[0].split("d", 1)[1].strip()
    if body == "%":
        return Kind.PERCENT_TENS
    if not body.isdecimal():
        raise NotationError("Die type error")
    try:
        return Kind.from_sides(int(body))
    except ValueError as e:
        raise NotationError("Die type error") from e


def _modifier(text: str) -> int:
    ops = [c for c in text if c in "+-"]
    if len(ops) > 1:
        raise NotationError("Modifier error")
    if not ops:
        return 0
    tail = text.split(ops[0], 1)[1].strip()
    if not tail.isdecimal():
        raise NotationError("Modifier error")
    value = int(tail)
    return value if ops[0] == "+" else -value


def parse_command(text: str) -> tuple[int, Kind, int]:
    """Parse one `CdK+M` term into (coefficient, kind, modifier)."""
    text = text.strip()
    if "d" not in text:
        raise NotationError("Coefficient error")
    return _coefficient(text), _kind(text), _modifier(text)


def _validate(mode: RollMode, coefficient: int, kind: Kind, modifier: int, command_count: int) -> None:
    if coefficient == 0:
        raise NotationError("Coefficient cannot be zero")
    if coefficient > COEFFICIENT_LIMIT:
        raise NotationError("Coefficient limit exceeded")
    if abs(modifier) > MODIFIER_LIMIT:
        raise NotationError("Modifier limit exceeded")
    if mode is not RollMode.NORMAL and coefficient != 1:
        raise NotationError("You cannot have a coefficient on this roll")
    if mode in (RollMode.ADVANTAGE, RollMode.DISADVANTAGE) and kind is Kind.PERCENT_TENS:
        raise NotationError("You cannot roll advantage/disadvantage on a d100")
    if mode is not RollMode.NORMAL and command_count != 1:
        raise NotationError(
            "You cannot throw extra dice on advantage, disadvantage, and percentile rolls"
        )


def parse_roll(text: str) -> RollRequest:
    """
    Parse a roll line such as "2d6+1, d20" or "adv d20+3" or "d%".

    Commands are separated by ',' or '/'. A d100 (or d%) makes the whole roll
    a percentile roll.
    """
    line = text.strip().lower()
    if not line:
        raise NotationError("Empty roll")
    parts = _SEPARATORS.split(line)

    mode = RollMode.NORMAL
    commands: list[RollCommand] = []
    for part in parts:
        part = part.strip()
        if part.startswith(DISADV_PREFIX):
            mode = RollMode.DISADVANTAGE
            part = part[len(DISADV_PREFIX):].strip()
        elif part.startswith(ADV_PREFIX):
            mode = RollMode.ADVANTAGE
            part = part[len(ADV_PREFIX):].strip()

        coefficient, kind, modifier = parse_command(part)
        if kind is Kind.PERCENT_TENS and mode is RollMode.NORMAL:
            mode = RollMode.PERCENTILE
        _validate(mode, coefficient, kind, modifier, len(parts))
        commands.append(RollCommand(coefficient=coefficient, kind=kind, modifier=modifier))

    dice = expand_dice(mode, commands)
    if len(dice) > DIE_LIMIT:
        raise NotationError("Cannot roll this many dice")

    return RollRequest(mode=mode, commands=tuple(commands), dice=tuple(dice))
