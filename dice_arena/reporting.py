from __future__ import annotations

from dice_arena.models import RollMode
from dice_arena.resolver import CommandTotal, RollResult

# Individual results shown in a one-line summary before it collapses to "...".
DISPLAY_RESULTS = 5

HEADER = "Rolls    Results       Mod  Total"
DIVIDER = "-" * len(HEADER)

GREEN = "\x1b[32m"
RED = "\x1b[31m"
RESET = "\x1b[39m"

# Column layout of the results table (offsets from the left edge).
COMMAND_COL = 0
ARROW_COL = 9
RESULT_COL = 12
BIG_ARROW_COL = 15
RUNNING_COL = 18
MODIFIER_COL = 23
EQUALS_COL = 28
SUM_COL = 30


def _place(cells: list[tuple[int, str, int]]) -> str:
    """Lay out (column, text, visible width) cells on one line."""
    line = ""
    visible = 0
    for col, text, width in cells:
        if visible < col:
            line += " " * (col - visible)
            visible = col
        line += text
        visible += width
    return line.rstrip()


def _face_text(result: RollResult, total: CommandTotal, index: int, face: int, *, color: bool) -> tuple[str, int]:
    plain = str(face)
    if result.mode is RollMode.PERCENTILE and index == 0 and face == 0:
        plain = "00"  # tens die always comes first
    if not color:
        return plain, len(plain)
    if result.mode is RollMode.NORMAL or face == result.selected:
        if face in total.natural_max:
            return f"{GREEN}{plain}{RESET}", len(plain)
        if face in total.natural_min:
            return f"{RED}{plain}{RESET}", len(plain)
    return plain, len(plain)


def _fmt_mod(modifier: int) -> str:
    return f"+ {modifier}" if modifier >= 0 else f"- {abs(modifier)}"


def format_results(result: RollResult, *, color: bool = False) -> str:
    """
    Render the results table: one block per command, each face on its own
    line, the running total, modifier and subtotal on the block's last line.
    Normal rolls end with the grand total.
    """
    label = result.mode.label
    out: list[str] = [label.center(len(DIVIDER)).rstrip(), "", HEADER, DIVIDER]

    for total in result.commands:
        last = len(total.faces) - 1
        for i, face in enumerate(total.faces):
            text, width = _face_text(result, total, i, face, color=color)
            cells: list[tuple[int, str, int]] = []
            if i == 0:
                cells.append((COMMAND_COL, total.command.label, len(total.command.label)))
            cells.append((ARROW_COL, "->", 2))
            cells.append((RESULT_COL, text, width))
            if i == last:
                running = str(total.running)
                mod = _fmt_mod(total.modifier)
                sub = str(total.subtotal)
                cells.extend(
                    [
                        (BIG_ARROW_COL, "=>", 2),
                        (RUNNING_COL, running, len(running)),
                        (MODIFIER_COL, mod, len(mod)),
                        (EQUALS_COL, "=", 1),
                        (SUM_COL, sub, len(sub)),
                    ]
                )
            out.append(_place(cells))
        out.append(DIVIDER)

    if result.mode is RollMode.NORMAL:
        grand = f"= {result.total}"
        out.append(_place([(SUM_COL - 2, grand, len(grand))]))

    return "\n".join(out) + "\n"


def _tail(value: int, modifier: int, total: int) -> str:
    if modifier >= 0:
        return f" => {value} + {modifier} = {total}"
    return f" => {value} - {abs(modifier)} = {total}"


def summarize(result: RollResult, *, color: bool = False) -> str:
    """
    One-line summary of a roll.

    Normal rolls with a single command list up to DISPLAY_RESULTS faces; six
    faces are all shown, more than six show five followed by "...".
    Several commands only report the grand total.
    """
    if result.mode in (RollMode.ADVANTAGE, RollMode.DISADVANTAGE):
        total = result.commands[0]
        shown = [_face_text(result, total, i, f, color=color)[0] for i, f in enumerate(total.faces)]
        return " | ".join(shown) + _tail(result.selected, total.modifier, result.total)

    if result.mode is RollMode.PERCENTILE:
        total = result.commands[0]
        shown = [_face_text(result, total, i, f, color=color)[0] for i, f in enumerate(total.faces)]
        return ", ".join(shown) + _tail(result.selected, total.modifier, result.total)

    if len(result.commands) != 1:
        return str(result.total)

    total = result.commands[0]
    parts: list[str] = []
    for i, face in enumerate(total.faces):
        if i > DISPLAY_RESULTS:
            break
        if i == DISPLAY_RESULTS and len(total.faces) > DISPLAY_RESULTS + 1:
            parts.append("...")
            break
        parts.append(_face_text(result, total, i, face, color=color)[0])

    line = " + ".join(parts)
    mod = total.modifier
    if mod >= 0:
        line += f" + {mod} = {total.running} + {mod} = "
    else:
        line += f" - {abs(mod)} = {total.running} - {abs(mod)} = "
    return line + str(result.total)
