from __future__ import annotations

from typing import TextIO

from dice_arena.events import DieEvent
from dice_arena.kinds import Kind
from dice_arena.models import Arena
from dice_arena.reporting import GREEN, RED, RESET
from dice_arena.resolver import NATURAL_MAX, NATURAL_MIN
from dice_arena.snapshots import TableSnapshot

CLEAR = "\x1b[2J"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def goto(col: int, row: int) -> str:
    """ANSI cursor move to a 1-based (col, row)."""
    return f"\x1b[{row};{col}H"


def face_text(kind: Kind, face: int) -> str:
    if kind is Kind.PERCENT_TENS and face == 0:
        return "00"
    return str(face)


def crit_color(kind: Kind, face: int) -> str | None:
    """Colour for a settled D20 natural, or None."""
    if kind is not Kind.D20:
        return None
    if face == NATURAL_MAX:
        return GREEN
    if face == NATURAL_MIN:
        return RED
    return None


def draw_col(arena: Arena, col: int, kind: Kind, face: int) -> int:
    """
    Column the face is drawn from. A two-digit face on the last column is
    drawn one column back so it does not overflow; its position is unchanged.
    """
    if col >= arena.right_wall and kind.is_two_digits(face):
        return arena.right_wall - 1
    return col


def render_arena(snapshot: TableSnapshot, arena: Arena, *, color: bool = False) -> str:
    """Plain-text picture of the arena, one line per row."""
    grid = [[" "] * arena.width for _ in range(arena.height)]
    for die in snapshot.dice:
        col, row = arena.clamp(die.position)
        col = draw_col(arena, col, die.kind, die.face)
        text = face_text(die.kind, die.face)
        cells = [c for c in range(col, col + len(text)) if c <= arena.width]
        for c, ch in zip(cells, text):
            grid[row - 1][c - 1] = ch
        paint = crit_color(die.kind, die.face) if color else None
        if paint is not None and cells:
            grid[row - 1][cells[0] - 1] = paint + grid[row - 1][cells[0] - 1]
            grid[row - 1][cells[-1] - 1] += RESET
    return "\n".join("".join(line).rstrip() for line in grid) + "\n"


class LiveTable:
    """
    Draws dice as they move, using cursor addressing on a terminal stream.

    Keeps its own record of where each die was last drawn so it can erase it.
    With color set, redraw() paints settled D20 naturals green (20) or red (1).
    """

    def __init__(self, surface: TextIO, arena: Arena, kinds: dict[int, Kind], *, color: bool = False) -> None:
        self.surface = surface
        self.arena = arena
        self.kinds = dict(kinds)
        self.color = color
        self._drawn: dict[int, tuple[int, int, str]] = {}  # id -> (col, row, text)

    def update(self, event: DieEvent) -> None:
        kind = self.kinds[event.die_id]
        col, row = self.arena.clamp(event.position)
        text = face_text(kind, event.face)
        out = ""
        old = self._drawn.get(event.die_id)
        if old is not None:
            old_col, old_row, old_text = old
            out += goto(old_col, old_row) + " " * len(old_text)
        col = draw_col(self.arena, col, kind, event.face)
        out += goto(col, row) + text
        self._drawn[event.die_id] = (col, row, text)
        self.surface.write(out)
        self.surface.flush()

    def redraw(self, snapshot: TableSnapshot) -> None:
        """Repaint every die; dice erased by overlapping neighbours come back."""
        self.clear()
        out = ""
        for die in snapshot.dice:
            col, row = self.arena.clamp(die.position)
            col = draw_col(self.arena, col, die.kind, die.face)
            text = face_text(die.kind, die.face)
            paint = crit_color(die.kind, die.face) if self.color else None
            out += goto(col, row) + (f"{paint}{text}{RESET}" if paint is not None else text)
            self._drawn[die.die_id] = (col, row, text)
        self.surface.write(out)
        self.surface.flush()

    def clear(self) -> None:
        self.surface.write(CLEAR)
        self.surface.flush()

    def hide_cursor(self) -> None:
        self.surface.write(HIDE_CURSOR)
        self.surface.flush()

    def show_cursor(self) -> None:
        self.surface.write(SHOW_CURSOR)
        self.surface.flush()
