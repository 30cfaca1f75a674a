from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dice_arena.directions import Direction
from dice_arena.kinds import Kind

MIN_ARENA_WIDTH = 4
MIN_ARENA_HEIGHT = 3


@dataclass(frozen=True, slots=True)
class Arena:
    """
    Rectangular surface the dice roll on, in 1-based terminal cells.

    Walls sit on col 1 / col width and row 1 / row height. A roll takes one
    snapshot of the arena and never re-reads it.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < MIN_ARENA_WIDTH or self.height < MIN_ARENA_HEIGHT:
            raise ValueError(
                f"arena must be at least {MIN_ARENA_WIDTH}x{MIN_ARENA_HEIGHT} "
                f"(got {self.width}x{self.height})"
            )

    @property
    def left_wall(self) -> int:
        return 1

    @property
    def ceiling(self) -> int:
        return 1

    @property
    def right_wall(self) -> int:
        return self.width

    @property
    def floor(self) -> int:
        return self.height

    @property
    def centre(self) -> tuple[int, int]:
        return self.width // 2, self.height // 2

    def contains(self, position: tuple[int, int]) -> bool:
        col, row = position
        return self.left_wall <= col <= self.right_wall and self.ceiling <= row <= self.floor

    def clamp(self, position: tuple[int, int]) -> tuple[int, int]:
        col, row = position
        col = max(self.left_wall, min(self.right_wall, col))
        row = max(self.ceiling, min(self.floor, row))
        return col, row


@dataclass
class Die:
    die_id: int
    kind: Kind
    face: int
    position: tuple[int, int]  # (col, row)
    # Steps per second; decays by kind.acceleration after every step.
    speed: int
    direction: Direction


class RollMode(str, Enum):
    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"
    PERCENTILE = "percentile"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} roll"


@dataclass(frozen=True, slots=True)
class RollCommand:
    """One validated `CdK+M` term of a roll."""

    coefficient: int
    kind: Kind
    modifier: int = 0

    def __post_init__(self) -> None:
        if self.coefficient < 1:
            raise ValueError(f"coefficient must be >= 1 (got {self.coefficient})")

    @property
    def label(self) -> str:
        text = f"{self.coefficient}d{self.kind.sides}"
        if self.modifier > 0:
            text += f"+{self.modifier}"
        elif self.modifier < 0:
            text += f"{self.modifier}"
        return text
