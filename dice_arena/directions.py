from __future__ import annotations

import random
from enum import Enum


class Direction(str, Enum):
    """
    Discrete movement vectors on the terminal grid.
    Rows grow downward, so UP moves to row - 1.
    """

    NONE = "NONE"
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UP_LEFT = "UP_LEFT"
    UP_RIGHT = "UP_RIGHT"
    DOWN_LEFT = "DOWN_LEFT"
    DOWN_RIGHT = "DOWN_RIGHT"

    @property
    def vector(self) -> tuple[int, int]:
        return _VECTORS[self]

    @property
    def is_diagonal(self) -> bool:
        dc, dr = _VECTORS[self]
        return dc != 0 and dr != 0

    @classmethod
    def moving(cls) -> tuple[Direction, ...]:
        return tuple(d for d in cls if d is not cls.NONE)

    @classmethod
    def random(cls, rng: random.Random | None = None) -> Direction:
        """Pick uniformly among the 8 moving directions."""
        rng = rng if rng is not None else random
        return rng.choice(cls.moving())


_VECTORS: dict[Direction, tuple[int, int]] = {
    Direction.NONE: (0, 0),
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.UP_LEFT: (-1, -1),
    Direction.UP_RIGHT: (1, -1),
    Direction.DOWN_LEFT: (-1, 1),
    Direction.DOWN_RIGHT: (1, 1),
}
