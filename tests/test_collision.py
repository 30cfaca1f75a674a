from __future__ import annotations

import random

import pytest

from dice_arena.collision import bounce, detect_wall, will_collide
from dice_arena.directions import Direction
from dice_arena.engine import movement
from dice_arena.models import Arena

D = Direction
ARENA = Arena(width=20, height=10)


class _Fixed:
    """Stand-in RNG whose random() replays fixed values."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


# ---- diagonal single-wall table: every entry on its own ----

@pytest.mark.parametrize(
    "direction, wall, redirect, expected",
    [
        (D.UP_LEFT, False, False, D.DOWN_LEFT),
        (D.UP_LEFT, True, False, D.UP_RIGHT),
        (D.UP_LEFT, False, True, D.DOWN),
        (D.UP_LEFT, True, True, D.RIGHT),
        (D.UP_RIGHT, False, False, D.DOWN_RIGHT),
        (D.UP_RIGHT, True, False, D.UP_LEFT),
        (D.UP_RIGHT, False, True, D.DOWN),
        (D.UP_RIGHT, True, True, D.LEFT),
        (D.DOWN_LEFT, False, False, D.UP_LEFT),
        (D.DOWN_LEFT, True, False, D.DOWN_RIGHT),
        (D.DOWN_LEFT, False, True, D.UP),
        (D.DOWN_LEFT, True, True, D.RIGHT),
        (D.DOWN_RIGHT, False, False, D.UP_RIGHT),
        (D.DOWN_RIGHT, True, False, D.DOWN_LEFT),
        (D.DOWN_RIGHT, False, True, D.UP),
        (D.DOWN_RIGHT, True, True, D.LEFT),
    ],
)
def test_diagonal_bounce_entry(direction: Direction, wall: bool, redirect: bool, expected: Direction) -> None:
    # option is a coin toss that diagonals ignore
    assert bounce(direction, wall, redirect=redirect, option=False) is expected
    assert bounce(direction, wall, redirect=redirect, option=True) is expected


@pytest.mark.parametrize(
    "direction, straight, option_false, option_true",
    [
        (D.UP, D.DOWN, D.DOWN_LEFT, D.DOWN_RIGHT),
        (D.DOWN, D.UP, D.UP_LEFT, D.UP_RIGHT),
        (D.LEFT, D.RIGHT, D.UP_RIGHT, D.DOWN_RIGHT),
        (D.RIGHT, D.LEFT, D.UP_LEFT, D.DOWN_LEFT),
    ],
)
def test_cardinal_bounce(direction, straight, option_false, option_true):
    for wall in (True, False):
        assert bounce(direction, wall, redirect=False, option=False) is straight
        assert bounce(direction, wall, redirect=False, option=True) is straight
        assert bounce(direction, wall, redirect=True, option=False) is option_false
        assert bounce(direction, wall, redirect=True, option=True) is option_true


def test_none_never_bounces():
    assert bounce(D.NONE, True, redirect=True, option=True) is D.NONE


def test_will_collide_cardinal_surfaces():
    assert will_collide(D.UP, D.UP)
    assert will_collide(D.UP_LEFT, D.UP)
    assert will_collide(D.UP_RIGHT, D.UP)
    assert not will_collide(D.LEFT, D.UP)
    assert not will_collide(D.DOWN, D.UP)
    assert will_collide(D.DOWN_LEFT, D.LEFT)
    assert not will_collide(D.RIGHT, D.LEFT)
    assert not will_collide(D.UP, D.NONE)


def test_will_collide_corner_surface():
    hits = {d for d in Direction if will_collide(d, D.UP_LEFT)}
    assert hits == {D.UP, D.LEFT, D.UP_LEFT, D.UP_RIGHT, D.DOWN_LEFT}


# ---- detect_wall ----

@pytest.mark.parametrize(
    "position, direction, expected",
    [
        ((1, 1), D.UP_LEFT, D.DOWN_RIGHT),
        ((1, 1), D.UP, D.DOWN_RIGHT),
        ((1, 1), D.LEFT, D.DOWN_RIGHT),
        ((20, 1), D.UP_RIGHT, D.DOWN_LEFT),
        ((20, 1), D.RIGHT, D.DOWN_LEFT),
        ((1, 10), D.DOWN_LEFT, D.UP_RIGHT),
        ((1, 10), D.DOWN_RIGHT, D.UP_RIGHT),
        ((20, 10), D.DOWN_RIGHT, D.UP_LEFT),
        ((20, 10), D.UP_RIGHT, D.UP_LEFT),
    ],
)
def test_corner_bounce_is_exact_diagonal_opposite(position, direction, expected):
    # deterministic: no RNG is consulted at corners
    assert detect_wall(position, direction, ARENA, rng=_Fixed()) is expected


@pytest.mark.parametrize(
    "position, direction",
    [
        ((1, 1), D.DOWN),
        ((1, 1), D.RIGHT),
        ((1, 1), D.DOWN_RIGHT),
        ((20, 10), D.UP_LEFT),
    ],
)
def test_corner_without_incidence_keeps_direction(position, direction):
    assert detect_wall(position, direction, ARENA, rng=_Fixed()) is direction


def test_interior_never_changes_direction():
    for d in Direction:
        assert detect_wall((10, 5), d, ARENA, rng=_Fixed()) is d


def test_single_wall_straight_and_redirect():
    # 0.9 -> no redirect; second draw is the coin toss
    assert detect_wall((1, 5), D.LEFT, ARENA, rng=_Fixed(0.9, 0.1)) is D.RIGHT
    # 0.1 < 1/5 -> redirect; coin 0.9 -> option False
    assert detect_wall((1, 5), D.LEFT, ARENA, rng=_Fixed(0.1, 0.9)) is D.UP_RIGHT
    assert detect_wall((10, 10), D.DOWN, ARENA, rng=_Fixed(0.1, 0.9)) is D.UP_LEFT
    # side walls are "wall", floor/ceiling are not
    assert detect_wall((20, 5), D.UP_RIGHT, ARENA, rng=_Fixed(0.9, 0.1)) is D.UP_LEFT
    assert detect_wall((10, 1), D.UP_RIGHT, ARENA, rng=_Fixed(0.9, 0.1)) is D.DOWN_RIGHT


def test_single_wall_moving_away_keeps_direction():
    assert detect_wall((1, 5), D.RIGHT, ARENA, rng=_Fixed()) is D.RIGHT
    assert detect_wall((10, 1), D.DOWN_LEFT, ARENA, rng=_Fixed()) is D.DOWN_LEFT


def test_two_digit_face_moves_right_wall_in_one_column():
    assert detect_wall((19, 5), D.RIGHT, ARENA, two_digits=False, rng=_Fixed()) is D.RIGHT
    assert detect_wall((19, 5), D.RIGHT, ARENA, two_digits=True, rng=_Fixed(0.9, 0.1)) is D.LEFT


def test_detect_wall_then_move_never_leaves_arena():
    arena = Arena(width=6, height=4)
    rng = random.Random(5)
    for col in range(1, arena.width + 1):
        for row in range(1, arena.height + 1):
            for d in Direction:
                for two_digits in (False, True):
                    new_dir = detect_wall((col, row), d, arena, two_digits=two_digits, rng=rng)
                    assert arena.contains(movement((col, row), new_dir))
