from __future__ import annotations

import random

from dice_arena.directions import Direction
from dice_arena.models import Arena

# Reciprocal of the chance that a wall bounce is redirected.
REDIRECT_CHANCE = 5

D = Direction

# Cardinal bounces: (straight reflection, (redirect option False, redirect option True))
CARDINAL_BOUNCES: dict[Direction, tuple[Direction, tuple[Direction, Direction]]] = {
    D.UP: (D.DOWN, (D.DOWN_LEFT, D.DOWN_RIGHT)),
    D.DOWN: (D.UP, (D.UP_LEFT, D.UP_RIGHT)),
    D.LEFT: (D.RIGHT, (D.UP_RIGHT, D.DOWN_RIGHT)),
    D.RIGHT: (D.LEFT, (D.UP_LEFT, D.DOWN_LEFT)),
}

# Diagonal bounces keyed by (direction, wall, redirect).
# wall=True is a vertical surface (side wall), wall=False is the floor or ceiling.
# Diagonals only ever leave a single wall diagonally or inward.
DIAGONAL_BOUNCES: dict[tuple[Direction, bool, bool], Direction] = {
    (D.UP_LEFT, False, False): D.DOWN_LEFT,
    (D.UP_LEFT, True, False): D.UP_RIGHT,
    (D.UP_LEFT, False, True): D.DOWN,
    (D.UP_LEFT, True, True): D.RIGHT,
    (D.UP_RIGHT, False, False): D.DOWN_RIGHT,
    (D.UP_RIGHT, True, False): D.UP_LEFT,
    (D.UP_RIGHT, False, True): D.DOWN,
    (D.UP_RIGHT, True, True): D.LEFT,
    (D.DOWN_LEFT, False, False): D.UP_LEFT,
    (D.DOWN_LEFT, True, False): D.DOWN_RIGHT,
    (D.DOWN_LEFT, False, True): D.UP,
    (D.DOWN_LEFT, True, True): D.RIGHT,
    (D.DOWN_RIGHT, False, False): D.UP_RIGHT,
    (D.DOWN_RIGHT, True, False): D.DOWN_LEFT,
    (D.DOWN_RIGHT, False, True): D.UP,
    (D.DOWN_RIGHT, True, True): D.LEFT,
}

# Corner surface -> directions that do NOT run into it.
_CORNER_MISSES: dict[Direction, frozenset[Direction]] = {
    D.UP_LEFT: frozenset({D.NONE, D.DOWN, D.RIGHT, D.DOWN_RIGHT}),
    D.UP_RIGHT: frozenset({D.NONE, D.DOWN, D.LEFT, D.DOWN_LEFT}),
    D.DOWN_LEFT: frozenset({D.NONE, D.UP, D.RIGHT, D.UP_RIGHT}),
    D.DOWN_RIGHT: frozenset({D.NONE, D.UP, D.LEFT, D.UP_LEFT}),
}

# Corner surface -> direction a die leaves that corner with.
CORNER_EXITS: dict[Direction, Direction] = {
    D.UP_LEFT: D.DOWN_RIGHT,
    D.UP_RIGHT: D.DOWN_LEFT,
    D.DOWN_LEFT: D.UP_RIGHT,
    D.DOWN_RIGHT: D.UP_LEFT,
}


def will_collide(direction: Direction, surface: Direction) -> bool:
    """
    Is a die moving in `direction` heading into `surface`?

    surface is the side the obstacle sits on relative to the die (the ceiling
    is UP, the top-left corner is UP_LEFT).
    """
    if surface is D.NONE:
        return False
    if surface.is_diagonal:
        return direction not in _CORNER_MISSES[surface]
    sc, sr = surface.vector
    dc, dr = direction.vector
    if sc != 0:
        return dc == sc
    return dr == sr


def bounce(direction: Direction, wall: bool, *, redirect: bool, option: bool) -> Direction:
    """Pure bounce lookup for a single-surface collision."""
    if direction is D.NONE:
        return D.NONE
    if direction.is_diagonal:
        return DIAGONAL_BOUNCES[(direction, wall, redirect)]
    straight, redirects = CARDINAL_BOUNCES[direction]
    if not redirect:
        return straight
    return redirects[int(option)]


def random_bounce(direction: Direction, wall: bool, rng: random.Random | None = None) -> Direction:
    rng = rng if rng is not None else random
    redirect = rng.random() < 1.0 / REDIRECT_CHANCE
    option = rng.random() < 0.5
    return bounce(direction, wall, redirect=redirect, option=option)


def detect_wall(
        position: tuple[int, int],
        direction: Direction,
        arena: Arena,
        *,
        two_digits: bool = False,
        rng: random.Random | None = None,
) -> Direction:
    """
    Return the direction a die should take before its next move.

    Rules:
    - Corners are checked first. A die running into a corner leaves along the
      exact diagonal opposite, whatever its incidence.
    - Then left wall, right wall, floor, ceiling. A die running into one of
      them bounces (see bounce()).
    - No collision: direction is returned unchanged.

    A two-digit face treats the right wall as one column closer so the second
    digit never overflows. The position itself is never changed here.
    """
    l_wall, ceiling = arena.left_wall, arena.ceiling
    r_wall, floor = arena.right_wall, arena.floor
    if two_digits:
        r_wall -= 1

    col, row = position
    at_left = col <= l_wall
    at_right = col >= r_wall
    at_top = row <= ceiling
    at_bottom = row >= floor

    corner: Direction | None = None
    if at_left and at_top:
        corner = D.UP_LEFT
    elif at_right and at_top:
        corner = D.UP_RIGHT
    elif at_left and at_bottom:
        corner = D.DOWN_LEFT
    elif at_right and at_bottom:
        corner = D.DOWN_RIGHT

    if corner is not None:
        if will_collide(direction, corner):
            return CORNER_EXITS[corner]
        return direction

    if at_left:
        surface, wall = D.LEFT, True
    elif at_right:
        surface, wall = D.RIGHT, True
    elif at_bottom:
        surface, wall = D.DOWN, False
    elif at_top:
        surface, wall = D.UP, False
    else:
        return direction

    if will_collide(direction, surface):
        return random_bounce(direction, wall, rng)
    return direction
