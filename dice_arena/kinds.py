from __future__ import annotations

import random
from enum import Enum


class Kind(str, Enum):
    """
    Die types that can be thrown.

    PERCENT_TENS and PERCENT_ONES are the two d10s of a percentile roll;
    the tens die always takes id 0.
    """

    D2 = "d2"
    D4 = "d4"
    D6 = "d6"
    D10 = "d10"
    D12 = "d12"
    D20 = "d20"
    PERCENT_TENS = "d100"
    PERCENT_ONES = "d100-ones"

    @property
    def max_face(self) -> int:
        """Upper bound of the raw uniform draw."""
        return _MAX_FACE[self]

    @property
    def acceleration(self) -> int:
        """Speed lost per step (always negative)."""
        return _ACCELERATION[self]

    @property
    def sides(self) -> int:
        """Number shown in roll notation (d100 for both percentile dice)."""
        if self in (Kind.PERCENT_TENS, Kind.PERCENT_ONES):
            return 100
        return self.max_face

    def display_value(self, raw: int) -> int:
        if self is Kind.PERCENT_TENS:
            return 10 * (raw - 1)  # 0..90
        if self is Kind.PERCENT_ONES:
            return raw - 1  # 0..9
        return raw

    def flip(self, rng: random.Random | None = None) -> int:
        """Draw a new face that lands up."""
        rng = rng if rng is not None else random
        return self.display_value(rng.randint(1, self.max_face))

    def is_two_digits(self, face: int) -> bool:
        # A tens die showing 0 renders as "00".
        return face >= 10 or self is Kind.PERCENT_TENS

    @classmethod
    def from_sides(cls, sides: int) -> Kind:
        for kind in (cls.D2, cls.D4, cls.D6, cls.D10, cls.D12, cls.D20, cls.PERCENT_TENS):
            if kind.sides == sides:
                return kind
        raise ValueError(f"no die with {sides} sides")


_MAX_FACE: dict[Kind, int] = {
    Kind.D2: 2,
    Kind.D4: 4,
    Kind.D6: 6,
    Kind.D10: 10,
    Kind.D12: 12,
    Kind.D20: 20,
    Kind.PERCENT_TENS: 10,
    Kind.PERCENT_ONES: 10,
}

_ACCELERATION: dict[Kind, int] = {
    Kind.D2: -10,
    Kind.D4: -7,
    Kind.D6: -4,
    Kind.D10: -3,
    Kind.D12: -2,
    Kind.D20: -1,
    Kind.PERCENT_TENS: -3,
    Kind.PERCENT_ONES: -3,
}
