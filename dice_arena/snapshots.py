from __future__ import annotations

from dataclasses import dataclass

from dice_arena.kinds import Kind


@dataclass(frozen=True, slots=True)
class DieSnapshot:
    die_id: int
    kind: Kind
    face: int
    position: tuple[int, int]


@dataclass(frozen=True, slots=True)
class TableSnapshot:
    """Last known state of every die that has reported, in id order."""

    dice: tuple[DieSnapshot, ...]
    settled: bool

    def faces(self) -> list[int]:
        return [d.face for d in self.dice]

    def get(self, die_id: int) -> DieSnapshot | None:
        for d in self.dice:
            if d.die_id == die_id:
                return d
        return None
