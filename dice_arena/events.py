from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DieEvent:
    """
    State a die reports after one step: the face now showing and where it is.

    step counts from 1 per die, so each die's events are ordered even when
    several dice interleave on the shared queue.
    """

    die_id: int
    face: int
    position: tuple[int, int]
    step: int = 0
