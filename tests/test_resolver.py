from __future__ import annotations

import pytest

from dice_arena.errors import AssessmentError, DiceArenaError
from dice_arena.kinds import Kind
from dice_arena.models import RollCommand, RollMode
from dice_arena.resolver import percent_sum, resolve


def test_normal_single_command_with_modifier():
    result = resolve(RollMode.NORMAL, [4, 2, 5], [RollCommand(3, Kind.D6, 2)])
    assert len(result.commands) == 1
    assert result.commands[0].running == 11
    assert result.commands[0].subtotal == 13
    assert result.total == 13
    assert result.selected is None


def test_normal_consumes_faces_in_command_order():
    commands = [RollCommand(2, Kind.D6, 1), RollCommand(1, Kind.D20, -2)]
    result = resolve(RollMode.NORMAL, [3, 4, 20], commands)

    assert [c.faces for c in result.commands] == [(3, 4), (20,)]
    assert [c.subtotal for c in result.commands] == [8, 18]
    assert result.total == 26
    assert result.commands[1].natural_max == (20,)
    assert result.commands[0].natural_max == ()
    assert result.natural_max and not result.natural_min


def test_natural_flags_only_apply_to_d20():
    result = resolve(RollMode.NORMAL, [1, 12], [RollCommand(2, Kind.D12)])
    assert not result.natural_min
    result = resolve(RollMode.NORMAL, [1, 20], [RollCommand(2, Kind.D20)])
    assert result.commands[0].natural_min == (1,)
    assert result.commands[0].natural_max == (20,)
    # flags never change the numbers
    assert result.total == 21


def test_normal_rejects_mismatched_face_count():
    with pytest.raises(AssessmentError):
        resolve(RollMode.NORMAL, [1, 2], [RollCommand(3, Kind.D6)])


def test_advantage_takes_max():
    result = resolve(RollMode.ADVANTAGE, [15, 20], [RollCommand(1, Kind.D20)])
    assert result.selected == 20
    assert result.total == 20
    assert result.natural_max


def test_disadvantage_takes_min():
    result = resolve(RollMode.DISADVANTAGE, [15, 20], [RollCommand(1, Kind.D20, -1)])
    assert result.selected == 15
    assert result.total == 14
    assert not result.natural_max


def test_advantage_flags_only_the_selected_die():
    result = resolve(RollMode.DISADVANTAGE, [1, 20], [RollCommand(1, Kind.D20)])
    assert result.natural_min and not result.natural_max


@pytest.mark.parametrize("mode", [RollMode.ADVANTAGE, RollMode.DISADVANTAGE, RollMode.PERCENTILE])
def test_special_modes_refuse_three_dice(mode: RollMode) -> None:
    with pytest.raises(AssessmentError):
        resolve(mode, [15, 20, 3], [RollCommand(1, Kind.D20)])


@pytest.mark.parametrize("mode", [RollMode.ADVANTAGE, RollMode.PERCENTILE])
def test_special_modes_refuse_a_single_die(mode: RollMode) -> None:
    with pytest.raises(DiceArenaError):
        resolve(mode, [15], [RollCommand(1, Kind.D20)])


def test_special_modes_take_one_command():
    with pytest.raises(AssessmentError):
        resolve(RollMode.ADVANTAGE, [3, 4], [RollCommand(1, Kind.D6), RollCommand(1, Kind.D6)])


@pytest.mark.parametrize(
    "tens, ones, expected",
    [
        (0, 0, 100),
        (0, 7, 7),
        (10, 0, 10),
        (90, 9, 99),
        (90, 0, 90),
    ],
)
def test_percent_sum(tens: int, ones: int, expected: int) -> None:
    assert percent_sum(tens, ones) == expected


def test_percentile_double_zero_is_one_hundred_plus_modifier():
    result = resolve(RollMode.PERCENTILE, [0, 0], [RollCommand(1, Kind.PERCENT_TENS, 5)])
    assert result.selected == 100
    assert result.total == 105
    assert result.faces == (0, 0)
