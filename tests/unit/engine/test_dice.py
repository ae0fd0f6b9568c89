"""Tests for dice rolling on the run's random stream."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cruxfade.core.rng import RngStream
from cruxfade.engine.dice import CheckResult, DiceRoll, DiceRoller


if TYPE_CHECKING:
    from conftest import ScriptedRng


class TestDiceRoll:
    """Tests for DiceRoll."""

    def test_critical_and_fumble(self) -> None:
        """Test natural max and natural one."""
        assert DiceRoll(sides=20, value=20).is_critical
        assert DiceRoll(sides=20, value=1).is_fumble
        assert not DiceRoll(sides=6, value=3).is_critical


class TestCheckResult:
    """Tests for CheckResult."""

    def test_meets_difficulty(self) -> None:
        """Test reaching the difficulty exactly succeeds."""
        check = CheckResult(roll=DiceRoll(sides=20, value=10), modifier=2, difficulty=12)
        assert check.total == 12
        assert check.success

    def test_below_difficulty(self) -> None:
        """Test falling short fails."""
        check = CheckResult(roll=DiceRoll(sides=20, value=9), modifier=2, difficulty=12)
        assert not check.success


class TestDiceRoller:
    """Tests for DiceRoller."""

    def test_roll_in_range(self) -> None:
        """Test rolls stay within the die."""
        roller = DiceRoller(RngStream.from_seed(5))
        assert all(1 <= roller.roll(6).value <= 6 for _ in range(200))

    def test_roll_draws_from_stream(self) -> None:
        """Test each roll consumes one stream value."""
        rng = RngStream.from_seed(12345)
        roll = DiceRoller(rng).roll(6)

        assert roll.value == 1
        assert rng.draws == 1

    def test_roll_rejects_zero_sides(self) -> None:
        """Test a die needs at least one face."""
        with pytest.raises(ValueError):
            DiceRoller(RngStream.from_seed(5)).roll(0)

    def test_forced_face(self, scripted_stream: ScriptedRng) -> None:
        """Test scripted values land on the intended face."""
        scripted_stream.push_rolls(6, 6, 1, 4)
        roller = DiceRoller(scripted_stream)

        assert [roller.roll(6).value for _ in range(3)] == [6, 1, 4]

    def test_check_defaults_to_d20(self, scripted_stream: ScriptedRng) -> None:
        """Test checks roll a d20 and add the modifier."""
        scripted_stream.push_rolls(20, 15)
        check = DiceRoller(scripted_stream).check(3, 18)

        assert check.roll.sides == 20
        assert check.total == 18
        assert check.success
