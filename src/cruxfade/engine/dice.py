"""Dice rolling on top of the run's random stream.

Every roll draws from the RngStream held in the run state, never from a
process-wide generator, so rolls replay exactly from the seed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cruxfade.core.constants import CHECK_DIE
from cruxfade.core.logging import get_logger


if TYPE_CHECKING:
    from cruxfade.core.rng import RngStream

logger = get_logger(__name__)


@dataclass(frozen=True)
class DiceRoll:
    """A single die roll.

    Attributes:
        sides: Number of faces on the die.
        value: Face rolled.
    """

    sides: int
    value: int

    @property
    def is_critical(self) -> bool:
        return self.value == self.sides

    @property
    def is_fumble(self) -> bool:
        return self.value == 1


@dataclass(frozen=True)
class CheckResult:
    """A die roll plus modifier compared against a difficulty.

    Attributes:
        roll: The die roll.
        modifier: Stat added to the roll.
        difficulty: Total needed to succeed.
    """

    roll: DiceRoll
    modifier: int
    difficulty: int

    @property
    def total(self) -> int:
        return self.roll.value + self.modifier

    @property
    def success(self) -> bool:
        return self.total >= self.difficulty


class DiceRoller:
    """Rolls dice against a run's random stream.

    Example:
        >>> roller = DiceRoller(RngStream.from_seed(7))
        >>> roll = roller.roll(6)
        >>> 1 <= roll.value <= 6
        True
    """

    def __init__(self, rng: RngStream) -> None:
        """Initialize the roller.

        Args:
            rng: Stream every roll draws from.
        """
        self._rng = rng

    def roll(self, sides: int) -> DiceRoll:
        """Roll one die.

        Args:
            sides: Number of faces.

        Returns:
            The roll.

        Raises:
            ValueError: If ``sides`` is below 1.
        """
        if sides < 1:
            raise ValueError(f"A die needs at least one side, got {sides}")
        result = DiceRoll(sides=sides, value=self._rng.next_int(1, sides))
        logger.debug("Dice rolled", sides=sides, value=result.value)
        return result

    def check(self, modifier: int, difficulty: int, *, sides: int = CHECK_DIE) -> CheckResult:
        """Roll a die, add ``modifier`` and compare against ``difficulty``.

        Args:
            modifier: Stat bonus added to the roll.
            difficulty: Total needed to succeed.
            sides: Die size, d20 by default.

        Returns:
            The check result.
        """
        result = CheckResult(roll=self.roll(sides), modifier=modifier, difficulty=difficulty)
        logger.debug(
            "Check rolled",
            roll=result.roll.value,
            modifier=modifier,
            total=result.total,
            difficulty=difficulty,
            success=result.success,
        )
        return result


__all__ = [
    "DiceRoll",
    "CheckResult",
    "DiceRoller",
]
