"""Deterministic random stream.

A 32-bit linear congruential generator whose whole state is one integer.
The stream lives inside the run state rather than in a module global, so
every draw is replayable from the seed and any number of independent runs
can share a process.

Example:
    >>> rng = RngStream.from_seed(12345)
    >>> rng.next_int(1, 6)
    1
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")
K = TypeVar("K")

MODULUS = 2**32
MULTIPLIER = 1664525
INCREMENT = 1013904223


def step(state: int) -> tuple[float, int]:
    """Advance a raw generator state.

    Args:
        state: Current 32-bit state.

    Returns:
        The drawn value in [0, 1) and the next state.
    """
    next_state = (state * MULTIPLIER + INCREMENT) % MODULUS
    return next_state / MODULUS, next_state


class RngStream(BaseModel):
    """Seeded random stream with the helpers the engine draws through.

    Attributes:
        seed: Seed the stream was last reset with.
        state: Current generator state.
        draws: Number of values drawn since the last reset.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    seed: int
    state: int = Field(ge=0, lt=MODULUS)
    draws: int = Field(default=0, ge=0)

    @classmethod
    def from_seed(cls, seed: int) -> RngStream:
        """Create a stream reset to ``seed``."""
        return cls(seed=seed, state=seed % MODULUS)

    def reseed(self, seed: int) -> None:
        """Reset the stream; seeds are reduced modulo 2**32."""
        self.seed = seed
        self.state = seed % MODULUS
        self.draws = 0

    def next01(self) -> float:
        """Draw a float in [0, 1)."""
        value, self.state = step(self.state)
        self.draws += 1
        return value

    def next_int(self, low: int, high: int) -> int:
        """Draw an integer in [low, high], both inclusive.

        Raises:
            ValueError: If ``high`` is below ``low``.
        """
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        return math.floor(self.next01() * (high - low + 1)) + low

    def pick(self, items: Sequence[T]) -> T:
        """Uniformly choose one element.

        Raises:
            ValueError: If ``items`` is empty.
        """
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[self.next_int(0, len(items) - 1)]

    def weighted_pick(self, weights: Mapping[K, float]) -> K:
        """Choose a key with probability proportional to its weight.

        Uses one draw scaled by the total weight and walks the entries in
        order, subtracting each weight until the remainder falls inside
        one. Never re-draws; if rounding leaves nothing selected the first
        key wins.

        Raises:
            ValueError: If ``weights`` is empty.
        """
        if not weights:
            raise ValueError("Cannot pick from an empty weight table")
        remainder = self.next01() * sum(weights.values())
        for key, weight in weights.items():
            if remainder < weight:
                return key
            remainder -= weight
        return next(iter(weights))


__all__ = [
    "MODULUS",
    "MULTIPLIER",
    "INCREMENT",
    "step",
    "RngStream",
]
