"""Result types returned by engine operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from cruxfade.models import Card, CombatOutcome


@dataclass
class ActionResult:
    """Outcome of a player-facing operation.

    Attributes:
        success: Whether the action achieved its goal. Rejected actions and
            gameplay failures (a failed flee, a failed hazard) both report
            False; ``rejected`` tells them apart.
        message: Human-readable summary, also written to the player log.
        rejected: The action was refused and the state left unchanged.
        outcome: Combat outcome when the action ended a fight.
        roll: Die face rolled, if any.
        total: Roll plus modifiers, for checks.
        damage: Damage dealt or taken.
        data: Extra action-specific values.
    """

    success: bool
    message: str = ""
    rejected: bool = False
    outcome: CombatOutcome | None = None
    roll: int | None = None
    total: int | None = None
    damage: int = 0
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def refused(cls, message: str, **data: Any) -> ActionResult:
        """Result for an action rejected without touching the state."""
        return cls(success=False, message=message, rejected=True, data=data)


@dataclass
class CardAddResult:
    """Outcome of adding a card to the hand.

    Attributes:
        added: The card is now in hand.
        card: The card that was offered.
        discarded: Card pushed out to make room, for forced adds.
    """

    added: bool
    card: Card
    discarded: Card | None = None

    @property
    def overflow(self) -> Card | None:
        """The rejected card when the hand was full."""
        return None if self.added else self.card


__all__ = [
    "ActionResult",
    "CardAddResult",
]
