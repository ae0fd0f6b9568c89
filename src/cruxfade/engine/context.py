"""Explicit context passed to every engine operation.

Engine functions never reach for module-level state: the run record,
the content pack and the tuning settings all travel in a GameContext.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cruxfade.core.config import GameSettings
from cruxfade.core.exceptions import IllegalActionError, InvalidGameStateError
from cruxfade.core.logging import get_logger
from cruxfade.engine.dice import DiceRoller


if TYPE_CHECKING:
    from cruxfade.content.models import ContentPack
    from cruxfade.core.rng import RngStream
    from cruxfade.models import GameState, PartyMember

logger = get_logger(__name__)


@dataclass
class GameContext:
    """Everything an engine operation may read or mutate.

    Attributes:
        state: The run state, mutated in place.
        content: Static content lookups.
        settings: Gameplay tuning.
    """

    state: GameState
    content: ContentPack
    settings: GameSettings = field(default_factory=GameSettings)

    @property
    def rng(self) -> RngStream:
        return self.state.rng

    @property
    def dice(self) -> DiceRoller:
        return DiceRoller(self.state.rng)

    def log(self, message: str) -> None:
        """Write a player log entry."""
        self.state.add_log(message, limit=self.settings.log_limit)
        logger.debug("Log entry", entry=message)

    def ensure_running(self, action: str) -> None:
        """Reject any action once the run has ended.

        Raises:
            InvalidGameStateError: If the run is over.
        """
        if self.state.over:
            raise InvalidGameStateError(
                "The run is over",
                current_state="victory" if self.state.victory else "defeat",
                details={"action": action},
            )

    def ensure_no_combat(self, action: str) -> None:
        """Reject an action that is only allowed outside combat.

        Raises:
            InvalidGameStateError: While a fight is in progress.
        """
        if self.state.combat.active:
            raise InvalidGameStateError(
                "Not possible during combat",
                current_state=self.state.combat.phase.value,
                expected_states=["idle", "resolved"],
                details={"action": action},
            )

    def living_leader(self, action: str) -> PartyMember:
        """The acting leader, who must be alive.

        Raises:
            IllegalActionError: If there is no living leader.
        """
        leader = self.state.leader
        if leader is None or not leader.is_alive:
            raise IllegalActionError("No living party leader can act", action=action)
        return leader


__all__ = ["GameContext"]
