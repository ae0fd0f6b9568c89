"""The run state record.

GameState is the single mutable record of a run. It holds no references
to content or settings; engine operations receive those alongside it in
a GameContext. Everything in it, the RNG stream included, is plain data,
so two runs with the same seed and actions produce identical dumps.
"""

from __future__ import annotations

import hashlib

from pydantic import BaseModel, ConfigDict, Field

from cruxfade.core.rng import RngStream
from cruxfade.models.board import Board
from cruxfade.models.boss import BossState
from cruxfade.models.cards import Card
from cruxfade.models.combat import CombatState
from cruxfade.models.party import EquipmentItem, PartyMember


class PendingRecruit(BaseModel):
    """An ally waiting for room in the hand before joining."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    member: PartyMember
    cards: list[Card] = Field(default_factory=list)


class GameState(BaseModel):
    """The complete state of one run.

    Attributes:
        seed: Seed the run was started with.
        rng: The run's random stream.
        level: Current dungeon level, starting at 1.
        board: Current level grid.
        party: Ordered members; index 0 leads.
        equipment: Equipped items per member id.
        inventory: Unequipped equipment carried by the party.
        hand: Cards in hand.
        deck: Cards available to draw.
        discard: Played and discarded cards.
        key_found: The current level's key has been taken.
        combat: Current or most recent fight.
        boss: Boss progress on the current level.
        pending_recruit: Ally waiting on hand space.
        gold: Gold earned from bosses.
        experience: Experience earned from bosses.
        serial: Counter for minting run-unique ids.
        over: The run has ended.
        victory: The run ended in victory.
        log: Player-facing log, oldest first.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    seed: int
    rng: RngStream
    level: int = Field(default=1, ge=1)
    board: Board
    party: list[PartyMember] = Field(default_factory=list)
    equipment: dict[str, list[EquipmentItem]] = Field(default_factory=dict)
    inventory: list[EquipmentItem] = Field(default_factory=list)
    hand: list[Card] = Field(default_factory=list)
    deck: list[Card] = Field(default_factory=list)
    discard: list[Card] = Field(default_factory=list)
    key_found: bool = False
    combat: CombatState = Field(default_factory=CombatState)
    boss: BossState = Field(default_factory=BossState)
    pending_recruit: PendingRecruit | None = None
    gold: int = Field(default=0, ge=0)
    experience: int = Field(default=0, ge=0)
    serial: int = Field(default=0, ge=0)
    over: bool = False
    victory: bool = False
    log: list[str] = Field(default_factory=list)

    @property
    def leader(self) -> PartyMember | None:
        return self.party[0] if self.party else None

    def member(self, member_id: str) -> PartyMember | None:
        """Find a party member by id."""
        for member in self.party:
            if member.id == member_id:
                return member
        return None

    def next_serial(self) -> int:
        """Mint the next run-unique number."""
        self.serial += 1
        return self.serial

    def add_log(self, message: str, *, limit: int) -> None:
        """Append a player log entry, dropping the oldest beyond ``limit``."""
        self.log.append(message)
        if len(self.log) > limit:
            del self.log[: len(self.log) - limit]

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON dump, for replay comparisons."""
        return hashlib.sha256(self.model_dump_json().encode()).hexdigest()


__all__ = [
    "PendingRecruit",
    "GameState",
]
