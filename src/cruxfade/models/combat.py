"""Combat state models.

CombatState holds a single player-vs-enemy fight. It is replaced by a
fresh inactive instance when the fight ends, keeping only the outcome.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

from cruxfade.models.enums import CombatOutcome, CombatPhase, Turn


class StatusFlags(BaseModel):
    """One-shot combat modifiers.

    Attributes:
        stunned: Enemy skips its next turn.
        dodge_next: Next enemy attack is negated.
        defending: Next enemy attack is halved, rounded up.
        damage_reduction: Flat reduction applied to the next enemy attack.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    stunned: bool = False
    dodge_next: bool = False
    defending: bool = False
    damage_reduction: int = Field(default=0, ge=0)


class EnemySnapshot(BaseModel):
    """Copy of an enemy template taken when combat starts."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str
    name: str
    hp: int = Field(ge=1)
    atk: int = Field(ge=0)
    mag: int = Field(default=0, ge=0)


class CombatState(BaseModel):
    """State of the current (or most recent) fight.

    Attributes:
        active: Whether a fight is in progress.
        enemy: Snapshot of the enemy being fought.
        player_hp: Mirror of the acting leader's HP.
        enemy_hp: Enemy HP remaining.
        turn: Side to act.
        status: One-shot modifiers.
        last_roll: Most recent die roll in this fight.
        boss_phase_ref: Boss phase index when the fight belongs to a boss.
        tile_index: Board index of the tile the fight started on.
        outcome: How the last fight ended, kept after it is torn down.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",  # Ignore computed fields when deserializing
    )

    active: bool = False
    enemy: EnemySnapshot | None = None
    player_hp: int = Field(default=0, ge=0)
    enemy_hp: int = Field(default=0, ge=0)
    turn: Turn = Turn.PLAYER
    status: StatusFlags = Field(default_factory=StatusFlags)
    last_roll: int | None = None
    boss_phase_ref: int | None = None
    tile_index: int | None = None
    outcome: CombatOutcome | None = None

    @computed_field(description="Observable combat state")
    @property
    def phase(self) -> CombatPhase:
        if self.active:
            return CombatPhase.PLAYER_TURN if self.turn == Turn.PLAYER else CombatPhase.ENEMY_TURN
        if self.outcome in (CombatOutcome.VICTORY, CombatOutcome.DEFEAT):
            return CombatPhase.RESOLVED
        return CombatPhase.IDLE


__all__ = [
    "StatusFlags",
    "EnemySnapshot",
    "CombatState",
]
