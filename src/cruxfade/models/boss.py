"""Boss encounter progress."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BossState(BaseModel):
    """Progress through a boss's phase sequence.

    Attributes:
        active: A boss encounter is running on this level.
        boss_id: Key of the boss definition.
        current_phase: Index of the phase to run next.
        phase_complete: The most recent phase finished and the next one
            has not started yet.
        defeated: Every phase has been completed.
        enemy_index: Position within a sequential fight phase.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    active: bool = False
    boss_id: str | None = None
    current_phase: int = Field(default=0, ge=0)
    phase_complete: bool = False
    defeated: bool = False
    enemy_index: int = Field(default=0, ge=0)


__all__ = ["BossState"]
