"""Starting a run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.content.defaults import STARTING_LEADER
from cruxfade.core.constants import START_COL, START_ROW
from cruxfade.core.logging import get_logger
from cruxfade.core.rng import RngStream
from cruxfade.engine.cards import starting_hand
from cruxfade.engine.context import GameContext
from cruxfade.engine.grid import generate_level
from cruxfade.models import BossState, GameState, PartyMember, Position


if TYPE_CHECKING:
    from cruxfade.content.models import ContentPack
    from cruxfade.core.config import GameSettings

logger = get_logger(__name__)


def starting_leader() -> PartyMember:
    """The player character a run starts with."""
    return PartyMember.create(
        STARTING_LEADER["id"],
        STARTING_LEADER["name"],
        hp=STARTING_LEADER["hp"],
        atk=STARTING_LEADER["atk"],
        mag=STARTING_LEADER["mag"],
        tags=set(STARTING_LEADER["tags"]),
    )


def new_run(seed: int, content: ContentPack, settings: GameSettings) -> GameContext:
    """Create a fresh run on level 1.

    Args:
        seed: Seed for the run's random stream; the only source of
            variation between runs.
        content: Content pack the run plays with.
        settings: Gameplay tuning.

    Returns:
        Context holding the new run.

    Raises:
        ContentError: If the starter cards are missing from the content.
    """
    rng = RngStream.from_seed(seed)
    entry = Position(row=START_ROW, col=START_COL)
    hand = starting_hand(content)
    board = generate_level(content, rng, 1, entry)
    leader = starting_leader()
    boss_id = content.boss_for_level(1)

    state = GameState(
        seed=rng.seed,
        rng=rng,
        board=board,
        party=[leader],
        equipment={leader.id: []},
        hand=hand,
        boss=BossState(active=True, boss_id=boss_id) if boss_id else BossState(),
    )
    ctx = GameContext(state=state, content=content, settings=settings)
    ctx.log("🏰 Welcome to the dungeon! Find the key and reach the door.")
    logger.info("Run started", seed=state.seed, boss_id=boss_id)
    return ctx


__all__ = [
    "starting_leader",
    "new_run",
]
