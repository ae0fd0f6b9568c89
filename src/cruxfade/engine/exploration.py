"""Moving around the grid.

The player may step to an orthogonally adjacent, discovered tile once
the current tile is completed. Stepping explores the target, discovers
its neighbours and clears empty tiles on arrival.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.core.exceptions import IllegalActionError
from cruxfade.core.logging import get_logger
from cruxfade.engine.fog import explore, reveal_adjacent
from cruxfade.engine.results import ActionResult
from cruxfade.models import FightStage, Position, TileType, in_bounds


if TYPE_CHECKING:
    from cruxfade.engine.context import GameContext
    from cruxfade.models import GameState, Tile

logger = get_logger(__name__)

ARRIVAL_TEXT = {
    TileType.FIGHT: "⚔️ An enemy blocks the way!",
    TileType.HAZARD: "⚠️ Danger lurks here.",
    TileType.ITEM: "✨ Something glints on the floor.",
    TileType.ALLY: "🧍 A stranger offers to join you.",
    TileType.KEY: "🗝️ A key lies here.",
    TileType.DOOR: "🚪 A heavy door stands here.",
    TileType.BOSS_ENCOUNTER: "👑 A powerful presence awaits.",
}

REQUIREMENT_TEXT = {
    TileType.FIGHT: "Defeat or flee from the enemy before moving on.",
    TileType.HAZARD: "Overcome the hazard before moving on.",
    TileType.ITEM: "Pick up the item before moving on.",
    TileType.ALLY: "Deal with the stranger before moving on.",
    TileType.KEY: "Take the key before moving on.",
    TileType.BOSS_ENCOUNTER: "Defeat the boss before moving on.",
}


def is_tile_completed(state: GameState, tile: Tile | None = None) -> bool:
    """Whether the player may leave a tile (the current one by default).

    Start, empty and door tiles are always complete. A fight tile is
    complete once consumed, or once combat was started there and is no
    longer running. Everything else must be consumed.
    """
    if tile is None:
        tile = state.board.current_tile
    if tile.type.always_completed:
        return True
    if tile.type == TileType.FIGHT:
        return tile.consumed or (tile.fight_stage != FightStage.UNENGAGED and not state.combat.active)
    return tile.consumed


def requirement_text(state: GameState, tile: Tile | None = None) -> str:
    """Why the player cannot leave a tile, or an empty string if they can."""
    if tile is None:
        tile = state.board.current_tile
    if is_tile_completed(state, tile):
        return ""
    return REQUIREMENT_TEXT.get(tile.type, "Resolve this tile before moving on.")


def move_player(ctx: GameContext, row: int, col: int) -> ActionResult:
    """Step to an adjacent tile.

    Raises:
        IllegalActionError: If the target is off the grid, not adjacent,
            undiscovered, or the current tile is not completed.
        InvalidGameStateError: While a fight is in progress.
    """
    ctx.ensure_running("move")
    ctx.ensure_no_combat("move")
    state = ctx.state
    if not in_bounds(row, col):
        raise IllegalActionError(f"({row}, {col}) is outside the grid", action="move")
    target = Position(row=row, col=col)
    if state.board.player.distance_to(target) != 1:
        raise IllegalActionError("You can only move to an adjacent tile", action="move")
    if not is_tile_completed(state):
        raise IllegalActionError(requirement_text(state), action="move")
    tile = state.board.tile_at(row, col)
    if not tile.discovered:
        raise IllegalActionError("That way is still shrouded in fog", action="move")

    state.board.player = target
    explore(state.board, row, col)
    revealed = reveal_adjacent(state.board, row, col)
    if tile.type == TileType.EMPTY:
        tile.consume()

    message = f"👣 Moved to {target.name}."
    ctx.log(message)
    if not tile.consumed and tile.type in ARRIVAL_TEXT:
        ctx.log(ARRIVAL_TEXT[tile.type])
    logger.debug("Player moved", row=row, col=col, tile=tile.type, revealed=revealed)
    return ActionResult(
        success=True,
        message=message,
        data={"tile": tile.type.value, "revealed": revealed},
    )


__all__ = [
    "is_tile_completed",
    "requirement_text",
    "move_player",
]
