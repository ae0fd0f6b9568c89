"""Level generation.

Every non-entrance tile draws its type from the level's encounter
weights, then one key and one door are forced onto two distinct
non-entrance tiles regardless of what was drawn there, trading exact
weight fidelity for a level that is always solvable. Boss levels skip
the weighted draw: the entrance, one boss tile and empty filler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.content.defaults import DEFAULT_ENCOUNTER_WEIGHTS
from cruxfade.core.constants import DEFAULT_ENEMY_ID, GRID_SIZE, TILE_COUNT
from cruxfade.core.logging import get_logger
from cruxfade.engine.fog import reveal_adjacent
from cruxfade.models import Board, Position, Tile, TileType


if TYPE_CHECKING:
    from cruxfade.content.models import ContentPack
    from cruxfade.core.rng import RngStream
    from cruxfade.engine.context import GameContext

logger = get_logger(__name__)


def encounter_weights(content: ContentPack, level: int) -> dict[TileType, float]:
    """Encounter weights for a level, falling back to the default table."""
    table = content.encounter_table(level)
    if table is None:
        return {TileType(key): weight for key, weight in DEFAULT_ENCOUNTER_WEIGHTS.items()}
    return table.encounter_weights


def random_enemy_id(ctx: GameContext, level: int) -> str:
    """Draw an enemy id for a fight on ``level``.

    Rare enemies come up with the configured chance, common ones
    otherwise. Without an encounter table the fallback enemy is used and
    no draw is made.
    """
    table = ctx.content.encounter_table(level)
    if table is None:
        return DEFAULT_ENEMY_ID
    use_rare = ctx.rng.next01() < ctx.settings.rare_enemy_chance
    pool = table.enemy_pools.rare if use_rare else table.enemy_pools.common
    if not pool:
        pool = table.enemy_pools.common or table.enemy_pools.rare
    if not pool:
        return DEFAULT_ENEMY_ID
    return ctx.rng.pick(pool)


def _entry_tile(entry: Position) -> Tile:
    tile = Tile(type=TileType.START, row=entry.row, col=entry.col)
    tile.explore()
    return tile


def place_key_and_door(rng: RngStream, board: Board) -> None:
    """Force exactly one key and one door onto non-entrance tiles."""
    available = [tile for tile in board.tiles if tile.index != board.player.index]
    key_tile = available.pop(rng.next_int(0, len(available) - 1))
    key_tile.type = TileType.KEY
    door_tile = available[rng.next_int(0, len(available) - 1)]
    door_tile.type = TileType.DOOR


def generate_level(content: ContentPack, rng: RngStream, level: int, entry: Position) -> Board:
    """Build the board for a level.

    Args:
        content: Content pack with encounter tables and bosses.
        rng: Stream the tile draws come from.
        level: Dungeon level being generated.
        entry: Where the player enters.

    Returns:
        The new board with the entrance explored and its neighbours
        discovered.
    """
    boss_id = content.boss_for_level(level)
    if boss_id is not None:
        return generate_boss_level(level, entry, boss_id)

    weights = encounter_weights(content, level)
    tiles = []
    for index in range(TILE_COUNT):
        row, col = divmod(index, GRID_SIZE)
        if index == entry.index:
            tiles.append(_entry_tile(entry))
        else:
            tiles.append(Tile(type=rng.weighted_pick(weights), row=row, col=col))

    board = Board(tiles=tiles, player=entry)
    place_key_and_door(rng, board)
    reveal_adjacent(board, entry.row, entry.col)

    logger.info(
        "Level generated",
        level=level,
        entry=entry.name,
        fights=len(board.tiles_of_type(TileType.FIGHT)),
    )
    return board


def boss_tile_position(entry: Position) -> Position:
    """Reserved boss cell for an entrance: the point-mirrored cell."""
    return entry.mirrored()


def generate_boss_level(level: int, entry: Position, boss_id: str) -> Board:
    """Build a boss level: entrance, one boss tile, empty filler.

    No random draws are made, so the stream is unchanged.
    """
    boss_index = boss_tile_position(entry).index
    tiles = []
    for index in range(TILE_COUNT):
        row, col = divmod(index, GRID_SIZE)
        if index == entry.index:
            tiles.append(_entry_tile(entry))
        elif index == boss_index:
            tiles.append(Tile(type=TileType.BOSS_ENCOUNTER, row=row, col=col, boss_id=boss_id))
        else:
            tiles.append(Tile(type=TileType.EMPTY, row=row, col=col))

    board = Board(tiles=tiles, player=entry)
    reveal_adjacent(board, entry.row, entry.col)

    logger.info("Boss level generated", level=level, boss_id=boss_id, entry=entry.name)
    return board


__all__ = [
    "encounter_weights",
    "random_enemy_id",
    "place_key_and_door",
    "generate_level",
    "boss_tile_position",
    "generate_boss_level",
]
