"""Fog-of-war rules.

Tiles move from hidden to discovered (position known) to explored
(content known). Flags only ever go from False to True.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.models import TileType


if TYPE_CHECKING:
    from cruxfade.models import Board


def explore(board: Board, row: int, col: int) -> None:
    """Mark the tile at (row, col) explored; idempotent."""
    board.tile_at(row, col).explore()


def reveal_adjacent(board: Board, row: int, col: int) -> int:
    """Discover the unexplored orthogonal neighbours of (row, col).

    Returns:
        How many neighbours were newly discovered.
    """
    revealed = 0
    for tile in board.neighbors(row, col):
        if not tile.explored and not tile.discovered:
            revealed += 1
        if not tile.explored:
            tile.discover()
    return revealed


def reveal_hidden(board: Board) -> int:
    """Discover every hidden tile except the entrance.

    Returns:
        How many tiles were newly discovered.
    """
    revealed = 0
    for tile in board.tiles:
        if not tile.discovered and tile.type != TileType.START:
            tile.discover()
            revealed += 1
    return revealed


__all__ = [
    "explore",
    "reveal_adjacent",
    "reveal_hidden",
]
