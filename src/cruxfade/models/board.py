"""Level grid models: positions, tiles and the board.

A board is 16 tiles stored row-major plus the player's position. Tiles
own their fog-of-war flags and fight engagement stage; the helpers here
keep the flag invariants (explored implies discovered, consumed implies
explored) so the engine never sets them piecemeal.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from cruxfade.core.constants import GRID_SIZE, POSITION_NAMES, TILE_COUNT
from cruxfade.models.enums import FightStage, TileType


class Position(BaseModel):
    """A cell on the grid."""

    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0, lt=GRID_SIZE)
    col: int = Field(ge=0, lt=GRID_SIZE)

    @property
    def index(self) -> int:
        return self.row * GRID_SIZE + self.col

    @property
    def name(self) -> str:
        """Readable cell name such as 'middle-left'."""
        return position_name(self.row, self.col)

    def distance_to(self, other: Position) -> int:
        """Manhattan distance to another position."""
        return abs(self.row - other.row) + abs(self.col - other.col)

    def mirrored(self) -> Position:
        """The cell point-mirrored through the grid centre."""
        return Position(row=GRID_SIZE - 1 - self.row, col=GRID_SIZE - 1 - self.col)


def in_bounds(row: int, col: int) -> bool:
    """Check whether a row/column pair addresses a grid cell."""
    return 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE


def position_name(row: int, col: int) -> str:
    """Readable name of a grid cell."""
    return POSITION_NAMES.get((row, col), f"position ({row},{col})")


class Tile(BaseModel):
    """One cell of a level grid.

    Attributes:
        type: Encounter type.
        row: Grid row.
        col: Grid column.
        discovered: Position known to the player.
        explored: Content known to the player.
        consumed: Encounter resolved.
        fight_stage: Engagement stage for fight and boss tiles.
        boss_id: Boss definition key for boss tiles.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",  # Ignore computed fields when deserializing
    )

    type: TileType
    row: int = Field(ge=0, lt=GRID_SIZE)
    col: int = Field(ge=0, lt=GRID_SIZE)
    discovered: bool = False
    explored: bool = False
    consumed: bool = False
    fight_stage: FightStage = FightStage.UNENGAGED
    boss_id: str | None = None

    @property
    def position(self) -> Position:
        return Position(row=self.row, col=self.col)

    @property
    def index(self) -> int:
        return self.row * GRID_SIZE + self.col

    @computed_field(description="Whether combat has been started on this tile")
    @property
    def combat_engaged(self) -> bool:
        return self.fight_stage != FightStage.UNENGAGED

    def discover(self) -> None:
        self.discovered = True

    def explore(self) -> None:
        """Mark the tile explored; idempotent."""
        self.discovered = True
        self.explored = True

    def consume(self) -> None:
        """Mark the encounter resolved."""
        self.explore()
        self.consumed = True


class Board(BaseModel):
    """A 4x4 level grid with the player's position.

    Attributes:
        tiles: Sixteen tiles, row-major.
        player: Current player position.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    tiles: list[Tile] = Field(min_length=TILE_COUNT, max_length=TILE_COUNT)
    player: Position

    @model_validator(mode="after")
    def check_layout(self) -> Board:
        """Ensure every tile sits at its row-major index."""
        for index, tile in enumerate(self.tiles):
            if tile.index != index:
                raise ValueError(f"Tile at index {index} reports ({tile.row}, {tile.col})")
        return self

    def tile_at(self, row: int, col: int) -> Tile:
        """Get the tile at a cell.

        Raises:
            IndexError: If the cell is off the grid.
        """
        if not in_bounds(row, col):
            raise IndexError(f"({row}, {col}) is outside the grid")
        return self.tiles[row * GRID_SIZE + col]

    @property
    def current_tile(self) -> Tile:
        return self.tiles[self.player.index]

    def neighbors(self, row: int, col: int) -> list[Tile]:
        """Orthogonal in-bounds neighbours of a cell (up, down, left, right)."""
        result = []
        for d_row, d_col in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            if in_bounds(row + d_row, col + d_col):
                result.append(self.tile_at(row + d_row, col + d_col))
        return result

    def tiles_of_type(self, tile_type: TileType) -> list[Tile]:
        return [tile for tile in self.tiles if tile.type == tile_type]


__all__ = [
    "Position",
    "Tile",
    "Board",
    "in_bounds",
    "position_name",
]
