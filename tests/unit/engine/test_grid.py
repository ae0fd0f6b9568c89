"""Tests for level generation and fog of war."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cruxfade.content.loader import build_content
from cruxfade.core.constants import DEFAULT_ENEMY_ID
from cruxfade.core.rng import RngStream
from cruxfade.engine.fog import explore, reveal_adjacent, reveal_hidden
from cruxfade.engine.grid import (
    boss_tile_position,
    encounter_weights,
    generate_level,
    random_enemy_id,
)
from cruxfade.models import Position, TileType


if TYPE_CHECKING:
    from conftest import ScriptedRng

    from cruxfade.content.models import ContentPack
    from cruxfade.core.config import Settings
    from cruxfade.engine.context import GameContext

ENTRY = Position(row=1, col=0)


class TestGenerateLevel:
    """Tests for generate_level."""

    @pytest.mark.parametrize("seed", [1, 7, 12345, 99999, 2**31])
    def test_one_key_one_door(self, content: ContentPack, seed: int) -> None:
        """Test every level has exactly one key and one door off the entrance."""
        board = generate_level(content, RngStream.from_seed(seed), 1, ENTRY)

        keys = board.tiles_of_type(TileType.KEY)
        doors = board.tiles_of_type(TileType.DOOR)
        assert len(keys) == 1
        assert len(doors) == 1
        assert keys[0].index != ENTRY.index
        assert doors[0].index != ENTRY.index

    def test_entrance(self, content: ContentPack) -> None:
        """Test the entrance is an explored start tile with the player on it."""
        board = generate_level(content, RngStream.from_seed(3), 1, ENTRY)

        assert board.player == ENTRY
        assert board.current_tile.type == TileType.START
        assert board.current_tile.explored
        assert len(board.tiles_of_type(TileType.START)) == 1

    def test_initial_fog(self, content: ContentPack) -> None:
        """Test only the entrance's neighbours start discovered."""
        board = generate_level(content, RngStream.from_seed(3), 1, ENTRY)

        discovered = {(tile.row, tile.col) for tile in board.tiles if tile.discovered}
        explored = {(tile.row, tile.col) for tile in board.tiles if tile.explored}
        assert explored == {(1, 0)}
        assert discovered == {(1, 0), (0, 0), (2, 0), (1, 1)}

    def test_deterministic(self, content: ContentPack) -> None:
        """Test the same seed produces the same board."""
        first = generate_level(content, RngStream.from_seed(42), 1, ENTRY)
        second = generate_level(content, RngStream.from_seed(42), 1, ENTRY)
        assert first == second

    def test_draw_count(self, content: ContentPack) -> None:
        """Test one draw per tile plus the key and door placement."""
        rng = RngStream.from_seed(42)
        generate_level(content, rng, 1, ENTRY)
        assert rng.draws == 15 + 2

    def test_only_weighted_types(self, content: ContentPack) -> None:
        """Test no boss tiles appear on ordinary levels."""
        board = generate_level(content, RngStream.from_seed(8), 2, ENTRY)
        assert not board.tiles_of_type(TileType.BOSS_ENCOUNTER)

    def test_single_weight(self) -> None:
        """Test a one-type table fills every tile but the key and door."""
        pack = build_content(
            {
                "enemies": {"goblin": {"name": "Goblin", "hp": 6, "atk": 2}},
                "encounter_tables": {"grid-1": {"encounterWeights": {"hazard": 1}}},
            }
        )
        board = generate_level(pack, RngStream.from_seed(5), 1, ENTRY)

        assert len(board.tiles_of_type(TileType.HAZARD)) == 13


class TestBossLevel:
    """Tests for boss level layout."""

    def test_layout(self, boss_content: ContentPack) -> None:
        """Test entrance, one boss tile at the mirrored cell and empty filler."""
        rng = RngStream.from_seed(7)
        board = generate_level(boss_content, rng, 1, ENTRY)

        boss_tiles = board.tiles_of_type(TileType.BOSS_ENCOUNTER)
        assert len(boss_tiles) == 1
        assert boss_tiles[0].position == Position(row=2, col=3)
        assert boss_tiles[0].boss_id == "gatekeeper"
        assert len(board.tiles_of_type(TileType.EMPTY)) == 14
        assert not board.tiles_of_type(TileType.KEY)
        assert rng.draws == 0

    def test_boss_tile_position(self) -> None:
        """Test the boss cell mirrors the entrance."""
        assert boss_tile_position(Position(row=0, col=1)) == Position(row=3, col=2)


class TestEncounterHelpers:
    """Tests for encounter weight and enemy lookup."""

    def test_fallback_weights(self, boss_content: ContentPack) -> None:
        """Test the default table covers content without encounter tables."""
        weights = encounter_weights(boss_content, 3)
        assert weights[TileType.FIGHT] == 3
        assert TileType.START not in weights

    def test_enemy_without_table(self, boss_content: ContentPack, settings: Settings) -> None:
        """Test the fallback enemy is used without drawing."""
        from cruxfade.engine.run import new_run

        ctx = new_run(3, boss_content, settings.game)
        draws = ctx.rng.draws

        assert random_enemy_id(ctx, 1) == DEFAULT_ENEMY_ID
        assert ctx.rng.draws == draws

    def test_rare_pool(self, ctx: GameContext, scripted: ScriptedRng) -> None:
        """Test a low draw picks from the rare pool."""
        scripted.push(0.0, 0.0)
        assert random_enemy_id(ctx, 1) == "skeleton"

    def test_common_pool(self, ctx: GameContext, scripted: ScriptedRng) -> None:
        """Test a high draw picks from the common pool."""
        scripted.push(0.9, 0.99)
        assert random_enemy_id(ctx, 1) == "slime"


class TestFog:
    """Tests for fog-of-war helpers."""

    def test_explore_idempotent(self, content: ContentPack) -> None:
        """Test exploring twice changes nothing."""
        board = generate_level(content, RngStream.from_seed(3), 1, ENTRY)
        explore(board, 0, 0)
        snapshot = board.model_copy(deep=True)
        explore(board, 0, 0)
        assert board == snapshot

    def test_reveal_adjacent_counts_new(self, content: ContentPack) -> None:
        """Test only newly discovered neighbours are counted."""
        board = generate_level(content, RngStream.from_seed(3), 1, ENTRY)
        assert reveal_adjacent(board, 1, 1) == 3
        assert reveal_adjacent(board, 1, 1) == 0

    def test_reveal_hidden_skips_entrance(self, content: ContentPack) -> None:
        """Test tracking discovers every hidden tile."""
        board = generate_level(content, RngStream.from_seed(3), 1, ENTRY)
        revealed = reveal_hidden(board)

        assert revealed == 12
        assert all(tile.discovered for tile in board.tiles)
        assert reveal_hidden(board) == 0
