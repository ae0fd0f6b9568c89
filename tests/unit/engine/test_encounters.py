"""Tests for hazards, items, the key and the door."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cruxfade.content.loader import build_content
from cruxfade.core.exceptions import IllegalActionError, InvalidGameStateError
from cruxfade.engine.encounters import (
    grant_random_item,
    next_level,
    resolve_hazard,
    take_item,
    take_key,
)
from cruxfade.engine.run import new_run
from cruxfade.models import Position, TileType


if TYPE_CHECKING:
    from collections.abc import Callable

    from conftest import ScriptedRng

    from cruxfade.content.models import ContentPack
    from cruxfade.core.config import Settings
    from cruxfade.engine.context import GameContext
    from cruxfade.models import Tile

PIT_TRAP = (1 + 0.5) / 5  # second of five hazards: difficulty 11, damage 3
CONSUMABLE = 0.0
EQUIPMENT = 0.9
NO_BONUS = 0.99


def minimal_content(**tables: object) -> ContentPack:
    return build_content({"enemies": {"goblin": {"name": "Goblin", "hp": 6, "atk": 2}}, **tables})


class TestResolveHazard:
    """Tests for resolve_hazard."""

    def test_success(self, ctx: GameContext, scripted: ScriptedRng, on_tile: Callable[[TileType], Tile]) -> None:
        """Test meeting the difficulty clears the tile."""
        tile = on_tile(TileType.HAZARD)
        scripted.push(PIT_TRAP).push_rolls(20, 9).push(NO_BONUS)

        result = resolve_hazard(ctx)

        assert result.success
        assert result.total == 11
        assert result.data == {"hazard": "Pit Trap"}
        assert tile.consumed
        assert ctx.state.leader.hp == 10
        assert scripted.pending == 0

    def test_failure(self, ctx: GameContext, scripted: ScriptedRng, on_tile: Callable[[TileType], Tile]) -> None:
        """Test falling short hurts and leaves the hazard in place."""
        tile = on_tile(TileType.HAZARD)
        scripted.push(PIT_TRAP).push_rolls(20, 8)

        result = resolve_hazard(ctx)

        assert not result.success
        assert not result.rejected
        assert result.damage == 3
        assert ctx.state.leader.hp == 7
        assert not tile.consumed

    def test_bonus_item(self, ctx: GameContext, scripted: ScriptedRng, on_tile: Callable[[TileType], Tile]) -> None:
        """Test a lucky draw after success grants an item."""
        on_tile(TileType.HAZARD)
        scripted.push(PIT_TRAP).push_rolls(20, 15).push(0.0, CONSUMABLE, 0.3)

        result = resolve_hazard(ctx)

        assert result.data["bonus_item"] == "Strength Elixir"
        assert ctx.state.leader.atk == 3

    def test_fatal_hazard(self, ctx: GameContext, scripted: ScriptedRng, on_tile: Callable[[TileType], Tile]) -> None:
        """Test a hazard can end a solo run."""
        on_tile(TileType.HAZARD)
        ctx.state.leader.hp = 2
        scripted.push(PIT_TRAP).push_rolls(20, 1)

        resolve_hazard(ctx)

        assert ctx.state.over

    def test_wrong_tile(self, ctx: GameContext) -> None:
        """Test hazards resolve only on hazard tiles."""
        with pytest.raises(IllegalActionError):
            resolve_hazard(ctx)


class TestItems:
    """Tests for item tiles and random items."""

    def test_take_consumable(self, ctx: GameContext, scripted: ScriptedRng, on_tile: Callable[[TileType], Tile]) -> None:
        """Test a health potion raises max HP and heals by the same."""
        tile = on_tile(TileType.ITEM)
        scripted.push(CONSUMABLE, 0.0)

        result = take_item(ctx)

        leader = ctx.state.leader
        assert result.data["item"] == "Health Potion"
        assert leader.max_hp == 12
        assert leader.hp == 12
        assert tile.consumed
        assert "🧪 Health Potion: healed 0 HP, +2 max HP (12/12 HP)." in ctx.state.log

    def test_take_equipment(self, ctx: GameContext, scripted: ScriptedRng, on_tile: Callable[[TileType], Tile]) -> None:
        """Test equipment goes into the inventory with a unique id."""
        on_tile(TileType.ITEM)
        scripted.push(EQUIPMENT, 0.0)

        take_item(ctx)

        assert [item.id for item in ctx.state.inventory] == ["rusty-sword-1"]
        assert ctx.state.leader.atk == 2

    def test_take_item_twice(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test an item tile is spent after one pickup."""
        on_tile(TileType.ITEM).consume()

        with pytest.raises(IllegalActionError):
            take_item(ctx)

    def test_fallback_items(self, settings: Settings, scripted_stream: ScriptedRng) -> None:
        """Test content without item tables hands out fallback consumables."""
        ctx = new_run(1, minimal_content(), settings.game)
        ctx.state.rng = scripted_stream
        scripted_stream.push(0.5)

        assert grant_random_item(ctx) == "Strength Elixir"
        assert ctx.state.leader.atk == 3
        assert "🧪 Strength Elixir: +1 ATK (ATK: 3)." in ctx.state.log

    def test_equipment_only_tables(self, settings: Settings, scripted_stream: ScriptedRng) -> None:
        """Test a table without consumables always yields equipment."""
        pack = minimal_content(
            items={"equipment": {"cap": {"name": "Cap", "slot": "armor", "statBonus": {"hp": 1}}}}
        )
        ctx = new_run(1, pack, settings.game)
        ctx.state.rng = scripted_stream
        scripted_stream.push(CONSUMABLE, 0.0)

        assert grant_random_item(ctx) == "Cap"
        assert ctx.state.inventory[0].name == "Cap"


class TestKeyAndDoor:
    """Tests for the key, the door and level changes."""

    def test_take_key(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test taking the key unlocks the door."""
        tile = on_tile(TileType.KEY)

        take_key(ctx)

        assert ctx.state.key_found
        assert tile.consumed

    def test_door_locked(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test the door needs the key."""
        on_tile(TileType.DOOR)

        with pytest.raises(IllegalActionError, match="key"):
            next_level(ctx)

    def test_not_on_door(self, ctx: GameContext) -> None:
        """Test leaving needs the door."""
        ctx.state.key_found = True

        with pytest.raises(IllegalActionError):
            next_level(ctx)

    def test_next_level(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test the next level starts at the mirrored door cell."""
        on_tile(TileType.DOOR)
        ctx.state.key_found = True
        hand = list(ctx.state.hand)

        result = next_level(ctx)

        state = ctx.state
        assert result.success
        assert state.level == 2
        assert not state.key_found
        assert state.board.player == Position(row=2, col=3)
        assert state.board.current_tile.type == TileType.START
        assert state.hand == hand
        assert not state.boss.active
        assert "🌟 Entered Grid Level 2! (Entered from lower-right)" in state.log

    def test_next_level_rejected_in_combat(self, ctx: GameContext, in_combat: Callable[..., Tile]) -> None:
        """Test nobody leaves through a door mid-fight."""
        in_combat()
        ctx.state.key_found = True

        with pytest.raises(InvalidGameStateError):
            next_level(ctx)

    def test_into_boss_level(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test entering a boss level activates the boss."""
        ctx.state.level = 3
        on_tile(TileType.DOOR)
        ctx.state.key_found = True

        next_level(ctx)

        state = ctx.state
        assert state.level == 4
        assert state.boss.active
        assert state.boss.boss_id == "hollow-warden"
        assert len(state.board.tiles_of_type(TileType.BOSS_ENCOUNTER)) == 1

    def test_victory_without_bosses(self, settings: Settings) -> None:
        """Test passing the final level wins when no boss content exists."""
        ctx = new_run(5, minimal_content(), settings.game)
        state = ctx.state
        state.level = settings.game.final_level
        tile = state.board.current_tile
        tile.type = TileType.DOOR
        state.key_found = True

        result = next_level(ctx)

        assert result.data["victory"]
        assert state.victory
        assert state.over
