"""Tests for turn-based combat."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from cruxfade.core.exceptions import CombatError, ContentError, IllegalActionError, InvalidGameStateError
from cruxfade.engine import combat as combat_module
from cruxfade.engine.combat import (
    attempt_flee,
    damage_enemy,
    enemy_attack,
    player_attack,
    start_combat,
    start_fight,
)
from cruxfade.engine.exploration import is_tile_completed
from cruxfade.models import CombatOutcome, CombatPhase, CombatState, FightStage, TileType, Turn


if TYPE_CHECKING:
    from collections.abc import Callable

    from conftest import ScriptedRng

    from cruxfade.engine.context import GameContext
    from cruxfade.models import Tile


def enemy_turn(ctx: GameContext) -> None:
    ctx.state.combat.turn = Turn.ENEMY


class TestStartCombat:
    """Tests for starting fights."""

    def test_initial_state(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test a new fight snapshots both sides and gives the player the turn."""
        tile = on_tile(TileType.FIGHT)

        result = start_combat(ctx, "goblin")

        combat = ctx.state.combat
        assert result.success
        assert combat.active
        assert combat.phase == CombatPhase.PLAYER_TURN
        assert combat.enemy.name == "Goblin"
        assert combat.enemy_hp == 6
        assert combat.player_hp == 10
        assert combat.last_roll is None
        assert combat.tile_index == tile.index
        assert tile.fight_stage == FightStage.ENGAGED
        assert tile.combat_engaged

    def test_requires_fight_tile(self, ctx: GameContext) -> None:
        """Test fights only start on fight tiles."""
        with pytest.raises(IllegalActionError):
            start_combat(ctx, "goblin")
        assert not ctx.state.combat.active

    def test_consumed_tile(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test a beaten fight cannot be restarted."""
        on_tile(TileType.FIGHT).consume()

        with pytest.raises(IllegalActionError):
            start_combat(ctx, "goblin")

    def test_already_fighting(self, ctx: GameContext, in_combat: Callable[..., Tile]) -> None:
        """Test a second fight cannot start during the first."""
        in_combat()

        with pytest.raises(InvalidGameStateError):
            start_combat(ctx, "rat")
        assert ctx.state.combat.enemy.id == "goblin"

    def test_unknown_enemy(self, ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> None:
        """Test an unknown enemy id leaves everything untouched."""
        tile = on_tile(TileType.FIGHT)

        with pytest.raises(ContentError):
            start_combat(ctx, "dragon")

        assert not ctx.state.combat.active
        assert tile.fight_stage == FightStage.UNENGAGED

    def test_start_fight_draws_enemy(
        self,
        ctx: GameContext,
        scripted: ScriptedRng,
        on_tile: Callable[[TileType], Tile],
    ) -> None:
        """Test start_fight draws from the level's pools."""
        on_tile(TileType.FIGHT)
        scripted.push(0.9, 0.0)

        result = start_fight(ctx)

        assert result.data["enemy_id"] == "goblin"
        assert scripted.pending == 0

    def test_start_fight_rejected_without_draw(self, ctx: GameContext) -> None:
        """Test a rejected start leaves the stream untouched."""
        draws = ctx.rng.draws

        with pytest.raises(IllegalActionError):
            start_fight(ctx)

        assert ctx.rng.draws == draws


class TestPlayerAttack:
    """Tests for the basic attack."""

    def test_damage_formula(self, ctx: GameContext, scripted: ScriptedRng, in_combat: Callable[..., Tile]) -> None:
        """Test damage is attack plus d6 minus three."""
        in_combat()
        scripted.push_rolls(6, 4)

        result = player_attack(ctx)

        combat = ctx.state.combat
        assert result.damage == 3
        assert result.roll == 4
        assert combat.enemy_hp == 3
        assert combat.last_roll == 4
        assert combat.turn == Turn.ENEMY

    def test_minimum_damage(self, ctx: GameContext, scripted: ScriptedRng, in_combat: Callable[..., Tile]) -> None:
        """Test a poor roll still deals one damage."""
        in_combat()
        scripted.push_rolls(6, 1)

        assert player_attack(ctx).damage == 1

    def test_victory(self, ctx: GameContext, scripted: ScriptedRng, in_combat: Callable[..., Tile]) -> None:
        """Test killing the enemy consumes the tile and resolves the fight."""
        tile = in_combat("rat")
        scripted.push_rolls(6, 6)

        result = player_attack(ctx)

        combat = ctx.state.combat
        assert result.outcome == CombatOutcome.VICTORY
        assert not combat.active
        assert combat.outcome == CombatOutcome.VICTORY
        assert combat.phase == CombatPhase.RESOLVED
        assert tile.consumed
        assert tile.fight_stage == FightStage.RESOLVED
        assert is_tile_completed(ctx.state)

    def test_overkill_floors_enemy_hp(
        self,
        ctx: GameContext,
        in_combat: Callable[..., Tile],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test enemy HP stops at zero however hard the final hit lands."""
        in_combat()
        seen: list[int] = []
        monkeypatch.setattr(combat_module, "resolve_victory", lambda ctx: seen.append(ctx.state.combat.enemy_hp))

        assert damage_enemy(ctx, 2) is None
        assert ctx.state.combat.enemy_hp == 4
        assert damage_enemy(ctx, 99) == CombatOutcome.VICTORY
        assert seen == [0]

    def test_enemy_hp_not_negative(self) -> None:
        """Test combat state rejects negative enemy HP."""
        with pytest.raises(ValidationError):
            CombatState(enemy_hp=-1)

    def test_not_player_turn(self, ctx: GameContext, in_combat: Callable[..., Tile]) -> None:
        """Test attacking out of turn is a combat error."""
        in_combat()
        enemy_turn(ctx)

        with pytest.raises(CombatError):
            player_attack(ctx)

    def test_no_combat(self, ctx: GameContext) -> None:
        """Test attacking with nobody to fight is rejected."""
        with pytest.raises(InvalidGameStateError):
            player_attack(ctx)


class TestEnemyAttack:
    """Tests for the enemy turn."""

    def test_damage(self, ctx: GameContext, scripted: ScriptedRng, in_combat: Callable[..., Tile]) -> None:
        """Test the enemy hits for attack plus d6 minus three."""
        in_combat()
        enemy_turn(ctx)
        scripted.push_rolls(6, 6)

        result = enemy_attack(ctx)

        assert result.damage == 5
        assert ctx.state.leader.hp == 5
        assert ctx.state.combat.player_hp == 5
        assert ctx.state.combat.turn == Turn.PLAYER

    def test_not_enemy_turn(self, ctx: GameContext, in_combat: Callable[..., Tile]) -> None:
        """Test the enemy cannot act on the player's turn."""
        in_combat()

        with pytest.raises(CombatError):
            enemy_attack(ctx)

    def test_stunned_skips_turn(self, ctx: GameContext, in_combat: Callable[..., Tile]) -> None:
        """Test a stunned enemy loses its turn without rolling."""
        in_combat()
        enemy_turn(ctx)
        ctx.state.combat.status.stunned = True
        draws = ctx.rng.draws

        result = enemy_attack(ctx)

        assert result.damage == 0
        assert ctx.rng.draws == draws
        assert not ctx.state.combat.status.stunned
        assert ctx.state.combat.turn == Turn.PLAYER
        assert ctx.state.leader.hp == 10

    def test_dodge_negates(self, ctx: GameContext, in_combat: Callable[..., Tile]) -> None:
        """Test a dodge cancels the attack and is spent."""
        in_combat()
        enemy_turn(ctx)
        ctx.state.combat.status.dodge_next = True

        enemy_attack(ctx)

        assert ctx.state.leader.hp == 10
        assert not ctx.state.combat.status.dodge_next

    def test_defending_halves_rounding_up(
        self,
        ctx: GameContext,
        scripted: ScriptedRng,
        in_combat: Callable[..., Tile],
    ) -> None:
        """Test defending halves the hit, rounded up."""
        in_combat()
        enemy_turn(ctx)
        ctx.state.combat.status.defending = True
        scripted.push_rolls(6, 6)

        assert enemy_attack(ctx).damage == 3
        assert not ctx.state.combat.status.defending

    def test_damage_reduction_floor(
        self,
        ctx: GameContext,
        scripted: ScriptedRng,
        in_combat: Callable[..., Tile],
    ) -> None:
        """Test damage reduction never brings a hit below one."""
        in_combat()
        enemy_turn(ctx)
        ctx.state.combat.status.damage_reduction = 2
        scripted.push_rolls(6, 1)

        assert enemy_attack(ctx).damage == 1
        assert ctx.state.combat.status.damage_reduction == 0

    def test_reduction_then_defend(
        self,
        ctx: GameContext,
        scripted: ScriptedRng,
        in_combat: Callable[..., Tile],
    ) -> None:
        """Test reduction applies before halving."""
        in_combat()
        enemy_turn(ctx)
        status = ctx.state.combat.status
        status.damage_reduction = 2
        status.defending = True
        scripted.push_rolls(6, 6)

        assert enemy_attack(ctx).damage == 2

    def test_defeat(self, ctx: GameContext, scripted: ScriptedRng, in_combat: Callable[..., Tile]) -> None:
        """Test losing the last member ends the run in defeat."""
        in_combat()
        enemy_turn(ctx)
        ctx.state.leader.hp = 1
        scripted.push_rolls(6, 6)

        result = enemy_attack(ctx)

        assert result.outcome == CombatOutcome.DEFEAT
        assert ctx.state.over
        assert not ctx.state.victory
        assert ctx.state.combat.phase == CombatPhase.RESOLVED


class TestFlee:
    """Tests for fleeing."""

    def test_success(self, ctx: GameContext, scripted: ScriptedRng, in_combat: Callable[..., Tile]) -> None:
        """Test a good roll escapes and leaves the tile engaged but unconsumed."""
        tile = in_combat()
        scripted.push_rolls(20, 20)

        result = attempt_flee(ctx)

        combat = ctx.state.combat
        assert result.success
        assert result.outcome == CombatOutcome.FLED
        assert result.total == 22
        assert not combat.active
        assert combat.phase == CombatPhase.IDLE
        assert not tile.consumed
        assert tile.fight_stage == FightStage.ENGAGED
        assert is_tile_completed(ctx.state)

    def test_failure(self, ctx: GameContext, scripted: ScriptedRng, in_combat: Callable[..., Tile]) -> None:
        """Test a failed escape costs HP and passes the turn."""
        in_combat()
        scripted.push_rolls(20, 1)

        result = attempt_flee(ctx)

        assert not result.success
        assert not result.rejected
        assert result.damage == 1
        assert ctx.state.leader.hp == 9
        assert ctx.state.combat.active
        assert ctx.state.combat.turn == Turn.ENEMY

    def test_difficulty_threshold(
        self,
        ctx: GameContext,
        scripted: ScriptedRng,
        in_combat: Callable[..., Tile],
    ) -> None:
        """Test the escape needs d20 + attack of at least 12 + enemy attack."""
        in_combat()
        scripted.push_rolls(20, 11, 12)

        assert not attempt_flee(ctx).success
        ctx.state.combat.turn = Turn.PLAYER
        assert attempt_flee(ctx).success

    def test_failure_damage_scales(
        self,
        ctx: GameContext,
        scripted: ScriptedRng,
        in_combat: Callable[..., Tile],
    ) -> None:
        """Test failing against a strong enemy costs its attack less one."""
        in_combat("orc")
        scripted.push_rolls(20, 1)

        assert attempt_flee(ctx).damage == 3

    def test_not_player_turn(self, ctx: GameContext, in_combat: Callable[..., Tile]) -> None:
        """Test fleeing is a player-turn action."""
        in_combat()
        enemy_turn(ctx)

        with pytest.raises(CombatError):
            attempt_flee(ctx)
