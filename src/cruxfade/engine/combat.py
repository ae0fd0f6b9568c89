"""Turn-based combat between the party leader and a single enemy.

A fight moves through idle, player turn, enemy turn and resolved. The
player side always acts through the current leader; the leader's HP is
mirrored into ``CombatState.player_hp`` while the fight lasts.

Example:
    >>> result = start_combat(ctx, "goblin")
    >>> result = player_attack(ctx)
    >>> if ctx.state.combat.active:
    ...     result = enemy_attack(ctx)
"""

from __future__ import annotations

from math import ceil
from typing import TYPE_CHECKING

from cruxfade.core.constants import ATTACK_DIE, ATTACK_OFFSET
from cruxfade.core.exceptions import CombatError, IllegalActionError, InvalidGameStateError
from cruxfade.core.logging import get_logger
from cruxfade.engine.grid import random_enemy_id
from cruxfade.engine.party import damage_leader
from cruxfade.engine.results import ActionResult
from cruxfade.models import (
    CombatOutcome,
    CombatState,
    EnemySnapshot,
    FightStage,
    TileType,
    Turn,
)


if TYPE_CHECKING:
    from cruxfade.engine.context import GameContext

logger = get_logger(__name__)


def _require_turn(ctx: GameContext, turn: Turn, action: str) -> CombatState:
    combat = ctx.state.combat
    if not combat.active or combat.enemy is None:
        raise InvalidGameStateError(
            "No combat in progress",
            current_state=combat.phase.value,
            details={"action": action},
        )
    if combat.turn != turn:
        raise CombatError(
            f"It is not the {turn} turn",
            enemy_id=combat.enemy.id,
            turn=combat.turn.value,
        )
    return combat


def start_combat(
    ctx: GameContext,
    enemy_id: str,
    *,
    boss_phase_ref: int | None = None,
    boss_enemy: bool = False,
) -> ActionResult:
    """Start a fight on the current tile.

    Args:
        ctx: Game context.
        enemy_id: Enemy template to fight.
        boss_phase_ref: Boss phase index when the fight belongs to a boss.
        boss_enemy: Look the enemy up in the boss-enemy table.

    Returns:
        The result of starting the fight.

    Raises:
        InvalidGameStateError: If the run is over or a fight is active.
        IllegalActionError: Without a living leader or off a fight tile.
        ContentError: If the enemy id is unknown.
    """
    ctx.ensure_running("start_combat")
    state = ctx.state
    if state.combat.active:
        raise InvalidGameStateError(
            "Combat is already in progress",
            current_state=state.combat.phase.value,
            expected_states=["idle", "resolved"],
        )
    leader = ctx.living_leader("start_combat")
    tile = state.board.current_tile
    if boss_phase_ref is None:
        if tile.type != TileType.FIGHT or tile.consumed:
            raise IllegalActionError("There is nothing to fight here", action="start_combat")
    elif tile.type != TileType.BOSS_ENCOUNTER:
        raise IllegalActionError("Boss fights happen on the boss tile", action="start_combat")

    template = ctx.content.boss_enemy(enemy_id) if boss_enemy else ctx.content.enemy(enemy_id)

    if tile.fight_stage != FightStage.ENGAGED:
        tile.fight_stage = FightStage.ENGAGED
    state.combat = CombatState(
        active=True,
        enemy=EnemySnapshot(
            id=enemy_id,
            name=template.name,
            hp=template.hp,
            atk=template.atk,
            mag=template.mag,
        ),
        player_hp=leader.hp,
        enemy_hp=template.hp,
        turn=Turn.PLAYER,
        boss_phase_ref=boss_phase_ref,
        tile_index=tile.index,
    )

    message = f"⚔️ Combat started: {leader.name} vs {template.name}!"
    ctx.log(message)
    logger.info(
        "Combat started",
        enemy_id=enemy_id,
        enemy_hp=template.hp,
        leader=leader.id,
        boss_phase=boss_phase_ref,
    )
    return ActionResult(success=True, message=message, data={"enemy_id": enemy_id})


def start_fight(ctx: GameContext) -> ActionResult:
    """Start a fight on the current fight tile against a drawn enemy.

    Validation runs before the enemy draw, so a rejected call leaves the
    random stream untouched.
    """
    ctx.ensure_running("start_fight")
    ctx.ensure_no_combat("start_fight")
    ctx.living_leader("start_fight")
    tile = ctx.state.board.current_tile
    if tile.type != TileType.FIGHT or tile.consumed:
        raise IllegalActionError("There is nothing to fight here", action="start_fight")

    enemy_id = random_enemy_id(ctx, ctx.state.level)
    return start_combat(ctx, enemy_id)


def end_combat(ctx: GameContext, outcome: CombatOutcome) -> None:
    """Tear down the current fight, keeping only its outcome."""
    ctx.state.combat = CombatState(outcome=outcome)
    logger.debug("Combat ended", outcome=outcome)


def damage_enemy(ctx: GameContext, amount: int) -> CombatOutcome | None:
    """Apply damage to the enemy, resolving victory at 0 HP.

    Returns:
        ``CombatOutcome.VICTORY`` if the enemy fell, else None.
    """
    combat = ctx.state.combat
    combat.enemy_hp = max(0, combat.enemy_hp - amount)
    if combat.enemy_hp == 0:
        resolve_victory(ctx)
        return CombatOutcome.VICTORY
    return None


def resolve_victory(ctx: GameContext) -> None:
    """Finish a won fight and settle its tile.

    Ordinary fights consume their tile; boss fights hand over to the boss
    state machine, which decides whether the tile is re-armed.
    """
    state = ctx.state
    combat = state.combat
    enemy_name = combat.enemy.name if combat.enemy else "the enemy"
    phase_ref = combat.boss_phase_ref
    tile = state.board.tiles[combat.tile_index] if combat.tile_index is not None else None

    end_combat(ctx, CombatOutcome.VICTORY)
    ctx.log(f"🎉 Victory! Defeated {enemy_name}.")
    logger.info("Combat won", enemy=enemy_name, boss_phase=phase_ref)

    if phase_ref is not None:
        from cruxfade.engine.boss import handle_fight_victory

        handle_fight_victory(ctx, phase_ref)
    elif tile is not None:
        tile.consume()
        tile.fight_stage = FightStage.RESOLVED


def _after_player_damage(ctx: GameContext) -> CombatOutcome | None:
    """End the fight in defeat if the party was wiped out."""
    if ctx.state.over:
        end_combat(ctx, CombatOutcome.DEFEAT)
        return CombatOutcome.DEFEAT
    return None


def player_attack(ctx: GameContext) -> ActionResult:
    """The leader attacks with a d6.

    Damage is ``max(1, atk + roll - 3)``. The turn passes to the enemy
    unless the enemy falls.
    """
    ctx.ensure_running("player_attack")
    combat = _require_turn(ctx, Turn.PLAYER, "player_attack")
    leader = ctx.living_leader("player_attack")

    roll = ctx.dice.roll(ATTACK_DIE).value
    damage = max(1, leader.atk + roll - ATTACK_OFFSET)
    combat.last_roll = roll
    message = f"🗡️ {leader.name} rolls {roll} and deals {damage} damage."
    ctx.log(message)

    outcome = damage_enemy(ctx, damage)
    if outcome is None:
        combat.turn = Turn.ENEMY
    return ActionResult(success=True, message=message, outcome=outcome, roll=roll, damage=damage)


def enemy_attack(ctx: GameContext) -> ActionResult:
    """Resolve the enemy's turn.

    A stunned enemy loses its turn and a dodge negates the attack; each
    clears its flag. Otherwise the enemy deals ``max(1, atk + d6 - 3)``,
    less any damage reduction (floor 1) and halved, rounded up, when the
    leader is defending. Both modifiers are spent by the attack.
    """
    ctx.ensure_running("enemy_attack")
    combat = _require_turn(ctx, Turn.ENEMY, "enemy_attack")
    enemy = combat.enemy
    status = combat.status

    if status.stunned:
        status.stunned = False
        combat.turn = Turn.PLAYER
        message = f"💫 {enemy.name} is stunned and loses its turn."
        ctx.log(message)
        return ActionResult(success=True, message=message)

    if status.dodge_next:
        status.dodge_next = False
        combat.turn = Turn.PLAYER
        message = f"💨 The attack from {enemy.name} is dodged."
        ctx.log(message)
        return ActionResult(success=True, message=message)

    roll = ctx.dice.roll(ATTACK_DIE).value
    damage = max(1, enemy.atk + roll - ATTACK_OFFSET)
    if status.damage_reduction:
        damage = max(1, damage - status.damage_reduction)
        status.damage_reduction = 0
    if status.defending:
        damage = ceil(damage / 2)
        status.defending = False
    combat.last_roll = roll

    leader = ctx.state.leader
    message = f"👹 {enemy.name} rolls {roll} and hits {leader.name} for {damage}."
    ctx.log(message)
    damage_leader(ctx, damage)

    outcome = _after_player_damage(ctx)
    if outcome is None:
        combat.turn = Turn.PLAYER
    return ActionResult(success=True, message=message, outcome=outcome, roll=roll, damage=damage)


def attempt_flee(ctx: GameContext) -> ActionResult:
    """Try to escape: d20 + leader attack against ``12 + enemy attack``.

    Escaping ends the fight without consuming the tile. A failed attempt
    costs ``max(1, enemy atk - 1)`` HP and hands the turn to the enemy.
    """
    ctx.ensure_running("attempt_flee")
    combat = _require_turn(ctx, Turn.PLAYER, "attempt_flee")
    leader = ctx.living_leader("attempt_flee")
    enemy = combat.enemy

    difficulty = ctx.settings.flee_base_difficulty + enemy.atk
    check = ctx.dice.check(leader.atk, difficulty)
    combat.last_roll = check.roll.value

    if check.success:
        end_combat(ctx, CombatOutcome.FLED)
        message = f"🏃 Escaped from {enemy.name}! ({check.total} vs {difficulty})"
        ctx.log(message)
        logger.info("Fled combat", enemy_id=enemy.id, total=check.total, difficulty=difficulty)
        return ActionResult(
            success=True,
            message=message,
            outcome=CombatOutcome.FLED,
            roll=check.roll.value,
            total=check.total,
        )

    damage = max(1, enemy.atk - 1)
    message = f"❌ Failed to escape ({check.total} vs {difficulty}) and took {damage} damage."
    ctx.log(message)
    damage_leader(ctx, damage)
    outcome = _after_player_damage(ctx)
    if outcome is None:
        combat.turn = Turn.ENEMY
    return ActionResult(
        success=False,
        message=message,
        outcome=outcome,
        roll=check.roll.value,
        total=check.total,
        damage=damage,
    )


__all__ = [
    "start_combat",
    "start_fight",
    "end_combat",
    "damage_enemy",
    "resolve_victory",
    "player_attack",
    "enemy_attack",
    "attempt_flee",
]
