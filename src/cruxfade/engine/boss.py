"""Boss encounter state machine.

A boss runs its phases in order: inactive, then phase 0, phase 1 and so
on until every phase is complete and the boss is defeated. Each phase is
started from the boss tile with ``start_boss_phase``:

- fight: the phase enemies are fought one at a time. Between enemies of
  a sequential phase the boss tile is re-armed and the player starts the
  phase again to face the next one.
- hazard: a d20 check; failure hurts but the phase completes anyway.
- boss-fight: a fight against a record from the boss-enemy table.
- choice: completes immediately.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.core.exceptions import BossEncounterError, IllegalActionError
from cruxfade.core.logging import get_logger
from cruxfade.engine.combat import start_combat
from cruxfade.engine.party import damage_leader, heal_party, raise_base_stat
from cruxfade.engine.results import ActionResult
from cruxfade.models import FightStage, PhaseType, StatName, TileType


if TYPE_CHECKING:
    from cruxfade.content.models import BossDefinition, BossPhase
    from cruxfade.engine.context import GameContext

logger = get_logger(__name__)


def boss_definition(ctx: GameContext) -> BossDefinition:
    """Definition of the active boss.

    Raises:
        BossEncounterError: If no boss is active on this level.
        ContentError: If the boss id is unknown.
    """
    boss = ctx.state.boss
    if not boss.active or boss.boss_id is None:
        raise BossEncounterError("No boss encounter on this level")
    return ctx.content.boss(boss.boss_id)


def current_phase(ctx: GameContext) -> BossPhase | None:
    """The phase to run next, or None when the boss is beaten or absent."""
    boss = ctx.state.boss
    if not boss.active or boss.defeated or boss.boss_id is None:
        return None
    phases = ctx.content.boss(boss.boss_id).phases
    if boss.current_phase >= len(phases):
        return None
    return phases[boss.current_phase]


def _running_phase(ctx: GameContext, action: str) -> BossPhase:
    """Validate that a boss phase can be acted on and return it."""
    ctx.ensure_running(action)
    ctx.ensure_no_combat(action)
    state = ctx.state
    definition = boss_definition(ctx)
    if state.boss.defeated:
        raise BossEncounterError("The boss is already defeated", boss_id=state.boss.boss_id)
    if state.board.current_tile.type != TileType.BOSS_ENCOUNTER:
        raise IllegalActionError("Boss phases start from the boss tile", action=action)
    if state.boss.current_phase >= len(definition.phases):
        raise BossEncounterError(
            "No phases left to run",
            boss_id=state.boss.boss_id,
            phase_index=state.boss.current_phase,
        )
    return definition.phases[state.boss.current_phase]


def start_boss_phase(ctx: GameContext) -> ActionResult:
    """Run the current boss phase.

    Raises:
        BossEncounterError: Without an undefeated boss to fight.
        IllegalActionError: Off the boss tile or without a living leader.
    """
    phase = _running_phase(ctx, "start_boss_phase")
    state = ctx.state
    leader = ctx.living_leader("start_boss_phase")
    index = state.boss.current_phase
    label = phase.name or phase.type.value
    logger.info("Boss phase started", boss_id=state.boss.boss_id, phase=index, type=phase.type)

    match phase.type:
        case PhaseType.FIGHT:
            if not phase.enemies:
                ctx.log(f"👑 {label}: the way is clear.")
                return complete_boss_phase(ctx)
            enemy_id = phase.enemies[state.boss.enemy_index]
            result = start_combat(ctx, enemy_id, boss_phase_ref=index)
        case PhaseType.BOSS_FIGHT:
            result = start_combat(ctx, phase.enemy, boss_phase_ref=index, boss_enemy=True)
        case PhaseType.HAZARD:
            check = ctx.dice.check(leader.stat(phase.preferred_stat), phase.difficulty)
            if check.success:
                ctx.log(f"✨ {label}: overcome ({check.total} vs {phase.difficulty}).")
            else:
                ctx.log(f"💥 {label}: failed ({check.total} vs {phase.difficulty}), {phase.damage} damage.")
                damage_leader(ctx, phase.damage)
                if state.over:
                    return ActionResult(
                        success=False,
                        message=f"{label} claimed the party",
                        roll=check.roll.value,
                        total=check.total,
                        damage=phase.damage,
                    )
            completed = complete_boss_phase(ctx)
            return ActionResult(
                success=check.success,
                message=completed.message,
                roll=check.roll.value,
                total=check.total,
                damage=0 if check.success else phase.damage,
                data=completed.data,
            )
        case PhaseType.CHOICE:
            ctx.log(f"🤔 {label}: {phase.description or 'the party chooses its path.'}")
            return complete_boss_phase(ctx)

    state.board.current_tile.consumed = False
    state.boss.phase_complete = False
    return result


def handle_fight_victory(ctx: GameContext, phase_ref: int) -> None:
    """Settle a won boss-phase fight.

    A sequential fight phase with enemies left re-arms the boss tile and
    waits for the player to start the phase again. Otherwise the tile is
    consumed and the phase completes.
    """
    state = ctx.state
    boss = state.boss
    if phase_ref != boss.current_phase:
        logger.warning("Stale boss phase victory", phase_ref=phase_ref, current=boss.current_phase)
        return
    phase = ctx.content.boss(boss.boss_id).phases[phase_ref]
    tile = state.board.current_tile

    if phase.type == PhaseType.FIGHT and phase.sequential:
        boss.enemy_index += 1
        if boss.enemy_index < len(phase.enemies):
            tile.consumed = False
            tile.fight_stage = FightStage.UNENGAGED
            ctx.log(
                f"⚔️ {boss.enemy_index}/{len(phase.enemies)} defeated. "
                "Start the phase again to face the next foe."
            )
            return

    tile.consume()
    tile.fight_stage = FightStage.RESOLVED
    complete_boss_phase(ctx)


def complete_boss_phase(ctx: GameContext) -> ActionResult:
    """Advance past the current phase, defeating the boss after the last."""
    state = ctx.state
    boss = state.boss
    definition = ctx.content.boss(boss.boss_id)
    finished = boss.current_phase
    boss.current_phase += 1
    boss.enemy_index = 0
    boss.phase_complete = True
    logger.info("Boss phase complete", boss_id=boss.boss_id, phase=finished)

    if boss.current_phase >= len(definition.phases):
        return defeat_boss(ctx)
    next_phase = definition.phases[boss.current_phase]
    message = f"👑 Phase {finished + 1} complete. Next: {next_phase.name or next_phase.type.value}."
    ctx.log(message)
    return ActionResult(success=True, message=message, data={"phase": boss.current_phase})


def resolve_choice_phase(ctx: GameContext) -> ActionResult:
    """Complete a choice phase on behalf of the party.

    Raises:
        BossEncounterError: If the current phase is not a choice.
    """
    phase = _running_phase(ctx, "complete_boss_phase")
    if phase.type != PhaseType.CHOICE:
        raise BossEncounterError(
            f"A {phase.type} phase completes through play",
            boss_id=ctx.state.boss.boss_id,
            phase_index=ctx.state.boss.current_phase,
        )
    return complete_boss_phase(ctx)


def defeat_boss(ctx: GameContext) -> ActionResult:
    """Grant rewards and either end the campaign or open the way on."""
    state = ctx.state
    boss = state.boss
    definition = ctx.content.boss(boss.boss_id)
    rewards = definition.victory_rewards

    boss.defeated = True
    boss.active = False
    state.gold += rewards.gold
    state.experience += rewards.experience
    logger.info(
        "Boss defeated",
        boss_id=boss.boss_id,
        gold=rewards.gold,
        experience=rewards.experience,
        game_complete=rewards.game_complete,
    )

    if rewards.game_complete:
        state.victory = True
        state.over = True
        message = rewards.completion_message or f"🏆 {definition.name} is vanquished. The dungeon is conquered!"
        ctx.log(message)
        return ActionResult(success=True, message=message, data={"game_complete": True})

    heal_party(ctx)
    leader = state.leader
    raise_base_stat(ctx, leader, StatName.ATK, ctx.settings.boss_reward_atk)
    raise_base_stat(ctx, leader, StatName.HP, ctx.settings.boss_reward_max_hp)
    state.board.current_tile.type = TileType.DOOR
    state.key_found = True

    message = rewards.completion_message or f"👑 {definition.name} defeated! The party is restored and a door opens."
    ctx.log(message)
    return ActionResult(
        success=True,
        message=message,
        data={"gold": rewards.gold, "experience": rewards.experience},
    )


__all__ = [
    "boss_definition",
    "current_phase",
    "start_boss_phase",
    "handle_fight_victory",
    "complete_boss_phase",
    "resolve_choice_phase",
    "defeat_boss",
]
