"""Game engine: the rules of a run.

Every operation takes a GameContext (state, content, settings) and either
returns a result or raises a CruxfadeError subclass without changing the
state. GameSession wraps the operations for callers that want refusals
instead of exceptions.

Modules:
    dice: d6/d20 rolls on the run's random stream
    grid: Level generation
    fog: Fog-of-war rules
    exploration: Movement and tile completion
    combat: Turn-based fights
    cards: Hand management and card effects
    party: Damage, succession, leadership and equipment
    allies: Recruiting allies
    encounters: Hazards, items, key, door and level changes
    boss: Boss phase state machine
    session: The GameSession facade
"""

from __future__ import annotations

from cruxfade.engine.context import GameContext
from cruxfade.engine.dice import CheckResult, DiceRoll, DiceRoller
from cruxfade.engine.results import ActionResult, CardAddResult
from cruxfade.engine.grid import generate_level, random_enemy_id
from cruxfade.engine.fog import explore, reveal_adjacent, reveal_hidden
from cruxfade.engine.exploration import is_tile_completed, move_player, requirement_text
from cruxfade.engine.combat import (
    attempt_flee,
    end_combat,
    enemy_attack,
    player_attack,
    start_combat,
    start_fight,
)
from cruxfade.engine.cards import (
    add_card_to_hand,
    discard_card,
    draw_cards,
    force_add_card,
    is_hand_full,
    play_card,
)
from cruxfade.engine.party import (
    available_equipment,
    equip_item,
    equipped_item,
    handle_leader_down,
    remove_member,
    switch_leader,
    unequip_item,
)
from cruxfade.engine.allies import recruit_ally, resolve_pending_ally
from cruxfade.engine.encounters import next_level, resolve_hazard, take_item, take_key
from cruxfade.engine.boss import complete_boss_phase, start_boss_phase
from cruxfade.engine.run import new_run
from cruxfade.engine.session import GameSession


__all__ = [
    # Context & results
    "GameContext",
    "ActionResult",
    "CardAddResult",
    "DiceRoll",
    "DiceRoller",
    "CheckResult",
    # Grid & fog
    "generate_level",
    "random_enemy_id",
    "explore",
    "reveal_adjacent",
    "reveal_hidden",
    "move_player",
    "is_tile_completed",
    "requirement_text",
    # Combat
    "start_combat",
    "start_fight",
    "player_attack",
    "enemy_attack",
    "attempt_flee",
    "end_combat",
    # Cards
    "add_card_to_hand",
    "force_add_card",
    "discard_card",
    "draw_cards",
    "is_hand_full",
    "play_card",
    # Party
    "handle_leader_down",
    "remove_member",
    "switch_leader",
    "equip_item",
    "unequip_item",
    "equipped_item",
    "available_equipment",
    "recruit_ally",
    "resolve_pending_ally",
    # Encounters & boss
    "resolve_hazard",
    "take_item",
    "take_key",
    "next_level",
    "start_boss_phase",
    "complete_boss_phase",
    # Runs
    "new_run",
    "GameSession",
]
