"""Pydantic V2 models for the Cruxfade simulation core.

Submodules:
    enums: Enumeration types (TileType, Turn, EffectKind, PhaseType, ...)
    board: Level grid (Position, Tile, Board)
    party: Party members and equipment
    cards: Card instances
    combat: Combat state and status flags
    boss: Boss encounter progress
    game_state: The run state record

Example:
    >>> from cruxfade.models import Tile, TileType
    >>> tile = Tile(type=TileType.FIGHT, row=0, col=1)
    >>> tile.combat_engaged
    False
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from cruxfade.models.enums import (
    CardType,
    CombatOutcome,
    CombatPhase,
    EffectKind,
    EquipmentSlot,
    FightStage,
    PhaseType,
    StatName,
    TileType,
    Turn,
)

# =============================================================================
# Board
# =============================================================================
from cruxfade.models.board import Board, Position, Tile, in_bounds, position_name

# =============================================================================
# Party, Cards & Combat
# =============================================================================
from cruxfade.models.party import BaseStats, EquipmentItem, PartyMember
from cruxfade.models.cards import Card
from cruxfade.models.combat import CombatState, EnemySnapshot, StatusFlags
from cruxfade.models.boss import BossState

# =============================================================================
# Run State
# =============================================================================
from cruxfade.models.game_state import GameState, PendingRecruit


__all__ = [
    # Enums
    "CardType",
    "CombatOutcome",
    "CombatPhase",
    "EffectKind",
    "EquipmentSlot",
    "FightStage",
    "PhaseType",
    "StatName",
    "TileType",
    "Turn",
    # Board
    "Board",
    "Position",
    "Tile",
    "in_bounds",
    "position_name",
    # Party, cards & combat
    "BaseStats",
    "EquipmentItem",
    "PartyMember",
    "Card",
    "CombatState",
    "EnemySnapshot",
    "StatusFlags",
    "BossState",
    # Run state
    "GameState",
    "PendingRecruit",
]
