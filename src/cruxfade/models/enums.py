"""Enumeration types for the Cruxfade simulation core.

Tile kinds, combat turns, card and equipment categories, boss phase
kinds and the closed set of card effects.
"""

from __future__ import annotations

from enum import StrEnum


class TileType(StrEnum):
    """Encounter type of a grid tile."""

    START = "start"
    FIGHT = "fight"
    HAZARD = "hazard"
    ITEM = "item"
    ALLY = "ally"
    KEY = "key"
    DOOR = "door"
    EMPTY = "empty"
    BOSS_ENCOUNTER = "boss-encounter"

    @property
    def always_completed(self) -> bool:
        """Whether the player may always leave a tile of this type."""
        return self in (TileType.START, TileType.EMPTY, TileType.DOOR)


class FightStage(StrEnum):
    """Engagement lifecycle of a tile that hosts a fight.

    UNENGAGED tiles have never started combat; ENGAGED tiles have started
    combat at least once; RESOLVED tiles had their enemy defeated.
    """

    UNENGAGED = "unengaged"
    ENGAGED = "engaged"
    RESOLVED = "resolved"


class Turn(StrEnum):
    """Side whose turn it is in combat."""

    PLAYER = "player"
    ENEMY = "enemy"


class CombatPhase(StrEnum):
    """Observable state of the combat state machine."""

    IDLE = "idle"
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"
    RESOLVED = "resolved"


class CombatOutcome(StrEnum):
    """How the most recent combat ended."""

    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


class CardType(StrEnum):
    """Card categories."""

    ATTACK = "attack"
    DEFENSE = "defense"
    UTILITY = "utility"


class EffectKind(StrEnum):
    """Closed set of card effects the engine knows how to resolve."""

    BASIC_STRIKE = "basic-strike"
    SHIELD_BASH = "shield-bash"
    TAUNT = "taunt"
    MAGIC_BOLT = "magic-bolt"
    HEAL = "heal"
    SNEAK_ATTACK = "sneak-attack"
    DODGE = "dodge"
    TRACK = "track"
    FIRST_AID = "first-aid"
    DEFEND = "defend"
    MOVE = "move"

    @property
    def requires_combat(self) -> bool:
        """Whether the effect only fires during an active combat."""
        return self not in (
            EffectKind.HEAL,
            EffectKind.TRACK,
            EffectKind.FIRST_AID,
            EffectKind.MOVE,
        )


class EquipmentSlot(StrEnum):
    """Equipment slots, one item each per member."""

    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"


class StatName(StrEnum):
    """Member stats that items and checks refer to."""

    HP = "hp"
    ATK = "atk"
    MAG = "mag"


class PhaseType(StrEnum):
    """Kinds of boss phase."""

    FIGHT = "fight"
    HAZARD = "hazard"
    BOSS_FIGHT = "boss-fight"
    CHOICE = "choice"


__all__ = [
    "TileType",
    "FightStage",
    "Turn",
    "CombatPhase",
    "CombatOutcome",
    "CardType",
    "EffectKind",
    "EquipmentSlot",
    "StatName",
    "PhaseType",
]
