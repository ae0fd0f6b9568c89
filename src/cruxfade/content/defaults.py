"""Built-in content data.

Raw records in the same camelCase shape as the JSON content files. The
optional tables here back any table a content directory leaves out; the
enemy, encounter, item and boss tables together form the built-in pack
used when no content directory is configured.
"""

from __future__ import annotations

import copy
from typing import Any

# =============================================================================
# Run Setup
# =============================================================================

STARTING_LEADER: dict[str, Any] = {
    "id": "you",
    "name": "You",
    "hp": 10,
    "atk": 2,
    "mag": 1,
    "tags": ["human", "leader"],
}

STARTER_DECK: list[str] = ["basic-strike", "basic-strike", "defend", "move"]
"""Card keys dealt into the opening hand."""

DEFAULT_ALLY_CARDS: list[str] = ["helping-hand"]
"""Cards contributed by an ally template that names none."""

DEFAULT_ENCOUNTER_WEIGHTS: dict[str, float] = {
    "fight": 3,
    "hazard": 2,
    "item": 2,
    "ally": 1,
    "empty": 1,
}

# =============================================================================
# Optional Tables
# =============================================================================

DEFAULT_CARDS: dict[str, dict[str, Any]] = {
    "basic-strike": {
        "name": "Basic Strike",
        "type": "attack",
        "effect": "basic-strike",
        "description": "Deal ATK + d6 - 2 damage",
    },
    "defend": {
        "name": "Defend",
        "type": "defense",
        "effect": "defend",
        "description": "Halve the next incoming attack",
    },
    "move": {
        "name": "Quick Move",
        "type": "utility",
        "effect": "move",
        "description": "Shake off fatigue and keep moving",
    },
    "shield-bash": {
        "name": "Shield Bash",
        "type": "attack",
        "effect": "shield-bash",
        "description": "+2 damage and stun enemy for 1 turn",
    },
    "taunt": {
        "name": "Taunt",
        "type": "defense",
        "effect": "taunt",
        "description": "Force enemy to attack you, reduce damage taken",
    },
    "magic-bolt": {
        "name": "Magic Bolt",
        "type": "attack",
        "effect": "magic-bolt",
        "description": "Deal magic damage, bypasses armor",
    },
    "heal": {
        "name": "Heal",
        "type": "utility",
        "effect": "heal",
        "description": "Restore HP to party leader",
    },
    "sneak-attack": {
        "name": "Sneak Attack",
        "type": "attack",
        "effect": "sneak-attack",
        "description": "Deal double damage if enemy is unaware",
    },
    "dodge": {
        "name": "Dodge",
        "type": "defense",
        "effect": "dodge",
        "description": "Avoid the next attack completely",
    },
    "track": {
        "name": "Track",
        "type": "utility",
        "effect": "track",
        "description": "Reveal hidden encounters on the grid",
    },
    "first-aid": {
        "name": "First Aid",
        "type": "utility",
        "effect": "first-aid",
        "description": "Heal minor wounds during exploration",
    },
    "helping-hand": {
        "name": "Helping Hand",
        "type": "utility",
        "effect": "help",
        "description": "Generic assistance from your ally",
    },
}

DEFAULT_ALLIES: dict[str, dict[str, Any]] = {
    "warrior": {
        "name": "Warrior",
        "hp": 12,
        "atk": 4,
        "mag": 0,
        "tags": ["human", "warrior"],
        "cards": ["shield-bash", "taunt"],
    },
    "mage": {
        "name": "Mage",
        "hp": 6,
        "atk": 1,
        "mag": 4,
        "tags": ["human", "mage"],
        "cards": ["magic-bolt", "heal"],
    },
    "rogue": {
        "name": "Rogue",
        "hp": 8,
        "atk": 3,
        "mag": 2,
        "tags": ["human", "rogue"],
        "cards": ["sneak-attack", "dodge"],
    },
    "scout": {
        "name": "Scout",
        "hp": 10,
        "atk": 2,
        "mag": 1,
        "tags": ["human", "scout"],
        "cards": ["track", "first-aid"],
    },
}

DEFAULT_HAZARDS: list[dict[str, Any]] = [
    {"name": "Poison Spores", "difficulty": 12, "damage": 2, "stat": "atk"},
    {"name": "Pit Trap", "difficulty": 11, "damage": 3, "stat": "atk"},
    {"name": "Magic Ward", "difficulty": 13, "damage": 2, "stat": "mag"},
    {"name": "Unstable Floor", "difficulty": 10, "damage": 1, "stat": "atk"},
    {"name": "Arcane Barrier", "difficulty": 14, "damage": 3, "stat": "mag"},
]

FALLBACK_ITEMS: list[dict[str, Any]] = [
    {"name": "Health Potion", "stat": "hp", "boost": 3, "maxBoost": 2},
    {"name": "Strength Elixir", "stat": "atk", "boost": 1},
    {"name": "Magic Crystal", "stat": "mag", "boost": 1},
]
"""Items handed out when no item tables are loaded."""

# =============================================================================
# Built-in Pack
# =============================================================================

BUILTIN_ENEMIES: dict[str, dict[str, Any]] = {
    "goblin": {"name": "Goblin", "hp": 6, "atk": 2},
    "rat": {"name": "Giant Rat", "hp": 4, "atk": 1},
    "slime": {"name": "Cave Slime", "hp": 7, "atk": 2},
    "skeleton": {"name": "Skeleton", "hp": 8, "atk": 3},
    "bandit": {"name": "Bandit", "hp": 9, "atk": 3},
    "cultist": {"name": "Cultist", "hp": 9, "atk": 3, "mag": 2},
    "orc": {"name": "Orc Brute", "hp": 12, "atk": 4},
    "wraith": {"name": "Wraith", "hp": 10, "atk": 5, "mag": 3},
    "troll": {"name": "Cave Troll", "hp": 16, "atk": 5},
    "ogre": {"name": "Ogre", "hp": 18, "atk": 6},
}

BUILTIN_ENCOUNTERS: dict[str, dict[str, Any]] = {
    "grid-1": {
        "encounterWeights": {"fight": 3, "hazard": 2, "item": 2, "ally": 1, "empty": 1},
        "enemyPools": {"common": ["goblin", "rat", "slime"], "rare": ["skeleton"]},
    },
    "grid-2": {
        "encounterWeights": {"fight": 4, "hazard": 2, "item": 2, "ally": 1, "empty": 1},
        "enemyPools": {"common": ["skeleton", "bandit", "slime"], "rare": ["orc"]},
    },
    "grid-3": {
        "encounterWeights": {"fight": 4, "hazard": 3, "item": 2, "ally": 1, "empty": 1},
        "enemyPools": {"common": ["orc", "bandit", "cultist"], "rare": ["wraith", "troll"]},
    },
    "grid-5": {
        "encounterWeights": {"fight": 5, "hazard": 3, "item": 2, "ally": 1, "empty": 1},
        "enemyPools": {"common": ["wraith", "troll", "cultist"], "rare": ["ogre"]},
    },
}

BUILTIN_ITEMS: dict[str, Any] = {
    "consumables": {
        "health-potion": {"name": "Health Potion", "stat": "hp", "boost": 3, "maxBoost": 2},
        "strength-elixir": {"name": "Strength Elixir", "stat": "atk", "boost": 1},
        "magic-crystal": {"name": "Magic Crystal", "stat": "mag", "boost": 1},
        "troll-draught": {"name": "Troll Draught", "stat": "hp", "boost": 6},
    },
    "equipment": {
        "rusty-sword": {"name": "Rusty Sword", "slot": "weapon", "statBonus": {"atk": 1}},
        "iron-sword": {"name": "Iron Sword", "slot": "weapon", "statBonus": {"atk": 2}},
        "leather-armor": {"name": "Leather Armor", "slot": "armor", "statBonus": {"hp": 3}},
        "chain-mail": {"name": "Chain Mail", "slot": "armor", "statBonus": {"hp": 5}},
        "lucky-charm": {"name": "Lucky Charm", "slot": "accessory", "statBonus": {"mag": 1}},
        "amulet-of-vigor": {
            "name": "Amulet of Vigor",
            "slot": "accessory",
            "statBonus": {"hp": 2, "mag": 1},
        },
    },
    "lootTables": {
        "basic": {"consumables": 0.7},
        "grid-1": {"consumables": 0.8},
        "grid-3": {"consumables": 0.6},
    },
}

BUILTIN_BOSS_ENEMIES: dict[str, dict[str, Any]] = {
    "hollow-warden": {"name": "The Hollow Warden", "hp": 22, "atk": 5},
    "cruxfade-sovereign": {"name": "The Cruxfade Sovereign", "hp": 30, "atk": 6, "mag": 4},
}

BUILTIN_BOSSES: dict[str, dict[str, Any]] = {
    "hollow-warden": {
        "name": "The Hollow Warden",
        "description": "A gaoler of the deep halls, bound to guard the lower stair.",
        "unlockLevel": 4,
        "phases": [
            {
                "type": "fight",
                "name": "Gatehouse Guards",
                "description": "The Warden's guards bar the way, one after another.",
                "enemies": ["skeleton", "bandit"],
                "sequential": True,
            },
            {
                "type": "hazard",
                "name": "Collapsing Bridge",
                "description": "The bridge to the Warden's hall crumbles underfoot.",
                "difficulty": 12,
                "preferredStat": "atk",
                "damage": 3,
            },
            {
                "type": "boss-fight",
                "name": "The Hollow Warden",
                "description": "The Warden rises from its iron throne.",
                "enemy": "hollow-warden",
            },
        ],
        "victoryRewards": {
            "gold": 50,
            "experience": 100,
            "gameComplete": False,
            "completionMessage": "The Warden falls and the lower stair opens.",
        },
    },
    "cruxfade-sovereign": {
        "name": "The Cruxfade Sovereign",
        "description": "The fading ruler at the heart of the dungeon.",
        "unlockLevel": 6,
        "phases": [
            {
                "type": "fight",
                "name": "Honor Guard",
                "enemies": ["orc"],
            },
            {
                "type": "choice",
                "name": "The Crux",
                "description": "Your party steels itself before the final door.",
            },
            {
                "type": "hazard",
                "name": "Fading Wards",
                "description": "Wards of failing light lash out at intruders.",
                "difficulty": 14,
                "preferredStat": "mag",
                "damage": 4,
            },
            {
                "type": "boss-fight",
                "name": "The Cruxfade Sovereign",
                "enemy": "cruxfade-sovereign",
                "mechanicText": "The Sovereign's blows grow stronger as the light fades.",
            },
        ],
        "victoryRewards": {
            "gold": 200,
            "experience": 500,
            "unlocks": ["endless-mode"],
            "gameComplete": True,
            "completionMessage": "The Cruxfade is broken. The dungeon falls silent.",
        },
    },
}


def copy_table(table: Any) -> Any:
    """Deep copy of a default table so callers may mutate it freely."""
    return copy.deepcopy(table)


__all__ = [
    "STARTING_LEADER",
    "STARTER_DECK",
    "DEFAULT_ALLY_CARDS",
    "DEFAULT_ENCOUNTER_WEIGHTS",
    "DEFAULT_CARDS",
    "DEFAULT_ALLIES",
    "DEFAULT_HAZARDS",
    "FALLBACK_ITEMS",
    "BUILTIN_ENEMIES",
    "BUILTIN_ENCOUNTERS",
    "BUILTIN_ITEMS",
    "BUILTIN_BOSS_ENEMIES",
    "BUILTIN_BOSSES",
    "copy_table",
]
