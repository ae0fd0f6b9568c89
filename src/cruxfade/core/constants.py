"""Game-wide constants for the Cruxfade simulation core.

Grid geometry, caps, dice sizes and the default tuning values that
GameSettings starts from.
"""

from __future__ import annotations

# =============================================================================
# Grid Geometry
# =============================================================================

GRID_SIZE = 4
"""Rows and columns on every level grid."""

TILE_COUNT = GRID_SIZE * GRID_SIZE
"""Number of tiles on a level."""

START_ROW = 1
"""Row of the entrance on the first level."""

START_COL = 0
"""Column of the entrance on the first level."""

POSITION_NAMES = {
    (0, 0): "top-left",
    (0, 1): "top-center-left",
    (0, 2): "top-center-right",
    (0, 3): "top-right",
    (1, 0): "middle-left",
    (1, 1): "middle-center-left",
    (1, 2): "middle-center-right",
    (1, 3): "middle-right",
    (2, 0): "lower-left",
    (2, 1): "lower-center-left",
    (2, 2): "lower-center-right",
    (2, 3): "lower-right",
    (3, 0): "bottom-left",
    (3, 1): "bottom-center-left",
    (3, 2): "bottom-center-right",
    (3, 3): "bottom-right",
}
"""Readable names for grid cells, used in log text."""

# =============================================================================
# Caps
# =============================================================================

MAX_HAND_SIZE = 5
"""Hard cap on cards in hand."""

MAX_PARTY_SIZE = 4
"""Maximum party members including the leader."""

MAX_LOG_ENTRIES = 50
"""Player log entries kept before the oldest are dropped."""

# =============================================================================
# Dice & Combat
# =============================================================================

ATTACK_DIE = 6
"""Die rolled for attack damage."""

CHECK_DIE = 20
"""Die rolled for flee attempts and hazard checks."""

ATTACK_OFFSET = 3
"""Subtracted from attack + roll for basic attacks."""

FLEE_BASE_DIFFICULTY = 12
"""Flee difficulty before the enemy's attack is added."""

DEFAULT_ENEMY_ID = "goblin"
"""Enemy used when no encounter table supplies a pool."""

# =============================================================================
# Default Tuning
# =============================================================================

RARE_ENEMY_CHANCE = 0.2
"""Probability of drawing from the rare enemy pool."""

HAZARD_BONUS_ITEM_CHANCE = 0.3
"""Probability of a bonus item after clearing a hazard."""

FALLBACK_FINAL_LEVEL = 6
"""Level past which a run is won when no boss content is loaded."""

BOSS_REWARD_ATK = 1
"""Permanent attack bonus for the leader after a mid-campaign boss."""

BOSS_REWARD_MAX_HP = 2
"""Permanent max HP bonus for the leader after a mid-campaign boss."""

DEFAULT_SEED = 12345
"""Seed used when a run is started without one."""


__all__ = [
    # Grid
    "GRID_SIZE",
    "TILE_COUNT",
    "START_ROW",
    "START_COL",
    "POSITION_NAMES",
    # Caps
    "MAX_HAND_SIZE",
    "MAX_PARTY_SIZE",
    "MAX_LOG_ENTRIES",
    # Dice & combat
    "ATTACK_DIE",
    "CHECK_DIE",
    "ATTACK_OFFSET",
    "FLEE_BASE_DIFFICULTY",
    "DEFAULT_ENEMY_ID",
    # Tuning
    "RARE_ENEMY_CHANCE",
    "HAZARD_BONUS_ITEM_CHANCE",
    "FALLBACK_FINAL_LEVEL",
    "BOSS_REWARD_ATK",
    "BOSS_REWARD_MAX_HP",
    "DEFAULT_SEED",
]
