"""Static content: record schemas, built-in tables and the JSON loader."""

from __future__ import annotations

from cruxfade.content.loader import build_content, builtin_content, load_content
from cruxfade.content.models import (
    AllyTemplate,
    BossDefinition,
    BossPhase,
    CardDefinition,
    ConsumableItem,
    ContentPack,
    EncounterTable,
    EnemyPools,
    EnemyTemplate,
    EquipmentTemplate,
    HazardDefinition,
    ItemTables,
    LootTable,
    VictoryRewards,
)


__all__ = [
    # Loading
    "build_content",
    "builtin_content",
    "load_content",
    # Records
    "AllyTemplate",
    "BossDefinition",
    "BossPhase",
    "CardDefinition",
    "ConsumableItem",
    "ContentPack",
    "EncounterTable",
    "EnemyPools",
    "EnemyTemplate",
    "EquipmentTemplate",
    "HazardDefinition",
    "ItemTables",
    "LootTable",
    "VictoryRewards",
]
