"""Schemas for static content records.

Content files use camelCase keys; every record here accepts both the
camelCase alias and the snake_case field name. ContentPack is the
read-only lookup surface the engine uses; lookups of missing required
records raise ContentError instead of crashing the caller.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from cruxfade.content.defaults import (
    DEFAULT_ALLIES,
    DEFAULT_ALLY_CARDS,
    DEFAULT_CARDS,
    DEFAULT_HAZARDS,
    copy_table,
)
from cruxfade.core.constants import DEFAULT_ENEMY_ID
from cruxfade.core.exceptions import ContentError
from cruxfade.models.enums import CardType, EquipmentSlot, PhaseType, StatName, TileType


class ContentRecord(BaseModel):
    """Base class for content records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Enemies & Encounters
# =============================================================================


class EnemyTemplate(ContentRecord):
    """An enemy as described in content data."""

    name: str
    hp: int = Field(ge=1)
    atk: int = Field(ge=0)
    mag: int = Field(default=0, ge=0)
    description: str = ""


class EnemyPools(ContentRecord):
    """Enemy ids a level's fights draw from."""

    common: list[str] = Field(default_factory=list)
    rare: list[str] = Field(default_factory=list)


class EncounterTable(ContentRecord):
    """Per-level encounter weights and enemy pools.

    Attributes:
        encounter_weights: Relative weight per tile type, in draw order.
        enemy_pools: Enemy ids for fight tiles.
    """

    encounter_weights: dict[TileType, float]
    enemy_pools: EnemyPools = Field(default_factory=EnemyPools)

    @field_validator("encounter_weights", mode="after")
    @classmethod
    def validate_weights(cls, value: dict[TileType, float]) -> dict[TileType, float]:
        """Reject unplaceable tile types and non-positive totals."""
        forbidden = {TileType.START, TileType.BOSS_ENCOUNTER} & set(value)
        if forbidden:
            raise ValueError(f"Tile types cannot be weighted: {sorted(forbidden)}")
        if any(weight < 0 for weight in value.values()):
            raise ValueError("Encounter weights must not be negative")
        if sum(value.values()) <= 0:
            raise ValueError("Encounter weights must have a positive total")
        return value


class HazardDefinition(ContentRecord):
    """A hazard rolled against on hazard tiles."""

    name: str
    difficulty: int = Field(ge=1)
    damage: int = Field(ge=0)
    stat: StatName = StatName.ATK


# =============================================================================
# Items
# =============================================================================


class ConsumableItem(ContentRecord):
    """A consumable applied to the leader when found.

    HP items heal by ``boost`` and raise max HP by ``max_boost``; other
    stats are raised permanently by ``boost``.
    """

    name: str
    stat: StatName
    boost: int = Field(ge=0)
    max_boost: int = Field(default=0, ge=0)
    description: str = ""


class EquipmentTemplate(ContentRecord):
    """An equipment record; instances are minted when found."""

    name: str
    slot: EquipmentSlot
    stat_bonus: dict[StatName, int] = Field(default_factory=dict)
    description: str = ""


class LootTable(ContentRecord):
    """Probability that a found item is a consumable rather than equipment."""

    consumables: float = Field(default=0.7, ge=0.0, le=1.0)


class ItemTables(ContentRecord):
    """Consumable and equipment pools with per-level loot tables."""

    consumables: dict[str, ConsumableItem] = Field(default_factory=dict)
    equipment: dict[str, EquipmentTemplate] = Field(default_factory=dict)
    loot_tables: dict[str, LootTable] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_some_items(self) -> ItemTables:
        if not self.consumables and not self.equipment:
            raise ValueError("Item tables need at least one consumable or equipment record")
        return self

    def loot_table(self, level: int) -> LootTable:
        """Loot table for a level, falling back to 'basic'."""
        return (
            self.loot_tables.get(f"grid-{level}")
            or self.loot_tables.get("basic")
            or LootTable()
        )


# =============================================================================
# Cards & Allies
# =============================================================================


class CardDefinition(ContentRecord):
    """A card as described in content data."""

    name: str
    type: CardType
    effect: str
    description: str = ""


class AllyTemplate(ContentRecord):
    """A recruitable ally and the cards they bring."""

    name: str
    hp: int = Field(ge=1)
    atk: int = Field(default=0, ge=0)
    mag: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    cards: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLY_CARDS))


# =============================================================================
# Bosses
# =============================================================================


class BossPhase(ContentRecord):
    """One stage of a boss encounter.

    Attributes:
        type: Phase kind.
        name: Display name.
        description: Flavour text.
        enemies: Enemy ids for fight phases, fought one at a time.
        sequential: Whether a fight phase has several enemies in a row.
        difficulty: Check difficulty for hazard phases.
        preferred_stat: Stat added to hazard rolls.
        damage: Damage dealt by a failed hazard.
        enemy: Boss-enemy id for boss-fight phases.
        mechanic_text: Extra rules text shown with the phase.
    """

    type: PhaseType
    name: str = ""
    description: str = ""
    enemies: list[str] = Field(default_factory=list)
    sequential: bool | None = None
    difficulty: int = Field(default=12, ge=1)
    preferred_stat: StatName = StatName.ATK
    damage: int = Field(default=0, ge=0)
    enemy: str | None = None
    mechanic_text: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        # older content files name the choice phase "party-choice"
        if value == "party-choice":
            return PhaseType.CHOICE
        return value

    @model_validator(mode="after")
    def check_phase_fields(self) -> BossPhase:
        """Fill in ``sequential`` and check phase-specific fields."""
        if self.type == PhaseType.BOSS_FIGHT and not self.enemy:
            raise ValueError("boss-fight phases need an enemy reference")
        multiple = len(self.enemies) > 1
        if self.sequential is None:
            self.sequential = multiple
        elif multiple and not self.sequential:
            raise ValueError("Fight phases with several enemies must be sequential")
        return self


class VictoryRewards(ContentRecord):
    """What beating a boss grants."""

    gold: int = Field(default=0, ge=0)
    experience: int = Field(default=0, ge=0)
    unlocks: list[str] = Field(default_factory=list)
    game_complete: bool = False
    completion_message: str = ""


class BossDefinition(ContentRecord):
    """A multi-phase boss encounter."""

    name: str
    description: str = ""
    unlock_level: int = Field(ge=1)
    phases: list[BossPhase] = Field(min_length=1)
    victory_rewards: VictoryRewards = Field(default_factory=VictoryRewards)


# =============================================================================
# Content Pack
# =============================================================================


class ContentPack(BaseModel):
    """All static data a run consumes.

    Only ``enemies`` is required. Cards, allies and hazards default to the
    built-in tables; encounter and item tables may be absent, in which
    case the engine uses its fallback distributions.
    """

    model_config = ConfigDict(extra="forbid")

    enemies: dict[str, EnemyTemplate] = Field(min_length=1)
    boss_enemies: dict[str, EnemyTemplate] = Field(default_factory=dict)
    cards: dict[str, CardDefinition] = Field(
        default_factory=lambda: copy_table(DEFAULT_CARDS),
        validate_default=True,
    )
    encounter_tables: dict[str, EncounterTable] = Field(default_factory=dict)
    items: ItemTables | None = None
    hazards: list[HazardDefinition] = Field(
        default_factory=lambda: copy_table(DEFAULT_HAZARDS),
        validate_default=True,
        min_length=1,
    )
    allies: dict[str, AllyTemplate] = Field(
        default_factory=lambda: copy_table(DEFAULT_ALLIES),
        validate_default=True,
    )
    bosses: dict[str, BossDefinition] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_enemy_references(self) -> ContentPack:
        """Reject pools and boss phases that name enemies nobody defined.

        Fights draw their enemy before the template is looked up, so a
        dangling id has to be caught here rather than mid-run.
        """
        missing: list[str] = []
        for table_id, table in self.encounter_tables.items():
            pools = table.enemy_pools
            if not pools.common and not pools.rare and DEFAULT_ENEMY_ID not in self.enemies:
                missing.append(f"{table_id}: {DEFAULT_ENEMY_ID}")
            missing.extend(
                f"{table_id}: {enemy_id}"
                for enemy_id in pools.common + pools.rare
                if enemy_id not in self.enemies
            )
        for boss_id, boss in self.bosses.items():
            for index, phase in enumerate(boss.phases):
                missing.extend(
                    f"{boss_id} phase {index + 1}: {enemy_id}"
                    for enemy_id in phase.enemies
                    if enemy_id not in self.enemies
                )
                if phase.type == PhaseType.BOSS_FIGHT and phase.enemy not in self.boss_enemies:
                    missing.append(f"{boss_id} phase {index + 1}: {phase.enemy}")
        if missing:
            raise ValueError(f"Unknown enemy references: {', '.join(missing)}")
        return self

    def enemy(self, enemy_id: str) -> EnemyTemplate:
        """Look up an enemy template.

        Raises:
            ContentError: If no template has that id.
        """
        try:
            return self.enemies[enemy_id]
        except KeyError:
            raise ContentError(
                f"Unknown enemy '{enemy_id}'",
                record_type="enemy",
                record_id=enemy_id,
            ) from None

    def boss_enemy(self, enemy_id: str) -> EnemyTemplate:
        """Look up a boss-enemy record.

        Raises:
            ContentError: If no boss-enemy record has that id.
        """
        try:
            return self.boss_enemies[enemy_id]
        except KeyError:
            raise ContentError(
                f"Unknown boss enemy '{enemy_id}'",
                record_type="boss-enemy",
                record_id=enemy_id,
            ) from None

    def card(self, card_key: str) -> CardDefinition:
        """Look up a card definition.

        Raises:
            ContentError: If no card has that key.
        """
        try:
            return self.cards[card_key]
        except KeyError:
            raise ContentError(
                f"Unknown card '{card_key}'",
                record_type="card",
                record_id=card_key,
            ) from None

    def boss(self, boss_id: str) -> BossDefinition:
        """Look up a boss definition.

        Raises:
            ContentError: If no boss has that id.
        """
        try:
            return self.bosses[boss_id]
        except KeyError:
            raise ContentError(
                f"Unknown boss '{boss_id}'",
                record_type="boss",
                record_id=boss_id,
            ) from None

    def encounter_table(self, level: int) -> EncounterTable | None:
        """Encounter table for a level, falling back to the first level's."""
        return self.encounter_tables.get(f"grid-{level}") or self.encounter_tables.get("grid-1")

    def boss_for_level(self, level: int) -> str | None:
        """Id of the boss that guards a level, if any."""
        for boss_id, boss in self.bosses.items():
            if boss.unlock_level == level:
                return boss_id
        return None


__all__ = [
    "ContentRecord",
    "EnemyTemplate",
    "EnemyPools",
    "EncounterTable",
    "HazardDefinition",
    "ConsumableItem",
    "EquipmentTemplate",
    "LootTable",
    "ItemTables",
    "CardDefinition",
    "AllyTemplate",
    "BossPhase",
    "VictoryRewards",
    "BossDefinition",
    "ContentPack",
]
