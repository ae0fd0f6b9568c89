"""Party member and equipment models.

A member keeps its pre-equipment stats in ``base_stats``; the live
``max_hp``/``atk``/``mag`` fields are derived from them plus whatever the
member has equipped and are recomputed by ``apply_equipment``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer

from cruxfade.models.enums import EquipmentSlot, StatName


class BaseStats(BaseModel):
    """Cached pre-equipment stats of a member."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_hp: int = Field(ge=1)
    atk: int = Field(default=0, ge=0)
    mag: int = Field(default=0, ge=0)


class EquipmentItem(BaseModel):
    """An equippable item instance.

    Attributes:
        id: Unique instance id.
        name: Display name.
        slot: Slot the item occupies.
        stat_bonus: Flat bonuses keyed by stat.
        description: Flavour text.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str
    name: str
    slot: EquipmentSlot
    stat_bonus: dict[StatName, int] = Field(default_factory=dict)
    description: str = ""

    def bonus(self, stat: StatName) -> int:
        return self.stat_bonus.get(stat, 0)


class PartyMember(BaseModel):
    """A member of the adventuring party.

    Attributes:
        id: Unique member id within the run.
        name: Display name.
        hp: Current hit points, never above max_hp.
        max_hp: Derived maximum hit points.
        atk: Derived attack.
        mag: Derived magic.
        tags: Free-form tags (class, origin, "leader").
        base_stats: Stats before equipment bonuses.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",  # Ignore computed fields when deserializing
    )

    id: str
    name: str
    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    atk: int = Field(default=0, ge=0)
    mag: int = Field(default=0, ge=0)
    tags: set[str] = Field(default_factory=set)
    base_stats: BaseStats

    @classmethod
    def create(
        cls,
        member_id: str,
        name: str,
        *,
        hp: int,
        atk: int = 0,
        mag: int = 0,
        tags: set[str] | None = None,
    ) -> PartyMember:
        """Build a member at full health with matching base stats."""
        return cls(
            id=member_id,
            name=name,
            hp=hp,
            max_hp=hp,
            atk=atk,
            mag=mag,
            tags=set(tags or ()),
            base_stats=BaseStats(max_hp=hp, atk=atk, mag=mag),
        )

    @field_serializer("tags")
    def serialize_tags(self, tags: set[str]) -> list[str]:
        # sorted so state fingerprints do not depend on set ordering
        return sorted(tags)

    @computed_field(description="Whether the member can still act")
    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def missing_hp(self) -> int:
        return self.max_hp - self.hp

    def stat(self, stat: StatName) -> int:
        """Current value of a stat by name."""
        match stat:
            case StatName.HP:
                return self.hp
            case StatName.ATK:
                return self.atk
            case StatName.MAG:
                return self.mag

    def take_damage(self, amount: int) -> int:
        """Apply damage and return the HP actually lost."""
        if amount <= 0:
            return 0
        lost = min(self.hp, amount)
        self.hp -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Restore HP up to max and return the amount restored."""
        if amount <= 0:
            return 0
        restored = min(self.missing_hp, amount)
        self.hp += restored
        return restored

    def apply_equipment(self, items: list[EquipmentItem]) -> None:
        """Recompute derived stats from base stats and equipped items.

        Current HP is clamped to the new maximum; gaining max HP from
        equipment does not heal.
        """
        max_hp = self.base_stats.max_hp + sum(item.bonus(StatName.HP) for item in items)
        self.max_hp = max(1, max_hp)
        self.hp = min(self.hp, self.max_hp)
        self.atk = max(0, self.base_stats.atk + sum(item.bonus(StatName.ATK) for item in items))
        self.mag = max(0, self.base_stats.mag + sum(item.bonus(StatName.MAG) for item in items))


__all__ = [
    "BaseStats",
    "EquipmentItem",
    "PartyMember",
]
