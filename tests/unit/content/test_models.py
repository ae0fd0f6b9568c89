"""Tests for content record schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cruxfade.content.models import (
    BossPhase,
    ContentPack,
    EncounterTable,
    ItemTables,
)
from cruxfade.core.exceptions import ContentError
from cruxfade.models import PhaseType, TileType


class TestEncounterTable:
    """Tests for encounter weight validation."""

    def test_accepts_weights(self) -> None:
        """Test weights load keyed by tile type."""
        table = EncounterTable.model_validate({"encounterWeights": {"fight": 3, "item": 1}})
        assert table.encounter_weights == {TileType.FIGHT: 3, TileType.ITEM: 1}

    def test_rejects_start_and_boss(self) -> None:
        """Test entrance and boss tiles cannot be drawn."""
        with pytest.raises(ValidationError):
            EncounterTable.model_validate({"encounterWeights": {"start": 1, "fight": 1}})

    def test_rejects_zero_total(self) -> None:
        """Test weights must add up to something."""
        with pytest.raises(ValidationError):
            EncounterTable.model_validate({"encounterWeights": {"fight": 0}})


class TestItemTables:
    """Tests for item tables."""

    def test_needs_some_items(self) -> None:
        """Test empty item tables are rejected."""
        with pytest.raises(ValidationError):
            ItemTables.model_validate({})

    def test_loot_table_fallbacks(self) -> None:
        """Test level, then basic, then the default table."""
        tables = ItemTables.model_validate(
            {
                "consumables": {"p": {"name": "P", "stat": "hp", "boost": 1}},
                "lootTables": {"grid-2": {"consumables": 0.1}},
            }
        )

        assert tables.loot_table(2).consumables == pytest.approx(0.1)
        assert tables.loot_table(3).consumables == pytest.approx(0.7)


class TestBossPhase:
    """Tests for boss phase records."""

    def test_party_choice_alias(self) -> None:
        """Test the older party-choice name maps to choice."""
        assert BossPhase.model_validate({"type": "party-choice"}).type == PhaseType.CHOICE

    def test_sequential_inferred(self) -> None:
        """Test several enemies make a phase sequential."""
        phase = BossPhase.model_validate({"type": "fight", "enemies": ["a", "b"]})
        single = BossPhase.model_validate({"type": "fight", "enemies": ["a"]})

        assert phase.sequential is True
        assert single.sequential is False

    def test_rejects_parallel_multi_enemy(self) -> None:
        """Test several enemies cannot be fought at once."""
        with pytest.raises(ValidationError):
            BossPhase.model_validate({"type": "fight", "enemies": ["a", "b"], "sequential": False})

    def test_boss_fight_needs_enemy(self) -> None:
        """Test boss-fight phases name their enemy."""
        with pytest.raises(ValidationError):
            BossPhase.model_validate({"type": "boss-fight"})

    def test_snake_case_accepted(self) -> None:
        """Test field names work as well as camelCase aliases."""
        phase = BossPhase.model_validate({"type": "hazard", "preferred_stat": "mag"})
        assert phase.preferred_stat == "mag"


class TestContentPack:
    """Tests for ContentPack lookups."""

    @pytest.fixture
    def pack(self) -> ContentPack:
        return ContentPack.model_validate({"enemies": {"goblin": {"name": "Goblin", "hp": 6, "atk": 2}}})

    def test_enemy_lookup(self, pack: ContentPack) -> None:
        """Test enemies are found by id."""
        assert pack.enemy("goblin").name == "Goblin"

    @pytest.mark.parametrize("lookup", ["enemy", "boss_enemy", "card", "boss"])
    def test_missing_records(self, pack: ContentPack, lookup: str) -> None:
        """Test missing records raise ContentError with the id."""
        with pytest.raises(ContentError) as exc_info:
            getattr(pack, lookup)("missing")

        assert exc_info.value.details["record_id"] == "missing"

    def test_default_tables(self, pack: ContentPack) -> None:
        """Test cards, allies and hazards default to the built-in tables."""
        assert pack.card("helping-hand").effect == "help"
        assert pack.allies["mage"].cards == ["magic-bolt", "heal"]
        assert pack.hazards[0].name == "Poison Spores"

    def test_encounter_table_fallback(self) -> None:
        """Test levels without a table use the first level's."""
        pack = ContentPack.model_validate(
            {
                "enemies": {"goblin": {"name": "Goblin", "hp": 6, "atk": 2}},
                "encounter_tables": {"grid-1": {"encounterWeights": {"fight": 1}}},
            }
        )
        assert pack.encounter_table(9) is pack.encounter_tables["grid-1"]
        assert pack.boss_for_level(1) is None
