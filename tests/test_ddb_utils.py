"""Tests for the D&D Beyond lookup tables and shared helpers."""

import dataclasses

import pytest

from ddb_bridge.importers.dndbeyond import schema
from ddb_bridge.importers.dndbeyond.utils import (
    filter_modifiers,
    get_chosen_class_modifiers,
    get_source_data,
    parse_source,
    version_compare,
)
from ddb_bridge.models import DDBCharacter, ItemDefinition, Modifier
from ddb_bridge.templates import get_template, item_types


class TestLookupTables:
    """Test the static tables and their accessors."""

    def test_abilities_order(self):
        assert [a.value for a in schema.abilities()] == ["str", "dex", "con", "int", "wis", "cha"]

    def test_ability_by_id(self):
        assert schema.ability_by_id(6).long == "charisma"
        assert schema.ability_by_id(None) is None

    def test_skill_by_label(self):
        assert schema.skill_by_label("Sleight of Hand").name == "slt"
        assert schema.skill_by_label("Cooking") is None

    @pytest.mark.parametrize("reset_id,expected", [(1, "sr"), ("2", "lr"), (3, "day"), (4, "charges")])
    def test_reset_type(self, reset_id, expected):
        assert schema.reset_type(reset_id).value == expected

    def test_reset_type_unknown(self):
        assert schema.reset_type(None) is None
        assert schema.reset_type("daily") is None
        assert schema.reset_type(0) is None

    def test_spell_progression(self):
        assert schema.spell_progression("Warlock").value == "pact"
        assert schema.spell_progression("Barbarian") is None

    def test_tables_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            schema.ABILITIES[0].value = "xxx"
        with pytest.raises(TypeError):
            schema.ITEM_FILTER_TYPE_MAP["Weapon"] = "loot"


class TestSourceData:
    """Test source book resolution."""

    def test_single_source(self):
        definition = ItemDefinition(source_id=2, source_page_number=150)
        assert get_source_data(definition).name == "PHB"
        assert get_source_data(definition).page == "150"

    def test_multiple_sources(self):
        definition = ItemDefinition.model_validate({"sources": [
            {"sourceId": 2, "pageNumber": 150},
            {"sourceId": 27, "pageNumber": None},
        ]})

        source = get_source_data(definition)

        assert source.name == "PHB, XGtE"
        assert source.page == "150"

    def test_parse_source(self):
        assert parse_source(ItemDefinition(source_id=3, source_page_number=159)) == "DMG pg. 159"
        assert parse_source(ItemDefinition(source_id=3), full_source=True) == "Dungeon Master's Guide"
        assert parse_source(ItemDefinition()) == ""


class TestVersionCompare:
    """Test dotted version comparison."""

    @pytest.mark.parametrize("v1,v2,sign", [
        ("1.4.2", "1.4.2", 0),
        ("1.4", "1.4.0", 0),
        ("1.4.10", "1.4.2", 1),
        ("1.3.9", "1.4.2", -1),
        ("2.0.0", "1.4.2", 1),
    ])
    def test_compare(self, v1, v2, sign):
        result = version_compare(v1, v2)
        assert (result > 0) - (result < 0) == sign


class TestFilterModifiers:
    """Test modifier selection."""

    MODIFIERS = [
        Modifier(type="proficiency", sub_type="stealth", restriction=""),
        Modifier(type="proficiency", sub_type="stealth", restriction="In dim light"),
        Modifier(type="proficiency", sub_type="arcana", restriction=None),
        Modifier(type="bonus", sub_type="stealth", restriction=""),
    ]

    def test_unrestricted_by_default(self):
        assert len(filter_modifiers(self.MODIFIERS, "proficiency", "stealth")) == 1

    def test_any_subtype(self):
        assert len(filter_modifiers(self.MODIFIERS, "proficiency")) == 2

    def test_restriction_check_disabled(self):
        assert len(filter_modifiers(self.MODIFIERS, "proficiency", "stealth", restriction=None)) == 2

    def test_chosen_class_modifiers(self, ddb_character):
        component_ids = {m.component_id for m in get_chosen_class_modifiers(ddb_character)}
        assert component_ids == {100, 300}

    def test_chosen_class_modifiers_empty(self):
        assert get_chosen_class_modifiers(DDBCharacter()) == []


class TestTemplates:
    """Test blank item payloads."""

    def test_item_types(self):
        assert item_types() == ["class", "weapon", "equipment", "consumable", "loot"]

    def test_fresh_copy(self):
        first = get_template("weapon")
        first["damage"]["parts"].append(["1d4", "piercing"])

        assert get_template("weapon")["damage"]["parts"] == []

    def test_class_template_has_no_spellcasting(self):
        assert "spellcasting" not in get_template("class")

    def test_unknown_type(self):
        with pytest.raises(KeyError, match="No item template"):
            get_template("vehicle")
