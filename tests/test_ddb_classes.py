"""Tests for the D&D Beyond class parser."""

import pytest

from ddb_bridge.config import BridgeSettings
from ddb_bridge.importers.dndbeyond import classes
from ddb_bridge.importers.dndbeyond.classes import (
    get_class_saves,
    get_class_skills,
    get_sources,
    get_spellcasting,
    parse_class,
    parse_classes,
)
from ddb_bridge.importers.dndbeyond.spellcasting import get_spellcasting_ability
from ddb_bridge.models import CharacterClass, DDBCharacter


def make_class(definition, subclass=None, **kwargs):
    return CharacterClass.model_validate({
        "definition": definition,
        "subclassDefinition": subclass,
        **kwargs,
    })


class TestGetSources:
    """Test class and subclass source citations."""

    def test_class_only(self):
        cls = make_class({"name": "Wizard", "sourceId": 2, "sourcePageNumber": 112})
        assert get_sources(cls) == "PHB (pg. 112)"

    def test_identical_subclass_source_not_repeated(self):
        cls = make_class(
            {"name": "Fighter", "sourceId": 2, "sourcePageNumber": 12},
            {"name": "Champion", "sourceId": 2, "sourcePageNumber": 12},
        )
        assert get_sources(cls) == "PHB (pg. 12)"

    def test_same_book_different_page(self, ddb_character):
        assert get_sources(ddb_character.character_classes()[0]) == "PHB (pg. 56) (pg. 60)"

    def test_different_book(self):
        cls = make_class(
            {"name": "Rogue", "sourceId": 2, "sourcePageNumber": 94},
            {"name": "Soulknife", "sourceId": 67, "sourcePageNumber": 62},
        )
        assert get_sources(cls) == "PHB (pg. 94), TCoE (pg. 62)"

    def test_full_source_names(self):
        cls = make_class({"name": "Wizard", "sourceId": 2, "sourcePageNumber": 112})
        assert get_sources(cls, full_source=True) == "Player's Handbook (pg. 112)"

    def test_sources_list_preferred(self):
        cls = make_class({
            "name": "Artificer",
            "sourceId": 2,
            "sources": [{"sourceId": 67, "pageNumber": 9}],
        })
        assert get_sources(cls) == "TCoE (pg. 9)"

    def test_unknown_source_is_homebrew(self):
        cls = make_class({"name": "Blood Hunter", "sourceId": 4242})
        assert get_sources(cls) == "Homebrew"

    def test_no_source(self):
        assert get_sources(make_class({"name": "Mystery"})) == ""


class TestGetClassSkills:
    """Test skill proficiencies chosen through class features."""

    def test_cleric_skills(self, ddb_character):
        skills = get_class_skills(ddb_character, ddb_character.character_classes()[0])

        assert skills == {
            "value": ["his", "med"],
            "number": 2,
            "choices": ["his", "ins", "med", "per", "rel"],
        }

    def test_fighter_skills(self, ddb_character):
        skills = get_class_skills(ddb_character, ddb_character.character_classes()[1])

        assert skills == {"value": ["ath"], "number": 1, "choices": ["acr", "ath", "sur"]}

    def test_duplicate_choices_collapsed(self):
        """The same skill picked twice is listed once."""
        character = DDBCharacter.model_validate({
            "classes": [{
                "definition": {"name": "Bard", "classFeatures": [{"id": 7, "name": "Proficiencies"}]},
            }],
            "choices": {
                "class": [
                    {"componentId": 7, "componentTypeId": 1, "type": 2, "subType": 1, "optionValue": 1, "optionIds": [1, 2]},
                    {"componentId": 7, "componentTypeId": 1, "type": 2, "subType": 1, "optionValue": 1, "optionIds": [1, 2]},
                ],
                "choiceDefinitions": [
                    {"id": "1-2", "options": [{"id": 1, "label": "Stealth"}, {"id": 2, "label": "Perception"}]},
                ],
            },
        })

        skills = get_class_skills(character, character.character_classes()[0])

        assert skills["value"] == ["ste"]
        assert skills["number"] == 1
        assert skills["choices"] == ["ste", "prc"]

    def test_same_skill_through_class_and_subclass(self):
        """Both Proficiencies features count; a skill picked through each is listed once."""
        character = DDBCharacter.model_validate({
            "classes": [{
                "definition": {"name": "Rogue", "classFeatures": [{"id": 7, "name": "Proficiencies"}]},
                "subclassDefinition": {"name": "Scout", "classFeatures": [{"id": 8, "name": "Proficiencies"}]},
            }],
            "choices": {
                "class": [
                    {"componentId": 7, "componentTypeId": 1, "type": 2, "subType": 1, "optionValue": 1, "optionIds": [1, 2]},
                    {"componentId": 7, "componentTypeId": 1, "type": 2, "subType": 1, "optionValue": 2, "optionIds": [1, 2]},
                    {"componentId": 8, "componentTypeId": 3, "type": 2, "subType": 1, "optionValue": 5, "optionIds": [5, 6]},
                ],
                "choiceDefinitions": [
                    {"id": "1-2", "options": [{"id": 1, "label": "Stealth"}, {"id": 2, "label": "Survival"}]},
                    {"id": "3-2", "options": [{"id": 5, "label": "Survival"}, {"id": 6, "label": "Nature"}]},
                ],
            },
        })

        skills = get_class_skills(character, character.character_classes()[0])

        assert skills["value"] == ["ste", "sur"]
        assert skills["number"] == 2
        assert skills["choices"] == ["ste", "sur", "nat"]

    def test_missing_choice_definition_skipped(self):
        character = DDBCharacter.model_validate({
            "classes": [{
                "definition": {"name": "Bard", "classFeatures": [{"id": 7, "name": "Proficiencies"}]},
            }],
            "choices": {
                "class": [{"componentId": 7, "componentTypeId": 1, "type": 2, "subType": 1, "optionValue": 1}],
            },
        })

        assert get_class_skills(character, character.character_classes()[0]) == {"value": [], "number": 0, "choices": []}

    def test_choices_from_other_features_ignored(self, ddb_character):
        """Non-skill choices and choices of another class never leak in."""
        skills = get_class_skills(ddb_character, ddb_character.character_classes()[0])
        assert "ath" not in skills["value"]


class TestGetClassSaves:
    """Test saving throw proficiencies."""

    def test_sample_saves(self, ddb_character):
        """Unrestricted modifiers of features the character has are counted."""
        assert get_class_saves(ddb_character) == ["wis", "cha"]

    def test_feature_above_level_ignored(self):
        character = DDBCharacter.model_validate({
            "classes": [{
                "level": 1,
                "definition": {"name": "Monk"},
                "classFeatures": [{"definition": {"id": 50, "name": "Diamond Soul", "requiredLevel": 14}}],
            }],
            "modifiers": {"class": [
                {"type": "proficiency", "subType": "dexterity-saving-throws", "componentId": 50},
            ]},
        })

        assert get_class_saves(character) == []

    def test_no_classes(self):
        assert get_class_saves(DDBCharacter()) == []


class TestSpellcasting:
    """Test spellcasting progression and ability."""

    def test_cleric(self, ddb_character):
        assert get_spellcasting(ddb_character.character_classes()[0]) == {"progression": "full", "ability": "wis"}

    def test_non_caster(self, ddb_character):
        assert get_spellcasting(ddb_character.character_classes()[1]) is None

    def test_subclass_grants_casting(self):
        cls = make_class(
            {"name": "Fighter", "canCastSpells": False},
            {"name": "Eldritch Knight", "canCastSpells": True, "spellCastingAbilityId": 4},
        )

        assert get_spellcasting_ability(cls) == "int"
        assert get_spellcasting(cls) == {"progression": "third", "ability": "int"}

    def test_unknown_progression(self):
        cls = make_class({"name": "Blood Hunter", "canCastSpells": True, "spellCastingAbilityId": 5})
        assert get_spellcasting(cls) is None

    def test_no_ability(self):
        assert get_spellcasting_ability(make_class({"name": "Barbarian"})) is None


class TestParseClass:
    """Test the complete class item."""

    def test_cleric_item(self, ddb_character):
        item = parse_class(ddb_character, ddb_character.character_classes()[0])

        assert item.name == "Cleric"
        assert item.type == "class"
        assert item.data["levels"] == 5
        assert item.data["subclass"] == "Life Domain"
        assert item.data["hitDice"] == "d8"
        assert item.data["hitDiceUsed"] == 2
        assert item.data["source"] == "PHB (pg. 56) (pg. 60)"
        assert item.data["saves"] == ["wis", "cha"]
        assert item.data["skills"]["value"] == ["his", "med"]
        assert item.data["spellcasting"] == {"progression": "full", "ability": "wis"}
        assert item.flags == {
            "ddbimporter": {"id": 1001, "definitionId": 2, "entityTypeId": 1446578651},
        }

    def test_description_includes_subclass(self, ddb_character):
        item = parse_class(ddb_character, ddb_character.character_classes()[0])
        description = item.data["description"]

        assert description["value"] == (
            "<p>A priestly champion who wields divine magic.</p>"
            "<p><strong>Life Domain</strong></p>"
            "<p>The Life domain focuses on positive energy.</p>"
        )
        assert description["chat"] == "<p>A priestly champion who wields divine magic.</p>"
        assert description["unidentified"] is False

    def test_fighter_item(self, ddb_character):
        item = parse_class(ddb_character, ddb_character.character_classes()[1])

        assert item.data["subclass"] == ""
        assert item.data["hitDice"] == "d10"
        assert "spellcasting" not in item.data

    def test_missing_hit_dice_keeps_default(self):
        character = DDBCharacter.model_validate({"classes": [{"definition": {"name": "Sidekick"}}]})

        item = parse_class(character, character.character_classes()[0])

        assert item.data["hitDice"] == "d6"

    def test_full_source_setting(self, ddb_character):
        item = parse_class(ddb_character, ddb_character.character_classes()[1], BridgeSettings(use_full_source=True))
        assert item.data["source"] == "Player's Handbook (pg. 70)"


class TestParseClasses:
    """Test converting all classes with per-class isolation."""

    def test_all_classes(self, ddb_character):
        items, warnings = parse_classes(ddb_character)

        assert [i.name for i in items] == ["Cleric", "Fighter"]
        assert warnings == []

    def test_failing_class_skipped(self, ddb_character, monkeypatch):
        original = classes.get_sources

        def flaky_sources(character_class, full_source=False):
            if character_class.definition.name == "Cleric":
                raise ValueError("corrupt source data")
            return original(character_class, full_source)

        monkeypatch.setattr(classes, "get_sources", flaky_sources)

        items, warnings = parse_classes(ddb_character)

        assert [i.name for i in items] == ["Fighter"]
        assert warnings == ["Failed to parse class Cleric: corrupt source data"]

    def test_malformed_class_skipped(self, ddb_sample):
        """A class entry that fails validation is reported; the others still parse."""
        payload = ddb_sample["data"]
        payload["classes"].insert(0, {"id": 7, "hitDiceUsed": "many", "definition": {"name": "Bard"}})
        character = DDBCharacter.model_validate(payload)

        items, warnings = parse_classes(character)

        assert [i.name for i in items] == ["Cleric", "Fighter"]
        assert items[0].data["saves"] == ["wis", "cha"]
        assert len(warnings) == 1
        assert warnings[0].startswith("Failed to parse class Bard:")

    def test_no_classes(self):
        assert parse_classes(DDBCharacter()) == ([], [])
