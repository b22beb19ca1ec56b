"""
Class parser: D&D Beyond character classes → Foundry dnd5e class items.

Each class the character has becomes one item carrying its level, hit dice,
class-granted skill and saving-throw proficiencies and spellcasting metadata.
Like the other mappers, ``parse_classes`` returns a (result, warnings) tuple so
one broken class never prevents the others from importing.
"""

from __future__ import annotations

import logging

from ...config import BridgeSettings
from ...models import CharacterClass, ClassDefinition, DDBCharacter, ItemRecord
from ...templates import get_template
from .schema import (
    MODIFIER_TYPE_PROFICIENCY,
    PROFICIENCIES_FEATURE_NAME,
    SKILL_CHOICE_SUBTYPE,
    SKILL_CHOICE_TYPE,
    abilities,
    skill_by_label,
    spell_progression,
)
from .spellcasting import get_spellcasting_ability
from .utils import filter_modifiers, get_chosen_class_modifiers, get_record_name, get_source_data

logger = logging.getLogger("ddb-bridge.importers")


def get_sources(character_class: CharacterClass, full_source: bool = False) -> str:
    """Cite the class and subclass sources without repeating shared book or page.

    Produces ``"PHB (pg. 12)"`` for a class alone, and appends the subclass book
    and/or page only where they differ from the class's.
    """
    class_source = get_source_data(character_class.definition, full_source)

    sources = class_source.name or ""
    if class_source.page:
        sources += f" (pg. {class_source.page})"

    if character_class.subclass_definition is not None:
        subclass_source = get_source_data(character_class.subclass_definition, full_source)
        if subclass_source.name and subclass_source.name != class_source.name:
            sources += f", {subclass_source.name}"
        if subclass_source.page and subclass_source.page != class_source.page:
            sources += f" (pg. {subclass_source.page})"

    return sources


def _proficiency_feature_ids(character_class: CharacterClass) -> list[int]:
    definitions: list[ClassDefinition] = [character_class.definition]
    if character_class.subclass_definition is not None:
        definitions.append(character_class.subclass_definition)
    return [
        feature.id
        for definition in definitions
        for feature in definition.class_features
        if feature.name == PROFICIENCIES_FEATURE_NAME
    ]


def get_class_skills(character: DDBCharacter, character_class: CharacterClass) -> dict:
    """Skills chosen through the class's "Proficiencies" feature(s).

    Returns:
        ``{"value": chosen, "number": len(chosen), "choices": offered}`` with
        dnd5e skill ids, each list free of duplicates.
    """
    feature_ids = _proficiency_feature_ids(character_class)
    definitions = character.choices.choice_definitions

    chosen: list[str] = []
    offered: list[str] = []

    for choice in character.choices.class_:
        if (
            choice.component_id not in feature_ids
            or choice.sub_type != SKILL_CHOICE_SUBTYPE
            or choice.type != SKILL_CHOICE_TYPE
        ):
            continue

        definition_id = f"{choice.component_type_id}-{choice.type}"
        option_choice = next((d for d in definitions if d.id == definition_id), None)
        if option_choice is None:
            continue
        option = next((o for o in option_choice.options if o.id == choice.option_value), None)
        if option is None:
            continue

        skill = skill_by_label(option.label)
        if skill is not None and skill.name not in chosen:
            chosen.append(skill.name)

        for candidate in option_choice.options:
            if candidate.id not in choice.option_ids:
                continue
            offered_skill = skill_by_label(candidate.label)
            if offered_skill is not None and offered_skill.name not in offered:
                offered.append(offered_skill.name)

    return {"value": chosen, "number": len(chosen), "choices": offered}


def get_class_saves(character: DDBCharacter) -> list[str]:
    """Short codes of abilities the character's classes grant save proficiency in."""
    modifiers = get_chosen_class_modifiers(character)
    return [
        ability.value
        for ability in abilities()
        if filter_modifiers(modifiers, MODIFIER_TYPE_PROFICIENCY, f"{ability.long}-saving-throws")
    ]


def get_spellcasting(character_class: CharacterClass) -> dict | None:
    subclass = character_class.subclass_definition
    can_cast = character_class.definition.can_cast_spells or (
        subclass is not None and subclass.can_cast_spells
    )
    if not can_cast:
        return None

    progression = spell_progression(character_class.definition.name)
    if progression is None:
        return None
    return {
        "progression": progression.value,
        "ability": get_spellcasting_ability(character_class),
    }


def parse_class(
    character: DDBCharacter,
    character_class: CharacterClass,
    settings: BridgeSettings | None = None,
) -> ItemRecord:
    """Build the class item for one of the character's classes."""
    settings = settings or BridgeSettings()
    definition = character_class.definition

    data = get_template("class")
    data["description"] = {
        "value": definition.description,
        "chat": definition.description,
        "unidentified": False,
    }
    data["levels"] = character_class.level
    data["source"] = get_sources(character_class, settings.use_full_source)

    subclass = character_class.subclass_definition
    if subclass is not None and subclass.name:
        data["subclass"] = subclass.name
        data["description"]["value"] += f"<p><strong>{subclass.name}</strong></p>"
        data["description"]["value"] += subclass.description

    if definition.hit_dice:
        data["hitDice"] = f"d{definition.hit_dice}"
    data["hitDiceUsed"] = character_class.hit_dice_used
    data["skills"] = get_class_skills(character, character_class)
    data["saves"] = get_class_saves(character)

    spellcasting = get_spellcasting(character_class)
    if spellcasting is not None:
        data["spellcasting"] = spellcasting

    return ItemRecord(
        name=definition.name,
        type="class",
        data=data,
        flags={
            "ddbimporter": {
                "id": character_class.id,
                "definitionId": definition.id,
                "entityTypeId": character_class.entity_type_id,
            },
        },
    )


def parse_classes(
    character: DDBCharacter,
    settings: BridgeSettings | None = None,
) -> tuple[list[ItemRecord], list[str]]:
    """Convert every class on the character into a class item.

    Args:
        character: D&D Beyond character; its class entries are validated here.
        settings: Bridge settings; defaults apply when omitted.

    Returns:
        Tuple of (class_items, warnings). A class that fails validation or
        whose transform raises is skipped and reported in warnings.
    """
    items: list[ItemRecord] = []
    warnings: list[str] = []

    for entry in character.classes:
        class_name = get_record_name(entry, "Unknown")
        try:
            character_class = CharacterClass.model_validate(entry)
            items.append(parse_class(character, character_class, settings))
            logger.debug(f"Parsed class {class_name} (level {character_class.level})")
        except Exception as e:
            logger.warning(f"Skipping class {class_name}: {e}")
            warnings.append(f"Failed to parse class {class_name}: {e}")

    return items, warnings
