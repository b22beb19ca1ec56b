"""
D&D Beyond lookup tables and their accessors.

These map DDB's internal IDs and labels to Foundry dnd5e equivalents.
The tables are built once at import time as tuples of frozen records and are
never mutated; callers go through the accessor functions below.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

# ---------------------------------------------------------------------------
# Record types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ability:
    id: int
    value: str  # dnd5e short code
    long: str  # DDB long name, used in modifier subtypes
    label: str


@dataclass(frozen=True)
class Skill:
    name: str  # dnd5e skill id
    label: str  # DDB display label
    ability: str
    sub_type: str


@dataclass(frozen=True)
class ResetType:
    id: int
    value: str
    name: str


@dataclass(frozen=True)
class SpellProgression:
    name: str
    value: str


@dataclass(frozen=True)
class SourceBook:
    id: int
    name: str
    description: str


# ---------------------------------------------------------------------------
# Ability scores (DDB stat IDs)
# ---------------------------------------------------------------------------

ABILITIES: tuple[Ability, ...] = (
    Ability(id=1, value="str", long="strength", label="Strength"),
    Ability(id=2, value="dex", long="dexterity", label="Dexterity"),
    Ability(id=3, value="con", long="constitution", label="Constitution"),
    Ability(id=4, value="int", long="intelligence", label="Intelligence"),
    Ability(id=5, value="wis", long="wisdom", label="Wisdom"),
    Ability(id=6, value="cha", long="charisma", label="Charisma"),
)

# ---------------------------------------------------------------------------
# Skills (DDB label → dnd5e id)
# ---------------------------------------------------------------------------

SKILLS: tuple[Skill, ...] = (
    Skill(name="acr", label="Acrobatics", ability="dex", sub_type="acrobatics"),
    Skill(name="ani", label="Animal Handling", ability="wis", sub_type="animal-handling"),
    Skill(name="arc", label="Arcana", ability="int", sub_type="arcana"),
    Skill(name="ath", label="Athletics", ability="str", sub_type="athletics"),
    Skill(name="dec", label="Deception", ability="cha", sub_type="deception"),
    Skill(name="his", label="History", ability="int", sub_type="history"),
    Skill(name="ins", label="Insight", ability="wis", sub_type="insight"),
    Skill(name="itm", label="Intimidation", ability="cha", sub_type="intimidation"),
    Skill(name="inv", label="Investigation", ability="int", sub_type="investigation"),
    Skill(name="med", label="Medicine", ability="wis", sub_type="medicine"),
    Skill(name="nat", label="Nature", ability="int", sub_type="nature"),
    Skill(name="prc", label="Perception", ability="wis", sub_type="perception"),
    Skill(name="prf", label="Performance", ability="cha", sub_type="performance"),
    Skill(name="per", label="Persuasion", ability="cha", sub_type="persuasion"),
    Skill(name="rel", label="Religion", ability="int", sub_type="religion"),
    Skill(name="slt", label="Sleight of Hand", ability="dex", sub_type="sleight-of-hand"),
    Skill(name="ste", label="Stealth", ability="dex", sub_type="stealth"),
    Skill(name="sur", label="Survival", ability="wis", sub_type="survival"),
)

# ---------------------------------------------------------------------------
# Limited-use reset types
# ---------------------------------------------------------------------------

RESETS: tuple[ResetType, ...] = (
    ResetType(id=1, value="sr", name="Short Rest"),
    ResetType(id=2, value="lr", name="Long Rest"),
    ResetType(id=3, value="day", name="Dawn"),
    ResetType(id=4, value="charges", name="Other"),
)

# ---------------------------------------------------------------------------
# Spell progression by class name
# ---------------------------------------------------------------------------

SPELL_PROGRESSION: tuple[SpellProgression, ...] = (
    SpellProgression(name="Artificer", value="artificer"),
    SpellProgression(name="Bard", value="full"),
    SpellProgression(name="Cleric", value="full"),
    SpellProgression(name="Druid", value="full"),
    SpellProgression(name="Sorcerer", value="full"),
    SpellProgression(name="Wizard", value="full"),
    SpellProgression(name="Paladin", value="half"),
    SpellProgression(name="Ranger", value="half"),
    SpellProgression(name="Fighter", value="third"),
    SpellProgression(name="Rogue", value="third"),
    SpellProgression(name="Warlock", value="pact"),
)

# ---------------------------------------------------------------------------
# Source books (DDB source IDs)
# ---------------------------------------------------------------------------

SOURCE_BOOKS: tuple[SourceBook, ...] = (
    SourceBook(id=1, name="BR", description="Basic Rules"),
    SourceBook(id=2, name="PHB", description="Player's Handbook"),
    SourceBook(id=3, name="DMG", description="Dungeon Master's Guide"),
    SourceBook(id=5, name="MM", description="Monster Manual"),
    SourceBook(id=13, name="SCAG", description="Sword Coast Adventurer's Guide"),
    SourceBook(id=27, name="XGtE", description="Xanathar's Guide to Everything"),
    SourceBook(id=67, name="TCoE", description="Tasha's Cauldron of Everything"),
)

HOMEBREW_SOURCE = "Homebrew"

# ---------------------------------------------------------------------------
# Item filter types → Foundry item type
# ---------------------------------------------------------------------------

ITEM_FILTER_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "Weapon": "weapon",
    "Staff": "weapon",
    "Armor": "equipment",
    "Ring": "equipment",
    "Rod": "equipment",
    "Wand": "equipment",
    "Wondrous Item": "equipment",
    "Potion": "consumable",
    "Scroll": "consumable",
    "Ammunition": "consumable",
    "Adventuring Gear": "loot",
    "Other Gear": "loot",
})

CONSUMABLE_TYPES: Mapping[str, str] = MappingProxyType({
    "Potion": "potion",
    "Scroll": "scroll",
    "Ammunition": "ammo",
})

# DDB armorTypeId → dnd5e armor type
ARMOR_TYPES: Mapping[int, str] = MappingProxyType({
    1: "light",
    2: "medium",
    3: "heavy",
    4: "shield",
})

# DDB categoryId / attackType → dnd5e weaponType parts
WEAPON_CATEGORIES: Mapping[int, str] = MappingProxyType({1: "simple", 2: "martial"})
ATTACK_TYPES: Mapping[int, str] = MappingProxyType({1: "M", 2: "R"})

# DDB weapon property name → dnd5e property key
WEAPON_PROPERTIES: Mapping[str, str] = MappingProxyType({
    "Ammunition": "amm",
    "Finesse": "fin",
    "Heavy": "hvy",
    "Light": "lgt",
    "Loading": "lod",
    "Reach": "rch",
    "Thrown": "thr",
    "Two-Handed": "two",
    "Versatile": "ver",
})

# DDB stealthCheck value meaning "disadvantage"
STEALTH_DISADVANTAGE = 2

# ---------------------------------------------------------------------------
# Choice and modifier markers
# ---------------------------------------------------------------------------

# A class choice with this type/subType pair is a skill proficiency pick
SKILL_CHOICE_TYPE = 2
SKILL_CHOICE_SUBTYPE = 1

PROFICIENCIES_FEATURE_NAME = "Proficiencies"

MODIFIER_TYPE_BONUS = "bonus"
MODIFIER_TYPE_PROFICIENCY = "proficiency"

# The dnd5e release that switched item rarity to a dropdown of lowercase keys
RARITY_DROPDOWN_VERSION = "1.4.2"


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------

def abilities() -> tuple[Ability, ...]:
    return ABILITIES


def ability_by_id(ability_id: int | None) -> Ability | None:
    return next((a for a in ABILITIES if a.id == ability_id), None)


def skill_by_label(label: str) -> Skill | None:
    return next((s for s in SKILLS if s.label == label), None)


def reset_type(reset_id: int | str | None) -> ResetType | None:
    """Look up a reset type; DDB sends the id as a number or a numeric string."""
    if reset_id is None:
        return None
    try:
        key = int(reset_id)
    except (TypeError, ValueError):
        return None
    return next((r for r in RESETS if r.id == key), None)


def spell_progression(class_name: str) -> SpellProgression | None:
    return next((p for p in SPELL_PROGRESSION if p.name == class_name), None)


def source_book(source_id: int | None) -> SourceBook | None:
    return next((b for b in SOURCE_BOOKS if b.id == source_id), None)
