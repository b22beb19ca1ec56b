"""
Data models for the D&D Beyond → Foundry VTT bridge.

Three families of records live here:

- External records as produced by the D&D Beyond character service
  (camelCase JSON, every field optional unless the service always sends it).
- Foundry VTT documents consumed by the scene exporter (scenes and journal entries).
- Records produced by this package: the internal item record handed to Foundry's
  document-creation API, and the scene snapshot written to disk.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


Number = int | float


class DDBModel(BaseModel):
    """Base for records read from D&D Beyond or Foundry JSON.

    Field names are snake_case in Python and camelCase on the wire.
    Unknown keys are ignored so that newer payloads still validate.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# D&D Beyond character service
# ---------------------------------------------------------------------------

class SourceReference(DDBModel):
    """One entry of a definition's ``sources`` list."""
    source_id: int | None = None
    page_number: int | None = None


class Modifier(DDBModel):
    """A granted modifier (proficiency, bonus, language, ...)."""
    type: str | None = None
    sub_type: str | None = None
    value: Number | None = None
    restriction: str | None = None
    component_id: int | None = None
    friendly_subtype_name: str | None = None


class ClassFeatureDefinition(DDBModel):
    """A class or subclass feature as listed on the class definition."""
    id: int
    name: str = ""
    required_level: int = 1


class CharacterClassFeature(DDBModel):
    """A class feature attached to the character's class entry."""
    definition: ClassFeatureDefinition


class ClassDefinition(DDBModel):
    """Definition shared by classes and subclasses."""
    id: int | None = None
    name: str = ""
    description: str = ""
    hit_dice: int | None = None
    can_cast_spells: bool = False
    spell_casting_ability_id: int | None = None
    source_id: int | None = None
    source_page_number: int | None = None
    sources: list[SourceReference] = Field(default_factory=list)
    class_features: list[ClassFeatureDefinition] = Field(default_factory=list)


class CharacterClass(DDBModel):
    """One of the character's classes, with its level and optional subclass."""
    id: int | None = None
    entity_type_id: int | None = None
    level: int = 1
    hit_dice_used: int = 0
    is_starting_class: bool = False
    definition: ClassDefinition
    subclass_definition: ClassDefinition | None = None
    class_features: list[CharacterClassFeature] = Field(default_factory=list)


class ChoiceOption(DDBModel):
    """A selectable option within a choice definition."""
    id: int
    label: str = ""


class ChoiceDefinition(DDBModel):
    """Catalog entry listing the options offered for a kind of choice.

    ``id`` is ``"<componentTypeId>-<type>"``.
    """
    id: str
    options: list[ChoiceOption] = Field(default_factory=list)


class Choice(DDBModel):
    """A selection the user made in the character builder."""
    component_id: int | None = None
    component_type_id: int | None = None
    type: int | None = None
    sub_type: int | None = None
    option_value: int | None = None
    option_ids: list[int] = Field(default_factory=list)


class CharacterChoices(DDBModel):
    """User-made selections, grouped by the component that offered them."""
    race: list[Choice] = Field(default_factory=list)
    class_: list[Choice] = Field(default_factory=list, alias="class")
    background: list[Choice] = Field(default_factory=list)
    feat: list[Choice] = Field(default_factory=list)
    choice_definitions: list[ChoiceDefinition] = Field(default_factory=list)


class CharacterModifiers(DDBModel):
    """Granted modifiers, grouped by the section that granted them."""
    race: list[Modifier] = Field(default_factory=list)
    class_: list[Modifier] = Field(default_factory=list, alias="class")
    background: list[Modifier] = Field(default_factory=list)
    item: list[Modifier] = Field(default_factory=list)
    feat: list[Modifier] = Field(default_factory=list)
    condition: list[Modifier] = Field(default_factory=list)

    def all(self) -> list[Modifier]:
        """Every modifier regardless of section."""
        return [
            *self.race, *self.class_, *self.background,
            *self.item, *self.feat, *self.condition,
        ]


class LimitedUse(DDBModel):
    """Limited-use pool: uses that deplete and reset on a schedule."""
    max_uses: int | None = None
    number_used: int | None = None
    reset_type: int | str | None = None
    reset_type_description: str | None = None


class DamageDice(DDBModel):
    dice_string: str | None = None


class ItemProperty(DDBModel):
    name: str = ""


class ItemDefinition(DDBModel):
    """Catalog definition of an inventory item."""
    id: int | None = None
    name: str = ""
    type: str | None = None
    filter_type: str | None = None
    description: str = ""
    rarity: str | None = None
    magic: bool = False
    can_attune: bool = False
    can_equip: bool = False
    weight: Number = 0
    cost: Number | None = None
    bundle_size: int = 1
    attack_type: int | None = None
    category_id: int | None = None
    range: int | None = None
    long_range: int | None = None
    damage: DamageDice | None = None
    damage_type: str | None = None
    properties: list[ItemProperty] = Field(default_factory=list)
    armor_class: int | None = None
    armor_type_id: int | None = None
    stealth_check: int | None = None
    granted_modifiers: list[Modifier] = Field(default_factory=list)
    source_id: int | None = None
    source_page_number: int | None = None
    sources: list[SourceReference] = Field(default_factory=list)


class InventoryItem(DDBModel):
    """An item the character owns."""
    id: int | None = None
    entity_type_id: int | None = None
    quantity: int = 1
    equipped: bool = False
    is_attuned: bool = False
    limited_use: LimitedUse | None = None
    definition: ItemDefinition


class DDBCharacter(DDBModel):
    """The character payload returned by the character service.

    ``classes`` and ``inventory`` hold the raw entries. Each one is validated
    on its own when it is parsed, so a malformed record only loses itself.
    """
    id: int | None = None
    name: str = "Unknown Character"
    classes: list[Any] = Field(default_factory=list)
    choices: CharacterChoices = Field(default_factory=CharacterChoices)
    modifiers: CharacterModifiers = Field(default_factory=CharacterModifiers)
    inventory: list[Any] = Field(default_factory=list)

    def character_classes(self) -> list[CharacterClass]:
        """The classes that validate; malformed entries are left out."""
        result = []
        for entry in self.classes:
            try:
                result.append(CharacterClass.model_validate(entry))
            except ValidationError:
                continue
        return result


class Proficiency(DDBModel):
    """A named proficiency the character holds, e.g. ``Martial Weapons``."""
    name: str


# ---------------------------------------------------------------------------
# Internal item record (Foundry document data)
# ---------------------------------------------------------------------------

class ItemRecord(BaseModel):
    """Item document ready for Foundry's document-creation API."""
    name: str
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    flags: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Foundry scene documents
# ---------------------------------------------------------------------------

class DDBFlags(DDBModel):
    """The ``ddb`` flag block linking a Foundry document to its source book."""
    ddb_id: int | str | None = None
    cobalt_id: int | str | None = None
    parent_id: int | str | None = None
    book_code: str | None = None

    def identity(self) -> tuple:
        return (self.ddb_id, self.cobalt_id, self.parent_id, self.book_code)


def _ddb_flags(flags: dict[str, Any]) -> DDBFlags:
    return DDBFlags.model_validate(flags.get("ddb") or {})


class JournalEntry(DDBModel):
    """A Foundry journal entry."""
    id: str = Field(alias="_id")
    name: str = ""
    flags: dict[str, Any] = Field(default_factory=dict)

    @property
    def ddb_flags(self) -> DDBFlags:
        return _ddb_flags(self.flags)


class Note(DDBModel):
    """A map pin linking a point on the scene to a journal entry."""
    entry_id: str | None = None
    x: Number = 0
    y: Number = 0


class Wall(DDBModel):
    c: list[Number] = Field(default_factory=list)
    door: int = 0
    ds: int = 0
    move: int = 1
    sense: int = 1


class Light(DDBModel):
    angle: Number = 360
    bright: Number = 0
    darkness_threshold: Number = 0
    dim: Number = 0
    rotation: Number = 0
    t: str = "l"
    tint_alpha: Number = 0
    x: Number = 0
    y: Number = 0


class TokenSnapshot(DDBModel):
    """The token fields carried in a scene snapshot."""
    id: str | None = Field(default=None, alias="_id")
    name: str = ""
    width: Number = 1
    height: Number = 1
    scale: Number = 1
    x: Number = 0
    y: Number = 0
    disposition: int = -1


class Token(TokenSnapshot):
    actor_link: bool = False


class Scene(DDBModel):
    """A Foundry scene with its embedded notes, walls, lights and tokens."""
    id: str = Field(alias="_id")
    name: str = ""
    nav_name: str = ""
    width: Number | None = None
    height: Number | None = None
    grid: Number | None = None
    grid_distance: Number | None = None
    grid_type: int | None = None
    grid_units: str | None = None
    shift_x: Number = 0
    shift_y: Number = 0
    background_color: str | None = None
    flags: dict[str, Any] = Field(default_factory=dict)
    notes: list[Note] = Field(default_factory=list)
    walls: list[Wall] = Field(default_factory=list)
    lights: list[Light] = Field(default_factory=list)
    tokens: list[Token] = Field(default_factory=list)

    @property
    def ddb_flags(self) -> DDBFlags:
        return _ddb_flags(self.flags)

    @property
    def vtta_id(self) -> str | None:
        vtta = self.flags.get("vtta") or {}
        return vtta.get("id")


# ---------------------------------------------------------------------------
# Scene snapshot
# ---------------------------------------------------------------------------

class Position(DDBModel):
    x: Number
    y: Number


class NoteDescription(DDBModel):
    """A labelled note and every position it was placed at."""
    label: str
    positions: list[Position] = Field(default_factory=list)


class SceneSnapshot(DDBModel):
    """Self-contained representation of a scene for transfer or backup."""
    flags: dict[str, Any] = Field(default_factory=dict)
    name: str = ""
    nav_name: str = ""
    width: Number | None = None
    height: Number | None = None
    grid: Number | None = None
    grid_distance: Number | None = None
    grid_type: int | None = None
    grid_units: str | None = None
    shift_x: Number = 0
    shift_y: Number = 0
    background_color: str | None = None
    descriptions: list[NoteDescription] = Field(default_factory=list)
    walls: list[Wall] = Field(default_factory=list)
    lights: list[Light] = Field(default_factory=list)
    tokens: list[TokenSnapshot] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize with the camelCase keys Foundry uses."""
        return self.model_dump_json(by_alias=True)
