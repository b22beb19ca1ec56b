"""
Spellcasting ability resolution for D&D Beyond classes.
"""

from __future__ import annotations

from ...models import CharacterClass
from .schema import ability_by_id


def get_spellcasting_ability(character_class: CharacterClass) -> str | None:
    """Short ability code a class casts with, e.g. ``"wis"``.

    The class definition wins; subclasses that grant casting (Eldritch Knight,
    Arcane Trickster) carry the ability on the subclass definition instead.
    Returns None when neither names a known ability.
    """
    ability = ability_by_id(character_class.definition.spell_casting_ability_id)
    if ability is None and character_class.subclass_definition is not None:
        ability = ability_by_id(character_class.subclass_definition.spell_casting_ability_id)
    return ability.value if ability else None
