"""
Common helpers for the D&D Beyond item parsers.

Each helper is a pure function over one inventory entry.
"""

from __future__ import annotations

from typing import Any, Sequence

from ...models import InventoryItem, Proficiency
from .schema import MODIFIER_TYPE_BONUS, RARITY_DROPDOWN_VERSION, reset_type
from .utils import version_compare


def get_item_rarity(item: InventoryItem, system_version: str) -> str:
    """Item rarity in the form the target dnd5e version expects.

    From dnd5e 1.4.2 rarity is a dropdown keyed by lowercase names; older
    versions take the display string as-is. Items without rarity give "".
    """
    rarity = item.definition.rarity
    if not rarity:
        return ""
    if version_compare(system_version, RARITY_DROPDOWN_VERSION) >= 0:
        return rarity.lower()
    return rarity


def get_attuned(item: InventoryItem) -> bool:
    """True only when the item supports attunement and the character is attuned to it."""
    return item.definition.can_attune is True and item.is_attuned


def get_equipped(item: InventoryItem) -> bool:
    """True only when the item can be equipped and currently is."""
    return item.definition.can_equip is True and item.equipped


def get_uses(item: InventoryItem) -> dict[str, Any]:
    """Limited uses of an item, if any.

    Returns:
        ``{max, value, per, description}``; ``value`` is what is left, ``per``
        the dnd5e recovery period ("" if the reset type is unknown). Items with
        no limited-use block give ``{value: 0, max: 0, per: None}``.
    """
    limited_use = item.limited_use
    if limited_use is None:
        return {"value": 0, "max": 0, "per": None}

    max_uses = limited_use.max_uses or 0
    reset = reset_type(limited_use.reset_type)
    return {
        "max": max_uses,
        "value": max_uses - limited_use.number_used if limited_use.number_used else max_uses,
        "per": reset.value if reset else "",
        "description": limited_use.reset_type_description,
    }


def get_consumable_uses(item: InventoryItem) -> dict[str, Any]:
    """Uses for a consumable item; single-use charges when DDB gives none."""
    if item.limited_use is None:
        return {"value": 1, "max": 1, "per": "charges", "autoUse": False, "autoDestroy": True}

    uses = get_uses(item)
    if uses["per"] == "":
        uses["per"] = "charges"
    uses["autoUse"] = False
    uses["autoDestroy"] = True
    return uses


def get_weapon_proficient(
    item: InventoryItem,
    weapon_type: str,
    proficiencies: Sequence[Proficiency],
) -> bool:
    """Checks the proficiency of the character with this specific weapon.

    Args:
        item: The weapon.
        weapon_type: The dnd5e weaponType, e.g. ``"martialM"``.
        proficiencies: Proficiencies the character holds.
    """
    names = {proficiency.name for proficiency in proficiencies}
    if "Simple Weapons" in names and "simple" in weapon_type:
        return True
    if "Martial Weapons" in names and "martial" in weapon_type:
        return True
    return item.definition.type in names


def get_magical_bonus(item: InventoryItem) -> int | float:
    """Searches for a magical attack bonus granted by this item."""
    return sum(
        mod.value
        for mod in item.definition.granted_modifiers
        if mod.type == MODIFIER_TYPE_BONUS and mod.sub_type == "magic" and mod.value
    )


def get_attunement(item: InventoryItem) -> int:
    """dnd5e attunement state: 2 attuned, 1 attunement required, 0 not applicable."""
    if item.is_attuned:
        return 2
    if item.definition.can_attune:
        return 1
    return 0
