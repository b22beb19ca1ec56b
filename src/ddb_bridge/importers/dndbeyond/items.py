"""
Item parsers: D&D Beyond inventory → Foundry dnd5e items.

Every entry is routed by its DDB filter type to a weapon, equipment,
consumable or loot parser; the shared fields come from ``inventory``.
"""

from __future__ import annotations

import logging
from typing import Callable

from ...config import BridgeSettings
from ...models import DDBCharacter, InventoryItem, ItemRecord, Proficiency
from ...templates import get_template
from .inventory import (
    get_attunement,
    get_consumable_uses,
    get_equipped,
    get_item_rarity,
    get_magical_bonus,
    get_uses,
    get_weapon_proficient,
)
from .schema import (
    ARMOR_TYPES,
    ATTACK_TYPES,
    CONSUMABLE_TYPES,
    ITEM_FILTER_TYPE_MAP,
    MODIFIER_TYPE_PROFICIENCY,
    STEALTH_DISADVANTAGE,
    WEAPON_CATEGORIES,
    WEAPON_PROPERTIES,
)
from .utils import get_record_name, parse_source

logger = logging.getLogger("ddb-bridge.importers")


def get_proficiencies(character: DDBCharacter) -> list[Proficiency]:
    """Every proficiency granted to the character, by display name."""
    names: list[str] = []
    for mod in character.modifiers.all():
        if mod.type == MODIFIER_TYPE_PROFICIENCY and mod.friendly_subtype_name:
            if mod.friendly_subtype_name not in names:
                names.append(mod.friendly_subtype_name)
    return [Proficiency(name=name) for name in names]


def get_item_type(item: InventoryItem) -> str:
    return ITEM_FILTER_TYPE_MAP.get(item.definition.filter_type or "", "loot")


def get_weapon_type(item: InventoryItem) -> str:
    """dnd5e weaponType such as ``simpleM`` or ``martialR``."""
    category = WEAPON_CATEGORIES.get(item.definition.category_id or 0, "simple")
    attack = ATTACK_TYPES.get(item.definition.attack_type or 0, "M")
    return f"{category}{attack}"


def _base_record(item: InventoryItem, item_type: str, settings: BridgeSettings) -> ItemRecord:
    definition = item.definition
    data = get_template(item_type)
    data["description"] = {
        "value": definition.description,
        "chat": definition.description,
        "unidentified": "",
    }
    data["source"] = parse_source(definition, settings.use_full_source)
    data["quantity"] = item.quantity
    data["weight"] = definition.weight
    data["price"] = definition.cost or 0
    data["rarity"] = get_item_rarity(item, settings.system_version)
    data["equipped"] = get_equipped(item)
    data["attunement"] = get_attunement(item)

    return ItemRecord(
        name=definition.name,
        type=item_type,
        data=data,
        flags={
            "ddbimporter": {
                "id": item.id,
                "definitionId": definition.id,
                "entityTypeId": item.entity_type_id,
            },
        },
    )


def parse_weapon(
    item: InventoryItem,
    proficiencies: list[Proficiency],
    settings: BridgeSettings,
) -> ItemRecord:
    record = _base_record(item, "weapon", settings)
    definition = item.definition
    data = record.data

    weapon_type = get_weapon_type(item)
    data["weaponType"] = weapon_type
    data["actionType"] = "rwak" if weapon_type.endswith("R") else "mwak"
    data["activation"] = {"type": "action", "cost": 1, "condition": ""}
    data["proficient"] = get_weapon_proficient(item, weapon_type, proficiencies)
    data["attackBonus"] = get_magical_bonus(item)
    data["uses"] = get_uses(item)
    data["properties"] = {
        key: any(p.name == name for p in definition.properties)
        for name, key in WEAPON_PROPERTIES.items()
    }

    if definition.range:
        long_range = definition.long_range
        data["range"] = {
            "value": definition.range,
            "long": long_range if long_range and long_range != definition.range else None,
            "units": "ft",
        }

    if definition.damage is not None and definition.damage.dice_string:
        damage_type = (definition.damage_type or "").lower()
        data["damage"]["parts"] = [[f"{definition.damage.dice_string} + @mod", damage_type]]

    return record


def parse_equipment(item: InventoryItem, settings: BridgeSettings) -> ItemRecord:
    record = _base_record(item, "equipment", settings)
    definition = item.definition
    data = record.data

    data["armor"]["type"] = ARMOR_TYPES.get(definition.armor_type_id or 0, "trinket")
    if definition.armor_class is not None:
        data["armor"]["value"] = definition.armor_class
    data["stealth"] = definition.stealth_check == STEALTH_DISADVANTAGE
    data["uses"] = get_uses(item)
    return record


def parse_consumable(item: InventoryItem, settings: BridgeSettings) -> ItemRecord:
    record = _base_record(item, "consumable", settings)
    data = record.data

    data["consumableType"] = CONSUMABLE_TYPES.get(item.definition.filter_type or "", "trinket")
    data["activation"] = {"type": "action", "cost": 1, "condition": ""}
    data["uses"] = get_consumable_uses(item)
    return record


def parse_loot(item: InventoryItem, settings: BridgeSettings) -> ItemRecord:
    return _base_record(item, "loot", settings)


def parse_inventory(
    character: DDBCharacter,
    settings: BridgeSettings | None = None,
) -> tuple[list[ItemRecord], list[str]]:
    """Convert the character's inventory into Foundry items.

    Args:
        character: D&D Beyond character; its inventory entries are validated here.
        settings: Bridge settings; defaults apply when omitted.

    Returns:
        Tuple of (items, warnings). An entry that fails validation or whose
        transform raises is skipped and reported in warnings.
    """
    settings = settings or BridgeSettings()
    proficiencies = get_proficiencies(character)

    parsers: dict[str, Callable[[InventoryItem], ItemRecord]] = {
        "weapon": lambda i: parse_weapon(i, proficiencies, settings),
        "equipment": lambda i: parse_equipment(i, settings),
        "consumable": lambda i: parse_consumable(i, settings),
        "loot": lambda i: parse_loot(i, settings),
    }

    items: list[ItemRecord] = []
    warnings: list[str] = []

    for entry in character.inventory:
        name = get_record_name(entry, "Unknown item")
        try:
            item = InventoryItem.model_validate(entry)
            items.append(parsers[get_item_type(item)](item))
        except Exception as e:
            logger.warning(f"Skipping item {name}: {e}")
            warnings.append(f"Failed to parse item {name}: {e}")

    return items, warnings
