"""
Blank dnd5e item data, one skeleton per Foundry item type.

Parsers start every item from a fresh copy and fill in the computed fields.
"""

from __future__ import annotations

import copy
from typing import Any

_DESCRIPTION = {"value": "", "chat": "", "unidentified": ""}

_PHYSICAL = {
    "quantity": 1,
    "weight": 0,
    "price": 0,
    "attunement": 0,
    "equipped": False,
    "rarity": "",
    "identified": True,
}

_ACTIVATED = {
    "activation": {"type": "", "cost": 0, "condition": ""},
    "duration": {"value": None, "units": ""},
    "target": {"value": None, "width": None, "units": "", "type": ""},
    "range": {"value": None, "long": None, "units": ""},
    "uses": {"value": 0, "max": 0, "per": None},
}

_ACTION = {
    "ability": None,
    "actionType": None,
    "attackBonus": 0,
    "chatFlavor": "",
    "critical": None,
    "damage": {"parts": [], "versatile": ""},
    "formula": "",
    "save": {"ability": "", "dc": None, "scaling": "spell"},
}

_TEMPLATES: dict[str, dict[str, Any]] = {
    "class": {
        "description": _DESCRIPTION,
        "source": "",
        "levels": 1,
        "subclass": "",
        "hitDice": "d6",
        "hitDiceUsed": 0,
        "saves": [],
        "skills": {"number": 2, "choices": [], "value": []},
    },
    "weapon": {
        "description": _DESCRIPTION,
        "source": "",
        **_PHYSICAL,
        **_ACTIVATED,
        **_ACTION,
        "weaponType": "simpleM",
        "properties": {},
        "proficient": False,
    },
    "equipment": {
        "description": _DESCRIPTION,
        "source": "",
        **_PHYSICAL,
        **_ACTIVATED,
        "armor": {"type": "trinket", "value": None, "dex": None},
        "strength": 0,
        "stealth": False,
        "proficient": True,
    },
    "consumable": {
        "description": _DESCRIPTION,
        "source": "",
        **_PHYSICAL,
        **_ACTIVATED,
        **_ACTION,
        "consumableType": "potion",
    },
    "loot": {
        "description": _DESCRIPTION,
        "source": "",
        **_PHYSICAL,
    },
}


def item_types() -> list[str]:
    return list(_TEMPLATES)


def get_template(item_type: str) -> dict[str, Any]:
    """Return a fresh blank data payload for ``item_type``.

    Raises:
        KeyError: If the item type has no template.
    """
    try:
        template = _TEMPLATES[item_type]
    except KeyError:
        raise KeyError(f"No item template for type '{item_type}'") from None
    return copy.deepcopy(template)
