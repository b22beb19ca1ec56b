"""
Orchestrates a full D&D Beyond character import.

Validates the raw payload, then runs the class parser and the item parsers.
Each section, and each record inside a section, is isolated: a failure is
recorded as a warning and the import carries on with the rest.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ...config import BridgeSettings
from ...models import DDBCharacter
from ..base import ImportError, ImportResult
from .classes import parse_classes
from .items import parse_inventory

logger = logging.getLogger("ddb-bridge.importers")


def load_character(ddb: dict) -> DDBCharacter:
    """Validate a raw character payload into a DDBCharacter.

    Raises:
        ImportError: If the payload does not match the character format.
    """
    try:
        return DDBCharacter.model_validate(ddb)
    except ValidationError as e:
        raise ImportError(f"Character data does not match the D&D Beyond format: {e}") from None


def map_ddb_to_items(ddb: dict, settings: BridgeSettings | None = None) -> ImportResult:
    """Map a raw D&D Beyond character into Foundry items.

    Args:
        ddb: Raw D&D Beyond character JSON (already unwrapped).
        settings: Bridge settings; defaults apply when omitted.

    Returns:
        ImportResult with class items first, then inventory items.

    Raises:
        ImportError: If the payload cannot be validated at all.
    """
    settings = settings or BridgeSettings()
    character = load_character(ddb)

    result = ImportResult(character_name=character.name, source_id=character.id)

    sections = (
        ("classes", parse_classes),
        ("inventory", parse_inventory),
    )
    for section, parser in sections:
        try:
            items, warnings = parser(character, settings)
            result.items.extend(items)
            result.warnings.extend(warnings)
            result.mapped_sections.append(section)
        except Exception as e:
            logger.warning(f"Failed to map {section}: {e}")
            result.warnings.append(f"Failed to map {section}: {e}")
            result.failed_sections.append(section)

    logger.info(
        f"Imported {character.name}: {len(result.items)} items, {len(result.warnings)} warnings"
    )
    return result
