"""
Read D&D Beyond character data from a local JSON export.
"""

from __future__ import annotations

import json
from pathlib import Path

from ..base import ImportError

# Envelopes the character payload may be wrapped in
_ENVELOPE_KEYS = ("data", "character")


def unwrap_character(data: object) -> dict:
    """
    Strip ``{"data": ...}`` / ``{"character": ...}`` envelopes and check the payload.

    Raises:
        ImportError: If the payload is not a JSON object or has no classes.
    """
    while isinstance(data, dict):
        key = next((k for k in _ENVELOPE_KEYS if isinstance(data.get(k), dict)), None)
        if key is None:
            break
        data = data[key]

    if not isinstance(data, dict):
        raise ImportError(
            f"Invalid character file format: expected JSON object, got {type(data).__name__}"
        )

    if "classes" not in data:
        raise ImportError(
            "Unrecognized character file format: missing required field 'classes'. "
            "Ensure this is a valid D&D Beyond character export."
        )

    return data


def read_character_file(file_path: str | Path) -> dict:
    """
    Read and validate a local D&D Beyond character JSON file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Raw character data as dictionary

    Raises:
        ImportError: If file not found, invalid JSON, or unrecognized format
    """
    path = Path(file_path)

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ImportError(
            f"Character file not found: {file_path}"
        ) from None
    except json.JSONDecodeError as e:
        raise ImportError(
            f"Invalid JSON in character file: {e}"
        ) from None
    except OSError as e:
        raise ImportError(
            f"Failed to read character file: {e}"
        ) from None

    return unwrap_character(data)
