"""
Character import from D&D Beyond.

Reads a local D&D Beyond JSON export and maps it into Foundry VTT dnd5e items.
"""

from .dndbeyond.reader import read_character_file
from .dndbeyond.mapper import map_ddb_to_items
from .base import ImportResult, ImportError

__all__ = [
    "read_character_file",
    "map_ddb_to_items",
    "ImportResult",
    "ImportError",
]
