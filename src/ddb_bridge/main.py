"""
DDB Bridge MCP Server
Imports D&D Beyond characters as Foundry VTT dnd5e items and exports
D&D Beyond-linked Foundry scenes as portable JSON snapshots.
"""

import json
import logging
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from .config import load_settings
from .exporters import SceneExportError, export_scene as export_scene_snapshot
from .exporters import get_scene_filename, list_exportable_scenes as exportable_scenes
from .host import HostError, LocalWorld, UserRole
from .models import ItemRecord
from .importers import ImportError, map_ddb_to_items, read_character_file
from .importers.dndbeyond.classes import parse_classes
from .importers.dndbeyond.items import parse_inventory
from .importers.dndbeyond.mapper import load_character

logger = logging.getLogger("ddb-bridge")

logging.basicConfig(
    level=logging.DEBUG,
    )

settings = load_settings()
logger.debug(f"📂 Export directory: {settings.export_dir.resolve()}")

mcp = FastMCP(
    name="ddb-bridge"
)

logger.debug("✅ Server initialized, registering tools")


def _load_world(world_file: str, role: str) -> LocalWorld:
    return LocalWorld.from_file(world_file, settings=settings, role=UserRole(role))


def _items_json(items: list[ItemRecord], warnings: list[str]) -> str:
    return json.dumps(
        {"items": [item.model_dump() for item in items], "warnings": warnings},
        indent=2,
    )


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

# Character import tools
@mcp.tool
def import_character(
    file_path: Annotated[str, Field(description="Path to a D&D Beyond character JSON export")],
) -> str:
    """Import a D&D Beyond character and report what was converted.

    Converts the character's classes and inventory into Foundry dnd5e items and
    returns a readable import report. Records that cannot be converted are
    skipped and listed as warnings.
    """
    try:
        ddb = read_character_file(file_path)
        result = map_ddb_to_items(ddb, settings)
    except ImportError as e:
        return f"❌ Import failed: {e}"
    return result.build_report().format()


@mcp.tool
def import_character_classes(
    file_path: Annotated[str, Field(description="Path to a D&D Beyond character JSON export")],
) -> str:
    """Convert a D&D Beyond character's classes into Foundry class items (JSON)."""
    try:
        character = load_character(read_character_file(file_path))
    except ImportError as e:
        return f"❌ Import failed: {e}"
    items, warnings = parse_classes(character, settings)
    return _items_json(items, warnings)


@mcp.tool
def import_character_items(
    file_path: Annotated[str, Field(description="Path to a D&D Beyond character JSON export")],
) -> str:
    """Convert a D&D Beyond character's inventory into Foundry items (JSON)."""
    try:
        character = load_character(read_character_file(file_path))
    except ImportError as e:
        return f"❌ Import failed: {e}"
    items, warnings = parse_inventory(character, settings)
    return _items_json(items, warnings)


# Scene export tools
@mcp.tool
def list_exportable_scenes(
    world_file: Annotated[str, Field(description="Path to a Foundry world dump with 'scenes' and 'journal'")],
    role: Annotated[str, Field(description="Role of the requesting user: gamemaster, player or observer")] = "gamemaster",
) -> str:
    """List the scenes that can be downloaded as D&D Beyond scene snapshots."""
    try:
        world = _load_world(world_file, role)
    except (HostError, ValueError) as e:
        return f"❌ Could not load world: {e}"

    scenes = exportable_scenes(world)
    if not scenes:
        return "No exportable scenes found."

    lines = [f"🗺️ Exportable scenes ({len(scenes)}):"]
    for scene in scenes:
        try:
            filename = get_scene_filename(scene)
        except SceneExportError as e:
            filename = f"not exportable ({e})"
        lines.append(f"  - {scene.name} [{scene.id}] → {filename}")
    return "\n".join(lines)


@mcp.tool
def export_scene(
    world_file: Annotated[str, Field(description="Path to a Foundry world dump with 'scenes' and 'journal'")],
    scene_id: Annotated[str, Field(description="Id of the scene to export")],
    role: Annotated[str, Field(description="Role of the requesting user: gamemaster, player or observer")] = "gamemaster",
) -> str:
    """Export a scene, its walls, lights, tokens and journal notes as a JSON snapshot."""
    try:
        world = _load_world(world_file, role)
        path, warnings = export_scene_snapshot(world, scene_id)
    except (HostError, ValueError) as e:
        return f"❌ Could not load world: {e}"
    except KeyError as e:
        return f"❌ {e.args[0] if e.args else e}"
    except SceneExportError as e:
        return f"❌ {e}"

    message = f"🗺️ Scene exported to {path}"
    if warnings:
        message += "\n\nWarnings:\n" + "\n".join(f"  - {w}" for w in warnings)
    return message


logger.debug("✅ All tools successfully registered. DDB Bridge server running! 🎲")


def main() -> None:
    """Main entry point for the DDB Bridge server."""
    mcp.run()

if __name__ == "__main__":
    main()
