"""
Scene export: a Foundry scene and its D&D Beyond journal notes as a JSON snapshot.

Notes are recovered by joining the map pins placed on the scene with the journal
entries imported from the same book chapter. Those entries are named with a
fixed-width prefix, ``"NN Label"``: the first two characters hold the note's
index and the label starts at the fourth. Renaming the entries upstream breaks
the join, so names that do not follow the pattern are skipped and reported.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..host import SceneHost
from ..models import (
    JournalEntry,
    NoteDescription,
    Position,
    Scene,
    SceneSnapshot,
    TokenSnapshot,
)

logger = logging.getLogger("ddb-bridge.scenes")

ALLOW_DOWNLOAD_SETTING = "allow-scene-download"
SCENE_MIME_TYPE = "application/json"

# Leading digits of the two-character index prefix
_INDEX_PATTERN = re.compile(r"\s*(\d+)")


class SceneExportError(Exception):
    """Raised when a scene may not be exported."""


def get_related_journal_entries(scene: Scene, journal: list[JournalEntry]) -> list[JournalEntry]:
    """Journal entries imported from the same source as the scene.

    An entry qualifies when it has a ``ddbId`` and its ddbId, cobaltId,
    parentId and bookCode all equal the scene's.
    """
    identity = scene.ddb_flags.identity()
    return [
        entry for entry in journal
        if entry.ddb_flags.ddb_id and entry.ddb_flags.identity() == identity
    ]


def parse_note_name(name: str) -> tuple[int, str] | None:
    """Split ``"NN Label"`` into (index, label).

    Returns:
        The index parsed from the first two characters and the label from
        the fourth character on, or None when the name is shorter than three
        characters or has no numeric prefix.
    """
    if len(name) < 3:
        return None
    match = _INDEX_PATTERN.match(name[:2])
    if match is None:
        return None
    return int(match.group(1)), name[3:]


def get_notes(scene: Scene, journal: list[JournalEntry]) -> tuple[list[NoteDescription], list[str]]:
    """Extract the notes placed on a scene from imported journal entries.

    Pins that link to an entry from another source (or to a user-made entry)
    are dropped. Pins sharing an index are merged into one note with several
    positions.

    Args:
        scene: Scene carrying the pins.
        journal: Every journal entry in the world.

    Returns:
        Tuple of (notes sorted by index, warnings for skipped entries).
    """
    related = {entry.id: entry for entry in get_related_journal_entries(scene, journal)}
    warnings: list[str] = []
    grouped: dict[int, NoteDescription] = {}

    for note in scene.notes:
        entry = related.get(note.entry_id or "")
        if entry is None or not entry.ddb_flags.ddb_id:
            continue

        parsed = parse_note_name(entry.name)
        if parsed is None:
            message = f"Skipping note for journal entry '{entry.name}' ({entry.id}): name has no index prefix"
            logger.warning(message)
            warnings.append(message)
            continue

        index, label = parsed
        position = Position(x=note.x, y=note.y)
        if index in grouped:
            grouped[index].positions.append(position)
        else:
            grouped[index] = NoteDescription(label=label, positions=[position])

    notes = [grouped[index] for index in sorted(grouped)]
    return notes, warnings


def collect_scene_data(scene: Scene, journal: list[JournalEntry]) -> tuple[SceneSnapshot, list[str]]:
    """Prepare the snapshot of a scene for download.

    Actor-linked tokens belong to player characters and are left out.
    """
    notes, warnings = get_notes(scene, journal)

    snapshot = SceneSnapshot(
        flags=scene.flags,
        name=scene.name,
        nav_name=scene.nav_name,
        # dimensions
        width=scene.width,
        height=scene.height,
        # grid
        grid=scene.grid,
        grid_distance=scene.grid_distance,
        grid_type=scene.grid_type,
        grid_units=scene.grid_units,
        shift_x=scene.shift_x,
        shift_y=scene.shift_y,
        background_color=scene.background_color,
        descriptions=notes,
        walls=scene.walls,
        lights=scene.lights,
        tokens=[
            TokenSnapshot(**token.model_dump(exclude={"actor_link"}))
            for token in scene.tokens
            if not token.actor_link
        ],
    )
    return snapshot, warnings


def get_scene_filename(scene: Scene) -> str:
    """File name for a scene snapshot.

    ``<bookCode>-<ddbId>[-<cobaltId>][-<parentId>]-scene.json``, or the legacy
    id with its first ``/`` replaced by ``-`` when the scene lacks a book code
    or a ddbId.

    Raises:
        SceneExportError: If the scene has neither a book code with a ddbId
            nor a legacy id.
    """
    flags = scene.ddb_flags
    if flags.book_code and flags.ddb_id:
        scene_ref = f"{flags.book_code}-{flags.ddb_id}"
    elif scene.vtta_id:
        scene_ref = scene.vtta_id.replace("/", "-", 1)
    else:
        raise SceneExportError(f"Scene '{scene.name}' has no D&D Beyond identifiers")

    if flags.cobalt_id:
        scene_ref += f"-{flags.cobalt_id}"
    if flags.parent_id:
        scene_ref += f"-{flags.parent_id}"
    return f"{scene_ref}-scene.json"


def can_download_scene(host: SceneHost, scene: Scene) -> bool:
    """Whether the download action is offered for ``scene``.

    Requires a game master, the scene-download setting, and a scene that was
    imported from D&D Beyond (or from the legacy importer).
    """
    return bool(
        host.is_gm
        and host.get_setting(ALLOW_DOWNLOAD_SETTING)
        and (scene.ddb_flags.ddb_id or scene.vtta_id)
    )


def list_exportable_scenes(host: SceneHost) -> list[Scene]:
    return [scene for scene in host.scenes() if can_download_scene(host, scene)]


def export_scene(host: SceneHost, scene_id: str) -> tuple[Path, list[str]]:
    """Snapshot a scene and hand it to the host as a JSON download.

    Args:
        host: Host providing documents, settings and the download primitive.
        scene_id: Id of the scene to export.

    Returns:
        Tuple of (path returned by ``host.download``, warnings).

    Raises:
        KeyError: If the host has no scene with that id.
        SceneExportError: If the export is not allowed for this user or scene.
    """
    scene = host.get_scene(scene_id)
    if not can_download_scene(host, scene):
        raise SceneExportError(
            f"Scene download is not available for '{scene.name}'. "
            "It requires a game master, the allow-scene-download setting, "
            "and a scene imported from D&D Beyond."
        )

    snapshot, warnings = collect_scene_data(scene, host.journal_entries())
    filename = get_scene_filename(scene)
    logger.debug(f"Exporting scene {scene.name} with {len(snapshot.descriptions)} notes as {filename}")
    return host.download(snapshot.to_json(), filename, SCENE_MIME_TYPE), warnings
