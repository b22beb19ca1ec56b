"""
Host collaborators used by the scene exporter.

The exporter only talks to a ``SceneHost``: document lookup, settings, the
current user's privilege and a "save this content as a file" primitive.
``LocalWorld`` implements it over a Foundry world dump on disk.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from .config import BridgeSettings
from .models import JournalEntry, Scene

logger = logging.getLogger("ddb-bridge.scenes")


class HostError(Exception):
    """Raised when a world dump cannot be loaded."""


class UserRole(str, Enum):
    """Foundry user roles with increasing privilege levels."""
    OBSERVER = "observer"
    PLAYER = "player"
    GAMEMASTER = "gamemaster"


class SceneHost(Protocol):
    @property
    def is_gm(self) -> bool: ...

    def scenes(self) -> list[Scene]: ...

    def get_scene(self, scene_id: str) -> Scene: ...

    def journal_entries(self) -> list[JournalEntry]: ...

    def get_setting(self, key: str) -> Any: ...

    def download(self, content: str, filename: str, mime_type: str) -> Path: ...


class LocalWorld:
    """A Foundry world loaded from a JSON dump of its scenes and journal.

    Attributes:
        settings: World settings consulted through ``get_setting``.
        role: Role of the user driving the export.
    """

    def __init__(
        self,
        scenes: list[Scene],
        journal: list[JournalEntry],
        settings: BridgeSettings | None = None,
        role: UserRole = UserRole.GAMEMASTER,
    ) -> None:
        self._scenes = {scene.id: scene for scene in scenes}
        self._journal = list(journal)
        self.settings = settings or BridgeSettings()
        self.role = role

    @classmethod
    def from_dict(
        cls,
        data: dict,
        settings: BridgeSettings | None = None,
        role: UserRole = UserRole.GAMEMASTER,
    ) -> "LocalWorld":
        try:
            scenes = [Scene.model_validate(s) for s in data.get("scenes", [])]
            journal = [JournalEntry.model_validate(j) for j in data.get("journal", [])]
        except ValidationError as e:
            raise HostError(f"Invalid world data: {e}") from None
        return cls(scenes, journal, settings=settings, role=role)

    @classmethod
    def from_file(
        cls,
        file_path: str | Path,
        settings: BridgeSettings | None = None,
        role: UserRole = UserRole.GAMEMASTER,
    ) -> "LocalWorld":
        """Load a world dump of the form ``{"scenes": [...], "journal": [...]}``.

        Raises:
            HostError: If the file is missing, not JSON, or not a world dump.
        """
        path = Path(file_path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise HostError(f"World file not found: {file_path}") from None
        except json.JSONDecodeError as e:
            raise HostError(f"Invalid JSON in world file: {e}") from None

        if not isinstance(data, dict):
            raise HostError("Invalid world file: expected a JSON object with scenes and journal")

        world = cls.from_dict(data, settings=settings, role=role)
        logger.debug(
            f"Loaded world {path.name}: {len(world._scenes)} scenes, {len(world._journal)} journal entries"
        )
        return world

    @property
    def is_gm(self) -> bool:
        return self.role == UserRole.GAMEMASTER

    def scenes(self) -> list[Scene]:
        return list(self._scenes.values())

    def get_scene(self, scene_id: str) -> Scene:
        """Look up a scene by id.

        Raises:
            KeyError: If no scene has that id.
        """
        try:
            return self._scenes[scene_id]
        except KeyError:
            raise KeyError(f"Scene not found: {scene_id}") from None

    def journal_entries(self) -> list[JournalEntry]:
        return list(self._journal)

    def get_setting(self, key: str) -> Any:
        return self.settings.get(key)

    def download(self, content: str, filename: str, mime_type: str) -> Path:
        """Write ``content`` into the export directory under ``filename``."""
        export_dir = Path(self.settings.export_dir)
        export_dir.mkdir(parents=True, exist_ok=True)
        target = export_dir / filename
        target.write_text(content, encoding="utf-8")
        logger.info(f"💾 Saved {filename} ({mime_type}, {len(content)} chars) to {export_dir}")
        return target
