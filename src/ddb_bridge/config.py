"""
Runtime settings for the bridge, read from the environment (and ``.env``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger("ddb-bridge")

ENV_PREFIX = "DDB_BRIDGE_"

# Host-facing setting keys → BridgeSettings fields
SETTING_KEYS: dict[str, str] = {
    "allow-scene-download": "allow_scene_download",
    "use-full-source": "use_full_source",
    "system-version": "system_version",
}


class BridgeSettings(BaseModel):
    """Per-world settings consulted by the parsers and the scene exporter."""
    allow_scene_download: bool = Field(
        default=False,
        description="Offer the scene download action to game masters",
    )
    use_full_source: bool = Field(
        default=False,
        description="Cite full book titles instead of abbreviations",
    )
    system_version: str = Field(
        default="1.4.2",
        description="Version of the dnd5e system the items are built for",
    )
    export_dir: Path = Field(
        default=Path("exports"),
        description="Directory scene snapshots are written to",
    )

    def get(self, key: str) -> Any:
        """Look up a setting by its host-facing key, e.g. ``allow-scene-download``.

        Raises:
            KeyError: If the key is not a known setting.
        """
        if key not in SETTING_KEYS:
            raise KeyError(f"Unknown setting: {key}")
        return getattr(self, SETTING_KEYS[key])


def load_settings(env_file: str | Path | None = None) -> BridgeSettings:
    """Build settings from ``DDB_BRIDGE_*`` environment variables.

    Args:
        env_file: Optional .env file; defaults to the nearest ``.env``.

    Returns:
        BridgeSettings with environment overrides applied.
    """
    if not load_dotenv(env_file):
        logger.debug("No .env file found, using process environment only")

    values: dict[str, Any] = {}
    for field_name in BridgeSettings.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
        if raw is not None and raw != "":
            values[field_name] = raw

    settings = BridgeSettings(**values)
    logger.debug(f"⚙️ Settings loaded: {settings.model_dump()}")
    return settings
