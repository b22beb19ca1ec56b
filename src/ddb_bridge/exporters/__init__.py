"""
Export of Foundry documents into portable formats.
"""

from .scene import (
    SceneExportError,
    can_download_scene,
    collect_scene_data,
    export_scene,
    get_notes,
    get_scene_filename,
    list_exportable_scenes,
)

__all__ = [
    "SceneExportError",
    "can_download_scene",
    "collect_scene_data",
    "export_scene",
    "get_notes",
    "get_scene_filename",
    "list_exportable_scenes",
]
