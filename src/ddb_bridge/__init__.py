"""
DDB Bridge - D&D Beyond characters and scenes for Foundry VTT, served over FastMCP.
"""

from .config import BridgeSettings, load_settings
from .models import *

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("ddb-bridge")
except Exception:
    __version__ = "0.3.0"  # Fallback if metadata unavailable
__all__ = ["BridgeSettings", "load_settings"]
