"""
Pytest configuration and fixtures for ddb-bridge tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing ddb_bridge
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def ddb_sample_path():
    return FIXTURES / "ddb_character_sample.json"


@pytest.fixture
def ddb_sample(ddb_sample_path):
    """Load the sample DDB character JSON (still wrapped in its envelope)."""
    with open(ddb_sample_path) as f:
        return json.load(f)


@pytest.fixture
def ddb_character(ddb_sample):
    """The sample character, unwrapped and validated."""
    from ddb_bridge.importers.dndbeyond.mapper import load_character
    from ddb_bridge.importers.dndbeyond.reader import unwrap_character

    return load_character(unwrap_character(ddb_sample))


@pytest.fixture
def world_sample_path():
    return FIXTURES / "foundry_world_sample.json"


@pytest.fixture
def world_sample(world_sample_path):
    """Load the sample Foundry world dump."""
    with open(world_sample_path) as f:
        return json.load(f)


@pytest.fixture
def export_settings(tmp_path):
    """Settings with scene download enabled, exporting into a temp directory."""
    from ddb_bridge.config import BridgeSettings

    return BridgeSettings(allow_scene_download=True, export_dir=tmp_path / "exports")


@pytest.fixture
def world(world_sample, export_settings):
    from ddb_bridge.host import LocalWorld

    return LocalWorld.from_dict(world_sample, settings=export_settings)
