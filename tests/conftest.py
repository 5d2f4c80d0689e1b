"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from slicecam.core.config import MachiningSettings


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a sample configuration directory with machining presets."""
    config_dir = temp_dir / "config"
    (config_dir / "machining").mkdir(parents=True)

    aluminium = """
machining:
  toolDiameter: 6
  depth: 20
  stepdown: 2
  feedrate: 800
  plungerate: 200
  offset: outside
  direction: climb
"""
    (config_dir / "machining" / "aluminium_6mm.yaml").write_text(aluminium)

    foam = """
machining:
  tool_diameter: 3.175
  depth: 50
  stepdown: 10
  feedrate: 2000
  plungerate: 500
  offset: center
  direction: conventional
  safe_height: 10
"""
    (config_dir / "machining" / "foam_eighth.yaml").write_text(foam)

    # Files without a machining section are ignored
    (config_dir / "machining" / "notes.yaml").write_text("comment: not a preset\n")

    return config_dir


@pytest.fixture
def settings_data():
    """Settings mapping as sent by the CAD front-end (outside offset, climb)."""
    return {
        "toolDiameter": 6,
        "depth": 20,
        "stepdown": 10,
        "feedrate": 500,
        "plungerate": 100,
        "offset": "outside",
        "direction": "climb",
    }


@pytest.fixture
def settings(settings_data):
    """Outside-offset climb milling with a 6 mm tool."""
    return MachiningSettings.from_dict(settings_data)


@pytest.fixture
def center_settings(settings_data):
    """Tool-centre milling: contours are cut without offset."""
    return MachiningSettings.from_dict({**settings_data, "offset": "center"})


@pytest.fixture
def conventional_settings(settings_data):
    """Outside-offset conventional milling."""
    return MachiningSettings.from_dict({**settings_data, "direction": "conventional"})


@pytest.fixture
def cube_data():
    """100 mm cube centred on the origin."""
    return {"type": "cube", "id": "cube-1", "width": 100, "height": 100, "depth": 100}
