"""
SliceCAM - Layered G-code toolpath generation for parametric CAD primitives.

Turns CAD elements (cubes, spheres, cones, profiles, components, ...) and a
set of machining settings into contour-parallel milling toolpaths.
"""

__version__ = "0.1.0"
__author__ = "SliceCAM Contributors"

from slicecam.core.config import ConfigManager, MachiningSettings
from slicecam.pipeline import generate_gcode, generate_toolpath

__all__ = [
    "__version__",
    "ConfigManager",
    "MachiningSettings",
    "generate_gcode",
    "generate_toolpath",
]
