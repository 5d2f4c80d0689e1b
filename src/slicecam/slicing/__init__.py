"""
Slicing module - Z levels, contour offsets, motion emission and toolpaths.
"""

from slicecam.slicing.component_toolpath import (
    generate_component_toolpath,
    schedule_elements,
    schedule_level,
)
from slicecam.slicing.contour_offset import offset_contour
from slicecam.slicing.milling_toolpath import (
    MillingToolpathGenerator,
    generate_element_toolpath,
)
from slicecam.slicing.motion import emit_arc, emit_circle, emit_contour, emit_path
from slicecam.slicing.toolpath import (
    Comment,
    Move,
    MoveType,
    Toolpath,
    ToolpathPoint,
    format_number,
)
from slicecam.slicing.z_levels import compute_z_levels

__all__ = [
    # Toolpath model
    "Comment",
    "Move",
    "MoveType",
    "Toolpath",
    "ToolpathPoint",
    "format_number",
    # Generation
    "MillingToolpathGenerator",
    "generate_element_toolpath",
    "generate_component_toolpath",
    "schedule_elements",
    "schedule_level",
    # Building blocks
    "compute_z_levels",
    "offset_contour",
    "emit_arc",
    "emit_circle",
    "emit_contour",
    "emit_path",
]
