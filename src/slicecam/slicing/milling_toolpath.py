"""
Single-element milling toolpath generation.

Layered contour milling for one parametric CAD element:

1. The element's bounding box gives the top of the cut and its height.
2. Z levels descend from the top by ``stepdown`` until
   ``min(depth, height)`` has been removed (the full ``depth`` for
   through-cut profiles).
3. At each level the element's cross-section is offset by the tool radius
   and emitted as a closed contour pass.

Levels where the section vanishes or the offset collapses are annotated
with a comment and skipped; the remaining levels are still emitted.
"""

import logging
from typing import List, Tuple

from slicecam.core.config import MachiningSettings
from slicecam.geometry.elements import Element, Group, Profile
from slicecam.geometry.shapes import bounding_box, cross_section, is_supported
from slicecam.slicing.contour_offset import offset_contour
from slicecam.slicing.motion import Position, emit_contour
from slicecam.slicing.toolpath import Comment, Instruction, Toolpath, format_number
from slicecam.slicing.z_levels import compute_z_levels

logger = logging.getLogger(__name__)


def not_implemented_comment(element: Element) -> Comment:
    return Comment(f"Toolpath generation for {element.type} not implemented")


def cut_element_at(
    element: Element,
    z: float,
    settings: MachiningSettings,
    position: Position = None,
) -> Tuple[List[Instruction], Position]:
    """
    Cut one element's contour at height ``z``.

    Returns:
        (instructions, tool position after the cut). When the level is
        skipped the instructions hold only the reason and the position is
        returned unchanged.
    """
    section = cross_section(element, z)
    if section is None:
        return [
            Comment(f"No cross-section for {element.label} at Z={format_number(z)}, skipping")
        ], position

    contour = offset_contour(section, settings.offset_distance, settings.polygon_offset)
    if contour is None:
        return [
            Comment(
                f"Contour of {element.label} collapsed after {settings.offset.value} "
                f"offset at Z={format_number(z)}, skipping"
            )
        ], position

    instructions, end = emit_contour(contour, z, settings, position)
    return instructions, end


class MillingToolpathGenerator:
    """
    Generate layered contour toolpaths for single CAD elements.

    Usage::

        gen = MillingToolpathGenerator(settings)
        toolpath = gen.generate(element)
        print(toolpath.to_gcode())

    Args:
        settings: Machining settings shared by every generated toolpath
    """

    def __init__(self, settings: MachiningSettings):
        self.settings = settings

    def cut_span(self, element: Element, height: float) -> float:
        """Depth removed below the element's top."""
        if isinstance(element, Profile) and element.through_cut:
            return self.settings.depth
        return min(self.settings.depth, height)

    def generate(self, element: Element) -> Toolpath:
        """
        Generate the toolpath for one element.

        Group and component elements are scheduled per child through the
        component toolpath generator.

        Returns:
            Toolpath whose ``levels`` lists every Z level emitted
        """
        if isinstance(element, Group):
            from slicecam.slicing.component_toolpath import generate_component_toolpath

            return generate_component_toolpath(element, self.settings)

        toolpath = Toolpath(metadata={"element": element.type})

        if not is_supported(element):
            logger.warning("No toolpath strategy for %s elements", element.type)
            toolpath.add(not_implemented_comment(element))
            return toolpath

        box = bounding_box(element)
        if box is None:
            toolpath.comment(f"Cannot determine extent of {element.label}, skipping")
            return toolpath

        top = box.max_z
        span = self.cut_span(element, box.height)
        levels = compute_z_levels(top, span, self.settings.stepdown)
        if not levels:
            toolpath.comment(f"Nothing to machine for {element.label}: zero cutting depth")
            return toolpath

        toolpath.comment(
            f"{element.label}: Z={format_number(top)} to Z={format_number(top - span)}, "
            f"{len(levels)} levels"
        )
        for z in levels:
            toolpath.begin_level(z)
            instructions, _ = cut_element_at(element, z, self.settings)
            toolpath.extend(instructions)

        logger.info(
            "Generated %s toolpath: %d levels, %d instructions",
            element.type,
            len(toolpath.levels),
            len(toolpath),
        )
        return toolpath


def generate_element_toolpath(element: Element, settings: MachiningSettings) -> Toolpath:
    """Convenience wrapper around ``MillingToolpathGenerator.generate``."""
    return MillingToolpathGenerator(settings).generate(element)
