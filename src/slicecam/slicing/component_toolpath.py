"""
Multi-element scheduling for components and groups.

A component is machined top-down as a whole: one shared set of Z levels is
derived from the union of its elements' bounding boxes, and at every level
each element whose Z extent contains that level is cut in list order. Within
a level the tool position is threaded from element to element; each new level
starts lifted.

When boolean union is enabled the component's solids are first merged and
machined as one element; if the union fails entirely the per-element
schedule is used unchanged.
"""

from typing import List, Optional, Sequence, Tuple

from slicecam.core.config import MachiningSettings
from slicecam.core.logging import get_logger
from slicecam.geometry.bounds import BoundingBox, union_boxes
from slicecam.geometry.elements import Element, Group, extract_component_elements
from slicecam.geometry.mesh_operations import MergedSolid, UnionFn, unify_elements
from slicecam.geometry.shapes import bounding_box, is_supported
from slicecam.slicing.milling_toolpath import (
    MillingToolpathGenerator,
    cut_element_at,
    not_implemented_comment,
)
from slicecam.slicing.motion import Position
from slicecam.slicing.toolpath import Comment, Instruction, Toolpath, format_number
from slicecam.slicing.z_levels import compute_z_levels

logger = get_logger(__name__)

ScheduledElement = Tuple[Element, BoundingBox]


def _format_point(x: float, y: float, z: float) -> str:
    return f"({format_number(x)}, {format_number(y)}, {format_number(z)})"


def schedule_level(
    entries: Sequence[ScheduledElement],
    z: float,
    settings: MachiningSettings,
    position: Position = None,
) -> Tuple[List[Instruction], Position]:
    """
    Cut every element active at height ``z``, in list order.

    Args:
        entries: (element, bounding box) pairs.
        z: Level height.
        settings: Machining settings.
        position: Tool XY entering the level (None when lifted).

    Returns:
        (instructions, tool position leaving the level). Skipped elements
        leave the position untouched.
    """
    active = [(element, box) for element, box in entries if box.contains_z(z)]
    if not active:
        return [Comment("No elements intersect at this Z level")], position

    instructions: List[Instruction] = [
        Comment(f"Processing {len(active)} elements at this level")
    ]
    for element, _ in active:
        instructions.append(Comment(f"Element: {element.label}"))
        cut, position = cut_element_at(element, z, settings, position)
        instructions.extend(cut)
    return instructions, position


def schedule_elements(elements: Sequence[Element], settings: MachiningSettings) -> Toolpath:
    """
    Machine several elements on one shared set of Z levels.

    The cut runs from the top of the combined bounding box down to
    ``max(box bottom, top - depth)``; there is always at least one level
    unless ``depth`` is zero.
    """
    toolpath = Toolpath(metadata={"elements": len(elements)})

    entries: List[ScheduledElement] = []
    for element in elements:
        if not is_supported(element):
            toolpath.add(not_implemented_comment(element))
            continue
        box = bounding_box(element)
        if box is None:
            toolpath.comment(f"Skipping {element.label}: no geometric extent")
            continue
        entries.append((element, box))

    combined = union_boxes(box for _, box in entries)
    if combined is None:
        toolpath.comment("No machinable elements")
        return toolpath

    top = combined.max_z
    floor = max(combined.min_z, top - settings.depth)
    toolpath.comment(
        f"Combined bounding box: min {_format_point(combined.min_x, combined.min_y, combined.min_z)}"
        f" max {_format_point(combined.max_x, combined.max_y, combined.max_z)}"
    )
    toolpath.comment(f"Processing from Z={format_number(top)} to Z={format_number(floor)}")

    levels = compute_z_levels(top, top - floor, settings.stepdown, at_least_one=settings.depth > 0)
    for z in levels:
        toolpath.begin_level(z)
        instructions, _ = schedule_level(entries, z, settings)
        toolpath.extend(instructions)

    logger.info(
        "elements_scheduled",
        elements=len(entries),
        levels=len(toolpath.levels),
        top=top,
        floor=floor,
    )
    return toolpath


def generate_component_toolpath(
    component: Group,
    settings: MachiningSettings,
    unify: bool = True,
    union_fn: Optional[UnionFn] = None,
) -> Toolpath:
    """
    Generate the toolpath for a component or group.

    Args:
        component: Group whose children are relative to its position.
        settings: Machining settings.
        unify: Try to merge the children into one solid first.
        union_fn: Pairwise mesh union override (see ``unify_elements``).

    Returns:
        The merged solid's toolpath, or exactly ``schedule_elements`` on
        the absolute children when merging is disabled or fails.
    """
    elements = extract_component_elements(component)
    if not elements:
        toolpath = Toolpath()
        toolpath.comment("Component has no elements to machine")
        return toolpath

    if unify:
        result = unify_elements(elements, union_fn)
        if isinstance(result, MergedSolid):
            return _merged_toolpath(component, result, settings)
        logger.warning(
            "component_union_failed",
            component=component.label,
            reason=result.reason,
            elements=result.element_count,
        )

    return schedule_elements(elements, settings)


def _merged_toolpath(
    component: Group, merged: MergedSolid, settings: MachiningSettings
) -> Toolpath:
    toolpath = Toolpath(metadata={"elements": merged.element_count, "merged": True})
    toolpath.comment(f"Component: {component.label}")
    toolpath.comment(f"Position: {_format_point(component.x, component.y, component.z)}")
    toolpath.comment(
        f"Boolean union merged {merged.merged_count} of {merged.element_count} elements"
    )
    element = merged.to_element(name=component.name)
    toolpath.append_toolpath(MillingToolpathGenerator(settings).generate(element))
    return toolpath
