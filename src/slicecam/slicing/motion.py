"""
Motion emitter: turns offset contours into G-code moves at a fixed Z.

Every emitter takes the tool's prior XY position (None when the tool is
lifted, e.g. at the start of a Z level) and returns the instructions plus the
XY position the tool ends at.

Approach rules:
- no prior position: rapid above the start at ``z + safe_height``, then
  plunge at the plunge rate;
- prior position: rapid across at the current Z.

Polylines are cut in their base (counter-clockwise) vertex order for climb
milling and reversed for conventional milling. Full circles become a single
arc; climb maps to G3 and conventional to G2 so arcs run the same way as
polylines. Open arcs follow the same rule: climb sweeps counter-clockwise
from the start angle, conventional runs the same arc back from its end.
"""

from typing import List, Optional, Sequence, Tuple

from slicecam.core.config import MachiningSettings, MillingDirection
from slicecam.geometry.contours import (
    AnnulusContour,
    ArcContour,
    CircleContour,
    Contour,
    EllipseContour,
    PolygonContour,
    RectangleContour,
    ellipse_points,
)
from slicecam.slicing.toolpath import Instruction, Move, MoveType

Position = Optional[Tuple[float, float]]
Emission = Tuple[List[Instruction], Tuple[float, float]]


def approach(
    x: float, y: float, z: float, settings: MachiningSettings, position: Position
) -> List[Instruction]:
    """Moves bringing the tool to (x, y) at cutting height ``z``."""
    if position is None:
        return [
            Move(MoveType.RAPID, x=x, y=y, z=z + settings.safe_height),
            Move(MoveType.LINEAR, z=z, feedrate=settings.plungerate),
        ]
    return [Move(MoveType.RAPID, x=x, y=y)]


def emit_path(
    points: Sequence[Tuple[float, float]],
    z: float,
    settings: MachiningSettings,
    position: Position = None,
    closed: bool = True,
) -> Emission:
    """
    Emit a polyline cut.

    Closed paths are closed by repeating their start point, so a rectangle
    yields five cutting moves. The direction reversal is applied to the
    closed point list, so a conventional path is the exact reverse of the
    climb path.
    """
    path = list(points)
    if not path:
        raise ValueError("Cannot emit an empty path")
    if closed:
        path.append(path[0])
    if settings.direction == MillingDirection.CONVENTIONAL:
        path.reverse()

    start_x, start_y = path[0]
    instructions = approach(start_x, start_y, z, settings, position)
    instructions.extend(
        Move(MoveType.LINEAR, x=x, y=y, feedrate=settings.feedrate) for x, y in path
    )
    return instructions, path[-1]


def _arc_type(settings: MachiningSettings) -> MoveType:
    if settings.direction == MillingDirection.CLIMB:
        return MoveType.ARC_CCW
    return MoveType.ARC_CW


def emit_circle(
    center: Tuple[float, float],
    radius: float,
    z: float,
    settings: MachiningSettings,
    position: Position = None,
) -> Emission:
    """Emit one full-circle arc starting and ending at (cx + r, cy)."""
    cx, cy = center
    start = (cx + radius, cy)
    instructions = approach(start[0], start[1], z, settings, position)
    instructions.append(
        Move(
            _arc_type(settings),
            x=start[0],
            y=start[1],
            i=-radius,
            j=0.0,
            feedrate=settings.feedrate,
        )
    )
    return instructions, start


def emit_arc(
    contour: ArcContour,
    z: float,
    settings: MachiningSettings,
    position: Position = None,
) -> Emission:
    """
    Emit one arc move over an open arc.

    I and J are measured from the arc's starting point to its centre. A full
    sweep starts and ends at ``start_angle``.
    """
    start, end = contour.start, contour.end
    if settings.direction == MillingDirection.CONVENTIONAL:
        start, end = end, start
    if contour.is_full:
        end = start

    cx, cy = contour.center
    instructions = approach(start[0], start[1], z, settings, position)
    instructions.append(
        Move(
            _arc_type(settings),
            x=end[0],
            y=end[1],
            i=cx - start[0],
            j=cy - start[1],
            feedrate=settings.feedrate,
        )
    )
    return instructions, end


def emit_contour(
    contour: Contour,
    z: float,
    settings: MachiningSettings,
    position: Position = None,
) -> Emission:
    """
    Emit the cut for any contour type.

    Args:
        contour: Already offset contour.
        z: Cutting height.
        settings: Feeds, safe height and milling direction.
        position: Tool XY before the cut, or None if the tool is lifted.

    Returns:
        (instructions, end position)
    """
    if isinstance(contour, CircleContour):
        return emit_circle(contour.center, contour.radius, z, settings, position)

    if isinstance(contour, ArcContour):
        return emit_arc(contour, z, settings, position)

    if isinstance(contour, EllipseContour):
        if contour.is_circle():
            return emit_circle(contour.center, contour.radius_x, z, settings, position)
        points = ellipse_points(
            contour.center, contour.radius_x, contour.radius_y, settings.min_segments
        )
        return emit_path(points, z, settings, position)

    if isinstance(contour, RectangleContour):
        return emit_path(contour.corners(), z, settings, position)

    if isinstance(contour, PolygonContour):
        return emit_path(contour.points, z, settings, position, closed=contour.closed)

    if isinstance(contour, AnnulusContour):
        outer, end = emit_circle(
            contour.center, contour.outer_radius, z, settings, position
        )
        # Retract before crossing the ring, then re-enter from above
        retract = [Move(MoveType.RAPID, z=z + settings.safe_height)]
        inner, end = emit_circle(contour.center, contour.inner_radius, z, settings, None)
        return outer + retract + inner, end

    raise TypeError(f"Unknown contour type: {type(contour).__name__}")
