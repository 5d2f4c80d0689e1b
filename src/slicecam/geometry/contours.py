"""
Cross-section contour types.

A contour is the 2D outline of a solid cut by a horizontal plane. Contours
are transient values: computed per (element, Z level), offset, emitted as
motion, then discarded.
"""

import math
from dataclasses import dataclass
from typing import ClassVar, List, Tuple, Union

Point2D = Tuple[float, float]


@dataclass(frozen=True)
class CircleContour:
    center: Point2D
    radius: float

    kind: ClassVar[str] = "circle"


@dataclass(frozen=True)
class EllipseContour:
    center: Point2D
    radius_x: float
    radius_y: float

    kind: ClassVar[str] = "ellipse"

    def is_circle(self, tolerance: float = 1e-3) -> bool:
        return abs(self.radius_x - self.radius_y) < tolerance


@dataclass(frozen=True)
class RectangleContour:
    """Axis-aligned rectangle: width along X, depth along Y."""

    center: Point2D
    width: float
    depth: float

    kind: ClassVar[str] = "rectangle"

    def corners(self) -> List[Point2D]:
        """Four corners, counter-clockwise from the minimum corner."""
        cx, cy = self.center
        x0 = cx - self.width / 2
        y0 = cy - self.depth / 2
        return [
            (x0, y0),
            (x0 + self.width, y0),
            (x0 + self.width, y0 + self.depth),
            (x0, y0 + self.depth),
        ]


@dataclass(frozen=True)
class PolygonContour:
    points: Tuple[Point2D, ...]
    closed: bool = True

    kind: ClassVar[str] = "polygon"


@dataclass(frozen=True)
class AnnulusContour:
    """Ring between two concentric circles (torus slice)."""

    center: Point2D
    outer_radius: float
    inner_radius: float

    kind: ClassVar[str] = "annulus"


@dataclass(frozen=True)
class ArcContour:
    """
    Open circular arc swept counter-clockwise from ``start_angle``.

    Angles are in degrees. A sweep of 360 is a full circle starting and
    ending at ``start_angle``.
    """

    center: Point2D
    radius: float
    start_angle: float
    sweep: float

    kind: ClassVar[str] = "arc"

    def point_at(self, angle: float) -> Point2D:
        cx, cy = self.center
        theta = math.radians(angle)
        return cx + self.radius * math.cos(theta), cy + self.radius * math.sin(theta)

    @property
    def start(self) -> Point2D:
        return self.point_at(self.start_angle)

    @property
    def end(self) -> Point2D:
        return self.point_at(self.start_angle + self.sweep)

    @property
    def is_full(self) -> bool:
        return self.sweep >= 360 - ARC_SWEEP_TOLERANCE


# Sweeps this close to 0 or 360 degrees are treated as full circles
ARC_SWEEP_TOLERANCE = 1e-3


def arc_sweep(start_angle: float, end_angle: float) -> float:
    """Counter-clockwise sweep in degrees from start to end, in (0, 360]."""
    sweep = (end_angle - start_angle) % 360
    if sweep < ARC_SWEEP_TOLERANCE or sweep > 360 - ARC_SWEEP_TOLERANCE:
        return 360.0
    return sweep


Contour = Union[
    CircleContour, EllipseContour, RectangleContour, PolygonContour, AnnulusContour, ArcContour
]


def ellipse_points(
    center: Point2D, radius_x: float, radius_y: float, min_segments: int = 36
) -> List[Point2D]:
    """
    Sample an ellipse counter-clockwise starting at (cx + rx, cy).

    The segment count grows with the perimeter, never below ``min_segments``.
    The start point is not repeated.
    """
    cx, cy = center
    count = max(min_segments, math.ceil(math.pi * (radius_x + radius_y)))
    return [
        (
            cx + radius_x * math.cos(2 * math.pi * i / count),
            cy + radius_y * math.sin(2 * math.pi * i / count),
        )
        for i in range(count)
    ]


def regular_polygon_points(center: Point2D, radius: float, sides: int) -> List[Point2D]:
    """Vertices of a regular polygon, the first one on the +X axis."""
    cx, cy = center
    return [
        (
            cx + radius * math.cos(i * 2 * math.pi / sides),
            cy + radius * math.sin(i * 2 * math.pi / sides),
        )
        for i in range(sides)
    ]


def stadium_points(
    center: Point2D,
    half_length: float,
    half_width: float,
    axis: str = "x",
    segments: int = 36,
) -> List[Point2D]:
    """
    Sample a stadium (two semicircles joined by straight sides).

    Args:
        center: Centre of the stadium.
        half_length: Half the distance between the two semicircle centres.
        half_width: Semicircle radius.
        axis: Long axis, ``"x"`` or ``"y"``.
        segments: Samples per full turn; each cap gets half of them.
    """
    cx, cy = center
    per_cap = max(2, segments // 2)
    local: List[Point2D] = []
    for cap_x, start in ((half_length, -math.pi / 2), (-half_length, math.pi / 2)):
        for i in range(per_cap + 1):
            angle = start + math.pi * i / per_cap
            local.append((cap_x + half_width * math.cos(angle), half_width * math.sin(angle)))

    if axis == "y":
        # rotate +90 degrees so the long axis follows Y
        return [(cx - ly, cy + lx) for lx, ly in local]
    return [(cx + lx, cy + ly) for lx, ly in local]
