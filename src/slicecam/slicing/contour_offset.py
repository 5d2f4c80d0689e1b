"""
Contour Offset — tool-radius compensation for cross-section contours.

A signed distance moves a contour outward (positive) or inward (negative).
Analytic contours (circle, arc, ellipse, rectangle, annulus) are offset in
closed form. Closed polygons use either:

- ``radial``: every vertex moves along the centroid→vertex direction by the
  offset distance. Edges of a regular n-gon therefore move only
  ``d·cos(π/n)``; irregular or concave shapes drift further.
- ``miter``: true polygon offset through **pyclipper** (Python bindings for
  Angus Johnson's Clipper library), robust for concave shapes.

Open polygons (engraving lines) are cut on the tool centre and never offset.

References:
- pyclipper: https://github.com/fonttools/pyclipper
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import pyclipper
from compas.geometry import centroid_points_xy

from slicecam.core.config import PolygonOffsetMethod
from slicecam.geometry.contours import (
    AnnulusContour,
    ArcContour,
    CircleContour,
    Contour,
    EllipseContour,
    PolygonContour,
    RectangleContour,
)

logger = logging.getLogger(__name__)

Point2D = Tuple[float, float]
Polygon = List[Point2D]

# pyclipper uses integer coordinates for precision.
# We scale floating-point mm coordinates by this factor.
_CLIPPER_SCALE = 1000  # 1 mm  → 1000 clipper units  → 0.001 mm resolution

# Vertices this close to the centroid have no defined offset direction
_CENTROID_EPSILON = 1e-4


def _to_clipper(polygon: Polygon) -> List[Tuple[int, int]]:
    """Scale floating-point polygon to pyclipper integer coordinates."""
    return [(int(round(x * _CLIPPER_SCALE)), int(round(y * _CLIPPER_SCALE)))
            for x, y in polygon]


def _from_clipper(path: list) -> Polygon:
    """Scale pyclipper integer coordinates back to floating-point mm."""
    return [(x / _CLIPPER_SCALE, y / _CLIPPER_SCALE) for x, y in path]


def _polygon_area_signed(polygon: Polygon) -> float:
    """Compute signed area (positive = CCW, negative = CW)."""
    area = 0.0
    n = len(polygon)
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i][0] * polygon[j][1]
        area -= polygon[j][0] * polygon[i][1]
    return area / 2.0


def _ensure_ccw(polygon: Polygon) -> Polygon:
    """Ensure polygon is counter-clockwise."""
    if _polygon_area_signed(polygon) < 0:
        return list(reversed(polygon))
    return list(polygon)


def offset_polygon_radial(polygon: Polygon, distance: float) -> Optional[Polygon]:
    """
    Offset a polygon by moving each vertex away from the vertex centroid.

    Parameters:
        polygon: Polygon as list of (x, y) points.
        distance: Offset distance in mm (positive = outward).

    Returns:
        Offset polygon in the input vertex order, or None if fewer than 3
        vertices survive. Vertices at the centroid, or pulled through it by
        an inward offset, are dropped.
    """
    if len(polygon) < 3:
        return None

    cx, cy, _ = centroid_points_xy(polygon)
    out: Polygon = []
    for x, y in polygon:
        dx, dy = x - cx, y - cy
        length = math.hypot(dx, dy)
        if length < _CENTROID_EPSILON or length + distance <= 0:
            continue
        scale = (length + distance) / length
        out.append((cx + dx * scale, cy + dy * scale))

    if len(out) < 3:
        return None
    return out


def offset_polygon_miter(polygon: Polygon, distance: float) -> Optional[Polygon]:
    """
    Offset a polygon with mitered corners using pyclipper.

    Parameters:
        polygon: Polygon as list of (x, y) points (any winding).
        distance: Offset distance in mm (positive = outward).

    Returns:
        Counter-clockwise offset polygon, or None if the polygon collapsed.
    """
    if len(polygon) < 3:
        return None
    if distance == 0:
        return list(polygon)

    poly = _ensure_ccw(polygon)
    scaled = _to_clipper(poly)

    pco = pyclipper.PyclipperOffset()
    pco.AddPath(scaled, pyclipper.JT_MITER, pyclipper.ET_CLOSEDPOLYGON)

    # Positive delta grows a CCW polygon in Clipper convention
    result = pco.Execute(int(round(distance * _CLIPPER_SCALE)))

    if not result:
        return None

    # Return the largest polygon (by area) if multiple result paths
    best = max(result, key=lambda p: abs(pyclipper.Area(p)))
    out = _ensure_ccw(_from_clipper(best))

    if len(out) < 3:
        return None

    return out


def offset_contour(
    contour: Contour,
    distance: float,
    method: PolygonOffsetMethod = PolygonOffsetMethod.RADIAL,
) -> Optional[Contour]:
    """
    Offset a cross-section contour by a signed distance.

    Parameters:
        contour: Contour to offset.
        distance: Signed offset in mm (positive = outward, negative = inward).
        method: Algorithm for closed polygons.

    Returns:
        The offset contour, or None if it degenerates (a radius or side
        length reaching zero, a closed annulus, a collapsed polygon).
    """
    if isinstance(contour, CircleContour):
        radius = contour.radius + distance
        if radius <= 0:
            return None
        return CircleContour(contour.center, radius)

    if isinstance(contour, ArcContour):
        radius = contour.radius + distance
        if radius <= 0:
            return None
        return ArcContour(contour.center, radius, contour.start_angle, contour.sweep)

    if isinstance(contour, EllipseContour):
        rx, ry = contour.radius_x + distance, contour.radius_y + distance
        if rx <= 0 or ry <= 0:
            return None
        return EllipseContour(contour.center, rx, ry)

    if isinstance(contour, RectangleContour):
        width, depth = contour.width + 2 * distance, contour.depth + 2 * distance
        if width <= 0 or depth <= 0:
            return None
        return RectangleContour(contour.center, width, depth)

    if isinstance(contour, AnnulusContour):
        outer = contour.outer_radius + distance
        inner = contour.inner_radius - distance
        if outer <= 0 or outer <= inner:
            return None
        if inner <= 0:
            return CircleContour(contour.center, outer)
        return AnnulusContour(contour.center, outer, inner)

    if isinstance(contour, PolygonContour):
        if not contour.closed:
            return contour
        points = list(contour.points)
        if method == PolygonOffsetMethod.MITER:
            result = offset_polygon_miter(points, distance)
        else:
            result = offset_polygon_radial(points, distance)
        if result is None:
            logger.debug("Polygon with %d vertices collapsed at offset %.3f", len(points), distance)
            return None
        return PolygonContour(tuple(result), closed=True)

    raise TypeError(f"Unknown contour type: {type(contour).__name__}")
