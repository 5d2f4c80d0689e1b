"""
Shape registry: per-kind bounding boxes and horizontal cross-sections.

Every supported element kind registers one ``ShapeHandler`` pairing its
``bounding_box`` and ``cross_section`` implementations, so adding a
primitive touches a single class.

Cross-section conventions:
- ``None`` means the plane misses the solid (z strictly outside its extent).
- A plane tangent to a curved pole yields a zero-radius contour, not ``None``,
  so level iteration stays continuous.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Type

from slicecam.geometry.bounds import BoundingBox, union_boxes
from slicecam.geometry.contours import (
    AnnulusContour,
    ArcContour,
    CircleContour,
    Contour,
    EllipseContour,
    PolygonContour,
    RectangleContour,
    arc_sweep,
    regular_polygon_points,
    stadium_points,
)
from slicecam.geometry.elements import (
    Arc,
    Capsule,
    Circle,
    Cone,
    Cube,
    Cylinder,
    Element,
    Ellipse,
    Ellipsoid,
    Group,
    Hemisphere,
    Line,
    Polygon,
    Prism,
    Profile,
    Pyramid,
    Rectangle,
    Sphere,
    Torus,
    Triangle,
)

logger = logging.getLogger(__name__)

# Z comparisons tolerate accumulated float error from level arithmetic
Z_TOLERANCE = 1e-9


def _in_range(z: float, bottom: float, top: float) -> bool:
    return bottom - Z_TOLERANCE <= z <= top + Z_TOLERANCE


def _cap_radius(radius: float, distance: float) -> float:
    """Radius of a sphere slice at ``distance`` from its centre."""
    return math.sqrt(max(0.0, radius**2 - distance**2))


class ShapeHandler(ABC):
    """Geometry strategy for one or more element kinds."""

    @abstractmethod
    def bounding_box(self, element: Element) -> Optional[BoundingBox]:
        """Axis-aligned extent of the element."""

    @abstractmethod
    def cross_section(self, element: Element, z: float) -> Optional[Contour]:
        """Outline of the element at height ``z``, or None if the plane misses it."""


SHAPE_REGISTRY: Dict[str, ShapeHandler] = {}


def register_shape(*kinds: str) -> Callable[[Type[ShapeHandler]], Type[ShapeHandler]]:
    """Class decorator registering a handler instance under each kind."""

    def decorator(cls: Type[ShapeHandler]) -> Type[ShapeHandler]:
        handler = cls()
        for kind in kinds:
            SHAPE_REGISTRY[kind] = handler
        return cls

    return decorator


def get_shape_handler(kind: str) -> Optional[ShapeHandler]:
    return SHAPE_REGISTRY.get(kind)


def is_supported(element: Element) -> bool:
    return element.type in SHAPE_REGISTRY


def bounding_box(element: Element) -> Optional[BoundingBox]:
    """
    Compute the element's axis-aligned 3D extent.

    Returns None for kinds without geometric extent (unsupported kinds, empty
    groups) and for malformed elements, which are logged and skipped.
    """
    handler = get_shape_handler(element.type)
    if handler is None:
        return None
    try:
        return handler.bounding_box(element)
    except (ArithmeticError, AttributeError, TypeError, ValueError) as e:
        logger.warning("Cannot compute bounding box for %s element: %s", element.type, e)
        return None


def cross_section(element: Element, z: float) -> Optional[Contour]:
    """
    Outline of ``element`` cut by the horizontal plane at ``z``.

    Pure: identical inputs always give identical contours.
    """
    handler = get_shape_handler(element.type)
    if handler is None:
        return None
    return handler.cross_section(element, z)


# ---------------------------------------------------------------------------
# Solids
# ---------------------------------------------------------------------------


@register_shape("cube", "merged")
class CubeShape(ShapeHandler):
    def bounding_box(self, element: Cube) -> BoundingBox:
        return BoundingBox.around(
            element.x, element.y, element.z,
            element.width / 2, element.depth / 2, element.height / 2,
        )

    def cross_section(self, element: Cube, z: float) -> Optional[Contour]:
        half = element.height / 2
        if not _in_range(z, element.z - half, element.z + half):
            return None
        return RectangleContour((element.x, element.y), element.width, element.depth)


@register_shape("sphere")
class SphereShape(ShapeHandler):
    def bounding_box(self, element: Sphere) -> BoundingBox:
        r = element.radius
        return BoundingBox.around(element.x, element.y, element.z, r, r, r)

    def cross_section(self, element: Sphere, z: float) -> Optional[Contour]:
        r = element.radius
        if not _in_range(z, element.z - r, element.z + r):
            return None
        return CircleContour((element.x, element.y), _cap_radius(r, z - element.z))


@register_shape("cylinder")
class CylinderShape(ShapeHandler):
    def bounding_box(self, element: Cylinder) -> BoundingBox:
        r = element.radius
        return BoundingBox.around(element.x, element.y, element.z, r, r, element.height / 2)

    def cross_section(self, element: Cylinder, z: float) -> Optional[Contour]:
        half = element.height / 2
        if not _in_range(z, element.z - half, element.z + half):
            return None
        return CircleContour((element.x, element.y), element.radius)


@register_shape("cone")
class ConeShape(ShapeHandler):
    """Radius shrinks linearly from the base plane to the apex."""

    def bounding_box(self, element: Cone) -> BoundingBox:
        r = element.radius
        return BoundingBox.around(element.x, element.y, element.z, r, r, element.height / 2)

    def cross_section(self, element: Cone, z: float) -> Optional[Contour]:
        half = element.height / 2
        bottom, top = element.z - half, element.z + half
        if not _in_range(z, bottom, top):
            return None

        if element.height == 0:
            ratio = 0.0
        elif element.direction == "up":
            ratio = (z - bottom) / element.height
        else:
            ratio = (top - z) / element.height
        ratio = min(1.0, max(0.0, ratio))
        return CircleContour((element.x, element.y), element.radius * (1 - ratio))


@register_shape("torus")
class TorusShape(ShapeHandler):
    def bounding_box(self, element: Torus) -> BoundingBox:
        reach = element.radius + element.tube
        return BoundingBox.around(element.x, element.y, element.z, reach, reach, element.tube)

    def cross_section(self, element: Torus, z: float) -> Optional[Contour]:
        tube = element.tube
        if not _in_range(z, element.z - tube, element.z + tube):
            return None

        spread = _cap_radius(tube, z - element.z)
        outer = element.radius + spread
        inner = element.radius - spread
        if inner <= 0:
            # Tube wider than the hole: the slice is a filled disc
            return CircleContour((element.x, element.y), outer)
        return AnnulusContour((element.x, element.y), outer, inner)


@register_shape("pyramid")
class PyramidShape(ShapeHandler):
    def bounding_box(self, element: Pyramid) -> BoundingBox:
        return BoundingBox.around(
            element.x, element.y, element.z,
            element.base_width / 2, element.base_depth / 2, element.height / 2,
        )

    def cross_section(self, element: Pyramid, z: float) -> Optional[Contour]:
        half = element.height / 2
        bottom = element.z - half
        if not _in_range(z, bottom, element.z + half):
            return None

        ratio = 1.0
        if element.height > 0:
            ratio = min(1.0, max(0.0, 1 - (z - bottom) / element.height))
        return RectangleContour(
            (element.x, element.y), element.base_width * ratio, element.base_depth * ratio
        )


@register_shape("hemisphere")
class HemisphereShape(ShapeHandler):
    """The flat face sits at ``z``; ``direction`` picks the half-space."""

    @staticmethod
    def _z_range(element: Hemisphere) -> tuple[float, float]:
        if element.direction == "up":
            return element.z, element.z + element.radius
        return element.z - element.radius, element.z

    def bounding_box(self, element: Hemisphere) -> BoundingBox:
        bottom, top = self._z_range(element)
        r = element.radius
        return BoundingBox(
            element.x - r, element.y - r, bottom, element.x + r, element.y + r, top
        )

    def cross_section(self, element: Hemisphere, z: float) -> Optional[Contour]:
        bottom, top = self._z_range(element)
        if not _in_range(z, bottom, top):
            return None
        return CircleContour((element.x, element.y), _cap_radius(element.radius, z - element.z))


@register_shape("ellipsoid")
class EllipsoidShape(ShapeHandler):
    def bounding_box(self, element: Ellipsoid) -> BoundingBox:
        return BoundingBox.around(
            element.x, element.y, element.z,
            element.radius_x, element.radius_y, element.radius_z,
        )

    def cross_section(self, element: Ellipsoid, z: float) -> Optional[Contour]:
        rz = element.radius_z
        if not _in_range(z, element.z - rz, element.z + rz):
            return None

        scale = 1.0
        if rz > 0:
            scale = math.sqrt(max(0.0, 1 - ((z - element.z) / rz) ** 2))
        return EllipseContour(
            (element.x, element.y), element.radius_x * scale, element.radius_y * scale
        )


@register_shape("capsule")
class CapsuleShape(ShapeHandler):
    """
    Cylinder with hemispherical caps along ``orientation``.

    ``height`` is the overall length; it never drops below one diameter.
    """

    @staticmethod
    def _half_length(element: Capsule) -> float:
        return max(element.height / 2, element.radius)

    def bounding_box(self, element: Capsule) -> BoundingBox:
        r = element.radius
        half = self._half_length(element)
        if element.orientation == "x":
            return BoundingBox.around(element.x, element.y, element.z, half, r, r)
        if element.orientation == "y":
            return BoundingBox.around(element.x, element.y, element.z, r, half, r)
        return BoundingBox.around(element.x, element.y, element.z, r, r, half)

    def cross_section(self, element: Capsule, z: float) -> Optional[Contour]:
        r = element.radius
        half = self._half_length(element)
        center = (element.x, element.y)

        if element.orientation == "z":
            top, bottom = element.z + half, element.z - half
            if not _in_range(z, bottom, top):
                return None
            cylinder_top, cylinder_bottom = top - r, bottom + r
            if z > cylinder_top:
                return CircleContour(center, _cap_radius(r, z - cylinder_top))
            if z < cylinder_bottom:
                return CircleContour(center, _cap_radius(r, cylinder_bottom - z))
            return CircleContour(center, r)

        # Lying capsule: the slice is a stadium whose width follows the caps
        if not _in_range(z, element.z - r, element.z + r):
            return None
        half_width = _cap_radius(r, z - element.z)
        points = stadium_points(center, half - r, half_width, axis=element.orientation)
        return PolygonContour(tuple(points), closed=True)


@register_shape("prism")
class PrismShape(ShapeHandler):
    def bounding_box(self, element: Prism) -> BoundingBox:
        r = element.radius
        return BoundingBox.around(element.x, element.y, element.z, r, r, element.height / 2)

    def cross_section(self, element: Prism, z: float) -> Optional[Contour]:
        half = element.height / 2
        if not _in_range(z, element.z - half, element.z + half):
            return None
        points = regular_polygon_points((element.x, element.y), element.radius, element.sides)
        return PolygonContour(tuple(points), closed=True)


# ---------------------------------------------------------------------------
# 2D profiles
# ---------------------------------------------------------------------------


class ProfileShape(ShapeHandler):
    """
    Constant footprint over ``[top - thickness, top]``.

    Through cuts (zero thickness) have a footprint at every z below ``top``.
    """

    def top(self, element: Profile) -> float:
        return element.z

    def footprint_bounds(self, element: Profile) -> tuple[float, float, float, float]:
        raise NotImplementedError

    @abstractmethod
    def footprint(self, element: Profile) -> Optional[Contour]:
        """Outline of the profile in its own plane."""

    def bounding_box(self, element: Profile) -> BoundingBox:
        x0, y0, x1, y1 = self.footprint_bounds(element)
        top = self.top(element)
        return BoundingBox(x0, y0, top - element.thickness, x1, y1, top)

    def cross_section(self, element: Profile, z: float) -> Optional[Contour]:
        top = self.top(element)
        if z > top + Z_TOLERANCE:
            return None
        if not element.through_cut and z < top - element.thickness - Z_TOLERANCE:
            return None
        return self.footprint(element)


@register_shape("rectangle")
class RectangleShape(ProfileShape):
    def footprint_bounds(self, element: Rectangle) -> tuple[float, float, float, float]:
        hw, hh = element.width / 2, element.height / 2
        return element.x - hw, element.y - hh, element.x + hw, element.y + hh

    def footprint(self, element: Rectangle) -> Contour:
        return RectangleContour((element.x, element.y), element.width, element.height)


@register_shape("circle")
class CircleShape(ProfileShape):
    def footprint_bounds(self, element: Circle) -> tuple[float, float, float, float]:
        r = element.radius
        return element.x - r, element.y - r, element.x + r, element.y + r

    def footprint(self, element: Circle) -> Contour:
        return CircleContour((element.x, element.y), element.radius)


@register_shape("polygon")
class PolygonShape(ProfileShape):
    @staticmethod
    def vertices(element: Polygon) -> list[tuple[float, float]]:
        if element.points:
            return [(element.x + px, element.y + py) for px, py in element.points]
        return regular_polygon_points((element.x, element.y), element.radius, element.sides)

    def footprint_bounds(self, element: Polygon) -> tuple[float, float, float, float]:
        vertices = self.vertices(element)
        xs = [p[0] for p in vertices]
        ys = [p[1] for p in vertices]
        return min(xs), min(ys), max(xs), max(ys)

    def footprint(self, element: Polygon) -> Optional[Contour]:
        vertices = self.vertices(element)
        if len(vertices) < 3:
            return None
        return PolygonContour(tuple(vertices), closed=True)


@register_shape("ellipse")
class EllipseShape(ProfileShape):
    def footprint_bounds(self, element: Ellipse) -> tuple[float, float, float, float]:
        rx, ry = element.semi_axes
        return element.x - rx, element.y - ry, element.x + rx, element.y + ry

    def footprint(self, element: Ellipse) -> Contour:
        rx, ry = element.semi_axes
        return EllipseContour((element.x, element.y), rx, ry)


@register_shape("triangle")
class TriangleShape(ProfileShape):
    def footprint_bounds(self, element: Triangle) -> tuple[float, float, float, float]:
        vertices = element.vertices
        if not vertices:
            raise ValueError("triangle needs three points or x1..y3 coordinates")
        xs = [p[0] for p in vertices]
        ys = [p[1] for p in vertices]
        return min(xs), min(ys), max(xs), max(ys)

    def footprint(self, element: Triangle) -> Optional[Contour]:
        vertices = element.vertices
        if not vertices:
            return None
        return PolygonContour(tuple(vertices), closed=True)


@register_shape("arc")
class ArcShape(ProfileShape):
    """Open arc; its extent covers the endpoints and every axis crossing swept."""

    def footprint_bounds(self, element: Arc) -> tuple[float, float, float, float]:
        arc = self.footprint(element)
        points = [arc.start, arc.end]
        for angle in (0, 90, 180, 270):
            if (angle - arc.start_angle) % 360 <= arc.sweep:
                points.append(arc.point_at(angle))
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return min(xs), min(ys), max(xs), max(ys)

    def footprint(self, element: Arc) -> ArcContour:
        return ArcContour(
            (element.x, element.y),
            element.radius,
            element.start_angle,
            arc_sweep(element.start_angle, element.end_angle),
        )


@register_shape("line")
class LineShape(ProfileShape):
    def top(self, element: Line) -> float:
        return max(element.z1, element.z2)

    def footprint_bounds(self, element: Line) -> tuple[float, float, float, float]:
        return (
            min(element.x1, element.x2),
            min(element.y1, element.y2),
            max(element.x1, element.x2),
            max(element.y1, element.y2),
        )

    def bounding_box(self, element: Line) -> BoundingBox:
        x0, y0, x1, y1 = self.footprint_bounds(element)
        bottom = min(element.z1, element.z2) - element.thickness
        return BoundingBox(x0, y0, bottom, x1, y1, self.top(element))

    def footprint(self, element: Line) -> Contour:
        return PolygonContour(((element.x1, element.y1), (element.x2, element.y2)), closed=False)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@register_shape("group", "component")
class GroupShape(ShapeHandler):
    """Groups have an extent but are scheduled per child, never sliced whole."""

    def bounding_box(self, element: Group) -> Optional[BoundingBox]:
        boxes = (bounding_box(child) for child in element.elements)
        combined = union_boxes(boxes)
        if combined is None:
            return None
        return combined.translated(element.x, element.y, element.z)

    def cross_section(self, element: Group, z: float) -> Optional[Contour]:
        return None
