"""
Tests for ellipse, triangle and arc profiles.
"""

import pytest

from slicecam.geometry.contours import ArcContour, EllipseContour, PolygonContour, arc_sweep
from slicecam.geometry.elements import (
    Arc,
    Ellipse,
    Group,
    Triangle,
    extract_component_elements,
    parse_element,
)
from slicecam.geometry.shapes import bounding_box, cross_section


class TestEllipseProfile:
    """Tests for the ellipse profile."""

    def test_radii_from_camel_case(self):
        ellipse = parse_element({"type": "ellipse", "radiusX": 6, "radiusY": 3})
        assert isinstance(ellipse, Ellipse)
        assert ellipse.semi_axes == (6, 3)

    def test_radii_fall_back_to_size(self):
        """Test width and height give the semi-axes when radii are missing."""
        ellipse = Ellipse(x=10, width=20, height=8)
        box = bounding_box(ellipse)
        assert (box.min_x, box.max_x, box.min_y, box.max_y) == (0, 20, -4, 4)
        assert cross_section(ellipse, -5) == EllipseContour((10, 0), 10, 4)

    def test_above_plane_misses(self):
        assert cross_section(Ellipse(z=2, radius_x=5, radius_y=3), 3) is None


class TestTriangleProfile:
    """Tests for the triangle profile."""

    def test_points_as_mappings(self):
        triangle = parse_element(
            {
                "type": "triangle",
                "points": [{"x": 0, "y": 0}, {"x": 30, "y": 0}, {"x": 0, "y": 30}, {"x": 9, "y": 9}],
            }
        )
        assert triangle.vertices == [(0, 0), (30, 0), (0, 30)]
        assert cross_section(triangle, -1) == PolygonContour(((0, 0), (30, 0), (0, 30)), closed=True)

    def test_vertex_coordinates(self):
        triangle = Triangle(x1=-5, y1=0, x2=5, y2=0, x3=0, y3=8, thickness=2)
        box = bounding_box(triangle)
        assert (box.min_x, box.max_x, box.max_y, box.min_z) == (-5, 5, 8, -2)

    def test_missing_vertices(self):
        """Test a triangle without vertices has no extent or section."""
        triangle = Triangle(x1=0, y1=0)
        assert triangle.vertices == []
        assert bounding_box(triangle) is None
        assert cross_section(triangle, 0) is None

    def test_translated_with_group(self):
        group = Group(
            x=5,
            y=-5,
            elements=[Triangle(x1=0, y1=0, x2=10, y2=0, x3=0, y3=10), Triangle(points=[(0, 0), (1, 0), (0, 1)])],
        )
        coords, points = extract_component_elements(group)
        assert coords.vertices == [(5, -5), (15, -5), (5, 5)]
        assert points.vertices == [(5, -5), (6, -5), (5, -4)]


class TestArcProfile:
    """Tests for the arc profile."""

    @pytest.mark.parametrize(
        "start, end, sweep",
        [(0, 90, 90), (270, 90, 180), (0, 360, 360), (30, 30, 360), (-90, 0, 90)],
    )
    def test_sweep(self, start, end, sweep):
        assert arc_sweep(start, end) == pytest.approx(sweep)

    def test_parse_defaults_to_full_circle(self):
        arc = parse_element({"type": "arc", "radius": 4})
        assert isinstance(arc, Arc)
        section = cross_section(arc, -1)
        assert isinstance(section, ArcContour)
        assert section.is_full

    def test_quarter_arc_extent(self):
        """Test the box spans only the swept quadrant."""
        box = bounding_box(Arc(radius=10, start_angle=0, end_angle=90))
        assert box.min_x == pytest.approx(0)
        assert box.min_y == pytest.approx(0)
        assert box.max_x == pytest.approx(10)
        assert box.max_y == pytest.approx(10)

    def test_half_arc_extent(self):
        box = bounding_box(Arc(x=1, radius=10, start_angle=45, end_angle=225))
        assert box.min_x == pytest.approx(-9)
        assert box.max_y == pytest.approx(10)
        assert box.max_x == pytest.approx(1 + 10 * 2**-0.5)
        assert box.min_y == pytest.approx(-10 * 2**-0.5)
