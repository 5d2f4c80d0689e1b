"""
Tests for contour offsetting.
"""

import math

import pytest

from slicecam.core.config import PolygonOffsetMethod
from slicecam.geometry.contours import (
    AnnulusContour,
    ArcContour,
    CircleContour,
    EllipseContour,
    PolygonContour,
    RectangleContour,
    regular_polygon_points,
)
from slicecam.slicing.contour_offset import (
    _polygon_area_signed,
    offset_contour,
    offset_polygon_miter,
    offset_polygon_radial,
)


class TestAnalyticOffsets:
    """Tests for closed-form contour offsets."""

    def test_circle_outward(self):
        """Test an outward offset grows the radius by d."""
        assert offset_contour(CircleContour((1, 2), 10), 3) == CircleContour((1, 2), 13)

    def test_circle_inward(self):
        assert offset_contour(CircleContour((0, 0), 10), -3) == CircleContour((0, 0), 7)

    @pytest.mark.parametrize("distance", [-10, -12])
    def test_circle_collapses(self, distance):
        """Test an inward offset of at least the radius collapses."""
        assert offset_contour(CircleContour((0, 0), 10), distance) is None

    def test_zero_radius_circle_center_cut(self):
        """Test a pole section cannot be cut on the tool centre."""
        assert offset_contour(CircleContour((0, 0), 0), 0) is None

    def test_arc_keeps_angles(self):
        """Test an arc offset changes only its radius."""
        result = offset_contour(ArcContour((1, 1), 10, 30, 120), 3)
        assert result == ArcContour((1, 1), 13, 30, 120)
        assert offset_contour(ArcContour((1, 1), 10, 30, 120), -10) is None

    def test_ellipse(self):
        result = offset_contour(EllipseContour((0, 0), 10, 4), -3)
        assert result == EllipseContour((0, 0), 7, 1)
        assert offset_contour(EllipseContour((0, 0), 10, 4), -4) is None

    def test_rectangle_grows_per_side(self):
        """Test a rectangle offset moves every side by d."""
        result = offset_contour(RectangleContour((0, 0), 100, 100), 3)
        assert result == RectangleContour((0, 0), 106, 106)
        assert result.corners()[0] == (-53, -53)
        assert result.corners()[2] == (53, 53)

    def test_rectangle_collapses(self):
        assert offset_contour(RectangleContour((0, 0), 10, 4), -2) is None

    def test_annulus(self):
        """Test an annulus outer edge grows while the hole shrinks."""
        result = offset_contour(AnnulusContour((0, 0), 25, 15), 3)
        assert result == AnnulusContour((0, 0), 28, 12)

    def test_annulus_closes(self):
        """Test an inward offset wider than half the ring collapses."""
        assert offset_contour(AnnulusContour((0, 0), 25, 15), -5) is None

    def test_annulus_hole_fills(self):
        """Test a hole smaller than the tool becomes a disc."""
        assert offset_contour(AnnulusContour((0, 0), 10, 2), 3) == CircleContour((0, 0), 13)


class TestRadialOffset:
    """Tests for centroid-projection polygon offsets."""

    def test_regular_polygon_exact(self):
        """Test regular polygons keep their shape with radius + d."""
        points = regular_polygon_points((5, 5), 10, 6)
        result = offset_polygon_radial(points, 2)
        assert len(result) == 6
        for x, y in result:
            assert math.hypot(x - 5, y - 5) == pytest.approx(12)

    def test_inward(self):
        points = regular_polygon_points((0, 0), 10, 4)
        result = offset_polygon_radial(points, -4)
        assert result[0] == pytest.approx((6, 0))

    def test_collapse(self):
        """Test an inward offset past the centroid collapses the polygon."""
        points = regular_polygon_points((0, 0), 3, 5)
        assert offset_polygon_radial(points, -3) is None

    def test_vertex_at_centroid_dropped(self):
        """Test vertices on the centroid have no direction and are skipped."""
        points = [(-1, -1), (1, -1), (0, 0), (1, 1), (-1, 1)]
        result = offset_polygon_radial(points, 1)
        assert len(result) == 4

    def test_too_few_points(self):
        assert offset_polygon_radial([(0, 0), (1, 0)], 1) is None

    def test_contour_dispatch(self):
        polygon = PolygonContour(tuple(regular_polygon_points((0, 0), 10, 3)))
        result = offset_contour(polygon, 1)
        assert isinstance(result, PolygonContour)
        assert result.closed
        assert math.hypot(*result.points[0]) == pytest.approx(11)


class TestMiterOffset:
    """Tests for pyclipper polygon offsets."""

    @pytest.fixture
    def square(self):
        return [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]

    def test_outward(self, square):
        """Test a square grows by d on every side."""
        result = offset_polygon_miter(square, 1)
        xs = [p[0] for p in result]
        ys = [p[1] for p in result]
        assert min(xs) == pytest.approx(-1, abs=1e-3)
        assert max(xs) == pytest.approx(11, abs=1e-3)
        assert min(ys) == pytest.approx(-1, abs=1e-3)
        assert max(ys) == pytest.approx(11, abs=1e-3)

    def test_inward(self, square):
        result = offset_polygon_miter(square, -2)
        assert abs(_polygon_area_signed(result)) == pytest.approx(36, abs=1e-2)

    def test_result_counter_clockwise(self, square):
        """Test results are counter-clockwise even for clockwise input."""
        result = offset_polygon_miter(list(reversed(square)), 1)
        assert _polygon_area_signed(result) > 0

    def test_collapse(self, square):
        assert offset_polygon_miter(square, -6) is None

    def test_zero_distance(self, square):
        assert offset_polygon_miter(square, 0) == square

    def test_concave_polygon(self):
        """Test an L-shape keeps its notch when grown."""
        l_shape = [(0, 0), (20, 0), (20, 10), (10, 10), (10, 20), (0, 20)]
        result = offset_polygon_miter(l_shape, 1)
        assert len(result) == 6
        assert abs(_polygon_area_signed(result)) == pytest.approx(22 * 22 - 10 * 10, abs=0.5)

    def test_contour_dispatch(self, square):
        contour = PolygonContour(tuple(square))
        result = offset_contour(contour, 1, PolygonOffsetMethod.MITER)
        assert isinstance(result, PolygonContour)
        assert len(result.points) == 4


class TestOpenPolygons:
    def test_open_path_unchanged(self):
        """Test engraving lines are never offset."""
        line = PolygonContour(((0, 0), (10, 0)), closed=False)
        assert offset_contour(line, 3) is line
