"""
Tests for the CAD element data model.
"""

import pytest

from slicecam.core.exceptions import GeometryError
from slicecam.geometry.elements import (
    Capsule,
    Cube,
    Group,
    Line,
    Polygon,
    Pyramid,
    Torus,
    UnsupportedElement,
    extract_component_elements,
    parse_element,
)


class TestParseElement:
    """Tests for parse_element."""

    def test_parse_cube(self, cube_data):
        """Test a cube mapping becomes a Cube model."""
        element = parse_element(cube_data)
        assert isinstance(element, Cube)
        assert element.width == 100
        assert element.id == "cube-1"
        assert (element.x, element.y, element.z) == (0.0, 0.0, 0.0)

    def test_parse_camel_case_aliases(self):
        """Test front-end camelCase dimension keys are accepted."""
        torus = parse_element({"type": "torus", "radius": 20, "tubeRadius": 5})
        pyramid = parse_element({"type": "pyramid", "baseWidth": 30, "baseDepth": 20, "height": 15})
        assert isinstance(torus, Torus)
        assert torus.tube == 5
        assert isinstance(pyramid, Pyramid)
        assert (pyramid.base_width, pyramid.base_depth) == (30, 20)

    def test_capsule_axis_aliases(self):
        """Test capsule orientation accepts direction/axis keys."""
        assert parse_element({"type": "capsule", "direction": "x"}).orientation == "x"
        assert parse_element({"type": "capsule", "axis": "y"}).orientation == "y"
        assert Capsule().orientation == "z"

    def test_unknown_kind_is_unsupported(self):
        """Test unknown kinds parse instead of failing."""
        element = parse_element({"type": "gear", "teeth": 12})
        assert isinstance(element, UnsupportedElement)
        assert element.type == "gear"

    def test_extra_fields_ignored(self):
        """Test front-end presentation fields do not break parsing."""
        element = parse_element({"type": "sphere", "radius": 5, "color": "#ff0000"})
        assert element.radius == 5

    def test_negative_dimension_raises(self):
        """Test negative dimensions are rejected."""
        with pytest.raises(GeometryError) as exc_info:
            parse_element({"type": "sphere", "radius": -1})
        assert exc_info.value.element_type == "sphere"

    def test_missing_type_raises(self):
        """Test a mapping without a type is rejected."""
        with pytest.raises(GeometryError):
            parse_element({"radius": 5})

    def test_parsed_element_passthrough(self):
        """Test already-parsed elements are returned unchanged."""
        cube = Cube(width=1, depth=2, height=3)
        assert parse_element(cube) is cube

    def test_label(self):
        """Test the label prefers the element name."""
        assert parse_element({"type": "cube", "name": "Base"}).label == "Base"
        assert parse_element({"type": "cube"}).label == "cube"


class TestGroups:
    """Tests for groups and component extraction."""

    def test_children_parsed(self):
        """Test nested child mappings become element models."""
        group = parse_element({
            "type": "component",
            "elements": [{"type": "cube", "width": 10}, {"type": "sphere", "radius": 3}],
        })
        assert isinstance(group, Group)
        assert [child.type for child in group.elements] == ["cube", "sphere"]

    def test_invalid_child_raises(self):
        """Test a malformed child fails the whole group."""
        with pytest.raises(GeometryError):
            parse_element({"type": "group", "elements": [{"type": "sphere", "radius": -2}]})

    def test_extract_translates_children(self):
        """Test children are moved into absolute coordinates."""
        group = parse_element({
            "type": "group",
            "x": 10, "y": 20, "z": 30,
            "elements": [{"type": "cube", "x": 1, "y": 2, "z": 3, "width": 5}],
        })
        (child,) = extract_component_elements(group)
        assert (child.x, child.y, child.z) == (11, 22, 33)
        assert child.width == 5

    def test_extract_flattens_nested_groups(self):
        """Test nested groups accumulate their offsets."""
        group = parse_element({
            "type": "group",
            "x": 10,
            "elements": [
                {"type": "sphere", "radius": 1},
                {
                    "type": "group",
                    "x": 5,
                    "elements": [{"type": "cylinder", "x": 1, "radius": 2, "height": 4}],
                },
            ],
        })
        leaves = extract_component_elements(group)
        assert [leaf.type for leaf in leaves] == ["sphere", "cylinder"]
        assert leaves[0].x == 10
        assert leaves[1].x == 16

    def test_extract_translates_line_endpoints(self):
        """Test line endpoints move with the group."""
        group = Group(x=5, y=5, elements=[Line(x1=0, y1=0, x2=10, y2=0)])
        (line,) = extract_component_elements(group)
        assert (line.x1, line.y1, line.x2, line.y2) == (5, 5, 15, 5)

    def test_extract_from_non_group(self):
        """Test leaf elements have no component children."""
        assert extract_component_elements(Cube()) == []

    def test_polygon_points(self):
        """Test explicit polygon points are kept as tuples."""
        polygon = parse_element({"type": "polygon", "points": [[0, 0], [10, 0], [0, 10]]})
        assert isinstance(polygon, Polygon)
        assert polygon.points == [(0, 0), (10, 0), (0, 10)]
