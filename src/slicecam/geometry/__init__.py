"""
Geometry module - CAD elements, extents, cross-sections and mesh booleans.
"""

from slicecam.geometry.bounds import BoundingBox, union_boxes
from slicecam.geometry.contours import (
    AnnulusContour,
    ArcContour,
    CircleContour,
    Contour,
    EllipseContour,
    PolygonContour,
    RectangleContour,
)
from slicecam.geometry.elements import (
    ELEMENT_TYPES,
    Element,
    Group,
    MergedElement,
    UnsupportedElement,
    extract_component_elements,
    parse_element,
)
from slicecam.geometry.shapes import (
    SHAPE_REGISTRY,
    bounding_box,
    cross_section,
    get_shape_handler,
    is_supported,
    register_shape,
)

__all__ = [
    # Elements
    "ELEMENT_TYPES",
    "Element",
    "Group",
    "MergedElement",
    "UnsupportedElement",
    "extract_component_elements",
    "parse_element",
    # Extents and sections
    "BoundingBox",
    "union_boxes",
    "SHAPE_REGISTRY",
    "bounding_box",
    "cross_section",
    "get_shape_handler",
    "is_supported",
    "register_shape",
    # Contours
    "AnnulusContour",
    "ArcContour",
    "CircleContour",
    "Contour",
    "EllipseContour",
    "PolygonContour",
    "RectangleContour",
]
