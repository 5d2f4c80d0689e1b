"""
CAD element data model.

Elements are immutable pydantic models tagged by their ``type`` string, the
same dictionaries the CAD front-end produces. ``parse_element`` turns a raw
mapping into the matching model; unknown kinds become ``UnsupportedElement``
so that generation can annotate and continue instead of failing.

Position semantics differ per kind (see each class). Group children are
expressed relative to the group origin; ``extract_component_elements``
resolves them to absolute coordinates.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Type, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from slicecam.core.exceptions import GeometryError


def _dim(*names: str, default: float = 0.0) -> Any:
    """Non-negative dimension field accepting snake_case and camelCase keys."""
    if len(names) > 1:
        return Field(default, ge=0, validation_alias=AliasChoices(*names))
    return Field(default, ge=0)


class Element(BaseModel):
    """Base class for every CAD element."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    type: str
    id: str = ""
    name: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @property
    def label(self) -> str:
        return self.name or self.type

    def translated(self, dx: float, dy: float, dz: float) -> "Element":
        """Return a copy moved by (dx, dy, dz)."""
        return self.model_copy(
            update={"x": self.x + dx, "y": self.y + dy, "z": self.z + dz}
        )


class Cube(Element):
    """Box centred on (x, y, z): width along X, depth along Y, height along Z."""

    type: Literal["cube"] = "cube"
    width: float = _dim("width")
    depth: float = _dim("depth")
    height: float = _dim("height")


class Sphere(Element):
    type: Literal["sphere"] = "sphere"
    radius: float = _dim("radius")


class Cylinder(Element):
    """Z-axis cylinder centred at mid-height."""

    type: Literal["cylinder"] = "cylinder"
    radius: float = _dim("radius")
    height: float = _dim("height")


class Cone(Element):
    """
    Z-axis cone centred at mid-height.

    ``direction="up"`` puts the base at the bottom and the apex on top;
    ``"down"`` is the inverted cone.
    """

    type: Literal["cone"] = "cone"
    radius: float = _dim("radius")
    height: float = _dim("height")
    direction: Literal["up", "down"] = "up"


class Torus(Element):
    """Torus lying in the XY plane; ``radius`` is the major radius."""

    type: Literal["torus"] = "torus"
    radius: float = _dim("radius")
    tube: float = _dim("tube", "tube_radius", "tubeRadius")


class Pyramid(Element):
    """Rectangular pyramid centred at mid-height with its apex on top."""

    type: Literal["pyramid"] = "pyramid"
    base_width: float = _dim("base_width", "baseWidth", "width")
    base_depth: float = _dim("base_depth", "baseDepth", "depth")
    height: float = _dim("height")


class Hemisphere(Element):
    """Half sphere whose flat face is centred on (x, y, z)."""

    type: Literal["hemisphere"] = "hemisphere"
    radius: float = _dim("radius")
    direction: Literal["up", "down"] = "up"


class Ellipsoid(Element):
    type: Literal["ellipsoid"] = "ellipsoid"
    radius_x: float = _dim("radius_x", "radiusX")
    radius_y: float = _dim("radius_y", "radiusY")
    radius_z: float = _dim("radius_z", "radiusZ")


class Capsule(Element):
    """Capsule centred on (x, y, z); ``height`` is the overall length including caps."""

    type: Literal["capsule"] = "capsule"
    radius: float = _dim("radius")
    height: float = _dim("height")
    orientation: Literal["x", "y", "z"] = Field(
        "z", validation_alias=AliasChoices("orientation", "direction", "axis")
    )


class Prism(Element):
    """Regular prism centred at mid-height; ``radius`` is the circumradius."""

    type: Literal["prism"] = "prism"
    radius: float = _dim("radius")
    height: float = _dim("height")
    sides: int = Field(6, ge=3)


class Profile(Element):
    """
    2D element drawn in the plane ``z``.

    The solid spans ``[z - thickness, z]``. A zero thickness marks a through
    cut: the profile is machined down to the full machining depth.
    """

    thickness: float = _dim("thickness")

    @property
    def through_cut(self) -> bool:
        return self.thickness == 0


class Rectangle(Profile):
    """Rectangle centred on (x, y): width along X, height along Y."""

    type: Literal["rectangle"] = "rectangle"
    width: float = _dim("width")
    height: float = _dim("height")


class Circle(Profile):
    type: Literal["circle"] = "circle"
    radius: float = _dim("radius")


class Polygon(Profile):
    """
    Closed polygon around (x, y).

    Either explicit ``points`` (relative to x, y) or a regular polygon of
    ``sides`` vertices on a circle of ``radius``.
    """

    type: Literal["polygon"] = "polygon"
    radius: float = _dim("radius")
    sides: int = Field(6, ge=3)
    points: Optional[List[Tuple[float, float]]] = None


class Ellipse(Profile):
    """
    Ellipse centred on (x, y).

    Missing radii fall back to half of ``width`` (X) and ``height`` (Y).
    """

    type: Literal["ellipse"] = "ellipse"
    radius_x: float = _dim("radius_x", "radiusX")
    radius_y: float = _dim("radius_y", "radiusY")
    width: float = _dim("width")
    height: float = _dim("height")

    @property
    def semi_axes(self) -> Tuple[float, float]:
        return self.radius_x or self.width / 2, self.radius_y or self.height / 2


class Triangle(Profile):
    """
    Triangle with absolute vertices.

    Taken from the first three ``points`` when given, otherwise from
    ``x1, y1`` .. ``x3, y3``.
    """

    type: Literal["triangle"] = "triangle"
    points: Optional[List[Tuple[float, float]]] = None
    x1: Optional[float] = None
    y1: Optional[float] = None
    x2: Optional[float] = None
    y2: Optional[float] = None
    x3: Optional[float] = None
    y3: Optional[float] = None

    @field_validator("points", mode="before")
    @classmethod
    def _point_pairs(cls, value: Any) -> Any:
        if value is None:
            return None
        return [(p["x"], p["y"]) if isinstance(p, Mapping) else p for p in value]

    @property
    def vertices(self) -> List[Tuple[float, float]]:
        if self.points and len(self.points) >= 3:
            return list(self.points[:3])
        coords = (self.x1, self.y1, self.x2, self.y2, self.x3, self.y3)
        if any(c is None for c in coords):
            return []
        return [(self.x1, self.y1), (self.x2, self.y2), (self.x3, self.y3)]

    def translated(self, dx: float, dy: float, dz: float) -> "Triangle":
        update: Dict[str, Any] = {"x": self.x + dx, "y": self.y + dy, "z": self.z + dz}
        if self.points is not None:
            update["points"] = [(px + dx, py + dy) for px, py in self.points]
        for n in ("1", "2", "3"):
            if getattr(self, "x" + n) is not None:
                update["x" + n] = getattr(self, "x" + n) + dx
            if getattr(self, "y" + n) is not None:
                update["y" + n] = getattr(self, "y" + n) + dy
        return self.model_copy(update=update)


class Arc(Profile):
    """
    Circular arc centred on (x, y), swept counter-clockwise.

    Angles are in degrees; equal start and end angles give a full circle.
    """

    type: Literal["arc"] = "arc"
    radius: float = _dim("radius")
    start_angle: float = Field(0.0, validation_alias=AliasChoices("start_angle", "startAngle"))
    end_angle: float = Field(360.0, validation_alias=AliasChoices("end_angle", "endAngle"))


class Line(Profile):
    """Straight engraving line between two absolute endpoints."""

    type: Literal["line"] = "line"
    x1: float = 0.0
    y1: float = 0.0
    z1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    z2: float = 0.0

    def translated(self, dx: float, dy: float, dz: float) -> "Line":
        return self.model_copy(
            update={
                "x": self.x + dx, "y": self.y + dy, "z": self.z + dz,
                "x1": self.x1 + dx, "y1": self.y1 + dy, "z1": self.z1 + dz,
                "x2": self.x2 + dx, "y2": self.y2 + dy, "z2": self.z2 + dz,
            }
        )


class Group(Element):
    """Group or component; children are positioned relative to (x, y, z)."""

    type: Literal["group", "component"] = "group"
    elements: List[Element] = Field(default_factory=list)

    @field_validator("elements", mode="before")
    @classmethod
    def _parse_children(cls, value: Any) -> List[Element]:
        if value is None:
            return []
        return [parse_element(child) for child in value]


class MergedElement(Cube):
    """Bounding-box stand-in for a boolean-merged solid."""

    type: Literal["merged"] = "merged"
    source_count: int = 0


class UnsupportedElement(Element):
    """Any element kind the engine has no geometry for."""

    model_config = ConfigDict(frozen=True, extra="allow")


ELEMENT_TYPES: Dict[str, Type[Element]] = {
    "cube": Cube,
    "sphere": Sphere,
    "cylinder": Cylinder,
    "cone": Cone,
    "torus": Torus,
    "pyramid": Pyramid,
    "hemisphere": Hemisphere,
    "ellipsoid": Ellipsoid,
    "capsule": Capsule,
    "prism": Prism,
    "rectangle": Rectangle,
    "circle": Circle,
    "polygon": Polygon,
    "line": Line,
    "ellipse": Ellipse,
    "triangle": Triangle,
    "arc": Arc,
    "group": Group,
    "component": Group,
    "merged": MergedElement,
}


def parse_element(data: Union[Element, Mapping[str, Any]]) -> Element:
    """
    Build the element model matching ``data["type"]``.

    Args:
        data: Raw element mapping, or an already-parsed element.

    Returns:
        The typed element (``UnsupportedElement`` for unknown kinds).

    Raises:
        GeometryError: If the mapping has no type or fails validation
            (e.g. a negative radius).
    """
    if isinstance(data, Element):
        return data

    kind = data.get("type") if isinstance(data, Mapping) else None
    if not isinstance(kind, str) or not kind:
        raise GeometryError("Element has no type", details={"data": data})

    element_cls = ELEMENT_TYPES.get(kind, UnsupportedElement)
    try:
        return element_cls.model_validate(dict(data))
    except ValidationError as e:
        raise GeometryError(
            f"Invalid {kind} element",
            element_type=kind,
            details={"errors": e.errors(include_url=False)},
        ) from e


def extract_component_elements(component: Element) -> List[Element]:
    """
    Resolve a group's children to absolute coordinates.

    Nested groups are flattened, so the result only holds leaf elements in
    depth-first list order.
    """
    if not isinstance(component, Group):
        return []

    leaves: List[Element] = []
    for child in component.elements:
        placed = child.translated(component.x, component.y, component.z)
        if isinstance(placed, Group):
            leaves.extend(extract_component_elements(placed))
        else:
            leaves.append(placed)
    return leaves
