"""
Boolean-union unifier for multi-element components.

Converts solid elements to trimesh meshes and unions them pairwise (via the
manifold boolean engine) so a component can be machined as one solid. The
merged solid is sliced through its bounding-box footprint, which is
conservative: it never cuts into the union, but leaves stock where the real
outline is narrower than its box.

Failures never propagate: unconvertible elements and failed unions are
logged and skipped, and a total failure is returned as ``UnionFailure`` so
the caller can fall back to per-element scheduling.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

import numpy as np
import trimesh

from slicecam.core.exceptions import GeometryError
from slicecam.core.logging import get_logger
from slicecam.geometry.bounds import BoundingBox
from slicecam.geometry.elements import (
    Capsule,
    Cone,
    Cube,
    Cylinder,
    Element,
    Ellipsoid,
    MergedElement,
    Prism,
    Pyramid,
    Sphere,
    Torus,
)
from slicecam.geometry.shapes import bounding_box

logger = get_logger(__name__)

UnionFn = Callable[[trimesh.Trimesh, trimesh.Trimesh], trimesh.Trimesh]

# Tessellation density for curved primitives
_SECTIONS = 64
_SPHERE_SUBDIVISIONS = 3


# ---------------------------------------------------------------------------
# Element -> mesh conversion
# ---------------------------------------------------------------------------

def _pyramid_mesh(element: Pyramid) -> trimesh.Trimesh:
    hw, hd, hh = element.base_width / 2, element.base_depth / 2, element.height / 2
    vertices = np.array([
        [-hw, -hd, -hh],
        [hw, -hd, -hh],
        [hw, hd, -hh],
        [-hw, hd, -hh],
        [0.0, 0.0, hh],
    ])
    faces = np.array([
        [0, 2, 1],
        [0, 3, 2],
        [0, 1, 4],
        [1, 2, 4],
        [2, 3, 4],
        [3, 0, 4],
    ])
    mesh = trimesh.Trimesh(vertices=vertices, faces=faces, process=True)
    mesh.fix_normals()
    return mesh


def _capsule_mesh(element: Capsule) -> trimesh.Trimesh:
    # trimesh measures capsule height between the two cap centres
    length = max(0.0, element.height - 2 * element.radius)
    mesh = trimesh.creation.capsule(height=length, radius=element.radius)
    if element.orientation == "x":
        mesh.apply_transform(trimesh.transformations.rotation_matrix(np.pi / 2, [0, 1, 0]))
    elif element.orientation == "y":
        mesh.apply_transform(trimesh.transformations.rotation_matrix(np.pi / 2, [1, 0, 0]))
    return mesh


def _mesh_at_origin(element: Element) -> trimesh.Trimesh:
    if isinstance(element, Cube):
        return trimesh.creation.box(extents=[element.width, element.depth, element.height])
    if isinstance(element, Sphere):
        return trimesh.creation.icosphere(
            subdivisions=_SPHERE_SUBDIVISIONS, radius=element.radius
        )
    if isinstance(element, Prism):
        return trimesh.creation.cylinder(
            radius=element.radius, height=element.height, sections=element.sides
        )
    if isinstance(element, Cylinder):
        return trimesh.creation.cylinder(
            radius=element.radius, height=element.height, sections=_SECTIONS
        )
    if isinstance(element, Cone):
        mesh = trimesh.creation.cone(
            radius=element.radius, height=element.height, sections=_SECTIONS
        )
        if element.direction == "down":
            mesh.apply_transform(trimesh.transformations.rotation_matrix(np.pi, [1, 0, 0]))
        return mesh
    if isinstance(element, Torus):
        return trimesh.creation.torus(
            major_radius=element.radius, minor_radius=element.tube
        )
    if isinstance(element, Ellipsoid):
        mesh = trimesh.creation.icosphere(subdivisions=_SPHERE_SUBDIVISIONS, radius=1.0)
        mesh.apply_transform(
            np.diag([element.radius_x, element.radius_y, element.radius_z, 1.0])
        )
        return mesh
    if isinstance(element, Capsule):
        return _capsule_mesh(element)
    if isinstance(element, Pyramid):
        return _pyramid_mesh(element)

    raise GeometryError(
        f"No solid mesh for {element.type} elements", element_type=element.type
    )


def element_to_mesh(element: Element) -> trimesh.Trimesh:
    """
    Build a closed trimesh solid for ``element`` in absolute coordinates.

    The mesh is built at the origin and moved so its bounds centre matches
    the element's analytic bounding box.

    Raises:
        GeometryError: If the kind has no solid representation (profiles,
            hemispheres, unsupported kinds) or a dimension is zero.
    """
    box = bounding_box(element)
    if box is None:
        raise GeometryError(
            f"{element.type} element has no extent", element_type=element.type
        )
    if min(box.size) <= 0:
        raise GeometryError(
            f"{element.type} element is degenerate",
            element_type=element.type,
            details={"size": box.size},
        )

    mesh = _mesh_at_origin(element)
    center = box.center
    target = np.array([center.x, center.y, center.z])
    mesh.apply_translation(target - mesh.bounds.mean(axis=0))
    return mesh


# ---------------------------------------------------------------------------
# Boolean union
# ---------------------------------------------------------------------------

def boolean_union(mesh_a: trimesh.Trimesh, mesh_b: trimesh.Trimesh) -> trimesh.Trimesh:
    """
    Boolean union of two meshes (A ∪ B) through the manifold engine.

    Raises:
        GeometryError: If the boolean operation fails or is empty.
    """
    try:
        result = trimesh.boolean.union([mesh_a, mesh_b], engine="manifold")
    except Exception as e:
        raise GeometryError(f"Boolean union failed: {e}") from e

    if result is None or len(result.vertices) == 0:
        raise GeometryError("Boolean union produced empty result")
    return result


@dataclass(frozen=True)
class MergedSolid:
    """Successful union of a component's solids."""

    mesh: trimesh.Trimesh
    bounds: BoundingBox
    element_count: int
    merged_count: int

    def to_element(self, name: Optional[str] = None) -> MergedElement:
        """Bounding-box stand-in element, machinable like a cube."""
        center = self.bounds.center
        width, depth, height = self.bounds.size
        return MergedElement(
            name=name,
            x=center.x,
            y=center.y,
            z=center.z,
            width=width,
            depth=depth,
            height=height,
            source_count=self.merged_count,
        )


@dataclass(frozen=True)
class UnionFailure:
    """The component could not be merged; schedule its elements instead."""

    reason: str
    element_count: int


UnionResult = Union[MergedSolid, UnionFailure]


def unify_elements(
    elements: Sequence[Element],
    union_fn: Optional[UnionFn] = None,
) -> UnionResult:
    """
    Union the solids of ``elements`` in list order.

    Args:
        elements: Leaf elements in absolute coordinates.
        union_fn: Pairwise union operation. Must raise ``GeometryError`` on
            failure. Defaults to ``boolean_union``.

    Returns:
        ``MergedSolid`` if at least one union succeeded (or a single element
        converted), otherwise ``UnionFailure``.
    """
    union_fn = union_fn or boolean_union

    meshes: List[trimesh.Trimesh] = []
    for element in elements:
        try:
            meshes.append(element_to_mesh(element))
        except GeometryError as e:
            logger.warning("element_mesh_skipped", element_type=element.type, reason=str(e))

    if not meshes:
        return UnionFailure("No element could be converted to a mesh", len(elements))

    result = meshes[0]
    merged_count = 1
    for index, mesh in enumerate(meshes[1:], start=1):
        try:
            result = union_fn(result, mesh)
            merged_count += 1
        except GeometryError as e:
            logger.warning("union_step_failed", mesh_index=index, reason=str(e))

    if len(elements) > 1 and merged_count == 1:
        return UnionFailure("No boolean union succeeded", len(elements))

    lower, upper = result.bounds
    bounds = BoundingBox.from_points(lower, upper)
    logger.info(
        "component_unified",
        elements=len(elements),
        merged=merged_count,
        vertices=len(result.vertices),
        faces=len(result.faces),
    )
    return MergedSolid(
        mesh=result,
        bounds=bounds,
        element_count=len(elements),
        merged_count=merged_count,
    )
