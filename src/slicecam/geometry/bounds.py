"""
Axis-aligned bounding boxes for CAD elements and merged meshes.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from compas.geometry import Point


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned 3D extent.

    Coordinates are stored as plain floats so boxes compare and hash by
    value; ``min``/``max`` expose them as COMPAS points.
    """

    min_x: float
    min_y: float
    min_z: float
    max_x: float
    max_y: float
    max_z: float

    @classmethod
    def from_points(cls, min_point: Iterable[float], max_point: Iterable[float]) -> "BoundingBox":
        x0, y0, z0 = (float(v) for v in min_point)
        x1, y1, z1 = (float(v) for v in max_point)
        return cls(x0, y0, z0, x1, y1, z1)

    @classmethod
    def around(
        cls, x: float, y: float, z: float, half_x: float, half_y: float, half_z: float
    ) -> "BoundingBox":
        """Box centred on (x, y, z) with the given half extents."""
        return cls(x - half_x, y - half_y, z - half_z, x + half_x, y + half_y, z + half_z)

    @property
    def min(self) -> Point:
        return Point(self.min_x, self.min_y, self.min_z)

    @property
    def max(self) -> Point:
        return Point(self.max_x, self.max_y, self.max_z)

    @property
    def center(self) -> Point:
        return Point(
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2,
            (self.min_z + self.max_z) / 2,
        )

    @property
    def size(self) -> tuple[float, float, float]:
        """(x_size, y_size, z_size)"""
        return (
            self.max_x - self.min_x,
            self.max_y - self.min_y,
            self.max_z - self.min_z,
        )

    @property
    def height(self) -> float:
        return self.max_z - self.min_z

    def contains_z(self, z: float, tolerance: float = 1e-9) -> bool:
        """True if the horizontal plane at ``z`` touches the box."""
        return self.min_z - tolerance <= z <= self.max_z + tolerance

    def translated(self, dx: float, dy: float, dz: float) -> "BoundingBox":
        return BoundingBox(
            self.min_x + dx, self.min_y + dy, self.min_z + dz,
            self.max_x + dx, self.max_y + dy, self.max_z + dz,
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            min(self.min_z, other.min_z),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
            max(self.max_z, other.max_z),
        )


def union_boxes(boxes: Iterable[Optional[BoundingBox]]) -> Optional[BoundingBox]:
    """Union of all non-None boxes, or None if there are none."""
    result: Optional[BoundingBox] = None
    for box in boxes:
        if box is None:
            continue
        result = box if result is None else result.union(box)
    return result
