"""Geometric shape description and shape-dependent queries."""

from __future__ import annotations

import copy
import enum
import logging
import math
from dataclasses import dataclass, field

import numpy as np

logger = logging.getLogger(__name__)


class ShapeType(enum.Enum):
    RECTANGLE = "Rectangle"
    CIRCLE = "Circle"
    TRIANGLE = "Triangle"
    POLYGON = "Polygon"
    BOX = "Box"
    CYLINDER = "Cylinder"
    SPHERE = "Sphere"
    CONE = "Cone"
    SPHERICAL_SEGMENT = "SphericalSegment"
    MESH = "Mesh"
    PLANE = "Plane"
    LINE = "Line"


_FLAT = {ShapeType.RECTANGLE, ShapeType.CIRCLE, ShapeType.POLYGON, ShapeType.TRIANGLE}
_AXISYMMETRIC = {ShapeType.CYLINDER, ShapeType.CONE, ShapeType.SPHERICAL_SEGMENT}
_SINGLE_RADIUS = {ShapeType.CYLINDER, ShapeType.SPHERE, ShapeType.CIRCLE}
_TWO_RADII = {ShapeType.CONE, ShapeType.SPHERICAL_SEGMENT}


@dataclass
class Shape:
    """A shape: its type, dimensions, reference axes, vertices and mesh URI."""

    type: ShapeType
    dimensions: list[float] = field(default_factory=list)
    axes: list[np.ndarray] = field(default_factory=list)
    vertices: list[np.ndarray] = field(default_factory=list)
    mesh_uri: str = ""

    def __post_init__(self) -> None:
        self.dimensions = [float(d) for d in self.dimensions]
        self.axes = [np.asarray(a, dtype=float).reshape(3) for a in self.axes]
        self.vertices = [np.asarray(v, dtype=float).reshape(3) for v in self.vertices]


def is_2d_shape(shape: Shape) -> bool:
    if shape.type is ShapeType.LINE:
        if len(shape.vertices) == 2:
            tol = 1e-8
            return all(abs(v[2]) < tol for v in shape.vertices)
        return False
    return shape.type in _FLAT


def shape_centroid(shape: Shape) -> np.ndarray:
    """Centroid of the shape in its own frame."""
    t, vertices, dims, axes = shape.type, shape.vertices, shape.dimensions, shape.axes

    if t is ShapeType.LINE:
        if len(vertices) < 2:
            raise ValueError("Line shape requires two vertices for centroid calculation.")
        return 0.5 * (vertices[0] + vertices[1])

    if t in (ShapeType.TRIANGLE, ShapeType.POLYGON):
        if not vertices:
            raise ValueError(
                "Polygon/Triangle shape requires at least one vertex for centroid calculation."
            )
        return np.mean(np.stack(vertices), axis=0)

    if t in (ShapeType.RECTANGLE, ShapeType.CIRCLE, ShapeType.PLANE, ShapeType.BOX, ShapeType.SPHERE):
        return np.zeros(3)

    if t is ShapeType.CYLINDER:
        if len(axes) < 1 or len(dims) < 2:
            raise ValueError(
                "Cylinder shape requires symmetry axis and 2 dimensions (radius, height)."
            )
        return _unit(axes[0]) * (dims[1] / 2.0)

    if t is ShapeType.CONE:
        if len(axes) < 1 or len(dims) < 3:
            raise ValueError(
                "Cone shape requires symmetry axis and 3 dimensions (base_radius, top_radius, height)."
            )
        return _unit(axes[0]) * (dims[2] / 4.0)

    if t is ShapeType.SPHERICAL_SEGMENT:
        if len(axes) < 1 or len(dims) < 3:
            raise ValueError(
                "SphericalSegment requires symmetry axis and 3 dimensions (base_radius, top_radius, height)."
            )
        r = dims[0] if dims[0] > 0 else dims[1]
        h = dims[2]
        z = (3.0 * r - h) * h * h / (4.0 * (3.0 * r * r - 3.0 * r * h + h * h))
        return _unit(axes[0]) * z

    raise ValueError(f"Centroid is undefined for {t.value} shapes (requires mesh analysis).")


def shape_height(shape: Shape) -> float:
    """Height used when stacking shapes: the last dimension."""
    if shape.type in _AXISYMMETRIC or shape.type is ShapeType.BOX:
        return shape.dimensions[-1]
    raise ValueError("Automatic stacking: unknown height for this shape type")


def _box_radius(shape: Shape) -> float:
    return 0.5 * max(shape.dimensions[0], shape.dimensions[1])


def shape_base_radius(shape: Shape) -> float:
    if shape.type in _SINGLE_RADIUS or shape.type in _TWO_RADII:
        return shape.dimensions[0]
    if shape.type is ShapeType.BOX:
        return _box_radius(shape)
    return 0.0


def shape_top_radius(shape: Shape) -> float:
    if shape.type in _SINGLE_RADIUS:
        return shape.dimensions[0]
    if shape.type in _TWO_RADII:
        return shape.dimensions[1]
    if shape.type is ShapeType.BOX:
        return _box_radius(shape)
    return 0.0


def shape_max_radius(shape: Shape) -> float:
    if shape.type in _SINGLE_RADIUS:
        return shape.dimensions[0]
    if shape.type in _TWO_RADII:
        return max(shape.dimensions[0], shape.dimensions[1])
    if shape.type is ShapeType.BOX:
        return _box_radius(shape)
    return 0.0


def shape_normal_axis(shape: Shape) -> np.ndarray:
    """The normal of flat shapes, or the symmetry axis of axisymmetric ones."""
    t = shape.type
    if t in (ShapeType.BOX, ShapeType.MESH):
        raise ValueError("Normal axis is not defined for Box/Mesh without additional info.")
    if t is ShapeType.SPHERE:
        raise ValueError("Normal axis is not defined for Sphere (normal depends on query point).")
    return shape.axes[0]


def shape_reference_axis(shape: Shape) -> np.ndarray:
    if shape.type not in _AXISYMMETRIC:
        raise ValueError("Reference axis is only valid for shapes that define a base plane.")
    if len(shape.axes) < 2:
        raise ValueError("Shape requires reference axis (axes[1]) but not found.")
    return shape.axes[1]


def shape_symmetry_axis(shape: Shape) -> np.ndarray:
    if shape.type not in _AXISYMMETRIC:
        raise ValueError("Symmetry axis is only valid for axisymmetric 3D shapes.")
    if len(shape.axes) < 1:
        raise ValueError("Shape requires symmetry axis (axes[0]) but none provided.")
    return shape.axes[0]


def top_radius_at_height(base_radius, top_radius, total_height, fill_height) -> float:
    """Cross-section radius of a spherical segment at ``fill_height`` above its base."""
    if fill_height <= 0.0 or fill_height > total_height:
        return 0.0
    z0 = (top_radius * top_radius - base_radius * base_radius + total_height * total_height) / (
        2.0 * total_height
    )
    r = math.sqrt(base_radius * base_radius + z0 * z0)
    dz = z0 - fill_height
    return math.sqrt(max(0.0, r * r - dz * dz))


def truncate_shape_to_height(shape: Shape, new_height: float) -> Shape:
    """Copy of ``shape`` cut at ``new_height``; unsupported types lose their dimensions."""
    result = copy.deepcopy(shape)
    dims = result.dimensions

    if shape.type is ShapeType.CYLINDER:
        dims[1] = new_height
    elif shape.type is ShapeType.CONE:
        base_r, top_r, h = shape.dimensions[0], shape.dimensions[1], shape.dimensions[2]
        t = new_height / h
        dims[1] = base_r + (top_r - base_r) * t
        dims[2] = new_height
    elif shape.type is ShapeType.SPHERICAL_SEGMENT:
        base_r, top_r, h = shape.dimensions[0], shape.dimensions[1], shape.dimensions[2]
        clipped_r = top_radius_at_height(base_r, top_r, h, new_height)
        dims[0] = base_r
        dims[1] = clipped_r
        dims[2] = new_height
        logger.debug(
            "spherical segment truncation: base_r=%g top_r=%g h=%g new_height=%g new_r=%g",
            base_r, top_r, h, new_height, clipped_r,
        )
    else:
        result.dimensions = []

    return result


def shape_type_from_string(text: str) -> ShapeType:
    try:
        return ShapeType(text)
    except ValueError:
        raise ValueError(f"Unknown ShapeType: {text}") from None


def shape_type_to_string(shape_type: ShapeType) -> str:
    if not isinstance(shape_type, ShapeType):
        raise ValueError("Unknown ShapeType enum value")
    return shape_type.value


def _unit(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    return v / n if n > 0.0 else v