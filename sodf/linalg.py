"""Small linear-algebra helpers for frames, axes and rigid transforms.

Rotations are 3x3 ``numpy`` arrays. Rigid transforms (isometries) are 4x4
homogeneous matrices.
"""

from __future__ import annotations

import numpy as np

DEFAULT_TOLERANCE = 1e-6

_UNIT_X = np.array([1.0, 0.0, 0.0])
_UNIT_Y = np.array([0.0, 1.0, 0.0])
_UNIT_Z = np.array([0.0, 0.0, 1.0])


def _vec(v) -> np.ndarray:
    return np.asarray(v, dtype=float).reshape(3)


def _unit(v) -> np.ndarray:
    v = _vec(v)
    norm = np.linalg.norm(v)
    return v / norm if norm > 0.0 else v


def _isometry(rotation, translation) -> np.ndarray:
    iso = np.eye(4)
    iso[:3, :3] = rotation
    iso[:3, 3] = _vec(translation)
    return iso


def compute_orientation_from_axes(x_axis, y_axis, z_axis) -> np.ndarray:
    """Build the nearest proper rotation whose columns follow the given axes.

    Raises ValueError if the axes describe a left-handed frame.
    """
    r = np.column_stack([_unit(x_axis), _unit(y_axis), _unit(z_axis)])
    u, _, vt = np.linalg.svd(r)
    r = u @ vt
    if np.linalg.det(r) < 0.0:
        raise ValueError(
            "compute_orientation_from_axes: provided axes result in a "
            "left-handed or invalid rotation matrix."
        )
    return r


def build_isometry_from_z_axis(pos, axis) -> np.ndarray:
    """Return a transform at ``pos`` whose +Z points along ``axis``."""
    z = _unit(axis)
    x = _UNIT_X
    if abs(z @ x) > 0.99:
        x = _UNIT_Y
    y = _unit(np.cross(z, x))
    x = _unit(np.cross(y, z))
    return _isometry(np.column_stack([x, y, z]), pos)


def build_isometry_from_zx_axes(pos, z_axis, x_axis) -> np.ndarray:
    """Return a transform at ``pos`` with +Z along ``z_axis`` and +X towards ``x_axis``."""
    z = _unit(z_axis)
    x = _unit(x_axis)
    y = _unit(np.cross(z, x))
    x = _unit(np.cross(y, z))
    return _isometry(compute_orientation_from_axes(x, y, z), pos)


def build_axis_alignment(z_shape, x_shape, z_stack, x_stack) -> np.ndarray:
    """Rotation taking the shape frame (z, x) onto the stack frame (z, x)."""
    z_shape = _vec(z_shape)
    z_stack = _vec(z_stack)

    y_shape = _unit(np.cross(z_shape, _vec(x_shape)))
    x_shape_orth = _unit(np.cross(y_shape, z_shape))
    shape_frame = np.column_stack([x_shape_orth, y_shape, z_shape])

    y_stack = _unit(np.cross(z_stack, _vec(x_stack)))
    x_stack_orth = _unit(np.cross(y_stack, z_stack))
    stack_frame = np.column_stack([x_stack_orth, y_stack, z_stack])

    return stack_frame @ shape_frame.T


def compute_orthogonal_axis(axis) -> np.ndarray:
    """Return a unit vector orthogonal to ``axis``."""
    axis = _vec(axis)
    fallback = _UNIT_Z if abs(axis[2]) < 0.99 else _UNIT_Y
    return _unit(np.cross(axis, fallback))


def is_unit_vector(v, tol=DEFAULT_TOLERANCE) -> bool:
    return bool(abs(np.linalg.norm(_vec(v)) - 1.0) < tol)


def are_vectors_orthogonal(a, b, tol=DEFAULT_TOLERANCE) -> bool:
    """True if ``a`` and ``b`` are unit vectors and orthogonal within ``tol``."""
    a, b = _vec(a), _vec(b)
    if abs(np.linalg.norm(a) - 1.0) > tol or abs(np.linalg.norm(b) - 1.0) > tol:
        return False
    return bool(abs(a @ b) < tol)


def are_vectors_orthonormal(*args, tol=DEFAULT_TOLERANCE) -> bool:
    """True if all given vectors are unit length and pairwise orthogonal."""
    if len(args) < 2:
        raise ValueError("are_vectors_orthonormal needs at least two vectors")
    vectors = [_vec(v) for v in args]
    if any(abs(np.linalg.norm(v) - 1.0) > tol for v in vectors):
        return False
    return all(
        abs(a @ b) <= tol
        for i, a in enumerate(vectors)
        for b in vectors[i + 1:]
    )