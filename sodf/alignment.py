"""Alignment of a pair of frames onto another pair of frames."""

from __future__ import annotations

import numpy as np

_TINY = 1e-12
_UNIT_X = np.array([1.0, 0.0, 0.0])


def _inverse(iso: np.ndarray) -> np.ndarray:
    r = iso[:3, :3]
    out = np.eye(4)
    out[:3, :3] = r.T
    out[:3, 3] = -r.T @ iso[:3, 3]
    return out


def _rotation(r: np.ndarray) -> np.ndarray:
    out = np.eye(4)
    out[:3, :3] = r
    return out


def _unit(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    return v / n if n > 0.0 else v


def _skew(v: np.ndarray) -> np.ndarray:
    return np.array([[0.0, -v[2], v[1]], [v[2], 0.0, -v[0]], [-v[1], v[0], 0.0]])


def _rotation_between(a, b) -> np.ndarray:
    """Smallest rotation taking direction ``a`` onto direction ``b``."""
    a = _unit(np.asarray(a, dtype=float))
    b = _unit(np.asarray(b, dtype=float))
    c = float(a @ b)
    if c < -1.0 + 1e-12:
        helper = np.eye(3)[int(np.argmin(np.abs(a)))]
        axis = _unit(np.cross(a, helper))
        return 2.0 * np.outer(axis, axis) - np.eye(3)
    k = _skew(np.cross(a, b))
    return np.eye(3) + k + (k @ k) / (1.0 + c)


def align_center_frames(w_t_a, w_t_b, x_t_c, x_t_d, epsilon) -> np.ndarray:
    """Find the pose of frame X so that segment CD lies centred on segment AB.

    ``w_t_a`` and ``w_t_b`` are world poses of A and B; ``x_t_c`` and ``x_t_d``
    are poses of C and D expressed in X. All are 4x4 homogeneous transforms.
    Raises ValueError when a segment is degenerate or when the lengths differ
    by more than ``epsilon``.
    """
    w_t_a = np.asarray(w_t_a, dtype=float)
    w_t_b = np.asarray(w_t_b, dtype=float)
    x_t_c = np.asarray(x_t_c, dtype=float)
    x_t_d = np.asarray(x_t_d, dtype=float)

    # Place C onto A.
    w_t_x = w_t_a @ _inverse(x_t_c)
    w_t_c = w_t_x @ x_t_c
    w_t_d = w_t_x @ x_t_d

    length_ab = float(np.linalg.norm(w_t_b[:3, 3] - w_t_a[:3, 3]))
    length_cd = float(np.linalg.norm(w_t_d[:3, 3] - w_t_c[:3, 3]))
    if length_ab < _TINY or length_cd < _TINY:
        raise ValueError("Degenerate case: |AB| or |CD| is below threshold")

    length_error = length_ab - length_cd
    if abs(length_error) > epsilon:
        raise ValueError(
            f"||AB|| - ||CD|| = {length_error:f} exceeds epsilon {epsilon:f}"
        )

    dir_ab = _unit((_inverse(w_t_a) @ w_t_b)[:3, 3])
    dir_cd = _unit((_inverse(w_t_c) @ w_t_d)[:3, 3])

    align = _rotation(_rotation_between(dir_cd, dir_ab))
    w_t_x = w_t_a @ align @ _inverse(x_t_c)

    if length_ab != length_cd:
        offset = 0.5 * (length_ab - length_cd)
        axis = _rotation(_rotation_between(_UNIT_X, dir_ab))
        w_t_a_offset = w_t_a @ axis
        step = np.eye(4)
        step[0, 3] = offset
        w_t_a_offset = w_t_a_offset @ step
        w_t_x = w_t_x.copy()
        w_t_x[:3, 3] += w_t_a_offset[:3, 3] - w_t_a[:3, 3]

    return w_t_x