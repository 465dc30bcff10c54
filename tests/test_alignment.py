import math

import numpy as np
import pytest

from sodf.alignment import align_center_frames


def _translation(x, y, z):
    iso = np.eye(4)
    iso[:3, 3] = [x, y, z]
    return iso


def _rot_z(angle):
    iso = np.eye(4)
    c, s = math.cos(angle), math.sin(angle)
    iso[:2, :2] = [[c, -s], [s, c]]
    return iso


def _check_centered(w_t_a, w_t_b, x_t_c, x_t_d, w_t_x):
    r = w_t_x[:3, :3]
    np.testing.assert_allclose(r.T @ r, np.eye(3), atol=1e-9)
    assert np.isclose(np.linalg.det(r), 1.0)

    c = (w_t_x @ x_t_c)[:3, 3]
    d = (w_t_x @ x_t_d)[:3, 3]
    a = w_t_a[:3, 3]
    b = w_t_b[:3, 3]
    np.testing.assert_allclose(0.5 * (c + d), 0.5 * (a + b), atol=1e-9)
    np.testing.assert_allclose((d - c) / np.linalg.norm(d - c), (b - a) / np.linalg.norm(b - a), atol=1e-6)


def test_align_center_frames_translated():
    w_t_a = _translation(1, 1, 1)
    w_t_b = _translation(1.02, 1.02, 1)
    x_t_c = _translation(0, -0.0182843, 1)
    x_t_d = _translation(0, 0.01, 1)
    frame = align_center_frames(w_t_a, w_t_b, x_t_c, x_t_d, 1e-06)
    _check_centered(w_t_a, w_t_b, x_t_c, x_t_d, frame)


def test_align_center_frames_rotated():
    w_t_a = _translation(1, 1, 1)
    w_t_b = _translation(1.02, 1.02, 1)
    x_t_c = _rot_z(math.pi / 4) @ _translation(0, -0.0182843, 1)
    x_t_d = _rot_z(math.pi / 4) @ _translation(0, 0.01, 1)
    frame = align_center_frames(w_t_a, w_t_b, x_t_c, x_t_d, 1e-06)
    _check_centered(w_t_a, w_t_b, x_t_c, x_t_d, frame)


def test_equal_lengths_map_endpoints_exactly():
    w_t_a = _translation(0, 0, 0)
    w_t_b = _translation(1, 0, 0)
    x_t_c = _translation(0, 0, 0)
    x_t_d = _translation(0, 1, 0)
    frame = align_center_frames(w_t_a, w_t_b, x_t_c, x_t_d, 1e-06)
    np.testing.assert_allclose((frame @ x_t_c)[:3, 3], w_t_a[:3, 3], atol=1e-12)
    np.testing.assert_allclose((frame @ x_t_d)[:3, 3], w_t_b[:3, 3], atol=1e-12)


def test_opposite_directions_are_aligned():
    w_t_a = _translation(0, 0, 0)
    w_t_b = _translation(1, 0, 0)
    x_t_c = _translation(0, 0, 0)
    x_t_d = _translation(-1, 0, 0)
    frame = align_center_frames(w_t_a, w_t_b, x_t_c, x_t_d, 1e-06)
    np.testing.assert_allclose((frame @ x_t_d)[:3, 3], w_t_b[:3, 3], atol=1e-12)


def test_degenerate_segment_raises():
    with pytest.raises(ValueError, match="Degenerate"):
        align_center_frames(_translation(1, 1, 1), _translation(1, 1, 1),
                            _translation(0, 0, 0), _translation(0, 1, 0), 1e-06)


def test_length_mismatch_raises():
    with pytest.raises(ValueError, match="exceeds epsilon"):
        align_center_frames(_translation(0, 0, 0), _translation(1, 0, 0),
                            _translation(0, 0, 0), _translation(0, 2, 0), 1e-06)