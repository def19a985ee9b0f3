"""Graph-induced metric, degenerate inversion fallback and the gradient direction field."""

import numpy as np
import pytest

from emotion_manifold.geom.metric import (
    IDENTITY,
    Mat2,
    Vec2,
    height_gradient,
    invert2x2,
    metric_derivative,
    metric_tensor,
    vector_field,
)


def _grid_points():
    for x in np.linspace(-0.9, 0.9, 5):
        for y in np.linspace(-0.9, 0.9, 5):
            yield float(x), float(y)


def test_metric_has_graph_form_and_is_spd(default_params):
    for x, y in _grid_points():
        z_x, z_y = height_gradient(x, y, default_params, 0.01)
        g = metric_tensor(x, y, default_params, 0.01)
        assert g.xx == 1.0 + z_x * z_x
        assert g.yy == 1.0 + z_y * z_y
        assert g.xy == g.yx == z_x * z_y
        assert g.det() >= 1.0 - 1e-12  # det = 1 + z_x^2 + z_y^2
        w = np.linalg.eigvalsh(g.as_array())
        assert np.all(w > 0.0)


def test_invert2x2_regular_and_degenerate():
    m = Mat2(2.0, 0.5, 0.5, 1.0)
    inv = invert2x2(m)
    np.testing.assert_allclose(m.as_array() @ inv.as_array(), np.eye(2), atol=1e-12)

    singular = Mat2(1.0, 2.0, 2.0, 4.0)
    assert invert2x2(singular) is IDENTITY
    assert invert2x2(Mat2(1e-6, 0.0, 0.0, 1e-6)) == IDENTITY  # det = 1e-12 < 1e-10
    assert invert2x2(Mat2(1e-6, 0.0, 0.0, 1e-6), eps=0.0) != IDENTITY


def test_metric_derivative_directions(default_params):
    dx = metric_derivative(0.1, -0.3, default_params, 0.01, "x")
    assert metric_derivative(0.1, -0.3, default_params, 0.01, 0) == dx
    dy = metric_derivative(0.1, -0.3, default_params, 0.01, "y")
    assert metric_derivative(0.1, -0.3, default_params, 0.01, 1) == dy
    # Forward difference of the metric along x
    g0 = metric_tensor(0.1, -0.3, default_params, 0.01)
    g1 = metric_tensor(0.1 + 0.01, -0.3, default_params, 0.01)
    assert dx.xx == pytest.approx((g1.xx - g0.xx) / 0.01, rel=1e-12, abs=1e-12)
    with pytest.raises(ValueError):
        metric_derivative(0.0, 0.0, default_params, 0.01, "z")


def test_vector_field_unit_or_zero(default_params, flat_params):
    v = vector_field(0.7, 0.3, default_params)
    assert v.norm() == pytest.approx(1.0, abs=1e-12)
    # Steepest descent: moving along v lowers the surface
    z_x, z_y = height_gradient(0.7, 0.3, default_params)
    assert v.x * z_x + v.y * z_y < 0.0

    flat = vector_field(0.2, 0.2, flat_params)
    assert flat == Vec2(0.0, 0.0)


def test_flat_metric_is_identity(flat_params):
    assert metric_tensor(0.4, -0.4, flat_params) == IDENTITY
    assert metric_derivative(0.4, -0.4, flat_params, 0.01, "y") == Mat2(0.0, 0.0, 0.0, 0.0)


def test_vec2_helpers():
    v = Vec2(3.0, 4.0)
    assert v.norm() == 5.0
    assert v.normalized() == Vec2(0.6, 0.8)
    assert Vec2(0.0, 0.0).normalized() == Vec2(0.0, 0.0)
    assert (v + Vec2(1.0, 1.0)) - Vec2(1.0, 1.0) == v
    assert 2.0 * v == Vec2(6.0, 8.0)
    assert Vec2.from_array(v.as_array()) == v
