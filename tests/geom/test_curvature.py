"""Gaussian curvature and loop-holonomy connection curvature."""

import numpy as np
import pytest

from emotion_manifold.field.emotion import EmotionalParameters, height
from emotion_manifold.geom.christoffel import ChristoffelCache
from emotion_manifold.geom.curvature import gaussian_curvature
from emotion_manifold.geom.holonomy import connection_curvature, square_loop


def test_flat_surface_has_zero_curvature(flat_params):
    for x, y in [(0.0, 0.0), (0.5, -0.3), (-0.9, 0.9)]:
        assert gaussian_curvature(x, y, flat_params) == 0.0
        assert connection_curvature(x, y, flat_params) == 0.0
        assert connection_curvature(x, y, flat_params, 0.05) == 0.0


def test_gaussian_curvature_vanishes_on_smooth_ruled_part(bending_params):
    # The field depends on P - EP only, so the surface is a cylinder over the
    # line y = x: intrinsically flat away from the crease at y = x.
    for x, y in [(-0.5, 0.3), (0.2, 0.8), (0.6, -0.2), (-0.1, -0.7)]:
        assert abs(gaussian_curvature(x, y, bending_params)) < 1e-2


def test_gaussian_curvature_matches_central_difference_formula():
    params = EmotionalParameters(EP=0.0, P=0.0, V=0.9, SC=0.8, Acc=0.3, W_p=0.6, T=1.0)
    x, y, h = 0.1, 0.5, 0.01

    f = lambda a, b: height(a, b, params)  # noqa: E731
    z_xx = (f(x + h, y) - 2 * f(x, y) + f(x - h, y)) / h**2
    z_yy = (f(x, y + h) - 2 * f(x, y) + f(x, y - h)) / h**2
    z_xy = (f(x + h, y + h) - f(x + h, y - h) - f(x - h, y + h) + f(x - h, y - h)) / (4 * h**2)
    z_x = (f(x + h, y) - f(x - h, y)) / (2 * h)
    z_y = (f(x, y + h) - f(x, y - h)) / (2 * h)
    K = (z_xx * z_yy - z_xy**2) / ((1 + z_x**2 + z_y**2) ** 2 + 1e-10)
    assert gaussian_curvature(x, y, params, h) == pytest.approx(K, rel=1e-9, abs=1e-12)


def test_holonomy_scenario_grid_is_finite_and_repeatable(bending_params):
    cache = ChristoffelCache()
    offsets = (-0.05, 0.0, 0.05)
    first = []
    for dx in offsets:
        for dy in offsets:
            k = gaussian_curvature(dx, dy, bending_params, 0.05)
            omega = connection_curvature(dx, dy, bending_params, 0.05, cache=cache)
            assert np.isfinite(k) and np.isfinite(omega)
            first.append((k, omega))
    second = [
        (gaussian_curvature(dx, dy, bending_params, 0.05), connection_curvature(dx, dy, bending_params, 0.05))
        for dx in offsets
        for dy in offsets
    ]
    assert first == second


def test_square_loop_is_closed(default_params):
    loop = square_loop(0.2, -0.1, default_params, 0.05, scale=3.0)
    assert loop.shape == (5, 3)
    np.testing.assert_array_equal(loop[0], loop[-1])
    np.testing.assert_allclose(loop[2, :2], [(0.2 + 0.05) * 3.0, (-0.1 + 0.05) * 3.0])


def test_connection_curvature_nonzero_on_curved_surface(default_params):
    # Non-flat surface: the transported vector turns, so the estimate is nonzero
    omega = connection_curvature(0.3, 0.1, default_params, 0.05)
    assert np.isfinite(omega)
    assert omega != 0.0
