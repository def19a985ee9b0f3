"""Parallel transport along sampled paths: length invariant, flat identity, preconditions."""

import numpy as np
import pytest

from emotion_manifold.dynamics.geodesic import geodesic
from emotion_manifold.geom.christoffel import ChristoffelCache
from emotion_manifold.geom.metric import Vec2
from emotion_manifold.geom.transport import (
    PathRequiredError,
    TransportedVector,
    parallel_transport,
    step_transport,
)


def test_transport_length_is_path_length_minus_one(default_params):
    path = geodesic((-0.5, -0.2), (0.5, 0.3), default_params, steps=40)
    carried = parallel_transport(Vec2(1.0, 0.0), path, default_params)
    assert len(carried) == path.shape[0] - 1
    assert all(isinstance(tv, TransportedVector) for tv in carried)
    # Each entry is recorded at the segment's starting point
    for k, tv in enumerate(carried):
        np.testing.assert_array_equal(np.asarray(tv.position), path[k])


def test_flat_transport_is_identity(flat_params):
    path = np.array([[0.0, 0.0, 0.0], [0.3, 0.1, 0.0], [0.3, 0.9, 0.0], [-0.6, 0.2, 0.0]])
    v0 = Vec2(0.4, -1.3)
    carried = parallel_transport(v0, path, flat_params)
    assert len(carried) == 3
    for tv in carried:
        assert tv.vector == v0


def test_empty_path_is_a_precondition_error(default_params):
    with pytest.raises(PathRequiredError):
        parallel_transport((1.0, 0.0), [], default_params)
    assert issubclass(PathRequiredError, ValueError)


def test_single_point_path_yields_nothing(default_params):
    assert parallel_transport((1.0, 0.0), [[0.0, 0.0, 0.0]], default_params) == []


def test_two_column_path_and_bad_shape(default_params):
    path3 = np.array([[0.0, 0.0, 0.0], [0.3, 0.3, 0.0]])
    a = parallel_transport((1.0, 0.0), path3, default_params)
    b = parallel_transport((1.0, 0.0), path3[:, :2], default_params)
    assert a[0].vector == b[0].vector
    with pytest.raises(ValueError):
        parallel_transport((1.0, 0.0), np.zeros((3, 1)), default_params)


def test_zero_length_segment_keeps_vector(default_params):
    path = np.array([[0.6, 0.6, 0.0], [0.6, 0.6, 0.0]])
    (tv,) = parallel_transport((0.2, 0.9), path, default_params)
    assert tv.vector == Vec2(0.2, 0.9)


def test_transport_deterministic_with_and_without_cache(default_params):
    path = geodesic((0.1, -0.7), (-0.4, 0.6), default_params, steps=30)
    plain = parallel_transport((0.0, 1.0), path, default_params)
    cache = ChristoffelCache()
    cached = parallel_transport((0.0, 1.0), path, default_params, cache=cache)
    again = parallel_transport((0.0, 1.0), path, default_params, cache=cache)
    assert plain == cached == again
    assert cache.hits > 0


def test_step_transport_euler_update():
    Gamma = np.zeros((2, 2, 2))
    v = np.array([0.3, -0.2])
    np.testing.assert_array_equal(step_transport(Gamma, np.array([1.0, 0.0]), v, 0.5), v)

    Gamma[0, 0, 1] = Gamma[0, 1, 0] = 0.5
    t = np.array([1.0, 0.0])
    # dV^0 = -Γ^0_{01} t^0 V^1 = -0.5 * 1 * (-0.2) = 0.1
    out = step_transport(Gamma, t, v, 2.0)
    np.testing.assert_allclose(out, [0.3 + 0.2, -0.2], atol=1e-15)
