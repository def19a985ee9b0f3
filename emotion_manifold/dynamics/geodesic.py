"""Geodesic traces on the emotion surface.

Invariants
- Acceleration a^a = − Γ^a_{bc} v^b v^c from the surface's Levi–Civita connection.
- Fixed step dt = 1/steps; RK4-weighted velocity update followed by a position
  update with the new velocity. No adaptive step control.
- Reduces to a straight, constant-velocity trace where Γ = 0.
- Deterministic.

Notes
- The initial velocity is the unit direction from start to end. This is an
  initial-value trace, not a two-point boundary-value solve: the path is not
  guaranteed to reach `end` nor to be the shortest connection.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

from ..field.emotion import EmotionalParameters, height
from ..geom.christoffel import ChristoffelCache, christoffel_symbols
from ..geom.metric import Vec2

__all__ = ["geodesic_acceleration", "geodesic_step", "geodesic"]

_log = logging.getLogger(__name__)

PointLike = Union[Vec2, Sequence[float], np.ndarray]
AccelFn = Callable[[np.ndarray, np.ndarray], np.ndarray]


def _as_point(p: PointLike, name: str) -> np.ndarray:
    if isinstance(p, Vec2):
        return p.as_array()
    arr = np.asarray(p, dtype=float)
    if arr.shape != (2,):
        raise ValueError(f"{name} must be a 2-D point; got shape {arr.shape}")
    return arr


def geodesic_acceleration(Gamma: np.ndarray, v: np.ndarray) -> np.ndarray:
    """a^a = − Γ^a_{bc} v^b v^c for Γ of shape (2, 2, 2)."""
    return -np.einsum("abc,b,c->a", Gamma, v, v)


def geodesic_step(
    theta: np.ndarray,
    v: np.ndarray,
    accel: AccelFn,
    dt: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    One integration step of the geodesic ODE.

        k1 = a(θ, v)
        k2 = a(θ + dt/2·v,                 v + dt/2·k1)
        k3 = a(θ + dt/2·(v + dt/2·k1),     v + dt/2·k2)
        k4 = a(θ + dt·(v + dt/2·k2),       v + dt·k3)
        v_new = v + dt/6·(k1 + 2k2 + 2k3 + k4)
        θ_new = θ + dt·v_new

    Returns:
        theta_new, v_new
    """
    half = 0.5 * dt
    k1 = accel(theta, v)
    k2 = accel(theta + half * v, v + half * k1)
    k3 = accel(theta + half * (v + half * k1), v + half * k2)
    k4 = accel(theta + dt * (v + half * k2), v + dt * k3)
    v_new = v + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)
    theta_new = theta + dt * v_new
    return theta_new, v_new


def geodesic(
    start: PointLike,
    end: PointLike,
    params: EmotionalParameters,
    steps: int = 100,
    *,
    scale: float = 3.0,
    h: float = 0.01,
    eps: float = 1e-10,
    decimals: int = 3,
    cache: Optional[ChristoffelCache] = None,
) -> np.ndarray:
    """
    Trace a geodesic from `start` heading toward `end` (normalized domain).

    Returns
    -------
    np.ndarray
        Read-only array of shape (m, 3) with rows (scale·x, scale·y, height).
        m = steps + 1, or fewer when the trace leaves [-1, 1]^2: the first point
        outside the domain is the last row.

    Raises
    ------
    ValueError
        If steps < 1 or the endpoints are not 2-D points.
    """
    if not (isinstance(steps, (int, np.integer)) and steps >= 1):
        raise ValueError("steps must be an integer >= 1.")
    theta = _as_point(start, "start")
    target = _as_point(end, "end")

    v = target - theta
    v = v / (float(np.hypot(v[0], v[1])) or 1.0)
    dt = 1.0 / float(steps)

    def accel(p: np.ndarray, vel: np.ndarray) -> np.ndarray:
        G = christoffel_symbols(p[0], p[1], params, h, eps=eps, decimals=decimals, cache=cache).as_array()
        return geodesic_acceleration(G, vel)

    rows = [(theta[0] * scale, theta[1] * scale, float(height(theta[0], theta[1], params)))]
    for k in range(steps):
        theta, v = geodesic_step(theta, v, accel, dt)
        rows.append((theta[0] * scale, theta[1] * scale, float(height(theta[0], theta[1], params))))
        if abs(theta[0]) > 1.0 or abs(theta[1]) > 1.0:
            _log.debug("geodesic left the domain after %d of %d steps", k + 1, steps)
            break

    path = np.asarray(rows, dtype=float)
    path.flags.writeable = False
    return path
