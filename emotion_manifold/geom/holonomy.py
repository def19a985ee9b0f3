"""Discrete holonomy ("connection curvature") of the emotion surface.

A reference vector e_x is parallel-transported around the square loop

    (x, y) → (x+h, y) → (x+h, y+h) → (x, y+h) → (x, y)

and the net rotation angle, divided by the loop's coordinate area h^2, is
returned. For a flat connection (Γ = 0) the vector returns unchanged and the
estimate is exactly 0.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..field.emotion import EmotionalParameters, height
from .christoffel import ChristoffelCache
from .metric import Vec2
from .transport import parallel_transport

__all__ = ["square_loop", "connection_curvature"]


def square_loop(x: float, y: float, params: EmotionalParameters, h: float, scale: float = 3.0) -> np.ndarray:
    """Closed loop of five points (X, Y, Z) in visualization coordinates."""
    corners = [(x, y), (x + h, y), (x + h, y + h), (x, y + h), (x, y)]
    return np.array([(qx * scale, qy * scale, float(height(qx, qy, params))) for qx, qy in corners], dtype=float)


def connection_curvature(
    x: float,
    y: float,
    params: EmotionalParameters,
    h: float = 0.01,
    *,
    scale: float = 3.0,
    fd_step: float = 0.01,
    eps: float = 1e-10,
    decimals: int = 3,
    cache: Optional[ChristoffelCache] = None,
) -> float:
    """
    Rotation of a transported unit vector around a loop of side h, per unit area.

    The angle is the plain difference of atan2 values (no wrapping to (−π, π]).
    Christoffel symbols use the finite-difference step `fd_step`, independent
    of the loop side `h`.
    """
    loop = square_loop(x, y, params, h, scale)
    initial = Vec2(1.0, 0.0)
    carried = parallel_transport(
        initial, loop, params, scale=scale, h=fd_step, eps=eps, decimals=decimals, cache=cache
    )
    if not carried:
        return 0.0
    final = carried[-1].vector
    angle = math.atan2(final.y, final.x) - initial.angle()
    return angle / (h * h)
