"""Graph-induced metric of the emotion surface and its finite-difference derivatives.

The surface z = height(x, y) embedded in R^3 induces the metric

    g = [[1 + z_x^2, z_x z_y],
         [z_x z_y,   1 + z_y^2]]

All partials are forward differences with step h. Near-singular metrics are
not an error: `invert2x2` substitutes the identity when |det g| < eps, which
silently flattens the connection at such points.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from ..field.emotion import EmotionalParameters, height

__all__ = [
    "Vec2",
    "Mat2",
    "IDENTITY",
    "height_gradient",
    "vector_field",
    "metric_tensor",
    "invert2x2",
    "metric_derivative",
]

_log = logging.getLogger(__name__)

Direction = Union[str, int]


@dataclass(frozen=True)
class Vec2:
    x: float
    y: float

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> "Vec2":
        return Vec2(self.x * s, self.y * s)

    __rmul__ = __mul__

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> "Vec2":
        """Unit vector; a zero vector stays zero (fallback magnitude 1)."""
        n = self.norm() or 1.0
        return Vec2(self.x / n, self.y / n)

    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    @classmethod
    def from_array(cls, a) -> "Vec2":
        return cls(float(a[0]), float(a[1]))


@dataclass(frozen=True)
class Mat2:
    """2x2 matrix [[xx, xy], [yx, yy]]."""

    xx: float
    xy: float
    yx: float
    yy: float

    def det(self) -> float:
        return self.xx * self.yy - self.xy * self.yx

    def as_array(self) -> np.ndarray:
        return np.array([[self.xx, self.xy], [self.yx, self.yy]], dtype=float)


IDENTITY = Mat2(1.0, 0.0, 0.0, 1.0)


def height_gradient(x: float, y: float, params: EmotionalParameters, h: float = 0.01) -> Tuple[float, float]:
    """Forward-difference (z_x, z_y)."""
    z = height(x, y, params)
    z_x = (height(x + h, y, params) - z) / h
    z_y = (height(x, y + h, params) - z) / h
    return float(z_x), float(z_y)


def vector_field(x: float, y: float, params: EmotionalParameters, h: float = 0.01) -> Vec2:
    """Unit steepest-descent direction; the zero vector where the surface is flat."""
    z_x, z_y = height_gradient(x, y, params, h)
    return Vec2(-z_x, -z_y).normalized()


def metric_tensor(x: float, y: float, params: EmotionalParameters, h: float = 0.01) -> Mat2:
    z_x, z_y = height_gradient(x, y, params, h)
    off = z_x * z_y
    return Mat2(1.0 + z_x * z_x, off, off, 1.0 + z_y * z_y)


def invert2x2(m: Mat2, eps: float = 1e-10) -> Mat2:
    """
    Closed-form inverse of a 2x2 matrix.

    Returns IDENTITY when |det| < eps (degenerate-metric fallback, not an error).
    """
    d = m.det()
    if abs(d) < eps:
        _log.debug("degenerate metric det=%g; substituting identity", d)
        return IDENTITY
    return Mat2(m.yy / d, -m.xy / d, -m.yx / d, m.xx / d)


def _axis(direction: Direction) -> int:
    if direction in ("x", 0):
        return 0
    if direction in ("y", 1):
        return 1
    raise ValueError(f"direction must be 'x'/'y' or 0/1; got {direction!r}")


def metric_derivative(
    x: float,
    y: float,
    params: EmotionalParameters,
    h: float = 0.01,
    direction: Direction = "x",
) -> Mat2:
    """Forward difference of the metric tensor along one coordinate axis."""
    axis = _axis(direction)
    g = metric_tensor(x, y, params, h)
    if axis == 0:
        g2 = metric_tensor(x + h, y, params, h)
    else:
        g2 = metric_tensor(x, y + h, params, h)
    return Mat2(
        (g2.xx - g.xx) / h,
        (g2.xy - g.xy) / h,
        (g2.yx - g.yx) / h,
        (g2.yy - g.yy) / h,
    )
