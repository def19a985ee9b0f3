"""Gaussian curvature of the emotion surface.

For a graph z = f(x, y):

    K = (z_xx z_yy − z_xy^2) / (1 + z_x^2 + z_y^2)^2

All partials are central differences with step h; a 1e-10 guard is added to
the denominator.
"""
from __future__ import annotations

from ..field.emotion import EmotionalParameters, height

__all__ = ["gaussian_curvature"]

_DEN_EPS = 1e-10


def gaussian_curvature(x: float, y: float, params: EmotionalParameters, h: float = 0.01) -> float:
    def f(a: float, b: float) -> float:
        return height(a, b, params)

    z = f(x, y)
    z_xx = (f(x + h, y) - 2.0 * z + f(x - h, y)) / (h * h)
    z_yy = (f(x, y + h) - 2.0 * z + f(x, y - h)) / (h * h)
    z_xy = (f(x + h, y + h) - f(x + h, y - h) - f(x - h, y + h) + f(x - h, y - h)) / (4.0 * h * h)
    z_x = (f(x + h, y) - f(x - h, y)) / (2.0 * h)
    z_y = (f(x, y + h) - f(x, y - h)) / (2.0 * h)
    num = z_xx * z_yy - z_xy * z_xy
    den = (1.0 + z_x * z_x + z_y * z_y) ** 2
    return float(num / (den + _DEN_EPS))
