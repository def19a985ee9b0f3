"""Geometric primitives of the emotion surface.

This package hosts:
- metric: graph-induced metric, its inverse and finite-difference derivatives
- christoffel: Levi–Civita connection (torsion-free) and its memo cache
- transport: first-order parallel transport along sampled paths
- curvature: Gaussian curvature from central differences
- holonomy: loop-holonomy connection curvature
"""

from .christoffel import ChristoffelCache, ChristoffelSymbols, christoffel, christoffel_symbols
from .curvature import gaussian_curvature
from .holonomy import connection_curvature
from .metric import Mat2, Vec2, invert2x2, metric_derivative, metric_tensor, vector_field
from .transport import PathRequiredError, TransportedVector, parallel_transport

__all__ = [
    "ChristoffelCache",
    "ChristoffelSymbols",
    "christoffel",
    "christoffel_symbols",
    "gaussian_curvature",
    "connection_curvature",
    "Mat2",
    "Vec2",
    "invert2x2",
    "metric_derivative",
    "metric_tensor",
    "vector_field",
    "PathRequiredError",
    "TransportedVector",
    "parallel_transport",
]
