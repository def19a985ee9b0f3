"""Emotion surface as a Riemannian manifold.

Subpackages
- field: emotion intensities and surface height over the (EP, P) plane
- geom: metric, Christoffel symbols, parallel transport, curvature, holonomy
- dynamics: geodesic traces
- utils: logging helpers

The EmotionalManifold facade in `engine` binds these together with a
configuration and an instance-scoped Christoffel cache.
"""

from .config import ManifoldConfig
from .engine import EmotionalManifold, ManifoldStats
from .field.emotion import EmotionalParameters, EmotionVector, random_parameters
from .geom.metric import Mat2, Vec2
from .geom.transport import PathRequiredError, TransportedVector

__version__ = "0.1.0"

__all__ = [
    "ManifoldConfig",
    "EmotionalManifold",
    "ManifoldStats",
    "EmotionalParameters",
    "EmotionVector",
    "random_parameters",
    "Mat2",
    "Vec2",
    "PathRequiredError",
    "TransportedVector",
]
