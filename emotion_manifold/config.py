"""Engine configuration.

All numeric knobs of the manifold engine live here as a single frozen
dataclass; defaults reproduce the interactive application's constants.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ManifoldConfig"]


@dataclass(frozen=True)
class ManifoldConfig:
    # Finite differences
    fd_step: float = 0.01             # h > 0
    # Visualization scale between the normalized domain and scene coordinates
    scale: float = 3.0                # > 0
    # Degenerate-metric threshold for invert2x2
    det_eps: float = 1e-10            # >= 0
    # Christoffel cache
    cache_decimals: int = 3           # quantization of cache keys, >= 0
    cache_max_entries: int = 65_536   # >= 1
    # Geodesic trace
    geodesic_steps: int = 100         # >= 1
    # Fiber sweep over W_p in [0, 1]
    fiber_samples: int = 21           # >= 2
    # Holonomy loop side used by stats()
    holonomy_step: float = 0.05       # > 0

    def __post_init__(self) -> None:
        if not (float(self.fd_step) > 0.0):
            raise ValueError("fd_step must be > 0")
        if not (float(self.scale) > 0.0):
            raise ValueError("scale must be > 0")
        if not (float(self.det_eps) >= 0.0):
            raise ValueError("det_eps must be >= 0")
        if int(self.cache_decimals) < 0:
            raise ValueError("cache_decimals must be >= 0")
        if int(self.cache_max_entries) < 1:
            raise ValueError("cache_max_entries must be >= 1")
        if int(self.geodesic_steps) < 1:
            raise ValueError("geodesic_steps must be >= 1")
        if int(self.fiber_samples) < 2:
            raise ValueError("fiber_samples must be >= 2")
        if not (float(self.holonomy_step) > 0.0):
            raise ValueError("holonomy_step must be > 0")
