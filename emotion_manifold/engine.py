"""EmotionalManifold: the computation API consumed by rendering and UI layers.

The engine binds a ManifoldConfig to an instance-scoped ChristoffelCache and
exposes stateless point queries (emotions, height, gradient direction,
connection, curvature), path operations (geodesic, parallel transport), the
perspective fiber, and grid samplers for mesh/arrow/glyph generation.

No path or parameter state is kept between calls; callers own every returned
value.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

import numpy as np

from .config import ManifoldConfig
from .dynamics.geodesic import geodesic as trace_geodesic
from .field.emotion import (
    EMOTION_KINDS,
    EmotionalParameters,
    EmotionVector,
    all_emotions,
    dominant,
    emotion,
    height,
    severity_label,
)
from .geom.christoffel import ChristoffelCache, ChristoffelSymbols, christoffel_symbols
from .geom.curvature import gaussian_curvature
from .geom.holonomy import connection_curvature
from .geom.metric import Vec2, vector_field
from .geom.transport import TransportedVector, parallel_transport

__all__ = [
    "EmotionalManifold",
    "ManifoldStats",
    "SurfaceSample",
    "VectorFieldSample",
    "ChristoffelSample",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManifoldStats:
    gaussian_curvature: float
    vector_magnitude: float
    energy: float
    dominant: str
    magnitude: float
    severity: str
    connection_curvature: float
    christoffel_000: float

    def as_dict(self) -> dict:
        return {
            "gaussian_curvature": self.gaussian_curvature,
            "vector_magnitude": self.vector_magnitude,
            "energy": self.energy,
            "dominant": self.dominant,
            "magnitude": self.magnitude,
            "severity": self.severity,
            "connection_curvature": self.connection_curvature,
            "christoffel_000": self.christoffel_000,
        }


@dataclass(frozen=True)
class SurfaceSample:
    """Vertex grid of the surface; arrays have shape (res+1, res+1), indexed [i_x, i_y]."""

    X: np.ndarray
    Y: np.ndarray
    Z: np.ndarray
    dominant: np.ndarray


@dataclass(frozen=True)
class VectorFieldSample:
    X: np.ndarray
    Y: np.ndarray
    Z: np.ndarray
    U: np.ndarray
    V: np.ndarray


@dataclass(frozen=True)
class ChristoffelSample:
    X: np.ndarray
    Y: np.ndarray
    Z: np.ndarray
    magnitude: np.ndarray


def _grid_axis(n: int) -> np.ndarray:
    """n+1 samples spanning [-1, 1]."""
    return (np.arange(n + 1, dtype=float) / n - 0.5) * 2.0


class EmotionalManifold:
    """
    Emotion surface as a Riemannian manifold.

    Parameters
    ----------
    cfg : ManifoldConfig, optional
        Numeric configuration; defaults reproduce the interactive application.
    cache : ChristoffelCache, optional
        Shared Christoffel memo. When omitted a private cache sized from `cfg`
        is created, unless `use_cache` is False.
    use_cache : bool
        Disable memoization entirely (results are identical either way).
    """

    def __init__(
        self,
        cfg: Optional[ManifoldConfig] = None,
        cache: Optional[ChristoffelCache] = None,
        use_cache: bool = True,
    ) -> None:
        self.cfg = cfg or ManifoldConfig()
        if cache is None and use_cache:
            cache = ChristoffelCache(self.cfg.cache_max_entries, self.cfg.cache_decimals)
        self.cache = cache

    # --- Emotion field ---

    def all_emotions(self, x: float, y: float, params: EmotionalParameters) -> EmotionVector:
        return all_emotions(x, y, params)

    def dominant_emotion(self, emotions: EmotionVector) -> Tuple[str, float]:
        return dominant(emotions)

    def severity_label(self, kind: str, magnitude: float) -> str:
        return severity_label(kind, magnitude)

    def height(self, x: float, y: float, params: EmotionalParameters) -> float:
        return float(height(x, y, params))

    # --- Metric and connection ---

    def vector_field(self, x: float, y: float, params: EmotionalParameters) -> Vec2:
        return vector_field(x, y, params, self.cfg.fd_step)

    def christoffel_symbols(self, x: float, y: float, params: EmotionalParameters) -> ChristoffelSymbols:
        return christoffel_symbols(
            x, y, params, self.cfg.fd_step,
            eps=self.cfg.det_eps, decimals=self.cfg.cache_decimals, cache=self.cache,
        )

    def christoffel(self, i: int, j: int, k: int, x: float, y: float, params: EmotionalParameters) -> float:
        return self.christoffel_symbols(x, y, params).component(i, j, k)

    # --- Paths ---

    def geodesic(self, start, end, params: EmotionalParameters, steps: Optional[int] = None) -> np.ndarray:
        n = self.cfg.geodesic_steps if steps is None else steps
        path = trace_geodesic(
            start, end, params, n,
            scale=self.cfg.scale, h=self.cfg.fd_step, eps=self.cfg.det_eps,
            decimals=self.cfg.cache_decimals, cache=self.cache,
        )
        _log.debug("geodesic traced: %d points (requested %d steps)", path.shape[0], n)
        return path

    def parallel_transport(self, initial_vector, path, params: EmotionalParameters) -> List[TransportedVector]:
        return parallel_transport(
            initial_vector, path, params,
            scale=self.cfg.scale, h=self.cfg.fd_step, eps=self.cfg.det_eps,
            decimals=self.cfg.cache_decimals, cache=self.cache,
        )

    # --- Curvature ---

    def gaussian_curvature(self, x: float, y: float, params: EmotionalParameters, h: Optional[float] = None) -> float:
        return gaussian_curvature(x, y, params, self.cfg.fd_step if h is None else h)

    def connection_curvature(self, x: float, y: float, params: EmotionalParameters, h: Optional[float] = None) -> float:
        return connection_curvature(
            x, y, params, self.cfg.fd_step if h is None else h,
            scale=self.cfg.scale, fd_step=self.cfg.fd_step, eps=self.cfg.det_eps,
            decimals=self.cfg.cache_decimals, cache=self.cache,
        )

    # --- Fiber over a base point ---

    def fiber_sample(self, base, params: EmotionalParameters) -> np.ndarray:
        """
        Sweep W_p over [0, 1] at a fixed base point.

        Rows are (scale·bx, scale·by, height + (W_p − 0.5)·2); shape (fiber_samples, 3).
        """
        bx, by = (base.x, base.y) if isinstance(base, Vec2) else (float(base[0]), float(base[1]))
        n = self.cfg.fiber_samples - 1
        rows = []
        for i in range(n + 1):
            w_p = i / n
            z = float(height(bx, by, replace(params, W_p=w_p)))
            rows.append((bx * self.cfg.scale, by * self.cfg.scale, z + (w_p - 0.5) * 2.0))
        return np.asarray(rows, dtype=float)

    # --- Snapshot ---

    def stats(self, params: EmotionalParameters) -> ManifoldStats:
        """Statistics at the parameter set's own point (EP, P)."""
        x, y = params.EP, params.P
        emotions = self.all_emotions(x, y, params)
        kind, magnitude = self.dominant_emotion(emotions)
        return ManifoldStats(
            gaussian_curvature=self.gaussian_curvature(x, y, params),
            vector_magnitude=self.vector_field(x, y, params).norm(),
            energy=emotions.energy,
            dominant=kind,
            magnitude=magnitude,
            severity=self.severity_label(kind, magnitude),
            connection_curvature=self.connection_curvature(x, y, params, self.cfg.holonomy_step),
            christoffel_000=self.christoffel(0, 0, 0, x, y, params),
        )

    # --- Grid samplers ---

    def _map_grid(self, fn: Callable[[float, float], Tuple[float, ...]], axis: np.ndarray, workers: int) -> np.ndarray:
        """Evaluate fn over axis × axis; rows run on a thread pool when workers > 1."""

        def row(xv: float) -> List[Tuple[float, ...]]:
            return [fn(float(xv), float(yv)) for yv in axis]

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                rows = list(pool.map(row, axis))
        else:
            rows = [row(xv) for xv in axis]
        return np.asarray(rows, dtype=float)

    def sample_surface(self, params: EmotionalParameters, resolution: int = 50) -> SurfaceSample:
        if int(resolution) < 1:
            raise ValueError("resolution must be >= 1")
        axis = _grid_axis(int(resolution))
        xx, yy = np.meshgrid(axis, axis, indexing="ij")
        Z = np.asarray(height(xx, yy, params), dtype=float)

        stacked = np.stack([np.asarray(emotion(k, xx, yy, params), dtype=float) for k in EMOTION_KINDS])
        mags = np.abs(stacked)
        idx = np.argmax(mags, axis=0)  # first maximum wins
        labels = np.asarray(EMOTION_KINDS, dtype=object)[idx]
        labels[np.max(mags, axis=0) == 0.0] = "neutral"

        s = self.cfg.scale
        return SurfaceSample(X=xx * s, Y=yy * s, Z=Z, dominant=labels)

    def sample_vector_field(self, params: EmotionalParameters, grid: int = 10, workers: int = 1) -> VectorFieldSample:
        if int(grid) < 1:
            raise ValueError("grid must be >= 1")
        axis = _grid_axis(int(grid))

        def point(x: float, y: float) -> Tuple[float, float, float]:
            v = self.vector_field(x, y, params)
            return self.height(x, y, params), v.x, v.y

        vals = self._map_grid(point, axis, workers)
        xx, yy = np.meshgrid(axis, axis, indexing="ij")
        s = self.cfg.scale
        return VectorFieldSample(X=xx * s, Y=yy * s, Z=vals[..., 0], U=vals[..., 1], V=vals[..., 2])

    def sample_christoffel(self, params: EmotionalParameters, grid: int = 8, workers: int = 1) -> ChristoffelSample:
        """|Γ^0_{00}| over the domain."""
        if int(grid) < 1:
            raise ValueError("grid must be >= 1")
        axis = _grid_axis(int(grid))

        def point(x: float, y: float) -> Tuple[float, float]:
            return self.height(x, y, params), abs(self.christoffel(0, 0, 0, x, y, params))

        vals = self._map_grid(point, axis, workers)
        xx, yy = np.meshgrid(axis, axis, indexing="ij")
        s = self.cfg.scale
        return ChristoffelSample(X=xx * s, Y=yy * s, Z=vals[..., 0], magnitude=vals[..., 1])
