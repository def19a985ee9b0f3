"""Parallel transport of a tangent vector along a sampled surface path.

Transport rule per segment p_k -> p_{k+1} (visualization coordinates):
    t   = unit tangent of the segment (zero-length segments keep t = 0)
    dV^a = − Γ^a_{bc} t^b V^c      with Γ evaluated at p_k / scale
    V  ← V + dV · |p_{k+1} − p_k|

This is an explicit first-order (Euler) update. It is not
length-preserving and not matched to the RK4 geodesic integrator.
Deterministic; one output entry per segment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..field.emotion import EmotionalParameters
from .christoffel import ChristoffelCache, christoffel_symbols
from .metric import Vec2

__all__ = ["PathRequiredError", "TransportedVector", "step_transport", "parallel_transport"]


class PathRequiredError(ValueError):
    """Parallel transport was requested without a path to follow."""


@dataclass(frozen=True)
class TransportedVector:
    position: Tuple[float, float, float]
    vector: Vec2


VectorLike = Union[Vec2, Sequence[float], np.ndarray]


def step_transport(Gamma: np.ndarray, tangent: np.ndarray, v: np.ndarray, length: float) -> np.ndarray:
    """
    One Euler transport step: v + (−Γ^a_{bc} t^b v^c) · length.

    Gamma has shape (2, 2, 2) ordered as Γ[a, b, c]; tangent and v have shape (2,).
    """
    dv = -np.einsum("abc,b,c->a", Gamma, tangent, v)
    return v + dv * length


def parallel_transport(
    initial_vector: VectorLike,
    path,
    params: EmotionalParameters,
    *,
    scale: float = 3.0,
    h: float = 0.01,
    eps: float = 1e-10,
    decimals: int = 3,
    cache: Optional[ChristoffelCache] = None,
) -> List[TransportedVector]:
    """
    Carry `initial_vector` along `path` (rows (X, Y[, Z]) in visualization coordinates).

    Returns
    -------
    list[TransportedVector]
        len(path) − 1 entries; entry k holds the vector after segment k,
        recorded at the segment's starting position.

    Raises
    ------
    PathRequiredError
        If `path` is empty.
    ValueError
        If path rows have fewer than two coordinates.
    """
    pts = np.asarray(path, dtype=float)
    if pts.size == 0:
        raise PathRequiredError("parallel transport needs a path; compute a geodesic first")
    if pts.ndim != 2 or pts.shape[1] < 2:
        raise ValueError(f"path must have shape (m, 2) or (m, 3); got {pts.shape}")
    if pts.shape[1] == 2:
        pts = np.column_stack([pts, np.zeros(pts.shape[0])])

    if isinstance(initial_vector, Vec2):
        v = initial_vector.as_array()
    else:
        v = np.asarray(initial_vector, dtype=float).reshape(2)

    out: List[TransportedVector] = []
    for k in range(pts.shape[0] - 1):
        p1 = pts[k]
        step = pts[k + 1, :2] - p1[:2]
        length = float(np.hypot(step[0], step[1])) or 1.0
        tangent = step / length

        G = christoffel_symbols(
            p1[0] / scale, p1[1] / scale, params, h, eps=eps, decimals=decimals, cache=cache
        ).as_array()
        v = step_transport(G, tangent, v, length)
        out.append(TransportedVector((float(p1[0]), float(p1[1]), float(p1[2])), Vec2.from_array(v)))
    return out
