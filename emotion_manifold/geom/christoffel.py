"""Levi-Civita connection (Christoffel symbols) of the emotion surface.

Invariant: torsion-free, Γ^i_{jk} = Γ^i_{kj} exactly (symmetric by construction).

Symbols are evaluated at the fixed-point quantized point (x, y rounded to
`decimals` places), with or without a cache, so memoization never changes a
result.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..field.emotion import EmotionalParameters
from .metric import Mat2, invert2x2, metric_derivative, metric_tensor

__all__ = [
    "ChristoffelSymbols",
    "ChristoffelCache",
    "quantize",
    "christoffel_from_metric",
    "christoffel_symbols",
    "christoffel",
]

CacheKey = Tuple[int, int, EmotionalParameters, float]


@dataclass(frozen=True)
class ChristoffelSymbols:
    """The six independent components Γ^i_{jk} (j <= k) at one point."""

    g0_00: float
    g0_01: float
    g0_11: float
    g1_00: float
    g1_01: float
    g1_11: float

    def component(self, i: int, j: int, k: int) -> float:
        for name, idx in (("i", i), ("j", j), ("k", k)):
            if idx not in (0, 1):
                raise ValueError(f"index {name} must be 0 or 1; got {idx!r}")
        lo, hi = (j, k) if j <= k else (k, j)
        return getattr(self, f"g{i}_{lo}{hi}")

    def as_array(self) -> np.ndarray:
        """Γ with shape (2, 2, 2), ordered as Γ[a, b, c] = Γ^a_{bc}."""
        G = np.empty((2, 2, 2), dtype=float)
        G[0] = [[self.g0_00, self.g0_01], [self.g0_01, self.g0_11]]
        G[1] = [[self.g1_00, self.g1_01], [self.g1_01, self.g1_11]]
        return G


ZERO_SYMBOLS = ChristoffelSymbols(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


def christoffel_from_metric(g: Mat2, dg_dx: Mat2, dg_dy: Mat2, eps: float = 1e-10) -> ChristoffelSymbols:
    """
    Γ^a_{bc} = 0.5 * g^{aδ} * ( ∂_b g_{δc} + ∂_c g_{δb} − ∂_δ g_{bc} )

    dg[k, i, j] = ∂_k g_{ij}; the inverse metric falls back to the identity
    for a degenerate g (see invert2x2).
    """
    g_inv = invert2x2(g, eps).as_array()
    dg = np.stack([dg_dx.as_array(), dg_dy.as_array()])

    Gamma = np.zeros((2, 2, 2), dtype=float)
    for b in range(2):
        for c in range(2):
            S = dg[b, :, c] + dg[c, :, b] - dg[:, b, c]
            Gamma[:, b, c] = 0.5 * (g_inv @ S)

    return ChristoffelSymbols(
        float(Gamma[0, 0, 0]),
        float(Gamma[0, 0, 1]),
        float(Gamma[0, 1, 1]),
        float(Gamma[1, 0, 0]),
        float(Gamma[1, 0, 1]),
        float(Gamma[1, 1, 1]),
    )


def quantize(v: float, decimals: int = 3) -> int:
    """Fixed-point representation of v with `decimals` decimal places."""
    return int(round(float(v) * 10 ** decimals))


def _symbols_at(qx: int, qy: int, params: EmotionalParameters, h: float, decimals: int, eps: float) -> ChristoffelSymbols:
    scale = 10 ** decimals
    x = qx / scale
    y = qy / scale
    g = metric_tensor(x, y, params, h)
    dg_dx = metric_derivative(x, y, params, h, "x")
    dg_dy = metric_derivative(x, y, params, h, "y")
    return christoffel_from_metric(g, dg_dx, dg_dy, eps)


class ChristoffelCache:
    """
    Bounded, thread-safe memo of Christoffel symbol sets.

    Keys are (quantized x, quantized y, params, h). Concurrent misses on the
    same key may compute twice; the first stored value wins and is never
    overwritten, and the losing lookup counts as a hit, so hits + misses
    equals the number of lookups. Least-recently-used entries are evicted
    beyond `max_entries`.
    """

    def __init__(self, max_entries: int = 65_536, decimals: int = 3) -> None:
        if int(max_entries) < 1:
            raise ValueError("max_entries must be >= 1")
        if int(decimals) < 0:
            raise ValueError("decimals must be >= 0")
        self.max_entries = int(max_entries)
        self.decimals = int(decimals)
        self._entries: "OrderedDict[CacheKey, ChristoffelSymbols]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def key(self, x: float, y: float, params: EmotionalParameters, h: float) -> CacheKey:
        return (quantize(x, self.decimals), quantize(y, self.decimals), params, float(h))

    def symbols(self, x: float, y: float, params: EmotionalParameters, h: float = 0.01, eps: float = 1e-10) -> ChristoffelSymbols:
        key = self.key(x, y, params, h)
        with self._lock:
            found = self._entries.get(key)
            if found is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return found

        value = _symbols_at(key[0], key[1], params, h, self.decimals, eps)

        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                self.hits += 1
                return existing
            self._entries[key] = value
            self.misses += 1
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return value


def christoffel_symbols(
    x: float,
    y: float,
    params: EmotionalParameters,
    h: float = 0.01,
    *,
    eps: float = 1e-10,
    decimals: int = 3,
    cache: Optional[ChristoffelCache] = None,
) -> ChristoffelSymbols:
    """All six symbols at (x, y); memoized when a cache is given."""
    if cache is not None:
        return cache.symbols(x, y, params, h, eps)
    return _symbols_at(quantize(x, decimals), quantize(y, decimals), params, h, decimals, eps)


def christoffel(
    i: int,
    j: int,
    k: int,
    x: float,
    y: float,
    params: EmotionalParameters,
    h: float = 0.01,
    *,
    eps: float = 1e-10,
    decimals: int = 3,
    cache: Optional[ChristoffelCache] = None,
) -> float:
    """Single component Γ^i_{jk} at (x, y), with i, j, k in {0, 1}."""
    symbols = christoffel_symbols(x, y, params, h, eps=eps, decimals=decimals, cache=cache)
    return symbols.component(i, j, k)
