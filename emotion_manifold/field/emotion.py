"""Emotion scalar field over the (EP, P) plane.

Each intensity follows

    e_k = tanh( kappa_k * weight_k * Delta_k * exp(-lambda_k * T) )

with Delta the perception/expectation discrepancy (signed for happiness,
positive part of EP - P for the negative emotions). Sadness is reported
negated. The surface height is the kappa-weighted mean of the five
intensities, scaled by 2.

Surface coordinates are (x, y) = (EP, P): `x` and `y` replace the EP and P
fields of the parameter set. All field functions accept numpy arrays for
`x` and `y` and broadcast elementwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

__all__ = [
    "EMOTION_KINDS",
    "KAPPA",
    "DECAY",
    "SEVERITY_LABELS",
    "NEUTRAL",
    "EmotionalParameters",
    "EmotionVector",
    "random_parameters",
    "emotion",
    "all_emotions",
    "height",
    "dominant",
    "severity_label",
]

EMOTION_KINDS: Tuple[str, ...] = ("happiness", "sadness", "fear", "anger", "worry")

# Sensitivity
KAPPA = {
    "happiness": 2.0,
    "sadness": 2.5,
    "fear": 4.0,
    "anger": 3.5,
    "worry": 3.0,
}

# Exponential time decay
DECAY = {
    "happiness": 0.5,
    "sadness": 0.3,
    "fear": 1.0,
    "anger": 0.7,
    "worry": 0.4,
}

SEVERITY_LABELS = {
    "happiness": ("Satisfied", "Pleased", "Happy", "Elated", "Ecstatic"),
    "sadness": ("Disappointed", "Hurt", "Sad", "Grief", "Despair"),
    "fear": ("Concerned", "Cautious", "Afraid", "Horror", "Panic"),
    "anger": ("Annoyed", "Frustrated", "Angry", "Fury", "Rage"),
    "worry": ("Distressed", "Nervous", "Worried", "Distraught", "Dread"),
}

NEUTRAL = "Neutral"

_SEVERITY_BOUNDS = (0.2, 0.4, 0.6, 0.8)
_HEIGHT_SCALE = 2.0
_HEIGHT_EPS = 1e-9


@dataclass(frozen=True)
class EmotionalParameters:
    """Appraisal parameters; EP/P in [-1, 1], weights in [0, 1], T >= 0."""

    EP: float
    P: float
    V: float
    SC: float
    Acc: float
    W_p: float
    T: float = 0.0

    @classmethod
    def default(cls) -> "EmotionalParameters":
        return cls(EP=0.7, P=0.3, V=0.8, SC=0.9, Acc=0.5, W_p=0.85, T=0.0)


@dataclass(frozen=True)
class EmotionVector:
    happiness: float
    sadness: float
    fear: float
    anger: float
    worry: float

    def items(self) -> Iterator[Tuple[str, float]]:
        for kind in EMOTION_KINDS:
            yield kind, getattr(self, kind)

    def as_dict(self) -> dict:
        return {k: float(v) for k, v in self.items()}

    @property
    def energy(self) -> float:
        """Sum of absolute intensities."""
        return float(sum(abs(v) for _, v in self.items()))


def random_parameters(rng: Optional[np.random.Generator] = None) -> EmotionalParameters:
    """Draw EP, P from [-1, 1) and the weights from [0, 1); T is reset to 0."""
    rng = rng if rng is not None else np.random.default_rng()
    ep, p = rng.uniform(-1.0, 1.0, size=2)
    v, sc, acc, w_p = rng.uniform(0.0, 1.0, size=4)
    return EmotionalParameters(
        EP=float(ep), P=float(p), V=float(v), SC=float(sc), Acc=float(acc), W_p=float(w_p), T=0.0
    )


def _discrepancy(kind: str, ep, p):
    if kind == "happiness":
        return p - ep
    return np.maximum(ep - p, 0.0)


def _weight(kind: str, params: EmotionalParameters) -> float:
    base = params.V * params.SC
    if kind in ("happiness", "sadness"):
        return base * params.Acc * params.W_p
    if kind == "anger":
        # anger is driven by the external (complementary) perspective
        return base * (1.0 - params.Acc) * (1.0 - params.W_p)
    return base * (1.0 - params.Acc) * params.W_p


def emotion(kind: str, x, y, params: EmotionalParameters):
    """
    Intensity of one emotion at surface point (x, y) = (EP, P).

    Raises
    ------
    ValueError
        If `kind` is not one of EMOTION_KINDS.
    """
    if kind not in KAPPA:
        raise ValueError(f"unknown emotion kind {kind!r}; expected one of {EMOTION_KINDS}")
    delta = _discrepancy(kind, x, y)
    scaled = KAPPA[kind] * _weight(kind, params) * delta
    value = np.tanh(scaled * np.exp(-DECAY[kind] * params.T))
    if kind == "sadness":
        return -value
    return value


def all_emotions(x, y, params: EmotionalParameters) -> EmotionVector:
    return EmotionVector(*(emotion(kind, x, y, params) for kind in EMOTION_KINDS))


def height(x, y, params: EmotionalParameters):
    """Kappa-weighted mean of the five intensities, scaled by 2."""
    total = 0.0
    weights = 0.0
    for kind in EMOTION_KINDS:
        total = total + KAPPA[kind] * emotion(kind, x, y, params)
        weights += KAPPA[kind]
    return total / (weights + _HEIGHT_EPS) * _HEIGHT_SCALE


def dominant(vector: EmotionVector) -> Tuple[str, float]:
    """
    Entry of maximal absolute value.

    Ties resolve to the first maximal entry in EMOTION_KINDS order; an all-zero
    vector yields ("neutral", 0.0).
    """
    best_kind = "neutral"
    best_mag = 0.0
    for kind, value in vector.items():
        mag = abs(float(value))
        if mag > best_mag:
            best_kind, best_mag = kind, mag
    return best_kind, best_mag


def severity_label(kind: str, magnitude: float) -> str:
    labels = SEVERITY_LABELS.get(kind)
    if labels is None:
        return NEUTRAL
    a = abs(float(magnitude))
    tier = 0
    for bound in _SEVERITY_BOUNDS:
        if a < bound:
            break
        tier += 1
    return labels[tier]
