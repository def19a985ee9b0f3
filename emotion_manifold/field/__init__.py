"""Scalar emotion field over the (EP, P) parameter plane.

Modules
- emotion: five emotion intensities, surface height, dominant emotion, severity tiers
"""

from .emotion import (
    EMOTION_KINDS,
    EmotionalParameters,
    EmotionVector,
    all_emotions,
    dominant,
    emotion,
    height,
    random_parameters,
    severity_label,
)

__all__ = [
    "EMOTION_KINDS",
    "EmotionalParameters",
    "EmotionVector",
    "all_emotions",
    "dominant",
    "emotion",
    "height",
    "random_parameters",
    "severity_label",
]
