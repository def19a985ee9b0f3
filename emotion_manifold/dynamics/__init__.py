"""Dynamics on the emotion surface.

Modules
- geodesic: fixed-step geodesic traces from an initial heading
"""

from .geodesic import geodesic, geodesic_acceleration, geodesic_step

__all__ = ["geodesic", "geodesic_acceleration", "geodesic_step"]
