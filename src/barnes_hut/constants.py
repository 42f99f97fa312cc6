"""
Physical constants and simulation defaults.

All quantities are SI (metres, kilograms, seconds). The simulation itself is
unit-agnostic as long as masses, distances and times are consistent.
"""

from __future__ import annotations

#: Gravitational constant, m^3 kg^-1 s^-2
G = 6.674e-11

#: Mass of the Sun, kg
SOLAR_MASS = 1.989e30

#: Radius of the Sun, m
SOLAR_RADIUS = 696340000.0

#: Mass of the black hole placed at the centre of generated galaxies, kg
BLACK_HOLE_MASS = 4e6 * SOLAR_MASS

#: Default Barnes-Hut opening angle
DEFAULT_THETA = 0.5

#: Maximum number of quadrant subdivisions below the root before two
#: bodies sharing a cell are merged instead of split further.
DEFAULT_MAX_DEPTH = 64


__all__ = [
    "G",
    "SOLAR_MASS",
    "SOLAR_RADIUS",
    "BLACK_HOLE_MASS",
    "DEFAULT_THETA",
    "DEFAULT_MAX_DEPTH",
]
