"""
Physics kernels: the gravitational force law and time integration.
"""

from .forces import direct_force, direct_forces, pairwise_force
from .integration import (
    advance,
    integrate,
    is_inside,
    update_acceleration,
    update_position,
    update_velocity,
)

__all__ = [
    "pairwise_force",
    "direct_force",
    "direct_forces",
    "update_acceleration",
    "update_velocity",
    "update_position",
    "integrate",
    "is_inside",
    "advance",
]
