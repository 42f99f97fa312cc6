"""
Newtonian gravitational force law.

Provides the exact pairwise force between two bodies and direct O(n^2)
summation, used as the reference that the Barnes-Hut tree approximates.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from ..constants import G
from ..types import Body, Vector2


def pairwise_force(
    target: Body,
    source: Body,
    gravitational_constant: float = G,
) -> Vector2:
    """
    Compute the gravitational force exerted by source on target.

    Magnitude is G * m1 * m2 / d^2, directed from target toward source.

    Args:
        target: Body the force acts on
        source: Body exerting the force
        gravitational_constant: G in consistent units

    Returns:
        Force vector on target. Zero if the two positions coincide.
    """
    dx = source.position.x - target.position.x
    dy = source.position.y - target.position.y
    dist_sq = dx * dx + dy * dy

    if dist_sq == 0:
        return Vector2.zero()

    dist = math.sqrt(dist_sq)
    force = gravitational_constant * target.mass * source.mass / dist_sq
    return Vector2(force * dx / dist, force * dy / dist)


def direct_force(
    bodies: Sequence[Optional[Body]],
    index: int,
    gravitational_constant: float = G,
) -> Vector2:
    """
    Compute the exact net force on one body by summing over all others.

    Args:
        bodies: Body set, absent entries are None
        index: Index of the target body
        gravitational_constant: G in consistent units

    Returns:
        Net force vector on bodies[index]
    """
    target = bodies[index]
    if target is None:
        return Vector2.zero()

    fx, fy = 0.0, 0.0
    for j, other in enumerate(bodies):
        if j == index or other is None:
            continue
        f = pairwise_force(target, other, gravitational_constant)
        fx += f.x
        fy += f.y
    return Vector2(fx, fy)


def direct_forces(
    bodies: Sequence[Optional[Body]],
    gravitational_constant: float = G,
) -> np.ndarray:
    """
    Compute exact net forces on all bodies with vectorised pairwise summation.

    Coincident pairs contribute nothing, matching pairwise_force().

    Args:
        bodies: Body set, absent entries are None
        gravitational_constant: G in consistent units

    Returns:
        (n, 2) float64 array of forces; rows of absent bodies are zero
    """
    n = len(bodies)
    forces = np.zeros((n, 2), dtype=np.float64)
    present = [i for i, b in enumerate(bodies) if b is not None]
    if len(present) < 2:
        return forces

    pos = np.array(
        [(bodies[i].position.x, bodies[i].position.y) for i in present],  # type: ignore[union-attr]
        dtype=np.float64,
    )
    mass = np.array([bodies[i].mass for i in present], dtype=np.float64)  # type: ignore[union-attr]

    # delta[i, j] points from body i toward body j
    delta = pos[np.newaxis, :, :] - pos[:, np.newaxis, :]
    dist_sq = np.einsum("ijk,ijk->ij", delta, delta)
    coincident = dist_sq == 0
    safe = np.where(coincident, 1.0, dist_sq)
    scale = gravitational_constant * np.outer(mass, mass) / (safe * np.sqrt(safe))
    scale[coincident] = 0.0

    forces[present] = np.einsum("ij,ijk->ik", scale, delta)
    return forces


__all__ = ["pairwise_force", "direct_force", "direct_forces"]
