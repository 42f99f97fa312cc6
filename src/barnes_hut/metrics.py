"""
Conservation diagnostics.

Provides quantitative measures for checking a trajectory:
- Total mass and centre of mass
- Total linear momentum
- Kinetic, potential and total energy
- Relative energy drift over a trajectory

The explicit integrator does not conserve energy, and coincident-body
merges do not conserve momentum; these metrics make both visible.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

import numpy as np

from .constants import G
from .types import Universe, Vector2


def total_mass(universe: Universe) -> float:
    """Sum of the masses of all present bodies."""
    return universe.total_mass


def center_of_mass(universe: Universe) -> Optional[Vector2]:
    """
    Mass-weighted centroid of all present bodies.

    Returns:
        Centre of mass, or None if no bodies are present
    """
    mass = 0.0
    x, y = 0.0, 0.0
    for _, body in universe.present():
        mass += body.mass
        x += body.position.x * body.mass
        y += body.position.y * body.mass
    if mass == 0:
        return None
    return Vector2(x / mass, y / mass)


def total_momentum(universe: Universe) -> Vector2:
    """Total linear momentum of all present bodies."""
    px, py = 0.0, 0.0
    for _, body in universe.present():
        px += body.mass * body.velocity.x
        py += body.mass * body.velocity.y
    return Vector2(px, py)


def kinetic_energy(universe: Universe) -> float:
    """Sum of 0.5 * m * |v|^2 over present bodies."""
    return sum(0.5 * body.mass * body.velocity.norm_squared() for _, body in universe.present())


def potential_energy(universe: Universe, gravitational_constant: float = G) -> float:
    """
    Exact gravitational potential energy, -G * sum_{i<j} m_i m_j / r_ij.

    Coincident pairs are skipped.

    Time Complexity: O(n^2)
    """
    bodies = [body for _, body in universe.present()]
    if len(bodies) < 2:
        return 0.0

    pos = np.array([(b.position.x, b.position.y) for b in bodies], dtype=np.float64)
    mass = np.array([b.mass for b in bodies], dtype=np.float64)

    delta = pos[:, np.newaxis, :] - pos[np.newaxis, :, :]
    dist = np.sqrt(np.einsum("ijk,ijk->ij", delta, delta))
    i_upper, j_upper = np.triu_indices(len(bodies), k=1)
    r = dist[i_upper, j_upper]
    mm = mass[i_upper] * mass[j_upper]
    valid = r > 0
    return float(-gravitational_constant * np.sum(mm[valid] / r[valid]))


def total_energy(universe: Universe, gravitational_constant: float = G) -> float:
    """Kinetic plus potential energy."""
    return kinetic_energy(universe) + potential_energy(universe, gravitational_constant)


def energy_drift(
    trajectory: Sequence[Universe],
    gravitational_constant: float = G,
) -> float:
    """
    Relative change in total energy between the first and last snapshot.

    Returns:
        (E_last - E_first) / |E_first|, or 0.0 for fewer than two snapshots
        or a zero initial energy
    """
    if len(trajectory) < 2:
        return 0.0
    e0 = total_energy(trajectory[0], gravitational_constant)
    e1 = total_energy(trajectory[-1], gravitational_constant)
    if e0 == 0:
        return 0.0
    return (e1 - e0) / abs(e0)


def snapshot_summary(
    universe: Universe,
    gravitational_constant: float = G,
) -> dict[str, Any]:
    """
    Compute all diagnostics for one snapshot.

    Returns:
        Dictionary with all metric values
    """
    com = center_of_mass(universe)
    momentum = total_momentum(universe)
    ke = kinetic_energy(universe)
    pe = potential_energy(universe, gravitational_constant)
    return {
        "time": universe.time,
        "active": universe.active_count,
        "total_mass": universe.total_mass,
        "center_of_mass": (com.x, com.y) if com is not None else None,
        "momentum": (momentum.x, momentum.y),
        "momentum_magnitude": math.hypot(momentum.x, momentum.y),
        "kinetic_energy": ke,
        "potential_energy": pe,
        "total_energy": ke + pe,
    }


__all__ = [
    "total_mass",
    "center_of_mass",
    "total_momentum",
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "energy_drift",
    "snapshot_summary",
]
