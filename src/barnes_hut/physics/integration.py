"""
Explicit time integration of body state.

Acceleration is recomputed from the net force, velocity is advanced with the
new acceleration, and position is advanced with the velocity and
acceleration from *before* the update:

    a' = F / m
    v' = v + a' * dt
    p' = p + v * dt + 0.5 * a * dt^2

This is not a symplectic scheme and accumulates energy drift over long runs.
"""

from __future__ import annotations

from typing import Optional

from ..types import Body, Vector2


def update_acceleration(body: Body, force: Vector2) -> Vector2:
    """Acceleration produced by a net force on a body."""
    return Vector2(force.x / body.mass, force.y / body.mass)


def update_velocity(body: Body, dt: float) -> Vector2:
    """Velocity after dt, using the body's (already updated) acceleration."""
    return Vector2(
        body.velocity.x + body.acceleration.x * dt,
        body.velocity.y + body.acceleration.y * dt,
    )


def update_position(body: Body, dt: float) -> Vector2:
    """Position after dt, using the body's velocity and acceleration."""
    return Vector2(
        body.position.x + body.velocity.x * dt + 0.5 * body.acceleration.x * dt * dt,
        body.position.y + body.velocity.y * dt + 0.5 * body.acceleration.y * dt * dt,
    )


def integrate(body: Body, force: Vector2, dt: float) -> Body:
    """
    Advance a body by one time step under a net force.

    Args:
        body: Current body state
        force: Net force acting on the body
        dt: Time step

    Returns:
        New Body with updated acceleration, velocity and position
    """
    acceleration = update_acceleration(body, force)
    velocity = update_velocity(body.replace(acceleration=acceleration), dt)
    # Position uses the pre-update velocity and acceleration
    position = update_position(body, dt)
    return body.replace(position=position, velocity=velocity, acceleration=acceleration)


def is_inside(position: Vector2, width: float) -> bool:
    """Check if a position lies in the square [0, width] x [0, width]."""
    return 0.0 <= position.x <= width and 0.0 <= position.y <= width


def advance(body: Body, force: Vector2, dt: float, width: float) -> Optional[Body]:
    """
    Integrate a body and apply the boundary policy.

    Bodies leaving the simulation region are removed permanently rather
    than reflected, clamped or wrapped.

    Returns:
        The integrated Body, or None if it left [0, width]^2
    """
    updated = integrate(body, force, dt)
    if not is_inside(updated.position, width):
        return None
    return updated


__all__ = [
    "update_acceleration",
    "update_velocity",
    "update_position",
    "integrate",
    "is_inside",
    "advance",
]
