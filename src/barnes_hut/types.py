"""
Common types for the Barnes-Hut simulation.

This module provides the fundamental value types used across the package:
- Vector2: 2-component vector for position, velocity, acceleration and force
- Body: Point mass with kinematic state and display attributes
- Region: Axis-aligned square partition of space
- Quadrant: Fixed quadrant-to-child-index mapping (NW, NE, SW, SE)
- EventType: Simulation lifecycle events
- Event: Event payload for callbacks
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Iterator, Optional, Sequence, TypedDict, Union

from .validation import (
    validate_color,
    validate_mass,
    validate_radius,
    validate_region_width,
)


class EventType(IntEnum):
    """
    Simulation lifecycle events.

    - start: Simulation steps have begun
    - tick: Fired once per completed step
    - end: Simulation finished or was stopped
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    step: int
    time: float
    active: int
    removed: int
    merged: int


@dataclass(frozen=True)
class Vector2:
    """Immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> Vector2:
        return cls(0.0, 0.0)

    @classmethod
    def of(cls, value: VectorLike) -> Vector2:
        """Coerce a Vector2 or an (x, y) pair into a Vector2."""
        if isinstance(value, Vector2):
            return value
        x, y = value
        return cls(float(x), float(y))

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def norm_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def distance_to(self, other: Vector2) -> float:
        """Euclidean distance between two points."""
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def __repr__(self) -> str:
        return f"Vector2({self.x:.6g}, {self.y:.6g})"


VectorLike = Union[Vector2, Sequence[float]]
"""Input type for vectors: Vector2 objects or (x, y) sequences."""

Color = tuple[int, int, int]
"""RGB colour triple, each component in [0, 255]."""

WHITE: Color = (255, 255, 255)


@dataclass(frozen=True)
class Body:
    """
    Point mass with position, velocity, acceleration and display attributes.

    Bodies are immutable; the integration step produces a new Body via
    replace() instead of mutating one. radius and color are carried through
    for rendering and play no part in the physics.

    Attributes:
        position: Position in the simulation region
        velocity: Velocity
        acceleration: Acceleration from the previous step
        mass: Mass, strictly positive
        radius: Display radius (>= 0)
        color: RGB display colour

    Raises:
        InvalidMassError: If mass is not positive
        ValidationError: If radius or color is malformed
    """

    position: Vector2 = field(default_factory=Vector2.zero)
    velocity: Vector2 = field(default_factory=Vector2.zero)
    acceleration: Vector2 = field(default_factory=Vector2.zero)
    mass: float = 1.0
    radius: float = 0.0
    color: Color = WHITE

    def __post_init__(self) -> None:
        # Coerce (x, y) pairs and validate at construction time
        object.__setattr__(self, "position", Vector2.of(self.position))
        object.__setattr__(self, "velocity", Vector2.of(self.velocity))
        object.__setattr__(self, "acceleration", Vector2.of(self.acceleration))
        object.__setattr__(self, "mass", validate_mass(self.mass))
        object.__setattr__(self, "radius", validate_radius(self.radius))
        object.__setattr__(self, "color", validate_color(self.color))

    def replace(self, **changes: Any) -> Body:
        """Return a copy of this body with the given fields replaced."""
        return replace(self, **changes)

    def __repr__(self) -> str:
        return (
            f"Body(position=({self.position.x:.4g}, {self.position.y:.4g}), "
            f"mass={self.mass:.4g})"
        )


BodyLike = Union[Body, dict[str, Any], None]
"""Input type for bodies: Body objects, dicts of Body fields, or None (absent)."""


class Quadrant(IntEnum):
    """Child slot index of a subdivided region."""

    NW = 0
    NE = 1
    SW = 2
    SE = 3


@dataclass(frozen=True)
class Region:
    """
    Axis-aligned square region of space.

    Attributes:
        x, y: Origin (minimum corner) of the region
        width: Side length, strictly positive

    Raises:
        DegenerateRegionError: If width is not positive
    """

    x: float
    y: float
    width: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "width", validate_region_width(self.width))

    @property
    def midpoint(self) -> Vector2:
        """Centre of the region."""
        half = self.width / 2
        return Vector2(self.x + half, self.y + half)

    def contains(self, position: Vector2) -> bool:
        """Check if a point lies within the region, edges included."""
        return (
            self.x <= position.x <= self.x + self.width
            and self.y <= position.y <= self.y + self.width
        )

    def quadrant_index(self, position: Vector2) -> Quadrant:
        """
        Get the quadrant a point falls into.

        x <= midpoint.x is West, y >= midpoint.y is North. Points on the
        midpoint lines are placed deterministically by this rule.

        Returns:
            Quadrant.NW, NE, SW or SE
        """
        mid = self.midpoint
        west = position.x <= mid.x
        north = position.y >= mid.y
        if north:
            return Quadrant.NW if west else Quadrant.NE
        return Quadrant.SW if west else Quadrant.SE

    def child(self, quadrant: int) -> Region:
        """Get the half-width sub-region for a quadrant index."""
        half = self.width / 2
        q = Quadrant(quadrant)
        x = self.x + half if q in (Quadrant.NE, Quadrant.SE) else self.x
        y = self.y + half if q in (Quadrant.NW, Quadrant.NE) else self.y
        return Region(x, y, half)

    def subdivide(self) -> tuple[Region, Region, Region, Region]:
        """Split into four equal sub-regions ordered NW, NE, SW, SE."""
        return (
            self.child(Quadrant.NW),
            self.child(Quadrant.NE),
            self.child(Quadrant.SW),
            self.child(Quadrant.SE),
        )


@dataclass(frozen=True)
class Universe:
    """
    Snapshot of the simulation at one point in time.

    Slots of bodies that left the region are kept as None so that indices
    stay stable across steps.

    Attributes:
        bodies: Body set, absent entries are None
        width: Side length of the square region anchored at the origin
        time: Simulated time of this snapshot in seconds
    """

    bodies: tuple[Optional[Body], ...]
    width: float
    time: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "bodies", tuple(self.bodies))
        object.__setattr__(self, "width", validate_region_width(self.width))
        object.__setattr__(self, "time", float(self.time))

    @property
    def region(self) -> Region:
        """The simulation region [0, width] x [0, width]."""
        return Region(0.0, 0.0, self.width)

    @property
    def active_count(self) -> int:
        """Number of bodies still present."""
        return sum(1 for b in self.bodies if b is not None)

    @property
    def total_mass(self) -> float:
        return sum(b.mass for b in self.bodies if b is not None)

    def present(self) -> Iterator[tuple[int, Body]]:
        """Iterate over (index, body) pairs of present bodies."""
        for i, body in enumerate(self.bodies):
            if body is not None:
                yield i, body

    def __len__(self) -> int:
        return len(self.bodies)

    def __repr__(self) -> str:
        return (
            f"Universe(bodies={len(self.bodies)}, active={self.active_count}, "
            f"width={self.width:.4g}, time={self.time:.4g})"
        )


__all__ = [
    "EventType",
    "Event",
    "Vector2",
    "VectorLike",
    "Color",
    "WHITE",
    "Body",
    "BodyLike",
    "Quadrant",
    "Region",
    "Universe",
]
