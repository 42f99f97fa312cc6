"""
Initial-condition generators.

Builds starting snapshots for the simulator:
- initialize_galaxy: Rotating disc of stars around a central black hole
- push_galaxy: Add a bulk velocity to every body of a galaxy
- initialize_universe: Combine galaxies into one snapshot
- jupiter_system: Jupiter and its four Galilean moons
- PRESETS / build_scenario: Named scenarios with their run parameters
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .constants import BLACK_HOLE_MASS, G, SOLAR_MASS, SOLAR_RADIUS
from .types import Body, Universe, Vector2
from .validation import ValidationError, validate_region_width

Galaxy = list[Body]


def initialize_galaxy(
    num_stars: int,
    radius: float,
    x: float,
    y: float,
    rng: Optional[random.Random] = None,
) -> Galaxy:
    """
    Generate a spinning galaxy centred on (x, y).

    Stars are placed at a distance uniformly drawn from [radius/2, radius]
    at a uniform random angle, and given a tangential speed of half the
    circular orbital speed around the central black hole to keep the disc
    from flying apart. A black hole is appended as the last body.

    Args:
        num_stars: Number of stars (the black hole is extra)
        radius: Galaxy radius
        x, y: Galaxy centre
        rng: Random number generator for reproducible galaxies

    Returns:
        List of num_stars + 1 bodies
    """
    if num_stars < 0:
        raise ValidationError(f"num_stars must be >= 0, got {num_stars}")
    if rng is None:
        rng = random.Random()

    galaxy: Galaxy = []
    for _ in range(num_stars):
        dist = (rng.random() + 1.0) / 2.0 * radius
        angle = rng.random() * 2 * math.pi

        speed = 0.5 * math.sqrt(G * BLACK_HOLE_MASS / dist)
        galaxy.append(
            Body(
                position=Vector2(x + dist * math.cos(angle), y + dist * math.sin(angle)),
                velocity=Vector2(
                    speed * math.cos(angle + math.pi / 2),
                    speed * math.sin(angle + math.pi / 2),
                ),
                mass=SOLAR_MASS,
                radius=SOLAR_RADIUS,
                color=(255, 255, 255),
            )
        )

    galaxy.append(
        Body(
            position=Vector2(x, y),
            mass=BLACK_HOLE_MASS,
            radius=10 * SOLAR_RADIUS,
            color=(0, 0, 255),
        )
    )
    return galaxy


def push_galaxy(galaxy: Sequence[Body], vx: float, vy: float) -> Galaxy:
    """Return a copy of a galaxy with (vx, vy) added to every velocity."""
    push = Vector2(vx, vy)
    return [body.replace(velocity=body.velocity + push) for body in galaxy]


def initialize_universe(galaxies: Sequence[Sequence[Body]], width: float) -> Universe:
    """Concatenate galaxies into a single snapshot of the given width."""
    width = validate_region_width(width)
    bodies = [body for galaxy in galaxies for body in galaxy]
    return Universe(tuple(bodies), width)


def jupiter_system() -> Galaxy:
    """
    Jupiter with Io, Europa, Ganymede and Callisto.

    Jupiter sits at (2e9, 2e9) metres at rest; the moons are on circular-ish
    orbits at their mean distances. Intended for a 4e9 m wide region.
    """
    cx, cy = 2.0e9, 2.0e9
    return [
        Body(
            position=(cx, cy),
            velocity=(0.0, 0.0),
            mass=1.898e27,
            radius=71000000,
            color=(223, 227, 202),
        ),
        # Io
        Body(
            position=(cx - 421600000, cy),
            velocity=(0.0, -17320.0),
            mass=8.9319e22,
            radius=18210000,
            color=(249, 249, 165),
        ),
        # Europa
        Body(
            position=(cx, cy + 670900000),
            velocity=(-13740.0, 0.0),
            mass=4.7998e22,
            radius=15690000,
            color=(132, 83, 52),
        ),
        # Ganymede
        Body(
            position=(cx + 1070400000, cy),
            velocity=(0.0, 10870.0),
            mass=1.4819e23,
            radius=26310000,
            color=(76, 0, 153),
        ),
        # Callisto
        Body(
            position=(cx, cy - 1882700000),
            velocity=(8200.0, 0.0),
            mass=1.0759e23,
            radius=24100000,
            color=(0, 153, 76),
        ),
    ]


# -----------------------------------------------------------------------------
# Scenarios
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Scenario:
    """
    A named initial condition with its run parameters.

    Attributes:
        name: Scenario name
        width: Region width
        steps: Number of steps
        dt: Simulated seconds per step
        theta: Barnes-Hut opening angle
        frequency: Render every Kth snapshot
        scaling_factor: Display radius multiplier
        factory: Callable building the bodies from a random generator
    """

    name: str
    width: float
    steps: int
    dt: float
    theta: float
    frequency: int
    scaling_factor: float
    factory: Callable[[random.Random], list[Body]]

    def build(self, rng: Optional[random.Random] = None) -> Universe:
        """Create the initial snapshot for this scenario."""
        if rng is None:
            rng = random.Random()
        return Universe(tuple(self.factory(rng)), self.width)


def _two_galaxies(rng: random.Random) -> list[Body]:
    g0 = initialize_galaxy(500, 4e21, 7e22, 2e22, rng)
    g1 = initialize_galaxy(500, 4e21, 2e22, 7e22, rng)
    return g0 + g1


def _colliding_galaxies(rng: random.Random) -> list[Body]:
    g0 = push_galaxy(initialize_galaxy(500, 4e21, 7e22, 2e22, rng), -1e3, 1e3)
    g1 = push_galaxy(initialize_galaxy(500, 4e21, 2e22, 7e22, rng), 1e3, -1e3)
    return g0 + g1


def _jupiter(rng: random.Random) -> list[Body]:
    return jupiter_system()


PRESETS: dict[str, Scenario] = {
    "galaxy": Scenario(
        name="galaxy",
        width=1.0e23,
        steps=200000,
        dt=2e14,
        theta=0.5,
        frequency=1000,
        scaling_factor=1e11,
        factory=_two_galaxies,
    ),
    "jupiter": Scenario(
        name="jupiter",
        width=4.0e9,
        steps=1000000,
        dt=1.0,
        theta=0.5,
        frequency=10000,
        scaling_factor=1.0,
        factory=_jupiter,
    ),
    "collision": Scenario(
        name="collision",
        width=1.0e23,
        steps=200000,
        dt=2e14,
        theta=0.5,
        frequency=1000,
        scaling_factor=1e11,
        factory=_colliding_galaxies,
    ),
}


def build_scenario(name: str, rng: Optional[random.Random] = None) -> Universe:
    """
    Build the initial snapshot of a named preset.

    Raises:
        ValidationError: If the name is unknown
    """
    try:
        scenario = PRESETS[name]
    except KeyError:
        raise ValidationError(
            f"Unknown scenario {name!r}, expected one of {sorted(PRESETS)}"
        ) from None
    return scenario.build(rng)


__all__ = [
    "Galaxy",
    "initialize_galaxy",
    "push_galaxy",
    "initialize_universe",
    "jupiter_system",
    "Scenario",
    "PRESETS",
    "build_scenario",
]
