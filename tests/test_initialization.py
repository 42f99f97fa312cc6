"""Tests for initial-condition generators and presets."""

import math
import random

import pytest

from barnes_hut import (
    BLACK_HOLE_MASS,
    PRESETS,
    SOLAR_MASS,
    G,
    ValidationError,
    Vector2,
    build_scenario,
    initialize_galaxy,
    initialize_universe,
    jupiter_system,
    push_galaxy,
)


class TestInitializeGalaxy:
    """Tests for the galaxy generator."""

    def test_star_count_and_black_hole(self):
        """num_stars stars followed by a black hole at the centre."""
        galaxy = initialize_galaxy(50, 100.0, 500.0, 400.0, random.Random(1))

        assert len(galaxy) == 51
        hole = galaxy[-1]
        assert hole.position == Vector2(500.0, 400.0)
        assert hole.velocity == Vector2(0.0, 0.0)
        assert hole.mass == BLACK_HOLE_MASS
        assert hole.color == (0, 0, 255)
        assert all(star.mass == SOLAR_MASS for star in galaxy[:-1])

    def test_stars_in_annulus(self):
        """Stars lie between half the radius and the radius."""
        galaxy = initialize_galaxy(200, 100.0, 500.0, 500.0, random.Random(2))
        centre = Vector2(500.0, 500.0)
        for star in galaxy[:-1]:
            d = star.position.distance_to(centre)
            assert 50.0 - 1e-9 <= d <= 100.0 + 1e-9

    def test_tangential_velocity(self):
        """Stars move perpendicular to the radius at half orbital speed."""
        galaxy = initialize_galaxy(20, 1e20, 5e20, 5e20, random.Random(3))
        centre = Vector2(5e20, 5e20)
        for star in galaxy[:-1]:
            offset = star.position - centre
            dist = offset.norm()
            speed = star.velocity.norm()
            assert speed == pytest.approx(0.5 * math.sqrt(G * BLACK_HOLE_MASS / dist))
            assert offset.dot(star.velocity) == pytest.approx(0.0, abs=1e-6 * dist * speed)

    def test_reproducible(self):
        """The same seed gives the same galaxy."""
        a = initialize_galaxy(10, 1.0, 5.0, 5.0, random.Random(42))
        b = initialize_galaxy(10, 1.0, 5.0, 5.0, random.Random(42))
        assert a == b

    def test_negative_count_rejected(self):
        """A negative star count raises."""
        with pytest.raises(ValidationError):
            initialize_galaxy(-1, 1.0, 0.0, 0.0)


class TestGalaxyHelpers:
    """Tests for push_galaxy and initialize_universe."""

    def test_push_adds_velocity(self):
        """Every body gets the same bulk velocity added."""
        galaxy = initialize_galaxy(5, 1.0, 5.0, 5.0, random.Random(0))
        pushed = push_galaxy(galaxy, 3.0, -2.0)

        assert len(pushed) == len(galaxy)
        for before, after in zip(galaxy, pushed):
            assert after.velocity == before.velocity + Vector2(3.0, -2.0)
            assert after.position == before.position

    def test_initialize_universe_concatenates(self):
        """Galaxies are combined in order."""
        g0 = initialize_galaxy(3, 1.0, 2.0, 2.0, random.Random(0))
        g1 = initialize_galaxy(4, 1.0, 7.0, 7.0, random.Random(1))
        universe = initialize_universe([g0, g1], 10.0)

        assert len(universe) == 9
        assert universe.bodies == tuple(g0 + g1)
        assert universe.width == 10.0
        assert universe.time == 0.0


class TestPresets:
    """Tests for the named scenarios."""

    def test_preset_names(self):
        """The three modes are available."""
        assert set(PRESETS) == {"galaxy", "jupiter", "collision"}

    def test_jupiter_system(self):
        """Jupiter at the centre and four moons inside the region."""
        bodies = jupiter_system()
        assert len(bodies) == 5
        assert bodies[0].mass == 1.898e27
        universe = build_scenario("jupiter")
        assert universe.width == 4.0e9
        assert all(universe.region.contains(b.position) for _, b in universe.present())

    def test_galaxy_preset_inside_region(self):
        """Two 500-star galaxies fit in the region."""
        universe = build_scenario("galaxy", random.Random(5))
        assert len(universe) == 1002
        assert all(universe.region.contains(b.position) for _, b in universe.present())

    def test_collision_preset_pushed(self):
        """Collision galaxies get opposite bulk velocities."""
        rng_a, rng_b = random.Random(9), random.Random(9)
        plain = build_scenario("galaxy", rng_a)
        collision = build_scenario("collision", rng_b)

        hole0 = collision.bodies[500]
        hole1 = collision.bodies[1001]
        assert hole0.velocity == Vector2(-1e3, 1e3)
        assert hole1.velocity == Vector2(1e3, -1e3)
        assert collision.bodies[0].position == plain.bodies[0].position

    def test_unknown_scenario(self):
        """Unknown names raise ValidationError."""
        with pytest.raises(ValidationError, match="Unknown scenario"):
            build_scenario("andromeda")
