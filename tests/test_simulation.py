"""Tests for the step driver and the Simulator class."""

import pytest

from barnes_hut import (
    Body,
    CoincidentBodiesWarning,
    Event,
    EventType,
    InvalidMassError,
    InvalidThetaError,
    InvalidTimeStepError,
    OutOfRegionError,
    Simulator,
    Universe,
    ValidationError,
    Vector2,
    barnes_hut,
    direct_force,
    jupiter_system,
    step,
    total_momentum,
)


def symmetric_pair():
    return [
        Body(position=(40.0, 50.0), mass=1.0),
        Body(position=(60.0, 50.0), mass=1.0),
    ]


class TestStep:
    """Tests for a single simulation step."""

    def test_escaping_body_removed(self):
        """A body leaving the region becomes None; the other is unaffected."""
        a = Body(position=(99.0, 50.0), velocity=(10.0, 0.0), mass=1.0)
        b = Body(position=(20.0, 50.0), mass=1.0)
        universe = Universe((a, b), width=100.0)

        after = step(universe, dt=1.0, theta=0.5, gravitational_constant=1e-20)

        assert after.bodies[0] is None
        assert after.bodies[1] is not None
        assert after.bodies[1].position == Vector2(20.0, 50.0)
        assert after.active_count == 1

    def test_absent_slots_preserved(self):
        """Existing None slots stay None and cardinality is unchanged."""
        universe = Universe(
            (Body(position=(10.0, 10.0)), None, Body(position=(90.0, 90.0))),
            width=100.0,
        )
        after = step(universe, dt=0.1, gravitational_constant=1.0)

        assert len(after) == 3
        assert after.bodies[1] is None
        assert after.active_count == 2

    def test_time_advances(self):
        """The snapshot time advances by dt."""
        universe = Universe(tuple(symmetric_pair()), width=100.0, time=2.0)
        assert step(universe, dt=0.5).time == 2.5

    def test_zero_time_step(self):
        """dt = 0 only recomputes accelerations."""
        bodies = (
            Body(position=(10.0, 10.0), velocity=(1.0, 0.0), mass=2.0),
            Body(position=(60.0, 30.0), velocity=(0.0, -1.0), mass=3.0),
            Body(position=(30.0, 80.0), mass=1.0),
        )
        universe = Universe(bodies, width=100.0)
        after = step(universe, dt=0.0, theta=0.0, gravitational_constant=1.0)

        for i, (before, now) in enumerate(zip(bodies, after.bodies)):
            expected = direct_force(bodies, i, gravitational_constant=1.0) / before.mass
            assert now.position == before.position
            assert now.velocity == before.velocity
            assert now.acceleration.x == pytest.approx(expected.x, rel=1e-12)
            assert now.acceleration.y == pytest.approx(expected.y, rel=1e-12)

    def test_input_not_mutated(self):
        """step() leaves the input snapshot untouched."""
        bodies = tuple(symmetric_pair())
        universe = Universe(bodies, width=100.0)
        step(universe, dt=1.0, gravitational_constant=1.0)
        assert universe.bodies == bodies
        assert universe.time == 0.0

    def test_out_of_region_rejected(self):
        """A present body outside the region is an error."""
        universe = Universe((Body(position=(150.0, 50.0)),), width=100.0)
        with pytest.raises(OutOfRegionError):
            step(universe, dt=1.0)

    def test_parameters_validated(self):
        """Negative dt or theta raise."""
        universe = Universe(tuple(symmetric_pair()), width=100.0)
        with pytest.raises(InvalidTimeStepError):
            step(universe, dt=-1.0)
        with pytest.raises(InvalidThetaError):
            step(universe, dt=1.0, theta=-0.5)

    def test_symmetric_pair_conserves_momentum(self):
        """Equal masses at rest attract symmetrically."""
        universe = Universe(tuple(symmetric_pair()), width=100.0)
        after = step(universe, dt=0.1, gravitational_constant=1.0)

        a, b = after.bodies
        assert a.velocity.x > 0
        assert b.velocity.x < 0
        momentum = total_momentum(after)
        assert momentum.x == pytest.approx(0.0, abs=1e-12)
        assert momentum.y == pytest.approx(0.0, abs=1e-12)


class TestBarnesHut:
    """Tests for the trajectory function."""

    def test_trajectory_length_and_times(self):
        """steps + 1 snapshots with times k * dt."""
        initial = Universe(tuple(symmetric_pair()), width=100.0)
        trajectory = barnes_hut(initial, steps=4, dt=0.25, gravitational_constant=1.0)

        assert len(trajectory) == 5
        assert trajectory[0] is initial
        assert [u.time for u in trajectory] == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])

    def test_zero_steps(self):
        """Zero steps returns only the initial snapshot."""
        initial = Universe(tuple(symmetric_pair()), width=100.0)
        assert barnes_hut(initial, steps=0, dt=1.0) == [initial]

    def test_negative_steps_rejected(self):
        """Negative step counts raise."""
        initial = Universe(tuple(symmetric_pair()), width=100.0)
        with pytest.raises(ValidationError):
            barnes_hut(initial, steps=-1, dt=1.0)


class TestSimulator:
    """Tests for the Simulator class."""

    def test_run_produces_trajectory(self):
        """run() records steps + 1 snapshots."""
        sim = Simulator(
            bodies=symmetric_pair(),
            width=100.0,
            steps=5,
            dt=0.1,
            gravitational_constant=1.0,
        )
        result = sim.run()

        assert result is sim
        assert len(sim.trajectory) == 6
        assert sim.step_count == 5
        assert sim.current.time == pytest.approx(0.5)
        assert not sim.running

    def test_matches_barnes_hut(self):
        """The simulator agrees with the functional driver."""
        bodies = symmetric_pair()
        sim = Simulator(bodies=bodies, width=100.0, steps=3, dt=0.2, gravitational_constant=1.0)
        sim.run()

        expected = barnes_hut(
            Universe(tuple(bodies), width=100.0), steps=3, dt=0.2, gravitational_constant=1.0
        )
        assert sim.trajectory == expected

    def test_events(self):
        """start, tick and end fire with step information."""
        events = []
        sim = Simulator(
            bodies=symmetric_pair(),
            width=100.0,
            steps=3,
            dt=0.1,
            gravitational_constant=1.0,
            on_start=events.append,
            on_tick=events.append,
            on_end=events.append,
        )
        sim.run()

        types = [e["type"] for e in events]
        assert types == [EventType.start] + [EventType.tick] * 3 + [EventType.end]
        assert [e["step"] for e in events[1:4]] == [1, 2, 3]
        assert events[1]["active"] == 2
        assert events[1]["removed"] == 0
        assert events[-1]["step"] == 3
        assert events[-1]["time"] == pytest.approx(0.3)

    def test_on_registers_by_name(self):
        """on() accepts event names and chains."""
        ticks = []
        sim = Simulator(bodies=symmetric_pair(), width=100.0, steps=2)
        assert sim.on("tick", ticks.append) is sim
        sim.run()
        assert len(ticks) == 2

    def test_stop_from_callback(self):
        """stop() ends the run after the current step."""
        sim = None

        def on_tick(event):
            if event["step"] == 3:
                sim.stop()

        sim = Simulator(
            bodies=symmetric_pair(),
            width=100.0,
            steps=10,
            gravitational_constant=1e-6,
            on_tick=on_tick,
        )
        sim.run()
        assert sim.step_count == 3

    def test_steps_override(self):
        """run(steps=...) overrides the configured count."""
        sim = Simulator(bodies=symmetric_pair(), width=100.0, steps=10)
        sim.run(steps=2)
        assert sim.step_count == 2
        assert sim.steps == 2

    def test_removal_reported(self):
        """Tick events report removed bodies."""
        events = []
        sim = Simulator(
            bodies=[
                Body(position=(99.0, 50.0), velocity=(10.0, 0.0)),
                Body(position=(20.0, 50.0)),
            ],
            width=100.0,
            steps=1,
            gravitational_constant=1e-20,
            on_tick=events.append,
        )
        sim.run()
        assert events[0]["removed"] == 1
        assert events[0]["active"] == 1

    def test_merges_reported(self):
        """Coincident bodies warn and are counted in the tick event."""
        events = []
        sim = Simulator(
            bodies=[Body(position=(5.0, 5.0)), Body(position=(5.0, 5.0))],
            width=10.0,
            steps=1,
            on_tick=events.append,
        )
        with pytest.warns(CoincidentBodiesWarning):
            sim.run()
        assert events[0]["merged"] == 1
        assert events[0]["active"] == 2

    def test_threaded_matches_sequential(self):
        """Parallel force evaluation gives identical trajectories."""
        bodies = [
            Body(position=(10.0 + 7 * i, 20.0 + 5 * (i % 7)), mass=1.0 + i % 3)
            for i in range(12)
        ]
        sequential = Simulator(
            bodies=bodies, width=100.0, steps=4, dt=0.05, gravitational_constant=1.0
        ).run()
        threaded = Simulator(
            bodies=bodies, width=100.0, steps=4, dt=0.05, gravitational_constant=1.0, workers=2
        ).run()
        assert threaded.trajectory == sequential.trajectory

    def test_dict_bodies(self):
        """Bodies may be given as dicts of Body fields."""
        sim = Simulator(bodies=[{"position": (1.0, 1.0), "mass": 2.0}, None], width=10.0)
        assert sim.bodies[0] == Body(position=(1.0, 1.0), mass=2.0)
        assert sim.bodies[1] is None

    def test_dict_bodies_use_body_defaults(self):
        """Dicts are converted before validation, so mass defaults to 1.0."""
        sim = Simulator(bodies=[{"position": (1.0, 1.0)}], width=10.0)
        assert sim.bodies[0] == Body(position=(1.0, 1.0))
        assert sim.bodies[0].mass == 1.0

    def test_invalid_dict_body_names_index(self):
        """A dict with a bad mass is rejected with its index."""
        with pytest.raises(InvalidMassError, match="Body 1"):
            Simulator(bodies=[{"position": (1.0, 1.0)}, {"mass": 0.0}], width=10.0)

    def test_event_payload_fields(self):
        """Event payloads carry only simulation fields."""
        assert set(Event.__annotations__) == {
            "type",
            "step",
            "time",
            "active",
            "removed",
            "merged",
        }

    def test_out_of_region_rejected_on_run(self):
        """run() validates that bodies lie inside the region."""
        sim = Simulator(bodies=[Body(position=(200.0, 0.0))], width=100.0)
        with pytest.raises(OutOfRegionError, match="Body 0"):
            sim.run()

    @pytest.mark.parametrize(
        ("kwargs", "error"),
        [
            ({"dt": -1.0}, InvalidTimeStepError),
            ({"theta": -0.1}, InvalidThetaError),
            ({"workers": 0}, ValidationError),
            ({"steps": -1}, ValidationError),
            ({"steps": 2.7}, ValidationError),
            ({"max_depth": 0}, ValidationError),
        ],
    )
    def test_invalid_parameters(self, kwargs, error):
        """Invalid configuration raises at construction."""
        with pytest.raises(error):
            Simulator(bodies=symmetric_pair(), width=100.0, **kwargs)

    def test_current_before_run(self):
        """current is the initial snapshot before run()."""
        sim = Simulator(bodies=symmetric_pair(), width=100.0)
        assert sim.current.time == 0.0
        assert sim.step_count == 0


class TestJupiter:
    """Short run of the planetary preset."""

    def test_moons_stay_bound(self):
        """All five bodies stay in the region over a short run."""
        sim = Simulator(bodies=jupiter_system(), width=4.0e9, steps=20, dt=1.0)
        sim.run()

        final = sim.current
        assert final.active_count == 5
        jupiter = final.bodies[0]
        assert jupiter.position.distance_to(Vector2(2.0e9, 2.0e9)) < 1.0
        assert final.time == pytest.approx(20.0)
