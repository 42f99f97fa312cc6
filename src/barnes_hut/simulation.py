"""
Barnes-Hut N-body simulation driver.

Each step rebuilds a quadtree from the current snapshot, evaluates the net
force on every present body against the read-only tree, integrates each
body and removes those that leave the square region:

    Universe(t) -> SpatialTree(t) -> forces -> integration -> Universe(t+1)

Steps are memoryless: a step depends only on the immediately preceding
snapshot. Tree construction is sequential; force evaluation may be fanned
out across a concurrent.futures executor since the tree is never written
while forces are computed.
"""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable, Optional, Sequence

from .base import IterativeSimulation
from .constants import DEFAULT_MAX_DEPTH, DEFAULT_THETA, G
from .physics.integration import advance
from .spatial.quadtree import SpatialTree
from .types import Body, BodyLike, Event, EventType, Universe, Vector2
from .validation import (
    ValidationError,
    validate_max_depth,
    validate_steps,
    validate_theta,
    validate_time_step,
)


def compute_forces(
    tree: SpatialTree,
    bodies: Sequence[Body],
    theta: float = DEFAULT_THETA,
    gravitational_constant: float = G,
    executor: Optional[Executor] = None,
) -> list[Vector2]:
    """
    Evaluate the net force on each body against a built tree.

    Args:
        tree: Quadtree built from the snapshot the bodies belong to
        bodies: Target bodies
        theta: Barnes-Hut opening angle
        gravitational_constant: G in consistent units
        executor: Optional executor to fan force evaluation out per body

    Returns:
        Forces in the same order as bodies
    """

    def force_on(body: Body) -> Vector2:
        return tree.calculate_force(body, theta, gravitational_constant)

    if executor is None:
        return [force_on(body) for body in bodies]
    # map() returns results in input order and blocks until all are done
    return list(executor.map(force_on, bodies))


def update_universe(
    universe: Universe,
    tree: SpatialTree,
    dt: float,
    theta: float = DEFAULT_THETA,
    gravitational_constant: float = G,
    executor: Optional[Executor] = None,
) -> Universe:
    """
    Advance a snapshot by one step using an already built tree.

    Bodies that leave [0, width]^2 become None; existing None slots stay
    None, so the result has the same cardinality as the input.
    """
    present = list(universe.present())
    forces = compute_forces(
        tree,
        [body for _, body in present],
        theta,
        gravitational_constant,
        executor,
    )

    bodies: list[Optional[Body]] = list(universe.bodies)
    for (i, body), force in zip(present, forces):
        bodies[i] = advance(body, force, dt, universe.width)

    return Universe(tuple(bodies), universe.width, universe.time + dt)


def step(
    universe: Universe,
    dt: float,
    theta: float = DEFAULT_THETA,
    gravitational_constant: float = G,
    max_depth: int = DEFAULT_MAX_DEPTH,
    executor: Optional[Executor] = None,
) -> Universe:
    """
    Advance a snapshot by one time step.

    Args:
        universe: Current snapshot
        dt: Time step in simulated seconds (0 recomputes accelerations only)
        theta: Barnes-Hut opening angle
        gravitational_constant: G in consistent units
        max_depth: Quadtree subdivision depth cap
        executor: Optional executor for parallel force evaluation

    Returns:
        The next snapshot

    Raises:
        InvalidTimeStepError: If dt is negative
        InvalidThetaError: If theta is negative
        OutOfRegionError: If a present body lies outside the region
    """
    dt = validate_time_step(dt)
    theta = validate_theta(theta)
    tree = SpatialTree.build(universe.bodies, universe.region, max_depth=max_depth)
    return update_universe(universe, tree, dt, theta, gravitational_constant, executor)


def barnes_hut(
    initial: Universe,
    steps: int,
    dt: float,
    theta: float = DEFAULT_THETA,
    gravitational_constant: float = G,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Universe]:
    """
    Run a simulation and return the full trajectory.

    Returns:
        steps + 1 snapshots, the initial one first
    """
    steps = validate_steps(steps)
    trajectory = [initial]
    for _ in range(steps):
        trajectory.append(
            step(trajectory[-1], dt, theta, gravitational_constant, max_depth)
        )
    return trajectory


class Simulator(IterativeSimulation):
    """
    Barnes-Hut gravitational N-body simulator.

    Example:
        sim = Simulator(
            bodies=[
                Body(position=(1.0e6, 2.0e6), mass=5e24),
                Body(position=(2.0e6, 2.0e6), mass=5e24),
            ],
            width=4.0e6,
            dt=1.0,
            theta=0.5,
            steps=100,
        )
        sim.run()

        for snapshot in sim.trajectory:
            print(snapshot.time, snapshot.active_count)
    """

    def __init__(
        self,
        *,
        bodies: Optional[Sequence[BodyLike]] = None,
        width: float = 1.0,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        # IterativeSimulation parameters
        steps: int = 100,
        # Simulator-specific parameters
        dt: float = 1.0,
        theta: float = DEFAULT_THETA,
        gravitational_constant: float = G,
        max_depth: int = DEFAULT_MAX_DEPTH,
        workers: Optional[int] = None,
    ) -> None:
        """
        Initialize the simulator.

        Args:
            bodies: Initial bodies
            width: Side length of the square region [0, width]^2
            on_start: Callback for start event
            on_tick: Callback for tick event, fired after every step
            on_end: Callback for end event
            steps: Number of steps run() performs
            dt: Simulated seconds per step
            theta: Barnes-Hut opening angle (0 = exact)
            gravitational_constant: G in consistent units
            max_depth: Quadtree subdivision depth cap
            workers: Threads for force evaluation; None or 1 runs sequentially
        """
        super().__init__(
            bodies=bodies,
            width=width,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
            steps=steps,
        )

        self._dt: float = validate_time_step(dt)
        self._theta: float = validate_theta(theta)
        self._gravitational_constant: float = float(gravitational_constant)
        self._max_depth: int = validate_max_depth(max_depth)
        self._workers: Optional[int] = None
        self.workers = workers

        # Internal state
        self._trajectory: list[Universe] = []
        self._executor: Optional[Executor] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def dt(self) -> float:
        """Get simulated seconds per step."""
        return self._dt

    @dt.setter
    def dt(self, value: float) -> None:
        """Set simulated seconds per step (>= 0)."""
        self._dt = validate_time_step(value)

    @property
    def theta(self) -> float:
        """Get Barnes-Hut theta parameter (accuracy)."""
        return self._theta

    @theta.setter
    def theta(self, value: float) -> None:
        """Set Barnes-Hut theta parameter (>= 0)."""
        self._theta = validate_theta(value)

    @property
    def gravitational_constant(self) -> float:
        """Get the gravitational constant."""
        return self._gravitational_constant

    @gravitational_constant.setter
    def gravitational_constant(self, value: float) -> None:
        """Set the gravitational constant."""
        self._gravitational_constant = float(value)

    @property
    def max_depth(self) -> int:
        """Get the quadtree subdivision depth cap."""
        return self._max_depth

    @max_depth.setter
    def max_depth(self, value: int) -> None:
        """Set the quadtree subdivision depth cap."""
        self._max_depth = validate_max_depth(value)

    @property
    def workers(self) -> Optional[int]:
        """Get the number of force-evaluation threads."""
        return self._workers

    @workers.setter
    def workers(self, value: Optional[int]) -> None:
        """Set the number of force-evaluation threads (None = sequential)."""
        if value is not None and value < 1:
            raise ValidationError(f"workers must be >= 1, got {value}")
        self._workers = int(value) if value is not None else None

    @property
    def trajectory(self) -> list[Universe]:
        """Snapshots produced so far, the initial one first."""
        return self._trajectory

    @property
    def current(self) -> Universe:
        """The most recent snapshot."""
        if not self._trajectory:
            return self._initial_universe()
        return self._trajectory[-1]

    @property
    def step_count(self) -> int:
        """Number of steps performed."""
        return max(0, len(self._trajectory) - 1)

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def run(self, **kwargs: Any) -> Simulator:
        """
        Run the simulation for the configured number of steps.

        Keyword Args:
            steps: Override the configured step count for this run

        Returns:
            self for chaining
        """
        self.validate()
        if "steps" in kwargs:
            self.steps = kwargs["steps"]

        self._trajectory = [self._initial_universe()]
        self._running = True

        self.trigger({"type": EventType.start, "step": 0, "time": 0.0})

        if self._workers is not None and self._workers > 1:
            with ThreadPoolExecutor(max_workers=self._workers) as executor:
                self._executor = executor
                try:
                    self.kick()
                finally:
                    self._executor = None
        else:
            self.kick()

        self._running = False

        current = self.current
        self.trigger(
            {
                "type": EventType.end,
                "step": self.step_count,
                "time": current.time,
                "active": current.active_count,
            }
        )
        return self

    def tick(self) -> bool:
        """
        Perform one simulation step.

        Returns:
            False; a simulation only ends when its step count is exhausted or
            stop() is called.
        """
        if not self._trajectory:
            self._trajectory = [self._initial_universe()]

        previous = self._trajectory[-1]
        tree = SpatialTree.build(previous.bodies, previous.region, max_depth=self._max_depth)
        current = update_universe(
            previous,
            tree,
            self._dt,
            self._theta,
            self._gravitational_constant,
            self._executor,
        )
        self._trajectory.append(current)

        self.trigger(
            {
                "type": EventType.tick,
                "step": self.step_count,
                "time": current.time,
                "active": current.active_count,
                "removed": previous.active_count - current.active_count,
                "merged": tree.stats.merged + tree.stats.depth_limited,
            }
        )
        return False


__all__ = [
    "compute_forces",
    "update_universe",
    "step",
    "barnes_hut",
    "Simulator",
]
