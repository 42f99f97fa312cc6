"""
Base classes for simulation drivers.

This module provides abstract base classes that define the common interface
and shared functionality for simulation drivers:

- BaseSimulation: Abstract base with event system, body/region management
- IterativeSimulation: Step-by-step driver with tick loop and stop()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

if TYPE_CHECKING:
    from typing_extensions import Self

from .types import Body, BodyLike, Event, EventType, Region, Universe
from .validation import (
    OutOfRegionError,
    ValidationError,
    validate_bodies,
    validate_region_width,
    validate_steps,
)


class BaseSimulation(ABC):
    """
    Abstract base class for simulation drivers.

    Provides shared infrastructure:
    - Event system (start/tick/end events)
    - Body set management via properties
    - Region width management

    Example:
        sim = SomeSimulation(
            bodies=bodies,
            width=1.0e23,
        )
        sim.run()

        # Access results via properties
        for i, body in sim.current.present():
            print(f"Body {i}: {body.position}")
    """

    def __init__(
        self,
        *,
        bodies: Optional[Sequence[BodyLike]] = None,
        width: float = 1.0,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize simulation with configuration.

        Args:
            bodies: Initial bodies (Body objects, dicts of Body fields, or None)
            width: Side length of the square region [0, width]^2
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        self._bodies: list[Optional[Body]] = []
        self._width: float = 1.0
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}

        # Set initial values via properties (triggers normalization)
        self.width = width
        if bodies is not None:
            self.bodies = bodies

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def bodies(self) -> list[Optional[Body]]:
        """Get the initial body set."""
        return self._bodies

    @bodies.setter
    def bodies(self, value: Sequence[BodyLike]) -> None:
        """
        Set bodies from a sequence of Body objects, dicts, or None.

        Dicts and generic objects are converted first, so omitted fields take
        the Body defaults (mass 1.0).

        Raises:
            ValidationError: If an entry cannot be converted to a valid Body.
                The message names the offending index.
        """
        bodies: list[Optional[Body]] = []
        for i, body_data in enumerate(value):
            try:
                bodies.append(_to_body(body_data))
            except ValidationError as exc:
                raise type(exc)(f"Body {i}: {exc}") from exc
        validate_bodies(bodies, strict=True)
        self._bodies = bodies

    @property
    def width(self) -> float:
        """Get the region width."""
        return self._width

    @width.setter
    def width(self, value: float) -> None:
        """
        Set the region width.

        Raises:
            DegenerateRegionError: If width is not positive.
        """
        self._width = validate_region_width(value)

    @property
    def region(self) -> Region:
        """The simulation region anchored at the origin."""
        return Region(0.0, 0.0, self._width)

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a simulation event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> Self:
        """
        Validate current configuration.

        Checks that every present body lies inside the region. Called
        automatically by run() but can be called early for fail-fast
        behavior.

        Returns:
            self (for chaining)

        Raises:
            OutOfRegionError: If a body lies outside [0, width]^2.
        """
        region = self.region
        for i, body in enumerate(self._bodies):
            if body is not None and not region.contains(body.position):
                raise OutOfRegionError(
                    f"Body {i} at ({body.position.x}, {body.position.y}) lies outside "
                    f"[0, {self._width}]^2"
                )
        return self

    def _initial_universe(self) -> Universe:
        return Universe(tuple(self._bodies), self._width)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the simulation.

        Returns:
            self (for chaining)
        """
        pass

    def stop(self) -> Self:
        """
        Stop the simulation.

        Returns:
            self (for chaining)
        """
        return self


def _to_body(body_data: BodyLike) -> Optional[Body]:
    if body_data is None or isinstance(body_data, Body):
        return body_data
    if isinstance(body_data, dict):
        return Body(**body_data)
    # Generic object - copy known attributes
    kwargs = {
        attr: getattr(body_data, attr)
        for attr in ["position", "velocity", "acceleration", "mass", "radius", "color"]
        if hasattr(body_data, attr)
    }
    return Body(**kwargs)


class IterativeSimulation(BaseSimulation):
    """
    Base class for step-by-step simulation drivers.

    Provides:
    - Step count management
    - Tick-based iteration loop
    - Cooperative stop between steps

    Example:
        sim = SomeSimulation(
            bodies=bodies,
            width=4.0e9,
            steps=1000,
        )
        sim.run()
    """

    def __init__(
        self,
        *,
        bodies: Optional[Sequence[BodyLike]] = None,
        width: float = 1.0,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        # IterativeSimulation-specific parameters
        steps: int = 100,
    ) -> None:
        """
        Initialize iterative simulation.

        Args:
            bodies: Initial bodies
            width: Side length of the square region
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
            steps: Number of steps run() performs
        """
        super().__init__(
            bodies=bodies,
            width=width,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )
        self._steps: int = validate_steps(steps)
        self._running: bool = False

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def steps(self) -> int:
        """Get the number of steps run() performs."""
        return self._steps

    @steps.setter
    def steps(self, value: int) -> None:
        """Set the number of steps (>= 0)."""
        self._steps = validate_steps(value)

    @property
    def running(self) -> bool:
        """True while run() is iterating."""
        return self._running

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def tick(self) -> bool:
        """
        Perform one step of the simulation.

        Returns:
            True if the simulation is done, False if more steps are possible.
        """
        pass

    def kick(self) -> None:
        """Run tick() repeatedly until done, stopped, or steps exhausted."""
        for _ in range(self._steps):
            if not self._running or self.tick():
                break

    def stop(self) -> Self:
        """Stop the simulation after the current step."""
        self._running = False
        return self


__all__ = [
    "BaseSimulation",
    "IterativeSimulation",
]
