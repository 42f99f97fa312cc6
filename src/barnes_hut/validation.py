"""
Input validation utilities for the simulation.

Provides centralized validation functions for masses, region widths, time
steps and the Barnes-Hut accuracy parameter. Raises descriptive exceptions
on invalid input so that bad values are rejected when a body, region, tree
or simulator is constructed rather than discovered mid-traversal.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

MAX_DEPTH_LIMIT = 512


class ValidationError(ValueError):
    """Base exception for simulation validation errors."""

    pass


class InvalidMassError(ValidationError):
    """Raised when a body has a non-positive or non-finite mass."""

    pass


class DegenerateRegionError(ValidationError):
    """Raised when a region has a non-positive or non-finite width."""

    pass


class OutOfRegionError(ValidationError):
    """Raised when a body lies outside the region it is inserted into."""

    pass


class InvalidThetaError(ValidationError):
    """Raised when the Barnes-Hut accuracy parameter is invalid."""

    pass


class InvalidTimeStepError(ValidationError):
    """Raised when a time step is negative or non-finite."""

    pass


class CoincidentBodiesWarning(UserWarning):
    """Warning issued when bodies at identical coordinates were merged."""

    pass


class DepthLimitWarning(UserWarning):
    """Warning issued when the subdivision depth cap forced a merge."""

    pass


def validate_mass(mass: float) -> float:
    """
    Validate a body mass.

    Args:
        mass: Mass value

    Returns:
        Validated mass as float

    Raises:
        InvalidMassError: If mass is not a finite positive number
    """
    value = float(mass)
    if not math.isfinite(value) or value <= 0:
        raise InvalidMassError(f"Body mass must be positive, got {mass}")
    return value


def validate_radius(radius: float) -> float:
    """
    Validate a display radius.

    Raises:
        ValidationError: If radius is negative or not finite
    """
    value = float(radius)
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"Body radius must be >= 0, got {radius}")
    return value


def validate_color(color: Sequence[int]) -> tuple[int, int, int]:
    """
    Validate an RGB colour triple.

    Args:
        color: (red, green, blue) sequence of ints in [0, 255]

    Returns:
        Validated (red, green, blue) tuple

    Raises:
        ValidationError: If the colour is malformed
    """
    if len(color) != 3:
        raise ValidationError(f"Color must have 3 components (r, g, b), got {len(color)}")

    r, g, b = (int(c) for c in color)
    for name, value in (("red", r), ("green", g), ("blue", b)):
        if value < 0 or value > 255:
            raise ValidationError(f"Color {name} component must be in [0, 255], got {value}")
    return r, g, b


def validate_region_width(width: float) -> float:
    """
    Validate a region (universe) width.

    Args:
        width: Side length of the square region

    Returns:
        Validated width as float

    Raises:
        DegenerateRegionError: If width is not a finite positive number
    """
    value = float(width)
    if not math.isfinite(value) or value <= 0:
        raise DegenerateRegionError(f"Region width must be positive, got {width}")
    return value


def validate_theta(theta: float) -> float:
    """
    Validate the Barnes-Hut accuracy parameter.

    theta = 0 forces exact pairwise summation; larger values approximate
    more aggressively.

    Raises:
        InvalidThetaError: If theta is negative or not finite
    """
    value = float(theta)
    if not math.isfinite(value) or value < 0:
        raise InvalidThetaError(f"theta must be >= 0, got {theta}")
    return value


def validate_time_step(dt: float) -> float:
    """
    Validate a time step in simulated seconds.

    Raises:
        InvalidTimeStepError: If dt is negative or not finite
    """
    value = float(dt)
    if not math.isfinite(value) or value < 0:
        raise InvalidTimeStepError(f"time step must be >= 0, got {dt}")
    return value


def validate_steps(steps: int) -> int:
    """
    Validate the number of simulation steps.

    Raises:
        ValidationError: If steps is not an integer or steps < 0
    """
    steps = _require_int(steps, "steps")
    if steps < 0:
        raise ValidationError(f"steps must be >= 0, got {steps}")
    return steps


def validate_max_depth(max_depth: int) -> int:
    """
    Validate the quadtree subdivision depth cap.

    Depth is bounded above so that force traversal, which recurses once per
    level, stays well inside the interpreter recursion limit.

    Raises:
        ValidationError: If max_depth is not an integer in [1, MAX_DEPTH_LIMIT]
    """
    max_depth = _require_int(max_depth, "max_depth")
    if max_depth < 1 or max_depth > MAX_DEPTH_LIMIT:
        raise ValidationError(f"max_depth must be in [1, {MAX_DEPTH_LIMIT}], got {max_depth}")
    return max_depth


def validate_frequency(frequency: int) -> int:
    """
    Validate a snapshot sampling frequency (render every Kth step).

    Raises:
        ValidationError: If frequency is not an integer or frequency < 1
    """
    frequency = _require_int(frequency, "frequency")
    if frequency < 1:
        raise ValidationError(f"frequency must be >= 1, got {frequency}")
    return frequency


def validate_bodies(
    bodies: Sequence[Any],
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that every present body has a positive mass.

    Absent entries (None) are skipped; they stand for bodies removed in an
    earlier step.

    Args:
        bodies: Sequence of Body objects or None
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (body_index, issue_description) tuples

    Raises:
        InvalidMassError: If strict=True and invalid masses found
    """
    issues: list[tuple[int, str]] = []

    for i, body in enumerate(bodies):
        if body is None:
            continue
        mass = _get_mass(body)
        if mass is None:
            issues.append((i, f"Body {i}: missing mass"))
        elif not math.isfinite(mass) or mass <= 0:
            issues.append((i, f"Body {i}: mass {mass} is not positive"))

    if strict and issues:
        msg = "Invalid body masses:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidMassError(msg)

    return issues


def _require_int(value: Any, name: str) -> int:
    """Return value as an int, rejecting non-integral numbers."""
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{name} must be an integer, got {value!r}") from None
    if as_int != value:
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    return as_int


def _get_mass(obj: Any) -> Optional[float]:
    """Extract mass from an object with a mass attribute or a dict."""
    if hasattr(obj, "mass"):
        val = getattr(obj, "mass", None)
    elif isinstance(obj, dict):
        val = obj.get("mass")
    else:
        val = None

    if val is None:
        return None
    return float(val)


__all__ = [
    "ValidationError",
    "InvalidMassError",
    "DegenerateRegionError",
    "OutOfRegionError",
    "InvalidThetaError",
    "InvalidTimeStepError",
    "CoincidentBodiesWarning",
    "DepthLimitWarning",
    "validate_mass",
    "validate_radius",
    "validate_color",
    "validate_region_width",
    "validate_theta",
    "validate_time_step",
    "validate_steps",
    "validate_max_depth",
    "validate_frequency",
    "validate_bodies",
]
