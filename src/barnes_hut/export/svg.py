"""
SVG export for simulation snapshots.

Renders each snapshot as one SVG frame: bodies become filled circles in their
own colour on a square canvas, with the y axis flipped so that North is up.
Radii are scaled by a display factor because astronomical bodies are tiny
compared to the distances between them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union
from xml.sax.saxutils import escape

from ..types import Body, Universe
from ..validation import ValidationError, validate_frequency

#: Smallest radius drawn, in canvas pixels
MIN_PIXEL_RADIUS = 0.5


def to_svg(
    universe: Universe,
    *,
    canvas_width: int = 1000,
    scaling_factor: float = 1.0,
    background: Optional[str] = "#000000",
    min_radius: float = MIN_PIXEL_RADIUS,
) -> str:
    """
    Export a snapshot to SVG format.

    Args:
        universe: Snapshot to draw
        canvas_width: Width and height of the canvas in pixels (default 1000)
        scaling_factor: Multiplier applied to body radii (default 1.0)
        background: Background color (default black, None for transparent)
        min_radius: Smallest circle radius drawn, in pixels

    Returns:
        SVG string representation of the snapshot
    """
    if canvas_width <= 0:
        raise ValidationError(f"canvas_width must be positive, got {canvas_width}")

    scale = canvas_width / universe.width

    svg_parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{canvas_width}" height="{canvas_width}" '
        f'viewBox="0 0 {canvas_width} {canvas_width}">'
    ]

    if background:
        svg_parts.append(f'  <rect width="100%" height="100%" fill="{escape(background)}"/>')

    svg_parts.append(f'  <g class="bodies" data-time="{universe.time:.6g}">')
    for _, body in universe.present():
        svg_parts.append(_render_body(body, scale, canvas_width, scaling_factor, min_radius))
    svg_parts.append("  </g>")

    svg_parts.append("</svg>")

    return "\n".join(svg_parts)


def to_svg_frames(
    trajectory: Sequence[Universe],
    *,
    frequency: int = 1,
    canvas_width: int = 1000,
    scaling_factor: float = 1.0,
    background: Optional[str] = "#000000",
) -> list[str]:
    """
    Render every frequency-th snapshot of a trajectory.

    Args:
        trajectory: Ordered snapshots
        frequency: Sampling interval, 1 renders every snapshot
        canvas_width: Canvas width in pixels
        scaling_factor: Multiplier applied to body radii
        background: Background color

    Returns:
        SVG strings, one per sampled snapshot
    """
    frequency = validate_frequency(frequency)
    return [
        to_svg(
            universe,
            canvas_width=canvas_width,
            scaling_factor=scaling_factor,
            background=background,
        )
        for i, universe in enumerate(trajectory)
        if i % frequency == 0
    ]


def write_svg_frames(
    frames: Sequence[str],
    directory: Union[str, Path],
    prefix: str = "frame",
) -> list[Path]:
    """
    Write frames to numbered files (prefix_00000.svg, ...).

    Returns:
        Paths of the written files
    """
    out = Path(directory)
    out.mkdir(parents=True, exist_ok=True)
    digits = max(5, len(str(len(frames))))
    paths = []
    for i, frame in enumerate(frames):
        path = out / f"{prefix}_{i:0{digits}d}.svg"
        path.write_text(frame, encoding="utf-8")
        paths.append(path)
    return paths


def _render_body(
    body: Body,
    scale: float,
    canvas_width: int,
    scaling_factor: float,
    min_radius: float,
) -> str:
    """Render a body as a circle."""
    cx = body.position.x * scale
    cy = canvas_width - body.position.y * scale
    r = max(min_radius, body.radius * scaling_factor * scale)
    red, green, blue = body.color
    return (
        f'    <circle cx="{cx:.1f}" cy="{cy:.1f}" r="{r:.1f}" '
        f'fill="rgb({red},{green},{blue})"/>'
    )


__all__ = ["to_svg", "to_svg_frames", "write_svg_frames"]
