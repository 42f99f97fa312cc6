"""
Export functionality for simulation snapshots.

Example usage:
    from barnes_hut import Simulator
    from barnes_hut.export import to_svg_frames, write_svg_frames

    sim = Simulator(bodies=bodies, width=4.0e9, dt=1.0, steps=1000).run()

    frames = to_svg_frames(sim.trajectory, frequency=100, scaling_factor=5.0)
    write_svg_frames(frames, "build/frames")
"""

from .svg import to_svg, to_svg_frames, write_svg_frames

__all__ = [
    "to_svg",
    "to_svg_frames",
    "write_svg_frames",
]
