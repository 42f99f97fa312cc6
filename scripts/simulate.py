#!/usr/bin/env python3
"""
Run a Barnes-Hut simulation preset and write SVG frames.

Modes:
    galaxy     Two rotating galaxies
    jupiter    Jupiter and the Galilean moons
    collision  Two galaxies pushed toward each other

Usage:
    uv run python scripts/simulate.py jupiter --steps 20000 --frequency 500
    uv run python scripts/simulate.py collision --steps 2000 --workers 4
"""

import argparse
import random
import time
from pathlib import Path

from barnes_hut import PRESETS, Simulator, energy_drift
from barnes_hut.export import to_svg_frames, write_svg_frames

# Output directory
BUILD_DIR = Path(__file__).parent.parent / "build"


def main():
    parser = argparse.ArgumentParser(description="Barnes-Hut gravitational simulation")
    parser.add_argument("mode", choices=sorted(PRESETS), help="Scenario to simulate")
    parser.add_argument("--steps", type=int, help="Number of steps (default: preset)")
    parser.add_argument("--dt", type=float, help="Simulated seconds per step (default: preset)")
    parser.add_argument("--theta", type=float, help="Barnes-Hut opening angle (default: preset)")
    parser.add_argument("--frequency", type=int, help="Render every Kth step (default: preset)")
    parser.add_argument("--scaling-factor", type=float, help="Display radius multiplier")
    parser.add_argument("--canvas", type=int, default=1000, help="Canvas width in pixels")
    parser.add_argument("--workers", type=int, help="Threads for force evaluation")
    parser.add_argument("--seed", type=int, help="Random seed for generated galaxies")
    parser.add_argument("--output", help="Output directory for SVG frames")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")

    args = parser.parse_args()

    scenario = PRESETS[args.mode]
    steps = args.steps if args.steps is not None else scenario.steps
    frequency = args.frequency if args.frequency is not None else scenario.frequency
    scaling = args.scaling_factor if args.scaling_factor is not None else scenario.scaling_factor

    initial = scenario.build(random.Random(args.seed))

    def report(event):
        if event["step"] % frequency == 0:
            print(
                f"Step {event['step']}/{steps}: "
                f"{event['active']} bodies, {event['removed']} removed, "
                f"{event['merged']} merged"
            )

    sim = Simulator(
        bodies=initial.bodies,
        width=initial.width,
        steps=steps,
        dt=args.dt if args.dt is not None else scenario.dt,
        theta=args.theta if args.theta is not None else scenario.theta,
        workers=args.workers,
        on_tick=None if args.quiet else report,
    )

    start = time.perf_counter()
    sim.run()
    elapsed = time.perf_counter() - start
    print(f"Simulation run: {sim.step_count} steps in {elapsed:.2f}s. Now drawing images.")

    frames = to_svg_frames(
        sim.trajectory,
        frequency=frequency,
        canvas_width=args.canvas,
        scaling_factor=scaling,
    )
    out_dir = Path(args.output) if args.output else BUILD_DIR / args.mode
    paths = write_svg_frames(frames, out_dir, prefix=args.mode)
    print(f"{len(paths)} frames written to {out_dir}")
    print(f"Relative energy drift: {energy_drift(sim.trajectory):.3e}")


if __name__ == "__main__":
    main()
