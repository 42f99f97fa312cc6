"""
barnes-hut: Barnes-Hut gravitational N-body simulation in Python.

This package simulates a collection of point masses in a bounded square
region, using a quadtree rebuilt every step to approximate gravitational
forces in O(n log n).

Modules:
- types: Vector2, Body, Region, Universe and event types
- spatial: Quadtree construction and Barnes-Hut force traversal
- physics: Exact force law and explicit time integration
- simulation: Step driver and Simulator
- initialization: Galaxy and planetary-system generators
- metrics: Mass, momentum and energy diagnostics
- export: SVG rendering of snapshots
"""

__version__ = "0.1.0"

# Base classes for building simulation drivers
from .base import BaseSimulation, IterativeSimulation
from .constants import BLACK_HOLE_MASS, DEFAULT_MAX_DEPTH, DEFAULT_THETA, G, SOLAR_MASS

# Initial conditions
from .initialization import (
    PRESETS,
    Scenario,
    build_scenario,
    initialize_galaxy,
    initialize_universe,
    jupiter_system,
    push_galaxy,
)

# Diagnostics
from .metrics import (
    center_of_mass,
    energy_drift,
    kinetic_energy,
    potential_energy,
    snapshot_summary,
    total_energy,
    total_momentum,
)

# Physics kernels
from .physics import direct_force, direct_forces, integrate, pairwise_force

# Simulation driver
from .simulation import Simulator, barnes_hut, step

# Spatial data structures
from .spatial import EmptyNode, InternalNode, LeafNode, SpatialTree, TreeNode
from .types import (
    Body,
    BodyLike,
    Event,
    EventType,
    Quadrant,
    Region,
    Universe,
    Vector2,
)

# Validation
from .validation import (
    CoincidentBodiesWarning,
    DegenerateRegionError,
    DepthLimitWarning,
    InvalidMassError,
    InvalidThetaError,
    InvalidTimeStepError,
    OutOfRegionError,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Types
    "Vector2",
    "Body",
    "BodyLike",
    "Region",
    "Quadrant",
    "Universe",
    "Event",
    "EventType",
    # Constants
    "G",
    "SOLAR_MASS",
    "BLACK_HOLE_MASS",
    "DEFAULT_THETA",
    "DEFAULT_MAX_DEPTH",
    # Base classes
    "BaseSimulation",
    "IterativeSimulation",
    # Spatial
    "SpatialTree",
    "TreeNode",
    "EmptyNode",
    "LeafNode",
    "InternalNode",
    # Physics
    "pairwise_force",
    "direct_force",
    "direct_forces",
    "integrate",
    # Simulation
    "Simulator",
    "step",
    "barnes_hut",
    # Initial conditions
    "initialize_galaxy",
    "push_galaxy",
    "initialize_universe",
    "jupiter_system",
    "Scenario",
    "PRESETS",
    "build_scenario",
    # Metrics
    "center_of_mass",
    "total_momentum",
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "energy_drift",
    "snapshot_summary",
    # Validation
    "ValidationError",
    "InvalidMassError",
    "DegenerateRegionError",
    "OutOfRegionError",
    "InvalidThetaError",
    "InvalidTimeStepError",
    "CoincidentBodiesWarning",
    "DepthLimitWarning",
]
