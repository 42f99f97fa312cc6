"""
Quadtree implementation for Barnes-Hut force approximation.

The quadtree recursively subdivides the square simulation region into
quadrants so that the gravitational pull of a distant cluster of bodies can
be replaced by a single pseudo-body at the cluster's centre of mass, reducing
per-step force evaluation from O(n^2) to O(n log n).

Nodes are immutable. insert() returns a new node and copies only the path
from the root to the insertion point; untouched subtrees are shared. A node
is one of exactly three variants:

- EmptyNode: no body
- LeafNode: a single body (possibly the merge of coincident bodies)
- InternalNode: an aggregate pseudo-body plus four children [NW, NE, SW, SE]
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

from ..constants import DEFAULT_MAX_DEPTH, G
from ..physics.forces import pairwise_force
from ..types import Body, Quadrant, Region, Vector2
from ..validation import (
    CoincidentBodiesWarning,
    DepthLimitWarning,
    OutOfRegionError,
    validate_bodies,
    validate_max_depth,
)


@dataclass(frozen=True)
class EmptyNode:
    """A node holding no bodies."""

    def __repr__(self) -> str:
        return "EmptyNode()"


@dataclass(frozen=True)
class LeafNode:
    """
    A node holding exactly one body.

    Attributes:
        body: The body (a copy; merged bodies appear as one)
        region: Region this node covers
    """

    body: Body
    region: Region


@dataclass(frozen=True)
class InternalNode:
    """
    A subdivided node.

    Attributes:
        aggregate: Pseudo-body whose mass is the total mass of the subtree
            and whose position is the subtree's centre of mass
        region: Region this node covers
        children: Four child nodes indexed NW=0, NE=1, SW=2, SE=3
    """

    aggregate: Body
    region: Region
    children: tuple[TreeNode, TreeNode, TreeNode, TreeNode]


TreeNode = Union[EmptyNode, LeafNode, InternalNode]

EMPTY = EmptyNode()


@dataclass
class InsertStats:
    """Counters for merges performed while building a tree."""

    merged: int = 0
    depth_limited: int = 0


# -----------------------------------------------------------------------------
# Merge and aggregate arithmetic
# -----------------------------------------------------------------------------


def merge_bodies(existing: Body, incoming: Body) -> Body:
    """
    Merge a body into another occupying the same coordinates.

    Masses add, velocity becomes the arithmetic mean of the two velocities
    and the position is unchanged. Momentum is not conserved.
    """
    return existing.replace(
        mass=existing.mass + incoming.mass,
        velocity=(existing.velocity + incoming.velocity) * 0.5,
    )


def combine_bodies(existing: Body, incoming: Body) -> Body:
    """
    Collapse two distinct bodies into one at their centre of mass.

    Used when the subdivision depth cap is reached. Mass and centroid are
    preserved; velocity is averaged as in merge_bodies().
    """
    total = existing.mass + incoming.mass
    return existing.replace(
        position=(existing.position * existing.mass + incoming.position * incoming.mass) / total,
        velocity=(existing.velocity + incoming.velocity) * 0.5,
        mass=total,
    )


def _as_aggregate(body: Body) -> Body:
    """Pseudo-body carrying only the mass and centroid of a body."""
    return Body(position=body.position, velocity=body.velocity, mass=body.mass)


def _accumulate(aggregate: Body, body: Body) -> Body:
    """Add a body's mass to an aggregate and move the centroid accordingly."""
    total = aggregate.mass + body.mass
    return aggregate.replace(
        position=(aggregate.position * aggregate.mass + body.position * body.mass) / total,
        velocity=(aggregate.velocity * aggregate.mass + body.velocity * body.mass) / total,
        mass=total,
    )


# -----------------------------------------------------------------------------
# Insertion
# -----------------------------------------------------------------------------


def insert(
    node: TreeNode,
    body: Body,
    region: Region,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
    stats: Optional[InsertStats] = None,
) -> TreeNode:
    """
    Insert a body into the subtree rooted at node.

    The descent is a loop rather than recursion, so insertion depth is
    limited only by max_depth. Internal nodes passed on the way down are
    recorded and rebuilt bottom-up once the body has come to rest.

    Args:
        node: Subtree root
        body: Body to insert
        region: Region covered by node
        depth: Number of subdivisions between the tree root and node
        max_depth: Depth at which colliding leaves are merged instead of split
        stats: Optional merge counters, updated in place

    Returns:
        The new subtree root. The input node is left untouched.
    """
    # (updated aggregate, original node, quadrant taken) per level descended
    path: list[tuple[Body, InternalNode, Quadrant]] = []

    while True:
        if isinstance(node, EmptyNode):
            result: TreeNode = LeafNode(body, region)
            break

        if isinstance(node, LeafNode):
            if node.body.position == body.position:
                if stats is not None:
                    stats.merged += 1
                result = LeafNode(merge_bodies(node.body, body), node.region)
                break

            if depth >= max_depth:
                if stats is not None:
                    stats.depth_limited += 1
                result = LeafNode(combine_bodies(node.body, body), node.region)
                break

            # Subdivide: the existing occupant moves down into its quadrant,
            # then the new body continues through the internal-node path.
            existing = node.body
            children: list[TreeNode] = [EMPTY, EMPTY, EMPTY, EMPTY]
            quadrant = node.region.quadrant_index(existing.position)
            children[quadrant] = LeafNode(existing, node.region.child(quadrant))
            node = InternalNode(_as_aggregate(existing), node.region, tuple(children))  # type: ignore[arg-type]

        if node.aggregate.position == body.position:
            if stats is not None:
                stats.merged += 1
            result = InternalNode(merge_bodies(node.aggregate, body), node.region, node.children)
            break

        quadrant = node.region.quadrant_index(body.position)
        path.append((_accumulate(node.aggregate, body), node, quadrant))
        region = node.region.child(quadrant)
        node = node.children[quadrant]
        depth += 1

    for aggregate, parent, quadrant in reversed(path):
        children = list(parent.children)
        children[quadrant] = result
        result = InternalNode(aggregate, parent.region, tuple(children))  # type: ignore[arg-type]
    return result


# -----------------------------------------------------------------------------
# Force evaluation
# -----------------------------------------------------------------------------


def net_force(
    node: TreeNode,
    body: Body,
    theta: float,
    gravitational_constant: float = G,
) -> Vector2:
    """
    Approximate the net gravitational force on a body from a subtree.

    Leaves contribute the exact pairwise force (nothing if the leaf sits at
    the body's own position). An internal node whose region width divided by
    the distance to its centre of mass is <= theta is treated as a single
    point mass; otherwise its four children are visited.

    Args:
        node: Subtree root
        body: Target body
        theta: Opening angle (0 = exact pairwise summation)
        gravitational_constant: G in consistent units

    Returns:
        Net force vector on body
    """
    if isinstance(node, EmptyNode):
        return Vector2.zero()

    if isinstance(node, LeafNode):
        return pairwise_force(body, node.body, gravitational_constant)

    dist = body.position.distance_to(node.aggregate.position)
    if dist > 0 and node.region.width / dist <= theta:
        return pairwise_force(body, node.aggregate, gravitational_constant)

    # Node is too close - recurse into children
    fx, fy = 0.0, 0.0
    for child in node.children:
        f = net_force(child, body, theta, gravitational_constant)
        fx += f.x
        fy += f.y
    return Vector2(fx, fy)


# -----------------------------------------------------------------------------
# Tree wrapper
# -----------------------------------------------------------------------------


class SpatialTree:
    """
    Barnes-Hut quadtree built from one snapshot of bodies.

    A tree is built fresh for every simulation step, stays read-only while
    forces are evaluated, and is discarded afterwards. Bodies at identical
    coordinates are merged (mass summed, velocity averaged); bodies that
    still share a cell after max_depth subdivisions are collapsed onto their
    centre of mass.

    Usage:
        tree = SpatialTree.build(bodies, Region(0, 0, width))
        force = tree.calculate_force(bodies[0], theta=0.5)

    The theta parameter controls the accuracy/speed tradeoff:
    - theta = 0: Exact calculation (every leaf visited)
    - theta = 0.5: Good balance (recommended)
    - theta = 1.0+: Fast but less accurate
    """

    def __init__(self, region: Region, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """
        Initialize an empty tree.

        Args:
            region: Square region covering every body to be inserted
            max_depth: Subdivision depth cap
        """
        self.region = region
        self.max_depth = validate_max_depth(max_depth)
        self.root: TreeNode = EMPTY
        self.body_count = 0
        self.stats = InsertStats()

    def insert(self, body: Body) -> None:
        """
        Insert a body into the tree.

        Raises:
            OutOfRegionError: If the body lies outside the tree's region
        """
        if not self.region.contains(body.position):
            raise OutOfRegionError(
                f"Body at ({body.position.x}, {body.position.y}) is outside region "
                f"[{self.region.x}, {self.region.x + self.region.width}] x "
                f"[{self.region.y}, {self.region.y + self.region.width}]"
            )
        self.root = insert(self.root, body, self.region, 0, self.max_depth, self.stats)
        self.body_count += 1

    @property
    def total_mass(self) -> float:
        """Total mass of all inserted bodies."""
        node = self.root
        if isinstance(node, LeafNode):
            return node.body.mass
        if isinstance(node, InternalNode):
            return node.aggregate.mass
        return 0.0

    @property
    def center_of_mass(self) -> Optional[Vector2]:
        """Centre of mass of all inserted bodies, or None for an empty tree."""
        node = self.root
        if isinstance(node, LeafNode):
            return node.body.position
        if isinstance(node, InternalNode):
            return node.aggregate.position
        return None

    def calculate_force(
        self,
        body: Body,
        theta: float = 0.5,
        gravitational_constant: float = G,
    ) -> Vector2:
        """
        Calculate the approximate net force on a body.

        Args:
            body: The body to calculate force on
            theta: Barnes-Hut opening angle
            gravitational_constant: G in consistent units

        Returns:
            Net force vector
        """
        return net_force(self.root, body, theta, gravitational_constant)

    def leaves(self) -> Iterator[LeafNode]:
        """Iterate over leaf nodes in NW, NE, SW, SE depth-first order."""
        stack: list[TreeNode] = [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node, LeafNode):
                yield node
            elif isinstance(node, InternalNode):
                stack.extend(reversed(node.children))

    def node_count(self) -> int:
        """Number of non-empty nodes."""
        count = 0
        stack: list[TreeNode] = [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node, EmptyNode):
                continue
            count += 1
            if isinstance(node, InternalNode):
                stack.extend(node.children)
        return count

    def depth(self) -> int:
        """Height of the tree (0 for an empty tree or a single leaf)."""
        return _height(self.root)

    @classmethod
    def build(
        cls,
        bodies: Sequence[Optional[Body]],
        region: Region,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> SpatialTree:
        """
        Build a tree from a body set.

        Absent entries (None) are skipped. Masses are validated before any
        insertion. At most one CoincidentBodiesWarning and one
        DepthLimitWarning are issued per build.

        Args:
            bodies: Body set, absent entries are None
            region: Region covering every present body
            max_depth: Subdivision depth cap

        Returns:
            SpatialTree with all present bodies inserted

        Raises:
            InvalidMassError: If any body has a non-positive mass
            OutOfRegionError: If any body lies outside region
        """
        validate_bodies(bodies, strict=True)
        tree = cls(region, max_depth=max_depth)
        for body in bodies:
            if body is not None:
                tree.insert(body)

        if tree.stats.merged:
            warnings.warn(
                f"{tree.stats.merged} bodies at identical coordinates were merged "
                "into their neighbours; merged bodies lose their individual identity.",
                CoincidentBodiesWarning,
                stacklevel=2,
            )
        if tree.stats.depth_limited:
            warnings.warn(
                f"{tree.stats.depth_limited} bodies were collapsed onto a neighbour "
                f"after reaching the subdivision depth limit ({tree.max_depth}).",
                DepthLimitWarning,
                stacklevel=2,
            )
        return tree


def _height(node: TreeNode) -> int:
    if isinstance(node, InternalNode):
        return 1 + max(_height(child) for child in node.children)
    return 0


__all__ = [
    "EmptyNode",
    "LeafNode",
    "InternalNode",
    "TreeNode",
    "EMPTY",
    "InsertStats",
    "merge_bodies",
    "combine_bodies",
    "insert",
    "net_force",
    "SpatialTree",
]
