"""
Spatial data structures for efficient force calculations.

Provides the quadtree used for Barnes-Hut O(n log n) force approximation.
"""

from .quadtree import (
    EMPTY,
    EmptyNode,
    InsertStats,
    InternalNode,
    LeafNode,
    SpatialTree,
    TreeNode,
    combine_bodies,
    insert,
    merge_bodies,
    net_force,
)

__all__ = [
    "EMPTY",
    "EmptyNode",
    "LeafNode",
    "InternalNode",
    "TreeNode",
    "InsertStats",
    "SpatialTree",
    "insert",
    "net_force",
    "merge_bodies",
    "combine_bodies",
]
