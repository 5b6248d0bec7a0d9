"""
Nested — tuple-keyed maps of arbitrary depth.

    from reservoir import nested as N

    tree: dict = {}
    N.set_in(tree, ("a", "b"), 1)
    N.get_in(tree, ("a", "b"))       # 1
    N.contains_in(tree, ("a",))      # False — a prefix is not a leaf
"""

from __future__ import annotations

from reservoir.nested._ops import (
    Tree,
    Branch,
    set_in,
    get_in,
    contains_in,
    leaves,
)

__all__ = (
    "Tree",
    "Branch",
    "set_in",
    "get_in",
    "contains_in",
    "leaves",
)
