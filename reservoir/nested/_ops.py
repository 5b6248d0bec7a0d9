"""
Nested-key map operations.

A tree is a plain dict whose intermediate levels are Branch instances.
Leaves are whatever was passed to set_in, so a partial prefix (ending on a
Branch) is never reported as a stored entry.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import Any

from reservoir._types import Key, Keys

type Tree = MutableMapping[Key, Any]

# ═══════════════════════════════════════════════════════════════════════════════
# Branch — Intermediate Level
# ═══════════════════════════════════════════════════════════════════════════════


class Branch(dict[Key, Any]):
    """Intermediate level created by set_in."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Branch({dict.__repr__(self)})"


def _require_keys(keys: Keys) -> None:
    if not keys:
        raise ValueError("key tuple must not be empty")


def _walk(tree: Tree, keys: Keys) -> tuple[bool, Any]:
    node: Any = tree
    for depth, key in enumerate(keys):
        # Below the root only Branch levels can be descended into
        if depth and not isinstance(node, Branch):
            return False, None
        if key not in node:
            return False, None
        node = node[key]
    if isinstance(node, Branch):
        return False, None
    return True, node


# ═══════════════════════════════════════════════════════════════════════════════
# set_in() / get_in() / contains_in()
# ═══════════════════════════════════════════════════════════════════════════════


def set_in(tree: Tree, keys: Keys, value: Any) -> None:
    """
    Set leaf at keys, creating missing levels.

    Example:
        tree: dict = {}
        N.set_in(tree, ("a", "b"), 1)
        N.set_in(tree, ("a", "c"), 2)
    """
    _require_keys(keys)
    *path, last = keys
    level: Tree = tree
    for key in path:
        child = level.get(key)
        if not isinstance(child, Branch):
            child = Branch()
            level[key] = child
        level = child
    level[last] = value


def get_in(tree: Tree, keys: Keys) -> Any:
    """Get leaf at keys. Returns None when the path is absent."""
    _require_keys(keys)
    _, value = _walk(tree, keys)
    return value


def contains_in(tree: Tree, keys: Keys) -> bool:
    """True only if the full path reaches a stored leaf."""
    _require_keys(keys)
    found, _ = _walk(tree, keys)
    return found


# ═══════════════════════════════════════════════════════════════════════════════
# leaves() — Flatten
# ═══════════════════════════════════════════════════════════════════════════════


def leaves(tree: Tree, depth: int) -> Iterator[tuple[Keys, Any]]:
    """
    Yield (keys, leaf) for every leaf stored at exactly depth.

    Example:
        dict(N.leaves(tree, 2))  # {("a", "b"): 1, ("a", "c"): 2}
    """
    if depth < 1:
        raise ValueError("depth must be >= 1")

    def visit(level: Tree, prefix: Keys) -> Iterator[tuple[Keys, Any]]:
        for key, node in level.items():
            path = (*prefix, key)
            if len(path) == depth:
                if not isinstance(node, Branch):
                    yield path, node
            elif isinstance(node, Branch):
                yield from visit(node, path)

    yield from visit(tree, ())


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Tree",
    "Branch",
    "set_in",
    "get_in",
    "contains_in",
    "leaves",
)
