"""Dependency collection over every selection cell in a shape tree.

``collect_active_selections`` reads the selection of every polymorphic node
reachable from the root, including the subtrees of inactive variants.  When
called inside a ``Computed``, every one of those cells becomes a dependency,
so switching a selection deep inside a currently inactive branch still
invalidates the computation.  Resolution alone would only subscribe to the
cells on the active path.
"""

from __future__ import annotations

from shape_examples.shape.nodes import ShapeNode


def collect_active_selections(root: ShapeNode | None) -> None:
    """Touch the selection cell of every polymorphic node under ``root``.

    Traversal is depth-first over properties, items and all variants.  Each
    node is visited once, so cyclic graphs terminate.
    """
    if root is None:
        return
    visited: set[ShapeNode] = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node in visited:
            continue
        visited.add(node)
        if node.is_polymorphic:
            node.selection_cell.get()
        stack.extend(node.children())
