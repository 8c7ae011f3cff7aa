"""ShapeNode, Variant and ShapeGraph: the shape tree consumed by example synthesis.

A shape tree describes the allowed form of a JSON value.  Polymorphic nodes
offer an ordered list of variants and own an observable selection cell; the
selection mutates state, never structure, so node identity is stable for the
lifetime of the tree.

``ShapeGraph`` is the arena: every node reachable from the root is registered
under a stable integer ``node_id`` and can be looked up or re-selected by it.
Recursive schemas produce cyclic graphs; every traversal in this package
guards against re-entering a node.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any

from shape_examples.reactive import Cell

__all__ = ["ShapeGraph", "ShapeKind", "ShapeNode", "Variant"]

logger = logging.getLogger(__name__)


class ShapeKind(StrEnum):
    """The four structural kinds of shape node.

    - SCALAR      -> "scalar"      : string, number, boolean, null or "any"
    - OBJECT      -> "object"      : named properties
    - ARRAY       -> "array"       : homogeneous items
    - POLYMORPHIC -> "polymorphic" : closed set of alternative variants
    """

    SCALAR = auto()
    OBJECT = auto()
    ARRAY = auto()
    POLYMORPHIC = auto()


@dataclass(frozen=True, slots=True)
class Variant:
    """One alternative of a polymorphic node.

    Attributes:
        tag:  Literal written into the discriminator field when this variant
              is active.  Also the example name for root-level variants.
        node: Shape of the alternative.
    """

    tag: str
    node: ShapeNode


@dataclass(eq=False, repr=False, slots=True)
class ShapeNode:
    """A node in the shape tree.

    Nodes compare and hash by identity: two structurally equal subtrees are
    still distinct nodes with independent selection state.

    Attributes:
        kind:        Which kind of node this is (see ShapeKind).
        title:       Display name, usually the schema title or ``$ref`` name.
        properties:  Ordered child shapes of OBJECT nodes.  POLYMORPHIC nodes
                     may also carry properties shared by every variant.
        required:    Names of required properties.
        items:       Item shape of ARRAY nodes.
        keywords:    JSON-Schema keywords used for sampling (``type``,
                     ``format``, ``enum``, ``example``, ...).
        read_only:   Omitted from request examples.
        write_only:  Omitted from response examples.
        discriminator_field: Property holding the variant tag, if any.
        variants:    Alternatives of POLYMORPHIC nodes, in declaration order.
        node_id:     Arena index assigned by ``ShapeGraph``; -1 until registered.
    """

    kind: ShapeKind
    title: str = ""
    properties: dict[str, ShapeNode] = field(default_factory=dict)
    required: set[str] = field(default_factory=set)
    items: ShapeNode | None = None
    keywords: dict[str, Any] = field(default_factory=dict)
    read_only: bool = False
    write_only: bool = False
    discriminator_field: str | None = None
    variants: list[Variant] = field(default_factory=list)
    node_id: int = -1
    _selection: Cell[int] = field(default_factory=lambda: Cell(0, "selection"))

    def __repr__(self) -> str:
        parts = [f"kind={self.kind.value}", f"id={self.node_id}"]
        if self.title:
            parts.append(f"title={self.title!r}")
        if self.variants:
            parts.append(f"variants={[v.tag for v in self.variants]!r}")
        return f"ShapeNode({', '.join(parts)})"

    # ------------------------------------------------------------------
    # Selection state
    # ------------------------------------------------------------------

    @property
    def is_polymorphic(self) -> bool:
        return self.kind is ShapeKind.POLYMORPHIC

    @property
    def selection_cell(self) -> Cell[int]:
        """The observable cell backing ``active_variant_index``."""
        return self._selection

    @property
    def active_variant_index(self) -> int:
        """Index of the selected variant; a tracked read.

        A stored index that no longer fits the variant list (the list was
        mutated after selecting) reads as 0.
        """
        index = self._selection.get()
        if 0 <= index < len(self.variants):
            return index
        if self.variants:
            logger.debug("Stale selection %d on %r, using variant 0", index, self)
        return 0

    @property
    def active_variant(self) -> Variant | None:
        if not self.variants:
            return None
        return self.variants[self.active_variant_index]

    def select(self, index: int) -> None:
        """Select the variant at ``index``, clamped into the valid range."""
        if not self.variants:
            clamped = 0
        else:
            clamped = min(max(index, 0), len(self.variants) - 1)
        if clamped != index:
            logger.warning(
                "Variant index %d out of range for %r, clamped to %d",
                index,
                self,
                clamped,
            )
        self._selection.set(clamped)

    def select_tag(self, tag: str) -> None:
        """Select the first variant whose tag equals ``tag``.

        Raises:
            KeyError: If no variant carries ``tag``.
        """
        for index, variant in enumerate(self.variants):
            if variant.tag == tag:
                self.select(index)
                return
        raise KeyError(f"{self!r} has no variant tagged {tag!r}")

    def children(self) -> list[ShapeNode]:
        """Direct structural children: properties, items, then variant nodes."""
        nodes = list(self.properties.values())
        if self.items is not None:
            nodes.append(self.items)
        nodes.extend(v.node for v in self.variants)
        return nodes


class ShapeGraph:
    """Arena of shape nodes reachable from a root, addressed by ``node_id``.

    The graph exposes the query surface used by example synthesis.  Nodes are
    numbered in depth-first order on registration; ids never change
    afterwards, so a UI can keep a ``node_id`` and re-select through it.

    Example::

        graph = ShapeGraph(root)
        pet = graph.node(3)
        graph.select(pet, 1)
        graph.active_variant_index(pet)   # 1
    """

    def __init__(self, root: ShapeNode | None = None) -> None:
        self._nodes: list[ShapeNode] = []
        self.root = root
        if root is not None:
            self.register(root)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ShapeNode]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        return f"ShapeGraph(root={self.root!r}, nodes={len(self._nodes)})"

    def register(self, root: ShapeNode) -> None:
        """Assign ids to every not-yet-registered node reachable from ``root``."""
        seen: set[ShapeNode] = set()
        stack = [root]
        while stack:
            node = stack.pop()
            if node in seen:
                continue
            seen.add(node)
            if node.node_id < 0:
                node.node_id = len(self._nodes)
                self._nodes.append(node)
            # Reversed so ids follow declaration order.
            stack.extend(reversed(node.children()))

    def node(self, node_id: int) -> ShapeNode:
        """Return the node registered under ``node_id``.

        Raises:
            KeyError: If no node has that id.
        """
        if not 0 <= node_id < len(self._nodes):
            raise KeyError(f"No shape node with id {node_id}")
        return self._nodes[node_id]

    def polymorphic_nodes(self) -> list[ShapeNode]:
        return [n for n in self._nodes if n.is_polymorphic]

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------

    def is_polymorphic(self, node: ShapeNode) -> bool:
        return node.is_polymorphic

    def variants(self, node: ShapeNode) -> list[Variant]:
        return list(node.variants)

    def active_variant_index(self, node: ShapeNode) -> int:
        return node.active_variant_index

    def discriminator_field(self, node: ShapeNode) -> str | None:
        return node.discriminator_field

    def children(self, node: ShapeNode) -> list[ShapeNode]:
        return node.children()

    def select(self, target: ShapeNode | int, index: int) -> None:
        """Select variant ``index`` on a node given by reference or id."""
        node = self.node(target) if isinstance(target, int) else target
        node.select(index)

    def select_tag(self, target: ShapeNode | int, tag: str) -> None:
        node = self.node(target) if isinstance(target, int) else target
        node.select_tag(tag)
