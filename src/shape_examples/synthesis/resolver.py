"""Discriminator resolution: collapse every polymorphic node to its active variant.

``resolve`` produces a ``ResolvedShape`` tree with no alternatives left.  Each
polymorphic node is replaced by the resolution of its selected variant, and
the resolved node remembers which ``(discriminator_field, tag)`` pairs it
stands for so that ``apply_discriminator_values`` can stamp the tags into a
sampled value afterwards.

Rules:
- The selected variant is ``variants[active_variant_index]``; a stale index
  reads as 0 (see ``ShapeNode.active_variant_index``).
- Only the selected variant is expanded.  Inactive variants never appear in
  the result.
- Properties declared on the polymorphic node itself are shared by every
  variant and merged under the variant's own properties.
- A polymorphic node with no variants resolves to an empty "any" shape.
- Re-entering a node already on the current path (recursive schema) yields a
  ``circular`` placeholder instead of recursing forever.

Selections are read through the reactive cells, so resolving inside a
``Computed`` subscribes it to the selections on the active path.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from shape_examples.shape.nodes import ShapeKind, ShapeNode

__all__ = ["ResolvedShape", "resolve"]


@dataclass(frozen=True, slots=True)
class ResolvedShape:
    """A shape with every polymorphic node replaced by its active variant.

    ``kind`` is never ``ShapeKind.POLYMORPHIC``.

    Attributes:
        kind:        SCALAR, OBJECT or ARRAY.
        title:       Display name carried over from the source node.
        properties:  Resolved child shapes of OBJECT shapes.
        required:    Names of required properties.
        items:       Resolved item shape of ARRAY shapes.
        keywords:    Sampling keywords (``type``, ``format``, ``example``, ...).
        read_only:   Carried over from the source node.
        write_only:  Carried over from the source node.
        discriminators: ``(field, tag)`` pairs to stamp into a value sampled
            from this shape, outermost polymorphic node first.
        variant_tag: Tag of the outermost variant this shape was chosen as,
            or None when it did not come from a polymorphic node.
        circular:    Placeholder for a node already being resolved higher up.
        empty:       Resolution of a polymorphic node with no variants.
    """

    kind: ShapeKind
    title: str = ""
    properties: dict[str, ResolvedShape] = field(default_factory=dict)
    required: frozenset[str] = frozenset()
    items: ResolvedShape | None = None
    keywords: dict[str, Any] = field(default_factory=dict)
    read_only: bool = False
    write_only: bool = False
    discriminators: tuple[tuple[str, str], ...] = ()
    variant_tag: str | None = None
    circular: bool = False
    empty: bool = False

    @property
    def discriminator_field(self) -> str | None:
        """Field of the outermost discriminator, if any."""
        return self.discriminators[0][0] if self.discriminators else None

    def to_json_schema(self) -> dict[str, Any]:
        """Render this resolved tree as a plain JSON-Schema dict.

        Circular placeholders render as an empty object / array / null schema.
        """
        if self.circular:
            return _placeholder_schema(self.kind)

        schema: dict[str, Any] = dict(self.keywords)
        if self.title:
            schema["title"] = self.title
        if self.read_only:
            schema["readOnly"] = True
        if self.write_only:
            schema["writeOnly"] = True

        if self.kind is ShapeKind.OBJECT:
            schema["type"] = "object"
            schema["properties"] = {
                name: prop.to_json_schema() for name, prop in self.properties.items()
            }
            if self.required:
                schema["required"] = sorted(self.required)
        elif self.kind is ShapeKind.ARRAY:
            schema["type"] = "array"
            if self.items is not None:
                schema["items"] = self.items.to_json_schema()
        return schema


def _placeholder_schema(kind: ShapeKind) -> dict[str, Any]:
    if kind is ShapeKind.OBJECT:
        return {"type": "object", "maxProperties": 0}
    if kind is ShapeKind.ARRAY:
        return {"type": "array", "maxItems": 0}
    return {"type": "null"}


def resolve(node: ShapeNode, forced_variant: int | None = None) -> ResolvedShape:
    """Resolve ``node`` against the current selections.

    Args:
        node:           Root of the shape tree to resolve.
        forced_variant: For a polymorphic root, resolve this variant index
            instead of the live selection.  Nested polymorphic nodes always use
            their own selection.  Out-of-range values fall back to 0.

    Returns:
        A ResolvedShape tree with no polymorphic nodes left.
    """
    return _resolve(node, frozenset(), forced_variant)


def _resolve(
    node: ShapeNode,
    ancestors: frozenset[ShapeNode],
    forced_variant: int | None,
) -> ResolvedShape:
    if node in ancestors:
        return ResolvedShape(
            kind=_placeholder_kind(node), title=node.title, circular=True
        )
    path = ancestors | {node}

    if node.kind is ShapeKind.POLYMORPHIC:
        return _resolve_polymorphic(node, path, forced_variant)

    if node.kind is ShapeKind.OBJECT:
        return ResolvedShape(
            kind=ShapeKind.OBJECT,
            title=node.title,
            properties=_resolve_properties(node, path),
            required=frozenset(node.required),
            keywords=dict(node.keywords),
            read_only=node.read_only,
            write_only=node.write_only,
        )

    if node.kind is ShapeKind.ARRAY:
        items = _resolve(node.items, path, None) if node.items is not None else None
        return ResolvedShape(
            kind=ShapeKind.ARRAY,
            title=node.title,
            items=items,
            keywords=dict(node.keywords),
            read_only=node.read_only,
            write_only=node.write_only,
        )

    return ResolvedShape(
        kind=ShapeKind.SCALAR,
        title=node.title,
        keywords=dict(node.keywords),
        read_only=node.read_only,
        write_only=node.write_only,
    )


def _resolve_polymorphic(
    node: ShapeNode,
    path: frozenset[ShapeNode],
    forced_variant: int | None,
) -> ResolvedShape:
    if not node.variants:
        return ResolvedShape(kind=ShapeKind.SCALAR, title=node.title, empty=True)

    if forced_variant is not None and 0 <= forced_variant < len(node.variants):
        index = forced_variant
    elif forced_variant is not None:
        index = 0
    else:
        index = node.active_variant_index
    variant = node.variants[index]
    inner = _resolve(variant.node, path, None)

    # Shared base properties; the variant's own definitions win.
    if node.properties and (
        inner.kind is ShapeKind.OBJECT
        or (inner.kind is ShapeKind.SCALAR and not inner.keywords and not inner.circular)
    ):
        properties = _resolve_properties(node, path)
        properties.update(inner.properties)
        inner = replace(
            inner,
            kind=ShapeKind.OBJECT,
            properties=properties,
            required=inner.required | frozenset(node.required),
            empty=False,
        )

    discriminators = inner.discriminators
    if node.discriminator_field:
        discriminators = ((node.discriminator_field, variant.tag), *discriminators)
    return replace(
        inner,
        title=inner.title or node.title,
        read_only=inner.read_only or node.read_only,
        write_only=inner.write_only or node.write_only,
        discriminators=discriminators,
        variant_tag=variant.tag,
    )


def _resolve_properties(
    node: ShapeNode, path: frozenset[ShapeNode]
) -> dict[str, ResolvedShape]:
    return {name: _resolve(child, path, None) for name, child in node.properties.items()}


def _placeholder_kind(node: ShapeNode) -> ShapeKind:
    seen: set[ShapeNode] = set()
    while node.kind is ShapeKind.POLYMORPHIC and node.variants and node not in seen:
        seen.add(node)
        node = node.variants[0].node
    if node.kind is ShapeKind.POLYMORPHIC:
        return ShapeKind.OBJECT
    return node.kind
