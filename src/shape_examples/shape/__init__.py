"""Shape subpackage: the shape tree consumed by example synthesis.

Re-exports the public API for the shape module:
- ShapeNode: a node in the shape tree, owning its variant selection cell
- ShapeKind: StrEnum of the four node kinds (SCALAR, OBJECT, ARRAY, POLYMORPHIC)
- Variant: a (tag, node) alternative of a polymorphic node
- ShapeGraph: arena of nodes addressed by stable id, plus the query surface
- ShapeBuilder: converts a JSON-Schema / OpenAPI schema dict into a ShapeGraph
"""

from shape_examples.shape.builder import ShapeBuilder, resolve_ref
from shape_examples.shape.nodes import ShapeGraph, ShapeKind, ShapeNode, Variant

__all__ = [
    "ShapeBuilder",
    "ShapeGraph",
    "ShapeKind",
    "ShapeNode",
    "Variant",
    "resolve_ref",
]
