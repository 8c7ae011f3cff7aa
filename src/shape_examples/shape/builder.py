"""ShapeBuilder: converts a JSON-Schema / OpenAPI schema dict into a ShapeGraph.

Dispatch order for each schema:

1. ``$ref``            -> the referenced schema, built once per ref string.
   A recursive schema therefore becomes a cyclic graph instead of an
   infinite tree.
2. ``oneOf``/``anyOf`` -> POLYMORPHIC node, one variant per member.
3. ``discriminator`` with a ``mapping`` but no ``oneOf`` -> POLYMORPHIC node
   whose variants are the mapped schemas (OpenAPI ``allOf`` inheritance).
4. ``allOf``           -> members merged into a single schema, then rebuilt.
5. otherwise          -> OBJECT, ARRAY or SCALAR by ``type`` (inferred from
   ``properties``/``items`` when absent).

Variant tags are taken from the ``discriminator.mapping`` key pointing at the
member, else the last segment of the member's ``$ref``, else its ``title``,
else ``"#<index>"``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from shape_examples.errors import ShapeBuildError
from shape_examples.shape.nodes import ShapeGraph, ShapeKind, ShapeNode, Variant

__all__ = ["ShapeBuilder", "resolve_ref"]

logger = logging.getLogger(__name__)

# Keywords copied onto every node for the samplers.
_SAMPLING_KEYWORDS = (
    "type",
    "format",
    "enum",
    "const",
    "default",
    "example",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    "minLength",
    "maxLength",
    "pattern",
    "minItems",
    "maxItems",
)

# Keywords of allOf members that must not leak into the derived schema.
_NOT_INHERITED = frozenset({"discriminator", "oneOf", "anyOf", "title"})


def resolve_ref(document: Mapping[str, Any], ref: str) -> Any:
    """Follow a local JSON Pointer reference (RFC 6901) inside ``document``.

    Args:
        document: The context document, e.g. a full OpenAPI description.
        ref:      A local reference such as ``"#/components/schemas/Pet"``.

    Returns:
        The referenced value.

    Raises:
        ShapeBuildError: If the ref is not local or does not resolve.
    """
    if not ref.startswith("#"):
        raise ShapeBuildError(f"Only local references are supported, got {ref!r}")
    target: Any = document
    pointer = ref[1:]
    if not pointer:
        return target
    for raw in pointer.lstrip("/").split("/"):
        segment = raw.replace("~1", "/").replace("~0", "~")
        if isinstance(target, Mapping) and segment in target:
            target = target[segment]
        elif isinstance(target, list) and segment.isdigit() and int(segment) < len(target):
            target = target[int(segment)]
        else:
            raise ShapeBuildError(f"Unresolvable reference {ref!r}")
    return target


def _ref_name(ref: str) -> str:
    return ref.rsplit("/", 1)[-1]


def _mapping_ref(value: str) -> str:
    """Expand a bare schema name from ``discriminator.mapping`` into a ref."""
    if value.startswith("#"):
        return value
    return f"#/components/schemas/{value}"


@dataclass
class ShapeBuilder:
    """Builds a ShapeGraph from a schema dict, resolving refs against ``context``.

    A builder memoizes ``$ref`` targets, so one builder instance should be used
    per context document.  Schemas that reference each other end up sharing
    nodes (and selection state).

    Example::

        builder = ShapeBuilder(context=openapi_document)
        graph = builder.build({"$ref": "#/components/schemas/Pet"})
        graph.root.kind          # ShapeKind.POLYMORPHIC
        [v.tag for v in graph.root.variants]   # ["Cat", "Dog"]
    """

    context: Mapping[str, Any] = field(default_factory=dict)
    _refs: dict[str, ShapeNode] = field(default_factory=dict, init=False, repr=False)

    def build(self, schema: Mapping[str, Any]) -> ShapeGraph:
        """Convert ``schema`` into a ShapeGraph rooted at the built node.

        Raises:
            ShapeBuildError: If the schema is malformed or a ref is unresolvable.
        """
        return ShapeGraph(self.build_node(schema))

    def build_node(self, schema: Mapping[str, Any]) -> ShapeNode:
        if not isinstance(schema, Mapping):
            raise ShapeBuildError(f"Schema must be a mapping, got {type(schema)!r}")
        if "$ref" in schema:
            return self._build_ref(schema["$ref"])
        node = ShapeNode(kind=ShapeKind.SCALAR)
        self._fill(node, schema)
        return node

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _build_ref(self, ref: str) -> ShapeNode:
        if ref in self._refs:
            logger.debug("Reusing node for %s", ref)
            return self._refs[ref]
        target = resolve_ref(self.context, ref)
        node = ShapeNode(kind=ShapeKind.SCALAR, title=_ref_name(ref))
        # Registered before filling so recursive refs close the cycle.
        self._refs[ref] = node
        if isinstance(target, Mapping) and "$ref" in target:
            alias = self._build_ref(target["$ref"])
            self._refs[ref] = alias
            return alias
        self._fill(node, target)
        return node

    def _fill(self, node: ShapeNode, schema: Mapping[str, Any]) -> None:
        if not isinstance(schema, Mapping):
            raise ShapeBuildError(f"Schema must be a mapping, got {type(schema)!r}")

        if "allOf" in schema:
            schema = self._merge_all_of(schema, seen=set())

        node.title = schema.get("title", node.title)
        node.read_only = bool(schema.get("readOnly", False))
        node.write_only = bool(schema.get("writeOnly", False))
        node.keywords = {k: schema[k] for k in _SAMPLING_KEYWORDS if k in schema}

        members = schema["oneOf"] if "oneOf" in schema else schema.get("anyOf")
        discriminator = schema.get("discriminator")
        if members is not None or (
            isinstance(discriminator, Mapping) and discriminator.get("mapping")
        ):
            self._fill_polymorphic(node, schema, members or [])
            return

        kind = self._infer_kind(schema)
        node.kind = kind
        if kind is ShapeKind.OBJECT:
            self._fill_properties(node, schema)
        elif kind is ShapeKind.ARRAY:
            node.items = self.build_node(schema.get("items", {}))

    def _fill_polymorphic(
        self,
        node: ShapeNode,
        schema: Mapping[str, Any],
        members: list[Any],
    ) -> None:
        node.kind = ShapeKind.POLYMORPHIC
        discriminator = schema.get("discriminator")
        mapping: Mapping[str, str] = {}
        if isinstance(discriminator, Mapping):
            node.discriminator_field = discriminator.get("propertyName")
            mapping = discriminator.get("mapping") or {}
        elif isinstance(discriminator, str):
            # Swagger 2.0 style: the discriminator is the property name.
            node.discriminator_field = discriminator

        refs_by_tag = {tag: _mapping_ref(ref) for tag, ref in mapping.items()}
        if not members:
            members = [{"$ref": ref} for ref in refs_by_tag.values()]
        tags_by_ref = {ref: tag for tag, ref in refs_by_tag.items()}

        for index, member in enumerate(members):
            if not isinstance(member, Mapping):
                raise ShapeBuildError(f"Variant {index} must be a mapping")
            ref = member.get("$ref")
            if ref in tags_by_ref:
                tag = tags_by_ref[ref]
            elif ref:
                tag = _ref_name(ref)
            else:
                tag = member.get("title") or f"#{index}"
            node.variants.append(Variant(tag=tag, node=self.build_node(member)))

        if "properties" in schema:
            self._fill_properties(node, schema)

    def _fill_properties(self, node: ShapeNode, schema: Mapping[str, Any]) -> None:
        properties = schema.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise ShapeBuildError("'properties' must be a mapping")
        for name, sub in properties.items():
            node.properties[name] = self.build_node(sub)
        node.required = set(schema.get("required") or [])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _infer_kind(schema: Mapping[str, Any]) -> ShapeKind:
        declared = schema.get("type")
        if isinstance(declared, list):
            non_null = [t for t in declared if t != "null"]
            declared = non_null[0] if non_null else "null"
        if declared == "object" or (declared is None and "properties" in schema):
            return ShapeKind.OBJECT
        if declared == "array" or (declared is None and "items" in schema):
            return ShapeKind.ARRAY
        return ShapeKind.SCALAR

    def _merge_all_of(
        self, schema: Mapping[str, Any], seen: set[str]
    ) -> dict[str, Any]:
        """Flatten ``allOf`` into one schema dict.

        Member ``$ref``s are dereferenced; nested property refs are left alone,
        so recursive property types are still handled by ``_build_ref``.  The
        ``discriminator`` of inherited members is dropped, otherwise every
        derived schema would turn back into its polymorphic base.
        """
        merged: dict[str, Any] = {k: v for k, v in schema.items() if k != "allOf"}
        own_properties: dict[str, Any] = dict(merged.pop("properties", {}) or {})
        required: list[str] = list(merged.pop("required", []) or [])
        properties: dict[str, Any] = {}

        for member in schema["allOf"]:
            if isinstance(member, Mapping) and "$ref" in member:
                ref = member["$ref"]
                if ref in seen:
                    raise ShapeBuildError(f"Circular allOf through {ref!r}")
                seen = seen | {ref}
                member = resolve_ref(self.context, ref)
            if not isinstance(member, Mapping):
                raise ShapeBuildError("allOf members must be mappings")
            if "allOf" in member:
                member = self._merge_all_of(member, seen)
            for key, value in member.items():
                if key == "properties":
                    properties.update(value)
                elif key == "required":
                    required.extend(r for r in value if r not in required)
                elif key not in _NOT_INHERITED:
                    merged.setdefault(key, value)

        properties.update(own_properties)
        if properties:
            merged["properties"] = properties
            merged.setdefault("type", "object")
        if required:
            merged["required"] = required
        return merged
