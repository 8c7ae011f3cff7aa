"""StaticSampler: deterministic sample values with no extra dependencies.

Every value is derived from the shape alone, so two calls with the same shape
and options return equal values.  Precedence for any node is::

    const > example > default > enum[0] > type/format default

Objects contain every visible property, arrays contain ``minItems`` items
(at least one, at most ``maxItems``).

This sampler satisfies the SampleGenerator Protocol structurally without
inheriting from it.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from shape_examples.shape.nodes import ShapeKind
from shape_examples.synthesis.options import GenerationOptions
from shape_examples.synthesis.resolver import ResolvedShape

_STRING_FORMATS: dict[str, str] = {
    "date-time": "2019-08-24T14:15:22Z",
    "date": "2019-08-24",
    "time": "14:15:22Z",
    "email": "user@example.com",
    "uuid": "095be615-a8ad-4c33-8e9c-c7612fbf6c9f",
    "uri": "http://example.com",
    "hostname": "example.com",
    "ipv4": "192.168.0.1",
    "ipv6": "2001:0db8:85a3:0000:0000:8a2e:0370:7334",
    "byte": "ZXhhbXBsZQ==",
    "binary": "<binary>",
    "password": "pa$$word",
}

_SCALAR_TYPES = ("string", "integer", "number", "boolean", "null")


def _first_type(keywords: Mapping[str, Any]) -> str | None:
    declared = keywords.get("type")
    if isinstance(declared, list):
        non_null = [t for t in declared if t != "null"]
        return non_null[0] if non_null else "null"
    return declared


def _sample_string(keywords: Mapping[str, Any]) -> str:
    value = _STRING_FORMATS.get(keywords.get("format", ""), "string")
    min_length = keywords.get("minLength")
    max_length = keywords.get("maxLength")
    if min_length is not None and len(value) < min_length:
        value = value + "s" * (min_length - len(value))
    if max_length is not None and len(value) > max_length:
        value = value[:max_length]
    return value


def _sample_number(keywords: Mapping[str, Any], integer: bool) -> int | float:
    value: int | float = 0
    minimum = keywords.get("minimum")
    maximum = keywords.get("maximum")
    exclusive_minimum = keywords.get("exclusiveMinimum")
    exclusive_maximum = keywords.get("exclusiveMaximum")
    if minimum is not None:
        # OpenAPI 3.0 spells an exclusive bound as a boolean flag.
        value = minimum + 1 if exclusive_minimum is True else minimum
    elif isinstance(exclusive_minimum, (int, float)) and not isinstance(
        exclusive_minimum, bool
    ):
        value = exclusive_minimum + 1
    elif maximum is not None:
        if exclusive_maximum is True and maximum <= 0:
            value = maximum - 1
        elif maximum < 0:
            value = maximum
    elif (
        isinstance(exclusive_maximum, (int, float))
        and not isinstance(exclusive_maximum, bool)
        and exclusive_maximum <= 0
    ):
        value = exclusive_maximum - 1
    return int(value) if integer else float(value)


class StaticSampler:
    """Deterministic, dependency-free SampleGenerator.

    Example::

        from shape_examples.samplers import StaticSampler
        from shape_examples.synthesis import GenerationOptions, resolve

        sampler = StaticSampler()
        value = sampler.sample(resolve(node), GenerationOptions(), None)
    """

    def sample(
        self,
        shape: ResolvedShape,
        options: GenerationOptions,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        """Return one value conforming to ``shape``.

        Raises:
            TypeError: If a scalar declares a type outside JSON Schema.
        """
        return self._traverse(shape, options, depth=0)

    def _traverse(self, shape: ResolvedShape, options: GenerationOptions, depth: int) -> Any:
        if shape.circular:
            return _placeholder(shape.kind)

        explicit = self._explicit_value(shape.keywords)
        if explicit is not _NOTHING:
            return explicit

        if shape.kind is ShapeKind.OBJECT:
            if not options.expands(depth):
                return {}
            return {
                name: self._traverse(prop, options, depth + 1)
                for name, prop in shape.properties.items()
                if options.includes(shape, name)
            }

        if shape.kind is ShapeKind.ARRAY:
            if not options.expands(depth) or shape.items is None:
                return []
            count = max(shape.keywords.get("minItems", 1), 1)
            if "maxItems" in shape.keywords:
                count = min(count, shape.keywords["maxItems"])
            return [
                self._traverse(shape.items, options, depth + 1) for _ in range(count)
            ]

        return self._sample_scalar(shape.keywords)

    @staticmethod
    def _explicit_value(keywords: Mapping[str, Any]) -> Any:
        for key in ("const", "example", "default"):
            if key in keywords:
                return copy.deepcopy(keywords[key])
        enum = keywords.get("enum")
        if enum:
            return copy.deepcopy(enum[0])
        return _NOTHING

    @staticmethod
    def _sample_scalar(keywords: Mapping[str, Any]) -> Any:
        declared = _first_type(keywords)
        if declared is None or declared == "null":
            return None
        if declared == "string":
            return _sample_string(keywords)
        if declared == "integer":
            return _sample_number(keywords, integer=True)
        if declared == "number":
            return _sample_number(keywords, integer=False)
        if declared == "boolean":
            return True
        if declared == "object":
            return {}
        if declared == "array":
            return []
        raise TypeError(
            f"Unsupported schema type {declared!r}; expected one of {_SCALAR_TYPES}"
        )


_NOTHING = object()


def _placeholder(kind: ShapeKind) -> Any:
    if kind is ShapeKind.OBJECT:
        return {}
    if kind is ShapeKind.ARRAY:
        return []
    return None
