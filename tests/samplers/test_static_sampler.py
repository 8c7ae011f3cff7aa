"""Tests for StaticSampler.

Covers:
- Value precedence (const > example > default > enum > type default)
- String formats and length limits, numeric bounds
- Visibility options (read-only, write-only, non-required)
- max_depth placeholders
- Circular placeholders
- Determinism and fresh values per call
- Unsupported types
"""

from __future__ import annotations

from typing import Any

import pytest

from shape_examples.samplers import StaticSampler
from shape_examples.shape import ShapeBuilder, ShapeGraph, ShapeKind
from shape_examples.synthesis import GenerationOptions, ResolvedShape, resolve


def _scalar(**keywords: Any) -> ResolvedShape:
    return ResolvedShape(kind=ShapeKind.SCALAR, keywords=keywords)


def _sample(schema: dict[str, Any], options: GenerationOptions | None = None) -> Any:
    shape = resolve(ShapeBuilder().build_node(schema))
    return StaticSampler().sample(shape, options or GenerationOptions(), None)


class TestScalars:
    @pytest.mark.parametrize(
        ("keywords", "expected"),
        [
            ({"type": "string", "const": "c", "example": "e"}, "c"),
            ({"type": "string", "example": "e", "default": "d"}, "e"),
            ({"type": "string", "default": "d", "enum": ["x"]}, "d"),
            ({"type": "string", "enum": ["x", "y"]}, "x"),
            ({"type": "string"}, "string"),
            ({"type": "integer"}, 0),
            ({"type": "number"}, 0.0),
            ({"type": "boolean"}, True),
            ({"type": "null"}, None),
            ({}, None),
        ],
    )
    def test_precedence_and_type_defaults(
        self, keywords: dict[str, Any], expected: Any
    ) -> None:
        value = StaticSampler().sample(_scalar(**keywords), GenerationOptions(), None)
        assert value == expected
        assert type(value) is type(expected)

    def test_string_formats(self) -> None:
        sampler = StaticSampler()
        options = GenerationOptions()
        assert sampler.sample(_scalar(type="string", format="email"), options, None) == (
            "user@example.com"
        )
        assert sampler.sample(_scalar(type="string", format="date"), options, None) == (
            "2019-08-24"
        )

    def test_string_length_limits(self) -> None:
        sampler = StaticSampler()
        options = GenerationOptions()
        assert len(sampler.sample(_scalar(type="string", minLength=10), options, None)) == 10
        assert sampler.sample(_scalar(type="string", maxLength=3), options, None) == "str"

    def test_numeric_bounds(self) -> None:
        sampler = StaticSampler()
        options = GenerationOptions()
        assert sampler.sample(_scalar(type="integer", minimum=5), options, None) == 5
        assert sampler.sample(_scalar(type="integer", exclusiveMinimum=5), options, None) == 6
        assert sampler.sample(_scalar(type="number", maximum=-2), options, None) == -2.0
        assert sampler.sample(_scalar(type="integer", exclusiveMaximum=0), options, None) == -1

    def test_boolean_exclusive_bounds(self) -> None:
        sampler = StaticSampler()
        options = GenerationOptions()
        assert (
            sampler.sample(
                _scalar(type="integer", minimum=5, exclusiveMinimum=True), options, None
            )
            == 6
        )
        assert (
            sampler.sample(
                _scalar(type="integer", minimum=5, exclusiveMinimum=False), options, None
            )
            == 5
        )
        assert (
            sampler.sample(
                _scalar(type="number", maximum=-2, exclusiveMaximum=True), options, None
            )
            == -3.0
        )

    def test_nullable_type_list(self) -> None:
        value = StaticSampler().sample(_scalar(type=["null", "integer"]), GenerationOptions(), None)
        assert value == 0

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(TypeError, match="file"):
            StaticSampler().sample(_scalar(type="file"), GenerationOptions(), None)


class TestStructures:
    def test_object_contains_all_properties(self) -> None:
        value = _sample(
            {
                "type": "object",
                "properties": {"a": {"type": "string"}, "b": {"type": "integer"}},
            }
        )
        assert value == {"a": "string", "b": 0}

    def test_array_has_one_item(self) -> None:
        assert _sample({"type": "array", "items": {"type": "boolean"}}) == [True]

    def test_array_honours_min_items(self) -> None:
        value = _sample({"type": "array", "minItems": 3, "items": {"type": "integer"}})
        assert value == [0, 0, 0]

    def test_array_items_are_distinct_objects(self) -> None:
        value = _sample(
            {"type": "array", "minItems": 2, "items": {"type": "object", "properties": {}}}
        )
        assert value == [{}, {}]
        assert value[0] is not value[1]

    def test_array_max_items_zero(self) -> None:
        assert _sample({"type": "array", "maxItems": 0, "items": {"type": "integer"}}) == []

    def test_object_example_is_copied(self) -> None:
        example = {"x": [1, 2]}
        schema = {"type": "object", "example": example, "properties": {}}
        value = _sample(schema)
        assert value == example
        value["x"].append(3)
        assert example == {"x": [1, 2]}

    def test_returns_fresh_values(self, pet_graph: ShapeGraph) -> None:
        shape = resolve(pet_graph.root)  # type: ignore[arg-type]
        sampler = StaticSampler()
        first = sampler.sample(shape, GenerationOptions(), None)
        second = sampler.sample(shape, GenerationOptions(), None)
        assert first == second
        assert first is not second


class TestOptions:
    def test_response_skips_write_only(self, pet_graph: ShapeGraph) -> None:
        shape = resolve(pet_graph.root, forced_variant=1)  # type: ignore[arg-type]
        value = StaticSampler().sample(
            shape, GenerationOptions.for_direction(is_request=False), None
        )
        assert "secret" not in value
        assert value["id"] == 0

    def test_request_skips_read_only(self, pet_graph: ShapeGraph) -> None:
        shape = resolve(pet_graph.root, forced_variant=1)  # type: ignore[arg-type]
        value = StaticSampler().sample(
            shape, GenerationOptions.for_direction(is_request=True), None
        )
        assert "id" not in value
        assert value["secret"] == "string"

    def test_only_required(self, pet_graph: ShapeGraph) -> None:
        shape = resolve(pet_graph.root)  # type: ignore[arg-type]
        value = StaticSampler().sample(
            shape,
            GenerationOptions.for_direction(is_request=True, only_required=True),
            None,
        )
        assert set(value) == {"petType", "name"}


class TestDepth:
    _NESTED = {
        "type": "object",
        "properties": {
            "leaf": {"type": "string"},
            "child": {
                "type": "object",
                "properties": {"list": {"type": "array", "items": {"type": "integer"}}},
            },
        },
    }

    def test_depth_zero_expands_root_only(self) -> None:
        value = _sample(self._NESTED, GenerationOptions(max_depth=0))
        assert value == {"leaf": "string", "child": {}}

    def test_depth_one(self) -> None:
        value = _sample(self._NESTED, GenerationOptions(max_depth=1))
        assert value == {"leaf": "string", "child": {"list": []}}

    def test_default_depth_expands_everything(self) -> None:
        value = _sample(self._NESTED)
        assert value == {"leaf": "string", "child": {"list": [0]}}

    def test_root_array_expanded_at_depth_zero(self) -> None:
        schema = {"type": "array", "items": {"type": "array", "items": {}}}
        assert _sample(schema, GenerationOptions(max_depth=0)) == [[]]


class TestCircular:
    def test_recursive_schema_terminates(self) -> None:
        document = {
            "definitions": {
                "Node": {
                    "type": "object",
                    "properties": {
                        "value": {"type": "integer"},
                        "next": {"$ref": "#/definitions/Node"},
                    },
                }
            }
        }
        root = ShapeBuilder(context=document).build_node({"$ref": "#/definitions/Node"})
        value = StaticSampler().sample(resolve(root), GenerationOptions(), None)
        assert value == {"value": 0, "next": {}}
