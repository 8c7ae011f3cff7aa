"""Shared shape fixtures.

The pet document is a small OpenAPI-style document with a root-level
discriminated union (Pet = Cat | Dog, tagged by ``petType``) whose variants
both reference a nested union (Toy = Ball | Rope, tagged by ``toyType`` with
an explicit mapping).  All fixtures are rebuilt per test so selection state
never leaks between tests.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from shape_examples.shape import ShapeBuilder, ShapeGraph, ShapeKind, ShapeNode, Variant
from shape_examples.synthesis import GenerationOptions, ResolvedShape

_PET_DOCUMENT: dict[str, Any] = {
    "components": {
        "schemas": {
            "Pet": {
                "oneOf": [
                    {"$ref": "#/components/schemas/Cat"},
                    {"$ref": "#/components/schemas/Dog"},
                ],
                "discriminator": {"propertyName": "petType"},
            },
            "Cat": {
                "type": "object",
                "required": ["petType", "name"],
                "properties": {
                    "petType": {"type": "string"},
                    "name": {"type": "string"},
                    "lives": {"type": "integer", "minimum": 1},
                    "toy": {"$ref": "#/components/schemas/Toy"},
                },
            },
            "Dog": {
                "type": "object",
                "required": ["petType", "name"],
                "properties": {
                    "petType": {"type": "string"},
                    "name": {"type": "string"},
                    "id": {"type": "integer", "readOnly": True},
                    "secret": {"type": "string", "writeOnly": True},
                    "toy": {"$ref": "#/components/schemas/Toy"},
                },
            },
            "Toy": {
                "oneOf": [
                    {"$ref": "#/components/schemas/Ball"},
                    {"$ref": "#/components/schemas/Rope"},
                ],
                "discriminator": {
                    "propertyName": "toyType",
                    "mapping": {
                        "ball": "#/components/schemas/Ball",
                        "rope": "#/components/schemas/Rope",
                    },
                },
            },
            "Ball": {
                "type": "object",
                "properties": {
                    "toyType": {"type": "string"},
                    "diameter": {"type": "number"},
                },
            },
            "Rope": {
                "type": "object",
                "properties": {
                    "toyType": {"type": "string"},
                    "length": {"type": "integer"},
                },
            },
        }
    }
}


@pytest.fixture
def pet_document() -> dict[str, Any]:
    return copy.deepcopy(_PET_DOCUMENT)


@pytest.fixture
def pet_graph(pet_document: dict[str, Any]) -> ShapeGraph:
    """Graph rooted at the Pet union."""
    return ShapeBuilder(context=pet_document).build({"$ref": "#/components/schemas/Pet"})


@pytest.fixture
def owner_graph(pet_document: dict[str, Any]) -> ShapeGraph:
    """Graph rooted at a plain object whose ``pet`` property is the Pet union."""
    return ShapeBuilder(context=pet_document).build(
        {
            "type": "object",
            "required": ["pet"],
            "properties": {
                "owner": {"type": "string"},
                "pet": {"$ref": "#/components/schemas/Pet"},
            },
        }
    )


def _object(**properties: ShapeNode) -> ShapeNode:
    return ShapeNode(kind=ShapeKind.OBJECT, properties=dict(properties))


def _string() -> ShapeNode:
    return ShapeNode(kind=ShapeKind.SCALAR, keywords={"type": "string"})


@pytest.fixture
def split_graph() -> ShapeGraph:
    """Hand-built graph whose two pet variants own *separate* nested unions.

    root (object)
      pet: union[petType]
        Cat -> {petType, toy: union[toyType] (ball | rope)}
        Dog -> {petType, bone: union[boneType] (raw | cooked)}
    """
    toy = ShapeNode(
        kind=ShapeKind.POLYMORPHIC,
        title="Toy",
        discriminator_field="toyType",
        variants=[
            Variant("ball", _object(toyType=_string())),
            Variant("rope", _object(toyType=_string())),
        ],
    )
    bone = ShapeNode(
        kind=ShapeKind.POLYMORPHIC,
        title="Bone",
        discriminator_field="boneType",
        variants=[
            Variant("raw", _object(boneType=_string())),
            Variant("cooked", _object(boneType=_string())),
        ],
    )
    pet = ShapeNode(
        kind=ShapeKind.POLYMORPHIC,
        title="Pet",
        discriminator_field="petType",
        variants=[
            Variant("Cat", _object(petType=_string(), toy=toy)),
            Variant("Dog", _object(petType=_string(), bone=bone)),
        ],
    )
    return ShapeGraph(_object(pet=pet))


class CountingSampler:
    """Wraps a sampler and counts ``sample`` calls."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner
        self.calls: list[ResolvedShape] = []

    def sample(
        self, shape: ResolvedShape, options: GenerationOptions, context: Any
    ) -> Any:
        self.calls.append(shape)
        return self.inner.sample(shape, options, context)


@pytest.fixture
def counting_sampler() -> CountingSampler:
    from shape_examples.samplers import StaticSampler

    return CountingSampler(StaticSampler())
