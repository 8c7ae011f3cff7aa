"""Shape examples - reactive example synthesis for discriminated schemas."""

from __future__ import annotations

from shape_examples.api import build_shape, generate_examples
from shape_examples.config import EngineOptions
from shape_examples.engine import EngineState, ExampleEngine
from shape_examples.errors import GenerationError, ShapeBuildError
from shape_examples.example import ExampleArtifact
from shape_examples.shape import ShapeBuilder, ShapeGraph, ShapeKind, ShapeNode, Variant
from shape_examples.synthesis import GenerationOptions

__version__: str = "0.1.0"
__all__: list[str] = [
    "EngineOptions",
    "EngineState",
    "ExampleArtifact",
    "ExampleEngine",
    "GenerationError",
    "GenerationOptions",
    "ShapeBuildError",
    "ShapeBuilder",
    "ShapeGraph",
    "ShapeKind",
    "ShapeNode",
    "Variant",
    "build_shape",
    "generate_examples",
]
