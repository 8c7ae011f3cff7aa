"""Public API functions for shape-examples.

This module provides the one-shot entry points: ``build_shape`` and
``generate_examples``.  Each call creates a fresh ShapeBuilder (and
ExampleEngine), so no selection state is shared between calls.  Callers that
need reactivity keep the graph and engine themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from shape_examples.config import EngineOptions
from shape_examples.engine import ExampleEngine
from shape_examples.example import ExampleArtifact
from shape_examples.protocols import SampleGenerator
from shape_examples.shape.builder import ShapeBuilder
from shape_examples.shape.nodes import ShapeGraph

__all__ = ["build_shape", "generate_examples"]


def build_shape(
    schema: Mapping[str, Any],
    context: Mapping[str, Any] | None = None,
) -> ShapeGraph:
    """Convert a JSON-Schema / OpenAPI schema into a ShapeGraph.

    Args:
        schema:  The schema dict.  May be a bare ``{"$ref": ...}``.
        context: Document that ``$ref``s resolve against.  Defaults to ``{}``.

    Returns:
        A ShapeGraph with every node registered and all selections at 0.

    Raises:
        ShapeBuildError: If the schema is malformed or a ref is unresolvable.
    """
    return ShapeBuilder(context=context or {}).build(schema)


def generate_examples(
    schema: Mapping[str, Any],
    media_type: str = "application/json",
    *,
    is_request: bool = False,
    context: Mapping[str, Any] | None = None,
    options: EngineOptions | None = None,
    sampler: SampleGenerator | None = None,
) -> Mapping[str, ExampleArtifact] | None:
    """Generate examples for ``schema`` with every variant selection at 0.

    Args:
        schema:     The schema dict.
        media_type: Generation only happens for JSON-like media types.
        is_request: True for request bodies, False for responses.
        context:    Document that ``$ref``s resolve against.
        options:    Engine configuration.  Defaults to ``EngineOptions()``.
        sampler:    SampleGenerator.  Defaults to ``StaticSampler()``.

    Returns:
        Examples keyed by variant tag for a polymorphic root, a single
        ``"default"`` example otherwise, or None when nothing can be generated.

    Raises:
        GenerationError: If the sampler failed.
    """
    document = context or {}
    engine = ExampleEngine(
        media_type,
        build_shape(schema, document),
        is_request=is_request,
        context=document,
        options=options,
        sampler=sampler,
    )
    return engine.examples
