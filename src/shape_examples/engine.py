"""ExampleEngine: orchestrator that turns a media type description into named examples.

The engine describes one media type of a request or response body and wires
``collect_active_selections`` + ``resolve`` + a ``SampleGenerator`` +
``apply_discriminator_values`` into a single reactive ``examples`` property.

States (see ``EngineState``):
- STATIC:      caller-supplied examples exist.  They are returned verbatim and
               nothing is generated.
- NO_EXAMPLES: no static examples and generation is disabled, or the shape or
               context is missing.  ``examples`` is None.
- GENERATING:  examples are synthesized from the shape.

Generation:
- Every selection cell in the shape tree is read first, so the memoized result
  is invalidated by any selection change, including inside inactive variants.
- A polymorphic root with variants fans out into one artifact per variant,
  keyed by the variant tag.  Nested selections keep their live values.
- Any other root yields a single artifact named ``"default"``.

The result is memoized by a ``Computed``; reading ``examples`` twice without
an intervening selection change returns the same mapping without sampling.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from enum import StrEnum, auto
from types import MappingProxyType
from typing import Any

from shape_examples.config import EngineOptions
from shape_examples.errors import GenerationError
from shape_examples.example import ExampleArtifact, single_artifact, static_artifacts
from shape_examples.protocols import SampleGenerator
from shape_examples.reactive import Cell, Computed
from shape_examples.samplers import StaticSampler
from shape_examples.shape.nodes import ShapeGraph, ShapeKind, ShapeNode
from shape_examples.synthesis.collector import collect_active_selections
from shape_examples.synthesis.options import GenerationOptions
from shape_examples.synthesis.patcher import apply_discriminator_values
from shape_examples.synthesis.resolver import ResolvedShape, resolve

__all__ = ["DEFAULT_EXAMPLE_NAME", "EngineState", "ExampleEngine", "is_json_like"]

logger = logging.getLogger(__name__)

DEFAULT_EXAMPLE_NAME = "default"

_JSON_LIKE = re.compile(r"^[^/\s]+/(?:[^/;\s]+\+)?json\s*(?:;.*)?$", re.IGNORECASE)

_UNSET: Any = object()


def is_json_like(content_type: str) -> bool:
    """Return True for JSON media types such as ``application/problem+json``."""
    return bool(_JSON_LIKE.match(content_type.strip()))


class EngineState(StrEnum):
    STATIC = auto()
    NO_EXAMPLES = auto()
    GENERATING = auto()


class ExampleEngine:
    """Reactive example provider for one media type.

    Example::

        graph = ShapeBuilder(context=document).build(pet_schema)
        engine = ExampleEngine("application/json", shape=graph, context=document)

        engine.examples.keys()           # dict_keys(["Cat", "Dog"])
        graph.node(5).select(1)          # a nested selection changes
        engine.examples["Cat"].value     # regenerated on this read

    Args:
        name:       Media type, e.g. ``"application/json"``.
        shape:      Shape graph (or bare root node) describing the body.
        is_request: True for request bodies (read-only fields hidden), False
                    for responses (write-only fields hidden).
        examples:   Caller-supplied examples by name.  Takes precedence over
                    everything else.
        example:    A single caller-supplied example, exposed as ``"default"``.
        encoding:   Per-property encoding metadata copied onto every artifact.
        context:    Document the shape came from; passed to the sampler and
                    used to resolve ``$ref`` examples.
        options:    Engine configuration.  Defaults to ``EngineOptions()``.
        sampler:    SampleGenerator.  Defaults to ``StaticSampler()``.
        generate:   Force generation on or off.  By default it is enabled for
                    JSON-like media types only.
    """

    def __init__(
        self,
        name: str,
        shape: ShapeGraph | ShapeNode | None = None,
        *,
        is_request: bool = False,
        examples: Mapping[str, Any] | None = None,
        example: Any = _UNSET,
        encoding: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = _UNSET,
        options: EngineOptions | None = None,
        sampler: SampleGenerator | None = None,
        generate: bool | None = None,
    ) -> None:
        self.name = name
        self.is_request = is_request
        self.encoding: dict[str, Any] = dict(encoding or {})
        self.options = options if options is not None else EngineOptions()
        self.sampler: SampleGenerator = sampler if sampler is not None else StaticSampler()

        if context is _UNSET:
            context = {}
        if isinstance(shape, ShapeNode):
            shape = ShapeGraph(shape)
        self._graph: Cell[ShapeGraph | None] = Cell(shape, "graph")
        self._context: Cell[Mapping[str, Any] | None] = Cell(context, "context")

        self._static: Mapping[str, ExampleArtifact] | None = None
        if examples is not None:
            self._static = MappingProxyType(
                static_artifacts(examples, self.encoding, context)
            )
        elif example is not _UNSET:
            artifact = single_artifact(
                DEFAULT_EXAMPLE_NAME, example, self.encoding, context
            )
            self._static = MappingProxyType({DEFAULT_EXAMPLE_NAME: artifact})

        self._generate = is_json_like(name) if generate is None else generate
        self._examples: Computed[Mapping[str, ExampleArtifact] | None] = Computed(
            self._compute_examples, f"examples[{name}]"
        )

    def __repr__(self) -> str:
        return f"ExampleEngine({self.name!r}, state={self.state.value})"

    # ------------------------------------------------------------------
    # Reactive inputs
    # ------------------------------------------------------------------

    @property
    def graph(self) -> ShapeGraph | None:
        return self._graph.peek()

    @graph.setter
    def graph(self, value: ShapeGraph | ShapeNode | None) -> None:
        if isinstance(value, ShapeNode):
            value = ShapeGraph(value)
        self._graph.set(value)

    @property
    def context(self) -> Mapping[str, Any] | None:
        return self._context.peek()

    @context.setter
    def context(self, value: Mapping[str, Any] | None) -> None:
        self._context.set(value)

    @property
    def generation_options(self) -> GenerationOptions:
        return GenerationOptions.for_direction(
            self.is_request,
            only_required=self.options.only_required_in_samples,
            max_depth=self.options.generated_samples_max_depth,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        if self._static is not None:
            return EngineState.STATIC
        graph = self.graph
        if not self._generate or graph is None or graph.root is None:
            return EngineState.NO_EXAMPLES
        if self.context is None:
            return EngineState.NO_EXAMPLES
        root = graph.root
        if root.kind is ShapeKind.POLYMORPHIC and not root.variants:
            return EngineState.NO_EXAMPLES
        return EngineState.GENERATING

    @property
    def examples(self) -> Mapping[str, ExampleArtifact] | None:
        """Named examples for the current selections, or None.

        The mapping is read-only and shared by every read until the next
        regeneration, so artifact values must be copied before mutating.

        Raises:
            GenerationError: If the sampler failed.  The failure is memoized
                until a selection (or the shape/context) changes.
        """
        return self._examples.get()

    @property
    def example_names(self) -> list[str]:
        return list(self.examples or {})

    def refresh(self) -> Mapping[str, ExampleArtifact] | None:
        """Discard the memoized result and generate again."""
        self._examples.invalidate()
        return self.examples

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _compute_examples(self) -> Mapping[str, ExampleArtifact] | None:
        if self._static is not None:
            return self._static

        graph = self._graph.get()
        context = self._context.get()
        if not self._generate or graph is None or graph.root is None or context is None:
            return None

        collect_active_selections(graph.root)
        logger.debug("Generating examples for %s", self.name)
        return self._generate_examples(graph.root, context)

    def _generate_examples(
        self, root: ShapeNode, context: Mapping[str, Any]
    ) -> Mapping[str, ExampleArtifact] | None:
        options = self.generation_options

        if root.kind is ShapeKind.POLYMORPHIC and root.variants:
            examples: dict[str, ExampleArtifact] = {}
            for index, variant in enumerate(root.variants):
                if variant.tag in examples:
                    logger.warning(
                        "Duplicate variant tag %r in %s; keeping the first variant",
                        variant.tag,
                        self.name,
                    )
                    continue
                shape = resolve(root, forced_variant=index)
                examples[variant.tag] = self._build_artifact(
                    variant.tag, shape, options, context
                )
            return MappingProxyType(examples)

        shape = resolve(root)
        if shape.empty:
            return None
        artifact = self._build_artifact(DEFAULT_EXAMPLE_NAME, shape, options, context)
        return MappingProxyType({DEFAULT_EXAMPLE_NAME: artifact})

    def _build_artifact(
        self,
        name: str,
        shape: ResolvedShape,
        options: GenerationOptions,
        context: Mapping[str, Any],
    ) -> ExampleArtifact:
        try:
            value = self.sampler.sample(shape, options, context)
        except Exception as exc:
            raise GenerationError(
                f"Sampling {name!r} for {self.name} failed: {exc}", example_name=name
            ) from exc

        # The resolved root carries the root tag, so this also sets it.
        apply_discriminator_values(value, shape)
        return ExampleArtifact(name=name, value=value, encoding_hints=self.encoding)
