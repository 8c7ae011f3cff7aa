"""HypothesisSampler: randomized samples drawn via hypothesis-jsonschema.

Renders the resolved shape as a JSON Schema that already honours the
visibility and depth options, compiles it with
``hypothesis_jsonschema.from_schema`` and draws one example from the strategy.
Values differ between calls; only structure is guaranteed.

Compiling a strategy is the expensive step, so compiled strategies are kept in
a per-instance ``LRUCache`` keyed by the canonical JSON of the rendered schema.
Eviction is silent.

The ``hypothesis`` and ``hypothesis-jsonschema`` packages are imported lazily
inside ``__init__``, so importing this module on a base install does not
raise.  Install the optional dependency with::

    pip install shape-examples[hypothesis]
"""

from __future__ import annotations

import json
import logging
import warnings
from collections.abc import Mapping
from typing import Any

from cachetools import LRUCache

from shape_examples.shape.nodes import ShapeKind
from shape_examples.synthesis.options import GenerationOptions
from shape_examples.synthesis.resolver import ResolvedShape

logger = logging.getLogger(__name__)

# Keywords hypothesis-jsonschema understands for scalar shapes.
_SCALAR_KEYWORDS = (
    "type",
    "enum",
    "const",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    "minLength",
    "maxLength",
    "pattern",
)

_SUPPORTED_FORMATS = frozenset(
    {"date", "date-time", "time", "email", "hostname", "ipv4", "ipv6"}
)

# Default upper bound on array length when the schema sets no maxItems.
_MAX_ITEMS = 3


def sampling_schema(
    shape: ResolvedShape, options: GenerationOptions, depth: int = 0
) -> dict[str, Any]:
    """Render ``shape`` as a JSON Schema restricted by ``options``.

    Hidden properties are dropped, objects and arrays past ``max_depth``
    become empty, and objects forbid additional properties.
    """
    if shape.circular:
        return shape.to_json_schema()

    if shape.kind is ShapeKind.OBJECT:
        if not options.expands(depth):
            return {"type": "object", "maxProperties": 0}
        properties = {
            name: sampling_schema(prop, options, depth + 1)
            for name, prop in shape.properties.items()
            if options.includes(shape, name)
        }
        schema: dict[str, Any] = {
            "type": "object",
            "properties": properties,
            "additionalProperties": False,
        }
        required = sorted(n for n in shape.required if n in properties)
        if required:
            schema["required"] = required
        return schema

    if shape.kind is ShapeKind.ARRAY:
        if not options.expands(depth) or shape.items is None:
            return {"type": "array", "maxItems": 0}
        min_items = shape.keywords.get("minItems", 1)
        max_items = shape.keywords.get("maxItems", max(min_items, _MAX_ITEMS))
        return {
            "type": "array",
            "items": sampling_schema(shape.items, options, depth + 1),
            "minItems": min(min_items, max_items),
            "maxItems": max_items,
        }

    scalar = {k: shape.keywords[k] for k in _SCALAR_KEYWORDS if k in shape.keywords}
    if shape.keywords.get("format") in _SUPPORTED_FORMATS:
        scalar["format"] = shape.keywords["format"]
    return scalar


class HypothesisSampler:
    """SampleGenerator backed by hypothesis-jsonschema strategies.

    Satisfies the ``SampleGenerator`` Protocol structurally.

    Args:
        max_cache_size: Maximum number of compiled strategies kept per
            instance.  Defaults to 128.

    Raises:
        ImportError: If ``hypothesis-jsonschema`` is not installed.  The
            message includes the install command.

    Example::

        from shape_examples.samplers.hypothesis import HypothesisSampler

        engine = ExampleEngine("application/json", shape=graph,
                               sampler=HypothesisSampler())
    """

    def __init__(self, max_cache_size: int = 128) -> None:
        try:
            from hypothesis.errors import NonInteractiveExampleWarning
            from hypothesis_jsonschema import from_schema
        except ImportError as exc:
            raise ImportError(
                "hypothesis-jsonschema is required for HypothesisSampler. "
                "Install with: pip install shape-examples[hypothesis]"
            ) from exc

        self._from_schema = from_schema
        self._warning = NonInteractiveExampleWarning
        self._strategies: LRUCache[str, Any] = LRUCache(maxsize=max_cache_size)

    def __repr__(self) -> str:
        return f"HypothesisSampler(cached={self.curr_size}/{self.max_size})"

    @property
    def max_size(self) -> int:
        return int(self._strategies.maxsize)

    @property
    def curr_size(self) -> int:
        return int(self._strategies.currsize)

    def sample(
        self,
        shape: ResolvedShape,
        options: GenerationOptions,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        """Draw one random value conforming to ``shape``."""
        schema = sampling_schema(shape, options)
        key = json.dumps(schema, sort_keys=True, default=str)
        strategy = self._strategies.get(key)
        if strategy is None:
            logger.debug("Compiling strategy for %s", shape.title or shape.kind.value)
            strategy = self._from_schema(schema)
            self._strategies[key] = strategy
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", self._warning)
            return strategy.example()
