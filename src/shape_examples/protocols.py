"""SampleGenerator Protocol for the shape-examples sampler extension point.

Defines the structural interface every sample generator must satisfy.
Users can plug in custom samplers without inheriting from any base class —
any class with a conformant ``sample`` method passes ``isinstance`` checks.

Example::

    from shape_examples.protocols import SampleGenerator

    class ConstantSampler:
        def sample(self, shape, options, context):
            return {} if shape.kind == "object" else None

    assert isinstance(ConstantSampler(), SampleGenerator)  # structural conformance
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shape_examples.synthesis.options import GenerationOptions
    from shape_examples.synthesis.resolver import ResolvedShape


@runtime_checkable
class SampleGenerator(Protocol):
    """Structural protocol for sample generators.

    The ``sample`` method must:
    - Return one JSON-like value (dict, list, str, int, float, bool, None)
      conforming to ``shape``.
    - Omit read-only / write-only / non-required properties as requested by
      ``options``.
    - Emit ``{}`` / ``[]`` for objects / arrays nested deeper than
      ``options.max_depth``.
    - Return a fresh value on every call; callers mutate it in place.
    - Raise on shapes it cannot handle.  Callers do not retry.

    Discriminator fields need no special care: they are overwritten after
    sampling.
    """

    def sample(
        self,
        shape: ResolvedShape,
        options: GenerationOptions,
        context: Mapping[str, Any] | None,
    ) -> Any: ...
