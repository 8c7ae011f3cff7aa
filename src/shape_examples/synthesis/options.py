"""GenerationOptions: the knobs a sample generator must honour.

GenerationOptions is a frozen (immutable) dataclass.  Engines derive it from
the direction of the media type they describe: request bodies hide read-only
fields, response bodies hide write-only fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shape_examples.synthesis.resolver import ResolvedShape


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Immutable options passed to ``SampleGenerator.sample``.

    Attributes:
        skip_read_only:    Omit properties marked ``readOnly``.
        skip_write_only:   Omit properties marked ``writeOnly``.
        skip_non_required: Omit object properties not listed in ``required``.
        max_depth:         Deepest nesting level (the root is 0) at which
            objects and arrays are still expanded.  Deeper ones are emitted as
            ``{}`` or ``[]``.  The root is always expanded, so ``0`` yields the
            root's own fields with every nested object or array left empty.
    """

    skip_read_only: bool = False
    skip_write_only: bool = False
    skip_non_required: bool = False
    max_depth: int = 10

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            msg = f"max_depth must be >= 0, got {self.max_depth}"
            raise ValueError(msg)

    @classmethod
    def for_direction(
        cls,
        is_request: bool,
        only_required: bool = False,
        max_depth: int = 10,
    ) -> GenerationOptions:
        """Derive options for a request (``True``) or response body."""
        return cls(
            skip_read_only=is_request,
            skip_write_only=not is_request,
            skip_non_required=is_request and only_required,
            max_depth=max_depth,
        )

    def expands(self, depth: int) -> bool:
        """Whether an object or array at nesting ``depth`` (root 0) is expanded."""
        return depth <= self.max_depth

    def includes(self, parent: ResolvedShape, name: str) -> bool:
        """Whether property ``name`` of ``parent`` belongs in the sample."""
        prop = parent.properties[name]
        if self.skip_read_only and prop.read_only:
            return False
        if self.skip_write_only and prop.write_only:
            return False
        if self.skip_non_required and name not in parent.required:
            return False
        return True
