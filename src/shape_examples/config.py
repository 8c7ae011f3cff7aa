"""EngineOptions: caller-facing configuration of ExampleEngine.

EngineOptions is a frozen (immutable) dataclass.  It holds the settings that
do not depend on the media type being described; the per-media-type
GenerationOptions are derived from it together with the request/response
direction.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EngineOptions:
    """Immutable configuration for example generation.

    Attributes:
        only_required_in_samples: Request examples contain required properties
            only.  Response examples are unaffected.  Default False.
        generated_samples_max_depth: Deepest nesting level below the root at
            which generated objects and arrays are still expanded.  ``0``
            expands the root only.  Default 10.
    """

    only_required_in_samples: bool = False
    generated_samples_max_depth: int = 10

    def __post_init__(self) -> None:
        if self.generated_samples_max_depth < 0:
            msg = (
                "generated_samples_max_depth must be >= 0, "
                f"got {self.generated_samples_max_depth}"
            )
            raise ValueError(msg)
