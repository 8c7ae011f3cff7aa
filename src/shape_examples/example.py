"""ExampleArtifact dataclass: a named example value handed to a renderer.

Artifacts are rebuilt on every generation run.  Caller-supplied examples are
normalized into artifacts once, by ``static_artifacts`` or ``single_artifact``.

Artifacts are frozen and their ``encoding_hints`` are a read-only view.  The
``value`` itself is a plain JSON-like object shared with the engine's memoized
result: copy it before mutating.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from shape_examples.shape.builder import resolve_ref

__all__ = ["ExampleArtifact", "single_artifact", "static_artifacts"]

# Keys of an OpenAPI Example Object.
_EXAMPLE_OBJECT_KEYS = frozenset({"value", "summary", "description", "externalValue"})


@dataclass(frozen=True, slots=True)
class ExampleArtifact:
    """A concrete example value paired with its display name.

    Attributes:
        name:           Example name (a variant tag, ``"default"``, or the key
                        of a caller-supplied example).
        value:          JSON-like example value.  None when the example only
                        points at ``external_value``.  Must not be mutated.
        encoding_hints: Per-property encoding metadata of the media type, as
                        a read-only mapping.
        summary:        Short description of a caller-supplied example.
        description:    Long description of a caller-supplied example.
        external_value: URL of an externally hosted example value.
    """

    name: str
    value: Any
    encoding_hints: Mapping[str, Any] = field(default_factory=dict)
    summary: str | None = None
    description: str | None = None
    external_value: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.encoding_hints, MappingProxyType):
            hints = MappingProxyType(dict(self.encoding_hints))
            object.__setattr__(self, "encoding_hints", hints)


def _deref(entry: Any, context: Mapping[str, Any] | None) -> Any:
    if isinstance(entry, Mapping) and "$ref" in entry and context is not None:
        return resolve_ref(context, entry["$ref"])
    return entry


def _is_example_object(entry: Any) -> bool:
    return isinstance(entry, Mapping) and (
        "$ref" in entry or bool(_EXAMPLE_OBJECT_KEYS & entry.keys())
    )


def _to_artifact(
    name: str,
    entry: Any,
    encoding_hints: Mapping[str, Any],
    context: Mapping[str, Any] | None,
) -> ExampleArtifact:
    entry = _deref(entry, context)
    if not _is_example_object(entry):
        return ExampleArtifact(name=name, value=entry, encoding_hints=encoding_hints)
    return ExampleArtifact(
        name=name,
        value=entry.get("value"),
        encoding_hints=encoding_hints,
        summary=entry.get("summary"),
        description=entry.get("description"),
        external_value=entry.get("externalValue"),
    )


def static_artifacts(
    examples: Mapping[str, Any],
    encoding_hints: Mapping[str, Any] | None = None,
    context: Mapping[str, Any] | None = None,
) -> dict[str, ExampleArtifact]:
    """Normalize caller-supplied examples into artifacts.

    Each entry may be an OpenAPI Example Object (``value``, ``summary``,
    ``description``, ``externalValue``), a local ``$ref`` to one (resolved
    against ``context``), or a bare value.

    Raises:
        ShapeBuildError: If a ``$ref`` entry does not resolve.
    """
    hints = MappingProxyType(dict(encoding_hints or {}))
    return {
        name: _to_artifact(name, entry, hints, context)
        for name, entry in examples.items()
    }


def single_artifact(
    name: str,
    example: Any,
    encoding_hints: Mapping[str, Any] | None = None,
    context: Mapping[str, Any] | None = None,
) -> ExampleArtifact:
    """Wrap a single ``example`` value, following a local ``$ref`` first.

    Unlike ``static_artifacts`` entries, the value is never read as an Example
    Object: a mapping with a ``value`` key is a plain example value.

    Raises:
        ShapeBuildError: If a ``$ref`` does not resolve.
    """
    return ExampleArtifact(
        name=name,
        value=_deref(example, context),
        encoding_hints=encoding_hints or {},
    )
