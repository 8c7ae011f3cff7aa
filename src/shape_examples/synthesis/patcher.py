"""Post-sampling repair of discriminator fields.

Generic samplers know nothing about discriminators: they emit no tag, or an
arbitrary string from the property's own schema.  ``apply_discriminator_values``
walks the sampled value and its ResolvedShape in lockstep and writes the tag
of the variant actually used wherever a polymorphic node was resolved.

Positions where the value does not have the shape's structure (a property
dropped by visibility or depth limits, a placeholder, a scalar where an object
was expected) are skipped.
"""

from __future__ import annotations

import logging
from typing import Any

from shape_examples.shape.nodes import ShapeKind
from shape_examples.synthesis.resolver import ResolvedShape

__all__ = ["apply_discriminator_values"]

logger = logging.getLogger(__name__)


def apply_discriminator_values(value: Any, shape: ResolvedShape) -> Any:
    """Stamp discriminator tags into ``value`` in place and return it."""
    _patch(value, shape, "")
    return value


def _patch(value: Any, shape: ResolvedShape, path: str) -> None:
    if shape.circular:
        return

    if isinstance(value, dict):
        for field_name, tag in shape.discriminators:
            value[field_name] = tag
        if shape.kind is not ShapeKind.OBJECT:
            return
        for name, prop in shape.properties.items():
            if name in value:
                _patch(value[name], prop, f"{path}/{name}")
        return

    if isinstance(value, list):
        if shape.kind is ShapeKind.ARRAY and shape.items is not None:
            for index, item in enumerate(value):
                _patch(item, shape.items, f"{path}/{index}")
        return

    if shape.discriminators:
        logger.debug(
            "No object at %r to carry discriminator %r, skipped",
            path or "/",
            shape.discriminator_field,
        )
