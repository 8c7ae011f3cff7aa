"""pytest plugin for shape-examples.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from shape_examples.shape.nodes import ShapeKind, ShapeNode
from shape_examples.synthesis.resolver import ResolvedShape, resolve


def discriminator_mismatches(
    value: Any, shape: ResolvedShape, path: str = ""
) -> list[tuple[str, str, Any, str]]:
    """List ``(path, field, actual, expected)`` for every wrong or missing tag.

    Positions absent from ``value`` are not reported.
    """
    mismatches: list[tuple[str, str, Any, str]] = []
    if shape.circular:
        return mismatches
    if isinstance(value, dict):
        for field_name, tag in shape.discriminators:
            actual = value.get(field_name)
            if actual != tag:
                mismatches.append((path or "/", field_name, actual, tag))
        if shape.kind is ShapeKind.OBJECT:
            for name, prop in shape.properties.items():
                if name in value:
                    mismatches.extend(
                        discriminator_mismatches(value[name], prop, f"{path}/{name}")
                    )
    elif isinstance(value, list) and shape.items is not None:
        for index, item in enumerate(value):
            mismatches.extend(
                discriminator_mismatches(item, shape.items, f"{path}/{index}")
            )
    return mismatches


@pytest.fixture(scope="session")
def assert_discriminators_consistent() -> Any:
    """Fixture that returns a callable discriminator-consistency asserter.

    The fixture is session-scoped because the returned callable is stateless
    (it resolves the shape against the selections current at call time).

    Usage in tests::

        def test_cat(assert_discriminators_consistent):
            artifact = engine.examples["Cat"]
            assert_discriminators_consistent(artifact.value, graph.root, variant=0)

    Returns:
        A callable ``_assert(value, node, variant=None) -> None`` that raises
        ``AssertionError`` when any discriminator field in ``value`` differs
        from the tag of the variant selected at that position.  ``variant``
        forces the root selection, as the engine does for root-level variants.
    """

    def _assert(value: Any, node: ShapeNode, variant: int | None = None) -> None:
        mismatches = discriminator_mismatches(value, resolve(node, forced_variant=variant))
        if mismatches:
            lines = "\n".join(
                f"  {path}: {field_name}={actual!r}, expected {expected!r}"
                for path, field_name, actual, expected in mismatches
            )
            raise AssertionError(
                f"Discriminators inconsistent with selection "
                f"({len(mismatches)} mismatches):\n{lines}\n  value: {value}"
            )

    return _assert
