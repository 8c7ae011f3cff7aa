"""Exception types raised by shape-examples.

Soft failures are not represented here: a missing shape or context yields
``None`` from ``ExampleEngine.examples``, stale selections are clamped, and
value/shape mismatches during patching are skipped.
"""

from __future__ import annotations

__all__ = ["CycleError", "GenerationError", "ShapeBuildError", "ShapeExamplesError"]


class ShapeExamplesError(Exception):
    """Base class for all errors raised by this package."""


class GenerationError(ShapeExamplesError):
    """The sample generator failed while producing an example.

    The original exception is chained as ``__cause__``.

    Attributes:
        example_name: Name of the artifact being generated when the failure
            occurred (a variant tag or ``"default"``).
    """

    def __init__(self, message: str, example_name: str) -> None:
        super().__init__(message)
        self.example_name = example_name


class ShapeBuildError(ShapeExamplesError, ValueError):
    """A schema could not be converted into a shape graph."""


class CycleError(ShapeExamplesError, RuntimeError):
    """A reactive computation read its own value while evaluating."""
