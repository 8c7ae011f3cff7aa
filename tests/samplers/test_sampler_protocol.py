"""Tests for SampleGenerator Protocol conformance.

Verifies that:
- User-defined classes with a conformant ``sample`` method satisfy the Protocol.
- Classes without ``sample`` do not satisfy it.
- The bundled samplers satisfy the Protocol structurally without inheritance.
"""

from __future__ import annotations

from typing import Any

from shape_examples.protocols import SampleGenerator
from shape_examples.samplers import HypothesisSampler, StaticSampler


class _UserSampler:
    """Minimal user-defined sampler conforming to SampleGenerator."""

    def sample(self, shape: Any, options: Any, context: Any) -> Any:
        return {}


class _WrongNameSampler:
    """Class with wrong method name — should NOT satisfy Protocol."""

    def generate(self, shape: Any, options: Any, context: Any) -> Any:
        return {}


def test_user_defined_sampler_passes_isinstance() -> None:
    assert isinstance(_UserSampler(), SampleGenerator) is True


def test_wrong_method_name_fails_isinstance() -> None:
    assert isinstance(_WrongNameSampler(), SampleGenerator) is False


def test_static_sampler_conforms() -> None:
    assert isinstance(StaticSampler(), SampleGenerator)


def test_hypothesis_sampler_class_conforms() -> None:
    # Checked on the class attribute; instantiation needs the optional extra.
    assert callable(getattr(HypothesisSampler, "sample", None))
