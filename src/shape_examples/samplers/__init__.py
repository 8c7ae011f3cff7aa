"""Samplers subpackage for shape-examples.

The base install provides only ``StaticSampler`` — a deterministic,
dependency-free sampler.  ``HypothesisSampler`` draws randomized values and is
available via an extra:

    pip install shape-examples[hypothesis]

All samplers satisfy the ``SampleGenerator`` Protocol structurally.
"""

from shape_examples.samplers.static import StaticSampler

# The HypothesisSampler class always imports; its optional dependencies are
# only needed when it is instantiated.
from shape_examples.samplers.hypothesis import HypothesisSampler, sampling_schema

__all__ = ["HypothesisSampler", "StaticSampler", "sampling_schema"]
