"""Synthesis subpackage: the stages between a shape tree and a sampled example.

- collect_active_selections: subscribe to every selection cell (reactivity)
- resolve / ResolvedShape: collapse polymorphic nodes to their active variant
- apply_discriminator_values: stamp variant tags into a sampled value
- GenerationOptions: visibility and depth options honoured by samplers
"""

from shape_examples.synthesis.collector import collect_active_selections
from shape_examples.synthesis.options import GenerationOptions
from shape_examples.synthesis.patcher import apply_discriminator_values
from shape_examples.synthesis.resolver import ResolvedShape, resolve

__all__ = [
    "GenerationOptions",
    "ResolvedShape",
    "apply_discriminator_values",
    "collect_active_selections",
    "resolve",
]
