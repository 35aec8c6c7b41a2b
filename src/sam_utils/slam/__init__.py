"""Noise models, manifold metadata and measurement factors."""
from .noise import Diagonal, Isotropic, Unit, Sampler
from .measurements import (
    ProjectionConfig,
    NoiseModelFactor,
    PriorFactor,
    BetweenFactor,
    GenericProjectionFactor,
)
from .manifold import tangent_dim, get_manifold_for_value_type

__all__ = [
    "Diagonal", "Isotropic", "Unit", "Sampler",
    "ProjectionConfig", "NoiseModelFactor", "PriorFactor", "BetweenFactor",
    "GenericProjectionFactor",
    "tangent_dim", "get_manifold_for_value_type",
]
