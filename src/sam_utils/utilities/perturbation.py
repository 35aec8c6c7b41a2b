# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Seeded random perturbation of typed values.

Used to build noisy initial estimates and test fixtures. Every entry of the
requested type is replaced, in place, by

    value.retract(sample)

where `sample` is drawn from a noise model sized to the type's tangent space.
One `Sampler` is created per call and consumes exactly one draw per entry, in
ascending key order. Fixing the seed and the set of keys therefore fixes the
whole output; a zero standard deviation leaves every value unchanged.

    perturb_point2(values, sigma, seed)             Isotropic(2, sigma)
    perturb_pose2(values, sigma_t, sigma_r, seed)   Diagonal([σt, σt, σr])
    perturb_point3(values, sigma, seed)             Isotropic(3, sigma)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging

from sam_utils.core.types import ValueType
from sam_utils.core.values import Values
from sam_utils.slam.manifold import tangent_dim
from sam_utils.slam.noise import Diagonal, Isotropic, Sampler

logger = logging.getLogger("sam_utils.utilities.perturbation")

DEFAULT_SEED = 42


@dataclass
class PerturbConfig:
    seed: int = DEFAULT_SEED


def perturb(
    values: Values,
    value_type: ValueType,
    model: Diagonal,
    cfg: Optional[PerturbConfig] = None,
) -> None:
    """
    Retract every `value_type` entry of `values` by one draw from `model`.

    Args:
        values: store to modify in place
        value_type: which entries to perturb
        model: noise model; its dimension must match the type's tangent space
        cfg: sampler seed (defaults to DEFAULT_SEED)
    """
    cfg = cfg or PerturbConfig()
    expected = tangent_dim(value_type)
    if model.dim != expected:
        raise ValueError(
            f"Noise model dimension {model.dim} does not match the "
            f"{expected}-dimensional tangent space of {value_type.value}"
        )
    sampler = Sampler(model, cfg.seed)
    entries = values.filter(value_type)
    for key, value in entries:
        values.update(key, value.retract(sampler.sample()))
    logger.debug(
        "Perturbed %d %s values (seed=%d)", len(entries), value_type.value, cfg.seed
    )


def perturb_point2(values: Values, sigma: float, seed: int = DEFAULT_SEED) -> None:
    """Perturb all Point2 values with isotropic Gaussian noise."""
    model = Isotropic.Sigma(2, sigma)
    perturb(values, ValueType.POINT2, model, PerturbConfig(seed))


def perturb_pose2(
    values: Values, sigma_t: float, sigma_r: float, seed: int = DEFAULT_SEED
) -> None:
    """Perturb all Pose2 values; `sigma_t` for x and y, `sigma_r` for heading."""
    model = Diagonal.Sigmas([sigma_t, sigma_t, sigma_r])
    perturb(values, ValueType.POSE2, model, PerturbConfig(seed))


def perturb_point3(values: Values, sigma: float, seed: int = DEFAULT_SEED) -> None:
    """Perturb all Point3 values with isotropic Gaussian noise."""
    model = Isotropic.Sigma(3, sigma)
    perturb(values, ValueType.POINT3, model, PerturbConfig(seed))
