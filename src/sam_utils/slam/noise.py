# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Gaussian noise models and a seeded sampler.

Noise models describe a zero-mean Gaussian over a tangent vector with
independent components:

    • `Diagonal.Sigmas(sigmas)`  one standard deviation per component
    • `Isotropic.Sigma(dim, s)`  the same standard deviation everywhere
    • `Unit.Create(dim)`         s = 1

They serve two roles: whitening residuals of measurement factors
(r ↦ r / σ), and generating synthetic noise through a `Sampler`.

Sampler
-------
A `Sampler` owns a JAX PRNG key derived from an integer seed. Every call to
`sample()` splits the key and draws one vector, so two samplers built with
the same model and seed produce the same sequence of draws.

A zero standard deviation is allowed for sampling (the draw is exactly zero
in that component) but cannot be whitened.
"""

from __future__ import annotations
from dataclasses import dataclass

import jax
import jax.numpy as jnp


@dataclass(frozen=True, eq=False)
class Diagonal:
    """Gaussian with independent components."""
    sigmas: jnp.ndarray

    def __post_init__(self) -> None:
        s = jnp.asarray(self.sigmas, dtype=jnp.result_type(float)).reshape(-1)
        if s.shape[0] == 0:
            raise ValueError("A noise model needs at least one dimension")
        if bool(jnp.any(s < 0)):
            raise ValueError(f"Standard deviations must be non-negative, got {s}")
        object.__setattr__(self, "sigmas", s)

    @classmethod
    def Sigmas(cls, sigmas) -> "Diagonal":
        return cls(jnp.asarray(sigmas))

    @property
    def dim(self) -> int:
        return int(self.sigmas.shape[0])

    def _check(self, v: jnp.ndarray) -> jnp.ndarray:
        v = jnp.asarray(v).reshape(-1)
        if v.shape[0] != self.dim:
            raise ValueError(f"Expected a {self.dim}-vector, got shape {v.shape}")
        return v

    def whiten(self, v: jnp.ndarray) -> jnp.ndarray:
        v = self._check(v)
        if bool(jnp.any(self.sigmas == 0)):
            raise ValueError("Cannot whiten with a zero standard deviation")
        return v / self.sigmas

    def unwhiten(self, v: jnp.ndarray) -> jnp.ndarray:
        return self._check(v) * self.sigmas

    def distance(self, v: jnp.ndarray) -> float:
        """Squared Mahalanobis norm of `v`."""
        w = self.whiten(v)
        return float(jnp.dot(w, w))

    def information(self) -> jnp.ndarray:
        return jnp.diag(1.0 / (self.sigmas * self.sigmas))


@dataclass(frozen=True, eq=False)
class Isotropic(Diagonal):
    """Gaussian with the same standard deviation in every component."""

    @classmethod
    def Sigma(cls, dim: int, sigma: float) -> "Isotropic":
        return cls(jnp.full((int(dim),), float(sigma)))

    @property
    def sigma(self) -> float:
        return float(self.sigmas[0])


@dataclass(frozen=True, eq=False)
class Unit(Isotropic):

    @classmethod
    def Create(cls, dim: int) -> "Unit":
        return cls(jnp.ones((int(dim),)))


class Sampler:
    """Seeded generator of draws from one noise model."""

    def __init__(self, model: Diagonal, seed: int = 42) -> None:
        self.model = model
        self.seed = int(seed)
        self._key = jax.random.PRNGKey(self.seed)

    def sample(self) -> jnp.ndarray:
        self._key, sub = jax.random.split(self._key)
        return self.model.sigmas * jax.random.normal(sub, (self.model.dim,))
