# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Ordered factor collection for sam-utils.

The FactorGraph stores heterogeneous factors (priors, relative-pose
constraints, camera projections) in insertion order. That order is a contract:
the residual collector in `utilities.projection` emits one matrix column per
projection factor, in the order the factors were added.

Each factor exposes:

    kind                     -> FactorKind tag
    keys                     -> tuple of the unknowns it touches
    unwhitened_error(values) -> raw residual vector
    error(values)            -> 0.5 * squared Mahalanobis norm

Filtering by measurement model goes through the `kind` tag, so callers never
need to test classes.

Primary Methods
---------------
add(factor) / push_back(factor)
    Append one factor.

of_kind(kind)
    Factors with the given tag, in graph order.

error(values)
    Total objective 0.5 * Σ ||whiten(r_i)||² over all factors.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Protocol, Set, Tuple

import jax.numpy as jnp

from .types import FactorKind, Key


class Factor(Protocol):
    kind: FactorKind
    keys: Tuple[Key, ...]

    def unwhitened_error(self, values: Any) -> jnp.ndarray: ...

    def error(self, values: Any) -> float: ...


@dataclass
class FactorGraph:
    """
    Ordered, appendable collection of factors.

    Factors are never mutated once added; iteration follows insertion order.
    """
    factors: List[Factor] = field(default_factory=list)

    def add(self, factor: Factor) -> None:
        if not isinstance(getattr(factor, "kind", None), FactorKind):
            raise TypeError(f"{type(factor).__name__} has no FactorKind tag")
        self.factors.append(factor)

    push_back = add

    def __iter__(self) -> Iterator[Factor]:
        return iter(self.factors)

    def __len__(self) -> int:
        return len(self.factors)

    def __getitem__(self, i: int) -> Factor:
        return self.factors[i]

    def of_kind(self, kind: FactorKind) -> List[Factor]:
        return [f for f in self.factors if f.kind is kind]

    def count(self, kind: FactorKind) -> int:
        return sum(1 for f in self.factors if f.kind is kind)

    def keys(self) -> Set[Key]:
        """All keys touched by any factor."""
        out: Set[Key] = set()
        for f in self.factors:
            out.update(f.keys)
        return out

    # --- Objective ---

    def error(self, values: Any) -> float:
        """
        Total error 0.5 * Σ ||whiten(r_i)||² of the graph at `values`.
        """
        return float(sum(f.error(values) for f in self.factors))
