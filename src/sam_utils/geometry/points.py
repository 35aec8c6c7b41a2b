# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Euclidean point types.

`Point2` and `Point3` are immutable value objects. Their manifold is plain
Euclidean space: `retract` adds a tangent vector and `local_coordinates`
subtracts.

Coordinates are Python floats and all scalar arithmetic stays in double
precision; `vector()` is only for feeding JAX matrix code.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar

import jax.numpy as jnp

from sam_utils.core.math3d import vector_components
from sam_utils.core.types import ValueType


@dataclass(frozen=True)
class Point2:
    """2D point (x, y)."""
    x: float
    y: float

    dim: ClassVar[int] = 2
    value_type: ClassVar[ValueType] = ValueType.POINT2

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def from_vector(cls, v) -> "Point2":
        return cls(*vector_components(v, 2, "Point2"))

    def vector(self) -> jnp.ndarray:
        return jnp.array([self.x, self.y])

    def retract(self, v) -> "Point2":
        dx, dy = vector_components(v, 2, "Point2.retract")
        return Point2(self.x + dx, self.y + dy)

    def local_coordinates(self, other: "Point2") -> jnp.ndarray:
        return jnp.array([other.x - self.x, other.y - self.y])

    def between(self, other: "Point2") -> "Point2":
        return Point2(other.x - self.x, other.y - self.y)

    def equals(self, other: object, tol: float = 1e-9) -> bool:
        if not isinstance(other, Point2):
            return False
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol


@dataclass(frozen=True)
class Point3:
    """3D point (x, y, z)."""
    x: float
    y: float
    z: float

    dim: ClassVar[int] = 3
    value_type: ClassVar[ValueType] = ValueType.POINT3

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    @classmethod
    def from_vector(cls, v) -> "Point3":
        return cls(*vector_components(v, 3, "Point3"))

    def vector(self) -> jnp.ndarray:
        return jnp.array([self.x, self.y, self.z])

    def retract(self, v) -> "Point3":
        dx, dy, dz = vector_components(v, 3, "Point3.retract")
        return Point3(self.x + dx, self.y + dy, self.z + dz)

    def local_coordinates(self, other: "Point3") -> jnp.ndarray:
        return jnp.array([other.x - self.x, other.y - self.y, other.z - self.z])

    def between(self, other: "Point3") -> "Point3":
        return Point3(other.x - self.x, other.y - self.y, other.z - self.z)

    def equals(self, other: object, tol: float = 1e-9) -> bool:
        if not isinstance(other, Point3):
            return False
        return (
            abs(self.x - other.x) <= tol
            and abs(self.y - other.y) <= tol
            and abs(self.z - other.z) <= tol
        )
