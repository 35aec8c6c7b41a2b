# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Planar rotations and rigid transforms.

`Pose2` is an element of SE(2) stored as (x, y, theta), with the heading kept
wrapped to (-pi, pi]. Its chart is the exact exponential map:

    retract(v)           = self ∘ Expmap(v)
    local_coordinates(q) = Logmap(self⁻¹ ∘ q)

with tangent vectors ordered [vx, vy, omega].
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar
import math

import jax.numpy as jnp

from sam_utils.core.math3d import rot2_matrix, se2_exp, se2_log, vector_components, wrap_angle
from sam_utils.core.types import ValueType
from .points import Point2


@dataclass(frozen=True)
class Rot2:
    """Planar rotation by `theta` radians."""
    theta: float

    dim: ClassVar[int] = 1
    value_type: ClassVar[ValueType] = ValueType.ROT2

    def __post_init__(self) -> None:
        object.__setattr__(self, "theta", wrap_angle(self.theta))

    def matrix(self) -> jnp.ndarray:
        return rot2_matrix(self.theta)

    def rotate(self, p: Point2) -> Point2:
        c, s = math.cos(self.theta), math.sin(self.theta)
        return Point2(c * p.x - s * p.y, s * p.x + c * p.y)

    def unrotate(self, p: Point2) -> Point2:
        c, s = math.cos(self.theta), math.sin(self.theta)
        return Point2(c * p.x + s * p.y, c * p.y - s * p.x)

    def compose(self, other: "Rot2") -> "Rot2":
        return Rot2(self.theta + other.theta)

    def inverse(self) -> "Rot2":
        return Rot2(-self.theta)

    def between(self, other: "Rot2") -> "Rot2":
        return self.inverse().compose(other)

    def retract(self, v) -> "Rot2":
        (dtheta,) = vector_components(v, 1, "Rot2.retract")
        return Rot2(self.theta + dtheta)

    def local_coordinates(self, other: "Rot2") -> jnp.ndarray:
        return jnp.array([self.between(other).theta])

    def equals(self, other: object, tol: float = 1e-9) -> bool:
        if not isinstance(other, Rot2):
            return False
        return abs(wrap_angle(self.theta - other.theta)) <= tol


@dataclass(frozen=True)
class Pose2:
    """SE(2) pose (x, y, theta)."""
    x: float
    y: float
    theta: float

    dim: ClassVar[int] = 3
    value_type: ClassVar[ValueType] = ValueType.POSE2

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "theta", wrap_angle(self.theta))

    @classmethod
    def identity(cls) -> "Pose2":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_vector(cls, v) -> "Pose2":
        return cls(*vector_components(v, 3, "Pose2"))

    def vector(self) -> jnp.ndarray:
        return jnp.array([self.x, self.y, self.theta])

    def rotation(self) -> Rot2:
        return Rot2(self.theta)

    def translation(self) -> Point2:
        return Point2(self.x, self.y)

    def matrix(self) -> jnp.ndarray:
        """3×3 homogeneous transform."""
        T = jnp.eye(3)
        T = T.at[:2, :2].set(rot2_matrix(self.theta))
        T = T.at[:2, 2].set(jnp.array([self.x, self.y]))
        return T

    # --- Group operations ---

    def compose(self, other: "Pose2") -> "Pose2":
        t = self.transform_from(other.translation())
        return Pose2(t.x, t.y, self.theta + other.theta)

    def inverse(self) -> "Pose2":
        t = self.rotation().unrotate(self.translation())
        return Pose2(-t.x, -t.y, -self.theta)

    def between(self, other: "Pose2") -> "Pose2":
        return self.inverse().compose(other)

    def transform_from(self, p: Point2) -> Point2:
        """Map a point expressed in this pose's frame into the parent frame."""
        q = self.rotation().rotate(p)
        return Point2(self.x + q.x, self.y + q.y)

    def transform_to(self, p: Point2) -> Point2:
        """Express a parent-frame point in this pose's frame."""
        return self.rotation().unrotate(Point2(p.x - self.x, p.y - self.y))

    # --- Manifold ---

    @staticmethod
    def Expmap(xi) -> "Pose2":
        return Pose2(*se2_exp(xi))

    @staticmethod
    def Logmap(p: "Pose2") -> jnp.ndarray:
        return jnp.array(se2_log(p.x, p.y, p.theta))

    def retract(self, v) -> "Pose2":
        return self.compose(Pose2.Expmap(v))

    def local_coordinates(self, other: "Pose2") -> jnp.ndarray:
        return Pose2.Logmap(self.between(other))

    def equals(self, other: object, tol: float = 1e-9) -> bool:
        if not isinstance(other, Pose2):
            return False
        return (
            abs(self.x - other.x) <= tol
            and abs(self.y - other.y) <= tol
            and abs(wrap_angle(self.theta - other.theta)) <= tol
        )
