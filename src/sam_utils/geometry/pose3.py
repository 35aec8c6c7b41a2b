# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
3D rotations and rigid transforms.

`Rot3` wraps a 3×3 rotation matrix and `Pose3` pairs it with a translation.
Tangent vectors of `Pose3` are ordered translation first,
[vx, vy, vz, wx, wy, wz], and the chart is

    retract(δ):  R' = R · Exp(ω),  t' = t + R · v
    local_coordinates(q):  ω = Log(Rᵀ R_q),  v = Rᵀ (t_q − t)

which are exact inverses of each other. Translations are added in double
precision, so a zero tangent vector leaves the pose unchanged.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar

import jax.numpy as jnp

from sam_utils.core.math3d import so3_exp, so3_log
from sam_utils.core.types import ValueType
from .points import Point3


@dataclass(frozen=True, eq=False)
class Rot3:
    """Rotation in SO(3), stored as a matrix."""
    R: jnp.ndarray

    dim: ClassVar[int] = 3
    value_type: ClassVar[ValueType] = ValueType.ROT3

    def __post_init__(self) -> None:
        R = jnp.asarray(self.R)
        if R.shape != (3, 3):
            raise ValueError(f"Rot3 expects a 3x3 matrix, got shape {R.shape}")
        object.__setattr__(self, "R", R)

    @classmethod
    def identity(cls) -> "Rot3":
        return cls(jnp.eye(3))

    @classmethod
    def Expmap(cls, w: jnp.ndarray) -> "Rot3":
        return cls(so3_exp(jnp.asarray(w)))

    @staticmethod
    def Logmap(r: "Rot3") -> jnp.ndarray:
        return so3_log(r.R)

    @classmethod
    def Rz(cls, yaw: float) -> "Rot3":
        return cls.Expmap(jnp.array([0.0, 0.0, yaw]))

    def matrix(self) -> jnp.ndarray:
        return self.R

    def rotate(self, p: Point3) -> Point3:
        return Point3.from_vector(self.R @ p.vector())

    def unrotate(self, p: Point3) -> Point3:
        return Point3.from_vector(self.R.T @ p.vector())

    def compose(self, other: "Rot3") -> "Rot3":
        return Rot3(self.R @ other.R)

    def inverse(self) -> "Rot3":
        return Rot3(self.R.T)

    def between(self, other: "Rot3") -> "Rot3":
        return Rot3(self.R.T @ other.R)

    def retract(self, w: jnp.ndarray) -> "Rot3":
        return self.compose(Rot3.Expmap(w))

    def local_coordinates(self, other: "Rot3") -> jnp.ndarray:
        return Rot3.Logmap(self.between(other))

    def equals(self, other: object, tol: float = 1e-9) -> bool:
        if not isinstance(other, Rot3):
            return False
        return bool(jnp.allclose(self.R, other.R, atol=tol, rtol=0.0))


@dataclass(frozen=True, eq=False)
class Pose3:
    """SE(3) pose: rotation `R` and translation `t` (body to parent)."""
    R: Rot3
    t: Point3

    dim: ClassVar[int] = 6
    value_type: ClassVar[ValueType] = ValueType.POSE3

    @classmethod
    def identity(cls) -> "Pose3":
        return cls(Rot3.identity(), Point3(0.0, 0.0, 0.0))

    @classmethod
    def from_matrix(cls, T: jnp.ndarray) -> "Pose3":
        T = jnp.asarray(T)
        if T.shape != (4, 4):
            raise ValueError(f"Pose3 expects a 4x4 matrix, got shape {T.shape}")
        return cls(Rot3(T[:3, :3]), Point3.from_vector(T[:3, 3]))

    def rotation(self) -> Rot3:
        return self.R

    def translation(self) -> Point3:
        return self.t

    def matrix(self) -> jnp.ndarray:
        """4×4 homogeneous transform."""
        T = jnp.eye(4)
        T = T.at[:3, :3].set(self.R.matrix())
        T = T.at[:3, 3].set(self.t.vector())
        return T

    # --- Group operations ---

    def compose(self, other: "Pose3") -> "Pose3":
        return Pose3(self.R.compose(other.R), self.transform_from(other.t))

    def inverse(self) -> "Pose3":
        Rt = self.R.inverse()
        return Pose3(Rt, Point3.from_vector(-(Rt.matrix() @ self.t.vector())))

    def between(self, other: "Pose3") -> "Pose3":
        return self.inverse().compose(other)

    def transform_from(self, p: Point3) -> Point3:
        """Map a point from this pose's frame into the parent frame."""
        return self.t.retract(self.R.matrix() @ p.vector())

    def transform_to(self, p: Point3) -> Point3:
        """Express a parent-frame point in this pose's frame."""
        return Point3.from_vector(self.R.matrix().T @ self.t.local_coordinates(p))

    # --- Manifold ---

    def retract(self, delta: jnp.ndarray) -> "Pose3":
        delta = jnp.asarray(delta).reshape(-1)
        if delta.shape != (6,):
            raise ValueError(f"Pose3 tangent vectors have 6 elements, got {delta.shape}")
        v, w = delta[:3], delta[3:]
        R_new = self.R.retract(w)
        return Pose3(R_new, self.t.retract(self.R.matrix() @ v))

    def local_coordinates(self, other: "Pose3") -> jnp.ndarray:
        w = self.R.local_coordinates(other.R)
        v = self.R.matrix().T @ self.t.local_coordinates(other.t)
        return jnp.concatenate([v, w])

    def equals(self, other: object, tol: float = 1e-9) -> bool:
        if not isinstance(other, Pose3):
            return False
        return self.R.equals(other.R, tol) and self.t.equals(other.t, tol)
