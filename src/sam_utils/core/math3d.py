# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
SO(2), SE(2) and SO(3) manifold operations for sam-utils.

This module implements the small amount of Lie-group mathematics the geometry
types need for their `retract` / `local_coordinates` charts:

    • angle wrapping and SE(2) exponential & logarithm maps
    • SO(2) rotation matrices
    • SO(3) exponential & logarithm maps with small-angle fallbacks

Planar values are stored as Python floats, so the SE(2) maps work on scalars
in double precision. The SO(3) maps are written in JAX and operate on arrays;
the typed wrappers live in `sam_utils.geometry`.

Key Functions
-------------
wrap_angle(theta)
    Maps an angle into (-pi, pi]; angles already inside are returned as is.

se2_exp(xi)
    Maps a twist [vx, vy, omega] to a pose (x, y, theta).

se2_log(x, y, theta)
    Inverse of se2_exp.

so3_exp(w)
    Maps a 3-vector (axis-angle) to a 3×3 rotation matrix.

so3_log(R)
    Maps a rotation matrix back to its axis-angle representation.

Utilities
---------
vector_components(v, n, what)
    Validates a length-n vector and returns its entries as floats.

hat(ω)
    Converts a 3-vector to its skew-symmetric matrix.

vee(Ω)
    Converts a 3×3 skew matrix back into a 3-vector.
"""

from __future__ import annotations
from typing import List, Tuple
import math

import jax
import jax.numpy as jnp
import numpy as np

SMALL_ANGLE = 1e-5
# Below this the SE(2) coefficients switch to their Taylor series.
SE2_SERIES_ANGLE = 1e-3


def vector_components(v, n: int, what: str) -> List[float]:
    arr = np.asarray(v, dtype=float).reshape(-1)
    if arr.shape != (n,):
        raise ValueError(f"{what} expects {n} elements, got shape {arr.shape}")
    return [float(c) for c in arr]


def wrap_angle(theta: float) -> float:
    """Wrap an angle to (-pi, pi]."""
    w = math.remainder(float(theta), math.tau)
    return math.pi if w == -math.pi else w


def rot2_matrix(theta: float) -> jnp.ndarray:
    c, s = math.cos(theta), math.sin(theta)
    return jnp.array([[c, -s], [s, c]])


def _se2_coefficients(w: float) -> Tuple[float, float]:
    """
    a = sin(w) / w and b = (1 - cos(w)) / w.

    The left Jacobian of SE(2) is V = [[a, -b], [b, a]].
    """
    if abs(w) < SE2_SERIES_ANGLE:
        w2 = w * w
        a = 1.0 - w2 / 6.0 * (1.0 - w2 / 20.0)
        b = 0.5 * w * (1.0 - w2 / 12.0 * (1.0 - w2 / 30.0))
        return a, b
    half = math.sin(0.5 * w)
    return math.sin(w) / w, 2.0 * half * half / w


def se2_exp(xi) -> Tuple[float, float, float]:
    """
    Exponential map from se(2) to SE(2).

    xi = [vx, vy, omega]; returns (x, y, theta) with t = V(omega) v, which
    follows the circular arc of the twist.
    """
    vx, vy, w = vector_components(xi, 3, "se2_exp")
    a, b = _se2_coefficients(w)
    return a * vx - b * vy, b * vx + a * vy, wrap_angle(w)


def se2_log(x: float, y: float, theta: float) -> Tuple[float, float, float]:
    """Logarithm map from SE(2) to se(2): v = V(omega)⁻¹ t."""
    w = wrap_angle(theta)
    a, b = _se2_coefficients(w)
    det = a * a + b * b
    return (a * x + b * y) / det, (a * y - b * x) / det, w


def hat(v: jnp.ndarray) -> jnp.ndarray:
    """so(3) hat operator: R^3 -> 3x3 skew-symmetric matrix."""
    x, y, z = v[0], v[1], v[2]
    return jnp.array(
        [
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ]
    )


def vee(R: jnp.ndarray) -> jnp.ndarray:
    """
    vee: so(3) -> R^3, inverse of hat.
    Assumes R is a 3x3 skew-symmetric-like matrix.
    """
    return jnp.array([
        R[2, 1] - R[1, 2],
        R[0, 2] - R[2, 0],
        R[1, 0] - R[0, 1],
    ]) / 2.0


def so3_exp(w: jnp.ndarray) -> jnp.ndarray:
    """
    Exponential map from so(3) (rotation vector) to SO(3).

    Uses Rodrigues' formula with a small-angle fallback.
    """
    w = jnp.asarray(w)
    theta = jnp.linalg.norm(w)
    I = jnp.eye(3)

    def small_angle() -> jnp.ndarray:
        # Second-order series; exact for w == 0
        W = hat(w)
        return I + W + 0.5 * (W @ W)

    def normal_angle() -> jnp.ndarray:
        k = w / theta
        K = hat(k)
        return I + jnp.sin(theta) * K + (1.0 - jnp.cos(theta)) * (K @ K)

    return jax.lax.cond(theta < SMALL_ANGLE, small_angle, normal_angle)


def so3_log(R: jnp.ndarray) -> jnp.ndarray:
    """
    Numerically stable logarithm map for SO(3).

    Handles:
      - small angles via first-order approximation
      - trace slightly outside [-1, 3] via clamping

    Returns w in R^3 such that Exp(w) ~ R.
    """
    R = jnp.asarray(R)
    trace = jnp.trace(R)
    cos_theta = jnp.clip((trace - 1.0) / 2.0, -1.0, 1.0)
    theta = jnp.arccos(cos_theta)

    def small_angle_case(_) -> jnp.ndarray:
        # R ~ I + hat(w)  =>  w ~ vee(R - I)
        return vee(R - jnp.eye(3, dtype=R.dtype))

    def general_case(_) -> jnp.ndarray:
        # w^ = (theta / (2 sin(theta))) * (R - R^T)
        denom = 2.0 * jnp.sin(theta)
        factor = theta / (denom + 1e-12)
        return factor * vee(R - R.T)

    return jax.lax.cond(
        theta < SMALL_ANGLE,
        small_angle_case,
        general_case,
        operand=None,
    )
