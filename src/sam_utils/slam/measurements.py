# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Measurement factors for sam-utils.

Each factor binds one or more keys of a `Values` store to a measurement and
a noise model, and evaluates a residual against the store:

    unwhitened_error(values) = r            (raw discrepancy)
    whitened_error(values)   = r / σ        (via the noise model)
    error(values)            = ½ ‖r / σ‖²

Factors carry an explicit `FactorKind` tag so the factor graph can be filtered
by measurement model without class probing.

1. Priors and Relative Constraints
----------------------------------
    • `PriorFactor`:
        r = Local(prior, x)

    • `BetweenFactor`:
        r = Local(measured, x₁⁻¹ ∘ x₂)

    Both work for any value type exposing `local_coordinates` (and `between`
    for the relative factor): points, rotations and poses.

2. Camera Projection
--------------------
    • `GenericProjectionFactor`:
        Pose3 unknown (body), Point3 unknown (landmark), measured pixel:

            camera = PinholeCamera(pose ∘ body_P_sensor, K)
            r      = camera.project(landmark) − measured

        When the landmark is behind the camera the factor cannot be
        evaluated. Unless `ProjectionConfig.throw_cheirality` is set, it
        reports the fixed error [2 fx, 2 fx] instead, and logs a warning if
        `verbose_cheirality` is set.

Notes
-----
Factors are immutable after construction. Typed reads from the store raise
`ValuesKeyDoesNotExist` / `ValuesIncorrectType` when a key is missing or holds
an unexpected type; factors let those propagate.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple
import logging

import jax.numpy as jnp

from sam_utils.core.types import FactorKind, Key, ValueType
from sam_utils.core.values import Values, value_type_of
from sam_utils.geometry.camera import Cal3_S2, CheiralityError, PinholeCamera
from sam_utils.geometry.points import Point2
from sam_utils.geometry.pose3 import Pose3
from .noise import Diagonal

logger = logging.getLogger("sam_utils.slam.measurements")


@dataclass(frozen=True)
class ProjectionConfig:
    throw_cheirality: bool = False
    verbose_cheirality: bool = False


class NoiseModelFactor:
    """Base class: whitening and the scalar error on top of `unwhitened_error`."""

    kind: FactorKind

    def __init__(self, keys: Tuple[Key, ...], noise_model: Diagonal) -> None:
        self.keys = tuple(Key(int(k)) for k in keys)
        self.noise_model = noise_model

    def unwhitened_error(self, values: Values) -> jnp.ndarray:
        raise NotImplementedError

    def whitened_error(self, values: Values) -> jnp.ndarray:
        return self.noise_model.whiten(self.unwhitened_error(values))

    def error(self, values: Values) -> float:
        return 0.5 * self.noise_model.distance(self.unwhitened_error(values))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys})"


def _check_dim(noise_model: Diagonal, dim: int, what: str) -> None:
    if noise_model.dim != dim:
        raise ValueError(
            f"{what}: noise model has dimension {noise_model.dim}, expected {dim}"
        )


class PriorFactor(NoiseModelFactor):
    kind = FactorKind.PRIOR

    def __init__(self, key: Key, prior: Any, noise_model: Diagonal) -> None:
        super().__init__((key,), noise_model)
        self.prior = prior
        self.value_type: ValueType = value_type_of(prior)
        _check_dim(noise_model, type(prior).dim, "PriorFactor")

    def unwhitened_error(self, values: Values) -> jnp.ndarray:
        x = values.at(self.keys[0], self.value_type)
        return self.prior.local_coordinates(x)


class BetweenFactor(NoiseModelFactor):
    kind = FactorKind.BETWEEN

    def __init__(self, key1: Key, key2: Key, measured: Any, noise_model: Diagonal) -> None:
        super().__init__((key1, key2), noise_model)
        self.measured = measured
        self.value_type: ValueType = value_type_of(measured)
        _check_dim(noise_model, type(measured).dim, "BetweenFactor")

    def unwhitened_error(self, values: Values) -> jnp.ndarray:
        x1 = values.at(self.keys[0], self.value_type)
        x2 = values.at(self.keys[1], self.value_type)
        return self.measured.local_coordinates(x1.between(x2))


class GenericProjectionFactor(NoiseModelFactor):
    """Pixel observation of a Point3 landmark from a Pose3 body."""

    kind = FactorKind.PROJECTION

    def __init__(
        self,
        measured: Point2,
        noise_model: Diagonal,
        pose_key: Key,
        point_key: Key,
        calibration: Cal3_S2,
        body_P_sensor: Optional[Pose3] = None,
        config: ProjectionConfig = ProjectionConfig(),
    ) -> None:
        super().__init__((pose_key, point_key), noise_model)
        _check_dim(noise_model, 2, "GenericProjectionFactor")
        self.measured = measured
        self.calibration = calibration
        self.body_P_sensor = body_P_sensor
        self.config = config

    @property
    def pose_key(self) -> Key:
        return self.keys[0]

    @property
    def point_key(self) -> Key:
        return self.keys[1]

    def unwhitened_error(self, values: Values) -> jnp.ndarray:
        pose = values.at(self.pose_key, ValueType.POSE3)
        point = values.at(self.point_key, ValueType.POINT3)
        if self.body_P_sensor is not None:
            pose = pose.compose(self.body_P_sensor)
        camera = PinholeCamera(pose, self.calibration)
        try:
            return camera.project(point).vector() - self.measured.vector()
        except CheiralityError:
            if self.config.verbose_cheirality:
                logger.warning(
                    "Landmark %s moved behind camera %s", self.point_key, self.pose_key
                )
            if self.config.throw_cheirality:
                raise
            return jnp.full((2,), 2.0 * self.calibration.fx)

    def __repr__(self) -> str:
        return (
            f"GenericProjectionFactor(pose={self.pose_key}, point={self.point_key}, "
            f"measured=({self.measured.x}, {self.measured.y}))"
        )
