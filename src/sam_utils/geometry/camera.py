# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Pinhole camera model.

`Cal3_S2` is the five-parameter calibration (focal lengths, skew, principal
point) with no distortion:

        [ fx  s  u0 ]
    K = [  0  fy v0 ]
        [  0  0   1 ]

`PinholeCamera` pairs a calibration with a camera-to-world `Pose3`. The
camera looks along its local +z axis.
"""

from __future__ import annotations
from dataclasses import dataclass
import math

import jax.numpy as jnp

from .points import Point2, Point3
from .pose3 import Pose3


class CheiralityError(ValueError):
    """Raised when a point to be projected lies behind the camera."""


@dataclass(frozen=True)
class Cal3_S2:
    fx: float = 1.0
    fy: float = 1.0
    s: float = 0.0
    u0: float = 0.0
    v0: float = 0.0

    def K(self) -> jnp.ndarray:
        return jnp.array(
            [
                [self.fx, self.s, self.u0],
                [0.0, self.fy, self.v0],
                [0.0, 0.0, 1.0],
            ]
        )

    def uncalibrate(self, p: Point2) -> Point2:
        """Intrinsic (normalized) coordinates -> pixel coordinates."""
        return Point2(
            self.fx * p.x + self.s * p.y + self.u0,
            self.fy * p.y + self.v0,
        )

    def calibrate(self, p: Point2) -> Point2:
        """Pixel coordinates -> intrinsic (normalized) coordinates."""
        y = (p.y - self.v0) / self.fy
        x = (p.x - self.u0 - self.s * y) / self.fx
        return Point2(x, y)


@dataclass(frozen=True, eq=False)
class PinholeCamera:
    pose: Pose3
    calibration: Cal3_S2

    def project(self, point: Point3) -> Point2:
        """
        Project a world point to pixel coordinates.

        Raises CheiralityError if the point is not in front of the camera.
        """
        pc = self.pose.transform_to(point)
        if pc.z <= 0.0:
            raise CheiralityError(f"Point {point} is behind the camera (depth {pc.z})")
        pn = Point2(pc.x / pc.z, pc.y / pc.z)
        return self.calibration.uncalibrate(pn)

    def backproject(self, p: Point2, depth: float) -> Point3:
        """World point seen at pixel `p`, `depth` units along the optical axis."""
        depth = float(depth)
        if depth <= 0.0:
            raise ValueError(f"Backprojection depth must be positive, got {depth}")
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise ValueError(f"Cannot backproject non-finite pixel {p}")
        pn = self.calibration.calibrate(p)
        pc = Point3(pn.x * depth, pn.y * depth, depth)
        return self.pose.transform_from(pc)
