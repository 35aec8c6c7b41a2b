# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.

import time
import math

import jax.numpy as jnp

from sam_utils.core.keys import symbol
from sam_utils.core.values import Values
from sam_utils.core.factor_graph import FactorGraph
from sam_utils.geometry import Cal3_S2, PinholeCamera, Point2, Pose2, Pose3
from sam_utils.slam.noise import Isotropic
from sam_utils.utilities import (
    extract_point2,
    extract_pose2,
    insert_backprojections,
    insert_projection_factors,
    perturb_point2,
    perturb_pose2,
    reprojection_errors,
)


def build_planar_values(num_poses: int = 100, num_points: int = 100) -> Values:
    """
    Planar trajectory plus a ring of landmarks:

        x0 -> x1 -> ... -> x_{N-1}   poses along a circle of radius 10
        l0 ... l_{M-1}               points on a circle of radius 12
    """
    values = Values()
    for i in range(num_poses):
        a = 2.0 * math.pi * i / num_poses
        values.insert(symbol("x", i), Pose2(10.0 * math.cos(a), 10.0 * math.sin(a), a + math.pi / 2))
    for j in range(num_points):
        a = 2.0 * math.pi * j / num_points
        values.insert(symbol("l", j), Point2(12.0 * math.cos(a), 12.0 * math.sin(a)))
    return values


def _timed(label: str, fn):
    t0 = time.time()
    out = fn()
    if hasattr(out, "block_until_ready"):
        out.block_until_ready()
    t1 = time.time()
    print(f"{label:<28} {(t1 - t0) * 1000.0:9.3f} ms")
    return out


def run_benchmark(num_poses: int = 500, num_points: int = 500, num_obs: int = 200):
    print("=== Extraction / Perturbation / Reprojection Benchmark ===")
    print(f"num_poses = {num_poses}, num_points = {num_points}, num_obs = {num_obs}")

    values = build_planar_values(num_poses, num_points)

    _timed("perturb_pose2", lambda: perturb_pose2(values, 0.1, 0.02, seed=0))
    _timed("perturb_point2", lambda: perturb_point2(values, 0.1, seed=1))
    poses = _timed("extract_pose2", lambda: extract_pose2(values))
    points = _timed("extract_point2", lambda: extract_point2(values))
    print(f"pose matrix {poses.shape}, point matrix {points.shape}")

    # Projection factors from a single camera
    K = Cal3_S2(500.0, 500.0, 0.0, 320.0, 240.0)
    camera = PinholeCamera(Pose3.identity(), K)
    u = jnp.linspace(100.0, 540.0, num_obs)
    v = jnp.linspace(80.0, 400.0, num_obs)
    Z = jnp.stack([u, v])
    J = [symbol("m", k) for k in range(num_obs)]

    scene = Values()
    scene.insert(symbol("c", 0), Pose3.identity())
    _timed("insert_backprojections", lambda: insert_backprojections(scene, camera, J, Z, 5.0))

    graph = FactorGraph()
    _timed(
        "insert_projection_factors",
        lambda: insert_projection_factors(graph, symbol("c", 0), J, Z, Isotropic.Sigma(2, 1.0), K),
    )
    errors = _timed("reprojection_errors", lambda: reprojection_errors(graph, scene))
    print(f"max |reprojection error| = {float(jnp.abs(errors).max()):.6f} px")


if __name__ == "__main__":
    # Example:
    #   python3 benchmarks/bench_extract_perturb.py
    run_benchmark(num_poses=500, num_points=500, num_obs=200)
