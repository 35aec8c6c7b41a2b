from __future__ import annotations

import math

import jax.numpy as jnp

from sam_utils.core.factor_graph import FactorGraph
from sam_utils.core.keys import create_key_vector, symbol
from sam_utils.core.values import Values
from sam_utils.geometry import Cal3_S2, PinholeCamera, Point2, Point3, Pose2, Pose3, Rot3
from sam_utils.slam.noise import Isotropic
from sam_utils.utilities import (
    extract_point3,
    extract_pose2,
    extract_pose3,
    insert_backprojections,
    insert_projection_factors,
    local_to_world,
    perturb_point3,
    reprojection_errors,
)


def setup_camera_scene():
    """
    Build a tiny synthetic camera scene:

      - 1 camera pose x0 at the origin, rotated 10 degrees about z,
        mounted with a sensor offset of 0.2 m along the body x axis.

      - 5 landmarks l0..l4 initialized by backprojecting their pixel
        observations at a guessed depth of 6 m.

    Factors:
      - one projection factor per observation of x0
    """
    K = Cal3_S2(450.0, 450.0, 0.0, 320.0, 240.0)
    body_P_sensor = Pose3(Rot3.identity(), Point3(0.2, 0.0, 0.0))
    x0 = symbol("x", 0)
    body = Pose3(Rot3.Rz(math.radians(10.0)), Point3(0.0, 0.0, 0.0))

    Z = jnp.array(
        [
            [320.0, 250.0, 410.0, 300.0, 360.0],
            [240.0, 200.0, 230.0, 300.0, 180.0],
        ]
    )
    J = create_key_vector(range(Z.shape[1]), "l")

    values = Values()
    values.insert(x0, body)
    camera = PinholeCamera(body.compose(body_P_sensor), K)
    insert_backprojections(values, camera, J, Z, 6.0)

    graph = FactorGraph()
    insert_projection_factors(graph, x0, J, Z, Isotropic.Sigma(2, 1.0), K, body_P_sensor)
    return values, graph


def main():
    values, graph = setup_camera_scene()

    print("=== Initial landmarks (backprojected) ===")
    print(extract_point3(values))
    print("Camera pose rows [R | t]:")
    print(extract_pose3(values))

    print("Reprojection errors (should be ~0):")
    print(reprojection_errors(graph, values))

    perturb_point3(values, 0.1, seed=7)
    errors = reprojection_errors(graph, values)
    print("=== After perturbing landmarks with sigma = 0.1 m ===")
    print(errors)
    print(f"total graph error: {graph.error(values):.3f}")

    # Planar re-expression of a local trajectory in a world frame
    local = Values()
    local.insert(symbol("x", 1), Pose2(1.0, 0.0, 0.0))
    local.insert(symbol("x", 2), Pose2(2.0, 0.0, math.pi / 4))
    local.insert(symbol("p", 0), Point2(1.5, 0.5))
    world = local_to_world(local, Pose2(5.0, 5.0, math.pi / 2))
    print("=== Local trajectory in world frame ===")
    print(extract_pose2(world))


if __name__ == "__main__":
    main()
