from __future__ import annotations

import jax.numpy as jnp

from sam_utils.core.factor_graph import FactorGraph
from sam_utils.core.keys import create_key_vector, symbol
from sam_utils.core.values import Values
from sam_utils.geometry import Cal3_S2, PinholeCamera, Point2, Pose3
from sam_utils.slam.noise import Isotropic
from sam_utils.utilities import (
    extract_point2,
    extract_point3,
    insert_backprojections,
    insert_projection_factors,
    perturb_point2,
    perturb_point3,
    reprojection_errors,
)


def test_zero_noise_points_and_empty_graph():
    values = Values()
    values.insert(1, Point2(1.0, 1.0))
    values.insert(2, Point2(2.0, 2.0))

    perturb_point2(values, 0.0)
    assert jnp.allclose(extract_point2(values), jnp.array([[1.0, 1.0], [2.0, 2.0]]))
    assert reprojection_errors(FactorGraph(), values).shape == (2, 0)


def test_noisy_landmark_initialization_pipeline():
    """
    Backproject four observations from one camera, perturb the landmarks and
    check that the reprojection errors grow with the perturbation while the
    extracted landmark matrix keeps its key order.
    """
    K = Cal3_S2(400.0, 400.0, 0.0, 320.0, 240.0)
    camera_pose = Pose3.identity()
    Z = jnp.array([[300.0, 340.0, 360.0, 280.0], [220.0, 260.0, 200.0, 250.0]])
    J = create_key_vector(range(4), "l")

    values = Values()
    values.insert(symbol("x", 0), camera_pose)
    insert_backprojections(values, PinholeCamera(camera_pose, K), J, Z, 4.0)

    graph = FactorGraph()
    insert_projection_factors(graph, symbol("x", 0), J, Z, Isotropic.Sigma(2, 1.0), K)

    clean = reprojection_errors(graph, values)
    assert jnp.allclose(clean, jnp.zeros((2, 4)), atol=1e-3)

    before = extract_point3(values)
    perturb_point3(values, 0.05, seed=0)
    after = extract_point3(values)

    assert after.shape == (4, 3)
    assert not jnp.allclose(before, after)
    noisy = reprojection_errors(graph, values)
    assert float(jnp.abs(noisy).sum()) > float(jnp.abs(clean).sum())
