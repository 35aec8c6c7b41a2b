from __future__ import annotations

import jax.numpy as jnp
import numpy as np
import pytest

from sam_utils.core.factor_graph import FactorGraph
from sam_utils.core.keys import create_key_list, symbol
from sam_utils.core.types import FactorKind
from sam_utils.core.values import Values, ValuesKeyAlreadyExists
from sam_utils.geometry import (
    Cal3_S2,
    CheiralityError,
    PinholeCamera,
    Point2,
    Point3,
    Pose2,
    Pose3,
    Rot3,
)
from sam_utils.slam.measurements import (
    BetweenFactor,
    GenericProjectionFactor,
    PriorFactor,
    ProjectionConfig,
)
from sam_utils.slam.noise import Isotropic
from sam_utils.utilities.projection import (
    insert_backprojections,
    insert_projection_factors,
    reprojection_errors,
)

K = Cal3_S2(500.0, 500.0, 0.0, 320.0, 240.0)
X0 = symbol("x", 0)
Z = jnp.array([[320.0, 420.0, 270.0], [240.0, 290.0, 190.0]])
PIXEL_NOISE = Isotropic.Sigma(2, 1.0)


def _landmark_keys(n: int = 3):
    return create_key_list(range(n), "l")


def _scene():
    """One identity camera pose with three landmarks backprojected at depth 5."""
    values = Values()
    values.insert(X0, Pose3.identity())
    camera = PinholeCamera(Pose3.identity(), K)
    insert_backprojections(values, camera, _landmark_keys(), Z, 5.0)
    return values


# --- insert_backprojections ---

def test_backprojections_are_inserted_per_column():
    values = _scene()
    L = _landmark_keys()
    assert values.at(L[0]).equals(Point3(0.0, 0.0, 5.0), 1e-5)
    assert values.at(L[1]).equals(Point3(1.0, 0.5, 5.0), 1e-5)
    assert values.at(L[2]).equals(Point3(-0.5, -0.5, 5.0), 1e-5)


def test_backprojections_accept_float_index_vectors():
    values = Values()
    camera = PinholeCamera(Pose3.identity(), K)
    insert_backprojections(values, camera, np.array([10.0, 11.0]), np.asarray(Z)[:, :2], 2.0)
    assert values.keys() == [10, 11]


def test_backprojections_reject_wrong_row_count():
    values = Values()
    camera = PinholeCamera(Pose3.identity(), K)
    with pytest.raises(ValueError):
        insert_backprojections(values, camera, _landmark_keys(), jnp.zeros((3, 3)), 5.0)
    assert len(values) == 0


def test_backprojections_reject_key_count_mismatch():
    values = Values()
    camera = PinholeCamera(Pose3.identity(), K)
    with pytest.raises(ValueError):
        insert_backprojections(values, camera, _landmark_keys(2), Z, 5.0)
    assert len(values) == 0


def test_backprojections_are_all_or_nothing():
    camera = PinholeCamera(Pose3.identity(), K)
    L = _landmark_keys()

    values = Values()
    values.insert(L[2], Point3(0.0, 0.0, 1.0))
    with pytest.raises(ValuesKeyAlreadyExists):
        insert_backprojections(values, camera, L, Z, 5.0)
    assert values.keys() == [L[2]]

    bad = Z.at[0, 1].set(jnp.nan)
    values = Values()
    with pytest.raises(ValueError):
        insert_backprojections(values, camera, L, bad, 5.0)
    assert len(values) == 0


# --- insert_projection_factors ---

def test_projection_factors_follow_column_order():
    graph = FactorGraph()
    L = _landmark_keys()
    offset = Pose3(Rot3.identity(), Point3(0.1, 0.0, 0.0))
    insert_projection_factors(graph, X0, L, Z, PIXEL_NOISE, K, offset)

    assert len(graph) == 3
    for k, factor in enumerate(graph):
        assert factor.kind is FactorKind.PROJECTION
        assert factor.pose_key == X0
        assert factor.point_key == L[k]
        assert factor.measured.equals(Point2(Z[0, k], Z[1, k]), 1e-9)
        assert factor.calibration is K
        assert factor.body_P_sensor is offset


def test_projection_factors_validate_shapes():
    graph = FactorGraph()
    with pytest.raises(ValueError):
        insert_projection_factors(graph, X0, _landmark_keys(), Z[:1], PIXEL_NOISE, K)
    with pytest.raises(ValueError):
        insert_projection_factors(graph, X0, _landmark_keys(4), Z, PIXEL_NOISE, K)
    assert len(graph) == 0


# --- reprojection_errors ---

def test_reprojection_errors_empty_graph():
    assert reprojection_errors(FactorGraph(), Values()).shape == (2, 0)


def test_reprojection_errors_zero_at_backprojected_landmarks():
    values = _scene()
    graph = FactorGraph()
    insert_projection_factors(graph, X0, _landmark_keys(), Z, PIXEL_NOISE, K)

    E = reprojection_errors(graph, values)
    assert E.shape == (2, 3)
    assert jnp.allclose(E, jnp.zeros((2, 3)), atol=1e-3)


def test_reprojection_errors_skip_other_factor_kinds():
    """Columns only come from projection factors, in graph order."""
    values = _scene()
    L = _landmark_keys()
    values.insert(1, Pose2(0.0, 0.0, 0.0))
    values.insert(2, Pose2(1.0, 0.0, 0.0))
    values.update(L[1], Point3(1.0, 0.5, 5.0).retract(jnp.array([0.1, 0.0, 0.0])))

    graph = FactorGraph()
    graph.add(PriorFactor(1, Pose2(0.0, 0.0, 0.0), Isotropic.Sigma(3, 0.1)))
    graph.add(GenericProjectionFactor(Point2(Z[0, 1], Z[1, 1]), PIXEL_NOISE, X0, L[1], K))
    graph.add(BetweenFactor(1, 2, Pose2(1.0, 0.0, 0.0), Isotropic.Sigma(3, 0.1)))
    graph.add(GenericProjectionFactor(Point2(Z[0, 0], Z[1, 0]), PIXEL_NOISE, X0, L[0], K))
    graph.add(PriorFactor(2, Pose2(1.0, 0.0, 0.0), Isotropic.Sigma(3, 0.1)))

    E = reprojection_errors(graph, values)
    assert E.shape == (2, 2)
    # Landmark 1 moved 0.1 in x at depth 5: 500 * 0.1 / 5 = 10 pixels
    assert jnp.allclose(E[:, 0], jnp.array([10.0, 0.0]), atol=1e-2)
    assert jnp.allclose(E[:, 1], jnp.zeros(2), atol=1e-3)


def test_reprojection_error_uses_sensor_offset():
    values = Values()
    values.insert(X0, Pose3.identity())
    values.insert(symbol("l", 0), Point3(1.0, 0.0, 5.0))
    offset = Pose3(Rot3.identity(), Point3(1.0, 0.0, 0.0))

    graph = FactorGraph()
    insert_projection_factors(
        graph, X0, [symbol("l", 0)], jnp.array([[320.0], [240.0]]), PIXEL_NOISE, K, offset
    )
    assert jnp.allclose(reprojection_errors(graph, values), jnp.zeros((2, 1)), atol=1e-3)


def test_cheirality_fallback_and_throw():
    values = Values()
    values.insert(X0, Pose3.identity())
    values.insert(symbol("l", 0), Point3(0.0, 0.0, -5.0))
    measured = Point2(320.0, 240.0)

    lenient = GenericProjectionFactor(measured, PIXEL_NOISE, X0, symbol("l", 0), K)
    assert jnp.allclose(lenient.unwhitened_error(values), jnp.array([1000.0, 1000.0]))

    strict = GenericProjectionFactor(
        measured, PIXEL_NOISE, X0, symbol("l", 0), K,
        config=ProjectionConfig(throw_cheirality=True),
    )
    with pytest.raises(CheiralityError):
        strict.unwhitened_error(values)
