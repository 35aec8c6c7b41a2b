from __future__ import annotations

import jax.numpy as jnp
import pytest

from sam_utils.core.types import ValueType
from sam_utils.core.values import Values
from sam_utils.geometry import Point2, Point3, Pose2
from sam_utils.slam.noise import Isotropic, Sampler
from sam_utils.utilities.extraction import extract_point2, extract_point3, extract_pose2
from sam_utils.utilities.perturbation import (
    PerturbConfig,
    perturb,
    perturb_point2,
    perturb_pose2,
    perturb_point3,
)


def _points2() -> Values:
    values = Values()
    values.insert(1, Point2(1.0, 1.0))
    values.insert(2, Point2(2.0, 2.0))
    return values


def _mixed() -> Values:
    values = Values()
    values.insert(1, Pose2(0.0, 0.0, 0.0))
    values.insert(2, Point2(1.0, 2.0))
    values.insert(3, Pose2(1.0, 0.0, 0.5))
    values.insert(4, Point3(0.0, 1.0, 2.0))
    return values


def test_zero_sigma_is_identity():
    values = _points2()
    perturb_point2(values, 0.0)
    assert jnp.allclose(extract_point2(values), jnp.array([[1.0, 1.0], [2.0, 2.0]]))

    mixed = _mixed()
    before = extract_pose2(mixed)
    perturb_pose2(mixed, 0.0, 0.0)
    assert jnp.allclose(extract_pose2(mixed), before, atol=1e-6)


def test_zero_sigma_keeps_large_coordinates_exact():
    """Coordinates that float32 cannot represent survive a zero-noise pass."""
    values = Values()
    values.insert(1, Point2(0.1, 4500000.3))
    values.insert(2, Pose2(4500000.3, -0.7, 0.1))
    values.insert(3, Point3(0.1, 4500000.3, 12.7))

    perturb_point2(values, 0.0)
    perturb_pose2(values, 0.0, 0.0)
    perturb_point3(values, 0.0)

    assert values.at(1) == Point2(0.1, 4500000.3)
    assert values.at(2) == Pose2(4500000.3, -0.7, 0.1)
    assert values.at(3) == Point3(0.1, 4500000.3, 12.7)
    assert extract_point2(values)[0].tolist() == [0.1, 4500000.3]
    assert extract_pose2(values)[0].tolist() == [4500000.3, -0.7, 0.1]
    assert extract_point3(values)[0].tolist() == [0.1, 4500000.3, 12.7]


def test_same_seed_same_result():
    a, b = _points2(), _points2()
    perturb_point2(a, 0.1, seed=3)
    perturb_point2(b, 0.1, seed=3)
    assert jnp.array_equal(extract_point2(a), extract_point2(b))


def test_different_seed_different_result():
    a, b = _points2(), _points2()
    perturb_point2(a, 0.1, seed=1)
    perturb_point2(b, 0.1, seed=2)
    assert not jnp.array_equal(extract_point2(a), extract_point2(b))


def test_draws_are_consumed_in_key_order():
    """Insertion order does not matter: key 1 always gets the first draw."""
    values = Values()
    values.insert(9, Point3(0.0, 0.0, 0.0))
    values.insert(1, Point3(0.0, 0.0, 0.0))

    perturb_point3(values, 0.5, seed=11)

    sampler = Sampler(Isotropic.Sigma(3, 0.5), 11)
    first, second = sampler.sample(), sampler.sample()
    assert jnp.allclose(values.at(1).vector(), first)
    assert jnp.allclose(values.at(9).vector(), second)


def test_only_requested_type_is_touched():
    values = _mixed()
    perturb_pose2(values, 0.1, 0.1, seed=5)
    assert values.at(2) == Point2(1.0, 2.0)
    assert values.at(4) == Point3(0.0, 1.0, 2.0)
    assert not values.at(1).equals(Pose2(0.0, 0.0, 0.0), 1e-9)


def test_pose2_rotation_noise_only_changes_heading():
    values = _mixed()
    perturb_pose2(values, 0.0, 0.2, seed=5)
    M = extract_pose2(values)
    assert jnp.allclose(M[:, :2], jnp.array([[0.0, 0.0], [1.0, 0.0]]), atol=1e-6)


def test_perturb_checks_model_dimension():
    values = _points2()
    with pytest.raises(ValueError):
        perturb(values, ValueType.POINT2, Isotropic.Sigma(3, 0.1), PerturbConfig(seed=1))
    assert jnp.allclose(extract_point2(values), jnp.array([[1.0, 1.0], [2.0, 2.0]]))


def test_empty_store_is_fine():
    values = Values()
    perturb_point2(values, 1.0)
    assert len(values) == 0
