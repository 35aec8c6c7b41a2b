from __future__ import annotations

import math

import jax.numpy as jnp
import pytest

from sam_utils.core.math3d import se2_exp, se2_log, wrap_angle
from sam_utils.geometry import Point3, Pose3, Rot3


@pytest.mark.parametrize(
    "w",
    [
        [0.1, -0.05, 0.02],
        [1e-7, 0.0, -2e-7],
        [0.0, 0.0, 0.0],
        [0.0, 1.2, -0.4],
    ],
)
def test_rot3_logmap_inverts_expmap(w):
    w = jnp.array(w)
    R = Rot3.Expmap(w)
    assert jnp.allclose(R.matrix() @ R.matrix().T, jnp.eye(3), atol=1e-6)
    w_est = Rot3.Logmap(R)
    assert jnp.all(jnp.isfinite(w_est))
    assert jnp.allclose(w_est, w, atol=1e-4)


def test_rot3_identity_has_zero_log():
    w = Rot3.Logmap(Rot3.identity())
    assert jnp.all(jnp.isfinite(w))
    assert jnp.linalg.norm(w) < 1e-6


def test_rot3_local_coordinates_of_composed_rotations():
    a = Rot3.Rz(0.3)
    delta = jnp.array([0.02, -0.01, 0.05])
    assert jnp.allclose(a.local_coordinates(a.retract(delta)), delta, atol=1e-4)
    assert jnp.allclose(a.local_coordinates(Rot3.Rz(0.5)), jnp.array([0.0, 0.0, 0.2]), atol=1e-5)


def test_pose3_chart_is_decoupled():
    """A pure translation step moves t along the body axes and keeps R."""
    pose = Pose3(Rot3.Rz(math.pi / 2), Point3(1.0, 0.0, 0.0))
    moved = pose.retract(jnp.array([1.0, 0.0, 0.0, 0.0, 0.0, 0.0]))
    assert moved.R.equals(pose.R, 1e-7)
    assert moved.t.equals(Point3(1.0, 1.0, 0.0), 1e-6)

    turned = pose.retract(jnp.array([0.0, 0.0, 0.0, 0.0, 0.0, 0.1]))
    assert turned.t == pose.t
    assert turned.R.equals(Rot3.Rz(math.pi / 2 + 0.1), 1e-5)


def test_se2_maps_work_on_doubles():
    x, y, theta = se2_exp([0.3, -0.2, 1e-8])
    assert isinstance(x, float)
    vx, vy, w = se2_log(x, y, theta)
    assert (vx, vy) == pytest.approx((0.3, -0.2), abs=1e-14)
    assert w == pytest.approx(1e-8, rel=1e-12)


def test_wrap_angle_keeps_interior_angles_exact():
    assert wrap_angle(0.1) == 0.1
    assert wrap_angle(-math.pi) == math.pi
    assert wrap_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
