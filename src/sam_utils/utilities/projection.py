# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Batch construction and evaluation of camera projection factors.

Pixel observations are passed as a 2×K matrix Z whose column k pairs with the
k-th landmark key J[k]:

    insert_backprojections(values, camera, J, Z, depth)
        Initialize landmark J[k] by backprojecting Z[:, k] at a fixed depth.

    insert_projection_factors(graph, i, J, Z, model, K, body_P_sensor)
        Append one GenericProjectionFactor(Z[:, k], model, i, J[k], K,
        body_P_sensor) per column, in column order.

    reprojection_errors(graph, values)
        2×M matrix of unwhitened errors of the M projection factors of a
        graph, in graph order; other factor kinds are skipped.

Shape errors (Z not 2×K, or K != len(J)) raise ValueError before anything is
modified. `insert_backprojections` is all-or-nothing: every landmark is
computed first, and none is inserted if any backprojection fails or any key
is already taken.
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Tuple
import logging

import jax.numpy as jnp

from sam_utils.core.factor_graph import FactorGraph
from sam_utils.core.keys import create_key_list
from sam_utils.core.types import FactorKind, Key
from sam_utils.core.values import Values
from sam_utils.geometry.camera import Cal3_S2, PinholeCamera
from sam_utils.geometry.points import Point2
from sam_utils.geometry.pose3 import Pose3
from sam_utils.slam.measurements import GenericProjectionFactor, ProjectionConfig
from sam_utils.slam.noise import Diagonal

logger = logging.getLogger("sam_utils.utilities.projection")


def _check_measurements(
    where: str, keys: Iterable, Z
) -> Tuple[List[Key], jnp.ndarray]:
    Z = jnp.asarray(Z)
    if Z.ndim != 2 or Z.shape[0] != 2:
        raise ValueError(f"{where}: Z must be 2*K, got shape {Z.shape}")
    J = create_key_list(keys)
    if Z.shape[1] != len(J):
        raise ValueError(
            f"{where}: J and Z must have same number of entries "
            f"({len(J)} keys, {Z.shape[1]} columns)"
        )
    return J, Z


def _pixel(Z: jnp.ndarray, k: int) -> Point2:
    return Point2(Z[0, k], Z[1, k])


def insert_backprojections(
    values: Values,
    camera: PinholeCamera,
    J: Iterable,
    Z,
    depth: float,
) -> None:
    """Insert one Point3 per column of Z, backprojected at `depth`."""
    J, Z = _check_measurements("insert_backprojections", J, Z)
    staged = Values()
    for k, key in enumerate(J):
        staged.insert(key, camera.backproject(_pixel(Z, k), depth))
    values.insert_values(staged)
    logger.debug("Inserted %d backprojected landmarks at depth %s", len(J), depth)


def insert_projection_factors(
    graph: FactorGraph,
    i: Key,
    J: Iterable,
    Z,
    model: Diagonal,
    K: Cal3_S2,
    body_P_sensor: Optional[Pose3] = None,
    config: ProjectionConfig = ProjectionConfig(),
) -> None:
    """Append projection factors observing landmarks J from pose `i`."""
    J, Z = _check_measurements("insert_projection_factors", J, Z)
    for k, key in enumerate(J):
        graph.add(
            GenericProjectionFactor(
                _pixel(Z, k), model, i, key, K, body_P_sensor, config
            )
        )
    logger.debug("Appended %d projection factors for pose %s", len(J), i)


def reprojection_errors(graph: FactorGraph, values: Values) -> jnp.ndarray:
    """Unwhitened errors of all projection factors, one column each."""
    # first count
    n = graph.count(FactorKind.PROJECTION)
    # now fill
    errors = jnp.zeros((2, n))
    k = 0
    for factor in graph:
        if factor.kind is FactorKind.PROJECTION:
            errors = errors.at[:, k].set(factor.unwhitened_error(values))
            k += 1
    logger.debug("Collected %d reprojection errors from %d factors", n, len(graph))
    return errors
