# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Dense-matrix extraction of typed values.

Each extractor filters a `Values` store to one value type and returns a
matrix with one row per matching entry, rows in ascending key order:

    extract_point2  ->  (N, 2)   [x y]
    extract_point3  ->  (N, 3)   [x y z]
    extract_pose2   ->  (N, 3)   [x y theta]
    extract_pose3   ->  (N, 12)  [r11 r12 r13 r21 r22 r23 r31 r32 r33 x y z]

Matrices are float64 NumPy arrays built on the host, so coordinates come out
at the precision they are stored with. A store without entries of the
requested type yields a zero-row matrix.
"""

from __future__ import annotations
from typing import Any, Callable, Sequence
import logging

import numpy as np

from sam_utils.core.types import ValueType
from sam_utils.core.values import Values

logger = logging.getLogger("sam_utils.utilities.extraction")

RowFn = Callable[[Any], Sequence[float]]


def _extract(values: Values, value_type: ValueType, cols: int, row_fn: RowFn) -> np.ndarray:
    entries = values.filter(value_type)
    result = np.zeros((len(entries), cols), dtype=np.float64)
    for j, (_, value) in enumerate(entries):
        result[j] = row_fn(value)
    logger.debug("Extracted %d %s rows", len(entries), value_type.value)
    return result


def _pose3_row(pose) -> np.ndarray:
    # Row-major flattening puts rotation rows 0, 1, 2 first.
    R = np.asarray(pose.rotation().matrix(), dtype=np.float64).reshape(-1)
    t = pose.translation()
    return np.concatenate([R, [t.x, t.y, t.z]])


def extract_point2(values: Values) -> np.ndarray:
    """All Point2 values as an (N, 2) matrix [x y]."""
    return _extract(values, ValueType.POINT2, 2, lambda p: (p.x, p.y))


def extract_point3(values: Values) -> np.ndarray:
    """All Point3 values as an (N, 3) matrix [x y z]."""
    return _extract(values, ValueType.POINT3, 3, lambda p: (p.x, p.y, p.z))


def extract_pose2(values: Values) -> np.ndarray:
    """All Pose2 values as an (N, 3) matrix [x y theta]."""
    return _extract(values, ValueType.POSE2, 3, lambda p: (p.x, p.y, p.theta))


def extract_pose3(values: Values) -> np.ndarray:
    """
    All Pose3 values as an (N, 12) matrix

        [r11 r12 r13 r21 r22 r23 r31 r32 r33 x y z]
    """
    return _extract(values, ValueType.POSE3, 12, _pose3_row)


def all_pose3s(values: Values) -> Values:
    """New store containing only the Pose3 entries of `values`."""
    return values.filter_values(ValueType.POSE3)
