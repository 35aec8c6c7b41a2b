# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Manifold metadata for the value types held in a `Values` store.

The batch utilities never hard-code tangent sizes. Instead they ask this
module which manifold a `ValueType` lives on and how many degrees of freedom
its tangent space has, e.g. to size a noise model before perturbing every
value of one type:

    • `TYPE_TO_MANIFOLD`    (ValueType → {"euclidean", "so2", "se2", "so3", "se3"})
    • `TANGENT_DIM`         (ValueType → tangent-space dimension)
    • `get_manifold_for_value_type`, `tangent_dim`

Extending to a new value type means adding it to `core.types.ValueType`,
giving its class `dim` / `value_type` attributes and `retract` /
`local_coordinates` methods, and registering it here.
"""

from __future__ import annotations

from typing import Dict

from sam_utils.core.types import ValueType

TYPE_TO_MANIFOLD: Dict[ValueType, str] = {
    ValueType.POINT2: "euclidean",
    ValueType.POINT3: "euclidean",
    ValueType.ROT2: "so2",
    ValueType.POSE2: "se2",
    ValueType.ROT3: "so3",
    ValueType.POSE3: "se3",
}

TANGENT_DIM: Dict[ValueType, int] = {
    ValueType.POINT2: 2,
    ValueType.POINT3: 3,
    ValueType.ROT2: 1,
    ValueType.POSE2: 3,
    ValueType.ROT3: 3,
    ValueType.POSE3: 6,
}


def get_manifold_for_value_type(value_type: ValueType) -> str:
    return TYPE_TO_MANIFOLD[value_type]


def tangent_dim(value_type: ValueType) -> int:
    """Dimension of the tangent space a perturbation of `value_type` lives in."""
    return TANGENT_DIM[value_type]
