# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Core typed tags and containers for sam-utils.

This module defines the lightweight identifiers and tags shared by the value
store, the factor graph and the batch utilities. They carry no numerics of
their own: geometry lives in `sam_utils.geometry`, and all batch processing in
`sam_utils.utilities`.

Classes
-------
Key
    Opaque 64-bit identifier of one unknown. Either a raw integer or a
    symbolic key built by `core.keys.symbol`.

ValueType
    Enumerated runtime tag of a value held in `core.values.Values`. The tag is
    derived from the value's class when it is inserted and is what every
    type-filtering operation matches against.

FactorKind
    Enumerated tag of a factor in `core.factor_graph.FactorGraph`. Residual
    collection filters on this tag rather than probing classes.

Entry
    One (key, tag, value) triple of the value store.

Notes
-----
The tagged-variant approach lets callers ask "does this key hold a Pose2?"
with a plain comparison instead of attempting a typed read and catching the
failure.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import NewType, Any

Key = NewType("Key", int)

KEY_BITS = 64


class ValueType(Enum):
    """Runtime tag of a geometric value stored in :class:`Values`."""
    POINT2 = "point2"
    POINT3 = "point3"
    ROT2 = "rot2"
    POSE2 = "pose2"
    ROT3 = "rot3"
    POSE3 = "pose3"


class FactorKind(Enum):
    """Tag identifying the measurement model of a factor."""
    PRIOR = "prior"
    BETWEEN = "between"
    PROJECTION = "projection"


@dataclass(frozen=True)
class Entry:
    """A single tagged entry of the value store."""
    key: Key
    type: ValueType
    value: Any
