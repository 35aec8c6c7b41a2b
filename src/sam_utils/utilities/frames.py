# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Re-expression of planar estimates in another reference frame.
"""

from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Optional, Any
import logging

from sam_utils.core.types import Key, ValueType
from sam_utils.core.values import Values
from sam_utils.geometry.pose2 import Pose2

logger = logging.getLogger("sam_utils.utilities.frames")

# Tried in order; the first tag that matches wins.
_PRECEDENCE: List[ValueType] = [ValueType.POSE2, ValueType.POINT2]

_TRANSFORMS: Dict[ValueType, Callable[[Pose2, Any], Any]] = {
    ValueType.POSE2: lambda base, pose: base.compose(pose),
    ValueType.POINT2: lambda base, point: base.transform_from(point),
}


def local_to_world(
    local: Values,
    base: Pose2,
    keys: Optional[Iterable[Key]] = None,
) -> Values:
    """
    Convert Pose2 and Point2 entries of `local` to the frame of `base`.

    Poses are composed with `base`, points are transformed from it. Keys that
    hold any other type, are missing from `local`, or repeat an earlier key
    are skipped silently.
    If `keys` is None or empty, all keys of `local` are used.
    """
    key_list = list(keys) if keys is not None else []
    if not key_list:
        key_list = local.keys()

    world = Values()
    skipped = 0
    for key in key_list:
        tag = local.type_of(key)
        if tag not in _PRECEDENCE or key in world:
            skipped += 1
            continue
        world.insert(key, _TRANSFORMS[tag](base, local.at(key, tag)))
    if skipped:
        logger.debug("local_to_world skipped %d of %d keys", skipped, len(key_list))
    return world
