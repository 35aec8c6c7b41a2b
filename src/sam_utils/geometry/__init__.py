"""Geometric value types stored in :class:`sam_utils.core.values.Values`."""
from .points import Point2, Point3
from .pose2 import Rot2, Pose2
from .pose3 import Rot3, Pose3
from .camera import Cal3_S2, PinholeCamera, CheiralityError

__all__ = [
    "Point2", "Point3",
    "Rot2", "Pose2",
    "Rot3", "Pose3",
    "Cal3_S2", "PinholeCamera", "CheiralityError",
]
