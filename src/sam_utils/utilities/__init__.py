"""Batch utilities over `Values` stores and factor graphs."""
from .extraction import (
    extract_point2,
    extract_point3,
    extract_pose2,
    extract_pose3,
    all_pose3s,
)
from .perturbation import (
    DEFAULT_SEED,
    PerturbConfig,
    perturb,
    perturb_point2,
    perturb_pose2,
    perturb_point3,
)
from .projection import (
    insert_backprojections,
    insert_projection_factors,
    reprojection_errors,
)
from .frames import local_to_world

__all__ = [
    "extract_point2", "extract_point3", "extract_pose2", "extract_pose3", "all_pose3s",
    "DEFAULT_SEED", "PerturbConfig", "perturb",
    "perturb_point2", "perturb_pose2", "perturb_point3",
    "insert_backprojections", "insert_projection_factors", "reprojection_errors",
    "local_to_world",
]
