"""sam_utils: typed value marshalling for smoothing-and-mapping problems.

This package provides:
- Symbolic keys and a key-sorted, type-tagged value store
- Point, rotation and pose types with retract / local-coordinate charts
- Gaussian noise models and a seeded sampler
- Prior, between and camera projection factors in an ordered factor graph
- Batch utilities: matrix extraction, seeded perturbation, landmark
  backprojection, projection-factor assembly, reprojection errors and
  frame retargeting

Design intent:
Keep the containers small and explicit so each batch utility is a single
ordered pass over the store or graph it is given.
"""
__all__ = ["core", "geometry", "slam", "utilities"]
__version__ = "0.1.0"
