"""
Rigid-body transform helpers for the kinematic model.

- SO(3) rotations (so3 module)
- SE(3) rigid body transforms as 4x4 homogeneous matrices (se3 module)

All functions are pure and stateless.
"""

from . import so3
from . import se3

__all__ = [
    "so3",
    "se3",
]
