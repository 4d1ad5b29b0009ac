"""
JAX IK: forward and inverse kinematics for articulated robot arms.

Joints and their link offsets are composed into world poses through
serial, star or tree shaped chains, and a Jacobian solver moves a chain
toward a desired end-effector pose.
"""

import jax
jax.config.update("jax_enable_x64", True)

from . import transforms
from . import core
from . import io
from .chain import KinematicChain, LinkJointTree, SerialChain, StarChain, TreeChain
from .core import Fixed, Joint, Linear, LinkJoint, LinkJointBuilder, Range, Rotational, Tree
from .errors import (
    IKError,
    InverseMatrixError,
    JointError,
    JointOutOfLimitError,
    NotConvergedError,
    OutOfLimitError,
    PreconditionError,
    SizeMismatchError,
)
from .ik import JacobianIKSolver, to_vector6

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "io",
    "Fixed",
    "IKError",
    "InverseMatrixError",
    "JacobianIKSolver",
    "Joint",
    "JointError",
    "JointOutOfLimitError",
    "KinematicChain",
    "Linear",
    "LinkJoint",
    "LinkJointBuilder",
    "LinkJointTree",
    "NotConvergedError",
    "OutOfLimitError",
    "PreconditionError",
    "Range",
    "Rotational",
    "SerialChain",
    "SizeMismatchError",
    "StarChain",
    "Tree",
    "TreeChain",
    "to_vector6",
]
