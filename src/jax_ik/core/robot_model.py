"""Flat robot description records.

These immutable dataclasses mirror a URDF document: a robot is a list of
named links and a list of named joints, each joint naming its parent and
child link. They carry no kinematic state; :mod:`jax_ik.io.builder`
turns them into chains and trees.
"""

from typing import Optional, Tuple

from flax import struct

Vector3 = Tuple[float, float, float]


@struct.dataclass
class LinkDescription:
    name: str = struct.field(pytree_node=False)


@struct.dataclass
class JointDescription:
    """One URDF joint.

    Attributes:
        name: Joint name.
        joint_type: URDF type tag ("revolute", "continuous", "prismatic",
                    "fixed", ...).
        parent: Name of the parent link.
        child: Name of the child link.
        xyz: Origin translation of the joint frame in the parent link frame.
        rpy: Origin rotation as fixed-axis roll, pitch, yaw in radians.
        axis: Joint axis in the joint frame.
        lower: Lower limit, when the document gives one.
        upper: Upper limit, when the document gives one.
    """
    name: str = struct.field(pytree_node=False)
    joint_type: str = struct.field(pytree_node=False)
    parent: str = struct.field(pytree_node=False)
    child: str = struct.field(pytree_node=False)
    xyz: Vector3 = struct.field(pytree_node=False, default=(0.0, 0.0, 0.0))
    rpy: Vector3 = struct.field(pytree_node=False, default=(0.0, 0.0, 0.0))
    axis: Vector3 = struct.field(pytree_node=False, default=(1.0, 0.0, 0.0))
    lower: Optional[float] = struct.field(pytree_node=False, default=None)
    upper: Optional[float] = struct.field(pytree_node=False, default=None)


@struct.dataclass
class RobotDescription:
    """A whole robot: its name, links and joints in document order."""
    name: str = struct.field(pytree_node=False)
    links: Tuple[LinkDescription, ...] = struct.field(pytree_node=False)
    joints: Tuple[JointDescription, ...] = struct.field(pytree_node=False)
