"""Core data model: joints, link-joint units, node trees and robot descriptions."""

from .joint import Fixed, Joint, JointType, Linear, Range, Rotational
from .link import LinkJoint, LinkJointBuilder
from .robot_model import JointDescription, LinkDescription, RobotDescription
from .tree import Node, Tree

__all__ = [
    "Fixed",
    "Joint",
    "JointDescription",
    "JointType",
    "Linear",
    "LinkDescription",
    "LinkJoint",
    "LinkJointBuilder",
    "Node",
    "Range",
    "RobotDescription",
    "Rotational",
    "Tree",
]
