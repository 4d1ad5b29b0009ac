"""Build chains and trees from a flat :class:`RobotDescription`."""

from logging import getLogger
from typing import Dict, List, Optional

import jax.numpy as jnp

from jax_ik.chain import LinkJointTree, SerialChain, StarChain
from jax_ik.core import (
    Fixed,
    JointDescription,
    JointType,
    Linear,
    LinkJoint,
    LinkJointBuilder,
    Range,
    RobotDescription,
    Rotational,
    Tree,
)
from jax_ik.transforms import se3

logger = getLogger(__name__)


def create_joint_type(joint: JointDescription) -> JointType:
    """Map a URDF type tag to a joint type; unknown tags become Fixed."""
    if joint.joint_type in ('revolute', 'continuous'):
        return Rotational(axis=joint.axis)
    if joint.joint_type == 'prismatic':
        return Linear(axis=joint.axis)
    return Fixed()


def _create_limits(joint: JointDescription) -> Optional[Range]:
    if joint.joint_type not in ('revolute', 'prismatic'):
        return None
    if joint.lower is None or joint.upper is None or joint.lower >= joint.upper:
        return None
    return Range(min=joint.lower, max=joint.upper)


def create_link_joint(joint: JointDescription, dtype=jnp.float64) -> LinkJoint:
    """Unit named after the joint's child link, offset by the joint origin."""
    return (LinkJointBuilder()
            .name(joint.child)
            .joint(joint.name, create_joint_type(joint), _create_limits(joint))
            .transform(se3.from_xyz_rpy(joint.xyz, joint.rpy, dtype))
            .dtype(dtype)
            .finalize())


def _child_joint_map(robot: RobotDescription) -> Dict[str, JointDescription]:
    child_joint_map: Dict[str, JointDescription] = {}
    for joint in robot.joints:
        if joint.child in child_joint_map:
            logger.warning("old %s found for child link %s",
                           child_joint_map[joint.child].name, joint.child)
        child_joint_map[joint.child] = joint
    return child_joint_map


def _joints_until_root(end_name: str,
                       child_joint_map: Dict[str, JointDescription]) -> List[JointDescription]:
    ret = []
    visited = set()
    link_name = end_name
    while link_name in child_joint_map:
        if link_name in visited:
            raise ValueError(f"Link '{link_name}' is part of a cycle")
        visited.add(link_name)
        joint = child_joint_map[link_name]
        ret.append(joint)
        link_name = joint.parent
    ret.reverse()
    return ret


def get_root_link_name(robot: RobotDescription) -> str:
    """Name of the link reached by walking parent joints from any link."""
    if not robot.links:
        raise ValueError(f"Robot '{robot.name}' has no links")
    child_joint_map = _child_joint_map(robot)
    joints = _joints_until_root(robot.links[0].name, child_joint_map)
    if joints:
        return joints[0].parent
    return robot.links[0].name


def create_star(robot: RobotDescription, dtype=jnp.float64) -> StarChain:
    """One serial chain per end link, all hanging from the root link.

    End links are links that are never a joint's parent, taken in
    document order.
    """
    parent_links = {joint.parent for joint in robot.joints}
    seen = set()
    end_names = []
    for link in robot.links:
        if link.name in seen:
            logger.warning("old link %s found", link.name)
            continue
        seen.add(link.name)
        if link.name not in parent_links:
            end_names.append(link.name)

    child_joint_map = _child_joint_map(robot)
    frames = [
        SerialChain(end_name,
                    [create_link_joint(joint, dtype)
                     for joint in _joints_until_root(end_name, child_joint_map)],
                    dtype=dtype)
        for end_name in end_names
    ]
    return StarChain(robot.name, frames)


def create_tree(robot: RobotDescription, dtype=jnp.float64) -> LinkJointTree:
    """Tree with one node per joint below a fixed node for the root link."""
    root_name = get_root_link_name(robot)
    tree = Tree()
    root = tree.add(LinkJointBuilder()
                    .name(root_name)
                    .joint("root", Fixed())
                    .dtype(dtype)
                    .finalize())

    nodes = []
    child_node_map: Dict[str, int] = {}
    parent_node_map: Dict[str, List[int]] = {}
    for joint in robot.joints:
        node = tree.add(create_link_joint(joint, dtype))
        child_node_map[joint.child] = node
        parent_node_map.setdefault(joint.parent, []).append(node)
        nodes.append(node)

    for link in robot.links:
        parent_node = child_node_map.get(link.name)
        if parent_node is None:
            continue
        for child_node in parent_node_map.get(link.name, []):
            logger.debug("set parent = %s, child = %s",
                         tree[parent_node].data.joint_name,
                         tree[child_node].data.joint_name)
            tree.set_parent_child(parent_node, child_node)

    for node in nodes:
        if tree.parent(node) is None:
            tree.set_parent_child(root, node)

    return LinkJointTree(robot.name, tree, root)
