"""Tests for forward kinematics over serial, star and tree chains."""

import jax.numpy as jnp
import numpy as np
import pytest

from jax_ik import (
    Fixed,
    LinkJointBuilder,
    LinkJointTree,
    OutOfLimitError,
    Range,
    Rotational,
    SerialChain,
    SizeMismatchError,
    StarChain,
    Tree,
    TreeChain,
)
from jax_ik.transforms import se3

Y = (0.0, 1.0, 0.0)
Z = (0.0, 0.0, 1.0)


def _planar_arm():
    """Two z joints with unit links and a fixed tool link."""
    l0 = LinkJointBuilder().name("l0").joint("j0", Rotational(axis=Z)).finalize()
    l1 = (LinkJointBuilder().name("l1").joint("j1", Rotational(axis=Z))
          .translation((1.0, 0.0, 0.0)).finalize())
    tool = (LinkJointBuilder().name("tool").joint("tool_fixed", Fixed())
            .translation((1.0, 0.0, 0.0)).finalize())
    return SerialChain("planar", [l0, l1, tool])


def test_planar_end_transform():
    arm = _planar_arm()
    arm.set_joint_angles([jnp.pi / 2, -jnp.pi / 2])

    end = arm.calc_end_transform()
    np.testing.assert_allclose(se3.get_position(end), jnp.array([1.0, 1.0, 0.0]), atol=1e-12)
    np.testing.assert_allclose(se3.get_rotation(end), jnp.eye(3), atol=1e-12)


def test_end_transform_is_repeatable(arm7):
    arm7.set_joint_angles([0.8, 0.2, 0.0, -1.5, 0.0, -0.3, 0.0])
    first = arm7.calc_end_transform()
    second = arm7.calc_end_transform()
    np.testing.assert_array_equal(first, second)


def test_link_transforms_are_prefix_compositions(arm6):
    arm6.set_joint_angles([0.1, 0.2, 0.3, 0.4, 0.5, 0.6])
    transforms = arm6.calc_link_transforms()

    assert len(transforms) == 6
    np.testing.assert_allclose(transforms[0], arm6.link_joints[0].calc_transform(), atol=1e-12)
    np.testing.assert_allclose(
        transforms[1],
        se3.multiply(transforms[0], arm6.link_joints[1].calc_transform()),
        atol=1e-12,
    )
    np.testing.assert_allclose(transforms[-1], arm6.calc_end_transform(), atol=1e-12)


def test_base_transform_is_prepended():
    arm = _planar_arm()
    base = se3.from_translation([0.0, 0.0, 2.0])
    arm.set_transform(base)

    np.testing.assert_array_equal(arm.get_transform(), base)
    np.testing.assert_allclose(se3.get_position(arm.calc_end_transform()),
                               jnp.array([2.0, 0.0, 2.0]), atol=1e-12)


def test_fixed_joints_are_skipped():
    arm = _planar_arm()
    assert len(arm) == 3
    assert arm.dof == 2
    assert arm.get_joint_angles() == [0.0, 0.0]
    assert arm.joint_names() == ["j0", "j1", "tool_fixed"]


def test_wrong_size_leaves_angles_unchanged(arm6):
    arm6.set_joint_angles([0.1, 0.2, 0.3, 0.4, 0.5, 0.6])
    before = arm6.get_joint_angles()

    with pytest.raises(SizeMismatchError):
        arm6.set_joint_angles([0.0] * 5)
    with pytest.raises(SizeMismatchError):
        arm6.set_joint_angles([0.0] * 7)

    assert arm6.get_joint_angles() == before


def test_out_of_limit_keeps_earlier_assignments(make_arm_links):
    links = make_arm_links(6)
    links[3].joint.set_limits(Range(min=-0.5, max=0.5))
    arm = SerialChain("arm", links)

    with pytest.raises(OutOfLimitError):
        arm.set_joint_angles([0.1, 0.2, 0.3, 1.0, 0.5, 0.6])

    assert arm.get_joint_angles() == [0.1, 0.2, 0.3, 0.0, 0.0, 0.0]


def test_float32_chain(make_arm_links):
    arm = SerialChain("arm32", make_arm_links(6, dtype=jnp.float32))
    arm.set_joint_angles([0.1, 0.2, 0.3, 0.4, 0.5, 0.6])
    assert arm.dtype == jnp.float32
    assert arm.calc_end_transform().dtype == jnp.float32


def test_mixed_precision_rejected(make_arm_links):
    links = make_arm_links(2) + make_arm_links(2, dtype=jnp.float32)
    with pytest.raises(ValueError, match="Mixed precisions"):
        SerialChain("mixed", links)


def _star():
    left = SerialChain("left", [
        LinkJointBuilder().name("l_link1").joint("l_joint1", Rotational(axis=Z))
        .translation((0.0, 0.1, 0.0)).finalize(),
        LinkJointBuilder().name("l_link2").joint("l_joint2", Rotational(axis=Y))
        .translation((0.0, 0.0, -0.3)).finalize(),
    ])
    right = SerialChain("right", [
        LinkJointBuilder().name("r_link1").joint("r_joint1", Rotational(axis=Z))
        .translation((0.0, -0.1, 0.0)).finalize(),
        LinkJointBuilder().name("r_link2").joint("r_fixed", Fixed())
        .translation((0.0, 0.0, -0.3)).finalize(),
        LinkJointBuilder().name("r_link3").joint("r_joint3", Rotational(axis=Y))
        .translation((0.0, 0.0, -0.3)).finalize(),
    ])
    return StarChain("body", [left, right])


def test_star_angles_concatenate_frames():
    star = _star()
    assert star.dof == 4
    star.set_joint_angles([0.1, 0.2, 0.3, 0.4])
    assert star.frames[0].get_joint_angles() == [0.1, 0.2]
    assert star.frames[1].get_joint_angles() == [0.3, 0.4]
    assert star.get_joint_angles() == [0.1, 0.2, 0.3, 0.4]
    assert star.joint_names() == ["l_joint1", "l_joint2", "r_joint1", "r_fixed", "r_joint3"]


def test_star_wrong_size_leaves_angles_unchanged():
    star = _star()
    star.set_joint_angles([0.1, 0.2, 0.3, 0.4])
    with pytest.raises(SizeMismatchError):
        star.set_joint_angles([1.0, 1.0, 1.0])
    assert star.get_joint_angles() == [0.1, 0.2, 0.3, 0.4]


def test_star_shared_base_transform():
    star = _star()
    star.set_joint_angles([0.1, 0.2, 0.3, 0.4])
    base = se3.from_translation([0.0, 0.0, 1.0])
    star.set_transform(base)

    transforms = star.calc_link_transforms()
    assert [len(t) for t in transforms] == [2, 3]
    for frame, frame_transforms in zip(star.frames, transforms):
        for raw, with_base in zip(frame.calc_link_transforms(), frame_transforms):
            np.testing.assert_allclose(with_base, se3.multiply(base, raw), atol=1e-12)

    np.testing.assert_allclose(star.calc_end_transform(), transforms[0][-1], atol=1e-12)
    star.end = 1
    np.testing.assert_allclose(star.calc_end_transform(), transforms[1][-1], atol=1e-12)


def test_star_limb_shares_units():
    star = _star()
    star.set_transform(se3.from_translation([0.0, 0.0, 1.0]))
    limb = star.limb(1)

    limb.set_joint_angles([0.5, -0.5])
    assert star.get_joint_angles() == [0.0, 0.0, 0.5, -0.5]
    star.end = 1
    np.testing.assert_allclose(limb.calc_end_transform(), star.calc_end_transform(), atol=1e-12)


def _tree(make_arm_links):
    """A fixed root with a 6-joint arm and a 2-joint branch off the elbow."""
    tree = Tree()
    root = tree.add(LinkJointBuilder().name("base").joint("root", Fixed()).finalize())
    arm = [tree.add(lj) for lj in make_arm_links(6)]
    tree.set_parent_child(root, arm[0])
    for parent, child in zip(arm, arm[1:]):
        tree.set_parent_child(parent, child)
    finger1 = tree.add(LinkJointBuilder().name("finger1").joint("finger_j1", Rotational(axis=Y))
                       .translation((0.05, 0.0, 0.0)).finalize())
    finger2 = tree.add(LinkJointBuilder().name("finger2").joint("finger_j2", Rotational(axis=Y))
                       .translation((0.05, 0.0, 0.0)).finalize())
    tree.set_parent_child(arm[3], finger1)
    tree.set_parent_child(finger1, finger2)
    return tree, root, arm, finger2


def test_tree_chain_orders_root_to_tip(make_arm_links):
    tree, _, arm, _ = _tree(make_arm_links)
    chain = TreeChain("arm", tree, arm[-1])

    assert chain.joint_names() == ["root", "shoulder_pitch", "shoulder_roll", "shoulder_yaw",
                                   "elbow_pitch", "wrist_yaw", "wrist_pitch"]
    chain.set_joint_angles([0.1, 0.2, 0.3, 0.4, 0.5, 0.6])
    assert chain.get_joint_angles() == [0.1, 0.2, 0.3, 0.4, 0.5, 0.6]
    assert tree[arm[0]].data.get_joint_angle() == 0.1


def test_tree_chain_matches_serial_chain(make_arm_links):
    tree, _, arm, _ = _tree(make_arm_links)
    chain = TreeChain("arm", tree, arm[-1])
    serial = SerialChain("arm", make_arm_links(6))

    angles = [0.8, 0.2, 0.0, -1.5, 0.0, -0.3]
    chain.set_joint_angles(angles)
    serial.set_joint_angles(angles)
    np.testing.assert_allclose(chain.calc_end_transform(), serial.calc_end_transform(), atol=1e-12)
    np.testing.assert_allclose(chain.calc_link_transforms()[-1], chain.calc_end_transform(), atol=1e-12)


def test_tree_chains_share_nodes(make_arm_links):
    tree, _, arm, finger = _tree(make_arm_links)
    arm_chain = TreeChain("arm", tree, arm[-1])
    finger_chain = TreeChain("finger", tree, finger)

    assert finger_chain.dof == 6
    finger_chain.set_joint_angles([0.1, 0.2, 0.3, 0.4, 0.7, 0.8])
    assert arm_chain.get_joint_angles() == [0.1, 0.2, 0.3, 0.4, 0.0, 0.0]


def test_tree_chain_wrong_size(make_arm_links):
    tree, _, arm, _ = _tree(make_arm_links)
    chain = TreeChain("arm", tree, arm[-1])
    with pytest.raises(SizeMismatchError):
        chain.set_joint_angles([0.0] * 7)
    assert chain.get_joint_angles() == [0.0] * 6


def test_link_joint_tree_transforms(make_arm_links):
    tree, root, arm, finger = _tree(make_arm_links)
    robot = LinkJointTree("robot", tree, root)
    chain = robot.chain("wrist_pitch")
    chain.set_joint_angles([0.1, 0.2, 0.3, 0.4, 0.5, 0.6])

    transforms = robot.calc_link_transforms()
    assert len(transforms) == len(tree) == 9
    assert robot.joint_names()[:2] == ["root", "shoulder_pitch"]
    np.testing.assert_allclose(tree[arm[-1]].data.world_transform_cache,
                               chain.calc_end_transform(), atol=1e-12)
    finger_chain = TreeChain("finger", tree, finger)
    np.testing.assert_allclose(tree[finger].data.world_transform_cache,
                               finger_chain.calc_end_transform(), atol=1e-12)


def test_link_joint_tree_lookup(make_arm_links):
    tree, root, arm, _ = _tree(make_arm_links)
    robot = LinkJointTree("robot", tree, root)
    assert robot.find("elbow_pitch") == arm[3]
    with pytest.raises(ValueError, match="not found"):
        robot.find("nope")
    with pytest.raises(ValueError, match="not a root"):
        LinkJointTree("robot", tree, arm[0])
