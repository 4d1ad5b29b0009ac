"""Shared arm fixtures."""

import jax.numpy as jnp
import pytest

from jax_ik import LinkJointBuilder, Rotational, SerialChain

X = (1.0, 0.0, 0.0)
Y = (0.0, 1.0, 0.0)
Z = (0.0, 0.0, 1.0)

# (link name, joint name, axis, translation) shoulder to wrist
ARM_LINKS = [
    ("shoulder_link1", "shoulder_pitch", Y, (0.0, 0.0, 0.0)),
    ("shoulder_link2", "shoulder_roll", X, (0.0, 0.1, 0.0)),
    ("shoulder_link3", "shoulder_yaw", Z, (0.0, 0.0, -0.30)),
    ("elbow_link1", "elbow_pitch", Y, (0.0, 0.0, -0.15)),
    ("wrist_link1", "wrist_yaw", Z, (0.0, 0.0, -0.15)),
    ("wrist_link2", "wrist_pitch", Y, (0.0, 0.0, -0.15)),
    ("wrist_link3", "wrist_roll", X, (0.0, 0.0, -0.10)),
]


def create_arm_links(dof, dtype=jnp.float64):
    return [
        LinkJointBuilder()
        .name(link_name)
        .joint(joint_name, Rotational(axis=axis))
        .translation(translation)
        .dtype(dtype)
        .finalize()
        for link_name, joint_name, axis, translation in ARM_LINKS[:dof]
    ]


@pytest.fixture
def arm6():
    return SerialChain("arm6", create_arm_links(6))


@pytest.fixture
def arm7():
    return SerialChain("arm7", create_arm_links(7))


@pytest.fixture
def make_arm_links():
    return create_arm_links
