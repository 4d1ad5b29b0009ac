"""Link-joint units: a joint paired with the static link offset before it."""

from typing import Optional

import jax
import jax.numpy as jnp

from ..transforms import se3
from .joint import Fixed, Joint, JointType, Range

Array = jax.Array


class LinkJoint:
    """A joint and the fixed local transform of the link it is attached to.

    The combined transform of the unit is ``transform @ joint motion``: the
    joint moves in the frame already offset by the link geometry.

    Attributes:
        name: Link name.
        joint: The joint driving this unit.
        transform: (4, 4) local offset from the parent attachment point.
            Fixed once the unit is built.
        dtype: Floating-point precision of every transform the unit
            produces.
        world_transform_cache: World pose of the unit from the last
            :meth:`LinkJointTree.calc_link_transforms` pass, if any.
    """

    def __init__(self, name: str, joint: Joint, transform: Optional[Array] = None,
                 dtype=jnp.float64):
        self.name = name
        self.joint = joint
        self.dtype = jnp.dtype(dtype)
        if transform is None:
            transform = se3.identity(self.dtype)
        self.transform = jnp.asarray(transform, dtype=self.dtype)
        self.world_transform_cache: Optional[Array] = None

    @property
    def joint_name(self) -> str:
        return self.joint.name

    def calc_transform(self) -> Array:
        return se3.multiply(self.transform, self.joint.calc_transform(self.dtype))

    def set_joint_angle(self, angle: float) -> None:
        self.joint.set_angle(angle)

    def get_joint_angle(self) -> Optional[float]:
        return self.joint.get_angle()

    def has_joint_angle(self) -> bool:
        return not self.joint.is_fixed

    def __repr__(self) -> str:
        return f"LinkJoint(name={self.name!r}, joint={self.joint!r})"


class LinkJointBuilder:
    """Fluent builder for :class:`LinkJoint`.

    Example::

        link = (LinkJointBuilder()
                .name("shoulder_link")
                .joint("shoulder_pitch", Rotational(axis=(0.0, 1.0, 0.0)))
                .translation((0.0, 0.1, 0.0))
                .finalize())
    """

    def __init__(self):
        self._name = ""
        self._joint_name = ""
        self._joint_type: JointType = Fixed()
        self._limits: Optional[Range] = None
        self._dtype = jnp.float64
        self._translation = None
        self._rotation = None

    def name(self, name: str) -> "LinkJointBuilder":
        self._name = name
        return self

    def joint(self, name: str, joint_type: JointType,
              limits: Optional[Range] = None) -> "LinkJointBuilder":
        self._joint_name = name
        self._joint_type = joint_type
        self._limits = limits
        return self

    def limits(self, limits: Optional[Range]) -> "LinkJointBuilder":
        self._limits = limits
        return self

    def dtype(self, dtype) -> "LinkJointBuilder":
        self._dtype = dtype
        return self

    def transform(self, transform: Array) -> "LinkJointBuilder":
        transform = jnp.asarray(transform)
        self._translation = se3.get_position(transform)
        self._rotation = se3.get_rotation(transform)
        return self

    def translation(self, translation) -> "LinkJointBuilder":
        self._translation = jnp.asarray(translation)
        return self

    def rotation(self, rotation) -> "LinkJointBuilder":
        """Set the offset rotation from a 3x3 matrix."""
        self._rotation = jnp.asarray(rotation)
        return self

    def finalize(self) -> LinkJoint:
        dtype = self._dtype
        translation = self._translation if self._translation is not None else jnp.zeros(3)
        rotation = self._rotation if self._rotation is not None else jnp.eye(3)
        transform = se3.from_position_and_rotation(
            jnp.asarray(translation, dtype=dtype), jnp.asarray(rotation, dtype=dtype))
        joint = Joint(self._joint_name, self._joint_type, self._limits)
        return LinkJoint(self._name, joint, transform, dtype=dtype)
