"""Joint types, joint limits and the Joint itself.

A joint is a single scalar degree of freedom. Its type decides how the
scalar maps to a rigid motion: a rotation about an axis, a translation
along an axis, or nothing at all for fixed joints.
"""

import math
from typing import Optional, Tuple, Union

import jax
import jax.numpy as jnp
from flax import struct

from ..errors import OutOfLimitError
from ..transforms import se3, so3

Array = jax.Array
Axis = Tuple[float, float, float]


def _unit_axis(axis) -> Axis:
    values = tuple(float(v) for v in axis)
    if len(values) != 3:
        raise ValueError(f"axis must have 3 components, got {len(values)}")
    norm = math.sqrt(sum(v * v for v in values))
    if norm == 0.0:
        raise ValueError("axis must not be the zero vector")
    return (values[0] / norm, values[1] / norm, values[2] / norm)


@struct.dataclass
class Fixed:
    """Joint without a degree of freedom."""

    def transform(self, angle: float, dtype=jnp.float64) -> Array:
        return se3.identity(dtype)


@struct.dataclass
class Rotational:
    """Rotation about `axis`; the joint angle is in radians.

    The axis is normalized on construction.
    """
    axis: Axis = struct.field(pytree_node=False)

    def __post_init__(self):
        object.__setattr__(self, "axis", _unit_axis(self.axis))

    def transform(self, angle: float, dtype=jnp.float64) -> Array:
        return se3.from_rotation(so3.from_axis_angle(self.axis, angle, dtype), dtype)


@struct.dataclass
class Linear:
    """Translation along `axis`; the joint angle is a signed length.

    The axis is normalized on construction.
    """
    axis: Axis = struct.field(pytree_node=False)

    def __post_init__(self):
        object.__setattr__(self, "axis", _unit_axis(self.axis))

    def transform(self, angle: float, dtype=jnp.float64) -> Array:
        offset = jnp.asarray(self.axis, dtype=dtype) * jnp.asarray(angle, dtype=dtype)
        return se3.from_position_and_rotation(offset, jnp.eye(3, dtype=dtype))


JointType = Union[Fixed, Rotational, Linear]


@struct.dataclass
class Range:
    """Open interval of valid joint angles."""
    min: float = struct.field(pytree_node=False)
    max: float = struct.field(pytree_node=False)

    def is_valid(self, value: float) -> bool:
        return self.min < value < self.max


class Joint:
    """A named joint holding its current angle.

    Fixed joints never hold a settable angle: `get_angle` returns None and
    `set_angle` always raises :class:`OutOfLimitError`.
    """

    def __init__(self, name: str, joint_type: JointType, limits: Optional[Range] = None):
        self.name = name
        self.joint_type = joint_type
        self.angle = 0.0
        self.limits = limits

    @property
    def is_fixed(self) -> bool:
        return isinstance(self.joint_type, Fixed)

    def set_limits(self, limits: Optional[Range]) -> None:
        self.limits = limits

    def set_angle(self, angle: float) -> None:
        """Assign a new angle, leaving the old one in place on failure.

        Raises:
            OutOfLimitError: if the joint is fixed or `angle` lies outside
                the open interval of its limits.
        """
        if self.is_fixed:
            raise OutOfLimitError(f"joint '{self.name}' is fixed")
        angle = float(angle)
        if self.limits is not None and not self.limits.is_valid(angle):
            raise OutOfLimitError(
                f"angle {angle} of joint '{self.name}' is outside "
                f"({self.limits.min}, {self.limits.max})"
            )
        self.angle = angle

    def get_angle(self) -> Optional[float]:
        if self.is_fixed:
            return None
        return self.angle

    def calc_transform(self, dtype=jnp.float64) -> Array:
        """Rigid motion produced by the current angle."""
        return self.joint_type.transform(self.angle, dtype)

    def __repr__(self) -> str:
        return (f"Joint(name={self.name!r}, joint_type={self.joint_type!r}, "
                f"angle={self.angle!r}, limits={self.limits!r})")
