"""Kinematic chains: forward kinematics over link-joint units.

Three structures share the :class:`KinematicChain` interface so the IK
solver can be written once:

- :class:`SerialChain` – an ordered list of units without branches.
- :class:`StarChain` – several serial chains sharing one base transform.
- :class:`TreeChain` – the path from the root of a :class:`Tree` down to a
  chosen end node.

Joint angles are always exposed root-to-tip with fixed joints skipped, so
index 0 is the movable joint nearest the structural root.
"""

import abc
from typing import List, Optional, Sequence

import jax
import jax.numpy as jnp

from .core import LinkJoint, Tree
from .errors import SizeMismatchError
from .transforms import se3

Array = jax.Array


def _common_dtype(link_joints: Sequence[LinkJoint], dtype=None):
    dtypes = {lj.dtype for lj in link_joints}
    if dtype is not None:
        dtypes.add(jnp.dtype(dtype))
    if len(dtypes) > 1:
        raise ValueError(f"Mixed precisions in one chain: {sorted(str(d) for d in dtypes)}")
    if dtypes:
        return dtypes.pop()
    return jnp.dtype(jnp.float64)


def _fold_transforms(base: Array, link_joints: Sequence[LinkJoint]) -> Array:
    end = base
    for lj in link_joints:
        end = se3.multiply(end, lj.calc_transform())
    return end


def _scan_transforms(base: Array, link_joints: Sequence[LinkJoint]) -> List[Array]:
    ret = []
    current = base
    for lj in link_joints:
        current = se3.multiply(current, lj.calc_transform())
        ret.append(current)
    return ret


def _set_angles(link_joints: Sequence[LinkJoint], angles: Sequence[float]) -> None:
    # Units assigned before a failing one keep their new angle
    movable = [lj for lj in link_joints if lj.has_joint_angle()]
    if len(movable) != len(angles):
        raise SizeMismatchError(
            f"Expected {len(movable)} joint angles, got {len(angles)}")
    for lj, angle in zip(movable, angles):
        lj.set_joint_angle(angle)


def _get_angles(link_joints: Sequence[LinkJoint]) -> List[float]:
    return [a for a in (lj.get_joint_angle() for lj in link_joints) if a is not None]


class KinematicChain(abc.ABC):
    """Capability interface used by the IK solver."""

    @abc.abstractmethod
    def calc_end_transform(self) -> Array:
        """World pose of the end of the chain."""

    @abc.abstractmethod
    def set_joint_angles(self, angles: Sequence[float]) -> None:
        """Assign one angle per movable joint, root to tip.

        Raises:
            SizeMismatchError: if `angles` does not have one entry per
                movable joint. No angle is changed in that case.
            OutOfLimitError: if an angle is rejected by its joint. Joints
                before the failing one keep their new angles.
        """

    @abc.abstractmethod
    def get_joint_angles(self) -> List[float]:
        """Angles of the movable joints, root to tip."""

    @property
    def dof(self) -> int:
        return len(self.get_joint_angles())


class SerialChain(KinematicChain):
    """Ordered link-joint units from root to tip behind a base transform.

    ``[transform] -> [unit 0] -> [unit 1] -> ... -> [unit n-1]``
    """

    def __init__(self, name: str, link_joints: Sequence[LinkJoint],
                 transform: Optional[Array] = None, dtype=None):
        self.name = name
        self.link_joints = list(link_joints)
        self.dtype = _common_dtype(self.link_joints, dtype)
        self.transform = se3.identity(self.dtype)
        if transform is not None:
            self.set_transform(transform)

    def __len__(self) -> int:
        return len(self.link_joints)

    def set_transform(self, transform: Array) -> None:
        self.transform = jnp.asarray(transform, dtype=self.dtype)

    def get_transform(self) -> Array:
        return self.transform

    def joint_names(self) -> List[str]:
        return [lj.joint_name for lj in self.link_joints]

    def calc_end_transform(self) -> Array:
        return _fold_transforms(self.transform, self.link_joints)

    def calc_link_transforms(self) -> List[Array]:
        """World pose after each unit, in chain order."""
        return _scan_transforms(self.transform, self.link_joints)

    def set_joint_angles(self, angles: Sequence[float]) -> None:
        _set_angles(self.link_joints, angles)

    def get_joint_angles(self) -> List[float]:
        return _get_angles(self.link_joints)

    def __repr__(self) -> str:
        return f"SerialChain(name={self.name!r}, joints={self.joint_names()!r})"


class StarChain(KinematicChain):
    """Serial chains branching only at a shared base, e.g. the limbs of a humanoid.

    Joint angles of the star are the concatenation of every frame's angles
    in frame order. The end transform is the tip of frame `end`.

    Only frame `end` moves the end transform, so the joints of the other
    frames give the IK solver zero Jacobian columns. Solving a star whose
    `end` frame has fewer than 6 DOF fails with `InverseMatrixError` even
    when the star as a whole has 6 or more; solve ``limb(i)`` instead to
    move a single limb.
    """

    def __init__(self, name: str, frames: Sequence[SerialChain],
                 transform: Optional[Array] = None, end: int = 0):
        self.name = name
        self.frames = list(frames)
        self.dtype = _common_dtype([lj for f in self.frames for lj in f.link_joints])
        for frame in self.frames:
            if frame.dtype != self.dtype:
                raise ValueError(f"Frame '{frame.name}' uses {frame.dtype}, star uses {self.dtype}")
        self.transform = se3.identity(self.dtype)
        if transform is not None:
            self.set_transform(transform)
        self.end = end

    def set_transform(self, transform: Array) -> None:
        self.transform = jnp.asarray(transform, dtype=self.dtype)

    def get_transform(self) -> Array:
        return self.transform

    def limb(self, index: int) -> SerialChain:
        """Serial view of one frame that includes the shared base.

        The view shares its units with the star, so angles set through it
        are visible from the star.
        """
        frame = self.frames[index]
        base = se3.multiply(self.transform, frame.transform)
        return SerialChain(frame.name, frame.link_joints, transform=base, dtype=self.dtype)

    def joint_names(self) -> List[str]:
        return [name for frame in self.frames for name in frame.joint_names()]

    def calc_link_transforms(self) -> List[List[Array]]:
        return [[se3.multiply(self.transform, tf) for tf in frame.calc_link_transforms()]
                for frame in self.frames]

    def calc_end_transform(self) -> Array:
        return se3.multiply(self.transform, self.frames[self.end].calc_end_transform())

    def set_joint_angles(self, angles: Sequence[float]) -> None:
        sizes = [frame.dof for frame in self.frames]
        if sum(sizes) != len(angles):
            raise SizeMismatchError(f"Expected {sum(sizes)} joint angles, got {len(angles)}")
        start = 0
        for frame, size in zip(self.frames, sizes):
            frame.set_joint_angles(angles[start:start + size])
            start += size

    def get_joint_angles(self) -> List[float]:
        return [a for frame in self.frames for a in frame.get_joint_angles()]

    def __repr__(self) -> str:
        return f"StarChain(name={self.name!r}, frames={[f.name for f in self.frames]!r})"


class TreeChain(KinematicChain):
    """Chain from the root of `tree` down to the node `end`.

    The unit sequence is derived on every call by walking parent links up
    from `end`, so it always reflects the current tree.
    """

    def __init__(self, name: str, tree: Tree, end: int, transform: Optional[Array] = None):
        self.name = name
        self.tree = tree
        self.end = end
        self.dtype = _common_dtype(self.link_joints)
        self.transform = se3.identity(self.dtype)
        if transform is not None:
            self.set_transform(transform)

    @property
    def link_joints(self) -> List[LinkJoint]:
        return [self.tree[i].data for i in reversed(self.tree.ancestors(self.end))]

    def set_transform(self, transform: Array) -> None:
        self.transform = jnp.asarray(transform, dtype=self.dtype)

    def get_transform(self) -> Array:
        return self.transform

    def joint_names(self) -> List[str]:
        return [lj.joint_name for lj in self.link_joints]

    def calc_end_transform(self) -> Array:
        return _fold_transforms(self.transform, self.link_joints)

    def calc_link_transforms(self) -> List[Array]:
        return _scan_transforms(self.transform, self.link_joints)

    def set_joint_angles(self, angles: Sequence[float]) -> None:
        _set_angles(self.link_joints, angles)

    def get_joint_angles(self) -> List[float]:
        return _get_angles(self.link_joints)

    def __repr__(self) -> str:
        return f"TreeChain(name={self.name!r}, joints={self.joint_names()!r})"


class LinkJointTree:
    """A whole robot as a tree of link-joint units.

    Attributes:
        name: Robot name.
        tree: Arena owning every node; node data are :class:`LinkJoint`.
        root: Index of the root node.
    """

    def __init__(self, name: str, tree: Tree, root: int):
        if tree.parent(root) is not None:
            raise ValueError(f"Node {root} is not a root")
        self.name = name
        self.tree = tree
        self.root = root
        self.dtype = _common_dtype(self.link_joints())
        self.transform = se3.identity(self.dtype)

    def set_transform(self, transform: Array) -> None:
        self.transform = jnp.asarray(transform, dtype=self.dtype)

    def link_joints(self) -> List[LinkJoint]:
        """Every unit in depth-first order from the root."""
        return self.tree.map_descendants(self.root, lambda node: node.data)

    def joint_names(self) -> List[str]:
        return [lj.joint_name for lj in self.link_joints()]

    def find(self, joint_name: str) -> int:
        for index in self.tree.descendants(self.root):
            if self.tree[index].data.joint_name == joint_name:
                return index
        raise ValueError(f"Joint '{joint_name}' not found in tree '{self.name}'")

    def chain(self, end_joint_name: str, name: Optional[str] = None) -> TreeChain:
        """Chain from the root to the unit whose joint is `end_joint_name`."""
        end = self.find(end_joint_name)
        return TreeChain(name or end_joint_name, self.tree, end, transform=self.transform)

    def calc_link_transforms(self) -> List[Array]:
        """World pose of every unit, depth-first from the root.

        Each unit's `world_transform_cache` is refreshed along the way.
        """
        ret = []
        for index in self.tree.descendants(self.root):
            node = self.tree[index]
            if node.parent is None:
                parent_transform = self.transform
            else:
                parent_transform = self.tree[node.parent].data.world_transform_cache
            world = se3.multiply(parent_transform, node.data.calc_transform())
            node.data.world_transform_cache = world
            ret.append(world)
        return ret

    def __repr__(self) -> str:
        return f"LinkJointTree(name={self.name!r}, size={len(self.tree)})"
