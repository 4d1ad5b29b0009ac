"""URDF reader producing flat :class:`RobotDescription` records.

Only the kinematic part of the document is read: link names and, for
each joint, its type, parent and child links, origin, axis and limits.
"""

from typing import Optional, Tuple, Union

from lxml import etree

from jax_ik.core.robot_model import JointDescription, LinkDescription, RobotDescription

Vector3 = Tuple[float, float, float]


def load_urdf(urdf_path: str) -> RobotDescription:
    """Load a URDF file into a RobotDescription.

    Args:
        urdf_path: Path to the URDF file to load.

    Returns:
        RobotDescription with links and joints in document order.
    """
    tree = etree.parse(urdf_path)
    return _parse_robot(tree.getroot())


def parse_urdf(document: Union[str, bytes]) -> RobotDescription:
    """Parse a URDF document held in memory."""
    if isinstance(document, str):
        document = document.encode()
    return _parse_robot(etree.fromstring(document))


def _parse_robot(root) -> RobotDescription:
    if root.tag != 'robot':
        raise ValueError(f"Expected <robot> root element, found <{root.tag}>")

    links = tuple(LinkDescription(name=link.get('name')) for link in root.findall('link'))
    joints = tuple(_parse_joint(joint) for joint in root.findall('joint'))

    return RobotDescription(name=root.get('name', ''), links=links, joints=joints)


def _parse_joint(joint) -> JointDescription:
    joint_name = joint.get('name')
    parent_elem = joint.find('parent')
    child_elem = joint.find('child')
    if parent_elem is None or child_elem is None:
        raise ValueError(f"Joint '{joint_name}' needs both <parent> and <child>")

    xyz = (0.0, 0.0, 0.0)
    rpy = (0.0, 0.0, 0.0)
    origin_elem = joint.find('origin')
    if origin_elem is not None:
        xyz = _parse_vector3(origin_elem.get('xyz', '0 0 0'))
        rpy = _parse_vector3(origin_elem.get('rpy', '0 0 0'))

    # URDF default axis
    axis = (1.0, 0.0, 0.0)
    axis_elem = joint.find('axis')
    if axis_elem is not None:
        axis = _parse_vector3(axis_elem.get('xyz', '1 0 0'))

    lower: Optional[float] = None
    upper: Optional[float] = None
    limit_elem = joint.find('limit')
    if limit_elem is not None:
        lower = _parse_optional_float(limit_elem.get('lower'))
        upper = _parse_optional_float(limit_elem.get('upper'))

    return JointDescription(
        name=joint_name,
        joint_type=joint.get('type'),
        parent=parent_elem.get('link'),
        child=child_elem.get('link'),
        xyz=xyz,
        rpy=rpy,
        axis=axis,
        lower=lower,
        upper=upper,
    )


def _parse_vector3(text: str) -> Vector3:
    values = [float(x) for x in text.split()]
    if len(values) != 3:
        raise ValueError(f"Expected 3 numbers, got '{text}'")
    return (values[0], values[1], values[2])


def _parse_optional_float(text: Optional[str]) -> Optional[float]:
    if text is None:
        return None
    return float(text)
