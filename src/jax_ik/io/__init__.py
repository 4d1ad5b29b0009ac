"""Robot description input and construction of chains and trees from it."""

from .builder import create_link_joint, create_star, create_tree, get_root_link_name
from .urdf_parser import load_urdf, parse_urdf

__all__ = [
    "create_link_joint",
    "create_star",
    "create_tree",
    "get_root_link_name",
    "load_urdf",
    "parse_urdf",
]
