"""Arena-backed tree of nodes addressed by integer indices.

Nodes are owned by the :class:`Tree` that created them. Each node stores
the index of its parent (or None for the root) and the indices of its
children in insertion order, so upward walks never dangle and traversal
order is reproducible.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, TypeVar

K = TypeVar("K")


@dataclass
class Node:
    """One tree node wrapping arbitrary `data`."""
    data: Any
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)


class Tree:
    """Owner of a set of nodes linked by parent/child relations."""

    def __init__(self):
        self._nodes: List[Node] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def add(self, data: Any) -> int:
        """Create a parentless node holding `data` and return its index."""
        self._nodes.append(Node(data))
        return len(self._nodes) - 1

    def set_parent_child(self, parent: int, child: int) -> None:
        """Attach `child` below `parent`.

        Raises:
            ValueError: if either index is unknown, `child` already has a
                parent, or the attachment would close a cycle.
        """
        for index in (parent, child):
            if not 0 <= index < len(self._nodes):
                raise ValueError(f"Node {index} not found in tree")
        if self._nodes[child].parent is not None:
            raise ValueError(f"Node {child} already has a parent")
        if child in self.ancestors(parent):
            raise ValueError(f"Attaching {child} below {parent} would create a cycle")
        self._nodes[child].parent = parent
        self._nodes[parent].children.append(child)

    def parent(self, index: int) -> Optional[int]:
        return self._nodes[index].parent

    def children(self, index: int) -> List[int]:
        return list(self._nodes[index].children)

    def roots(self) -> List[int]:
        return [i for i, node in enumerate(self._nodes) if node.parent is None]

    def ancestors(self, index: int) -> List[int]:
        """Indices from `index` up to its root, both included."""
        ret = [index]
        parent = self._nodes[index].parent
        while parent is not None:
            ret.append(parent)
            parent = self._nodes[parent].parent
        return ret

    def descendants(self, index: int) -> List[int]:
        """Depth-first pre-order indices of the subtree rooted at `index`."""
        ret = []
        stack = [index]
        while stack:
            current = stack.pop()
            ret.append(current)
            stack.extend(reversed(self._nodes[current].children))
        return ret

    def map_descendants(self, index: int, func: Callable[[Node], K]) -> List[K]:
        return [func(self._nodes[i]) for i in self.descendants(index)]

    def map_ancestors(self, index: int, func: Callable[[Node], K]) -> List[K]:
        return [func(self._nodes[i]) for i in self.ancestors(index)]
