"""Binary space partition of the maze volume.

Nodes live in an arena owned by :class:`PartitionTree` and refer to their
parent and children by index. Boxes use an inclusive minimum corner and an
exclusive maximum corner. Leaves own exactly one room once rooms are attached.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple, Union

from .exceptions import InvariantViolation
from .geometry import Axis, Point3D, next_split_axis

if TYPE_CHECKING:  # pragma: no cover
    from .rooms import Room

logger = logging.getLogger(__name__)

NodeRef = Union["PartitionNode", int]


@dataclass(eq=False)
class PartitionNode:
    index: int
    min_corner: Point3D
    max_corner: Point3D
    parent: Optional[int] = None
    left: Optional[int] = None
    right: Optional[int] = None
    split_axis: Optional[Axis] = None
    room: Optional["Room"] = None

    @property
    def width(self) -> int:
        return self.max_corner.x - self.min_corner.x

    @property
    def height(self) -> int:
        return self.max_corner.y - self.min_corner.y

    @property
    def length(self) -> int:
        return self.max_corner.z - self.min_corner.z

    @property
    def volume(self) -> int:
        return self.width * self.height * self.length

    def extent(self, axis: Axis) -> int:
        return self.max_corner[axis] - self.min_corner[axis]

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def contains(self, x: int, y: int, z: int) -> bool:
        lo, hi = self.min_corner, self.max_corner
        return lo.x <= x < hi.x and lo.y <= y < hi.y and lo.z <= z < hi.z

    def bounds(self) -> Tuple[Point3D, Point3D]:
        return (self.min_corner, self.max_corner)


class PartitionTree:
    """Arena-backed partition tree.

    Freed slots stay ``None`` so indices held by rooms and other nodes remain
    stable for the lifetime of the tree.
    """

    def __init__(self, width: int, height: int, length: int) -> None:
        if width <= 0 or height <= 0 or length <= 0:
            raise ValueError(f"Partition volume must be positive, got {width}x{height}x{length}")
        self._nodes: List[Optional[PartitionNode]] = []
        self._live = 0
        self._minimums = {Axis.X: 3, Axis.Y: 4, Axis.Z: 3}
        self.volume = Point3D(width, height, length)
        self._root: Optional[int] = self._new_node(Point3D(0, 0, 0), self.volume, None).index

    # ---- Construction ----------------------------------------------------
    @classmethod
    def build(
        cls,
        width: int,
        height: int,
        length: int,
        max_levels: int,
        rng: random.Random,
        min_side: int = 3,
        min_height: int = 4,
    ) -> "PartitionTree":
        """Randomly partition a ``width x height x length`` volume.

        The split axis rotates X -> Z -> Y. A node whose extent on the current
        axis is under twice that axis's minimum tries the following axes at the
        same budget before becoming a leaf.
        """
        tree = cls(width, height, length)
        tree._minimums = {Axis.X: min_side, Axis.Y: min_height, Axis.Z: min_side}
        tree._split(tree._root, Axis.X, max_levels, rng)
        logger.debug(
            "Partitioned %dx%dx%d volume into %d leaves (levels=%d)",
            width, height, length, sum(1 for _ in tree.leaves()), max_levels,
        )
        return tree

    def _split(self, index: int, axis: Axis, levels: int, rng: random.Random) -> None:
        if levels <= 0:
            return
        node = self._get(index)
        for _ in range(3):
            minimum = self._minimums[axis]
            if node.extent(axis) >= 2 * minimum:
                split = rng.randint(node.min_corner[axis] + minimum, node.max_corner[axis] - minimum)
                left, right = self._split_node(node, axis, split)
                child_axis = next_split_axis(axis)
                self._split(left, child_axis, levels - 1, rng)
                self._split(right, child_axis, levels - 1, rng)
                return
            axis = next_split_axis(axis)

    def _split_node(self, node: PartitionNode, axis: Axis, split: int) -> Tuple[int, int]:
        left = self._new_node(node.min_corner, node.max_corner.with_axis(axis, split), node.index)
        right = self._new_node(node.min_corner.with_axis(axis, split), node.max_corner, node.index)
        node.left, node.right = left.index, right.index
        node.split_axis = axis
        return left.index, right.index

    def _new_node(self, lo: Point3D, hi: Point3D, parent: Optional[int]) -> PartitionNode:
        node = PartitionNode(index=len(self._nodes), min_corner=lo, max_corner=hi, parent=parent)
        self._nodes.append(node)
        self._live += 1
        return node

    def _free(self, index: int) -> None:
        self._nodes[index] = None
        self._live -= 1

    # ---- Access ------------------------------------------------------------
    @property
    def root(self) -> Optional[PartitionNode]:
        return None if self._root is None else self._nodes[self._root]

    def node(self, index: int) -> PartitionNode:
        return self._get(index)

    def _get(self, ref: NodeRef) -> PartitionNode:
        index = ref.index if isinstance(ref, PartitionNode) else ref
        node = self._nodes[index] if 0 <= index < len(self._nodes) else None
        if node is None:
            raise InvariantViolation(f"Partition node {index} does not exist")
        return node

    def parent(self, ref: NodeRef) -> Optional[PartitionNode]:
        node = self._get(ref)
        return None if node.parent is None else self._get(node.parent)

    def children(self, ref: NodeRef) -> List[PartitionNode]:
        node = self._get(ref)
        return [self._get(c) for c in (node.left, node.right) if c is not None]

    def __len__(self) -> int:
        return self._live

    def leaves(self) -> Iterator[PartitionNode]:
        """Yield leaves depth-first, left subtree before right."""
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            node = self._get(stack.pop())
            if node.is_leaf():
                yield node
                continue
            for child in (node.right, node.left):
                if child is not None:
                    stack.append(child)

    def depth(self) -> int:
        if self._root is None:
            return 0
        best = 0
        stack = [(self._root, 1)]
        while stack:
            index, d = stack.pop()
            node = self._get(index)
            best = max(best, d)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, d + 1))
        return best

    # ---- Query -------------------------------------------------------------
    def find_point(self, x: int, y: int, z: int) -> Optional[PartitionNode]:
        """Return the leaf containing (x, y, z), or None.

        None means the point is outside the root box or in space vacated by a
        removed room.
        """
        node = self.root
        if node is None or not node.contains(x, y, z):
            return None
        while not node.is_leaf():
            nxt = None
            for child in self.children(node):
                if child.contains(x, y, z):
                    nxt = child
                    break
            if nxt is None:
                return None
            node = nxt
        return node

    # ---- Removal -----------------------------------------------------------
    def remove_leaf(self, ref: NodeRef) -> None:
        """Detach a leaf and collapse its ancestors.

        A parent left with a single child takes over that child's box, children
        and room, so no internal node with fewer than two children persists. A
        leaf that became a leaf through such a collapse is removed the same way
        later, which is how emptiness propagates upward.
        """
        node = self._get(ref)
        if not node.is_leaf():
            raise InvariantViolation(f"Partition node {node.index} is not a leaf")
        parent_index = node.parent
        node.room = None
        self._free(node.index)
        if parent_index is None:
            self._root = None
            logger.debug("Removed root partition %d; tree is now empty", node.index)
            return

        parent = self._get(parent_index)
        if parent.left == node.index:
            parent.left = None
        elif parent.right == node.index:
            parent.right = None
        else:
            raise InvariantViolation(f"Partition {node.index} is not a child of {parent_index}")

        survivor = parent.left if parent.left is not None else parent.right
        if survivor is None:
            raise InvariantViolation(f"Partition {parent_index} was left without children")
        self._absorb(parent, self._get(survivor))

    def _absorb(self, parent: PartitionNode, child: PartitionNode) -> None:
        parent.min_corner, parent.max_corner = child.min_corner, child.max_corner
        parent.left, parent.right = child.left, child.right
        parent.split_axis = child.split_axis
        for grandchild in (parent.left, parent.right):
            if grandchild is not None:
                self._get(grandchild).parent = parent.index
        parent.room = child.room
        if parent.room is not None:
            parent.room.partition = parent.index
        child.room = None
        self._free(child.index)
        logger.debug("Collapsed partition %d into parent %d", child.index, parent.index)


__all__ = ["PartitionNode", "PartitionTree"]
