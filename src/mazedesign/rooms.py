from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from .exceptions import InvariantViolation
from .geometry import Axis, Point3D

if TYPE_CHECKING:  # pragma: no cover
    from .graph import GraphNode, RoomGraph
    from .partition import PartitionTree

UNVISITED = -1


@dataclass(frozen=True)
class Doorway:
    """Carvable opening between two adjacent rooms.

    Corners are inclusive cell coordinates. ``axis`` is the face normal: along
    it the doorway covers the wall layer on either side of the shared face.
    """

    min_corner: Point3D
    max_corner: Point3D
    axis: Axis

    def size(self, axis: Axis) -> int:
        return self.max_corner[axis] - self.min_corner[axis] + 1

    @property
    def is_vertical(self) -> bool:
        # Y doorways pierce floors and ceilings
        return self.axis is Axis.Y


@dataclass(eq=False)
class Room:
    """A maze room: one leaf partition plus one graph node."""

    partition: Optional[int]
    graph_node: Optional["GraphNode[Room, Doorway]"] = None
    distance: int = UNVISITED

    def bounds(self, tree: "PartitionTree") -> Tuple[Point3D, Point3D]:
        if self.partition is None:
            raise InvariantViolation("Room has been discarded")
        return tree.node(self.partition).bounds()

    def clear(self) -> None:
        self.partition = None
        self.graph_node = None

    def __repr__(self) -> str:
        return f"Room(partition={self.partition}, distance={self.distance})"


def attach_rooms(tree: "PartitionTree") -> List[Room]:
    """Create one room per leaf, in depth-first (left first) leaf order."""
    rooms = []
    for leaf in tree.leaves():
        room = Room(leaf.index)
        leaf.room = room
        rooms.append(room)
    return rooms


def discard_room(room: Room, tree: "PartitionTree", graph: "RoomGraph[Room, Doorway]") -> None:
    """Remove a room from both the partition tree and the graph."""
    if room.partition is None or room.graph_node is None:
        raise InvariantViolation(f"Room was already discarded: {room!r}")
    tree.remove_leaf(room.partition)
    graph.remove_node(room.graph_node)
    room.clear()


__all__ = ["UNVISITED", "Doorway", "Room", "attach_rooms", "discard_room"]
