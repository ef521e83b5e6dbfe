"""Invariant checks over partition trees, room graphs and finished designs.

Each ``check_*`` function raises :class:`InvariantViolation` describing the
first problem found.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence, Set

from .adjacency import FACES, doorway_minimum
from .config import MazeConfig
from .exceptions import InvariantViolation
from .graph import GraphNode, RoomGraph
from .partition import PartitionTree
from .rooms import Doorway, Room

if TYPE_CHECKING:  # pragma: no cover
    from .designer import MazeDesign

logger = logging.getLogger(__name__)

RoomNode = GraphNode[Room, Doorway]


def check_tiling(tree: PartitionTree) -> None:
    """Leaves must cover the root box exactly once (valid before any removal)."""
    root = tree.root
    if root is None:
        raise InvariantViolation("Partition tree is empty")
    w, h, l = root.width, root.height, root.length
    ox, oy, oz = root.min_corner
    covered = bytearray(w * h * l)
    for leaf in tree.leaves():
        lo, hi = leaf.bounds()
        for x in range(lo.x, hi.x):
            for y in range(lo.y, hi.y):
                base = ((x - ox) * h + (y - oy)) * l - oz
                for z in range(lo.z, hi.z):
                    if covered[base + z]:
                        raise InvariantViolation(f"Partition {leaf.index} overlaps another leaf at {(x, y, z)}")
                    covered[base + z] = 1
    if not all(covered):
        raise InvariantViolation("Leaves leave part of the root volume uncovered")


def check_min_sizes(tree: PartitionTree, config: MazeConfig) -> None:
    for leaf in tree.leaves():
        if leaf.width < config.min_room_side or leaf.length < config.min_room_side:
            raise InvariantViolation(f"Partition {leaf.index} is narrower than {config.min_room_side}")
        if leaf.height < config.min_room_height:
            raise InvariantViolation(f"Partition {leaf.index} is lower than {config.min_room_height}")


def check_leaf_room_bijection(tree: PartitionTree, graph: RoomGraph[Room, Doorway]) -> None:
    leaves = list(tree.leaves())
    if len(leaves) != len(graph):
        raise InvariantViolation(f"{len(leaves)} leaves but {len(graph)} graph nodes")
    for leaf in leaves:
        room = leaf.room
        if room is None:
            raise InvariantViolation(f"Leaf partition {leaf.index} has no room")
        if room.partition != leaf.index:
            raise InvariantViolation(f"Room points at partition {room.partition}, expected {leaf.index}")
        if room.graph_node is None or room.graph_node not in graph or room.graph_node.data is not room:
            raise InvariantViolation(f"Room of partition {leaf.index} is not in the graph")


def check_doorways(tree: PartitionTree, graph: RoomGraph[Room, Doorway], config: MazeConfig) -> None:
    """Doorways must sit on their rooms' shared face and meet the minimum size."""
    in_plane = {normal: (u, v) for normal, u, v in FACES}
    for edge in graph.edges():
        doorway = edge.data
        lo_a, hi_a = edge.source.data.bounds(tree)
        lo_b, hi_b = edge.target.data.bounds(tree)
        normal = doorway.axis
        face = hi_a[normal]
        if lo_b[normal] != face or doorway.min_corner[normal] != face - 1 or doorway.max_corner[normal] != face:
            raise InvariantViolation(f"Doorway {doorway} does not straddle the shared face at {face}")
        for axis in in_plane[normal]:
            lo = max(lo_a[axis], lo_b[axis])
            hi = min(hi_a[axis], hi_b[axis]) - 1
            if doorway.min_corner[axis] < lo or doorway.max_corner[axis] > hi:
                raise InvariantViolation(f"Doorway {doorway} extends past the shared face")
            if doorway.size(axis) < doorway_minimum(axis, config):
                raise InvariantViolation(f"Doorway {doorway} is smaller than the minimum opening")


def reachable_from(start: RoomNode) -> Dict[RoomNode, int]:
    """Breadth-first distances (in doorways) from ``start``."""
    dist = {start: 0}
    dq = deque([start])
    while dq:
        node = dq.popleft()
        for neighbor in node.neighbors():
            if neighbor not in dist:
                dist[neighbor] = dist[node] + 1
                dq.append(neighbor)
    return dist


def is_connected(graph: RoomGraph[Room, Doorway], nodes: Optional[Iterable[RoomNode]] = None) -> bool:
    """True if ``nodes`` (default: the whole graph) form one connected piece.

    Only edges between members of ``nodes`` are followed.
    """
    members: Set[RoomNode] = set(graph.nodes() if nodes is None else nodes)
    if not members:
        return True
    start = next(iter(members))
    seen = {start}
    stack = [start]
    while stack:
        node = stack.pop()
        for neighbor in node.neighbors():
            if neighbor in members and neighbor not in seen:
                seen.add(neighbor)
                stack.append(neighbor)
    return len(seen) == len(members)


def check_sections(
    graph: RoomGraph[Room, Doorway],
    cores: Sequence[Room],
    min_rooms: int,
    max_distance: Optional[int] = None,
) -> Dict[Room, Set[Room]]:
    """Every room belongs to exactly one core's connected section.

    With ``max_distance`` each room must also lie within that many doorways of
    its core, which holds right after section selection. Returns core -> rooms.
    """
    owner: Dict[RoomNode, Room] = {}
    sections: Dict[Room, Set[Room]] = {}
    for core in cores:
        if core.graph_node is None or core.graph_node not in graph:
            raise InvariantViolation(f"Core {core!r} is not in the graph")
        dist = reachable_from(core.graph_node)
        for node, d in dist.items():
            if node in owner:
                raise InvariantViolation(f"{node.data!r} is shared by two sections")
            if max_distance is not None and d > max_distance:
                raise InvariantViolation(f"{node.data!r} is {d} doorways from its core (max {max_distance})")
            owner[node] = core
        if len(dist) < min_rooms:
            raise InvariantViolation(f"Section of {core!r} has {len(dist)} rooms, below {min_rooms}")
        sections[core] = {node.data for node in dist}
    orphans = [node for node in graph.nodes() if node not in owner]
    if orphans:
        raise InvariantViolation(f"{len(orphans)} rooms belong to no section")
    return sections


def verify_design(design: "MazeDesign", config: MazeConfig) -> None:
    """Check a finished design: bookkeeping, room sizes, connected sections."""
    check_leaf_room_bijection(design.tree, design.graph)
    check_min_sizes(design.tree, config)
    check_doorways(design.tree, design.graph, config)
    check_sections(design.graph, design.cores, config.min_section_rooms)
    logger.debug("Design verified: %d rooms in %d sections", len(design.graph), len(design.cores))


__all__ = [
    "check_doorways",
    "check_leaf_room_bijection",
    "check_min_sizes",
    "check_sections",
    "check_tiling",
    "is_connected",
    "reachable_from",
    "verify_design",
]
