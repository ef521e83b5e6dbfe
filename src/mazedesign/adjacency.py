"""Doorway detection between adjacent leaf partitions.

Each room scans only its three positive faces (+Z, +X, +Y); the negative
faces are covered when the neighbouring room runs its own scan.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from .config import MazeConfig
from .exceptions import InvariantViolation
from .geometry import Axis, Point3D
from .graph import GraphNode, RoomGraph
from .partition import PartitionTree
from .rooms import Doorway, Room

logger = logging.getLogger(__name__)

# (face normal, first in-plane axis, second in-plane axis), in scan order
FACES: Tuple[Tuple[Axis, Axis, Axis], ...] = (
    (Axis.Z, Axis.X, Axis.Y),
    (Axis.X, Axis.Y, Axis.Z),
    (Axis.Y, Axis.X, Axis.Z),
)


def doorway_minimum(axis: Axis, config: MazeConfig) -> int:
    """Smallest opening allowed along an in-plane axis."""
    return config.min_room_height if axis is Axis.Y else config.min_room_side


def _point(normal: Axis, n: int, u: Axis, a: int, v: Axis, b: int) -> Point3D:
    coords = [0, 0, 0]
    coords[normal] = n
    coords[u] = a
    coords[v] = b
    return Point3D(*coords)


def detect_doorways(tree: PartitionTree, graph: RoomGraph[Room, Doorway], config: MazeConfig) -> int:
    """Add one edge per adjacent room pair whose shared face fits a doorway.

    Returns the number of edges added.
    """
    if tree.root is None:
        return 0
    added = 0
    for node in graph.nodes():
        added += _scan_room(node, tree, graph, config)
    logger.debug("Detected %d doorways between %d rooms", added, len(graph))
    return added


def _scan_room(
    node: GraphNode[Room, Doorway],
    tree: PartitionTree,
    graph: RoomGraph[Room, Doorway],
    config: MazeConfig,
) -> int:
    room = node.data
    if room.partition is None:
        raise InvariantViolation(f"Room without a partition in the graph: {room!r}")
    lo, hi = tree.node(room.partition).bounds()
    limit = tree.root.max_corner
    added = 0

    for normal, u, v in FACES:
        face = hi[normal]
        if face >= limit[normal]:
            continue
        size_u = hi[u] - lo[u]
        size_v = hi[v] - lo[v]
        detected: List[List[bool]] = [[False] * size_v for _ in range(size_u)]

        for a in range(size_u):
            for b in range(size_v):
                if detected[a][b]:
                    continue
                probe = _point(normal, face, u, lo[u] + a, v, lo[v] + b)
                adjacent = tree.find_point(*probe)
                if adjacent is None:
                    raise InvariantViolation(f"No partition contains in-volume point {probe}")

                # Intersection of both rooms' extents in the face plane
                u0 = max(lo[u], adjacent.min_corner[u])
                u1 = min(hi[u], adjacent.max_corner[u])
                v0 = max(lo[v], adjacent.min_corner[v])
                v1 = min(hi[v], adjacent.max_corner[v])
                for p in range(u0 - lo[u], u1 - lo[u]):
                    row = detected[p]
                    for q in range(v0 - lo[v], v1 - lo[v]):
                        row[q] = True

                if u1 - u0 < doorway_minimum(u, config) or v1 - v0 < doorway_minimum(v, config):
                    continue
                neighbor = adjacent.room
                if neighbor is None or neighbor.graph_node is None:
                    raise InvariantViolation(f"Partition {adjacent.index} has no room in the graph")
                doorway = Doorway(
                    _point(normal, face - 1, u, u0, v, v0),
                    _point(normal, face, u, u1 - 1, v, v1 - 1),
                    normal,
                )
                graph.add_edge(node, neighbor.graph_node, doorway)
                added += 1
    return added


__all__ = ["FACES", "detect_doorways", "doorway_minimum"]
