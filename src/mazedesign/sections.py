from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List

from .config import MazeConfig
from .graph import RoomGraph
from .partition import PartitionTree
from .rooms import Doorway, Room, discard_room

logger = logging.getLogger(__name__)


def select_sections(tree: PartitionTree, graph: RoomGraph[Room, Doorway], config: MazeConfig) -> List[Room]:
    """Carve the graph into sections and discard the rest.

    The randomness of the sections depends on the graph's nodes being in a
    random order already. Each untagged room seeds a breadth-first search; rooms
    within ``section_radius`` doorways of the seed form the section. Rooms one
    step beyond the radius are always discarded, which keeps sections apart,
    and so is any section smaller than ``min_section_rooms``.

    Returns the seed ("core") room of every surviving section, in order.
    """
    max_distance = config.section_radius
    cores: List[Room] = []
    removals: List[Room] = []
    ordering: Deque[Room] = deque()

    for node in graph.nodes():
        seed = node.data
        if seed.distance >= 0:
            continue

        seed.distance = 0
        ordering.append(seed)
        section: List[Room] = []
        while ordering:
            room = ordering.popleft()
            distance = room.distance + 1
            if distance > max_distance + 1:
                removals.append(room)
                break
            section.append(room)
            for neighbor_node in room.graph_node.neighbors():
                neighbor = neighbor_node.data
                if neighbor.distance < 0:
                    neighbor.distance = distance
                    ordering.append(neighbor)

        # Whatever is still queued sits exactly one step beyond the radius.
        # Removal waits until every seed is processed.
        removals.extend(ordering)
        ordering.clear()

        if len(section) >= config.min_section_rooms:
            cores.append(seed)
            logger.debug("Section %d: %d rooms", len(cores), len(section))
        else:
            removals.extend(section)

    for room in removals:
        discard_room(room, tree, graph)
    logger.debug("Kept %d sections with %d rooms; discarded %d rooms", len(cores), len(graph), len(removals))
    return cores


__all__ = ["select_sections"]
