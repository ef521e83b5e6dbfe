"""Doorway pruning for one maze section.

Vertical doorways (through floors and ceilings) are reduced to the minimum
needed to keep the section connected given all horizontal doorways. Then
redundant horizontal doorways are dropped on a coin flip, so some loops
survive for route variety.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from .disjoint_set import DisjointSet
from .exceptions import InvariantViolation
from .geometry import Axis
from .graph import Edge, GraphNode, RoomGraph
from .rooms import Doorway, Room

logger = logging.getLogger(__name__)

RoomNode = GraphNode[Room, Doorway]
Passage = Edge[Room, Doorway]


@dataclass
class PruneReport:
    rooms: int = 0
    vertical_kept: int = 0
    vertical_removed: int = 0
    horizontal_kept: int = 0
    horizontal_removed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "rooms": self.rooms,
            "vertical_kept": self.vertical_kept,
            "vertical_removed": self.vertical_removed,
            "horizontal_kept": self.horizontal_kept,
            "horizontal_removed": self.horizontal_removed,
        }


def collect_subgraph(core: RoomNode, components: DisjointSet[RoomNode]) -> List[RoomNode]:
    """List every node reachable from ``core``, registering each in ``components``."""
    ordering = [core]
    components.register(core)
    subgraph: List[RoomNode] = []
    while ordering:
        current = ordering.pop()
        subgraph.append(current)
        for neighbor in current.neighbors():
            if components.register(neighbor):
                ordering.append(neighbor)
    return subgraph


def prune_doorways(
    core: Room,
    graph: RoomGraph[Room, Doorway],
    rng: random.Random,
    removal_chance: float = 0.5,
    components: Optional[DisjointSet[RoomNode]] = None,
) -> PruneReport:
    """Remove redundant doorways from the section containing ``core``.

    Every room of the section stays reachable from every other room: an edge
    is only removed when its endpoints are already joined by kept edges.
    """
    if core.graph_node is None or core.graph_node not in graph:
        raise InvariantViolation(f"Section core is not in the graph: {core!r}")
    if components is None:
        components = DisjointSet()
    components.clear()

    subgraph = collect_subgraph(core.graph_node, components)
    report = PruneReport(rooms=len(subgraph))

    # Phase 1: horizontal doorways are fixed, vertical ones are reduced to a
    # minimal augmenting set. Inbound edges mirror outbound ones, so walking
    # outbound edges visits every edge once.
    targets: List[Passage] = []
    for node in subgraph:
        for passage in node.outbound():
            if passage.data.axis is not Axis.Y:
                components.union(passage.source, passage.target)
            else:
                targets.append(passage)
    rng.shuffle(targets)
    for passage in targets:
        if components.union(passage.source, passage.target):
            report.vertical_kept += 1
        else:
            graph.remove_edge(passage)
            report.vertical_removed += 1

    # Phase 2: surviving vertical doorways are fixed, redundant horizontal
    # ones are removed at random.
    components.clear()
    targets = []
    for node in subgraph:
        components.register(node)
    for node in subgraph:
        for passage in node.outbound():
            if passage.data.axis is Axis.Y:
                components.union(passage.source, passage.target)
            else:
                targets.append(passage)
    rng.shuffle(targets)
    for passage in targets:
        if not components.union(passage.source, passage.target) and rng.random() < removal_chance:
            graph.remove_edge(passage)
            report.horizontal_removed += 1
        else:
            report.horizontal_kept += 1

    logger.debug("Pruned section at %r: %s", core, report.as_dict())
    return report


__all__ = ["PruneReport", "collect_subgraph", "prune_doorways"]
