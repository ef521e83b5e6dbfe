from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .adjacency import detect_doorways
from .config import MazeConfig
from .disjoint_set import DisjointSet
from .exceptions import InvariantViolation
from .geometry import Axis
from .graph import RoomGraph
from .partition import PartitionNode, PartitionTree
from .pruning import PruneReport, prune_doorways
from .rng import Seed, make_rng
from .rooms import Doorway, Room, attach_rooms
from .sections import select_sections
from .verify import check_min_sizes, check_sections, check_tiling, is_connected, verify_design

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MazeDesign:
    """Finished maze topology: the partition tree and the room graph.

    Room boxes are read from the tree, doorways from the graph's edges.
    """

    tree: PartitionTree
    graph: RoomGraph[Room, Doorway]
    cores: Tuple[Room, ...] = ()

    @property
    def root(self) -> Optional[PartitionNode]:
        return self.tree.root

    def rooms(self) -> List[Room]:
        return [node.data for node in self.graph.nodes()]

    def doorways(self) -> Iterator[Tuple[Room, Room, Doorway]]:
        for edge in self.graph.edges():
            yield edge.source.data, edge.target.data, edge.data

    def summary(self) -> Dict[str, Any]:
        """JSON-serialisable overview, handy for logs and diffs across runs."""
        per_axis = {axis.name: 0 for axis in Axis}
        for _a, _b, doorway in self.doorways():
            per_axis[doorway.axis.name] += 1
        return {
            "volume": list(self.tree.volume.as_tuple()),
            "rooms": len(self.graph),
            "sections": len(self.cores),
            "doorways": per_axis,
            "doorway_total": self.graph.edge_count,
            "tree_nodes": len(self.tree),
            "tree_depth": self.tree.depth(),
        }


class MazeDesigner:
    """Generation pipeline for one maze configuration.

    Usage:
      designer = MazeDesigner(MazeConfig.from_yaml())
      design = designer.design(random.Random(42))

    All randomness comes from the ``rng`` passed to :meth:`design`, drawn in a
    fixed order: tree splits, room shuffle, then both doorway shuffles (and
    coin flips) per section.
    """

    def __init__(self, config: Optional[MazeConfig] = None) -> None:
        self.config = config or MazeConfig()

    def build_tree(self, rng: random.Random) -> PartitionTree:
        cfg = self.config
        return PartitionTree.build(
            cfg.width,
            cfg.height,
            cfg.length,
            cfg.split_levels,
            rng,
            min_side=cfg.min_room_side,
            min_height=cfg.min_room_height,
        )

    def build_graph(self, tree: PartitionTree, rng: random.Random) -> RoomGraph[Room, Doorway]:
        """Attach rooms to the leaves and connect every adjacent pair."""
        rooms = attach_rooms(tree)
        # Shuffled node order is what randomises the sections later on
        rng.shuffle(rooms)
        graph: RoomGraph[Room, Doorway] = RoomGraph()
        for room in rooms:
            room.graph_node = graph.add_node(room)
        detect_doorways(tree, graph, self.config)
        return graph

    def design(self, rng: random.Random, verify: bool = False) -> MazeDesign:
        """Generate a design. With ``verify`` every stage is checked."""
        cfg = self.config
        logger.debug("Designing maze with config %s", cfg.as_dict())

        tree = self.build_tree(rng)
        if verify:
            check_tiling(tree)
            check_min_sizes(tree, cfg)

        graph = self.build_graph(tree, rng)
        if verify and not is_connected(graph):
            raise InvariantViolation("Room graph is not connected before pruning")

        cores = select_sections(tree, graph, cfg)
        if verify:
            check_sections(graph, cores, cfg.min_section_rooms, cfg.section_radius)

        components: DisjointSet = DisjointSet(capacity=max(1, len(graph)))
        totals = PruneReport()
        for core in cores:
            report = prune_doorways(core, graph, rng, cfg.door_removal_chance, components)
            totals.rooms += report.rooms
            totals.vertical_kept += report.vertical_kept
            totals.vertical_removed += report.vertical_removed
            totals.horizontal_kept += report.horizontal_kept
            totals.horizontal_removed += report.horizontal_removed

        design = MazeDesign(tree, graph, tuple(cores))
        if verify:
            verify_design(design, cfg)
        logger.debug("Doorway pruning totals: %s", totals.as_dict())
        logger.info(
            "Designed maze: %d rooms in %d sections, %d doorways",
            len(graph), len(cores), graph.edge_count,
        )
        return design


def generate(rng: random.Random, config: Optional[MazeConfig] = None, verify: bool = False) -> MazeDesign:
    """Generate a maze design from a caller-owned random generator."""
    return MazeDesigner(config).design(rng, verify=verify)


def generate_from_seed(seed: Seed, config: Optional[MazeConfig] = None, verify: bool = False) -> MazeDesign:
    """Convenience wrapper: derive a generator from ``seed`` and generate."""
    return generate(make_rng(seed), config, verify=verify)


__all__ = ["MazeDesign", "MazeDesigner", "generate", "generate_from_seed"]
