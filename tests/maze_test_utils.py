"""Shared helpers for the maze design tests."""
from __future__ import annotations

import random
from typing import Iterable, List, Sequence, Tuple

from mazedesign.adjacency import detect_doorways
from mazedesign.config import MazeConfig
from mazedesign.graph import RoomGraph
from mazedesign.partition import PartitionTree
from mazedesign.rooms import Room, attach_rooms


class ScriptedRandom(random.Random):
    """Random generator whose ``randint`` answers come from a script.

    Everything else (shuffle, random) behaves like a seeded ``random.Random``.
    """

    def __init__(self, values: Iterable[int], seed: int = 0) -> None:
        super().__init__(seed)
        self._values = list(values)

    def randint(self, a: int, b: int) -> int:
        if not self._values:
            raise AssertionError(f"Unexpected randint({a}, {b}) call")
        value = self._values.pop(0)
        assert a <= value <= b, f"scripted {value} outside [{a}, {b}]"
        return value

    @property
    def remaining(self) -> List[int]:
        return list(self._values)


def scripted_tree(config: MazeConfig, splits: Sequence[int]) -> PartitionTree:
    rng = ScriptedRandom(splits)
    tree = PartitionTree.build(
        config.width,
        config.height,
        config.length,
        config.split_levels,
        rng,
        min_side=config.min_room_side,
        min_height=config.min_room_height,
    )
    assert rng.remaining == [], "not every scripted split was used"
    return tree


def graph_in_leaf_order(tree: PartitionTree, config: MazeConfig, order: Sequence[int] = ()) -> Tuple[List[Room], RoomGraph]:
    """Attach rooms and build the doorway graph without shuffling.

    ``order`` lists leaf positions (depth-first, left first) giving the graph's
    node order; by default leaf order is used.
    """
    rooms = attach_rooms(tree)
    ordered = [rooms[i] for i in order] if order else list(rooms)
    graph: RoomGraph = RoomGraph()
    for room in ordered:
        room.graph_node = graph.add_node(room)
    detect_doorways(tree, graph, config)
    return rooms, graph


def box(room: Room, tree: PartitionTree) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    lo, hi = room.bounds(tree)
    return lo.as_tuple(), hi.as_tuple()
