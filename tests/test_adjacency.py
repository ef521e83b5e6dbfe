import random

import pytest

from mazedesign.adjacency import detect_doorways, doorway_minimum
from mazedesign.config import MazeConfig
from mazedesign.exceptions import InvariantViolation
from mazedesign.geometry import Axis, Point3D
from mazedesign.graph import RoomGraph
from mazedesign.partition import PartitionTree
from mazedesign.rooms import attach_rooms
from mazedesign.verify import check_doorways, is_connected

from maze_test_utils import graph_in_leaf_order, scripted_tree


def test_two_rooms_share_full_face_doorway():
    cfg = MazeConfig(width=6, height=8, length=6, split_levels=1)
    tree = scripted_tree(cfg, [3])
    (left, right), graph = graph_in_leaf_order(tree, cfg)

    edges = list(graph.edges())
    assert len(edges) == 1
    edge = edges[0]
    assert edge.source.data is left
    assert edge.target.data is right
    doorway = edge.data
    assert doorway.axis is Axis.X
    assert doorway.min_corner == Point3D(2, 0, 0)
    assert doorway.max_corner == Point3D(3, 7, 5)
    assert doorway.size(Axis.Y) == 8
    assert doorway.size(Axis.Z) == 6
    assert not doorway.is_vertical


def test_stacked_rooms_get_vertical_doorway():
    cfg = MazeConfig(width=3, height=8, length=3, split_levels=1)
    tree = scripted_tree(cfg, [4])
    assert tree.root.split_axis is Axis.Y
    (lower, upper), graph = graph_in_leaf_order(tree, cfg)

    (edge,) = list(graph.edges())
    assert edge.source.data is lower
    assert edge.data.is_vertical
    assert edge.data.min_corner == Point3D(0, 3, 0)
    assert edge.data.max_corner == Point3D(2, 4, 2)


def test_one_face_can_open_onto_several_rooms():
    cfg = MazeConfig(width=12, height=4, length=9, split_levels=2)
    tree = scripted_tree(cfg, [3, 6, 3])
    (l0, l1, r0, r1), graph = graph_in_leaf_order(tree, cfg)

    assert graph.edge_count == 5
    x_doors = [e for e in l0.graph_node.outbound() if e.data.axis is Axis.X]
    assert [e.target.data for e in x_doors] == [r0, r1]
    assert x_doors[0].data.min_corner == Point3D(2, 0, 0)
    assert x_doors[0].data.max_corner == Point3D(3, 3, 2)
    assert x_doors[1].data.min_corner == Point3D(2, 0, 3)
    assert x_doors[1].data.max_corner == Point3D(3, 3, 5)

    door = graph.find_edge(l1.graph_node, r1.graph_node).data
    assert (door.min_corner, door.max_corner) == (Point3D(2, 0, 6), Point3D(3, 3, 8))
    assert graph.find_edge(l1.graph_node, r0.graph_node) is None
    check_doorways(tree, graph, cfg)


def test_small_overlap_gets_no_doorway():
    cfg = MazeConfig(width=6, height=8, length=7, split_levels=2)
    tree = scripted_tree(cfg, [3, 3, 4])
    (near_left, far_left, near_right, far_right), graph = graph_in_leaf_order(tree, cfg)

    # far_left and near_right only touch along a single cell of Z
    assert graph.find_edge(far_left.graph_node, near_right.graph_node) is None
    assert graph.edge_count == 4
    assert graph.find_edge(far_left.graph_node, far_right.graph_node) is not None
    assert is_connected(graph)


def test_each_adjacent_pair_gets_one_edge():
    cfg = MazeConfig(width=20, height=12, length=20, split_levels=6)
    tree = PartitionTree.build(cfg.width, cfg.height, cfg.length, cfg.split_levels, random.Random(4))
    _, graph = graph_in_leaf_order(tree, cfg)
    pairs = [frozenset((e.source, e.target)) for e in graph.edges()]
    assert len(pairs) == len(set(pairs))
    check_doorways(tree, graph, cfg)
    assert is_connected(graph)


def test_doorway_minimum_depends_on_axis():
    cfg = MazeConfig(min_room_side=3, min_room_height=5)
    assert doorway_minimum(Axis.X, cfg) == 3
    assert doorway_minimum(Axis.Z, cfg) == 3
    assert doorway_minimum(Axis.Y, cfg) == 5


def test_empty_tree_detects_nothing():
    cfg = MazeConfig(width=3, height=4, length=3, split_levels=0)
    tree = scripted_tree(cfg, [])
    tree.remove_leaf(tree.root)
    assert detect_doorways(tree, RoomGraph(), cfg) == 0


def test_vacated_space_behind_a_face_is_an_error():
    cfg = MazeConfig(width=9, height=4, length=3, split_levels=2)
    tree = scripted_tree(cfg, [3, 6])
    rooms = attach_rooms(tree)
    left, middle, right = rooms
    tree.remove_leaf(middle.partition)

    graph = RoomGraph()
    for room in (left, right):
        room.graph_node = graph.add_node(room)
    with pytest.raises(InvariantViolation):
        detect_doorways(tree, graph, cfg)
