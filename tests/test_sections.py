import random

import pytest

from mazedesign.config import MazeConfig
from mazedesign.designer import MazeDesigner
from mazedesign.geometry import Point3D
from mazedesign.sections import select_sections
from mazedesign.verify import check_sections, is_connected

from maze_test_utils import box, graph_in_leaf_order, scripted_tree

# Four rooms in a row along X: [0,3) [3,6) [6,9) [9,12)
ROW_OF_FOUR = MazeConfig(width=12, height=4, length=3, split_levels=2)
ROW_OF_FOUR_SPLITS = [6, 3, 9]

# Five rooms in a row along X, three cells each
ROW_OF_FIVE = MazeConfig(width=15, height=4, length=3, split_levels=3)
ROW_OF_FIVE_SPLITS = [6, 3, 9, 12]


def test_undersized_section_is_removed_and_tree_collapses():
    tree = scripted_tree(ROW_OF_FOUR, ROW_OF_FOUR_SPLITS)
    rooms, graph = graph_in_leaf_order(tree, ROW_OF_FOUR, order=[1, 0, 2, 3])
    assert graph.edge_count == 3

    cores = select_sections(tree, graph, ROW_OF_FOUR)

    assert cores == []
    assert len(graph) == 0
    assert graph.edge_count == 0
    assert tree.root is None
    assert len(tree) == 0
    assert all(room.partition is None and room.graph_node is None for room in rooms)


def test_ring_rooms_removed_and_parents_keep_survivors():
    cfg = ROW_OF_FOUR.replace(section_radius=0, min_section_rooms=1)
    tree = scripted_tree(cfg, ROW_OF_FOUR_SPLITS)
    (r0, r1, r2, r3), graph = graph_in_leaf_order(tree, cfg, order=[0, 2, 1, 3])

    cores = select_sections(tree, graph, cfg)

    assert cores == [r0, r2]
    assert [node.data for node in graph.nodes()] == [r0, r2]
    assert graph.edge_count == 0
    root = tree.root
    assert not root.is_leaf()
    assert r0.partition == root.left
    assert r2.partition == root.right
    assert box(r0, tree) == ((0, 0, 0), (3, 4, 3))
    assert box(r2, tree) == ((6, 0, 0), (9, 4, 3))
    assert r1.partition is None and r3.partition is None


def test_section_exactly_at_minimum_survives_whole():
    tree = scripted_tree(ROW_OF_FIVE, ROW_OF_FIVE_SPLITS)
    (r0, r1, r2, r3, r4), graph = graph_in_leaf_order(tree, ROW_OF_FIVE, order=[2, 0, 1, 3, 4])

    cores = select_sections(tree, graph, ROW_OF_FIVE)

    assert cores == [r2]
    assert len(graph) == 5
    assert [r.distance for r in (r0, r1, r2, r3, r4)] == [2, 1, 0, 1, 2]
    assert tree.root.bounds() == (Point3D(0, 0, 0), Point3D(15, 4, 3))


def test_room_beyond_radius_is_removed_even_from_kept_section():
    cfg = ROW_OF_FIVE.replace(min_section_rooms=3)
    tree = scripted_tree(cfg, ROW_OF_FIVE_SPLITS)
    (r0, r1, r2, r3, r4), graph = graph_in_leaf_order(tree, cfg)

    cores = select_sections(tree, graph, cfg)

    # r3 sits one step past the radius; r4 is then cut off and too small alone
    assert cores == [r0]
    assert [node.data for node in graph.nodes()] == [r0, r1, r2]
    assert graph.edge_count == 2
    assert r3.partition is None and r4.partition is None
    assert box(r2, tree) == ((6, 0, 0), (9, 4, 3))
    assert tree.node(r2.partition).is_leaf()
    sections = check_sections(graph, cores, cfg.min_section_rooms, cfg.section_radius)
    assert sections == {r0: {r0, r1, r2}}


@pytest.mark.parametrize("seed", [0, 3, 8, 21, 64])
def test_random_sections_are_compact_and_disjoint(seed):
    cfg = MazeConfig()
    rng = random.Random(seed)
    designer = MazeDesigner(cfg)
    tree = designer.build_tree(rng)
    graph = designer.build_graph(tree, rng)
    assert is_connected(graph)

    cores = select_sections(tree, graph, cfg)

    sections = check_sections(graph, cores, cfg.min_section_rooms, cfg.section_radius)
    assert sum(len(rooms) for rooms in sections.values()) == len(graph)
    assert len(graph) == sum(1 for _ in tree.leaves())
    for core in cores:
        assert core.distance == 0
