import pytest

from forestgen import BranchGraph, InvalidTopologyError, NodeType, validate_prototype


@pytest.mark.parametrize(
    "edges",
    [
        [],
        [(0, 0)],
        [(0, 1), (1, 1)],
        [(0, 1), (2, 3)],
        [(1, 2), (3, 2)],
        [(0, 1), (1, 2), (2, 1)],
        [(0, 1), (0, 1)],
        [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6)],
    ],
    ids=["empty", "self-loop", "late-self-loop", "disconnected", "unreachable", "cycle", "duplicate", "six-children"],
)
def test_invalid_topologies_are_rejected(edges):
    with pytest.raises(InvalidTopologyError):
        validate_prototype("bad", edges)


def test_path_prototype_maturity():
    prototype = validate_prototype("path", [(0, 1), (1, 2)])

    assert prototype.node_count == 3
    assert prototype.max_depth == 2
    assert prototype.maturity_age == 1.0
    assert prototype.depths == (0, 1)


def test_single_edge_is_mature_from_the_start():
    prototype = validate_prototype("stub", [(0, 1)])

    assert prototype.maturity_age == 0.0


def test_ids_are_renumbered_in_first_seen_order():
    prototype = validate_prototype("sparse", [(7, 3), (3, 9), (3, 4)])

    assert prototype.edges == ((0, 1), (1, 2), (1, 3))
    assert prototype.depths == (0, 1, 1)


def test_five_children_are_allowed():
    prototype = validate_prototype("star", [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5)])

    assert prototype.node_count == 6
    assert prototype.maturity_age == 0.0


def test_graph_from_prototype_starts_with_root_segments_only():
    prototype = validate_prototype("fork", [(0, 1), (1, 2), (1, 3)])
    graph = BranchGraph.from_prototype(prototype)

    assert graph.root.type == NodeType.ROOT
    assert graph.nodes[1].type == NodeType.NORMAL
    assert graph.nodes[2].type == NodeType.TERMINAL
    assert graph.available == [0]
    assert [segment.available for segment in graph.segments] == [True, False, False]
    assert [node.id for node in graph.available_nodes()] == [0, 1]
    assert graph.nodes[3].parent_segment == 2
