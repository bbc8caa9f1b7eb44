import numpy as np
import pytest

from hyperanf.errors import GraphError
from hyperanf.graph import AdjacencyIndex


def test_from_edges_is_undirected():
    graph = AdjacencyIndex.from_edges([(0, 1), (1, 2)])
    assert graph.nodes == (0, 1, 2)
    assert graph.neighbours(0) == (1,)
    assert graph.neighbours(1) == (0, 2)
    assert graph.neighbours(2) == (1,)
    assert graph.edge_count == 4


def test_duplicate_edges_are_appended():
    graph = AdjacencyIndex.from_edges([(0, 1), (0, 1), (1, 0)])
    assert graph.neighbours(0) == (1, 1, 1)
    assert graph.degree(1) == 3


def test_csr_matches_neighbour_lists():
    edges = [(5, 9), (9, 2), (2, 5), (2, 7)]
    graph = AdjacencyIndex.from_edges(edges)
    for node in graph:
        i = graph.position(node)
        positions = graph.indices[graph.indptr[i]:graph.indptr[i + 1]]
        assert [graph.nodes[p] for p in positions] == list(graph.neighbours(node))
    assert graph.indices.dtype == np.int64


def test_big_identifiers():
    big = 2 ** 80
    graph = AdjacencyIndex.from_edges([(big, big + 1)])
    assert big in graph
    assert graph.neighbours(big + 1) == (big,)


def test_from_mapping():
    graph = AdjacencyIndex({0: {1, 2}, 1: {0}, 2: {0}, 3: set()})
    assert len(graph) == 4
    assert set(graph.neighbours(0)) == {1, 2}
    assert graph.neighbours(3) == ()


def test_unknown_neighbour_fails():
    with pytest.raises(GraphError, match="unknown neighbour"):
        AdjacencyIndex({0: [1]})


def test_asymmetric_mapping_fails():
    with pytest.raises(GraphError, match="reverse edge"):
        AdjacencyIndex({0: [1], 1: []})


@pytest.mark.parametrize("bad", [-1, "3", 1.5, True])
def test_bad_identifiers(bad):
    with pytest.raises(GraphError):
        AdjacencyIndex.from_edges([(0, bad)])


def test_unknown_node_lookup():
    graph = AdjacencyIndex.from_edges([(0, 1)])
    with pytest.raises(KeyError):
        graph.neighbours(7)
    with pytest.raises(KeyError):
        graph.position(7)
