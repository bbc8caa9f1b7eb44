"""Undirected adjacency index over arbitrary-precision integer node identifiers."""

import logging
import numbers
from collections import defaultdict
from types import MappingProxyType

import numpy as np

from hyperanf.errors import GraphError

logger = logging.getLogger(__name__)


def check_node(node):
    if isinstance(node, bool) or not isinstance(node, numbers.Integral):
        raise GraphError(f"node identifiers must be integers, got {node!r}")
    if node < 0:
        raise GraphError(f"node identifiers must be non-negative, got {node}")
    return node


class AdjacencyIndex:
    """
    Node -> ordered neighbour list, immutable once built.

    Every node also gets a dense position (its index in `nodes`), and the
    neighbour lists are stored in CSR form (`indptr`, `indices`) in terms of
    those positions, which is what the propagation rounds iterate over.
    """

    def __init__(self, neighbours):
        self._neighbours = {}
        for node, adjacent in neighbours.items():
            self._neighbours[check_node(node)] = tuple(adjacent)

        self.nodes = tuple(self._neighbours)
        self._position = {node: i for i, node in enumerate(self.nodes)}
        self._validate()

        degrees = np.fromiter((len(self._neighbours[node]) for node in self.nodes),
                              dtype=np.int64, count=len(self.nodes))
        self.indptr = np.zeros(len(self.nodes) + 1, dtype=np.int64)
        np.cumsum(degrees, out=self.indptr[1:])
        self.indices = np.fromiter(
            (self._position[w] for node in self.nodes for w in self._neighbours[node]),
            dtype=np.int64, count=int(self.indptr[-1]))
        logger.debug("Built adjacency index with %d nodes and %d adjacency entries",
                     len(self.nodes), len(self.indices))

    @classmethod
    def from_edges(cls, edges):
        """Build the index from (a, b) pairs, inserting every edge in both directions."""
        neighbours = defaultdict(list)
        for a, b in edges:
            neighbours[check_node(a)].append(check_node(b))
            neighbours[b].append(a)
        return cls(neighbours)

    def _validate(self):
        adjacent_sets = {node: set(adjacent) for node, adjacent in self._neighbours.items()}
        for node, adjacent in self._neighbours.items():
            for w in adjacent:
                if w not in self._position:
                    raise GraphError(f"node {node} lists unknown neighbour {w!r}")
                if node not in adjacent_sets[w]:
                    raise GraphError(f"edge {node} -> {w} has no reverse edge {w} -> {node}")

    @property
    def positions(self):
        """Read-only view of the node -> dense position mapping."""
        return MappingProxyType(self._position)

    def neighbours(self, node):
        try:
            return self._neighbours[node]
        except KeyError:
            raise KeyError(f"unknown node {node!r}") from None

    def position(self, node):
        try:
            return self._position[node]
        except KeyError:
            raise KeyError(f"unknown node {node!r}") from None

    def degree(self, node):
        return len(self.neighbours(node))

    @property
    def edge_count(self):
        """Number of adjacency entries, i.e. twice the number of undirected edges."""
        return int(self.indptr[-1])

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __contains__(self, node):
        return node in self._position

    def __repr__(self):
        return f"AdjacencyIndex(nodes={len(self.nodes)}, entries={self.edge_count})"
