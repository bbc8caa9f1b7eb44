"""
Implementation of the HyperANF algorithm for approximate neighborhood function calculation,
as described by algorithm 2 in the paper "HyperANF: Approximating the Neighbourhood Function
of Very Large Graphs on a Budget" by Boldi, Rosa and Vigna (2011). https://arxiv.org/abs/1011.5599

Every node starts with a HyperLogLog counter containing only itself. In round t+1 a node's
counter becomes the union of its own counter and its neighbours' counters from round t, so
after t rounds it estimates the number of nodes within distance t. Registers only grow, so the
computation stops at the first round in which no register changed.
"""

import logging
import os
import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from hyperanf.graph import AdjacencyIndex
from hyperanf.table import SketchTable

logger = logging.getLogger(__name__)


class Round:
    """Per-node estimates of one round, taken before the next round starts."""

    def __init__(self, t, nodes, estimates, positions=None):
        self.t = t
        self.nodes = nodes
        self.estimates = estimates
        if positions is None:
            positions = {node: i for i, node in enumerate(nodes)}
        self._positions = positions

    @property
    def total(self):
        return float(self.estimates.sum())

    def estimate(self, node):
        try:
            i = self._positions[node]
        except KeyError:
            raise KeyError(f"unknown node {node!r}") from None
        return float(self.estimates[i])

    def as_dict(self):
        return {node: float(e) for node, e in zip(self.nodes, self.estimates)}

    def records(self):
        """Rows of (round, node as decimal string, estimate)."""
        for node, e in zip(self.nodes, self.estimates):
            yield self.t, str(node), float(e)

    def __repr__(self):
        return f"Round(t={self.t}, nodes={len(self.nodes)}, total={self.total:.2f})"


class HyperANF:
    """
    Round-by-round sketch propagation over a static undirected graph.

    `graph` is an AdjacencyIndex or a mapping node -> neighbours. `workers` is the
    number of threads a round is split across (defaults to the CPU count).
    """

    def __init__(self, graph, precision=10, seed=0, workers=None):
        if isinstance(graph, Mapping):
            graph = AdjacencyIndex(graph)
        self.graph = graph
        self.precision = precision
        self.workers = max(1, workers or os.cpu_count() or 1)
        self.converged = False

        self.previous = SketchTable.seeded(graph.nodes, precision, seed)
        self.current = self.previous.copy()
        self._initial = self.previous.copy()
        self._partitions = [p for p in np.array_split(np.arange(len(graph)), self.workers) if len(p)]
        logger.info("Nodes: %d", len(graph))

    def _merge_partition(self, positions):
        previous = self.previous.registers
        current = self.current.registers
        indptr, indices = self.graph.indptr, self.graph.indices
        for i in positions:
            neighbours = indices[indptr[i]:indptr[i + 1]]
            if len(neighbours):
                np.maximum(previous[i], previous[neighbours].max(axis=0), out=current[i])
            else:
                current[i] = previous[i]

    def step(self, pool=None):
        """Compute `current` from `previous` for every node. Returns True if nothing changed."""
        if pool is None:
            for positions in self._partitions:
                self._merge_partition(positions)
        else:
            # list() waits for every partition: no round may begin before this one is done
            list(pool.map(self._merge_partition, self._partitions))
        return self.current == self.previous

    def snapshot(self, t):
        return Round(t, self.graph.nodes, self.current.estimates(), self.graph.positions)

    def reset(self):
        """Put every node back to its round 0 sketch, reusing the existing tables."""
        self.previous.copy_from(self._initial)
        self.current.copy_from(self._initial)
        self.converged = False

    def rounds(self, max_rounds=None):
        """
        Yield one Round per t, starting at t = 0, until the fixed point is reached.

        Each round is yielded before the tables are advanced, so a consumer can export it
        safely. The final yielded round is the converged state.
        """
        self.reset()
        pool = ThreadPoolExecutor(self.workers) if self.workers > 1 and len(self._partitions) > 1 else None
        try:
            t = 0
            while max_rounds is None or t < max_rounds:
                snapshot = self.snapshot(t)
                logger.info("t = %d, %f", t, snapshot.total)
                yield snapshot

                started = time.perf_counter()
                unchanged = self.step(pool)
                logger.debug("Round %d computed in %.3fs", t + 1, time.perf_counter() - started)
                if unchanged:
                    self.converged = True
                    logger.info("Converged after %d rounds", t)
                    return
                self.previous.copy_from(self.current)
                t += 1
            logger.warning("Stopped after %d rounds without reaching the fixed point", max_rounds)
        finally:
            if pool is not None:
                pool.shutdown()

    def run(self, max_rounds=None, callback=None):
        """Run to the fixed point and return the neighbourhood function, one total per round."""
        nf = []
        for snapshot in self.rounds(max_rounds):
            if callback is not None:
                callback(snapshot)
            nf.append(snapshot.total)
        return nf


def neighbourhood_function(graph, precision=10, seed=0, workers=None, max_rounds=None):
    """Approximate N(t), the number of node pairs within distance t, for t = 0, 1, ..."""
    return HyperANF(graph, precision, seed=seed, workers=workers).run(max_rounds)
