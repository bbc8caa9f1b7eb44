"""One sketch per node, stored as rows of a single register matrix."""

import numpy as np

from hyperanf.errors import IncompatibleSketchError
from hyperanf.sketch import Sketch, check_precision, compute_alpha, estimate_registers


class SketchTable:
    """
    Maps node identifiers to sketches.

    Row i of `registers` holds the sketch of `nodes[i]`; indexing the table by
    node returns a Sketch view on that row, so unions through the view update
    the table in place.
    """

    def __init__(self, nodes, precision=10, seed=0):
        self.precision = check_precision(precision)
        self.seed = seed
        self.alpha = compute_alpha(precision)
        self.nodes = tuple(nodes)
        self._position = {node: i for i, node in enumerate(self.nodes)}
        self.registers = np.zeros((len(self.nodes), 1 << precision), dtype=np.uint8)

    @classmethod
    def seeded(cls, nodes, precision=10, seed=0):
        """A table in which every node's sketch contains exactly that node."""
        table = cls(nodes, precision, seed)
        for node in table.nodes:
            table[node].add(node)
        return table

    def __getitem__(self, node):
        try:
            row = self.registers[self._position[node]]
        except KeyError:
            raise KeyError(f"unknown node {node!r}") from None
        return Sketch.view(self.precision, row, self.seed)

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __contains__(self, node):
        return node in self._position

    def _check_compatible(self, other):
        if other.nodes != self.nodes:
            raise ValueError("sketch tables are keyed by different nodes")
        if other.precision != self.precision or other.seed != self.seed:
            raise IncompatibleSketchError(
                f"cannot combine tables of precision/seed {self.precision}/{self.seed} "
                f"and {other.precision}/{other.seed}")

    def copy(self):
        table = SketchTable(self.nodes, self.precision, self.seed)
        table.registers[:] = self.registers
        return table

    def __deepcopy__(self, memo):
        return self.copy()

    def copy_from(self, other):
        """Overwrite every register with `other`'s, reusing this table's storage."""
        self._check_compatible(other)
        np.copyto(self.registers, other.registers)

    def __eq__(self, other):
        if not isinstance(other, SketchTable):
            return NotImplemented
        return (self.nodes == other.nodes
                and self.precision == other.precision
                and self.seed == other.seed
                and np.array_equal(self.registers, other.registers))

    __hash__ = None

    def estimates(self):
        return estimate_registers(self.registers, self.alpha)

    def total(self):
        return float(self.estimates().sum())
