"""
HyperLogLog cardinality sketch used as the per-node counter of HyperANF.

A sketch keeps m = 2^p byte-sized registers. Each inserted element is hashed to
64 bits with xxHash64; the low p bits select a register and the remaining high
bits give a rank (leading zeros + 1). The register keeps the largest rank seen,
so merging two sketches is a pointwise maximum and registers never decrease.

The estimator is the one from Flajolet et al., "HyperLogLog: the analysis of a
near-optimal cardinality estimation algorithm" (2007), with its small-range
(linear counting) and large-range corrections.
"""

import numpy as np
import xxhash

from hyperanf.errors import IncompatibleSketchError

MIN_PRECISION = 0
MAX_PRECISION = 16
HASH_BITS = 64
MAX_RANK = HASH_BITS + 1

TWO_32 = float(1 << 32)
SMALL_RANGE = 5.0 / 2.0
LARGE_RANGE = TWO_32 / 30.0


def hash64(element, seed=0):
    """Unsigned 64-bit hash of the canonical byte representation of `element`."""
    if isinstance(element, (bytes, bytearray)):
        data = bytes(element)
    else:
        data = str(element).encode("utf-8")
    return xxhash.xxh64(data, seed=seed).intdigest()


def compute_alpha(precision):
    if precision == 4:
        return 0.673
    if precision == 5:
        return 0.987
    if precision == 6:
        return 0.709
    return 0.7213 / (1.0 + 1.079 / (1 << precision))


def check_precision(precision):
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ValueError(f"precision must be an integer, got {precision!r}")
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise ValueError(f"precision must be in [{MIN_PRECISION}, {MAX_PRECISION}], got {precision}")
    return precision


def estimate_registers(registers, alpha):
    """
    Bias-corrected cardinality estimate of every row of a 2-D register array.

    Returns a float64 vector with one estimate per row.
    """
    registers = np.asarray(registers)
    m = registers.shape[-1]
    z = np.exp2(-registers.astype(np.float64)).sum(axis=-1)
    raw = alpha * m * m / z
    result = raw.copy()

    zeros = np.count_nonzero(registers == 0, axis=-1)
    linear = (raw <= SMALL_RANGE * m) & (zeros > 0)
    result[linear] = m * np.log(m / zeros[linear])

    # past 2^32 the logarithm is undefined, the raw value is kept
    large = (raw > LARGE_RANGE) & (raw < TWO_32)
    result[large] = -TWO_32 * np.log(1.0 - raw[large] / TWO_32)
    return result


class Sketch:
    """A HyperLogLog counter with 2^precision registers."""

    def __init__(self, precision=10, seed=0):
        self.precision = check_precision(precision)
        self.seed = seed
        self.m = 1 << precision
        self.alpha = compute_alpha(precision)
        self.registers = np.zeros(self.m, dtype=np.uint8)

    @classmethod
    def from_registers(cls, precision, registers, seed=0):
        sketch = cls(precision, seed=seed)
        values = np.asarray(registers)
        if values.shape != (sketch.m,):
            raise ValueError(f"expected {sketch.m} registers, got shape {values.shape}")
        if not np.issubdtype(values.dtype, np.integer):
            raise ValueError(f"register values must be integers, got dtype {values.dtype}")
        if values.size and (values.min() < 0 or values.max() > MAX_RANK):
            raise ValueError(f"register values must lie in [0, {MAX_RANK}]")
        sketch.registers[:] = values
        return sketch

    @classmethod
    def view(cls, precision, registers, seed=0):
        """Wrap an existing register row without copying it (used by SketchTable)."""
        sketch = cls.__new__(cls)
        sketch.precision = precision
        sketch.seed = seed
        sketch.m = 1 << precision
        sketch.alpha = compute_alpha(precision)
        sketch.registers = registers
        return sketch

    def add(self, element):
        """Insert `element`. Returns True if a register was raised."""
        h = hash64(element, self.seed)
        index = h & (self.m - 1)
        rank = (HASH_BITS - self.precision) - (h >> self.precision).bit_length() + 1
        if self.registers[index] < rank:
            self.registers[index] = rank
            return True
        return False

    def update(self, elements):
        for element in elements:
            self.add(element)

    def count(self):
        return float(estimate_registers(self.registers[np.newaxis, :], self.alpha)[0])

    def _check_compatible(self, other):
        if not isinstance(other, Sketch):
            raise TypeError(f"expected a Sketch, got {type(other).__name__}")
        if other.precision != self.precision:
            raise IncompatibleSketchError(
                f"cannot combine sketches of precision {self.precision} and {other.precision}")
        if other.seed != self.seed:
            raise IncompatibleSketchError(
                f"cannot combine sketches hashed with seeds {self.seed} and {other.seed}")

    def union(self, other):
        """Merge `other` into this sketch in place (pointwise maximum)."""
        self._check_compatible(other)
        np.maximum(self.registers, other.registers, out=self.registers)
        return self

    def __or__(self, other):
        return self.copy().union(other)

    def copy_from(self, other):
        self._check_compatible(other)
        self.registers[:] = other.registers

    def copy(self):
        return Sketch.from_registers(self.precision, self.registers, seed=self.seed)

    def __deepcopy__(self, memo):
        return self.copy()

    def equals(self, other):
        return (self.precision == other.precision
                and self.seed == other.seed
                and np.array_equal(self.registers, other.registers))

    def __eq__(self, other):
        if not isinstance(other, Sketch):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __len__(self):
        return self.m

    def __repr__(self):
        return f"Sketch(precision={self.precision}, seed={self.seed}, count={self.count():.1f})"
