import pytest

from hyperanf.sketch import hash64


def _distinct_index_values(precision, count, seed=0, start=0):
    """Integers whose hashes land in pairwise different registers, so small counts are exact."""
    mask = (1 << precision) - 1
    used = set()
    values = []
    candidate = start
    while len(values) < count:
        index = hash64(candidate, seed) & mask
        if index not in used:
            used.add(index)
            values.append(candidate)
        candidate += 1
    return values


@pytest.fixture
def distinct_index_values():
    return _distinct_index_values
