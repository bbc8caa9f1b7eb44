import pytest

from hyperanf.stats import average_distance, effective_diameter, pair_counts


def test_path_of_three():
    # 0 - 1 - 2: N(0) = 3, N(1) = 7, N(2) = 9
    nf = [3, 7, 9]
    assert pair_counts(nf) == [4, 2]
    assert average_distance(nf) == pytest.approx(8 / 6)
    assert effective_diameter(nf) == pytest.approx(1.55)
    assert effective_diameter(nf, alpha=1) == pytest.approx(2)


def test_no_pairs():
    assert average_distance([4]) == 0.0
    assert effective_diameter([4]) == 0.0


def test_invalid_arguments():
    with pytest.raises(ValueError):
        average_distance([])
    with pytest.raises(ValueError):
        effective_diameter([1, 2], alpha=0)
