"""Distance statistics derived from a neighbourhood function N(0), N(1), ..., N(T)."""


def _check(nf):
    nf = [float(n) for n in nf]
    if not nf:
        raise ValueError("neighbourhood function is empty")
    return nf


def pair_counts(nf):
    """Estimated number of node pairs at distance exactly t, for t = 1..T."""
    nf = _check(nf)
    return [nf[t] - nf[t - 1] for t in range(1, len(nf))]


def average_distance(nf):
    """Average distance over all pairs of distinct, mutually reachable nodes."""
    pairs = pair_counts(nf)
    reachable = sum(pairs)
    if reachable <= 0:
        return 0.0
    return sum((t + 1) * pairs[t] for t in range(len(pairs))) / reachable


def effective_diameter(nf, alpha=0.9):
    """
    Smallest t (linearly interpolated between rounds) such that N(t) >= alpha * N(T),
    i.e. the distance within which an `alpha` fraction of reachable pairs lies.
    """
    if not 0 < alpha <= 1:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")
    nf = _check(nf)
    target = alpha * nf[-1]
    if nf[0] >= target:
        return 0.0
    for t in range(1, len(nf)):
        if nf[t] >= target:
            return (t - 1) + (target - nf[t - 1]) / (nf[t] - nf[t - 1])
    return float(len(nf) - 1)
