"""
Weighted Sampler

Draws an index from a vector of non-negative integer weights, with the
probability of index ``i`` equal to ``weights[i] / sum(weights)``.

The draw is an exact uniform integer in ``[0, total)`` located in the
prefix-sum array of the weights by binary search, so zero-weight indices are
never returned and no floating point rounding skews the ratios.

Thread safety:
    ``numpy.random.Generator`` is not safe to share between threads. Every
    generation task should own its generator (see ``make_rng``). The module
    level default generator is only meant for single-threaded callers.
"""

import numpy as np

_default_rng = np.random.default_rng()

_INT64_MAX = int(np.iinfo(np.int64).max)


def make_rng(seed=None):
    """
    Create a random generator for one generation task.

    Args:
        seed (int, optional): Seed for reproducible draws. None seeds from
            operating system entropy.

    Returns:
        numpy.random.Generator: A new generator
    """
    return np.random.default_rng(seed)


def sample(weights, rng=None):
    """
    Draw one index with probability proportional to its weight.

    Args:
        weights (sequence of int): Non-negative weights, at least one positive.
        rng (numpy.random.Generator, optional): Source of randomness. The
            process-wide default generator is used when omitted.

    Returns:
        int: The drawn index.

    Raises:
        ValueError: If the weights are empty, not one-dimensional, not
            integers, contain a negative entry, sum to zero, or sum past the
            int64 range.
    """
    weights = np.asarray(weights)
    if weights.ndim != 1 or weights.size == 0:
        raise ValueError("weights must be a non-empty one-dimensional sequence")
    # Python ints beyond the int64 range arrive as an object array
    if weights.dtype == object:
        if not all(isinstance(w, int) and not isinstance(w, bool) for w in weights):
            raise ValueError("weights must be integers")
    elif not np.issubdtype(weights.dtype, np.integer):
        raise ValueError(f"weights must be integers, got dtype {weights.dtype}")
    if (weights < 0).any():
        raise ValueError("weights must be non-negative")

    # Exact total, so the int64 prefix sums below cannot wrap around
    total = sum(int(w) for w in weights.tolist())
    if total <= 0:
        raise ValueError("no probability mass: weights sum to zero")
    if total > _INT64_MAX:
        raise ValueError(f"weights too large: total {total} exceeds {_INT64_MAX}")

    cumulative = np.cumsum(weights.astype(np.int64))

    if rng is None:
        rng = _default_rng

    draw = rng.integers(0, total)
    # First index whose cumulative weight exceeds the draw
    return int(np.searchsorted(cumulative, draw, side="right"))
