"""Runs, longest run of ones and cumulative sums tests."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from .cephes import igamc, normal
from .common import TestId, TestResult, as_bits

# (minimum length, block length, run-length classes, class probabilities)
_LONGEST_RUN_TABLES = (
    (750000, 10000, (10, 11, 12, 13, 14, 15, 16),
     (0.0882, 0.2092, 0.2483, 0.1933, 0.1208, 0.0675, 0.0727)),
    (6272, 128, (4, 5, 6, 7, 8, 9),
     (0.1174035788, 0.242955959, 0.249363483, 0.17517706, 0.102701071, 0.112398847)),
    (128, 8, (1, 2, 3, 4),
     (0.21484375, 0.3671875, 0.23046875, 0.1875)),
)


def runs(bits: Any) -> TestResult:
    """Test whether the number of runs of identical bits is as expected."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if n == 0:
        raise ValueError("runs test needs at least one bit")

    pi = int(epsilon.sum()) / n
    if abs(pi - 0.5) > 2.0 / math.sqrt(n):
        return TestResult(TestId.RUNS, 0.0, {"pi": pi, "prerequisite_met": False})

    v_obs = 1 + int(np.count_nonzero(epsilon[1:] != epsilon[:-1]))
    erfc_arg = abs(v_obs - 2.0 * n * pi * (1 - pi)) / (
        2.0 * pi * (1 - pi) * math.sqrt(2 * n)
    )
    p_value = math.erfc(erfc_arg)
    return TestResult(
        TestId.RUNS,
        p_value,
        {"pi": pi, "prerequisite_met": True, "runs": v_obs, "erfc_arg": erfc_arg},
    )


def _longest_run(block: np.ndarray) -> int:
    edges = np.diff(np.concatenate(([0], block.astype(np.int8), [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1)
    return int((ends - starts).max()) if starts.size else 0


def longest_run_of_ones(bits: Any) -> TestResult:
    """Test the distribution of the longest run of ones within blocks."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if n < 128:
        raise ValueError(f"n={n} is too short for the longest run test")

    block_length, classes, probabilities = next(
        (m, v, p) for minimum, m, v, p in _LONGEST_RUN_TABLES if n >= minimum
    )
    k = len(classes) - 1
    num_blocks = n // block_length
    counts = [0] * (k + 1)
    blocks = epsilon[: num_blocks * block_length].reshape(num_blocks, block_length)
    for block in blocks:
        longest = _longest_run(block)
        clipped = min(max(longest, classes[0]), classes[-1])
        counts[clipped - classes[0]] += 1

    chi2 = sum(
        (count - num_blocks * prob) ** 2 / (num_blocks * prob)
        for count, prob in zip(counts, probabilities)
    )
    p_value = igamc(k / 2.0, chi2 / 2.0)
    return TestResult(
        TestId.LONGEST_RUN,
        p_value,
        {
            "num_blocks": num_blocks,
            "block_length": block_length,
            "chi_squared": chi2,
            "counts": tuple(counts),
        },
    )


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _cusum_p_value(n: int, z: int) -> float:
    root = math.sqrt(n)
    upper = _cdiv(_cdiv(n, z) - 1, 4)
    sum1 = 0.0
    for k in range(_cdiv(_cdiv(-n, z) + 1, 4), upper + 1):
        sum1 += normal(((4 * k + 1) * z) / root)
        sum1 -= normal(((4 * k - 1) * z) / root)
    sum2 = 0.0
    for k in range(_cdiv(_cdiv(-n, z) - 3, 4), upper + 1):
        sum2 += normal(((4 * k + 3) * z) / root)
        sum2 -= normal(((4 * k + 1) * z) / root)
    return 1.0 - sum1 + sum2


def cumulative_sums(bits: Any) -> tuple[TestResult, TestResult]:
    """Forward and reverse cumulative sums tests, in that order."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if n == 0:
        raise ValueError("cumulative sums test needs at least one bit")

    walk = np.cumsum(2 * epsilon.astype(np.int64) - 1)
    sup = max(0, int(walk.max()))
    inf = min(0, int(walk.min()))
    final = int(walk[-1])
    z = max(sup, -inf)
    zrev = max(sup - final, final - inf)

    forward = TestResult(
        TestId.CUSUM, _cusum_p_value(n, z), {"max_partial_sum": z}, label="forward"
    )
    reverse = TestResult(
        TestId.CUSUM, _cusum_p_value(n, zrev), {"max_partial_sum": zrev}, label="reverse"
    )
    return forward, reverse