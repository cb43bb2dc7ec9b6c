"""Linear complexity test built on the Berlekamp-Massey algorithm."""

from __future__ import annotations

import bisect
import math
from typing import Any

from .cephes import igamc
from .common import TestId, TestResult, as_bits

_K = 6
_PI = (0.01047, 0.03125, 0.12500, 0.50000, 0.25000, 0.06250, 0.020833)
# Upper (inclusive) edges of the first six classes of the T statistic.
_EDGES = (-2.5, -1.5, -0.5, 0.5, 1.5, 2.5)


def berlekamp_massey(bits: Any) -> int:
    """Length of the shortest LFSR that generates the given bit sequence."""
    epsilon = as_bits(bits)
    length = 0
    last_change = -1
    connection = 1  # bit i holds the coefficient of x^i
    previous = 1
    window = 0  # bit i holds epsilon[position - i]
    for position, bit in enumerate(epsilon.tolist()):
        window = (window << 1) | bit
        mask = (1 << (length + 1)) - 1
        discrepancy = bin(connection & mask & window).count("1") & 1
        if discrepancy:
            saved = connection
            connection ^= previous << (position - last_change)
            if length <= position // 2:
                length = position + 1 - length
                last_change = position
                previous = saved
    return length


def _class_of(t: float) -> int:
    return bisect.bisect_left(_EDGES, t)


def linear_complexity(bits: Any, block_length: int) -> TestResult:
    """Test the distribution of linear complexities of ``block_length``-bit blocks."""
    epsilon = as_bits(bits)
    n = epsilon.size
    m = block_length
    if m <= 0:
        raise ValueError("block length must be positive")
    num_blocks = n // m
    if num_blocks == 0:
        raise ValueError(f"linear complexity test needs at least {m} bits")

    sign = -1 if (m + 1) % 2 == 0 else 1
    mean = m / 2.0 + (9.0 + sign) / 36.0 - math.ldexp(1.0, -m) * (m / 3.0 + 2.0 / 9.0)
    sign = 1 if m % 2 == 0 else -1

    counts = [0] * (_K + 1)
    for start in range(0, num_blocks * m, m):
        complexity = berlekamp_massey(epsilon[start : start + m])
        t = sign * (complexity - mean) + 2.0 / 9.0
        counts[_class_of(t)] += 1

    chi2 = sum(
        (count - num_blocks * p) ** 2 / (num_blocks * p) for count, p in zip(counts, _PI)
    )
    p_value = igamc(_K / 2.0, chi2 / 2.0)
    return TestResult(
        TestId.LINEAR_COMPLEXITY,
        p_value,
        {
            "block_length": m,
            "num_blocks": num_blocks,
            "counts": tuple(counts),
            "chi_squared": chi2,
            "discarded": n % m,
        },
    )