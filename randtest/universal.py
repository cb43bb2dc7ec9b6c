"""Maurer's universal statistical test."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from .common import TestId, TestResult, as_bits

_EXPECTED_VALUE = (
    0, 0, 0, 0, 0, 0, 5.2177052, 6.1962507, 7.1836656, 8.1764248, 9.1723243,
    10.170032, 11.168765, 12.168070, 13.167693, 14.167488, 15.167379,
)
_VARIANCE = (
    0, 0, 0, 0, 0, 0, 2.954, 3.125, 3.238, 3.311, 3.356, 3.384,
    3.401, 3.410, 3.416, 3.419, 3.421,
)
# Smallest sequence length for each block length L.
_THRESHOLDS = (
    (1059061760, 16), (496435200, 15), (231669760, 14), (107560960, 13),
    (49643520, 12), (22753280, 11), (10342400, 10), (4654080, 9),
    (2068480, 8), (904960, 7), (387840, 6),
)


def universal(bits: Any) -> TestResult:
    """Test the compressibility of the sequence from distances between L-bit blocks."""
    epsilon = as_bits(bits)
    n = epsilon.size
    block = next((length for minimum, length in _THRESHOLDS if n >= minimum), 5)
    if block < 6:
        raise ValueError(f"L is out of range: n={n} needs at least 387840 bits")

    q = 10 * 2**block
    k = n // block - q

    weights = np.left_shift(np.int64(1), np.arange(block - 1, -1, -1, dtype=np.int64))
    values = epsilon[: (q + k) * block].reshape(q + k, block).astype(np.int64) @ weights

    index = np.arange(1, q + k + 1, dtype=np.int64)
    order = np.lexsort((index, values))
    sorted_values = values[order]
    sorted_index = index[order]
    previous_sorted = np.zeros_like(sorted_index)
    same = sorted_values[1:] == sorted_values[:-1]
    previous_sorted[1:][same] = sorted_index[:-1][same]
    previous = np.empty_like(index)
    previous[order] = previous_sorted

    distances = index[q:] - previous[q:]
    total = float(np.sum(np.log(distances) / math.log(2)))
    phi = total / k

    c = 0.7 - 0.8 / block + (4 + 32 / block) * k ** (-3 / block) / 15
    sigma = c * math.sqrt(_VARIANCE[block] / k)
    arg = abs(phi - _EXPECTED_VALUE[block]) / (math.sqrt(2) * sigma)
    p_value = math.erfc(arg)
    return TestResult(
        TestId.UNIVERSAL,
        p_value,
        {
            "L": block,
            "Q": q,
            "K": k,
            "sum": total,
            "sigma": sigma,
            "variance": _VARIANCE[block],
            "expected_value": _EXPECTED_VALUE[block],
            "phi": phi,
            "discarded": n - (q + k) * block,
        },
    )