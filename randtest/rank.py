"""Binary matrix rank test on disjoint 32x32 matrices."""

from __future__ import annotations

import math
from typing import Any

from .common import TestId, TestResult, as_bits
from .matrix import build_matrix, compute_rank

_SIZE = 32


def _rank_probability(r: int) -> float:
    product = 1.0
    for i in range(r):
        product *= ((1.0 - 2.0 ** (i - _SIZE)) ** 2) / (1.0 - 2.0 ** (i - r))
    return 2.0 ** (r * (2 * _SIZE - r) - _SIZE * _SIZE) * product


def rank(bits: Any) -> TestResult:
    """Test the distribution of ranks of 32x32 matrices built from the bits."""
    epsilon = as_bits(bits)
    n = epsilon.size
    num_matrices = n // (_SIZE * _SIZE)
    if num_matrices == 0:
        return TestResult(TestId.RANK, 0.0, {"num_matrices": 0})

    p_32 = _rank_probability(32)
    p_31 = _rank_probability(31)
    p_30 = 1 - (p_32 + p_31)

    f_32 = f_31 = 0
    for k in range(num_matrices):
        r = compute_rank(build_matrix(epsilon, _SIZE, _SIZE, k))
        if r == 32:
            f_32 += 1
        elif r == 31:
            f_31 += 1
    f_30 = num_matrices - (f_32 + f_31)

    chi_squared = (
        (f_32 - num_matrices * p_32) ** 2 / (num_matrices * p_32)
        + (f_31 - num_matrices * p_31) ** 2 / (num_matrices * p_31)
        + (f_30 - num_matrices * p_30) ** 2 / (num_matrices * p_30)
    )
    p_value = math.exp(-chi_squared / 2.0)
    return TestResult(
        TestId.RANK,
        p_value,
        {
            "p_32": p_32,
            "p_31": p_31,
            "p_30": p_30,
            "f_32": f_32,
            "f_31": f_31,
            "f_30": f_30,
            "num_matrices": num_matrices,
            "chi_squared": chi_squared,
            "discarded": n % (_SIZE * _SIZE),
        },
    )