"""Random excursions and random excursions variant tests."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from .cephes import igamc
from .common import TestId, TestResult, as_bits

_STATES = (-4, -3, -2, -1, 1, 2, 3, 4)
_VARIANT_STATES = (-9, -8, -7, -6, -5, -4, -3, -2, -1, 1, 2, 3, 4, 5, 6, 7, 8, 9)
# Probability that a cycle visits state |x| exactly k times (k = 0..4, >= 5).
_PI = (
    (0.0000000000, 0.00000000000, 0.00000000000, 0.00000000000, 0.00000000000, 0.0000000000),
    (0.5000000000, 0.25000000000, 0.12500000000, 0.06250000000, 0.03125000000, 0.0312500000),
    (0.7500000000, 0.06250000000, 0.04687500000, 0.03515625000, 0.02636718750, 0.0791015625),
    (0.8333333333, 0.02777777778, 0.02314814815, 0.01929012346, 0.01607510288, 0.0803755143),
    (0.8750000000, 0.01562500000, 0.01367187500, 0.01196289063, 0.01046752930, 0.0732727051),
)


def _walk(bits: Any) -> np.ndarray:
    epsilon = as_bits(bits)
    if epsilon.size == 0:
        raise ValueError("random excursions tests need at least one bit")
    return np.cumsum(2 * epsilon.astype(np.int64) - 1)


def _cycle_count(walk: np.ndarray) -> int:
    zeros = int(np.count_nonzero(walk[1:] == 0))
    return zeros + (1 if walk[-1] != 0 else 0)


def random_excursions(bits: Any) -> list[TestResult]:
    """One result per state -4..-1, 1..4 on the number of visits per cycle."""
    walk = _walk(bits)
    n = walk.size
    max_cycles = max(1000, n // 100)
    zeros = int(np.count_nonzero(walk[1:] == 0))
    if zeros > max_cycles:
        raise ValueError(
            f"exceeding the maximum number of cycles expected ({max_cycles})"
        )
    j = _cycle_count(walk)
    constraint = max(0.005 * math.sqrt(n), 500)

    if j < constraint:
        return [
            TestResult(
                TestId.RND_EXCURSION,
                0.0,
                {"x": x, "J": j, "n": n, "applicable": False},
                label=f"x = {x}",
            )
            for x in _STATES
        ]

    is_zero = (walk == 0).astype(np.int64)
    cycle_ids = np.concatenate(([0], np.cumsum(is_zero)[:-1]))

    results = []
    for x in _STATES:
        per_cycle = np.bincount(cycle_ids[walk == x], minlength=j)[:j]
        nu = np.bincount(np.minimum(per_cycle, 5), minlength=6)
        probabilities = _PI[abs(x)]
        chi2 = float(
            sum((int(v) - j * p) ** 2 / (j * p) for v, p in zip(nu, probabilities))
        )
        p_value = igamc(2.5, chi2 / 2.0)
        results.append(
            TestResult(
                TestId.RND_EXCURSION,
                p_value,
                {
                    "x": x,
                    "J": j,
                    "n": n,
                    "applicable": True,
                    "constraint": constraint,
                    "chi_squared": chi2,
                    "counts": tuple(int(v) for v in nu),
                },
                label=f"x = {x}",
            )
        )
    return results


def random_excursions_variant(bits: Any) -> list[TestResult]:
    """One result per state -9..-1, 1..9 on the total number of visits."""
    walk = _walk(bits)
    n = walk.size
    j = _cycle_count(walk)
    constraint = int(max(0.005 * math.sqrt(n), 500))

    if j < constraint:
        return [
            TestResult(
                TestId.RND_EXCURSION_VAR,
                0.0,
                {"x": x, "J": j, "n": n, "applicable": False},
                label=f"x = {x}",
            )
            for x in _VARIANT_STATES
        ]

    results = []
    for x in _VARIANT_STATES:
        count = int(np.count_nonzero(walk == x))
        p_value = math.erfc(abs(count - j) / math.sqrt(2.0 * j * (4.0 * abs(x) - 2)))
        results.append(
            TestResult(
                TestId.RND_EXCURSION_VAR,
                p_value,
                {"x": x, "J": j, "n": n, "applicable": True, "visits": count},
                label=f"x = {x}",
            )
        )
    return results