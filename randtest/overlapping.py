"""Overlapping template matching test (template of all ones)."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from .cephes import igamc, lgam
from .common import TestId, TestResult, as_bits

BLOCK_LENGTH = 1032
_K = 5


def overlap_probability(u: int, eta: float) -> float:
    """Probability that an all-ones template occurs exactly ``u`` times in a block."""
    if u < 0:
        raise ValueError("occurrence count must not be negative")
    if u == 0:
        return math.exp(-eta)
    if eta <= 0:
        raise ValueError("eta must be positive")
    return sum(
        math.exp(
            -eta
            - u * math.log(2)
            + l * math.log(eta)
            - lgam(l + 1)
            + lgam(u)
            - lgam(l)
            - lgam(u - l + 1)
        )
        for l in range(1, u + 1)
    )


def overlapping_template_matchings(bits: Any, m: int) -> TestResult:
    """Count overlapping runs of ``m`` ones in 1032-bit blocks."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if not 1 <= m <= BLOCK_LENGTH:
        raise ValueError(f"template length must be between 1 and {BLOCK_LENGTH}")
    num_blocks = n // BLOCK_LENGTH
    if num_blocks == 0:
        raise ValueError(f"overlapping template test needs at least {BLOCK_LENGTH} bits")

    lam = (BLOCK_LENGTH - m + 1) / 2.0**m
    eta = lam / 2.0
    pi = [overlap_probability(i, eta) for i in range(_K)]
    pi.append(1 - sum(pi))

    blocks = epsilon[: num_blocks * BLOCK_LENGTH].reshape(num_blocks, BLOCK_LENGTH)
    sums = np.concatenate(
        (np.zeros((num_blocks, 1), dtype=np.int64), np.cumsum(blocks, axis=1, dtype=np.int64)),
        axis=1,
    )
    windows = sums[:, m:] - sums[:, :-m]
    matches = np.count_nonzero(windows == m, axis=1)
    counts = np.bincount(np.minimum(matches, _K), minlength=_K + 1)

    chi2 = float(
        sum((int(nu) - num_blocks * p) ** 2 / (num_blocks * p) for nu, p in zip(counts, pi))
    )
    p_value = igamc(_K / 2.0, chi2 / 2.0)
    return TestResult(
        TestId.OVERLAPPING,
        p_value,
        {
            "n": n,
            "m": m,
            "block_length": BLOCK_LENGTH,
            "num_blocks": num_blocks,
            "lambda": lam,
            "eta": eta,
            "counts": tuple(int(c) for c in counts),
            "chi_squared": chi2,
        },
    )