"""Approximate entropy and serial tests on overlapping circular blocks."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from .cephes import igamc
from .common import TestId, TestResult, as_bits


def _window_counts(epsilon: np.ndarray, length: int) -> np.ndarray:
    """Frequencies of each ``length``-bit pattern over the sequence read circularly."""
    n = epsilon.size
    extended = np.resize(epsilon.astype(np.int64), n + length - 1)
    weights = np.left_shift(np.int64(1), np.arange(length - 1, -1, -1, dtype=np.int64))
    values = np.lib.stride_tricks.sliding_window_view(extended, length) @ weights
    return np.bincount(values, minlength=1 << length)


def _phi(epsilon: np.ndarray, length: int) -> float:
    if length == 0:
        return 0.0
    n = epsilon.size
    counts = _window_counts(epsilon, length)
    present = counts[counts > 0].astype(np.float64)
    return float(np.sum(present * np.log(present / n))) / n


def approximate_entropy(bits: Any, m: int) -> TestResult:
    """Compare frequencies of overlapping blocks of lengths ``m`` and ``m + 1``."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if m < 0:
        raise ValueError("block length must not be negative")
    if n == 0:
        raise ValueError("approximate entropy test needs at least one bit")

    phi_m = _phi(epsilon, m)
    phi_m1 = _phi(epsilon, m + 1)
    apen = phi_m - phi_m1
    chi_squared = 2.0 * n * (math.log(2) - apen)
    p_value = igamc(2.0 ** (m - 1), chi_squared / 2.0)

    recommended = int(math.log(n) / math.log(2) - 5)
    return TestResult(
        TestId.APEN,
        p_value,
        {
            "m": m,
            "n": n,
            "chi_squared": chi_squared,
            "phi_m": phi_m,
            "phi_m1": phi_m1,
            "apen": apen,
            "inaccurate": m > recommended,
            "recommended_max": max(1, recommended),
        },
    )


def psi2(bits: Any, m: int) -> float:
    """The psi-squared statistic of overlapping circular ``m``-bit blocks."""
    if m in (0, -1):
        return 0.0
    if m < -1:
        raise ValueError("block length must be at least -1")
    epsilon = as_bits(bits)
    n = epsilon.size
    if n == 0:
        raise ValueError("psi-squared needs at least one bit")
    counts = _window_counts(epsilon, m).astype(np.float64)
    return float(np.sum(counts**2)) * 2.0**m / n - n


def serial(bits: Any, m: int) -> tuple[TestResult, TestResult]:
    """The two serial test p-values, from the first and second differences of psi2."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if m < 1:
        raise ValueError("block length must be at least 1")
    if n == 0:
        raise ValueError("serial test needs at least one bit")

    psim0 = psi2(epsilon, m)
    psim1 = psi2(epsilon, m - 1)
    psim2 = psi2(epsilon, m - 2)
    del1 = psim0 - psim1
    del2 = psim0 - 2.0 * psim1 + psim2
    p_value1 = igamc(2.0 ** (m - 1) / 2, del1 / 2.0)
    p_value2 = igamc(2.0 ** (m - 2) / 2, del2 / 2.0)

    statistics = {
        "m": m,
        "n": n,
        "psi_m": psim0,
        "psi_m1": psim1,
        "psi_m2": psim2,
        "del1": del1,
        "del2": del2,
    }
    return (
        TestResult(TestId.SERIAL, p_value1, statistics, label="p_value1"),
        TestResult(TestId.SERIAL, p_value2, statistics, label="p_value2"),
    )