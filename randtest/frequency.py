"""Frequency (monobit) and block frequency tests."""

from __future__ import annotations

import math
from typing import Any

from .cephes import igamc
from .common import TestId, TestResult, as_bits


def frequency(bits: Any) -> TestResult:
    """Test whether ones and zeros occur in roughly equal proportion."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if n == 0:
        raise ValueError("frequency test needs at least one bit")

    partial_sum = 2 * int(epsilon.sum()) - n
    s_obs = abs(partial_sum) / math.sqrt(n)
    p_value = math.erfc(s_obs / math.sqrt(2))
    return TestResult(
        TestId.FREQUENCY,
        p_value,
        {"partial_sum": partial_sum, "mean": partial_sum / n},
    )


def block_frequency(bits: Any, block_length: int) -> TestResult:
    """Test the proportion of ones within consecutive blocks of ``block_length``."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if block_length <= 0:
        raise ValueError("block length must be positive")
    if n == 0:
        raise ValueError("block frequency test needs at least one bit")

    num_blocks = n // block_length
    blocks = epsilon[: num_blocks * block_length].reshape(num_blocks, block_length)
    proportions = blocks.sum(axis=1) / block_length
    chi_squared = 4.0 * block_length * float(((proportions - 0.5) ** 2).sum())
    p_value = igamc(num_blocks / 2.0, chi_squared / 2.0)
    return TestResult(
        TestId.BLOCK_FREQUENCY,
        p_value,
        {
            "chi_squared": chi_squared,
            "num_blocks": num_blocks,
            "block_length": block_length,
            "discarded": n % block_length,
        },
    )