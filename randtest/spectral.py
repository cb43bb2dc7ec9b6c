"""Discrete Fourier transform (spectral) test."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from .common import TestId, TestResult, as_bits


def discrete_fourier_transform(bits: Any) -> TestResult:
    """Test the number of spectral peaks below the 95% threshold."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if n < 2:
        raise ValueError("spectral test needs at least two bits")

    x = 2.0 * epsilon.astype(np.float64) - 1.0
    half = n // 2
    magnitudes = np.abs(np.fft.rfft(x))[:half]
    upper_bound = math.sqrt(2.995732274 * n)
    count = int(np.count_nonzero(magnitudes < upper_bound))

    percentile = count / half * 100
    n_l = float(count)
    n_o = 0.95 * n / 2.0
    d = (n_l - n_o) / math.sqrt(n / 4.0 * 0.95 * 0.05)
    p_value = math.erfc(abs(d) / math.sqrt(2.0))
    return TestResult(
        TestId.FFT,
        p_value,
        {"percentile": percentile, "N_l": n_l, "N_o": n_o, "d": d},
    )