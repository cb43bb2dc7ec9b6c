"""Aperiodic templates and the non-overlapping template matching test."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np

from .cephes import igamc
from .common import MAX_NUM_OF_TEMPLATES, TestId, TestResult, as_bits

NUM_BLOCKS = 8
_MAX_TEMPLATE_LENGTH = 62


def aperiodic_templates(m: int) -> list[str]:
    """All templates of length ``m`` that cannot overlap themselves, in ascending order."""
    if not 2 <= m <= 24:
        raise ValueError("generated templates need a length between 2 and 24")
    values = np.arange(1 << m, dtype=np.int64)
    aperiodic = np.ones(values.size, dtype=bool)
    for shift in range(1, m):
        low_mask = (1 << (m - shift)) - 1
        aperiodic &= (values >> shift) != (values & low_mask)
    return [format(int(v), f"0{m}b") for v in values[aperiodic]]


def _select(templates: Sequence[str]) -> list[str]:
    """Spread the chosen templates evenly when there are more than the maximum."""
    count = len(templates)
    skip = 1 if count < MAX_NUM_OF_TEMPLATES else count // MAX_NUM_OF_TEMPLATES
    return list(templates[::skip][: min(MAX_NUM_OF_TEMPLATES, count // skip)])


def _greedy_count(positions: np.ndarray, m: int) -> int:
    count = 0
    next_free = 0
    for position in positions:
        if position >= next_free:
            count += 1
            next_free = int(position) + m
    return count


def non_overlapping_template_matchings(
    bits: Any, m: int, templates: Iterable[Any] | None = None
) -> list[TestResult]:
    """Run the test once per template; matches restart after each hit."""
    epsilon = as_bits(bits)
    n = epsilon.size
    if not 1 <= m <= _MAX_TEMPLATE_LENGTH:
        raise ValueError(f"template length must be between 1 and {_MAX_TEMPLATE_LENGTH}")

    if templates is None:
        chosen = _select(aperiodic_templates(m))
    else:
        chosen = ["".join(str(int(b)) for b in as_bits(t)) for t in templates]
        if any(len(t) != m for t in chosen):
            raise ValueError(f"every template must hold {m} bits")

    block_length = n // NUM_BLOCKS
    lam = (block_length - m + 1) / 2.0**m
    if lam <= 0:
        raise ValueError(f"lambda ({lam}) is not positive: sequence too short")
    var_wj = block_length * (1.0 / 2.0**m - (2.0 * m - 1.0) / 2.0 ** (2.0 * m))

    weights = np.left_shift(np.int64(1), np.arange(m - 1, -1, -1, dtype=np.int64))
    window_values = (
        np.lib.stride_tricks.sliding_window_view(epsilon.astype(np.int64), m) @ weights
    )
    span = block_length - m + 1

    results = []
    for index, template in enumerate(chosen):
        target = int(template, 2)
        observed = []
        for i in range(NUM_BLOCKS):
            block = window_values[i * block_length : i * block_length + span]
            observed.append(_greedy_count(np.flatnonzero(block == target), m))
        chi2 = float(sum((w - lam) ** 2 / var_wj for w in observed))
        p_value = igamc(NUM_BLOCKS / 2.0, chi2 / 2.0)
        results.append(
            TestResult(
                TestId.NONPERIODIC,
                p_value,
                {
                    "W": tuple(observed),
                    "chi_squared": chi2,
                    "lambda": lam,
                    "block_length": block_length,
                    "index": index,
                },
                label=template,
            )
        )
    return results