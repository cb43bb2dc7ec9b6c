"""Final analysis report: uniformity and proportion of passing sequences."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .cephes import igamc
from .common import ALPHA

_P_HAT = 1.0 - ALPHA


def _thresholds(sample_size: int) -> tuple[int, int]:
    if sample_size == 0:
        return 0, 0
    spread = 3.0 * math.sqrt((_P_HAT * ALPHA) / sample_size)
    return (
        int((_P_HAT - spread) * sample_size),
        int((_P_HAT + spread) * sample_size),
    )


@dataclass(frozen=True)
class Metrics:
    """Histogram of p-values, their uniformity and the passing proportion."""

    freq_per_bin: tuple[int, ...]
    uniformity: float | None
    pass_count: int
    sample_size: int
    threshold_min: int
    threshold_max: int

    @property
    def proportion_ok(self) -> bool:
        """True when the number of passing sequences lies within the thresholds."""
        return self.threshold_min <= self.pass_count <= self.threshold_max

    def format(self, test_name: str) -> str:
        """One line of the summary table for ``test_name``."""
        parts = [f"{count:3d} " for count in self.freq_per_bin]
        if self.uniformity is None:
            parts.append("    ----    ")
        elif self.uniformity < 0.0001:
            parts.append(f" {self.uniformity:8.6f} * ")
        else:
            parts.append(f" {self.uniformity:8.6f}   ")
        if self.sample_size == 0:
            parts.append(f" ------     {test_name}")
        elif not self.proportion_ok:
            parts.append(f"{self.pass_count:4d}/{self.sample_size:<4d} *  {test_name}")
        else:
            parts.append(f"{self.pass_count:4d}/{self.sample_size:<4d}    {test_name}")
        return "".join(parts)


def compute_metrics(p_values: Sequence[float], random_excursion: bool = False) -> Metrics:
    """Summarise p-values; random excursion results skip non-positive values."""
    values = [float(v) for v in p_values]
    if any(not 0.0 <= v <= 1.0 for v in values):
        raise ValueError("p-values must lie between 0 and 1")
    if random_excursion:
        values = [v for v in values if v > 0.0]

    sample_size = len(values)
    failures = sum(1 for v in values if v < ALPHA)
    pass_count = sample_size - failures if sample_size else 0
    threshold_min, threshold_max = _thresholds(sample_size)

    bins = [0] * 10
    for v in values:
        bins[min(int(math.floor(v * 10)), 9)] += 1

    expected = sample_size // 10
    if expected == 0:
        uniformity = None
    else:
        chi2 = sum((f - expected) ** 2 / expected for f in bins)
        uniformity = igamc(9.0 / 2.0, chi2 / 2.0)

    return Metrics(
        tuple(bins), uniformity, pass_count, sample_size, threshold_min, threshold_max
    )


def partition_results(values: Sequence[float], num_files: int) -> list[list[float]]:
    """Split interleaved per-sequence results into one list per sub-test."""
    if num_files <= 0:
        raise ValueError("number of files must be positive")
    if len(values) % num_files:
        raise ValueError(
            f"{len(values)} values cannot be split evenly into {num_files} files"
        )
    return [list(values[i::num_files]) for i in range(num_files)]


def minimum_pass_rate(sample_size: int) -> int | None:
    """Approximate minimum number of passing sequences; None when undefined."""
    if sample_size < 0:
        raise ValueError("sample size must not be negative")
    if sample_size == 0:
        return None
    return _thresholds(sample_size)[0]


def summary_footer(
    general_sample_size: int,
    excursion_sample_size: int,
    has_general: bool,
    has_excursion: bool,
) -> str:
    """The closing paragraph of the final analysis report."""
    rule = "- " * 40 + "-\n"
    lines = ["\n\n" + rule]
    if has_general:
        rate = minimum_pass_rate(general_sample_size)
        if rate is None:
            lines.append(
                "The minimum pass rate for each statistical test with the exception of the\n"
                "random excursion (variant) test is undefined.\n\n"
            )
        else:
            lines.append(
                "The minimum pass rate for each statistical test with the exception of the\n"
                f"random excursion (variant) test is approximately = {rate} for a\n"
                f"sample size = {general_sample_size} binary sequences.\n\n"
            )
    if has_excursion:
        rate = minimum_pass_rate(excursion_sample_size)
        if rate is None:
            lines.append(
                "The minimum pass rate for the random excursion (variant) test is undefined.\n\n"
            )
        else:
            lines.append(
                "The minimum pass rate for the random excursion (variant) test\n"
                f"is approximately = {rate} for a sample size = "
                f"{excursion_sample_size} binary sequences.\n\n"
            )
    lines.append(
        "For further guidelines construct a probability table using the MAPLE program\n"
        "provided in the addendum section of the documentation.\n"
    )
    lines.append(rule)
    return "".join(lines)