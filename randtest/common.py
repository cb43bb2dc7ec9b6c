"""Shared constants, test identifiers, results and bit-sequence helpers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import numpy as np

ALPHA = 0.01
"""Significance level below which a p-value counts as a failure."""

MAX_NUM_OF_TEMPLATES = 148
NUM_OF_TESTS = 15
NUM_OF_GENERATORS = 10
MAX_FILES_PERMITTED_FOR_PARTITION = 148


class TestId(enum.IntEnum):
    """Identifiers of the statistical tests, numbered as in the suite menu."""

    FREQUENCY = 1
    BLOCK_FREQUENCY = 2
    CUSUM = 3
    RUNS = 4
    LONGEST_RUN = 5
    RANK = 6
    FFT = 7
    NONPERIODIC = 8
    OVERLAPPING = 9
    UNIVERSAL = 10
    APEN = 11
    RND_EXCURSION = 12
    RND_EXCURSION_VAR = 13
    SERIAL = 14
    LINEAR_COMPLEXITY = 15

    @property
    def report_name(self) -> str:
        """Name used for the test's output directory and in reports."""
        return _REPORT_NAMES[self]


_REPORT_NAMES = {
    TestId.FREQUENCY: "Frequency",
    TestId.BLOCK_FREQUENCY: "BlockFrequency",
    TestId.CUSUM: "CumulativeSums",
    TestId.RUNS: "Runs",
    TestId.LONGEST_RUN: "LongestRun",
    TestId.RANK: "Rank",
    TestId.FFT: "FFT",
    TestId.NONPERIODIC: "NonOverlappingTemplate",
    TestId.OVERLAPPING: "OverlappingTemplate",
    TestId.UNIVERSAL: "Universal",
    TestId.APEN: "ApproximateEntropy",
    TestId.RND_EXCURSION: "RandomExcursions",
    TestId.RND_EXCURSION_VAR: "RandomExcursionsVariant",
    TestId.SERIAL: "Serial",
    TestId.LINEAR_COMPLEXITY: "LinearComplexity",
}


@dataclass(frozen=True)
class TestResult:
    """Outcome of one statistical test: a p-value and the figures behind it."""

    __test__ = False

    test: TestId
    p_value: float
    statistics: Mapping[str, Any] = field(default_factory=dict)
    label: str = ""

    def passed(self) -> bool:
        """True when the p-value is not below the significance level."""
        return self.p_value >= ALPHA


def as_bits(data: Any) -> np.ndarray:
    """Return ``data`` as a one-dimensional array of 0/1 values.

    Accepts a string of '0'/'1' characters (whitespace ignored), bytes-like
    objects (unpacked most significant bit first), numpy arrays and any
    iterable of 0/1 integers or booleans.
    """
    if isinstance(data, np.ndarray):
        array = data
    elif isinstance(data, str):
        chars = "".join(data.split())
        if any(ch not in "01" for ch in chars):
            raise ValueError("bit string may only hold '0' and '1'")
        array = np.frombuffer(chars.encode("ascii"), dtype=np.uint8) - ord("0")
    elif isinstance(data, (bytes, bytearray, memoryview)):
        array = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))
    else:
        array = np.fromiter((int(bit) for bit in _iterate(data)), dtype=np.int64)

    if array.ndim != 1:
        raise ValueError("bit sequence must be one-dimensional")
    if array.size and not np.isin(array, (0, 1)).all():
        raise ValueError("bit sequence may only hold 0 and 1")
    return array.astype(np.uint8)


def _iterate(data: Iterable[Any]) -> Iterable[Any]:
    try:
        return iter(data)
    except TypeError as exc:
        raise TypeError(f"cannot read bits from {type(data).__name__}") from exc