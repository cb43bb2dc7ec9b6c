"""Binary matrices over GF(2) and their rank by elementary row operations."""

from __future__ import annotations

from typing import Any

import numpy as np

from .common import as_bits


def build_matrix(bits: Any, rows: int, cols: int, index: int) -> np.ndarray:
    """Fill the ``index``-th ``rows`` x ``cols`` matrix from a bit sequence."""
    if rows <= 0 or cols <= 0:
        raise ValueError("matrix dimensions must be positive")
    if index < 0:
        raise ValueError("matrix index must not be negative")
    epsilon = as_bits(bits)
    start = index * rows * cols
    last = start + (cols - 1) + (rows - 1) * rows
    if last >= epsilon.size:
        raise ValueError("not enough bits for the requested matrix")
    offsets = start + np.arange(rows)[:, None] * rows + np.arange(cols)[None, :]
    return epsilon[offsets].astype(np.uint8)


def _eliminate(a: np.ndarray, i: int, forward: bool) -> None:
    if forward:
        targets = np.flatnonzero(a[i + 1 :, i] == 1) + i + 1
        a[targets, i:] ^= a[i, i:]
    else:
        targets = np.flatnonzero(a[:i, i] == 1)
        a[targets, :] ^= a[i, :]


def _find_and_swap(a: np.ndarray, i: int, forward: bool) -> bool:
    if forward:
        candidates = np.flatnonzero(a[i + 1 :, i] == 1)
        if not candidates.size:
            return False
        other = int(candidates[0]) + i + 1
    else:
        candidates = np.flatnonzero(a[:i, i] == 1)
        if not candidates.size:
            return False
        other = int(candidates[-1])
    a[[i, other]] = a[[other, i]]
    return True


def compute_rank(matrix: Any) -> int:
    """Rank of a 0/1 matrix by forward then backward elimination over GF(2).

    The input is left unchanged.
    """
    a = np.array(matrix, dtype=np.uint8)
    if a.ndim != 2:
        raise ValueError("matrix must be two-dimensional")
    if a.size and not np.isin(a, (0, 1)).all():
        raise ValueError("matrix may only hold 0 and 1")
    rows, cols = a.shape
    m = min(rows, cols)

    for i in range(m - 1):
        if a[i, i] == 1 or _find_and_swap(a, i, forward=True):
            _eliminate(a, i, forward=True)
    for i in range(m - 1, 0, -1):
        if a[i, i] == 1 or _find_and_swap(a, i, forward=False):
            _eliminate(a, i, forward=False)

    zero_rows = int(np.count_nonzero(~a.any(axis=1)))
    return m - zero_rows