import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from randtest.matrix import build_matrix, compute_rank


def test_build_matrix_takes_rows_in_order():
    bits = np.random.default_rng(3).integers(0, 2, 3 * 1024)
    matrix = build_matrix(bits, 32, 32, 1)
    assert matrix.shape == (32, 32)
    assert np.array_equal(matrix[0], bits[1024:1056])
    assert np.array_equal(matrix[31], bits[1024 + 31 * 32 : 2048])


def test_build_matrix_out_of_range():
    with pytest.raises(ValueError):
        build_matrix([0] * 1024, 32, 32, 1)


def test_build_matrix_bad_dimensions():
    with pytest.raises(ValueError):
        build_matrix([0] * 10, 0, 3, 0)


def test_identity_full_rank():
    assert compute_rank(np.eye(32, dtype=np.uint8)) == 32


def test_zero_matrix_rank_zero():
    assert compute_rank(np.zeros((32, 32), dtype=np.uint8)) == 0


def test_all_ones_rank_one():
    assert compute_rank(np.ones((6, 6), dtype=np.uint8)) == 1


def test_permutation_full_rank():
    perm = np.random.default_rng(5).permutation(16)
    matrix = np.eye(16, dtype=np.uint8)[perm]
    assert compute_rank(matrix) == 16


def test_duplicate_row_reduces_rank():
    matrix = np.eye(8, dtype=np.uint8)
    matrix[7] = matrix[0]
    assert compute_rank(matrix) == 7


def test_input_not_modified():
    matrix = np.ones((4, 4), dtype=np.uint8)
    compute_rank(matrix)
    assert matrix.sum() == 16


def test_non_2d_raises():
    with pytest.raises(ValueError):
        compute_rank([1, 0, 1])


@settings(max_examples=50)
@given(st.integers(min_value=1, max_value=12), st.integers(min_value=0))
def test_unit_upper_triangular_full_rank(size, seed):
    rng = np.random.default_rng(seed)
    matrix = np.triu(rng.integers(0, 2, (size, size)), k=1).astype(np.uint8)
    matrix[np.arange(size), np.arange(size)] = 1
    assert compute_rank(matrix) == size


@settings(max_examples=50)
@given(st.integers(min_value=0))
def test_rank_bounded(seed):
    matrix = np.random.default_rng(seed).integers(0, 2, (10, 10))
    assert 0 <= compute_rank(matrix) <= 10