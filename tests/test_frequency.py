import numpy as np
import pytest
from hypothesis import given, strategies as st

from randtest import common
from randtest.frequency import block_frequency, frequency

bit_lists = st.lists(st.integers(min_value=0, max_value=1), min_size=1, max_size=400)


def test_frequency_worked_example():
    result = frequency("1011010101")
    assert result.test == common.TestId.FREQUENCY
    assert result.p_value == pytest.approx(0.527089, abs=1e-6)
    assert result.passed()


def test_frequency_all_zeros_fails():
    result = frequency([0] * 1000)
    assert result.statistics["partial_sum"] == -1000
    assert result.statistics["mean"] == -1.0
    assert not result.passed()


def test_frequency_balanced_sequence_has_unit_p_value():
    assert frequency("01" * 50).p_value == 1.0


@given(bit_lists)
def test_frequency_is_invariant_under_complement(bits):
    flipped = [1 - b for b in bits]
    original = frequency(bits)
    assert 0.0 <= original.p_value <= 1.0
    assert original.p_value == pytest.approx(frequency(flipped).p_value)
    assert original.statistics["partial_sum"] == -frequency(flipped).statistics["partial_sum"]


def test_frequency_empty_rejected():
    with pytest.raises(ValueError):
        frequency([])


def test_block_frequency_worked_example():
    result = block_frequency("0110011010", 3)
    assert result.p_value == pytest.approx(0.801252, abs=1e-6)
    assert result.statistics["num_blocks"] == 3
    assert result.statistics["discarded"] == 1


def test_block_frequency_perfectly_balanced_blocks():
    result = block_frequency("0011" * 25, 4)
    assert result.statistics["chi_squared"] == 0.0
    assert result.p_value == 1.0


def test_block_frequency_constant_blocks_fail():
    result = block_frequency(np.repeat([0, 1], 500), 10)
    assert not result.passed()


@given(bit_lists, st.integers(min_value=1, max_value=50))
def test_block_frequency_invariants(bits, block_length):
    result = block_frequency(bits, block_length)
    assert 0.0 <= result.p_value <= 1.0 + 1e-12
    assert result.statistics["num_blocks"] * block_length + result.statistics["discarded"] == len(bits)
    assert result.p_value == pytest.approx(block_frequency([1 - b for b in bits], block_length).p_value)


@pytest.mark.parametrize("block_length", [0, -3])
def test_block_frequency_rejects_bad_block_length(block_length):
    with pytest.raises(ValueError):
        block_frequency("0101", block_length)