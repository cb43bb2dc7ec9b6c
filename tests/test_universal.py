import numpy as np
import pytest

from randtest.common import ALPHA, TestId
from randtest.universal import universal


def _random_bits(size, seed=11):
    return np.random.default_rng(seed).integers(0, 2, size)


def test_block_parameters_at_smallest_length():
    result = universal(_random_bits(387840))
    stats = result.statistics
    assert result.test is TestId.UNIVERSAL
    assert stats["L"] == 6
    assert stats["Q"] == 640
    assert stats["K"] == 387840 // 6 - 640
    assert stats["discarded"] == 0


def test_random_bits_give_phi_near_expected():
    result = universal(_random_bits(400000))
    assert abs(result.statistics["phi"] - 5.2177052) < 0.05
    assert 0.0 <= result.p_value <= 1.0


def test_longer_sequence_uses_larger_blocks():
    result = universal(_random_bits(904960))
    assert result.statistics["L"] == 7
    assert result.statistics["Q"] == 1280


def test_constant_sequence_fails():
    result = universal(np.zeros(387840, dtype=np.uint8))
    assert result.statistics["phi"] == 0.0
    assert result.p_value < ALPHA


def test_discarded_bits_reported():
    result = universal(_random_bits(387845))
    stats = result.statistics
    assert stats["discarded"] == 387845 - (stats["Q"] + stats["K"]) * stats["L"]
    assert stats["discarded"] == 5


def test_too_short_sequence_raises():
    with pytest.raises(ValueError):
        universal(_random_bits(387839))