import pytest
from hypothesis import given
from hypothesis import strategies as st

from randtest.report import (
    compute_metrics,
    minimum_pass_rate,
    partition_results,
    summary_footer,
)

UNIFORM = [(i % 10) / 10 + 0.05 for i in range(100)]


def test_uniform_values_metrics():
    metrics = compute_metrics(UNIFORM)
    assert metrics.freq_per_bin == (10,) * 10
    assert metrics.uniformity == 1.0
    assert metrics.pass_count == 100
    assert metrics.sample_size == 100
    assert metrics.proportion_ok


def test_format_line():
    line = compute_metrics(UNIFORM).format("Frequency")
    assert line.startswith(" 10 " * 10)
    assert "1.000000" in line
    assert line.endswith("100/100     Frequency")
    assert "*" not in line


def test_small_sample_has_no_uniformity():
    metrics = compute_metrics([0.5, 0.2, 0.001])
    assert metrics.uniformity is None
    assert metrics.pass_count == 2
    assert "    ----    " in metrics.format("Runs")


def test_empty_sample_format():
    metrics = compute_metrics([])
    assert metrics.sample_size == 0
    assert metrics.pass_count == 0
    assert metrics.format("Rank").endswith(" ------     Rank")


def test_failing_proportion_is_flagged():
    metrics = compute_metrics([0.001] * 50 + [0.5] * 50)
    assert metrics.pass_count == 50
    assert not metrics.proportion_ok
    assert "50/100 *  Serial" in metrics.format("Serial")


def test_random_excursion_skips_zero_values():
    metrics = compute_metrics([0.0, 0.5, 0.005], random_excursion=True)
    assert metrics.sample_size == 2
    assert metrics.pass_count == 1


def test_one_goes_into_last_bin():
    metrics = compute_metrics([1.0])
    assert metrics.freq_per_bin[9] == 1


def test_out_of_range_value():
    with pytest.raises(ValueError):
        compute_metrics([1.5])


def test_minimum_pass_rate():
    assert minimum_pass_rate(100) == 96
    assert minimum_pass_rate(0) is None
    with pytest.raises(ValueError):
        minimum_pass_rate(-1)


def test_partition_round_trip():
    values = [0.1, 0.2, 0.3, 0.4, 0.5, 0.6]
    parts = partition_results(values, 2)
    assert parts == [[0.1, 0.3, 0.5], [0.2, 0.4, 0.6]]
    rebuilt = [v for group in zip(*parts) for v in group]
    assert rebuilt == values


def test_partition_uneven():
    with pytest.raises(ValueError):
        partition_results([0.1, 0.2, 0.3], 2)
    with pytest.raises(ValueError):
        partition_results([0.1], 0)


@given(st.integers(1, 20), st.integers(0, 10))
def test_partition_sizes(files, sequences):
    values = [float(i) for i in range(files * sequences)]
    parts = partition_results(values, files)
    assert len(parts) == files
    assert all(len(p) == sequences for p in parts)


def test_summary_footer_rates():
    text = summary_footer(100, 0, True, True)
    assert f"approximately = {minimum_pass_rate(100)} for a" in text
    assert "sample size = 100 binary sequences." in text
    assert "random excursion (variant) test is undefined." in text
    assert text.rstrip().endswith("-")


def test_summary_footer_without_sections():
    text = summary_footer(0, 0, False, False)
    assert "minimum pass rate" not in text
    assert "MAPLE program" in text


@given(st.lists(st.floats(0.0, 1.0), max_size=200))
def test_metrics_invariants(values):
    metrics = compute_metrics(values)
    assert sum(metrics.freq_per_bin) == len(values)
    assert 0 <= metrics.pass_count <= metrics.sample_size
    assert metrics.threshold_min <= metrics.threshold_max