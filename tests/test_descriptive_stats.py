"""Tests for numeric statistics, distributions and date ranges."""

import math

import pandas as pd
import pytest

from analyzers.descriptive_stats import compute_date_range, compute_distribution, compute_numeric_stats
from analyzers.report import NumericStats


def test_price_column_stats():
    stats = compute_numeric_stats([10, 20, 30, 40])

    assert stats.count == 4
    assert stats.sum == 100
    assert stats.mean == 25
    assert stats.median == 25
    assert stats.std == pytest.approx(math.sqrt(125))
    assert stats.min == 10
    assert stats.max == 40


def test_mode_ties_go_to_first_seen_value():
    assert compute_numeric_stats([3, 1, 1, 3, 2]).mode == 3
    assert compute_numeric_stats([5, 7, 7]).mode == 7


def test_single_value_has_zero_spread():
    stats = compute_numeric_stats([42])

    assert stats.std == 0
    assert stats.min == stats.max == stats.mean == stats.median == 42


def test_empty_input_gives_zero_record():
    assert compute_numeric_stats([]) == NumericStats()


def test_bounds_hold():
    stats = compute_numeric_stats([-4.5, 0, 12, 3.25, 7])

    assert stats.min <= stats.mean <= stats.max
    assert stats.min <= stats.median <= stats.max
    assert stats.std >= 0


def test_distribution_orders_by_count():
    distribution = compute_distribution(['A', 'B', 'A', 'C', 'A'])

    assert [entry.value for entry in distribution.entries] == ['A', 'B', 'C']
    assert [entry.count for entry in distribution.entries] == [3, 1, 1]
    assert distribution.entries[0].percentage == 60.0
    assert distribution.total == 5
    assert distribution.unique_count == 3


def test_distribution_skips_missing_labels():
    distribution = compute_distribution(['x', None, 'y', None])

    assert distribution.total == 2
    assert sum(entry.count for entry in distribution.entries) == distribution.total
    assert [entry.percentage for entry in distribution.entries] == [50.0, 50.0]


def test_distribution_top():
    distribution = compute_distribution(['a', 'b', 'b', 'c', 'c', 'c'])

    assert [entry.value for entry in distribution.top(2)] == ['c', 'b']


def test_date_range():
    stamps = [pd.Timestamp('2024-03-05'), None, pd.Timestamp('2024-03-01')]
    date_range = compute_date_range(stamps)

    assert date_range.start == '2024-03-01'
    assert date_range.end == '2024-03-05'
    assert date_range.span_days == 4
    assert date_range.valid_count == 2


def test_date_range_without_dates():
    assert compute_date_range([None]).valid_count == 0


def test_constant_inexact_values_keep_mean_within_bounds():
    stats = compute_numeric_stats([0.1, 0.1, 0.1])

    assert stats.min <= stats.mean <= stats.max
    assert stats.mean == 0.1
    assert stats.std == 0.0
