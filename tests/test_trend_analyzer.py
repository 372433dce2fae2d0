"""Tests for linear trend fitting and forecasting."""

import pytest

from analyzers.trend_analyzer import TrendAnalyzer, fit_trend


def test_perfect_line():
    trend = TrendAnalyzer().analyze([1, 3, 5, 7])

    assert trend.slope == pytest.approx(2.0)
    assert trend.intercept == pytest.approx(1.0)
    assert trend.r2 == pytest.approx(1.0)
    assert trend.direction == 'increasing'


def test_forecast_continues_the_line():
    trend = TrendAnalyzer(horizon=3).analyze([1, 3, 5, 7])

    assert [point.x for point in trend.forecast] == [4, 5, 6]
    assert [point.y for point in trend.forecast] == pytest.approx([9.0, 11.0, 13.0])


def test_decreasing_series():
    trend = TrendAnalyzer().analyze([9, 6, 3])

    assert trend.slope == pytest.approx(-3.0)
    assert trend.direction == 'decreasing'


def test_r2_stays_in_unit_interval():
    trend = TrendAnalyzer().analyze([5, 1, 8, 2, 9, 3, 7])

    assert 0.0 <= trend.r2 <= 1.0


def test_single_point_is_flat():
    trend = TrendAnalyzer().analyze([5])

    assert trend.slope == 0.0
    assert trend.intercept == 5.0
    assert trend.r2 == 0.0
    assert trend.direction == 'flat'
    assert [point.y for point in trend.forecast] == [5.0, 5.0, 5.0]


def test_empty_series():
    trend = TrendAnalyzer(horizon=1).analyze([])

    assert trend.intercept == 0.0
    assert [(point.x, point.y) for point in trend.forecast] == [(0, 0.0)]


def test_fit_trend_horizon():
    trend = fit_trend([2, 4], horizon=5)

    assert len(trend.forecast) == 5
    assert trend.forecast[0].y == pytest.approx(6.0)
