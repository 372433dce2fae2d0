"""Tests for the end-to-end dataset analysis."""

import copy
import math
from concurrent.futures import Future

import pytest

from analyzers.analysis_engine import AnalysisConfig, AnalysisEngine
from analyzers.dataset import Dataset
from analyzers.errors import InputTooLargeError, TransformFailure
from analyzers.report import CATEGORICAL, DATETIME, NUMERIC
from utils.parallel import TransformExecutor

from conftest import make_dataset


class FailingCleanExecutor(TransformExecutor):
    """Executor whose clean tasks always fail"""

    def clean(self, values):
        future = Future()
        future.set_exception(TransformFailure('worker crashed'))
        return future


def test_numeric_column_profile(engine):
    report = engine.analyze(make_dataset({'Price': [10, 20, 30, 40]}))
    stats = report.columns['Price'].stats

    assert report.columns['Price'].kind == NUMERIC
    assert (stats.count, stats.sum, stats.mean, stats.median) == (4, 100, 25, 25)
    assert stats.std == pytest.approx(math.sqrt(125))
    assert (stats.min, stats.max) == (10, 40)


def test_grouping_by_category(engine, grouping_dataset):
    report = engine.analyze(grouping_dataset)
    grouping = report.to_dict()['grouping']

    assert grouping['key'] == 'Category'
    assert grouping['measure'] == 'Sales'
    assert {group['key']: group['total'] for group in grouping['totals']} == {'A': 35, 'B': 20, 'C': 5}
    assert grouping['highPerformers'][0] == {'key': 'A', 'total': 35}


def test_correlation_of_perfectly_related_columns(engine):
    report = engine.analyze(make_dataset({'X': [1, 2, 3, 4], 'Y': [2, 4, 6, 8]}))

    assert report.correlations == {'X|Y': 1.0}


def test_daily_time_series(engine, daily_dataset):
    report = engine.analyze(daily_dataset)
    series = report.to_dict()['timeSeries']['Date']

    assert report.columns['Date'].kind == DATETIME
    assert series['bucketGranularity'] == 'day'
    assert series['data'] == [
        {'time': '2024-01-01', 'value': 10},
        {'time': '2024-01-02', 'value': 10},
    ]
    assert 'Date' in report.trends


def test_too_many_rows(engine):
    dataset = make_dataset({'Sales': [1] * 10001})

    with pytest.raises(InputTooLargeError) as exc_info:
        engine.analyze(dataset)

    assert exc_info.value.row_count == 10001
    assert exc_info.value.limit == 10000


def test_row_limit_is_configurable():
    small_engine = AnalysisEngine(AnalysisConfig(max_rows=2))
    try:
        with pytest.raises(InputTooLargeError):
            small_engine.analyze(make_dataset({'Sales': [1, 2, 3]}))
        assert small_engine.analyze(make_dataset({'Sales': [1, 2]})).row_count == 2
    finally:
        small_engine.shutdown()


def test_empty_dataset(engine):
    report = engine.analyze(Dataset(['Sales', 'Region'], []))
    result = report.to_dict()

    assert result['columns'] == {}
    assert result['correlations'] == {}
    assert result['timeSeries'] == {}
    assert result['grouping'] is None


def test_analysis_is_repeatable_and_read_only(engine, retail_dataset):
    rows_before = copy.deepcopy(retail_dataset.rows)

    first = engine.analyze(retail_dataset).to_dict()
    second = engine.analyze(retail_dataset).to_dict()

    assert first == second
    assert retail_dataset.rows == rows_before


def test_numeric_stats_are_bounded(engine, retail_dataset):
    report = engine.analyze(retail_dataset)

    for name in report.columns_of_kind(NUMERIC):
        stats = report.columns[name].stats
        assert stats.min <= stats.mean <= stats.max
        assert stats.std >= 0


def test_derived_sales_measure(engine, retail_dataset):
    report = engine.analyze(retail_dataset)
    totals = {group.key: group.total for group in report.grouping.totals}

    assert report.grouping.key == 'Product'
    assert report.grouping.measure == 'Quantity * UnitPrice'
    assert totals == pytest.approx({'Pen': 15.0, 'Book': 36.0, 'Lamp': 30.0})
    assert [group.key for group in report.grouping.high_performers] == ['Book', 'Lamp', 'Pen']


def test_retail_kpis(engine, retail_dataset):
    kpis = engine.analyze(retail_dataset).kpis

    assert kpis['measure'] == 'Quantity * UnitPrice'
    assert kpis['total'] == pytest.approx(81.0)
    assert kpis['totalProfit'] == pytest.approx(27.0)
    assert 'forecastNextPeriod' in kpis


def test_derived_measure_drives_time_series(engine, retail_dataset):
    series = engine.analyze(retail_dataset).time_series['OrderDate']

    assert series.measure == 'Quantity * UnitPrice'
    assert series.values == pytest.approx([3.0, 16.5, 0.0, 30.0, 31.5])


def test_date_column_without_measure_counts_rows(engine):
    report = engine.analyze(make_dataset({
        'Date': ['2024-01-01', '2024-01-01', '2024-01-02'],
        'Note': ['a', 'b', 'c'],
    }))
    series = report.time_series['Date']

    assert series.aggregation == 'count'
    assert series.values == [2, 1]


def test_unknown_override_is_reported(engine, grouping_dataset):
    report = engine.analyze(grouping_dataset, overrides={'key': 'Nope'})

    assert report.grouping.key == 'Category'
    assert any("'Nope' does not exist" in warning for warning in report.warnings)


def test_non_numeric_measure_override_is_ignored(engine, grouping_dataset):
    report = engine.analyze(grouping_dataset, overrides={'measure': 'Category'})

    assert report.grouping is None
    assert any("is not numeric" in warning for warning in report.warnings)


def test_numeric_key_override_groups_by_label(engine):
    dataset = make_dataset({'Store': [1, 2, 1, 2, 1], 'Sales': [10, 20, 10, 5, 15]})
    report = engine.analyze(dataset, overrides={'key': 'Store'})

    assert {group.key: group.total for group in report.grouping.totals} == {'1': 35, '2': 25}


def test_grouping_aggregation_is_selectable(engine, grouping_dataset):
    report = engine.analyze(grouping_dataset, aggregation='mean')
    totals = {group.key: group.total for group in report.grouping.totals}

    assert report.grouping.aggregation == 'mean'
    assert totals['A'] == pytest.approx(35 / 3)


def test_unparseable_values_produce_a_warning(engine):
    values = [str(i) for i in range(1, 10)] + ['n/a?']
    report = engine.analyze(make_dataset({'Sales': values}))

    assert report.columns['Sales'].invalid_count == 1
    assert report.columns['Sales'].stats.count == 9
    assert any("'Sales'" in warning for warning in report.warnings)


def test_failed_clean_leaves_column_without_stats(grouping_dataset):
    failing_engine = AnalysisEngine(executor=FailingCleanExecutor(max_workers=1))
    try:
        report = failing_engine.analyze(grouping_dataset)
    finally:
        failing_engine.shutdown()

    sales = report.to_dict()['columns']['Sales']
    assert sales['stats'] is None
    assert sales['error'] == 'worker crashed'
    assert report.columns['Category'].kind == CATEGORICAL
    assert report.grouping is None
    assert report.correlations == {}


def test_report_shape(engine, retail_dataset):
    result = engine.analyze(retail_dataset).to_dict()

    assert result['rowCount'] == 6
    assert result['columnCount'] == 5
    assert result['columns']['Product']['distribution'][0] == {'value': 'Pen', 'count': 3, 'percentage': 50.0}
    assert result['columns']['OrderDate']['dateRange']['spanDays'] == 4
    assert set(result['trends']['OrderDate']) == {'slope', 'intercept', 'r2', 'direction', 'forecast'}
