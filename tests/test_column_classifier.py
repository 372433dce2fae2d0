"""Tests for column kind classification."""

from datetime import datetime

import pandas as pd

from analyzers.column_classifier import ColumnClassifier, classify_column
from analyzers.report import CATEGORICAL, DATETIME, IDENTIFIER, NUMERIC


def test_numeric_strings_are_numeric():
    result = classify_column('Amount', ['1', '2.5', ' 3 ', '$1,200'])

    assert result.kind == NUMERIC
    assert result.values == [1.0, 2.5, 3.0, 1200.0]
    assert result.invalid_count == 0


def test_numeric_threshold_is_ninety_percent():
    nine_of_ten = [str(i) for i in range(9)] + ['n/a-ish']
    eight_of_ten = [str(i) for i in range(8)] + ['x', 'y']

    assert classify_column('Score', nine_of_ten).kind == NUMERIC
    assert classify_column('Score', eight_of_ten).kind == CATEGORICAL


def test_unparseable_cells_become_none_in_numeric_column():
    values = [str(i) for i in range(9)] + ['oops']
    result = classify_column('Score', values)

    assert result.values[-1] is None
    assert result.valid_count == 9
    assert result.invalid_count == 1


def test_empty_cells_do_not_count_against_threshold():
    result = classify_column('Sales', ['10', None, '', '20'])

    assert result.kind == NUMERIC
    assert result.non_empty_count == 2
    assert result.values == [10.0, None, None, 20.0]


def test_date_named_column_is_datetime():
    result = classify_column('OrderDate', ['2024-01-01', '2024-02-15', None])

    assert result.kind == DATETIME
    assert result.values[0] == pd.Timestamp('2024-01-01')
    assert result.values[2] is None


def test_date_serials_are_converted():
    result = classify_column('Date', [45292, 45293])

    assert result.kind == DATETIME
    assert result.values == [pd.Timestamp('2024-01-01'), pd.Timestamp('2024-01-02')]


def test_datetime_objects_are_accepted():
    result = classify_column('Timestamp', [datetime(2024, 5, 1, 12, 30)])

    assert result.kind == DATETIME
    assert result.values == [pd.Timestamp('2024-05-01 12:30')]


def test_date_name_with_unparseable_values_falls_through():
    result = classify_column('Date', ['soon', 'later', 'never'])

    assert result.kind == CATEGORICAL
    assert result.values == ['soon', 'later', 'never']


def test_dates_without_date_name_are_categorical():
    assert classify_column('Shipped', ['2024-01-01', '2024-01-02']).kind == CATEGORICAL


def test_key_like_names_are_identifiers():
    assert classify_column('CustomerID', ['C1', 'C2']).kind == IDENTIFIER
    assert classify_column('order_id', ['A-1', 'A-2']).kind == IDENTIFIER
    assert classify_column('uuid', ['x', 'y']).kind == IDENTIFIER


def test_numeric_identifier_names_stay_numeric():
    assert classify_column('CustomerID', [1, 2, 3]).kind == NUMERIC


def test_ordinary_names_are_not_key_like():
    classifier = ColumnClassifier()

    assert not classifier.looks_like_key('Valid')
    assert not classifier.looks_like_key('Region')
    assert classifier.looks_like_key('productId')


def test_all_empty_column():
    result = classify_column('Notes', [None, '', '  '])

    assert result.kind == CATEGORICAL
    assert result.values == [None, None, None]
    assert result.valid_count == 0


def test_categorical_labels_are_normalized():
    result = classify_column('Region', [' North', 'South ', 3.0])

    assert result.kind == CATEGORICAL
    assert result.values == ['North', 'South', '3']
