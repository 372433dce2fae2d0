"""Tests for command line analysis of local files."""

import json

import pytest

from analysis_exporter import AnalysisExporter, main

from conftest import SALES_CSV


@pytest.fixture
def sales_csv(tmp_path):
    path = tmp_path / 'sales.csv'
    path.write_text(SALES_CSV, encoding='utf-8')
    return str(path)


def test_analyze_file_includes_insights(sales_csv):
    exporter = AnalysisExporter()
    try:
        results = exporter.analyze_file(sales_csv)
    finally:
        exporter.close()

    assert results['rowCount'] == 5
    assert results['grouping']['highPerformers'][0]['key'] == 'A'
    assert results['insights'][0] == "Dataset contains 5 rows across 3 columns"


def test_main_writes_json(tmp_path, sales_csv, capsys):
    output = tmp_path / 'out.json'

    assert main([sales_csv, '-o', str(output), '--aggregation', 'max']) == 0

    with open(output, encoding='utf-8') as f:
        results = json.load(f)
    assert results[sales_csv]['grouping']['aggregation'] == 'max'
    assert 'Analysis results saved' in capsys.readouterr().out


def test_main_applies_overrides(tmp_path, sales_csv):
    output = tmp_path / 'out.json'

    main([sales_csv, '-o', str(output), '--key', 'Date'])

    with open(output, encoding='utf-8') as f:
        grouping = json.load(f)[sales_csv]['grouping']
    assert grouping['key'] == 'Date'
    assert [group['key'] for group in grouping['totals']] == ['2024-01-01', '2024-01-02', '2024-01-03']


def test_main_adds_category_insights(tmp_path, sales_csv):
    output = tmp_path / 'out.json'

    main([sales_csv, '-o', str(output), '--category', 'finance'])

    with open(output, encoding='utf-8') as f:
        insights = json.load(f)[sales_csv]['insights']
    assert "Only revenue data available; no expense analysis" in insights
