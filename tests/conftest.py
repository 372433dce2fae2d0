"""Shared pytest fixtures for all tests."""

import pytest

from analyzers.analysis_engine import AnalysisConfig, AnalysisEngine
from analyzers.dataset import Dataset

SALES_CSV = (
    "Category,Sales,Date\n"
    "A,10,2024-01-01\n"
    "B,20,2024-01-02\n"
    "A,10,2024-01-01\n"
    "C,5,2024-01-03\n"
    "A,15,2024-01-02\n"
)


def make_dataset(columns):
    """Build a dataset from an ordered mapping of column name -> values."""
    headers = list(columns)
    length = len(next(iter(columns.values()))) if columns else 0
    rows = [{header: columns[header][i] for header in headers} for i in range(length)]
    return Dataset(headers, rows)


@pytest.fixture
def engine():
    """Analysis engine with default limits; the worker pool is shut down afterwards."""
    analysis_engine = AnalysisEngine(AnalysisConfig())
    yield analysis_engine
    analysis_engine.shutdown()


@pytest.fixture
def grouping_dataset():
    return make_dataset({
        'Category': ['A', 'B', 'A', 'C', 'A'],
        'Sales': [10, 20, 10, 5, 15],
    })


@pytest.fixture
def daily_dataset():
    return make_dataset({
        'Date': ['2024-01-01', '2024-01-02', '2024-01-01'],
        'Sales': [5, 10, 5],
    })


@pytest.fixture
def retail_dataset():
    """Quantity/unit price/cost columns without an explicit sales column."""
    return make_dataset({
        'Product': ['Pen', 'Book', 'Pen', 'Lamp', 'Book', 'Pen'],
        'Quantity': [2, 1, 3, 1, 2, 5],
        'UnitPrice': [1.5, 12.0, 1.5, 30.0, 12.0, 1.5],
        'Cost': [2.0, 8.0, 3.0, 20.0, 16.0, 5.0],
        'OrderDate': ['2024-03-01', '2024-03-02', '2024-03-02', '2024-03-04', '2024-03-05', '2024-03-05'],
    })


@pytest.fixture
def make_app(tmp_path):
    """Factory for Flask apps backed by a throwaway SQLite file and folders."""
    from app import create_app

    apps = []

    def _make_app(**overrides):
        config = {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / f'test_{len(apps)}.db'}",
            'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
            'EXPORT_FOLDER': str(tmp_path / 'exports'),
        }
        config.update(overrides)
        flask_app = create_app(config)
        apps.append(flask_app)
        return flask_app

    yield _make_app

    for flask_app in apps:
        flask_app.extensions['analysis_engine'].shutdown()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()
