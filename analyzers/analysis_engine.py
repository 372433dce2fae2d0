import logging
from dataclasses import dataclass

import numpy as np

from analyzers.column_classifier import ColumnClassifier
from analyzers.correlation_analyzer import CorrelationAnalyzer
from analyzers.descriptive_stats import compute_date_range, compute_distribution, compute_numeric_stats
from analyzers.errors import InputTooLargeError, TransformFailure
from analyzers.grouping_analyzer import GroupingAnalyzer
from analyzers.outlier_analyzer import detect_outliers
from analyzers.report import (
    CATEGORICAL,
    DATETIME,
    IDENTIFIER,
    NUMERIC,
    AnalysisReport,
    CategoricalColumnProfile,
    DatetimeColumnProfile,
    NumericColumnProfile,
)
from analyzers.role_detector import detect_roles
from analyzers.time_series_analyzer import DAILY_SPAN_LIMIT_DAYS, TimeSeriesAnalyzer
from analyzers.trend_analyzer import TrendAnalyzer
from utils.parallel import TransformExecutor
from utils.value_parsing import normalize_label


@dataclass(frozen=True)
class AnalysisConfig:
    max_rows: int = 10000
    forecast_horizon: int = 3
    top_n: int = 3
    workers: int = 4
    daily_span_limit_days: int = DAILY_SPAN_LIMIT_DAYS

    @classmethod
    def from_mapping(cls, config):
        """Read ANALYSIS_* keys from a Flask-style config mapping"""
        return cls(
            max_rows=int(config.get('ANALYSIS_MAX_ROWS', cls.max_rows)),
            forecast_horizon=int(config.get('ANALYSIS_FORECAST_HORIZON', cls.forecast_horizon)),
            top_n=int(config.get('ANALYSIS_TOP_N', cls.top_n)),
            workers=int(config.get('ANALYSIS_WORKERS', cls.workers)),
            daily_span_limit_days=int(
                config.get('ANALYSIS_DAILY_SPAN_LIMIT_DAYS', cls.daily_span_limit_days)
            ),
        )


class AnalysisEngine:
    """Runs the full analysis of one dataset and assembles the report"""

    def __init__(self, config=None, executor=None):
        self.config = config or AnalysisConfig()
        self.executor = executor or TransformExecutor(max_workers=self.config.workers)
        self.classifier = ColumnClassifier()
        self.correlation_analyzer = CorrelationAnalyzer()
        self.grouping_analyzer = GroupingAnalyzer(top_n=self.config.top_n)
        self.time_series_analyzer = TimeSeriesAnalyzer(self.config.daily_span_limit_days)
        self.trend_analyzer = TrendAnalyzer(horizon=self.config.forecast_horizon)

    def validate(self, dataset):
        if dataset.total_rows > self.config.max_rows:
            raise InputTooLargeError(dataset.total_rows, self.config.max_rows)

    def analyze(self, dataset, overrides=None, aggregation='sum'):
        """
        Analyze a dataset.

        Args:
            dataset: Dataset to analyze (read only)
            overrides: optional {'key', 'measure', 'date'} column names
            aggregation: grouping aggregation, 'sum' by default

        Returns:
            AnalysisReport

        Raises:
            InputTooLargeError: the dataset exceeds the configured row limit
        """
        self.validate(dataset)

        if dataset.total_rows == 0:
            logging.info("Empty dataset; returning an empty report")
            return AnalysisReport()

        logging.info(f"Analyzing {dataset.total_rows} rows x {len(dataset.headers)} columns")
        warnings = []

        classifications = self.classifier.classify_dataset(dataset)
        columns = self._profile_columns(dataset, classifications, warnings)

        # Columns whose cleaning failed are left out of everything downstream
        numeric_values = {
            name: classifications[name].values
            for name, profile in columns.items()
            if profile.kind == NUMERIC and profile.stats is not None
        }
        correlations = self.correlation_analyzer.analyze(numeric_values)

        kinds = {
            name: (profile.kind if name in numeric_values or profile.kind != NUMERIC else None)
            for name, profile in columns.items()
        }
        repeated = [
            name for name, profile in columns.items()
            if profile.kind == CATEGORICAL and profile.distribution.unique_count < profile.distribution.total
        ]
        roles = detect_roles(kinds, repeated, self._clean_overrides(overrides, columns, warnings))

        measure_name, measure_values = self._resolve_measure(roles, numeric_values, warnings)

        time_series, trends = self._build_time_series(
            classifications, columns, measure_name, measure_values, warnings
        )

        grouping = None
        if roles.key_column and measure_values is not None:
            grouping = self.grouping_analyzer.analyze(
                roles.key_column,
                self._key_labels(dataset, classifications[roles.key_column]),
                measure_name,
                measure_values,
                aggregation,
            )
        else:
            logging.info("No key/measure pair found; skipping grouping")

        outliers = {}
        for name, values in numeric_values.items():
            summary = detect_outliers([value for value in values if value is not None])
            if summary is not None:
                outliers[name] = summary

        kpis = self._compute_kpis(roles, measure_name, measure_values, numeric_values, trends)

        return AnalysisReport(
            row_count=dataset.total_rows,
            columns=columns,
            correlations=correlations,
            time_series=time_series,
            trends=trends,
            grouping=grouping,
            outliers=outliers,
            kpis=kpis,
            warnings=warnings,
        )

    def _profile_columns(self, dataset, classifications, warnings):
        # Clean all numeric columns concurrently, then collect in header order
        pending = {
            name: self.executor.clean(dataset.column_values(name))
            for name, classification in classifications.items()
            if classification.kind == NUMERIC
        }

        columns = {}
        for name, classification in classifications.items():
            if classification.kind == NUMERIC:
                columns[name] = self._numeric_profile(name, classification, pending[name], warnings)
            elif classification.kind == DATETIME:
                columns[name] = DatetimeColumnProfile(
                    name=name,
                    kind=DATETIME,
                    invalid_count=classification.invalid_count,
                    date_range=compute_date_range(classification.values),
                )
            else:
                columns[name] = CategoricalColumnProfile(
                    name=name,
                    kind=classification.kind,
                    invalid_count=classification.invalid_count,
                    distribution=compute_distribution(classification.values),
                )

            excluded = classification.non_empty_count - classification.valid_count
            if excluded > 0:
                warnings.append(
                    f"Column '{name}': {excluded} value(s) could not be parsed and were excluded"
                )

        return columns

    def _numeric_profile(self, name, classification, future, warnings):
        try:
            cleaned = future.result()
        except TransformFailure as e:
            logging.warning(f"Statistics unavailable for '{name}': {str(e)}")
            warnings.append(f"Column '{name}': statistics unavailable ({str(e)})")
            return NumericColumnProfile(
                name=name,
                kind=NUMERIC,
                invalid_count=classification.invalid_count,
                stats=None,
                error=str(e),
            )

        return NumericColumnProfile(
            name=name,
            kind=NUMERIC,
            invalid_count=len(classification.values) - len(cleaned),
            stats=compute_numeric_stats(cleaned),
        )

    def _clean_overrides(self, overrides, columns, warnings):
        cleaned = {}
        for role, column in (overrides or {}).items():
            if not column:
                continue
            if column not in columns:
                warnings.append(f"Requested {role} column '{column}' does not exist; ignored")
                continue
            cleaned[role] = column
        return cleaned

    def _key_labels(self, dataset, classification):
        if classification.kind in (CATEGORICAL, IDENTIFIER):
            return classification.values
        # An overridden key on a numeric/date column groups by its raw text
        return [normalize_label(value) for value in dataset.column_values(classification.name)]

    def _resolve_measure(self, roles, numeric_values, warnings):
        """Row-aligned measure values, deriving quantity x unit price when needed"""
        if roles.measure_column is not None:
            if roles.measure_column not in numeric_values:
                warnings.append(f"Measure column '{roles.measure_column}' is not numeric; ignored")
                return None, None
            return roles.measure_column, numeric_values[roles.measure_column]

        if roles.has_derived_measure:
            name = f"{roles.quantity_column} * {roles.unit_price_column}"
            quantities = numeric_values[roles.quantity_column]
            prices = numeric_values[roles.unit_price_column]
            try:
                derived = self.executor.compute(quantities, prices, 'multiply').result()
            except TransformFailure as e:
                warnings.append(f"Could not derive measure {name}: {str(e)}")
                return None, None
            # A row without either input has no derived value
            derived = [
                value if quantity is not None and price is not None else None
                for value, quantity, price in zip(derived, quantities, prices)
            ]
            logging.info(f"Derived measure {name}")
            return name, derived

        return None, None

    def _build_time_series(self, classifications, columns, measure_name, measure_values, warnings):
        time_series = {}
        trends = {}

        for name, profile in columns.items():
            if profile.kind != DATETIME:
                continue

            series = self.time_series_analyzer.analyze(
                name, classifications[name].values, measure_values, measure_name
            )
            if series is None:
                warnings.append(f"Column '{name}': no valid dates for a time series")
                continue

            time_series[name] = series
            trends[name] = self.trend_analyzer.analyze(series.values)

        return time_series, trends

    def _compute_kpis(self, roles, measure_name, measure_values, numeric_values, trends):
        if measure_values is None:
            return {}

        valid = [value for value in measure_values if value is not None]
        kpis = {
            'measure': measure_name,
            'total': float(np.sum(valid)) if valid else 0.0,
            'average': float(np.mean(valid)) if valid else 0.0,
            'median': float(np.median(valid)) if valid else 0.0,
        }

        if roles.cost_column and roles.cost_column in numeric_values:
            try:
                profit = self.executor.compute(
                    measure_values, numeric_values[roles.cost_column], 'subtract'
                ).result()
                kpis['totalProfit'] = float(np.sum(profit))
            except TransformFailure as e:
                logging.warning(f"Profit KPI unavailable: {str(e)}")

        if roles.date_column in trends and trends[roles.date_column].forecast:
            kpis['forecastNextPeriod'] = trends[roles.date_column].forecast[0].y

        return kpis

    def shutdown(self):
        self.executor.shutdown()
