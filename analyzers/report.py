"""
Typed records making up an analysis report.

Each column kind has its own profile class so that consumers cannot read a
mean off a categorical column. `to_dict` produces the JSON shape the
dashboard consumes (camelCase keys).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

NUMERIC = 'numeric'
CATEGORICAL = 'categorical'
DATETIME = 'datetime'
IDENTIFIER = 'identifier'

COLUMN_KINDS = (NUMERIC, CATEGORICAL, DATETIME, IDENTIFIER)


@dataclass(frozen=True)
class NumericStats:
    count: int = 0
    sum: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    mode: float = 0.0
    std: float = 0.0
    min: float = 0.0
    max: float = 0.0

    def to_dict(self):
        return {
            'count': self.count,
            'sum': self.sum,
            'mean': self.mean,
            'median': self.median,
            'mode': self.mode,
            'std': self.std,
            'min': self.min,
            'max': self.max,
        }


@dataclass(frozen=True)
class DistributionEntry:
    value: str
    count: int
    percentage: float

    def to_dict(self):
        return {'value': self.value, 'count': self.count, 'percentage': self.percentage}


@dataclass(frozen=True)
class Distribution:
    entries: List[DistributionEntry] = field(default_factory=list)
    total: int = 0

    @property
    def unique_count(self):
        return len(self.entries)

    def top(self, n):
        return self.entries[:n]


@dataclass(frozen=True)
class DateRange:
    start: Optional[str] = None
    end: Optional[str] = None
    span_days: int = 0
    valid_count: int = 0

    def to_dict(self):
        return {
            'start': self.start,
            'end': self.end,
            'spanDays': self.span_days,
            'validCount': self.valid_count,
        }


@dataclass(frozen=True)
class ColumnProfile:
    name: str
    kind: str
    invalid_count: int = 0

    def to_dict(self):
        return {'kind': self.kind, 'invalidCount': self.invalid_count}


@dataclass(frozen=True)
class NumericColumnProfile(ColumnProfile):
    stats: Optional[NumericStats] = None
    error: Optional[str] = None

    def to_dict(self):
        result = super().to_dict()
        result['stats'] = self.stats.to_dict() if self.stats is not None else None
        if self.error:
            result['error'] = self.error
        return result


@dataclass(frozen=True)
class CategoricalColumnProfile(ColumnProfile):
    distribution: Distribution = field(default_factory=Distribution)

    @property
    def is_identifier(self):
        return self.kind == IDENTIFIER

    def to_dict(self):
        result = super().to_dict()
        result['isIdentifier'] = self.is_identifier
        result['distribution'] = [entry.to_dict() for entry in self.distribution.entries]
        result['distributionTotal'] = self.distribution.total
        result['uniqueCount'] = self.distribution.unique_count
        return result


@dataclass(frozen=True)
class DatetimeColumnProfile(ColumnProfile):
    date_range: DateRange = field(default_factory=DateRange)

    def to_dict(self):
        result = super().to_dict()
        result['dateRange'] = self.date_range.to_dict()
        return result


@dataclass(frozen=True)
class TimeBucket:
    time: str
    value: float

    def to_dict(self):
        return {'time': self.time, 'value': self.value}


@dataclass(frozen=True)
class TimeSeries:
    date_column: str
    granularity: str
    data: List[TimeBucket] = field(default_factory=list)
    measure: Optional[str] = None
    aggregation: str = 'sum'

    @property
    def values(self):
        return [bucket.value for bucket in self.data]

    def to_dict(self):
        return {
            'bucketGranularity': self.granularity,
            'measure': self.measure,
            'aggregation': self.aggregation,
            'data': [bucket.to_dict() for bucket in self.data],
        }


@dataclass(frozen=True)
class ForecastPoint:
    x: int
    y: float

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class TrendRecord:
    slope: float = 0.0
    intercept: float = 0.0
    r2: float = 0.0
    forecast: List[ForecastPoint] = field(default_factory=list)

    @property
    def direction(self):
        if self.slope > 0:
            return 'increasing'
        if self.slope < 0:
            return 'decreasing'
        return 'flat'

    def to_dict(self):
        return {
            'slope': self.slope,
            'intercept': self.intercept,
            'r2': self.r2,
            'direction': self.direction,
            'forecast': [point.to_dict() for point in self.forecast],
        }


@dataclass(frozen=True)
class GroupTotal:
    key: str
    total: float

    def to_dict(self):
        return {'key': self.key, 'total': self.total}


@dataclass(frozen=True)
class GroupingResult:
    key: str
    measure: str
    totals: List[GroupTotal] = field(default_factory=list)
    high_performers: List[GroupTotal] = field(default_factory=list)
    low_performers: List[GroupTotal] = field(default_factory=list)
    aggregation: str = 'sum'

    def to_dict(self):
        return {
            'key': self.key,
            'measure': self.measure,
            'aggregation': self.aggregation,
            'totals': [group.to_dict() for group in self.totals],
            'highPerformers': [group.to_dict() for group in self.high_performers],
            'lowPerformers': [group.to_dict() for group in self.low_performers],
        }


@dataclass(frozen=True)
class OutlierSummary:
    count: int
    lower_bound: float
    upper_bound: float
    values: List[float] = field(default_factory=list)

    def to_dict(self):
        return {
            'count': self.count,
            'lowerBound': self.lower_bound,
            'upperBound': self.upper_bound,
            'values': list(self.values),
        }


@dataclass(frozen=True)
class AnalysisReport:
    row_count: int = 0
    columns: Dict[str, ColumnProfile] = field(default_factory=dict)
    correlations: Dict[str, float] = field(default_factory=dict)
    time_series: Dict[str, TimeSeries] = field(default_factory=dict)
    trends: Dict[str, TrendRecord] = field(default_factory=dict)
    grouping: Optional[GroupingResult] = None
    outliers: Dict[str, OutlierSummary] = field(default_factory=dict)
    kpis: Dict[str, float] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def columns_of_kind(self, kind):
        return [name for name, profile in self.columns.items() if profile.kind == kind]

    def to_dict(self):
        return {
            'rowCount': self.row_count,
            'columnCount': len(self.columns),
            'columns': {name: profile.to_dict() for name, profile in self.columns.items()},
            'correlations': dict(self.correlations),
            'timeSeries': {name: series.to_dict() for name, series in self.time_series.items()},
            'trends': {name: trend.to_dict() for name, trend in self.trends.items()},
            'grouping': self.grouping.to_dict() if self.grouping is not None else None,
            'outliers': {name: summary.to_dict() for name, summary in self.outliers.items()},
            'kpis': dict(self.kpis),
            'warnings': list(self.warnings),
        }
