import pandas as pd

from analyzers.report import TimeBucket, TimeSeries

DAY = 'day'
MONTH = 'month'

# Spans up to this many days are bucketed per day, longer ones per month
DAILY_SPAN_LIMIT_DAYS = 60

PERIOD_FREQ = {DAY: 'D', MONTH: 'M'}


def choose_granularity(start, end, daily_span_limit=DAILY_SPAN_LIMIT_DAYS):
    span = (end.normalize() - start.normalize()).days
    return DAY if span <= daily_span_limit else MONTH


class TimeSeriesAnalyzer:
    """Buckets a measure over a date column into a gap-free chronological series"""

    def __init__(self, daily_span_limit=DAILY_SPAN_LIMIT_DAYS):
        self.daily_span_limit = daily_span_limit

    def analyze(self, date_column, timestamps, measures=None, measure_name=None):
        """
        Args:
            date_column: name of the date column
            timestamps: row-aligned Timestamps (None where unparseable)
            measures: row-aligned numbers; None means count rows per bucket
            measure_name: label recorded on the series

        Returns:
            TimeSeries, or None when no row has a valid date
        """
        valid = [stamp for stamp in timestamps if stamp is not None]
        if not valid:
            return None

        granularity = choose_granularity(min(valid), max(valid), self.daily_span_limit)
        freq = PERIOD_FREQ[granularity]
        counting = measures is None
        if counting:
            measures = [1.0] * len(timestamps)

        totals = {}
        for stamp, measure in zip(timestamps, measures):
            if stamp is None:
                continue
            period = stamp.to_period(freq)
            # Missing measures contribute 0 but still mark the bucket
            totals[period] = totals.get(period, 0.0) + (measure if measure is not None else 0.0)

        periods = pd.period_range(min(totals), max(totals), freq=freq)
        data = [TimeBucket(time=str(period), value=totals.get(period, 0.0)) for period in periods]

        return TimeSeries(
            date_column=date_column,
            granularity=granularity,
            data=data,
            measure=None if counting else measure_name,
            aggregation='count' if counting else 'sum',
        )


def build_time_series(timestamps, measures=None, date_column='date', measure_name=None,
                      daily_span_limit=DAILY_SPAN_LIMIT_DAYS):
    return TimeSeriesAnalyzer(daily_span_limit).analyze(date_column, timestamps, measures, measure_name)
