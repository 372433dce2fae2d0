import logging

import numpy as np

from analyzers.report import GroupingResult, GroupTotal

AGGREGATIONS = ('sum', 'mean', 'median', 'min', 'max', 'count')


class GroupingAnalyzer:
    """Aggregates a measure per categorical key and ranks the groups"""

    def __init__(self, top_n=3):
        self.top_n = top_n

    def analyze(self, key_name, keys, measure_name, measures, aggregation='sum'):
        """
        Group row-aligned keys/measures.

        Rows with an empty key are skipped. With 'sum', a missing measure
        counts as 0; other aggregations only see valid measure values.
        Returns None when no row has a key.
        """
        if aggregation not in AGGREGATIONS:
            raise ValueError(f"Unsupported aggregation: {aggregation}")

        groups = {}
        for key, measure in zip(keys, measures):
            if key is None:
                continue
            bucket = groups.setdefault(key, [])
            if measure is not None:
                bucket.append(measure)

        if not groups:
            logging.warning(f"No keyed rows to group for {key_name} / {measure_name}")
            return None

        totals = [
            GroupTotal(key=key, total=self._aggregate(values, aggregation))
            for key, values in groups.items()
        ]

        # sorted() is stable, so ties keep first-seen order
        high = sorted(totals, key=lambda group: -group.total)[:self.top_n]
        low = sorted(totals, key=lambda group: group.total)[:self.top_n]

        return GroupingResult(
            key=key_name,
            measure=measure_name,
            totals=totals,
            high_performers=high,
            low_performers=low,
            aggregation=aggregation,
        )

    def _aggregate(self, values, aggregation):
        if aggregation == 'count':
            return float(len(values))
        if not values:
            return 0.0
        data = np.asarray(values, dtype=float)
        if aggregation == 'mean':
            return float(data.mean())
        if aggregation == 'median':
            return float(np.median(data))
        if aggregation == 'min':
            return float(data.min())
        if aggregation == 'max':
            return float(data.max())
        return float(data.sum())


def group_and_aggregate(keys, measures, key_name='key', measure_name='value', top_n=3, aggregation='sum'):
    """Functional form of GroupingAnalyzer.analyze"""
    return GroupingAnalyzer(top_n=top_n).analyze(key_name, keys, measure_name, measures, aggregation)
