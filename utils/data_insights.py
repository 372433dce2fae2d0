from analyzers.correlation_analyzer import PAIR_SEPARATOR
from utils.category_insights import category_insights

SIGNIFICANT_CORRELATION = 0.3
STRONG_CORRELATION = 0.7


class DataInsights:
    """Turns a stored analysis report into human-readable observations"""

    @staticmethod
    def generate(report, category=None):
        """
        Build the list of insight sentences for a report dict (the JSON shape).
        Works on freshly computed and on stored reports alike. A business
        category (finance, healthcare, ...) adds its own KPI sentences.
        """
        insights = []

        row_count = report.get('rowCount', 0)
        columns = report.get('columns', {})
        if not row_count:
            return ["Dataset contains no rows"]

        insights.append(f"Dataset contains {row_count:,} rows across {len(columns)} columns")
        insights.extend(DataInsights.column_insights(columns))
        insights.extend(DataInsights.correlation_insights(report.get('correlations', {})))
        insights.extend(DataInsights.grouping_insights(report.get('grouping')))
        insights.extend(DataInsights.trend_insights(report.get('trends', {}), report.get('timeSeries', {})))
        insights.extend(DataInsights.kpi_insights(report.get('kpis', {})))

        for name, summary in report.get('outliers', {}).items():
            if summary.get('count'):
                insights.append(f"Column '{name}' has {summary['count']} outlier value(s) outside the IQR fences")

        insights.extend(category_insights(report, category))
        return insights

    @staticmethod
    def column_insights(columns):
        """Date coverage and missing or unparseable values per column"""
        insights = []
        for name, profile in columns.items():
            date_range = profile.get('dateRange')
            if date_range and date_range.get('validCount'):
                insights.append(
                    f"'{name}' covers {date_range['start']} to {date_range['end']} "
                    f"({date_range['spanDays']} days)"
                )
            if profile.get('invalidCount'):
                insights.append(f"Column '{name}' has {profile['invalidCount']} empty or invalid value(s)")
        return insights

    @staticmethod
    def significant_correlations(correlations, threshold=SIGNIFICANT_CORRELATION):
        """Correlation pairs whose absolute value exceeds the display threshold, strongest first"""
        pairs = []
        for key, value in correlations.items():
            if value is None or abs(value) <= threshold:
                continue
            column1, _, column2 = key.partition(PAIR_SEPARATOR)
            pairs.append({'column1': column1, 'column2': column2, 'correlation': value})
        return sorted(pairs, key=lambda pair: -abs(pair['correlation']))

    @staticmethod
    def correlation_insights(correlations):
        insights = []
        for pair in DataInsights.significant_correlations(correlations):
            value = pair['correlation']
            strength = 'Strong' if abs(value) > STRONG_CORRELATION else 'Moderate'
            direction = 'positive' if value > 0 else 'negative'
            insights.append(
                f"{strength} {direction} correlation between '{pair['column1']}' and "
                f"'{pair['column2']}' ({value:.2f})"
            )
        return insights

    @staticmethod
    def grouping_insights(grouping):
        if not grouping or not grouping.get('highPerformers'):
            return []

        best = grouping['highPerformers'][0]
        insights = [
            f"Top {grouping['key']} by {grouping['measure']}: {best['key']} ({best['total']:,.2f})"
        ]
        if grouping.get('lowPerformers') and len(grouping.get('totals', [])) > 1:
            worst = grouping['lowPerformers'][0]
            insights.append(
                f"Lowest {grouping['key']} by {grouping['measure']}: {worst['key']} ({worst['total']:,.2f})"
            )
        return insights

    @staticmethod
    def trend_insights(trends, time_series):
        insights = []
        for column, trend in trends.items():
            series = time_series.get(column, {})
            granularity = series.get('bucketGranularity', 'period')
            direction = trend.get('direction', 'flat')
            insights.append(
                f"'{column}' series is {direction} by {trend['slope']:,.2f} per {granularity} "
                f"(R² {trend['r2']:.2f})"
            )
        return insights

    @staticmethod
    def kpi_insights(kpis):
        if not kpis:
            return []

        insights = [f"Total {kpis['measure']}: {kpis['total']:,.2f} (average {kpis['average']:,.2f})"]
        if 'totalProfit' in kpis:
            insights.append(f"Estimated total profit: {kpis['totalProfit']:,.2f}")
        if 'forecastNextPeriod' in kpis:
            insights.append(f"Forecast for next period: {kpis['forecastNextPeriod']:,.2f}")
        return insights
