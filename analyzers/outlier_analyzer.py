import numpy as np

from analyzers.report import OutlierSummary

MIN_OBSERVATIONS = 4
MAX_REPORTED_VALUES = 10


def detect_outliers(values):
    """IQR fence outliers (1.5 x IQR beyond Q1/Q3); None for too few values"""
    if len(values) < MIN_OBSERVATIONS:
        return None

    data = np.asarray(values, dtype=float)
    q1, q3 = np.percentile(data, [25, 75])
    iqr = q3 - q1
    lower_bound = float(q1 - 1.5 * iqr)
    upper_bound = float(q3 + 1.5 * iqr)

    outliers = [float(value) for value in data if value < lower_bound or value > upper_bound]
    return OutlierSummary(
        count=len(outliers),
        lower_bound=lower_bound,
        upper_bound=upper_bound,
        values=outliers[:MAX_REPORTED_VALUES],
    )
