import numpy as np
from sklearn.linear_model import LinearRegression
from sklearn.metrics import r2_score

from analyzers.report import ForecastPoint, TrendRecord


class TrendAnalyzer:
    """Ordinary least squares trend over an ordered series, with a short forecast"""

    def __init__(self, horizon=3):
        self.horizon = horizon

    def analyze(self, values):
        """
        Fit value = slope * index + intercept over indices 0..n-1.

        With fewer than two points no line can be fitted: slope is 0, the
        intercept is the mean and R² is 0.
        """
        y = np.asarray([float(value) for value in values], dtype=float)
        n = len(y)

        if n < 2:
            intercept = float(y.mean()) if n else 0.0
            return TrendRecord(
                slope=0.0,
                intercept=intercept,
                r2=0.0,
                forecast=self._project(0.0, intercept, n),
            )

        x = np.arange(n, dtype=float).reshape(-1, 1)
        model = LinearRegression().fit(x, y)
        slope = float(model.coef_[0])
        intercept = float(model.intercept_)

        r2 = float(r2_score(y, model.predict(x)))
        r2 = min(max(r2, 0.0), 1.0)

        return TrendRecord(
            slope=slope,
            intercept=intercept,
            r2=r2,
            forecast=self._project(slope, intercept, n),
        )

    def _project(self, slope, intercept, start):
        return [
            ForecastPoint(x=x, y=slope * x + intercept)
            for x in range(start, start + self.horizon)
        ]


def fit_trend(values, horizon=3):
    return TrendAnalyzer(horizon=horizon).analyze(values)
