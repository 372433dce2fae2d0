import logging
from itertools import combinations

import numpy as np
from scipy import stats

PAIR_SEPARATOR = '|'


def pair_key(column1, column2):
    return f"{column1}{PAIR_SEPARATOR}{column2}"


def pearson_correlation(values1, values2):
    """
    Pearson coefficient of two row-aligned arrays.

    Rows where either side is None are dropped. Returns None when fewer than
    two pairs remain or either side is constant, since the coefficient is
    undefined there.
    """
    pairs = [(a, b) for a, b in zip(values1, values2) if a is not None and b is not None]
    if len(pairs) < 2:
        return None

    x = np.array([a for a, _ in pairs], dtype=float)
    y = np.array([b for _, b in pairs], dtype=float)

    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return None

    coefficient = stats.pearsonr(x, y)[0]
    if np.isnan(coefficient):
        return None
    return round(float(np.clip(coefficient, -1.0, 1.0)), 4)


class CorrelationAnalyzer:
    """Pairwise correlations between numeric columns"""

    def analyze(self, numeric_columns):
        """
        Args:
            numeric_columns: ordered mapping of column name -> row-aligned values

        Returns:
            dict of "colA|colB" -> coefficient for every defined pair
        """
        correlations = {}

        for column1, column2 in combinations(numeric_columns, 2):
            coefficient = pearson_correlation(numeric_columns[column1], numeric_columns[column2])
            if coefficient is None:
                logging.debug(f"Correlation undefined for {column1} vs {column2}")
                continue
            correlations[pair_key(column1, column2)] = coefficient

        return correlations


def lookup_correlation(correlations, column1, column2):
    """Order-independent read of a correlation mapping"""
    value = correlations.get(pair_key(column1, column2))
    if value is None:
        value = correlations.get(pair_key(column2, column1))
    return value


def compute_correlations(numeric_columns):
    return CorrelationAnalyzer().analyze(numeric_columns)
