import logging
import re
from dataclasses import dataclass, field
from typing import Any, List

from analyzers.report import CATEGORICAL, DATETIME, IDENTIFIER, NUMERIC
from utils.value_parsing import is_empty, normalize_label, to_number, to_timestamp

NUMERIC_THRESHOLD = 0.9
DATETIME_THRESHOLD = 0.8


@dataclass
class ColumnClassification:
    """Inferred kind of a column plus its row-aligned cleaned values"""
    name: str
    kind: str
    values: List[Any] = field(default_factory=list)
    non_empty_count: int = 0
    valid_count: int = 0
    key_like: bool = False

    @property
    def invalid_count(self):
        return len(self.values) - self.valid_count


class ColumnClassifier:
    """Decides whether a column is numeric, datetime, identifier or categorical"""

    def __init__(self, numeric_threshold=NUMERIC_THRESHOLD, datetime_threshold=DATETIME_THRESHOLD):
        self.numeric_threshold = numeric_threshold
        self.datetime_threshold = datetime_threshold

        self.date_name_pattern = re.compile(r'date|time', re.IGNORECASE)

        self.id_name_patterns = [
            re.compile(r'^(id|uuid|guid|key)$', re.IGNORECASE),
            re.compile(r'[_\s-](id|key)$', re.IGNORECASE),
            re.compile(r'[a-z](ID|Id)$'),  # CustomerID, orderId
        ]

    def classify_dataset(self, dataset):
        """Classify every column of a dataset, keyed by column name"""
        results = {}
        for column in dataset.headers:
            results[column] = self.classify(column, dataset.column_values(column))
            logging.debug(
                f"Column '{column}' classified as {results[column].kind} "
                f"({results[column].valid_count}/{len(results[column].values)} valid)"
            )
        return results

    def classify(self, name, raw_values):
        """Classify one column from its raw values"""
        raw_values = list(raw_values)
        non_empty = [value for value in raw_values if not is_empty(value)]
        key_like = self.looks_like_key(name)

        if not non_empty:
            kind = IDENTIFIER if key_like else CATEGORICAL
            return ColumnClassification(name, kind, [None] * len(raw_values), 0, 0, key_like)

        if self.date_name_pattern.search(name):
            dates = [to_timestamp(value) for value in raw_values]
            valid = sum(1 for value in dates if value is not None)
            if valid / len(non_empty) >= self.datetime_threshold:
                return ColumnClassification(name, DATETIME, dates, len(non_empty), valid, key_like)

        numbers = [to_number(value) for value in raw_values]
        valid = sum(1 for value in numbers if value is not None)
        if valid / len(non_empty) >= self.numeric_threshold:
            return ColumnClassification(name, NUMERIC, numbers, len(non_empty), valid, key_like)

        labels = [normalize_label(value) for value in raw_values]
        kind = IDENTIFIER if key_like else CATEGORICAL
        return ColumnClassification(name, kind, labels, len(non_empty), len(non_empty), key_like)

    def looks_like_key(self, name):
        return any(pattern.search(name.strip()) for pattern in self.id_name_patterns)


def classify_column(name, values):
    return ColumnClassifier().classify(name, values)
