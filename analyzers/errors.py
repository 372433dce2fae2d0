class AnalysisError(Exception):
    """Base class for analysis failures"""


class InputTooLargeError(AnalysisError):
    """Dataset exceeds the configured row limit"""

    def __init__(self, row_count, limit):
        self.row_count = row_count
        self.limit = limit
        super().__init__(
            f"Dataset has {row_count:,} rows; the maximum for analysis is {limit:,}"
        )


class TransformFailure(AnalysisError):
    """A numeric transform task failed"""
