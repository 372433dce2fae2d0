import logging

import pandas as pd


class Dataset:
    """Parsed tabular input: ordered headers plus one mapping per row"""

    def __init__(self, headers, rows, total_rows=None):
        self.headers = [str(header) for header in headers]
        self.rows = list(rows)
        self.total_rows = len(self.rows) if total_rows is None else total_rows

        if self.total_rows != len(self.rows):
            logging.warning(
                f"Dataset declares {self.total_rows} rows but carries {len(self.rows)}; "
                f"using the actual row count"
            )
            self.total_rows = len(self.rows)

    @classmethod
    def from_dataframe(cls, df):
        """Build a dataset from a DataFrame, mapping NaN/NA to None"""
        if df is None:
            return cls([], [])

        headers = [str(col) for col in df.columns]
        frame = df.copy()
        frame.columns = headers
        frame = frame.astype(object).where(pd.notna(frame), None)
        rows = frame.to_dict(orient='records')
        return cls(headers, rows, len(rows))

    @classmethod
    def from_payload(cls, payload):
        """Build a dataset from the `{headers, rows, totalRows}` API shape"""
        return cls(
            payload.get('headers', []),
            payload.get('rows', []),
            payload.get('totalRows'),
        )

    def column_values(self, column):
        """Raw values of one column; rows missing the key yield None"""
        return [row.get(column) for row in self.rows]

    def __len__(self):
        return self.total_rows
