import logging
from abc import ABC, abstractmethod

import pandas as pd

NULL_SPELLINGS = ['nan', 'NaN', 'NULL', 'null', '', 'N/A', 'n/a', 'None']


class BaseParser(ABC):
    """Abstract base class for spreadsheet parsers"""

    @abstractmethod
    def parse(self, file_path):
        """Parse file and return pandas DataFrame"""
        pass

    def _clean_dataframe(self, df):
        """Drop empty rows/columns, strip text cells and normalise null spellings"""
        df = df.dropna(how='all').dropna(axis=1, how='all')

        df.columns = [
            f'Column_{i}' if str(col).startswith('Unnamed:') else str(col).strip()
            for i, col in enumerate(df.columns)
        ]

        for col in df.select_dtypes(include=['object']).columns:
            df[col] = df[col].map(lambda v: v.strip() if isinstance(v, str) else v)

        df = df.replace(NULL_SPELLINGS, pd.NA)
        logging.debug(f"Cleaned frame: {len(df)} rows x {len(df.columns)} columns")
        return df


class FileParserFactory:
    """Factory class to get appropriate parser for file type"""

    def __init__(self):
        from .csv_parser import CSVParser
        from .excel_parser import ExcelParser

        self.parsers = {
            'csv': CSVParser(),
            'xls': ExcelParser(),
            'xlsx': ExcelParser(),
        }

    @property
    def supported_types(self):
        return set(self.parsers)

    def get_parser(self, file_type):
        """Get parser for specific file type"""
        parser = self.parsers.get(file_type.lower())
        if not parser:
            raise ValueError(f"Unsupported file type: {file_type}")
        return parser
