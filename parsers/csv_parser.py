import logging

import pandas as pd

from .file_parser import BaseParser

ENCODINGS = ['utf-8', 'latin-1', 'cp1252']
SEPARATORS = [',', ';', '\t', '|']


class CSVParser(BaseParser):
    """Parser for CSV files"""

    def parse(self, file_path):
        """Parse CSV file and return pandas DataFrame"""
        for encoding in ENCODINGS:
            for sep in SEPARATORS:
                try:
                    df = pd.read_csv(file_path, encoding=encoding, sep=sep)
                except UnicodeDecodeError:
                    break
                except (pd.errors.ParserError, pd.errors.EmptyDataError):
                    continue

                # A wrong separator leaves everything in one column
                if len(df.columns) > 1:
                    logging.info(f"Parsed CSV with encoding={encoding}, separator='{sep}'")
                    return self._clean_dataframe(df)

        try:
            df = pd.read_csv(file_path, encoding='latin-1')
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except Exception as e:
            logging.error(f"Error parsing CSV file {file_path}: {str(e)}")
            raise ValueError(f"Failed to parse CSV file: {str(e)}") from e

        return self._clean_dataframe(df)
