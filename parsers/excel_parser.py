import logging

import pandas as pd

from .file_parser import BaseParser


class ExcelParser(BaseParser):
    """Parser for Excel files (.xls and .xlsx)"""

    def parse(self, file_path):
        """Parse Excel file and return the largest non-empty sheet as a DataFrame"""
        try:
            sheets = pd.read_excel(file_path, sheet_name=None)
        except Exception as e:
            logging.error(f"Error parsing Excel file {file_path}: {str(e)}")
            raise ValueError(f"Failed to parse Excel file: {str(e)}") from e

        cleaned = {}
        for sheet_name, df in sheets.items():
            if df.empty:
                logging.debug(f"Skipping empty sheet '{sheet_name}'")
                continue
            cleaned[sheet_name] = self._clean_dataframe(df)

        if not cleaned:
            return pd.DataFrame()

        sheet_name, largest = max(cleaned.items(), key=lambda item: len(item[1]))
        logging.info(f"Using sheet '{sheet_name}' with {len(largest)} rows")
        return largest
