"""Spreadsheet reader for company lists."""

import logging
from pathlib import Path
from typing import Iterator, Optional, Callable, Dict, Any, List

import pandas as pd

from site_resolver.core.exceptions import SpreadsheetError
from site_resolver.core.models import CompanyRecord, COMPANY_COLUMN_ALIASES


logger = logging.getLogger(__name__)

CSV_SUFFIXES = {'.csv'}
EXCEL_SUFFIXES = {'.xlsx'}
SUPPORTED_SUFFIXES = CSV_SUFFIXES | EXCEL_SUFFIXES


class SpreadsheetReader:
    """Read company names (plus pass-through columns) from CSV or Excel files."""

    def __init__(self, file_path: str):
        """Initialize the reader.

        Args:
            file_path: Path to a .csv or .xlsx file

        Raises:
            FileNotFoundError: If the file doesn't exist
            SpreadsheetError: If the file type is not supported
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"Spreadsheet not found: {file_path}")

        if self.file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise SpreadsheetError(
                f"Unsupported file type '{self.file_path.suffix}'. "
                f"Expected one of: {', '.join(sorted(SUPPORTED_SUFFIXES))}"
            )

    def _load(self) -> pd.DataFrame:
        if self.file_path.suffix.lower() in CSV_SUFFIXES:
            return pd.read_csv(self.file_path, dtype=str)
        # First worksheet only
        return pd.read_excel(self.file_path, sheet_name=0, dtype=str)

    @staticmethod
    def find_company_column(columns: List[Any]) -> Optional[Any]:
        """Find the company name column (case-insensitive)."""
        normalized = {str(col).strip().lower(): col for col in columns}
        for alias in COMPANY_COLUMN_ALIASES:
            if alias in normalized:
                return normalized[alias]
        return None

    def _row_to_dict(self, row: pd.Series) -> Dict[str, Any]:
        data = {}
        for col in row.index:
            if str(col).lower().startswith('unnamed'):
                continue
            value = row[col]
            data[str(col)] = value if pd.notna(value) else ''
        return data

    def read_companies(self, progress_callback: Optional[Callable[[int, int], None]] = None) -> Iterator[CompanyRecord]:
        """Read companies from the spreadsheet.

        Rows with a blank company name are skipped with a warning.

        Args:
            progress_callback: Optional callback function(current, total)

        Yields:
            CompanyRecord objects

        Raises:
            SpreadsheetError: If the file cannot be parsed or has no company column
        """
        logger.info(f"Reading companies from {self.file_path}")

        try:
            df = self._load()
        except pd.errors.EmptyDataError:
            logger.warning("Spreadsheet is empty or contains no data")
            return
        except (ValueError, ImportError, OSError, pd.errors.ParserError) as e:
            raise SpreadsheetError(f"Error reading spreadsheet: {e}")

        if df.empty:
            logger.warning("Spreadsheet is empty")
            return

        company_column = self.find_company_column(list(df.columns))
        if company_column is None:
            raise SpreadsheetError(
                "The spreadsheet must contain a column named 'empresa' (case-insensitive)"
            )

        total_rows = len(df)
        logger.info(f"Found {total_rows} rows")
        valid_count = 0

        for position, (_, row) in enumerate(df.iterrows(), 1):
            if progress_callback:
                progress_callback(position, total_rows)

            row_data = self._row_to_dict(row)
            try:
                record = CompanyRecord.from_row(row_data)
            except ValueError as e:
                # +1 for the header row
                logger.warning(f"Row {position + 1}: {e}, skipping")
                continue

            valid_count += 1
            yield record

        logger.info(f"Read {valid_count} companies out of {total_rows} rows")

    def read_names(self) -> List[str]:
        """Company names only, in file order."""
        return [record.name for record in self.read_companies()]
