"""Spreadsheet writer for resolution results."""

import logging
from pathlib import Path
from typing import List, Dict, Any, Sequence

import pandas as pd

from site_resolver.core.exceptions import SpreadsheetError
from site_resolver.core.models import CompanyRecord, ResolutionOutcome


logger = logging.getLogger(__name__)


class SpreadsheetWriter:
    """Write each company row back out with its resolved links."""

    def __init__(self, output_path: str):
        """Initialize the writer.

        Args:
            output_path: Path to the output .csv or .xlsx file
        """
        self.output_path = Path(output_path)
        if self.output_path.suffix.lower() not in ('.csv', '.xlsx'):
            raise SpreadsheetError(f"Output file must be .csv or .xlsx: {output_path}")
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def outcome_to_row(record: CompanyRecord, outcome: ResolutionOutcome) -> Dict[str, Any]:
        """Flatten a record and its outcome into one output row.

        Input columns keep their original headers and order; records built
        by hand put the company name first.
        """
        columns = record.columns or (record.name_column, *record.extra_data)
        row = {}
        for column in columns:
            if column == record.name_column:
                row[column] = record.name
            else:
                row[column] = record.extra_data.get(column, '')
        row.update({
            'links': ','.join(link.link for link in outcome.links),
            'domains': ','.join(link.domain for link in outcome.links),
            'status': outcome.status,
            'message': outcome.message or '',
        })
        return row

    def write_results(self, records: Sequence[CompanyRecord],
                      outcomes: Sequence[ResolutionOutcome]) -> None:
        """Write all results, replacing any existing file.

        Args:
            records: Input rows, in the same order as outcomes
            outcomes: Resolution outcomes
        """
        if len(records) != len(outcomes):
            raise SpreadsheetError(
                f"Got {len(outcomes)} outcomes for {len(records)} companies"
            )
        if not records:
            logger.warning("No results to write")
            return

        rows: List[Dict[str, Any]] = [
            self.outcome_to_row(record, outcome) for record, outcome in zip(records, outcomes)
        ]
        df = pd.DataFrame(rows)

        logger.info(f"Writing {len(rows)} results to {self.output_path}")
        try:
            if self.output_path.suffix.lower() == '.xlsx':
                df.to_excel(self.output_path, index=False, sheet_name='Results')
            else:
                df.to_csv(self.output_path, index=False)
        except (OSError, ValueError, ImportError) as e:
            logger.error(f"Error writing results: {e}")
            raise SpreadsheetError(f"Error writing results: {e}")

        logger.info(f"Successfully wrote {len(rows)} rows to {self.output_path}")
