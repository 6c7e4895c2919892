"""Load / process-and-export triggers shared by the CLI and the dashboard.

`RollupSession` keeps the records from the most recent successful load.
Processing before anything is loaded is a silent no-op.
"""

from __future__ import annotations

import logging
from pathlib import Path

from company_rollup.aggregate.rollup import rollup
from company_rollup.config import DEFAULT_OUTPUT_NAME
from company_rollup.export.write_csv import export_to_csv, to_csv_bytes
from company_rollup.ingest.parse_csv import CsvSource, read_records
from company_rollup.models import OutputRecord

log = logging.getLogger(__name__)


class RollupSession:
    """Holds loaded audit records between the load and export triggers."""

    def __init__(self) -> None:
        self._records: list[dict[str, str]] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    def load(self, source: CsvSource) -> int:
        """Parse `source` and keep its records for the next export.

        A parse failure propagates and leaves earlier data in place.

        Returns:
            Number of records loaded.
        """
        records = read_records(source)
        self._records = records
        log.info("Loaded %d records", len(records))
        return len(records)

    def clear(self) -> None:
        """Forget loaded records; later exports become no-ops again."""
        if self._records is not None:
            log.info("Cleared %d loaded records", len(self._records))
        self._records = None

    def process(self) -> list[OutputRecord] | None:
        """Return the rolled-up rows, or ``None`` if nothing is loaded."""
        if self._records is None:
            return None
        return rollup(self._records)

    def process_to_bytes(self) -> bytes | None:
        rows = self.process()
        if rows is None:
            return None
        return to_csv_bytes(rows)

    def process_and_export(
        self,
        out_dir: Path,
        filename: str = DEFAULT_OUTPUT_NAME,
    ) -> Path | None:
        """Roll up the loaded records and write them to `out_dir / filename`.

        Returns:
            The written path, or ``None`` (no file written) if nothing is loaded.
        """
        rows = self.process()
        if rows is None:
            log.debug("Nothing loaded; skipping export")
            return None
        return export_to_csv(rows, out_dir / filename)
