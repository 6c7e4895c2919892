"""Utilities for writing rolled-up company rows to CSV.

The rolled-up table is small (one row per company) and is materialized to a
pandas DataFrame of display strings before it is written. This module
centralizes the cell formatting and column order of the exported artifact.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from company_rollup.models import OUTPUT_COLUMNS, RATIO_COLUMNS, TEXT_COLUMNS, OutputRecord

log = logging.getLogger(__name__)


def _format_ratio(value: Any) -> str:
    # integer 0 marks "nothing taken" and is written as-is
    if isinstance(value, int):
        return str(value)
    return f"{value:.2f}"


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_records(rows: Sequence[OutputRecord]) -> pd.DataFrame:
    """Return `rows` as a DataFrame of display strings.

    Args:
        rows: Output records as produced by `rollup`.

    Returns:
        pandas.DataFrame with columns exactly `OUTPUT_COLUMNS`, in order.
    """
    formatted: list[dict[str, str]] = []
    for row in rows:
        out: dict[str, str] = {}
        for col in OUTPUT_COLUMNS:
            value = row[col]
            if col in TEXT_COLUMNS:
                out[col] = str(value)
            elif col in RATIO_COLUMNS:
                out[col] = _format_ratio(value)
            else:
                out[col] = _format_number(value)
        formatted.append(out)
    return pd.DataFrame(formatted, columns=list(OUTPUT_COLUMNS))


def to_csv_bytes(rows: Sequence[OutputRecord]) -> bytes:
    """Serialize `rows` to UTF-8 CSV with a header row.

    Returns:
        CSV bytes; just the header line when `rows` is empty.
    """
    return format_records(rows).to_csv(index=False).encode("utf-8")


def export_to_csv(rows: Sequence[OutputRecord], path: Path) -> Path:
    """Write `rows` to a UTF-8 CSV file.

    Args:
        rows: Output records as produced by `rollup`.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(to_csv_bytes(rows))
    log.info("Exported %d companies to %s", len(rows), path)
    return path
