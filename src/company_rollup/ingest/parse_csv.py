"""Parsing helpers for audit score CSV exports.

`read_frame` reads an export into a pandas DataFrame of raw strings and
`read_records` turns it into the ordered list of records consumed by the
rollup engine. The first row is the header; columns are matched by name.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import IO, Any, Union

import pandas as pd

log = logging.getLogger(__name__)

CsvSource = Union[str, Path, bytes, IO[Any]]


class InputParseError(ValueError):
    """Raised when an input file cannot be parsed as CSV at all."""


def read_frame(source: CsvSource) -> pd.DataFrame:
    """Parse a CSV export into a DataFrame of raw string cells.

    Every cell is kept as text (``dtype=str``) and blanks stay blank rather
    than becoming NaN, so numeric coercion is left to the rollup engine.

    Args:
        source: Path, raw ``bytes``, or a text/binary file-like object
            (e.g. a Streamlit ``UploadedFile``).

    Returns:
        pandas.DataFrame with one row per data line, in file order.

    Raises:
        InputParseError: if the file is empty, undecodable or malformed.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            skip_blank_lines=True,
            # trailing delimiters must not turn the first column into the index
            index_col=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise InputParseError(f"Unable to parse CSV input: {exc}") from exc

    log.info("Parsed %d records with %d columns", len(df), len(df.columns))
    return df


def read_records(source: CsvSource) -> list[dict[str, str]]:
    """Parse a CSV export into a list of column -> value records.

    Args:
        source: See `read_frame`.

    Returns:
        List of dicts, one per data row, in file order.
    """
    return read_frame(source).to_dict(orient="records")
