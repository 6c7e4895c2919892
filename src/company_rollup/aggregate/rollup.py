"""Rollup engine: group audit records by company and derive scores.

Functions in this module are pure. Each call owns its accumulator mapping,
so repeated runs over the same records give identical output.

Expectations:
- Input: an iterable of mappings (column name -> raw value), typically the
  records returned by `company_rollup.ingest.parse_csv.read_records`.
- Output: one `OutputRecord` per distinct `Associated Company Name`, in the
  order companies were first seen. Groups are never sorted.
"""
from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import pandas as pd

from company_rollup.models import (
    FLAG_COLUMNS,
    GROUP_KEY,
    METRIC_FAMILIES,
    OUTPUT_COLUMNS,
    CompanyScores,
    GroupAccumulator,
    OutputRecord,
    Ratio,
)

log = logging.getLogger(__name__)

_NUMERIC_PREFIX_RE = re.compile(
    r"^[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)
_TWO_PLACES = Decimal("0.01")

# accumulator field -> input column, for every running sum
_SUM_FIELDS: tuple[tuple[str, str], ...] = tuple(
    pair
    for family, passed, taken in METRIC_FAMILIES
    for pair in ((f"{family}_passed", passed), (f"{family}_taken", taken))
) + tuple(FLAG_COLUMNS.items())


class MissingGroupKeyError(ValueError):
    """Raised when no input record carries the company key column."""


# =========================================================
# FIELD PARSING
# =========================================================

def parse_metric(value: Any) -> float:
    """Coerce a raw cell to a float, defaulting to 0.0.

    Blank, missing, NaN and non-numeric values give 0.0. Only a leading
    ASCII number (or a signed ``Infinity``) is read, so ``"12 tests"`` -> 12.0
    while ``"inf"``, ``"1_0"``-style groupings and non-ASCII digits stop early.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        m = _NUMERIC_PREFIX_RE.match(str(value).strip())
        if not m:
            return 0.0
        number = float(m.group(0))
    return 0.0 if math.isnan(number) else number


def ratio(passed: float, taken: float) -> Ratio:
    """Return passed/taken rounded half-up to 2 places, or int 0 if nothing was taken."""
    if taken > 0:
        quotient = passed / taken
        if not math.isfinite(quotient):
            return quotient
        return float(Decimal(repr(quotient)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
    return 0


def _group_key(record: Mapping[str, Any]) -> str | None:
    key = record.get(GROUP_KEY)
    if key is None or (isinstance(key, float) and math.isnan(key)):
        return None
    key = str(key)
    return key or None


# =========================================================
# ACCUMULATION
# =========================================================

def _check_records(records: Any) -> list[Mapping[str, Any]]:
    """Materialize `records` and reject structurally unusable input."""
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        raise TypeError(
            f"rollup expects an iterable of records, got {type(records).__name__}"
        )

    rows = list(records)
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise TypeError(f"record {i} is {type(row).__name__}, not a mapping")

    if rows and not any(GROUP_KEY in row for row in rows):
        raise MissingGroupKeyError(f"Column {GROUP_KEY!r} not found in input records")
    return rows


def accumulate(records: Iterable[Mapping[str, Any]]) -> dict[str, GroupAccumulator]:
    """Fold records into per-company running totals.

    Args:
        records: Iterable of mappings keyed by input column name.

    Returns:
        Dict of company name -> `GroupAccumulator`, in first-seen order.

    Raises:
        TypeError: if `records` is not an iterable of mappings.
        MissingGroupKeyError: if records exist but none has the key column.
    """
    rows = _check_records(records)
    groups: dict[str, GroupAccumulator] = {}
    skipped = 0

    for row in rows:
        key = _group_key(row)
        if key is None:
            skipped += 1
            continue

        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = GroupAccumulator()

        acc.count += 1
        for field, col in _SUM_FIELDS:
            setattr(acc, field, getattr(acc, field) + parse_metric(row.get(col)))

    if skipped:
        log.debug("Skipped %d records without %r", skipped, GROUP_KEY)
    log.info("Accumulated %d records into %d companies", len(rows) - skipped, len(groups))
    return groups


# =========================================================
# OUTPUT
# =========================================================

def _scores(name: str, acc: GroupAccumulator) -> CompanyScores:
    return CompanyScores(
        company_name=name,
        count=acc.count,
        audit_score=ratio(acc.audit_passed, acc.audit_taken),
        presence=ratio(acc.presence_passed, acc.presence_taken),
        reputation=ratio(acc.reputation_passed, acc.reputation_taken),
        marketing=ratio(acc.marketing_passed, acc.marketing_taken),
        messaging=ratio(acc.messaging_passed, acc.messaging_taken),
        verified=acc.verified,
        tracking=acc.tracking,
        phone_number=acc.phone_number,
        website_url=acc.website_url,
        # no clamping: inconsistent input may go negative
        low_review_count=acc.count - acc.reviews_high_total,
        high_ratings=acc.high_ratings,
        listings_posting=acc.listings_posting,
        listings_not_posting=acc.count - acc.listings_posting,
        listings_multiple_posts=acc.listings_multiple_posts,
    )


def summarize(records: Iterable[Mapping[str, Any]]) -> list[CompanyScores]:
    """Return one validated `CompanyScores` per company, in first-seen order."""
    return [_scores(name, acc) for name, acc in accumulate(records).items()]


def rollup(records: Iterable[Mapping[str, Any]]) -> list[OutputRecord]:
    """Roll audit records up to one presentation row per company.

    Args:
        records: Iterable of mappings keyed by input column name.

    Returns:
        List of dicts keyed by `OUTPUT_COLUMNS` (in that order), one per
        company, in the order companies first appear in `records`.
    """
    return [s.to_record() for s in summarize(records)]


def rollup_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Run `rollup` over a DataFrame and return the result as a DataFrame.

    Args:
        df: pandas DataFrame with one audit record per row.

    Returns:
        pandas DataFrame with columns `OUTPUT_COLUMNS`; header-only when no
        company is found.
    """
    if GROUP_KEY not in df.columns:
        raise MissingGroupKeyError(f"Column {GROUP_KEY!r} not found in input columns")
    rows = rollup(df.to_dict(orient="records"))
    return pd.DataFrame(rows, columns=list(OUTPUT_COLUMNS))
