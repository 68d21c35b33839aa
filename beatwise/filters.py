"""Equality and month-range filtering over a record collection."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import pandas as pd

from .records import DATE_FIELD, field_values


logger = logging.getLogger(__name__)


@dataclass
class Diagnostics:
    """Per-request counts of records skipped as malformed, keyed by reason."""

    skipped: Counter = field(default_factory=Counter)

    def skip(self, reason: str, count: int) -> None:
        if count:
            self.skipped[reason] += int(count)

    @property
    def total(self) -> int:
        return sum(self.skipped.values())

    def to_dict(self) -> Dict[str, int]:
        return {reason: int(n) for reason, n in self.skipped.items()}

    def log_summary(self, context: str) -> None:
        if self.total:
            logger.warning(f"{context}: skipped {self.total} malformed records {self.to_dict()}")


@dataclass(frozen=True)
class FilterCriteria:
    equals: Mapping[str, Optional[str]] = field(default_factory=dict)
    start_month: Optional[int] = None
    end_month: Optional[int] = None
    date_field: str = DATE_FIELD

    @property
    def has_month_range(self) -> bool:
        return self.start_month is not None or self.end_month is not None


def date_parts(records: pd.DataFrame, date_field: str = DATE_FIELD, position: int = 1) -> pd.Series:
    """One "-" separated component of a date field, NaN where the date has too few parts."""
    return field_values(records, date_field).str.split("-").str[position]


def month_numbers(records: pd.DataFrame, date_field: str = DATE_FIELD) -> pd.Series:
    """Month number from the 2nd "-" component of a date field; NaN when it does not parse."""
    months = pd.to_numeric(date_parts(records, date_field), errors="coerce")
    return months.where(months % 1 == 0)


def count_malformed_dates(
    records: pd.DataFrame, bad: pd.Series, date_field: str, diagnostics: Optional[Diagnostics]
) -> None:
    if diagnostics is None:
        return
    blank = field_values(records, date_field).str.strip() == ""
    diagnostics.skip("missing_date", (bad & blank).sum())
    diagnostics.skip("bad_date", (bad & ~blank).sum())


def apply_filter(
    records: pd.DataFrame,
    criteria: FilterCriteria,
    diagnostics: Optional[Diagnostics] = None,
) -> pd.DataFrame:
    """
    Keep the records matching every constraint in criteria.

    Empty or None expected values are wildcards. Under a month range, records
    whose date does not yield a month are dropped and counted in diagnostics.
    The input frame is never modified; row order is preserved.
    """
    mask = pd.Series(True, index=records.index)
    for name, expected in criteria.equals.items():
        if expected is None or expected == "":
            continue
        mask &= field_values(records, name) == expected

    if criteria.has_month_range:
        start = 1 if criteria.start_month is None else criteria.start_month
        end = 12 if criteria.end_month is None else criteria.end_month
        months = month_numbers(records, criteria.date_field)
        count_malformed_dates(records, mask & months.isna(), criteria.date_field, diagnostics)
        mask &= months.between(start, end)

    filtered = records[mask]
    logger.debug(f"Filter kept {len(filtered)} of {len(records)} records")
    return filtered
