"""Full per-field value census: every raw value counted, nothing excluded."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

import pandas as pd

from .records import field_values


def field_frequency(records: pd.DataFrame, field: str) -> Dict[str, int]:
    values = field_values(records, field).reset_index(drop=True)
    if values.empty:
        return {}
    counts = values.groupby(values, sort=False).size()
    return {str(value): int(n) for value, n in counts.items()}


def build_frequency_tables(
    records: pd.DataFrame, fields: Optional[Iterable[str]] = None
) -> Dict[str, Dict[str, int]]:
    """
    Map every field to a value->count table over the raw values.

    Blanks and placeholders are counted like any other value, so each table
    sums to the number of records. Fields default to the collection's columns,
    which the record source has already validated against the schema.
    """
    if fields is None:
        fields = records.columns
    return {str(field): field_frequency(records, field) for field in fields}
