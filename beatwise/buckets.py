"""
Hour, month and week bucketing of incident records.

Every variant classifies records into a bucket key, counts them, and ranks the
category values (crime type by default) inside each bucket. Records whose
date or time cannot be bucketed are skipped and counted in the request's
Diagnostics; they never abort the aggregation.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .filters import Diagnostics, count_malformed_dates, date_parts
from .ranking import rank_counts
from .records import CRIME_TYPE_FIELD, DATE_FIELD, TIME_FIELD, field_values


logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "Unknown"
NO_DATA = "No data"
HOURS_PER_DAY = 24
DEFAULT_TOP = 3

Bucket = Tuple[int, List[Tuple[str, int]]]


def category_values(records: pd.DataFrame, category_field: str = CRIME_TYPE_FIELD) -> pd.Series:
    values = field_values(records, category_field)
    return values.where(values != "", UNKNOWN_CATEGORY)


def accumulate(keys: pd.Series, categories: pd.Series, top: int = DEFAULT_TOP) -> Dict[Hashable, Bucket]:
    """Fold (key, category) pairs into {key: (count, top categories)}, keys in first-seen order."""
    frame = pd.DataFrame({"bucket": keys.to_numpy(), "category": categories.to_numpy()})
    buckets: Dict[Hashable, Bucket] = {}
    for key, group in frame.groupby("bucket", sort=False):
        buckets[key] = (len(group), rank_counts(group["category"], top))
    logger.debug(f"Accumulated {len(frame)} records into {len(buckets)} buckets")
    return buckets


def format_top(ranked: List[Tuple[str, int]]) -> str:
    if not ranked:
        return NO_DATA
    return ", ".join(f"{value} ({n})" for value, n in ranked)


def _entry(label_key: str, label, bucket: Bucket, include_top: bool) -> Dict:
    count, ranked = bucket
    entry = {label_key: label, "count": count}
    if include_top:
        entry["top_categories"] = format_top(ranked)
    return entry


def hourly(
    records: pd.DataFrame,
    time_field: str = TIME_FIELD,
    category_field: str = CRIME_TYPE_FIELD,
    top: int = DEFAULT_TOP,
    diagnostics: Optional[Diagnostics] = None,
) -> List[Dict]:
    """
    Counts per hour of day from the leading HH of a HH:MM[:SS] time field.

    Always returns 24 entries, hours 0..23 in order, each with its top
    categories formatted as "<value> (<count>)" or "No data" when empty.
    """
    times = field_values(records, time_field).str.strip()
    present = times != ""
    hours = pd.to_numeric(times.str.split(":").str[0], errors="coerce")
    valid = present & hours.between(0, HOURS_PER_DAY - 1) & (hours % 1 == 0)

    if diagnostics is not None:
        diagnostics.skip("missing_time", (~present).sum())
        diagnostics.skip("bad_time", (present & ~valid).sum())

    buckets = accumulate(hours[valid].astype(int), category_values(records, category_field)[valid], top)
    return [
        {
            "hour_label": f"{hour}:00",
            "count": buckets.get(hour, (0, []))[0],
            "top_categories": format_top(buckets.get(hour, (0, []))[1]),
        }
        for hour in range(HOURS_PER_DAY)
    ]


def monthly(
    records: pd.DataFrame,
    date_field: str = DATE_FIELD,
    category_field: str = CRIME_TYPE_FIELD,
    top: int = DEFAULT_TOP,
    diagnostics: Optional[Diagnostics] = None,
    include_top: bool = False,
) -> List[Dict]:
    """Counts per month key (the 2nd "-" part of a YYYY-MM-DD date), ascending by month number."""
    keys = date_parts(records, date_field)
    numbers = pd.to_numeric(keys, errors="coerce")
    valid = numbers.between(1, 12) & (numbers % 1 == 0)
    count_malformed_dates(records, ~valid, date_field, diagnostics)

    buckets = accumulate(keys[valid], category_values(records, category_field)[valid], top)
    ordered = sorted(buckets, key=float)
    return [_entry("month", key, buckets[key], include_top) for key in ordered]


def parse_dates(values: pd.Series) -> pd.Series:
    # Naive ISO dates are taken as UTC; offsets are converted to UTC before truncation
    return pd.to_datetime(values.str.strip(), errors="coerce", utc=True, format="ISO8601")


def week_numbers(dates: pd.Series) -> pd.Series:
    """ceil((whole days since Jan 1 UTC + 1) / 7); NaN for missing dates."""
    day_of_year = dates.dt.dayofyear
    return np.ceil(day_of_year / 7)


def week_number(value: str) -> Optional[int]:
    weeks = week_numbers(parse_dates(pd.Series([value], dtype=object)))
    week = weeks.iloc[0]
    return None if pd.isna(week) else int(week)


def weekly(
    records: pd.DataFrame,
    date_field: str = DATE_FIELD,
    category_field: str = CRIME_TYPE_FIELD,
    top: int = DEFAULT_TOP,
    diagnostics: Optional[Diagnostics] = None,
    include_top: bool = False,
) -> List[Dict]:
    """Counts per week of year, ascending by week; only weeks with records appear."""
    weeks = week_numbers(parse_dates(field_values(records, date_field)))
    valid = weeks.notna()
    count_malformed_dates(records, ~valid, date_field, diagnostics)

    buckets = accumulate(weeks[valid].astype(int), category_values(records, category_field)[valid], top)
    return [_entry("week", int(key), buckets[key], include_top) for key in sorted(buckets)]
