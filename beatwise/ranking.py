"""Frequency ranking of field values, with placeholder exclusion."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .records import CRIME_TYPE_FIELD, LATITUDE_FIELD, LONGITUDE_FIELD, field_values


# Missing values in the source data are written as "", "-", "--,  -" and the like
PLACEHOLDER_PATTERN = r"[-,\s]*"

DEFAULT_LIMIT = 10


def is_placeholder(value: str) -> bool:
    return re.fullmatch(PLACEHOLDER_PATTERN, value) is not None


def rank_counts(values: pd.Series, limit: Optional[int] = None) -> List[Tuple[str, int]]:
    """Count each distinct value, highest count first, ties in first-seen order."""
    if values.empty or (limit is not None and limit <= 0):
        return []
    values = values.reset_index(drop=True)
    # sort=False keeps groups in order of first appearance; the stable sort keeps it among ties
    counts = values.groupby(values, sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable")
    if limit is not None:
        counts = counts.head(limit)
    return [(str(value), int(n)) for value, n in counts.items()]


def qualifying_values(records: pd.DataFrame, field: str) -> pd.Series:
    values = field_values(records, field)
    if values.empty:
        return values
    return values[~values.str.fullmatch(PLACEHOLDER_PATTERN)]


def top_occurrences(records: pd.DataFrame, field: str, limit: int = DEFAULT_LIMIT) -> List[Tuple[str, int]]:
    """The `limit` most frequent values of `field`, ignoring blanks and placeholders."""
    return rank_counts(qualifying_values(records, field), limit)


def _top_value(records: pd.DataFrame, field: str) -> Optional[str]:
    ranked = top_occurrences(records, field, 1)
    return ranked[0][0] if ranked else None


def top_locations(
    records: pd.DataFrame,
    limit: int = DEFAULT_LIMIT,
    lat_field: str = LATITUDE_FIELD,
    lon_field: str = LONGITUDE_FIELD,
    category_field: str = CRIME_TYPE_FIELD,
) -> List[Dict]:
    """
    Most frequent latitudes, each paired with the most frequent longitude and
    category among the records at that latitude that carry a longitude.
    """
    latitudes = field_values(records, lat_field)
    longitudes = field_values(records, lon_field)

    locations = []
    for latitude, count in top_occurrences(records, lat_field, limit):
        at_latitude = records[(latitudes == latitude) & (longitudes != "")]
        locations.append(
            {
                "latitude": latitude,
                "longitude": _top_value(at_latitude, lon_field),
                "crime_type": _top_value(at_latitude, category_field),
                "count": count,
            }
        )
    return locations
