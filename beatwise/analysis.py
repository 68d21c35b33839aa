"""
Request-level drill-down operations.

Each operation takes a record source (anything with
``load(filter_column=None, filter_value=None)`` returning a string-typed
DataFrame), narrows it, and hands the result to exactly one aggregation.
All return values are JSON-ready.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .buckets import DEFAULT_TOP, hourly, monthly, weekly
from .census import build_frequency_tables
from .filters import Diagnostics, FilterCriteria, apply_filter
from .ranking import DEFAULT_LIMIT, rank_counts, top_locations, top_occurrences
from .records import (
    BEAT_FIELD,
    CRIME_GROUP_FIELD,
    CRIME_TYPE_FIELD,
    DISTRICT_FIELD,
    LATITUDE_FIELD,
    LONGITUDE_FIELD,
    MONTH_FIELD,
    UNIT_FIELD,
    field_values,
    to_rows,
    unique_values,
)


logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "place_of_offence",
    "actsection",
    "fir_type",
    LATITUDE_FIELD,
    LONGITUDE_FIELD,
    CRIME_TYPE_FIELD,
    "victim_profession",
    "victim_caste",
    "accused_profession",
    "accused_caste",
)
NULL_LITERAL = "null"
MARKER_LIMIT = 3


def list_districts(source) -> List[str]:
    return unique_values(source.load(), DISTRICT_FIELD)


def list_units(source, district: str) -> List[str]:
    return unique_values(source.load(DISTRICT_FIELD, district), UNIT_FIELD)


def list_beats(source, unit: str) -> List[str]:
    return unique_values(source.load(UNIT_FIELD, unit), BEAT_FIELD)


def records_for_beat(source, beat: str) -> List[Dict[str, str]]:
    return to_rows(source.load(BEAT_FIELD, beat))


def _unit_records(source, district: str, unit: str) -> pd.DataFrame:
    records = source.load(DISTRICT_FIELD, district)
    return apply_filter(records, FilterCriteria(equals={UNIT_FIELD: unit}))


def _series(name: str, buckets: List[Dict], diagnostics: Diagnostics) -> Dict[str, Any]:
    diagnostics.log_summary(name)
    return {"buckets": buckets, "skipped": diagnostics.to_dict()}


def crime_by_time(source, district: str, unit: str, top: int = DEFAULT_TOP) -> Dict[str, Any]:
    diagnostics = Diagnostics()
    buckets = hourly(_unit_records(source, district, unit), top=top, diagnostics=diagnostics)
    return _series("crime_by_time", buckets, diagnostics)


def crime_by_month(source, district: str, unit: str, top: int = DEFAULT_TOP) -> Dict[str, Any]:
    diagnostics = Diagnostics()
    buckets = monthly(_unit_records(source, district, unit), top=top, diagnostics=diagnostics, include_top=True)
    return _series("crime_by_month", buckets, diagnostics)


def crime_by_week(source, district: str, unit: str, top: int = DEFAULT_TOP) -> Dict[str, Any]:
    diagnostics = Diagnostics()
    buckets = weekly(_unit_records(source, district, unit), top=top, diagnostics=diagnostics, include_top=True)
    return _series("crime_by_week", buckets, diagnostics)


def _as_freq(ranked: List[Tuple[str, int]]) -> List[Dict[str, Any]]:
    return [{"value": value, "freq": n} for value, n in ranked]


def detail_summary(
    source,
    district: str,
    unit: str,
    start_month: Optional[int],
    end_month: Optional[int],
    limit: int = DEFAULT_LIMIT,
) -> Dict[str, Any]:
    """Top locations, crime groups, crimes and months for one district/unit over a month range."""
    diagnostics = Diagnostics()
    criteria = FilterCriteria(
        equals={DISTRICT_FIELD: district, UNIT_FIELD: unit},
        start_month=start_month,
        end_month=end_month,
    )
    records = apply_filter(source.load(), criteria, diagnostics)
    logger.info(f"Details for {district}/{unit} months {start_month}-{end_month}: {len(records)} records")

    details = {
        "top_lat_long": top_locations(records, limit),
        "top_crime_groups": _as_freq(top_occurrences(records, CRIME_GROUP_FIELD, limit)),
        "top_crimes": _as_freq(top_occurrences(records, CRIME_TYPE_FIELD, limit)),
        "top_months": _as_freq(top_occurrences(records, MONTH_FIELD, limit)),
    }
    diagnostics.log_summary("detail_summary")
    return {"details": details, "all_data": to_rows(records), "skipped": diagnostics.to_dict()}


def data_frequency(
    source, selected_district: Optional[str] = None, selected_unit: Optional[str] = None
) -> Dict[str, Dict[str, int]]:
    criteria = FilterCriteria(equals={DISTRICT_FIELD: selected_district, UNIT_FIELD: selected_unit})
    return build_frequency_tables(apply_filter(source.load(), criteria))


def chart_counts(records: pd.DataFrame, field: str) -> Dict[str, int]:
    """Value counts for one profile chart, highest first, without the literal "null"."""
    if field not in records.columns:
        return {}
    values = field_values(records, field)
    return dict(rank_counts(values[values != NULL_LITERAL]))


def _field_label(field: str) -> str:
    return field.replace("_", " ").lower()


def profile_narrative(charts: Dict[str, Dict[str, int]], beat: str, district: str = "", unit: str = "") -> str:
    """One line per chart naming its top 3 values and their floored share of the total."""
    lines = []
    for index, (field, counts) in enumerate(charts.items(), start=1):
        total = sum(counts.values())
        top = list(counts.items())[:3]
        if top:
            ranked = "; ".join(
                f"{rank}. {value}: {freq} ({freq * 100 // total}% of total)"
                for rank, (value, freq) in enumerate(top, start=1)
            )
        else:
            ranked = "no values recorded"
        lines.append(
            f"{index}) In beat {beat} of the {unit} unit of {district} district, "
            f"the top 3 frequencies in {_field_label(field)} are: {ranked}."
        )
    return "\n".join(lines)


def top_markers(records: pd.DataFrame, limit: int = MARKER_LIMIT) -> List[Dict[str, Any]]:
    """Most frequent coordinate pairs with the first crime type seen at each."""
    latitudes = field_values(records, LATITUDE_FIELD)
    longitudes = field_values(records, LONGITUDE_FIELD)
    usable = (latitudes != "") & (longitudes != "") & (latitudes != NULL_LITERAL) & (longitudes != NULL_LITERAL)

    pairs = pd.DataFrame(
        {
            "lat": latitudes[usable].to_numpy(),
            "long": longitudes[usable].to_numpy(),
            "detail": field_values(records, CRIME_TYPE_FIELD)[usable].to_numpy(),
        }
    )
    if pairs.empty:
        return []

    grouped = (
        pairs.groupby(["lat", "long"], sort=False)
        .agg(count=("detail", "size"), detail=("detail", "first"))
        .sort_values("count", ascending=False, kind="stable")
        .head(limit)
        .reset_index()
    )
    grouped["lat"] = pd.to_numeric(grouped["lat"], errors="coerce")
    grouped["long"] = pd.to_numeric(grouped["long"], errors="coerce")
    grouped = grouped.dropna(subset=["lat", "long"])

    return [
        {"lat": float(row["lat"]), "long": float(row["long"]), "detail": row["detail"], "count": int(row["count"])}
        for row in grouped.to_dict(orient="records")
    ]


def beat_profile(source, beat: str, district: str = "", unit: str = "") -> Dict[str, Any]:
    """Chart tables, a plain-text summary and map markers for one beat."""
    records = source.load(BEAT_FIELD, beat)
    charts = {field: chart_counts(records, field) for field in PROFILE_FIELDS}
    return {
        "beat": beat,
        "record_count": int(len(records)),
        "charts": charts,
        "narrative": profile_narrative(charts, beat, district, unit),
        "markers": top_markers(records),
    }
