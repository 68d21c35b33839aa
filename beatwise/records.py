"""
Record store for the incident dataset.

Records are rows of a pandas DataFrame whose cells are all strings. The CSV
is read with ``dtype=str`` and ``keep_default_na=False`` so blanks stay ``""``
and placeholder values such as ``"-"`` or ``"null"`` reach the aggregations
untouched.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .exceptions import RecordSchemaError, SourceUnavailable


logger = logging.getLogger(__name__)

DISTRICT_FIELD = "district_name"
UNIT_FIELD = "unitname"
BEAT_FIELD = "beat_name"
LATITUDE_FIELD = "latitude"
LONGITUDE_FIELD = "longitude"
CRIME_TYPE_FIELD = "Crime_Type"
CRIME_GROUP_FIELD = "crime_group_name"
DATE_FIELD = "Offence_From_Date_only"
TIME_FIELD = "Offence_From_Time_only"
MONTH_FIELD = "month"

KNOWN_FIELDS: Tuple[str, ...] = (
    DISTRICT_FIELD,
    UNIT_FIELD,
    BEAT_FIELD,
    "FIRNo",
    "RI",
    "year",
    MONTH_FIELD,
    "fir_type",
    "fir_stage",
    "complaint_mode",
    "place_of_offence",
    "actsection",
    LATITUDE_FIELD,
    LONGITUDE_FIELD,
    CRIME_GROUP_FIELD,
    CRIME_TYPE_FIELD,
    DATE_FIELD,
    TIME_FIELD,
    "Offence_To_Date_only",
    "Offence_To_Time_only",
    "FIR_Reg_Date_only",
    "victim_count",
    "victim_age",
    "victim_sex",
    "victim_profession",
    "victim_caste",
    "accused_count",
    "accused_age",
    "accused_sex",
    "accused_profession",
    "accused_caste",
    "arrested_male",
    "arrested_female",
)

REQUIRED_FIELDS: Tuple[str, ...] = (DISTRICT_FIELD, UNIT_FIELD, BEAT_FIELD)


@dataclass(frozen=True)
class RecordSchema:
    fields: Tuple[str, ...] = KNOWN_FIELDS
    required: Tuple[str, ...] = REQUIRED_FIELDS

    def with_extra(self, extra: Iterable[str]) -> "RecordSchema":
        added = tuple(f for f in extra if f not in self.fields)
        return RecordSchema(fields=self.fields + added, required=self.required)

    def validate(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Reject frames missing a required field and drop columns outside the schema."""
        missing = [f for f in self.required if f not in frame.columns]
        if missing:
            raise RecordSchemaError(f"Missing required fields: {', '.join(missing)}")

        unexpected = [c for c in frame.columns if c not in self.fields]
        if unexpected:
            logger.warning(f"Dropping {len(unexpected)} unexpected fields: {', '.join(map(str, unexpected))}")
            frame = frame.drop(columns=unexpected)
        return frame


class CsvRecordSource:
    """Loads the incident CSV, optionally keeping the parsed frame between calls."""

    def __init__(self, path: str, schema: Optional[RecordSchema] = None, cache: bool = False):
        self.path = path
        self.schema = schema or RecordSchema()
        self.cache = cache
        self._frame: Optional[pd.DataFrame] = None

    def _read(self) -> pd.DataFrame:
        if self._frame is not None:
            return self._frame
        if not os.path.exists(self.path):
            raise SourceUnavailable(f"CSV not found at {self.path}")

        try:
            frame = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except (OSError, ValueError) as exc:
            # pandas parser errors subclass ValueError
            logger.error(f"Failed to read {self.path}: {exc}")
            raise SourceUnavailable(f"Error reading CSV file: {exc}") from exc

        frame = self.schema.validate(frame)
        if self.cache:
            self._frame = frame
        return frame

    def load(self, filter_column: Optional[str] = None, filter_value: Optional[str] = None) -> pd.DataFrame:
        frame = self._read()
        if filter_column:
            if filter_column not in frame.columns:
                frame = frame.iloc[0:0]
            else:
                frame = frame[frame[filter_column] == filter_value]
        logger.info(f"Loaded {len(frame)} records (filter {filter_column}={filter_value!r})")
        return frame


def field_values(records: pd.DataFrame, field: str) -> pd.Series:
    """The column as strings, or all blanks when the collection lacks the field."""
    if field not in records.columns:
        return pd.Series("", index=records.index, dtype=object)
    return records[field].fillna("").astype(str)


def unique_values(records: pd.DataFrame, field: str) -> List[str]:
    """Distinct values of one field in first-seen order."""
    return [str(v) for v in pd.unique(field_values(records, field))]


def to_rows(records: pd.DataFrame) -> List[Dict[str, str]]:
    return records.to_dict(orient="records")
