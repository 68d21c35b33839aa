from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .analysis import (
    beat_profile,
    crime_by_month,
    crime_by_time,
    crime_by_week,
    data_frequency,
    detail_summary,
    list_beats,
    list_districts,
    list_units,
    records_for_beat,
)
from .config import Config
from .exceptions import BeatwiseError
from .logger_config import setup_logger
from .records import CsvRecordSource, RecordSchema


logger = logging.getLogger(__name__)

app = FastAPI(
    title="Beat-wise Crime Drill-down",
    description="District, unit and beat analytics over an incident CSV.",
    version=__version__,
)


class DetailsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    district: str = ""
    unit: str = ""
    start_month: int = Field(1, ge=1, le=12, alias="startMonth")
    end_month: int = Field(12, ge=1, le=12, alias="endMonth")


class FrequencyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected_district: Optional[str] = Field(None, alias="selectedDistrict")
    selected_unit: Optional[str] = Field(None, alias="selectedUnit")


class BeatProfileRequest(BaseModel):
    beat: str
    district: str = ""
    unit: str = ""


@lru_cache(maxsize=1)
def _load_config() -> Config:
    return Config.from_env()


def get_config() -> Config:
    try:
        return _load_config()
    except BeatwiseError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@lru_cache(maxsize=1)
def _build_source() -> CsvRecordSource:
    cfg = _load_config()
    setup_logger("beatwise", cfg.log_level, cfg.log_dir)
    schema = RecordSchema().with_extra(cfg.extra_fields)
    return CsvRecordSource(cfg.csv_path, schema, cache=cfg.cache_records)


def get_source() -> CsvRecordSource:
    try:
        return _build_source()
    except BeatwiseError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _run(action: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
    try:
        return fn(*args, **kwargs)
    except BeatwiseError as exc:
        logger.error(f"{action} failed: {exc}")
        raise HTTPException(status_code=500, detail=f"Error {action}: {exc}") from exc


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/districts")
def api_districts(source=Depends(get_source)) -> List[str]:
    return _run("listing districts", list_districts, source)


@app.get("/api/units/{district}")
def api_units(district: str, source=Depends(get_source)) -> List[str]:
    return _run("listing units", list_units, source, district)


@app.get("/api/beats/{unit}")
def api_beats(unit: str, source=Depends(get_source)) -> List[str]:
    return _run("listing beats", list_beats, source, unit)


@app.get("/api/data-by-beat/{beat}")
def api_data_by_beat(beat: str, source=Depends(get_source)) -> List[Dict[str, str]]:
    return _run("reading beat records", records_for_beat, source, beat)


@app.get("/api/crime-by-time/{district}/{unit}")
def api_crime_by_time(district: str, unit: str, source=Depends(get_source), cfg: Config = Depends(get_config)):
    return _run("processing data by time", crime_by_time, source, district, unit, cfg.bucket_top)


@app.get("/api/crime-by-month/{district}/{unit}")
def api_crime_by_month(district: str, unit: str, source=Depends(get_source), cfg: Config = Depends(get_config)):
    return _run("processing data by month", crime_by_month, source, district, unit, cfg.bucket_top)


@app.get("/api/crime-by-week/{district}/{unit}")
def api_crime_by_week(district: str, unit: str, source=Depends(get_source), cfg: Config = Depends(get_config)):
    return _run("processing data by week", crime_by_week, source, district, unit, cfg.bucket_top)


@app.post("/api/details")
def api_details(body: DetailsRequest, source=Depends(get_source), cfg: Config = Depends(get_config)):
    return _run(
        "fetching details",
        detail_summary,
        source,
        body.district,
        body.unit,
        body.start_month,
        body.end_month,
        cfg.top_limit,
    )


@app.post("/api/data-frequency")
def api_data_frequency(body: FrequencyRequest, source=Depends(get_source)):
    return _run("building frequency tables", data_frequency, source, body.selected_district, body.selected_unit)


@app.post("/api/beat-profile")
def api_beat_profile(body: BeatProfileRequest, source=Depends(get_source)):
    return _run("building beat profile", beat_profile, source, body.beat, body.district, body.unit)
