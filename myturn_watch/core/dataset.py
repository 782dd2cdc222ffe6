"""Loader for the geocoded zip code dataset that drives the search loop.

The file is the opendatasoft "flat file JSON" export of US zip codes. The
schema is strict on purpose: an unknown key anywhere in a record means the
export format changed and the run should stop before querying anything.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from .models import GeoPoint

logger = logging.getLogger(__name__)


class DatasetError(RuntimeError):
    """Raised when the coordinate dataset cannot be read or parsed."""


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ZipFields(_StrictModel):
    latitude: float
    longitude: float
    city: Optional[str] = None
    zip: Optional[str] = None
    dst: Optional[int] = None
    geopoint: Optional[Tuple[float, float]] = None
    state: Optional[str] = None
    timezone: Optional[int] = None


class ZipGeometry(_StrictModel):
    type: Optional[str] = None
    coordinates: Optional[Tuple[float, float]] = None


class ZipRecord(_StrictModel):
    fields: ZipFields
    datasetid: Optional[str] = None
    recordid: Optional[str] = None
    geometry: Optional[ZipGeometry] = None
    record_timestamp: Optional[str] = None

    def to_point(self) -> GeoPoint:
        return GeoPoint(latitude=self.fields.latitude, longitude=self.fields.longitude)


def parse_points(data) -> List[GeoPoint]:
    if not isinstance(data, list):
        raise DatasetError(f"dataset must be a JSON array of records, got {type(data).__name__}")

    points: List[GeoPoint] = []
    for index, raw in enumerate(data):
        try:
            record = ZipRecord.model_validate(raw)
        except ValidationError as exc:
            raise DatasetError(f"record {index} does not match the dataset schema: {exc}") from exc
        points.append(record.to_point())
    return points


def load_points(path) -> List[GeoPoint]:
    """Read every record in `path` and return its coordinates in file order."""
    dataset_path = Path(path)
    try:
        with dataset_path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise DatasetError(f"cannot read dataset {dataset_path}: {exc}") from exc
    except ValueError as exc:
        raise DatasetError(f"dataset {dataset_path} is not valid JSON: {exc}") from exc

    points = parse_points(data)
    logger.info("Loaded %d coordinates from %s", len(points), dataset_path)
    return points
