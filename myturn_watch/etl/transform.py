"""Utilities for transforming search responses into CandidateRecord objects."""

import logging
from typing import Any, Dict, List, Optional

from myturn_watch.core.models import CandidateRecord, GeoPoint, OpenInterval

logger = logging.getLogger(__name__)


class MalformedPayloadError(ValueError):
    """Raised when a decoded response does not have the expected shape."""


def parse_search_response(payload: Any) -> List[CandidateRecord]:
    """Extract the `locations` array of a search response.

    A missing or null `locations` means no sites were found. Anything that is
    not an object at the top level, or a `locations` that is not a list of
    objects, is rejected.
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError(f"expected a JSON object, got {type(payload).__name__}")

    locations = payload.get("locations")
    if locations is None:
        return []
    if not isinstance(locations, list):
        raise MalformedPayloadError(f"locations must be a list, got {type(locations).__name__}")

    records: List[CandidateRecord] = []
    for raw in locations:
        if not isinstance(raw, dict):
            raise MalformedPayloadError(f"location entries must be objects, got {type(raw).__name__}")

        name = _strip_or_none(raw.get("name"))
        if not name:
            logger.warning("Skipping location without name: %s", raw)
            continue

        records.append(
            CandidateRecord(
                name=name,
                display_address=_strip_or_none(raw.get("displayAddress")) or "",
                distance_meters=_safe_float(raw.get("distanceInMeters")),
                location=parse_location(raw.get("location")),
                open_hours=parse_open_hours(raw.get("openHours")),
                kind=_strip_or_none(raw.get("type")) or "",
                ext_id=_strip_or_none(raw.get("extId")) or "",
                eligibility_token=raw.get("vaccineData") or "",
                raw_snapshot=raw,
            )
        )
    return records


def parse_location(raw: Any) -> Optional[GeoPoint]:
    if not isinstance(raw, dict):
        return None
    lat = _safe_float(raw.get("lat"))
    lng = _safe_float(raw.get("lng"))
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=lat, longitude=lng)


def parse_open_hours(raw: Any) -> List[OpenInterval]:
    if not isinstance(raw, list):
        return []
    intervals: List[OpenInterval] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        days = item.get("days") or []
        intervals.append(
            OpenInterval(
                days=[str(day) for day in days if day] if isinstance(days, list) else [],
                start=str(item.get("localStart") or ""),
                end=str(item.get("localEnd") or ""),
            )
        )
    return intervals


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None
