"""Core data models shared by the search and publish pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float

    def to_payload(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True, slots=True)
class QueryRequest:
    """Body of one POST to the search endpoint. Built fresh for every point."""

    from_date: str
    location: GeoPoint
    eligibility_token: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "fromDate": self.from_date,
            "location": self.location.to_payload(),
            "vaccineData": self.eligibility_token,
        }


@dataclass(slots=True)
class OpenInterval:
    days: List[str] = field(default_factory=list)
    start: str = ""
    end: str = ""


@dataclass(slots=True)
class CandidateRecord:
    """Normalized snapshot of one site returned by the search endpoint."""

    name: str
    display_address: str = ""
    distance_meters: Optional[float] = None
    location: Optional[GeoPoint] = None
    open_hours: List[OpenInterval] = field(default_factory=list)
    kind: str = ""
    ext_id: str = ""
    eligibility_token: str = ""
    raw_snapshot: Optional[Dict[str, Any]] = field(default=None, repr=False)

    @property
    def identity(self) -> str:
        # Sites are deduplicated by name across query points.
        return self.name
