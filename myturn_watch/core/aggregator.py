"""Deduplicating collection of sites seen across all query points."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

from .models import CandidateRecord


class ResultAggregator:
    """Keeps at most one record per identity; a later record replaces an earlier one.

    ``all()`` makes no ordering promise. Callers that need a stable order
    (the publish step does) must sort the result themselves.
    """

    def __init__(self) -> None:
        self._records: Dict[str, CandidateRecord] = {}
        self._lock = threading.Lock()

    def add(self, batch: Iterable[CandidateRecord]) -> None:
        with self._lock:
            for record in batch:
                self._records[record.identity] = record

    def all(self) -> List[CandidateRecord]:
        with self._lock:
            return list(self._records.values())

    def get(self, identity: str) -> Optional[CandidateRecord]:
        with self._lock:
            return self._records.get(identity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
