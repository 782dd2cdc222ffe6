"""Client for the MyTurn public location search endpoint."""

import logging
from datetime import date
from typing import Callable, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from myturn_watch.core.config import Settings
from myturn_watch.core.models import CandidateRecord, GeoPoint, QueryRequest
from myturn_watch.etl.transform import MalformedPayloadError, parse_search_response

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


class AvailabilityError(RuntimeError):
    """Raised when a single location search cannot produce records."""


class TransportError(AvailabilityError):
    """The request never got an HTTP response."""


class UpstreamRejectedError(AvailabilityError):
    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(f"search endpoint returned HTTP {status_code}: {message}".rstrip(": "))
        self.status_code = status_code


class BodyUnreadableError(AvailabilityError):
    """The response arrived but its body could not be read."""


class MalformedResponseError(AvailabilityError):
    """The body was read but is not a search response."""


def build_session(max_retries: int) -> requests.Session:
    """Session that retries connect/read failures only; HTTP statuses are never retried."""
    session = requests.Session()
    retries = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        status=0,
        other=0,
        backoff_factor=1,
        allowed_methods=("POST",),
        raise_on_status=False,
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session


class AvailabilityClient:
    def __init__(
        self,
        search_url: str,
        eligibility_token: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.search_url = search_url
        self.eligibility_token = eligibility_token
        self.timeout = timeout
        self._session = session or build_session(max_retries=2)
        self._today = today

    @classmethod
    def from_settings(cls, settings: Settings) -> "AvailabilityClient":
        return cls(
            search_url=settings.search_url,
            eligibility_token=settings.eligibility_token,
            timeout=settings.request_timeout,
            session=build_session(settings.query_max_retries),
        )

    def build_request(self, point: GeoPoint) -> QueryRequest:
        return QueryRequest(
            from_date=self._today().strftime(DATE_FORMAT),
            location=point,
            eligibility_token=self.eligibility_token,
        )

    def query(self, point: GeoPoint) -> List[CandidateRecord]:
        """Search around `point` and return the sites in the response (possibly none)."""
        body = self.build_request(point).to_payload()

        try:
            response = self._session.post(self.search_url, json=body, timeout=self.timeout, stream=True)
        except requests.RequestException as exc:
            raise TransportError(f"search request for {point} failed: {exc}") from exc

        with response:
            if response.status_code >= 400:
                raise UpstreamRejectedError(response.status_code, response.reason or "")

            try:
                content = response.content
            except requests.RequestException as exc:
                raise BodyUnreadableError(f"reading search response for {point} failed: {exc}") from exc

        try:
            payload = response.json() if content else None
        except ValueError as exc:
            raise MalformedResponseError(f"search response for {point} is not JSON: {exc}") from exc

        try:
            records = parse_search_response(payload)
        except MalformedPayloadError as exc:
            raise MalformedResponseError(f"unexpected search response for {point}: {exc}") from exc

        logger.debug("Search at %s returned %d locations", point, len(records))
        return records
