"""Publishing channel: posts rendered messages as tweets."""

import logging
from typing import Optional

import requests
from requests_oauthlib import OAuth1Session

from myturn_watch.core.config import TwitterCredentials

logger = logging.getLogger(__name__)

TWEET_URL = "https://api.twitter.com/2/tweets"


class PublishError(RuntimeError):
    """Raised when a message could not be posted."""


class TwitterPublisher:
    """Posts one tweet per call. No retries: a failed post is reported and dropped."""

    def __init__(
        self,
        credentials: TwitterCredentials,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self._session = session or OAuth1Session(
            credentials.api_key,
            client_secret=credentials.api_secret,
            resource_owner_key=credentials.access_token,
            resource_owner_secret=credentials.access_secret,
        )
        self.timeout = timeout

    def publish(self, text: str) -> None:
        try:
            response = self._session.post(TWEET_URL, json={"text": text}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PublishError(f"posting tweet failed: {exc}") from exc

        if not (200 <= response.status_code < 300):
            raise PublishError(f"tweet rejected with status {response.status_code}: {response.text[:500]}")

        logger.info("Published tweet (%d chars)", len(text))


class DryRunPublisher:
    """Logs messages instead of posting them."""

    def __init__(self) -> None:
        self.published = []

    def publish(self, text: str) -> None:
        self.published.append(text)
        logger.info("[dry-run] would publish:\n%s", text)
