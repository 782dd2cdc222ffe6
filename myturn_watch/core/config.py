"""Configuration helpers for the appointment search worker.

Twitter credentials are only ever read from the environment (or a local
`.env`). Everything else has a default so a bare run only needs the four
credential variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DATASET_PATH = "./assets/ca-zip-code-latitude-and-longitude.json"
DEFAULT_SEARCH_URL = "https://api.myturn.ca.gov/public/locations/search"
DEFAULT_SIGNUP_URL = "https://myturn.ca.gov/"

# Survey answers for a 70+ applicant. Decodes to a JSON list of four eligibility ids.
DEFAULT_ELIGIBILITY_TOKEN = (
    "WyJhM3F0MDAwMDAwMDFBZExBQVUiLCJhM3F0MDAwMDAwMDFBZE1BQVUiLCJhM3F0MDAwMDAwMDFBZ1VBQVUi"
    "LCJhM3F0MDAwMDAwMDFBZ1ZBQVUiXQ=="
)

CREDENTIAL_ENV_VARS = ("API_KEY", "API_SECRET", "ACCESS_TOKEN", "ACCESS_SECRET")


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class TwitterCredentials:
    api_key: str
    api_secret: str
    access_token: str
    access_secret: str


@dataclass(frozen=True)
class Settings:
    credentials: TwitterCredentials
    dataset_path: str = DEFAULT_DATASET_PATH
    search_url: str = DEFAULT_SEARCH_URL
    signup_url: str = DEFAULT_SIGNUP_URL
    eligibility_token: str = DEFAULT_ELIGIBILITY_TOKEN
    request_timeout: float = 10.0
    query_max_retries: int = 2
    query_workers: int = 1
    publish_delay: float = 0.0
    worker_port: int = 8080


def _get_required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigError(f"{name} must be set in the environment for the publisher to authenticate.")
    return value


def _get_number_env(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


def load_credentials() -> TwitterCredentials:
    api_key, api_secret, access_token, access_secret = (_get_required_env(name) for name in CREDENTIAL_ENV_VARS)
    return TwitterCredentials(
        api_key=api_key,
        api_secret=api_secret,
        access_token=access_token,
        access_secret=access_secret,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load, validate and cache worker settings to avoid repeated env lookups."""
    load_dotenv()

    credentials = load_credentials()

    query_workers = _get_number_env("QUERY_WORKERS", 1, int)
    if query_workers < 1:
        logger.warning("QUERY_WORKERS=%s is below 1; running queries sequentially.", query_workers)
        query_workers = 1

    return Settings(
        credentials=credentials,
        dataset_path=os.getenv("DATASET_PATH") or DEFAULT_DATASET_PATH,
        search_url=os.getenv("SEARCH_URL") or DEFAULT_SEARCH_URL,
        signup_url=os.getenv("SIGNUP_URL") or DEFAULT_SIGNUP_URL,
        eligibility_token=os.getenv("ELIGIBILITY_TOKEN") or DEFAULT_ELIGIBILITY_TOKEN,
        request_timeout=_get_number_env("REQUEST_TIMEOUT_SECONDS", 10.0, float),
        query_max_retries=_get_number_env("QUERY_MAX_RETRIES", 2, int),
        query_workers=query_workers,
        publish_delay=_get_number_env("PUBLISH_DELAY_SECONDS", 0.0, float),
        worker_port=_get_number_env("PORT", _get_number_env("WORKER_PORT", 8080, int), int),
    )
