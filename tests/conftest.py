import sys
from pathlib import Path

import pytest

# Ensure `myturn_watch` is importable when running pytest from a checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from myturn_watch.core import config  # noqa: E402

CREDENTIALS = {
    "API_KEY": "key",
    "API_SECRET": "secret",
    "ACCESS_TOKEN": "token",
    "ACCESS_SECRET": "token-secret",
}


@pytest.fixture(autouse=True)
def clear_settings_cache():
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@pytest.fixture
def credentials_env(monkeypatch):
    for name, value in CREDENTIALS.items():
        monkeypatch.setenv(name, value)
    return CREDENTIALS


def site(name, address="1 Main St", hours=None, ext_id=""):
    """Build one entry of a search response `locations` array."""
    return {
        "displayAddress": address,
        "distanceInMeters": 1200.5,
        "extId": ext_id or f"ext-{name}",
        "location": {"lat": 37.77, "lng": -122.42},
        "name": name,
        "openHours": hours
        if hours is not None
        else [{"days": ["monday", "wednesday"], "localStart": "08:00:00", "localEnd": "15:00:00"}],
        "type": "OnlineBooking",
        "vaccineData": "opaque",
    }
