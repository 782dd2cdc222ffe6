"""Render aggregated sites into the text that gets published."""

from datetime import datetime
from typing import Iterable

from myturn_watch.core.models import CandidateRecord, OpenInterval

_INPUT_TIME_FORMAT = "%H:%M:%S"


def capitalize_first(word: str) -> str:
    """Upper-case the first character only; ``str.capitalize`` would lower the rest."""
    return word[:1].upper() + word[1:]


def format_clock(value: str) -> str:
    """Turn ``"15:00:00"`` into ``"3:00PM"``. Unparseable input renders as ``""``."""
    try:
        parsed = datetime.strptime(value, _INPUT_TIME_FORMAT)
    except (TypeError, ValueError):
        return ""
    hour = parsed.hour % 12 or 12
    return f"{hour}:{parsed.minute:02d}{'AM' if parsed.hour < 12 else 'PM'}"


def render_days(days: Iterable[str]) -> str:
    return ",".join(capitalize_first(day) for day in days)


def render_interval(interval: OpenInterval) -> str:
    return f"{render_days(interval.days)} - {format_clock(interval.start)}-{format_clock(interval.end)}"


def render(record: CandidateRecord) -> str:
    hours = "\n".join(render_interval(interval) for interval in record.open_hours)
    return "\n".join([record.name, record.display_address, hours])


def with_call_to_action(text: str, signup_url: str) -> str:
    return f"{text}\nSign up at: {signup_url}"
