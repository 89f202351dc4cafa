"""Load workout, activity and telemetry JSON from a local file or an http(s) URL.

This is the only place that performs I/O; everything it returns is handed to
the pure model and readiness code.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from garmin_coach.models.readiness import Activity, DailyStats

logger = logging.getLogger(__name__)

_ACTIVITIES = TypeAdapter(list[Activity])


class SourceError(Exception):
    """Raised when a data source cannot be read or decoded."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_text(url: str, timeout: float = 30.0) -> str:
    """Fetch a document from a URL and return the raw text."""
    logger.info("Fetching %s", url)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceError(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise SourceError(url, str(exc) or type(exc).__name__) from exc
    return response.text


def load_json(source: str, timeout: float = 30.0) -> Any:
    """Read and decode JSON from a path or URL."""
    if _is_url(source):
        text = fetch_text(source, timeout=timeout)
    else:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(source, exc.strerror or str(exc)) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SourceError(source, f"invalid JSON ({exc.msg}, line {exc.lineno})") from exc


def load_activities(source: str, timeout: float = 30.0) -> list[Activity]:
    """Load a JSON list of activities (Garmin activity summary shape)."""
    try:
        return _ACTIVITIES.validate_python(load_json(source, timeout=timeout))
    except ValidationError as exc:
        raise SourceError(source, f"not a list of activities ({exc.error_count()} error(s))") from exc


def load_daily_stats(source: str, timeout: float = 30.0) -> DailyStats:
    try:
        return DailyStats.model_validate(load_json(source, timeout=timeout))
    except ValidationError as exc:
        raise SourceError(source, f"not a daily stats object ({exc.error_count()} error(s))") from exc
