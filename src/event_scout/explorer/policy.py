"""Policy checks and heuristics applied to model-extracted events.

We only infer end times when the model does not provide one. The goal is a
*best guess* based on the event category.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any, Optional
from urllib.parse import urlparse

import structlog

logger = structlog.get_logger()

DEFAULT_DURATION_MINUTES_BY_CATEGORY: dict[str, int] = {
    "meetup": 120,
    "networking": 120,
    "workshop": 120,
    "class": 90,
    "talk": 90,
    "tour": 90,
    "performance": 150,
    "other": 120,
}

_DIGIT_RUN_RE = re.compile(r"\d{6,}")
_ASCENDING = "01234567890123456789"
_PLACEHOLDER_HOSTS = {"example.com", "example.org", "example.net"}


def _is_placeholder_run(run: str) -> bool:
    if len(set(run)) == 1:
        return True
    if run in _ASCENDING:
        return True
    # 1000000000 and friends
    return run[0] != "0" and set(run[1:]) == {"0"}


def looks_fabricated_url(url: str) -> bool:
    """Return True for URLs that look invented rather than copied.

    Flags placeholder hosts and digit runs of six or more that are one
    repeated digit, an ascending sequence, or a leading digit followed by
    zeros.
    """
    host = (urlparse(url).hostname or "").lower()
    if host in _PLACEHOLDER_HOSTS or host.endswith(tuple(f".{h}" for h in _PLACEHOLDER_HOSTS)):
        return True
    return any(_is_placeholder_run(run) for run in _DIGIT_RUN_RE.findall(url))


def infer_end_time(category: Optional[str], start_time: datetime) -> datetime:
    """Best-guess end time from a start time and coarse category."""
    key = (category or "").strip().lower() or "other"
    minutes = DEFAULT_DURATION_MINUTES_BY_CATEGORY.get(
        key, DEFAULT_DURATION_MINUTES_BY_CATEGORY["other"]
    )
    return start_time + timedelta(minutes=minutes)


def fill_missing_end_time(raw: dict[str, Any]) -> dict[str, Any]:
    """Return ``raw`` with an inferred ``end_time`` when it has only a start."""
    if raw.get("end_time") or not raw.get("start_time"):
        return raw
    try:
        start = datetime.fromisoformat(str(raw["start_time"]))
    except ValueError:
        return raw
    end = infer_end_time(raw.get("category"), start)
    return {**raw, "end_time": end.isoformat()}


def source_url_of(raw: dict[str, Any]) -> Optional[str]:
    source = raw.get("source")
    if isinstance(source, dict) and source.get("url"):
        return str(source["url"]).strip() or None
    return None


def apply_url_policy(raw: dict[str, Any], allowed_urls: set[str]) -> dict[str, Any]:
    """Check ``source.url`` of one model-returned event against the known URLs.

    A fabricated-looking URL rejects the event. A URL the model did not copy
    from ``allowed_urls`` is replaced by None and the event is kept.

    Raises:
        ValueError: If the URL looks fabricated.
    """
    url = source_url_of(raw)
    if url is None:
        return raw
    if looks_fabricated_url(url):
        raise ValueError(f"fabricated source url: {url}")
    if url in allowed_urls:
        return raw
    logger.info("source_url_cleared", url=url, name=raw.get("name"))
    source = dict(raw.get("source") or {})
    source["url"] = None
    return {**raw, "source": source}
