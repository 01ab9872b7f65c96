"""JSON extraction from model responses.

Search-augmented model calls cannot be forced into a JSON response mode, so
the text may arrive bare, fenced, or wrapped in prose. The strategies below
run from most specific to most permissive; each one is independent and is
only reached when the previous one did not produce a value.
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

from event_scout.exceptions import ExtractionError

logger = structlog.get_logger()

_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", re.S | re.I)
_ANY_FENCE_RE = re.compile(r"```[^\n`]*\s*(.*?)\s*```", re.S)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.S)
_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.S)

_PREVIEW_CHARS = 200


def _try_parse(candidate: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(candidate)
    except ValueError:
        return False, None


def _wrap(value: Any, wrap_array: bool) -> Any:
    if wrap_array and isinstance(value, list):
        return {"itinerary": value}
    return value


def extract_json(text: str, *, wrap_array: bool = False) -> Any:
    """Recover a JSON value from a raw model response.

    Args:
        text: Raw response text.
        wrap_array: Itinerary call sites only. Enables the last-resort array
            match, whose result is returned as ``{"itinerary": [...]}``.

    Returns:
        The parsed JSON value. With ``wrap_array`` a top-level array is
        always returned wrapped.

    Raises:
        ExtractionError: If no strategy yields valid JSON.
    """

    raw = (text or "").strip()
    if not raw:
        raise ExtractionError("empty model response")

    ok, value = _try_parse(raw)
    if ok:
        return _wrap(value, wrap_array)

    m = _JSON_FENCE_RE.search(raw)
    if m:
        ok, value = _try_parse(m.group(1).strip())
        if ok:
            logger.debug("json_extracted", method="json_fence")
            return _wrap(value, wrap_array)

    m = _ANY_FENCE_RE.search(raw)
    if m:
        content = m.group(1).strip()
        if content.startswith(("{", "[")):
            ok, value = _try_parse(content)
            if ok:
                logger.debug("json_extracted", method="generic_fence")
                return _wrap(value, wrap_array)

    m = _JSON_OBJECT_RE.search(raw)
    if m:
        ok, value = _try_parse(m.group(0))
        if ok:
            logger.debug("json_extracted", method="object_span")
            return _wrap(value, wrap_array)

    if wrap_array:
        m = _JSON_ARRAY_RE.search(raw)
        if m:
            ok, value = _try_parse(m.group(0))
            if ok:
                logger.debug("json_extracted", method="array_span")
                return {"itinerary": value}

    logger.warning("json_extraction_failed", text_length=len(raw), preview=raw[:_PREVIEW_CHARS])
    raise ExtractionError(
        f"Could not extract valid JSON from response. First {_PREVIEW_CHARS} chars: "
        f"{raw[:_PREVIEW_CHARS]}"
    )


_EVENT_LIST_KEYS = ("itinerary", "events", "valid_events")
_SINGLE_EVENT_KEYS = ("name", "start_time")


def normalize_itinerary_payload(payload: Any) -> list[dict[str, Any]]:
    """Reduce any accepted itinerary shape to a plain list of event dicts.

    Accepted shapes: a bare list, an object carrying the list under
    ``itinerary``, ``events`` or ``valid_events``, or a single event object
    (one with ``name`` and ``start_time``). The last shape is what the
    object-span step recovers from a one-element array wrapped in prose.
    Anything else yields an empty list.
    """

    items: Any = None
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        for key in _EVENT_LIST_KEYS:
            if isinstance(payload.get(key), list):
                items = payload[key]
                break
        if items is None and all(k in payload for k in _SINGLE_EVENT_KEYS):
            items = [payload]

    if items is None:
        return []
    return [item for item in items if isinstance(item, dict)]
