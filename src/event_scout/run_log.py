"""Per-request log artifacts.

Each orchestration run may write its raw prompts, raw responses and
intermediate JSON snapshots into its own directory. The files are write-only:
text logs are appended, JSON snapshots overwritten. Nothing here is read
back at runtime.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol

import structlog
from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from event_scout.config import Settings

logger = structlog.get_logger()

_STEP_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def _safe_step(step: str) -> str:
    return _STEP_RE.sub("_", step).strip("_") or "step"


class RequestLogWriter(Protocol):
    """What the pipeline phases write to during one request."""

    def append(self, message: str) -> None: ...

    def log_prompt(self, step: str, prompt: str) -> None: ...

    def log_response(self, step: str, response: str) -> None: ...

    def snapshot(self, name: str, data: Any) -> None: ...


class NullRequestLog:
    """Request log that discards everything."""

    request_id: Optional[str] = None
    directory: Optional[Path] = None

    def append(self, message: str) -> None:
        return None

    def log_prompt(self, step: str, prompt: str) -> None:
        return None

    def log_response(self, step: str, response: str) -> None:
        return None

    def snapshot(self, name: str, data: Any) -> None:
        return None


class RequestLog(NullRequestLog):
    """Write prompts, responses and JSON snapshots for one request."""

    def __init__(self, base_dir: Path, request_id: str) -> None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        self.request_id = request_id
        self.directory = Path(base_dir) / f"{stamp}_{request_id}"
        self.directory.mkdir(parents=True, exist_ok=True)
        self._run_log = self.directory / "run.log"

    def append(self, message: str) -> None:
        ts = datetime.now(timezone.utc).isoformat()
        with self._run_log.open("a", encoding="utf-8") as fh:
            fh.write(f"[{ts}] {message}\n")

    def log_prompt(self, step: str, prompt: str) -> None:
        self.append(f"PROMPT {step} ({len(prompt)} chars)")
        self._append_text(f"prompt_{_safe_step(step)}.txt", prompt)

    def log_response(self, step: str, response: str) -> None:
        self.append(f"RESPONSE {step} ({len(response)} chars)")
        self._append_text(f"response_{_safe_step(step)}.txt", response)

    def snapshot(self, name: str, data: Any) -> None:
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json", by_alias=True)
        path = self.directory / f"{_safe_step(name)}.json"
        path.write_text(
            json.dumps(to_jsonable_python(data), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.debug("request_log_snapshot_written", path=str(path))

    def _append_text(self, filename: str, text: str) -> None:
        # One file per step; repeated steps (batches, searches) are separated by a rule.
        with (self.directory / filename).open("a", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n" + "=" * 80 + "\n")


def open_request_log(settings: Settings, request_id: str) -> RequestLogWriter:
    """Return a RequestLog when request logging is enabled, else a no-op log."""
    if not settings.request_logging:
        return NullRequestLog()
    try:
        return RequestLog(settings.log_dir, request_id)
    except OSError as exc:
        logger.warning("request_log_unavailable", log_dir=str(settings.log_dir), error=str(exc))
        return NullRequestLog()
