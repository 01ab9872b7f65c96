"""Utility functions for Event Scout."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import date, timedelta
from typing import Iterator, Sequence, TypeVar

import structlog

from event_scout.config import Settings

T = TypeVar("T")


def configure_logging(settings: Settings) -> None:
    """Configure structlog filtering at the configured level.

    Log lines go to stderr so command output on stdout stays parseable.

    Args:
        settings: Application settings providing ``log_level``.
    """
    level = getattr(logging, settings.log_level, logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def iter_dates(start_date: date, end_date: date) -> list[date]:
    """Return every calendar day in ``[start_date, end_date]``.

    An inverted range yields an empty list.
    """
    days: list[date] = []
    current = start_date
    while current <= end_date:
        days.append(current)
        current += timedelta(days=1)
    return days


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of ``items`` of at most ``size`` elements."""
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


async def pause(seconds: float) -> None:
    """Sleep between upstream calls; a non-positive delay is a no-op."""
    if seconds > 0:
        await asyncio.sleep(seconds)
