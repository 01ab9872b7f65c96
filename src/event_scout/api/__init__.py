"""HTTP surface."""

from event_scout.api.app import create_app

__all__ = ["create_app"]
