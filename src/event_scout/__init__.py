"""Event Scout - interest-driven event itineraries.

This package discovers candidate event pages for a city, interests and date
range, verifies them into scheduled events with a search-grounded model, and
serves the resulting itinerary over HTTP.
"""

__version__ = "0.1.0"

from event_scout.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
