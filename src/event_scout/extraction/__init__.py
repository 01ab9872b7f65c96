"""Recovery of JSON values from free-text model output."""

from event_scout.extraction.json_extractor import extract_json, normalize_itinerary_payload

__all__ = ["extract_json", "normalize_itinerary_payload"]
