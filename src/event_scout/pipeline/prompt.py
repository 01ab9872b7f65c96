"""Itinerary prompt for the raw search/scrape pipeline."""

from __future__ import annotations

from datetime import date

from event_scout.interests import find_categories_for_interests, get_search_terms_for_interests
from event_scout.scout.prompt import format_day


def build_search_query(interest: str, city: str, start_date: date, end_date: date) -> str:
    if start_date == end_date:
        return f"{interest} events in {city} {start_date:%B %d %Y}"
    return f"{interest} events in {city} {start_date:%B %d} to {end_date:%B %d %Y}"


def build_itinerary_prompt(
    *,
    city: str,
    interest: str,
    start_date: date,
    end_date: date,
    pages: list[tuple[str, str]],
) -> str:
    """Build the extraction prompt over scraped page texts.

    Args:
        city: Target city.
        interest: Interest the pages were found for.
        start_date: First day of the range.
        end_date: Last day of the range.
        pages: ``(url, text)`` pairs, already truncated.
    """
    terms = get_search_terms_for_interests([interest])
    categories = find_categories_for_interests([interest])
    context = f"Primary interest: {interest}"
    if terms:
        context += f"\nRelated search terms: {', '.join(terms)}"
    if categories:
        context += f"\nCategories: {', '.join(categories)}"

    sources = "\n\n".join(
        f"[Page {i}] URL: {url}\n{text}" for i, (url, text) in enumerate(pages, start=1)
    )

    return (
        "You are an Expert Event Curator. From the web pages below, extract LIVE, ORGANIZED, "
        f"PARTICIPATORY EVENTS in {city}.\n"
        f"Target Dates: {format_day(start_date)} to {format_day(end_date)}.\n\n"
        f"{context}\n\n"
        "## PAGES:\n"
        f"{sources}\n\n"
        "## STRICT EVENT DEFINITION (Must meet ALL criteria):\n"
        "1. HOSTED/PROGRAMMED: a human host, instructor, guide, or organizer\n"
        "2. SCHEDULED: a specific start time where everyone begins together\n"
        '3. NOT GENERAL ADMISSION: no "Timed Entry", "Gallery Viewing" or open hours\n'
        f"4. Times must be local to {city} and fall within the target dates\n\n"
        "## URL HANDLING:\n"
        "Only use a page URL listed above, copied verbatim. If unsure, use null. "
        'Never invent IDs such as "123456" or "000000".\n\n'
        "OUTPUT JSON FORMAT:\n"
        "{\n"
        '  "itinerary": [\n'
        "    {\n"
        '      "name": "Event Name",\n'
        '      "type": "event",\n'
        '      "category": "meetup",\n'
        f'      "location": {{"venue": "Venue Name", "address": "Full address", "city": "{city}"}},\n'
        '      "coordinates": {"lat": 0.0, "lng": 0.0},\n'
        '      "start_time": "2026-01-03T18:00:00",\n'
        '      "end_time": "2026-01-03T20:00:00",\n'
        '      "description": "Brief description",\n'
        '      "source": {"platform": "Eventbrite", "url": "https://page-url-from-above"},\n'
        '      "pricing": {"is_free": true, "price": "Free", "currency": "USD"},\n'
        '      "tags": ["networking"]\n'
        "    }\n"
        "  ]\n"
        "}\n\n"
        "CRITICAL: Output ONLY the JSON object. Start with { and end with }"
    )
