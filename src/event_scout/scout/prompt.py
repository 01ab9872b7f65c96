"""Prompt contract for discovering event links."""

from __future__ import annotations

from datetime import date

from event_scout.interests import get_search_terms_for_interests

PROMPT_VERSION = "scout-v1"


def format_day(day: date) -> str:
    """Long human date, e.g. ``Saturday, January 3, 2026``."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def generate_search_queries(interest: str, city: str, day: date) -> list[str]:
    """Query variants handed to the model's search tool.

    Generic, platform-scoped (site:) and workshop/class-scoped variants
    broaden recall for a single interest/day.
    """
    when = format_day(day)
    return [
        f"{interest} events in {city} {when}",
        f"{interest} meetup {city} {when}",
        f"site:eventbrite.com {city} {interest} {when}",
        f"site:meetup.com {city} {interest}",
        f"site:lu.ma {city} {interest}",
        f"{interest} workshop class {city} {when}",
    ]


def build_scout_prompt(
    *,
    interest: str,
    city: str,
    day: date,
    queries: list[str],
    max_links: int,
) -> str:
    """Build a prompt that asks for event-page links as a single JSON object.

    Args:
        interest: Interest being searched.
        city: Target city.
        day: Calendar day being searched.
        queries: Search query variants for the model to run.
        max_links: Cap on links the model should return.

    Returns:
        Prompt string.
    """

    when = format_day(day)
    iso_day = day.isoformat()
    query_lines = "\n".join(f'{i}. "{q}"' for i, q in enumerate(queries, start=1))

    related = [t for t in get_search_terms_for_interests([interest]) if t != interest]
    related_line = f"Related search terms: {', '.join(related)}\n" if related else ""

    return (
        "You are an Event Link Scout. Your job is to search the web and find URLs/links to event pages.\n\n"
        "## TASK:\n"
        f'Search for "{interest}" events happening in {city} on {when}.\n'
        f"{related_line}\n"
        "## SEARCH STRATEGY:\n"
        "Use these search queries to find events:\n"
        f"{query_lines}\n\n"
        "Also search:\n"
        f'- Eventbrite, Meetup, Luma, Facebook Events for "{interest}" in {city}\n'
        "- Local venue calendars, museums, theaters if relevant\n"
        "- Co-working spaces, community centers for meetups/workshops\n\n"
        "## REQUIREMENTS:\n"
        f"1. Find up to {max_links} unique event links\n"
        "2. Only include links that appear to be actual event pages (not homepage or general search results)\n"
        "3. Prioritize links from: Eventbrite, Meetup, Luma, official venue calendars\n"
        "4. Include the snippet/description that shows why this link is relevant\n"
        "5. Copy every URL exactly as it appears in the search results; never construct or guess one\n\n"
        "## OUTPUT FORMAT (JSON only, no markdown):\n"
        "{\n"
        f'  "interest": "{interest}",\n'
        f'  "city": "{city}",\n'
        f'  "date": "{iso_day}",\n'
        '  "links": [\n'
        "    {\n"
        '      "url": "https://actual-event-page-url.com",\n'
        '      "title": "Event title from search result",\n'
        '      "snippet": "Brief description/snippet from search result",\n'
        '      "platform": "Eventbrite/Meetup/Luma/Venue/Other",\n'
        '      "confidence": "high/medium/low"\n'
        "    }\n"
        "  ],\n"
        '  "total_found": 15,\n'
        '  "queries_used": ["query1", "query2"]\n'
        "}\n\n"
        "CRITICAL:\n"
        "- Output ONLY valid JSON, no markdown formatting\n"
        "- Only include URLs that look like actual event pages, not search result pages\n"
        "- If you cannot find real event links, return an empty links array\n"
        "- Start with { and end with }"
    )
