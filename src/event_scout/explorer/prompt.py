"""Prompt contract for verifying links and extracting events."""

from __future__ import annotations

from event_scout.models import Link

PROMPT_VERSION = "explorer-v1"


def _describe_links(links: list[Link]) -> str:
    blocks = []
    for i, link in enumerate(links, start=1):
        blocks.append(
            f"[Link {i}]\n"
            f"URL: {link.url}\n"
            f"Title: {link.title or 'Unknown'}\n"
            f"Snippet: {link.snippet or 'No snippet'}\n"
            f"Interest: {link.interest or 'Unknown'}\n"
            f"Target Date: {link.date.isoformat() if link.date else 'Unknown'}\n"
            f"Platform: {link.platform or 'Unknown'}"
        )
    return "\n---\n".join(blocks)


def build_explorer_prompt(links: list[Link], city: str) -> str:
    """Build the batch analysis prompt.

    The policy section is the whole validity contract: the model either
    returns a structured event for a link or rejects it with a reason.
    """

    return (
        "You are an Expert Event Analyzer. Your task is to visit/analyze the following event links "
        "and extract detailed event information.\n\n"
        "## LINKS TO ANALYZE:\n"
        f"{_describe_links(links)}\n\n"
        "## YOUR TASK:\n"
        "For each link above, determine if it contains a VALID, SCHEDULED EVENT. "
        "Extract the event details if valid.\n\n"
        "## STRICT EVENT CRITERIA (Must meet ALL):\n"
        "1. **HOSTED/PROGRAMMED:** Must have a human host, instructor, guide, or organizer\n"
        '2. **SCHEDULED:** Must have a specific start time (not just "Open 10am-6pm")\n'
        "3. **NOT GENERAL ADMISSION:** Don't list venues just because they're open\n"
        "4. **REAL EVENT:** Must be a meetup, workshop, class, talk, performance, networking event, etc.\n\n"
        "## WHAT TO REJECT:\n"
        '- "Timed Entry" or "General Admission" slots\n'
        '- "Self-guided tours" or "Audio tours"\n'
        '- Generic "Visit the museum" without a specific program\n'
        "- Venue pages without specific scheduled events\n\n"
        "## FOR EACH VALID EVENT, EXTRACT:\n"
        "- name: Exact event name from the page\n"
        '- type: "event"\n'
        "- category: meetup/workshop/networking/performance/tour/class/talk/other\n"
        "- location: venue name, full address, city\n"
        "- coordinates: lat/lng (estimate if needed)\n"
        f'- start_time: ISO 8601 format (e.g., "2026-01-03T18:00:00") - must match {city} timezone\n'
        "- end_time: ISO 8601 format\n"
        "- duration_minutes: calculated duration\n"
        "- description: Brief description of the event\n"
        "- source.platform: The platform name (Eventbrite/Meetup/Luma/etc)\n"
        "- source.url: The EXACT URL provided (copy verbatim, do not modify)\n"
        "- pricing: is_free (boolean), price (string), currency\n"
        "- tags: relevant tags for the event\n\n"
        "## OUTPUT FORMAT (JSON only):\n"
        "{\n"
        f'  "analyzed_links": {len(links)},\n'
        '  "valid_events": [\n'
        "    {\n"
        '      "name": "Event Name",\n'
        '      "type": "event",\n'
        '      "category": "meetup",\n'
        '      "location": {"venue": "Venue Name", "address": "Full address", '
        f'"city": "{city}"}},\n'
        '      "coordinates": {"lat": 0.0, "lng": 0.0},\n'
        '      "start_time": "2026-01-03T18:00:00",\n'
        '      "end_time": "2026-01-03T20:00:00",\n'
        '      "duration_minutes": 120,\n'
        '      "description": "Brief description",\n'
        '      "source": {"platform": "Eventbrite", "url": "https://exact-url-from-input.com"},\n'
        '      "pricing": {"is_free": true, "price": "Free", "currency": "USD"},\n'
        '      "tags": ["networking", "tech"],\n'
        '      "interest_matched": "Technology",\n'
        '      "target_date": "2026-01-03"\n'
        "    }\n"
        "  ],\n"
        '  "rejected_links": [\n'
        '    {"url": "https://rejected-url.com", "reason": "General admission only, no specific event"}\n'
        "  ]\n"
        "}\n\n"
        "## CRITICAL RULES:\n"
        "1. Output ONLY valid JSON, no markdown\n"
        "2. Use the EXACT URL from the input - do not modify or construct URLs\n"
        '3. Never invent placeholder IDs such as "123456" or "000000"; use null instead\n'
        "4. If unsure about event validity, reject it\n"
        f"5. Times must be in {city} local timezone\n"
        "6. Start with { and end with }"
    )
