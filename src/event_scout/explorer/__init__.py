"""Link verification phase."""

from event_scout.explorer.explorer import LinkExplorer, chunk_links, dedupe_events, sort_events
from event_scout.explorer.policy import apply_url_policy, infer_end_time, looks_fabricated_url
from event_scout.explorer.prompt import build_explorer_prompt

__all__ = [
    "LinkExplorer",
    "apply_url_policy",
    "build_explorer_prompt",
    "chunk_links",
    "dedupe_events",
    "infer_end_time",
    "looks_fabricated_url",
    "sort_events",
]
