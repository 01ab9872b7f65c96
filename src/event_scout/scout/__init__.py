"""Link discovery phase."""

from event_scout.scout.prompt import build_scout_prompt, generate_search_queries
from event_scout.scout.scout import LinkScout, dedupe_links

__all__ = ["LinkScout", "build_scout_prompt", "dedupe_links", "generate_search_queries"]
