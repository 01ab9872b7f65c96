"""Language-model access."""

from event_scout.gemini.client import GeminiClient, GenerationClient, GenerationResult

__all__ = ["GeminiClient", "GenerationClient", "GenerationResult"]
