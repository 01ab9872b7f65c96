"""Gemini client implementation.

This module provides the generation client shared by every pipeline phase.
The client is constructed once by the orchestrator and injected into the
Scout, Explorer, Editor and raw-tool pipeline.
"""

from typing import Any, Optional, Protocol

import structlog
from google import genai
from google.genai import types
from pydantic import BaseModel

from event_scout.config import Settings
from event_scout.exceptions import ConfigurationError, GenerationError

logger = structlog.get_logger()


class GenerationResult(BaseModel):
    """Text returned by one generation call."""

    text: str
    grounding_metadata: Optional[dict[str, Any]] = None


class GenerationClient(Protocol):
    """Anything able to run a (optionally search-augmented) generation call."""

    async def generate(
        self,
        prompt: str,
        *,
        search: bool = False,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> GenerationResult: ...


class GeminiClient:
    """Gemini LLM client with optional Google Search grounding.

    The SDK client is created on first use so that constructing the
    orchestrator never requires network access or credentials.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize Gemini client.

        Args:
            settings: Application settings. If None, uses default settings.
        """
        from event_scout.config import get_settings

        self.settings = settings or get_settings()
        self._sdk: Optional[genai.Client] = None
        logger.info("gemini_client_initialized", model=self.settings.gemini_model)

    @property
    def model(self) -> str:
        return self.settings.gemini_model

    def _client(self) -> genai.Client:
        if self._sdk is not None:
            return self._sdk

        if not self.settings.google_api_key:
            raise ConfigurationError(
                "GOOGLE_API_KEY is required (set EVENT_SCOUT_GOOGLE_API_KEY or GOOGLE_API_KEY)"
            )

        http_options = None
        if self.settings.gemini_timeout_seconds:
            http_options = types.HttpOptions(timeout=self.settings.gemini_timeout_seconds * 1000)

        self._sdk = genai.Client(api_key=self.settings.google_api_key, http_options=http_options)
        return self._sdk

    async def generate(
        self,
        prompt: str,
        *,
        search: bool = False,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> GenerationResult:
        """Generate text using Gemini.

        Args:
            prompt: The prompt to send to the model.
            search: Attach the Google Search tool to the call.
            temperature: Sampling temperature. If None, the model default.
            max_output_tokens: Output token cap. If None, the model default.

        Returns:
            The response text and grounding metadata when present.

        Raises:
            ConfigurationError: If no API key is configured.
            GenerationError: If the call fails or returns no text.
        """
        client = self._client()

        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            tools=[types.Tool(google_search=types.GoogleSearch())] if search else None,
        )

        logger.debug(
            "gemini_generate_started",
            model=self.model,
            search=search,
            prompt_length=len(prompt),
        )

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("gemini_generate_failed", model=self.model, error=str(exc))
            raise GenerationError(str(exc)) from exc

        text = response.text or ""
        if not text.strip():
            raise GenerationError("AI model returned empty response")

        grounding = None
        candidates = response.candidates or []
        if candidates and candidates[0].grounding_metadata is not None:
            grounding = candidates[0].grounding_metadata.model_dump(mode="json", exclude_none=True)

        logger.debug(
            "gemini_generate_complete",
            model=self.model,
            response_length=len(text),
            grounded=grounding is not None,
        )
        return GenerationResult(text=text, grounding_metadata=grounding)

    async def ping(self) -> str:
        """Send a trivial prompt to confirm credentials and model access."""
        result = await self.generate("Hello, respond with OK", max_output_tokens=16)
        return result.text.strip()
