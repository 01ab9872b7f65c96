"""Single-activity editor.

One model call per request, no retry: unparseable or invalid output is an
error the caller sees.
"""

from __future__ import annotations

from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from event_scout.config import Settings
from event_scout.editor.prompt import build_edit_prompt
from event_scout.exceptions import ExtractionError, ValidationError
from event_scout.extraction import extract_json
from event_scout.gemini import GenerationClient
from event_scout.models import EditRequest, EditResult

logger = structlog.get_logger()


class ActivityEditor:
    """Turns a free-text edit instruction into a structured mutation."""

    def __init__(self, client: GenerationClient, settings: Optional[Settings] = None) -> None:
        from event_scout.config import get_settings

        self.client = client
        self.settings = settings or get_settings()

    async def process_edit(self, request: EditRequest) -> EditResult:
        """Ask the model for one edit operation on ``request.current_activity``.

        Args:
            request: Validated edit request.

        Returns:
            The model's EditResult.

        Raises:
            GenerationError: If the model call fails.
            ExtractionError: If the reply contains no JSON object.
            ValidationError: If the JSON does not describe a valid edit.
        """
        prompt = build_edit_prompt(
            edit_request=request.edit_request,
            current_activity=request.current_activity,
            city=request.city,
            day_date=request.day_date,
            interests=request.interests,
        )

        logger.info(
            "edit_started",
            activity=request.current_activity.get("name"),
            city=request.city,
        )
        result = await self.client.generate(
            prompt,
            search=self.settings.editor_use_search,
            temperature=self.settings.editor_temperature,
            max_output_tokens=self.settings.editor_max_output_tokens,
        )

        payload = extract_json(result.text)
        if not isinstance(payload, dict):
            raise ExtractionError("Edit response was not a JSON object")

        try:
            edit = EditResult.model_validate(payload)
        except PydanticValidationError as e:
            logger.error("edit_invalid_response", error=str(e))
            raise ValidationError(f"Invalid edit response: {e}") from e

        logger.info("edit_complete", intent=edit.intent.value, operation=edit.operation.value)
        return edit
