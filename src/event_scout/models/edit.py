"""Models for single-activity edit requests."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class EditIntent(str, Enum):
    """What the user is trying to do with the activity."""

    EDIT = "edit"
    ISSUE = "issue"
    QUESTION = "question"
    UNCLEAR = "unclear"


class EditOperation(str, Enum):
    """Mutation selected by the model."""

    REPLACE = "replace"
    DELETE = "delete"
    UPDATE_TIME = "update_time"
    UPDATE_DESCRIPTION = "update_description"
    ADD = "add"
    REPORT_ISSUE = "report_issue"
    CLARIFY = "clarify"
    ANSWER = "answer"


_INTENT_BY_OPERATION: dict[EditOperation, EditIntent] = {
    EditOperation.REPORT_ISSUE: EditIntent.ISSUE,
    EditOperation.ANSWER: EditIntent.QUESTION,
    EditOperation.CLARIFY: EditIntent.UNCLEAR,
}


class EditRequest(BaseModel):
    """Caller-supplied edit of one activity."""

    edit_request: str = Field(description="Free-text edit instruction")
    current_activity: dict[str, Any] = Field(description="Activity being edited")
    city: Optional[str] = None
    day_date: Optional[str] = None
    interests: list[str] = Field(default_factory=list)

    @field_validator("edit_request")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        text = v.strip()
        if not text:
            raise ValueError("edit_request must not be blank")
        return text

    @field_validator("interests", mode="before")
    @classmethod
    def _split_interests(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class EditResult(BaseModel):
    """Structured mutation returned for an edit request."""

    intent: EditIntent
    operation: EditOperation
    updated_activity: Optional[dict[str, Any]] = None
    new_activity: Optional[dict[str, Any]] = None
    change_summary: str = ""
    message: Optional[str] = None
    suggested_actions: Optional[list[str]] = None

    @model_validator(mode="before")
    @classmethod
    def _infer_intent(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("intent"):
            return data
        try:
            operation = EditOperation(str(data.get("operation", "")).strip().lower())
        except ValueError:
            return data
        return {**data, "intent": _INTENT_BY_OPERATION.get(operation, EditIntent.EDIT)}

    @field_validator("intent", "operation", mode="before")
    @classmethod
    def _lower(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("change_summary", mode="before")
    @classmethod
    def _none_summary(cls, v: object) -> str:
        return "" if v is None else str(v)
