"""Single-activity editing."""

from event_scout.editor.editor import ActivityEditor
from event_scout.editor.prompt import build_edit_prompt

__all__ = ["ActivityEditor", "build_edit_prompt"]
