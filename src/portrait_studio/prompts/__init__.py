"""Prompt construction for ID photo and restoration edits."""

from .id_photo import build_id_photo_prompt, toggle_face_option
from .restoration import (
    PromptState,
    RestorationPrompt,
    build_restoration_document,
    build_restoration_prompt,
)

__all__ = [
    "PromptState",
    "RestorationPrompt",
    "build_id_photo_prompt",
    "build_restoration_document",
    "build_restoration_prompt",
    "toggle_face_option",
]
