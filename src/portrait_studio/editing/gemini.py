"""Gemini image editing backend (google-genai)."""

import logging
from typing import Any

from google import genai
from google.genai import types
from google.genai.types import Modality

from ..config import settings
from .base import BaseImageEditor, EditResult
from .errors import EditError, SafetyBlocked

logger = logging.getLogger(__name__)


def normalize_response(response: Any) -> EditResult:
    """Pull the edited image and caption out of a generate_content response.

    Only the first candidate is read. Inline data becomes the image and text
    parts become the caption; later parts of the same kind win. With no
    candidates the top-level response text is used as the caption.
    """
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    if block_reason:
        raise SafetyBlocked(getattr(block_reason, "value", str(block_reason)))

    result = EditResult()
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        result.text = getattr(response, "text", None)
        return result

    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            result.image_bytes = inline.data
            result.mime_type = getattr(inline, "mime_type", None) or "image/png"
        elif getattr(part, "text", None):
            result.text = part.text
    return result


class GeminiImageEditor(BaseImageEditor):
    """Gemini 2.5 Flash Image editing via the Gemini Developer API."""

    name = "gemini"
    display_name = "Gemini Flash Image"

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        super().__init__()
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self._client: genai.Client | None = None

    def load(self) -> None:
        if self._loaded:
            return
        if not self._api_key:
            raise EditError("API key is not set. Configure GEMINI_API_KEY.")
        self._client = genai.Client(api_key=self._api_key)
        self._loaded = True
        logger.info(f"{self.display_name} client initialized (model={self.model})")

    def unload(self) -> None:
        if not self._loaded:
            return
        self._client = None
        self._loaded = False
        logger.info(f"{self.display_name} client released")

    async def edit(self, image_bytes: bytes, mime_type: str, prompt: str) -> EditResult:
        self.load()

        contents = [
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            types.Part.from_text(text=prompt),
        ]
        config = types.GenerateContentConfig(
            response_modalities=[Modality.IMAGE, Modality.TEXT],
        )

        logger.info(f"Calling {self.model}: {mime_type}, {len(image_bytes)} bytes")
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )

        result = normalize_response(response)
        if result.image_bytes is None:
            logger.warning(f"{self.model} returned no image (text={result.text!r:.80})")
        return result
