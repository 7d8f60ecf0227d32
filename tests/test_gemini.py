"""
Unit tests for the Gemini backend response handling and registry.
"""

from types import SimpleNamespace

import pytest
from google.genai import types

from portrait_studio.config import settings
from portrait_studio.editing import EditorRegistry
from portrait_studio.editing.errors import (
    EditError,
    ErrorCategory,
    SafetyBlocked,
    UnknownEditorBackend,
    classify_error,
)
from portrait_studio.editing.gemini import GeminiImageEditor, normalize_response


def _response(parts=None, candidates=True, text=None, block_reason=None):
    feedback = SimpleNamespace(block_reason=block_reason) if block_reason else None
    if not candidates:
        return SimpleNamespace(candidates=[], text=text, prompt_feedback=feedback)
    content = SimpleNamespace(parts=parts or [])
    return SimpleNamespace(
        candidates=[SimpleNamespace(content=content)],
        text=text,
        prompt_feedback=feedback,
    )


def _image_part(data=b"\x89PNG", mime_type="image/png"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)


def _text_part(text):
    return SimpleNamespace(inline_data=None, text=text)


class TestNormalizeResponse:
    def test_image_and_caption(self):
        result = normalize_response(_response([_text_part("Done."), _image_part(b"img", "image/jpeg")]))

        assert result.image_bytes == b"img"
        assert result.mime_type == "image/jpeg"
        assert result.text == "Done."

    def test_later_parts_win(self):
        result = normalize_response(_response([
            _image_part(b"first"),
            _text_part("one"),
            _image_part(b"second"),
            _text_part("two"),
        ]))

        assert result.image_bytes == b"second"
        assert result.text == "two"

    def test_missing_mime_type_defaults_to_png(self):
        result = normalize_response(_response([_image_part(b"img", None)]))
        assert result.mime_type == "image/png"

    def test_text_only(self):
        result = normalize_response(_response([_text_part("I can't do that.")]))
        assert result.image_bytes is None
        assert result.text == "I can't do that."

    def test_no_candidates_uses_response_text(self):
        result = normalize_response(_response(candidates=False, text="Nothing to show"))
        assert result.image_bytes is None
        assert result.text == "Nothing to show"

    def test_blocked_prompt_raises(self):
        with pytest.raises(EditError, match="safety"):
            normalize_response(_response(candidates=False, block_reason="SAFETY"))

    def test_image_safety_block_classified_as_safety(self):
        """The block reason names 'image' but must not read as a format problem."""
        response = types.GenerateContentResponse(
            prompt_feedback=types.GenerateContentResponsePromptFeedback(
                block_reason=types.BlockedReason.IMAGE_SAFETY,
            ),
        )

        with pytest.raises(SafetyBlocked) as info:
            normalize_response(response)

        assert info.value.reason == "IMAGE_SAFETY"
        assert classify_error(info.value) == ErrorCategory.SAFETY


class TestGeminiImageEditor:
    def test_missing_key_fails_on_load(self):
        editor = GeminiImageEditor(api_key="")
        with pytest.raises(EditError, match="API key"):
            editor.load()
        assert not editor.is_loaded

    async def test_missing_key_fails_on_edit(self):
        editor = GeminiImageEditor(api_key="")
        with pytest.raises(EditError):
            await editor.edit(b"data", "image/png", "prompt")

    def test_load_and_unload(self):
        editor = GeminiImageEditor(api_key="test-key", model="gemini-2.5-flash-image")
        editor.load()
        assert editor.is_loaded
        editor.unload()
        assert not editor.is_loaded


class TestEditorRegistry:
    """Backends are built from settings; unknown names fail clearly."""

    @pytest.fixture(autouse=True)
    def fresh_registry(self):
        EditorRegistry.shutdown()
        yield
        EditorRegistry.shutdown()

    def test_gemini_registered(self):
        assert "gemini" in EditorRegistry.get_available_editors()

    def test_default_backend_built_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "editor_backend", "gemini")
        monkeypatch.setattr(settings, "gemini_api_key", "test-key")
        monkeypatch.setattr(settings, "gemini_model", "gemini-test-model")

        editor = EditorRegistry.get_editor()

        assert isinstance(editor, GeminiImageEditor)
        assert editor.model == "gemini-test-model"
        assert EditorRegistry.get_editor("gemini") is editor

    def test_unknown_editor(self):
        with pytest.raises(UnknownEditorBackend, match="EDITOR_BACKEND.*gemini"):
            EditorRegistry.get_editor("dall-e")

    def test_unknown_configured_backend(self, monkeypatch):
        monkeypatch.setattr(settings, "editor_backend", "dall-e")
        with pytest.raises(UnknownEditorBackend, match="'dall-e'"):
            EditorRegistry.get_editor()
