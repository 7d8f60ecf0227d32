"""
Unit tests for the restoration JSON prompt and its derived/customized state.
"""

import json

import pytest
from pydantic import ValidationError

from portrait_studio.prompts import (
    PromptState,
    RestorationPrompt,
    build_restoration_document,
    build_restoration_prompt,
)
from portrait_studio.prompts.schemas import RestoreOptions, WrinkleReduction


class TestRestorationDocument:
    def test_options_flow_into_document(self):
        options = RestoreOptions(
            skin_smoothing=0.75,
            eye_clarity=0.5,
            clothing_texture=0.1,
            wrinkle_reduction=WrinkleReduction.LIGHT,
        )
        document = build_restoration_document(options)

        assert document["retouching"]["skin"]["frequency_separation_strength"] == 0.75
        assert document["retouching"]["eyes"]["iris_clarity"] == 0.5
        assert document["retouching"]["clothing"]["texture_enhancement"] == 0.1
        assert document["retouching"]["clothing"]["wrinkle_reduction"] == "light"
        assert document["retouching"]["skin"]["blemishes"] == (
            "lightly reduce temporary blemishes only"
        )

    def test_document_sections(self):
        document = build_restoration_document(RestoreOptions())
        for section in (
            "camera_emulation", "composition", "retouching", "lighting", "background",
            "color_tone", "detail_sharpness", "output", "safety_bounds", "negative_prompt",
        ):
            assert section in document

    def test_document_is_english(self):
        document = build_restoration_document(RestoreOptions())
        assert document["metadata"]["locale"] == "en-US"
        assert document["composition"]["arms"] == "both arms fully visible"

    def test_prompt_is_indented_json(self):
        prompt = build_restoration_prompt(RestoreOptions())
        assert json.loads(prompt) == build_restoration_document(RestoreOptions())
        assert prompt.startswith('{\n  "version": "1.0"')

    def test_prompt_is_deterministic(self):
        options = RestoreOptions(skin_smoothing=0.3)
        assert build_restoration_prompt(options) == build_restoration_prompt(
            RestoreOptions(skin_smoothing=0.3)
        )

    @pytest.mark.parametrize("field", ["skin_smoothing", "eye_clarity", "clothing_texture"])
    def test_sliders_bounded(self, field):
        with pytest.raises(ValidationError):
            RestoreOptions(**{field: 1.5})


class TestRestorationPromptState:
    def test_derived_follows_options(self):
        prompt = RestorationPrompt()
        prompt.update_options(RestoreOptions(eye_clarity=0.9))

        assert prompt.state == PromptState.DERIVED
        assert json.loads(prompt.text)["retouching"]["eyes"]["iris_clarity"] == 0.9

    def test_customized_text_frozen_on_option_change(self):
        prompt = RestorationPrompt()
        prompt.customize("Make it look like a studio portrait.")
        prompt.update_options(RestoreOptions(eye_clarity=0.9))

        assert prompt.state == PromptState.CUSTOMIZED
        assert prompt.text == "Make it look like a studio portrait."
        assert prompt.options.eye_clarity == 0.9

    def test_reset_regenerates_from_current_options(self):
        prompt = RestorationPrompt()
        prompt.customize("custom")
        prompt.update_options(RestoreOptions(clothing_texture=0.6))
        prompt.reset()

        assert prompt.state == PromptState.DERIVED
        assert prompt.text == build_restoration_prompt(RestoreOptions(clothing_texture=0.6))

    def test_customizing_with_derived_text_stays_derived(self):
        prompt = RestorationPrompt()
        prompt.customize(prompt.derived_text)
        assert prompt.state == PromptState.DERIVED

    def test_to_dict(self):
        data = RestorationPrompt().to_dict()
        assert data["state"] == "derived"
        assert data["options"]["wrinkle_reduction"] == "moderate"
        assert data["prompt"] == build_restoration_prompt(RestoreOptions())
