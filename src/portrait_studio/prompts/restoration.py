"""Structured JSON instruction for the photo restoration flow."""

import json
import logging
from enum import Enum
from typing import Any

from .schemas import RestoreOptions

logger = logging.getLogger(__name__)


def build_restoration_document(options: RestoreOptions) -> dict[str, Any]:
    """Build the nested restoration instruction for the given retouch options."""
    return {
        "version": "1.0",
        "task": "image_edit",
        "notes": (
            "Edit the photo into a professional-grade studio portrait equivalent to a "
            "Canon EOS R5. Keep the original face and pose."
        ),
        "input_image": "REPLACE_WITH_IMAGE_ID_OR_PATH",
        "camera_emulation": {
            "brand_model": "Canon EOS R5",
            "lens": "50mm f/1.8 (standard prime, slightly wider than 85mm)",
            "look": "ultra sharp, rich micro-contrast, natural color science",
        },
        "composition": {
            "framing": "three-quarter body (from mid-thigh up)",
            "arms": "both arms fully visible",
            "orientation": "portrait",
            "crop_policy": "do_not_crop_face_or_hands",
            "keep_pose": True,
            "zoom": "slight zoom-out for wider context",
        },
        "subject_constraints": {
            "keep_identity": True,
            "lock_features": ["eyes", "nose", "lips", "eyebrows", "jawline", "face_shape"],
            "expression_policy": "preserve_original",
        },
        "retouching": {
            "skin": {
                "tone": "keep original color",
                "finish": "smooth, healthy, radiant",
                "texture": "retain fine pores; avoid plastic look",
                "blemishes": options.blemish_removal,
                "frequency_separation_strength": options.skin_smoothing,
                "clarity_microcontrast": 0.15,
            },
            "hair": {
                "finish": "clean, neat, shiny",
                "flyaways": "reduce but keep natural strands",
            },
            "eyes": {
                "whites_desaturation": 0.1,
                "iris_clarity": options.eye_clarity,
                "avoid_overwhitening": True,
            },
            "teeth": {
                "natural_whiten": 0.08,
                "avoid_pure_white": True,
            },
            "clothing": {
                "policy": "upgrade quality while keeping same/similar style, cut, and color",
                "fabric_look": "premium, fine weave, crisp edges",
                "wrinkle_reduction": options.wrinkle_reduction.value,
                "texture_enhancement": options.clothing_texture,
            },
        },
        "lighting": {
            "setup": "bright, soft, even front light",
            "key": "beauty dish or ring light straight-on",
            "fill": "broad soft fill to remove harsh shadows",
            "shadow_control": "minimal, no deep shadows",
            "specular_highlights": "subtle, flattering",
            "white_balance": "neutral daylight",
            "exposure_target": "ETTR without clipping",
        },
        "background": {
            "type": "solid",
            "color": "navy blue (#0f2a4a)",
            "environment": "clean professional photo studio",
            "gradient": "very subtle center vignette",
            "separation": "gentle rim lift if needed",
        },
        "color_tone": {
            "overall": "natural, true-to-life skin tones",
            "saturation": "moderate",
            "contrast": "medium with soft roll-off",
            "vibrance": 0.1,
        },
        "detail_sharpness": {
            "method": "edge-aware sharpening",
            "amount": 0.35,
            "radius": 0.8,
            "threshold": 0.02,
            "noise_reduction": {
                "luminance": 0.2,
                "chroma": 0.25,
                "preserve_details": 0.8,
            },
        },
        "clean_up": {
            "remove_noise": True,
            "remove_artifacts": True,
            "banding_fix_on_background": True,
        },
        "output": {
            "resolution": (
                "Enhance to the highest possible detail and clarity, at least doubling the "
                "original resolution while strictly preserving the original aspect ratio. "
                "The image must be sharp and clear, free of digital artifacts."
            ),
            "dpi": 300,
            "format": "PNG",
            "color_space": "sRGB IEC61966-2.1",
            "bit_depth": "16-bit if supported, else 8-bit",
            "background_alpha": "opaque",
        },
        "safety_bounds": {
            "do_not": [
                "change face geometry or identity",
                "change pose",
                "alter clothing style drastically",
                "add heavy makeup",
                "over-smooth or plastic skin",
                "over-sharpen halos",
            ]
        },
        "negative_prompt": [
            "plastic skin",
            "over-whitened eyes/teeth",
            "harsh shadows",
            "color casts",
            "halo artifacts",
            "muddy blacks",
            "posterization/banding",
            "oversaturated skin",
            "blotchy NR",
        ],
        "control_strengths": {
            "face_identity_lock": 0.95,
            "pose_lock": 0.95,
            "background_replace_strength": 0.9,
            "clothes_style_lock": 0.85,
        },
        "metadata": {
            "locale": "en-US",
            "creator": "professional photo editor style",
            "purpose": "masterpiece studio portrait upgrade with zoom-out framing",
        },
    }


def build_restoration_prompt(options: RestoreOptions) -> str:
    """Serialize the restoration document as indented JSON."""
    return json.dumps(
        build_restoration_document(options), indent=2, ensure_ascii=False
    )


class PromptState(str, Enum):
    DERIVED = "derived"
    CUSTOMIZED = "customized"


class RestorationPrompt:
    """Restoration instruction that is either derived from options or user-edited.

    While ``derived`` the text follows every option change. Once the user
    edits it the text is ``customized`` and stays frozen until ``reset()``.
    """

    def __init__(self, options: RestoreOptions | None = None) -> None:
        self._options = options or RestoreOptions()
        self._custom_text: str | None = None

    @property
    def options(self) -> RestoreOptions:
        return self._options

    @property
    def state(self) -> PromptState:
        if self._custom_text is None:
            return PromptState.DERIVED
        return PromptState.CUSTOMIZED

    @property
    def derived_text(self) -> str:
        return build_restoration_prompt(self._options)

    @property
    def text(self) -> str:
        if self._custom_text is not None:
            return self._custom_text
        return self.derived_text

    def update_options(self, options: RestoreOptions) -> None:
        self._options = options
        if self._custom_text is not None:
            logger.debug("Restoration prompt is customized; options stored without regenerating")

    def customize(self, text: str) -> None:
        """Freeze the prompt to user-supplied text."""
        if text == self.derived_text:
            self._custom_text = None
            return
        self._custom_text = text

    def reset(self) -> None:
        """Return to text derived from the current options."""
        self._custom_text = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "options": self._options.model_dump(mode="json"),
            "prompt": self.text,
        }
