"""Prompt preview API router."""

from fastapi import APIRouter

from ..config import settings
from ..editing.transfer import ALLOWED_MEDIA_TYPES
from ..prompts import build_id_photo_prompt, build_restoration_document, toggle_face_option
from ..prompts.id_photo import EYE_COLOR_NAMES
from ..prompts.restoration import build_restoration_prompt
from ..prompts.schemas import (
    BACKGROUND_PRESETS,
    BlemishRemoval,
    FaceFlag,
    FaceShape,
    FaceToggleRequest,
    HairStyle,
    IdPhotoOptions,
    OUTFITS,
    PromptResponse,
    RestorationPromptResponse,
    RestoreOptions,
    SkinSmoothing,
    WrinkleReduction,
)
from ..viewer import CROP_PRESET_RATIOS

router = APIRouter(prefix="/prompts", tags=["prompts"])


@router.get("/catalog")
async def get_catalog():
    """List every selectable option, for building the editor forms."""
    return {
        "backgrounds": {
            option.value: {"name": name, "color": color}
            for option, (name, color) in BACKGROUND_PRESETS.items()
        },
        "outfits": {gender.value: outfits for gender, outfits in OUTFITS.items()},
        "hair_styles": [style.value for style in HairStyle],
        "face_flags": ["keep"] + [flag.value for flag in FaceFlag],
        "blemish_removal": [level.value for level in BlemishRemoval],
        "face_shapes": [shape.value for shape in FaceShape],
        "skin_smoothing": [level.value for level in SkinSmoothing],
        "eye_colors": {"keep": "keep"} | {c.value: name for c, name in EYE_COLOR_NAMES.items()},
        "wrinkle_reduction": [level.value for level in WrinkleReduction],
        "crop_presets": {preset.value: ratio for preset, ratio in CROP_PRESET_RATIOS.items()},
        "upload": {
            "media_types": list(ALLOWED_MEDIA_TYPES),
            "max_mb": settings.max_upload_mb,
        },
    }


@router.post("/id-photo", response_model=PromptResponse)
async def preview_id_photo_prompt(options: IdPhotoOptions):
    """Build the ID photo instruction for the given options."""
    return PromptResponse(prompt=build_id_photo_prompt(options))


@router.post("/restoration", response_model=RestorationPromptResponse)
async def preview_restoration_prompt(options: RestoreOptions):
    """Build the restoration JSON instruction for the given retouch options."""
    return RestorationPromptResponse(
        prompt=build_restoration_prompt(options),
        document=build_restoration_document(options),
    )


@router.post("/face-toggle")
async def toggle_face(request: FaceToggleRequest):
    """Toggle a face option, keeping 'keep' exclusive of modifications."""
    selection = toggle_face_option(request.selection, request.key)
    return selection.model_dump(mode="json")
