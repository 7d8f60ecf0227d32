"""Option models for prompt construction."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator


class BackgroundOption(str, Enum):
    """Background fill choices for ID photos."""

    LIGHT_BLUE = "light_blue"
    WHITE = "white"
    LIGHT_GRAY = "light_gray"
    DARK_BLUE = "dark_blue"
    MEDIUM_GRAY = "medium_gray"
    GREEN = "green"
    RED = "red"
    CUSTOM = "custom"


# Preset backgrounds as (color name used in the instruction, hex code)
BACKGROUND_PRESETS: dict[BackgroundOption, tuple[str, str]] = {
    BackgroundOption.LIGHT_BLUE: ("very light blue", "#E0F2FE"),
    BackgroundOption.WHITE: ("white", "#ffffff"),
    BackgroundOption.LIGHT_GRAY: ("light gray", "#E5E7EB"),
    BackgroundOption.DARK_BLUE: ("dark blue", "#1E3A8A"),
    BackgroundOption.MEDIUM_GRAY: ("medium gray", "#9CA3AF"),
    BackgroundOption.GREEN: ("pale green", "#D1FAE5"),
    BackgroundOption.RED: ("pale red", "#FEE2E2"),
}


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


NO_OUTFIT_CHANGE = "none"

MALE_OUTFITS: dict[str, str] = {
    NO_OUTFIT_CHANGE: "No change",
    "white_shirt": "White shirt",
    "blue_shirt": "Blue shirt",
    "black_shirt": "Black shirt",
    "black_vest_red_tie": "Black suit, red tie",
    "blue_vest_red_tie": "Blue suit, red tie",
}

FEMALE_OUTFITS: dict[str, str] = {
    NO_OUTFIT_CHANGE: "No change",
    "white_shirt": "White blouse",
    "youth_union_shirt": "Youth Union shirt",
    "blue_ao_dai": "Blue ao dai",
    "white_ao_dai": "White ao dai",
    "red_ao_dai": "Red ao dai",
    "deep_red_ao_dai": "Deep red ao dai",
    "womens_office_vest": "Women's office suit",
}

OUTFITS: dict[Gender, dict[str, str]] = {
    Gender.MALE: MALE_OUTFITS,
    Gender.FEMALE: FEMALE_OUTFITS,
}


class HairStyle(str, Enum):
    KEEP = "keep"
    AUTO = "auto"
    FRONT = "front"
    BACK = "back"


class FaceFlag(str, Enum):
    """Independently toggleable face modifications."""

    SLIGHT_SMILE = "slight_smile"


class BlemishRemoval(str, Enum):
    NONE = "none"
    LIGHT = "light"
    HEAVY = "heavy"


class FaceShape(str, Enum):
    KEEP = "keep"
    V_LINE = "v-line"
    SLIMMER = "slimmer"


class SkinSmoothing(str, Enum):
    NONE = "none"
    LIGHT = "light"
    STANDARD = "standard"


class EyeColor(str, Enum):
    KEEP = "keep"
    BLACK = "black"
    DARK_BROWN = "dark_brown"
    LIGHT_BROWN = "light_brown"
    BLUE = "blue"
    GREEN = "green"


class KeepFace(BaseModel):
    """Preserve the original face with no modifications."""

    kind: Literal["keep"] = "keep"


class FaceModifications(BaseModel):
    """A non-empty set of face modifications."""

    kind: Literal["modify"] = "modify"
    flags: frozenset[FaceFlag] = Field(..., min_length=1)


FaceSelection = Annotated[KeepFace | FaceModifications, Field(discriminator="kind")]


class IdPhotoOptions(BaseModel):
    """User selections for the ID photo editor."""

    background: BackgroundOption | None = Field(
        default=None, description="Background fill (None keeps the original)"
    )
    custom_color: str = Field(
        default="#e0e0e0",
        pattern=r"^#[0-9a-fA-F]{6}$",
        description="Hex color used when background is 'custom'",
    )
    gender: Gender | None = None
    outfit: str | None = Field(
        default=None, description="Outfit key for the selected gender"
    )
    hair_style: HairStyle = HairStyle.KEEP
    face: FaceSelection = Field(default_factory=KeepFace)
    blemish_removal: BlemishRemoval = BlemishRemoval.NONE
    face_shape: FaceShape = FaceShape.KEEP
    skin_smoothing: SkinSmoothing = SkinSmoothing.NONE
    eye_color: EyeColor = EyeColor.KEEP

    @model_validator(mode="after")
    def check_outfit(self) -> "IdPhotoOptions":
        """Reject outfit keys that do not exist for the chosen gender."""
        if self.gender is not None and self.outfit is not None:
            if self.outfit not in OUTFITS[self.gender]:
                raise ValueError(
                    f"Unknown outfit '{self.outfit}' for gender '{self.gender.value}'"
                )
        return self


class WrinkleReduction(str, Enum):
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"


class RestoreOptions(BaseModel):
    """Retouch strengths for the photo restoration flow."""

    skin_smoothing: float = Field(default=0.4, ge=0.0, le=1.0)
    eye_clarity: float = Field(default=0.2, ge=0.0, le=1.0)
    clothing_texture: float = Field(default=0.2, ge=0.0, le=1.0)
    wrinkle_reduction: WrinkleReduction = WrinkleReduction.MODERATE
    blemish_removal: str = Field(
        default="lightly reduce temporary blemishes only", max_length=256
    )


class FaceToggleRequest(BaseModel):
    """Toggle one face option against the current selection."""

    selection: FaceSelection = Field(default_factory=KeepFace)
    key: Literal["keep"] | FaceFlag


class PromptResponse(BaseModel):
    prompt: str


class RestorationPromptResponse(BaseModel):
    prompt: str
    document: dict
