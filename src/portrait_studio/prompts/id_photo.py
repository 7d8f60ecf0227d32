"""Instruction text for the ID photo editor."""

from .schemas import (
    BACKGROUND_PRESETS,
    NO_OUTFIT_CHANGE,
    BackgroundOption,
    BlemishRemoval,
    EyeColor,
    FaceFlag,
    FaceModifications,
    FaceSelection,
    FaceShape,
    Gender,
    HairStyle,
    IdPhotoOptions,
    KeepFace,
    SkinSmoothing,
)

KEEP_BACKGROUND = "Keep the original background."

KEEP_CLOTHING = (
    "Keep the person's clothing as it is in the original photo. "
    "Do not change their outfit."
)

CLOTHING_PRESERVATION = (
    " It is absolutely crucial to keep the person's face, head, hair, and neck completely"
    " unchanged from the original photo. Do not alter their size, shape, features,"
    " expression, or position. The new clothing must be seamlessly integrated below the"
    " neck, perfectly fitting the original image's frame and proportions without"
    " distorting the person's posture or changing the image dimensions. The resulting"
    " image must show the person from the waist up, suitable for a passport or ID photo."
)

_AO_DAI = (
    "Change the person's clothing to a traditional Vietnamese {color} Ao Dai, "
    "styled appropriately for a professional photo."
)

OUTFIT_INSTRUCTIONS: dict[Gender, dict[str, str]] = {
    Gender.MALE: {
        "white_shirt": "Change the person's clothing to a formal white dress shirt.",
        "blue_shirt": "Change the person's clothing to a formal light blue dress shirt.",
        "black_shirt": "Change the person's clothing to a formal black dress shirt.",
        "black_vest_red_tie": (
            "Change the person's clothing to a formal black business suit "
            "with a white shirt and a red tie."
        ),
        "blue_vest_red_tie": (
            "Change the person's clothing to a formal dark blue business suit "
            "with a white shirt and a red tie."
        ),
    },
    Gender.FEMALE: {
        "white_shirt": (
            "Change the person's clothing to a formal white blouse suitable for an ID photo."
        ),
        "youth_union_shirt": (
            "Change the person's clothing to a Vietnamese Youth Union shirt "
            "(Áo Đoàn Thanh Niên). This is a dark blue, short-sleeved collared shirt. "
            "On the left chest area, there must be an emblem. The emblem must consist of "
            "a small, triangular red pennant flag with a yellow star inside. Directly below "
            "this flag, the text 'THANH NIÊN VIỆT NAM' should be clearly embroidered in "
            "yellow letters, with all words on a single line. The emblem should be "
            "positioned where a chest pocket would normally be."
        ),
        "blue_ao_dai": _AO_DAI.format(color="blue"),
        "white_ao_dai": _AO_DAI.format(color="white"),
        "red_ao_dai": _AO_DAI.format(color="red"),
        "deep_red_ao_dai": _AO_DAI.format(color="deep red (đỏ thẫm)"),
        "womens_office_vest": (
            "Change the person's clothing to a professional women's business suit "
            "or vest over a blouse."
        ),
    },
}

HAIR_INSTRUCTIONS: dict[HairStyle, str] = {
    HairStyle.KEEP: "Keep the person's hair as it is.",
    HairStyle.AUTO: (
        "Automatically style the hair to look neat and professional for an ID photo."
    ),
    HairStyle.FRONT: "Style the hair to be neatly combed down in the front.",
    HairStyle.BACK: "Style the hair to be neatly slicked back.",
}

_NATURAL_IDENTITY = (
    "The modification must be very slight, look completely natural, "
    "and not alter the person's recognizable identity."
)

BLEMISH_INSTRUCTIONS: dict[BlemishRemoval, str] = {
    BlemishRemoval.LIGHT: (
        "remove minor, temporary blemishes such as pimples and spots. "
        "The overall skin texture must be preserved and look natural."
    ),
    BlemishRemoval.HEAVY: (
        "thoroughly remove blemishes, spots, acne, and light scars. The result should be "
        "clear and clean skin, while critically maintaining a natural skin texture and "
        "avoiding a plastic or overly smooth look."
    ),
}

SMOOTHING_INSTRUCTIONS: dict[SkinSmoothing, str] = {
    SkinSmoothing.LIGHT: (
        "apply a light skin smoothing effect to even out skin tone and reduce very fine "
        "lines. The skin texture must be preserved and look completely natural."
    ),
    SkinSmoothing.STANDARD: (
        "apply a standard, professional-grade skin smoothing effect. Even out skin tone, "
        "reduce fine lines and pores slightly, but it is critical to maintain a natural "
        "skin texture and avoid a plastic or overly smooth, artificial look."
    ),
}

FACE_FLAG_INSTRUCTIONS: dict[FaceFlag, str] = {
    FaceFlag.SLIGHT_SMILE: (
        "subtly adjust the person's expression to a gentle, closed-mouth, "
        "professional-looking smile"
    ),
}

FACE_SHAPE_INSTRUCTIONS: dict[FaceShape, str] = {
    FaceShape.V_LINE: (
        "subtly and realistically refine the jawline and chin to create a gentle "
        "V-line shape. " + _NATURAL_IDENTITY
    ),
    FaceShape.SLIMMER: "subtly make the face look slightly slimmer. " + _NATURAL_IDENTITY,
}

PRESERVE_FACE = (
    "Preserve the person's original facial features and expression with absolute "
    "fidelity. Do not make any changes to the nose, mouth, skin texture, or any other "
    "facial characteristic. The face must remain identical to the source image."
)

EYE_COLOR_NAMES: dict[EyeColor, str] = {
    EyeColor.BLACK: "black",
    EyeColor.DARK_BROWN: "dark brown",
    EyeColor.LIGHT_BROWN: "light brown",
    EyeColor.BLUE: "blue",
    EyeColor.GREEN: "green",
}

KEEP_EYE_COLOR = "Keep the original eye color with absolute fidelity."

GLOBAL_REQUIREMENTS = (
    "The final image should look like a professional ID photo, showing the person from "
    "the waist up. Crucially, do not change the original image's dimensions, aspect "
    "ratio, or framing. The person's posture and position must remain exactly the same "
    "as in the original photo. Do not crop, resize, or alter the overall composition. "
    "The output image must have the exact same pixel dimensions (width and height) as "
    "the original input image. The final image must be of the highest possible "
    "professional quality, with a resolution of exactly 300 DPI, making it suitable for "
    "high-quality printing. It must be encoded as a lossless PNG to preserve maximum "
    "detail, fidelity, and color accuracy, with no compression artifacts."
)


def background_instruction(options: IdPhotoOptions) -> str:
    if options.background is None:
        return KEEP_BACKGROUND
    if options.background == BackgroundOption.CUSTOM:
        fill = f"a solid color with the hex code {options.custom_color}"
    else:
        name, hex_code = BACKGROUND_PRESETS[options.background]
        fill = f"a solid {name} color with the hex code {hex_code}"
    return f"Change the background to {fill}."


def clothing_instruction(options: IdPhotoOptions) -> str:
    if options.gender is None or options.outfit in (None, NO_OUTFIT_CHANGE):
        return KEEP_CLOTHING
    description = OUTFIT_INSTRUCTIONS[options.gender].get(options.outfit)
    if description is None:
        return KEEP_CLOTHING
    return description + CLOTHING_PRESERVATION


def face_instruction(options: IdPhotoOptions) -> str:
    """Combine every requested face change, or demand an identical face."""
    changes: list[str] = []

    if options.blemish_removal in BLEMISH_INSTRUCTIONS:
        changes.append(BLEMISH_INSTRUCTIONS[options.blemish_removal])
    if options.skin_smoothing in SMOOTHING_INSTRUCTIONS:
        changes.append(SMOOTHING_INSTRUCTIONS[options.skin_smoothing])
    if isinstance(options.face, FaceModifications):
        # Enum order keeps the text stable regardless of set iteration order
        changes.extend(
            FACE_FLAG_INSTRUCTIONS[flag] for flag in FaceFlag if flag in options.face.flags
        )
    if options.face_shape in FACE_SHAPE_INSTRUCTIONS:
        changes.append(FACE_SHAPE_INSTRUCTIONS[options.face_shape])

    if not changes:
        return PRESERVE_FACE
    return (
        f"Apply the following changes to the face: {' and '.join(changes)}. "
        "It is critical that you keep the original facial structure, identity, and all "
        "other features absolutely intact where not specified otherwise."
    )


def eye_instruction(options: IdPhotoOptions) -> str:
    if options.eye_color == EyeColor.KEEP:
        return KEEP_EYE_COLOR
    return (
        "Subtly and realistically change the person's eye color to a natural-looking "
        f"{EYE_COLOR_NAMES[options.eye_color]}. The change must look natural and preserve "
        "all original details of the eyes, such as reflections and shape."
    )


def build_id_photo_prompt(options: IdPhotoOptions) -> str:
    """Assemble the full ID photo instruction from the selected options.

    The result is a pure function of ``options``: equal options always
    produce byte-identical text.
    """
    parts = [
        background_instruction(options),
        clothing_instruction(options),
        HAIR_INSTRUCTIONS[options.hair_style],
        face_instruction(options),
        eye_instruction(options),
        GLOBAL_REQUIREMENTS,
    ]
    return " ".join(parts)


def toggle_face_option(selection: FaceSelection, key: str | FaceFlag) -> FaceSelection:
    """Toggle a face option, keeping 'keep' exclusive of every modification.

    Selecting ``keep`` drops all modifications. Selecting a modification drops
    ``keep`` and flips that flag; an emptied modification set falls back to
    keeping the original face.
    """
    if key == "keep":
        return KeepFace()

    flag = FaceFlag(key)
    current = selection.flags if isinstance(selection, FaceModifications) else frozenset()
    flags = current - {flag} if flag in current else current | {flag}
    if not flags:
        return KeepFace()
    return FaceModifications(flags=flags)
