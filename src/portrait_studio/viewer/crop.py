"""Aspect-ratio crop of the result image.

The crop rectangle lives in displayed (client) pixel space while the user
positions it. Applying converts it to natural pixel space per axis and burns
that sub-rectangle into a new PNG bitmap.
"""

import io
import logging
import math
from dataclasses import asdict, dataclass
from enum import Enum

from PIL import Image

from ..editing.transfer import ResultImage
from .gesture import DragGesture

logger = logging.getLogger(__name__)

INITIAL_COVERAGE = 0.9


class CropPreset(str, Enum):
    """Print sizes, expressed as width x height."""

    P4X6 = "4x6"
    P3X4 = "3x4"
    P2X3 = "2x3"


CROP_PRESET_RATIOS: dict[CropPreset, float] = {
    CropPreset.P4X6: 4 / 6,
    CropPreset.P3X4: 3 / 4,
    CropPreset.P2X3: 2 / 3,
}


class CropState(str, Enum):
    IDLE = "idle"
    CROPPING = "cropping"


class CropStateError(RuntimeError):
    """Crop operation requested in the wrong state."""


@dataclass(frozen=True)
class CropRegion:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self):
        return asdict(self)


def initial_crop_region(
    preset: CropPreset, container_width: float, container_height: float
) -> CropRegion:
    """Centered rectangle covering 90% of the binding dimension at the preset ratio."""
    ratio = CROP_PRESET_RATIOS[preset]
    if container_width / container_height > ratio:
        # Limited by height
        height = container_height * INITIAL_COVERAGE
        width = height * ratio
    else:
        width = container_width * INITIAL_COVERAGE
        height = width / ratio
    return CropRegion(
        x=(container_width - width) / 2,
        y=(container_height - height) / 2,
        width=width,
        height=height,
    )


def clamp_position(
    region: CropRegion,
    x: float,
    y: float,
    container_width: float,
    container_height: float,
) -> CropRegion:
    """Move the region to (x, y) without letting it leave the container."""
    new_x = max(0.0, min(x, container_width - region.width))
    new_y = max(0.0, min(y, container_height - region.height))
    return CropRegion(x=new_x, y=new_y, width=region.width, height=region.height)


def to_natural(
    region: CropRegion,
    natural_size: tuple[int, int],
    displayed_size: tuple[float, float],
) -> CropRegion:
    """Scale a displayed-space region into natural pixel space, per axis."""
    scale_x = natural_size[0] / displayed_size[0]
    scale_y = natural_size[1] / displayed_size[1]
    return CropRegion(
        x=region.x * scale_x,
        y=region.y * scale_y,
        width=region.width * scale_x,
        height=region.height * scale_y,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def pixel_box(region: CropRegion, image_size: tuple[int, int]) -> tuple[int, int, int, int]:
    """Integer (left, top, right, bottom) box for a natural-space region.

    Each value is rounded half-up. The box size is exactly the rounded
    width/height (at least 1px, at most the image); if rounding pushes it past
    an edge the origin moves inward instead of shrinking the box.
    """
    image_width, image_height = image_size
    width = min(max(1, _round_half_up(region.width)), image_width)
    height = min(max(1, _round_half_up(region.height)), image_height)
    left = max(0, min(_round_half_up(region.x), image_width - width))
    top = max(0, min(_round_half_up(region.y), image_height - height))
    return left, top, left + width, top + height


def crop_image(data: bytes, natural_region: CropRegion) -> tuple[bytes, tuple[int, int]]:
    """Crop encoded image bytes to a natural-space region and return PNG bytes."""
    with Image.open(io.BytesIO(data)) as img:
        box = pixel_box(natural_region, img.size)
        cropped = img.crop(box)

    buffer = io.BytesIO()
    cropped.save(buffer, format="PNG")
    return buffer.getvalue(), cropped.size


class CropSession:
    """Idle -> Cropping -> Idle crop workflow for one viewing context."""

    def __init__(self) -> None:
        self.state = CropState.IDLE
        self.preset: CropPreset | None = None
        self.region: CropRegion | None = None
        self.container: tuple[float, float] | None = None
        self.gesture: DragGesture | None = None

    def _require_cropping(self) -> None:
        if self.state != CropState.CROPPING or self.region is None:
            raise CropStateError("No crop in progress")

    def start(self, preset: CropPreset, container_width: float, container_height: float) -> CropRegion:
        if container_width <= 0 or container_height <= 0:
            raise ValueError("Displayed image size must be positive")
        self.release_gesture()
        self.preset = preset
        self.container = (container_width, container_height)
        self.region = initial_crop_region(preset, container_width, container_height)
        self.state = CropState.CROPPING
        logger.info(f"Crop started: preset={preset.value}, region={self.region}")
        return self.region

    def move_to(self, x: float, y: float) -> CropRegion:
        self._require_cropping()
        self.region = clamp_position(self.region, x, y, *self.container)
        return self.region

    def begin_drag(self, pointer_x: float, pointer_y: float) -> DragGesture:
        """Acquire a drag gesture, releasing any gesture still held."""
        self._require_cropping()
        self.release_gesture()
        self.gesture = DragGesture(
            start_x=pointer_x,
            start_y=pointer_y,
            origin_x=self.region.x,
            origin_y=self.region.y,
            on_move=self.move_to,
            on_release=self._forget_gesture,
        )
        return self.gesture

    def drag(self, pointer_x: float, pointer_y: float) -> CropRegion:
        self._require_cropping()
        if self.gesture is not None:
            self.gesture.move(pointer_x, pointer_y)
        return self.region

    def _forget_gesture(self, gesture: DragGesture) -> None:
        if self.gesture is gesture:
            self.gesture = None

    def release_gesture(self) -> None:
        if self.gesture is not None:
            self.gesture.release()

    def apply(self, result: ResultImage) -> ResultImage:
        """Burn the current region into a new result image and return to idle."""
        self._require_cropping()
        data = result.data
        with Image.open(io.BytesIO(data)) as img:
            natural_size = img.size
        natural = to_natural(self.region, natural_size, self.container)
        cropped, size = crop_image(data, natural)
        logger.info(f"Crop applied: {natural_size[0]}x{natural_size[1]} -> {size[0]}x{size[1]}")
        self.cancel()
        return ResultImage.from_bytes(cropped, "image/png")

    def cancel(self) -> None:
        self.release_gesture()
        self.state = CropState.IDLE
        self.preset = None
        self.region = None
        self.container = None

    def to_dict(self):
        return {
            "state": self.state.value,
            "preset": self.preset.value if self.preset else None,
            "region": self.region.to_dict() if self.region else None,
            "dragging": self.gesture is not None,
        }
