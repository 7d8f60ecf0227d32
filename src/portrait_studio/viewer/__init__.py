"""Comparison and crop viewer state."""

from .comparison import ComparisonPanel, ComparisonView, ViewMode
from .crop import (
    CROP_PRESET_RATIOS,
    CropPreset,
    CropRegion,
    CropSession,
    CropState,
    CropStateError,
)
from .gesture import DragGesture

__all__ = [
    "CROP_PRESET_RATIOS",
    "ComparisonPanel",
    "ComparisonView",
    "CropPreset",
    "CropRegion",
    "CropSession",
    "CropState",
    "CropStateError",
    "DragGesture",
    "ViewMode",
]
