"""Shared API schemas."""

from pydantic import BaseModel, Field

from .viewer import CropPreset, ViewMode


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    editor: str
    available_editors: list[str]


class EditErrorDetail(BaseModel):
    """Body of a failed submission."""

    category: str
    message: str
    caption: str | None = None


class ViewModeRequest(BaseModel):
    mode: ViewMode


class PanelUpdateRequest(BaseModel):
    """Update one comparison panel; omitted fields are left unchanged."""

    slider_position: float | None = Field(default=None, ge=0.0, le=100.0)
    show_result: bool | None = None
    open: bool | None = Field(
        default=None, description="Open or close the fullscreen overlay"
    )


class CropStartRequest(BaseModel):
    preset: CropPreset
    displayed_width: float = Field(..., gt=0, description="Rendered result width in pixels")
    displayed_height: float = Field(..., gt=0, description="Rendered result height in pixels")


class PointerRequest(BaseModel):
    x: float
    y: float


class CustomPromptRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=65536)
