"""Base class for image editing backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class EditResult:
    """Normalized backend response: at most one image plus an optional caption."""

    image_bytes: bytes | None = None
    mime_type: str | None = None
    text: str | None = None


class BaseImageEditor(ABC):
    """Abstract base class for remote image editing services."""

    name: str = ""
    display_name: str = ""

    def __init__(self) -> None:
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """Check if the client is initialized."""
        return self._loaded

    @abstractmethod
    def load(self) -> None:
        """Initialize the API client."""
        ...

    @abstractmethod
    def unload(self) -> None:
        """Release the API client."""
        ...

    @abstractmethod
    async def edit(self, image_bytes: bytes, mime_type: str, prompt: str) -> EditResult:
        """Edit an image according to the instruction.

        Args:
            image_bytes: Raw source image bytes
            mime_type: Declared media type of the source image
            prompt: Instruction text (prose or JSON)

        Returns:
            EditResult with the edited image, if any, and optional caption
        """
        ...
