"""Image editing backends for Portrait Studio."""

import logging
from typing import TYPE_CHECKING, Callable

from ..config import settings
from .errors import UnknownEditorBackend

if TYPE_CHECKING:
    from .base import BaseImageEditor

logger = logging.getLogger(__name__)


class EditorRegistry:
    """Editing backends by name, built from settings on first use.

    One client per backend is kept for the process and released on shutdown.
    """

    _factories: dict[str, Callable[[], "BaseImageEditor"]] = {}
    _instances: dict[str, "BaseImageEditor"] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[[], "BaseImageEditor"]) -> None:
        cls._factories[name] = factory

    @classmethod
    def get_editor(cls, name: str | None = None) -> "BaseImageEditor":
        """Return the backend named by ``name``, or by ``settings.editor_backend``.

        Raises:
            UnknownEditorBackend: the name is not registered
        """
        name = name or settings.editor_backend
        if name not in cls._factories:
            available = ", ".join(sorted(cls._factories)) or "none"
            raise UnknownEditorBackend(
                f"Unknown editor backend '{name}' (set EDITOR_BACKEND to one of: {available})"
            )

        if name not in cls._instances:
            cls._instances[name] = cls._factories[name]()
            logger.info(f"Created editor backend {name}")
        return cls._instances[name]

    @classmethod
    def get_available_editors(cls) -> list[str]:
        return list(cls._factories)

    @classmethod
    def shutdown(cls) -> None:
        """Release every created editor client."""
        for instance in cls._instances.values():
            instance.unload()
        cls._instances.clear()


def _gemini_editor() -> "BaseImageEditor":
    from .gemini import GeminiImageEditor

    return GeminiImageEditor(api_key=settings.gemini_api_key, model=settings.gemini_model)


EditorRegistry.register("gemini", _gemini_editor)
