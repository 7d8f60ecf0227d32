"""Scoped pointer-drag gesture for repositioning the crop rectangle."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class DragGesture:
    """One pointer drag, from pointer-down until release.

    Holds the pointer start and the rectangle origin captured on
    pointer-down. ``release()`` is idempotent and also runs on context exit,
    so the gesture cannot outlive its owner.
    """

    def __init__(
        self,
        start_x: float,
        start_y: float,
        origin_x: float,
        origin_y: float,
        on_move: Callable[[float, float], None],
        on_release: Callable[["DragGesture"], None] | None = None,
    ) -> None:
        self.start_x = start_x
        self.start_y = start_y
        self.origin_x = origin_x
        self.origin_y = origin_y
        self._on_move = on_move
        self._on_release = on_release
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def move(self, pointer_x: float, pointer_y: float) -> None:
        """Apply the pointer delta since pointer-down to the captured origin."""
        if not self._active:
            return
        dx = pointer_x - self.start_x
        dy = pointer_y - self.start_y
        self._on_move(self.origin_x + dx, self.origin_y + dy)

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._on_release is not None:
            self._on_release(self)
        logger.debug("Drag gesture released")

    def __enter__(self) -> "DragGesture":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
