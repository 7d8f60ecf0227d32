"""Before/after comparison state for inline and fullscreen viewing."""

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SLIDER_POSITION = 50.0


class ViewMode(str, Enum):
    SLIDER = "slider"
    TOGGLE = "toggle"


@dataclass
class ComparisonPanel:
    """Reveal slider position and toggle visibility for one viewing context."""

    slider_position: float = DEFAULT_SLIDER_POSITION
    show_result: bool = True

    def set_slider(self, position: float) -> None:
        self.slider_position = max(0.0, min(100.0, position))

    def set_show_result(self, show: bool) -> None:
        self.show_result = show

    def flip(self) -> None:
        self.show_result = not self.show_result

    def reset(self) -> None:
        self.slider_position = DEFAULT_SLIDER_POSITION
        self.show_result = True


@dataclass
class ComparisonView:
    """Comparison mode shared by both contexts, with per-context panel state."""

    mode: ViewMode = ViewMode.SLIDER
    inline: ComparisonPanel = field(default_factory=ComparisonPanel)
    fullscreen: ComparisonPanel = field(default_factory=ComparisonPanel)
    fullscreen_open: bool = False

    def panel(self, context: str) -> ComparisonPanel:
        if context == "inline":
            return self.inline
        if context == "fullscreen":
            return self.fullscreen
        raise ValueError(f"Unknown viewing context: {context}")

    def open_fullscreen(self) -> None:
        self.fullscreen_open = True

    def close_fullscreen(self) -> None:
        self.fullscreen_open = False

    def reset(self) -> None:
        """Called whenever a new result image arrives."""
        self.inline.reset()
        self.fullscreen.reset()

    def to_dict(self):
        return {
            "mode": self.mode.value,
            "fullscreen_open": self.fullscreen_open,
            "inline": {
                "slider_position": self.inline.slider_position,
                "show_result": self.inline.show_result,
            },
            "fullscreen": {
                "slider_position": self.fullscreen.slider_position,
                "show_result": self.fullscreen.show_result,
            },
        }
