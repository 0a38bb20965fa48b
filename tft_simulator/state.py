"""
Display State Module
====================
Owns the scene slice currently shown on the simulated display.

The slice is an immutable value. Every change, including a screen switch,
builds a new slice and swaps it in with one assignment, so readers never see
the elements of one screen paired with the touch zones of another.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from tft_simulator.config import get_default_config
from tft_simulator.models.display import DEFAULT_BACKGROUND, ParsedDisplay, Screen
from tft_simulator.models.elements import UIElement
from tft_simulator.models.touch import TouchZone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneSlice:
    """What the display shows right now."""
    elements: Tuple[UIElement, ...] = ()
    touch_zones: Tuple[TouchZone, ...] = ()
    background_color: str = DEFAULT_BACKGROUND
    current_screen: str = ""
    width: int = 380
    height: int = 420
    debug_mode: bool = False


class DisplayState:
    """
    Holder for the active scene slice plus the display rotation.
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        rotation: Optional[int] = None,
        debug_mode: Optional[bool] = None
    ):
        """
        Initialize the display state.

        Args:
            width: Display width (configured default when omitted)
            height: Display height (configured default when omitted)
            rotation: Display rotation, 0-3
            debug_mode: Whether touch zones are overlaid when rendering
        """
        defaults = get_default_config()
        self.rotation = rotation if rotation is not None else defaults["rotation"]
        self._slice = SceneSlice(
            width=width if width is not None else defaults["display_width"],
            height=height if height is not None else defaults["display_height"],
            debug_mode=debug_mode if debug_mode is not None else defaults["debug_mode"],
        )

    @property
    def slice(self) -> SceneSlice:
        return self._slice

    @property
    def current_screen(self) -> str:
        return self._slice.current_screen

    def replace_slice(self, **changes) -> SceneSlice:
        """
        Swap in a copy of the current slice with ``changes`` applied.

        Returns:
            The new slice
        """
        if "elements" in changes:
            changes["elements"] = tuple(changes["elements"])
        if "touch_zones" in changes:
            changes["touch_zones"] = tuple(changes["touch_zones"])
        self._slice = replace(self._slice, **changes)
        return self._slice

    def show_screen(self, screen: Screen) -> SceneSlice:
        """Make ``screen`` the active slice."""
        logger.debug(f"Showing screen {screen.id}")
        return self.replace_slice(
            elements=screen.elements,
            touch_zones=screen.touch_zones,
            background_color=screen.background_color,
            current_screen=screen.id,
        )

    def load(self, parsed: ParsedDisplay, screen_id: Optional[str] = None) -> SceneSlice:
        """
        Show a screen from a parse result.

        Args:
            parsed: Parse result
            screen_id: Screen to show; the first screen when omitted

        Returns:
            The new slice

        Raises:
            KeyError: If ``screen_id`` names no screen
        """
        if screen_id is not None:
            screen = parsed.get_screen(screen_id)
            if screen is None:
                raise KeyError(screen_id)
        else:
            screen = parsed.screens[0] if parsed.screens else None

        if parsed.display_config is not None:
            self.rotation = parsed.display_config.rotation

        if screen is None:
            return self.clear()
        return self.show_screen(screen)

    def set_debug_mode(self, enabled: bool) -> SceneSlice:
        return self.replace_slice(debug_mode=enabled)

    def set_dimensions(self, width: int, height: int) -> SceneSlice:
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid display dimensions: {width}x{height}")
        return self.replace_slice(width=width, height=height)

    def set_rotation(self, rotation: int) -> None:
        if rotation not in (0, 1, 2, 3):
            raise ValueError(f"Invalid rotation: {rotation}")
        self.rotation = rotation

    def clear(self) -> SceneSlice:
        """Drop all content, keeping geometry and debug mode."""
        return self.replace_slice(
            elements=(),
            touch_zones=(),
            background_color=DEFAULT_BACKGROUND,
            current_screen="",
        )
