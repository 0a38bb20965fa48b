"""
Display Simulator Module
========================
High-level facade tying extraction, display state, touch handling and
rendering together.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from tft_simulator.config import get_default_config
from tft_simulator.interaction.resolver import InteractionResolver
from tft_simulator.models.display import ParsedDisplay, Severity
from tft_simulator.models.touch import TouchResult
from tft_simulator.parsing.extractor import SceneExtractor
from tft_simulator.rendering.pillow_surface import PillowSurface
from tft_simulator.rendering.renderer import DisplayRenderer
from tft_simulator.rendering.surface import Surface
from tft_simulator.rendering.svg_surface import SVGSurface
from tft_simulator.state import DisplayState, SceneSlice

logger = logging.getLogger(__name__)

SURFACE_FORMATS = ("png", "svg")


class SimulatorError(Exception):
    """Raised when the simulator is asked to use an unusable parse result."""
    pass


class DisplaySimulator:
    """
    Simulates a TFT display running a sketch.

    Typical use::

        simulator = DisplaySimulator()
        simulator.load_source(code)
        simulator.touch(190, 225)
        simulator.render_to_file("frame.png")
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the simulator.

        Args:
            width: Display width (configured default when omitted)
            height: Display height (configured default when omitted)
            config: Configuration dictionary; defaults are used when omitted
        """
        self.config = config if config is not None else get_default_config()
        self.width = width if width is not None else self.config["display_width"]
        self.height = height if height is not None else self.config["display_height"]

        self.extractor = SceneExtractor(self.width, self.height, self.config)
        self.renderer = DisplayRenderer(font_family=self.config["default_font"])
        self.state = DisplayState(
            width=self.width,
            height=self.height,
            rotation=self.config["rotation"],
            debug_mode=self.config["debug_mode"],
        )
        self.parsed: Optional[ParsedDisplay] = None
        self.resolver: Optional[InteractionResolver] = None

    @property
    def scene(self) -> SceneSlice:
        return self.state.slice

    def load_source(self, source: str, screen_id: Optional[str] = None) -> ParsedDisplay:
        """
        Parse a sketch and show one of its screens.

        A parse with errors is returned but not shown.

        Args:
            source: Sketch source text
            screen_id: Screen to show; the first screen when omitted

        Returns:
            The parse result

        Raises:
            SimulatorError: If ``screen_id`` names no screen
        """
        parsed = self.extractor.extract(source)
        self.parsed = parsed

        for diagnostic in parsed.errors:
            logger.log(
                logging.ERROR if diagnostic.severity is Severity.ERROR else logging.WARNING,
                f"Line {diagnostic.line}: {diagnostic.message}"
            )

        if not parsed.is_renderable:
            self.resolver = None
            self.state.clear()
            return parsed

        self.resolver = InteractionResolver(
            self.state, parsed.screens, draw_prefix=self.config["draw_function_prefix"]
        )
        self.show_screen(screen_id)
        return parsed

    def _require_renderable(self) -> ParsedDisplay:
        if self.parsed is None:
            raise SimulatorError("No sketch loaded")
        if not self.parsed.is_renderable:
            messages = "; ".join(error.message for error in self.parsed.errors) or "no screens"
            raise SimulatorError(f"Sketch cannot be rendered: {messages}")
        return self.parsed

    def show_screen(self, screen_id: Optional[str] = None) -> SceneSlice:
        """
        Switch to a screen of the loaded sketch.

        Raises:
            SimulatorError: If nothing renderable is loaded or the screen is unknown
        """
        parsed = self._require_renderable()
        try:
            return self.state.load(parsed, screen_id)
        except KeyError:
            available = ", ".join(screen.id for screen in parsed.screens)
            raise SimulatorError(f"Unknown screen '{screen_id}'. Available: {available}") from None

    def touch(self, x: float, y: float) -> TouchResult:
        """Deliver a pointer event to the active screen."""
        self._require_renderable()
        return self.resolver.hit_test(x, y)

    def set_debug_mode(self, enabled: bool) -> None:
        self.state.set_debug_mode(enabled)

    def create_surface(self, output_format: str = "png") -> Surface:
        """New surface of the display size for ``png`` or ``svg`` output."""
        if output_format == "png":
            return PillowSurface(self.scene.width, self.scene.height)
        if output_format == "svg":
            return SVGSurface(self.scene.width, self.scene.height)
        raise ValueError(f"Unsupported output format: {output_format}")

    def render(self, surface: Optional[Surface] = None, output_format: str = "png") -> Surface:
        """
        Render the active screen.

        Args:
            surface: Surface to draw on; a new one is created when omitted
            output_format: Surface kind to create when ``surface`` is omitted

        Returns:
            The surface drawn on

        Raises:
            SimulatorError: If the loaded sketch cannot be rendered
        """
        self._require_renderable()
        if surface is None:
            surface = self.create_surface(output_format)
        self.renderer.render(surface, self.scene)
        return surface

    def render_to_file(self, output_path: Union[str, Path], output_format: Optional[str] = None) -> Path:
        """
        Render the active screen and save it.

        Args:
            output_path: Destination file
            output_format: ``png`` or ``svg``; taken from the suffix when omitted

        Returns:
            The path written
        """
        output_path = Path(output_path)
        if output_format is None:
            output_format = "svg" if output_path.suffix.lower() == ".svg" else "png"
        surface = self.render(output_format=output_format)
        return surface.save_image(output_path)
