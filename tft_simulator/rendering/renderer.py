"""
Display Renderer Module
=======================
Paints the active scene slice onto a drawing surface.
"""

import logging
import math
from typing import Optional, Sequence

from typing_extensions import Protocol, assert_never

from tft_simulator.models.color import ColorError, color_to_hex, hsl_to_hex
from tft_simulator.models.elements import (
    BitmapElement, CircleElement, LineElement, RectangleElement,
    RoundedRectangleElement, ShapeKind, TextAlign, TextBaseline,
    TextElement, UIElement
)
from tft_simulator.models.touch import TouchZone
from tft_simulator.rendering.surface import Surface
from tft_simulator.utils.logger import log_exception

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 16
DEFAULT_FONT_FAMILY = "Arial, sans-serif"
DEFAULT_ROUNDED_RADIUS = 5

BITMAP_DEFAULT_SIZE = 32
BITMAP_FILL = "#cccccc"
BITMAP_CAPTION_COLOR = "#666666"
BITMAP_CAPTION_FONT = "12px Arial"

ZONE_DASH = [5, 5]
ZONE_LINE_WIDTH = 2
ZONE_FILL_ALPHA = "20"  # hex alpha appended to explicit debug colours
ZONE_LABEL_FONT = "10px monospace"
ZONE_LABEL_BACKING = "#000000cc"
ZONE_LABEL_COLOR = "#ffffff"
ZONE_LABEL_PADDING = 6
ZONE_LABEL_HEIGHT = 16


class SceneSliceLike(Protocol):
    """Attributes the renderer reads from a scene slice."""
    elements: Sequence[UIElement]
    touch_zones: Sequence[TouchZone]
    background_color: str
    width: int
    height: int
    debug_mode: bool


def canvas_text_align(align: Optional[TextAlign]) -> str:
    """Map an element alignment to surface vocabulary, defaulting to centre."""
    if align is TextAlign.LEFT:
        return "left"
    if align is TextAlign.RIGHT:
        return "right"
    return "center"


def canvas_text_baseline(baseline: Optional[TextBaseline]) -> str:
    """Map an element baseline to surface vocabulary, defaulting to middle."""
    if baseline is TextBaseline.TOP:
        return "top"
    if baseline is TextBaseline.BOTTOM:
        return "bottom"
    return "middle"


def zone_debug_colors(zone: TouchZone, index: int):
    """
    Stroke and fill colours for a touch zone overlay.

    Zones without a usable debug colour get a hue rotated by 60 degrees
    per zone index. Debug colours may be hex strings or CSS names.

    Returns:
        (stroke colour, translucent fill colour)
    """
    if zone.debug_color:
        try:
            return zone.debug_color, f"{color_to_hex(zone.debug_color)}{ZONE_FILL_ALPHA}"
        except ColorError:
            logger.warning(f"Unknown debug colour {zone.debug_color!r} on {zone.id}")
    hue = (index * 60) % 360
    return hsl_to_hex(hue, 0.7, 0.5), hsl_to_hex(hue, 0.7, 0.5, alpha=0.1)


def sort_by_z_index(elements: Sequence[UIElement]) -> list:
    """Stable ascending sort on a copy; equal z-indexes keep list order."""
    return sorted(elements, key=lambda element: element.z_index)


class DisplayRenderer:
    """
    Renders scene slices onto surfaces.

    Each element is drawn between ``save()`` and ``restore()`` so that style
    changes cannot leak, and a failure while drawing one element is logged
    and skipped rather than aborting the frame.
    """

    def __init__(self, font_family: str = DEFAULT_FONT_FAMILY):
        """
        Initialize the renderer.

        Args:
            font_family: Family used for text elements that name no font
        """
        self.font_family = font_family

    def render(self, surface: Surface, scene: SceneSliceLike) -> None:
        """
        Draw a full frame.

        Args:
            surface: Target surface
            scene: Elements, touch zones, background and geometry to draw
        """
        if (surface.width, surface.height) != (scene.width, scene.height):
            surface.resize(scene.width, scene.height)

        surface.clear_rect(0, 0, scene.width, scene.height)

        surface.fill_style = scene.background_color
        surface.fill_rect(0, 0, scene.width, scene.height)

        for element in sort_by_z_index(scene.elements):
            if element.visible:
                self.render_element(surface, element)

        if scene.debug_mode:
            self.render_touch_zones(surface, scene.touch_zones)

    def render_element(self, surface: Surface, element: UIElement) -> bool:
        """
        Draw one element in isolation.

        Returns:
            True when the element was drawn, False if drawing failed
        """
        surface.save()
        try:
            self._dispatch(surface, element)
            return True
        except Exception as e:
            log_exception(logger, e, context={"element": element.id, "type": element.kind.value})
            return False
        finally:
            surface.restore()

    def _dispatch(self, surface: Surface, element: UIElement) -> None:
        kind = element.kind
        if kind is ShapeKind.RECTANGLE:
            self.render_rectangle(surface, element)
        elif kind is ShapeKind.ROUNDED_RECTANGLE:
            self.render_rounded_rectangle(surface, element)
        elif kind is ShapeKind.CIRCLE:
            self.render_circle(surface, element)
        elif kind is ShapeKind.TEXT:
            self.render_text(surface, element)
        elif kind is ShapeKind.BITMAP:
            self.render_bitmap(surface, element)
        elif kind is ShapeKind.LINE:
            self.render_line(surface, element)
        else:
            assert_never(kind)

    # -- shapes ------------------------------------------------------------

    def render_rectangle(self, surface: Surface, element: RectangleElement) -> None:
        width = element.width or 0
        height = element.height or 0

        if element.background_color:
            surface.fill_style = element.background_color
            surface.fill_rect(element.x, element.y, width, height)

        if element.color and element.color != element.background_color:
            surface.stroke_style = element.color
            surface.stroke_rect(element.x, element.y, width, height)

    def render_rounded_rectangle(self, surface: Surface, element: RoundedRectangleElement) -> None:
        x, y = element.x, element.y
        width = element.width or 0
        height = element.height or 0
        radius = element.radius if element.radius is not None else DEFAULT_ROUNDED_RADIUS
        radius = max(0, min(radius, width / 2, height / 2)) if width > 0 and height > 0 else 0

        surface.begin_path()
        surface.move_to(x + radius, y)
        surface.line_to(x + width - radius, y)
        surface.arc(x + width - radius, y + radius, radius, -math.pi / 2, 0)
        surface.line_to(x + width, y + height - radius)
        surface.arc(x + width - radius, y + height - radius, radius, 0, math.pi / 2)
        surface.line_to(x + radius, y + height)
        surface.arc(x + radius, y + height - radius, radius, math.pi / 2, math.pi)
        surface.line_to(x, y + radius)
        surface.arc(x + radius, y + radius, radius, math.pi, 3 * math.pi / 2)
        surface.close_path()

        if element.background_color:
            surface.fill_style = element.background_color
            surface.fill()

        if element.color and element.color != element.background_color:
            surface.stroke_style = element.color
            surface.stroke()

    def render_circle(self, surface: Surface, element: CircleElement) -> None:
        radius = element.radius
        if not radius:
            radius = min(element.width or 0, element.height or 0) / 2
        center_x = element.x + radius
        center_y = element.y + radius

        surface.begin_path()
        surface.arc(center_x, center_y, radius, 0, 2 * math.pi)

        if element.background_color and element.background_color != "transparent":
            surface.fill_style = element.background_color
            surface.fill()

        if element.color and element.color != element.background_color:
            surface.stroke_style = element.color
            surface.stroke()

    def render_text(self, surface: Surface, element: TextElement) -> None:
        if not element.text:
            return

        font_size = element.font_size or DEFAULT_FONT_SIZE
        font_family = element.font or self.font_family
        surface.font = f"{font_size}px {font_family}"

        if element.color:
            surface.fill_style = element.color

        surface.text_align = canvas_text_align(element.text_align)
        surface.text_baseline = canvas_text_baseline(element.text_baseline)
        surface.fill_text(element.text, element.x, element.y)

    def render_bitmap(self, surface: Surface, element: BitmapElement) -> None:
        width = element.width or BITMAP_DEFAULT_SIZE
        height = element.height or BITMAP_DEFAULT_SIZE

        surface.fill_style = element.color or BITMAP_FILL
        surface.fill_rect(element.x, element.y, width, height)

        surface.fill_style = BITMAP_CAPTION_COLOR
        surface.font = BITMAP_CAPTION_FONT
        surface.text_align = "center"
        surface.text_baseline = "middle"
        surface.fill_text("IMG", element.x + width / 2, element.y + height / 2)

    def render_line(self, surface: Surface, element: LineElement) -> None:
        if element.x2 is None or element.y2 is None:
            return

        surface.begin_path()
        surface.move_to(element.x, element.y)
        surface.line_to(element.x2, element.y2)

        if element.color:
            surface.stroke_style = element.color
        if element.stroke_width:
            surface.line_width = element.stroke_width

        surface.stroke()

    # -- debug overlay -----------------------------------------------------

    def render_touch_zones(self, surface: Surface, touch_zones: Sequence[TouchZone]) -> None:
        """Outline every visible touch zone and label it with its action."""
        for index, zone in enumerate(touch_zones):
            if not zone.visible:
                continue

            surface.save()
            try:
                stroke, fill = zone_debug_colors(zone, index)
                surface.stroke_style = stroke
                surface.fill_style = fill
                surface.line_width = ZONE_LINE_WIDTH
                surface.set_line_dash(ZONE_DASH)

                surface.fill_rect(zone.x, zone.y, zone.width, zone.height)
                surface.stroke_rect(zone.x, zone.y, zone.width, zone.height)

                surface.set_line_dash([])
                surface.fill_style = ZONE_LABEL_BACKING
                surface.font = ZONE_LABEL_FONT
                surface.text_align = "center"
                surface.text_baseline = "middle"

                label_x = zone.x + zone.width / 2
                label_y = zone.y + zone.height / 2
                label_width = surface.measure_text(zone.action) + ZONE_LABEL_PADDING
                surface.fill_rect(
                    label_x - label_width / 2,
                    label_y - ZONE_LABEL_HEIGHT / 2,
                    label_width,
                    ZONE_LABEL_HEIGHT
                )

                surface.fill_style = ZONE_LABEL_COLOR
                surface.fill_text(zone.action, label_x, label_y)
            except Exception as e:
                log_exception(logger, e, context={"zone": zone.id})
            finally:
                surface.restore()


def render(surface: Surface, scene: SceneSliceLike) -> None:
    """Render ``scene`` onto ``surface`` with a default renderer."""
    DisplayRenderer().render(surface, scene)
