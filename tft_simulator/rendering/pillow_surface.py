"""
Pillow-backed drawing surface.
"""

import functools
import logging
from pathlib import Path
from typing import List, Tuple, Union

from PIL import Image, ImageColor, ImageDraw, ImageFont

from tft_simulator.models.color import ColorError, split_alpha
from tft_simulator.rendering.surface import Point, Surface, dash_segments, parse_font

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

CLEAR_COLOR = (0, 0, 0)


@functools.lru_cache(maxsize=32)
def load_font(size: int) -> ImageFont.ImageFont:
    """Pillow's bundled font at ``size`` pixels."""
    return ImageFont.load_default(size=size)


def to_rgba(color: str) -> RGBA:
    """
    Convert a surface colour string to an RGBA tuple.

    ``#rrggbb`` and ``#rrggbbaa`` are handled directly; anything else is
    passed to ``PIL.ImageColor``.
    """
    try:
        hex_color, opacity = split_alpha(color)
        r, g, b = ImageColor.getrgb(hex_color)[:3]
        return r, g, b, int(round(opacity * 255))
    except ColorError:
        rgba = ImageColor.getrgb(color)
        if len(rgba) == 4:
            return rgba
        return rgba[0], rgba[1], rgba[2], 255


class PillowSurface(Surface):
    """
    Surface that rasterizes into a Pillow RGB image.

    Translucent colours are alpha blended onto the image. Dashed strokes are
    drawn as separate line segments.
    """

    def __init__(self, width: int, height: int):
        """
        Initialize the surface.

        Args:
            width: Image width in pixels
            height: Image height in pixels
        """
        super().__init__(width, height)
        self.image = Image.new("RGB", (max(1, width), max(1, height)), CLEAR_COLOR)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    def resize(self, width: int, height: int) -> None:
        super().resize(width, height)
        self.image = Image.new("RGB", (max(1, width), max(1, height)), CLEAR_COLOR)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    # -- helpers -----------------------------------------------------------

    def _font(self) -> ImageFont.ImageFont:
        size, _ = parse_font(self.font)
        return load_font(max(1, int(round(size))))

    def _stroke_polyline(self, points: List[Point], closed: bool) -> None:
        if len(points) < 2:
            return
        if closed and points[0] != points[-1]:
            points = points + [points[0]]

        color = to_rgba(self.stroke_style)
        width = max(1, int(round(self.line_width)))
        for segment in dash_segments(points, self.state.line_dash):
            self._draw.line(segment, fill=color, width=width)

    # -- primitives --------------------------------------------------------

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        image_width, image_height = self.image.size
        box = (
            max(0, int(x)),
            max(0, int(y)),
            min(image_width, int(x + width)),
            min(image_height, int(y + height)),
        )
        if box[2] > box[0] and box[3] > box[1]:
            self.image.paste(CLEAR_COLOR, box)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        self._draw.rectangle(
            [round(x), round(y), round(x + width) - 1, round(y + height) - 1],
            fill=to_rgba(self.fill_style)
        )

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        x2, y2 = x + width, y + height
        self._stroke_polyline([(x, y), (x2, y), (x2, y2), (x, y2)], closed=True)

    def fill(self) -> None:
        color = to_rgba(self.fill_style)
        for subpath in self.current_path():
            if len(subpath.points) >= 3:
                self._draw.polygon(subpath.points, fill=color)

    def stroke(self) -> None:
        for subpath in self.current_path():
            self._stroke_polyline(list(subpath.points), subpath.closed)

    def fill_text(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        font = self._font()
        left, top, right, bottom = self._draw.textbbox((0, 0), text, font=font)
        width = self._draw.textlength(text, font=font)

        if self.text_align == "center":
            x -= width / 2
        elif self.text_align in ("right", "end"):
            x -= width

        if self.text_baseline == "top":
            y -= top
        elif self.text_baseline == "middle":
            y -= (top + bottom) / 2
        elif self.text_baseline == "bottom":
            y -= bottom
        else:
            ascent = font.getmetrics()[0] if hasattr(font, "getmetrics") else bottom
            y -= ascent

        self._draw.text((x, y), text, fill=to_rgba(self.fill_style), font=font)

    def measure_text(self, text: str) -> float:
        return float(self._draw.textlength(text, font=self._font()))

    # -- output ------------------------------------------------------------

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        """RGB value at (x, y)."""
        return self.image.getpixel((x, y))

    def to_image(self) -> Image.Image:
        """Copy of the current image."""
        return self.image.copy()

    def save_image(self, output_path: Union[str, Path]) -> Path:
        """
        Save the image, format chosen from the file suffix.

        Args:
            output_path: Destination file

        Returns:
            The path written
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(exist_ok=True, parents=True)
        self.image.save(output_path)
        logger.info(f"Frame saved to {output_path}")
        return output_path
