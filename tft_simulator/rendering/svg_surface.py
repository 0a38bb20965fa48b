"""
SVG drawing surface.

Records every primitive as an SVG element so a frame can be inspected as
text, and rasterizes the document with cairosvg when an image is needed.
"""

import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Union

from PIL import Image

from tft_simulator.models.color import ColorError, split_alpha
from tft_simulator.rendering.surface import SubPath, Surface, SurfaceError, parse_font

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
CLEAR_COLOR = "#000000"
# Average glyph advance relative to font size
GLYPH_WIDTH_RATIO = 0.6

_TEXT_ANCHORS = {"left": "start", "start": "start", "center": "middle", "right": "end", "end": "end"}
_BASELINES = {
    "top": "text-before-edge",
    "middle": "central",
    "bottom": "text-after-edge",
    "alphabetic": "alphabetic",
}


def _fmt(value: float) -> str:
    """Compact number formatting for attributes."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _paint(color: str, prefix: str) -> Dict[str, str]:
    """SVG paint attributes for a colour, splitting out any alpha byte."""
    try:
        hex_color, opacity = split_alpha(color)
    except ColorError:
        return {prefix: color}
    attributes = {prefix: hex_color}
    if opacity < 1.0:
        attributes[f"{prefix}-opacity"] = _fmt(opacity)
    return attributes


def path_data(subpaths: List[SubPath]) -> str:
    """Build the ``d`` attribute for a list of sub-paths."""
    commands = []
    for subpath in subpaths:
        if not subpath.points:
            continue
        (x, y), rest = subpath.points[0], subpath.points[1:]
        commands.append(f"M{_fmt(x)} {_fmt(y)}")
        commands.extend(f"L{_fmt(px)} {_fmt(py)}" for px, py in rest)
        if subpath.closed:
            commands.append("Z")
    return " ".join(commands)


class SVGSurface(Surface):
    """Surface that records drawing calls as SVG markup."""

    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self._elements: List[ET.Element] = []

    def resize(self, width: int, height: int) -> None:
        super().resize(width, height)
        self._elements = []

    @property
    def elements(self) -> List[ET.Element]:
        return list(self._elements)

    def _stroke_attributes(self) -> Dict[str, str]:
        attributes = {"fill": "none"}
        attributes.update(_paint(self.stroke_style, "stroke"))
        attributes["stroke-width"] = _fmt(self.line_width)
        if self.state.line_dash:
            attributes["stroke-dasharray"] = " ".join(_fmt(v) for v in self.state.line_dash)
        return attributes

    def _add(self, tag: str, attributes: Dict[str, str], text: Optional[str] = None) -> ET.Element:
        element = ET.Element(tag, attributes)
        if text is not None:
            element.text = text
        self._elements.append(element)
        return element

    # -- primitives --------------------------------------------------------

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        if x <= 0 and y <= 0 and x + width >= self.width and y + height >= self.height:
            self._elements = []
            return
        self._add("rect", {
            "x": _fmt(x), "y": _fmt(y), "width": _fmt(width), "height": _fmt(height),
            "fill": CLEAR_COLOR,
        })

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        attributes = {"x": _fmt(x), "y": _fmt(y), "width": _fmt(width), "height": _fmt(height)}
        attributes.update(_paint(self.fill_style, "fill"))
        self._add("rect", attributes)

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        attributes = {"x": _fmt(x), "y": _fmt(y), "width": _fmt(width), "height": _fmt(height)}
        attributes.update(self._stroke_attributes())
        self._add("rect", attributes)

    def fill(self) -> None:
        data = path_data(self.current_path())
        if not data:
            return
        attributes = {"d": data}
        attributes.update(_paint(self.fill_style, "fill"))
        self._add("path", attributes)

    def stroke(self) -> None:
        data = path_data(self.current_path())
        if not data:
            return
        attributes = {"d": data}
        attributes.update(self._stroke_attributes())
        self._add("path", attributes)

    def fill_text(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        size, family = parse_font(self.font)
        attributes = {
            "x": _fmt(x),
            "y": _fmt(y),
            "font-size": _fmt(size),
            "font-family": family,
            "text-anchor": _TEXT_ANCHORS.get(self.text_align, "start"),
            "dominant-baseline": _BASELINES.get(self.text_baseline, "alphabetic"),
        }
        attributes.update(_paint(self.fill_style, "fill"))
        self._add("text", attributes, text)

    def measure_text(self, text: str) -> float:
        size, _ = parse_font(self.font)
        return len(text) * size * GLYPH_WIDTH_RATIO

    # -- output ------------------------------------------------------------

    def to_svg(self) -> str:
        """Serialize the recorded frame as an SVG document."""
        root = ET.Element("svg", {
            "xmlns": SVG_NAMESPACE,
            "width": str(self.width),
            "height": str(self.height),
            "viewBox": f"0 0 {self.width} {self.height}",
        })
        root.extend(self._elements)
        return ET.tostring(root, encoding="unicode")

    def to_image(self) -> Image.Image:
        """
        Rasterize the frame with cairosvg.

        Returns:
            PIL Image of the frame

        Raises:
            SurfaceError: If cairosvg cannot render the document
        """
        import cairosvg

        svg_code = self.to_svg()
        try:
            png_data = cairosvg.svg2png(
                bytestring=svg_code.encode("utf-8"),
                output_width=self.width,
                output_height=self.height
            )
        except Exception as e:
            logger.error(f"Error rendering SVG: {e}")
            logger.debug(f"Problematic SVG code: {svg_code[:100]}...")
            raise SurfaceError(f"Could not rasterize SVG frame: {e}") from e

        return Image.open(io.BytesIO(png_data))

    def save_image(self, output_path: Union[str, Path]) -> Path:
        """
        Write the frame as ``.svg`` markup or, for other suffixes, a raster image.

        Args:
            output_path: Destination file

        Returns:
            The path written
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(exist_ok=True, parents=True)

        if output_path.suffix.lower() == ".svg":
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(self.to_svg())
        else:
            self.to_image().save(output_path)

        logger.info(f"Frame saved to {output_path}")
        return output_path
