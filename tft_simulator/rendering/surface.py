"""
Drawing surface interface.

A surface is the raster sink the renderer paints on. It mirrors the small
subset of an HTML canvas 2D context the renderer needs: rectangle fills and
strokes, path building with arcs, text, and a save/restore stack for the
drawing state.
"""

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

Point = Tuple[float, float]

DEFAULT_FONT_SIZE = 10.0
DEFAULT_FONT_FAMILY = "sans-serif"
MAX_ARC_SEGMENTS = 720

_FONT_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)px\s*(.*)$")


class SurfaceError(Exception):
    """Raised when a surface cannot produce its output."""
    pass


@dataclass
class SurfaceState:
    """Drawing state saved and restored by ``Surface.save``/``restore``."""
    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    line_width: float = 1.0
    line_dash: Tuple[float, ...] = ()
    font: str = f"{int(DEFAULT_FONT_SIZE)}px {DEFAULT_FONT_FAMILY}"
    text_align: str = "left"
    text_baseline: str = "alphabetic"


@dataclass
class SubPath:
    """Polyline making up part of the current path."""
    points: List[Point] = field(default_factory=list)
    closed: bool = False


def parse_font(font: str) -> Tuple[float, str]:
    """
    Split a ``"<size>px <family>"`` font string.

    Returns:
        (size in pixels, family); defaults fill anything unparseable
    """
    match = _FONT_PATTERN.match(font or "")
    if not match:
        return DEFAULT_FONT_SIZE, DEFAULT_FONT_FAMILY
    return float(match.group(1)), match.group(2).strip() or DEFAULT_FONT_FAMILY


def dash_segments(points: List[Point], pattern: Tuple[float, ...]) -> List[List[Point]]:
    """
    Cut a polyline into the visible dashes of a dash pattern.

    Args:
        points: Polyline vertices
        pattern: Alternating on/off lengths

    Returns:
        List of polylines, one per visible dash
    """
    if not pattern or sum(pattern) <= 0:
        return [points]
    if len(pattern) % 2:
        pattern = tuple(pattern) * 2

    dashes: List[List[Point]] = []
    index = 0
    remaining = pattern[0]
    drawing = True
    current: List[Point] = [points[0]] if points else []

    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        length = math.hypot(x1 - x0, y1 - y0)
        travelled = 0.0
        while length - travelled > remaining:
            travelled += remaining
            t = travelled / length
            point = (x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)
            if drawing:
                current.append(point)
                dashes.append(current)
            current = [point]
            drawing = not drawing
            index = (index + 1) % len(pattern)
            remaining = pattern[index]
        remaining -= length - travelled
        if drawing:
            current.append((x1, y1))
        else:
            current = [(x1, y1)]

    if drawing and len(current) > 1:
        dashes.append(current)
    return dashes


class Surface(ABC):
    """
    Abstract drawing surface.

    Subclasses implement the primitives; state handling and path building
    are shared.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._state = SurfaceState()
        self._stack: List[SurfaceState] = []
        self._path: List[SubPath] = []

    # -- state -------------------------------------------------------------

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def fill_style(self) -> str:
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value: str) -> None:
        self._state.fill_style = value

    @property
    def stroke_style(self) -> str:
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value: str) -> None:
        self._state.stroke_style = value

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        self._state.line_width = value

    @property
    def font(self) -> str:
        return self._state.font

    @font.setter
    def font(self, value: str) -> None:
        self._state.font = value

    @property
    def text_align(self) -> str:
        return self._state.text_align

    @text_align.setter
    def text_align(self, value: str) -> None:
        self._state.text_align = value

    @property
    def text_baseline(self) -> str:
        return self._state.text_baseline

    @text_baseline.setter
    def text_baseline(self, value: str) -> None:
        self._state.text_baseline = value

    def set_line_dash(self, pattern: Optional[List[float]]) -> None:
        self._state.line_dash = tuple(pattern or ())

    def save(self) -> None:
        """Push a copy of the drawing state."""
        self._stack.append(replace(self._state))

    def restore(self) -> None:
        """Pop the drawing state; unbalanced calls are ignored."""
        if self._stack:
            self._state = self._stack.pop()

    def resize(self, width: int, height: int) -> None:
        """Change the surface size, discarding its contents and state."""
        self.width = width
        self.height = height
        self._state = SurfaceState()
        self._stack = []
        self._path = []

    # -- paths -------------------------------------------------------------

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append(SubPath(points=[(x, y)]))

    def line_to(self, x: float, y: float) -> None:
        if not self._path or self._path[-1].closed:
            self.move_to(x, y)
            return
        self._path[-1].points.append((x, y))

    def arc(
        self,
        cx: float,
        cy: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False
    ) -> None:
        """
        Add a circular arc to the path, approximated by line segments.

        Angles are in radians, measured clockwise from the positive x axis
        because the y axis points down.
        """
        if radius < 0:
            raise ValueError(f"Negative arc radius: {radius}")

        sweep = end_angle - start_angle
        full_turn = 2 * math.pi
        if anticlockwise:
            sweep = -full_turn if sweep <= -full_turn else -((-sweep) % full_turn)
        else:
            sweep = full_turn if sweep >= full_turn else sweep % full_turn

        segments = max(4, min(MAX_ARC_SEGMENTS, int(math.ceil(abs(sweep) * max(radius, 1.0) / 2))))
        points = [
            (
                cx + radius * math.cos(start_angle + sweep * i / segments),
                cy + radius * math.sin(start_angle + sweep * i / segments),
            )
            for i in range(segments + 1)
        ]

        first_x, first_y = points[0]
        if self._path and not self._path[-1].closed:
            self.line_to(first_x, first_y)
        else:
            self.move_to(first_x, first_y)
        self._path[-1].points.extend(points[1:])

    def close_path(self) -> None:
        if self._path:
            self._path[-1].closed = True

    def current_path(self) -> List[SubPath]:
        """Sub-paths of the path under construction."""
        return list(self._path)

    # -- primitives --------------------------------------------------------

    @abstractmethod
    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Reset an area to the cleared (black) state."""
        pass

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        pass

    @abstractmethod
    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        pass

    @abstractmethod
    def fill(self) -> None:
        """Fill every sub-path of the current path."""
        pass

    @abstractmethod
    def stroke(self) -> None:
        """Outline every sub-path of the current path."""
        pass

    @abstractmethod
    def fill_text(self, text: str, x: float, y: float) -> None:
        pass

    @abstractmethod
    def measure_text(self, text: str) -> float:
        """Width of ``text`` in pixels with the current font."""
        pass
