"""
Element Model Module
====================
Drawable elements extracted from TFT drawing calls.

Every shape kind is its own frozen dataclass so that each variant carries
exactly the fields it needs. ``UIElement`` is the closed union of them.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class ShapeKind(Enum):
    """Kinds of drawable element."""
    RECTANGLE = "rectangle"
    ROUNDED_RECTANGLE = "roundedRectangle"
    CIRCLE = "circle"
    TEXT = "text"
    BITMAP = "bitmap"
    LINE = "line"


class TextAlign(Enum):
    """Horizontal text alignment."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextBaseline(Enum):
    """Vertical text anchoring."""
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


# Paint order by category
Z_BACKGROUND = 0
Z_SHAPE = 1
Z_TEXT = 2

BACKGROUND_ID_PREFIX = "bg_"


def camel_case(name: str) -> str:
    """Convert a snake_case field name to camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class _BaseElement:
    """Attributes shared by every element kind."""
    id: str
    x: int
    y: int
    width: Optional[int] = None
    height: Optional[int] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    visible: bool = True
    z_index: int = Z_SHAPE

    kind = ShapeKind.RECTANGLE

    @property
    def is_background(self) -> bool:
        """Whether this element fills the whole screen."""
        return self.id.startswith(BACKGROUND_ID_PREFIX)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the element, dropping unset optional fields."""
        data = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            data[camel_case(key)] = value.value if isinstance(value, Enum) else value
        data["type"] = self.kind.value
        return data


@dataclass(frozen=True)
class RectangleElement(_BaseElement):
    """Axis-aligned rectangle, filled and/or outlined."""
    kind = ShapeKind.RECTANGLE


@dataclass(frozen=True)
class RoundedRectangleElement(_BaseElement):
    """Rectangle with circular corners."""
    radius: Optional[int] = None

    kind = ShapeKind.ROUNDED_RECTANGLE


@dataclass(frozen=True)
class CircleElement(_BaseElement):
    """Circle whose bounding box starts at (x, y)."""
    radius: Optional[int] = None

    kind = ShapeKind.CIRCLE


@dataclass(frozen=True)
class TextElement(_BaseElement):
    """Single line of text anchored at (x, y)."""
    text: str = ""
    font_size: int = 16
    font: Optional[str] = None
    text_align: Optional[TextAlign] = None
    text_baseline: Optional[TextBaseline] = None
    z_index: int = Z_TEXT

    kind = ShapeKind.TEXT


@dataclass(frozen=True)
class BitmapElement(_BaseElement):
    """Image placeholder; pixel data is never decoded."""
    kind = ShapeKind.BITMAP


@dataclass(frozen=True)
class LineElement(_BaseElement):
    """Straight line from (x, y) to (x2, y2)."""
    x2: Optional[int] = None
    y2: Optional[int] = None
    stroke_width: Optional[int] = None

    kind = ShapeKind.LINE


UIElement = Union[
    RectangleElement,
    RoundedRectangleElement,
    CircleElement,
    TextElement,
    BitmapElement,
    LineElement,
]
