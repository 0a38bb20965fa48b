"""
Color Model Module
==================
Conversion between the 16-bit packed RGB565 format used by TFT display
controllers and the ``#rrggbb`` hex strings used by the rendering surfaces.
"""

import colorsys
import logging
import re
from typing import Dict, Optional, Tuple

from PIL import ImageColor

logger = logging.getLogger(__name__)

# Type definitions
RGB = Tuple[int, int, int]

DEFAULT_COLOR = "#000000"

RED_MAX = 0x1F
GREEN_MAX = 0x3F
BLUE_MAX = 0x1F

# TFT_eSPI colour constants (RGB565)
TFT_COLORS: Dict[str, int] = {
    "TFT_BLACK": 0x0000,
    "TFT_WHITE": 0xFFFF,
    "TFT_RED": 0xF800,
    "TFT_GREEN": 0x07E0,
    "TFT_BLUE": 0x001F,
    "TFT_CYAN": 0x07FF,
    "TFT_MAGENTA": 0xF81F,
    "TFT_YELLOW": 0xFFE0,
    "TFT_ORANGE": 0xFD20,
    "TFT_DARKGREY": 0x7BEF,
    "TFT_DARKGRAY": 0x7BEF,
    "TFT_LIGHTGREY": 0xC618,
    "TFT_LIGHTGRAY": 0xC618,
    "TFT_NAVY": 0x000F,
    "TFT_DARKGREEN": 0x03E0,
    "TFT_DARKCYAN": 0x03EF,
    "TFT_MAROON": 0x7800,
    "TFT_PURPLE": 0x780F,
    "TFT_OLIVE": 0x7BE0,
    "TFT_PINK": 0xF81F,
    "TFT_GREENYELLOW": 0xAFE5,
    "TFT_BROWN": 0xBC40,
    "TFT_GOLD": 0xFEA0,
    "TFT_SILVER": 0xC618,
    "TFT_SKYBLUE": 0x867D,
    "TFT_VIOLET": 0x915C,
}

_RGB_CALL_PATTERN = re.compile(r"rgbToHex\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)")
_HEX_LITERAL_PATTERN = re.compile(r"^0[xX]([0-9a-fA-F]+)$")
_DECIMAL_LITERAL_PATTERN = re.compile(r"^\d+$")
_HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})([0-9a-fA-F]{2})?$")


class ColorError(Exception):
    """Custom exception for color-related errors."""
    pass


def packed_to_rgb(code: int) -> RGB:
    """
    Split an RGB565 value into 8-bit channels.

    Each field is rescaled with ``round(field * 255 / field_max)`` so that
    the maximum 5- or 6-bit value maps to exactly 255.

    Args:
        code: 16-bit packed colour

    Returns:
        (red, green, blue) tuple in the 0-255 range
    """
    code &= 0xFFFF
    r = (code >> 11) & RED_MAX
    g = (code >> 5) & GREEN_MAX
    b = code & BLUE_MAX
    return (
        int(round(r * 255 / RED_MAX)),
        int(round(g * 255 / GREEN_MAX)),
        int(round(b * 255 / BLUE_MAX)),
    )


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format 8-bit channels as a lowercase ``#rrggbb`` string."""
    return f"#{(r & 0xFF) << 16 | (g & 0xFF) << 8 | (b & 0xFF):06x}"


def packed_to_hex(code: int) -> str:
    """
    Convert an RGB565 value to a ``#rrggbb`` hex string.

    Args:
        code: 16-bit packed colour

    Returns:
        Zero-padded lowercase hex colour
    """
    return rgb_to_hex(*packed_to_rgb(code))


def rgb_to_packed(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels into RGB565 by dropping the low bits."""
    r5 = (r >> 3) & RED_MAX
    g6 = (g >> 2) & GREEN_MAX
    b5 = (b >> 3) & BLUE_MAX
    return (r5 << 11) | (g6 << 5) | b5


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Parse a ``#rrggbb`` (or ``#rrggbbaa``) string into 8-bit channels.

    Raises:
        ColorError: If the string is not a hex colour
    """
    match = _HEX_COLOR_PATTERN.match(hex_color.strip())
    if not match:
        raise ColorError(f"Invalid hex color: {hex_color!r}")
    value = int(match.group(1), 16)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def hex_to_packed(hex_color: str) -> int:
    """
    Convert a hex colour string to RGB565.

    Args:
        hex_color: Colour such as ``"#ff0000"``

    Returns:
        16-bit packed colour

    Raises:
        ColorError: If the string is not a hex colour
    """
    return rgb_to_packed(*hex_to_rgb(hex_color))


def color_name_for_packed(code: int) -> Optional[str]:
    """Return the first TFT constant name carrying ``code``, if any."""
    for name, value in TFT_COLORS.items():
        if value == code:
            return name
    return None


def resolve_color_expression(expression: str) -> str:
    """
    Resolve a colour argument found in sketch source to a hex string.

    Recognised forms, in priority order: a ``TFT_*`` constant, an
    ``rgbToHex(r, g, b)`` call, a ``0x`` hex literal and a bare decimal
    literal. The last two are read as RGB565 values. Anything else
    resolves to black.

    Args:
        expression: Raw argument text

    Returns:
        ``#rrggbb`` colour string
    """
    text = expression.strip()

    if text.startswith("TFT_"):
        code = TFT_COLORS.get(text)
        if code is None:
            logger.debug(f"Unknown TFT color constant: {text}")
            return DEFAULT_COLOR
        return packed_to_hex(code)

    rgb_match = _RGB_CALL_PATTERN.search(text)
    if rgb_match:
        r, g, b = (int(group) for group in rgb_match.groups())
        return rgb_to_hex(r, g, b)

    hex_match = _HEX_LITERAL_PATTERN.match(text)
    if hex_match:
        return packed_to_hex(int(hex_match.group(1), 16))

    if _DECIMAL_LITERAL_PATTERN.match(text):
        return packed_to_hex(int(text))

    logger.debug(f"Unrecognized color expression {text!r}, using {DEFAULT_COLOR}")
    return DEFAULT_COLOR


def hsl_to_hex(hue: float, saturation: float, lightness: float, alpha: Optional[float] = None) -> str:
    """
    Convert HSL values to hex, optionally with an alpha byte.

    Args:
        hue: Hue in degrees
        saturation: Saturation (0.0-1.0)
        lightness: Lightness (0.0-1.0)
        alpha: Optional opacity (0.0-1.0); appended as ``aa``

    Returns:
        ``#rrggbb`` or ``#rrggbbaa`` string
    """
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness, saturation)
    color = rgb_to_hex(int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))
    if alpha is None:
        return color
    return f"{color}{int(round(min(1.0, max(0.0, alpha)) * 255)):02x}"


def split_alpha(color: str) -> Tuple[str, float]:
    """
    Split a ``#rrggbbaa`` string into its opaque colour and opacity.

    Colours without an alpha byte are fully opaque.

    Raises:
        ColorError: If the string is not a hex colour
    """
    match = _HEX_COLOR_PATTERN.match(color.strip())
    if not match:
        raise ColorError(f"Invalid hex color: {color!r}")
    alpha = match.group(2)
    opacity = int(alpha, 16) / 255 if alpha else 1.0
    return f"#{match.group(1).lower()}", opacity


def color_to_hex(color: str) -> str:
    """
    Opaque ``#rrggbb`` form of a hex colour or a CSS colour name.

    Raises:
        ColorError: If neither form is recognised
    """
    match = _HEX_COLOR_PATTERN.match(color.strip())
    if match:
        return f"#{match.group(1).lower()}"
    try:
        rgb = ImageColor.getrgb(color.strip())
    except ValueError as e:
        raise ColorError(f"Unknown color: {color!r}") from e
    return rgb_to_hex(*rgb[:3])
