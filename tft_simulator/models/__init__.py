"""
TFT Simulator - Data Models
===========================
This package contains data models for representing parsed sketches,
screens, drawable elements, touch zones and colors.
"""

from tft_simulator.models.color import (
    TFT_COLORS, ColorError, packed_to_hex, hex_to_packed,
    packed_to_rgb, rgb_to_packed, rgb_to_hex, hex_to_rgb,
    color_name_for_packed, resolve_color_expression,
    hsl_to_hex, split_alpha, color_to_hex
)
from tft_simulator.models.elements import (
    ShapeKind, TextAlign, TextBaseline, UIElement,
    RectangleElement, RoundedRectangleElement, CircleElement,
    TextElement, BitmapElement, LineElement
)
from tft_simulator.models.touch import TouchZone, TouchResult
from tft_simulator.models.display import (
    Severity, StateType, StateTransition, Screen, StateDefinition,
    Variable, FunctionSignature, ParseError, DisplayConfig, ParsedDisplay
)

__all__ = [
    'TFT_COLORS', 'ColorError', 'packed_to_hex', 'hex_to_packed',
    'packed_to_rgb', 'rgb_to_packed', 'rgb_to_hex', 'hex_to_rgb',
    'color_name_for_packed', 'resolve_color_expression',
    'hsl_to_hex', 'split_alpha', 'color_to_hex',
    'ShapeKind', 'TextAlign', 'TextBaseline', 'UIElement',
    'RectangleElement', 'RoundedRectangleElement', 'CircleElement',
    'TextElement', 'BitmapElement', 'LineElement',
    'TouchZone', 'TouchResult',
    'Severity', 'StateType', 'StateTransition', 'Screen', 'StateDefinition',
    'Variable', 'FunctionSignature', 'ParseError', 'DisplayConfig', 'ParsedDisplay'
]
