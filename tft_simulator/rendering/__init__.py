"""
TFT Simulator - Rendering Package
=================================
This package contains the display renderer and the surfaces it can paint on.
"""

from tft_simulator.rendering.surface import Surface, SurfaceError
from tft_simulator.rendering.pillow_surface import PillowSurface
from tft_simulator.rendering.svg_surface import SVGSurface
from tft_simulator.rendering.renderer import DisplayRenderer, render

__all__ = ['Surface', 'SurfaceError', 'PillowSurface', 'SVGSurface', 'DisplayRenderer', 'render']
