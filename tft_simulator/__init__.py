"""
TFT Simulator
=============
Reads Arduino sketches written against the TFT_eSPI library, reconstructs
the screens they draw, and simulates them on a virtual display with touch
support.
"""

__version__ = "0.1.0"

from tft_simulator.models.display import ParsedDisplay, Screen
from tft_simulator.parsing.extractor import SceneExtractor, parse_source
from tft_simulator.rendering.renderer import DisplayRenderer, render
from tft_simulator.interaction.resolver import InteractionResolver
from tft_simulator.state import DisplayState, SceneSlice
from tft_simulator.simulator import DisplaySimulator, SimulatorError

__all__ = [
    'ParsedDisplay', 'Screen', 'SceneExtractor', 'parse_source',
    'DisplayRenderer', 'render', 'InteractionResolver',
    'DisplayState', 'SceneSlice', 'DisplaySimulator', 'SimulatorError'
]
