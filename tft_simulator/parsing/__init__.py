"""
TFT Simulator - Parsing Package
===============================
This package contains the line recognizers and the scene extractor that
turn sketch source into a ParsedDisplay.
"""

from tft_simulator.parsing.recognizers import NO_MATCH, Match, NoMatch
from tft_simulator.parsing.extractor import SceneExtractor, parse_source

__all__ = ['NO_MATCH', 'Match', 'NoMatch', 'SceneExtractor', 'parse_source']
