"""
Default configuration settings for the TFT display simulator.
"""

import os

DEFAULT_CONFIG = {
    # Display geometry
    "display_width": 380,
    "display_height": 420,
    "rotation": 1,

    # Rendering settings
    "debug_mode": False,  # Overlay touch zones on rendered frames

    # Extraction settings
    "draw_function_prefix": "draw",  # Functions that draw a screen
    "api_prefix": "tft.",  # Calls forwarded to element extraction
    "required_include": "TFT_eSPI.h",
    "default_text_color": "#ffffff",
    "default_font_size": 16,
    "default_font": "Arial, sans-serif",
    "touch_action_window": 4,  # Lines searched after a touch predicate

    # Logging
    "log_level": os.environ.get("LOG_LEVEL", "INFO"),
    "log_file": None,  # Rotating log file, console only when unset
    "log_json": False,  # JSON records instead of plain text
}
