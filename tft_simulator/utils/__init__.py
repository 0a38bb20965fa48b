"""
TFT Simulator - Utilities Package
=================================
This package contains utility modules for the TFT display simulator.
"""

from tft_simulator.utils.logger import (
    JsonFormatter, setup_logger, LogCapture, log_exception
)

__all__ = [
    'JsonFormatter', 'setup_logger', 'LogCapture', 'log_exception'
]
