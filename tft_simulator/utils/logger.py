"""
Logging helpers for the simulator.
Console output is always on; a rotating log file and JSON records are optional.
"""

import json
import logging
import os
import sys
import traceback
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional

DEFAULT_LOG_LEVEL = logging.INFO
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including any ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'name': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
        }
        payload.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES
        )

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': traceback.format_exception(*record.exc_info),
            }

        return json.dumps(payload, default=str)


def _level_value(level: Optional[str]) -> int:
    level = level or os.environ.get('LOG_LEVEL')
    if not level:
        return DEFAULT_LOG_LEVEL
    return getattr(logging, level.upper(), DEFAULT_LOG_LEVEL)


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_json: bool = False
) -> None:
    """
    Configure the root logger for the command line.

    Args:
        level: Logging level name; falls back to the LOG_LEVEL environment variable
        log_file: Also write records to this rotating file
        log_json: Emit JSON records instead of plain text
    """
    level_value = _level_value(level)
    formatter = JsonFormatter() if log_json else logging.Formatter(LOG_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(RotatingFileHandler(log_file, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level_value)
        root_logger.addHandler(handler)


class _ListHandler(logging.Handler):
    def __init__(self, records: List[str], level: int):
        super().__init__(level)
        self.records = records
        self.setFormatter(logging.Formatter(LOG_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(self.format(record))


class LogCapture:
    """Collect formatted records from one logger while the block runs."""

    def __init__(self, logger_name: Optional[str] = None, level: int = logging.DEBUG):
        self.logger = logging.getLogger(logger_name)
        self.logs: List[str] = []
        self._handler = _ListHandler(self.logs, level)
        self._saved_level = self.logger.level

    def __enter__(self):
        self._saved_level = self.logger.level
        if self.logger.getEffectiveLevel() > self._handler.level:
            self.logger.setLevel(self._handler.level)
        self.logger.addHandler(self._handler)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.removeHandler(self._handler)
        self.logger.setLevel(self._saved_level)

    def contains(self, text: str) -> bool:
        """Whether any captured line includes ``text``."""
        return any(text in line for line in self.logs)


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    level: int = logging.ERROR,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an exception with its traceback and optional context.

    Args:
        logger: Logger to use
        exc: Exception to log
        level: Log level
        context: Key/value pairs appended to the message
    """
    message = f"Exception: {type(exc).__name__}: {exc}"
    if context:
        message += " [Context: " + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"
    logger.log(level, message, exc_info=exc)
