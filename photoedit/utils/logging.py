"""
Logging utilities for PhotoEdit
Provides structured logging and console setup
"""

import logging
import sys
from typing import Optional, Dict, Any
import json

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class StructuredLogger:
    """Provides structured logging with metadata"""

    def __init__(self, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Initialize structured logger

        Args:
            name: Logger name
            metadata: Default metadata to include in all logs
        """
        self.logger = logging.getLogger(name)
        self.metadata = metadata or {}

    def _format_message(self, message: str, **kwargs) -> str:
        """Format message with metadata"""
        data = {**self.metadata, **kwargs}
        if data:
            return f"{message} | {json.dumps(data, default=str)}"
        return message

    def debug(self, message: str, **kwargs):
        """Log debug message with metadata"""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        """Log info message with metadata"""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message with metadata"""
        self.logger.warning(self._format_message(message, **kwargs))


def setup_console_logging(level: str = "INFO", color: bool = True,
                          fmt: str = DEFAULT_FORMAT) -> logging.Handler:
    """
    Setup console logging with optional color support

    Args:
        level: Logging level
        color: Whether to use colored output
        fmt: Log record format

    Returns:
        The handler attached to the root logger
    """
    # Create console handler
    console_handler = logging.StreamHandler(sys.stderr)

    # Create formatter
    if color and sys.stderr.isatty():
        # Use colored formatter if supported
        try:
            import colorlog
            formatter = colorlog.ColoredFormatter(
                '%(log_color)s' + fmt.replace('%(message)s', '%(reset)s%(message)s'),
                log_colors={
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            )
        except ImportError:
            # Fallback to standard formatter
            formatter = logging.Formatter(fmt)
    else:
        formatter = logging.Formatter(fmt)

    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root_logger.addHandler(console_handler)
    return console_handler
