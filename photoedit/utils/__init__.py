"""
PhotoEdit utilities module.

Provides logging helpers shared by the pipeline, session and CLI.
"""

from .logging import StructuredLogger, setup_console_logging

__all__ = [
    'StructuredLogger',
    'setup_console_logging',
]
