"""
Lightweight observability utilities for learnrank.

Exports the JSON log formatter, logging setup and the structured logger used
by the ranking service.
"""

from .logging import JSONFormatter, StructuredLogger, configure_logging

__all__ = [
    "JSONFormatter",
    "StructuredLogger",
    "configure_logging",
]
