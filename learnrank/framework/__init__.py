"""Framework-level utilities shared by every learnrank layer."""

from . import errors
from .errors import (
    ClientConfigError,
    ErrorCode,
    ErrorSeverity,
    LearnRankError,
    StorageError,
    TemplateRenderError,
)

__all__ = [
    "ClientConfigError",
    "ErrorCode",
    "ErrorSeverity",
    "LearnRankError",
    "StorageError",
    "TemplateRenderError",
    "errors",
]
