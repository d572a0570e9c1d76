"""Shared utilities for suxml.

Configuration objects, the error taxonomy, diagnostic/result types and
correlation-aware logging used by every layer.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    EditorConfig,
    GlobalConfig,
    ProjectionConfig,
    ScannerConfig,
    SerializerConfig,
)
from .errors import EarlyEofError, ParseError, ParseErrorKind, SuxmlError
from .logging import CorrelationLogger, configure_logging, get_logger
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    FieldEditResult,
    ParseStatistics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EditorConfig",
    "GlobalConfig",
    "ProjectionConfig",
    "ScannerConfig",
    "SerializerConfig",
    "EarlyEofError",
    "ParseError",
    "ParseErrorKind",
    "SuxmlError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "FieldEditResult",
    "ParseStatistics",
]
