"""Shared utilities for SSML tree parsing.

This module provides the configuration objects, diagnostic types and logging
helpers used by the tokenizer, the tree builder and the API.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    TreeStrategy,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    preview,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseMetrics",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "TreeStrategy",
    "CorrelationLogger",
    "get_logger",
    "preview",
]
