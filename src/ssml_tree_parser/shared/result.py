"""Diagnostic and metric types shared by the tokenizer and tree builder.

Malformed markup never raises; instead the problems found while parsing are
collected as :class:`DiagnosticEntry` objects next to the tree.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Malformed input, tree built best-effort
    ERROR = auto()      # Strategy failed and was replaced
    CRITICAL = auto()   # Tree building aborted


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information.

    ``token_index`` points into the token sequence, ``offset`` into the
    normalized markup string.
    """

    severity: DiagnosticSeverity
    message: str
    component: str
    token_index: Optional[int] = None
    offset: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.token_index is not None:
            result["token_index"] = self.token_index
        if self.offset is not None:
            result["offset"] = self.offset
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class ParseMetrics:
    """Performance metrics for one parse operation."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_generated: int = 0
    nodes_created: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens generated per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_generated * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "tokens_generated": self.tokens_generated,
            "nodes_created": self.nodes_created,
        }
