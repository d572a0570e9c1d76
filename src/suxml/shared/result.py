"""Diagnostic and statistics types shared by the parser and the API layer."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Parse aborted, partial tree kept
    CRITICAL = auto()   # Nothing usable was produced


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    line: Optional[int] = None
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
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.line is not None:
            result["line"] = self.line
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class ParseStatistics:
    """Counters collected while building a tree."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    lines_processed: int = 0
    tags_created: int = 0
    content_nodes_created: int = 0
    comments_created: int = 0
    attributes_read: int = 0
    max_depth: int = 0

    @property
    def nodes_created(self) -> int:
        return self.tags_created + self.content_nodes_created + self.comments_created

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "lines_processed": self.lines_processed,
            "tags_created": self.tags_created,
            "content_nodes_created": self.content_nodes_created,
            "comments_created": self.comments_created,
            "attributes_read": self.attributes_read,
            "nodes_created": self.nodes_created,
            "max_depth": self.max_depth,
        }


@dataclass(frozen=True)
class FieldEditResult:
    """Outcome of editing one settable field of a node.

    ``offset`` is the index of the first rejected character in the submitted
    text, or -1 when the rejection is not tied to one character (for example
    an empty element name) or the edit succeeded.
    """

    success: bool
    offset: int = -1

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls) -> "FieldEditResult":
        return cls(True)

    @classmethod
    def rejected(cls, offset: int = -1) -> "FieldEditResult":
        return cls(False, offset)
