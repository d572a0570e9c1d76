"""Parser API with progressive disclosure for suxml.

Module-level ``parse``, ``parse_string`` and ``parse_file`` cover the common
cases; ``SuxmlParser`` keeps one configuration and correlation ID across many
parses. None of them raise: a fatal parse error is reported on the returned
``ParseResult`` while the partially built document is still handed back so
that it can be edited and saved.
"""

import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional, TextIO, Union

from suxml.shared import (
    ConfigError,
    DiagnosticEntry,
    DiagnosticSeverity,
    EditorConfig,
    ParseError,
    ParseErrorKind,
    ParseStatistics,
    get_logger,
)
from suxml.tree import XMLDocument

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

MS_PER_SECOND = 1000


@dataclass
class ParseResult:
    """Outcome of one parse: the document plus everything known about the run.

    ``document`` is always set. When ``success`` is False it holds whatever was
    built before ``error`` stopped the parse.
    """

    document: XMLDocument = field(default_factory=XMLDocument)
    success: bool = True
    error: Optional[ParseError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    statistics: ParseStatistics = field(default_factory=ParseStatistics)
    correlation_id: Optional[str] = None

    @property
    def tree(self) -> XMLDocument:
        return self.document

    @property
    def error_line(self) -> Optional[int]:
        """Line at which parsing stopped, or None after a successful parse."""
        return self.error.line if self.error is not None else None

    @property
    def processing_time_ms(self) -> float:
        return self.statistics.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                line=line,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Compact, JSON-friendly description of the parse."""
        result: Dict[str, Any] = {
            "success": self.success,
            "root": self.document.root.element,
            "statistics": self.statistics.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.error is not None:
            result["error"] = {
                "kind": self.error.kind.name,
                "line": self.error.line,
                "message": str(self.error),
            }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        return result


def parse(
    input_data: InputType,
    correlation_id: Optional[str] = None,
    config: Optional[EditorConfig] = None
) -> ParseResult:
    """Parse XML from a string, bytes, a ``Path`` or an open file.

    Strings are always treated as XML text; wrap file names in ``Path`` or use
    ``parse_file``.

    Examples:
        >>> result = parse('<a><b x="1">hi</b></a>')
        >>> result.success
        True
        >>> result = parse('<a><b>')
        >>> result.success, result.error_line
        (False, 1)
        >>> [child.element for child in result.tree.root.children]
        ['b']
    """
    logger = get_logger(__name__, correlation_id, "parse")
    logger.debug("Dispatching parse", extra={"input_type": type(input_data).__name__})

    if isinstance(input_data, Path):
        return parse_file(input_data, correlation_id, config)
    if isinstance(input_data, (str, bytes)):
        return _parse_direct_content(input_data, correlation_id, config)
    if hasattr(input_data, "read"):
        return _parse_file_like_object(input_data, correlation_id, config)
    return _create_error_result(
        f"Unsupported input type: {type(input_data).__name__}",
        correlation_id,
        config,
    )


def parse_string(
    xml_string: str,
    correlation_id: Optional[str] = None,
    config: Optional[EditorConfig] = None
) -> ParseResult:
    """Parse XML text. Never raises; see ``ParseResult.success``."""
    return _parse_direct_content(xml_string, correlation_id, config)


def parse_file(
    file_path: Union[str, Path],
    correlation_id: Optional[str] = None,
    config: Optional[EditorConfig] = None,
    encoding: Optional[str] = None
) -> ParseResult:
    """Parse the XML file at ``file_path``.

    Args:
        file_path: File to read
        correlation_id: Optional correlation ID for request tracking
        config: Editor configuration; its scanner section picks the encoding
        encoding: Shortcut overriding ``config.scanner.encoding``

    Returns:
        ParseResult; an unreadable file gives ``CANNOT_OPEN_FILE`` at line 0
        and an empty document.
    """
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    try:
        effective_config = config or EditorConfig()
        if encoding:
            effective_config = effective_config.override(scanner__encoding=encoding)
    except ConfigError as e:
        return _create_error_result(str(e), correlation_id, config)

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": effective_config.scanner.encoding}
    )

    document = XMLDocument(effective_config, correlation_id)
    result = _run_parse(document, lambda: document.parse(path_obj), correlation_id)
    if result.success:
        result.add_diagnostic(
            DiagnosticSeverity.INFO,
            f"File parsed with encoding: {effective_config.scanner.encoding}",
            "file_parser",
            details={"file_path": str(path_obj)},
        )
    return result


def _parse_direct_content(
    content: Union[str, bytes],
    correlation_id: Optional[str],
    config: Optional[EditorConfig]
) -> ParseResult:
    document = XMLDocument(config, correlation_id)
    if isinstance(content, bytes):
        return _run_parse(document, lambda: document.parse_bytes(content), correlation_id)
    return _run_parse(document, lambda: document.parse_string(content), correlation_id)


def _parse_file_like_object(
    file_obj: Union[BinaryIO, TextIO],
    correlation_id: Optional[str],
    config: Optional[EditorConfig]
) -> ParseResult:
    logger = get_logger(__name__, correlation_id, "parse_stream")
    try:
        content = file_obj.read()
    except OSError as e:
        logger.error("Failed to read input stream", extra={"error": str(e)})
        return _create_error_result(f"Cannot read input: {e}", correlation_id, config)
    return _parse_direct_content(content, correlation_id, config)


def _run_parse(
    document: XMLDocument,
    action: Callable[[], Any],
    correlation_id: Optional[str]
) -> ParseResult:
    """Run ``action`` against ``document`` and fold its outcome into a result."""
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_direct")
    result = ParseResult(document=document, correlation_id=correlation_id)

    try:
        action()
    except ParseError as e:
        result.success = False
        result.error = e
        severity = (
            DiagnosticSeverity.CRITICAL
            if e.kind is ParseErrorKind.CANNOT_OPEN_FILE
            else DiagnosticSeverity.ERROR
        )
        result.add_diagnostic(
            severity,
            e.kind.message,
            "tree_builder",
            line=e.line,
            details={"kind": e.kind.name, "detail": e.detail} if e.detail else {"kind": e.kind.name},
        )
    except (UnicodeDecodeError, LookupError) as e:
        # errors="strict" decoding
        result.success = False
        result.add_diagnostic(
            DiagnosticSeverity.CRITICAL,
            f"Cannot decode input: {e}",
            "scanner",
        )

    result.statistics = document.statistics
    processing_time = (time.time() - start_time) * MS_PER_SECOND
    logger.info(
        "Parse finished",
        extra={
            "success": result.success,
            "nodes": result.statistics.nodes_created,
            "processing_time_ms": processing_time,
        }
    )
    return result


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    config: Optional[EditorConfig] = None
) -> ParseResult:
    """Result for inputs that never reached the parser."""
    result = ParseResult(
        document=XMLDocument(config, correlation_id),
        success=False,
        correlation_id=correlation_id,
    )
    result.add_diagnostic(DiagnosticSeverity.CRITICAL, error_message, "api_parser")
    return result


class SuxmlParser:
    """Reusable parser bound to one configuration and correlation ID.

    Examples:
        >>> parser = SuxmlParser(EditorConfig.spaces(2))
        >>> result = parser.parse('<a><b/></a>')
        >>> result.document.serialize()
        '<a>\\n  <b />\\n</a>'
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or EditorConfig()
        if correlation_id is None and self.config.global_.enable_correlation_tracking:
            correlation_id = str(uuid.uuid4())[:8]
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "suxml_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def parse(self, input_data: InputType) -> ParseResult:
        result = parse(input_data, self.correlation_id, self.config)
        self._record(result)
        return result

    def parse_file(self, file_path: Union[str, Path]) -> ParseResult:
        result = parse_file(file_path, self.correlation_id, self.config)
        self._record(result)
        return result

    def reconfigure(self, config: EditorConfig) -> None:
        self.config = config
        self.logger.info("Parser reconfigured", extra={"config_name": config.name})

    def _record(self, result: ParseResult) -> None:
        self._parse_count += 1
        self._total_processing_time += result.processing_time_ms
        if result.success:
            self._successful_parses += 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Usage counters accumulated over every parse run by this instance."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count if self._parse_count else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
        }

    def reset_statistics(self) -> None:
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
