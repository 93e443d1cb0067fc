"""Core parser API for SSML tree parsing.

Progressive disclosure, from simplest to most configurable:

- :func:`parse_tree` returns just the root node,
- :func:`parse` returns a :class:`ParseResult` with tokens and diagnostics,
- :class:`SSMLParser` is a reusable, configurable parser object with an
  injectable tokenizer and usage statistics.
"""

import threading
import time
from typing import Any, Dict, List, Optional

from ssml_tree_parser.shared import (
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
    preview,
)
from ssml_tree_parser.tokenization import Token, TokenizationResult, WordTokenizer
from ssml_tree_parser.tree import (
    ParseResult,
    SSMLAttribute,
    SSMLNode,
    SSMLTreeBuilder,
    parse_attributes,
)

MS_PER_SECOND = 1000  # Milliseconds per second conversion


class SSMLParser:
    """Reusable SSML parser.

    Attributes:
        tokenizer: Object providing ``tokenize`` and ``tokenize_attributes``
            (and optionally ``scan``); defaults to :class:`WordTokenizer`
        config: Parser configuration
        correlation_id: Correlation ID attached to logs and diagnostics

    Examples:
        >>> parser = SSMLParser()
        >>> parser.parse_tree('<speak>Hello</speak>').children[0].value
        'Hello'

        >>> result = parser.parse('<speak><p>unclosed</speak>')
        >>> result.has_warnings
        True
    """

    def __init__(
        self,
        tokenizer: Optional[WordTokenizer] = None,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.tokenizer = tokenizer or WordTokenizer()
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "ssml_parser")

        self._stats_lock = threading.Lock()
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def tokenize(self, markup: str) -> List[Token]:
        """Split ``markup`` into tag and text tokens."""
        return self.tokenizer.tokenize(markup)

    def parse_attributes(self, tag: str) -> List[SSMLAttribute]:
        """Extract the attributes declared on one tag."""
        return parse_attributes(tag, self.tokenizer)

    def parse_tree(self, markup: str) -> Optional[SSMLNode]:
        """Parse ``markup`` and return the root node (None for empty input)."""
        return self.parse(markup).root

    def parse(
        self,
        markup: str,
        config_override: Optional[ParserConfig] = None,
        correlation_id_override: Optional[str] = None
    ) -> ParseResult:
        """Parse ``markup`` into a :class:`ParseResult`.

        Args:
            markup: SSML document
            config_override: Configuration used for this call only
            correlation_id_override: Correlation ID used for this call only

        Returns:
            ParseResult with the tree, tokens, diagnostics and metrics
        """
        start_time = time.time()
        config = config_override or self.config
        correlation_id = correlation_id_override or self.correlation_id
        logger = (
            self.logger if correlation_id == self.correlation_id
            else get_logger(__name__, correlation_id, "ssml_parser")
        )

        logger.info(
            "Starting parse operation",
            extra={
                "content_length": len(markup),
                "preview": preview(markup, config.log_preview_length),
                "strategy": config.tree_strategy.name,
            }
        )

        scanned = self._scan(markup)
        builder = SSMLTreeBuilder(
            config=config,
            tokenizer=self.tokenizer,
            correlation_id=correlation_id,
        )
        result = builder.build(scanned.tokens)

        if config.collect_diagnostics and scanned.has_discarded:
            for offset, char in scanned.discarded:
                result.add_diagnostic(
                    DiagnosticSeverity.WARNING,
                    f"Discarded character {char!r} that is not part of a tag or text",
                    "tokenizer",
                    offset=offset,
                )

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        result.metrics.processing_time_ms = processing_time
        result.metrics.characters_processed = len(markup)
        self._record(result.success, processing_time)

        logger.info(
            "Parse completed",
            extra={
                "success": result.success,
                "root": result.root.value if result.root is not None else None,
                "diagnostic_count": len(result.diagnostics),
                "processing_time_ms": processing_time,
            }
        )
        return result

    def _scan(self, markup: str) -> TokenizationResult:
        scan = getattr(self.tokenizer, "scan", None)
        if scan is not None:
            return scan(markup)
        return TokenizationResult(tokens=list(self.tokenizer.tokenize(markup)))

    def _record(self, success: bool, processing_time: float) -> None:
        with self._stats_lock:
            self._parse_count += 1
            self._total_processing_time += processing_time
            if success:
                self._successful_parses += 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        with self._stats_lock:
            count = self._parse_count
            return {
                "total_parses": count,
                "successful_parses": self._successful_parses,
                "success_rate": self._successful_parses / count if count else 0.0,
                "total_processing_time_ms": self._total_processing_time,
                "average_processing_time_ms": (
                    self._total_processing_time / count if count else 0.0
                ),
                "strategy": self.config.tree_strategy.name,
                "correlation_id": self.correlation_id,
            }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        with self._stats_lock:
            self._parse_count = 0
            self._successful_parses = 0
            self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")


_default_parser = SSMLParser()


def tokenize(markup: str) -> List[Token]:
    """Split ``markup`` into its ordered tag and text tokens.

    >>> [token.value for token in tokenize('<s> Hi &amp; bye</s>')]
    ['<s>', ' Hi & bye', '</s>']
    """
    return _default_parser.tokenize(markup)


def parse_tree(markup: str) -> Optional[SSMLNode]:
    """Parse ``markup`` and return the root of the tree.

    This is the primary entry point. Malformed markup never raises; the
    tree is built best-effort. Returns None when ``markup`` holds no tag or
    text at all.

    >>> root = parse_tree('<speak version="1.0">Hello <break/>world</speak>')
    >>> root.value, root.get_attribute("version")
    ('speak', '1.0')
    >>> [child.value for child in root.children]
    ['Hello ', 'break', 'world']
    """
    return SSMLParser().parse(markup).root


def parse(
    markup: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse ``markup`` and return the tree together with its diagnostics."""
    return SSMLParser(config=config, correlation_id=correlation_id).parse(markup)
