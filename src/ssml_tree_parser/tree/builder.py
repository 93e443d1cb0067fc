"""Core tree building implementation for SSML parsing.

This module turns the flat token sequence produced by the tokenizer into a
tree of :class:`SSMLNode` objects. Two construction strategies are
available: an explicit stack of open elements (the default) and a recursive
descent that tracks the furthest consumed token in a cursor shared by the
nested calls of one build. Both produce the same tree for well-formed
markup; malformed markup never raises and is reported through diagnostics.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ssml_tree_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
    ParserConfig,
    TreeStrategy,
    get_logger,
)
from ssml_tree_parser.tokenization import Token, WordTokenizer

from .attributes import SSMLAttribute, extract_attributes

_COMPONENT = "tree_builder"
_INDENT = "  "


@dataclass
class SSMLNode:
    """One element or text run of the document tree.

    Element nodes carry the tag name in ``value``; text nodes carry the
    literal text and never have attributes or children. ``is_text`` is
    informational and ignored by equality.
    """

    value: str
    attributes: List[SSMLAttribute] = field(default_factory=list)
    children: List["SSMLNode"] = field(default_factory=list)
    is_text: bool = field(default=False, compare=False, repr=False)

    @property
    def is_tag(self) -> bool:
        return not self.is_text

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get the first attribute value declared under ``name``."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def has_attribute(self, name: str) -> bool:
        return any(attribute.name == name for attribute in self.attributes)

    def iter_nodes(self) -> Iterator["SSMLNode"]:
        """Yield this node and all descendants in document order."""
        pending = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node.children))

    def find(self, name: str) -> Optional["SSMLNode"]:
        """Find the first descendant element named ``name``."""
        for node in self.iter_nodes():
            if node is not self and node.is_tag and node.value == name:
                return node
        return None

    def find_all(self, name: str) -> List["SSMLNode"]:
        """Find all descendant elements named ``name``."""
        return [
            node for node in self.iter_nodes()
            if node is not self and node.is_tag and node.value == name
        ]

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text runs."""
        return "".join(node.value for node in self.iter_nodes() if node.is_text)

    def to_dict(self) -> Dict[str, Any]:
        """Convert node and its subtree to a JSON-friendly dictionary."""
        if self.is_text:
            return {"type": "text", "value": self.value}
        return {
            "type": "element",
            "name": self.value,
            "attributes": [
                {"name": attribute.name, "value": attribute.value}
                for attribute in self.attributes
            ],
            "children": [child.to_dict() for child in self.children],
        }

    def render(self, depth: int = 0) -> str:
        """Render the subtree as indented text, one node per line."""
        lines = []
        stack = [(self, depth)]
        while stack:
            node, level = stack.pop()
            prefix = _INDENT * level
            if node.is_text:
                lines.append(f"{prefix}{node.value!r}")
            else:
                attributes = "".join(
                    f' {attribute.name}="{attribute.value}"'
                    for attribute in node.attributes
                )
                lines.append(f"{prefix}<{node.value}{attributes}>")
            stack.extend((child, level + 1) for child in reversed(node.children))
        return "\n".join(lines)


@dataclass
class ParseResult:
    """Result of building a tree: the root plus tokens, diagnostics and metrics.

    ``root`` is None only when the document produced no tokens at all.
    """

    root: Optional[SSMLNode] = None
    tokens: List[Token] = field(default_factory=list)
    success: bool = True
    strategy: TreeStrategy = TreeStrategy.STACK
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    correlation_id: Optional[str] = None

    @property
    def node_count(self) -> int:
        if self.root is None:
            return 0
        return sum(1 for _ in self.root.iter_nodes())

    @property
    def has_warnings(self) -> bool:
        return any(
            diag.severity == DiagnosticSeverity.WARNING for diag in self.diagnostics
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        token_index: Optional[int] = None,
        offset: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                token_index=token_index,
                offset=offset,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Short overview of the result for logs and the CLI."""
        counts: Dict[str, int] = {}
        for diag in self.diagnostics:
            counts[diag.severity.name] = counts.get(diag.severity.name, 0) + 1
        return {
            "success": self.success,
            "strategy": self.strategy.name,
            "root": self.root.value if self.root is not None else None,
            "token_count": len(self.tokens),
            "node_count": self.node_count,
            "diagnostic_counts": counts,
            "processing_time_ms": self.metrics.processing_time_ms,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the full result to a JSON-friendly dictionary."""
        return {
            "success": self.success,
            "strategy": self.strategy.name,
            "root": self.root.to_dict() if self.root is not None else None,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class _BuildCursor:
    """Mutable state of a single build; never shared between builds."""

    tokens: Sequence[Token]
    result: ParseResult
    high_water: int = -1
    nodes_created: int = 0
    unclosed: List[str] = field(default_factory=list)


class SSMLTreeBuilder:
    """Builds :class:`SSMLNode` trees from token sequences.

    A builder holds configuration only; all per-document state lives in a
    cursor created by :meth:`build`, so one builder may serve concurrent
    callers.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        tokenizer: Optional[WordTokenizer] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration (strategy, diagnostics)
            tokenizer: Tokenizer used for attribute extraction
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.tokenizer = tokenizer or WordTokenizer()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "ssml_tree_builder")

    def build(self, tokens: Sequence[Token]) -> ParseResult:
        """Build the document tree from ``tokens``.

        Never raises for malformed markup. Unexpected failures are logged
        and reported as a CRITICAL diagnostic with ``success=False``.
        """
        start_time = time.time()
        strategy = self.config.tree_strategy
        result = ParseResult(
            tokens=list(tokens),
            strategy=strategy,
            correlation_id=self.correlation_id,
        )
        cursor = _BuildCursor(tokens=result.tokens, result=result)

        self.logger.info(
            "Starting tree building",
            extra={"token_count": len(result.tokens), "strategy": strategy.name}
        )

        if not result.tokens:
            self._report(
                cursor, DiagnosticSeverity.INFO,
                "No tokens provided - document has no root",
            )

        try:
            if strategy == TreeStrategy.RECURSIVE:
                result.root = self._build_recursive_with_fallback(cursor)
            else:
                result.root = self._build_with_stack(cursor)
        except Exception as e:
            self.logger.exception(
                "Tree building failed",
                extra={"strategy": strategy.name}
            )
            result.success = False
            result.add_diagnostic(
                DiagnosticSeverity.CRITICAL,
                f"Tree building failed: {e}",
                _COMPONENT,
                details={"exception_type": type(e).__name__},
            )

        result.metrics.tokens_generated = len(result.tokens)
        result.metrics.nodes_created = cursor.nodes_created
        result.metrics.processing_time_ms = (time.time() - start_time) * 1000

        self.logger.info(
            "Tree building completed",
            extra={
                "node_count": result.node_count,
                "diagnostic_count": len(result.diagnostics),
                "processing_time_ms": result.metrics.processing_time_ms,
            }
        )
        return result

    def _build_recursive_with_fallback(self, cursor: _BuildCursor) -> Optional[SSMLNode]:
        reported = len(cursor.result.diagnostics)
        try:
            return self._build_recursive(cursor)
        except RecursionError:
            if not self.config.fallback_on_recursion_error:
                raise
        # Discard the partial attempt's findings; the stack pass reports them again
        del cursor.result.diagnostics[reported:]
        cursor.result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            "Nesting too deep for recursive strategy - rebuilt with stack strategy",
            _COMPONENT,
        )
        self.logger.warning(
            "Recursive tree building exceeded recursion limit",
            extra={"token_count": len(cursor.tokens)}
        )
        cursor.result.strategy = TreeStrategy.STACK
        cursor.high_water = -1
        cursor.nodes_created = 0
        cursor.unclosed = []
        return self._build_with_stack(cursor)

    def _build_with_stack(self, cursor: _BuildCursor) -> Optional[SSMLNode]:
        """Build with an explicit stack of open elements."""
        root: Optional[SSMLNode] = None
        current: Optional[SSMLNode] = None
        open_elements: List[Optional[SSMLNode]] = []

        for index, token in enumerate(cursor.tokens):
            if root is not None and current is None:
                self._report_after_root(cursor, token, index)
                break

            if token.is_closing_tag():
                if current is None:
                    self._report_unmatched_closing(cursor, token, index)
                    continue
                self._check_closing_name(cursor, current, token, index)
                current = open_elements.pop()
                continue

            node = self._make_node(cursor, token, index)
            if root is None:
                root = node
                if not token.is_opening_tag():
                    self._report_bad_start(cursor, token, index)
            elif current is not None:
                current.children.append(node)

            if token.is_opening_tag():
                open_elements.append(current)
                current = node

        if current is not None:
            cursor.unclosed = [
                element.value for element in open_elements if element is not None
            ]
            cursor.unclosed.append(current.value)
            self._report_unclosed(cursor)
        return root

    def _build_recursive(self, cursor: _BuildCursor) -> Optional[SSMLNode]:
        """Build by recursive descent over token positions.

        The root's children are collected starting right after its opening
        tag; every nested opening tag starts a deeper pass. The cursor's
        high-water mark records the furthest token any pass has consumed, so
        a parent resuming after a child skips the child's tokens.
        """
        tokens = cursor.tokens
        start = 0
        while start < len(tokens) and tokens[start].is_closing_tag():
            self._report_unmatched_closing(cursor, tokens[start], start)
            start += 1
        if start >= len(tokens):
            return None

        first = tokens[start]
        root = self._make_node(cursor, first, start)
        cursor.high_water = start
        if first.is_opening_tag():
            if not self._collect_children(cursor, root, start + 1):
                cursor.unclosed.append(root.value)
                cursor.unclosed.reverse()
                self._report_unclosed(cursor)
        else:
            self._report_bad_start(cursor, first, start)

        trailing = cursor.high_water + 1
        if trailing < len(tokens):
            self._report_after_root(cursor, tokens[trailing], trailing)
        return root

    def _collect_children(self, cursor: _BuildCursor, parent: SSMLNode, index: int) -> bool:
        """Append children to ``parent`` from ``index`` on.

        Returns True when the closing tag of ``parent`` was reached and False
        when the tokens ran out first.
        """
        tokens = cursor.tokens
        while index < len(tokens):
            if index <= cursor.high_water:
                index = cursor.high_water + 1
                continue
            cursor.high_water = index

            token = tokens[index]
            if token.is_closing_tag():
                self._check_closing_name(cursor, parent, token, index)
                return True

            node = self._make_node(cursor, token, index)
            if token.is_opening_tag():
                if not self._collect_children(cursor, node, index + 1):
                    cursor.unclosed.append(node.value)
            parent.children.append(node)
            index += 1
        return False

    def _make_node(self, cursor: _BuildCursor, token: Token, index: int) -> SSMLNode:
        cursor.nodes_created += 1
        if not token.is_tag():
            return SSMLNode(value=token.value, is_text=True)

        attributes, leftover = extract_attributes(token.value, self.tokenizer)
        if leftover:
            self._report(
                cursor, DiagnosticSeverity.WARNING,
                f"Unrecognized attribute text in {token.value!r} was dropped",
                token=token, token_index=index,
                details={"text": leftover},
            )
        return SSMLNode(value=token.extract_value(), attributes=attributes)

    def _check_closing_name(
        self, cursor: _BuildCursor, element: SSMLNode, token: Token, index: int
    ) -> None:
        name = token.extract_value()
        if name != element.value:
            self._report(
                cursor, DiagnosticSeverity.WARNING,
                f"Closing tag </{name}> closes element <{element.value}>",
                token=token, token_index=index,
                details={"expected": element.value, "found": name},
            )

    def _report_unmatched_closing(self, cursor: _BuildCursor, token: Token, index: int) -> None:
        self._report(
            cursor, DiagnosticSeverity.WARNING,
            f"Closing tag {token.value!r} has no open element and was ignored",
            token=token, token_index=index,
        )

    def _report_bad_start(self, cursor: _BuildCursor, token: Token, index: int) -> None:
        self._report(
            cursor, DiagnosticSeverity.WARNING,
            f"Document does not start with an opening tag: {token.value!r}",
            token=token, token_index=index,
        )

    def _report_after_root(self, cursor: _BuildCursor, token: Token, index: int) -> None:
        self._report(
            cursor, DiagnosticSeverity.WARNING,
            f"Content after the root element was ignored, starting at {token.value!r}",
            token=token, token_index=index,
        )

    def _report_unclosed(self, cursor: _BuildCursor) -> None:
        self._report(
            cursor, DiagnosticSeverity.WARNING,
            f"Unclosed element(s) at end of input: {', '.join(cursor.unclosed)}",
            details={"elements": list(cursor.unclosed)},
        )

    def _report(
        self,
        cursor: _BuildCursor,
        severity: DiagnosticSeverity,
        message: str,
        token: Optional[Token] = None,
        token_index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.logger.debug(message, extra={"severity": severity.name})
        if not self.config.collect_diagnostics:
            return
        cursor.result.add_diagnostic(
            severity,
            message,
            _COMPONENT,
            token_index=token_index,
            offset=token.offset if token is not None else None,
            details=details,
        )


def build_tree(
    tokens: Sequence[Token],
    strategy: TreeStrategy = TreeStrategy.STACK
) -> Optional[SSMLNode]:
    """Build a tree from ``tokens`` and return its root."""
    config = ParserConfig(tree_strategy=strategy)
    return SSMLTreeBuilder(config=config).build(tokens).root
