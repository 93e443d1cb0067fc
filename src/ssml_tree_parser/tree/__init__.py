"""Tree building engine for SSML parsing.

Key Components:
    SSMLTreeBuilder: Builds node trees from token sequences
    SSMLNode: Element or text run in the document tree
    SSMLAttribute: Name/value pair declared on a tag
    ParseResult: Tree plus tokens, diagnostics and metrics
"""

from .attributes import (
    SSMLAttribute,
    attribute_from_token,
    extract_attributes,
    parse_attributes,
)
from .builder import (
    ParseResult,
    SSMLNode,
    SSMLTreeBuilder,
    build_tree,
)

__all__ = [
    "ParseResult",
    "SSMLAttribute",
    "SSMLNode",
    "SSMLTreeBuilder",
    "attribute_from_token",
    "build_tree",
    "extract_attributes",
    "parse_attributes",
]
