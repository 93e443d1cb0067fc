"""Attribute extraction for opening and self-closing tags."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ssml_tree_parser.tokenization import (
    Token,
    WordTokenizer,
    extract_value,
    tokenize_attributes,
)
from ssml_tree_parser.tokenization.tokenizer import (
    ATTRIBUTE_ASSIGN,
    ATTRIBUTE_QUOTE,
    CLOSING_TAG_PREFIX,
    GREATER_THAN,
    LESS_THAN,
    SELF_CLOSING_TAG_SUFFIX,
)


@dataclass(frozen=True)
class SSMLAttribute:
    """A ``name="value"`` pair declared on a tag."""

    name: str
    value: str


def attribute_from_token(token: Token) -> SSMLAttribute:
    """Split an attribute token on its first ``=`` into name and value.

    The name is trimmed. The value keeps everything after ``=`` except the
    quote characters, so ``rate = "fast"`` has the value ``" fast"``.
    """
    name, _, raw_value = token.value.partition(ATTRIBUTE_ASSIGN)
    return SSMLAttribute(name=name.strip(), value=raw_value.replace(ATTRIBUTE_QUOTE, ""))


def extract_attributes(
    tag: str,
    tokenizer: Optional[WordTokenizer] = None
) -> Tuple[List[SSMLAttribute], str]:
    """Extract the attributes of ``tag`` and the text none of them covered.

    Args:
        tag: Literal text of an opening or self-closing tag
        tokenizer: Tokenizer providing ``tokenize_attributes``

    Returns:
        Tuple of the attributes in declaration order and the leftover tag
        text (empty when the tag was fully understood)
    """
    if tokenizer is None:
        tokens = tokenize_attributes(tag)
    else:
        tokens = tokenizer.tokenize_attributes(tag)
    attributes = [attribute_from_token(token) for token in tokens]

    leftover = tag.strip()
    for token in tokens:
        leftover = leftover.replace(token.value, " ", 1)
    for marker in (CLOSING_TAG_PREFIX, SELF_CLOSING_TAG_SUFFIX, LESS_THAN, GREATER_THAN):
        leftover = leftover.replace(marker, " ")
    words = leftover.split()
    name = extract_value(tag)
    if words and words[0] == name:
        words = words[1:]
    return attributes, " ".join(words)


def parse_attributes(
    tag: str,
    tokenizer: Optional[WordTokenizer] = None
) -> List[SSMLAttribute]:
    """Return the attributes of ``tag`` in declaration order.

    >>> parse_attributes('<speak version="1.0" xml:lang="en-US">')
    [SSMLAttribute(name='version', value='1.0'), SSMLAttribute(name='xml:lang', value='en-US')]
    """
    attributes, _ = extract_attributes(tag, tokenizer)
    return attributes
