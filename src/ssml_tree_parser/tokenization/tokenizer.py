"""Tokenizer for SSML markup.

Markup is first normalized (control characters dropped, the three supported
entities unescaped, outer whitespace trimmed) and then segmented by a
character-class scanner into whole tags and text runs. Every character is
inspected a bounded number of times, so the scanners run in linear time on
any input.
"""

import logging
import string
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

LESS_THAN = "<"
GREATER_THAN = ">"
CLOSING_TAG_PREFIX = "</"
SELF_CLOSING_TAG_SUFFIX = "/>"
ATTRIBUTE_QUOTE = '"'
ATTRIBUTE_ASSIGN = "="

# Removed outright during normalization
CONTROL_CHARACTERS = ("\t", "\n", "\r")

# Entity -> literal replacements, applied in this order
ENTITY_REPLACEMENTS = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)

_ALNUM = frozenset(string.ascii_letters + string.digits)
TAG_BODY_CHARS = _ALNUM | frozenset('_/=-". :')
ATTRIBUTE_NAME_CHARS = _ALNUM | frozenset(":")
ATTRIBUTE_VALUE_CHARS = _ALNUM | frozenset(" .-")
WHITESPACE_CHARS = frozenset(" \t\n\f\r")
_TEXT_STOP_CHARS = frozenset("<>")


def is_closing_tag(value: str) -> bool:
    """Check for ``</name>``."""
    return value.startswith(CLOSING_TAG_PREFIX) and value.endswith(GREATER_THAN)


def is_self_closing_tag(value: str) -> bool:
    """Check for ``<name/>``; ``</name/>`` counts as a closing tag."""
    return (
        value.startswith(LESS_THAN)
        and value.endswith(SELF_CLOSING_TAG_SUFFIX)
        and not value.startswith(CLOSING_TAG_PREFIX)
    )


def is_opening_tag(value: str) -> bool:
    """Check for ``<name>``, i.e. a tag that is neither closing nor self-closing."""
    return (
        not is_closing_tag(value)
        and not is_self_closing_tag(value)
        and value.startswith(LESS_THAN)
        and value.endswith(GREATER_THAN)
    )


def is_tag(value: str) -> bool:
    return is_closing_tag(value) or is_self_closing_tag(value) or is_opening_tag(value)


def extract_value(value: str) -> str:
    """Return the bare tag name of a tag, or the text of a text run unchanged.

    >>> extract_value('<emphasis level="strong">')
    'emphasis'
    >>> extract_value('< br/>')
    'br'
    """
    if not is_tag(value):
        return value
    name = value.replace(CLOSING_TAG_PREFIX, "")
    name = name.replace(SELF_CLOSING_TAG_SUFFIX, "")
    name = name.replace(LESS_THAN, "").replace(GREATER_THAN, "")
    return name.strip().split(" ")[0]


@dataclass(frozen=True)
class Token:
    """A whole tag or a contiguous text run.

    ``offset`` is the position of the token in the normalized markup and does
    not take part in comparisons.
    """

    value: str
    offset: int = field(default=0, compare=False)

    def is_tag(self) -> bool:
        return is_tag(self.value)

    def is_opening_tag(self) -> bool:
        return is_opening_tag(self.value)

    def is_closing_tag(self) -> bool:
        return is_closing_tag(self.value)

    def is_self_closing_tag(self) -> bool:
        return is_self_closing_tag(self.value)

    def extract_value(self) -> str:
        return extract_value(self.value)

    @property
    def kind(self) -> str:
        """Short label used in listings: opening, closing, self-closing or text."""
        if self.is_closing_tag():
            return "closing"
        if self.is_self_closing_tag():
            return "self-closing"
        if self.is_opening_tag():
            return "opening"
        return "text"


@dataclass
class TokenizationResult:
    """Tokens of one document plus the characters the scanner had to drop."""

    tokens: List[Token]
    normalized: str = ""
    discarded: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def has_discarded(self) -> bool:
        return len(self.discarded) > 0


def normalize_markup(markup: str) -> str:
    """Drop tabs and line breaks, unescape entities and trim the result."""
    normalized = markup
    for control in CONTROL_CHARACTERS:
        normalized = normalized.replace(control, "")
    for entity, literal in ENTITY_REPLACEMENTS:
        normalized = normalized.replace(entity, literal)
    return normalized.strip()


def _match_tag(text: str, start: int) -> Optional[int]:
    """Return the end of a tag beginning at ``start``, if there is one."""
    end = start + 1
    length = len(text)
    while end < length and text[end] in TAG_BODY_CHARS:
        end += 1
    if end < length and text[end] == GREATER_THAN:
        return end + 1
    return None


def _match_text(text: str, start: int) -> Tuple[Optional[int], int]:
    """Match a text run at ``start``.

    Returns ``(end, resume)``: ``end`` is None when no run starts here, in
    which case scanning resumes at ``resume``.
    """
    length = len(text)
    first = start
    while first < length and text[first] == " ":
        first += 1
    if (
        first >= length
        or text[first] in _TEXT_STOP_CHARS
        or text[first] in WHITESPACE_CHARS
    ):
        # Every start inside the space run fails at the same character
        return None, max(first, start + 1)
    end = first + 1
    while end < length and text[end] not in _TEXT_STOP_CHARS:
        end += 1
    return end, end


def _match_attribute_tail(text: str, name_end: int) -> Optional[int]:
    """Match ``' *= *"value"'`` right after an attribute name."""
    length = len(text)
    pos = name_end
    while pos < length and text[pos] == " ":
        pos += 1
    if pos >= length or text[pos] != ATTRIBUTE_ASSIGN:
        return None
    pos += 1
    while pos < length and text[pos] == " ":
        pos += 1
    if pos >= length or text[pos] != ATTRIBUTE_QUOTE:
        return None
    pos += 1
    while pos < length and text[pos] in ATTRIBUTE_VALUE_CHARS:
        pos += 1
    if pos >= length or text[pos] != ATTRIBUTE_QUOTE:
        return None
    return pos + 1


class WordTokenizer:
    """Splits markup into tag and text tokens.

    Stateless: one instance can serve any number of concurrent callers.
    """

    def scan(self, markup: str) -> TokenizationResult:
        """Tokenize ``markup`` and report the characters that were dropped.

        Whitespace between tokens is dropped silently; other dropped
        characters (a ``<`` that never becomes a tag, a stray ``>``) are
        listed in :attr:`TokenizationResult.discarded`.
        """
        text = normalize_markup(markup)
        result = TokenizationResult(tokens=[], normalized=text)
        pos = 0
        length = len(text)

        while pos < length:
            char = text[pos]
            if char == LESS_THAN:
                end = _match_tag(text, pos)
                if end is None:
                    result.discarded.append((pos, char))
                    pos += 1
                    continue
                result.tokens.append(Token(text[pos:end], pos))
                pos = end
                continue
            if char == GREATER_THAN:
                result.discarded.append((pos, char))
                pos += 1
                continue

            end, resume = _match_text(text, pos)
            if end is not None:
                result.tokens.append(Token(text[pos:end], pos))
            elif char not in WHITESPACE_CHARS:
                result.discarded.append((pos, char))
            pos = resume

        logger.debug(
            "Tokenized markup",
            extra={
                "input_length": len(markup),
                "normalized_length": length,
                "token_count": len(result.tokens),
                "discarded_count": len(result.discarded),
            },
        )
        return result

    def tokenize(self, markup: str) -> List[Token]:
        """Return the ordered tag and text tokens of ``markup``."""
        return self.scan(markup).tokens

    def tokenize_attributes(self, tag: str) -> List[Token]:
        """Return one ``name="value"`` token per well-formed attribute of ``tag``.

        Matches are found leftmost-first; text that does not fit the
        attribute grammar (unquoted values, values with other punctuation)
        is skipped.
        """
        text = tag
        for control in CONTROL_CHARACTERS:
            text = text.replace(control, "")
        text = text.strip()

        tokens: List[Token] = []
        pos = 0
        length = len(text)
        while pos < length:
            if text[pos] not in ATTRIBUTE_NAME_CHARS:
                pos += 1
                continue
            name_end = pos
            while name_end < length and text[name_end] in ATTRIBUTE_NAME_CHARS:
                name_end += 1
            end = _match_attribute_tail(text, name_end)
            if end is None:
                # Any shorter suffix of this name meets the same tail
                pos = name_end
                continue
            tokens.append(Token(text[pos:end], pos))
            pos = end
        return tokens


_default_tokenizer = WordTokenizer()


def tokenize(markup: str) -> List[Token]:
    """Tokenize ``markup`` with the default :class:`WordTokenizer`."""
    return _default_tokenizer.tokenize(markup)


def tokenize_attributes(tag: str) -> List[Token]:
    """Extract attribute tokens from one tag with the default tokenizer."""
    return _default_tokenizer.tokenize_attributes(tag)
