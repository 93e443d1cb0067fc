"""Comprehensive tests for the SSML tokenizer.

Tests normalization, tag/text segmentation, attribute sub-tokenization and
token classification.
"""

import pytest

from ssml_tree_parser.tokenization import (
    Token,
    WordTokenizer,
    extract_value,
    is_closing_tag,
    is_opening_tag,
    is_self_closing_tag,
    is_tag,
    normalize_markup,
    tokenize,
    tokenize_attributes,
)

NESTED_DOCUMENT = (
    "<speak>\n"
    "\t\t\t\t\t<p>\n"
    "\t\t\t\t\t\t<s> This is sentence one. &amp;</s>\n"
    "\t\t\t\t\t\t<s> This is sentence two with\n"
    "\t\t\t\t\t\t\t<emphasis level=\"strong\">\n"
    "\t\t\t\t\t\t\t\temphasis\n"
    "\t\t\t\t\t\t\t</emphasis> then more text\n"
    "\t\t\t\t\t\t</s>\n"
    "\t\t\t\t\t</p>\n"
    "\t\t\t\t</speak>"
)


def values(tokens):
    return [token.value for token in tokens]


class TestNormalization:
    """Test markup normalization before segmentation."""

    def test_control_characters_are_removed_not_replaced(self) -> None:
        """Test tabs and line breaks collapse to nothing."""
        assert normalize_markup("a\tb\nc\r\nd") == "abcd"

    def test_entities_are_unescaped(self) -> None:
        """Test the three supported entities become literal characters."""
        assert normalize_markup("&lt;b&gt; &amp; more") == "<b> & more"

    def test_unknown_entities_and_bare_ampersands_pass_through(self) -> None:
        """Test only &lt; &gt; &amp; are recognized."""
        assert normalize_markup("Tom & Jerry &quot;x&quot;") == "Tom & Jerry &quot;x&quot;"

    def test_double_escaped_ampersand_is_decoded_once(self) -> None:
        """Test &amp;amp; decodes to the literal text &amp;."""
        assert normalize_markup("&amp;amp;") == "&amp;"

    def test_outer_whitespace_is_trimmed(self) -> None:
        """Test leading and trailing whitespace of the document is removed."""
        assert normalize_markup("   <speak/>  ") == "<speak/>"


class TestTokenize:
    """Test segmentation into tag and text tokens."""

    def test_nested_document(self) -> None:
        """Test a nested document with indentation and an escape."""
        assert values(tokenize(NESTED_DOCUMENT)) == [
            "<speak>",
            "<p>",
            "<s>",
            " This is sentence one. &",
            "</s>",
            "<s>",
            " This is sentence two with",
            "<emphasis level=\"strong\">",
            "emphasis",
            "</emphasis>",
            " then more text",
            "</s>",
            "</p>",
            "</speak>",
        ]

    def test_escaped_ampersand_yields_single_text_token(self) -> None:
        """Test text ending with &amp; stays one token ending in &."""
        tokens = tokenize("This is sentence one. &amp;")
        assert values(tokens) == ["This is sentence one. &"]

    def test_whitespace_only_gaps_are_not_emitted(self) -> None:
        """Test spaces between tags never become tokens."""
        assert values(tokenize("<a>    <b/>   </a>")) == ["<a>", "<b/>", "</a>"]

    def test_text_keeps_leading_and_inner_spaces(self) -> None:
        """Test text runs keep spaces up to the next tag."""
        tokens = tokenize("<s>Here is <emphasis>x</emphasis> text.</s>")
        assert values(tokens) == [
            "<s>", "Here is ", "<emphasis>", "x", "</emphasis>", " text.", "</s>"
        ]

    def test_tag_with_leading_space_and_self_closing(self) -> None:
        """Test a tag may contain a space right after <."""
        assert values(tokenize("<speak>hello< br/>world!</speak>")) == [
            "<speak>", "hello", "< br/>", "world!", "</speak>"
        ]

    def test_tag_with_extra_spaces(self) -> None:
        """Test padding inside a tag is kept in the token."""
        assert values(tokenize("<speak      ></speak>")) == ["<speak      >", "</speak>"]

    def test_tag_characters_allowed(self) -> None:
        """Test names and attributes with - _ . : / = and quotes."""
        markup = '<say-as interpret_as="x.y" xml:lang="en-US"><break time="3s"/></say-as>'
        assert values(tokenize(markup)) == [
            '<say-as interpret_as="x.y" xml:lang="en-US">',
            '<break time="3s"/>',
            "</say-as>",
        ]

    def test_stray_less_than_is_discarded(self) -> None:
        """Test a < that never closes into a tag is dropped."""
        result = WordTokenizer().scan("<speak>a < b</speak>")

        assert values(result.tokens) == ["<speak>", "a ", " b", "</speak>"]
        assert result.discarded == [(9, "<")]
        assert result.has_discarded

    def test_stray_greater_than_is_discarded(self) -> None:
        """Test a lone > splits the surrounding text."""
        result = WordTokenizer().scan("<s>a > b</s>")

        assert values(result.tokens) == ["<s>", "a ", " b", "</s>"]
        assert result.discarded == [(5, ">")]

    def test_tag_with_unsupported_character_is_not_a_tag(self) -> None:
        """Test characters outside the tag alphabet break the tag match."""
        result = WordTokenizer().scan("<audio src='a'>")

        assert values(result.tokens) == ["audio src='a'"]
        assert result.discarded == [(0, "<"), (14, ">")]

    def test_token_offsets_point_into_normalized_markup(self) -> None:
        """Test offsets of each token."""
        tokens = tokenize("  <a>hi</a>")
        assert [token.offset for token in tokens] == [0, 3, 5]

    def test_empty_and_blank_input(self) -> None:
        """Test input without content gives no tokens."""
        assert tokenize("") == []
        assert tokenize(" \t\n ") == []

    def test_long_unterminated_tag_is_linear(self) -> None:
        """Test adversarial input completes and becomes one text token."""
        markup = "<" + "a" * 200000
        result = WordTokenizer().scan(markup)

        assert len(result.tokens) == 1
        assert result.tokens[0].value == "a" * 200000
        assert result.discarded == [(0, "<")]


class TestTokenizeAttributes:
    """Test the attribute sub-tokenizer."""

    def test_attributes_in_declaration_order(self) -> None:
        """Test every quoted attribute is found left to right."""
        tokens = tokenize_attributes('<speak version="1.0" xml:lang="en-US">')
        assert values(tokens) == ['version="1.0"', 'xml:lang="en-US"']

    def test_spaces_around_equals_are_tolerated(self) -> None:
        """Test the spaced variant is matched as a whole."""
        assert values(tokenize_attributes('<prosody rate = "fast">')) == ['rate = "fast"']

    def test_tag_without_attributes(self) -> None:
        """Test no tokens for a bare tag."""
        assert tokenize_attributes("<speak      >") == []

    def test_unquoted_values_are_skipped(self) -> None:
        """Test values without double quotes do not match."""
        assert tokenize_attributes("<emphasis level=strong>") == []

    def test_values_with_unsupported_characters_are_skipped(self) -> None:
        """Test values outside the value alphabet do not match."""
        assert values(tokenize_attributes('<audio src="a/b.wav" id="x">')) == ['id="x"']

    def test_hyphenated_name_matches_its_suffix(self) -> None:
        """Test names are alphanumeric or colon only."""
        assert values(tokenize_attributes('<s data-id="1">')) == ['id="1"']

    def test_long_name_run_without_value(self) -> None:
        """Test adversarial attribute text completes."""
        assert tokenize_attributes("<a " + "b" * 200000 + ">") == []


class TestClassification:
    """Test token classification helpers."""

    @pytest.mark.parametrize(
        "value",
        [
            "<speak>", "</speak>", "<br/>", "< br/>", "<speak      >",
            "text", " text", "", "<", ">", "</>", "/>", "<a", "a>",
        ],
    )
    def test_classification_is_mutually_exclusive(self, value: str) -> None:
        """Test at most one tag kind holds and is_tag matches that."""
        kinds = [is_opening_tag(value), is_closing_tag(value), is_self_closing_tag(value)]

        assert sum(kinds) <= 1
        assert is_tag(value) == (sum(kinds) == 1)

    def test_opening_tag(self) -> None:
        """Test opening tag detection."""
        assert Token("<speak>").is_opening_tag()
        assert not Token("</speak>").is_opening_tag()
        assert not Token("<br/>").is_opening_tag()
        assert not Token("text").is_opening_tag()

    def test_closing_tag(self) -> None:
        """Test closing tag detection."""
        assert not Token("<speak>").is_closing_tag()
        assert Token("</speak>").is_closing_tag()
        assert not Token("text").is_closing_tag()

    def test_self_closing_tag(self) -> None:
        """Test self-closing tag detection."""
        assert Token("< br/>").is_self_closing_tag()
        assert not Token("<br>").is_self_closing_tag()

    def test_is_tag(self) -> None:
        """Test is_tag for tags and text."""
        assert Token("<speak>").is_tag()
        assert Token("</speak>").is_tag()
        assert not Token("text").is_tag()

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("<speak>", "speak"),
            ("</speak>", "speak"),
            ("< br/>", "br"),
            ("<speak      >", "speak"),
            ('<emphasis level="strong">', "emphasis"),
            ('<break time="3s"/>', "break"),
            (" This is text ", " This is text "),
        ],
    )
    def test_extract_value(self, value: str, expected: str) -> None:
        """Test bare tag names and unchanged text."""
        assert extract_value(value) == expected
        assert Token(value).extract_value() == expected

    def test_token_kind(self) -> None:
        """Test short kind labels."""
        assert [Token(v).kind for v in ("<a>", "</a>", "<a/>", "a")] == [
            "opening", "closing", "self-closing", "text"
        ]

    def test_token_equality_ignores_offset(self) -> None:
        """Test tokens compare by value only."""
        assert Token("<a>", 0) == Token("<a>", 12)
        assert Token("<a>") != Token("<b>")
