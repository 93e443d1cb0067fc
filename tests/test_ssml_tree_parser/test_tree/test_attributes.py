"""Tests for attribute extraction from tags."""

import pytest
from typing import List

from ssml_tree_parser.api import parse_tree
from ssml_tree_parser.tokenization import Token, WordTokenizer
from ssml_tree_parser.tree import (
    SSMLAttribute,
    attribute_from_token,
    extract_attributes,
    parse_attributes,
)


class TestAttributeFromToken:
    """Test splitting a single attribute token."""

    def test_plain_attribute(self) -> None:
        """Test name and unquoted value."""
        assert attribute_from_token(Token('level="strong"')) == SSMLAttribute("level", "strong")

    def test_space_after_equals_stays_in_value(self) -> None:
        """Test only the quote characters are removed from the value."""
        assert attribute_from_token(Token('rate = "fast"')) == SSMLAttribute("rate", " fast")

    def test_spaces_inside_quotes_are_kept(self) -> None:
        """Test quoted whitespace survives."""
        assert attribute_from_token(Token('alias=" a b "')) == SSMLAttribute("alias", " a b ")

    def test_empty_value(self) -> None:
        """Test an empty quoted value."""
        assert attribute_from_token(Token('name=""')) == SSMLAttribute("name", "")

    def test_namespaced_name(self) -> None:
        """Test a name with a colon."""
        assert attribute_from_token(Token('xml:lang="en-US"')).name == "xml:lang"


class TestParseAttributes:
    """Test attribute lists of whole tags."""

    def test_declaration_order(self) -> None:
        """Test attributes are returned as declared."""
        attributes = parse_attributes('<voice name="Joanna" gender="female">')

        assert attributes == [
            SSMLAttribute("name", "Joanna"),
            SSMLAttribute("gender", "female"),
        ]

    def test_duplicate_names_are_kept(self) -> None:
        """Test repeated names keep both entries in order."""
        attributes = parse_attributes('<s a="1" a="2">')

        assert [attribute.value for attribute in attributes] == ["1", "2"]

    @pytest.mark.parametrize("tag", ["<speak>", "</speak>", "<break/>", "< br/>", "<speak      >"])
    def test_tags_without_attributes(self, tag: str) -> None:
        """Test bare tags have no attributes."""
        assert parse_attributes(tag) == []

    def test_spaced_attribute_in_tree(self) -> None:
        """Test the leading space after ``=`` reaches the node attribute."""
        root = parse_tree('<speak rate = "fast"></speak>')

        assert root.attributes == [SSMLAttribute("rate", " fast")]

    def test_injected_tokenizer_is_used(self) -> None:
        """Test a custom attribute tokenizer replaces the default one."""
        class FixedTokenizer(WordTokenizer):
            def tokenize_attributes(self, tag: str) -> List[Token]:
                return [Token('voice="x"')]

        assert parse_attributes("<speak>", FixedTokenizer()) == [SSMLAttribute("voice", "x")]
        assert parse_attributes("<speak>") == []

    def test_self_closing_tag(self) -> None:
        """Test attributes of a self-closing tag."""
        assert parse_attributes('<break time="500ms"/>') == [SSMLAttribute("time", "500ms")]


class TestExtractAttributes:
    """Test detection of attribute text that was not understood."""

    def test_fully_understood_tag(self) -> None:
        """Test no leftover for well-formed attributes."""
        attributes, leftover = extract_attributes('<prosody rate="fast" pitch="high">')

        assert len(attributes) == 2
        assert leftover == ""

    def test_unquoted_value_is_left_over(self) -> None:
        """Test unquoted attributes are reported as leftover text."""
        attributes, leftover = extract_attributes("<emphasis level=strong>")

        assert attributes == []
        assert leftover == "level=strong"

    def test_value_with_unsupported_characters_is_left_over(self) -> None:
        """Test values outside the value alphabet are reported."""
        attributes, leftover = extract_attributes('<audio src="a/b.wav" id="x">')

        assert attributes == [SSMLAttribute("id", "x")]
        assert leftover == 'src="a/b.wav"'

    def test_padding_is_not_left_over(self) -> None:
        """Test spaces inside the tag are not reported."""
        assert extract_attributes("<speak      >") == ([], "")
