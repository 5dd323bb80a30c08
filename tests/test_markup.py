"""Tests for the line-preserving markup parser."""

import unittest
from pathlib import Path

import pytest

from hglkit.errors import MarkupError, SourceOpenError, SourceParseError
from hglkit.markup import Operator, line_lengths, parse, read_source, split_lines

SAMPLE = """\
# Italian
lang:
    id      = "ita"
    codes   = "it", "ita"

rewrite:
    "^gli$" -> "li"   # whole word
    cqu     -> qu

transcribe:
    "b" -> "ㅂ"
"""


class TestParse(unittest.TestCase):
    """Test suite for parse()."""

    def test_sections_in_source_order(self) -> None:
        """1. Sections: Keeps sections in the order they are declared."""
        sections = parse(SAMPLE)
        assert list(sections) == ["lang", "rewrite", "transcribe"]
        assert sections["lang"].line == 2
        assert sections["transcribe"].line == 10

    def test_pair_lines_and_values(self) -> None:
        """2. Pairs: Records key, values, operator and 1-based line of each pair."""
        sections = parse(SAMPLE)
        pairs = sections["rewrite"].pairs
        assert [p.key for p in pairs] == ["^gli$", "cqu"]
        assert [p.values for p in pairs] == [("li",), ("qu",)]
        assert [p.line for p in pairs] == [7, 8]
        assert all(p.op is Operator.LIST for p in pairs)

    def test_dict_pairs_with_multiple_values(self) -> None:
        """3. Dict Pairs: Comma-separated values are kept in order."""
        lang = parse(SAMPLE)["lang"].as_dict()
        assert lang == {"id": ("ita",), "codes": ("it", "ita")}
        assert parse(SAMPLE)["lang"].pairs[0].op is Operator.DICT

    def test_escaped_quotes_and_hash_in_string(self) -> None:
        """4. Strings: Backslash escapes and '#' inside quotes are not comments."""
        sections = parse('test:\n    "a\\"b#c" -> "\\\\"\n')
        pair = sections["test"].pairs[0]
        assert pair.key == 'a"b#c'
        assert pair.values == ("\\",)

    def test_empty_string_value(self) -> None:
        """5. Empty Value: An empty quoted string is a valid value."""
        pair = parse('rewrite:\n    "h" -> ""\n')["rewrite"].pairs[0]
        assert pair.values == ("",)

    def test_operator_without_spaces(self) -> None:
        """6. Compact Syntax: Operators do not need surrounding spaces."""
        pair = parse('rewrite:\n    "ph"->"f"\n')["rewrite"].pairs[0]
        assert (pair.key, pair.values) == ("ph", ("f",))

    def test_empty_section(self) -> None:
        """7. Empty Section: A header without pairs yields an empty section."""
        sections = parse("rewrite:\ntranscribe:\n")
        assert sections["rewrite"].pairs == []
        assert sections["transcribe"].pairs == []

    def test_crlf_line_endings(self) -> None:
        """8. CRLF: Windows line endings do not shift line numbers."""
        sections = parse('test:\r\n    "a" -> "b"\r\n')
        assert sections["test"].pairs[0].line == 2
        assert sections["test"].pairs[0].values == ("b",)


class TestParseErrors(unittest.TestCase):
    """Test suite for malformed markup."""

    def test_pair_outside_section(self) -> None:
        """1. No Section: An indented pair before any header is rejected."""
        with pytest.raises(MarkupError, match="outside of a section") as exc_info:
            parse('    "a" -> "b"\n')
        assert exc_info.value.line == 1

    def test_unindented_pair(self) -> None:
        """2. No Indent: A pair at column 0 is not a header."""
        with pytest.raises(MarkupError, match="section header"):
            parse('test:\n"a" -> "b"\n')

    def test_duplicate_section(self) -> None:
        """3. Duplicate: A section name may appear only once."""
        with pytest.raises(MarkupError, match="duplicate section 'test'") as exc_info:
            parse("test:\ntest:\n")
        assert exc_info.value.line == 2

    def test_unterminated_string(self) -> None:
        """4. Unterminated: A missing closing quote is reported with its line."""
        with pytest.raises(MarkupError, match="unterminated string") as exc_info:
            parse('test:\n\n    "abc -> x\n')
        assert exc_info.value.line == 3

    def test_missing_operator(self) -> None:
        """5. Operator: A key must be followed by '=' or '->'."""
        with pytest.raises(MarkupError, match="expected '=' or '->'"):
            parse('test:\n    "a" "b"\n')

    def test_missing_value(self) -> None:
        """6. Value: An operator must be followed by a value."""
        with pytest.raises(MarkupError, match="missing value"):
            parse('test:\n    "a" ->\n')

    def test_trailing_comma(self) -> None:
        """7. Trailing Comma: A value list cannot end with a comma."""
        with pytest.raises(MarkupError, match="trailing comma"):
            parse('lang:\n    codes = "it",\n')

    def test_markup_error_is_parse_error(self) -> None:
        """8. Hierarchy: MarkupError is a SourceParseError."""
        assert issubclass(MarkupError, SourceParseError)


class TestLines(unittest.TestCase):
    """Test suite for the line helpers."""

    def test_split_lines_drops_final_newline(self) -> None:
        """1. Split: A trailing newline does not create an extra line."""
        assert split_lines("a\nb\n") == ["a", "b"]
        assert split_lines("a\n\nb") == ["a", "", "b"]

    def test_line_lengths_count_characters(self) -> None:
        """2. Lengths: Lengths are in characters, not bytes."""
        assert line_lengths('rewrite:\n    "b" -> "ㅂ"\n') == [8, 14]


def test_read_source_missing_file(tmp_path: Path) -> None:
    """A missing file raises SourceOpenError."""
    with pytest.raises(SourceOpenError, match="cannot open"):
        read_source(tmp_path / "missing.hgl")


def test_read_source_invalid_utf8(tmp_path: Path) -> None:
    """A file that is not UTF-8 raises SourceParseError."""
    path = tmp_path / "latin1.hgl"
    path.write_bytes(b"test:\n    \"\xe9\" -> \"e\"\n")
    with pytest.raises(SourceParseError, match="not valid UTF-8"):
        read_source(path)

