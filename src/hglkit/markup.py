"""
Line-preserving parser for the HGL section markup.

This module knows nothing about rules or phases. It turns source text into an
ordered mapping of sections, each holding its pairs in source order together
with the 1-based line each pair was declared on:

    rewrite:
        "^gli$" -> "li"     # pair 0, line 2
        "cqu"   -> "qu"     # pair 1, line 3

The rule parser in `hglkit.spec` reads the same text on its own, so the two
views are correlated only by section name and pair index.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import MarkupError, SourceOpenError, SourceParseError

_TOKEN_RE = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<comment>\#.*)
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<open>")
    | (?P<op>->|=)
    | (?P<comma>,)
    | (?P<word>(?:(?!->)[^\s",=\#])+)
    """,
    re.VERBOSE,
)
_ESCAPE_RE = re.compile(r'\\([\\"])')
_SECTION_NAME_RE = re.compile(r"[A-Za-z_][\w-]*")


class Operator(str, Enum):
    """The operator separating a pair's key from its values."""

    DICT = "="
    LIST = "->"


@dataclass(frozen=True)
class Pair:
    """A key with one or more values, and the line it was declared on."""

    key: str
    values: tuple[str, ...]
    op: Operator
    line: int


@dataclass
class Section:
    """A named section and its pairs in source order."""

    name: str
    line: int
    pairs: list[Pair] = field(default_factory=list)

    def as_dict(self) -> dict[str, tuple[str, ...]]:
        """Return the pairs as a key to values mapping; later keys win."""
        return {pair.key: pair.values for pair in self.pairs}


def split_lines(text: str) -> list[str]:
    """Split text into lines the way an editor numbers them."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def line_lengths(text: str) -> list[int]:
    """Return the character length of every line in the text."""
    return [len(line) for line in split_lines(text)]


def _tokenize(line: str, lineno: int) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    while pos < len(line):
        match = _TOKEN_RE.match(line, pos)
        if match is None:
            msg = f"unexpected character {line[pos]!r}"
            raise MarkupError(msg, lineno)
        kind = match.lastgroup
        if kind == "comment":
            break
        if kind == "open":
            msg = "unterminated string"
            raise MarkupError(msg, lineno)
        if kind != "space":
            tokens.append((kind, match.group()))
        pos = match.end()
    return tokens


def _unquote(kind: str, text: str) -> str:
    if kind == "string":
        return _ESCAPE_RE.sub(r"\1", text[1:-1])
    return text


def _parse_pair(tokens: list[tuple[str, str]], lineno: int) -> Pair:
    """Parse `KEY OP VALUE[, VALUE...]` from the tokens of one line."""
    if tokens[0][0] not in ("string", "word"):
        msg = f"expected a key, found {tokens[0][1]!r}"
        raise MarkupError(msg, lineno)
    key = _unquote(*tokens[0])

    if len(tokens) < 2 or tokens[1][0] != "op":  # noqa: PLR2004
        msg = f"expected '=' or '->' after {key!r}"
        raise MarkupError(msg, lineno)
    op = Operator(tokens[1][1])

    values: list[str] = []
    rest = tokens[2:]
    if not rest:
        msg = f"missing value for {key!r}"
        raise MarkupError(msg, lineno)
    for index, (kind, text) in enumerate(rest):
        expect_value = index % 2 == 0
        if expect_value and kind in ("string", "word"):
            values.append(_unquote(kind, text))
        elif not expect_value and kind == "comma":
            continue
        else:
            msg = f"unexpected {text!r} in values of {key!r}"
            raise MarkupError(msg, lineno)
    if rest[-1][0] == "comma":
        msg = f"trailing comma in values of {key!r}"
        raise MarkupError(msg, lineno)

    return Pair(key=key, values=tuple(values), op=op, line=lineno)


def parse(text: str) -> dict[str, Section]:
    """
    Parse markup text into sections of line-numbered pairs.

    Args:
        text: The full source text.

    Returns:
        Sections keyed by name, in source order.

    Raises:
        MarkupError: If the markup is malformed.

    """
    sections: dict[str, Section] = {}
    current: Section | None = None

    for lineno, line in enumerate(split_lines(text), start=1):
        tokens = _tokenize(line, lineno)
        if not tokens:
            continue

        if not line[0].isspace():
            kind, word = tokens[0]
            name = word[:-1]
            if len(tokens) != 1 or kind != "word" or not word.endswith(":") or not _SECTION_NAME_RE.fullmatch(name):
                msg = "expected a section header like 'name:'"
                raise MarkupError(msg, lineno)
            if name in sections:
                msg = f"duplicate section {name!r} (first declared on line {sections[name].line})"
                raise MarkupError(msg, lineno)
            current = sections[name] = Section(name=name, line=lineno)
            continue

        if current is None:
            msg = "pair outside of a section"
            raise MarkupError(msg, lineno)
        current.pairs.append(_parse_pair(tokens, lineno))

    return sections


def read_source(path: str | Path) -> str:
    """
    Read a spec source file as UTF-8 text.

    Raises:
        SourceOpenError: If the file is missing or unreadable.
        SourceParseError: If the file is not valid UTF-8.

    """
    try:
        with Path(path).open(encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        msg = f"{path}: not valid UTF-8: {e}"
        raise SourceParseError(msg) from e
    except OSError as e:
        msg = f"{path}: cannot open spec source: {e}"
        raise SourceOpenError(msg) from e

