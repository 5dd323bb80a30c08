"""Tests for the word stream."""

import io
import unittest
from unittest.mock import MagicMock

from hglkit.words import iter_words


class TestIterWords(unittest.TestCase):
    """Test suite for iter_words()."""

    def test_argument_words(self) -> None:
        """1. Arguments: Words given as arguments are used in order."""
        stdin = MagicMock()
        assert list(iter_words(["gloria", "", "cielo"], stdin)) == ["gloria", "cielo"]
        stdin.__iter__.assert_not_called()

    def test_stdin_lines(self) -> None:
        """2. Stdin: Without arguments, each stripped line is a word."""
        stdin = io.StringIO("gloria\n  cielo \n\nmare")
        assert list(iter_words([], stdin)) == ["gloria", "cielo", "mare"]

    def test_stdin_is_read_lazily(self) -> None:
        """3. Streaming: A word is yielded before the next line is read."""
        stdin = io.StringIO("uno\ndue\n")
        words = iter_words([], stdin)
        assert next(words) == "uno"
        assert stdin.readline() == "due\n"

    def test_empty_stdin(self) -> None:
        """4. EOF: An empty stream yields nothing."""
        assert list(iter_words([], io.StringIO(""))) == []
