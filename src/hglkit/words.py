"""Word input for the interactive commands."""

from collections.abc import Iterable, Iterator
from typing import TextIO


def iter_words(words: Iterable[str], stdin: TextIO) -> Iterator[str]:
    """
    Yield words to transcribe, one at a time.

    Argument words are used when any are given; otherwise each line read from
    `stdin` is one word. Lines are read lazily, so output for a word can be
    printed before the next line arrives. Empty words are skipped.

    Args:
        words: Words given on the command line.
        stdin: Stream to read from when no words were given.

    """
    words = list(words)
    if words:
        yield from (word for word in words if word)
        return

    for line in stdin:
        word = line.strip()
        if word:
            yield word
