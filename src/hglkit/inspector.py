"""Prints the full evaluation trace of a word, for spec authoring."""

import sys
from typing import TextIO

from .engine import Transcriber
from .types import Spec, TraceEntry


def format_entry(entry: TraceEntry) -> str:
    """Render one trace entry as a single line."""
    line = f'[{entry.phase.value}] "{entry.before}" -> "{entry.after}"'
    if entry.rule is None:
        return f"{line} (no match)"
    return f'{line} (rule {entry.rule.id}: "{entry.rule.source}" -> "{entry.rule.replacement}")'


class TraceInspector:
    """Shows how the rules of a spec transform a word, slot by slot."""

    def __init__(self, spec: Spec, out: TextIO | None = None) -> None:
        """
        Initialize the inspector.

        Args:
            spec: The loaded spec.
            out: Destination stream; defaults to stdout.

        """
        self.transcriber = Transcriber(spec)
        self.out = out or sys.stdout

    def inspect(self, word: str) -> str:
        """
        Print every trace entry of the word, then its transcription.

        Returns:
            The transcription.

        """
        result, trace = self.transcriber.transcribe_trace(word)
        for entry in trace:
            print(format_entry(entry), file=self.out)
        print(result, file=self.out)
        return result
