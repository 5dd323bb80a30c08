"""
The rewriting engine that runs a spec against a single word.

A run executes every rewrite rule in ID order over the whole word, then every
transcribe rule in ID order. Transcribe rules only see text that no earlier
transcribe rule has already replaced, and letters left untranscribed at the
end are dropped.
"""

import logging
from dataclasses import dataclass

import regex

from .types import Phase, Rule, Spec, TraceEntry

logger = logging.getLogger(__name__)

_LETTERS_RE = regex.compile(r"\p{L}+")


@dataclass
class _Piece:
    text: str
    done: bool = False


def _render(pieces: list[_Piece]) -> str:
    return "".join(piece.text for piece in pieces)


def _apply_rewrite_rule(rule: Rule, word: str) -> tuple[str, bool]:
    """Substitute every non-empty match of the rule across the word."""
    fired = False

    def _replace(match: regex.Match) -> str:
        nonlocal fired
        if match.end() == match.start():
            return ""
        fired = True
        return match.expand(rule.replacement)

    return rule.pattern.sub(_replace, word), fired


def _apply_transcribe_rule(rule: Rule, pieces: list[_Piece]) -> tuple[list[_Piece], bool]:
    """Replace matches of the rule inside pending pieces only."""
    result: list[_Piece] = []
    fired = False
    for piece in pieces:
        if piece.done:
            result.append(piece)
            continue
        pos = 0
        for match in rule.pattern.finditer(piece.text):
            if match.end() == match.start():
                continue
            result.append(_Piece(piece.text[pos : match.start()]))
            result.append(_Piece(match.expand(rule.replacement), done=True))
            pos = match.end()
            fired = True
        result.append(_Piece(piece.text[pos:]))
    return [piece for piece in result if piece.done or piece.text], fired


class Transcriber:
    """Runs the rewrite and transcribe phases of a spec."""

    def __init__(self, spec: Spec) -> None:
        """Initialize the transcriber for a loaded spec."""
        self.spec = spec

    def _run(self, word: str, trace: list[TraceEntry] | None) -> str:
        for rule in self.spec.rewrite:
            rewritten, fired = _apply_rewrite_rule(rule, word)
            if trace is not None:
                trace.append(TraceEntry(Phase.REWRITE, word, rewritten, rule if fired else None))
            word = rewritten

        pieces = [_Piece(word)] if word else []
        for rule in self.spec.transcribe:
            before = _render(pieces)
            pieces, fired = _apply_transcribe_rule(rule, pieces)
            if trace is not None:
                trace.append(TraceEntry(Phase.TRANSCRIBE, before, _render(pieces), rule if fired else None))

        return "".join(piece.text if piece.done else _LETTERS_RE.sub("", piece.text) for piece in pieces)

    def transcribe(self, word: str) -> str:
        """Transcribe a word without recording a trace."""
        return self._run(word, None)

    def transcribe_trace(self, word: str) -> tuple[str, list[TraceEntry]]:
        """
        Transcribe a word and record every rule-evaluation slot.

        Returns:
            The transcription and the ordered trace of both phases. Entries for
            slots where nothing matched carry no rule.

        """
        trace: list[TraceEntry] = []
        result = self._run(word, trace)
        logger.debug("Traced %r -> %r over %d slot(s)", word, result, len(trace))
        return result, trace
