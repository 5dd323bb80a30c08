"""
Rule coverage tracking and coverage profile output.

A `CoverTracker` remembers which spec files were exercised and which of their
rules fired. Totals and source positions are not kept: they are recomputed
from the files themselves when the ratio or the profile is requested.

The profile uses the line-coverage record format understood by existing
coverage viewers:

    mode: count
    ita.hgl:12.1,12.24 1 1
    ita.hgl:13.1,13.19 1 0

Each rule is one record spanning its whole source line. The last field is 1 if
the rule fired at least once and 0 otherwise; it is not an occurrence count.
End columns count characters, not UTF-8 bytes, so viewers that measure bytes
highlight only part of a line holding non-ASCII text.
"""

import logging
import os
from pathlib import Path
from typing import TextIO

from .errors import PositionCorrelationError
from .markup import line_lengths, read_source
from .markup import parse as parse_markup
from .spec import load_spec, parse_spec
from .types import CoverageKey, Phase, PositionEntry

logger = logging.getLogger(__name__)

PROFILE_HEADER = "mode: count"


def position_table(path: str | Path) -> dict[tuple[Phase, int], PositionEntry]:
    """
    Map every rule of a spec file to its source line.

    The file is read once and parsed twice, as rules and as plain markup. The
    two parses are matched by pair index within each phase section.

    Args:
        path: Path to the HGL file.

    Returns:
        A table keyed by (phase, rule ID).

    Raises:
        SourceOpenError: If the file cannot be read.
        SourceParseError: If the file cannot be parsed.
        PositionCorrelationError: If the parses disagree on count or order.

    """
    text = read_source(path)
    spec = parse_spec(text)
    sections = parse_markup(text)
    lengths = line_lengths(text)

    table: dict[tuple[Phase, int], PositionEntry] = {}
    for phase in Phase:
        rules = spec.rules(phase)
        section = sections.get(phase.value)
        pairs = section.pairs if section else []
        if len(pairs) != len(rules):
            msg = f"{path}: {len(rules)} {phase.value} rule(s) but {len(pairs)} {phase.value} pair(s) in the markup"
            raise PositionCorrelationError(msg)
        for rule in rules:
            pair = pairs[rule.id]
            if pair.key != rule.source:
                msg = f"{path}: {phase.value} rule {rule.id} is {rule.source!r} but pair {rule.id} on line {pair.line} is {pair.key!r}"
                raise PositionCorrelationError(msg)
            table[phase, rule.id] = PositionEntry(line=pair.line, length=lengths[pair.line - 1])
    return table


class CoverTracker:
    """
    Records visited spec files and the rules that fired in them.

    A disabled tracker ignores every mutation and reports nothing covered, so
    callers do not need to check whether coverage was requested.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        """
        Initialize an empty tracker.

        Args:
            enabled: If False, the tracker behaves as a no-op.

        """
        self.enabled = enabled
        self._covered: set[CoverageKey] = set()
        # Insertion ordered; values unused.
        self._paths: dict[str, None] = {}

    @property
    def visited(self) -> list[str]:
        """Paths of the visited files, in visit order."""
        return list(self._paths)

    def visit(self, path: str | Path) -> None:
        """Record that a file was exercised, even if none of its rules fire."""
        if not self.enabled:
            return
        self._paths.setdefault(os.fspath(path), None)

    def cover(self, path: str | Path, phase: Phase, rule_id: int) -> None:
        """Mark a rule as covered; this also visits its file."""
        if not self.enabled:
            return
        self._covered.add(CoverageKey(os.fspath(path), phase, rule_id))
        self.visit(path)

    def covered(self, path: str | Path, phase: Phase, rule_id: int) -> bool:
        """Return True if the rule fired at least once."""
        if not self.enabled:
            return False
        return CoverageKey(os.fspath(path), phase, rule_id) in self._covered

    def coverage(self) -> float:
        """
        Return the ratio of covered rules over all rules of the visited files.

        Every visited file is loaded again to count its rules.

        Raises:
            SourceOpenError: If a visited file can no longer be read.
            SourceParseError: If a visited file can no longer be parsed.

        """
        if not self.enabled:
            return 0.0

        total = 0
        for path in self._paths:
            total += load_spec(path).total_rules

        if total == 0:
            logger.debug("No rules in %d visited file(s)", len(self._paths))
            return 0.0
        return len(self._covered) / total

    def write_profile(self, stream: TextIO) -> None:
        """
        Write the coverage profile of every visited file.

        Within a file, rewrite rules come before transcribe rules, each in
        ascending ID order.

        Raises:
            RuntimeError: If the tracker is disabled.
            PositionCorrelationError: If a rule has no source position.

        """
        if not self.enabled:
            msg = "Cannot write a coverage profile from a disabled tracker."
            raise RuntimeError(msg)

        stream.write(f"{PROFILE_HEADER}\n")
        for path in self._paths:
            spec = load_spec(path)
            positions = position_table(path)
            for phase in Phase:
                for rule in spec.rules(phase):
                    position = positions.get((phase, rule.id))
                    if position is None:
                        msg = f"{path}: no source position for {phase.value} rule {rule.id}"
                        raise PositionCorrelationError(msg)
                    hit = int(self.covered(path, phase, rule.id))
                    stream.write(f"{path}:{position.line}.1,{position.line}.{position.end_column} 1 {hit}\n")
            logger.debug("Wrote %d profile record(s) for %s", spec.total_rules, path)
