"""Defines shared data structures and types for hglkit."""

from dataclasses import dataclass, field
from enum import Enum

import regex
from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    """
    The two ordered stages of a transcription run.

    The string values are the names of the markup sections that declare the
    rules of each phase.
    """

    REWRITE = "rewrite"
    TRANSCRIBE = "transcribe"


@dataclass(frozen=True)
class Rule:
    """
    A single rewrite or transcribe rule.

    Attributes:
        phase: The phase the rule belongs to.
        id: Dense 0-based index in declaration order within the phase.
        source: The pattern exactly as written in the spec file.
        replacement: The text substituted for each match.
        pattern: The compiled pattern after macro and variable expansion.

    """

    phase: Phase
    id: int
    source: str
    replacement: str
    pattern: regex.Pattern = field(compare=False, repr=False)


@dataclass(frozen=True)
class Example:
    """A test example: an input word and its expected transcription."""

    word: str
    expected: str


class LangInfo(BaseModel):
    """Metadata from the `lang` section of a spec."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = ""
    codes: list[str] = Field(default_factory=list)
    english: str = ""
    korean: str = ""
    script: str = ""


class SpecConfig(BaseModel):
    """Settings from the `config` section of a spec."""

    model_config = ConfigDict(extra="allow", frozen=True)

    authors: list[str] = Field(default_factory=list)
    stage: str = ""


@dataclass
class Spec:
    """
    A parsed spec: rules for both phases plus the test examples.

    A spec is loaded once per file and treated as read-only afterwards.
    """

    lang: LangInfo = field(default_factory=LangInfo)
    config: SpecConfig = field(default_factory=SpecConfig)
    rewrite: list[Rule] = field(default_factory=list)
    transcribe: list[Rule] = field(default_factory=list)
    tests: list[Example] = field(default_factory=list)

    def rules(self, phase: Phase) -> list[Rule]:
        """Return the ordered rules of the given phase."""
        if phase is Phase.REWRITE:
            return self.rewrite
        return self.transcribe

    @property
    def total_rules(self) -> int:
        """Number of rules across both phases."""
        return len(self.rewrite) + len(self.transcribe)


@dataclass(frozen=True)
class TraceEntry:
    """
    One rule-evaluation slot of a transcription run.

    Attributes:
        phase: The phase the slot belongs to.
        before: The word before the slot was evaluated.
        after: The word after the slot was evaluated.
        rule: The rule that fired, or None when nothing matched.

    """

    phase: Phase
    before: str
    after: str
    rule: Rule | None = None

    @property
    def has_rule(self) -> bool:
        """Whether a rule fired at this slot."""
        return self.rule is not None


@dataclass(frozen=True)
class CoverageKey:
    """Identity of a rule across a whole run: file, phase and rule ID."""

    path: str
    phase: Phase
    rule_id: int


@dataclass(frozen=True)
class PositionEntry:
    """Source position of a rule: its 1-based line and that line's length."""

    line: int
    length: int

    @property
    def end_column(self) -> int:
        """The exclusive end column of the line."""
        return self.length + 1
