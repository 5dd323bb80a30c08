"""Defines the data models produced by a test run."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Mismatch:
    """A test example whose transcription differed from the expected output."""

    path: str
    word: str
    actual: str
    expected: str

    def __str__(self) -> str:
        """Render the mismatch as a report line."""
        return f'{self.path}: "{self.word}" -> "{self.actual}", expected: "{self.expected}"'


@dataclass
class TestReport:
    """
    The outcome of a test run over one or more spec files.

    Attributes:
        files: Spec files that were loaded, in run order.
        examples: Number of test examples executed.
        mismatches: Examples whose output differed from the expected one.
        coverage: The rule coverage ratio, or None if coverage was not requested.

    """

    __test__ = False

    files: list[str] = field(default_factory=list)
    examples: int = 0
    mismatches: list[Mismatch] = field(default_factory=list)
    coverage: float | None = None

    @property
    def failed(self) -> bool:
        """Whether at least one example mismatched."""
        return bool(self.mismatches)
