"""Exception hierarchy for hglkit."""


class HglError(Exception):
    """Base class for all errors raised by hglkit."""


class SourceOpenError(HglError):
    """Raised when a spec source file is missing or cannot be read."""


class SourceParseError(HglError):
    """Raised when a spec source cannot be parsed into a valid spec."""


class MarkupError(SourceParseError):
    """
    Raised when the section markup itself is malformed.

    Attributes:
        line: The 1-based line number where the problem was found.

    """

    def __init__(self, message: str, line: int) -> None:
        """Initialize the error with the offending line number."""
        super().__init__(f"line {line}: {message}")
        self.line = line


class PositionCorrelationError(HglError):
    """Raised when the markup parse and the rule parse of the same file disagree."""
