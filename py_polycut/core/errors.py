"""
Error types raised by the dissection engine.

Every failure is raised synchronously to the caller and leaves the chord set
untouched. All errors derive from ValueError so callers that only care about
"bad input" can catch that.
"""

from typing import Optional, Tuple


class PolycutError(ValueError):
    """Base class for all engine errors."""
    pass


class PolygonError(PolycutError):
    """Raised when the host polygon is malformed."""
    pass


class QueryError(PolycutError):
    """Raised when a query names the same vertex twice or an unknown vertex."""
    pass


def format_pair(pair: Tuple[int, int], index_base: int = 0) -> str:
    """Render a vertex pair as ``(a, b)`` shifted to the given index base."""
    return f"({pair[0] + index_base}, {pair[1] + index_base})"


class ChordError(PolycutError):
    """
    Raised when a chord cannot be inserted or removed.

    The chord is kept as structured data so that callers working with 1-based
    vertex numbers can re-render the message with ``describe(index_base=1)``.
    """

    def __init__(self, reason: str, chord: Tuple[int, int],
                 other: Optional[Tuple[int, int]] = None):
        self.reason = reason
        self.chord = tuple(chord)
        self.other = tuple(other) if other is not None else None
        super().__init__(self.describe())

    def describe(self, index_base: int = 0) -> str:
        message = f"{self.reason}: {format_pair(self.chord, index_base)}"
        if self.other is not None:
            message += f" crosses {format_pair(self.other, index_base)}"
        return message


class DuplicateChordError(ChordError):
    """Raised when inserting a chord that is already present."""
    pass


class CrossingChordError(ChordError):
    """Raised when inserting a chord that crosses an existing one."""
    pass


class ChordNotFoundError(ChordError):
    """Raised when removing a chord that is not present."""
    pass


class ScriptParseError(PolycutError):
    """Raised when a text script is malformed; ``token_index`` is 0-based."""

    def __init__(self, message: str, token_index: Optional[int] = None):
        self.token_index = token_index
        super().__init__(message)


class OperationError(PolycutError):
    """
    Raised when an operation in a sequence fails.

    ``position`` is the 1-based number of the failing operation; the
    underlying error is kept in ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, message: str, position: int, cause: Optional[Exception] = None):
        self.position = position
        self.cause = cause
        super().__init__(message)
