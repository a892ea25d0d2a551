"""
Exceptions raised while decoding a PILER-CR report.

All of them derive from ValueError so callers that already guard
malformed input with ``except ValueError`` keep working.
"""
from typing import Optional, Tuple


def _locate(text: str, position: int) -> Tuple[int, int]:
    """1-based (line, column) of a character offset."""
    line = text.count('\n', 0, position) + 1
    column = position - (text.rfind('\n', 0, position) + 1) + 1
    return line, column


class PilercrParseError(ValueError):
    """Base class for every failure raised by the report decoder."""


class UnexpectedToken(PilercrParseError):
    """The text at ``position`` does not have the shape the grammar requires.

    Args:
        position: Character offset into the report text
        expected: Short description of what should have been there
        text: Report text, used only to derive a 1-based line/column
    """

    def __init__(self, position: int, expected: str, text: Optional[str] = None):
        self.position = position
        self.expected = expected
        self.line = None
        self.column = None
        if text is not None:
            self.line, self.column = _locate(text, position)

        if self.line is not None:
            location = f"line {self.line}, column {self.column}"
        else:
            location = f"offset {position}"
        super().__init__(f"Expected {expected} at {location}")


class FormatError(PilercrParseError):
    """A block parsed cleanly but its fields contradict each other."""


class LengthMismatch(FormatError):
    """A repeat's difference pattern is not as long as the consensus repeat.

    ``position`` is the offset of the offending row; when the report text is
    given, ``line`` and ``column`` locate it as well.
    """

    def __init__(
        self,
        row_index: int,
        diff_length: int,
        consensus_length: int,
        position: int = 0,
        text: Optional[str] = None
    ):
        self.row_index = row_index
        self.diff_length = diff_length
        self.consensus_length = consensus_length
        self.position = position
        self.line = None
        self.column = None
        message = (
            f"Repeat {row_index + 1} has a difference pattern of length {diff_length} "
            f"but the consensus repeat has length {consensus_length}"
        )
        if text is not None:
            self.line, self.column = _locate(text, position)
            message += f" (line {self.line})"
        super().__init__(message)
