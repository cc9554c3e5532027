"""
Exceptions raised by the puzzle solvers.

Everything derives from PuzzleError so the entry point can report one day's
failure and carry on with the next. Parse failures also derive from
ValueError, matching how the grid parsers reject bad input.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "PuzzleError",
    "InvalidInputPath",
    "UnexpectedEndOfStream",
    "ParseLineFailed",
    "FailedToParseId",
    "InvalidDraw",
]


class PuzzleError(Exception):
    """Base class for every solver failure."""


class InvalidInputPath(PuzzleError):
    """The puzzle input could not be opened or read."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Invalid input path: '{self.path}'")


class UnexpectedEndOfStream(PuzzleError, ValueError):
    """
    A row started but the stream ended before the full width was read.

    ``received`` counts the row's content bytes, line breaks excluded.
    ``consumed`` counts every byte read for the row, line breaks included,
    and is never 0: a stream that ends with nothing read for the next row
    is a clean end, not an error. ``partial`` holds the bytes themselves.
    """

    def __init__(
        self,
        expected: int,
        received: int,
        row: int | None = None,
        consumed: int | None = None,
        partial: bytes = b"",
    ) -> None:
        self.expected = expected
        self.received = received
        self.row = row
        self.consumed = received if consumed is None else consumed
        self.partial = partial
        where = f" in row {row}" if row is not None else ""
        message = (
            f"Unexpected end of stream{where}\n"
            f"  Expected: {expected} bytes\n"
            f"  Received: {received} bytes"
        )
        if self.consumed != received:
            message += f"\n  Consumed: {self.consumed} bytes (including line breaks)"
        super().__init__(message)


class ParseLineFailed(PuzzleError, ValueError):
    """A calibration line contained no digits."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Failed to parse line: \"{line}\" contains no digits")


class FailedToParseId(PuzzleError, ValueError):
    """A game line had no readable 'Game <id>:' header."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(
            f"Failed to parse ID: \"{line}\"\n"
            f"  Expected format: 'Game <id>: <draw>; <draw>; ...'"
        )


class InvalidDraw(PuzzleError, ValueError):
    """A draw named an unknown colour or a non-numeric count."""

    def __init__(self, draw: str, reason: str) -> None:
        self.draw = draw
        self.reason = reason
        super().__init__(f"Invalid draw: \"{draw}\"\n  {reason}")
