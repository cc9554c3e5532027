"""
Input loading for the puzzle solvers.

Line-oriented puzzles read a whole file as text. The schematic reader works
on a binary stream instead and pulls rows out of it a byte at a time, so it
can fix the row width from the first line and then read every later row as
a single fixed-size chunk.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Callable, TypeVar

from puzzle_errors import InvalidInputPath, UnexpectedEndOfStream

__all__ = [
    "advance_reader",
    "get_lines_from_file",
    "open_input",
    "read_and_map_line",
    "read_and_map_n",
]

T = TypeVar("T")

NEWLINE = 0x0A


def get_lines_from_file(path: Path | str) -> list[str]:
    """Read a UTF-8 text file and return its lines without terminators."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise InvalidInputPath(path) from err

    return content.splitlines()


def open_input(path: Path | str) -> BinaryIO:
    """Open a puzzle input for binary reading. The caller closes it."""
    try:
        return open(path, "rb")
    except OSError as err:
        raise InvalidInputPath(path) from err


def read_and_map_line(reader: BinaryIO, map_byte: Callable[[int], T]) -> list[T]:
    """
    Read bytes up to the next newline (or end of stream), mapping each one.

    The newline itself is consumed but not mapped.
    """
    data: list[T] = []

    while True:
        chunk = reader.read(1)
        if not chunk or chunk[0] == NEWLINE:
            break
        data.append(map_byte(chunk[0]))

    return data


def read_and_map_n(reader: BinaryIO, map_byte: Callable[[int], T], n: int) -> list[T]:
    """
    Read exactly n bytes and map each one.

    Raises:
        UnexpectedEndOfStream: if the stream ends first. ``received`` is
            the number of bytes read and ``partial`` holds them, so a clean
            end (0) can be told apart from a truncated row.
    """
    buffer = bytearray()

    # Non-blocking and raw streams may hand back fewer bytes than asked for
    while len(buffer) < n:
        chunk = reader.read(n - len(buffer))
        if not chunk:
            raise UnexpectedEndOfStream(expected=n, received=len(buffer), partial=bytes(buffer))
        buffer.extend(chunk)

    return [map_byte(b) for b in buffer]


def advance_reader(reader: BinaryIO, n: int) -> bytes:
    """
    Discard up to n bytes and return them.

    Running out of input is not an error here: after the last row there is
    nothing left to skip.
    """
    return reader.read(n) or b""
