"""
Engine schematic analysis.

Two phases: build (byte stream -> immutable Grid of classified cells) and
scan (Grid -> number runs -> sums). The grid is classified once; the scans
only ever read it, so any number of them can run over the same Grid.
"""

from __future__ import annotations

import io
import logging
from collections import defaultdict
from typing import BinaryIO, Callable, Iterator

import simple_chalk as chalk  # type: ignore[import-untyped]

from puzzle_errors import UnexpectedEndOfStream
from puzzle_input import advance_reader, read_and_map_line, read_and_map_n
from puzzle_types import EMPTY_GRID, Cell, Digit, Grid, NumberRun, Space, Symbol

__all__ = [
    "EMPTY_MARKER",
    "GEAR_MARKER",
    "build_grid",
    "build_grid_from_text",
    "classify",
    "is_part_number",
    "iter_number_runs",
    "render_schematic",
    "sum_gear_ratios",
    "sum_part_numbers",
]

logger = logging.getLogger(__name__)

EMPTY_MARKER = ord(".")
GEAR_MARKER = "*"

_NEWLINE = ord("\n")
_CARRIAGE_RETURN = ord("\r")
_ZERO = ord("0")
_NINE = ord("9")

# Classification never depends on position, so every cell is shared
_SPACE = Space()
_DIGITS = tuple(Digit(d) for d in range(10))


# =============================================================================
# Cell Classification
# =============================================================================


def classify(byte: int) -> Cell:
    """Map one input byte to Space, Digit(value) or Symbol."""
    if byte == EMPTY_MARKER:
        return _SPACE
    if _ZERO <= byte <= _NINE:
        return _DIGITS[byte - _ZERO]
    return Symbol(chr(byte))


# =============================================================================
# Grid Building
# =============================================================================


def _is_line_break(byte: int) -> bool:
    return byte == _NEWLINE or byte == _CARRIAGE_RETURN


def _inconsistent_row(width: int, row: int, detail: str) -> ValueError:
    return ValueError(
        f"Inconsistent row lengths in schematic\n"
        f"  Expected: {width} columns (from row 0)\n"
        f"  Row {row}: {detail}\n"
        f"  All rows must have the same number of cells"
    )


def _truncated_row(width: int, row: int, consumed: bytes) -> ValueError:
    """
    Explain a row that ran into the end of the stream.

    Trailing line breaks are the row's terminator, not content. A line break
    anywhere before them means the row was short and more data followed.
    """
    content = consumed.rstrip(b"\r\n")
    col = next((i for i, b in enumerate(content) if _is_line_break(b)), None)
    if col is not None:
        return _inconsistent_row(width, row, f"line break at column {col}")
    return UnexpectedEndOfStream(width, len(content), row=row, consumed=len(consumed), partial=consumed)


def _consume_delimiter(stream: BinaryIO, row: int, width: int) -> None:
    """Skip the line break after a fixed-width row, accepting LF, CRLF or EOF."""
    delimiter = advance_reader(stream, 1)
    if delimiter == b"\r":
        delimiter = advance_reader(stream, 1)
    if delimiter in (b"", b"\n"):
        return

    raise _inconsistent_row(width, row, f"continues with {delimiter!r} where a line break should be")


def build_grid(stream: BinaryIO) -> Grid:
    """
    Build a Grid from a stream of newline-terminated rows.

    The first row is read up to its newline and fixes the width. Every later
    row is read as exactly ``width`` bytes followed by one line break (LF or
    CRLF). The final row does not need a trailing newline.

    Raises:
        UnexpectedEndOfStream: if the stream ends part way through a row,
            with or without that row's line break.
        ValueError: if a row is longer or shorter than the first row.
    """
    first = read_and_map_line(stream, int)
    if first and first[-1] == _CARRIAGE_RETURN:
        first.pop()

    width = len(first)
    if width == 0:
        if advance_reader(stream, 1):
            raise ValueError("Blank first row in schematic: cannot infer the grid width")
        logger.info("Built empty schematic")
        return EMPTY_GRID

    cells: list[Cell] = [classify(b) for b in first]
    height = 1

    while True:
        try:
            raw = bytes(read_and_map_n(stream, int, width))
        except UnexpectedEndOfStream as err:
            if err.received == 0:
                break
            raise _truncated_row(width, height, err.partial) from err

        if any(_is_line_break(b) for b in raw):
            # At most the rest of a CRLF can follow a short last row
            tail = advance_reader(stream, 2)
            if len(tail) < 2:
                raise _truncated_row(width, height, raw + tail)
            col = next(i for i, b in enumerate(raw) if _is_line_break(b))
            raise _inconsistent_row(width, height, f"line break at column {col}")

        cells.extend(classify(b) for b in raw)
        _consume_delimiter(stream, height, width)
        height += 1

    logger.info("Built %dx%d schematic", width, height)
    return Grid(width, height, tuple(cells))


def build_grid_from_text(text: str) -> Grid:
    """Build a Grid from an in-memory string."""
    return build_grid(io.BytesIO(text.encode("utf-8")))


# =============================================================================
# Number Runs
# =============================================================================


def iter_number_runs(grid: Grid) -> Iterator[NumberRun]:
    """Yield every maximal horizontal digit run, top to bottom, left to right."""
    for y, row in enumerate(grid.rows()):
        start: int | None = None
        value = 0

        for x, cell in enumerate(row):
            match cell:
                case Digit(value=digit):
                    if start is None:
                        start, value = x, 0
                    value = value * 10 + digit
                case _:
                    if start is not None:
                        yield NumberRun(y, start, x, value)
                        start = None

        if start is not None:
            yield NumberRun(y, start, grid.width, value)


def is_part_number(grid: Grid, run: NumberRun) -> bool:
    """True if any Symbol touches the run, diagonals included."""
    return any(isinstance(grid.at(x, y), Symbol) for x, y in run.neighbours(grid))


def sum_part_numbers(grid: Grid) -> int:
    """Sum the value of every run adjacent to at least one symbol."""
    total = 0
    for run in iter_number_runs(grid):
        if is_part_number(grid, run):
            total += run.value
        else:
            logger.debug("Run %d at row %d, cols %d-%d has no adjacent symbol", run.value, run.row, run.start, run.end)
    return total


def _runs_by_gear(grid: Grid) -> dict[tuple[int, int], list[NumberRun]]:
    """Map each gear-marker position to the runs touching it."""
    touching: dict[tuple[int, int], list[NumberRun]] = defaultdict(list)
    for run in iter_number_runs(grid):
        for x, y in run.neighbours(grid):
            if grid.at(x, y) == Symbol(GEAR_MARKER):
                touching[(x, y)].append(run)
    return touching


def sum_gear_ratios(grid: Grid) -> int:
    """Sum the products of the two runs touching each gear.

    A gear is a '*' adjacent to exactly two runs; other '*' cells are ignored.
    """
    return sum(
        runs[0].value * runs[1].value
        for runs in _runs_by_gear(grid).values()
        if len(runs) == 2
    )


# =============================================================================
# Rendering
# =============================================================================


def render_schematic(grid: Grid) -> str:
    """
    Render the schematic with ANSI colors.

    Part-number digits are green, other digits red, symbols yellow and gears
    highlighted on white.

    Returns:
        Rendered string, one line per row
    """
    part_cells: set[tuple[int, int]] = set()
    for run in iter_number_runs(grid):
        if is_part_number(grid, run):
            part_cells.update((x, run.row) for x in range(run.start, run.end))

    gears = {pos for pos, runs in _runs_by_gear(grid).items() if len(runs) == 2}

    lines: list[str] = []
    for y, row in enumerate(grid.rows()):
        parts: list[str] = []
        for x, cell in enumerate(row):
            colorize: Callable[[str], str]
            match cell:
                case Space():
                    char, colorize = ".", chalk.white
                case Digit(value=digit):
                    char = str(digit)
                    colorize = chalk.green if (x, y) in part_cells else chalk.red
                case Symbol(char=symbol):
                    char = symbol
                    colorize = chalk.bgWhite.black if (x, y) in gears else chalk.yellow
            parts.append(colorize(char))
        lines.append("".join(parts))

    return "\n".join(lines)
