"""Tests for schematic module."""

import io
import re

import pytest

from puzzle_errors import UnexpectedEndOfStream
from puzzle_types import Digit, Grid, NumberRun, Space, Symbol
from schematic import (
    build_grid,
    build_grid_from_text,
    classify,
    is_part_number,
    iter_number_runs,
    render_schematic,
    sum_gear_ratios,
    sum_part_numbers,
)

EXAMPLE = """\
467..114..
...*......
..35..633.
......#...
617*......
.....+.58.
..592.....
......755.
...$.*....
.664.598..
"""

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


class TestClassify:
    """Tests for single-byte classification."""

    def test_digits(self) -> None:
        """Each ASCII digit maps to its numeric value, in order."""
        cells = [classify(b) for b in b"0123456789"]
        assert cells == [Digit(d) for d in range(10)]

    def test_background_is_space(self) -> None:
        assert classify(ord(".")) == Space()

    @pytest.mark.parametrize("char", ["*", "#", "/", "+", "$", "@", "=", "-", "%", "&"])
    def test_symbols(self, char: str) -> None:
        """Every other printable byte is a symbol."""
        assert classify(ord(char)) == Symbol(char)


class TestBuildGrid:
    """Tests for building a grid from a byte stream."""

    def test_example_dimensions(self) -> None:
        grid = build_grid_from_text(EXAMPLE)
        assert grid.width == 10
        assert grid.height == 10
        assert len(grid.cells) == 100

    def test_cells_are_addressed_row_major(self) -> None:
        grid = build_grid_from_text("1.\n.#\n")
        assert grid.at(0, 0) == Digit(1)
        assert grid.at(1, 0) == Space()
        assert grid.at(0, 1) == Space()
        assert grid.at(1, 1) == Symbol("#")
        assert grid.cells[grid.index(1, 1)] == Symbol("#")

    @pytest.mark.parametrize("width,height", [(1, 1), (3, 1), (1, 4), (5, 7)])
    def test_equal_rows_give_width_and_height(self, width: int, height: int) -> None:
        text = "".join("." * width + "\n" for _ in range(height))
        grid = build_grid_from_text(text)
        assert (grid.width, grid.height) == (width, height)

    def test_last_row_without_newline(self) -> None:
        """A final full-width row does not need a trailing newline."""
        grid = build_grid_from_text("12\n34")
        assert grid.height == 2
        assert grid.at(1, 1) == Digit(4)

    def test_single_row_without_newline(self) -> None:
        grid = build_grid_from_text("123")
        assert (grid.width, grid.height) == (3, 1)

    def test_crlf_line_endings(self) -> None:
        grid = build_grid_from_text("1.\r\n.*\r\n")
        assert (grid.width, grid.height) == (2, 2)
        assert grid.at(1, 1) == Symbol("*")

    def test_empty_stream(self) -> None:
        grid = build_grid(io.BytesIO(b""))
        assert grid.height == 0
        assert grid.cells == ()

    def test_blank_first_row_followed_by_data(self) -> None:
        with pytest.raises(ValueError, match="Blank first row"):
            build_grid_from_text("\n123\n")

    def test_short_final_row_without_newline(self) -> None:
        with pytest.raises(UnexpectedEndOfStream) as exc_info:
            build_grid_from_text("abc\nde")
        assert exc_info.value.row == 1
        assert exc_info.value.expected == 3
        assert exc_info.value.received == 2

    def test_short_final_row_with_newline(self) -> None:
        with pytest.raises(UnexpectedEndOfStream) as exc_info:
            build_grid_from_text("abc\nabc\nde\n")
        assert exc_info.value.row == 2
        assert exc_info.value.received == 2

    def test_short_final_row_crlf(self) -> None:
        """A CRLF-terminated short last row ends the stream early, not a length mismatch."""
        with pytest.raises(UnexpectedEndOfStream) as exc_info:
            build_grid_from_text("abc\r\nab\r\n")
        assert exc_info.value.row == 1
        assert exc_info.value.received == 2
        assert exc_info.value.consumed == 4

    def test_short_final_row_crlf_without_newline(self) -> None:
        with pytest.raises(UnexpectedEndOfStream) as exc_info:
            build_grid_from_text("abc\r\nab")
        assert exc_info.value.received == 2

    @pytest.mark.parametrize(
        "text,row,received,consumed",
        [
            ("abc\nabc\nde\n", 2, 2, 3),  # line break inside the fixed-width read
            ("abcd\nab\n", 1, 2, 3),  # stream ends inside the fixed-width read
            ("abc\nde", 1, 2, 2),  # no line break at all
            ("a\n\n", 1, 0, 1),  # blank trailing line
            ("abc\r\n\r\n", 1, 0, 2),  # blank trailing CRLF line
        ],
    )
    def test_truncated_row_counts(self, text: str, row: int, received: int, consumed: int) -> None:
        """``received`` counts row content only; ``consumed`` includes line breaks and is never 0."""
        with pytest.raises(UnexpectedEndOfStream) as exc_info:
            build_grid_from_text(text)
        assert exc_info.value.row == row
        assert exc_info.value.received == received
        assert exc_info.value.consumed == consumed

    def test_short_row_then_trailing_byte(self) -> None:
        """A line break before the last byte of the stream is a short row, not a truncated one."""
        with pytest.raises(ValueError, match="Inconsistent row lengths") as exc_info:
            build_grid_from_text("ab\na\nb")
        assert not isinstance(exc_info.value, UnexpectedEndOfStream)

    def test_short_middle_row(self) -> None:
        """A line break inside a fixed-width read is never classified as a symbol."""
        with pytest.raises(ValueError, match="Inconsistent row lengths"):
            build_grid_from_text("abc\nab\nabc\n")

    def test_long_row(self) -> None:
        with pytest.raises(ValueError, match="Inconsistent row lengths"):
            build_grid_from_text("abc\nabcd\n")

    def test_stream_position_is_consumed(self) -> None:
        stream = io.BytesIO(b"1.\n.#\n")
        build_grid(stream)
        assert stream.read() == b""


class TestGrid:
    """Tests for the Grid type itself."""

    def test_out_of_bounds_is_none(self) -> None:
        grid = build_grid_from_text("12\n34\n")
        assert grid.at(-1, 0) is None
        assert grid.at(2, 0) is None
        assert grid.at(0, 2) is None

    def test_cell_count_must_match(self) -> None:
        with pytest.raises(ValueError, match="cell count mismatch"):
            Grid(2, 2, (Space(),))

    def test_rows_need_positive_width(self) -> None:
        with pytest.raises(ValueError, match="positive width"):
            Grid(0, 1, ())

    def test_grid_is_immutable(self) -> None:
        grid = build_grid_from_text("1.\n")
        with pytest.raises(AttributeError):
            grid.width = 5  # type: ignore[misc]


class TestNumberRuns:
    """Tests for run extraction."""

    def test_runs_in_scan_order(self) -> None:
        grid = build_grid_from_text("12.3\n.45.\n")
        assert list(iter_number_runs(grid)) == [
            NumberRun(0, 0, 2, 12),
            NumberRun(0, 3, 4, 3),
            NumberRun(1, 1, 3, 45),
        ]

    def test_run_ends_at_symbol(self) -> None:
        grid = build_grid_from_text("12*34\n")
        assert [run.value for run in iter_number_runs(grid)] == [12, 34]

    def test_runs_do_not_continue_across_rows(self) -> None:
        grid = build_grid_from_text(".12\n34.\n")
        assert [run.value for run in iter_number_runs(grid)] == [12, 34]

    def test_leading_zero(self) -> None:
        grid = build_grid_from_text("007\n")
        assert [run.value for run in iter_number_runs(grid)] == [7]

    def test_neighbours_are_clipped(self) -> None:
        grid = build_grid_from_text("12.\n...\n")
        run = next(iter_number_runs(grid))
        assert sorted(run.neighbours(grid)) == [(0, 1), (1, 1), (2, 0), (2, 1)]


class TestSumPartNumbers:
    """Tests for the part-number sum."""

    def test_example(self) -> None:
        assert sum_part_numbers(build_grid_from_text(EXAMPLE)) == 4361

    def test_two_by_two(self) -> None:
        assert sum_part_numbers(build_grid_from_text("1.\n.#\n")) == 1

    def test_isolated_run(self) -> None:
        grid = build_grid_from_text("...........\n....755....\n...........\n")
        assert sum_part_numbers(grid) == 0

    def test_single_row_without_symbols(self) -> None:
        assert sum_part_numbers(build_grid_from_text("123456789.0\n")) == 0

    def test_only_symbols_and_spaces(self) -> None:
        assert sum_part_numbers(build_grid_from_text("*#.\n.+/\n$..\n")) == 0

    def test_empty_grid(self) -> None:
        assert sum_part_numbers(build_grid_from_text("")) == 0

    @pytest.mark.parametrize(
        "text",
        [
            "#12.\n....\n",  # left
            "12#.\n....\n",  # right
            "#...\n.12.\n",  # upper left diagonal
            "...#\n.12.\n",  # upper right diagonal
            ".12.\n#...\n",  # lower left diagonal
            ".12.\n...#\n",  # lower right diagonal
            ".#..\n.12.\n",  # above
            ".12.\n..#.\n",  # below
        ],
    )
    def test_every_neighbour_direction(self, text: str) -> None:
        assert sum_part_numbers(build_grid_from_text(text)) == 12

    def test_symbol_two_steps_away(self) -> None:
        assert sum_part_numbers(build_grid_from_text("12.#\n....\n")) == 0

    def test_no_wraparound_at_row_end(self) -> None:
        """A symbol at the start of the next row is not beside a run ending the row above."""
        grid = build_grid_from_text("..1\n#..\n")
        run = next(iter_number_runs(grid))
        assert not is_part_number(grid, run)
        assert sum_part_numbers(grid) == 0

    def test_run_counted_once_with_many_symbols(self) -> None:
        assert sum_part_numbers(build_grid_from_text("*#*\n*5*\n*$*\n")) == 5

    def test_same_value_twice(self) -> None:
        """Equal values in different runs each count."""
        assert sum_part_numbers(build_grid_from_text("7*7\n")) == 14

    def test_idempotent(self) -> None:
        grid = build_grid_from_text(EXAMPLE)
        assert sum_part_numbers(grid) == sum_part_numbers(grid)


class TestSumGearRatios:
    """Tests for the gear-ratio sum."""

    def test_example(self) -> None:
        assert sum_gear_ratios(build_grid_from_text(EXAMPLE)) == 467835

    def test_star_with_one_run_is_not_a_gear(self) -> None:
        assert sum_gear_ratios(build_grid_from_text("12*..\n")) == 0

    def test_star_with_three_runs_is_not_a_gear(self) -> None:
        assert sum_gear_ratios(build_grid_from_text("1.2\n.*.\n3..\n")) == 0

    def test_other_symbols_are_not_gears(self) -> None:
        assert sum_gear_ratios(build_grid_from_text("2#3\n")) == 0

    def test_part_numbers_unaffected(self) -> None:
        grid = build_grid_from_text(EXAMPLE)
        sum_gear_ratios(grid)
        assert sum_part_numbers(grid) == 4361


class TestRenderSchematic:
    """Tests for colored rendering."""

    def test_text_matches_input(self) -> None:
        grid = build_grid_from_text(EXAMPLE)
        plain = ANSI_RE.sub("", render_schematic(grid))
        assert plain == EXAMPLE.rstrip("\n")

    def test_empty_grid(self) -> None:
        assert render_schematic(build_grid_from_text("")) == ""
