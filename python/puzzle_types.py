"""
Shared type definitions for the puzzle solvers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


# =============================================================================
# Schematic Cell Types
# =============================================================================


@dataclass(frozen=True)
class Space:
    """A background cell."""

    pass


@dataclass(frozen=True)
class Symbol:
    """Any non-digit, non-background cell."""

    char: str


@dataclass(frozen=True)
class Digit:
    """A single decimal digit."""

    value: int


Cell = Space | Symbol | Digit


@dataclass(frozen=True)
class Grid:
    """A fixed-width 2D grid of cells stored row-major in a flat tuple."""

    width: int
    height: int
    cells: tuple[Cell, ...]

    def __post_init__(self) -> None:
        if self.height > 0 and self.width <= 0:
            raise ValueError(f"Grid with {self.height} rows must have positive width, got {self.width}")
        if len(self.cells) != self.width * self.height:
            raise ValueError(
                f"Grid cell count mismatch\n"
                f"  Expected: {self.width} x {self.height} = {self.width * self.height}\n"
                f"  Actual: {len(self.cells)}"
            )

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> Cell | None:
        """Return the cell at (x, y), or None outside the grid."""
        if not self.in_bounds(x, y):
            return None
        return self.cells[self.index(x, y)]

    def rows(self) -> Iterator[tuple[Cell, ...]]:
        for y in range(self.height):
            start = self.index(0, y)
            yield self.cells[start : start + self.width]


EMPTY_GRID = Grid(0, 0, ())


@dataclass(frozen=True)
class NumberRun:
    """A maximal horizontal run of digits on one row, columns [start, end)."""

    row: int
    start: int
    end: int
    value: int

    def covers(self, x: int, y: int) -> bool:
        return y == self.row and self.start <= x < self.end

    def neighbours(self, grid: Grid) -> Iterator[tuple[int, int]]:
        """
        Yield every in-bounds coordinate within Chebyshev distance 1 of the run.

        The run's own cells are excluded. Coordinates past the grid edge are
        skipped, never wrapped.
        """
        for y in range(self.row - 1, self.row + 2):
            for x in range(self.start - 1, self.end + 1):
                if grid.in_bounds(x, y) and not self.covers(x, y):
                    yield (x, y)


# =============================================================================
# Cube Game Types
# =============================================================================


@dataclass(frozen=True)
class Draw:
    """Cube counts revealed in one handful (or held by one bag)."""

    red: int = 0
    green: int = 0
    blue: int = 0


@dataclass(frozen=True)
class Game:
    """A numbered game and the draws made during it."""

    id: int
    draws: tuple[Draw, ...]
