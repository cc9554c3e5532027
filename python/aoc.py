#!/usr/bin/env python3
"""
Run the daily puzzle solvers and print their answers.

Usage:
    python aoc.py [inputs_dir] [--day N]... [--show-grid] [--verbose]

Inputs are read from <inputs_dir>/day<N>.txt (default: ./inputs).
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, NoReturn

from rich.console import Console
from rich.table import Table
from rich.text import Text

from calibration import get_calibration_factor
from cube_game import BagLimits, get_id_sum, get_power_sum
from puzzle_errors import PuzzleError
from puzzle_input import open_input
from schematic import build_grid, render_schematic, sum_gear_ratios, sum_part_numbers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
    """Options for one run of the solvers."""

    inputs_dir: Path = Path("inputs")
    days: tuple[int, ...] = (1, 2, 3)
    bag: BagLimits = field(default_factory=BagLimits)
    show_grid: bool = False
    verbose: bool = False

    def input_path(self, day: int) -> Path:
        return self.inputs_dir / f"day{day}.txt"


@dataclass(frozen=True)
class DayResult:
    """Answers for one day; ``view`` holds the rendered schematic if requested."""

    day: int
    part1: int
    part2: int
    view: str | None = None


def _solve_calibration(config: RunConfig) -> DayResult:
    path = config.input_path(1)
    return DayResult(
        1,
        get_calibration_factor(path, spelled=False),
        get_calibration_factor(path, spelled=True),
    )


def _solve_cube_game(config: RunConfig) -> DayResult:
    path = config.input_path(2)
    return DayResult(2, get_id_sum(path, config.bag), get_power_sum(path))


def _solve_schematic(config: RunConfig) -> DayResult:
    with open_input(config.input_path(3)) as stream:
        grid = build_grid(stream)

    view = render_schematic(grid) if config.show_grid else None
    return DayResult(3, sum_part_numbers(grid), sum_gear_ratios(grid), view)


SOLVERS: dict[int, Callable[[RunConfig], DayResult]] = {
    1: _solve_calibration,
    2: _solve_cube_game,
    3: _solve_schematic,
}


def solve_day(day: int, config: RunConfig) -> DayResult:
    if day not in SOLVERS:
        raise ValueError(f"No solver for day {day} (available: {', '.join(map(str, sorted(SOLVERS)))})")
    logger.info("Solving day %d from %s", day, config.input_path(day))
    return SOLVERS[day](config)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting, so main() reports the error."""

    def error(self, message: str) -> NoReturn:
        raise ValueError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(prog="aoc", description="Run the daily puzzle solvers.")
    p.add_argument("inputs_dir", nargs="?", type=Path, default=None, help="Directory holding day<N>.txt (default: ./inputs)")
    p.add_argument("--day", type=int, action="append", dest="days", metavar="N", help="Day to solve; repeatable (default: all)")
    p.add_argument("--show-grid", action="store_true", help="Print the coloured schematic for day 3")
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    return p


def parse_args(argv: list[str]) -> RunConfig:
    """Build a RunConfig from command-line arguments (without the program name)."""
    args = build_parser().parse_args(argv)
    defaults = RunConfig()
    return RunConfig(
        inputs_dir=args.inputs_dir or defaults.inputs_dir,
        days=tuple(args.days or defaults.days),
        show_grid=args.show_grid,
        verbose=args.verbose,
    )


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Solve the requested days and print a table of answers. Returns the exit code."""
    console = console or Console()

    try:
        config = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as err:
        console.print(Text(str(err), style="bold red"))
        console.print(build_parser().format_usage().rstrip(), markup=False)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )

    table = Table(title="Puzzle Answers")
    table.add_column("Day", justify="right", style="bold")
    table.add_column("Part 1", justify="right")
    table.add_column("Part 2", justify="right")

    exit_code = 0
    views: list[DayResult] = []

    for day in config.days:
        try:
            result = solve_day(day, config)
        except (PuzzleError, ValueError) as err:
            logger.error("Day %d failed: %s", day, err)
            table.add_row(str(day), Text(str(err).splitlines()[0], style="red"), "")
            exit_code = 1
            continue

        table.add_row(str(day), str(result.part1), str(result.part2))
        if result.view is not None:
            views.append(result)

    console.print(table)
    for result in views:
        console.print(f"\n[bold cyan]Day {result.day} schematic[/bold cyan]")
        console.print(Text.from_ansi(result.view or ""))

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
