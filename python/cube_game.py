"""
Cube conundrum: parse game records and check them against a bag.

Format:
    Game <id>: <count> <colour>, ...; <count> <colour>, ...; ...

Colours are red, green and blue. A game is possible for a bag if no draw
shows more cubes of a colour than the bag holds. The power of a game is the
product of the smallest bag that makes it possible.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from puzzle_errors import FailedToParseId, InvalidDraw
from puzzle_input import get_lines_from_file
from puzzle_types import Draw, Game

__all__ = [
    "BagLimits",
    "get_id_sum",
    "get_id_sum_from_lines",
    "get_power_sum",
    "get_power_sum_from_lines",
    "id_from_line",
    "is_possible",
    "minimal_bag",
    "parse_draw",
    "parse_game",
    "power",
]

logger = logging.getLogger(__name__)

COLOURS = ("red", "green", "blue")

_HEADER_RE = re.compile(r"^\s*Game\s+(\d+)\s*:")


@dataclass(frozen=True)
class BagLimits:
    """How many cubes of each colour the bag holds."""

    red: int = 12
    green: int = 13
    blue: int = 14


def id_from_line(line: str) -> int:
    match = _HEADER_RE.match(line)
    if match is None:
        raise FailedToParseId(line)
    return int(match.group(1))


def parse_draw(text: str) -> Draw:
    """Parse one handful such as "3 blue, 4 red". Missing colours count as 0."""
    counts = dict.fromkeys(COLOURS, 0)

    for item in text.split(","):
        parts = item.split()
        if not parts:
            continue  # empty draw
        if len(parts) != 2:
            raise InvalidDraw(text, f"Expected '<count> <colour>', got \"{item.strip()}\"")

        count_str, colour = parts
        if not count_str.isdigit():
            raise InvalidDraw(text, f"Count \"{count_str}\" is not a non-negative integer")
        if colour not in counts:
            raise InvalidDraw(text, f"Unknown colour \"{colour}\" (valid: {', '.join(COLOURS)})")

        counts[colour] += int(count_str)

    return Draw(**counts)


def parse_game(line: str) -> Game:
    game_id = id_from_line(line)
    _, _, body = line.partition(":")
    draws = tuple(parse_draw(text) for text in body.split(";"))
    return Game(game_id, draws)


def is_possible(game: Game, limits: BagLimits = BagLimits()) -> bool:
    return all(
        draw.red <= limits.red and draw.green <= limits.green and draw.blue <= limits.blue
        for draw in game.draws
    )


def minimal_bag(game: Game) -> Draw:
    """Fewest cubes of each colour that could have produced every draw."""
    return Draw(
        red=max((d.red for d in game.draws), default=0),
        green=max((d.green for d in game.draws), default=0),
        blue=max((d.blue for d in game.draws), default=0),
    )


def power(draw: Draw) -> int:
    return draw.red * draw.green * draw.blue


def get_id_sum_from_lines(lines: Iterable[str], limits: BagLimits = BagLimits()) -> int:
    """Sum the ids of the games that are possible with the given bag."""
    total = 0
    for line in lines:
        game = parse_game(line)
        if is_possible(game, limits):
            total += game.id
        else:
            logger.debug("Game %d exceeds bag %s", game.id, limits)
    return total


def get_power_sum_from_lines(lines: Iterable[str]) -> int:
    return sum(power(minimal_bag(parse_game(line))) for line in lines)


def get_id_sum(path: Path | str, limits: BagLimits = BagLimits()) -> int:
    return get_id_sum_from_lines(get_lines_from_file(path), limits)


def get_power_sum(path: Path | str) -> int:
    return get_power_sum_from_lines(get_lines_from_file(path))
