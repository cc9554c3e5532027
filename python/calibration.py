"""
Trebuchet calibration values.

Each line's value is its first digit followed by its last digit. The
spelled-out variant first rewrites number words into digits.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from puzzle_errors import ParseLineFailed
from puzzle_input import get_lines_from_file

__all__ = [
    "NUMBER_WORDS",
    "calibration_sum",
    "get_calibration_factor",
    "int_from_line",
    "words_to_digit_chars",
]

logger = logging.getLogger(__name__)

NUMBER_WORDS = ("zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine")


def words_to_digit_chars(line: str) -> str:
    """
    Replace spelled-out digits with digit characters, scanning left to right.

    When a word starts at the current position, every occurrence of that
    word in the line is replaced. Overlapping words lose to whichever starts
    first: "eightwo" -> "8wo", "twone" -> "2ne".
    """
    out = line
    idx = 0

    while idx < len(out):
        for digit, word in enumerate(NUMBER_WORDS):
            if out.startswith(word, idx):
                out = out.replace(word, str(digit))
                break
        idx += 1

    return out


def int_from_line(line: str) -> int:
    """Combine the first and last digit of a line into a two-digit number."""
    digits = [c for c in line if "0" <= c <= "9"]
    if not digits:
        raise ParseLineFailed(line)

    return 10 * int(digits[0]) + int(digits[-1])


def calibration_sum(lines: Iterable[str], spelled: bool = False) -> int:
    total = 0
    for line in lines:
        total += int_from_line(words_to_digit_chars(line) if spelled else line)
    return total


def get_calibration_factor(path: Path | str, spelled: bool = True) -> int:
    lines = get_lines_from_file(path)
    logger.info("Read %d calibration lines from %s", len(lines), path)
    return calibration_sum(lines, spelled=spelled)
