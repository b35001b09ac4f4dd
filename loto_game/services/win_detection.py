"""Win pattern detection against the set of called numbers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from loto_game.services.ticket_generator import TicketCell


class WinPattern(str, Enum):
    TOP_LINE = "top-line"
    MIDDLE_LINE = "middle-line"
    BOTTOM_LINE = "bottom-line"
    FULL_HOUSE = "full-house"


_LINE_PATTERNS = (WinPattern.TOP_LINE, WinPattern.MIDDLE_LINE, WinPattern.BOTTOM_LINE)

_MESSAGES = {
    WinPattern.TOP_LINE: "🎉 Top Line!",
    WinPattern.MIDDLE_LINE: "🎉 Middle Line!",
    WinPattern.BOTTOM_LINE: "🎉 Bottom Line!",
    WinPattern.FULL_HOUSE: "🏆 FULL HOUSE!",
}


@dataclass(frozen=True)
class WinResult:
    has_won: bool
    pattern: WinPattern | None = None
    completed_rows: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class Progress:
    marked: int
    total: int
    percentage: int


@dataclass(frozen=True)
class NumbersToWin:
    top_line: int
    middle_line: int
    bottom_line: int
    full_house: int


Grid = Sequence[Sequence[TicketCell]]


def _numbers(row: Sequence[TicketCell]) -> list[int]:
    return [cell for cell in row if cell is not None]


def _is_row_complete(row: Sequence[TicketCell], called: set[int]) -> bool:
    nums = _numbers(row)
    return bool(nums) and all(n in called for n in nums)


def check_win(grid: Grid, called: Iterable[int]) -> WinResult:
    """Return the winning pattern, if any.

    Three completed rows is a full house. Otherwise the first completed row
    names the pattern, and every completed row is reported.
    """

    called_set = set(called)
    completed = [idx for idx, row in enumerate(grid) if _is_row_complete(row, called_set)]

    if not completed:
        return WinResult(has_won=False)

    if len(completed) == len(grid):
        return WinResult(has_won=True, pattern=WinPattern.FULL_HOUSE, completed_rows=completed)

    return WinResult(has_won=True, pattern=_LINE_PATTERNS[completed[0]], completed_rows=completed)


def progress(grid: Grid, called: Iterable[int]) -> Progress:
    called_set = set(called)
    nums = [n for row in grid for n in _numbers(row)]
    marked = sum(1 for n in nums if n in called_set)
    pct = round(marked / len(nums) * 100) if nums else 0
    return Progress(marked=marked, total=len(nums), percentage=int(pct))


def numbers_to_win(grid: Grid, called: Iterable[int]) -> NumbersToWin:
    called_set = set(called)
    per_row = [sum(1 for n in _numbers(row) if n not in called_set) for row in grid]
    return NumbersToWin(
        top_line=per_row[0],
        middle_line=per_row[1],
        bottom_line=per_row[2],
        full_house=sum(per_row),
    )


def win_message(pattern: WinPattern | str) -> str:
    return _MESSAGES[WinPattern(pattern)]
