"""Ticket generation for 3x9 Lo To tickets.

Construction works column by column: decide how many numbers each column
holds, choose distinct rows for them, then place sorted values into the
sorted rows. Placing sorted values into sorted rows keeps every column
ascending without a corrective pass.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from loto_game.errors import AppError

logger = logging.getLogger(__name__)


TicketCell = Optional[int]
TicketRow = tuple[TicketCell, ...]
TicketGrid = tuple[TicketRow, ...]

ROWS = 3
COLS = 9
NUMBERS_PER_ROW = 5
TOTAL_NUMBERS = 15
MAX_PER_COLUMN = 3

COLUMN_RANGES: tuple[tuple[int, int], ...] = (
    (1, 9),
    (10, 19),
    (20, 29),
    (30, 39),
    (40, 49),
    (50, 59),
    (60, 69),
    (70, 79),
    (80, 90),  # 11 values
)

DEFAULT_MAX_ATTEMPTS = 100


class TicketConstraintError(Exception):
    """A single construction attempt could not satisfy a placement rule."""


class GenerationExhausted(AppError):
    """No valid ticket could be built within the attempt budget."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            code="ticket_generation_exhausted",
            message=f"Failed to generate a valid ticket after {attempts} attempts",
            status_code=503,
            details={"attempts": attempts},
        )


def validate_ticket(grid: object) -> bool:
    """Check a grid against every structural ticket rule.

    Accepts any nested sequence so malformed input yields ``False`` rather
    than raising.
    """

    try:
        rows = [list(row) for row in grid]  # type: ignore[union-attr]
    except TypeError:
        return False

    if len(rows) != ROWS or any(len(row) != COLS for row in rows):
        return False

    numbers: list[int] = []
    for row in rows:
        for cell in row:
            if cell is None:
                continue
            # bool is an int subclass but never a ticket value
            if not isinstance(cell, int) or isinstance(cell, bool):
                return False
            numbers.append(cell)

    for row in rows:
        if sum(1 for cell in row if cell is not None) != NUMBERS_PER_ROW:
            return False

    for col in range(COLS):
        column = [rows[r][col] for r in range(ROWS) if rows[r][col] is not None]
        if len(column) < 1 or len(column) > MAX_PER_COLUMN:
            return False

        lo, hi = COLUMN_RANGES[col]
        if any(n < lo or n > hi for n in column):
            return False

        for i in range(1, len(column)):
            if column[i] <= column[i - 1]:
                return False

    if len(numbers) != TOTAL_NUMBERS:
        return False

    return len(set(numbers)) == len(numbers)


class TicketGenerator:
    """Generate structurally valid tickets with a bounded retry loop."""

    def __init__(
        self,
        rng: random.Random | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        validator: Callable[[TicketGrid], bool] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts
        self._validator = validator or validate_ticket

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def generate(self) -> TicketGrid:
        """Return a new ticket.

        Raises:
            GenerationExhausted: if every attempt failed.
        """

        for attempt in range(1, self._max_attempts + 1):
            try:
                grid = self._build()
            except TicketConstraintError as exc:
                logger.debug("Ticket attempt %d failed: %s", attempt, exc)
                continue

            if self._validator(grid):
                return grid

            logger.debug("Ticket attempt %d rejected by validator", attempt)

        logger.error("Ticket generation exhausted after %d attempts", self._max_attempts)
        raise GenerationExhausted(self._max_attempts)

    def _build(self) -> TicketGrid:
        counts = self._distribute_counts()
        rows_by_column = self._assign_rows(counts)
        values_by_column = self._draw_values(counts)

        grid: list[list[TicketCell]] = [[None] * COLS for _ in range(ROWS)]
        for col in range(COLS):
            for row, value in zip(rows_by_column[col], values_by_column[col]):
                grid[row][col] = value

        return tuple(tuple(row) for row in grid)

    def _distribute_counts(self) -> list[int]:
        counts = [1] * COLS
        remaining = TOTAL_NUMBERS - COLS

        while remaining > 0:
            col = self._rng.randrange(COLS)
            if counts[col] < MAX_PER_COLUMN:
                counts[col] += 1
                remaining -= 1

        return counts

    def _assign_rows(self, counts: list[int]) -> list[list[int]]:
        row_counts = [0] * ROWS
        assignments: list[list[int]] = []

        for col, count in enumerate(counts):
            chosen: list[int] = []
            for _ in range(count):
                eligible = [
                    r for r in range(ROWS) if row_counts[r] < NUMBERS_PER_ROW and r not in chosen
                ]
                if not eligible:
                    raise TicketConstraintError(f"no eligible row for column {col}")

                row = self._rng.choice(eligible)
                chosen.append(row)
                row_counts[row] += 1

            chosen.sort()
            assignments.append(chosen)

        for row, filled in enumerate(row_counts):
            if filled != NUMBERS_PER_ROW:
                raise TicketConstraintError(
                    f"row {row} has {filled} numbers, expected {NUMBERS_PER_ROW}"
                )

        return assignments

    def _draw_values(self, counts: list[int]) -> list[list[int]]:
        values: list[list[int]] = []
        for col, count in enumerate(counts):
            lo, hi = COLUMN_RANGES[col]
            values.append(sorted(self._rng.sample(range(lo, hi + 1), count)))
        return values


def generate_ticket() -> TicketGrid:
    """Generate one ticket with the default generator."""

    return TicketGenerator().generate()
