"""Canonical serialization, hashing and display helpers for ticket grids."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from loto_game.errors import ValidationError
from loto_game.services.ticket_generator import COLS, ROWS, TicketCell, TicketGrid


class TicketFormatError(ValidationError):
    """Serialized ticket data is not a 3x9 grid of numbers and blanks."""

    def __init__(self, message: str = "Invalid ticket data", details: Any | None = None) -> None:
        super().__init__(message=message, details=details)


def ticket_to_rows(grid: TicketGrid) -> list[list[TicketCell]]:
    """Plain nested lists (row 0..2, col 0..8), blanks as ``None``."""

    return [list(row) for row in grid]


def ticket_from_rows(rows: Any) -> TicketGrid:
    """Build an immutable grid from nested lists, checking shape and cell types."""

    if not isinstance(rows, (list, tuple)) or len(rows) != ROWS:
        raise TicketFormatError(details={"ticket": [f"Expected {ROWS} rows"]})

    out: list[tuple[TicketCell, ...]] = []
    for idx, row in enumerate(rows):
        if not isinstance(row, (list, tuple)) or len(row) != COLS:
            raise TicketFormatError(details={"ticket": [f"Row {idx} must have {COLS} cells"]})
        for cell in row:
            if cell is not None and (not isinstance(cell, int) or isinstance(cell, bool)):
                raise TicketFormatError(
                    details={"ticket": [f"Row {idx} contains a non-integer cell: {cell!r}"]}
                )
        out.append(tuple(row))

    return tuple(out)


def serialize_ticket(grid: TicketGrid) -> str:
    """Compact JSON, e.g. ``[[5,null,23,...],...]``.

    Matches ``JSON.stringify`` output so hashes agree with stored tickets.
    """

    return json.dumps(ticket_to_rows(grid), separators=(",", ":"))


def deserialize_ticket(serialized: str) -> TicketGrid:
    try:
        rows = json.loads(serialized)
    except (TypeError, ValueError) as exc:
        raise TicketFormatError(details={"ticket": ["Not valid JSON"]}) from exc
    return ticket_from_rows(rows)


def hash_ticket(grid: TicketGrid) -> str:
    """Hex SHA-256 of the canonical serialization."""

    return hashlib.sha256(serialize_ticket(grid).encode("utf-8")).hexdigest()


def format_ticket(grid: TicketGrid) -> str:
    """Render a grid as text for logs or printing."""

    lines = [
        " | ".join("  " if cell is None else str(cell).rjust(2) for cell in row)
        for row in grid
    ]
    return ("\n" + "-" * 40 + "\n").join(lines)
