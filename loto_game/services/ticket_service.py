"""Ticket issuance on join, with per-room uniqueness by ticket hash."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from loto_game.errors import ConflictError, NotFoundError, ValidationError
from loto_game.models.room import Room, RoomStatus
from loto_game.models.ticket import Ticket
from loto_game.repositories.called_number_repository import CalledNumberRepository
from loto_game.repositories.ticket_repository import TicketRepository
from loto_game.services.room_service import RoomService
from loto_game.services.ticket_codec import format_ticket, hash_ticket, ticket_from_rows, ticket_to_rows
from loto_game.services.ticket_generator import TicketGenerator, TicketGrid
from loto_game.services.win_detection import (
    NumbersToWin,
    Progress,
    WinResult,
    check_win,
    numbers_to_win,
    progress,
)

logger = logging.getLogger(__name__)

TICKET_HASH_CONSTRAINT = "uq_tickets_room_hash"


class TicketConflictError(ConflictError):
    """Every regenerated ticket collided with one already issued in the room."""

    def __init__(self, attempts: int, details: Any | None = None) -> None:
        super().__init__(
            message=f"Failed to generate a unique ticket after {attempts} attempts",
            details=details,
        )
        self.code = "ticket_conflict"


@dataclass(frozen=True)
class JoinResult:
    room: Room
    ticket: Ticket
    is_new_ticket: bool


@dataclass(frozen=True)
class TicketPreview:
    grid: TicketGrid
    ticket_hash: str
    text: str


@dataclass(frozen=True)
class PlayerStatus:
    ticket: Ticket
    called_numbers: list[int]
    win: WinResult
    progress: Progress
    numbers_to_win: NumbersToWin


def is_duplicate_hash_error(exc: IntegrityError) -> bool:
    """True when the violated constraint is the per-room ticket hash."""

    orig = exc.orig
    diag = getattr(orig, "diag", None)
    if diag is not None and getattr(diag, "constraint_name", None):
        return diag.constraint_name == TICKET_HASH_CONSTRAINT

    message = str(orig if orig is not None else exc)
    # SQLite names the columns instead of the constraint.
    return TICKET_HASH_CONSTRAINT in message or "tickets.ticket_hash" in message


def default_player_name(player_id: str) -> str:
    return f"Player {player_id[:8]}"


class TicketService:
    """Join and ticket use-cases."""

    def __init__(
        self,
        generator: TicketGenerator | None = None,
        room_service: RoomService | None = None,
        repository: TicketRepository | None = None,
        called_repository: CalledNumberRepository | None = None,
        max_attempts: int = 10,
    ) -> None:
        self._generator = generator or TicketGenerator()
        self._rooms = room_service or RoomService()
        self._repo = repository or TicketRepository()
        self._called = called_repository or CalledNumberRepository()
        self._max_attempts = max_attempts

    def join_room(
        self,
        session: Session,
        room_ref: str,
        player_id: str,
        player_name: str | None = None,
    ) -> JoinResult:
        """Return the player's ticket in the room, issuing one on first join.

        ``room_ref`` may be the room id or its join code.
        """

        player_id = str(player_id or "").strip()
        if not player_id:
            raise ValidationError(message="player_id is required", details={"player_id": ["Required"]})

        room = self._rooms.resolve_room(session, room_ref)
        if room.status == RoomStatus.COMPLETED.value:
            raise ConflictError(message="This game has already ended. You cannot join.")

        existing = self._repo.get_for_player(session, room.id, player_id)
        if existing is not None:
            return JoinResult(room=room, ticket=existing, is_new_ticket=False)

        name = (player_name or "").strip() or default_player_name(player_id)
        ticket = self._issue_ticket(session, room.id, player_id, name)
        logger.info("Player %s joined room %s with ticket %s", player_id, room.id, ticket.id)
        return JoinResult(room=room, ticket=ticket, is_new_ticket=True)

    def _issue_ticket(self, session: Session, room_id: str, player_id: str, player_name: str) -> Ticket:
        for attempt in range(1, self._max_attempts + 1):
            grid = self._generator.generate()
            ticket_hash = hash_ticket(grid)

            if self._repo.hash_exists(session, room_id, ticket_hash):
                logger.warning(
                    "Duplicate ticket in room %s (attempt %d), regenerating", room_id, attempt
                )
                continue

            try:
                # Savepoint: a rejected insert must not discard the caller's earlier writes.
                with session.begin_nested():
                    return self._repo.create(
                        session,
                        room_id=room_id,
                        player_id=player_id,
                        player_name=player_name,
                        ticket_data=ticket_to_rows(grid),
                        ticket_hash=ticket_hash,
                    )
            except IntegrityError as exc:
                if not is_duplicate_hash_error(exc):
                    raise
                # Another join stored the same hash between the check and the insert.
                logger.warning(
                    "Ticket insert rejected in room %s (attempt %d): %s",
                    room_id,
                    attempt,
                    exc.orig if exc.orig is not None else exc,
                )

        raise TicketConflictError(self._max_attempts, details={"room_id": room_id})

    def get_player_ticket(self, session: Session, room_id: str, player_id: str) -> Ticket:
        room = self._rooms.get_room(session, room_id)
        ticket = self._repo.get_for_player(session, room.id, player_id)
        if ticket is None:
            raise NotFoundError(message=f"Player {player_id} has no ticket in room {room.id}")
        return ticket

    def list_room_tickets(self, session: Session, room_id: str) -> Sequence[Ticket]:
        room = self._rooms.get_room(session, room_id)
        return self._repo.list_for_room(session, room.id)

    def check_player(self, session: Session, room_id: str, player_id: str) -> PlayerStatus:
        """Evaluate a player's stored ticket against the room's called numbers."""

        ticket = self.get_player_ticket(session, room_id, player_id)
        grid = ticket_from_rows(ticket.ticket_data)
        called = self._called.numbers_for_room(session, ticket.room_id)

        return PlayerStatus(
            ticket=ticket,
            called_numbers=called,
            win=check_win(grid, called),
            progress=progress(grid, called),
            numbers_to_win=numbers_to_win(grid, called),
        )

    def preview_ticket(self) -> TicketPreview:
        grid = self._generator.generate()
        return TicketPreview(grid=grid, ticket_hash=hash_ticket(grid), text=format_ticket(grid))
