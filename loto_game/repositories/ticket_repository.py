"""Repository layer for ticket persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from loto_game.models.ticket import Ticket


class TicketRepository:
    """Read/insert operations for Ticket."""

    def get_for_player(self, session: Session, room_id: str, player_id: str) -> Ticket | None:
        stmt = select(Ticket).where(Ticket.room_id == room_id, Ticket.player_id == player_id)
        return session.scalars(stmt).first()

    def hash_exists(self, session: Session, room_id: str, ticket_hash: str) -> bool:
        stmt = (
            select(func.count())
            .select_from(Ticket)
            .where(Ticket.room_id == room_id, Ticket.ticket_hash == ticket_hash)
        )
        return int(session.scalar(stmt) or 0) > 0

    def list_for_room(self, session: Session, room_id: str) -> Sequence[Ticket]:
        stmt = (
            select(Ticket)
            .where(Ticket.room_id == room_id)
            .order_by(Ticket.created_at.asc(), Ticket.id.asc())
        )
        return list(session.scalars(stmt).all())

    def create(
        self,
        session: Session,
        *,
        room_id: str,
        player_id: str,
        player_name: str | None,
        ticket_data: list,
        ticket_hash: str,
    ) -> Ticket:
        ticket = Ticket(
            room_id=room_id,
            player_id=player_id,
            player_name=player_name,
            ticket_data=ticket_data,
            ticket_hash=ticket_hash,
        )
        session.add(ticket)
        session.flush()
        return ticket
