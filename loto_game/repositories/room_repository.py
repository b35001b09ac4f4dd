"""Repository layer for room persistence."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from loto_game.models.room import Room
from loto_game.models.ticket import Ticket


class RoomRepository:
    """CRUD operations for Room."""

    def get_by_id(self, session: Session, room_id: str) -> Room | None:
        return session.get(Room, room_id)

    def get_by_code(self, session: Session, room_code: str) -> Room | None:
        stmt = select(Room).where(Room.room_code == room_code)
        return session.scalars(stmt).first()

    def code_exists(self, session: Session, room_code: str) -> bool:
        stmt = select(func.count()).select_from(Room).where(Room.room_code == room_code)
        return int(session.scalar(stmt) or 0) > 0

    def create(self, session: Session, room_code: str, host_id: str) -> Room:
        room = Room(room_code=room_code, host_id=host_id)
        session.add(room)
        session.flush()  # assign PK, surface unique violations now
        return room

    def player_count(self, session: Session, room_id: str) -> int:
        stmt = select(func.count(func.distinct(Ticket.player_id))).where(Ticket.room_id == room_id)
        return int(session.scalar(stmt) or 0)

    def ticket_count(self, session: Session, room_id: str) -> int:
        stmt = select(func.count()).select_from(Ticket).where(Ticket.room_id == room_id)
        return int(session.scalar(stmt) or 0)
