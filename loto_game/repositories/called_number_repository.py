"""Repository layer for called numbers."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from loto_game.models.called_number import CalledNumber


class CalledNumberRepository:
    def list_for_room(self, session: Session, room_id: str) -> Sequence[CalledNumber]:
        stmt = (
            select(CalledNumber)
            .where(CalledNumber.room_id == room_id)
            .order_by(CalledNumber.sequence.asc())
        )
        return list(session.scalars(stmt).all())

    def numbers_for_room(self, session: Session, room_id: str) -> list[int]:
        return [int(c.number) for c in self.list_for_room(session, room_id)]

    def is_called(self, session: Session, room_id: str, number: int) -> bool:
        stmt = (
            select(func.count())
            .select_from(CalledNumber)
            .where(CalledNumber.room_id == room_id, CalledNumber.number == number)
        )
        return int(session.scalar(stmt) or 0) > 0

    def create(self, session: Session, room_id: str, number: int, called_by: str) -> CalledNumber:
        last = session.scalar(
            select(func.max(CalledNumber.sequence)).where(CalledNumber.room_id == room_id)
        )
        called = CalledNumber(
            room_id=room_id,
            number=number,
            sequence=int(last or 0) + 1,
            called_by=called_by,
        )
        session.add(called)
        session.flush()
        return called
