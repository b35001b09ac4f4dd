"""Numbers called by the host in a room."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from loto_game.models.base import Base, new_uuid, utcnow


class CalledNumber(Base):
    __tablename__ = "called_numbers"
    __table_args__ = (
        UniqueConstraint("room_id", "number", name="uq_called_numbers_room_number"),
        CheckConstraint("number BETWEEN 1 AND 90", name="ck_called_numbers_range"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    room_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("rooms.id", ondelete="CASCADE"), index=True, nullable=False
    )
    number: Mapped[int] = mapped_column(SmallInteger, nullable=False)  # 1..90
    # Insertion order; timestamps can tie within a fast sequence of calls.
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    called_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    called_by: Mapped[str] = mapped_column(String(255), nullable=False)
