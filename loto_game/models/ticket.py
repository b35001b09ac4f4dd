"""Player ticket ORM model.

``ticket_hash`` is the SHA-256 of the canonical grid serialization and is
unique per room.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from loto_game.models.base import Base, new_uuid, utcnow


class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        UniqueConstraint("room_id", "ticket_hash", name="uq_tickets_room_hash"),
        Index("ix_tickets_room_player", "room_id", "player_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    room_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("rooms.id", ondelete="CASCADE"), index=True, nullable=False
    )
    player_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    player_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ticket_data: Mapped[list] = mapped_column(JSON, nullable=False)
    ticket_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
