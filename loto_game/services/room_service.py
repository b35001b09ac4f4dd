"""Room lifecycle: creation, lookup by id or code, status changes."""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass

from sqlalchemy.orm import Session

from loto_game.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from loto_game.models.base import utcnow
from loto_game.models.room import Room, RoomStatus
from loto_game.repositories.room_repository import RoomRepository

logger = logging.getLogger(__name__)

# I, O, 0 and 1 are left out so codes read unambiguously off a screen.
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6

_ROOM_CODE_RE = re.compile(r"^[A-Z0-9]{6}$")


def generate_room_code(rng: random.Random | None = None) -> str:
    r = rng or random
    return "".join(r.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def is_valid_room_code(code: str) -> bool:
    return bool(_ROOM_CODE_RE.match(code))


def normalize_room_code(code: str) -> str:
    """Upper-case and check the six-character code format."""

    normalized = str(code or "").strip().upper()
    if not is_valid_room_code(normalized):
        raise ValidationError(
            message="Invalid room code",
            details={"room_code": ["Must be 6 letters or digits"]},
        )
    return normalized


@dataclass(frozen=True)
class RoomSummary:
    room: Room
    player_count: int
    ticket_count: int

    @property
    def has_started(self) -> bool:
        return self.room.started_at is not None

    @property
    def is_active(self) -> bool:
        return self.room.status == RoomStatus.ACTIVE.value


class RoomService:
    """Room use-cases."""

    def __init__(
        self,
        repository: RoomRepository | None = None,
        max_code_attempts: int = 10,
        rng: random.Random | None = None,
    ) -> None:
        self._repo = repository or RoomRepository()
        self._max_code_attempts = max_code_attempts
        self._rng = rng

    def create_room(self, session: Session, host_id: str, room_code: str | None = None) -> Room:
        host_id = str(host_id or "").strip()
        if not host_id:
            raise ValidationError(message="host_id is required", details={"host_id": ["Required"]})

        if room_code is not None:
            code = normalize_room_code(room_code)
            if self._repo.code_exists(session, code):
                raise ConflictError(message=f"Room code {code} is already in use")
        else:
            code = self._unused_code(session)

        room = self._repo.create(session, room_code=code, host_id=host_id)
        logger.info("Created room %s (code=%s)", room.id, room.room_code)
        return room

    def _unused_code(self, session: Session) -> str:
        for _ in range(self._max_code_attempts):
            code = generate_room_code(self._rng)
            if not self._repo.code_exists(session, code):
                return code
            logger.warning("Room code collision on %s, regenerating", code)

        raise ConflictError(
            message=f"Failed to allocate a room code within {self._max_code_attempts} attempts"
        )

    def get_room(self, session: Session, room_id: str) -> Room:
        room = self._repo.get_by_id(session, room_id)
        if room is None:
            raise NotFoundError(message=f"Room {room_id} not found")
        return room

    def get_room_by_code(self, session: Session, room_code: str) -> Room:
        code = normalize_room_code(room_code)
        room = self._repo.get_by_code(session, code)
        if room is None:
            raise NotFoundError(message="Room not found. Please check the room code.")
        return room

    def resolve_room(self, session: Session, room_ref: str) -> Room:
        """Find a room by id, falling back to its join code."""

        room = self._repo.get_by_id(session, room_ref)
        if room is not None:
            return room
        if is_valid_room_code(str(room_ref).strip().upper()):
            return self.get_room_by_code(session, room_ref)
        raise NotFoundError(message=f"Room {room_ref} not found")

    def describe(self, session: Session, room: Room) -> RoomSummary:
        return RoomSummary(
            room=room,
            player_count=self._repo.player_count(session, room.id),
            ticket_count=self._repo.ticket_count(session, room.id),
        )

    @staticmethod
    def require_host(room: Room, host_id: str, action: str = "manage this room") -> None:
        if not host_id or room.host_id != host_id:
            raise ForbiddenError(message=f"Only the host can {action}")

    def update_status(self, session: Session, room_id: str, host_id: str, status: str) -> Room:
        try:
            new_status = RoomStatus(status)
        except ValueError as exc:
            raise ValidationError(
                message="Invalid status",
                details={"status": ["Must be one of waiting|active|completed"]},
            ) from exc

        room = self.get_room(session, room_id)
        self.require_host(room, host_id)

        if room.status == RoomStatus.COMPLETED.value and new_status is not RoomStatus.COMPLETED:
            raise ConflictError(message="Game has already ended")

        room.status = new_status.value
        if new_status is RoomStatus.ACTIVE and room.started_at is None:
            room.started_at = utcnow()
        elif new_status is RoomStatus.COMPLETED and room.ended_at is None:
            room.ended_at = utcnow()

        session.flush()
        logger.info("Room %s status -> %s", room.id, room.status)
        return room

    def start_if_waiting(self, session: Session, room: Room) -> None:
        if room.status == RoomStatus.WAITING.value:
            room.status = RoomStatus.ACTIVE.value
            room.started_at = utcnow()
            session.flush()
            logger.info("Room %s started", room.id)
