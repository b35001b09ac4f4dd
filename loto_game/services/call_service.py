"""Host number calling."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from loto_game.errors import ConflictError, ValidationError
from loto_game.models.called_number import CalledNumber
from loto_game.models.room import RoomStatus
from loto_game.repositories.called_number_repository import CalledNumberRepository
from loto_game.services.room_service import RoomService

logger = logging.getLogger(__name__)

MIN_NUMBER = 1
MAX_NUMBER = 90


class CallService:
    def __init__(
        self,
        room_service: RoomService | None = None,
        repository: CalledNumberRepository | None = None,
    ) -> None:
        self._rooms = room_service or RoomService()
        self._repo = repository or CalledNumberRepository()

    def call_number(self, session: Session, room_id: str, host_id: str, number: int) -> CalledNumber:
        """Record a called number; the first call starts a waiting room."""

        if isinstance(number, bool) or not isinstance(number, int):
            raise ValidationError(message="Valid number is required", details={"number": ["Must be an integer"]})
        if number < MIN_NUMBER or number > MAX_NUMBER:
            raise ValidationError(
                message="Number must be between 1 and 90",
                details={"number": [f"Must be within {MIN_NUMBER}..{MAX_NUMBER}"]},
            )

        room = self._rooms.get_room(session, room_id)
        self._rooms.require_host(room, host_id, action="call numbers")

        if room.status == RoomStatus.COMPLETED.value:
            raise ConflictError(message="Game has already ended")

        if self._repo.is_called(session, room.id, number):
            raise ConflictError(message="This number has already been called", details={"number": number})

        self._rooms.start_if_waiting(session, room)
        called = self._repo.create(session, room_id=room.id, number=number, called_by=host_id)
        logger.info("Room %s called %d", room.id, number)
        return called

    def list_called(self, session: Session, room_id: str) -> list[int]:
        room = self._rooms.get_room(session, room_id)
        return self._repo.numbers_for_room(session, room.id)
