"""ORM models."""

from loto_game.models.called_number import CalledNumber
from loto_game.models.room import Room, RoomStatus
from loto_game.models.ticket import Ticket

__all__ = ["CalledNumber", "Room", "RoomStatus", "Ticket"]
