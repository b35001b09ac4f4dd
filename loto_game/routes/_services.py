"""Build services from the running app's configuration."""

from __future__ import annotations

from flask import current_app

from loto_game.services.call_service import CallService
from loto_game.services.room_service import RoomService
from loto_game.services.ticket_generator import TicketGenerator
from loto_game.services.ticket_service import TicketService


def room_service() -> RoomService:
    return RoomService(max_code_attempts=int(current_app.config["ROOM_CODE_MAX_ATTEMPTS"]))


def call_service() -> CallService:
    return CallService(room_service=room_service())


def ticket_service() -> TicketService:
    cfg = current_app.config
    return TicketService(
        generator=TicketGenerator(max_attempts=int(cfg["TICKET_MAX_ATTEMPTS"])),
        room_service=room_service(),
        max_attempts=int(cfg["JOIN_MAX_ATTEMPTS"]),
    )
