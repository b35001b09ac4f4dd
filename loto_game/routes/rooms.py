"""Room routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from loto_game.db import get_session
from loto_game.routes._services import room_service, ticket_service
from loto_game.schemas.room import RoomCreateSchema, RoomSchema, RoomStatusUpdateSchema
from loto_game.schemas.ticket import JoinRequestSchema, PlayerStatusSchema, TicketSchema
from loto_game.utils.responses import ok

rooms_bp = Blueprint("rooms", __name__)

_create_schema = RoomCreateSchema()
_status_schema = RoomStatusUpdateSchema()
_join_schema = JoinRequestSchema()
_room_schema = RoomSchema()
_ticket_schema = TicketSchema()
_tickets_schema = TicketSchema(many=True)
_player_status_schema = PlayerStatusSchema()


@rooms_bp.post("/rooms")
def create_room():
    """Create a new room hosted by ``host_id``."""

    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    session = get_session()
    service = room_service()
    room = service.create_room(session, host_id=str(data["host_id"]), room_code=data.get("room_code"))

    return ok({"room": _room_schema.dump(service.describe(session, room))}, status_code=201)


@rooms_bp.get("/rooms/<room_id>")
def get_room(room_id: str):
    session = get_session()
    service = room_service()
    room = service.get_room(session, room_id)
    return ok({"room": _room_schema.dump(service.describe(session, room))})


@rooms_bp.get("/rooms/code/<code>")
def get_room_by_code(code: str):
    session = get_session()
    service = room_service()
    room = service.get_room_by_code(session, code)
    return ok({"room": _room_schema.dump(service.describe(session, room))})


@rooms_bp.patch("/rooms/<room_id>/status")
def update_room_status(room_id: str):
    payload = request.get_json(silent=True) or {}
    data = _status_schema.load(payload)

    session = get_session()
    service = room_service()
    room = service.update_status(session, room_id, host_id=str(data["host_id"]), status=str(data["status"]))
    return ok({"room": _room_schema.dump(service.describe(session, room))})


@rooms_bp.post("/rooms/<room_ref>/join")
def join_room(room_ref: str):
    """Join by room id or code; the first join issues the player's ticket."""

    payload = request.get_json(silent=True) or {}
    data = _join_schema.load(payload)

    session = get_session()
    result = ticket_service().join_room(
        session,
        room_ref,
        player_id=str(data["player_id"]),
        player_name=data.get("player_name"),
    )

    summary = room_service().describe(session, result.room)
    body = {
        "room": _room_schema.dump(summary),
        "ticket": _ticket_schema.dump(result.ticket),
        "is_new_ticket": result.is_new_ticket,
    }
    return ok(body, status_code=201 if result.is_new_ticket else 200)


@rooms_bp.get("/rooms/<room_id>/tickets")
def list_room_tickets(room_id: str):
    tickets = ticket_service().list_room_tickets(get_session(), room_id)
    return ok({"tickets": _tickets_schema.dump(tickets), "count": len(tickets)})


@rooms_bp.get("/rooms/<room_id>/players/<player_id>/ticket")
def get_player_ticket(room_id: str, player_id: str):
    ticket = ticket_service().get_player_ticket(get_session(), room_id, player_id)
    return ok({"ticket": _ticket_schema.dump(ticket)})


@rooms_bp.get("/rooms/<room_id>/players/<player_id>/win")
def check_player_win(room_id: str, player_id: str):
    status = ticket_service().check_player(get_session(), room_id, player_id)
    return ok(_player_status_schema.dump(status))
