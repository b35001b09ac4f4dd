"""Called-number routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from loto_game.db import get_session
from loto_game.routes._services import call_service
from loto_game.schemas.called_number import CalledNumberSchema, CalledNumbersSchema, CallNumberRequestSchema
from loto_game.utils.responses import ok

numbers_bp = Blueprint("numbers", __name__)

_request_schema = CallNumberRequestSchema()
_called_schema = CalledNumberSchema()
_list_schema = CalledNumbersSchema()


@numbers_bp.post("/rooms/<room_id>/numbers")
def call_number(room_id: str):
    """Host calls the next number."""

    payload = request.get_json(silent=True) or {}
    data = _request_schema.load(payload)

    called = call_service().call_number(
        get_session(), room_id, host_id=str(data["host_id"]), number=int(data["number"])
    )
    return ok(_called_schema.dump(called), status_code=201)


@numbers_bp.get("/rooms/<room_id>/numbers")
def list_numbers(room_id: str):
    numbers = call_service().list_called(get_session(), room_id)
    return ok(_list_schema.dump({"numbers": numbers, "count": len(numbers)}))
