"""Marshmallow schemas for rooms."""

from __future__ import annotations

from marshmallow import Schema, fields, pre_load, validate

ROOM_CODE_PATTERN = r"^[A-Z0-9]{6}$"


class RoomCreateSchema(Schema):
    """Validate create Room payload."""

    host_id = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    room_code = fields.Str(
        required=False,
        load_default=None,
        allow_none=True,
        validate=validate.Regexp(ROOM_CODE_PATTERN, error="Must be 6 letters or digits"),
    )

    @pre_load
    def _upper_code(self, data, **kwargs):  # type: ignore[no-untyped-def]
        code = data.get("room_code") if isinstance(data, dict) else None
        if isinstance(code, str):
            data = {**data, "room_code": code.strip().upper()}
        return data


class RoomStatusUpdateSchema(Schema):
    host_id = fields.Str(required=True, validate=validate.Length(min=1))
    status = fields.Str(required=True, validate=validate.OneOf(["waiting", "active", "completed"]))


class RoomSchema(Schema):
    """Serialize a RoomSummary (room plus counts)."""

    id = fields.Str(attribute="room.id")
    room_code = fields.Str(attribute="room.room_code")
    host_id = fields.Str(attribute="room.host_id")
    status = fields.Str(attribute="room.status")
    created_at = fields.DateTime(attribute="room.created_at")
    started_at = fields.DateTime(attribute="room.started_at", allow_none=True)
    ended_at = fields.DateTime(attribute="room.ended_at", allow_none=True)

    player_count = fields.Int()
    ticket_count = fields.Int()
    has_started = fields.Bool()
    is_active = fields.Bool()
