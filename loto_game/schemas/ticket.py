"""Schemas for joining rooms and returning tickets."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class JoinRequestSchema(Schema):
    player_id = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    player_name = fields.Str(
        required=False, load_default=None, allow_none=True, validate=validate.Length(max=255)
    )


class TicketSchema(Schema):
    id = fields.Str()
    room_id = fields.Str()
    player_id = fields.Str()
    player_name = fields.Str(allow_none=True)
    ticket_data = fields.List(fields.List(fields.Integer(allow_none=True)))
    ticket_hash = fields.Str()
    created_at = fields.DateTime()


class TicketPreviewSchema(Schema):
    ticket_data = fields.Method("_rows")
    ticket_hash = fields.Str()
    text = fields.Str()

    def _rows(self, obj):  # type: ignore[no-untyped-def]
        return [list(row) for row in obj.grid]


class WinSchema(Schema):
    has_won = fields.Bool()
    pattern = fields.Method("_pattern", allow_none=True)
    completed_rows = fields.List(fields.Int())

    def _pattern(self, obj):  # type: ignore[no-untyped-def]
        return obj.pattern.value if obj.pattern is not None else None


class ProgressSchema(Schema):
    marked = fields.Int()
    total = fields.Int()
    percentage = fields.Int()


class NumbersToWinSchema(Schema):
    top_line = fields.Int()
    middle_line = fields.Int()
    bottom_line = fields.Int()
    full_house = fields.Int()


class PlayerStatusSchema(Schema):
    ticket = fields.Nested(TicketSchema)
    called_numbers = fields.List(fields.Int())
    win = fields.Nested(WinSchema)
    progress = fields.Nested(ProgressSchema)
    numbers_to_win = fields.Nested(NumbersToWinSchema)
