"""Schemas for number calling."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class CallNumberRequestSchema(Schema):
    host_id = fields.Str(required=True, validate=validate.Length(min=1))
    number = fields.Integer(required=True, strict=True, validate=validate.Range(min=1, max=90))


class CalledNumberSchema(Schema):
    number = fields.Int()
    called_at = fields.DateTime()
    called_by = fields.Str()


class CalledNumbersSchema(Schema):
    numbers = fields.List(fields.Int())
    count = fields.Int()
