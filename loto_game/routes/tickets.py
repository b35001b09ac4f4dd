"""Standalone ticket routes."""

from __future__ import annotations

from flask import Blueprint

from loto_game.routes._services import ticket_service
from loto_game.schemas.ticket import TicketPreviewSchema
from loto_game.utils.responses import ok

tickets_bp = Blueprint("tickets", __name__)

_preview_schema = TicketPreviewSchema()


@tickets_bp.get("/tickets/preview")
def preview_ticket():
    """Generate a ticket without storing it."""

    return ok(_preview_schema.dump(ticket_service().preview_ticket()))
