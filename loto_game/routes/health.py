"""Health check routes."""

from __future__ import annotations

import logging

from flask import Blueprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from loto_game.db import get_session
from loto_game.utils.responses import fail, ok

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Report process and database liveness."""

    try:
        get_session().execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return fail("database_unavailable", "Database unavailable", 503)

    return ok({"status": "ok", "database": "ok"})
