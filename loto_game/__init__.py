"""Flask application package for hosting Lo To rooms."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: Config values applied after the environment config,
            e.g. ``{"DATABASE_URL": "sqlite:///test.db"}``.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from loto_game.config import get_config
    from loto_game.db import init_db
    from loto_game.error_handlers import register_error_handlers
    from loto_game.logging_config import configure_logging
    from loto_game.routes.health import health_bp
    from loto_game.routes.numbers import numbers_bp
    from loto_game.routes.rooms import rooms_bp
    from loto_game.routes.tickets import tickets_bp

    app = Flask(__name__)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(rooms_bp, url_prefix="/api")
    app.register_blueprint(numbers_bp, url_prefix="/api")
    app.register_blueprint(tickets_bp, url_prefix="/api")

    return app
