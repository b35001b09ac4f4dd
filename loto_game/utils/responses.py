"""Helpers for the ``{success, data, error}`` JSON envelope."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def ok(data: Any, status_code: int = 200, message: str | None = None) -> tuple[Response, int]:
    """Success response."""

    body: dict[str, Any] = {"success": True, "data": data, "error": None}
    if message:
        body["message"] = message
    return jsonify(body), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> tuple[Response, int]:
    """Error response."""

    return (
        jsonify(
            {
                "success": False,
                "data": None,
                "error": {"code": code, "message": message, "details": details},
            }
        ),
        status_code,
    )
