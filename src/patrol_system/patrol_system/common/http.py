from __future__ import annotations

import logging
from typing import Any

from flask import current_app, jsonify, request

from ..core.exceptions import DomainError, ValidationError

log = logging.getLogger(__name__)


def ok(data: Any = None, status: int = 200):
    return jsonify({"ok": True, "data": data}), status


def fail(error: str, status: int = 400, data: Any = None):
    body: dict[str, Any] = {"ok": False, "error": error}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def fail_from(exc: DomainError):
    return fail(str(exc), exc.status_code)


def fail_unexpected(exc: Exception, action: str):
    log.exception("Unexpected error while %s", action)
    if current_app.config.get("DEBUG"):
        return fail(f"Internal server error: {exc}", 500)
    return fail("Internal server error", 500)


def json_body() -> dict:
    """The request's JSON object; an absent or unparsable body reads as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
