# Overview: JSON request/response helpers shared by the API blueprints.

from __future__ import annotations

from flask import current_app, request

from .time_utils import to_display_string, utcnow
from .validation import ValidationError


def display_timestamp() -> str:
    """Response time rendered in DISPLAY_TIMEZONE, en-US style (not ISO)."""
    return to_display_string(utcnow(), current_app.config["DISPLAY_TIMEZONE"])


def envelope(success: bool, message: str, *, data=None, count: int | None = None, **extra) -> dict:
    """
    Standard body for every non-auth endpoint:
    {success, message, data?, count?, timestamp}
    """
    body = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if count is not None:
        body["count"] = count
    body.update(extra)
    body["timestamp"] = display_timestamp()
    return body


def auth_body(success: bool, message: str, *, data: dict | None = None) -> dict:
    """Auth endpoints answer {success, message, data?} without a timestamp."""
    body = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    return body


def json_body() -> dict:
    """Request JSON as a dict; a missing body reads as {}."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload
