# Overview: Error-translation decorators for API routes.

from __future__ import annotations

from functools import wraps

from flask import current_app

from .extensions import db
from .responses import auth_body, envelope
from .validation import ConflictError, NotFoundError, UnauthorizedError, ValidationError


def _status_for(exc: Exception) -> int | None:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, UnauthorizedError):
        return 401
    if isinstance(exc, (ValidationError, ConflictError)):
        return 400
    return None


def envelope_errors(log_message: str, *, auth: bool = False):
    """
    Translate service exceptions into response bodies.

    - ValidationError / InsufficientStockError / ConflictError -> 400
    - NotFoundError -> 404
    - UnauthorizedError -> 401
    - anything else -> logged with traceback, generic 500

    The session is rolled back on every failure so no partial write survives.
    auth=True uses the auth body shape (no timestamp).
    """
    make_body = auth_body if auth else envelope

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except Exception as exc:
                db.session.rollback()
                status = _status_for(exc)
                if status is None:
                    current_app.logger.exception(log_message)
                    return make_body(False, "Internal server error"), 500
                return make_body(False, str(exc)), status

        return decorated_function
    return decorator
