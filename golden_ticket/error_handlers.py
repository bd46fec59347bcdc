"""Centralized error handlers.

Every failure leaves the app in the ``fail`` envelope. Remote failures keep
their own codes so the UI can tell "server unreachable" from "bad input".
"""

from __future__ import annotations

import logging

from flask import Flask, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from golden_ticket.errors import AppError, ConflictError, RemoteError, RemoteHTTPError, ValidationError
from golden_ticket.utils.responses import fail

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(RemoteError)
    def _handle_remote_error(exc: RemoteError):
        logger.warning("%s %s: remote failure %s", request.method, request.path, exc)
        details = exc.details
        if isinstance(exc, RemoteHTTPError):
            details = {**(details or {}), "upstream_status": exc.upstream_status}
        return fail(exc.code, exc.message, exc.status_code, details)

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        return fail(exc.code, exc.message, exc.status_code, exc.details)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        wrapped = ValidationError(details=exc.messages)
        return fail(wrapped.code, wrapped.message, wrapped.status_code, wrapped.details)

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        logger.info("Local store integrity error on %s", request.path, exc_info=exc)
        wrapped = ConflictError("Conflicting local store write", details=str(exc.orig) if exc.orig else str(exc))
        return fail(wrapped.code, wrapped.message, wrapped.status_code, wrapped.details)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(exc.code or 500)
        if status == 404:
            return fail("not_found", "Not found", 404)
        return fail("http_error", exc.description or "HTTP error", status, details={"name": exc.name})

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.path)
        return fail("internal_error", "Internal server error", 500)
