"""Sign-in / sign-out routes (controllers). No business logic here."""

from __future__ import annotations

import logging

from flask import Blueprint, request

from golden_ticket.errors import RemoteError
from golden_ticket.schemas.api import LoginRequestSchema, RegisterRequestSchema
from golden_ticket.services.registry import get_services
from golden_ticket.utils.responses import ok

logger = logging.getLogger(__name__)

session_bp = Blueprint("session", __name__, url_prefix="/session")

_login_schema = LoginRequestSchema()
_register_schema = RegisterRequestSchema()


@session_bp.post("/login")
def login():
    data = _login_schema.load(request.get_json(silent=True) or {})
    services = get_services()

    auth = services.auth.login(data["username"], data["password"])

    # Sign-in stands even if the cache warm-up fails; the UI can retry a refresh.
    synced: list[dict] = []
    sync_error = None
    try:
        for window in services.sync.on_sign_in(auth.user_id, data.get("game_name")):
            synced.append(
                {
                    "game_name": window.game_name,
                    "next_draw_date": window.next_draw_date.isoformat() if window.next_draw_date else None,
                    "last_draw_date": window.last_draw_date.isoformat() if window.last_draw_date else None,
                    "polling": window.polling,
                }
            )
    except RemoteError as exc:
        logger.warning("Post sign-in sync failed: %s", exc)
        sync_error = exc.code

    return ok(
        {
            "user_id": auth.user_id,
            "account_status": auth.account_status,
            "membership_level": auth.membership_level,
            "min_app_version": auth.min_app_version,
            "synced": synced,
            "sync_error": sync_error,
        }
    )


@session_bp.post("/register")
def register():
    data = _register_schema.load(request.get_json(silent=True) or {})
    outcome = get_services().auth.register(
        data["username"],
        data["password"],
        data["email"],
        data.get("first_name", ""),
        data.get("last_name", ""),
    )
    return ok(
        {
            "status": outcome.status,
            "message": outcome.message,
            "user_id": outcome.user_id,
            "verification_url": outcome.verification_url,
        },
        status_code=201 if outcome.succeeded else 200,
    )


@session_bp.post("/logout")
def logout():
    services = get_services()
    services.sync.on_sign_out()
    services.auth.sign_out()
    return ok({"signed_in": False})
