"""Health check routes."""

from __future__ import annotations

from flask import Blueprint

from golden_ticket.services.registry import get_services
from golden_ticket.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint."""

    services = get_services()
    return ok(
        {
            "status": "ok",
            "store_open": services.store.is_open,
            "signed_in": services.auth.session.signed_in,
            "polling": services.poller.is_running,
        }
    )
