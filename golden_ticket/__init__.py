"""Flask application package."""

from __future__ import annotations

import atexit

from dotenv import load_dotenv
from flask import Flask


def create_app(config_overrides: dict | None = None, api=None, clock=None) -> Flask:
    """Application factory.

    Args:
        config_overrides: values applied on top of the environment config.
        api: remote client to use instead of one built from config.
        clock: ``() -> aware datetime`` used by every service.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from golden_ticket.config import get_config
    from golden_ticket.db import init_db
    from golden_ticket.error_handlers import register_error_handlers
    from golden_ticket.logging_config import configure_logging
    from golden_ticket.routes.forge import forge_bp
    from golden_ticket.routes.games import games_bp
    from golden_ticket.routes.health import health_bp
    from golden_ticket.routes.session import session_bp
    from golden_ticket.services.registry import init_services
    from golden_ticket.utils.dates import utcnow

    app = Flask(__name__)
    app.config.from_object(get_config())
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config)
    store = init_db(app)
    services = init_services(app, store, api=api, clock=clock or utcnow)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(session_bp)
    app.register_blueprint(games_bp)
    app.register_blueprint(forge_bp)

    # The poller thread and the store belong to the process, not to a request.
    atexit.register(services.close)

    return app
