"""Sign-in state for the current user."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from golden_ticket.clients.api_client import GoldenTicketApi
from golden_ticket.errors import NotSignedInError
from golden_ticket.schemas.remote import RegisterOutcome
from golden_ticket.services.progress_service import ProgressService

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    user_id: int | None = None
    auth_token: str | None = None
    account_status: str | None = None
    membership_level: str | None = None
    min_app_version: str | None = None

    @property
    def signed_in(self) -> bool:
        return self.user_id is not None and bool(self.auth_token)

    def __repr__(self) -> str:
        # Never expose the token.
        return f"AuthSession(user_id={self.user_id!r}, signed_in={self.signed_in})"


class AuthService:
    def __init__(self, api: GoldenTicketApi, progress: ProgressService, default_game: str = "lotto649") -> None:
        self._api = api
        self._progress = progress
        self._default_game = default_game
        self.session = AuthSession()

    def require_user(self) -> int:
        if not self.session.signed_in or self.session.user_id is None:
            raise NotSignedInError()
        return self.session.user_id

    def login(self, username: str, password: str) -> AuthSession:
        payload = self._api.login(username, password)

        self._api.set_token(payload.auth_token)
        self.session = AuthSession(
            user_id=payload.user_id,
            auth_token=payload.auth_token,
            account_status=payload.account_status,
            membership_level=payload.membership_level,
            min_app_version=payload.min_app_version,
        )

        self._progress.record_profile(payload.user_id, payload.membership_level)
        self._progress.upsert_progress(
            payload.user_id, self._default_game, membership_level=payload.membership_level
        )
        logger.info("User %s signed in (status %s)", payload.user_id, payload.account_status)
        return self.session

    def register(
        self,
        username: str,
        password: str,
        email: str,
        first_name: str = "",
        last_name: str = "",
    ) -> RegisterOutcome:
        outcome = self._api.register(username, password, email, first_name, last_name)
        logger.info("Registration for %s: %s", username, outcome.status)
        return outcome

    def sign_out(self) -> None:
        user_id = self.session.user_id
        self._api.clear_token()
        self.session = AuthSession()
        logger.info("User %s signed out", user_id)
