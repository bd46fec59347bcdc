"""HTTP client for the Golden Ticket backend.

Every call maps transport failures onto the ``RemoteError`` hierarchy and
decodes 2xx bodies through a marshmallow schema. GET requests are retried by
the session's urllib3 ``Retry`` policy; POSTs are sent exactly once.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import requests
from marshmallow import Schema
from marshmallow import ValidationError as SchemaValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from golden_ticket.errors import (
    NotSignedInError,
    RemoteDecodeError,
    RemoteHTTPError,
    RemoteNetworkError,
    RemoteTimeoutError,
    SubmissionRejectedError,
)
from golden_ticket.schemas.remote import (
    CombinationGrant,
    CombinationGrantSchema,
    GameInfoPayload,
    GameInfoSchema,
    GameResultPayload,
    GameResultSchema,
    LoginPayload,
    LoginResponseSchema,
    RegisterOutcome,
    RegisterResponseSchema,
    SubmitOutcome,
    SubmitOutcomeSchema,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://governance.page/wp-json/apigold/v1"
SUBMIT_ACCEPTED_STATUSES = (200, 201)

_login_schema = LoginResponseSchema()
_register_schema = RegisterResponseSchema()
_game_info_schema = GameInfoSchema()
_game_result_schema = GameResultSchema()
_grant_schema = CombinationGrantSchema()
_submit_schema = SubmitOutcomeSchema()


def build_http_session(retries: int, backoff_factor: float = 0.3) -> requests.Session:
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return (resp.text or "").strip()[:200] or f"HTTP {resp.status_code}"


class GoldenTicketApi:
    """Remote endpoints used by the draw-cycle engine.

    The bearer token is held on the client and set by the auth service; every
    endpoint except login/register requires it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout_seconds: float = 15.0,
        result_timeout_seconds: float = 20.0,
        retries: int = 2,
        http: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._result_timeout = result_timeout_seconds
        self._http = http or build_http_session(retries)
        self._token: str | None = None

    # --- auth token ---

    def set_token(self, token: str | None) -> None:
        self._token = token or None

    def clear_token(self) -> None:
        self._token = None

    @property
    def has_token(self) -> bool:
        return self._token is not None

    # --- transport ---

    def _send(
        self,
        method: str,
        path: str,
        *,
        timeout: float,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        auth: bool = True,
    ) -> requests.Response:
        headers: dict[str, str] = {}
        if auth:
            if self._token is None:
                raise NotSignedInError("No bearer token available")
            headers["Authorization"] = f"Bearer {self._token}"

        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            resp = self._http.request(method, url, params=params, json=json, headers=headers, timeout=timeout)
        except requests.Timeout as exc:
            logger.warning("%s %s timed out after %ss", method, path, timeout)
            raise RemoteTimeoutError(details={"path": path}) from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc.__class__.__name__)
            raise RemoteNetworkError(details={"path": path, "reason": str(exc)}) from exc

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        if not 200 <= resp.status_code < 300:
            message = _error_message(resp)
            logger.warning("%s %s returned %s: %s", method, path, resp.status_code, message)
            raise RemoteHTTPError(resp.status_code, message, {"path": path})
        return resp

    @staticmethod
    def _decode(resp: requests.Response, schema: Schema, what: str) -> Any:
        try:
            body = resp.json()
        except ValueError as exc:
            raise RemoteDecodeError(f"Invalid JSON in {what} response") from exc
        try:
            return schema.load(body)
        except SchemaValidationError as exc:
            logger.warning("Invalid %s response: %s", what, exc.messages)
            raise RemoteDecodeError(f"Invalid {what} response", exc.messages) from exc

    # --- endpoints ---

    def login(self, username: str, password: str) -> LoginPayload:
        resp = self._send(
            "POST",
            "/login",
            timeout=self._timeout,
            json={"username": username, "password": password},
            auth=False,
        )
        try:
            body = resp.json()
        except ValueError as exc:
            raise RemoteDecodeError("Invalid JSON in login response") from exc
        if not isinstance(body, dict) or body.get("code") != "success":
            message = body.get("message") if isinstance(body, dict) else None
            raise RemoteHTTPError(resp.status_code, message or "Sign in failed.")
        return self._decode(resp, _login_schema, "login")

    def register(
        self,
        username: str,
        password: str,
        email: str,
        first_name: str = "",
        last_name: str = "",
    ) -> RegisterOutcome:
        resp = self._send(
            "POST",
            "/register",
            timeout=self._timeout,
            json={
                "username": username,
                "password": password,
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
            },
            auth=False,
        )
        return self._decode(resp, _register_schema, "register")

    def get_game_info(self, game_name: str) -> GameInfoPayload | None:
        """Next-draw info; None when the server answers with an empty body."""

        resp = self._send("GET", "/game-info", timeout=self._timeout, params={"game_name": game_name})
        if not resp.content:
            logger.warning("Game info response body is empty for %s", game_name)
            return None
        return self._decode(resp, _game_info_schema, "game-info")

    def get_game_result(self, game_name: str, draw_date: date) -> GameResultPayload | None:
        resp = self._send(
            "GET",
            "/game-result",
            timeout=self._result_timeout,
            params={"game_name": game_name, "draw_date": draw_date.isoformat()},
        )
        if not resp.content:
            logger.warning("Result response body is empty for %s / %s", game_name, draw_date.isoformat())
            return None
        return self._decode(resp, _game_result_schema, "game-result")

    def request_combination(self, game_name: str, draw_date: date, combination_number: int) -> CombinationGrant:
        resp = self._send(
            "POST",
            "/request-combination",
            timeout=self._timeout,
            json={
                "game_name": game_name,
                "draw_date": draw_date.isoformat(),
                "combination_number": combination_number,
            },
        )
        return self._decode(resp, _grant_schema, "request-combination")

    def submit_playcard(
        self,
        user_id: int,
        game_name: str,
        draw_date: date,
        play_card_id: int | None,
        ingot_ids: list[int],
    ) -> SubmitOutcome:
        """Lock a crucible remotely.

        Only 200 and 201 confirm the lock; any other 2xx raises
        ``RemoteHTTPError``. Raises ``SubmissionRejectedError`` when the body
        declares failure. A body that cannot be parsed counts as accepted.
        """

        resp = self._send(
            "POST",
            "/submit-playcard",
            timeout=self._result_timeout,
            json={
                "user_id": user_id,
                "game_name": game_name,
                "draw_date": draw_date.isoformat(),
                "play_card_id": play_card_id,
                "ingot_ids": list(ingot_ids),
            },
        )
        if resp.status_code not in SUBMIT_ACCEPTED_STATUSES:
            logger.warning("submit-playcard answered %s; not a lock confirmation", resp.status_code)
            raise RemoteHTTPError(
                resp.status_code, f"Unexpected submit status {resp.status_code}", {"path": "/submit-playcard"}
            )

        try:
            outcome: SubmitOutcome = self._decode(resp, _submit_schema, "submit-playcard")
        except RemoteDecodeError:
            logger.warning("Unparsable submit-playcard body (status %s); treating as accepted", resp.status_code)
            return SubmitOutcome(status="success", message=None)

        if not outcome.succeeded:
            raise SubmissionRejectedError(outcome.message or "Server indicated submission failed")
        return outcome

    def close(self) -> None:
        self._http.close()
