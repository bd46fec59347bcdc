"""Schemas for decoding remote API responses.

Each schema loads a JSON body into a frozen dataclass, so nothing past the
HTTP client ever handles a raw dict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginPayload:
    user_id: int
    auth_token: str
    account_status: str | None = None
    membership_level: str | None = None
    min_app_version: str | None = None


@dataclass(frozen=True)
class RegisterOutcome:
    status: str
    message: str | None = None
    user_id: int | None = None
    verification_url: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class GameInfoPayload:
    draw_date: date
    total_combinations: int | None = None
    user_request_limit: int | None = None
    user_combinations_requested: int | None = None
    archive_checksum: str | None = None


@dataclass(frozen=True)
class GameResultPayload:
    winning_numbers: tuple[int, ...] = ()
    bonus_number: int | None = None
    total_combinations: int | None = None
    odds: dict[str, float | None] = field(default_factory=dict)
    user_score: int | None = None
    win_id: str | None = None
    archive_password: str | None = None
    archive_checksum: str | None = None


@dataclass(frozen=True)
class CombinationGrant:
    ingot_id: int
    numbers: tuple[int, ...]
    user_requests_count: int


@dataclass(frozen=True)
class SubmitOutcome:
    status: str | None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status in ("success", "playcard_submitted")


class _RemoteSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class _LoginDataSchema(_RemoteSchema):
    user_id = fields.Integer(required=True)
    auth_token = fields.String(required=True, validate=validate.Length(min=1))
    account_status = fields.String(required=False, allow_none=True, load_default=None)
    membership_level = fields.String(required=False, allow_none=True, load_default=None)
    app_version = fields.String(required=False, allow_none=True, load_default=None)


class LoginResponseSchema(_RemoteSchema):
    code = fields.String(required=True, validate=validate.Equal("success"))
    data = fields.Nested(_LoginDataSchema, required=True)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        payload = data["data"]
        return LoginPayload(
            user_id=payload["user_id"],
            auth_token=payload["auth_token"],
            account_status=payload.get("account_status"),
            membership_level=payload.get("membership_level"),
            min_app_version=payload.get("app_version"),
        )


class _RegisterDataSchema(_RemoteSchema):
    user_id = fields.Integer(required=False, allow_none=True, load_default=None)
    verification_url = fields.String(required=False, allow_none=True, load_default=None)


class RegisterResponseSchema(_RemoteSchema):
    status = fields.String(required=True)
    message = fields.String(required=False, allow_none=True, load_default=None)
    data = fields.Nested(_RegisterDataSchema, required=False, allow_none=True, load_default=None)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        extra = data.get("data") or {}
        return RegisterOutcome(
            status=data["status"],
            message=data.get("message"),
            user_id=extra.get("user_id"),
            verification_url=extra.get("verification_url"),
        )


class GameInfoSchema(_RemoteSchema):
    draw_date = fields.Date(required=True)
    total_combinations = fields.Integer(required=False, allow_none=True, load_default=None)
    user_request_limit = fields.Integer(required=False, allow_none=True, load_default=None)
    user_combinations_requested = fields.Integer(required=False, allow_none=True, load_default=None)
    archive_checksum = fields.String(required=False, allow_none=True, load_default=None)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return GameInfoPayload(**data)


class GameResultSchema(_RemoteSchema):
    winning_numbers = fields.List(fields.Integer(), required=False, allow_none=True, load_default=None)
    bonus_number = fields.Integer(required=False, allow_none=True, load_default=None)
    total_combinations = fields.Integer(required=False, allow_none=True, load_default=None)
    odds = fields.Dict(
        keys=fields.String(),
        values=fields.Float(allow_none=True),
        required=False,
        allow_none=True,
        load_default=None,
    )
    stored_score_results = fields.Dict(required=False, allow_none=True, load_default=None)
    calculated_score_for_draw = fields.Float(required=False, allow_none=True, load_default=None)
    user_score = fields.Float(required=False, allow_none=True, load_default=None)
    win_id = fields.String(required=False, allow_none=True, load_default=None)
    archive_password = fields.String(required=False, allow_none=True, load_default=None)
    archive_checksum = fields.String(required=False, allow_none=True, load_default=None)

    @staticmethod
    def _score(data: dict[str, Any]) -> int | None:
        # Precedence: stored total > calculated-for-draw > plain user_score.
        stored = data.get("stored_score_results") or {}
        source = stored.get("total_score")
        if source is None:
            source = data.get("calculated_score_for_draw")
        if source is None:
            source = data.get("user_score")
        if source is None:
            return None
        try:
            return round(float(source))
        except (TypeError, ValueError):
            logger.warning("Failed to parse score source: %r", source)
            return None

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return GameResultPayload(
            winning_numbers=tuple(data.get("winning_numbers") or ()),
            bonus_number=data.get("bonus_number"),
            total_combinations=data.get("total_combinations"),
            odds=dict(data.get("odds") or {}),
            user_score=self._score(data),
            win_id=data.get("win_id"),
            archive_password=data.get("archive_password"),
            archive_checksum=data.get("archive_checksum"),
        )


class CombinationGrantSchema(_RemoteSchema):
    combination_sequence_id = fields.Integer(required=True, strict=True)
    combination_numbers = fields.List(fields.Integer(), required=True, validate=validate.Length(min=1))
    # Authoritative post-request count; a missing or non-integer value fails the smelt.
    user_requests_count = fields.Integer(required=True, strict=True)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return CombinationGrant(
            ingot_id=data["combination_sequence_id"],
            numbers=tuple(data["combination_numbers"]),
            user_requests_count=data["user_requests_count"],
        )


class SubmitOutcomeSchema(_RemoteSchema):
    status = fields.String(required=False, allow_none=True, load_default=None)
    message = fields.String(required=False, allow_none=True, load_default=None)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return SubmitOutcome(status=data.get("status"), message=data.get("message"))
