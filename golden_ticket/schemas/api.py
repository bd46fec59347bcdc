"""Schemas for the local HTTP surface (request bodies in, records out)."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class LoginRequestSchema(Schema):
    username = fields.String(required=True, validate=validate.Length(min=1, max=200))
    password = fields.String(required=True, validate=validate.Length(min=1), load_only=True)
    game_name = fields.String(required=False, load_default=None)


class RegisterRequestSchema(Schema):
    username = fields.String(required=True, validate=validate.Length(min=1, max=200))
    password = fields.String(required=True, validate=validate.Length(min=1), load_only=True)
    email = fields.Email(required=True)
    first_name = fields.String(required=False, load_default="")
    last_name = fields.String(required=False, load_default="")


class AddIngotSchema(Schema):
    ingot_id = fields.Integer(required=True, strict=True)


class ReplaceIngotSchema(Schema):
    collection_ingot_id = fields.Integer(required=True, strict=True)
    crucible_ingot_id = fields.Integer(required=True, strict=True)


class ForgeSubmitSchema(Schema):
    confirmed = fields.Boolean(required=True)


class ProgressUpdateSchema(Schema):
    score_to_add = fields.Integer(required=False, load_default=0)
    awards_to_add = fields.List(fields.String(), required=False, load_default=None)
    statistics = fields.Dict(keys=fields.String(), required=False, load_default=None)


class IngotSchema(Schema):
    ingot_id = fields.Integer()
    numbers = fields.List(fields.Integer())


class CrucibleSchema(Schema):
    id = fields.Integer(allow_none=True)
    name = fields.String(allow_none=True)
    status = fields.Function(lambda c: c.status.value)
    capacity = fields.Integer()
    slots_left = fields.Integer()
    draw_date = fields.Function(lambda c: c.scope.draw_date.isoformat())
    ingots = fields.List(fields.Nested(IngotSchema))
    last_modified = fields.DateTime(allow_none=True)


class DrawInfoSchema(Schema):
    game_name = fields.String()
    draw_date = fields.Date()
    total_combinations = fields.Integer(allow_none=True)
    user_request_limit = fields.Integer(allow_none=True)
    user_combinations_requested = fields.Integer(allow_none=True)
    archive_checksum = fields.String(allow_none=True)
    last_updated = fields.DateTime(allow_none=True)


class CachedResultSchema(Schema):
    game_name = fields.String()
    draw_date = fields.Date()
    winning_numbers = fields.List(fields.Integer(), allow_none=True)
    bonus_number = fields.Integer(allow_none=True)
    total_combinations = fields.Integer(allow_none=True)
    odds = fields.Dict(keys=fields.String(), values=fields.Float(allow_none=True))
    user_score = fields.Integer(allow_none=True)
    new_draw_flag = fields.Boolean()
    win_id = fields.String(allow_none=True)
    archive_password = fields.String(allow_none=True)
    archive_checksum = fields.String(allow_none=True)
    fetched_at = fields.DateTime(allow_none=True)


class AggregateStatusSchema(Schema):
    needs_submission = fields.Boolean()
    has_unseen_results = fields.Boolean()
    next_draw_date = fields.Date(allow_none=True)
    last_draw_date = fields.Date(allow_none=True)


class GameProgressSchema(Schema):
    user_id = fields.Integer()
    game_name = fields.String()
    game_score = fields.Integer()
    game_awards = fields.List(fields.String())
    game_statistics = fields.Dict()
    membership_level = fields.String(allow_none=True)
    last_played = fields.DateTime(allow_none=True)
