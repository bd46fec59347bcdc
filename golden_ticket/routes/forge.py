"""Forge routes: crucible view, smelting and crucible mutations (controllers)."""

from __future__ import annotations

from flask import Blueprint, request

from golden_ticket.domain.crucible import MutationResult
from golden_ticket.domain.models import DrawScope
from golden_ticket.schemas.api import (
    AddIngotSchema,
    CrucibleSchema,
    ForgeSubmitSchema,
    IngotSchema,
    ReplaceIngotSchema,
)
from golden_ticket.services.registry import get_services
from golden_ticket.utils.dates import draw_date_arg
from golden_ticket.utils.responses import ok, rejected

forge_bp = Blueprint("forge", __name__, url_prefix="/games/<game>/draws/<draw_date>/forge")

_crucible_schema = CrucibleSchema()
_ingot_schema = IngotSchema()
_ingots_schema = IngotSchema(many=True)
_add_schema = AddIngotSchema()
_replace_schema = ReplaceIngotSchema()
_submit_schema = ForgeSubmitSchema()


def _scope(game: str, draw_date: str) -> DrawScope:
    services = get_services()
    user_id = services.auth.require_user()
    day = draw_date_arg(draw_date)
    services.rules.get(game)
    return DrawScope(user_id=user_id, game_name=game, draw_date=day)


def _mutation_response(result: MutationResult):
    crucible = _crucible_schema.dump(result.crucible) if result.crucible is not None else None
    if not result.accepted:
        return rejected(result.reason.value if result.reason else "rejected", {"crucible": crucible})
    data = {"crucible": crucible}
    if result.returned is not None:
        data["returned"] = _ingot_schema.dump(result.returned)
    return ok(data)


@forge_bp.get("")
def forge_view(game: str, draw_date: str):
    """Everything the forge screen needs for one draw."""

    scope = _scope(game, draw_date)
    services = get_services()

    crucible = services.forge.get_or_create(scope)
    quota = services.smelter.quota(game, scope.draw_date)
    cutoff = services.rules.cutoff(game, scope.draw_date)

    return ok(
        {
            "crucible": _crucible_schema.dump(crucible),
            "collection": _ingots_schema.dump(services.collection.list(scope)),
            "quota": {"limit": quota.limit, "used": quota.used, "remaining": quota.remaining()},
            "cutoff": cutoff.isoformat() if cutoff else None,
            "past_cutoff": services.rules.is_past_cutoff(game, scope.draw_date),
        }
    )


@forge_bp.post("/smelt")
def smelt(game: str, draw_date: str):
    scope = _scope(game, draw_date)
    result = get_services().smelter.smelt(scope)
    if not result.accepted:
        return rejected(result.reason.value if result.reason else "rejected", {"remaining": result.remaining})
    return ok(
        {"ingot": _ingot_schema.dump(result.ingot), "remaining": result.remaining},
        status_code=201,
    )


@forge_bp.post("/ingots")
def add_ingot(game: str, draw_date: str):
    scope = _scope(game, draw_date)
    data = _add_schema.load(request.get_json(silent=True) or {})
    return _mutation_response(get_services().forge.add_ingot(scope, data["ingot_id"]))


@forge_bp.post("/replace")
def replace_ingot(game: str, draw_date: str):
    scope = _scope(game, draw_date)
    data = _replace_schema.load(request.get_json(silent=True) or {})
    result = get_services().forge.replace_ingot(scope, data["collection_ingot_id"], data["crucible_ingot_id"])
    return _mutation_response(result)


@forge_bp.post("/submit")
def submit(game: str, draw_date: str):
    scope = _scope(game, draw_date)
    data = _submit_schema.load(request.get_json(silent=True) or {})
    return _mutation_response(get_services().forge.forge(scope, confirmed=data["confirmed"]))
