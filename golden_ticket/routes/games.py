"""Per-game status, draw info, results and progress routes (controllers)."""

from __future__ import annotations

from flask import Blueprint, request

from golden_ticket.errors import NotFoundError
from golden_ticket.schemas.api import (
    AggregateStatusSchema,
    CachedResultSchema,
    DrawInfoSchema,
    GameProgressSchema,
    ProgressUpdateSchema,
)
from golden_ticket.services.registry import get_services
from golden_ticket.utils.dates import draw_date_arg
from golden_ticket.utils.responses import ok

games_bp = Blueprint("games", __name__, url_prefix="/games")

_status_schema = AggregateStatusSchema()
_draw_info_schema = DrawInfoSchema()
_result_schema = CachedResultSchema()
_progress_schema = GameProgressSchema()
_progresses_schema = GameProgressSchema(many=True)
_progress_update_schema = ProgressUpdateSchema()


@games_bp.get("")
def list_games():
    services = get_services()
    return ok(
        [
            {
                "game_name": rule.game_name,
                "regular_balls_drawn": rule.regular_balls_drawn,
                "draw_schedule": rule.draw_schedule,
                "prize_tier_format": rule.prize_tier_format,
            }
            for rule in services.rules.list_all()
        ]
    )


@games_bp.get("/<game>/status")
def game_status(game: str):
    services = get_services()
    services.rules.get(game)
    user_id = services.auth.require_user()
    return ok(_status_schema.dump(services.sync.aggregate_status(user_id, game)))


@games_bp.get("/<game>/draw-info")
def draw_info(game: str):
    services = get_services()
    services.rules.get(game)

    if request.args.get("refresh") in ("1", "true"):
        info = services.draw_info.refresh(game)
    else:
        raw_date = request.args.get("draw_date")
        info = services.draw_info.get(game, draw_date_arg(raw_date) if raw_date else None)

    if info is None:
        raise NotFoundError(message=f"No draw info cached for {game}")
    return ok(_draw_info_schema.dump(info))


@games_bp.get("/<game>/results/<draw_date>")
def get_result(game: str, draw_date: str):
    services = get_services()
    day = draw_date_arg(draw_date)

    result = services.results.get(game, day)
    if result is None or (not result.has_numbers and request.args.get("fetch") in ("1", "true")):
        result = services.results.fetch_and_cache(game, day) or result
    if result is None:
        raise NotFoundError(message=f"No result for {game} / {draw_date}")
    return ok(_result_schema.dump(result))


@games_bp.post("/<game>/results/<draw_date>/seen")
def mark_result_seen(game: str, draw_date: str):
    cleared = get_services().results.mark_seen(game, draw_date_arg(draw_date))
    return ok({"cleared": cleared})


@games_bp.get("/progress")
def list_progress():
    services = get_services()
    user_id = services.auth.require_user()
    return ok(
        {
            "total_score": services.progress.total_score(user_id),
            "games": _progresses_schema.dump(services.progress.list_progress(user_id)),
            "followed": services.sync.followed_games(user_id),
        }
    )


@games_bp.post("/<game>/progress")
def update_progress(game: str):
    services = get_services()
    services.rules.get(game)
    user_id = services.auth.require_user()
    data = _progress_update_schema.load(request.get_json(silent=True) or {})
    progress = services.progress.upsert_progress(
        user_id,
        game,
        score_to_add=data["score_to_add"],
        awards_to_add=data.get("awards_to_add"),
        statistics=data.get("statistics"),
    )
    return ok(_progress_schema.dump(progress))


@games_bp.post("/<game>/activate")
def activate_game(game: str):
    services = get_services()
    services.rules.get(game)
    user_id = services.auth.require_user()
    changed = services.progress.activate(user_id, game)
    return ok({"game_name": game, "active": True, "changed": changed})


@games_bp.post("/<game>/deactivate")
def deactivate_game(game: str):
    services = get_services()
    user_id = services.auth.require_user()
    count = services.progress.deactivate(user_id, game)
    return ok({"game_name": game, "active": False, "changed": count > 0})
