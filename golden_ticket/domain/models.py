# domain/models.py
"""Plain records passed between repositories, services and routes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime

# Named decimal odds columns reported per draw, in prize-tier order.
ODDS_TIERS: tuple[str, ...] = (
    "odds_6_6",
    "odds_5_6_plus",
    "odds_5_6",
    "odds_4_6",
    "odds_3_6",
    "odds_2_6_plus",
    "odds_2_6",
    "odds_any_prize",
)


@dataclass(frozen=True)
class DrawScope:
    """The (user, game, draw date) every collection and crucible belongs to."""

    user_id: int
    game_name: str
    draw_date: date

    def __str__(self) -> str:
        return f"{self.user_id}/{self.game_name}/{self.draw_date.isoformat()}"


@dataclass(frozen=True)
class GameRuleRecord:
    game_name: str
    total_numbers: int
    regular_balls_drawn: int
    bonus_ball_pool: int
    bonus_balls_drawn: int
    draw_schedule: str
    prize_tier_format: str
    official_odds: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DrawInfo:
    game_name: str
    draw_date: date
    total_combinations: int | None = None
    user_request_limit: int | None = None
    user_combinations_requested: int | None = None
    archive_checksum: str | None = None
    last_updated: datetime | None = None


@dataclass(frozen=True)
class Ingot:
    """A server-issued combination, identified by its server id."""

    ingot_id: int
    numbers: tuple[int, ...]

    def __str__(self) -> str:
        return f"Ingot#{self.ingot_id}: {', '.join(str(n) for n in self.numbers)}"


@dataclass(frozen=True)
class CachedResult:
    game_name: str
    draw_date: date
    winning_numbers: tuple[int, ...] | None = None
    bonus_number: int | None = None
    total_combinations: int | None = None
    odds: Mapping[str, float | None] = field(default_factory=dict)
    user_score: int | None = None
    new_draw_flag: bool = False
    win_id: str | None = None
    archive_password: str | None = None
    archive_checksum: str | None = None
    fetched_at: datetime | None = None

    @property
    def has_numbers(self) -> bool:
        return bool(self.winning_numbers)


@dataclass(frozen=True)
class GameProgress:
    user_id: int
    game_name: str
    game_score: int
    game_awards: tuple[str, ...]
    game_statistics: Mapping[str, object]
    membership_level: str | None
    last_played: datetime | None
