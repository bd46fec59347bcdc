"""Built-in game rules seeded into the local store."""

from __future__ import annotations

from typing import Any

_LOTTO649_ODDS = {
    "6/6": "One in 13,983,816",
    "5/6+": "One in 2,330,636",
    "5/6": "One in 55,492",
    "4/6": "One in 1,033",
    "3/6": "One in 56.7",
    "2/6+": "One in 81.2",
    "2/6": "One in 8.3",
    "Any Prize": "One in 6.6",
}

GAME_RULES_DATA: list[dict[str, Any]] = [
    {
        "game_name": "lotto649",
        "total_numbers": 49,
        "regular_balls_drawn": 6,
        "bonus_ball_pool": 49,
        "bonus_balls_drawn": 1,
        "draw_schedule": "Wed 20:30 America/Edmonton,Sat 20:30 America/Edmonton",
        "prize_tier_format": "matches/6+",
        "official_odds": _LOTTO649_ODDS,
    },
    {
        "game_name": "LottoMax",
        "total_numbers": 50,
        "regular_balls_drawn": 7,
        "bonus_ball_pool": 50,
        "bonus_balls_drawn": 1,
        "draw_schedule": "Tue 20:30 America/Edmonton,Fri 20:30 America/Edmonton",
        "prize_tier_format": "matches/7+",
        "official_odds": {},
    },
    {
        "game_name": "DailyGrand",
        "total_numbers": 49,
        "regular_balls_drawn": 5,
        "bonus_ball_pool": 7,
        "bonus_balls_drawn": 1,
        "draw_schedule": "Mon 20:30 America/Edmonton,Thu 20:30 America/Edmonton",
        "prize_tier_format": "matches/5 + GN/1",
        "official_odds": {},
    },
]
