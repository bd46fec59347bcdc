"""ORM models."""

from golden_ticket.models.cached_result import GameResultCache
from golden_ticket.models.crucible import IngotCrucible
from golden_ticket.models.draw_info import GameDrawInfo
from golden_ticket.models.game_rule import GameRule
from golden_ticket.models.ingot import IngotCollectionEntry
from golden_ticket.models.user_progress import UserActiveGame, UserGameProgress, UserProfile

__all__ = [
    "GameDrawInfo",
    "GameResultCache",
    "GameRule",
    "IngotCollectionEntry",
    "IngotCrucible",
    "UserActiveGame",
    "UserGameProgress",
    "UserProfile",
]
