"""Pure-logic engines for KidRewards (no Home Assistant imports)."""

from .badge_engine import BadgeEngine
from .reward_engine import (
    AwardResult,
    DailyLimitBelowTodayError,
    RewardState,
    UndoResult,
    UnknownActivityError,
)

__all__ = [
    "AwardResult",
    "BadgeEngine",
    "DailyLimitBelowTodayError",
    "RewardState",
    "UndoResult",
    "UnknownActivityError",
]
