from keystone.models.base import Base
from keystone.models.enums import HabitStatus, HabitType, RankTier, XPSource
from keystone.models.habit import Habit
from keystone.models.habit_completion import HabitCompletion
from keystone.models.habit_streak import HabitStreak
from keystone.models.user import User
from keystone.models.user_achievement import UserAchievement
from keystone.models.user_stats import UserStats
from keystone.models.week import Week, WeekHabitSnapshot, WeekScore
from keystone.models.xp_log import XPLog

__all__ = [
    "Base",
    "HabitStatus",
    "HabitType",
    "RankTier",
    "XPSource",
    "User",
    "Habit",
    "Week",
    "WeekHabitSnapshot",
    "WeekScore",
    "HabitCompletion",
    "HabitStreak",
    "UserStats",
    "UserAchievement",
    "XPLog",
]
