from keystone.crud.achievements import create_achievement, find_achievement, list_achievements
from keystone.crud.completions import (
    completion_totals,
    count_week_completions,
    create_completion,
    delete_completion,
    find_completion,
    list_week_completions,
)
from keystone.crud.habits import (
    create_habit,
    find_habit,
    find_habits_by_ids,
    list_active_habits,
    list_habits,
    next_sort_order,
)
from keystone.crud.stats import get_or_create_stats, get_stats, increment_user_stats
from keystone.crud.streaks import best_current_streak, get_streak, list_streaks, upsert_streak
from keystone.crud.users import get_user, get_user_by_email, upsert_user
from keystone.crud.weeks import (
    add_snapshot,
    count_weeks,
    create_week,
    delete_week,
    find_snapshot,
    find_user_week,
    find_week,
    get_score,
    list_snapshots,
    list_weeks,
    lock_week,
    upsert_score,
    week_percentages_before,
)
from keystone.crud.xp_log import log_xp

__all__ = [
    "get_user",
    "get_user_by_email",
    "upsert_user",
    "find_habit",
    "find_habits_by_ids",
    "list_active_habits",
    "list_habits",
    "next_sort_order",
    "create_habit",
    "find_week",
    "find_user_week",
    "lock_week",
    "create_week",
    "delete_week",
    "list_snapshots",
    "find_snapshot",
    "add_snapshot",
    "get_score",
    "upsert_score",
    "list_weeks",
    "count_weeks",
    "week_percentages_before",
    "find_completion",
    "create_completion",
    "delete_completion",
    "count_week_completions",
    "completion_totals",
    "list_week_completions",
    "get_stats",
    "get_or_create_stats",
    "increment_user_stats",
    "get_streak",
    "upsert_streak",
    "list_streaks",
    "best_current_streak",
    "find_achievement",
    "create_achievement",
    "list_achievements",
    "log_xp",
]
