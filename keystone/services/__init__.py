from keystone.services.achievements import AchievementEngine, catalog, default_engine
from keystone.services.completions import ToggleResult, toggle_completion
from keystone.services.stats import get_stats, refresh_progression
from keystone.services.week_engine import (
    create_past_week,
    current_week_view,
    delete_week,
    get_or_create_current_week,
    week_history,
)

__all__ = [
    "AchievementEngine",
    "catalog",
    "default_engine",
    "ToggleResult",
    "toggle_completion",
    "get_stats",
    "refresh_progression",
    "create_past_week",
    "current_week_view",
    "delete_week",
    "get_or_create_current_week",
    "week_history",
]
