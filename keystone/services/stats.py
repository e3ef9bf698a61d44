from typing import Any, Dict

from sqlalchemy.orm import Session

from keystone import crud
from keystone.models import UserStats
from keystone.services.achievements import AchievementEngine, default_engine
from keystone.services.progression import progression_for_xp


def refresh_progression(db: Session, stats: UserStats, achievements: AchievementEngine = default_engine) -> list[str]:
    """Recompute the cached level/rank from total XP and persist them if they drifted."""
    progression = progression_for_xp(stats.total_xp)
    if progression["level"] == stats.level and progression["rank"] == stats.rank:
        return []

    stats.level = progression["level"]
    stats.rank = progression["rank"]
    db.flush()
    return achievements.check_level(db, stats.user_id, stats.level)


def get_stats(db: Session, user_id: int, achievements: AchievementEngine = default_engine) -> Dict[str, Any]:
    stats = crud.get_or_create_stats(db, user_id)
    refresh_progression(db, stats, achievements)
    progression = progression_for_xp(stats.total_xp)

    return {
        "user_id": stats.user_id,
        "total_xp": stats.total_xp,
        "level": stats.level,
        "rank": stats.rank,
        "rank_info": progression["rank_info"],
        "progress": progression["progress"],
        "xp_for_next_level": progression["xp_for_next_level"],
        "xp_into_level": progression["xp_into_level"],
        "current_streak": stats.current_streak,
        "longest_streak": stats.longest_streak,
        "total_completions": stats.total_completions,
        "total_habits_created": stats.total_habits_created,
        "weeks_completed": stats.weeks_completed,
    }
