from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from keystone.models import UserStats

COUNTER_FIELDS = ("total_xp", "total_completions", "total_habits_created", "weeks_completed")


def get_stats(db: Session, user_id: int) -> Optional[UserStats]:
    return db.scalar(select(UserStats).where(UserStats.user_id == user_id))


def get_or_create_stats(db: Session, user_id: int) -> UserStats:
    stats = get_stats(db, user_id)
    if stats is None:
        stats = UserStats(user_id=user_id)
        db.add(stats)
        db.flush()
    return stats


def increment_user_stats(db: Session, user_id: int, deltas: dict[str, int]) -> UserStats:
    stats = get_or_create_stats(db, user_id)
    values = {}
    for field, delta in deltas.items():
        if field not in COUNTER_FIELDS:
            raise KeyError(field)
        if delta:
            column = getattr(UserStats, field)
            values[field] = column + delta

    if values:
        db.flush()
        db.execute(
            update(UserStats)
            .where(UserStats.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        db.refresh(stats)
    return stats
