from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from keystone.models import HabitStreak


def get_streak(db: Session, user_id: int, habit_id: int) -> Optional[HabitStreak]:
    return db.scalar(select(HabitStreak).where(HabitStreak.user_id == user_id, HabitStreak.habit_id == habit_id))


def upsert_streak(db: Session, user_id: int, habit_id: int, values: dict) -> HabitStreak:
    streak = get_streak(db, user_id, habit_id)
    if streak is None:
        streak = HabitStreak(user_id=user_id, habit_id=habit_id)
        db.add(streak)
    for key, value in values.items():
        setattr(streak, key, value)
    db.flush()
    return streak


def list_streaks(db: Session, user_id: int) -> list[HabitStreak]:
    return list(
        db.scalars(
            select(HabitStreak)
            .where(HabitStreak.user_id == user_id)
            .order_by(HabitStreak.current_streak.desc(), HabitStreak.id)
        )
    )


def best_current_streak(db: Session, user_id: int) -> int:
    return db.scalar(select(func.max(HabitStreak.current_streak)).where(HabitStreak.user_id == user_id)) or 0
