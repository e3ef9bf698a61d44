from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from keystone.models import Habit, HabitStatus


def find_habit(db: Session, user_id: int, habit_id: int) -> Optional[Habit]:
    return db.scalar(select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id))


def list_active_habits(db: Session, user_id: int) -> list[Habit]:
    return list(
        db.scalars(
            select(Habit)
            .where(Habit.user_id == user_id, Habit.status == HabitStatus.ACTIVE.value)
            .order_by(Habit.sort_order, Habit.id)
        )
    )


def list_habits(db: Session, user_id: int, include_archived: bool = False) -> list[Habit]:
    query = select(Habit).where(Habit.user_id == user_id).order_by(Habit.sort_order, Habit.id)
    if not include_archived:
        query = query.where(Habit.status != HabitStatus.ARCHIVED.value)
    return list(db.scalars(query))


def find_habits_by_ids(db: Session, user_id: int, habit_ids: list[int]) -> list[Habit]:
    if not habit_ids:
        return []
    return list(db.scalars(select(Habit).where(Habit.user_id == user_id, Habit.id.in_(habit_ids))))


def next_sort_order(db: Session, user_id: int) -> int:
    current = db.scalar(select(func.max(Habit.sort_order)).where(Habit.user_id == user_id))
    return (current if current is not None else -1) + 1


def create_habit(db: Session, user_id: int, values: dict) -> Habit:
    habit = Habit(user_id=user_id, **values)
    db.add(habit)
    db.flush()
    return habit
