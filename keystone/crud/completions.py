from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from keystone.models import HabitCompletion


def find_completion(db: Session, week_id: int, habit_id: int, day_index: int) -> Optional[HabitCompletion]:
    return db.scalar(
        select(HabitCompletion).where(
            HabitCompletion.week_id == week_id,
            HabitCompletion.habit_id == habit_id,
            HabitCompletion.day_index == day_index,
        )
    )


def create_completion(db: Session, week_id: int, habit_id: int, day_index: int, xp_earned: int) -> HabitCompletion:
    completion = HabitCompletion(week_id=week_id, habit_id=habit_id, day_index=day_index, xp_earned=xp_earned)
    db.add(completion)
    db.flush()
    return completion


def delete_completion(db: Session, completion: HabitCompletion) -> None:
    db.delete(completion)
    db.flush()


def count_week_completions(db: Session, week_id: int) -> int:
    return db.scalar(
        select(func.count()).select_from(HabitCompletion).where(HabitCompletion.week_id == week_id)
    ) or 0


def completion_totals(db: Session, week_id: int) -> tuple[int, int]:
    count, xp = db.execute(
        select(func.count(HabitCompletion.id), func.coalesce(func.sum(HabitCompletion.xp_earned), 0)).where(
            HabitCompletion.week_id == week_id
        )
    ).one()
    return int(count or 0), int(xp or 0)


def list_week_completions(db: Session, week_id: int, habit_id: Optional[int] = None) -> list[HabitCompletion]:
    query = select(HabitCompletion).where(HabitCompletion.week_id == week_id)
    if habit_id is not None:
        query = query.where(HabitCompletion.habit_id == habit_id)
    return list(db.scalars(query.order_by(HabitCompletion.day_index.desc())))
