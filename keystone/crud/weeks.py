from datetime import date
from typing import Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from keystone.models import Habit, HabitCompletion, Week, WeekHabitSnapshot, WeekScore

SNAPSHOT_FIELDS = ("name", "description", "type", "color", "icon", "sort_order", "xp_value")


def find_week(db: Session, user_id: int, start_date: date) -> Optional[Week]:
    return db.scalar(select(Week).where(Week.user_id == user_id, Week.start_date == start_date))


def find_user_week(db: Session, user_id: int, week_id: int) -> Optional[Week]:
    return db.scalar(select(Week).where(Week.id == week_id, Week.user_id == user_id))


def lock_week(db: Session, week_id: int) -> None:
    db.execute(select(Week.id).where(Week.id == week_id).with_for_update())


def _snapshot_from_habit(week_id: int, habit: Habit) -> WeekHabitSnapshot:
    return WeekHabitSnapshot(
        week_id=week_id,
        habit_id=habit.id,
        **{field: getattr(habit, field) for field in SNAPSHOT_FIELDS},
    )


def create_week(db: Session, user_id: int, start_date: date, end_date: date, habits: Iterable[Habit]) -> Week:
    roster = list(habits)
    week = Week(user_id=user_id, start_date=start_date, end_date=end_date)
    db.add(week)
    db.flush()

    for habit in roster:
        db.add(_snapshot_from_habit(week.id, habit))
    db.add(WeekScore(week_id=week.id, possible_completions=len(roster) * 7))
    db.flush()
    return week


def delete_week(db: Session, week_id: int) -> None:
    db.flush()
    db.execute(delete(HabitCompletion).where(HabitCompletion.week_id == week_id))
    db.execute(delete(WeekHabitSnapshot).where(WeekHabitSnapshot.week_id == week_id))
    db.execute(delete(WeekScore).where(WeekScore.week_id == week_id))
    db.execute(delete(Week).where(Week.id == week_id))


def list_snapshots(db: Session, week_id: int) -> list[WeekHabitSnapshot]:
    return list(
        db.scalars(
            select(WeekHabitSnapshot)
            .where(WeekHabitSnapshot.week_id == week_id)
            .order_by(WeekHabitSnapshot.sort_order, WeekHabitSnapshot.id)
        )
    )


def find_snapshot(db: Session, week_id: int, habit_id: int) -> Optional[WeekHabitSnapshot]:
    return db.scalar(
        select(WeekHabitSnapshot).where(WeekHabitSnapshot.week_id == week_id, WeekHabitSnapshot.habit_id == habit_id)
    )


def add_snapshot(db: Session, week_id: int, habit: Habit) -> WeekHabitSnapshot:
    snapshot = _snapshot_from_habit(week_id, habit)
    db.add(snapshot)
    db.flush()
    return snapshot


def get_score(db: Session, week_id: int) -> Optional[WeekScore]:
    return db.scalar(select(WeekScore).where(WeekScore.week_id == week_id))


def upsert_score(db: Session, week_id: int, totals: dict) -> WeekScore:
    score = get_score(db, week_id)
    if score is None:
        score = WeekScore(week_id=week_id)
        db.add(score)
    for key, value in totals.items():
        setattr(score, key, value)
    db.flush()
    return score


def list_weeks(db: Session, user_id: int, limit: int, offset: int) -> list[Week]:
    return list(
        db.scalars(
            select(Week).where(Week.user_id == user_id).order_by(Week.start_date.desc()).limit(limit).offset(offset)
        )
    )


def count_weeks(db: Session, user_id: int) -> int:
    return db.scalar(select(func.count()).select_from(Week).where(Week.user_id == user_id)) or 0


def week_percentages_before(db: Session, user_id: int, before: date) -> list[Optional[float]]:
    """Score percentages of weeks starting before ``before``, newest first.

    Weeks that have no score row yield ``None``.
    """
    rows = db.execute(
        select(Week.start_date, WeekScore.percentage)
        .outerjoin(WeekScore, WeekScore.week_id == Week.id)
        .where(Week.user_id == user_id, Week.start_date < before)
        .order_by(Week.start_date.desc())
    ).all()
    return [percentage for _, percentage in rows]
