from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from keystone import crud
from keystone.errors import NotFoundError
from keystone.models import HabitStreak, User
from keystone.services.week_engine import current_week_bounds


def streak_from_days(completed_days: Iterable[int], today_index: int) -> int:
    """Length of the unbroken run of completed days ending at ``today_index``."""
    days = set(completed_days)
    streak = 0
    for day in range(today_index, -1, -1):
        if day not in days:
            break
        streak += 1
    return streak


def recompute_streak(db: Session, user: User, habit_id: int, now: Optional[datetime] = None) -> Optional[HabitStreak]:
    """Rebuild one habit's streak from the current week's completions.

    Returns ``None`` when the user has no current week yet. Only the current
    week is inspected, so a run never exceeds seven days.
    """
    bounds = current_week_bounds(user, now)
    week = crud.find_week(db, user.id, bounds.start_date)
    if week is None:
        return None

    days = [c.day_index for c in crud.list_week_completions(db, week.id, habit_id)]
    current = streak_from_days(days, bounds.day_index)

    existing = crud.get_streak(db, user.id, habit_id)
    longest = max(existing.longest_streak if existing else 0, current)
    last_completed = existing.last_completed if existing else None
    if current > 0:
        instant = now or datetime.now(timezone.utc)
        if instant.tzinfo is not None:
            instant = instant.astimezone(timezone.utc).replace(tzinfo=None)
        last_completed = instant

    streak = crud.upsert_streak(
        db,
        user.id,
        habit_id,
        {"current_streak": current, "longest_streak": longest, "last_completed": last_completed},
    )

    stats = crud.get_or_create_stats(db, user.id)
    stats.current_streak = crud.best_current_streak(db, user.id)
    stats.longest_streak = max(stats.longest_streak, longest)
    db.flush()
    return streak


def _streak_payload(streak: HabitStreak, habit: Any) -> Dict[str, Any]:
    return {
        "habit_id": streak.habit_id,
        "current_streak": streak.current_streak,
        "longest_streak": streak.longest_streak,
        "last_completed": streak.last_completed.isoformat() if streak.last_completed else None,
        "habit": {
            "id": habit.id,
            "name": habit.name,
            "color": habit.color,
            "icon": habit.icon,
            "status": habit.status,
        }
        if habit
        else None,
    }


def list_user_streaks(db: Session, user: User) -> list[Dict[str, Any]]:
    streaks = crud.list_streaks(db, user.id)
    habits = {h.id: h for h in crud.find_habits_by_ids(db, user.id, [s.habit_id for s in streaks])}
    return [_streak_payload(s, habits.get(s.habit_id)) for s in streaks]


def get_habit_streak(db: Session, user: User, habit_id: int) -> Dict[str, Any]:
    habit = crud.find_habit(db, user.id, habit_id)
    if habit is None:
        raise NotFoundError("Habit not found")

    streak = crud.get_streak(db, user.id, habit_id)
    if streak is None:
        streak = HabitStreak(user_id=user.id, habit_id=habit_id, current_streak=0, longest_streak=0, last_completed=None)
    return _streak_payload(streak, habit)
