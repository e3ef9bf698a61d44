"""Per-week roster, completion set and score.

Weeks are created lazily and stay mutable forever. Every write here only
flushes; the caller owns the transaction so a week, its score and the user's
totals always change together.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from keystone import crud
from keystone.config import settings
from keystone.errors import ConflictError, NotFoundError, ValidationError
from keystone.models import Habit, User, Week, WeekScore, XPSource
from keystone.services import calendar, trophies
from keystone.services.achievements import AchievementEngine, default_engine

logger = logging.getLogger(__name__)

MAX_WEEKS_AGO = 52


def user_timezone(user: User) -> str:
    return user.timezone or settings.DEFAULT_TIMEZONE


def user_week_start_day(user: User) -> int:
    if user.week_start_day in (calendar.SUNDAY, calendar.MONDAY):
        return user.week_start_day
    return settings.DEFAULT_WEEK_START_DAY


def current_week_bounds(user: User, now: Optional[datetime] = None) -> calendar.WeekBounds:
    return calendar.resolve_week(user_timezone(user), user_week_start_day(user), now)


def compute_percentage(total_completions: int, possible_completions: int) -> float:
    if possible_completions <= 0:
        return 0.0
    return 100 * total_completions / possible_completions


def _create_week(
    db: Session,
    user: User,
    bounds: calendar.WeekBounds,
    achievements: AchievementEngine,
    current_start: date,
) -> tuple[Week, bool]:
    """Insert the week under a savepoint. Returns ``(week, created)``.

    When a concurrent request wins the insert, the unique key on
    ``(user_id, start_date)`` rejects ours; the savepoint is rolled back and
    the winner's week is returned with ``created=False``.
    """
    try:
        with db.begin_nested():
            habits = crud.list_active_habits(db, user.id)
            week = crud.create_week(db, user.id, bounds.start_date, bounds.end_date, habits)
            stats = crud.increment_user_stats(db, user.id, {"weeks_completed": 1})
            achievements.check_weeks_tracked(db, user.id, stats.weeks_completed)
            achievements.check_week_patterns(db, user.id, before=current_start)
    except IntegrityError:
        existing = crud.find_week(db, user.id, bounds.start_date)
        if existing is None:
            raise
        logger.info("Week already created concurrently user_id=%s start=%s", user.id, bounds.start_date.isoformat())
        return existing, False

    logger.info(
        "Week created user_id=%s start=%s habits=%s", user.id, bounds.start_date.isoformat(), len(habits)
    )
    return week, True


def get_or_create_current_week(
    db: Session,
    user: User,
    now: Optional[datetime] = None,
    achievements: AchievementEngine = default_engine,
) -> tuple[Week, calendar.WeekBounds]:
    """Find the user's current week, creating it (with snapshots and score) when absent.

    Creating the week is a write: it snapshots every active habit, bumps
    ``weeks_completed`` and evaluates week-related achievements.
    """
    bounds = current_week_bounds(user, now)
    week = crud.find_week(db, user.id, bounds.start_date)
    if week is None:
        week, _ = _create_week(db, user, bounds, achievements, current_start=bounds.start_date)
    return week, bounds


def create_past_week(
    db: Session,
    user: User,
    weeks_ago: int,
    now: Optional[datetime] = None,
    achievements: AchievementEngine = default_engine,
) -> Week:
    if isinstance(weeks_ago, bool) or not isinstance(weeks_ago, int) or not 1 <= weeks_ago <= MAX_WEEKS_AGO:
        raise ValidationError(f"weeks_ago must be between 1 and {MAX_WEEKS_AGO}")

    tz_name = user_timezone(user)
    week_start_day = user_week_start_day(user)
    bounds = calendar.resolve_past_week(tz_name, week_start_day, weeks_ago, now)

    existing = crud.find_week(db, user.id, bounds.start_date)
    if existing is not None:
        raise ConflictError("This week already exists", week=existing)

    if not crud.list_active_habits(db, user.id):
        raise ConflictError("No active habits to track. Create some habits first!")

    current_start = calendar.resolve_week(tz_name, week_start_day, now).start_date
    week, created = _create_week(db, user, bounds, achievements, current_start=current_start)
    if not created:
        raise ConflictError("This week already exists", week=week)
    return week


def recompute_score(db: Session, week_id: int, xp_change: int = 0) -> WeekScore:
    total = crud.count_week_completions(db, week_id)
    score = crud.get_score(db, week_id)
    if score is None:
        possible = len(crud.list_snapshots(db, week_id)) * calendar.DAYS_PER_WEEK
        xp_earned = xp_change
    else:
        possible = score.possible_completions
        xp_earned = score.xp_earned + xp_change

    return crud.upsert_score(
        db,
        week_id,
        {
            "total_completions": total,
            "possible_completions": possible,
            "percentage": compute_percentage(total, possible),
            "xp_earned": xp_earned,
        },
    )


def add_habit_to_week(db: Session, week: Week, habit: Habit) -> bool:
    """Snapshot ``habit`` into ``week`` and widen the score by one habit-week."""
    if crud.find_snapshot(db, week.id, habit.id) is not None:
        return False

    crud.add_snapshot(db, week.id, habit)
    score = crud.get_score(db, week.id)
    possible = (score.possible_completions if score else 0) + calendar.DAYS_PER_WEEK
    total = score.total_completions if score else crud.count_week_completions(db, week.id)
    crud.upsert_score(
        db,
        week.id,
        {
            "total_completions": total,
            "possible_completions": possible,
            "percentage": compute_percentage(total, possible),
        },
    )
    return True


def delete_week(db: Session, user: User, week_id: int) -> Dict[str, int]:
    week = crud.find_user_week(db, user.id, week_id)
    if week is None:
        raise NotFoundError("Week not found")

    completions, xp = crud.completion_totals(db, week.id)
    start_date = week.start_date
    crud.delete_week(db, week.id)

    if xp or completions:
        crud.increment_user_stats(db, user.id, {"total_xp": -xp, "total_completions": -completions})
    if xp:
        crud.log_xp(db, user.id, -xp, XPSource.WEEK_DELETED.value, source_id=str(week_id))

    logger.info(
        "Week deleted user_id=%s start=%s xp_removed=%s completions_removed=%s",
        user.id,
        start_date.isoformat(),
        xp,
        completions,
    )
    return {"xp_removed": xp, "completions_removed": completions}


def week_payload(db: Session, week: Week) -> Dict[str, Any]:
    snapshots = crud.list_snapshots(db, week.id)
    completions = crud.list_week_completions(db, week.id)
    score = crud.get_score(db, week.id)

    completion_map: Dict[int, Dict[int, bool]] = {}
    for completion in completions:
        completion_map.setdefault(completion.habit_id, {})[completion.day_index] = True

    total = score.total_completions if score else 0
    possible = score.possible_completions if score else 0
    percentage = score.percentage if score else 0.0
    gap = trophies.completions_needed_for_next_trophy(total, possible)

    return {
        "id": week.id,
        "start_date": week.start_date.isoformat(),
        "end_date": week.end_date.isoformat(),
        "snapshots": [
            {
                "habit_id": s.habit_id,
                "name": s.name,
                "description": s.description,
                "type": s.type,
                "color": s.color,
                "icon": s.icon,
                "sort_order": s.sort_order,
                "xp_value": s.xp_value,
            }
            for s in snapshots
        ],
        "completions": [
            {"id": c.id, "habit_id": c.habit_id, "day_index": c.day_index, "xp_earned": c.xp_earned}
            for c in sorted(completions, key=lambda c: (c.habit_id, c.day_index))
        ],
        "completion_map": completion_map,
        "score": {
            "total_completions": total,
            "possible_completions": possible,
            "percentage": percentage,
            "xp_earned": score.xp_earned if score else 0,
        },
        "trophy": trophies.trophy_info(percentage),
        "next_trophy": {"tier": gap.tier, "completions_needed": gap.completions_needed} if gap else None,
    }


def current_week_view(
    db: Session,
    user: User,
    now: Optional[datetime] = None,
    achievements: AchievementEngine = default_engine,
) -> Dict[str, Any]:
    week, bounds = get_or_create_current_week(db, user, now, achievements)
    week_start_day = user_week_start_day(user)
    return {
        **week_payload(db, week),
        "timezone": user_timezone(user),
        "week_start_day": week_start_day,
        "day_names": calendar.day_names(week_start_day),
        "current_day_index": bounds.day_index,
    }


def week_history(db: Session, user: User, limit: int = 10, offset: int = 0) -> Dict[str, Any]:
    limit = max(1, min(limit, 52))
    offset = max(0, offset)
    weeks = crud.list_weeks(db, user.id, limit, offset)
    total = crud.count_weeks(db, user.id)
    return {
        "weeks": [week_payload(db, week) for week in weeks],
        "total": total,
        "has_more": offset + len(weeks) < total,
        "week_start_day": user_week_start_day(user),
    }
