"""Completion toggle: the single mutating entry point of the scoring engine.

A toggle flips one (week, habit, day) fact and then walks the derived state
in a fixed order: week score, user totals, cached level/rank, streak and
achievements. Everything runs inside the caller's transaction.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from keystone import crud
from keystone.errors import NotFoundError, ValidationError
from keystone.models import HabitCompletion, User, XPSource
from keystone.services import calendar
from keystone.services.achievements import AchievementEngine, default_engine
from keystone.services.stats import refresh_progression
from keystone.services.streaks import recompute_streak
from keystone.services.week_engine import get_or_create_current_week, recompute_score

logger = logging.getLogger(__name__)


@dataclass
class ToggleResult:
    completion: Optional[HabitCompletion]
    xp_change: int
    week_id: int
    unlocked: list[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.completion is not None

    def to_dict(self) -> Dict[str, Any]:
        completion = None
        if self.completion is not None:
            completion = {
                "id": self.completion.id,
                "week_id": self.completion.week_id,
                "habit_id": self.completion.habit_id,
                "day_index": self.completion.day_index,
                "xp_earned": self.completion.xp_earned,
            }
        return {
            "completion": completion,
            "xp_change": self.xp_change,
            "week_id": self.week_id,
            "unlocked_achievements": self.unlocked,
        }


def validate_day_index(day_index: Any) -> int:
    if isinstance(day_index, bool) or not isinstance(day_index, int):
        raise ValidationError("day_index must be an integer")
    if not 0 <= day_index < calendar.DAYS_PER_WEEK:
        raise ValidationError("day_index must be between 0 and 6")
    return day_index


def toggle_completion(
    db: Session,
    user: User,
    habit_id: int,
    day_index: int,
    week_id: Optional[int] = None,
    now: Optional[datetime] = None,
    achievements: AchievementEngine = default_engine,
) -> ToggleResult:
    validate_day_index(day_index)

    habit = crud.find_habit(db, user.id, habit_id)
    if habit is None:
        raise NotFoundError("Habit not found")

    if week_id is not None:
        week = crud.find_user_week(db, user.id, week_id)
        if week is None:
            raise NotFoundError("Week not found")
    else:
        week, _ = get_or_create_current_week(db, user, now, achievements)

    if crud.find_snapshot(db, week.id, habit.id) is None:
        raise NotFoundError("Habit is not tracked in this week")

    crud.lock_week(db, week.id)

    existing = crud.find_completion(db, week.id, habit.id, day_index)
    if existing is not None:
        xp_change = -existing.xp_earned
        crud.delete_completion(db, existing)
        completion = None
        completion_delta = -1
        source = XPSource.COMPLETION_REVERSED
    else:
        completion = crud.create_completion(db, week.id, habit.id, day_index, habit.xp_value)
        xp_change = completion.xp_earned
        completion_delta = 1
        source = XPSource.HABIT_COMPLETION

    recompute_score(db, week.id, xp_change)

    stats = crud.increment_user_stats(
        db, user.id, {"total_xp": xp_change, "total_completions": completion_delta}
    )
    if xp_change:
        crud.log_xp(db, user.id, xp_change, source.value, source_id=str(habit.id), note=f"day {day_index}")

    unlocked = refresh_progression(db, stats, achievements)

    streak = recompute_streak(db, user, habit.id, now)
    if streak is not None:
        unlocked += achievements.check_streak(db, user.id, streak.current_streak)
    if completion is not None:
        unlocked += achievements.check_completions(db, user.id, stats.total_completions)

    logger.debug(
        "Toggled completion user_id=%s habit_id=%s week_id=%s day=%s xp_change=%s",
        user.id,
        habit.id,
        week.id,
        day_index,
        xp_change,
    )
    return ToggleResult(completion=completion, xp_change=xp_change, week_id=week.id, unlocked=unlocked)
