import logging
import re
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from keystone import crud
from keystone.errors import NotFoundError, ValidationError
from keystone.models import Habit, HabitStatus, HabitType, User
from keystone.services.achievements import AchievementEngine, default_engine
from keystone.services.week_engine import add_habit_to_week, current_week_bounds

logger = logging.getLogger(__name__)

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_ICON_LENGTH = 64
MIN_XP_VALUE = 1
MAX_XP_VALUE = 100

EDITABLE_FIELDS = ("name", "description", "type", "color", "icon", "xp_value", "status")
# Live edits mirrored into the current week's snapshot; past weeks keep their copy.
LIVE_SNAPSHOT_FIELDS = ("name", "description", "type", "color", "icon", "xp_value")


def validate_habit_fields(values: Dict[str, Any]) -> Dict[str, Any]:
    """Check habit attributes before anything is written. Returns the cleaned values."""
    cleaned = dict(values)

    if "name" in cleaned:
        name = (cleaned["name"] or "").strip()
        if not 1 <= len(name) <= MAX_NAME_LENGTH:
            raise ValidationError(f"name must be 1-{MAX_NAME_LENGTH} characters")
        cleaned["name"] = name

    if "description" in cleaned:
        description = cleaned["description"] or ""
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(f"description must be at most {MAX_DESCRIPTION_LENGTH} characters")
        cleaned["description"] = description

    if "icon" in cleaned:
        icon = (cleaned["icon"] or "").strip()
        if not 1 <= len(icon) <= MAX_ICON_LENGTH:
            raise ValidationError(f"icon must be 1-{MAX_ICON_LENGTH} characters")
        cleaned["icon"] = icon

    if "color" in cleaned and not COLOR_PATTERN.match(cleaned["color"] or ""):
        raise ValidationError("color must be a hex value like #6366f1")

    if "xp_value" in cleaned:
        xp_value = cleaned["xp_value"]
        if isinstance(xp_value, bool) or not isinstance(xp_value, int) or not MIN_XP_VALUE <= xp_value <= MAX_XP_VALUE:
            raise ValidationError(f"xp_value must be between {MIN_XP_VALUE} and {MAX_XP_VALUE}")

    if "type" in cleaned:
        cleaned["type"] = _enum_value(HabitType, cleaned["type"], "type")
    if "status" in cleaned:
        cleaned["status"] = _enum_value(HabitStatus, cleaned["status"], "status")

    unknown = set(cleaned) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"unknown habit fields: {', '.join(sorted(unknown))}")
    return cleaned


def _enum_value(enum_cls, raw: Any, field: str) -> str:
    try:
        return enum_cls(raw).value
    except ValueError as exc:
        allowed = ", ".join(item.value for item in enum_cls)
        raise ValidationError(f"{field} must be one of {allowed}") from exc


def list_habits(db: Session, user: User, include_archived: bool = False) -> list[Habit]:
    return crud.list_habits(db, user.id, include_archived=include_archived)


def get_habit(db: Session, user: User, habit_id: int) -> Habit:
    habit = crud.find_habit(db, user.id, habit_id)
    if habit is None:
        raise NotFoundError("Habit not found")
    return habit


def _join_current_week(db: Session, user: User, habit: Habit, now: Optional[datetime]) -> bool:
    # An absent current week will pick the habit up when it is lazily created.
    bounds = current_week_bounds(user, now)
    week = crud.find_week(db, user.id, bounds.start_date)
    if week is None:
        return False
    return add_habit_to_week(db, week, habit)


def create_habit(
    db: Session,
    user: User,
    values: Dict[str, Any],
    now: Optional[datetime] = None,
    achievements: AchievementEngine = default_engine,
) -> Habit:
    cleaned = validate_habit_fields({k: v for k, v in values.items() if v is not None})
    if "name" not in cleaned:
        raise ValidationError("name is required")
    cleaned.pop("status", None)

    cleaned["sort_order"] = crud.next_sort_order(db, user.id)
    habit = crud.create_habit(db, user.id, cleaned)

    stats = crud.increment_user_stats(db, user.id, {"total_habits_created": 1})
    achievements.check_habit_count(db, user.id, stats.total_habits_created)
    _join_current_week(db, user, habit, now)

    logger.info("Habit created user_id=%s habit_id=%s", user.id, habit.id)
    return habit


def _sync_current_snapshot(db: Session, user: User, habit: Habit, now: Optional[datetime]) -> None:
    bounds = current_week_bounds(user, now)
    week = crud.find_week(db, user.id, bounds.start_date)
    if week is None:
        return
    snapshot = crud.find_snapshot(db, week.id, habit.id)
    if snapshot is None:
        return
    for field in LIVE_SNAPSHOT_FIELDS:
        setattr(snapshot, field, getattr(habit, field))
    db.flush()


def update_habit(
    db: Session,
    user: User,
    habit_id: int,
    values: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Habit:
    """Edit a habit and mirror the change into the current week only.

    Re-activating a habit that the current week has not seen adds it to that
    week's roster, widening the score by seven possible completions.
    """
    cleaned = validate_habit_fields(values)
    habit = get_habit(db, user, habit_id)
    was_active = habit.status == HabitStatus.ACTIVE.value

    for key, value in cleaned.items():
        setattr(habit, key, value)
    db.flush()

    _sync_current_snapshot(db, user, habit, now)
    if not was_active and habit.status == HabitStatus.ACTIVE.value:
        _join_current_week(db, user, habit, now)
    return habit


def archive_habit(db: Session, user: User, habit_id: int) -> Habit:
    habit = get_habit(db, user, habit_id)
    habit.status = HabitStatus.ARCHIVED.value
    db.flush()
    logger.info("Habit archived user_id=%s habit_id=%s", user.id, habit.id)
    return habit


def reorder_habits(db: Session, user: User, habit_ids: Iterable[int]) -> list[Habit]:
    ordered = list(habit_ids)
    if len(set(ordered)) != len(ordered):
        raise ValidationError("habit_ids must not contain duplicates")

    habits = {h.id: h for h in crud.find_habits_by_ids(db, user.id, ordered)}
    if len(habits) != len(ordered):
        raise ValidationError("One or more habits not found")

    for position, habit_id in enumerate(ordered):
        habits[habit_id].sort_order = position
    db.flush()
    return [habits[habit_id] for habit_id in ordered]
