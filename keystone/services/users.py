from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from keystone import crud
from keystone.errors import ValidationError
from keystone.models import User
from keystone.services import calendar
from keystone.services.week_engine import user_timezone, user_week_start_day


def bootstrap_user(
    db: Session,
    email: str,
    name: Optional[str] = None,
    timezone: Optional[str] = None,
    week_start_day: Optional[int] = None,
) -> User:
    email = (email or "").strip().lower()
    if "@" not in email:
        raise ValidationError("A valid email is required")
    if timezone is not None:
        calendar.get_zone(timezone)
    if week_start_day is not None:
        calendar.validate_week_start_day(week_start_day)
    return crud.upsert_user(db, email, name, timezone=timezone, week_start_day=week_start_day)


def settings_payload(user: User) -> Dict[str, Any]:
    return {
        "timezone": user_timezone(user),
        "week_start_day": user_week_start_day(user),
        "day_names": calendar.day_names(user_week_start_day(user)),
    }


def update_settings(
    db: Session,
    user: User,
    timezone: Optional[str] = None,
    week_start_day: Optional[int] = None,
) -> User:
    """Change preferences. Existing weeks keep the boundaries they were created with."""
    if timezone is not None:
        calendar.get_zone(timezone)
        user.timezone = timezone
    if week_start_day is not None:
        user.week_start_day = calendar.validate_week_start_day(week_start_day)
    db.flush()
    return user
