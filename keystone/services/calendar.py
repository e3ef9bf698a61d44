"""Timezone-aware week boundaries and day indices.

A week is identified by the calendar date of its first day in the user's
timezone. ``week_start_day`` is 0 for Sunday-first weeks and 1 for
Monday-first weeks; ``day_index`` is always the offset from that first day.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from keystone.errors import ValidationError

SUNDAY = 0
MONDAY = 1
DAYS_PER_WEEK = 7

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
FULL_DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

_END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class WeekBounds:
    start: datetime
    end: datetime
    day_index: int

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown timezone: {name}") from exc


def validate_week_start_day(week_start_day: int) -> int:
    if week_start_day not in (SUNDAY, MONDAY):
        raise ValidationError("weekStartDay must be 0 (Sunday) or 1 (Monday)")
    return week_start_day


def local_now(tz_name: str, now: Optional[datetime] = None) -> datetime:
    instant = now or datetime.now(timezone.utc)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(get_zone(tz_name))


def native_weekday(day: date) -> int:
    # 0 = Sunday .. 6 = Saturday
    return (day.weekday() + 1) % 7


def day_index_for(day: date, week_start_day: int) -> int:
    weekday = native_weekday(day)
    if week_start_day == MONDAY:
        return (weekday + 6) % 7
    return weekday


def week_start_for(day: date, week_start_day: int) -> date:
    return day - timedelta(days=day_index_for(day, week_start_day))


def bounds_for_start(start_date: date, tz_name: str, day_index: int = 0) -> WeekBounds:
    zone = get_zone(tz_name)
    start = datetime.combine(start_date, time.min, tzinfo=zone)
    end = datetime.combine(start_date + timedelta(days=DAYS_PER_WEEK - 1), _END_OF_DAY, tzinfo=zone)
    return WeekBounds(start=start, end=end, day_index=day_index)


def resolve_week(tz_name: str, week_start_day: int, now: Optional[datetime] = None) -> WeekBounds:
    validate_week_start_day(week_start_day)
    today = local_now(tz_name, now).date()
    index = day_index_for(today, week_start_day)
    return bounds_for_start(today - timedelta(days=index), tz_name, day_index=index)


def resolve_past_week(tz_name: str, week_start_day: int, weeks_ago: int, now: Optional[datetime] = None) -> WeekBounds:
    current = resolve_week(tz_name, week_start_day, now)
    start_date = current.start_date - timedelta(days=DAYS_PER_WEEK * weeks_ago)
    return bounds_for_start(start_date, tz_name, day_index=DAYS_PER_WEEK - 1)


def date_for_day_index(start_date: date, day_index: int) -> date:
    return start_date + timedelta(days=day_index)


def day_names(week_start_day: int) -> list[str]:
    if week_start_day == MONDAY:
        return DAY_NAMES[1:] + DAY_NAMES[:1]
    return list(DAY_NAMES)
