from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from keystone.models import User, UserStats


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == email))


def upsert_user(
    db: Session,
    email: str,
    name: Optional[str],
    timezone: Optional[str] = None,
    week_start_day: Optional[int] = None,
) -> User:
    user = get_user_by_email(db, email)
    if user is None:
        user = User(email=email)
        db.add(user)

    if name is not None:
        user.name = name
    if timezone is not None:
        user.timezone = timezone
    if week_start_day is not None:
        user.week_start_day = week_start_day
    db.flush()

    if db.scalar(select(UserStats.id).where(UserStats.user_id == user.id)) is None:
        db.add(UserStats(user_id=user.id))
        db.flush()
    return user
