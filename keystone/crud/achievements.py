from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from keystone.models import UserAchievement


def find_achievement(db: Session, user_id: int, code: str) -> Optional[UserAchievement]:
    return db.scalar(select(UserAchievement).where(UserAchievement.user_id == user_id, UserAchievement.code == code))


def create_achievement(db: Session, user_id: int, code: str) -> UserAchievement:
    achievement = UserAchievement(user_id=user_id, code=code)
    db.add(achievement)
    db.flush()
    return achievement


def list_achievements(db: Session, user_id: int) -> list[UserAchievement]:
    return list(
        db.scalars(select(UserAchievement).where(UserAchievement.user_id == user_id).order_by(UserAchievement.unlocked_at))
    )
