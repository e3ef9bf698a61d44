from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from keystone.api.deps import get_current_user, get_db
from keystone.models import User
from keystone.services import progression, streaks, trophies
from keystone.services.achievements import default_engine
from keystone.services.stats import get_stats

router = APIRouter(prefix="/v1")


@router.get("/stats")
def read_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    # Persists level/rank when the cached values drifted from total XP.
    stats = get_stats(db, user.id)
    db.commit()
    return stats


@router.get("/streaks")
def list_streaks(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    return {"streaks": streaks.list_user_streaks(db, user)}


@router.get("/streaks/{habit_id}")
def habit_streak(habit_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    return streaks.get_habit_streak(db, user, habit_id)


@router.get("/achievements")
def achievements(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    return default_engine.overview(db, user.id)


@router.get("/meta")
def metadata() -> Dict[str, Any]:
    return {
        "ranks": progression.RANK_INFO,
        "trophies": {tier: trophies.trophy_info_for_tier(tier) for tier in trophies.TIER_ORDER},
    }
