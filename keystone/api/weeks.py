from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from keystone.api.deps import get_current_user, get_db
from keystone.models import User
from keystone.schemas import PastWeekIn, ToggleCompletionIn
from keystone.services import completions, week_engine

router = APIRouter(prefix="/v1")


@router.get("/weeks/current")
def current_week(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    # May create the week on first access.
    view = week_engine.current_week_view(db, user)
    db.commit()
    return view


@router.get("/weeks")
def week_history(
    limit: int = 10,
    offset: int = 0,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return week_engine.week_history(db, user, limit=limit, offset=offset)


@router.post("/weeks/past", status_code=201)
def create_past_week(
    payload: PastWeekIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    week = week_engine.create_past_week(db, user, payload.weeks_ago)
    db.commit()
    return {"week": week_engine.week_payload(db, week)}


@router.delete("/weeks/{week_id}")
def delete_week(week_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    removed = week_engine.delete_week(db, user, week_id)
    db.commit()
    return {"ok": True, **removed}


@router.post("/completions/toggle")
def toggle_completion(
    payload: ToggleCompletionIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    result = completions.toggle_completion(db, user, payload.habit_id, payload.day_index, week_id=payload.week_id)
    body = result.to_dict()
    db.commit()
    return body
