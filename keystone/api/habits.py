from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from keystone.api.deps import get_current_user, get_db
from keystone.models import User
from keystone.schemas import HabitCreateIn, HabitOut, HabitReorderIn, HabitUpdateIn
from keystone.services import habits as habit_service

router = APIRouter(prefix="/v1/habits")


def _habit_out(habit) -> Dict[str, Any]:
    return HabitOut.model_validate(habit).model_dump(mode="json")


@router.get("")
def list_habits(
    include_archived: bool = False,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    habits = habit_service.list_habits(db, user, include_archived=include_archived)
    return {"habits": [_habit_out(h) for h in habits]}


@router.post("", status_code=201)
def create_habit(
    payload: HabitCreateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    habit = habit_service.create_habit(db, user, payload.model_dump())
    db.commit()
    db.refresh(habit)
    return {"habit": _habit_out(habit)}


@router.put("/reorder")
def reorder_habits(
    payload: HabitReorderIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    habits = habit_service.reorder_habits(db, user, payload.habit_ids)
    db.commit()
    return {"habits": [_habit_out(h) for h in habits]}


@router.get("/{habit_id}")
def get_habit(habit_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    return {"habit": _habit_out(habit_service.get_habit(db, user, habit_id))}


@router.patch("/{habit_id}")
def update_habit(
    habit_id: int,
    payload: HabitUpdateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    habit = habit_service.update_habit(db, user, habit_id, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(habit)
    return {"habit": _habit_out(habit)}


@router.delete("/{habit_id}")
def archive_habit(habit_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    habit_service.archive_habit(db, user, habit_id)
    db.commit()
    return {"ok": True}
