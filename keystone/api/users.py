from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from keystone.api.deps import get_current_user, get_db
from keystone.models import User
from keystone.schemas import SettingsIn, UserBootstrapIn, UserOut
from keystone.services import users as user_service

router = APIRouter()


@router.post("/v1/users/bootstrap")
def bootstrap(payload: UserBootstrapIn, db: Session = Depends(get_db)) -> Dict[str, Any]:
    user = user_service.bootstrap_user(
        db,
        payload.email,
        payload.name,
        timezone=payload.timezone,
        week_start_day=payload.week_start_day,
    )
    db.commit()
    db.refresh(user)
    return {"user": UserOut.model_validate(user).model_dump(mode="json"), "settings": user_service.settings_payload(user)}


@router.get("/v1/settings")
def read_settings(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return user_service.settings_payload(user)


@router.patch("/v1/settings")
def patch_settings(
    payload: SettingsIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    user_service.update_settings(db, user, timezone=payload.timezone, week_start_day=payload.week_start_day)
    db.commit()
    return user_service.settings_payload(user)
