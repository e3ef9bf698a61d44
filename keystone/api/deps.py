from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from keystone import crud
from keystone.db import SessionLocal
from keystone.models import User


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    x_user_id: Optional[int] = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    user = crud.get_user(db, x_user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
