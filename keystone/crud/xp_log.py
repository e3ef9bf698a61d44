from typing import Optional

from sqlalchemy.orm import Session

from keystone.models import XPLog


def log_xp(
    db: Session,
    user_id: int,
    amount: int,
    source: str,
    source_id: Optional[str] = None,
    note: Optional[str] = None,
) -> XPLog:
    entry = XPLog(user_id=user_id, amount=amount, source=source, source_id=source_id, note=note)
    db.add(entry)
    db.flush()
    return entry
