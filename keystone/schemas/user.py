from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserBootstrapIn(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    timezone: Optional[str] = Field(default=None, max_length=64)
    week_start_day: Optional[int] = Field(default=None, ge=0, le=1)


class SettingsIn(BaseModel):
    timezone: Optional[str] = Field(default=None, min_length=1, max_length=64)
    week_start_day: Optional[int] = Field(default=None, ge=0, le=1)


class UserOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    timezone: Optional[str] = None
    week_start_day: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
