from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from keystone.models import HabitStatus, HabitType

COLOR_REGEX = r"^#[0-9A-Fa-f]{6}$"


class HabitCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    type: HabitType = HabitType.POSITIVE
    color: str = Field(default="#6366f1", pattern=COLOR_REGEX)
    icon: str = Field(default="star", max_length=64)
    xp_value: int = Field(default=10, ge=1, le=100)


class HabitUpdateIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    type: Optional[HabitType] = None
    color: Optional[str] = Field(default=None, pattern=COLOR_REGEX)
    icon: Optional[str] = Field(default=None, max_length=64)
    xp_value: Optional[int] = Field(default=None, ge=1, le=100)
    status: Optional[HabitStatus] = None


class HabitReorderIn(BaseModel):
    habit_ids: list[int] = Field(min_length=1)


class HabitOut(BaseModel):
    id: int
    name: str
    description: str
    type: str
    color: str
    icon: str
    xp_value: int
    sort_order: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
