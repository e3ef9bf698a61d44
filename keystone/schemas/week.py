from typing import Optional

from pydantic import BaseModel, Field


class ToggleCompletionIn(BaseModel):
    habit_id: int
    day_index: int = Field(ge=0, le=6)
    week_id: Optional[int] = None


class PastWeekIn(BaseModel):
    weeks_ago: int = Field(ge=1, le=52)
