from keystone.schemas.habit import HabitCreateIn, HabitOut, HabitReorderIn, HabitUpdateIn
from keystone.schemas.user import SettingsIn, UserBootstrapIn, UserOut
from keystone.schemas.week import PastWeekIn, ToggleCompletionIn

__all__ = [
    "HabitCreateIn",
    "HabitUpdateIn",
    "HabitReorderIn",
    "HabitOut",
    "ToggleCompletionIn",
    "PastWeekIn",
    "UserBootstrapIn",
    "SettingsIn",
    "UserOut",
]
