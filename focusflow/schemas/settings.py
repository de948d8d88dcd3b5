from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from focusflow.schemas.habits import HabitTimeOfDay
from focusflow.utils import parse_hhmm


def _check_hhmm(v: str) -> str:
    hour, minute = parse_hhmm(v)
    return f"{hour:02d}:{minute:02d}"


class NotificationSettings(BaseModel):
    phone: Optional[str] = None  # E.164 without '+', e.g. 526643713366
    notify_enabled: bool = False

    @property
    def permitted(self) -> bool:
        return self.notify_enabled and bool(self.phone)


class HabitReminderTimes(BaseModel):
    """Clock time each habit slot is reminded at."""

    morning: str = "08:00"
    noon: str = "13:00"
    evening: str = "20:00"

    @model_validator(mode="before")
    @classmethod
    def _merge_over_defaults(cls, data: Any):
        # stored mappings may be partial or null
        if data is None:
            return {}
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v not in (None, "")}
        return data

    @field_validator("morning", "noon", "evening")
    @classmethod
    def _valid_time(cls, v: str) -> str:
        return _check_hhmm(v)

    def clock_for(self, slot: HabitTimeOfDay) -> tuple[int, int]:
        return parse_hhmm(getattr(self, slot))


class ProfileSettings(BaseModel):
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    habit_reminder_times: HabitReminderTimes = Field(default_factory=HabitReminderTimes)
    daily_reminder_time: Optional[str] = None

    @field_validator("daily_reminder_time")
    @classmethod
    def _valid_daily(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        return _check_hhmm(v)
