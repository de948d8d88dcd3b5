from typing import Any, List, Literal

from pydantic import BaseModel, Field, field_validator

HabitTimeOfDay = Literal["morning", "noon", "evening"]


class Habit(BaseModel):
    id: str
    title: str
    icon: str = "✅"
    time_of_day: HabitTimeOfDay = "morning"
    completed_days: List[str] = Field(default_factory=list)  # ISO dates, 'YYYY-MM-DD'

    @field_validator("completed_days", mode="before")
    @classmethod
    def _null_days(cls, v: Any):
        return [] if v is None else v

    @field_validator("icon", mode="before")
    @classmethod
    def _null_icon(cls, v: Any):
        return "✅" if not v else v

    def is_done_on(self, day: str) -> bool:
        return day in self.completed_days
