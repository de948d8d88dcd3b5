from typing import Optional, Literal, Any
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from focusflow.core.logger import logger
from focusflow.utils import as_local

# ===== Enums =====
TaskPriority = Literal["regular", "important", "urgent"]
TaskCategory = Literal["study", "work", "home", "personal"]
EnergyLevel = Literal["low", "medium", "high"]
ReminderUnit = Literal["minutes", "hours", "days"]

_UNIT_MINUTES = {"minutes": 1, "hours": 60, "days": 60 * 24}

# tracker UI stores category labels in Hebrew
_CATEGORY_LABELS = {
    "לימודים": "study",
    "עבודה": "work",
    "בית": "home",
    "אישי": "personal",
}


# ===========================
# Reminder configuration
# ===========================

class CustomReminder(BaseModel):
    value: int = Field(..., gt=0)
    unit: ReminderUnit = "minutes"

    @property
    def minutes(self) -> int:
        return self.value * _UNIT_MINUTES[self.unit]


class ReminderConfig(BaseModel):
    # rows written by the tracker UI use camelCase keys
    day_before: bool = Field(False, validation_alias=AliasChoices("day_before", "dayBefore"))
    hour_before: bool = Field(False, validation_alias=AliasChoices("hour_before", "hourBefore"))
    fifteen_min_before: bool = Field(
        False, validation_alias=AliasChoices("fifteen_min_before", "fifteenMinBefore")
    )
    custom: Optional[CustomReminder] = None

    @field_validator("day_before", "hour_before", "fifteen_min_before", mode="before")
    @classmethod
    def _null_flag(cls, v: Any):
        return False if v is None else v

    # A bad custom rule coming back from storage must not take the whole
    # task list down: drop it and keep the fixed-offset flags.
    @field_validator("custom", mode="before")
    @classmethod
    def _drop_malformed_custom(cls, v: Any):
        if v is None or isinstance(v, CustomReminder):
            return v
        try:
            return CustomReminder.model_validate(v)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed custom reminder {v!r}: {e.error_count()} error(s)")
            return None


# ===========================
# Task
# ===========================

class Task(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    priority: TaskPriority = "regular"
    category: TaskCategory = "personal"
    due_date: datetime
    completed: bool = False
    reminders: ReminderConfig = Field(default_factory=ReminderConfig)
    energy_level: Optional[EnergyLevel] = None
    snoozed_until: Optional[datetime] = None

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_any_case(cls, v: Any):
        # 'URGENT' from the tracker UI, 'urgent' from this API
        if v is None:
            return "regular"
        return v.lower() if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def _category_label(cls, v: Any):
        if v is None:
            return "personal"
        if isinstance(v, str):
            v = _CATEGORY_LABELS.get(v, v.lower())
            if v not in _CATEGORY_LABELS.values():
                logger.debug(f"Unknown task category {v!r}, using 'personal'")
                return "personal"
        return v

    @field_validator("energy_level", mode="before")
    @classmethod
    def _energy_any_case(cls, v: Any):
        return v.lower() if isinstance(v, str) else v

    @field_validator("completed", mode="before")
    @classmethod
    def _null_completed(cls, v: Any):
        return False if v is None else v

    @field_validator("reminders", mode="before")
    @classmethod
    def _null_reminders(cls, v):
        return ReminderConfig() if v is None else v

    @field_validator("due_date", "snoozed_until")
    @classmethod
    def _localize(cls, v: Optional[datetime]):
        return as_local(v) if v is not None else v

    def is_snoozed(self, now: datetime) -> bool:
        return self.snoozed_until is not None and self.snoozed_until > now

    def scheduling_instant(self, now: datetime) -> datetime:
        """Instant the reminder rules are measured against.

        While a snooze is still running it replaces the due date.
        """
        if self.is_snoozed(now):
            return self.snoozed_until
        return self.due_date
