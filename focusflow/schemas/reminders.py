from typing import List, Literal, Optional

from pydantic import BaseModel

from focusflow.schemas.habits import Habit
from focusflow.schemas.tasks import Task

RuleType = Literal["now", "fifteenMin", "hourBefore", "custom", "dayBefore"]
Severity = Literal["info", "warning", "danger"]


# ===========================
# Active alerts (engine state)
# ===========================

class TaskAlert(BaseModel):
    task: Task
    rule: RuleType
    label: str
    advice: str
    severity: Severity


class HabitAlert(BaseModel):
    habit: Habit
    day: str


# ===========================
# Views (what the client renders)
# ===========================

class AlertStyle(BaseModel):
    tone: str       # colour family for border/background
    icon: str
    animated: bool  # attention-grabbing treatment


class CustomSnoozeState(BaseModel):
    open: bool = False
    value: str = "45"


class TaskAlertView(BaseModel):
    kind: Literal["task"] = "task"
    task_id: str
    title: str
    rule: RuleType
    label: str
    advice: str
    severity: Severity
    style: AlertStyle
    snooze_presets: List[int]
    custom_snooze: CustomSnoozeState
    actions: List[str]


class HabitAlertView(BaseModel):
    kind: Literal["habit"] = "habit"
    habit_id: str
    title: str
    icon: str
    heading: str
    encouragement: str
    actions: List[str]


# ===========================
# Requests / dashboard
# ===========================

class SnoozeIn(BaseModel):
    minutes: int


class CustomSnoozeIn(BaseModel):
    value: Optional[str] = None  # raw text from the input box


class SnoozedTaskOut(BaseModel):
    id: str
    title: str
    snoozed_until: str
    countdown: str
