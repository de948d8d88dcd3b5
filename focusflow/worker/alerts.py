# focusflow/worker/alerts.py
"""
Alert content and the view-model the client renders.

Advice text is a short focus tip per rule; urgent tasks get a louder
version. Severity drives the visual treatment: danger is the only animated
one.
"""

from typing import Dict, Optional, Tuple

from focusflow.schemas.reminders import (
    AlertStyle,
    CustomSnoozeState,
    HabitAlert,
    HabitAlertView,
    RuleType,
    Severity,
    TaskAlert,
    TaskAlertView,
)
from focusflow.schemas.tasks import CustomReminder, Task

URGENT_PREFIX = "🚨 URGENT:"
URGENT_SUFFIX = "Act decisively, there is no time for procrastination!"

SNOOZE_PRESETS = (5, 10, 15, 30)
DEFAULT_CUSTOM_SNOOZE = "45"

TASK_ACTIONS = ("complete", "snooze", "custom_snooze", "dismiss")
HABIT_ACTIONS = ("complete", "dismiss")

_ADVICE: Dict[RuleType, str] = {
    "dayBefore": "Preparing your materials ahead of time lowers tomorrow's mental load.",
    "hourBefore": "Time to shut down distractions. Drink some water and start focusing.",
    "fifteenMin": "Transition time! Open everything you need, full focus is on its way.",
    "custom": "A custom reminder you set for yourself. Get ready accordingly.",
    "now": "Don't think about the whole task, only the first step. Start now!",
}

_UNIT_LABEL = {"minutes": "minutes", "hours": "hours", "days": "days"}

_STYLES: Dict[Severity, Tuple[str, str]] = {
    "info": ("indigo", "📅"),
    "warning": ("orange", "⏳"),
    "danger": ("red", "🚨"),
}

HABIT_HEADING = "Time for your habit!"
HABIT_ENCOURAGEMENT = "Small habits build big wins. You can do this!"
DAILY_PLAN_TITLE = "Good morning!"
DAILY_PLAN_BODY = "Time to plan your day. Open your tasks to see what's ahead."


def task_advice(task: Task, rule: RuleType) -> str:
    advice = _ADVICE[rule]
    if task.priority == "urgent":
        advice = f"{URGENT_PREFIX} {advice} {URGENT_SUFFIX}"
    return advice


def task_rule_label(rule: RuleType, custom: Optional[CustomReminder] = None) -> str:
    if rule == "now":
        return "now"
    if rule == "fifteenMin":
        return "15 minutes"
    if rule == "hourBefore":
        return "1 hour"
    if rule == "dayBefore":
        return "tomorrow"
    if custom is None:
        return "custom reminder"
    return f"{custom.value} {_UNIT_LABEL[custom.unit]} before"


def build_task_alert(task: Task, rule: RuleType, severity: Severity) -> TaskAlert:
    return TaskAlert(
        task=task,
        rule=rule,
        label=task_rule_label(rule, task.reminders.custom),
        advice=task_advice(task, rule),
        severity=severity,
    )


def severity_style(severity: Severity) -> AlertStyle:
    tone, icon = _STYLES[severity]
    return AlertStyle(tone=tone, icon=icon, animated=severity == "danger")


def render_task_alert(
    alert: TaskAlert,
    custom_snooze_open: bool = False,
    custom_snooze_value: str = DEFAULT_CUSTOM_SNOOZE,
) -> TaskAlertView:
    return TaskAlertView(
        task_id=alert.task.id,
        title=alert.task.title,
        rule=alert.rule,
        label=alert.label,
        advice=alert.advice,
        severity=alert.severity,
        style=severity_style(alert.severity),
        snooze_presets=list(SNOOZE_PRESETS),
        custom_snooze=CustomSnoozeState(open=custom_snooze_open, value=custom_snooze_value),
        actions=list(TASK_ACTIONS),
    )


def render_habit_alert(alert: HabitAlert) -> HabitAlertView:
    return HabitAlertView(
        habit_id=alert.habit.id,
        title=alert.habit.title,
        icon=alert.habit.icon,
        heading=HABIT_HEADING,
        encouragement=HABIT_ENCOURAGEMENT,
        actions=list(HABIT_ACTIONS),
    )


# -------------------------------------------------------------------
# System notification text
# -------------------------------------------------------------------
def task_notification(alert: TaskAlert) -> Tuple[str, str]:
    return f"Reminder: {alert.label}", alert.task.title


def habit_notification(alert: HabitAlert) -> Tuple[str, str]:
    return HABIT_HEADING, f'Just a quick reminder about "{alert.habit.title}"'
