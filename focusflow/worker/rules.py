# focusflow/worker/rules.py
"""
Trigger rules for task and habit reminders.

Task rules are half-open 5-minute bands just before each nominal offset, so
a poll every few seconds cannot step over them. They are checked in a fixed
order and the first one that matches and has not fired for the current due
instant wins; the scan stops at the first (entity, rule) pair found.

Habit rules compare the local clock to the slot's configured time at minute
precision, once per calendar day.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from focusflow.schemas.habits import Habit
from focusflow.schemas.reminders import RuleType, Severity
from focusflow.schemas.settings import HabitReminderTimes
from focusflow.schemas.tasks import Task
from focusflow.utils import round_half_up, today_iso
from focusflow.worker.ledger import FiredRuleLedger, LedgerKey

WINDOW_MINUTES = 5
FIFTEEN_MINUTES = 15
ONE_HOUR = 60
ONE_DAY = 24 * 60


@dataclass(frozen=True)
class TaskTrigger:
    task: Task
    rule: RuleType
    severity: Severity
    key: LedgerKey


@dataclass(frozen=True)
class HabitTrigger:
    habit: Habit
    day: str
    key: LedgerKey


def diff_minutes(due: datetime, now: datetime) -> int:
    return round_half_up((due - now).total_seconds() / 60)


def _in_window(diff: int, offset: int, width: int = WINDOW_MINUTES) -> bool:
    return offset - width < diff <= offset


def task_rule_candidates(task: Task, diff: int) -> List[Tuple[RuleType, Severity]]:
    """Rules whose window contains ``diff``, highest priority first."""
    cfg = task.reminders
    out: List[Tuple[RuleType, Severity]] = []
    if -WINDOW_MINUTES < diff <= 0:
        out.append(("now", "danger"))
    if cfg.fifteen_min_before and _in_window(diff, FIFTEEN_MINUTES):
        out.append(("fifteenMin", "danger"))
    if cfg.hour_before and _in_window(diff, ONE_HOUR):
        out.append(("hourBefore", "warning"))
    if cfg.custom is not None and _in_window(diff, cfg.custom.minutes):
        out.append(("custom", "warning"))
    # the day-before band is twice as wide as the others
    if cfg.day_before and _in_window(diff, ONE_DAY, width=2 * WINDOW_MINUTES):
        out.append(("dayBefore", "info"))
    return out


def task_key(task: Task, rule: RuleType, now: datetime) -> LedgerKey:
    return (task.id, rule, task.scheduling_instant(now).isoformat())


def find_task_trigger(tasks: Iterable[Task], now: datetime, ledger: FiredRuleLedger) -> Optional[TaskTrigger]:
    for task in tasks:
        if task.completed:
            continue
        diff = diff_minutes(task.scheduling_instant(now), now)
        for rule, severity in task_rule_candidates(task, diff):
            key = task_key(task, rule, now)
            if not ledger.has(key):
                return TaskTrigger(task=task, rule=rule, severity=severity, key=key)
    return None


def habit_key(habit: Habit, day: str) -> LedgerKey:
    return (habit.id, "habit", day)


def find_habit_trigger(
    habits: Iterable[Habit],
    now: datetime,
    times: HabitReminderTimes,
    ledger: FiredRuleLedger,
) -> Optional[HabitTrigger]:
    day = today_iso(now)
    for habit in habits:
        if habit.is_done_on(day):
            continue
        if (now.hour, now.minute) != times.clock_for(habit.time_of_day):
            continue
        key = habit_key(habit, day)
        if not ledger.has(key):
            return HabitTrigger(habit=habit, day=day, key=key)
    return None
