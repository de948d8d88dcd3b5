# focusflow/worker/reminder_loop.py
"""
Reminder engine: two pollers over the tracker's live task and habit lists.

Every tick re-reads the lists, looks for the first rule that should fire and
has not fired in its cycle, and opens it as the single active alert of its
kind. Tasks are checked every few seconds, habits once a minute. Fired state
lives in memory only and starts empty on every (re)start.
"""

import threading
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence

from focusflow.core.logger import logger
from focusflow.integrations.notifier import Notifier, NullNotifier, build_notifier, notify_best_effort
from focusflow.schemas.habits import Habit
from focusflow.schemas.reminders import HabitAlert, TaskAlert
from focusflow.schemas.settings import HabitReminderTimes, ProfileSettings
from focusflow.schemas.tasks import Task
from focusflow.utils import now_local, parse_hhmm, today_iso
from focusflow.worker.alerts import (
    DAILY_PLAN_BODY,
    DAILY_PLAN_TITLE,
    build_task_alert,
    habit_notification,
    task_notification,
)
from focusflow.worker.dispatcher import CompleteTask, HabitAlertActions, SnoozeTask, TaskAlertActions, ToggleHabit
from focusflow.worker.gate import PresentationGate
from focusflow.worker.ledger import FiredRuleLedger
from focusflow.worker.poller import ClockPoller
from focusflow.worker.rules import find_habit_trigger, find_task_trigger

Clock = Callable[[], datetime]

DEFAULT_TASK_POLL_SECONDS = 5.0
DEFAULT_HABIT_POLL_SECONDS = 60.0


class TaskReminderScheduler:
    def __init__(
        self,
        source: Callable[[], Sequence[Task]],
        notifier: Optional[Notifier] = None,
        clock: Clock = now_local,
    ):
        self.source = source
        self.notifier = notifier or NullNotifier()
        self.clock = clock
        self.ledger = FiredRuleLedger()
        self.gate: PresentationGate[TaskAlert] = PresentationGate("task")

    def tick(self, now: Optional[datetime] = None) -> Optional[TaskAlert]:
        if self.gate.is_open:
            return None
        now = now or self.clock()
        trigger = find_task_trigger(self.source(), now, self.ledger)
        if trigger is None:
            return None

        self.ledger.mark(trigger.key)
        alert = build_task_alert(trigger.task, trigger.rule, trigger.severity)
        self.gate.open(alert)
        logger.info(f"[task-reminders] {trigger.rule} task={trigger.task.id} severity={trigger.severity}")
        notify_best_effort(self.notifier, *task_notification(alert))
        return alert

    def reset(self) -> None:
        self.ledger.clear()
        self.gate.close()


class HabitReminderScheduler:
    def __init__(
        self,
        source: Callable[[], Sequence[Habit]],
        times: Optional[HabitReminderTimes] = None,
        notifier: Optional[Notifier] = None,
        clock: Clock = now_local,
        daily_reminder_time: Optional[str] = None,
    ):
        self.source = source
        self.times = times or HabitReminderTimes()
        self.notifier = notifier or NullNotifier()
        self.clock = clock
        self.daily_reminder_time = daily_reminder_time
        self.ledger = FiredRuleLedger()
        self.gate: PresentationGate[HabitAlert] = PresentationGate("habit")

    def set_times(self, times: HabitReminderTimes) -> None:
        self.times = times

    def tick(self, now: Optional[datetime] = None) -> Optional[HabitAlert]:
        now = now or self.clock()
        self.check_daily_plan(now)
        if self.gate.is_open:
            return None

        trigger = find_habit_trigger(self.source(), now, self.times, self.ledger)
        if trigger is None:
            return None

        self.ledger.mark(trigger.key)
        alert = HabitAlert(habit=trigger.habit, day=trigger.day)
        self.gate.open(alert)
        logger.info(f"[habit-reminders] habit={trigger.habit.id} slot={trigger.habit.time_of_day}")
        notify_best_effort(self.notifier, *habit_notification(alert))
        return alert

    def check_daily_plan(self, now: datetime) -> bool:
        """Once-a-day 'plan your day' notification; no in-app alert."""
        if not self.daily_reminder_time or not self.notifier.enabled:
            return False
        if (now.hour, now.minute) != parse_hhmm(self.daily_reminder_time):
            return False
        key = ("daily-plan", "daily", today_iso(now))
        if self.ledger.has(key):
            return False
        self.ledger.mark(key)
        logger.info("[habit-reminders] daily planning reminder")
        return notify_best_effort(self.notifier, DAILY_PLAN_TITLE, DAILY_PLAN_BODY)

    def reset(self) -> None:
        self.ledger.clear()
        self.gate.close()


class ReminderEngine:
    """Both schedulers, their pollers and their action handlers.

    Scheduler ticks (poller threads) and alert actions (HTTP threads) share
    one re-entrant lock, so the gates and the custom snooze state only ever
    change under it.
    """

    def __init__(
        self,
        tasks: Callable[[], Sequence[Task]],
        habits: Callable[[], Sequence[Habit]],
        complete_task: CompleteTask,
        snooze_task: SnoozeTask,
        toggle_habit: ToggleHabit,
        settings: Optional[ProfileSettings] = None,
        notifier: Optional[Notifier] = None,
        clock: Clock = now_local,
        task_poll_seconds: float = DEFAULT_TASK_POLL_SECONDS,
        habit_poll_seconds: float = DEFAULT_HABIT_POLL_SECONDS,
    ):
        settings = settings or ProfileSettings()
        notifier = notifier or build_notifier(settings.notifications)
        self.lock = threading.RLock()
        self._active = threading.Event()

        self.task_scheduler = TaskReminderScheduler(tasks, notifier=notifier, clock=clock)
        self.habit_scheduler = HabitReminderScheduler(
            habits,
            times=settings.habit_reminder_times,
            notifier=notifier,
            clock=clock,
            daily_reminder_time=settings.daily_reminder_time,
        )
        self.task_actions = TaskAlertActions(self.task_scheduler.gate, complete_task, snooze_task, lock=self.lock)
        self.habit_actions = HabitAlertActions(self.habit_scheduler.gate, toggle_habit, lock=self.lock)

        self.task_poller = ClockPoller(
            "task-reminders", task_poll_seconds, self._task_tick, is_busy=lambda: self.task_scheduler.gate.is_open
        )
        self.habit_poller = ClockPoller("habit-reminders", habit_poll_seconds, self._habit_tick)

    def _task_tick(self) -> None:
        with self.lock:
            # a tick already in flight when stop() ran must not reopen a gate
            if self._active.is_set():
                self.task_scheduler.tick()

    def _habit_tick(self) -> None:
        with self.lock:
            if self._active.is_set():
                self.habit_scheduler.tick()

    @property
    def running(self) -> bool:
        return self.task_poller.running or self.habit_poller.running

    def start(self) -> None:
        """Start both pollers from a clean slate; needs a running event loop."""
        self.stop()
        self._active.set()
        self.task_poller.start()
        self.habit_poller.start()
        logger.info("Reminder engine started")

    def stop(self) -> None:
        was_running = self.running
        self._active.clear()
        self.task_poller.stop()
        self.habit_poller.stop()
        with self.lock:
            self.task_actions.close()
            self.task_scheduler.reset()
            self.habit_scheduler.reset()
        if was_running:
            logger.info("Reminder engine stopped")

    def set_notifier(self, notifier: Notifier) -> None:
        with self.lock:
            self.task_scheduler.notifier = notifier
            self.habit_scheduler.notifier = notifier

    def apply_settings(self, settings: ProfileSettings, notifier: Optional[Notifier] = None) -> None:
        with self.lock:
            self.habit_scheduler.set_times(settings.habit_reminder_times)
            self.habit_scheduler.daily_reminder_time = settings.daily_reminder_time
            self.set_notifier(notifier or build_notifier(settings.notifications))
        logger.info("Reminder settings applied")

    def status(self) -> Dict[str, object]:
        return {
            "running": self.running,
            "task_poll_seconds": self.task_poller.interval,
            "habit_poll_seconds": self.habit_poller.interval,
            "task_ticks": self.task_poller.ticks,
            "habit_ticks": self.habit_poller.ticks,
            "task_ledger_size": len(self.task_scheduler.ledger),
            "habit_ledger_size": len(self.habit_scheduler.ledger),
            "task_alert_open": self.task_scheduler.gate.is_open,
            "habit_alert_open": self.habit_scheduler.gate.is_open,
        }
