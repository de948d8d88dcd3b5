# focusflow/worker/dispatcher.py
"""
User actions on an open alert.

Each action forwards to the tracker store and closes the alert. The call is
fire-and-forget: the alert is closed whether or not the store succeeds, and
a store exception goes straight back to the caller.

Actions arrive on HTTP worker threads while the pollers tick on their own,
so every action holds the engine lock.
"""

import threading
from typing import Callable, Optional

from focusflow.core.logger import logger
from focusflow.schemas.reminders import HabitAlert, TaskAlert, TaskAlertView
from focusflow.worker.alerts import DEFAULT_CUSTOM_SNOOZE, render_task_alert
from focusflow.worker.gate import PresentationGate

CompleteTask = Callable[[str], object]
SnoozeTask = Callable[[str, int], object]
ToggleHabit = Callable[[str], object]


def parse_snooze_minutes(raw: Optional[str]) -> Optional[int]:
    """Positive whole minutes from free text, None when unusable."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    minutes = int(text)
    return minutes if minutes > 0 else None


class TaskAlertActions:
    def __init__(
        self,
        gate: PresentationGate[TaskAlert],
        complete_task: CompleteTask,
        snooze_task: SnoozeTask,
        lock: Optional[threading.RLock] = None,
    ):
        self.gate = gate
        self._complete_task = complete_task
        self._snooze_task = snooze_task
        self.lock = lock or threading.RLock()
        self.custom_snooze_open = False
        self.custom_snooze_value = DEFAULT_CUSTOM_SNOOZE

    def view(self) -> Optional[TaskAlertView]:
        with self.lock:
            alert = self.gate.current
            if alert is None:
                return None
            return render_task_alert(alert, self.custom_snooze_open, self.custom_snooze_value)

    def close(self) -> None:
        with self.lock:
            self.custom_snooze_open = False
            self.gate.close()

    def complete(self) -> bool:
        with self.lock:
            alert = self.gate.current
            if alert is None:
                return False
            logger.info(f"[task-alert] complete task={alert.task.id}")
            try:
                self._complete_task(alert.task.id)
            finally:
                self.close()
            return True

    def snooze(self, minutes: int) -> bool:
        with self.lock:
            alert = self.gate.current
            if alert is None or minutes <= 0:
                return False
            logger.info(f"[task-alert] snooze task={alert.task.id} minutes={minutes}")
            try:
                self._snooze_task(alert.task.id, minutes)
            finally:
                self.close()
            return True

    def open_custom_snooze(self) -> bool:
        with self.lock:
            if not self.gate.is_open:
                return False
            self.custom_snooze_open = True
            return True

    def cancel_custom_snooze(self) -> bool:
        with self.lock:
            if not self.gate.is_open:
                return False
            self.custom_snooze_open = False
            return True

    def submit_custom_snooze(self, raw: Optional[str] = None) -> bool:
        """Snooze by the typed amount; declines (returns False) on bad input."""
        with self.lock:
            if not self.gate.is_open:
                return False
            if raw is not None:
                self.custom_snooze_value = str(raw)
            minutes = parse_snooze_minutes(self.custom_snooze_value)
            if minutes is None:
                logger.debug(f"[task-alert] custom snooze declined: {self.custom_snooze_value!r}")
                return False
            return self.snooze(minutes)

    def dismiss(self) -> bool:
        with self.lock:
            if not self.gate.is_open:
                return False
            self.close()
            return True


class HabitAlertActions:
    def __init__(
        self,
        gate: PresentationGate[HabitAlert],
        toggle_habit: ToggleHabit,
        lock: Optional[threading.RLock] = None,
    ):
        self.gate = gate
        self._toggle_habit = toggle_habit
        self.lock = lock or threading.RLock()

    def complete(self) -> bool:
        with self.lock:
            alert = self.gate.current
            if alert is None:
                return False
            logger.info(f"[habit-alert] complete habit={alert.habit.id}")
            try:
                self._toggle_habit(alert.habit.id)
            finally:
                self.gate.close()
            return True

    def dismiss(self) -> bool:
        with self.lock:
            if not self.gate.is_open:
                return False
            self.gate.close()
            return True
