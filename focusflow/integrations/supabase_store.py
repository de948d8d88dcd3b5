# focusflow/integrations/supabase_store.py
"""
Tracker store backed by Supabase tables.

Owns the canonical task/habit lists the reminder engine watches and performs
the writes its alert actions ask for. Reads are cached for a short while so
a 5-second poll does not hit the database every time; every successful
write updates the cache right away.

Rows are the ones the tracker UI writes. A row that does not validate is
logged and left out; it never hides the rest of the list.

The engine polls from a worker thread while HTTP handlers run in the
threadpool, so cache reads and writes go through one lock.

Tables used: ``tasks``, ``habits``, ``profiles``.
"""

import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from supabase import Client

from focusflow.core.logger import logger
from focusflow.schemas.habits import Habit
from focusflow.schemas.settings import ProfileSettings
from focusflow.schemas.tasks import Task
from focusflow.utils import now_local, today_iso
from focusflow.worker.countdown import snooze_fields

TASK_COLUMNS = "id,title,description,priority,category,due_date,completed,reminders,energy_level,snoozed_until"
HABIT_COLUMNS = "id,title,icon,time_of_day,completed_days"
PROFILE_COLUMNS = "phone,notify_enabled,habit_reminder_times,daily_reminder_time"

M = TypeVar("M", bound=BaseModel)


class StoreError(Exception):
    pass


def _parse_rows(model: Type[M], rows: Iterable[Dict[str, Any]], table: str) -> List[M]:
    out: List[M] = []
    for row in rows:
        try:
            out.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"[store] skipping {table} row {row.get('id')!r}: {e.error_count()} error(s)\n{e}")
    return out


class SupabaseTrackerStore:
    def __init__(
        self,
        sb: Client,
        user_id: str,
        refresh_seconds: float = 30.0,
        clock: Callable[[], datetime] = now_local,
    ):
        self.sb = sb
        self.user_id = user_id
        self.refresh_seconds = refresh_seconds
        self.clock = clock
        self._lock = threading.RLock()
        self._tasks: List[Task] = []
        self._habits: List[Habit] = []
        self._loaded_at: Optional[float] = None

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def _stale(self) -> bool:
        return self._loaded_at is None or time.monotonic() - self._loaded_at >= self.refresh_seconds

    def refresh(self) -> None:
        with self._lock:
            try:
                task_rows = (
                    self.sb.table("tasks")
                    .select(TASK_COLUMNS)
                    .eq("user_id", self.user_id)
                    .order("due_date", desc=False)
                    .execute()
                ).data or []
                habit_rows = (
                    self.sb.table("habits")
                    .select(HABIT_COLUMNS)
                    .eq("user_id", self.user_id)
                    .execute()
                ).data or []
            except Exception as e:
                logger.error(f"[store.refresh] {e}")
                raise StoreError(f"[store.refresh] {e}") from e

            self._tasks = _parse_rows(Task, task_rows, "tasks")
            self._habits = _parse_rows(Habit, habit_rows, "habits")
            self._loaded_at = time.monotonic()
            logger.debug(f"[store] loaded {len(self._tasks)} tasks, {len(self._habits)} habits")

    def list_tasks(self) -> List[Task]:
        with self._lock:
            if self._stale():
                self.refresh()
            return list(self._tasks)

    def list_habits(self) -> List[Habit]:
        with self._lock:
            if self._stale():
                self.refresh()
            return list(self._habits)

    def _find_task(self, task_id: str) -> Task:
        for t in self.list_tasks():
            if t.id == task_id:
                return t
        raise StoreError(f"Task not found: {task_id}")

    def _find_habit(self, habit_id: str) -> Habit:
        for h in self.list_habits():
            if h.id == habit_id:
                return h
        raise StoreError(f"Habit not found: {habit_id}")

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def _update(self, table: str, row_id: str, updates: Dict[str, Any], what: str) -> None:
        try:
            (
                self.sb.table(table)
                .update(updates)
                .eq("id", row_id)
                .eq("user_id", self.user_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"[store.{what}] {row_id}: {e}")
            raise StoreError(f"[store.{what}] {e}") from e

    def _replace_task(self, updated: Task) -> None:
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]

    def complete_task(self, task_id: str) -> Task:
        """Mark a task done and end its snooze.

        Always writes ``completed=True``: the cached row may be out of date,
        and a toggle would reopen a task already finished elsewhere.
        """
        with self._lock:
            task = self._find_task(task_id)
            fields = {"completed": True, "snoozed_until": None}
            self._update("tasks", task_id, fields, "complete_task")
            updated = task.model_copy(update=fields)
            self._replace_task(updated)
            return updated

    def snooze_task(self, task_id: str, minutes: int) -> Task:
        with self._lock:
            task = self._find_task(task_id)
            fields = snooze_fields(self.clock(), minutes)
            self._update(
                "tasks",
                task_id,
                {k: v.isoformat() for k, v in fields.items()},
                "snooze_task",
            )
            updated = task.model_copy(update=fields)
            self._replace_task(updated)
            return updated

    def toggle_habit(self, habit_id: str) -> Habit:
        with self._lock:
            habit = self._find_habit(habit_id)
            day = today_iso(self.clock())
            if habit.is_done_on(day):
                days = [d for d in habit.completed_days if d != day]
            else:
                days = [*habit.completed_days, day]
            self._update("habits", habit_id, {"completed_days": days}, "toggle_habit")
            updated = habit.model_copy(update={"completed_days": days})
            self._habits = [updated if h.id == habit_id else h for h in self._habits]
            return updated

    # -------------------------------------------------------------------
    # Profile settings
    # -------------------------------------------------------------------
    def load_profile(self) -> ProfileSettings:
        try:
            rows = (
                self.sb.table("profiles")
                .select(PROFILE_COLUMNS)
                .eq("id", self.user_id)
                .limit(1)
                .execute()
            ).data or []
        except Exception as e:
            logger.error(f"[store.load_profile] {e}")
            raise StoreError(f"[store.load_profile] {e}") from e
        if not rows:
            # profile not created yet
            return ProfileSettings()
        row = rows[0]
        try:
            return ProfileSettings.model_validate({
                "notifications": {"phone": row.get("phone"), "notify_enabled": bool(row.get("notify_enabled"))},
                "habit_reminder_times": row.get("habit_reminder_times"),
                "daily_reminder_time": row.get("daily_reminder_time"),
            })
        except ValidationError as e:
            raise StoreError(f"[store.load_profile] invalid profile row: {e}") from e

    def save_profile(self, settings: ProfileSettings) -> ProfileSettings:
        row = {
            "id": self.user_id,
            "phone": settings.notifications.phone,
            "notify_enabled": settings.notifications.notify_enabled,
            "habit_reminder_times": settings.habit_reminder_times.model_dump(),
            "daily_reminder_time": settings.daily_reminder_time,
        }
        try:
            # upsert creates the row if missing (RLS: id = auth.uid())
            self.sb.table("profiles").upsert(row, on_conflict="id").execute()
        except Exception as e:
            logger.error(f"[store.save_profile] {e}")
            raise StoreError(f"[store.save_profile] {e}") from e
        return settings
