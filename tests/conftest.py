from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from focusflow.schemas.habits import Habit
from focusflow.schemas.settings import ProfileSettings
from focusflow.schemas.tasks import Task
from focusflow.utils import today_iso
from focusflow.worker.countdown import snooze_fields
from focusflow.worker.reminder_loop import ReminderEngine

START = datetime(2025, 3, 10, 7, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


class FakeStore:
    """In-memory stand-in for the Supabase tracker store."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.tasks: List[Task] = []
        self.habits: List[Habit] = []
        self.profile = ProfileSettings()
        self.calls = []
        self.fail_next = None

    def _maybe_fail(self):
        if self.fail_next is not None:
            exc, self.fail_next = self.fail_next, None
            raise exc

    def list_tasks(self):
        return list(self.tasks)

    def list_habits(self):
        return list(self.habits)

    def complete_task(self, task_id):
        self.calls.append(("complete", task_id))
        self._maybe_fail()
        self.tasks = [
            t.model_copy(update={"completed": True, "snoozed_until": None}) if t.id == task_id else t
            for t in self.tasks
        ]

    def snooze_task(self, task_id, minutes):
        self.calls.append(("snooze", task_id, minutes))
        self._maybe_fail()
        fields = snooze_fields(self.clock(), minutes)
        self.tasks = [t.model_copy(update=fields) if t.id == task_id else t for t in self.tasks]

    def toggle_habit(self, habit_id):
        self.calls.append(("toggle", habit_id))
        self._maybe_fail()
        day = today_iso(self.clock())
        out = []
        for h in self.habits:
            if h.id == habit_id:
                days = [d for d in h.completed_days if d != day] if day in h.completed_days else [*h.completed_days, day]
                h = h.model_copy(update={"completed_days": days})
            out.append(h)
        self.habits = out

    def load_profile(self):
        return self.profile

    def save_profile(self, settings):
        self._maybe_fail()
        self.profile = settings
        return settings


class RecordingNotifier:
    def __init__(self, enabled=True):
        self.enabled = enabled
        self.sent = []

    def notify(self, title, body):
        self.sent.append((title, body))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_task(clock):
    def _make(task_id="t1", due_in: timedelta = timedelta(hours=3), **kwargs) -> Task:
        data = {"id": task_id, "title": f"Task {task_id}", "due_date": clock() + due_in}
        data.update(kwargs)
        return Task.model_validate(data)

    return _make


@pytest.fixture
def store(clock):
    return FakeStore(clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def engine(store, clock, notifier):
    return ReminderEngine(
        tasks=store.list_tasks,
        habits=store.list_habits,
        complete_task=store.complete_task,
        snooze_task=store.snooze_task,
        toggle_habit=store.toggle_habit,
        settings=store.profile,
        notifier=notifier,
        clock=clock,
    )
