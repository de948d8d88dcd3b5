from datetime import timedelta
from types import SimpleNamespace

import pytest

from focusflow.integrations.supabase_store import StoreError, SupabaseTrackerStore
from focusflow.schemas.settings import ProfileSettings
from focusflow.worker.alerts import URGENT_PREFIX, build_task_alert
from focusflow.worker.ledger import FiredRuleLedger
from focusflow.worker.rules import find_task_trigger


class FakeQuery:
    def __init__(self, sb, table):
        self.sb = sb
        self.table = table
        self.ops = []

    def __getattr__(self, name):
        def op(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self

        return op

    def execute(self):
        self.sb.executed.append((self.table, self.ops))
        if self.sb.fail:
            raise RuntimeError("connection refused")
        return SimpleNamespace(data=self.sb.rows.get(self.table, []))


class FakeSupabase:
    def __init__(self, rows=None):
        self.rows = rows or {}
        self.executed = []
        self.fail = False

    def table(self, name):
        return FakeQuery(self, name)

    def writes(self):
        return [
            (table, op, args)
            for table, ops in self.executed
            for op, args, _ in ops
            if op in ("update", "upsert")
        ]


@pytest.fixture
def sb(clock):
    return FakeSupabase({
        "tasks": [
            {
                "id": "t1",
                "title": "Essay",
                "due_date": (clock() + timedelta(hours=1)).isoformat(),
                "completed": False,
                "reminders": {"hour_before": True, "custom": {"value": "x"}},
                "snoozed_until": None,
            }
        ],
        "habits": [{"id": "h1", "title": "Run", "time_of_day": "evening", "completed_days": []}],
    })


@pytest.fixture
def tracker(sb, clock):
    return SupabaseTrackerStore(sb, "owner", refresh_seconds=30, clock=clock)


def test_reads_are_cached(tracker, sb):
    tasks = tracker.list_tasks()
    assert tasks[0].reminders.hour_before is True
    assert tasks[0].reminders.custom is None
    tracker.list_habits()
    tracker.list_tasks()
    # one refresh reads both tables
    assert [t for t, _ in sb.executed] == ["tasks", "habits"]


def test_reads_filter_by_owner(tracker, sb):
    tracker.list_tasks()
    _, ops = sb.executed[0]
    assert ("eq", ("user_id", "owner"), {}) in ops


def test_refresh_failure_raises_store_error(tracker, sb):
    sb.fail = True
    with pytest.raises(StoreError):
        tracker.list_tasks()


def test_snooze_writes_and_updates_cache(tracker, sb, clock):
    tracker.list_tasks()
    updated = tracker.snooze_task("t1", 15)
    expected = clock() + timedelta(minutes=15)
    assert updated.due_date == expected
    assert updated.snoozed_until == expected
    assert sb.writes() == [
        ("tasks", "update", ({"due_date": expected.isoformat(), "snoozed_until": expected.isoformat()},))
    ]
    assert tracker.list_tasks()[0].snoozed_until == expected


def test_complete_clears_snooze(tracker, sb, clock):
    tracker.snooze_task("t1", 5)
    done = tracker.complete_task("t1")
    assert done.completed is True
    assert done.snoozed_until is None
    assert sb.writes()[-1] == ("tasks", "update", ({"completed": True, "snoozed_until": None},))


def test_failed_write_leaves_cache_alone(tracker, sb):
    tracker.list_tasks()
    sb.fail = True
    with pytest.raises(StoreError):
        tracker.complete_task("t1")
    assert tracker.list_tasks()[0].completed is False


def test_unknown_task_is_store_error(tracker):
    with pytest.raises(StoreError):
        tracker.complete_task("nope")


def test_toggle_habit_today(tracker, sb):
    assert tracker.toggle_habit("h1").completed_days == ["2025-03-10"]
    assert tracker.toggle_habit("h1").completed_days == []


def test_missing_profile_uses_defaults(tracker):
    profile = tracker.load_profile()
    assert profile.habit_reminder_times.morning == "08:00"
    assert profile.notifications.permitted is False


def test_profile_row_is_mapped(sb, tracker):
    sb.rows["profiles"] = [{
        "phone": "526643713366",
        "notify_enabled": True,
        "habit_reminder_times": {"evening": "21:15"},
        "daily_reminder_time": None,
    }]
    profile = tracker.load_profile()
    assert profile.notifications.permitted is True
    assert profile.habit_reminder_times.evening == "21:15"
    assert profile.habit_reminder_times.morning == "08:00"


def test_save_profile_upserts(tracker, sb):
    tracker.save_profile(ProfileSettings(daily_reminder_time="07:00"))
    table, ops = sb.executed[-1]
    assert table == "profiles"
    name, args, kwargs = ops[0]
    assert name == "upsert"
    assert args[0]["id"] == "owner"
    assert args[0]["daily_reminder_time"] == "07:00"
    assert kwargs == {"on_conflict": "id"}


def test_rows_written_by_tracker_ui(sb, tracker, clock):
    sb.rows["tasks"] = [
        {
            "id": "ui-1",
            "title": "Submit thesis",
            "priority": "URGENT",
            "category": "לימודים",
            "due_date": (clock() + timedelta(minutes=15)).isoformat(),
            "completed": False,
            "reminders": {"dayBefore": False, "hourBefore": True, "fifteenMinBefore": True, "custom": None},
            "energy_level": "high",
            "snoozed_until": None,
        },
        # unusable row: no due date
        {"id": "ui-2", "title": "Broken", "priority": "REGULAR", "due_date": None},
    ]
    sb.rows["habits"] = [{"id": "h9", "title": "Water", "icon": None, "time_of_day": "noon", "completed_days": None}]

    tasks = tracker.list_tasks()
    assert [t.id for t in tasks] == ["ui-1"]
    task = tasks[0]
    assert task.priority == "urgent"
    assert task.category == "study"
    assert task.reminders.fifteen_min_before is True
    assert task.reminders.hour_before is True
    assert tracker.list_habits()[0].completed_days == []

    trigger = find_task_trigger(tasks, clock(), FiredRuleLedger())
    assert trigger.rule == "fifteenMin"
    alert = build_task_alert(trigger.task, trigger.rule, trigger.severity)
    assert alert.advice.startswith(URGENT_PREFIX)


def test_complete_never_reopens_a_task(tracker, sb):
    tracker.list_tasks()
    # finished in the tracker UI after the cache was filled
    sb.rows["tasks"][0]["completed"] = True

    tracker.complete_task("t1")
    tracker.complete_task("t1")
    assert [args for _, op, args in sb.writes()] == [({"completed": True, "snoozed_until": None},)] * 2
    assert tracker.list_tasks()[0].completed is True


def test_invalid_profile_row_is_store_error(sb, tracker):
    sb.rows["profiles"] = [{"phone": None, "notify_enabled": False, "habit_reminder_times": {"noon": "99:99"}}]
    with pytest.raises(StoreError):
        tracker.load_profile()
