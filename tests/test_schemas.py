from datetime import datetime

import pytest
from pydantic import ValidationError

from focusflow.schemas.settings import HabitReminderTimes, NotificationSettings, ProfileSettings
from focusflow.schemas.tasks import Task


def _task(**kwargs):
    data = {"id": "t1", "title": "Essay", "due_date": "2025-03-10T09:00:00+00:00"}
    data.update(kwargs)
    return Task.model_validate(data)


@pytest.mark.parametrize(
    "custom",
    [{"value": 0, "unit": "minutes"}, {"value": -3}, {"value": 10, "unit": "weeks"}, "soon", {"unit": "hours"}],
)
def test_malformed_custom_rule_is_dropped(custom):
    task = _task(reminders={"hour_before": True, "custom": custom})
    assert task.reminders.custom is None
    assert task.reminders.hour_before is True


def test_custom_rule_minutes():
    task = _task(reminders={"custom": {"value": 3, "unit": "hours"}})
    assert task.reminders.custom.minutes == 180


def test_null_reminders_become_defaults():
    task = _task(reminders=None)
    assert task.reminders.custom is None
    assert task.reminders.day_before is False


def test_naive_due_date_is_localized():
    task = _task(due_date="2025-03-10T09:00:00")
    assert task.due_date.tzinfo is not None
    assert task.due_date.replace(tzinfo=None) == datetime(2025, 3, 10, 9, 0)


def test_unknown_priority_rejected():
    with pytest.raises(ValidationError):
        _task(priority="whenever")


def test_habit_times_merge_over_defaults():
    assert HabitReminderTimes.model_validate(None).model_dump() == {
        "morning": "08:00",
        "noon": "13:00",
        "evening": "20:00",
    }
    partial = HabitReminderTimes.model_validate({"noon": "12:30", "evening": None})
    assert (partial.morning, partial.noon, partial.evening) == ("08:00", "12:30", "20:00")


@pytest.mark.parametrize("value", ["24:00", "08:60", "8", "ab:cd", "08:00:00"])
def test_habit_time_must_be_hhmm(value):
    with pytest.raises(ValidationError):
        HabitReminderTimes(morning=value)


def test_habit_time_is_zero_padded():
    assert HabitReminderTimes(morning="7:05").morning == "07:05"
    assert HabitReminderTimes().clock_for("evening") == (20, 0)


def test_daily_reminder_time_optional():
    assert ProfileSettings(daily_reminder_time="").daily_reminder_time is None
    assert ProfileSettings(daily_reminder_time="7:30").daily_reminder_time == "07:30"


def test_notification_permission_needs_phone_and_opt_in():
    assert NotificationSettings(phone="526643713366", notify_enabled=True).permitted is True
    assert NotificationSettings(phone=None, notify_enabled=True).permitted is False
    assert NotificationSettings(phone="526643713366").permitted is False


def test_tracker_ui_values_are_accepted():
    task = _task(
        priority="IMPORTANT",
        category="עבודה",
        energy_level="Low",
        completed=None,
        reminders={"dayBefore": True, "hourBefore": None, "fifteenMinBefore": False, "custom": {"value": 2, "unit": "hours"}},
    )
    assert task.priority == "important"
    assert task.category == "work"
    assert task.energy_level == "low"
    assert task.completed is False
    assert task.reminders.day_before is True
    assert task.reminders.hour_before is False
    assert task.reminders.custom.minutes == 120


def test_unknown_category_falls_back_to_personal():
    assert _task(category="גינה").category == "personal"
    assert _task(category=None).category == "personal"
    assert _task(category="Home").category == "home"
