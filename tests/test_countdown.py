from datetime import timedelta

from focusflow.worker.countdown import actionable_tasks, format_countdown, snooze_fields, snoozed_tasks


def test_countdown_format_and_ticking(clock):
    until = clock() + timedelta(milliseconds=3661000)
    assert format_countdown(until, clock()) == "01:01:01"
    clock.advance(seconds=1)
    assert format_countdown(until, clock()) == "01:01:00"
    clock.advance(seconds=60)
    assert format_countdown(until, clock()) == "01:00:00"


def test_countdown_floors_at_zero(clock):
    until = clock() + timedelta(seconds=2)
    clock.advance(seconds=2)
    assert format_countdown(until, clock()) == "00:00:00"
    clock.advance(hours=3)
    assert format_countdown(until, clock()) == "00:00:00"


def test_countdown_keeps_hours_past_a_day(clock):
    until = clock() + timedelta(hours=25, minutes=2, seconds=3)
    assert format_countdown(until, clock()) == "25:02:03"


def test_snooze_fields(clock):
    fields = snooze_fields(clock(), 10)
    assert fields["due_date"] == clock() + timedelta(minutes=10)
    assert fields["snoozed_until"] == fields["due_date"]


def test_snoozed_tasks_leave_actionable_list(clock, make_task):
    snoozed = make_task("s", snoozed_until=clock() + timedelta(minutes=5))
    expired = make_task("e", snoozed_until=clock() - timedelta(minutes=5), priority="important")
    urgent = make_task("u", priority="urgent", due_in=timedelta(hours=5))
    done = make_task("d", completed=True)

    assert [t.id for t in actionable_tasks([snoozed, expired, urgent, done], clock())] == ["u", "e"]

    rows = snoozed_tasks([snoozed, expired, urgent, done], clock())
    assert [(r.id, r.countdown) for r in rows] == [("s", "00:05:00")]
