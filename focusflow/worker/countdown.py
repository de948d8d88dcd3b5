# focusflow/worker/countdown.py

from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from focusflow.schemas.reminders import SnoozedTaskOut
from focusflow.schemas.tasks import Task

_PRIORITY_ORDER = {"urgent": 0, "important": 1, "regular": 2}


def snooze_fields(now: datetime, minutes: int) -> Dict[str, datetime]:
    """New due date and snooze end for a task pushed back ``minutes``."""
    until = now + timedelta(minutes=minutes)
    return {"due_date": until, "snoozed_until": until}


def format_countdown(snoozed_until: datetime, now: datetime) -> str:
    """Remaining snooze time as 'hh:mm:ss', '00:00:00' once it ran out."""
    remaining = int((snoozed_until - now).total_seconds())
    if remaining <= 0:
        return "00:00:00"
    hours, rest = divmod(remaining, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def actionable_tasks(tasks: Iterable[Task], now: datetime) -> List[Task]:
    pending = [t for t in tasks if not t.completed and not t.is_snoozed(now)]
    return sorted(pending, key=lambda t: (_PRIORITY_ORDER[t.priority], t.due_date))


def snoozed_tasks(tasks: Iterable[Task], now: datetime) -> List[SnoozedTaskOut]:
    return [
        SnoozedTaskOut(
            id=t.id,
            title=t.title,
            snoozed_until=t.snoozed_until.isoformat(),
            countdown=format_countdown(t.snoozed_until, now),
        )
        for t in tasks
        if t.is_snoozed(now)
    ]
