# focusflow/api/routers/alerts.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from focusflow.core.db import get_engine
from focusflow.integrations.supabase_store import StoreError
from focusflow.schemas.reminders import CustomSnoozeIn, HabitAlertView, SnoozeIn, TaskAlertView
from focusflow.worker.alerts import SNOOZE_PRESETS, render_habit_alert
from focusflow.worker.reminder_loop import ReminderEngine

router = APIRouter(prefix="/alerts", tags=["Alerts"])


def _no_alert(kind: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"No {kind} alert is open")


def _run(action, kind: str, what: str):
    try:
        done = action()
    except StoreError as e:
        # the alert is already closed at this point
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"[alerts.{what}] {e}")
    if not done:
        raise _no_alert(kind)
    return {"ok": True}


# ===========================
# Task alert
# ===========================
@router.get("/task", response_model=Optional[TaskAlertView])
def get_task_alert(engine: ReminderEngine = Depends(get_engine)):
    return engine.task_actions.view()


@router.post("/task/complete")
def complete_task_alert(engine: ReminderEngine = Depends(get_engine)):
    return _run(engine.task_actions.complete, "task", "complete")


@router.post("/task/snooze")
def snooze_task_alert(body: SnoozeIn, engine: ReminderEngine = Depends(get_engine)):
    if body.minutes not in SNOOZE_PRESETS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"minutes must be one of {list(SNOOZE_PRESETS)}; use /snooze/custom otherwise",
        )
    return _run(lambda: engine.task_actions.snooze(body.minutes), "task", "snooze")


@router.post("/task/custom-snooze/open", response_model=TaskAlertView)
def open_custom_snooze(engine: ReminderEngine = Depends(get_engine)):
    if not engine.task_actions.open_custom_snooze():
        raise _no_alert("task")
    return engine.task_actions.view()


@router.post("/task/custom-snooze/cancel", response_model=TaskAlertView)
def cancel_custom_snooze(engine: ReminderEngine = Depends(get_engine)):
    if not engine.task_actions.cancel_custom_snooze():
        raise _no_alert("task")
    return engine.task_actions.view()


@router.post("/task/snooze/custom")
def custom_snooze_task_alert(body: CustomSnoozeIn, engine: ReminderEngine = Depends(get_engine)):
    actions = engine.task_actions
    if not actions.gate.is_open:
        raise _no_alert("task")
    try:
        accepted = actions.submit_custom_snooze(body.value)
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"[alerts.custom_snooze] {e}")
    if not accepted:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Snooze minutes must be a positive whole number",
        )
    return {"ok": True}


@router.post("/task/dismiss")
def dismiss_task_alert(engine: ReminderEngine = Depends(get_engine)):
    return _run(engine.task_actions.dismiss, "task", "dismiss")


# ===========================
# Habit alert
# ===========================
@router.get("/habit", response_model=Optional[HabitAlertView])
def get_habit_alert(engine: ReminderEngine = Depends(get_engine)):
    alert = engine.habit_scheduler.gate.current
    return render_habit_alert(alert) if alert is not None else None


@router.post("/habit/complete")
def complete_habit_alert(engine: ReminderEngine = Depends(get_engine)):
    return _run(engine.habit_actions.complete, "habit", "habit_complete")


@router.post("/habit/dismiss")
def dismiss_habit_alert(engine: ReminderEngine = Depends(get_engine)):
    return _run(engine.habit_actions.dismiss, "habit", "habit_dismiss")
