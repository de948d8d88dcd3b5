from typing import List

from fastapi import APIRouter, Depends, HTTPException

from focusflow.core.db import get_store
from focusflow.integrations.supabase_store import StoreError, SupabaseTrackerStore
from focusflow.schemas.reminders import SnoozedTaskOut
from focusflow.schemas.tasks import Task
from focusflow.worker.countdown import actionable_tasks, snoozed_tasks

router = APIRouter(prefix="/dashboard", tags=["Dashboard Summary"])


def _tasks(store: SupabaseTrackerStore) -> List[Task]:
    try:
        return store.list_tasks()
    except StoreError as e:
        raise HTTPException(status_code=502, detail=f"[dashboard] {e}")


@router.get("/actionable", response_model=List[Task])
def dashboard_actionable(limit: int = 3, store: SupabaseTrackerStore = Depends(get_store)):
    """Incomplete tasks that are not snoozed, most urgent first."""
    return actionable_tasks(_tasks(store), store.clock())[:max(limit, 0)]


@router.get("/snoozed", response_model=List[SnoozedTaskOut])
def dashboard_snoozed(store: SupabaseTrackerStore = Depends(get_store)):
    """Snoozed tasks with their remaining time; clients re-poll every second."""
    return snoozed_tasks(_tasks(store), store.clock())
