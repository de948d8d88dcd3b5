# focusflow/core/db.py
from fastapi import HTTPException, Request, status

from focusflow.integrations.supabase_store import SupabaseTrackerStore
from focusflow.worker.reminder_loop import ReminderEngine


def get_store(request: Request) -> SupabaseTrackerStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Tracker store not ready")
    return store


def get_engine(request: Request) -> ReminderEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Reminder engine not ready")
    return engine
