# focusflow/api/routers/settings.py

from fastapi import APIRouter, Depends, HTTPException

from focusflow.core.db import get_engine, get_store
from focusflow.integrations.supabase_store import StoreError, SupabaseTrackerStore
from focusflow.schemas.settings import ProfileSettings
from focusflow.worker.reminder_loop import ReminderEngine

router = APIRouter(prefix="/settings", tags=["Configuration"])


@router.get("/reminders", response_model=ProfileSettings)
def get_reminder_settings(store: SupabaseTrackerStore = Depends(get_store)):
    try:
        return store.load_profile()
    except StoreError as e:
        raise HTTPException(status_code=502, detail=f"[settings.get] {e}")


@router.put("/reminders", response_model=ProfileSettings)
def set_reminder_settings(
    payload: ProfileSettings,
    store: SupabaseTrackerStore = Depends(get_store),
    engine: ReminderEngine = Depends(get_engine),
):
    try:
        saved = store.save_profile(payload)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=f"[settings.put] {e}")
    engine.apply_settings(saved)
    return saved
