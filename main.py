# main.py

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from focusflow.core import config
from focusflow.core.auth import require_owner
from focusflow.core.db import get_engine
from focusflow.core.logger import logger, setup_logging
from focusflow.core.supabase_client import get_service_supabase
from focusflow.integrations.supabase_store import SupabaseTrackerStore
from focusflow.worker.reminder_loop import ReminderEngine

# Routers
from focusflow.api.routers import alerts, dashboard, settings as rm_settings


def build_store() -> SupabaseTrackerStore:
    if not config.REMINDER_USER_ID:
        raise RuntimeError("REMINDER_USER_ID missing in .env (owner of the tracker to watch)")
    return SupabaseTrackerStore(
        get_service_supabase(),
        config.REMINDER_USER_ID,
        refresh_seconds=config.STORE_REFRESH_SECONDS,
    )


def build_engine(store: SupabaseTrackerStore) -> ReminderEngine:
    return ReminderEngine(
        tasks=store.list_tasks,
        habits=store.list_habits,
        complete_task=store.complete_task,
        snooze_task=store.snooze_task,
        toggle_habit=store.toggle_habit,
        settings=store.load_profile(),
        clock=store.clock,
        task_poll_seconds=config.TASK_POLL_SECONDS,
        habit_poll_seconds=config.HABIT_POLL_SECONDS,
    )


def create_app(
    store: Optional[SupabaseTrackerStore] = None,
    engine: Optional[ReminderEngine] = None,
    start_engine: bool = True,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(log_level=config.LOG_LEVEL, log_file=config.LOG_FILE, console_level=config.LOG_CONSOLE_LEVEL)
        if app.state.store is None:
            app.state.store = build_store()
        if app.state.engine is None:
            app.state.engine = build_engine(app.state.store)
        if start_engine:
            app.state.engine.start()
        try:
            yield
        finally:
            logger.info("Shutting down reminder engine...")
            app.state.engine.stop()

    app = FastAPI(
        title="FocusFlow Reminders",
        description="""
Reminder engine for a personal task and habit tracker backed by Supabase.

**What it does**
- **Task reminders:** every few seconds, checks each open task against its reminder rules (now, 15 minutes, 1 hour, custom, day before) and surfaces at most one alert at a time.
- **Habit reminders:** once a minute, reminds each habit not yet done today at its slot's clock time (morning/noon/evening).
- **Alert actions:** complete, snooze (5/10/15/30 or custom minutes) or dismiss; habits can be completed or dismissed.
- **Dashboard:** actionable tasks and live countdowns for snoozed ones.
- **Settings:** habit reminder times, daily planning reminder and notification opt-in (WhatsApp).
""",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(alerts.router,       prefix="/api", dependencies=[Depends(require_owner)])
    app.include_router(dashboard.router,    prefix="/api", dependencies=[Depends(require_owner)])
    app.include_router(rm_settings.router,  prefix="/api", dependencies=[Depends(require_owner)])

    @app.get("/")
    def read_root():
        return {"message": "Welcome to FocusFlow Reminders"}

    @app.get("/health/reminders", tags=["Health"])
    def health_reminders(engine: ReminderEngine = Depends(get_engine)):
        return {"status": "ok", "engine": engine.status()}

    return app


app = create_app()
