# focusflow/core/config.py

import os

from dotenv import load_dotenv

from focusflow.core.logger import logger

load_dotenv()


def _parse_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on", "y")


def _parse_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, falling back to {default}")
        return default
    if value <= 0:
        logger.warning(f"{name}={raw!r} must be positive, falling back to {default}")
        return default
    return value


# -------------------------------------------------------------------
# Supabase / auth
# -------------------------------------------------------------------
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_AUD = os.getenv("SUPABASE_AUD", "authenticated")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "")
ALLOW_DEV_HEADER = _parse_bool("ALLOW_DEV_HEADER", False)

# Owner of the tracker the engine watches
REMINDER_USER_ID = os.getenv("REMINDER_USER_ID", "")

# -------------------------------------------------------------------
# Engine
# -------------------------------------------------------------------
TASK_POLL_SECONDS = _parse_float("TASK_POLL_SECONDS", 5.0)
HABIT_POLL_SECONDS = _parse_float("HABIT_POLL_SECONDS", 60.0)
STORE_REFRESH_SECONDS = _parse_float("STORE_REFRESH_SECONDS", 30.0)

# -------------------------------------------------------------------
# WhatsApp (system notification channel)
# -------------------------------------------------------------------
META_WA_TOKEN = os.getenv("META_WA_TOKEN", "")
META_WA_PHONE_ID = os.getenv("META_WA_PHONE_ID", "")

# -------------------------------------------------------------------
# Logging / HTTP
# -------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_CONSOLE_LEVEL = os.getenv("LOG_CONSOLE_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/focusflow.log")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
