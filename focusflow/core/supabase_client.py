# focusflow/core/supabase_client.py

from supabase import create_client, Client

from focusflow.core import config


def get_service_supabase() -> Client:
    """
    Client for the background engine.

    Uses the service role key when configured (the engine has no user JWT
    to satisfy RLS with); otherwise falls back to the anon key.
    """
    url = config.SUPABASE_URL
    key = config.SUPABASE_SERVICE_ROLE_KEY or config.SUPABASE_KEY

    if not url or not key:
        raise RuntimeError(
            "\n".join([
                "SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY/SUPABASE_KEY missing from the environment",
                f"SUPABASE_URL: {'<empty>' if not url else url}",
                f"SUPABASE key: {'<empty>' if not key else '<present>'}",
                "Export them or put them in a .env file at the project root.",
            ])
        )
    return create_client(url, key)
