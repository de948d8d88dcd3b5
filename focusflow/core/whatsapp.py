# focusflow/core/whatsapp.py

from typing import Any, Dict

import httpx

from focusflow.core import config


class WhatsAppError(Exception):
    pass


def _graph_url(path: str) -> str:
    # v19.0 stable; bump if the Meta app uses another version
    return f"https://graph.facebook.com/v19.0/{path.lstrip('/')}"


def send_text(to_e164: str, body_text: str, timeout: float = 10) -> Dict[str, Any]:
    if not config.META_WA_TOKEN or not config.META_WA_PHONE_ID:
        raise WhatsAppError("META_WA_TOKEN/META_WA_PHONE_ID missing in .env")

    payload = {
        "messaging_product": "whatsapp",
        "to": to_e164,
        "type": "text",
        "text": {"body": body_text},
    }
    headers = {"Authorization": f"Bearer {config.META_WA_TOKEN}"}

    try:
        with httpx.Client(timeout=timeout) as client:
            r = client.post(_graph_url(f"{config.META_WA_PHONE_ID}/messages"), json=payload, headers=headers)
    except httpx.HTTPError as e:
        raise WhatsAppError(f"WA transport error: {e}") from e
    try:
        data = r.json()
    except ValueError:
        data = {"text": r.text}
    if r.status_code >= 300:
        raise WhatsAppError(f"WA error {r.status_code}: {data}")
    return data
