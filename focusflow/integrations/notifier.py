# focusflow/integrations/notifier.py
"""
System-level notifications raised next to the in-app alert.

Delivery is best effort: without permission nothing is sent, and a failed
send is only logged. It never holds up the alert itself.
"""

from typing import Callable, Dict, Optional

from focusflow.core.logger import logger
from focusflow.core.whatsapp import WhatsAppError, send_text
from focusflow.schemas.settings import NotificationSettings


class Notifier:
    enabled: bool = False

    def notify(self, title: str, body: str) -> None:
        raise NotImplementedError


class NullNotifier(Notifier):
    def notify(self, title: str, body: str) -> None:
        return None


class WhatsAppNotifier(Notifier):
    def __init__(self, settings: NotificationSettings, send: Optional[Callable[[str, str], Dict]] = None):
        self.settings = settings
        self._send = send or send_text

    @property
    def enabled(self) -> bool:
        return self.settings.permitted

    def notify(self, title: str, body: str) -> None:
        self._send(self.settings.phone, f"{title}\n{body}")


def build_notifier(settings: NotificationSettings) -> Notifier:
    if not settings.permitted:
        return NullNotifier()
    return WhatsAppNotifier(settings)


def notify_best_effort(notifier: Notifier, title: str, body: str) -> bool:
    if not notifier.enabled:
        return False
    try:
        notifier.notify(title, body)
        return True
    except WhatsAppError as e:
        logger.warning(f"[notifier] could not deliver {title!r}: {e}")
        return False
    except Exception as e:
        logger.opt(exception=e).warning(f"[notifier] unexpected failure delivering {title!r}")
        return False
