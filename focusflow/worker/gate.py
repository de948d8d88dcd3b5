# focusflow/worker/gate.py

from typing import Generic, Optional, TypeVar

from focusflow.core.logger import logger

T = TypeVar("T")


class PresentationGate(Generic[T]):
    """Single slot for the alert currently shown to the user."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._current: Optional[T] = None

    @property
    def current(self) -> Optional[T]:
        return self._current

    @property
    def is_open(self) -> bool:
        return self._current is not None

    def open(self, alert: T) -> bool:
        if self._current is not None:
            logger.debug(f"[{self.kind}] alert already open, ignoring new one")
            return False
        self._current = alert
        return True

    def close(self) -> None:
        self._current = None
