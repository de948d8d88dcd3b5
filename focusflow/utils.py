import math
from datetime import date, datetime

__all__ = ["now_local", "as_local", "today_iso", "parse_hhmm", "round_half_up"]


def now_local() -> datetime:
    """Current wall-clock time as an aware datetime in the host timezone."""
    return datetime.now().astimezone()


def as_local(dt: datetime) -> datetime:
    # naive values are taken as host-local wall time
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def today_iso(now: datetime) -> str:
    """Calendar day of ``now`` (in its own timezone) as 'YYYY-MM-DD'."""
    return date(now.year, now.month, now.day).isoformat()


def parse_hhmm(value: str) -> tuple[int, int]:
    """'08:05' -> (8, 5). Raises ValueError on anything else."""
    parts = str(value).strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"expected HH:MM, got {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"time out of range: {value!r}")
    return hour, minute


def round_half_up(x: float) -> int:
    # halves go toward +inf, not to even
    return math.floor(x + 0.5)
