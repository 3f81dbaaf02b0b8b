"""Clock and review deadline policy.

Both are plain callables so callers (and tests) can inject fixed values.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]
DeadlinePolicy = Callable[[datetime], datetime]

DEFAULT_DEADLINE_DAYS = 7


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the naive DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_after(days: int = DEFAULT_DEADLINE_DAYS) -> DeadlinePolicy:
    """Build a policy that places the deadline ``days`` after the action."""
    if days < 0:
        raise ValueError(f"Deadline days must be non-negative, got {days}")

    def deadline(now: datetime) -> datetime:
        return now + timedelta(days=days)

    return deadline
