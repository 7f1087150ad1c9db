from datetime import datetime, timezone
from typing import Optional


def is_past(deadline: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """True when a deadline is set and already passed. Naive values are UTC."""
    if deadline is None:
        return False
    now = now or datetime.now(timezone.utc)
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return deadline < now
