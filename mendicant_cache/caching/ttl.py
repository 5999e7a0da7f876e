"""TTL policy shared by every tier."""

import time
from typing import Optional


def is_expired(updated_at: float, ttl: float, now: Optional[float] = None) -> bool:
    """True once more than ttl seconds have passed since updated_at."""
    if now is None:
        now = time.time()
    return now - updated_at > ttl
