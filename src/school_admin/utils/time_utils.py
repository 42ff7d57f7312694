from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_ms() -> int:
    return int(time.time() * 1000)


def days_ago(days: int, *, now: datetime | None = None) -> datetime:
    return (now or utc_now()) - timedelta(days=days)
