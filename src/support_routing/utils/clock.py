"""Clock abstraction so coverage checks can be pinned in tests."""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def current_utc_hour(self) -> int: ...


class SystemClock:
    """Wall-clock UTC hour."""

    def current_utc_hour(self) -> int:
        return datetime.now(timezone.utc).hour

